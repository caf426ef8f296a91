"""登录会话管理

- login / login_with_token : 发送登录请求 (账号密码或令牌)
- 登录成功: 持久化令牌，建立 Session，进入大厅并触发刷新 (战绩 → 房间列表 → 排行榜)
- 登录失败: 提示服务端消息；令牌登录失败时一并清除本地令牌
- register : 注册成功后回到登录入口，不自动登录
- logout   : 清除令牌与全部会话状态
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError as PayloadValidationError

from game.context import Session
from game.enums import Page
from game.events import ViewEventType
from game.exceptions import ProtocolError, ValidationError
from i18n import t

from .models import Credentials
from .protocol import ClientMsg, MsgType

if TYPE_CHECKING:
    from game.context import ClientContext
    from game.events import EventBus
    from ui.protocol import Notifier

    from .credentials import CredentialStore
    from .dispatcher import Dispatcher
    from .lobby import LobbyClient
    from .models import LoginResp, RegisterResp

logger = logging.getLogger(__name__)


def check_credentials(username: str, password: str) -> Credentials:
    """本地校验用户名/密码

    Raises:
        ValidationError: 用户名或密码为空
    """
    try:
        return Credentials(username=username, password=password)
    except PayloadValidationError as e:
        field = str(e.errors()[0]["loc"][0]) if e.errors() else None
        raise ValidationError(t("exc.credentials"), field=field) from e


class SessionManager:
    """客户端登录状态

    Args:
        ctx: 会话上下文
        dispatcher: 出站发送
        store: 令牌存储
        lobby: 登录成功后的刷新
    """

    def __init__(self, ctx: ClientContext, dispatcher: Dispatcher, bus: EventBus,
                 notifier: Notifier, store: CredentialStore, lobby: LobbyClient):
        self.ctx = ctx
        self._dispatcher = dispatcher
        self._bus = bus
        self._notifier = notifier
        self._store = store
        self._lobby = lobby
        # 最近一次登录是否使用令牌 (无请求关联 id，只能以最近一次请求为准)
        self._token_attempt = False

    def bind(self, dispatcher: Dispatcher) -> None:
        dispatcher.register(MsgType.LOGIN_RESP, self.on_login_resp)
        dispatcher.register(MsgType.REGISTER_RESP, self.on_register_resp)

    # ==================== 用户操作 ====================

    async def login(self, username: str, password: str) -> bool:
        creds = check_credentials(username, password)
        self._token_attempt = False
        logger.info("登录: %s", creds.username)
        return await self._dispatcher.send(ClientMsg.login(creds.username, creds.password))

    async def login_with_token(self, token: str | None = None) -> bool:
        """使用令牌静默登录；未提供时读取本地存储，没有令牌则不发送"""
        token = token or self._store.get()
        if not token:
            logger.debug("无本地令牌，跳过自动登录")
            return False
        self._token_attempt = True
        logger.info("使用令牌重新登录")
        return await self._dispatcher.send(ClientMsg.login_with_token(token))

    async def register(self, username: str, password: str) -> bool:
        creds = check_credentials(username, password)
        logger.info("注册: %s", creds.username)
        return await self._dispatcher.send(ClientMsg.register(creds.username, creds.password))

    def logout(self) -> None:
        user_id = self.ctx.user_id
        self._store.clear()
        self.ctx.clear()
        logger.info("已登出: %s", user_id)
        self._bus.emit(ViewEventType.LOGGED_OUT, user_id=user_id)
        self._bus.emit(ViewEventType.PAGE_CHANGED, page=Page.AUTH)

    # ==================== 服务端应答 ====================

    async def on_login_resp(self, payload: LoginResp) -> None:
        if not payload.ok:
            self.ctx.session = None
            if self._token_attempt:
                # 令牌失效，避免每次重连都用坏令牌登录
                self._store.clear()
                self._token_attempt = False
            logger.info("登录失败: code=%s message=%s", payload.code, payload.message)
            raise ProtocolError(payload.message, code=payload.code, msg_type=MsgType.LOGIN_RESP)

        self._store.set(payload.token)
        self.ctx.session = Session(user_id=payload.user_id, token=payload.token)
        self.ctx.page = Page.LOBBY
        logger.info("登录成功: user_id=%s", payload.user_id)
        self._bus.emit(ViewEventType.LOGGED_IN, session=self.ctx.session)
        self._bus.emit(ViewEventType.PAGE_CHANGED, page=Page.LOBBY)
        await self._lobby.refresh()

    def on_register_resp(self, payload: RegisterResp) -> None:
        if not payload.ok:
            raise ProtocolError(payload.message, code=payload.code, msg_type=MsgType.REGISTER_RESP)
        self.ctx.page = Page.AUTH
        logger.info("注册成功")
        self._notifier.blocking_message(t("notify.register_ok"))
        self._bus.emit(ViewEventType.REGISTERED)
        self._bus.emit(ViewEventType.PAGE_CHANGED, page=Page.AUTH)
