"""消息分发器

- 维护 类型码 → 处理器 的映射；未注册类型直接丢弃
- 入站 payload 先经 net.models 校验，再交给处理器
- 保留的 Error 类型 (9999) 直接通过 Notifier 阻塞提示 payload.message
- 处理器抛出的 ClientError (协议失败/本地校验) 同样交给 Notifier；
  其他异常只记录日志，不中断接收循环
- 出站消息统一经 send() 交给传输层
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PayloadValidationError

from game.exceptions import ClientError

from .models import ErrorPayload, validate_payload
from .protocol import IGNORED_TYPES, INBOUND_TYPES, ClientMsg, Envelope, MsgType

if TYPE_CHECKING:
    from ui.protocol import Notifier

    from .transport import TransportConnector

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Any]


class Dispatcher:
    """入站路由 + 出站转发"""

    def __init__(self, notifier: Notifier, transport: TransportConnector | None = None):
        self._notifier = notifier
        self._transport = transport
        self._handlers: dict[MsgType, Handler] = {}
        self.register(MsgType.ERROR, self._on_error)

    def attach(self, transport: TransportConnector) -> None:
        """绑定传输层 (出站)"""
        self._transport = transport

    # ==================== 处理器注册 ====================

    def register(self, msg_type: MsgType, handler: Handler) -> None:
        """注册消息处理回调；同类型重复注册时后者覆盖前者"""
        if msg_type in self._handlers and msg_type != MsgType.ERROR:
            logger.debug("覆盖已注册的处理器: %s", msg_type.name)
        self._handlers[msg_type] = handler

    def handler_for(self, msg_type: MsgType) -> Handler | None:
        return self._handlers.get(msg_type)

    def missing_handlers(self) -> set[MsgType]:
        """尚未注册处理器的入站类型 (不含有意忽略的类型)"""
        return set(INBOUND_TYPES - IGNORED_TYPES) - set(self._handlers)

    # ==================== 入站 ====================

    async def dispatch(self, raw: str | bytes) -> bool:
        """分发一条原始消息

        Returns:
            是否找到并执行了处理器
        """
        try:
            envelope = Envelope.from_json(raw)
        except (ValueError, KeyError, TypeError, RecursionError) as e:
            # json.JSONDecodeError 是 ValueError 的子类；未知类型码同样落在这里
            # 嵌套过深的帧在 json.loads 中抛出 RecursionError
            logger.debug("丢弃无法解析的消息: %s (%s)", _preview(raw), e)
            return False

        handler = self._handlers.get(envelope.type)
        if handler is None:
            logger.debug("未处理的消息类型: %s", envelope.type.name)
            return False

        try:
            payload = validate_payload(envelope.type, envelope.payload)
        except PayloadValidationError as e:
            logger.warning("%s payload 校验失败，丢弃: %s", envelope.type.name, e.errors())
            return False

        try:
            result = handler(payload)
            if inspect.isawaitable(result):
                await result
        except ClientError as e:
            logger.info("%s 处理结果: %s", envelope.type.name, e)
            self._notify(e.message)
        except Exception:
            logger.exception("消息分发异常: %s", envelope.type.name)
        return True

    def _on_error(self, payload: ErrorPayload) -> None:
        logger.warning("服务端错误: %s", payload.message)
        self._notify(payload.message)

    def _notify(self, text: str) -> None:
        # 不排队：新消息直接覆盖尚未处理的旧消息
        self._notifier.blocking_message(text)

    # ==================== 出站 ====================

    async def send(self, msg: ClientMsg) -> bool:
        """发送消息；未连接时静默丢弃"""
        if self._transport is None:
            logger.debug("未绑定传输层，丢弃 %s", msg.type.name)
            return False
        return await self._transport.send(msg)


def _preview(raw: str | bytes, limit: int = 120) -> str:
    text = raw.decode("utf-8", "replace") if isinstance(raw, bytes) else raw
    return text if len(text) <= limit else text[:limit] + "..."

