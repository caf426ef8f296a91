"""五子棋 WebSocket 客户端

功能:
- 连接服务端 (断线按策略自动重连)
- 连接打开时若本地有令牌则静默登录，并启动心跳
- 登录 / 注册 / 登出
- 房间管理 (列表 / 创建 / 加入 / 离开)
- 接收对局事件并驱动界面更新
- 落子 / 认输 / 返回大厅
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from game.config import ClientConfig, get_config
from game.context import ClientContext
from game.events import EventBus, ViewEventType
from game.exceptions import ClientError
from game.gomoku import GameStateMachine

from .credentials import CredentialStore, FileCredentialStore
from .dispatcher import Dispatcher
from .heartbeat import HeartbeatMonitor
from .lobby import LobbyClient
from .rooms import RoomDirectoryClient
from .session import SessionManager
from .transport import ConnectionState, ConstantDelayPolicy, ReconnectPolicy, TransportConnector, endpoint_for

if TYPE_CHECKING:
    from ui.protocol import Notifier

logger = logging.getLogger(__name__)


class GomokuClient:
    """五子棋客户端

    职责:
    1. 持有唯一的 ClientContext，并把它传给所有组件
    2. 组装 传输层 / 分发器 / 心跳 / 会话 / 房间 / 大厅 / 对局状态机
    3. 对外提供用户操作；本地校验失败时通过 Notifier 提示而不是抛出
    """

    def __init__(
        self,
        notifier: Notifier,
        *,
        url: str | None = None,
        config: ClientConfig | None = None,
        store: CredentialStore | None = None,
        policy: ReconnectPolicy | None = None,
        bus: EventBus | None = None,
    ):
        self.config = config or get_config()
        self.url = url or endpoint_for(self.config.origin, self.config.ws_path)
        self.notifier = notifier
        self.store: CredentialStore = store or FileCredentialStore(self.config.token_file)
        self.ctx = ClientContext()
        self.bus = bus or EventBus()

        self.transport = TransportConnector(
            self.url, policy or ConstantDelayPolicy(self.config.reconnect_delay)
        )
        self.dispatcher = Dispatcher(notifier, self.transport)
        self.heartbeat = HeartbeatMonitor(self.transport, self.config.heartbeat_interval)

        self.lobby = LobbyClient(self.ctx, self.dispatcher, self.bus,
                                 self.config.leaderboard_limit)
        self.sessions = SessionManager(self.ctx, self.dispatcher, self.bus, notifier,
                                       self.store, self.lobby)
        self.rooms = RoomDirectoryClient(self.ctx, self.dispatcher, self.bus)
        self.game = GameStateMachine(self.ctx, self.dispatcher, self.bus, notifier, self.lobby)

        for component in (self.lobby, self.sessions, self.rooms, self.game):
            component.bind(self.dispatcher)
        missing = self.dispatcher.missing_handlers()
        if missing:
            logger.warning("以下消息类型没有处理器: %s", sorted(m.name for m in missing))

        self.transport.on_open(self._on_open)
        self.transport.on_close(self._on_close)
        self.transport.on_message(self.dispatcher.dispatch)

    # ==================== 连接生命周期 ====================

    async def _on_open(self) -> None:
        self.bus.emit(ViewEventType.CONNECTION_CHANGED, state=ConnectionState.OPEN)
        self.heartbeat.start()
        await self.sessions.login_with_token()

    def _on_close(self) -> None:
        self.heartbeat.stop()
        logger.info("连接已关闭，等待重连")
        self.bus.emit(ViewEventType.CONNECTION_CHANGED, state=ConnectionState.CLOSED)

    async def run(self) -> None:
        """客户端主循环 (直到 close())"""
        await self.transport.run()

    async def close(self) -> None:
        self.heartbeat.stop()
        await self.transport.close()

    @property
    def is_connected(self) -> bool:
        return self.transport.is_open

    # ==================== 用户操作 ====================

    async def _guard(self, action: Callable[..., Any], *args: Any) -> bool:
        """执行用户操作；ClientError 交给 Notifier 提示"""
        try:
            result = action(*args)
            if inspect.isawaitable(result):
                result = await result
        except ClientError as e:
            logger.info("操作被拒绝: %s", e)
            self.notifier.blocking_message(e.message)
            return False
        return True if result is None else bool(result)

    async def login(self, username: str, password: str) -> bool:
        return await self._guard(self.sessions.login, username, password)

    async def register(self, username: str, password: str) -> bool:
        return await self._guard(self.sessions.register, username, password)

    async def logout(self) -> bool:
        return await self._guard(self.sessions.logout)

    async def refresh_rooms(self) -> bool:
        return await self._guard(self.rooms.refresh)

    async def create_room(self, name: str | None = None) -> bool:
        return await self._guard(self.rooms.create_room, name)

    async def join_room(self, room_id: Any) -> bool:
        return await self._guard(self.rooms.join_room, room_id)

    async def leave_room(self) -> bool:
        return await self._guard(self.rooms.leave_room)

    async def submit_move(self, x: int, y: int) -> bool:
        return await self._guard(self.game.submit_move, x, y)

    async def forfeit(self) -> bool:
        return await self._guard(self.game.forfeit)

    async def back_to_lobby(self) -> bool:
        return await self._guard(self.game.back_to_lobby)

    async def request_leaderboard(self) -> bool:
        return await self._guard(self.lobby.request_leaderboard)
