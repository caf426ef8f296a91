"""WebSocket 传输层

功能:
- 根据宿主页面来源 (http/https) 选择 ws/wss 端点
- 建立 / 关闭连接，收发 JSON 文本
- 未连接时发送的消息直接丢弃 (不排队、不重试)
- 每次断开 (包括连接失败) 都按重连策略等待后重连；默认固定 3 秒、无上限
- 传输层错误只记日志，不向用户提示
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import random
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol
from urllib.parse import urlparse

from websockets.asyncio.client import connect as ws_connect
from websockets.exceptions import ConnectionClosed, WebSocketException

from game.exceptions import TransportError

if TYPE_CHECKING:
    from websockets.asyncio.client import ClientConnection

    from .protocol import Envelope

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    CLOSED = "closed"
    CONNECTING = "connecting"
    OPEN = "open"


def endpoint_for(origin: str, path: str = "/ws") -> str:
    """https://host → wss://host/ws ；http://host → ws://host/ws"""
    parsed = urlparse(origin)
    scheme = "wss" if parsed.scheme == "https" else "ws"
    if not parsed.netloc:
        raise TransportError(f"invalid origin: {origin!r}")
    return f"{scheme}://{parsed.netloc}{path}"


# ==================== 重连策略 ====================


class ReconnectPolicy(Protocol):
    """重连策略接口

    next_delay 返回第 attempt 次 (从 1 开始) 重连前的等待秒数；
    返回 None 表示放弃重连。
    """

    def next_delay(self, attempt: int) -> float | None: ...


class ConstantDelayPolicy:
    """固定延迟、无上限、无抖动"""

    def __init__(self, delay: float = 3.0):
        self.delay = delay

    def next_delay(self, attempt: int) -> float | None:
        return self.delay


class ExponentialBackoffPolicy:
    """指数退避 (可选上限次数与抖动)"""

    def __init__(self, base: float = 1.0, factor: float = 2.0, max_delay: float = 60.0,
                 max_attempts: int | None = None, jitter: float = 0.0):
        self.base = base
        self.factor = factor
        self.max_delay = max_delay
        self.max_attempts = max_attempts
        self.jitter = jitter

    def next_delay(self, attempt: int) -> float | None:
        if self.max_attempts is not None and attempt > self.max_attempts:
            return None
        delay = min(self.base * self.factor ** (attempt - 1), self.max_delay)
        if self.jitter:
            delay += random.uniform(0, self.jitter)
        return delay


# ==================== 连接器 ====================

Hook = Callable[[], Any]
MessageHook = Callable[[str | bytes], Awaitable[Any]]


class TransportConnector:
    """WebSocket 连接器

    职责:
    1. 维护与服务端的 WebSocket 连接
    2. 收发消息 (入站交给 on_message 回调)
    3. 打开/关闭时通知上层 (on_open / on_close)
    4. 断线按策略自动重连
    """

    def __init__(self, url: str, policy: ReconnectPolicy | None = None,
                 sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep):
        self.url = url
        self.policy: ReconnectPolicy = policy or ConstantDelayPolicy()
        self._sleep = sleep

        self._ws: ClientConnection | None = None
        self._state = ConnectionState.CLOSED
        self._running = False
        # close() 期间可能仍有 connect() 挂起
        self._closed = False

        self._on_open: Hook | None = None
        self._on_close: Hook | None = None
        self._on_message: MessageHook | None = None

        # 统计: 已安排的重连次数及其延迟
        self.reconnect_delays: list[float] = []

    # ==================== 回调注册 ====================

    def on_open(self, handler: Hook) -> None:
        self._on_open = handler

    def on_close(self, handler: Hook) -> None:
        self._on_close = handler

    def on_message(self, handler: MessageHook) -> None:
        self._on_message = handler

    # ==================== 状态 ====================

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state == ConnectionState.OPEN and self._ws is not None

    # ==================== 连接管理 ====================

    async def connect(self) -> bool:
        """建立连接；成功后触发 on_open"""
        self._state = ConnectionState.CONNECTING
        self._closed = False
        try:
            ws = await ws_connect(self.url)
        except (OSError, WebSocketException, asyncio.TimeoutError) as e:
            logger.warning("连接 %s 失败: %s", self.url, e)
            self._ws = None
            self._state = ConnectionState.CLOSED
            return False

        if self._closed:
            logger.info("连接建立前已调用 close()，放弃连接 %s", self.url)
            await _close_quietly(ws)
            return False

        self._ws = ws
        self._state = ConnectionState.OPEN
        logger.info("已连接到 %s", self.url)
        await _call(self._on_open)
        return True

    async def close(self) -> None:
        """主动关闭；不会再触发重连"""
        self._running = False
        self._closed = True
        ws, self._ws = self._ws, None
        self._state = ConnectionState.CLOSED
        if ws is not None:
            await _close_quietly(ws)
        logger.info("已断开连接")

    # ==================== 消息收发 ====================

    async def send(self, msg: Envelope) -> bool:
        """发送消息；未连接时静默丢弃"""
        if not self.is_open:
            logger.debug("未连接，丢弃消息 %s", msg.type.name)
            return False
        try:
            await self._ws.send(msg.to_json())
            return True
        except (ConnectionClosed, OSError) as e:
            logger.warning("发送失败: %s", e)
            return False

    async def _receive_loop(self) -> None:
        """消息接收循环；连接关闭时返回"""
        try:
            async for raw in self._ws:
                if self._on_message is not None:
                    await self._on_message(raw)
        except ConnectionClosed as e:
            logger.info("连接关闭: code=%s reason=%s", e.rcvd.code if e.rcvd else None,
                        e.rcvd.reason if e.rcvd else "")
        except (OSError, WebSocketException) as e:
            logger.warning("接收循环中断: %s", e)

    async def _handle_close(self) -> None:
        self._ws = None
        self._state = ConnectionState.CLOSED
        await _call(self._on_close)

    # ==================== 主循环 ====================

    async def run(self) -> None:
        """连接 → 接收 → 断开 → 等待 → 重连，直到 close() 或策略放弃"""
        self._running = True
        attempt = 0
        while self._running:
            if await self.connect():
                attempt = 0
                if self._running:
                    await self._receive_loop()
                await self._handle_close()
            if not self._running:
                break

            attempt += 1
            delay = self.policy.next_delay(attempt)
            if delay is None:
                logger.error("重连策略放弃，共尝试 %d 次", attempt - 1)
                break
            self.reconnect_delays.append(delay)
            logger.info("%.1f 秒后重连 (第 %d 次)...", delay, attempt)
            await self._sleep(delay)
        self._running = False


async def _call(hook: Hook | None) -> None:
    if hook is None:
        return
    result = hook()
    if inspect.isawaitable(result):
        await result


async def _close_quietly(ws: ClientConnection) -> None:
    try:
        await ws.close()
    except (OSError, WebSocketException) as e:
        logger.debug("关闭连接时出错: %s", e)
