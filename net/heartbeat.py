"""心跳监视器

连接打开期间每隔固定间隔 (默认 30 秒) 发送一次 Ping。
单向发送，不跟踪 Pong，也不做存活判断；半开连接只能依赖传输层自身的关闭事件发现。
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from .protocol import ClientMsg

if TYPE_CHECKING:
    from .transport import TransportConnector

logger = logging.getLogger(__name__)


class HeartbeatMonitor:
    def __init__(self, transport: TransportConnector, interval: float = 30.0,
                 sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep):
        self._transport = transport
        self.interval = interval
        self._sleep = sleep
        self._task: asyncio.Task | None = None
        self.sent = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """连接打开时调用；重复调用不会产生多个循环"""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._loop())
        logger.debug("心跳启动 (interval=%.1fs)", self.interval)

    def stop(self) -> None:
        """连接关闭时调用"""
        if self._task is not None:
            self._task.cancel()
            self._task = None
            logger.debug("心跳停止")

    async def _loop(self) -> None:
        while self._transport.is_open:
            await self._sleep(self.interval)
            await self.beat()

    async def beat(self) -> bool:
        """发送一次 Ping；未连接时不发送"""
        if not self._transport.is_open:
            return False
        ok = await self._transport.send(ClientMsg.ping())
        if ok:
            self.sent += 1
        return ok
