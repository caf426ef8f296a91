"""大厅数据: 战绩与排行榜

refresh() 是登录成功和对局结束返回大厅后共用的刷新流程，
依次请求: 本人战绩 → 房间列表 → 排行榜 (前 N 名)。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from game.context import UserStats
from game.events import ViewEventType

from .protocol import ClientMsg, MsgType

if TYPE_CHECKING:
    from game.context import ClientContext
    from game.events import EventBus

    from .dispatcher import Dispatcher
    from .models import LeaderboardResp, UserStatsResp

logger = logging.getLogger(__name__)


class LobbyClient:
    def __init__(self, ctx: ClientContext, dispatcher: Dispatcher, bus: EventBus,
                 leaderboard_limit: int = 10):
        self.ctx = ctx
        self._dispatcher = dispatcher
        self._bus = bus
        self.leaderboard_limit = leaderboard_limit

    def bind(self, dispatcher: Dispatcher) -> None:
        dispatcher.register(MsgType.USER_STATS_RESP, self.on_user_stats_resp)
        dispatcher.register(MsgType.LEADERBOARD_RESP, self.on_leaderboard_resp)

    async def refresh(self) -> None:
        """刷新大厅: 战绩、房间列表、排行榜"""
        user_id = self.ctx.user_id
        if user_id is None:
            logger.debug("未登录，跳过大厅刷新")
            return
        await self._dispatcher.send(ClientMsg.user_stats(user_id))
        await self._dispatcher.send(ClientMsg.room_list())
        await self._dispatcher.send(ClientMsg.leaderboard(self.leaderboard_limit))

    async def request_leaderboard(self) -> bool:
        return await self._dispatcher.send(ClientMsg.leaderboard(self.leaderboard_limit))

    def on_user_stats_resp(self, payload: UserStatsResp) -> None:
        # 失败时不提示，保留旧数据
        if not payload.ok:
            logger.debug("战绩查询失败: code=%s", payload.code)
            return
        self.ctx.stats = UserStats(
            score=payload.score,
            win_count=payload.win_count,
            lose_count=payload.lose_count,
            win_rate=payload.win_rate,
            rank=payload.rank,
        )
        self._bus.emit(ViewEventType.STATS_UPDATED, stats=self.ctx.stats)

    def on_leaderboard_resp(self, payload: LeaderboardResp) -> None:
        if not payload.ok:
            logger.debug("排行榜查询失败: code=%s", payload.code)
            return
        self.ctx.leaderboard = list(payload.ranks)
        self._bus.emit(ViewEventType.LEADERBOARD_UPDATED, ranks=self.ctx.leaderboard)
