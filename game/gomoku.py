"""五子棋对局状态机

生命周期: WAITING → ACTIVE → OVER → WAITING

- GameStart   : 按位置分配颜色 (players[0] 黑, players[1] 白)，清空棋盘，进入 ACTIVE
- BoardUpdate : 整盘替换 (不是增量)，同时更新当前执子方
- GameOver    : 进入 OVER，以本地用户为视角给出胜/负
- 落子只做本地预检，不做乐观更新；自己的棋子要等服务端广播棋盘后才出现
- 认输应答本身不改变状态，只有随后的 GameOver 才是权威结果
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from i18n import t
from net.protocol import ClientMsg, MsgType

from .config import BOARD_SIZE
from .enums import Cell, GameStatus, Outcome, Page
from .events import ViewEventType
from .exceptions import IllegalMoveError, ProtocolError

if TYPE_CHECKING:
    from net.dispatcher import Dispatcher
    from net.lobby import LobbyClient
    from net.models import BoardUpdate, ForfeitResp, GameOver, GameStart, MoveResp
    from ui.protocol import Notifier

    from .context import ClientContext
    from .events import EventBus

logger = logging.getLogger(__name__)

Board = list[list[Cell]]

# 合法的状态转换表
# key: 当前状态, value: 允许转换到的目标状态集合
VALID_TRANSITIONS: dict[GameStatus, set[GameStatus]] = {
    GameStatus.WAITING: {GameStatus.ACTIVE},
    GameStatus.ACTIVE: {GameStatus.ACTIVE, GameStatus.OVER, GameStatus.WAITING},
    GameStatus.OVER: {GameStatus.WAITING, GameStatus.ACTIVE},
}


def empty_board(size: int = BOARD_SIZE) -> Board:
    return [[Cell.EMPTY] * size for _ in range(size)]


def in_bounds(x: int, y: int, size: int = BOARD_SIZE) -> bool:
    return 0 <= x < size and 0 <= y < size


@dataclass
class GameSession:
    """一局对局的本地快照

    board 以 board[x][y] 索引，与线上格式一致。
    """

    room_id: Any = None
    players: tuple[Any, Any] | None = None
    current_player_id: Any = None
    board: Board = field(default_factory=empty_board)
    status: GameStatus = GameStatus.WAITING
    winner_id: Any = None
    last_move: tuple[int, int] | None = None
    win_line: list[int] = field(default_factory=list)

    def color_of(self, user_id: Any) -> Cell | None:
        """按位置取颜色；不在对局中的用户返回 None"""
        if self.players is None:
            return None
        if user_id == self.players[0]:
            return Cell.BLACK
        if user_id == self.players[1]:
            return Cell.WHITE
        return None

    def cell(self, x: int, y: int) -> Cell:
        return self.board[x][y]

    def stone_count(self) -> int:
        return sum(1 for row in self.board for c in row if c != Cell.EMPTY)

    def can_transition(self, target: GameStatus) -> bool:
        return target in VALID_TRANSITIONS.get(self.status, set())


class GameStateMachine:
    """对局状态机

    持有 ClientContext 引用，所有状态写入 ctx.game。
    服务端推送由 Dispatcher 调用 on_* 处理器，用户操作走 submit_move / forfeit /
    back_to_lobby。
    """

    def __init__(self, ctx: ClientContext, dispatcher: Dispatcher, bus: EventBus,
                 notifier: Notifier, lobby: LobbyClient):
        self.ctx = ctx
        self._dispatcher = dispatcher
        self._bus = bus
        self._notifier = notifier
        self._lobby = lobby

    def bind(self, dispatcher: Dispatcher) -> None:
        dispatcher.register(MsgType.GAME_START, self.on_game_start)
        dispatcher.register(MsgType.BOARD_UPDATE, self.on_board_update)
        dispatcher.register(MsgType.GAME_OVER, self.on_game_over)
        dispatcher.register(MsgType.MOVE_RESP, self.on_move_resp)
        dispatcher.register(MsgType.FORFEIT_RESP, self.on_forfeit_resp)

    # ==================== 只读视图 ====================

    @property
    def game(self) -> GameSession:
        return self.ctx.game

    @property
    def local_color(self) -> Cell | None:
        return self.game.color_of(self.ctx.user_id)

    @property
    def is_my_turn(self) -> bool:
        return (
            self.game.status == GameStatus.ACTIVE
            and self.ctx.user_id is not None
            and self.game.current_player_id == self.ctx.user_id
        )

    @property
    def outcome(self) -> Outcome | None:
        """OVER 状态下的结果；其他状态为 None"""
        if self.game.status != GameStatus.OVER:
            return None
        return Outcome.WIN if self.game.winner_id == self.ctx.user_id else Outcome.LOSE

    # ==================== 服务端推送 ====================

    def on_game_start(self, payload: GameStart) -> None:
        players = (payload.players[0], payload.players[1])
        if self.game.status == GameStatus.ACTIVE:
            logger.warning("对局进行中收到新的 GameStart (room=%s)，以新对局为准", payload.room_id)
        if payload.first_player not in players:
            logger.warning("first_player %r 不在玩家列表 %r 中", payload.first_player, players)

        self.ctx.game = GameSession(
            room_id=payload.room_id,
            players=players,
            current_player_id=payload.first_player,
            status=GameStatus.ACTIVE,
        )
        self.ctx.page = Page.GAME
        logger.info(
            "对局开始: room=%s players=%s first=%s local_color=%s",
            payload.room_id, players, payload.first_player,
            self.local_color.name if self.local_color else None,
        )
        self._bus.emit(ViewEventType.PAGE_CHANGED, page=Page.GAME)
        self._bus.emit(
            ViewEventType.GAME_STARTED,
            game=self.ctx.game,
            local_color=self.local_color,
            legal_move_at=self.can_move,
        )

    def on_board_update(self, payload: BoardUpdate) -> None:
        game = self.game
        if game.status != GameStatus.ACTIVE:
            logger.debug("非进行中状态 (%s) 收到 BoardUpdate，忽略", game.status.value)
            return
        if game.players is not None and payload.current_player not in game.players:
            logger.warning(
                "BoardUpdate 的 current_player %r 不属于本局玩家 %r，丢弃",
                payload.current_player, game.players,
            )
            return

        game.board = [[Cell(c) for c in row] for row in payload.board]
        game.current_player_id = payload.current_player
        if payload.last_x is not None and payload.last_y is not None:
            game.last_move = (payload.last_x, payload.last_y)
        logger.debug("棋盘更新: stones=%d current=%s", game.stone_count(), game.current_player_id)
        self._bus.emit(
            ViewEventType.BOARD_UPDATED,
            game=game,
            is_my_turn=self.is_my_turn,
            legal_move_at=self.can_move,
        )

    def on_game_over(self, payload: GameOver) -> None:
        game = self.game
        if not game.can_transition(GameStatus.OVER):
            logger.info("状态 %s 下收到 GameOver，忽略", game.status.value)
            return
        game.status = GameStatus.OVER
        game.winner_id = payload.winner
        game.win_line = list(payload.win_line)
        outcome = self.outcome
        logger.info("对局结束: winner=%s outcome=%s", payload.winner, outcome.value)
        self._bus.emit(ViewEventType.GAME_OVER, game=game, outcome=outcome)

    def on_move_resp(self, payload: MoveResp) -> None:
        if not payload.ok:
            raise ProtocolError(payload.message, code=payload.code, msg_type=MsgType.MOVE_RESP)

    def on_forfeit_resp(self, payload: ForfeitResp) -> None:
        # 认输结果以 GameOver 为准
        if not payload.ok:
            raise ProtocolError(payload.message, code=payload.code, msg_type=MsgType.FORFEIT_RESP)
        logger.info("认输已受理，等待 GameOver")

    # ==================== 本地操作 ====================

    def check_move(self, x: int, y: int) -> None:
        """本地落子预检

        Raises:
            IllegalMoveError: 不满足落子条件
        """
        game = self.game
        if game.status != GameStatus.ACTIVE:
            raise IllegalMoveError("no_game", x, y)
        if not self.is_my_turn:
            raise IllegalMoveError("not_your_turn", x, y)
        if not in_bounds(x, y):
            raise IllegalMoveError("out_of_bounds", x, y)
        if game.cell(x, y) != Cell.EMPTY:
            raise IllegalMoveError("occupied", x, y)

    def can_move(self, x: int, y: int) -> bool:
        """渲染层使用的合法落点判断"""
        try:
            self.check_move(x, y)
        except IllegalMoveError:
            return False
        return True

    async def submit_move(self, x: int, y: int) -> bool:
        """提交落子；本地棋盘不做修改，等待服务端广播"""
        self.check_move(x, y)
        room_id = self.ctx.current_room.room_id if self.ctx.current_room else self.game.room_id
        logger.debug("提交落子 (%d, %d) room=%s", x, y, room_id)
        return await self._dispatcher.send(ClientMsg.move(room_id, x, y))

    async def forfeit(self) -> bool:
        """经用户确认后发送认输请求"""
        if self.game.status != GameStatus.ACTIVE:
            raise IllegalMoveError("no_game")
        confirmed = await _maybe_await(self._notifier.confirm, t("notify.forfeit_confirm"))
        if not confirmed:
            logger.debug("用户取消认输")
            return False
        room_id = self.ctx.current_room.room_id if self.ctx.current_room else self.game.room_id
        return await self._dispatcher.send(ClientMsg.forfeit(room_id))

    async def back_to_lobby(self) -> None:
        """结束后返回大厅：重置为 WAITING，清除当前房间，刷新大厅数据"""
        if self.game.status == GameStatus.ACTIVE:
            logger.warning("对局进行中返回大厅")
        self.ctx.reset_game()
        self.ctx.current_room = None
        self.ctx.page = Page.LOBBY
        self._bus.emit(ViewEventType.PAGE_CHANGED, page=Page.LOBBY)
        await self._lobby.refresh()


async def _maybe_await(func: Callable[..., Any], *args: Any) -> Any:
    result = func(*args)
    if inspect.isawaitable(result):
        return await result
    return result
