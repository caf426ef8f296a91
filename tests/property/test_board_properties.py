"""对局状态机的性质测试（Property-based）。

核心不变量：
1. 任意 BoardUpdate 序列之后，本地棋盘恰好等于最后一次收到的快照（不做合并）
2. 不是本地玩家回合、或目标格已有棋子时，落子一律在本地被拒绝且不发送
3. 颜色按位置分配：players[0] 黑、players[1] 白，与先手是谁无关
4. 任意次 LeaveRoomResp 之后当前房间都被清空
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

_project_root = str(Path(__file__).resolve().parents[2])
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from hypothesis import assume, given, settings
from hypothesis import strategies as st

from game.config import ClientConfig
from game.enums import Cell, GameStatus
from net.client import GomokuClient
from net.credentials import MemoryCredentialStore
from net.protocol import Envelope, ServerMsg

SIZE = 15

# ---------------------------------------------------------------------------
# 辅助
# ---------------------------------------------------------------------------


class _Transport:
    def __init__(self):
        self.is_open = True
        self.sent: list[Envelope] = []

    async def send(self, msg: Envelope) -> bool:
        self.sent.append(msg)
        return True


class _Notifier:
    def __init__(self):
        self.messages: list[str] = []

    def blocking_message(self, text: str) -> None:
        self.messages.append(text)

    def confirm(self, text: str) -> bool:
        return True


def _client() -> tuple[GomokuClient, _Transport]:
    client = GomokuClient(_Notifier(), url="ws://test/ws", config=ClientConfig(),
                          store=MemoryCredentialStore())
    transport = _Transport()
    client.dispatcher.attach(transport)
    return client, transport


def _run(client: GomokuClient, *msgs: ServerMsg) -> None:
    async def feed():
        for msg in msgs:
            await client.dispatcher.dispatch(msg.to_json())

    asyncio.run(feed())


def _started(players=("alice", "bob"), first="alice", me="alice"):
    client, transport = _client()
    _run(
        client,
        ServerMsg.login_resp(200, user_id=me, token="T"),
        ServerMsg.create_room_resp(200, room_id=42),
        ServerMsg.game_start(42, list(players), first),
    )
    transport.sent.clear()
    return client, transport


boards = st.lists(
    st.lists(st.integers(min_value=0, max_value=2), min_size=SIZE, max_size=SIZE),
    min_size=SIZE,
    max_size=SIZE,
)
players_st = st.sampled_from(["alice", "bob"])
coords = st.integers(min_value=0, max_value=SIZE - 1)


# ---------------------------------------------------------------------------
# 性质 1: 棋盘等于最后一次快照
# ---------------------------------------------------------------------------


@given(updates=st.lists(st.tuples(boards, players_st), min_size=1, max_size=5))
@settings(max_examples=50, deadline=None)
def test_board_equals_last_snapshot(updates) -> None:
    client, _ = _started()
    _run(client, *[ServerMsg.board_update(b, p) for b, p in updates])

    last_board, last_player = updates[-1]
    assert [[int(c) for c in row] for row in client.ctx.game.board] == last_board
    assert client.ctx.game.current_player_id == last_player


# ---------------------------------------------------------------------------
# 性质 2: 非本方回合 / 已占格的落子不会发送
# ---------------------------------------------------------------------------


@given(board=boards, x=coords, y=coords)
@settings(max_examples=100, deadline=None)
def test_move_rejected_when_not_my_turn(board, x, y) -> None:
    client, transport = _started()
    _run(client, ServerMsg.board_update(board, "bob"))

    assert client.game.can_move(x, y) is False
    assert asyncio.run(client.submit_move(x, y)) is False
    assert transport.sent == []


@given(board=boards, x=coords, y=coords)
@settings(max_examples=100, deadline=None)
def test_move_rejected_on_occupied_cell(board, x, y) -> None:
    assume(board[x][y] != 0)
    client, transport = _started()
    _run(client, ServerMsg.board_update(board, "alice"))

    assert client.game.can_move(x, y) is False
    assert asyncio.run(client.submit_move(x, y)) is False
    assert transport.sent == []


@given(board=boards, x=coords, y=coords)
@settings(max_examples=100, deadline=None)
def test_move_accepted_on_empty_cell_in_turn(board, x, y) -> None:
    assume(board[x][y] == 0)
    client, transport = _started()
    _run(client, ServerMsg.board_update(board, "alice"))

    assert client.game.can_move(x, y) is True
    assert asyncio.run(client.submit_move(x, y)) is True
    assert len(transport.sent) == 1
    # 不做乐观更新
    assert client.ctx.game.cell(x, y) is Cell.EMPTY


# ---------------------------------------------------------------------------
# 性质 3: 颜色按位置分配
# ---------------------------------------------------------------------------


@given(
    a=st.text(min_size=1, max_size=8),
    b=st.text(min_size=1, max_size=8),
    first_is_a=st.booleans(),
)
@settings(max_examples=100, deadline=None)
def test_color_positional(a, b, first_is_a) -> None:
    assume(a != b)
    client, _ = _started(players=(a, b), first=a if first_is_a else b, me=a)
    game = client.ctx.game
    assert game.status is GameStatus.ACTIVE
    assert game.color_of(a) is Cell.BLACK
    assert game.color_of(b) is Cell.WHITE


# ---------------------------------------------------------------------------
# 性质 4: LeaveRoomResp 幂等
# ---------------------------------------------------------------------------


@given(codes=st.lists(st.sampled_from([200, 400, 500]), min_size=1, max_size=6))
@settings(max_examples=50, deadline=None)
def test_leave_resp_always_clears_room(codes) -> None:
    client, _ = _started()
    _run(client, *[ServerMsg.leave_room_resp(code) for code in codes])
    assert client.ctx.current_room is None
    assert client.ctx.game.status is GameStatus.WAITING
