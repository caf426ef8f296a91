"""
五子棋对局状态机测试
"""

import pytest

from conftest import deliver, logged_in
from game.enums import Cell, GameStatus, Outcome, Page
from game.events import ViewEventType
from game.exceptions import IllegalMoveError
from game.gomoku import VALID_TRANSITIONS, GameSession, empty_board, in_bounds
from net.protocol import MsgType, ServerMsg


def _board(*stones) -> list[list[int]]:
    board = [[0] * 15 for _ in range(15)]
    for x, y, cell in stones:
        board[x][y] = cell
    return board


async def _start(client, transport, players=("alice", "bob"), first="alice", me="alice"):
    await logged_in(client, transport, user_id=me)
    await deliver(client, ServerMsg.create_room_resp(200, room_id=42))
    await deliver(client, ServerMsg.game_start(42, list(players), first))
    transport.clear()
    return client


class TestHelpers:
    def test_empty_board(self):
        board = empty_board()
        assert len(board) == 15
        assert all(len(row) == 15 for row in board)
        assert all(c == Cell.EMPTY for row in board for c in row)

    def test_in_bounds(self):
        assert in_bounds(0, 0)
        assert in_bounds(14, 14)
        assert not in_bounds(15, 0)
        assert not in_bounds(0, -1)

    def test_transitions(self):
        assert GameStatus.ACTIVE in VALID_TRANSITIONS[GameStatus.WAITING]
        assert GameStatus.OVER not in VALID_TRANSITIONS[GameStatus.WAITING]
        assert GameSession().can_transition(GameStatus.OVER) is False


class TestGameStart:
    @pytest.mark.asyncio
    async def test_start_sets_active_game(self, client, transport):
        await _start(client, transport)
        game = client.ctx.game
        assert game.status is GameStatus.ACTIVE
        assert game.players == ("alice", "bob")
        assert game.current_player_id == "alice"
        assert game.stone_count() == 0
        assert client.ctx.page is Page.GAME

    @pytest.mark.asyncio
    @pytest.mark.parametrize("first", ["A", "B"])
    async def test_color_is_positional(self, client, transport, first):
        await _start(client, transport, players=("A", "B"), first=first, me="A")
        game = client.ctx.game
        assert game.color_of("A") is Cell.BLACK
        assert game.color_of("B") is Cell.WHITE
        assert game.color_of("C") is None
        assert client.game.local_color is Cell.BLACK

    @pytest.mark.asyncio
    async def test_started_event_carries_legality(self, client, transport):
        events = []
        client.bus.subscribe(ViewEventType.GAME_STARTED, events.append)
        await _start(client, transport)
        legal = events[0].data["legal_move_at"]
        assert legal(7, 7) is True
        assert legal(15, 7) is False


class TestBoardUpdate:
    @pytest.mark.asyncio
    async def test_full_replacement(self, client, transport):
        await _start(client, transport)
        await deliver(client, ServerMsg.board_update(_board((7, 7, 1)), "bob"))
        await deliver(client, ServerMsg.board_update(_board((3, 3, 2)), "alice",
                                                     last_x=3, last_y=3))

        game = client.ctx.game
        assert game.cell(7, 7) is Cell.EMPTY
        assert game.cell(3, 3) is Cell.WHITE
        assert game.current_player_id == "alice"
        assert game.last_move == (3, 3)

    @pytest.mark.asyncio
    async def test_ignored_when_not_active(self, client, transport):
        await logged_in(client, transport)
        await deliver(client, ServerMsg.board_update(_board((7, 7, 1)), "alice"))
        assert client.ctx.game.stone_count() == 0

    @pytest.mark.asyncio
    async def test_stranger_current_player_rejected(self, client, transport):
        await _start(client, transport)
        await deliver(client, ServerMsg.board_update(_board((7, 7, 1)), "mallory"))
        assert client.ctx.game.stone_count() == 0
        assert client.ctx.game.current_player_id == "alice"

    @pytest.mark.asyncio
    async def test_malformed_board_dropped(self, client, transport):
        await _start(client, transport)
        bad = [[0] * 15 for _ in range(14)]
        assert await deliver(client, ServerMsg.board_update(bad, "bob")) is False
        assert client.ctx.game.current_player_id == "alice"


class TestMoves:
    @pytest.mark.asyncio
    async def test_move_sent_without_optimistic_update(self, client, transport):
        await _start(client, transport)
        assert await client.submit_move(7, 7) is True
        assert transport.sent[0].type is MsgType.MOVE
        assert transport.sent[0].payload == {"room_id": 42, "x": 7, "y": 7}
        assert client.ctx.game.cell(7, 7) is Cell.EMPTY

    @pytest.mark.asyncio
    async def test_not_your_turn(self, client, transport, notifier):
        await _start(client, transport, first="bob")
        assert await client.submit_move(7, 7) is False
        assert transport.sent == []
        assert notifier.messages == ["还没轮到你"]

    @pytest.mark.asyncio
    async def test_occupied(self, client, transport, notifier):
        await _start(client, transport)
        await deliver(client, ServerMsg.board_update(_board((7, 7, 2)), "alice"))
        assert await client.submit_move(7, 7) is False
        assert transport.sent == []

    @pytest.mark.asyncio
    async def test_out_of_bounds(self, client, transport):
        await _start(client, transport)
        with pytest.raises(IllegalMoveError) as exc_info:
            client.game.check_move(15, 0)
        assert exc_info.value.reason == "out_of_bounds"

    @pytest.mark.asyncio
    async def test_no_game(self, client, transport):
        await logged_in(client, transport)
        with pytest.raises(IllegalMoveError) as exc_info:
            client.game.check_move(7, 7)
        assert exc_info.value.reason == "no_game"
        assert client.game.can_move(7, 7) is False

    @pytest.mark.asyncio
    async def test_move_resp_failure_surfaced(self, client, transport, notifier):
        await _start(client, transport)
        await deliver(client, ServerMsg.move_resp(400, "该位置已有棋子"))
        assert notifier.messages == ["该位置已有棋子"]
        assert client.ctx.game.status is GameStatus.ACTIVE


class TestGameOver:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("winner,outcome", [("alice", Outcome.WIN), ("bob", Outcome.LOSE)])
    async def test_outcome_from_local_view(self, client, transport, winner, outcome):
        events = []
        client.bus.subscribe(ViewEventType.GAME_OVER, events.append)
        await _start(client, transport)

        await deliver(client, ServerMsg.game_over(winner))

        assert client.ctx.game.status is GameStatus.OVER
        assert client.ctx.game.winner_id == winner
        assert client.game.outcome is outcome
        assert events[0].data["outcome"] is outcome

    def test_only_two_outcomes(self):
        assert set(Outcome) == {Outcome.WIN, Outcome.LOSE}

    @pytest.mark.asyncio
    async def test_game_over_ignored_when_waiting(self, client, transport):
        await logged_in(client, transport)
        await deliver(client, ServerMsg.game_over("alice"))
        assert client.ctx.game.status is GameStatus.WAITING
        assert client.game.outcome is None

    @pytest.mark.asyncio
    async def test_moves_rejected_after_game_over(self, client, transport):
        await _start(client, transport)
        await deliver(client, ServerMsg.game_over("bob", win_line=[1, 2, 3, 4, 5]))
        assert client.ctx.game.win_line == [1, 2, 3, 4, 5]
        assert client.game.can_move(0, 0) is False


class TestForfeit:
    @pytest.mark.asyncio
    async def test_confirmed_forfeit_sent(self, client, transport, notifier):
        await _start(client, transport)
        assert await client.forfeit() is True
        assert notifier.confirms == ["确定要认输吗？"]
        assert transport.sent[0].type is MsgType.FORFEIT_REQ
        assert transport.sent[0].payload == {"room_id": 42}

    @pytest.mark.asyncio
    async def test_declined_forfeit_not_sent(self, client, transport, notifier):
        notifier.answer = False
        await _start(client, transport)
        assert await client.forfeit() is False
        assert transport.sent == []

    @pytest.mark.asyncio
    async def test_forfeit_resp_does_not_end_game(self, client, transport):
        await _start(client, transport)
        await deliver(client, ServerMsg.forfeit_resp(200))
        assert client.ctx.game.status is GameStatus.ACTIVE
        await deliver(client, ServerMsg.game_over("bob"))
        assert client.game.outcome is Outcome.LOSE

    @pytest.mark.asyncio
    async def test_forfeit_without_game(self, client, transport, notifier):
        await logged_in(client, transport)
        assert await client.forfeit() is False
        assert notifier.confirms == []


class TestBackToLobby:
    @pytest.mark.asyncio
    async def test_back_to_lobby_resets_and_refreshes(self, client, transport):
        await _start(client, transport)
        await deliver(client, ServerMsg.game_over("alice"))

        assert await client.back_to_lobby() is True

        assert client.ctx.game.status is GameStatus.WAITING
        assert client.ctx.current_room is None
        assert client.ctx.page is Page.LOBBY
        assert transport.types() == [
            MsgType.USER_STATS_REQ, MsgType.ROOM_LIST, MsgType.LEADERBOARD_REQ,
        ]
