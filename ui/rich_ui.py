# -*- coding: utf-8 -*-
"""
Rich TUI Module
Uses the 'rich' library to provide the terminal collaborators of the client:
the blocking notifier, the board renderer and a view that redraws on view events.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from rich.box import ROUNDED
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table
from rich.text import Text

from game.config import BOARD_SIZE
from game.enums import Cell, Outcome, Page
from game.events import ViewEvent, ViewEventType
from i18n import outcome_name, stone_name, t

if TYPE_CHECKING:
    from game.context import ClientContext
    from game.events import EventBus
    from game.gomoku import GameStateMachine
    from ui.protocol import LegalMoveAt

STONES = {
    Cell.BLACK: ("●", "bold black on dark_goldenrod"),
    Cell.WHITE: ("●", "bold white on dark_goldenrod"),
}


class RichNotifier:
    """Blocking notifications rendered as panels.

    Only the latest message is kept; a new one replaces any message not yet shown.
    """

    def __init__(self, console: Console | None = None):
        self.console = console or Console(highlight=False)
        self.last_message: str | None = None

    def blocking_message(self, text: str) -> None:
        self.last_message = text
        self.console.print(Panel(Text(text), border_style="red", box=ROUNDED))

    async def confirm(self, text: str) -> bool:
        # Prompt in a worker thread so the event loop keeps receiving
        return await asyncio.to_thread(Confirm.ask, text, console=self.console, default=False)


class RichBoardRenderer:
    """Draws the board as a grid of characters.

    Columns are x, rows are y; the wire board is indexed board[x][y].
    """

    def __init__(self, size: int = BOARD_SIZE):
        self.size = size
        self.last_move: tuple[int, int] | None = None

    def render(self, board: Sequence[Sequence[Cell]], legal_move_at: LegalMoveAt) -> Table:
        grid = Table.grid(padding=(0, 1))
        grid.add_column(justify="right", style="dim")
        for _ in range(self.size):
            grid.add_column(justify="center")

        grid.add_row("", *[Text(str(x % 10), style="dim") for x in range(self.size)])
        for y in range(self.size):
            cells = []
            for x in range(self.size):
                cells.append(self._cell(board[x][y], x, y, legal_move_at))
            grid.add_row(str(y), *cells)
        return grid

    def _cell(self, cell: Cell, x: int, y: int, legal_move_at: LegalMoveAt) -> Text:
        if cell == Cell.EMPTY:
            style = "green" if legal_move_at(x, y) else "grey50"
            return Text("·", style=style)
        symbol, style = STONES[Cell(cell)]
        if self.last_move == (x, y):
            style += " underline"
        return Text(symbol, style=style)

    def on_click(self, raw: Any) -> tuple[int, int] | None:
        """Turn typed input ("7 7", "7,7") into board coordinates."""
        if isinstance(raw, tuple):
            parts = list(raw)
        elif isinstance(raw, str):
            parts = raw.replace(",", " ").split()
        else:
            return None
        if len(parts) != 2:
            return None
        try:
            x, y = int(parts[0]), int(parts[1])
        except (TypeError, ValueError):
            return None
        return x, y


class RichView:
    """Subscribes to the client's view events and redraws the relevant part."""

    def __init__(self, ctx: ClientContext, machine: GameStateMachine,
                 console: Console | None = None, renderer: RichBoardRenderer | None = None):
        self.ctx = ctx
        self.machine = machine
        self.console = console or Console(highlight=False)
        self.renderer = renderer or RichBoardRenderer()

    def attach(self, bus: EventBus) -> None:
        bus.subscribe(ViewEventType.LOGGED_IN, self._on_logged_in)
        bus.subscribe(ViewEventType.PAGE_CHANGED, self._on_page)
        bus.subscribe(ViewEventType.ROOMS_UPDATED, self._on_rooms)
        bus.subscribe(ViewEventType.STATS_UPDATED, self._on_stats)
        bus.subscribe(ViewEventType.LEADERBOARD_UPDATED, self._on_leaderboard)
        bus.subscribe(ViewEventType.ROOM_ENTERED, self._on_room)
        bus.subscribe(ViewEventType.OPPONENT_CHANGED, self._on_room)
        bus.subscribe(ViewEventType.GAME_STARTED, self._on_board)
        bus.subscribe(ViewEventType.BOARD_UPDATED, self._on_board)
        bus.subscribe(ViewEventType.GAME_OVER, self._on_game_over)

    # --- lobby ---

    def _on_logged_in(self, event: ViewEvent) -> None:
        self.console.print(t("lobby.user", user=self.ctx.user_id), style="bold cyan")

    def _on_page(self, event: ViewEvent) -> None:
        page: Page = event.data["page"]
        self.console.rule(f"[bold]{page.value}")

    def _on_stats(self, event: ViewEvent) -> None:
        self.console.print(t("lobby.score", score=event.data["stats"].score), style="cyan")

    def _on_rooms(self, event: ViewEvent) -> None:
        rooms = event.data["rooms"]
        if not rooms:
            self.console.print(t("room.empty"), style="dim")
            return
        table = Table(title=t("lobby.rooms"), box=ROUNDED)
        table.add_column("ID", justify="right")
        table.add_column("Name")
        table.add_column("")
        for room in rooms:
            state = t("room.full") if room.is_full else t("room.join")
            table.add_row(str(room.room_id), room.name,
                          f"{t('room.players', count=len(room.members))}  {state}")
        self.console.print(table)

    def _on_leaderboard(self, event: ViewEvent) -> None:
        lines = [
            t("lobby.rank_line", index=i, username=r.username, score=r.score, win_rate=r.win_rate)
            for i, r in enumerate(event.data["ranks"], start=1)
        ]
        if lines:
            self.console.print(Panel("\n".join(lines), title=t("lobby.leaderboard"), box=ROUNDED))

    # --- room ---

    def _on_room(self, event: ViewEvent) -> None:
        room = event.data["room"]
        names = [str(m) if m is not None else t("room.waiting") for m in room.members]
        body = f"1. {names[0]}\n2. {names[1]}"
        if event.data.get("status"):
            body += f"\n\n{event.data['status']}"
        self.console.print(Panel(body, title=t("room.title", room_id=room.room_id), box=ROUNDED))

    # --- game ---

    def _on_board(self, event: ViewEvent) -> None:
        game = event.data["game"]
        self.renderer.last_move = game.last_move
        self.console.print(self.renderer.render(game.board, event.data["legal_move_at"]))
        mine = self.machine.is_my_turn
        color = self.machine.local_color
        self.console.print(
            t("game.status",
              color=stone_name(color.name.lower()) if color else "?",
              turn=t("game.status.mine") if mine else t("game.status.theirs")),
            style="bold green" if mine else "bold red",
        )

    def _on_game_over(self, event: ViewEvent) -> None:
        outcome: Outcome = event.data["outcome"]
        style = "green" if outcome == Outcome.WIN else "red"
        self.console.print(Panel(Text(outcome_name(outcome.value), style=f"bold {style}"),
                                 box=ROUNDED))
