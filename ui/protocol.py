"""界面协作方协议

核心层只依赖以下两个结构化协议，不关心具体实现：
  - Notifier : 阻塞式提示与确认
  - Renderer : 把棋盘画出来，并把一次点击/输入换算成棋盘坐标

实现类基于结构子类型化 (structural subtyping) 自动满足协议要求，无需显式继承。
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from game.enums import Cell

LegalMoveAt = Callable[[int, int], bool]


class Notifier(Protocol):
    """阻塞提示协议

    blocking_message 不排队：新消息覆盖尚未展示的旧消息。
    confirm 可以是同步或异步实现。
    """

    def blocking_message(self, text: str) -> None: ...
    def confirm(self, text: str) -> bool | Awaitable[bool]: ...


class Renderer(Protocol):
    """棋盘渲染协议"""

    def render(self, board: Sequence[Sequence[Cell]], legal_move_at: LegalMoveAt) -> Any: ...
    def on_click(self, raw: Any) -> tuple[int, int] | None: ...
