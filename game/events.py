"""
视图事件总线
实现观察者模式，组件修改状态后发布事件，界面层订阅并重绘
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

logger = logging.getLogger(__name__)


class ViewEventType(Enum):
    """视图事件类型枚举"""
    # 账号
    LOGGED_IN = auto()
    LOGGED_OUT = auto()
    REGISTERED = auto()

    # 页面切换 (auth / lobby / room / game)
    PAGE_CHANGED = auto()

    # 大厅
    ROOMS_UPDATED = auto()
    STATS_UPDATED = auto()
    LEADERBOARD_UPDATED = auto()

    # 房间
    ROOM_ENTERED = auto()
    ROOM_LEFT = auto()
    OPPONENT_CHANGED = auto()

    # 对局
    GAME_STARTED = auto()
    BOARD_UPDATED = auto()
    GAME_OVER = auto()

    # 连接
    CONNECTION_CHANGED = auto()


@dataclass
class ViewEvent:
    """视图事件，data 中携带视图所需的快照"""
    event_type: ViewEventType
    data: dict[str, Any] = field(default_factory=dict)


ViewHandler = Callable[[ViewEvent], None]


class EventBus:
    """
    事件总线
    负责事件的发布和订阅
    """

    def __init__(self, max_history: int = 100):
        self._handlers: dict[ViewEventType, list[tuple[int, ViewHandler]]] = defaultdict(list)
        # 全局处理器（监听所有事件）
        self._global_handlers: list[tuple[int, ViewHandler]] = []
        self._event_history: list[ViewEvent] = []
        self._max_history = max_history

    def subscribe(self, event_type: ViewEventType, handler: ViewHandler,
                  priority: int = 0) -> None:
        """
        订阅事件

        Args:
            event_type: 事件类型
            handler: 事件处理器
            priority: 优先级（数字越大越先执行）
        """
        self._handlers[event_type].append((priority, handler))
        self._handlers[event_type].sort(key=lambda x: x[0], reverse=True)

    def subscribe_all(self, handler: ViewHandler, priority: int = 0) -> None:
        """订阅所有事件"""
        self._global_handlers.append((priority, handler))
        self._global_handlers.sort(key=lambda x: x[0], reverse=True)

    def unsubscribe(self, event_type: ViewEventType, handler: ViewHandler) -> None:
        """取消订阅"""
        self._handlers[event_type] = [
            (p, h) for p, h in self._handlers[event_type] if h != handler
        ]

    def publish(self, event: ViewEvent) -> ViewEvent:
        """发布事件；单个处理器异常不影响其余处理器"""
        self._event_history.append(event)
        if len(self._event_history) > self._max_history:
            self._event_history = self._event_history[-self._max_history:]

        handlers = self._global_handlers + self._handlers.get(event.event_type, [])
        for _, handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception("视图处理器异常: %s", event.event_type.name)
        return event

    def emit(self, event_type: ViewEventType, **kwargs: Any) -> ViewEvent:
        """快捷发布事件"""
        return self.publish(ViewEvent(event_type=event_type, data=kwargs))

    def clear(self) -> None:
        """清除所有订阅"""
        self._handlers.clear()
        self._global_handlers.clear()

    def get_history(self, count: int = 10) -> list[ViewEvent]:
        """获取最近的事件历史"""
        return self._event_history[-count:]
