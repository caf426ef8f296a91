"""
五子棋对局核心模块
包含对局状态机、客户端会话上下文、视图事件总线与配置
"""

from .context import ClientContext, CurrentRoom, Room, Session, UserStats
from .enums import Cell, GameStatus, Outcome, Page
from .events import EventBus, ViewEvent, ViewEventType
from .gomoku import GameSession, GameStateMachine

__all__ = [
    # 上下文
    'ClientContext', 'CurrentRoom', 'Room', 'Session', 'UserStats',
    # 枚举
    'Cell', 'GameStatus', 'Outcome', 'Page',
    # 事件
    'EventBus', 'ViewEvent', 'ViewEventType',
    # 对局
    'GameSession', 'GameStateMachine',
]

__version__ = '1.0.0'
