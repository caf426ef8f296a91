"""对局与界面状态枚举：独立成模块以避免 context / gomoku 之间的循环导入"""

from enum import Enum, IntEnum


class Cell(IntEnum):
    """棋盘格状态，数值与线上棋盘一致"""

    EMPTY = 0
    BLACK = 1  # players[0]
    WHITE = 2  # players[1]


class GameStatus(Enum):
    """对局生命周期"""

    WAITING = "waiting"  # 等待开局 (大厅/房间中)
    ACTIVE = "active"  # 对局进行中
    OVER = "over"  # 已结束，等待返回大厅


class Outcome(Enum):
    """以本地用户为视角的对局结果；协议无平局信号"""

    WIN = "win"
    LOSE = "lose"


class Page(Enum):
    """界面所处页面"""

    AUTH = "auth"  # 登录/注册
    LOBBY = "lobby"  # 大厅
    ROOM = "room"  # 房间内等待
    GAME = "game"  # 对局中
