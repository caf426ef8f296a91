"""ClientContext: 客户端会话上下文

把连接之外的全部可变状态 (登录身份 / 房间目录 / 当前房间 / 对局 / 大厅数据 /
当前页面) 收拢到一个显式对象中，由顶层 GomokuClient 持有，并在构造各组件时
传入。各组件只修改自己负责的字段，不使用模块级全局变量。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from .enums import Page
from .gomoku import GameSession

if TYPE_CHECKING:
    from net.models import RankEntry

UserId = Union[int, str]


@dataclass
class Session:
    """已登录身份"""

    user_id: UserId
    token: str
    authenticated: bool = True


@dataclass
class Room:
    """房间目录中的一项；每次刷新整体替换"""

    room_id: UserId
    name: str = ""
    members: list[UserId] = field(default_factory=list)
    creator_id: UserId | None = None
    status: int | None = None

    @property
    def is_full(self) -> bool:
        return len(self.members) >= 2


@dataclass
class CurrentRoom:
    """当前所在房间

    members 固定两个槽位；第二个槽位为 None 表示等待对手加入。
    """

    room_id: UserId
    members: list[UserId | None] = field(default_factory=lambda: [None, None])

    @property
    def opponent(self) -> UserId | None:
        return self.members[1]

    def set_members(self, members: list[Any]) -> None:
        """用目录快照覆盖槽位，不足两个用 None 补齐"""
        padded = list(members[:2]) + [None] * (2 - len(members[:2]))
        self.members = padded


@dataclass
class UserStats:
    """本地用户战绩"""

    score: int = 0
    win_count: int = 0
    lose_count: int = 0
    win_rate: str = ""
    rank: int | None = None


@dataclass
class ClientContext:
    """客户端全部会话状态"""

    session: Session | None = None
    directory: dict[UserId, Room] = field(default_factory=dict)
    current_room: CurrentRoom | None = None
    game: GameSession = field(default_factory=GameSession)
    stats: UserStats | None = None
    leaderboard: list[RankEntry] = field(default_factory=list)
    page: Page = Page.AUTH

    @property
    def user_id(self) -> UserId | None:
        return self.session.user_id if self.session else None

    @property
    def authenticated(self) -> bool:
        return self.session is not None and self.session.authenticated

    def reset_game(self) -> None:
        """丢弃当前对局，回到等待状态"""
        self.game = GameSession()

    def clear(self) -> None:
        """登出时清空全部状态"""
        self.session = None
        self.directory = {}
        self.current_room = None
        self.game = GameSession()
        self.stats = None
        self.leaderboard = []
        self.page = Page.AUTH
