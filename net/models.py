"""服务端推送 payload 的 Pydantic 校验模型

客户端在分发前，先将原始 payload 交给对应模型校验，
校验通过后再交给业务处理器，拒绝字段类型不符/缺失的推送，
避免半截数据污染本地状态。

设计原则:
  - 校验模型与业务状态分离 (校验层 vs 状态层)
  - 校验失败抛出 pydantic.ValidationError，由分发层统一记录并丢弃
  - 服务端可能附带额外字段，统一 extra="ignore"
  - user_id 在不同服务端实现中可能是整数或字符串，统一用 UserId 表示
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from game.config import BOARD_SIZE

from .protocol import SUCCESS_CODE, MsgType

UserId = Union[int, str]


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class _Response(_Payload):
    """带 code 的应答"""

    code: int = 0
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.code == SUCCESS_CODE


# ====================================================================== #
#  账号                                                                   #
# ====================================================================== #


class LoginResp(_Response):
    user_id: UserId | None = None
    token: str = ""

    @model_validator(mode="after")
    def _success_needs_identity(self) -> LoginResp:
        if self.ok and (self.user_id is None or not self.token):
            raise ValueError("login success without user_id/token")
        return self


class RegisterResp(_Response):
    pass


class Credentials(BaseModel):
    """本地输入校验: 用户名/密码不能为空"""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=False)

    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("用户名不能为空")
        return v


# ====================================================================== #
#  房间                                                                   #
# ====================================================================== #


class RoomResp(_Response):
    """CreateRoomResp / JoinRoomResp"""

    room_id: UserId | None = None

    @model_validator(mode="after")
    def _success_needs_room(self) -> RoomResp:
        if self.ok and self.room_id is None:
            raise ValueError("room response success without room_id")
        return self


class LeaveRoomResp(_Payload):
    """任何 LeaveRoomResp 都视为已离开，字段不做类型约束"""

    code: Any = None
    message: Any = ""


class RoomEntry(_Payload):
    room_id: UserId
    room_name: str = ""
    players: list[UserId] = Field(default_factory=list)
    creator_id: UserId | None = None
    status: int | None = None

    @field_validator("players", mode="before")
    @classmethod
    def players_none_as_empty(cls, v: Any) -> Any:
        return v or []


class RoomListResp(_Response):
    rooms: list[RoomEntry] = Field(default_factory=list)

    @field_validator("rooms", mode="before")
    @classmethod
    def rooms_none_as_empty(cls, v: Any) -> Any:
        return v or []


class PlayerNotice(_Payload):
    """PlayerJoin / PlayerLeave"""

    username: str = ""
    user_id: UserId | None = None
    room_id: UserId | None = None


# ====================================================================== #
#  对局                                                                   #
# ====================================================================== #


class MoveResp(_Response):
    pass


class ForfeitResp(_Response):
    winner: UserId | None = None


class GameStart(_Payload):
    room_id: UserId
    players: list[UserId] = Field(min_length=2, max_length=2)
    first_player: UserId


class BoardUpdate(_Payload):
    board: list[list[int]]
    current_player: UserId
    room_id: UserId | None = None
    last_x: int | None = None
    last_y: int | None = None
    last_player: UserId | None = None

    @field_validator("board")
    @classmethod
    def board_is_square(cls, v: list[list[int]]) -> list[list[int]]:
        if len(v) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in v):
            raise ValueError(f"board must be {BOARD_SIZE}x{BOARD_SIZE}")
        if any(cell not in (0, 1, 2) for row in v for cell in row):
            raise ValueError("board cell must be 0/1/2")
        return v


class GameOver(_Payload):
    winner: UserId
    room_id: UserId | None = None
    win_line: list[int] = Field(default_factory=list)

    @field_validator("win_line", mode="before")
    @classmethod
    def win_line_none_as_empty(cls, v: Any) -> Any:
        return v or []


# ====================================================================== #
#  排行 / 战绩                                                             #
# ====================================================================== #


class RankEntry(_Payload):
    username: str
    score: int = 0
    win_rate: str = ""
    user_id: UserId | None = None
    win_count: int = 0
    lose_count: int = 0
    rank: int | None = None


class LeaderboardResp(_Response):
    ranks: list[RankEntry] = Field(default_factory=list)

    @field_validator("ranks", mode="before")
    @classmethod
    def ranks_none_as_empty(cls, v: Any) -> Any:
        return v or []


class UserStatsResp(_Response):
    score: int = 0
    user_id: UserId | None = None
    username: str = ""
    win_count: int = 0
    lose_count: int = 0
    win_rate: str = ""
    rank: int | None = None


class ErrorPayload(_Payload):
    message: str = ""
    code: int | None = None


# ====================================================================== #
#  消息类型 → payload 校验模型映射                                            #
# ====================================================================== #

PAYLOAD_MODELS: dict[MsgType, type[BaseModel]] = {
    MsgType.LOGIN_RESP: LoginResp,
    MsgType.REGISTER_RESP: RegisterResp,
    MsgType.CREATE_ROOM_RESP: RoomResp,
    MsgType.JOIN_ROOM_RESP: RoomResp,
    MsgType.LEAVE_ROOM_RESP: LeaveRoomResp,
    MsgType.ROOM_LIST_RESP: RoomListResp,
    MsgType.PLAYER_JOIN: PlayerNotice,
    MsgType.PLAYER_LEAVE: PlayerNotice,
    MsgType.MOVE_RESP: MoveResp,
    MsgType.GAME_OVER: GameOver,
    MsgType.GAME_START: GameStart,
    MsgType.BOARD_UPDATE: BoardUpdate,
    MsgType.FORFEIT_RESP: ForfeitResp,
    MsgType.LEADERBOARD_RESP: LeaderboardResp,
    MsgType.USER_STATS_RESP: UserStatsResp,
    MsgType.ERROR: ErrorPayload,
}


def validate_payload(msg_type: MsgType, payload: dict[str, Any]) -> BaseModel | dict[str, Any]:
    """按类型校验 payload。

    没有登记模型的类型原样返回 dict。

    Raises:
        pydantic.ValidationError: 校验失败
    """
    model_cls = PAYLOAD_MODELS.get(msg_type)
    if model_cls is None:
        return payload
    return model_cls.model_validate(payload)
