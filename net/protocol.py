"""网络协议定义
基于 WebSocket 的 JSON 信封格式

协议设计:
- 所有消息均为 {"type": <int>, "payload": {...}} 的 JSON 文本
- type 为整数类型码，用于路由
- 客户端 → 服务端: ClientMsg (请求)
- 服务端 → 客户端: ServerMsg (响应/推送)
- 业务成功与否仅由 payload.code 区分 (200 为成功)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

SUCCESS_CODE = 200


# ==================== 消息类型枚举 ====================

class MsgType(IntEnum):
    """网络消息类型码"""

    # ---- 连接管理 ----
    PING = 1000                         # 心跳
    PONG = 1001                         # 心跳响应

    # ---- 账号 ----
    LOGIN = 2001                        # 登录 (账号密码 / 令牌)
    LOGIN_RESP = 2002
    REGISTER = 2003                     # 注册
    REGISTER_RESP = 2004

    # ---- 房间管理 (Client → Server) ----
    CREATE_ROOM = 3001
    JOIN_ROOM = 3002
    LEAVE_ROOM = 3003
    ROOM_LIST = 3004

    # ---- 房间管理 (Server → Client) ----
    ROOM_INFO = 3005                    # 房间详情 (客户端未使用)
    CREATE_ROOM_RESP = 3011
    JOIN_ROOM_RESP = 3012
    LEAVE_ROOM_RESP = 3013
    ROOM_LIST_RESP = 3014
    PLAYER_JOIN = 3015                  # 对手加入
    PLAYER_LEAVE = 3016                 # 对手离开

    # ---- 对局 ----
    MOVE = 4001                         # 落子
    MOVE_RESP = 4002
    GAME_OVER = 4003
    GAME_START = 4004
    BOARD_UPDATE = 4005                 # 整盘广播
    FORFEIT_REQ = 4006                  # 认输
    FORFEIT_RESP = 4007

    # ---- 排行 / 战绩 ----
    LEADERBOARD_REQ = 5001
    LEADERBOARD_RESP = 5002
    USER_STATS_REQ = 5003
    USER_STATS_RESP = 5004

    # ---- 错误 ----
    ERROR = 9999


# 服务端推送给客户端的消息类型
INBOUND_TYPES: frozenset[MsgType] = frozenset({
    MsgType.PONG,
    MsgType.LOGIN_RESP,
    MsgType.REGISTER_RESP,
    MsgType.ROOM_INFO,
    MsgType.CREATE_ROOM_RESP,
    MsgType.JOIN_ROOM_RESP,
    MsgType.LEAVE_ROOM_RESP,
    MsgType.ROOM_LIST_RESP,
    MsgType.PLAYER_JOIN,
    MsgType.PLAYER_LEAVE,
    MsgType.MOVE_RESP,
    MsgType.GAME_OVER,
    MsgType.GAME_START,
    MsgType.BOARD_UPDATE,
    MsgType.FORFEIT_RESP,
    MsgType.LEADERBOARD_RESP,
    MsgType.USER_STATS_RESP,
    MsgType.ERROR,
})


# 有意不处理的推送: Pong 不做存活检测, RoomInfo 无对应界面
IGNORED_TYPES: frozenset[MsgType] = frozenset({MsgType.PONG, MsgType.ROOM_INFO})


# ==================== 消息数据类 ====================

@dataclass
class Envelope:
    """线上信封

    格式:
    {
        "type": 2001,
        "payload": { ... }
    }
    """
    type: MsgType
    payload: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        """序列化为 JSON 字符串"""
        return json.dumps({
            "type": int(self.type),
            "payload": self.payload,
        }, ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str | bytes):
        """从 JSON 字符串反序列化

        Raises:
            ValueError: JSON 非法或类型码未知
        """
        obj = json.loads(raw)
        if not isinstance(obj, dict):
            raise ValueError("envelope must be a JSON object")
        payload = obj.get("payload") or {}
        if not isinstance(payload, dict):
            raise ValueError("payload must be a JSON object")
        return cls(type=MsgType(obj["type"]), payload=payload)

    @property
    def code(self) -> int | None:
        return self.payload.get("code")

    @property
    def ok(self) -> bool:
        return self.payload.get("code") == SUCCESS_CODE


@dataclass
class ServerMsg(Envelope):
    """服务端 → 客户端消息

    工厂方法主要用于测试与本地模拟。
    """

    @classmethod
    def error(cls, message: str) -> ServerMsg:
        return cls(type=MsgType.ERROR, payload={"message": message})

    @classmethod
    def pong(cls) -> ServerMsg:
        return cls(type=MsgType.PONG)

    @classmethod
    def login_resp(cls, code: int, user_id: Any = None, token: str = "",
                   message: str = "") -> ServerMsg:
        return cls(type=MsgType.LOGIN_RESP, payload={
            "code": code,
            "user_id": user_id,
            "token": token,
            "message": message,
        })

    @classmethod
    def register_resp(cls, code: int, message: str = "") -> ServerMsg:
        return cls(type=MsgType.REGISTER_RESP, payload={"code": code, "message": message})

    @classmethod
    def create_room_resp(cls, code: int, room_id: Any = None,
                         message: str = "") -> ServerMsg:
        return cls(type=MsgType.CREATE_ROOM_RESP, payload={
            "code": code, "room_id": room_id, "message": message,
        })

    @classmethod
    def join_room_resp(cls, code: int, room_id: Any = None,
                       message: str = "") -> ServerMsg:
        return cls(type=MsgType.JOIN_ROOM_RESP, payload={
            "code": code, "room_id": room_id, "message": message,
        })

    @classmethod
    def leave_room_resp(cls, code: int = SUCCESS_CODE) -> ServerMsg:
        return cls(type=MsgType.LEAVE_ROOM_RESP, payload={"code": code})

    @classmethod
    def room_list_resp(cls, rooms: list[dict[str, Any]],
                       code: int = SUCCESS_CODE) -> ServerMsg:
        return cls(type=MsgType.ROOM_LIST_RESP, payload={"code": code, "rooms": rooms})

    @classmethod
    def player_join(cls, username: str) -> ServerMsg:
        return cls(type=MsgType.PLAYER_JOIN, payload={"username": username})

    @classmethod
    def player_leave(cls, username: str = "") -> ServerMsg:
        return cls(type=MsgType.PLAYER_LEAVE, payload={"username": username})

    @classmethod
    def move_resp(cls, code: int, message: str = "") -> ServerMsg:
        return cls(type=MsgType.MOVE_RESP, payload={"code": code, "message": message})

    @classmethod
    def game_start(cls, room_id: Any, players: list[Any], first_player: Any) -> ServerMsg:
        return cls(type=MsgType.GAME_START, payload={
            "room_id": room_id,
            "players": players,
            "first_player": first_player,
        })

    @classmethod
    def board_update(cls, board: list[list[int]], current_player: Any,
                     **extra: Any) -> ServerMsg:
        return cls(type=MsgType.BOARD_UPDATE, payload={
            "board": board,
            "current_player": current_player,
            **extra,
        })

    @classmethod
    def game_over(cls, winner: Any, **extra: Any) -> ServerMsg:
        return cls(type=MsgType.GAME_OVER, payload={"winner": winner, **extra})

    @classmethod
    def forfeit_resp(cls, code: int, message: str = "") -> ServerMsg:
        return cls(type=MsgType.FORFEIT_RESP, payload={"code": code, "message": message})

    @classmethod
    def leaderboard_resp(cls, ranks: list[dict[str, Any]],
                         code: int = SUCCESS_CODE) -> ServerMsg:
        return cls(type=MsgType.LEADERBOARD_RESP, payload={"code": code, "ranks": ranks})

    @classmethod
    def user_stats_resp(cls, score: int, code: int = SUCCESS_CODE) -> ServerMsg:
        return cls(type=MsgType.USER_STATS_RESP, payload={"code": code, "score": score})


@dataclass
class ClientMsg(Envelope):
    """客户端 → 服务端消息"""

    # ---------- 工厂方法 ----------

    @classmethod
    def ping(cls) -> ClientMsg:
        return cls(type=MsgType.PING)

    @classmethod
    def login(cls, username: str, password: str) -> ClientMsg:
        return cls(type=MsgType.LOGIN, payload={
            "username": username,
            "password": password,
        })

    @classmethod
    def login_with_token(cls, token: str) -> ClientMsg:
        return cls(type=MsgType.LOGIN, payload={"token": token})

    @classmethod
    def register(cls, username: str, password: str) -> ClientMsg:
        return cls(type=MsgType.REGISTER, payload={
            "username": username,
            "password": password,
        })

    @classmethod
    def create_room(cls, room_name: str) -> ClientMsg:
        return cls(type=MsgType.CREATE_ROOM, payload={"room_name": room_name})

    @classmethod
    def join_room(cls, room_id: Any) -> ClientMsg:
        return cls(type=MsgType.JOIN_ROOM, payload={"room_id": room_id})

    @classmethod
    def leave_room(cls, room_id: Any) -> ClientMsg:
        return cls(type=MsgType.LEAVE_ROOM, payload={"room_id": room_id})

    @classmethod
    def room_list(cls) -> ClientMsg:
        return cls(type=MsgType.ROOM_LIST)

    @classmethod
    def move(cls, room_id: Any, x: int, y: int) -> ClientMsg:
        return cls(type=MsgType.MOVE, payload={"room_id": room_id, "x": x, "y": y})

    @classmethod
    def forfeit(cls, room_id: Any) -> ClientMsg:
        return cls(type=MsgType.FORFEIT_REQ, payload={"room_id": room_id})

    @classmethod
    def leaderboard(cls, limit: int = 10) -> ClientMsg:
        return cls(type=MsgType.LEADERBOARD_REQ, payload={"limit": limit})

    @classmethod
    def user_stats(cls, user_id: Any) -> ClientMsg:
        return cls(type=MsgType.USER_STATS_REQ, payload={"user_id": user_id})
