"""房间目录客户端

- 房间列表每次应答整体替换，不做逐项合并
- 创建成功: 自己占第一个座位，第二个座位等待加入通知
- 加入成功: 建立当前房间并立即重新拉取房间列表
- 离开: 收到任何 LeaveRoomResp 都无条件清除当前房间并回到大厅 (幂等)
- PlayerJoin / PlayerLeave 只改当前房间的第二个座位

协议没有房间版本号或序号，通知与列表刷新交错到达时以后处理者为准。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from game.context import CurrentRoom, Room
from game.enums import Page
from game.events import ViewEventType
from game.exceptions import NotAuthenticatedError, ProtocolError, ValidationError
from i18n import t

from .protocol import ClientMsg, MsgType

if TYPE_CHECKING:
    from game.context import ClientContext
    from game.events import EventBus

    from .dispatcher import Dispatcher
    from .models import LeaveRoomResp, PlayerNotice, RoomListResp, RoomResp

logger = logging.getLogger(__name__)


class RoomDirectoryClient:
    def __init__(self, ctx: ClientContext, dispatcher: Dispatcher, bus: EventBus):
        self.ctx = ctx
        self._dispatcher = dispatcher
        self._bus = bus

    def bind(self, dispatcher: Dispatcher) -> None:
        dispatcher.register(MsgType.CREATE_ROOM_RESP, self.on_create_room_resp)
        dispatcher.register(MsgType.JOIN_ROOM_RESP, self.on_join_room_resp)
        dispatcher.register(MsgType.LEAVE_ROOM_RESP, self.on_leave_room_resp)
        dispatcher.register(MsgType.ROOM_LIST_RESP, self.on_room_list_resp)
        dispatcher.register(MsgType.PLAYER_JOIN, self.on_player_join)
        dispatcher.register(MsgType.PLAYER_LEAVE, self.on_player_leave)

    def _require_session(self) -> None:
        if not self.ctx.authenticated:
            raise NotAuthenticatedError()

    def default_room_name(self) -> str:
        return t("room.default_name", user=self.ctx.user_id)

    # ==================== 用户操作 ====================

    async def create_room(self, name: str | None = None) -> bool:
        self._require_session()
        if name is None:
            name = self.default_room_name()
        name = name.strip()
        if not name:
            raise ValidationError(t("exc.room_name"), field="room_name")
        logger.info("创建房间: %s", name)
        return await self._dispatcher.send(ClientMsg.create_room(name))

    async def join_room(self, room_id: Any) -> bool:
        self._require_session()
        logger.info("加入房间: %s", room_id)
        return await self._dispatcher.send(ClientMsg.join_room(room_id))

    async def leave_room(self) -> bool:
        room = self.ctx.current_room
        if room is None:
            logger.debug("不在任何房间，忽略离开请求")
            return False
        logger.info("离开房间: %s", room.room_id)
        return await self._dispatcher.send(ClientMsg.leave_room(room.room_id))

    async def refresh(self) -> bool:
        return await self._dispatcher.send(ClientMsg.room_list())

    # ==================== 服务端应答 ====================

    def on_create_room_resp(self, payload: RoomResp) -> None:
        if not payload.ok:
            raise ProtocolError(payload.message, code=payload.code,
                                msg_type=MsgType.CREATE_ROOM_RESP)
        self._enter(CurrentRoom(room_id=payload.room_id, members=[self.ctx.user_id, None]))

    async def on_join_room_resp(self, payload: RoomResp) -> None:
        if not payload.ok:
            raise ProtocolError(payload.message, code=payload.code,
                                msg_type=MsgType.JOIN_ROOM_RESP)
        room = CurrentRoom(room_id=payload.room_id)
        known = self.ctx.directory.get(payload.room_id)
        # 目录快照可能过期或已满；只信任房主，自己总占一个座位
        creator = known.members[0] if known and known.members else None
        members: list[Any] = [creator, self.ctx.user_id]
        if creator == self.ctx.user_id:
            members = [creator, None]
        room.set_members(members)
        self._enter(room)
        await self.refresh()

    async def on_leave_room_resp(self, payload: LeaveRoomResp) -> None:
        # 成功/失败不做区分
        left = self.ctx.current_room.room_id if self.ctx.current_room else None
        self.ctx.current_room = None
        self.ctx.reset_game()
        self.ctx.page = Page.LOBBY
        logger.info("已离开房间: %s (code=%s)", left, payload.code)
        self._bus.emit(ViewEventType.ROOM_LEFT, room_id=left)
        self._bus.emit(ViewEventType.PAGE_CHANGED, page=Page.LOBBY)
        await self.refresh()

    def on_room_list_resp(self, payload: RoomListResp) -> None:
        if not payload.ok:
            logger.debug("房间列表查询失败: code=%s", payload.code)
            return
        self.ctx.directory = {
            entry.room_id: Room(
                room_id=entry.room_id,
                name=entry.room_name,
                members=list(entry.players),
                creator_id=entry.creator_id,
                status=entry.status,
            )
            for entry in payload.rooms
        }
        current = self.ctx.current_room
        if current is not None and current.room_id in self.ctx.directory:
            current.set_members(self.ctx.directory[current.room_id].members)
            self._bus.emit(ViewEventType.OPPONENT_CHANGED, room=current)
        logger.debug("房间列表: %d 个房间", len(self.ctx.directory))
        self._bus.emit(ViewEventType.ROOMS_UPDATED, rooms=list(self.ctx.directory.values()))

    def on_player_join(self, payload: PlayerNotice) -> None:
        room = self.ctx.current_room
        if room is None:
            logger.debug("不在房间中，忽略 PlayerJoin")
            return
        room.members[1] = payload.username or payload.user_id
        logger.info("玩家加入: %s", room.members[1])
        self._bus.emit(ViewEventType.OPPONENT_CHANGED, room=room,
                       status=t("notify.opponent_joined"))

    def on_player_leave(self, payload: PlayerNotice) -> None:
        room = self.ctx.current_room
        if room is None:
            logger.debug("不在房间中，忽略 PlayerLeave")
            return
        logger.info("玩家离开: %s", room.members[1])
        room.members[1] = None
        self._bus.emit(ViewEventType.OPPONENT_CHANGED, room=room,
                       status=t("notify.opponent_left"))

    def _enter(self, room: CurrentRoom) -> None:
        self.ctx.current_room = room
        self.ctx.reset_game()
        self.ctx.page = Page.ROOM
        logger.info("进入房间: %s members=%s", room.room_id, room.members)
        self._bus.emit(ViewEventType.ROOM_ENTERED, room=room)
        self._bus.emit(ViewEventType.PAGE_CHANGED, page=Page.ROOM)
