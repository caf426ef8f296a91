"""网络模块
基于 WebSocket 的五子棋客户端运行时
"""

from .protocol import INBOUND_TYPES, SUCCESS_CODE, ClientMsg, Envelope, MsgType, ServerMsg

__all__ = [
    "MsgType", "Envelope", "ServerMsg", "ClientMsg",
    "INBOUND_TYPES", "SUCCESS_CODE",
]
