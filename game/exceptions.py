"""客户端异常模块
定义五子棋客户端的各类异常，提供明确的错误类型和信息

分类:
- ProtocolError   : 服务端应答 code 非 200，携带服务端消息
- TransportError  : 连接断开，只记录日志并静默重连，从不提示用户
- ValidationError : 本地输入不合法，在发送前拦截并提示用户
未注册处理器的消息类型直接丢弃，不产生异常。
"""

from __future__ import annotations

from i18n import t as _t


class ClientError(Exception):
    """客户端异常基类

    所有客户端相关的异常都应该继承此类，
    提供统一的异常处理接口。
    """

    def __init__(self, message: str, details: dict | None = None):
        """初始化客户端异常

        Args:
            message: 错误消息 (面向用户)
            details: 额外的错误详情（可选）
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# ==================== 协议 / 传输 ====================


class ProtocolError(ClientError):
    """业务应答失败

    当服务端应答的 code 不是成功码时抛出，不做重试
    """

    def __init__(self, message: str | None = None, code: int | None = None,
                 msg_type: int | None = None):
        if not message:
            message = _t("exc.protocol", code=code)
        details = {}
        if code is not None:
            details["code"] = code
        if msg_type is not None:
            details["msg_type"] = msg_type
        super().__init__(message, details)
        self.code = code
        self.msg_type = msg_type


class TransportError(ClientError):
    """传输层异常

    连接断开/无法建立连接。由重连策略处理，不向用户展示
    """

    def __init__(self, message: str | None = None, url: str | None = None):
        if message is None:
            message = _t("exc.transport")
        details = {"url": url} if url else {}
        super().__init__(message, details)
        self.url = url


# ==================== 本地校验 ====================


class ValidationError(ClientError):
    """本地输入校验失败

    在发送前拦截 (例如空的用户名/密码)
    """

    def __init__(self, message: str | None = None, field: str | None = None):
        if message is None:
            message = _t("exc.validation")
        details = {"field": field} if field else {}
        super().__init__(message, details)
        self.field = field


class NotAuthenticatedError(ValidationError):
    """未登录时执行需要身份的操作"""

    def __init__(self, message: str | None = None):
        super().__init__(message or _t("exc.not_authenticated"), field="session")


class IllegalMoveError(ValidationError):
    """本地落子预检失败

    reason 取值: no_game / not_your_turn / out_of_bounds / occupied
    """

    def __init__(self, reason: str, x: int | None = None, y: int | None = None):
        super().__init__(_t(f"exc.move.{reason}", x=x, y=y), field="move")
        self.reason = reason
        self.x = x
        self.y = y
        if x is not None:
            self.details["x"] = x
        if y is not None:
            self.details["y"] = y
        self.details["reason"] = reason
