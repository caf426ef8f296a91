"""客户端配置中心 (SSOT - 单一事实来源)

所有可配置的客户端参数应在此定义，支持从环境变量覆盖。
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

# 棋盘尺寸固定，不可配置
BOARD_SIZE = 15


def _get_env_float(key: str, default: float) -> float:
    """从环境变量获取浮点数配置"""
    value = os.environ.get(key)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            pass
    return default


def _get_env_int(key: str, default: int) -> int:
    """从环境变量获取整数配置"""
    value = os.environ.get(key)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            pass
    return default


def _get_env_bool(key: str, default: bool) -> bool:
    """从环境变量获取布尔配置"""
    value = os.environ.get(key, "").lower()
    if value in ("true", "1", "yes", "on"):
        return True
    elif value in ("false", "0", "no", "off"):
        return False
    return default


def _default_token_file() -> str:
    return str(Path.home() / ".gomoku" / "token")


@dataclass(frozen=True)
class ClientConfig:
    """客户端配置类 (不可变)

    所有配置项支持通过环境变量覆盖：
    - GOMOKU_ORIGIN: 宿主页面来源 (决定 ws/wss 及主机)
    - GOMOKU_WS_PATH: WebSocket 端点路径
    - GOMOKU_RECONNECT_DELAY: 断线后重连等待秒数
    - GOMOKU_HEARTBEAT: 心跳间隔秒数
    - GOMOKU_LEADERBOARD_LIMIT: 排行榜条数
    - GOMOKU_TOKEN_FILE: 令牌持久化文件
    """
    # ==================== 网络配置 ====================
    origin: str = field(
        default_factory=lambda: os.environ.get("GOMOKU_ORIGIN", "http://localhost:8080")
    )
    ws_path: str = field(
        default_factory=lambda: os.environ.get("GOMOKU_WS_PATH", "/ws")
    )
    reconnect_delay: float = field(
        default_factory=lambda: _get_env_float("GOMOKU_RECONNECT_DELAY", 3.0)
    )
    heartbeat_interval: float = field(
        default_factory=lambda: _get_env_float("GOMOKU_HEARTBEAT", 30.0)
    )

    # ==================== 大厅 ====================
    leaderboard_limit: int = field(
        default_factory=lambda: _get_env_int("GOMOKU_LEADERBOARD_LIMIT", 10)
    )

    # ==================== 凭据 ====================
    token_file: str = field(
        default_factory=lambda: os.environ.get("GOMOKU_TOKEN_FILE") or _default_token_file()
    )

    # ==================== 日志与界面 ====================
    log_level: str = field(
        default_factory=lambda: os.environ.get("GOMOKU_LOG_LEVEL", "INFO")
    )
    locale: str = field(
        default_factory=lambda: os.environ.get("GOMOKU_LOCALE", "zh_CN")
    )
    debug_mode: bool = field(
        default_factory=lambda: _get_env_bool("GOMOKU_DEBUG", False)
    )

    @classmethod
    def from_env(cls) -> ClientConfig:
        """从环境变量创建配置实例"""
        return cls()

    def validate(self) -> list[str]:
        """校验配置，返回错误描述列表 (空列表表示合法)"""
        errors: list[str] = []
        scheme = urlparse(self.origin).scheme
        if scheme not in ("http", "https") or not urlparse(self.origin).netloc:
            errors.append(f"origin must be an http(s) URL, got {self.origin!r}")
        if not self.ws_path.startswith("/"):
            errors.append(f"ws_path must start with '/', got {self.ws_path!r}")
        if self.reconnect_delay < 0:
            errors.append(f"reconnect_delay must be >= 0, got {self.reconnect_delay}")
        if self.heartbeat_interval <= 0:
            errors.append(f"heartbeat_interval must be > 0, got {self.heartbeat_interval}")
        if self.leaderboard_limit <= 0:
            errors.append(f"leaderboard_limit must be > 0, got {self.leaderboard_limit}")
        if self.locale not in ("zh_CN", "en_US"):
            errors.append(f"locale must be zh_CN or en_US, got {self.locale!r}")
        return errors


# 全局配置单例
_config: ClientConfig | None = None


def get_config() -> ClientConfig:
    """获取全局配置实例（懒加载）"""
    global _config
    if _config is None:
        _config = ClientConfig.from_env()
    return _config


def reset_config() -> None:
    """重置配置（用于测试）"""
    global _config
    _config = None
