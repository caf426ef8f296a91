"""令牌持久化

只保存一个不透明的令牌字符串，启动时读取用于静默重新登录，登出时清除。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class CredentialStore(Protocol):
    def get(self) -> str | None: ...
    def set(self, token: str) -> None: ...
    def clear(self) -> None: ...


class MemoryCredentialStore:
    """进程内存储 (测试 / 不需要持久化的场景)"""

    def __init__(self, token: str | None = None):
        self._token = token

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileCredentialStore:
    """文件存储：令牌原样写入单个 UTF-8 文件"""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def get(self) -> str | None:
        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("读取令牌失败 %s: %s", self.path, e)
            return None
        return token or None

    def set(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token, encoding="utf-8")
        try:
            self.path.chmod(0o600)
        except OSError:
            logger.debug("无法修改令牌文件权限: %s", self.path)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
