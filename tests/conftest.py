"""测试公共夹具

FakeTransport 代替真实 WebSocket 连接，只记录出站消息；
FakeNotifier 记录阻塞提示并按预设回答确认框。
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# 确保可以导入项目模块
sys.path.insert(0, str(Path(__file__).parent.parent))

from game.config import ClientConfig
from i18n import get_locale, set_locale
from net.client import GomokuClient
from net.credentials import MemoryCredentialStore
from net.protocol import Envelope, ServerMsg


class FakeTransport:
    def __init__(self, is_open: bool = True):
        self.is_open = is_open
        self.sent: list[Envelope] = []

    async def send(self, msg: Envelope) -> bool:
        if not self.is_open:
            return False
        self.sent.append(msg)
        return True

    def types(self) -> list[int]:
        return [m.type for m in self.sent]

    def clear(self) -> None:
        self.sent.clear()


class FakeNotifier:
    def __init__(self, answer: bool = True):
        self.answer = answer
        self.messages: list[str] = []
        self.confirms: list[str] = []

    def blocking_message(self, text: str) -> None:
        self.messages.append(text)

    def confirm(self, text: str) -> bool:
        self.confirms.append(text)
        return self.answer

    @property
    def last(self) -> str | None:
        return self.messages[-1] if self.messages else None


@pytest.fixture(autouse=True)
def _zh_locale():
    original = get_locale()
    set_locale("zh_CN")
    yield
    set_locale(original)


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def store() -> MemoryCredentialStore:
    return MemoryCredentialStore()


@pytest.fixture
def client(notifier, transport, store) -> GomokuClient:
    c = GomokuClient(notifier, url="ws://test/ws", config=ClientConfig(leaderboard_limit=10),
                     store=store)
    c.dispatcher.attach(transport)
    return c


async def deliver(client: GomokuClient, msg: ServerMsg) -> bool:
    """模拟服务端推送一条消息"""
    return await client.dispatcher.dispatch(msg.to_json())


async def logged_in(client: GomokuClient, transport: FakeTransport,
                    user_id="alice", token="T1") -> GomokuClient:
    """把客户端推进到已登录状态，并清空出站记录"""
    await deliver(client, ServerMsg.login_resp(200, user_id=user_id, token=token))
    transport.clear()
    return client
