"""
登录会话测试
"""

import pytest

from conftest import deliver, logged_in
from game.enums import Page
from game.events import ViewEventType
from net.protocol import MsgType, ServerMsg


def _sent(transport):
    return [(m.type, m.payload) for m in transport.sent]


class TestLogin:
    @pytest.mark.asyncio
    async def test_alice_login_flow(self, client, transport, store):
        assert await client.login("alice", "pw") is True
        assert _sent(transport) == [(MsgType.LOGIN, {"username": "alice", "password": "pw"})]
        transport.clear()

        await deliver(client, ServerMsg.login_resp(200, user_id="alice", token="T1"))

        assert store.get() == "T1"
        assert client.ctx.session.user_id == "alice"
        assert client.ctx.session.authenticated is True
        assert client.ctx.page is Page.LOBBY
        assert _sent(transport) == [
            (MsgType.USER_STATS_REQ, {"user_id": "alice"}),
            (MsgType.ROOM_LIST, {}),
            (MsgType.LEADERBOARD_REQ, {"limit": 10}),
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("username,password", [("", "pw"), ("alice", ""), ("  ", "pw")])
    async def test_blank_credentials_not_sent(self, client, transport, notifier,
                                              username, password):
        assert await client.login(username, password) is False
        assert transport.sent == []
        assert notifier.messages == ["请输入用户名和密码"]

    @pytest.mark.asyncio
    async def test_username_trimmed(self, client, transport):
        await client.login("  alice ", "pw")
        assert transport.sent[0].payload["username"] == "alice"

    @pytest.mark.asyncio
    async def test_login_failure_surfaces_message(self, client, transport, notifier, store):
        await client.login("alice", "wrong")
        await deliver(client, ServerMsg.login_resp(401, message="用户名或密码错误"))

        assert notifier.messages == ["用户名或密码错误"]
        assert client.ctx.session is None
        assert client.ctx.page is Page.AUTH
        assert store.get() is None

    @pytest.mark.asyncio
    async def test_failure_without_message_uses_code(self, client, notifier):
        await deliver(client, ServerMsg.login_resp(500))
        assert "500" in notifier.last

    @pytest.mark.asyncio
    async def test_login_emits_view_events(self, client, transport):
        seen = []
        client.bus.subscribe_all(lambda e: seen.append(e.event_type))
        await deliver(client, ServerMsg.login_resp(200, user_id=7, token="T"))
        assert seen[:2] == [ViewEventType.LOGGED_IN, ViewEventType.PAGE_CHANGED]


class TestTokenLogin:
    @pytest.mark.asyncio
    async def test_uses_stored_token(self, client, transport, store):
        store.set("T0")
        assert await client.sessions.login_with_token() is True
        assert _sent(transport) == [(MsgType.LOGIN, {"token": "T0"})]

    @pytest.mark.asyncio
    async def test_no_token_nothing_sent(self, client, transport):
        assert await client.sessions.login_with_token() is False
        assert transport.sent == []

    @pytest.mark.asyncio
    async def test_failed_token_login_clears_token(self, client, store, notifier):
        store.set("STALE")
        await client.sessions.login_with_token()
        await deliver(client, ServerMsg.login_resp(401, message="令牌已过期"))

        assert store.get() is None
        assert client.ctx.session is None
        assert notifier.messages == ["令牌已过期"]

    @pytest.mark.asyncio
    async def test_on_open_attempts_token_login(self, client, transport, store):
        store.set("T1")
        await client._on_open()
        try:
            assert _sent(transport) == [(MsgType.LOGIN, {"token": "T1"})]
        finally:
            client.heartbeat.stop()

    @pytest.mark.asyncio
    async def test_token_replaced_on_success(self, client, store):
        store.set("OLD")
        await client.sessions.login_with_token()
        await deliver(client, ServerMsg.login_resp(200, user_id="alice", token="NEW"))
        assert store.get() == "NEW"


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_success_returns_to_login(self, client, transport, notifier):
        assert await client.register("bob", "pw") is True
        assert _sent(transport) == [(MsgType.REGISTER, {"username": "bob", "password": "pw"})]
        transport.clear()

        await deliver(client, ServerMsg.register_resp(200))

        assert notifier.messages == ["注册成功，请登录"]
        assert client.ctx.page is Page.AUTH
        assert client.ctx.session is None
        assert transport.sent == []

    @pytest.mark.asyncio
    async def test_register_failure(self, client, notifier):
        await deliver(client, ServerMsg.register_resp(409, "用户名已存在"))
        assert notifier.messages == ["用户名已存在"]

    @pytest.mark.asyncio
    async def test_register_blank(self, client, transport, notifier):
        assert await client.register("bob", "") is False
        assert transport.sent == []


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_clears_everything(self, client, transport, store):
        await logged_in(client, transport)
        await deliver(client, ServerMsg.create_room_resp(200, room_id=42))

        assert await client.logout() is True

        assert store.get() is None
        assert client.ctx.session is None
        assert client.ctx.current_room is None
        assert client.ctx.page is Page.AUTH
