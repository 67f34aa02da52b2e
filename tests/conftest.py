import pytest

from agrobot import redis_store
from agrobot.errors import TransportError
from agrobot.intent_resolver import LocalIntentResolver


@pytest.fixture
def anyio_backend():
    return "asyncio"


class FakeTransport:
    """In-process stand-in for the Watson transport."""

    def __init__(self, fail_create=False, fail_send=0, fail_delete=False, reply="remote reply"):
        self.fail_create = fail_create
        self.fail_send = fail_send
        self.fail_delete = fail_delete
        self.reply = reply
        self.created = 0
        self.sent = []
        self.deleted = []
        self.gate = None

    def is_configured(self):
        return True

    async def create_session(self):
        self.created += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_create:
            raise TransportError("create failed")
        return f"session-{self.created}"

    async def send_message(self, session_id, text, language):
        self.sent.append((session_id, text, language))
        if self.fail_send:
            self.fail_send -= 1
            raise TransportError("send failed")
        return self.reply

    async def delete_session(self, session_id):
        self.deleted.append(session_id)
        if self.fail_delete:
            raise TransportError("delete failed")


class FakeRedis:
    def __init__(self):
        self.store = {}

    async def set(self, key, value, nx=False, ex=None):
        if nx and key in self.store:
            return None
        self.store[key] = value
        return True

    async def delete(self, key):
        self.store.pop(key, None)


class FakeRelay:
    def __init__(self, fail=False):
        self.fail = fail
        self.welcomed = []

    def send_welcome(self, to_number):
        self.welcomed.append(to_number)
        if self.fail:
            raise TransportError("twilio down")
        return f"SM{len(self.welcomed)}"


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def resolver():
    return LocalIntentResolver(delay=0)


@pytest.fixture
def fake_redis(monkeypatch):
    client = FakeRedis()
    monkeypatch.setattr(redis_store, "_client", client)
    return client


@pytest.fixture
def make_transport():
    return FakeTransport


@pytest.fixture
def relay():
    return FakeRelay()
