import pytest
from httpx import ASGITransport

from babaclub.core.notify import NotificationCenter
from babaclub.core.settings import Settings
from babaclub.core.storage import MemoryStorage
from babaclub.main import build_client

from fake_api import FakeBackend, create_app


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def notifications():
    return NotificationCenter()


@pytest.fixture
def settings(monkeypatch):
    # isola dos envs/.env da máquina de quem roda
    for name in ("BABA_ENV", "ENV", "BABA_API_URL", "API_URL", "BABA_STORAGE_NAMESPACE", "STORAGE_NAMESPACE"):
        monkeypatch.delenv(name, raising=False)
    return Settings(_env_file=None, API_URL="http://baba.test")


@pytest.fixture
async def client(backend, storage, notifications, settings):
    app = create_app(backend)
    c = build_client(settings, transport=ASGITransport(app=app), storage=storage, notifications=notifications)
    c.start()
    yield c
    await c.aclose()


@pytest.fixture
async def logged_client(client, backend):
    ok = await client.session.login({"email": "ana@baba.com", "senha": "segredo"})
    assert ok
    client.notifications.drain()
    backend.calls.clear()
    return client
