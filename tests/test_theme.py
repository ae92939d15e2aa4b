import json

import pytest

from babaclub.core.errors import ApiError
from babaclub.schemas.auth import Theme
from babaclub.state.theme import ThemeStore


@pytest.mark.anyio
async def test_dark_by_default(client, storage):
    assert client.theme.theme is Theme.DARK
    assert storage.get("theme") == "dark"


@pytest.mark.anyio
async def test_saved_light_theme(client, storage):
    storage.set("theme", "light")
    assert client.theme.theme is Theme.LIGHT
    assert not client.theme.is_dark


@pytest.mark.anyio
async def test_identity_theme_wins(logged_client, storage):
    storage.set("theme", "light")
    assert logged_client.session.identity.theme is Theme.DARK
    assert logged_client.theme.is_dark


@pytest.mark.anyio
async def test_toggle_persists_and_restores_identity(logged_client, storage):
    new = await logged_client.theme.toggle()

    assert new is Theme.LIGHT
    assert storage.get("theme") == "light"
    assert logged_client.session.identity.theme is Theme.LIGHT
    assert json.loads(storage.get("usuario"))["theme"] == "LIGHT"


@pytest.mark.anyio
async def test_toggle_sync_failure_keeps_local_choice(logged_client, storage, caplog):
    async def failing_sync(theme):
        raise ApiError("Erro ao atualizar tema")

    store = ThemeStore(storage, logged_client.session, sync=failing_sync)
    assert await store.toggle() is Theme.LIGHT
    assert storage.get("theme") == "light"
    assert "Erro ao atualizar tema" in caplog.text
