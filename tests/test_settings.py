import pytest
from pydantic import ValidationError

from babaclub.core.settings import Settings, get_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("BABA_ENV", "ENV", "BABA_API_URL", "API_URL", "BABA_API_TIMEOUT_S", "API_TIMEOUT_S", "BABA_LOG_LEVEL", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = Settings(_env_file=None)
    assert s.API_URL == "http://localhost:3000"
    assert s.ENV == "lab"
    assert s.API_TIMEOUT_S > 0


def test_env_alias_and_trailing_slash(monkeypatch):
    monkeypatch.setenv("BABA_API_URL", "https://api.baba.app/")
    monkeypatch.setenv("BABA_LOG_LEVEL", "debug")
    s = Settings(_env_file=None)
    assert s.API_URL == "https://api.baba.app"
    assert s.LOG_LEVEL == "DEBUG"


def test_prod_requires_https(monkeypatch):
    monkeypatch.setenv("BABA_ENV", "prod")
    monkeypatch.setenv("BABA_API_URL", "http://api.baba.app")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_timeout_must_be_positive(monkeypatch):
    monkeypatch.setenv("BABA_API_TIMEOUT_S", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_get_settings_is_cached(monkeypatch):
    get_settings.cache_clear()
    monkeypatch.setenv("BABA_API_URL", "http://um.test")
    first = get_settings()
    monkeypatch.setenv("BABA_API_URL", "http://outro.test")
    assert get_settings() is first
    assert first.API_URL == "http://um.test"

    get_settings.cache_clear()
    assert get_settings().API_URL == "http://outro.test"
    get_settings.cache_clear()
