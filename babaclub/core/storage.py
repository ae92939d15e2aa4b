"""Storage durável do cliente (equivalente ao localStorage do navegador).

Chaves conhecidas: ``token``, ``usuario``, ``associacao``, ``app:view``, ``theme`` e
``mkp:rememberedEmail``. Valores são sempre strings; quem precisa de JSON serializa.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.engine import Engine

from babaclub.db import Base, make_engine, make_sessionmaker
from babaclub.models.storage_entry import StorageEntry

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
IDENTITY_KEY = "usuario"
ORGANIZATION_KEY = "associacao"
VIEW_KEY = "app:view"
THEME_KEY = "theme"
REMEMBERED_EMAIL_KEY = "mkp:rememberedEmail"


class Storage(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryStorage:
    """Storage em memória (testes e execuções sem disco)."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class SqlStorage:
    """Storage chave/valor numa tabela ``client_storage`` (SQLite por padrão)."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._sessions = make_sessionmaker(engine)
        Base.metadata.create_all(bind=engine, tables=[StorageEntry.__table__])

    @classmethod
    def from_url(cls, url: str) -> "SqlStorage":
        return cls(make_engine(url))

    def get(self, key: str) -> Optional[str]:
        with self._sessions() as db:
            entry = db.scalar(select(StorageEntry).where(StorageEntry.key == key))
            return entry.value if entry else None

    def set(self, key: str, value: str) -> None:
        with self._sessions() as db:
            entry = db.get(StorageEntry, key)
            if entry is None:
                db.add(StorageEntry(key=key, value=value))
            else:
                entry.value = value
            db.commit()

    def remove(self, key: str) -> None:
        with self._sessions() as db:
            entry = db.get(StorageEntry, key)
            if entry is not None:
                db.delete(entry)
                db.commit()


class NamespacedStorage:
    """Prefixa as chaves para que stores de apps diferentes não colidam."""

    def __init__(self, inner: Storage, namespace: str) -> None:
        self._inner = inner
        self._prefix = f"{namespace}:" if namespace else ""

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        return self._inner.get(self._key(key))

    def set(self, key: str, value: str) -> None:
        self._inner.set(self._key(key), value)

    def remove(self, key: str) -> None:
        self._inner.remove(self._key(key))


def read_json(storage: Storage, key: str) -> Any:
    """Lê e desserializa uma chave; valor ausente ou corrompido vira ``None``."""
    raw = storage.get(key)
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("valor corrompido no storage key=%s, ignorando", key)
        return None


def write_json(storage: Storage, key: str, value: Any) -> None:
    storage.set(key, json.dumps(value, ensure_ascii=False, default=str))
