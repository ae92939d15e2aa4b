from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    level: str  # "success" | "error" | "info"
    message: str


class Notifier(Protocol):
    def success(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...

    def info(self, message: str) -> None:
        ...


class NotificationCenter:
    """
    Fila de notificações transitórias (os "toasts").
    A camada de apresentação consome com ``drain()``; tudo também vai para o log.
    """

    def __init__(self, maxlen: int = 100) -> None:
        self._pending: Deque[Notification] = deque(maxlen=maxlen)

    def _push(self, level: str, message: str) -> None:
        self._pending.append(Notification(level=level, message=message))

    def success(self, message: str) -> None:
        logger.info("toast success: %s", message)
        self._push("success", message)

    def error(self, message: str) -> None:
        logger.warning("toast error: %s", message)
        self._push("error", message)

    def info(self, message: str) -> None:
        logger.info("toast info: %s", message)
        self._push("info", message)

    @property
    def pending(self) -> List[Notification]:
        return list(self._pending)

    def drain(self) -> List[Notification]:
        out = list(self._pending)
        self._pending.clear()
        return out

    def messages(self, level: str | None = None) -> List[str]:
        return [n.message for n in self._pending if level is None or n.level == level]
