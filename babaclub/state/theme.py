from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from babaclub.core.errors import ApiError
from babaclub.core.storage import THEME_KEY, Storage
from babaclub.schemas.auth import Theme
from babaclub.state.session import SessionStore

logger = logging.getLogger(__name__)

ThemeSync = Callable[[Theme], Awaitable[object]]


class ThemeStore:
    """
    Tema claro/escuro. Prioridade: tema do usuário logado, depois ``theme`` salvo,
    depois dark (padrão).
    """

    def __init__(self, storage: Storage, session: SessionStore, sync: Optional[ThemeSync] = None) -> None:
        self._storage = storage
        self._session = session
        self._sync = sync

    @property
    def theme(self) -> Theme:
        identity = self._session.identity
        if identity is not None and identity.theme is not None:
            return identity.theme
        saved = (self._storage.get(THEME_KEY) or "").lower()
        return Theme.LIGHT if saved == "light" else Theme.DARK

    @property
    def is_dark(self) -> bool:
        return self.theme is Theme.DARK

    def apply(self) -> Theme:
        """Grava o tema efetivo no storage (chamado na inicialização)."""
        theme = self.theme
        self._storage.set(THEME_KEY, theme.value.lower())
        return theme

    async def toggle(self) -> Theme:
        new_theme = Theme.LIGHT if self.is_dark else Theme.DARK
        self._storage.set(THEME_KEY, new_theme.value.lower())
        self._session.update_identity(theme=new_theme)

        if self._sync is not None:
            try:
                await self._sync(new_theme)
            except ApiError as exc:
                # preferência local já aplicada; servidor fica para a próxima
                logger.warning("Erro ao atualizar tema: %s", exc.message)
        return new_theme
