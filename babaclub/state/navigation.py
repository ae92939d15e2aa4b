from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List, Optional, Union

from babaclub.core.storage import VIEW_KEY, Storage

logger = logging.getLogger(__name__)


class View(str, Enum):
    HOME = "home"
    ASSOCIACAO = "associacao"
    ASSOCIADOS = "associados"
    JOGOS = "jogos"
    ESTATISTICAS = "estatisticas"
    GALERIA = "galeria"
    USUARIOS = "usuarios"
    CONFIGURACOES = "configuracoes"
    PRODUTOS = "produtos"
    CATEGORIAS = "categorias"
    COMPRAS = "compras"
    VENDAS = "vendas"
    MENSALIDADES = "mensalidades"
    FINANCEIRO = "financeiro"


DEFAULT_VIEW = View.HOME

Listener = Callable[[View], None]


def parse_view(value: object) -> Optional[View]:
    """Valida qualquer entrada contra o enum; nunca levanta."""
    if isinstance(value, View):
        return value
    if not isinstance(value, str):
        return None
    try:
        return View(value.strip())
    except ValueError:
        return None


class NavigationStore:
    """
    Tela atual da aplicação, persistida em ``app:view``.
    Só troca de estado (e só notifica/persiste) quando a view realmente muda.
    """

    def __init__(self, storage: Storage) -> None:
        self._storage = storage
        self._listeners: List[Listener] = []
        self._current = self._restore()

    def _restore(self) -> View:
        try:
            stored = self._storage.get(VIEW_KEY)
        except Exception:
            logger.exception("Erro ao recuperar view salva")
            return DEFAULT_VIEW
        view = parse_view(stored)
        if view is None:
            if stored:
                logger.warning("view salva inválida (%r), usando %s", stored, DEFAULT_VIEW.value)
            return DEFAULT_VIEW
        return view

    @property
    def current(self) -> View:
        return self._current

    def go_to(self, view: Union[View, str]) -> bool:
        target = parse_view(view)
        if target is None:
            logger.warning("view desconhecida ignorada: %r", view)
            return False
        if target is self._current:
            return False

        self._current = target
        self._storage.set(VIEW_KEY, target.value)
        for listener in list(self._listeners):
            listener(target)
        return True

    def is_current(self, view: Union[View, str]) -> bool:
        return parse_view(view) is self._current

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
