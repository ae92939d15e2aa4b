"""
Filtro/ordenação/seleção das listagens.

``project(items, spec, state)`` é uma função pura: mesma coleção + mesmo estado de filtro
sempre geram a mesma lista (sem cache escondido). A seleção (``Selection``) vive à parte
e não é tocada por mudanças de filtro.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import (
    Any,
    Callable,
    Generic,
    Hashable,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Set,
    TypeVar,
)

T = TypeVar("T")


class StatusFilter(str, Enum):
    ALL = "todos"
    ACTIVE = "ativos"
    INACTIVE = "inativos"


@dataclass(frozen=True)
class SortKey(Generic[T]):
    key: Callable[[T], Any]
    reverse: bool = False


@dataclass(frozen=True)
class ListSpec(Generic[T]):
    search_fields: Sequence[Callable[[T], Any]] = ()
    status: Optional[Callable[[T], Any]] = None
    # nome -> predicado(item, valor do filtro)
    dimensions: Mapping[str, Callable[[T, Any], bool]] = field(default_factory=dict)
    sorts: Mapping[str, SortKey[T]] = field(default_factory=dict)
    default_sort: Optional[str] = None


@dataclass(frozen=True)
class FilterState:
    search: str = ""
    status: Any = StatusFilter.ALL
    dimensions: Mapping[str, Any] = field(default_factory=dict)
    sort: Optional[str] = None

    def with_search(self, search: str) -> "FilterState":
        return replace(self, search=search)

    def with_status(self, status: Any) -> "FilterState":
        return replace(self, status=status)

    def with_dimension(self, name: str, value: Any) -> "FilterState":
        dims = dict(self.dimensions)
        dims[name] = value
        return replace(self, dimensions=dims)

    def with_sort(self, sort: Optional[str]) -> "FilterState":
        return replace(self, sort=sort)

    def cleared(self) -> "FilterState":
        # limpa filtros, mantém a ordenação escolhida
        return FilterState(sort=self.sort)


def _inactive(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _matches_search(item: Any, fields: Sequence[Callable[[Any], Any]], needle: str) -> bool:
    for get in fields:
        value = get(item)
        if value is None:
            continue
        if needle in str(_plain(value)).lower():
            return True
    return False


def _matches_status(value: Any, wanted: Any) -> bool:
    if wanted is StatusFilter.ACTIVE or wanted == StatusFilter.ACTIVE.value:
        return bool(value)
    if wanted is StatusFilter.INACTIVE or wanted == StatusFilter.INACTIVE.value:
        return not value
    return _plain(value) == _plain(wanted)


def project(items: Iterable[T], spec: ListSpec[T], state: FilterState) -> List[T]:
    result = list(items)

    needle = (state.search or "").strip().lower()
    if needle and spec.search_fields:
        result = [i for i in result if _matches_search(i, spec.search_fields, needle)]

    status = state.status
    if spec.status is not None and not _inactive(status) and status != StatusFilter.ALL:
        get_status = spec.status
        result = [i for i in result if _matches_status(get_status(i), status)]

    for name, value in state.dimensions.items():
        if _inactive(value):
            continue
        pred = spec.dimensions[name]
        result = [i for i in result if pred(i, value)]

    sort_name = state.sort or spec.default_sort
    if sort_name:
        sort = spec.sorts[sort_name]
        # sorted é estável, inclusive com reverse=True
        result = sorted(result, key=sort.key, reverse=sort.reverse)

    return result


def ids_of(items: Iterable[Any], id_of: Callable[[Any], Hashable] = lambda i: i.id) -> List[Hashable]:
    return [id_of(i) for i in items]


class Selection:
    """Conjunto de ids selecionados para ações em lote."""

    def __init__(self, ids: Iterable[Hashable] = ()) -> None:
        self._ids: Set[Hashable] = set(ids)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(list(self._ids))

    @property
    def ids(self) -> frozenset:
        return frozenset(self._ids)

    def toggle(self, item_id: Hashable) -> bool:
        if item_id in self._ids:
            self._ids.discard(item_id)
            return False
        self._ids.add(item_id)
        return True

    def all_selected(self, visible_ids: Iterable[Hashable]) -> bool:
        return all(i in self._ids for i in visible_ids)

    def toggle_all(self, visible_ids: Iterable[Hashable]) -> None:
        visible = list(visible_ids)
        if self._ids and self.all_selected(visible):
            self._ids.clear()
        else:
            self._ids = set(visible)

    def discard(self, item_ids: Iterable[Hashable]) -> None:
        self._ids.difference_update(item_ids)

    def clear(self) -> None:
        self._ids.clear()
