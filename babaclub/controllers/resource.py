from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Generic,
    Hashable,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from babaclub.controllers.forms import validate_form
from babaclub.controllers.listing import FilterState, ListSpec, Selection, ids_of, project
from babaclub.core.errors import ApiError, FormErrors
from babaclub.core.notify import Notifier
from babaclub.schemas.base import FormModel

logger = logging.getLogger(__name__)

T = TypeVar("T")

Fetch = Callable[[], Awaitable[Iterable[T]]]
Create = Callable[..., Awaitable[T]]
Update = Callable[..., Awaitable[T]]
Delete = Callable[[Hashable], Awaitable[Any]]

OPS = ("load", "save", "delete", "action")


@dataclass(frozen=True)
class BatchResult:
    succeeded: int
    failed: int
    failed_ids: Tuple[Hashable, ...] = ()

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def summary(self) -> str:
        return f"{self.succeeded} excluído(s), {self.failed} erro(s)"


@dataclass(frozen=True)
class Messages:
    created: str = "Registro criado com sucesso!"
    updated: str = "Registro atualizado com sucesso!"
    deleted: str = "Registro excluído com sucesso!"
    reloaded: str = "Dados recarregados!"
    bulk_deleted: str = "{n} registro(s) excluído(s) com sucesso!"


class ResourceController(Generic[T]):
    """
    Coleção em memória de um recurso + mutações via API.

    - patch local só depois que a chamada resolve (nada otimista)
    - um flag de loading por operação; disparo repetido com o flag ligado é ignorado
    - ``close()`` descarta respostas que chegam depois
    - com ``soft_delete`` o item excluído fica na coleção, marcado pelo patch (ex.: ``ativo=False``)
    """

    def __init__(
        self,
        *,
        fetch: Fetch[T],
        notifier: Notifier,
        create: Optional[Create[T]] = None,
        update: Optional[Update[T]] = None,
        delete: Optional[Delete] = None,
        spec: Optional[ListSpec[T]] = None,
        messages: Messages = Messages(),
        id_of: Callable[[T], Hashable] = lambda item: item.id,  # type: ignore[attr-defined]
        reload_after_create: bool = False,
        soft_delete: Optional[Callable[[T], T]] = None,
    ) -> None:
        self._fetch = fetch
        self._create = create
        self._update = update
        self._delete = delete
        self._notifier = notifier
        self.spec: ListSpec[T] = spec or ListSpec()
        self.messages = messages
        self.id_of = id_of
        self.reload_after_create = reload_after_create
        self.soft_delete = soft_delete

        self.items: List[T] = []
        self.filters = FilterState()
        self.selection = Selection()
        self.errors: FormErrors = {}
        self.busy: Dict[str, bool] = {op: False for op in OPS}
        self.alive = True

    # ---------- visão ----------

    def visible(self) -> List[T]:
        return project(self.items, self.spec, self.filters)

    def set_filters(self, filters: FilterState) -> None:
        self.filters = filters

    def select_all(self) -> None:
        self.selection.toggle_all(ids_of(self.visible(), self.id_of))

    def find(self, item_id: Hashable) -> Optional[T]:
        return next((i for i in self.items if self.id_of(i) == item_id), None)

    def is_busy(self, op: Optional[str] = None) -> bool:
        if op is None:
            return any(self.busy.values())
        return self.busy[op]

    def close(self) -> None:
        self.alive = False

    # ---------- operações ----------

    def _begin(self, op: str) -> bool:
        if self.busy[op]:
            logger.debug("operação %s já em andamento, ignorando", op)
            return False
        self.busy[op] = True
        return True

    def _end(self, op: str) -> None:
        self.busy[op] = False

    def _fail(self, exc: ApiError) -> None:
        logger.warning("falha na operação: %s", exc.message)
        if self.alive:
            self._notifier.error(exc.message)

    async def reload(self, announce: bool = False) -> Optional[List[T]]:
        if not self._begin("load"):
            return None
        try:
            items = await self._fetch()
        except ApiError as exc:
            self._fail(exc)
            return None
        finally:
            self._end("load")

        if not self.alive:
            return None
        self.items = list(items)
        if announce:
            self._notifier.success(self.messages.reloaded)
        return self.items

    async def save(
        self,
        form_cls: Type[FormModel],
        data: Union[FormModel, Mapping[str, Any]],
        item_id: Optional[Hashable] = None,
        **call_kwargs: Any,
    ) -> Optional[T]:
        form, self.errors = validate_form(form_cls, data)
        if form is None:
            return None

        creating = item_id is None
        call = self._create if creating else self._update
        if call is None:
            raise RuntimeError("recurso não suporta " + ("criação" if creating else "edição"))

        if not self._begin("save"):
            return None
        try:
            if creating:
                result = await call(form, **call_kwargs)
            else:
                result = await call(item_id, form, **call_kwargs)
        except ApiError as exc:
            self._fail(exc)
            return None
        finally:
            self._end("save")

        if not self.alive:
            return None

        if creating:
            if self.reload_after_create:
                await self.reload()
            else:
                self.items = [*self.items, result]
            self._notifier.success(self.messages.created)
        else:
            self.replace_item(result)
            self._notifier.success(self.messages.updated)
        return result

    async def delete(self, item_id: Hashable) -> bool:
        if self._delete is None:
            raise RuntimeError("recurso não suporta exclusão")
        if not self._begin("delete"):
            return False
        try:
            await self._delete(item_id)
        except ApiError as exc:
            self._fail(exc)
            return False
        finally:
            self._end("delete")

        if not self.alive:
            return False
        self._drop([item_id])
        self.selection.discard([item_id])
        self._notifier.success(self.messages.deleted)
        return True

    async def bulk_delete(self, item_ids: Optional[Iterable[Hashable]] = None) -> Optional[BatchResult]:
        """
        Exclui em sequência e agrega o resultado. Itens que falharam continuam na coleção.
        Sem ``item_ids`` usa a seleção atual.
        """
        if self._delete is None:
            raise RuntimeError("recurso não suporta exclusão")
        ids = list(self.selection if item_ids is None else item_ids)
        if not ids:
            return None
        if not self._begin("delete"):
            return None

        done: List[Hashable] = []
        failed: List[Hashable] = []
        try:
            for item_id in ids:
                try:
                    await self._delete(item_id)
                except ApiError as exc:
                    logger.warning("falha ao excluir id=%s: %s", item_id, exc.message)
                    failed.append(item_id)
                else:
                    done.append(item_id)
        finally:
            self._end("delete")

        result = BatchResult(succeeded=len(done), failed=len(failed), failed_ids=tuple(failed))
        if not self.alive:
            return result

        self._drop(done)
        self.selection.clear()
        if result.ok:
            self._notifier.success(self.messages.bulk_deleted.format(n=result.succeeded))
        else:
            self._notifier.error(result.summary())
        return result

    async def perform(
        self,
        action: Callable[[], Awaitable[Any]],
        *,
        success: Optional[str] = None,
        patch: Optional[Callable[[Any], Optional[T]]] = None,
        reload: bool = False,
    ) -> bool:
        """
        Ação avulsa (cancelar venda, ativar/desativar produto...).
        ``patch`` recebe a resposta e devolve o item atualizado; ``reload`` recarrega tudo.
        """
        if not self._begin("action"):
            return False
        try:
            result = await action()
        except ApiError as exc:
            self._fail(exc)
            return False
        finally:
            self._end("action")

        if not self.alive:
            return False
        if patch is not None:
            item = patch(result)
            if item is not None:
                self.replace_item(item)
        if reload:
            await self.reload()
        if success:
            self._notifier.success(success)
        return True

    # ---------- patches locais ----------

    def replace_item(self, item: T) -> None:
        key = self.id_of(item)
        self.items = [item if self.id_of(i) == key else i for i in self.items]

    def _remove(self, item_ids: Iterable[Hashable]) -> None:
        gone = set(item_ids)
        if gone:
            self.items = [i for i in self.items if self.id_of(i) not in gone]

    def _drop(self, item_ids: Iterable[Hashable]) -> None:
        if self.soft_delete is None:
            self._remove(item_ids)
            return
        gone = set(item_ids)
        self.items = [self.soft_delete(i) if self.id_of(i) in gone else i for i in self.items]
