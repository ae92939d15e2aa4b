from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar, Dict, Generic, List, Mapping, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from babaclub.api.http import ApiClient, parse_as, unwrap_data
from babaclub.schemas.base import FormModel

T = TypeVar("T", bound=BaseModel)

Payload = Union[FormModel, Mapping[str, Any]]
ItemId = Union[int, str]


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def as_payload(payload: Payload) -> Dict[str, Any]:
    if isinstance(payload, FormModel):
        return payload.to_payload()
    return {k: _jsonable(v) for k, v in dict(payload).items() if v is not None}


def as_query(filters: Mapping[str, Any]) -> Dict[str, Any]:
    # filtros python (data_inicio) -> query da API (dataInicio)
    return {to_camel(k): v for k, v in filters.items()}


class Resource(Generic[T]):
    """
    CRUD genérico: list/get/create/update/delete sobre ``path``.
    Subclasses só declaram o modelo, o verbo de update e as mensagens de fallback.
    """

    path: ClassVar[str] = ""
    model: ClassVar[Type[BaseModel]]
    update_method: ClassVar[str] = "PUT"
    unwrap: ClassVar[bool] = False
    fallbacks: ClassVar[Dict[str, str]] = {}

    def __init__(self, http: ApiClient) -> None:
        self.http = http

    def _fallback(self, op: str) -> str:
        return self.fallbacks.get(op, "Erro ao comunicar com o servidor.")

    def _parse(self, body: Any) -> T:
        if self.unwrap:
            body = unwrap_data(body)
        return parse_as(self.model, body)

    def _parse_list(self, body: Any) -> List[T]:
        if self.unwrap:
            body = unwrap_data(body)
        return parse_as(List[self.model], body)  # type: ignore[name-defined]

    async def list(self, **filters: Any) -> List[T]:
        body = await self.http.get(self.path, params=as_query(filters), fallback=self._fallback("list"))
        return self._parse_list(body)

    async def get(self, item_id: ItemId) -> T:
        body = await self.http.get(f"{self.path}/{item_id}", fallback=self._fallback("get"))
        return self._parse(body)

    async def create(self, payload: Payload) -> T:
        body = await self.http.post(self.path, json=as_payload(payload), fallback=self._fallback("create"))
        return self._parse(body)

    async def update(self, item_id: ItemId, payload: Payload) -> T:
        body = await self.http.request(
            self.update_method,
            f"{self.path}/{item_id}",
            json=as_payload(payload),
            fallback=self._fallback("update"),
        )
        return self._parse(body)

    async def delete(self, item_id: ItemId) -> Any:
        return await self.http.delete(f"{self.path}/{item_id}", fallback=self._fallback("delete"))
