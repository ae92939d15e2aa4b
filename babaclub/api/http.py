from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Type, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from babaclub.core.errors import ApiError, INVALID_RESPONSE_MESSAGE, UNREACHABLE_MESSAGE, message_from_body

logger = logging.getLogger(__name__)

T = TypeVar("T")

# (nome do arquivo, conteúdo, content-type)
Attachment = Tuple[str, bytes, str]


def _param_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def clean_params(params: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Remove filtros ausentes: ``None`` e string vazia não vão para a query."""
    out: Dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        out[key] = _param_value(value)
    return out


def multipart_fields(payload: Mapping[str, Any], attachments: Optional[Mapping[str, Optional[Attachment]]] = None):
    """
    Monta o corpo multipart (equivalente ao FormData).
    Campos simples viram partes sem filename; anexos ``None`` são omitidos.
    """
    files: list[tuple[str, Any]] = []
    for key, value in payload.items():
        if value is None:
            continue
        files.append((key, (None, _param_value(value))))
    for key, att in (attachments or {}).items():
        if att is None:
            continue
        files.append((key, att))
    return files


def unwrap_data(body: Any) -> Any:
    # alguns endpoints devolvem {"data": ...}
    if isinstance(body, dict) and isinstance(body.get("data"), (list, dict)):
        return body["data"]
    return body


_ADAPTERS: Dict[Any, TypeAdapter] = {}


def parse_as(tp: Type[T] | Any, body: Any) -> T:
    """Converte o JSON não tipado da API nas entidades do domínio (ponto único por recurso)."""
    adapter = _ADAPTERS.get(tp)
    if adapter is None:
        adapter = _ADAPTERS[tp] = TypeAdapter(tp)
    try:
        return adapter.validate_python(body)
    except ValidationError as exc:
        logger.warning("resposta fora do contrato para %s: %s", tp, exc.errors()[:3])
        raise ApiError(INVALID_RESPONSE_MESSAGE, payload=body) from exc


class ApiClient:
    """
    Wrapper fino sobre ``httpx.AsyncClient``.
    - injeta Bearer token lido do storage a cada chamada
    - normaliza toda falha em ``ApiError`` (sem retries)
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 15.0,
        token_getter: Optional[Callable[[], Optional[str]]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._token_getter = token_getter
        self._client = httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self._token_getter() if self._token_getter else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        fallback: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        files: Any = None,
    ) -> Any:
        try:
            resp = await self._client.request(
                method,
                path,
                params=clean_params(params),
                json=json,
                files=files,
                headers=self._headers(),
            )
        except httpx.TransportError as exc:
            logger.warning("sem resposta do servidor %s %s: %s", method, path, exc.__class__.__name__)
            raise ApiError(UNREACHABLE_MESSAGE) from exc

        body = self._body(resp)
        if resp.is_error:
            message = message_from_body(body, fallback)
            logger.warning("API %s %s -> %s: %s", method, path, resp.status_code, message)
            raise ApiError(message, status_code=resp.status_code, payload=body)
        return body

    @staticmethod
    def _body(resp: httpx.Response) -> Any:
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return None

    async def get(self, path: str, *, fallback: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.request("GET", path, fallback=fallback, params=params)

    async def post(self, path: str, *, fallback: str, json: Any = None, files: Any = None) -> Any:
        return await self.request("POST", path, fallback=fallback, json=json, files=files)

    async def put(self, path: str, *, fallback: str, json: Any = None, files: Any = None) -> Any:
        return await self.request("PUT", path, fallback=fallback, json=json, files=files)

    async def patch(self, path: str, *, fallback: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, fallback=fallback, json=json)

    async def delete(self, path: str, *, fallback: str) -> Any:
        return await self.request("DELETE", path, fallback=fallback)
