from __future__ import annotations

from typing import Any, List, Optional

from babaclub.api.base import ItemId, Payload, Resource, as_payload
from babaclub.api.http import Attachment, multipart_fields
from babaclub.schemas.member import Associado


class MemberApi(Resource[Associado]):
    """Associados pendurados na associação (``/associacoes/{id}/associados``)."""

    path = "/associados"
    model = Associado
    update_method = "PATCH"
    fallbacks = {
        "list": "Erro ao carregar associados.",
        "get": "Erro ao obter associado.",
        "create": "Erro ao cadastrar associado.",
        "update": "Erro ao atualizar associado.",
        "delete": "Erro ao desativar associado.",
    }

    async def list(self, associacao_id: int) -> List[Associado]:  # type: ignore[override]
        body = await self.http.get(f"/associacoes/{associacao_id}/associados", fallback=self._fallback("list"))
        return self._parse_list(body)

    async def create(  # type: ignore[override]
        self,
        associacao_id: int,
        payload: Payload,
        foto: Optional[Attachment] = None,
    ) -> Associado:
        path = f"/associacoes/{associacao_id}/associados"
        if foto is None:
            body = await self.http.post(path, json=as_payload(payload), fallback=self._fallback("create"))
        else:
            body = await self.http.post(path, files=multipart_fields(as_payload(payload), {"foto": foto}), fallback=self._fallback("create"))
        return self._parse(body)

    async def deactivate(self, item_id: ItemId) -> Any:
        return await self.delete(item_id)
