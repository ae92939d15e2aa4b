from __future__ import annotations

from typing import Optional

from babaclub.api.base import Payload, Resource, as_payload
from babaclub.api.http import Attachment, multipart_fields
from babaclub.schemas.association import Associacao


class AssociationApi(Resource[Associacao]):
    path = "/associacao"
    model = Associacao
    update_method = "PATCH"
    fallbacks = {
        "list": "Erro ao listar associações.",
        "get": "Erro ao buscar associação.",
        "create": "Erro ao criar associação.",
        "update": "Erro ao salvar associação.",
        "delete": "Erro ao excluir associação.",
    }

    async def mine(self) -> Associacao:
        body = await self.http.get(f"{self.path}/minha", fallback="Erro ao buscar associação")
        return self._parse(body)

    async def update_mine(self, payload: Payload, logo: Optional[Attachment] = None) -> Associacao:
        # sempre multipart, com ou sem logo
        body = await self.http.put(
            f"{self.path}/minha",
            files=multipart_fields(as_payload(payload), {"logo": logo}),
            fallback="Erro ao salvar",
        )
        return self._parse(body)
