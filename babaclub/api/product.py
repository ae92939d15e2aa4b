from __future__ import annotations

from typing import List, Optional

from babaclub.api.base import ItemId, Payload, Resource, as_payload
from babaclub.api.http import Attachment, multipart_fields
from babaclub.schemas.product import Produto


class ProductApi(Resource[Produto]):
    """Produtos sempre vão como multipart (a imagem é opcional, o formato não)."""

    path = "/produtos"
    model = Produto
    fallbacks = {
        "list": "Erro ao listar produtos.",
        "get": "Erro ao obter produto.",
        "create": "Erro ao criar produto.",
        "update": "Erro ao atualizar produto.",
        "status": "Erro ao atualizar status do produto.",
        "delete": "Erro ao deletar produto.",
    }

    async def list(  # type: ignore[override]
        self,
        categoria_id: Optional[int] = None,
        ativo: Optional[bool] = None,
        skip: Optional[int] = None,
        take: Optional[int] = None,
    ) -> List[Produto]:
        # categoriaId/skip/take = 0 não filtram (mesma semântica do front original)
        return await super().list(
            categoria_id=categoria_id or None,
            ativo=ativo,
            skip=skip or None,
            take=take or None,
        )

    async def create(self, payload: Payload, imagem: Optional[Attachment] = None) -> Produto:  # type: ignore[override]
        fields = as_payload(payload)
        # no cadastro a API espera o estoque como "estoqueInicial"
        if "estoque" in fields:
            fields["estoqueInicial"] = fields.pop("estoque")
        body = await self.http.post(
            self.path,
            files=multipart_fields(fields, {"imagem": imagem}),
            fallback=self._fallback("create"),
        )
        return self._parse(body)

    async def update(self, item_id: ItemId, payload: Payload, imagem: Optional[Attachment] = None) -> Produto:  # type: ignore[override]
        body = await self.http.put(
            f"{self.path}/{item_id}",
            files=multipart_fields(as_payload(payload), {"imagem": imagem}),
            fallback=self._fallback("update"),
        )
        return self._parse(body)

    async def set_status(self, item_id: ItemId, ativo: bool) -> Produto:
        body = await self.http.patch(f"{self.path}/{item_id}/status", json={"ativo": ativo}, fallback=self._fallback("status"))
        return self._parse(body)
