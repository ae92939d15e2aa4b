from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from babaclub.api.base import Resource
from babaclub.schemas.purchase import Compra


class PurchaseApi(Resource[Compra]):
    path = "/compras"
    model = Compra
    fallbacks = {
        "list": "Erro ao listar compras.",
        "get": "Erro ao obter compra.",
        "create": "Erro ao criar compra.",
        "delete": "Erro ao deletar compra.",
    }

    async def list(  # type: ignore[override]
        self,
        data_inicio: Optional[datetime] = None,
        data_fim: Optional[datetime] = None,
        fornecedor: Optional[str] = None,
    ) -> List[Compra]:
        return await super().list(data_inicio=data_inicio, data_fim=data_fim, fornecedor=fornecedor)
