from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from babaclub.api.base import ItemId, Resource
from babaclub.schemas.sale import Venda


class SaleApi(Resource[Venda]):
    """Venda não se edita nem se apaga pelo cliente: o fluxo é criar e, se preciso, cancelar."""

    path = "/vendas"
    model = Venda
    fallbacks = {
        "list": "Erro ao listar vendas.",
        "get": "Erro ao obter venda.",
        "create": "Erro ao criar venda.",
        "cancel": "Erro ao cancelar venda.",
    }

    async def list(  # type: ignore[override]
        self,
        data_inicio: Optional[datetime] = None,
        data_fim: Optional[datetime] = None,
        forma_pagamento: Optional[str] = None,
    ) -> List[Venda]:
        return await super().list(data_inicio=data_inicio, data_fim=data_fim, forma_pagamento=forma_pagamento)

    async def cancel(self, item_id: ItemId) -> Any:
        return await self.http.post(f"{self.path}/{item_id}/cancelar", fallback=self._fallback("cancel"))
