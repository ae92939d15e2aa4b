from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from babaclub.api.base import Payload, Resource, as_payload
from babaclub.api.http import ApiClient, parse_as
from babaclub.schemas.finance import (
    Configuracao,
    DashboardResumo,
    Despesa,
    EntradaFinanceira,
    Movimentacao,
)


class ExpenseApi(Resource[Despesa]):
    path = "/despesas"
    model = Despesa
    fallbacks = {
        "list": "Erro ao listar despesas.",
        "get": "Erro ao obter despesa.",
        "create": "Erro ao criar despesa.",
        "update": "Erro ao atualizar despesa.",
        "delete": "Erro ao deletar despesa.",
    }

    async def list(  # type: ignore[override]
        self,
        tipo: Optional[str] = None,
        data_inicio: Optional[datetime] = None,
        data_fim: Optional[datetime] = None,
        valor_minimo: Optional[Decimal] = None,
        valor_maximo: Optional[Decimal] = None,
    ) -> List[Despesa]:
        return await super().list(
            tipo=tipo,
            data_inicio=data_inicio,
            data_fim=data_fim,
            valor_minimo=valor_minimo,
            valor_maximo=valor_maximo,
        )


class IncomeApi(Resource[EntradaFinanceira]):
    path = "/entradas-financeiras"
    model = EntradaFinanceira
    fallbacks = {
        "list": "Erro ao listar entradas financeiras.",
        "get": "Erro ao obter entrada financeira.",
        "create": "Erro ao criar entrada financeira.",
        "update": "Erro ao atualizar entrada financeira.",
        "delete": "Erro ao deletar entrada financeira.",
    }

    async def list(  # type: ignore[override]
        self,
        data_inicio: Optional[datetime] = None,
        data_fim: Optional[datetime] = None,
        tipo: Optional[str] = None,
    ) -> List[EntradaFinanceira]:
        return await super().list(data_inicio=data_inicio, data_fim=data_fim, tipo=tipo)


class MovementApi(Resource[Movimentacao]):
    """Livro-caixa: só leitura + ajustes. Saldo e resumo já vêm agregados do servidor."""

    path = "/movimentacoes"
    model = Movimentacao
    fallbacks = {
        "list": "Erro ao listar movimentações financeiras.",
        "get": "Erro ao obter movimentação financeira.",
        "summary": "Erro ao obter resumo do dashboard.",
        "balance": "Erro ao obter saldo atual.",
        "adjust": "Erro ao registrar ajuste.",
    }

    async def list(  # type: ignore[override]
        self,
        data_inicio: Optional[datetime] = None,
        data_fim: Optional[datetime] = None,
        tipo: Optional[str] = None,
        entrada: Optional[bool] = None,
    ) -> List[Movimentacao]:
        return await super().list(data_inicio=data_inicio, data_fim=data_fim, tipo=tipo, entrada=entrada)

    async def dashboard_summary(self) -> DashboardResumo:
        body = await self.http.get(f"{self.path}/dashboard/resumo", fallback=self._fallback("summary"))
        return parse_as(DashboardResumo, body)

    async def current_balance(self) -> Decimal:
        body = await self.http.get(f"{self.path}/saldo/atual", fallback=self._fallback("balance"))
        value = body.get("saldoAtual") if isinstance(body, dict) else None
        return parse_as(Decimal, value)

    async def register_adjustment(self, payload: Payload) -> Movimentacao:
        body = await self.http.post(f"{self.path}/ajuste", json=as_payload(payload), fallback=self._fallback("adjust"))
        return self._parse(body)


class CashSettingsApi:
    def __init__(self, http: ApiClient) -> None:
        self.http = http

    async def get(self) -> Configuracao:
        body = await self.http.get("/configuracoes", fallback="Erro ao obter configurações.")
        return parse_as(Configuracao, body)

    async def update(self, payload: Payload) -> Configuracao:
        body = await self.http.put("/configuracoes", json=as_payload(payload), fallback="Erro ao atualizar configurações.")
        return parse_as(Configuracao, body)
