from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from pydantic import Field, field_validator

from babaclub.schemas.base import ApiModel, FormModel, Money


class Despesa(ApiModel):
    id: Union[int, str]
    tipo: str
    descricao: str = ""
    valor: Money
    data: datetime
    usuario_id: Optional[Union[int, str]] = None
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None


class EntradaFinanceira(ApiModel):
    id: Union[int, str]
    tipo: str
    descricao: str = ""
    valor: Money
    data: datetime
    usuario_id: Optional[Union[int, str]] = None
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None


class Movimentacao(ApiModel):
    id: int
    tipo: str
    valor: Money
    data: datetime
    descricao: str = ""
    entrada: bool
    usuario_id: Optional[int] = None
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None


class DashboardResumo(ApiModel):
    saldo_atual: Money
    total_entradas: Money
    total_saidas: Money
    saldo_mes: Money


class Configuracao(ApiModel):
    id: int
    saldo_inicial: Money
    mes_atual: int
    ano_atual: int
    atualizado_em: Optional[datetime] = None


class LancamentoForm(FormModel):
    """Despesa e entrada financeira usam o mesmo formulário."""
    tipo: str = Field(min_length=1)
    descricao: str = Field(min_length=1, max_length=200)
    valor: Money
    data: datetime

    @field_validator("valor")
    @classmethod
    def _valor(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Valor deve ser maior que 0")
        return v


class AjusteForm(LancamentoForm):
    entrada: bool


class ConfiguracaoForm(FormModel):
    saldo_inicial: Optional[Money] = None
    mes_atual: Optional[int] = Field(default=None, ge=1, le=12)
