from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator

from babaclub.schemas.base import ApiModel, FormModel, Money, blank_to_none


class ProdutoRef(ApiModel):
    id: int
    nome: str
    descricao: Optional[str] = None


class UsuarioRef(ApiModel):
    id: int
    nome: str
    email: Optional[str] = None


class CompraItem(ApiModel):
    id: int
    produto_id: int
    quantidade: int
    custo_unit: Money
    produto: Optional[ProdutoRef] = None

    @property
    def total(self) -> Decimal:
        return self.quantidade * self.custo_unit


class Compra(ApiModel):
    id: int
    fornecedor: Optional[str] = None
    data: datetime
    total: Money
    observacao: Optional[str] = None
    itens: List[CompraItem] = Field(default_factory=list)
    usuario_id: Optional[int] = None
    usuario: Optional[UsuarioRef] = None
    criado_em: Optional[datetime] = None


class CompraItemForm(FormModel):
    produto_id: int
    quantidade: int
    custo_unit: Money

    @field_validator("produto_id", mode="before")
    @classmethod
    def _produto(cls, v):
        v = blank_to_none(v)
        if v is None or v == 0:
            raise ValueError("Selecione um produto")
        return v

    @field_validator("quantidade")
    @classmethod
    def _quantidade(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Quantidade deve ser > 0")
        return v

    @field_validator("custo_unit")
    @classmethod
    def _custo(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Custo unitário deve ser > 0")
        return v

    @property
    def total(self) -> Decimal:
        return self.quantidade * self.custo_unit


class CompraForm(FormModel):
    fornecedor: str = Field(min_length=1)
    data: Optional[datetime] = None
    descricao: Optional[str] = None
    itens: List[CompraItemForm]

    @field_validator("itens")
    @classmethod
    def _itens(cls, v: List[CompraItemForm]) -> List[CompraItemForm]:
        if not v:
            raise ValueError("Adicione pelo menos um item")
        return v

    @property
    def total(self) -> Decimal:
        return sum((i.total for i in self.itens), Decimal("0"))
