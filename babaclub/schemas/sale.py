from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from babaclub.schemas.base import ApiModel, FormModel, Money, blank_to_none
from babaclub.schemas.purchase import UsuarioRef


class SalePaymentMethod(str, Enum):
    DINHEIRO = "dinheiro"
    PIX = "pix"
    DEBITO = "débito"
    CREDITO = "crédito"
    FIADO = "fiado"


class VendaProdutoRef(ApiModel):
    id: int
    nome: str
    descricao: Optional[str] = None
    estoque: Optional[int] = None


class VendaItem(ApiModel):
    id: int
    produto_id: int
    quantidade: int
    preco_unit: Money
    produto: Optional[VendaProdutoRef] = None

    @property
    def total(self) -> Decimal:
        return self.quantidade * self.preco_unit


class Venda(ApiModel):
    id: int
    forma_pagamento: str
    data: datetime
    total: Money
    descricao: Optional[str] = None
    status: Optional[str] = None
    usuario_id: Optional[int] = None
    usuario: Optional[UsuarioRef] = None
    itens: List[VendaItem] = Field(default_factory=list)
    criado_em: Optional[datetime] = None

    @property
    def usuario_nome(self) -> str:
        return self.usuario.nome if self.usuario else "Desconhecido"


class VendaItemForm(FormModel):
    produto_id: int
    quantidade: int
    preco_unit: Money

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

    @field_validator("preco_unit")
    @classmethod
    def _preco(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Preço unitário deve ser > 0")
        return v

    @property
    def total(self) -> Decimal:
        return self.quantidade * self.preco_unit


class VendaForm(FormModel):
    forma_pagamento: SalePaymentMethod
    descricao: Optional[str] = None
    data: Optional[datetime] = None
    itens: List[VendaItemForm]

    @field_validator("forma_pagamento", mode="before")
    @classmethod
    def _forma(cls, v):
        v = blank_to_none(v)
        if v is None:
            raise ValueError("Forma de pagamento é obrigatória")
        return v

    @field_validator("descricao", mode="before")
    @classmethod
    def _blank(cls, v):
        return blank_to_none(v)

    @field_validator("itens")
    @classmethod
    def _itens(cls, v: List[VendaItemForm]) -> List[VendaItemForm]:
        if not v:
            raise ValueError("Adicione pelo menos um item")
        return v

    @property
    def total(self) -> Decimal:
        return sum((i.total for i in self.itens), Decimal("0"))
