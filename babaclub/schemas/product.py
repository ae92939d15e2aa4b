from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, ValidationInfo, field_validator

from babaclub.schemas.base import ApiModel, FormModel, Money, blank_to_none


class Produto(ApiModel):
    id: int
    nome: str
    descricao: Optional[str] = None
    preco_venda: Money
    preco_compra: Optional[Money] = None
    preco_promocional: Optional[Money] = None
    estoque: int = 0
    imagem: Optional[str] = None
    ativo: bool = True
    categoria_id: Optional[int] = None
    usuario_id: Optional[int] = None
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None


class ProdutoForm(FormModel):
    nome: str = Field(min_length=1)
    descricao: Optional[str] = None
    preco_venda: Money
    preco_compra: Optional[Money] = None
    preco_promocional: Optional[Money] = None
    estoque: int
    categoria_id: Optional[int] = None
    ativo: Optional[bool] = None

    @field_validator("descricao", "preco_compra", "preco_promocional", "categoria_id", mode="before")
    @classmethod
    def _blank(cls, v):
        return blank_to_none(v)

    @field_validator("preco_venda")
    @classmethod
    def _preco_venda(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Preço de venda é obrigatório e deve ser maior que 0")
        return v

    @field_validator("preco_compra")
    @classmethod
    def _preco_compra(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Preço de compra deve ser um número válido >= 0")
        return v

    @field_validator("preco_promocional")
    @classmethod
    def _preco_promocional(cls, v: Optional[Decimal], info: ValidationInfo) -> Optional[Decimal]:
        if v is None:
            return v
        if v < 0:
            raise ValueError("Preço promocional deve ser um número válido >= 0")
        venda = info.data.get("preco_venda")
        if venda is not None and v > venda:
            raise ValueError("Preço promocional não pode ser maior que preço de venda")
        return v

    @field_validator("estoque")
    @classmethod
    def _estoque(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Estoque é obrigatório e deve ser maior ou igual a 0")
        return v
