from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from babaclub.schemas.base import ApiModel, FormModel, blank_to_none


class Position(str, Enum):
    GOLEIRO = "GOLEIRO"
    ZAGUEIRO = "ZAGUEIRO"
    LATERAL = "LATERAL"
    VOLANTE = "VOLANTE"
    MEIA = "MEIA"
    ATACANTE = "ATACANTE"


class DominantFoot(str, Enum):
    DIREITA = "DIREITA"
    ESQUERDA = "ESQUERDA"
    AMBIDESTRO = "AMBIDESTRO"


class AssociacaoRef(ApiModel):
    id: int
    nome: str


class Associado(ApiModel):
    id: int
    nome: str
    apelido: Optional[str] = None
    email: str
    avatar_url: Optional[str] = None
    numero_camisa_padrao: Optional[int] = None
    posicao_preferida: Optional[Position] = None
    perna_dominante: Optional[DominantFoot] = None
    data_nascimento: Optional[date] = None
    telefone: Optional[str] = None
    data_entrada: Optional[date] = None
    observacoes: Optional[str] = None
    perfil_associacao: Optional[str] = None
    ativo: bool = True
    associacao: Optional[AssociacaoRef] = None

    @field_validator("data_nascimento", "data_entrada", mode="before")
    @classmethod
    def _date_only(cls, v):
        # a API às vezes manda datetime ISO completo
        v = blank_to_none(v)
        if isinstance(v, str) and len(v) > 10:
            return v[:10]
        return v


class AssociadoForm(FormModel):
    nome: str = Field(min_length=1)
    apelido: Optional[str] = None
    email: str = Field(min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    data_nascimento: Optional[date] = None
    telefone: Optional[str] = None
    numero_camisa_padrao: Optional[int] = Field(default=None, ge=0, le=99)
    posicao_preferida: Optional[Position] = None
    perna_dominante: Optional[DominantFoot] = None
    ativo: Optional[bool] = None
    observacoes: Optional[str] = None

    @field_validator("apelido", "data_nascimento", "telefone", "numero_camisa_padrao",
                     "posicao_preferida", "perna_dominante", "observacoes", mode="before")
    @classmethod
    def _blank(cls, v):
        return blank_to_none(v)
