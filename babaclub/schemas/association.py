from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from babaclub.schemas.base import ApiModel, FormModel, blank_to_none


class GameType(str, Enum):
    BABA = "BABA"
    AMISTOSO = "AMISTOSO"
    CAMPEONATO = "CAMPEONATO"
    TREINO = "TREINO"


class Associacao(ApiModel):
    id: int
    nome: str
    apelido: Optional[str] = None
    descricao: Optional[str] = None
    cidade: Optional[str] = None
    estado: Optional[str] = None
    logo_url: Optional[str] = None
    regras_internas: Optional[str] = None
    horario_padrao_inicio: Optional[str] = None
    horario_padrao_fim: Optional[str] = None
    tipo_jogo_padrao: Optional[GameType] = None
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None


class AssociacaoForm(FormModel):
    nome: str = Field(min_length=1)
    apelido: Optional[str] = None
    descricao: Optional[str] = None
    cidade: Optional[str] = None
    estado: Optional[str] = None
    regras_internas: Optional[str] = None
    horario_padrao_inicio: Optional[str] = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    horario_padrao_fim: Optional[str] = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    tipo_jogo_padrao: GameType = GameType.BABA

    @field_validator("apelido", "descricao", "cidade", "estado", "regras_internas",
                     "horario_padrao_inicio", "horario_padrao_fim", mode="before")
    @classmethod
    def _blank(cls, v):
        return blank_to_none(v)
