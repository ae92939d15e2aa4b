from datetime import datetime
from typing import Optional

from pydantic import Field

from babaclub.schemas.base import ApiModel, FormModel


class Categoria(ApiModel):
    id: int
    nome: str
    descricao: Optional[str] = None
    ativo: bool = True
    # contador derivado, só para exibição
    produtos_count: Optional[int] = None
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None


class CategoriaForm(FormModel):
    nome: str = Field(min_length=1, max_length=80)
    descricao: Optional[str] = None
    ativo: bool = True
