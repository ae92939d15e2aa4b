from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import Field, field_validator

from babaclub.schemas.base import ApiModel, FormModel, blank_to_none


class Theme(str, Enum):
    LIGHT = "LIGHT"
    DARK = "DARK"


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"
    SUPERADMIN = "SUPERADMIN"


# perfis da associação que podem gerir carnê, estoque etc.
MANAGER_PROFILES = frozenset({"ADMINISTRADOR", "DIRETOR", "TECNICO"})


class Identity(ApiModel):
    id: Union[int, str]
    nome: str
    email: str
    role: Optional[str] = None
    perfil_associacao: Optional[str] = None
    associacao_id: Optional[int] = None
    ativo: bool = True
    theme: Optional[Theme] = None
    created_at: Optional[datetime] = None

    @field_validator("theme", mode="before")
    @classmethod
    def _upper_theme(cls, v):
        v = blank_to_none(v)
        return v.upper() if isinstance(v, str) else v

    @property
    def is_manager(self) -> bool:
        return (self.perfil_associacao or "").upper() in MANAGER_PROFILES


class OrganizationSummary(ApiModel):
    id: int
    nome: str
    apelido: Optional[str] = None
    cidade: Optional[str] = None
    estado: Optional[str] = None
    logo_url: Optional[str] = None


class AuthResponse(ApiModel):
    usuario: Identity
    token: str
    associacao: Optional[OrganizationSummary] = None


class LoginRequest(FormModel):
    email: str = Field(min_length=1)
    senha: str = Field(min_length=1)


class SignupRequest(FormModel):
    nome: str = Field(min_length=1)
    email: str = Field(min_length=1)
    senha: str = Field(min_length=1)
    theme: Optional[Theme] = None


class SignupFirstUserRequest(FormModel):
    nome_usuario: str = Field(min_length=1)
    email: str = Field(min_length=1)
    senha: str = Field(min_length=1)
    nome_associacao: str = Field(min_length=1)
    apelido_associacao: Optional[str] = None
    cidade: Optional[str] = None
    estado: Optional[str] = None
    theme: Optional[Theme] = None
