from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from babaclub.schemas.base import ApiModel, FormModel, Money, blank_to_none


class DueStatus(str, Enum):
    ABERTA = "ABERTA"
    PAGA = "PAGA"
    ATRASADA = "ATRASADA"
    ISENTA = "ISENTA"
    CANCELADA = "CANCELADA"


# só estes aceitam "registrar pagamento"
PAYABLE_STATUSES = frozenset({DueStatus.ABERTA, DueStatus.ATRASADA})


class DuesPaymentMethod(str, Enum):
    PIX = "PIX"
    DINHEIRO = "DINHEIRO"
    BOLETO = "BOLETO"
    CREDITO = "CREDITO"
    DEBITO = "DEBITO"
    TRANSFERENCIA = "TRANSFERENCIA"
    OUTRO = "OUTRO"


class MemberRef(ApiModel):
    id: Optional[int] = None
    nome: Optional[str] = None
    apelido: Optional[str] = None


class Mensalidade(ApiModel):
    id: int
    associacao_id: Optional[int] = None
    usuario_id: int
    ano: int
    mes: int = Field(ge=1, le=12)
    valor: Money
    status: DueStatus
    vencimento: datetime
    data_pagamento: Optional[datetime] = None
    forma_pagamento: Optional[str] = None
    comprovante_url: Optional[str] = None
    observacoes: Optional[str] = None
    usuario: Optional[MemberRef] = None

    @property
    def member_name(self) -> str:
        return (self.usuario.nome if self.usuario else None) or ""

    @property
    def member_nickname(self) -> str:
        return (self.usuario.apelido if self.usuario else None) or ""


class DuesConfig(ApiModel):
    id: Optional[int] = None
    associacao_id: Optional[int] = None
    valor_padrao: Money
    dia_vencimento: int
    ativo: bool = True


class DuesConfigForm(FormModel):
    valor_padrao: Money = Decimal("0.00")
    dia_vencimento: int = 10
    ativo: bool = True

    @field_validator("valor_padrao")
    @classmethod
    def _valor(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Valor padrão deve ser maior ou igual a 0")
        return v

    @field_validator("dia_vencimento")
    @classmethod
    def _dia(cls, v: int) -> int:
        if not 1 <= v <= 28:
            raise ValueError("Dia de vencimento deve estar entre 1 e 28")
        return v


class PaymentForm(FormModel):
    data_pagamento: date
    forma_pagamento: DuesPaymentMethod = DuesPaymentMethod.PIX
    valor_pago: Optional[Money] = None
    comprovante_url: Optional[str] = None
    observacoes: Optional[str] = None

    @field_validator("data_pagamento", "forma_pagamento", mode="before")
    @classmethod
    def _required(cls, v):
        v = blank_to_none(v)
        if v is None:
            raise ValueError("Campo obrigatório")
        return v

    @field_validator("valor_pago", "comprovante_url", "observacoes", mode="before")
    @classmethod
    def _blank(cls, v):
        return blank_to_none(v)

    @field_validator("valor_pago")
    @classmethod
    def _valor(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v <= 0:
            raise ValueError("Valor pago deve ser maior que 0")
        return v


class GenerateYearResult(ApiModel):
    criadas: Optional[int] = None
    message: Optional[str] = None
