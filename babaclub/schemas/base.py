from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, Dict

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

# a API manda dinheiro como número ou string ("25.00"); no fio sempre volta como número
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ApiModel(BaseModel):
    """
    Base das respostas da API: JSON em camelCase, atributos em snake_case.
    Campos desconhecidos são ignorados (a API evolui sem quebrar o cliente).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class FormModel(BaseModel):
    """
    Base dos formulários: valida no cliente antes de qualquer chamada de rede.
    Os erros saem com o nome python do campo (``loc_by_alias=False``).
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        loc_by_alias=False,
        str_strip_whitespace=True,
        extra="ignore",
    )

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def money(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"))
