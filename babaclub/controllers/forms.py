from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple, Type, TypeVar, Union

from pydantic import ValidationError

from babaclub.core.errors import FormErrors, form_errors
from babaclub.schemas.base import FormModel

M = TypeVar("M", bound=FormModel)


def validate_form(form_cls: Type[M], data: Union[M, Mapping[str, Any]]) -> Tuple[Optional[M], FormErrors]:
    """Valida no cliente. Falhou: ``(None, {campo: mensagem})`` e nada vai para a rede."""
    if isinstance(data, form_cls):
        return data, {}
    try:
        return form_cls.model_validate(dict(data)), {}
    except ValidationError as exc:
        return None, form_errors(exc)
