from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import ValidationError

UNREACHABLE_MESSAGE = "Não foi possível conectar ao servidor. Verifique se o backend está rodando."
INVALID_RESPONSE_MESSAGE = "Resposta inválida do servidor."

# palavras que indicam ausência de ConfigMensalidade
CONFIG_KEYWORDS = ("config", "configuração", "configuracao")


class ApiError(Exception):
    """Erro único da camada de rede: sempre carrega uma mensagem legível."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    @property
    def is_transport(self) -> bool:
        return self.status_code is None and self.message == UNREACHABLE_MESSAGE

    @property
    def is_config_missing(self) -> bool:
        return is_config_message(self.message)


def is_config_message(message: Optional[str]) -> bool:
    text = (message or "").strip().lower()
    return any(k in text for k in CONFIG_KEYWORDS)


def message_from_body(body: Any, fallback: str) -> str:
    """
    Ordem de precedência (contrato da API):
    1) ``errors`` (lista) -> join com ", "
    2) ``error`` ou ``message`` (string)
    3) fallback da operação
    """
    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list) and errors:
            return ", ".join(str(e) for e in errors)
        for key in ("error", "message"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return fallback


FormErrors = Dict[str, str]

_FORM_MESSAGES = {
    "missing": "Campo obrigatório",
    "string_too_short": "Campo obrigatório",
    "float_parsing": "Deve ser um número válido",
    "decimal_parsing": "Deve ser um número válido",
    "int_parsing": "Deve ser um número inteiro",
    "date_from_datetime_parsing": "Data inválida",
    "date_parsing": "Data inválida",
}


def form_errors(exc: ValidationError) -> FormErrors:
    """Converte um ValidationError do pydantic no mapa campo -> mensagem dos formulários."""
    out: FormErrors = {}
    for err in exc.errors():
        key = ".".join(str(p) for p in err.get("loc", ())) or "__all__"
        if key in out:
            continue
        kind = err.get("type", "")
        if kind == "value_error":
            ctx = err.get("ctx") or {}
            msg = str(ctx.get("error") or err.get("msg", ""))
        else:
            msg = _FORM_MESSAGES.get(kind, err.get("msg", "Valor inválido"))
        out[key] = msg
    return out
