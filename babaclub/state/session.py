from __future__ import annotations

import logging
import time
from typing import Any, Callable, Mapping, Optional, Type, TypeVar, Union

import jwt
from pydantic import ValidationError

from babaclub.api.auth import AuthApi
from babaclub.controllers.forms import validate_form
from babaclub.core.errors import ApiError, FormErrors
from babaclub.core.notify import Notifier
from babaclub.core.storage import (
    IDENTITY_KEY,
    ORGANIZATION_KEY,
    REMEMBERED_EMAIL_KEY,
    TOKEN_KEY,
    Storage,
    read_json,
    write_json,
)
from babaclub.schemas.auth import (
    AuthResponse,
    Identity,
    LoginRequest,
    OrganizationSummary,
    SignupFirstUserRequest,
    SignupRequest,
)
from babaclub.schemas.base import FormModel
from babaclub.state.navigation import NavigationStore, View

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=FormModel)

FILL_ALL_FIELDS = "Preencha todos os campos"


def token_expired(token: str, now: float) -> bool:
    """
    Só olha o ``exp`` do JWT (sem verificar assinatura: quem valida é o servidor).
    Token opaco (não-JWT) nunca é considerado expirado.
    """
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return False
    exp = claims.get("exp")
    if not isinstance(exp, (int, float)):
        return False
    return exp <= now


class SessionStore:
    """
    Identidade, associação e token do usuário logado.

    Estado em memória + storage durável (``usuario``, ``token``, ``associacao``).
    ``hydrate()`` precisa rodar antes de qualquer tela protegida (ver ``ready``).
    """

    def __init__(
        self,
        storage: Storage,
        auth_api: AuthApi,
        notifier: Notifier,
        navigation: NavigationStore,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._api = auth_api
        self._notifier = notifier
        self._navigation = navigation
        self._clock = clock

        self.identity: Optional[Identity] = None
        self.organization: Optional[OrganizationSummary] = None
        self.ready = False
        self.busy = False
        self.errors: FormErrors = {}

    # ---------- hydrate ----------

    def hydrate(self) -> None:
        token = self._storage.get(TOKEN_KEY)
        raw_identity = read_json(self._storage, IDENTITY_KEY)

        if token and token_expired(token, self._clock()):
            logger.warning("token salvo expirado, limpando sessão")
            self._clear_storage()
            token, raw_identity = None, None

        identity = None
        if token and raw_identity is not None:
            try:
                identity = Identity.model_validate(raw_identity)
            except ValidationError:
                logger.warning("usuario salvo inválido, descartando")
                self._storage.remove(IDENTITY_KEY)

        organization = None
        if identity is not None:
            raw_org = read_json(self._storage, ORGANIZATION_KEY)
            if raw_org is not None:
                try:
                    organization = OrganizationSummary.model_validate(raw_org)
                except ValidationError:
                    logger.warning("associacao salva inválida, descartando")
                    self._storage.remove(ORGANIZATION_KEY)

        self.identity = identity
        self.organization = organization
        self.ready = True

    # ---------- estado derivado ----------

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    @property
    def token(self) -> Optional[str]:
        return self._storage.get(TOKEN_KEY)

    @property
    def is_manager(self) -> bool:
        return bool(self.identity and self.identity.is_manager)

    @property
    def remembered_email(self) -> Optional[str]:
        return self._storage.get(REMEMBERED_EMAIL_KEY) or None

    # ---------- operações ----------

    async def login(self, credentials: Union[LoginRequest, Mapping[str, Any]], remember: bool = False) -> bool:
        form = self._validate(LoginRequest, credentials)
        if form is None:
            return False
        ok = await self._authenticate(self._api.login, form, "Login realizado com sucesso!")
        if ok:
            if remember:
                self._storage.set(REMEMBERED_EMAIL_KEY, form.email)
            else:
                self._storage.remove(REMEMBERED_EMAIL_KEY)
        return ok

    async def signup(self, data: Union[SignupRequest, Mapping[str, Any]]) -> bool:
        form = self._validate(SignupRequest, data)
        if form is None:
            return False
        return await self._authenticate(self._api.signup, form, "Conta criada com sucesso!")

    async def signup_first_user(self, data: Union[SignupFirstUserRequest, Mapping[str, Any]]) -> bool:
        form = self._validate(SignupFirstUserRequest, data)
        if form is None:
            return False
        return await self._authenticate(self._api.signup_first_user, form, "Associação criada com sucesso!")

    def logout(self) -> None:
        # não navega: sem identidade a camada de tela volta para o login
        self.identity = None
        self.organization = None
        self._clear_storage()

    def update_identity(self, **changes: Any) -> Optional[Identity]:
        """Aplica mudanças locais na identidade (ex.: tema) e regrava ``usuario``."""
        if self.identity is None:
            return None
        self.identity = self.identity.model_copy(update=changes)
        write_json(self._storage, IDENTITY_KEY, self.identity.model_dump(mode="json", by_alias=True))
        return self.identity

    # ---------- internos ----------

    def _validate(self, form_cls: Type[F], data: Union[F, Mapping[str, Any]]) -> Optional[F]:
        form, self.errors = validate_form(form_cls, data)
        if form is None:
            self._notifier.error(FILL_ALL_FIELDS)
        return form

    async def _authenticate(self, call, form: FormModel, success_message: str) -> bool:
        if self.busy:
            return False
        self.busy = True
        try:
            res: AuthResponse = await call(form)
        except ApiError as exc:
            logger.warning("falha de autenticação: %s", exc.message)
            self._notifier.error(exc.message)
            return False
        finally:
            self.busy = False

        self._store(res)
        self._notifier.success(success_message)
        self._navigation.go_to(View.HOME)
        return True

    def _store(self, res: AuthResponse) -> None:
        write_json(self._storage, IDENTITY_KEY, res.usuario.model_dump(mode="json", by_alias=True))
        self._storage.set(TOKEN_KEY, res.token)
        self.identity = res.usuario
        if res.associacao is not None:
            write_json(self._storage, ORGANIZATION_KEY, res.associacao.model_dump(mode="json", by_alias=True))
            self.organization = res.associacao

    def _clear_storage(self) -> None:
        for key in (IDENTITY_KEY, TOKEN_KEY, ORGANIZATION_KEY):
            self._storage.remove(key)
