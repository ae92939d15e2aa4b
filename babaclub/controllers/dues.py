"""
Carnê de mensalidades: agregação por mês, visão por associado e fluxo de configuração.

Status (ABERTA/ATRASADA/PAGA...) vem sempre do servidor; o cliente nunca recalcula atraso.
"""
from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from babaclub.api.dues import DuesApi
from babaclub.api.member import MemberApi
from babaclub.controllers.forms import validate_form
from babaclub.core.errors import ApiError, FormErrors
from babaclub.core.notify import Notifier
from babaclub.schemas.dues import (
    PAYABLE_STATUSES,
    DuesConfigForm,
    DuesPaymentMethod,
    DueStatus,
    Mensalidade,
    PaymentForm,
)
from babaclub.schemas.member import Associado
from babaclub.state.session import SessionStore

logger = logging.getLogger(__name__)

MONTH_NAMES = [
    "Janeiro",
    "Fevereiro",
    "Março",
    "Abril",
    "Maio",
    "Junho",
    "Julho",
    "Agosto",
    "Setembro",
    "Outubro",
    "Novembro",
    "Dezembro",
]


class ViewMode(str, Enum):
    BY_MONTH = "mes"
    BY_MEMBER = "associado"


def payment_rate(paid: int, open_: int, late: int) -> float:
    total = paid + open_ + late
    if total <= 0:
        return 0.0
    return max(0.0, min(100.0, paid * 100.0 / total))


@dataclass(frozen=True)
class MonthStats:
    mes: int
    pagos: int = 0
    abertos: int = 0
    atrasados: int = 0
    # inclui isentas e canceladas
    total: int = 0

    @property
    def nome(self) -> str:
        return MONTH_NAMES[self.mes - 1]

    @property
    def rate(self) -> float:
        return payment_rate(self.pagos, self.abertos, self.atrasados)

    @property
    def band(self) -> str:
        rate = self.rate
        if rate >= 70:
            return "alta"
        if rate >= 40:
            return "media"
        return "baixa"


def stats_by_month(dues: Iterable[Mensalidade]) -> List[MonthStats]:
    counts: Dict[int, Counter] = {m: Counter() for m in range(1, 13)}
    for due in dues:
        bucket = counts.get(due.mes)
        if bucket is None:
            continue
        bucket["total"] += 1
        bucket[due.status] += 1
    return [
        MonthStats(
            mes=m,
            pagos=c[DueStatus.PAGA],
            abertos=c[DueStatus.ABERTA],
            atrasados=c[DueStatus.ATRASADA],
            total=c["total"],
        )
        for m, c in counts.items()
    ]


StatusChoice = Union[DueStatus, str, None]


def _status_ok(due: Mensalidade, status: StatusChoice) -> bool:
    if status is None or status == "" or status == "ALL":
        return True
    return due.status == DueStatus(status)


def _search_ok(due: Mensalidade, search: str) -> bool:
    term = (search or "").strip().lower()
    if not term:
        return True
    return term in due.member_name.lower() or term in due.member_nickname.lower()


def filter_carnet(dues: Iterable[Mensalidade], search: str = "", status: StatusChoice = None) -> List[Mensalidade]:
    return [d for d in dues if _status_ok(d, status) and _search_ok(d, search)]


def dues_of_month(
    dues: Iterable[Mensalidade],
    month: Optional[int],
    search: str = "",
    status: StatusChoice = None,
) -> List[Mensalidade]:
    if not month:
        return []
    return filter_carnet((d for d in dues if d.mes == month), search, status)


def can_register_payment(due: Mensalidade) -> bool:
    return due.status in PAYABLE_STATUSES


def payment_defaults(today: date) -> Dict[str, Any]:
    return {"data_pagamento": today, "forma_pagamento": DuesPaymentMethod.PIX}


class DuesController:
    """
    Estado da tela de mensalidades.

    Gestor (ADMINISTRADOR/DIRETOR/TECNICO) vê o carnê de todos os associados, buscado
    em paralelo por associado; os demais veem só o próprio. Erro de carga que menciona
    configuração liga ``needs_config`` em vez de notificar.
    """

    def __init__(
        self,
        dues_api: DuesApi,
        member_api: MemberApi,
        session: SessionStore,
        notifier: Notifier,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._dues = dues_api
        self._members = member_api
        self._session = session
        self._notifier = notifier
        self._today = today

        now = today()
        self.year = now.year
        self.month: Optional[int] = now.month
        self.view_mode = ViewMode.BY_MONTH
        self.member_id: Optional[int] = None
        self.search = ""
        self.status_filter: StatusChoice = None

        self.dues: List[Mensalidade] = []
        self.carnet: List[Mensalidade] = []
        self.members: List[Associado] = []

        self.needs_config = False
        self.errors: FormErrors = {}
        self.busy: Dict[str, bool] = {"load": False, "action": False}
        self.alive = True

    # ---------- derivados ----------

    @property
    def is_manager(self) -> bool:
        return self._session.is_manager

    @property
    def organization_id(self) -> Optional[int]:
        identity = self._session.identity
        return identity.associacao_id if identity else None

    @property
    def stats(self) -> List[MonthStats]:
        return stats_by_month(self.dues)

    def month_view(self) -> List[Mensalidade]:
        return dues_of_month(self.dues, self.month, self.search, self.status_filter)

    def carnet_view(self) -> List[Mensalidade]:
        return filter_carnet(self.carnet, self.search, self.status_filter)

    def payment_defaults(self) -> Dict[str, Any]:
        return payment_defaults(self._today())

    def config_defaults(self) -> Dict[str, Any]:
        return DuesConfigForm().model_dump()

    def close(self) -> None:
        self.alive = False

    def _handle_load_error(self, exc: ApiError) -> None:
        if exc.is_config_missing:
            logger.info("configuração de mensalidade ausente: %s", exc.message)
            if self.alive:
                self.needs_config = True
            return
        logger.warning("erro ao carregar mensalidades: %s", exc.message)
        if self.alive:
            self._notifier.error(exc.message)

    # ---------- navegação da tela ----------

    def select_month(self, month: Optional[int]) -> None:
        self.month = month

    def set_view_mode(self, mode: Union[ViewMode, str]) -> None:
        self.view_mode = ViewMode(mode)

    async def change_year(self, year: int) -> None:
        self.year = year
        await self.load_year()
        if self.view_mode is ViewMode.BY_MEMBER or not self.is_manager:
            await self.load_carnet()

    async def select_member(self, member_id: Optional[int]) -> None:
        self.member_id = member_id
        if member_id is not None:
            await self.load_carnet()

    # ---------- cargas ----------

    async def open(self) -> None:
        """Carga inicial da tela."""
        if self.organization_id is None:
            return
        await self.load_members()
        await self.check_config()
        await self.load_year()
        if not self.is_manager:
            await self.load_carnet()

    async def load_members(self) -> List[Associado]:
        org_id = self.organization_id
        if org_id is None or not self.is_manager:
            return []
        try:
            members = await self._members.list(org_id)
        except ApiError as exc:
            logger.warning("erro ao listar associados: %s", exc.message)
            return []
        if self.alive:
            self.members = members
        return members

    async def check_config(self) -> bool:
        try:
            await self._dues.get_config()
        except ApiError as exc:
            logger.warning("ConfigMensalidade não encontrada, abrindo configuração: %s", exc.message)
            if self.alive:
                self.needs_config = True
            return False
        if self.alive:
            self.needs_config = False
        return True

    async def _fetch_year(self) -> List[Mensalidade]:
        if self.is_manager:
            chunks = await asyncio.gather(*(self._dues.of_member(m.id, self.year) for m in self.members))
            return [due for chunk in chunks for due in chunk]
        return await self._dues.mine(self.year)

    async def load_year(self) -> Optional[List[Mensalidade]]:
        if self.busy["load"]:
            return None
        self.busy["load"] = True
        try:
            dues = await self._fetch_year()
        except ApiError as exc:
            self._handle_load_error(exc)
            return None
        finally:
            self.busy["load"] = False
        if not self.alive:
            return None
        self.dues = dues
        return dues

    async def load_carnet(self) -> Optional[List[Mensalidade]]:
        try:
            if self.member_id is not None:
                carnet = await self._dues.of_member(self.member_id, self.year)
            else:
                carnet = await self._dues.mine(self.year)
        except ApiError as exc:
            self._handle_load_error(exc)
            return None
        if not self.alive:
            return None
        self.carnet = carnet
        return carnet

    async def _reload_active(self) -> None:
        if self.view_mode is ViewMode.BY_MONTH:
            await self.load_year()
        else:
            await self.load_carnet()

    # ---------- ações ----------

    def _begin_action(self) -> bool:
        if self.busy["action"]:
            return False
        self.busy["action"] = True
        return True

    async def register_payment(self, due: Mensalidade, data: Union[PaymentForm, Mapping[str, Any]]) -> bool:
        if not can_register_payment(due):
            logger.warning("mensalidade id=%s com status %s não aceita pagamento", due.id, due.status.value)
            return False
        form, self.errors = validate_form(PaymentForm, data)
        if form is None:
            return False
        if not self._begin_action():
            return False
        try:
            paid = await self._dues.pay(due.id, form)
        except ApiError as exc:
            logger.warning("erro ao registrar pagamento id=%s: %s", due.id, exc.message)
            if self.alive:
                self._notifier.error(exc.message)
            return False
        finally:
            self.busy["action"] = False

        if not self.alive:
            return True
        # status devolvido pelo servidor manda
        self.dues = [paid if d.id == paid.id else d for d in self.dues]
        self.carnet = [paid if d.id == paid.id else d for d in self.carnet]
        self._notifier.success("Pagamento registrado com sucesso")
        await self._reload_active()
        return True

    async def generate_year(self) -> bool:
        if not self.is_manager:
            return False
        if not self._begin_action():
            return False
        try:
            await self._dues.generate_year(self.year)
        except ApiError as exc:
            if exc.is_config_missing:
                self._handle_load_error(exc)
            else:
                logger.warning("erro ao gerar mensalidades: %s", exc.message)
                if self.alive:
                    self._notifier.error(exc.message)
            return False
        finally:
            self.busy["action"] = False

        if not self.alive:
            return True
        self._notifier.success("Mensalidades geradas para o ano")
        await self.load_year()
        return True

    async def save_config(self, data: Union[DuesConfigForm, Mapping[str, Any]]) -> bool:
        form, self.errors = validate_form(DuesConfigForm, data)
        if form is None:
            return False
        if not self._begin_action():
            return False
        try:
            await self._dues.upsert_config(form)
        except ApiError as exc:
            logger.warning("erro ao salvar configuração: %s", exc.message)
            if self.alive:
                self._notifier.error(exc.message)
            return False
        finally:
            self.busy["action"] = False

        if not self.alive:
            return True
        self.needs_config = False
        self._notifier.success("Configuração salva com sucesso")
        await self.load_year()
        if self.view_mode is ViewMode.BY_MEMBER or not self.is_manager:
            await self.load_carnet()
        return True
