from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Callable, Union

from babaclub.controllers.listing import ListSpec, SortKey
from babaclub.schemas.category import Categoria
from babaclub.schemas.finance import Despesa, EntradaFinanceira
from babaclub.schemas.member import Associado
from babaclub.schemas.product import Produto
from babaclub.schemas.sale import Venda


class Period(str, Enum):
    TODAY = "hoje"
    WEEK = "semana"
    MONTH = "mes"
    ALL = "todos"


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def one_month_before(day: date) -> date:
    year, month = (day.year, day.month - 1) if day.month > 1 else (day.year - 1, 12)
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def in_period(when: Union[date, datetime], period: Union[Period, str], today: date) -> bool:
    """Janela relativa a ``today`` (inclusive nas duas pontas, por dia)."""
    period = Period(_plain(period))
    if period is Period.ALL:
        return True
    day = _as_date(when)
    if period is Period.TODAY:
        return day == today
    if period is Period.WEEK:
        return today - timedelta(days=7) <= day <= today
    return one_month_before(today) <= day <= today


CATEGORY_SPEC: ListSpec[Categoria] = ListSpec(
    search_fields=(lambda c: c.nome, lambda c: c.descricao),
    status=lambda c: c.ativo,
)

PRODUCT_SPEC: ListSpec[Produto] = ListSpec(
    search_fields=(lambda p: p.nome, lambda p: p.descricao),
    status=lambda p: p.ativo,
    dimensions={"categoria": lambda p, v: str(p.categoria_id) == str(_plain(v)).strip()},
    sorts={
        "nome": SortKey(lambda p: p.nome),
        "preco": SortKey(lambda p: p.preco_venda),
        "estoque": SortKey(lambda p: p.estoque, reverse=True),
    },
    default_sort="nome",
)

MEMBER_SPEC: ListSpec[Associado] = ListSpec(
    search_fields=(lambda a: a.nome, lambda a: a.apelido, lambda a: a.email),
    status=lambda a: a.ativo,
    dimensions={"posicao": lambda a, v: _plain(a.posicao_preferida) == _plain(v)},
    sorts={"nome": SortKey(lambda a: a.nome)},
)


def sale_spec(today: Callable[[], date] = date.today) -> ListSpec[Venda]:
    """
    Vendas: busca por id ou descrição, forma de pagamento e período; mais recentes primeiro.
    ``today`` é consultado a cada projeção, então o período acompanha a virada do dia.
    """
    return ListSpec(
        search_fields=(lambda v: v.id, lambda v: v.descricao),
        dimensions={
            "forma_pagamento": lambda v, fp: v.forma_pagamento == _plain(fp),
            "periodo": lambda v, p: in_period(v.data, p, today()),
        },
        sorts={"data": SortKey(lambda v: v.data, reverse=True)},
        default_sort="data",
    )


def _ledger_spec() -> ListSpec[Any]:
    return ListSpec(
        search_fields=(lambda e: e.descricao, lambda e: e.tipo),
        dimensions={
            "tipo": lambda e, t: e.tipo == _plain(t),
            "data_inicio": lambda e, d: _as_date(e.data) >= _as_date(d),
            "data_fim": lambda e, d: _as_date(e.data) <= _as_date(d),
        },
        sorts={
            "data": SortKey(lambda e: e.data, reverse=True),
            "valor": SortKey(lambda e: e.valor, reverse=True),
        },
        default_sort="data",
    )


EXPENSE_SPEC: ListSpec[Despesa] = _ledger_spec()
INCOME_SPEC: ListSpec[EntradaFinanceira] = _ledger_spec()
