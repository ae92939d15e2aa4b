from __future__ import annotations

import logging
from datetime import date
from functools import partial
from typing import Callable, Optional

import httpx

from babaclub import __version__
from babaclub.api.association import AssociationApi
from babaclub.api.auth import AuthApi
from babaclub.api.category import CategoryApi
from babaclub.api.dues import DuesApi
from babaclub.api.finance import CashSettingsApi, ExpenseApi, IncomeApi, MovementApi
from babaclub.api.http import ApiClient
from babaclub.api.member import MemberApi
from babaclub.api.product import ProductApi
from babaclub.api.purchase import PurchaseApi
from babaclub.api.sale import SaleApi
from babaclub.controllers.dues import DuesController
from babaclub.controllers.filters import (
    CATEGORY_SPEC,
    EXPENSE_SPEC,
    INCOME_SPEC,
    MEMBER_SPEC,
    PRODUCT_SPEC,
    sale_spec,
)
from babaclub.controllers.resource import Messages, ResourceController
from babaclub.core.notify import NotificationCenter
from babaclub.core.settings import Settings, get_settings
from babaclub.core.storage import TOKEN_KEY, NamespacedStorage, SqlStorage, Storage
from babaclub.schemas.category import Categoria
from babaclub.schemas.finance import Despesa, EntradaFinanceira
from babaclub.schemas.member import Associado
from babaclub.schemas.product import Produto
from babaclub.schemas.purchase import Compra
from babaclub.schemas.sale import Venda
from babaclub.state.navigation import NavigationStore
from babaclub.state.session import SessionStore
from babaclub.state.theme import ThemeStore

logger = logging.getLogger(__name__)

LOGIN_SCREEN = "login"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class BabaClient:
    """
    Container da aplicação: APIs, stores e fábricas de controllers.
    Tudo é injetado aqui; nada de singleton global.
    """

    def __init__(self, settings: Settings, http: ApiClient, storage: Storage, notifications: NotificationCenter) -> None:
        self.settings = settings
        self.http = http
        self.storage = storage
        self.notifications = notifications

        self.auth = AuthApi(http)
        self.association = AssociationApi(http)
        self.members_api = MemberApi(http)
        self.products_api = ProductApi(http)
        self.categories_api = CategoryApi(http)
        self.purchases_api = PurchaseApi(http)
        self.sales_api = SaleApi(http)
        self.dues_api = DuesApi(http)
        self.expenses_api = ExpenseApi(http)
        self.incomes_api = IncomeApi(http)
        self.movements_api = MovementApi(http)
        self.cash_settings = CashSettingsApi(http)

        self.navigation = NavigationStore(storage)
        self.session = SessionStore(storage, self.auth, notifications, self.navigation)
        self.theme = ThemeStore(storage, self.session)

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> "BabaClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def start(self) -> None:
        self.session.hydrate()
        self.theme.apply()
        logger.info("%s %s pronto (api=%s)", self.settings.APP_NAME, __version__, self.settings.API_URL)

    def screen(self) -> Optional[str]:
        """``None`` enquanto não hidratou; ``login`` sem identidade; senão a view atual."""
        if not self.session.ready:
            return None
        if not self.session.is_authenticated:
            return LOGIN_SCREEN
        return self.navigation.current.value

    # ---------- controllers ----------

    def categories(self) -> ResourceController[Categoria]:
        api = self.categories_api
        return ResourceController(
            fetch=api.list,
            create=api.create,
            update=api.update,
            delete=api.delete,
            notifier=self.notifications,
            spec=CATEGORY_SPEC,
            messages=Messages(
                created="Categoria criada com sucesso!",
                updated="Categoria atualizada com sucesso!",
                deleted="Categoria excluída com sucesso!",
                reloaded="Categorias recarregadas!",
                bulk_deleted="{n} categoria(s) excluída(s) com sucesso!",
            ),
        )

    def products(self) -> ResourceController[Produto]:
        api = self.products_api
        return ResourceController(
            fetch=api.list,
            create=api.create,
            update=api.update,
            delete=api.delete,
            notifier=self.notifications,
            spec=PRODUCT_SPEC,
            messages=Messages(
                created="Produto criado com sucesso!",
                updated="Produto atualizado com sucesso!",
                deleted="Produto excluído com sucesso!",
                reloaded="Produtos recarregados!",
                bulk_deleted="{n} produto(s) excluído(s) com sucesso!",
            ),
        )

    def purchases(self, **filters) -> ResourceController[Compra]:
        api = self.purchases_api
        return ResourceController(
            fetch=partial(api.list, **filters),
            create=api.create,
            delete=api.delete,
            notifier=self.notifications,
            messages=Messages(
                created="Compra criada com sucesso!",
                deleted="Compra excluída com sucesso!",
                reloaded="Compras recarregadas!",
            ),
            reload_after_create=True,
        )

    def sales(self, today: Optional[Callable[[], date]] = None, **filters) -> ResourceController[Venda]:
        api = self.sales_api
        return ResourceController(
            fetch=partial(api.list, **filters),
            create=api.create,
            notifier=self.notifications,
            spec=sale_spec(today or date.today),
            messages=Messages(created="Venda criada com sucesso!", reloaded="Vendas recarregadas!"),
        )

    def members(self) -> ResourceController[Associado]:
        identity = self.session.identity
        if identity is None or identity.associacao_id is None:
            raise RuntimeError("usuário sem associação")
        api = self.members_api
        return ResourceController(
            fetch=partial(api.list, identity.associacao_id),
            create=partial(api.create, identity.associacao_id),
            update=api.update,
            delete=api.deactivate,
            soft_delete=lambda a: a.model_copy(update={"ativo": False}),
            notifier=self.notifications,
            spec=MEMBER_SPEC,
            messages=Messages(
                created="Associado cadastrado com sucesso!",
                updated="Associado atualizado com sucesso!",
                deleted="Associado desativado com sucesso!",
                bulk_deleted="{n} associado(s) desativado(s) com sucesso!",
            ),
        )

    def expenses(self, **filters) -> ResourceController[Despesa]:
        api = self.expenses_api
        return ResourceController(
            fetch=partial(api.list, **filters),
            create=api.create,
            update=api.update,
            delete=api.delete,
            notifier=self.notifications,
            spec=EXPENSE_SPEC,
            messages=Messages(
                created="Despesa criada com sucesso!",
                updated="Despesa atualizada com sucesso!",
                deleted="Despesa excluída com sucesso!",
            ),
        )

    def incomes(self, **filters) -> ResourceController[EntradaFinanceira]:
        api = self.incomes_api
        return ResourceController(
            fetch=partial(api.list, **filters),
            create=api.create,
            update=api.update,
            delete=api.delete,
            notifier=self.notifications,
            spec=INCOME_SPEC,
            messages=Messages(
                created="Entrada criada com sucesso!",
                updated="Entrada atualizada com sucesso!",
                deleted="Entrada excluída com sucesso!",
            ),
        )

    def dues(self, today=None) -> DuesController:
        kwargs = {"today": today} if today is not None else {}
        return DuesController(self.dues_api, self.members_api, self.session, self.notifications, **kwargs)


def build_client(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    storage: Optional[Storage] = None,
    notifications: Optional[NotificationCenter] = None,
) -> BabaClient:
    settings = settings or get_settings()
    if storage is None:
        storage = SqlStorage.from_url(settings.STORAGE_URL)
    if settings.STORAGE_NAMESPACE:
        storage = NamespacedStorage(storage, settings.STORAGE_NAMESPACE)

    http = ApiClient(
        settings.API_URL,
        timeout=settings.API_TIMEOUT_S,
        token_getter=lambda: storage.get(TOKEN_KEY),
        transport=transport,
    )
    return BabaClient(settings, http, storage, notifications or NotificationCenter())
