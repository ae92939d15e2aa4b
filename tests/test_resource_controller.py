from decimal import Decimal

import pytest

from babaclub.controllers.listing import FilterState
from babaclub.controllers.resource import BatchResult, ResourceController
from babaclub.core.errors import ApiError
from babaclub.core.notify import NotificationCenter
from babaclub.schemas.category import CategoriaForm
from babaclub.schemas.product import ProdutoForm
from babaclub.schemas.purchase import CompraForm
from babaclub.schemas.sale import VendaForm


@pytest.mark.anyio
async def test_reload_twice_yields_same_snapshot(logged_client):
    ctrl = logged_client.categories()
    first = await ctrl.reload()
    second = await ctrl.reload()
    assert [c.id for c in first] == [1, 2, 3]
    assert first == second


@pytest.mark.anyio
async def test_bulk_delete_reports_partial_failure(logged_client, backend):
    backend.fail_delete = {2}
    ctrl = logged_client.categories()
    await ctrl.reload()
    ctrl.select_all()
    assert ctrl.selection.ids == {1, 2, 3}

    result = await ctrl.bulk_delete()

    assert result == BatchResult(succeeded=2, failed=1, failed_ids=(2,))
    assert [c.id for c in ctrl.items] == [2]
    assert len(ctrl.selection) == 0
    assert logged_client.notifications.messages("error") == ["2 excluído(s), 1 erro(s)"]
    assert backend.count("DELETE", "/categorias/1") == 1
    assert backend.count("DELETE", "/categorias/3") == 1


@pytest.mark.anyio
async def test_bulk_delete_all_ok(logged_client):
    ctrl = logged_client.categories()
    await ctrl.reload()
    result = await ctrl.bulk_delete([1, 3])
    assert result.ok
    assert [c.id for c in ctrl.items] == [2]
    assert logged_client.notifications.messages("success") == ["2 categoria(s) excluída(s) com sucesso!"]


@pytest.mark.anyio
async def test_select_all_uses_visible_rows(logged_client):
    ctrl = logged_client.categories()
    await ctrl.reload()
    ctrl.set_filters(FilterState(status="inativos"))
    ctrl.select_all()
    assert ctrl.selection.ids == {3}

    # limpar filtros não mexe na seleção
    ctrl.set_filters(ctrl.filters.cleared())
    assert ctrl.selection.ids == {3}


@pytest.mark.anyio
async def test_create_appends_and_update_replaces(logged_client, backend):
    ctrl = logged_client.categories()
    await ctrl.reload()

    created = await ctrl.save(CategoriaForm, {"nome": "Chuteiras", "descricao": "Society"})
    assert created.nome == "Chuteiras"
    assert ctrl.items[-1].id == created.id

    updated = await ctrl.save(CategoriaForm, {"nome": "Chuteiras Pro", "ativo": False}, item_id=created.id)
    assert updated.nome == "Chuteiras Pro"
    assert ctrl.find(created.id).ativo is False
    assert len(ctrl.items) == 4
    assert logged_client.notifications.messages("success") == [
        "Categoria criada com sucesso!",
        "Categoria atualizada com sucesso!",
    ]


@pytest.mark.anyio
async def test_validation_failure_skips_network(logged_client, backend):
    ctrl = logged_client.categories()
    assert await ctrl.save(CategoriaForm, {"nome": ""}) is None
    assert ctrl.errors == {"nome": "Campo obrigatório"}
    assert backend.count("POST", "/categorias") == 0


@pytest.mark.anyio
async def test_failed_delete_leaves_collection(logged_client, backend):
    backend.fail_delete = {1}
    ctrl = logged_client.categories()
    await ctrl.reload()
    assert await ctrl.delete(1) is False
    assert [c.id for c in ctrl.items] == [1, 2, 3]
    assert logged_client.notifications.messages("error") == ["Categoria possui produtos vinculados"]


@pytest.mark.anyio
async def test_duplicate_trigger_is_ignored(logged_client, backend):
    ctrl = logged_client.categories()
    ctrl.busy["save"] = True
    assert await ctrl.save(CategoriaForm, {"nome": "Outra"}) is None
    assert backend.count("POST", "/categorias") == 0


@pytest.mark.anyio
async def test_closed_controller_drops_late_results():
    notifications = NotificationCenter()
    holder = {}

    async def fetch():
        holder["ctrl"].close()
        return [object()]

    async def failing_delete(item_id):
        raise ApiError("boom")

    ctrl = ResourceController(fetch=fetch, delete=failing_delete, notifier=notifications)
    holder["ctrl"] = ctrl

    assert await ctrl.reload() is None
    assert ctrl.items == []
    assert await ctrl.delete(1) is False
    assert notifications.pending == []


@pytest.mark.anyio
async def test_load_error_notifies_and_keeps_items():
    notifications = NotificationCenter()

    async def fetch():
        raise ApiError("Erro ao listar categorias.")

    ctrl = ResourceController(fetch=fetch, notifier=notifications)
    ctrl.items = ["antigo"]
    assert await ctrl.reload() is None
    assert ctrl.items == ["antigo"]
    assert notifications.messages("error") == ["Erro ao listar categorias."]
    assert not ctrl.is_busy()


@pytest.mark.anyio
async def test_product_create_is_multipart_with_initial_stock(logged_client, backend):
    ctrl = logged_client.products()
    foto = ("bola.png", b"\x89PNG", "image/png")

    produto = await ctrl.save(
        ProdutoForm,
        {"nome": "Bola", "preco_venda": "120.00", "estoque": 4, "categoria_id": "1"},
        imagem=foto,
    )

    assert produto.estoque == 4
    assert produto.preco_venda == Decimal("120")
    call = backend.last_call("POST", "/produtos")
    assert call["content_type"].startswith("multipart/form-data")
    assert backend.payloads["produto"]["estoqueInicial"] == "4"
    assert backend.payloads["produto"]["imagem"] == "bola.png"
    assert "estoque" not in backend.payloads["produto"]


@pytest.mark.anyio
async def test_product_promo_validation_blocks_create(logged_client, backend):
    ctrl = logged_client.products()
    res = await ctrl.save(ProdutoForm, {"nome": "Camisa", "preco_venda": 50, "preco_promocional": 60, "estoque": 1})
    assert res is None
    assert ctrl.errors == {"preco_promocional": "Preço promocional não pode ser maior que preço de venda"}
    assert backend.count("POST", "/produtos") == 0


@pytest.mark.anyio
async def test_product_status_action_patches_item(logged_client):
    ctrl = logged_client.products()
    produto = await ctrl.save(ProdutoForm, {"nome": "Apito", "preco_venda": 15, "estoque": 1})

    ok = await ctrl.perform(
        lambda: logged_client.products_api.set_status(produto.id, False),
        patch=lambda p: p,
        success="Status atualizado",
    )

    assert ok
    assert ctrl.find(produto.id).ativo is False


@pytest.mark.anyio
async def test_purchase_create_reloads_collection(logged_client, backend):
    ctrl = logged_client.purchases()
    await ctrl.reload()
    compra = await ctrl.save(
        CompraForm,
        {"fornecedor": "Atacadão", "itens": [{"produto_id": 1, "quantidade": 3, "custo_unit": "4.50"}]},
    )
    assert compra.total == Decimal("13.5")
    assert backend.count("GET", "/compras") == 2
    assert [c.id for c in ctrl.items] == [compra.id]


@pytest.mark.anyio
async def test_sale_create_and_cancel(logged_client, backend):
    ctrl = logged_client.sales()
    venda = await ctrl.save(
        VendaForm,
        {
            "forma_pagamento": "pix",
            "itens": [
                {"produto_id": 1, "quantidade": 2, "preco_unit": "10.00"},
                {"produto_id": 2, "quantidade": 1, "preco_unit": "5.00"},
            ],
        },
    )
    assert venda.total == Decimal("25")
    assert len(venda.itens) == 2

    ok = await ctrl.perform(
        lambda: logged_client.sales_api.cancel(venda.id),
        reload=True,
        success="Venda cancelada com sucesso!",
    )
    assert ok
    assert ctrl.find(venda.id).status == "cancelada"

    # segunda tentativa: servidor recusa e a mensagem chega ao usuário
    assert not await ctrl.perform(lambda: logged_client.sales_api.cancel(venda.id), reload=True)
    assert logged_client.notifications.messages("error") == ["Venda já cancelada"]


@pytest.mark.anyio
async def test_missing_operations_raise_runtime_error(logged_client, backend):
    ctrl = logged_client.sales()
    with pytest.raises(RuntimeError):
        await ctrl.save(VendaForm, {"forma_pagamento": "pix", "itens": [{"produto_id": 1, "quantidade": 1, "preco_unit": 5}]}, item_id=1)
    with pytest.raises(RuntimeError):
        await ctrl.delete(1)
    with pytest.raises(RuntimeError):
        await ctrl.bulk_delete([1])
    assert backend.count("PUT", "/vendas/1") == 0
    assert backend.count("DELETE", "/vendas/1") == 0
