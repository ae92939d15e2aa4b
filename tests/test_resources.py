from decimal import Decimal

import pytest

from babaclub.controllers.listing import FilterState
from babaclub.schemas.association import AssociacaoForm, GameType
from babaclub.schemas.member import AssociadoForm


@pytest.mark.anyio
async def test_categories_are_unwrapped(logged_client):
    cats = await logged_client.categories_api.list()
    assert [c.nome for c in cats] == ["Bebidas", "Lanches", "Uniformes"]
    assert cats[0].produtos_count == 2


@pytest.mark.anyio
async def test_product_list_filters_become_query(logged_client, backend):
    await logged_client.products_api.list(categoria_id=1, ativo=True, take=20)
    assert backend.last_call("GET", "/produtos")["query"] == {"categoriaId": "1", "ativo": "true", "take": "20"}


@pytest.mark.anyio
async def test_my_association_update_is_always_multipart(logged_client, backend):
    org = await logged_client.association.mine()
    assert org.tipo_jogo_padrao is GameType.BABA

    form = AssociacaoForm(nome="Baba do Domingo", horario_padrao_inicio="08:00")
    updated = await logged_client.association.update_mine(form)

    assert updated.nome == "Baba do Domingo"
    assert backend.last_call("PUT", "/associacao/minha")["content_type"].startswith("multipart/form-data")
    assert backend.payloads["associacao"]["horarioPadraoInicio"] == "08:00"
    assert "logo" not in backend.payloads["associacao"]


@pytest.mark.anyio
async def test_member_create_json_or_multipart(logged_client, backend):
    form = AssociadoForm(nome="Caio Reis", email="caio@baba.com", numero_camisa_padrao=10)

    plain = await logged_client.members_api.create(10, form)
    assert backend.last_call("POST", "/associacoes/10/associados")["content_type"] == "application/json"
    assert backend.payloads["associado"]["numeroCamisaPadrao"] == 10
    assert plain.nome == "Caio Reis"

    foto = ("caio.jpg", b"\xff\xd8", "image/jpeg")
    with_photo = await logged_client.members_api.create(10, form, foto=foto)
    assert backend.last_call("POST", "/associacoes/10/associados")["content_type"].startswith("multipart/form-data")
    assert backend.payloads["associado"]["foto"] == "caio.jpg"
    assert with_photo.id != plain.id


@pytest.mark.anyio
async def test_members_controller_deactivates(logged_client, backend):
    ctrl = logged_client.members()
    await ctrl.reload()
    assert [m.id for m in ctrl.items] == [1, 2]

    ctrl.set_filters(FilterState(search="betão"))
    assert [m.id for m in ctrl.visible()] == [2]

    assert await ctrl.delete(2)
    assert backend.associados[2]["ativo"] is False
    patched = [(m.id, m.ativo) for m in ctrl.items]
    assert patched == [(1, True), (2, False)]
    assert [m.id for m in ctrl.visible()] == [2]

    ctrl.set_filters(FilterState(status="inativos"))
    assert [m.id for m in ctrl.visible()] == [2]

    # o patch local bate com o que o servidor devolve
    await ctrl.reload()
    assert [(m.id, m.ativo) for m in ctrl.items] == patched


@pytest.mark.anyio
async def test_members_bulk_deactivate_keeps_rows(logged_client, backend):
    ctrl = logged_client.members()
    await ctrl.reload()
    ctrl.select_all()

    result = await ctrl.bulk_delete()

    assert result.ok
    assert [(m.id, m.ativo) for m in ctrl.items] == [(1, False), (2, False)]
    assert len(ctrl.selection) == 0
    assert logged_client.notifications.messages("success") == ["2 associado(s) desativado(s) com sucesso!"]


@pytest.mark.anyio
async def test_cash_figures_come_preaggregated(logged_client):
    movements = logged_client.movements_api
    assert await movements.current_balance() == Decimal("150.50")

    resumo = await movements.dashboard_summary()
    assert resumo.total_entradas == Decimal("300")
    assert resumo.saldo_atual == Decimal("150.5")

    cfg = await logged_client.cash_settings.get()
    assert (cfg.saldo_inicial, cfg.mes_atual, cfg.ano_atual) == (Decimal("100.00"), 10, 2026)


@pytest.mark.anyio
async def test_expenses_money_accepts_number_or_string(logged_client, backend):
    ctrl = logged_client.expenses(tipo="CAMPO")
    await ctrl.reload()

    assert [d.valor for d in ctrl.items] == [Decimal("120.00"), Decimal("80")]
    assert backend.last_call("GET", "/despesas")["query"] == {"tipo": "CAMPO"}
    # mais recente primeiro
    assert [d.id for d in ctrl.visible()] == [2, 1]
    assert [d.id for d in ctrl.visible() if d.tipo == "MATERIAL"] == [2]
