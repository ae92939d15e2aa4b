from decimal import Decimal

from babaclub.controllers.forms import validate_form
from babaclub.schemas.dues import DuesConfigForm, PaymentForm
from babaclub.schemas.product import ProdutoForm
from babaclub.schemas.purchase import CompraForm
from babaclub.schemas.sale import VendaForm


def sale(itens, forma="pix"):
    return {"forma_pagamento": forma, "itens": itens}


def test_sale_total_and_payload():
    form, errors = validate_form(
        VendaForm,
        sale([
            {"produto_id": 1, "quantidade": 2, "preco_unit": "10.00"},
            {"produto_id": 2, "quantidade": 1, "preco_unit": "5.00"},
        ]),
    )
    assert errors == {}
    assert form.total == Decimal("25.00")
    assert len(form.itens) == 2

    payload = form.to_payload()
    assert payload["formaPagamento"] == "pix"
    assert payload["itens"][0] == {"produtoId": 1, "quantidade": 2, "precoUnit": 10.0}


def test_sale_rejects_bad_items():
    _, errors = validate_form(VendaForm, sale([{"produto_id": "", "quantidade": 1, "preco_unit": 5}]))
    assert errors == {"itens.0.produto_id": "Selecione um produto"}

    _, errors = validate_form(VendaForm, sale([{"produto_id": 1, "quantidade": 0, "preco_unit": 5}]))
    assert errors == {"itens.0.quantidade": "Quantidade deve ser > 0"}

    _, errors = validate_form(VendaForm, sale([{"produto_id": 1, "quantidade": 1, "preco_unit": "0"}]))
    assert errors == {"itens.0.preco_unit": "Preço unitário deve ser > 0"}


def test_sale_requires_payment_method_and_items():
    _, errors = validate_form(VendaForm, sale([], forma=""))
    assert errors["forma_pagamento"] == "Forma de pagamento é obrigatória"
    assert errors["itens"] == "Adicione pelo menos um item"


def test_product_promo_cannot_exceed_sale_price():
    form, errors = validate_form(ProdutoForm, {"nome": "Camisa", "preco_venda": 50, "preco_promocional": 60, "estoque": 3})
    assert form is None
    assert errors == {"preco_promocional": "Preço promocional não pode ser maior que preço de venda"}


def test_product_required_fields_and_blank_optionals():
    _, errors = validate_form(ProdutoForm, {"nome": "", "preco_venda": "abc", "estoque": -1})
    assert errors["nome"] == "Campo obrigatório"
    assert errors["preco_venda"] == "Deve ser um número válido"
    assert "estoque" in errors

    form, errors = validate_form(
        ProdutoForm,
        {"nome": "Bola", "preco_venda": "80", "preco_compra": "", "preco_promocional": "", "estoque": 2},
    )
    assert errors == {}
    assert form.preco_compra is None
    assert "precoPromocional" not in form.to_payload()


def test_purchase_requires_supplier_and_items():
    _, errors = validate_form(CompraForm, {"fornecedor": "  ", "itens": []})
    assert set(errors) == {"fornecedor", "itens"}


def test_payment_form_requires_date_and_method():
    _, errors = validate_form(PaymentForm, {"data_pagamento": "", "forma_pagamento": ""})
    assert set(errors) == {"data_pagamento", "forma_pagamento"}

    form, errors = validate_form(PaymentForm, {"data_pagamento": "2026-10-19", "forma_pagamento": "PIX", "observacoes": ""})
    assert errors == {}
    assert form.to_payload() == {"dataPagamento": "2026-10-19", "formaPagamento": "PIX"}


def test_dues_config_defaults_and_day_range():
    form, errors = validate_form(DuesConfigForm, {})
    assert errors == {}
    assert form.to_payload() == {"valorPadrao": 0.0, "diaVencimento": 10, "ativo": True}

    _, errors = validate_form(DuesConfigForm, {"valor_padrao": -1, "dia_vencimento": 29})
    assert set(errors) == {"valor_padrao", "dia_vencimento"}
