from dataclasses import replace

import pytest

from tbo.domain.errors import InsufficientStockError, NotFoundError, ValidationError
from tbo.domain.models import InvoiceItem


def test_create_invoice_books_payment_out_and_reduces_stock(container):
    inv = container.invoices.create_invoice(
        4,
        [{"product_id": "p1", "quantity": 10}, {"product_id": "p2", "quantity": 2, "unit_price": 20}],
        currency="USD",
        date="2024-05-01",
    )

    assert inv.invoice_number == "INV-0001"
    assert inv.person_name == "Customer A"
    assert inv.items[0].unit_price == 75.0
    assert inv.total_amount == 10 * 75 + 2 * 20
    assert container.inventory.available("p1") == 140

    tx = container.store.get_transactions()[0]
    assert tx.type == "PaymentOut"
    assert tx.entity_id == 4
    assert tx.amount == inv.total_amount
    assert tx.currency == "USD"
    assert tx.description == "Invoice #INV-0001"
    assert tx.id.endswith("-invoice")
    assert container.balances.balance_of(4)["USD"] == -inv.total_amount


def test_invoice_numbers_increase(container):
    a = container.invoices.create_invoice(4, [{"product_id": "p1", "quantity": 1}])
    b = container.invoices.create_invoice(5, [{"product_id": "p1", "quantity": 1}])
    assert (a.invoice_number, b.invoice_number) == ("INV-0001", "INV-0002")
    assert [i.id for i in container.invoices.list_invoices()] == [b.id, a.id]


def test_oversell_is_rejected_across_repeated_lines(container):
    with pytest.raises(InsufficientStockError, match="Required: 160, Available: 150") as exc_info:
        container.invoices.create_invoice(
            4, [{"product_id": "p1", "quantity": 100}, {"product_id": "p1", "quantity": 60}]
        )
    assert exc_info.value.product_name == "Keyboard"
    assert container.invoices.list_invoices() == []
    assert container.store.get_transactions() == []


def test_stock_check_uses_previous_invoices(container):
    container.invoices.create_invoice(4, [{"product_id": "p2", "quantity": 250}])
    with pytest.raises(InsufficientStockError):
        container.invoices.create_invoice(5, [{"product_id": "p2", "quantity": 51}])
    container.invoices.create_invoice(5, [{"product_id": "p2", "quantity": 50}])
    assert container.inventory.available("p2") == 0


def test_irt_invoice_defaults_to_cny_purchase_price(container):
    inv = container.invoices.create_invoice(4, [{"product_id": "p3", "quantity": 1}], currency="IRT")
    assert inv.items[0].unit_price == 3000.0
    assert container.balances.balance_of(4)["IRT"] == -3000.0


def test_discount_is_subtracted_and_bounded(container):
    inv = container.invoices.create_invoice(4, [{"product_id": "p2", "quantity": 4}], discount=10)
    assert inv.subtotal == 100
    assert inv.total_amount == 90

    with pytest.raises(ValidationError, match="Discount"):
        container.invoices.create_invoice(4, [{"product_id": "p2", "quantity": 1}], discount=26)


@pytest.mark.parametrize(
    "person_id, items, currency, exc",
    [
        (4, [], "USD", ValidationError),
        (4, [{"product_id": "p1", "quantity": 1}], "CNY", ValidationError),
        (999, [{"product_id": "p1", "quantity": 1}], "USD", NotFoundError),
        (None, [{"product_id": "p1", "quantity": 1}], "USD", NotFoundError),
        (4, [{"product_id": "nope", "quantity": 1}], "USD", NotFoundError),
        (4, [{"product_id": "p1", "quantity": 0}], "USD", ValidationError),
        (4, [{"product_id": "p1", "quantity": 1, "unit_price": -5}], "USD", ValidationError),
    ],
)
def test_create_invoice_validation(container, person_id, items, currency, exc):
    with pytest.raises(exc):
        container.invoices.create_invoice(person_id, items, currency=currency)
    assert container.invoices.list_invoices() == []


def test_delete_invoice_restores_stock_but_keeps_payment(container):
    inv = container.invoices.create_invoice(4, [{"product_id": "p1", "quantity": 50}])
    container.invoices.delete_invoice(inv.id)

    assert container.inventory.available("p1") == 150
    assert len(container.store.get_transactions()) == 1
    with pytest.raises(NotFoundError):
        container.invoices.get_invoice(inv.id)


def test_invoice_numbers_are_not_reused_after_delete(container):
    first = container.invoices.create_invoice(4, [{"product_id": "p1", "quantity": 1}])
    second = container.invoices.create_invoice(4, [{"product_id": "p1", "quantity": 1}])
    container.invoices.delete_invoice(first.id)

    third = container.invoices.create_invoice(5, [{"product_id": "p1", "quantity": 1}])
    assert second.invoice_number == "INV-0002"
    assert third.invoice_number == "INV-0003"


def test_update_invoice_checks_stock_without_its_own_lines(container):
    inv = container.invoices.create_invoice(4, [{"product_id": "p1", "quantity": 100}], date="2024-05-01")
    edited = replace(
        inv,
        items=(InvoiceItem(product_id="p1", product_name="Keyboard", quantity=150, unit_price=70),),
        discount=500,
        total_amount=1,
    )

    saved = container.invoices.update_invoice(edited)

    assert saved.invoice_number == inv.invoice_number
    assert saved.total_amount == 150 * 70 - 500
    assert container.invoices.get_invoice(inv.id).total_amount == saved.total_amount
    assert container.inventory.available("p1") == 0
    # the payment booked at creation is not rewritten
    assert container.store.get_transactions()[0].amount == inv.total_amount


def test_update_invoice_rejects_oversell(container):
    container.invoices.create_invoice(4, [{"product_id": "p1", "quantity": 100}])
    inv = container.invoices.create_invoice(5, [{"product_id": "p1", "quantity": 40}])
    edited = replace(inv, items=(InvoiceItem(product_id="p1", product_name="Keyboard", quantity=60, unit_price=75),))

    with pytest.raises(InsufficientStockError, match="Required: 60, Available: 50"):
        container.invoices.update_invoice(edited)
    assert container.invoices.get_invoice(inv.id) == inv
    assert container.inventory.available("p1") == 10


@pytest.mark.parametrize(
    "changes, exc",
    [
        ({"currency": "CNY"}, ValidationError),
        ({"items": ()}, ValidationError),
        ({"items": (InvoiceItem(product_id="nope", product_name="?", quantity=1, unit_price=1),)}, NotFoundError),
        ({"items": (InvoiceItem(product_id="p2", product_name="Mouse", quantity=0, unit_price=1),)}, ValidationError),
        ({"items": (InvoiceItem(product_id="p2", product_name="Mouse", quantity=1, unit_price=float("nan")),)}, ValidationError),
        ({"discount": 1000}, ValidationError),
        ({"person_id": 999}, NotFoundError),
        ({"date": "05/01/2024"}, ValidationError),
    ],
)
def test_update_invoice_validation(container, changes, exc):
    inv = container.invoices.create_invoice(4, [{"product_id": "p2", "quantity": 2}])
    with pytest.raises(exc):
        container.invoices.update_invoice(replace(inv, **changes))
    assert container.invoices.get_invoice(inv.id) == inv


def test_update_unknown_invoice_is_not_found(container):
    inv = container.invoices.create_invoice(4, [{"product_id": "p2", "quantity": 2}])
    container.invoices.delete_invoice(inv.id)
    with pytest.raises(NotFoundError):
        container.invoices.update_invoice(inv)
