import pytest

from tbo.domain.errors import NotFoundError, ValidationError
from tbo.domain.models import Person
from tbo.services.expense_service import ExpenseService
from tbo.services.transaction_service import TransactionService


def test_expenses_are_cny_payments_on_holder(container):
    cat = container.expenses.add_category("Rent")
    exp = container.expenses.add_expense(cat.id, 500, description="March", date="2024-03-01")

    tx = container.transactions.get_transaction(exp.id)
    assert (tx.type, tx.currency, tx.entity_id, tx.category_id) == ("PaymentOut", "CNY", 2, cat.id)
    assert tx.description == "March"
    assert container.expenses.holder_cny_balance() == -500


def test_rename_category_keeps_expenses(container):
    cat = container.expenses.add_category("Food")
    container.expenses.add_expense(cat.id, 20, date="2024-01-01")
    container.expenses.rename_category(cat.id, "Meals")

    [summary] = container.expenses.categories_with_expenses()
    assert summary.name == "Meals"
    assert summary.total_spent == 20
    assert container.store.get_transactions()[0].description == ""


def test_categories_sorted_by_name_and_expenses_newest_first(container):
    b = container.expenses.add_category("beta")
    a = container.expenses.add_category("Alpha")
    container.expenses.add_expense(a.id, 1, date="2024-01-01")
    container.expenses.add_expense(a.id, 2, date="2024-02-01")
    container.expenses.add_expense(b.id, 3, date="2024-01-15")

    summaries = container.expenses.categories_with_expenses()
    assert [s.name for s in summaries] == ["Alpha", "beta"]
    assert [e.amount for e in summaries[0].expenses] == [2, 1]
    assert summaries[0].total_spent == 3


def test_delete_category_removes_its_expenses(container):
    keep = container.expenses.add_category("Keep")
    drop = container.expenses.add_category("Drop")
    container.expenses.add_expense(keep.id, 5)
    container.expenses.add_expense(drop.id, 7)
    container.expenses.add_expense(drop.id, 9)

    assert container.expenses.delete_category(drop.id) == 2
    assert [c.name for c in container.expenses.list_categories()] == ["Keep"]
    assert [t.amount for t in container.store.get_transactions()] == [5]


def test_update_and_delete_expense(container):
    cat = container.expenses.add_category("Misc")
    exp = container.expenses.add_expense(cat.id, 10)
    updated = container.expenses.update_expense(exp.id, amount=12, description=" fixed ")
    assert (updated.amount, updated.description) == (12, "fixed")

    container.expenses.delete_expense(exp.id)
    assert container.expenses.categories_with_expenses()[0].expenses == ()


def test_plain_transactions_are_not_expenses(container):
    tx = container.transactions.add_transaction("PaymentOut", 3, "CNY", entity_id=2)
    with pytest.raises(NotFoundError):
        container.expenses.delete_expense(tx.id)


def test_missing_holder_is_reported(store):
    store.set_persons([Person(id=1, name="Amir")])
    expenses = ExpenseService(store, TransactionService(store), holder_name="Jack")
    cat = expenses.add_category("Rent")

    assert expenses.holder_cny_balance() == 0.0
    with pytest.raises(NotFoundError, match="Jack"):
        expenses.add_expense(cat.id, 10)


def test_category_name_required(container):
    with pytest.raises(ValidationError):
        container.expenses.add_category("  ")
