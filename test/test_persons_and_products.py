import pytest

from tbo.domain.errors import NotFoundError, ValidationError
from tbo.services.inventory_service import InventoryService
from tbo.services.person_service import PersonService
from tbo.services.product_service import ProductFilter, ProductService
from tbo.services.transaction_service import TransactionService


def test_add_person_trims_and_assigns_unique_ids(store):
    persons = PersonService(store)
    a = persons.add_person("  Alice ")
    b = persons.add_person("Bob")
    assert a.name == "Alice"
    assert a.id != b.id

    with pytest.raises(ValidationError):
        persons.add_person("   ")


def test_delete_person_keeps_transactions(store, caplog):
    persons = PersonService(store)
    txs = TransactionService(store)
    p = persons.add_person("Alice")
    txs.add_transaction("PaymentIn", 5, "USD", entity_id=p.id)

    with caplog.at_level("WARNING", logger="tbo.ledger"):
        persons.delete_person(p.id)

    assert persons.list_persons() == []
    assert len(store.get_transactions()) == 1
    assert "person_deleted_with_references" in caplog.text


def test_rename_missing_person_raises(store):
    with pytest.raises(NotFoundError):
        PersonService(store).rename_person(123, "X")


def test_product_requires_item_code_and_non_negative_prices(store):
    products = ProductService(store)
    with pytest.raises(ValidationError, match="Item code is required"):
        products.add_product("  ")
    with pytest.raises(ValidationError, match="Prices must be >= 0"):
        products.add_product("X-1", usd_selling_price=-1)
    with pytest.raises(ValidationError, match="Unknown product fields"):
        products.add_product("X-1", colour="red")


def test_update_product_replaces_fields(seeded_store):
    products = ProductService(seeded_store)
    updated = products.update_product("p1", usd_selling_price="80", warehouse_name=" Main ")
    assert updated.usd_selling_price == 80.0
    assert updated.warehouse_name == "Main"
    assert products.get_product("p1") == updated


def test_filter_products_by_text_and_ranges(seeded_store):
    products = ProductService(seeded_store)
    stock = InventoryService(seeded_store).current_stock()

    hw = products.filter_products(ProductFilter(item_code="hw"), stock)
    assert {p.id for p in hw} == {"p1", "p2"}

    pricey = products.filter_products(ProductFilter(min_usd_price=50), stock)
    assert {p.id for p in pricey} == {"p1", "p3"}

    low_stock = products.filter_products(ProductFilter(max_stock=200), stock)
    assert [p.id for p in low_stock] == ["p1"]

    assert not ProductFilter().is_active
    assert ProductFilter(min_stock=0).is_active


def test_set_initial_stock_validates(seeded_store):
    inventory = InventoryService(seeded_store)
    inventory.set_initial_stock("p1", 7)
    assert inventory.available("p1") == 7

    with pytest.raises(ValidationError):
        inventory.set_initial_stock("p1", -1)
    with pytest.raises(ValidationError):
        inventory.set_initial_stock("p1", "abc")
    with pytest.raises(NotFoundError):
        inventory.set_initial_stock("nope", 1)


def test_deleting_product_keeps_inventory_entry(seeded_store):
    ProductService(seeded_store).delete_product("p2")
    rows = InventoryService(seeded_store).stock_rows()
    assert [r.product.id for r in rows] == ["p1", "p3"]
    assert seeded_store.get_inventory()["p2"] == 300
