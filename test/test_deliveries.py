import pytest

from tbo.domain.errors import NotFoundError, ValidationError


def _add(container, date, **kw):
    values = dict(carton_count=3, weight=12.5, receipt_number="R-1")
    values.update(kw)
    category = values.pop("category", "cat1")
    return container.deliveries.add_delivery(category, date, **values)


def test_add_delivery_defaults(container):
    d = _add(container, "2024-04-01")
    assert (d.delivery_type, d.destination, d.is_arrived) == ("sea", "dubai", False)
    assert d.receipt_photo is None
    assert container.deliveries.category_name(d.order_number_category_id) == "Standard Orders"


@pytest.mark.parametrize(
    "kw, exc",
    [
        ({"category": "missing"}, NotFoundError),
        ({"carton_count": -1}, ValidationError),
        ({"weight": "heavy"}, ValidationError),
        ({"receipt_number": " "}, ValidationError),
        ({"delivery_type": "rail"}, ValidationError),
        ({"destination": "paris"}, ValidationError),
    ],
)
def test_add_delivery_validation(container, kw, exc):
    with pytest.raises(exc):
        _add(container, "2024-04-01", **kw)
    assert container.store.get_deliveries() == []


def test_filters_and_newest_first(container):
    _add(container, "2024-01-10", delivery_type="air")
    _add(container, "2024-03-10", category="cat2", destination="iraq")
    _add(container, "2024-02-10")

    assert [d.delivery_date for d in container.deliveries.filter_deliveries()] == [
        "2024-03-10", "2024-02-10", "2024-01-10",
    ]
    assert len(container.deliveries.filter_deliveries(order_number_category_id="cat2")) == 1
    assert len(container.deliveries.filter_deliveries(delivery_type="air")) == 1
    assert len(container.deliveries.filter_deliveries(destination="dubai")) == 2
    assert len(container.deliveries.filter_deliveries(date_from="2024-02-01", date_to="2024-02-28")) == 1


def test_set_arrived_and_delete(container):
    d = _add(container, "2024-04-01")
    assert container.deliveries.set_arrived(d.id, True).is_arrived
    assert container.deliveries.get_delivery(d.id).is_arrived

    container.deliveries.delete_delivery(d.id)
    with pytest.raises(NotFoundError):
        container.deliveries.get_delivery(d.id)


def test_order_number_categories(container):
    cat = container.deliveries.add_category("Bulk")
    container.deliveries.rename_category(cat.id, "Bulk Orders")
    assert [c.name for c in container.deliveries.list_categories()][-1] == "Bulk Orders"

    d = _add(container, "2024-04-01", category=cat.id)
    container.deliveries.delete_category(cat.id)
    assert container.deliveries.category_name(d.order_number_category_id) == "N/A"


def test_list_page(container):
    for day in range(1, 13):
        _add(container, f"2024-01-{day:02d}")
    page = container.deliveries.list_page(2)
    assert (page.page, page.total_pages, len(page.items)) == (2, 2, 2)
