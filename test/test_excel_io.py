from pathlib import Path

import pytest
from openpyxl import Workbook, load_workbook

from tbo.domain.errors import ValidationError
from tbo.services.excel_service import INVENTORY_COLUMNS


def _write(path: Path, rows):
    wb = Workbook()
    ws = wb.active
    for r in rows:
        ws.append(r)
    wb.save(path)
    return str(path)


def test_import_creates_updates_and_skips(container, tmp_path: Path):
    container.inventory.set_initial_stock("p2", 0)
    path = _write(tmp_path / "inv.xlsx", [
        ["SKU", "Brand Name", "Specifications", "Current Stock", "usd_selling_price"],
        ["HW-001", "", "", 5, ""],
        ["HW-002", "", "", "1,200", ""],
        ["NEW-1", "Acme", "Cable", 40, "3.5"],
        ["NEW-1", "Acme", "Cable", 41, "3.5"],
        [None, "Orphan", "", 3, ""],
        ["BAD-1", "", "", "lots", ""],
    ])

    analysis = container.excel.import_inventory_excel(path)

    assert [(u.item_code, u.old_quantity, u.new_quantity, u.change) for u in analysis.updated_items] == [
        ("HW-002", 0, 1200, 1200),
    ]
    assert [n.item_code for n in analysis.new_items] == ["NEW-1"]
    reasons = {s.item_code: s.reason for s in analysis.skipped_items}
    assert reasons["HW-001"].startswith("Product already has initial inventory")
    assert reasons["NEW-1"] == "Duplicate item code in uploaded file"
    assert reasons["Row 6"] == "Empty item code"
    assert reasons["BAD-1"] == "Invalid quantity value"
    assert analysis.total_rows == 6

    new = container.products.find_by_item_code("NEW-1")
    assert (new.brand_named, new.specifications, new.usd_selling_price) == ("Acme", "Cable", 3.5)
    assert container.inventory.initial_stock(new.id) == 40
    assert container.inventory.initial_stock("p2") == 1200


def test_quantity_column_is_added_when_no_current_stock(container, tmp_path: Path):
    container.inventory.set_initial_stock("p1", 0)
    path = _write(tmp_path / "q.xlsx", [["item_code", "quantity"], ["HW-001", 12]])
    analysis = container.excel.import_inventory_excel(path)
    assert analysis.updated_items[0].new_quantity == 12


def test_missing_item_code_column_skips_everything(container, tmp_path: Path):
    path = _write(tmp_path / "bad.xlsx", [["name", "quantity"], ["x", 1]])
    analysis = container.excel.import_inventory_excel(path)
    assert [s.reason for s in analysis.skipped_items] == ["Item code column not found"]
    assert analysis.new_items == []


def test_missing_quantity_columns_raise(container, tmp_path: Path):
    path = _write(tmp_path / "bad.xlsx", [["item_code"], ["HW-001"]])
    with pytest.raises(ValidationError):
        container.excel.import_inventory_excel(path)


def test_export_current_inventory(container, tmp_path: Path):
    container.invoices.create_invoice(4, [{"product_id": "p1", "quantity": 50}])
    path = tmp_path / "out.xlsx"
    assert container.excel.export_current_inventory(str(path)) == 3

    ws = load_workbook(path).active
    assert [c.value for c in ws[1]] == INVENTORY_COLUMNS
    first = [c.value for c in ws[2]]
    assert first[0] == "HW-001"
    assert first[6:8] == [150, 100]


def test_template_and_analysis_exports(container, tmp_path: Path):
    template = tmp_path / "template.xlsx"
    container.excel.export_inventory_template(str(template))
    assert [c.value for c in load_workbook(template).active[1]] == INVENTORY_COLUMNS

    source = _write(tmp_path / "in.xlsx", [["item_code", "current_stock"], ["NEW-9", 4], ["HW-001", 1]])
    analysis = container.excel.import_inventory_excel(source)
    out = tmp_path / "analysis.xlsx"
    container.excel.export_upload_analysis(analysis, str(out))

    wb = load_workbook(out)
    assert wb.sheetnames == ["Summary", "New Items", "Updated Items", "Skipped Items"]
    assert wb["Summary"]["B3"].value == 1
    assert wb["Skipped Items"]["A2"].value == "HW-001"
