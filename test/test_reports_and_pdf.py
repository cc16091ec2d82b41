from pathlib import Path

from openpyxl import load_workbook


def test_ledger_report_has_three_sheets(container, tmp_path: Path):
    container.transactions.add_transaction("PaymentIn", 100, "USD", entity_id=1, date="2024-01-01")
    container.transactions.add_transaction(
        "InternalTransfer", 40, "USD", from_entity_id=1, to_entity_id=99, date="2024-01-02"
    )
    path = tmp_path / "ledger.xlsx"
    container.reporting.export_ledger_report(str(path))

    wb = load_workbook(path)
    assert wb.sheetnames == ["Summary", "Balances", "Transactions"]

    summary = wb["Summary"]
    assert summary["A7"].value == "USD"
    assert summary["B7"].value == 100

    balances = wb["Balances"]
    assert [c.value for c in balances[1]] == ["Person ID", "Name", "USD", "CNY", "IRT"]
    assert balances["B2"].value == "Amir"
    assert balances["C2"].value == 60
    assert balances.max_row == 6

    txs = wb["Transactions"]
    assert txs["B2"].value == "2024-01-02"
    assert txs["H2"].value == "N/A"


def test_invoice_pdf_is_written(container, tmp_path: Path):
    inv = container.invoices.create_invoice(
        4, [{"product_id": "p1", "quantity": 2}, {"product_id": "p3", "quantity": 1}], discount=5
    )
    out = container.invoice_pdf.render_invoice(inv, tmp_path / f"{inv.invoice_number}.pdf")

    assert out.exists()
    assert out.read_bytes().startswith(b"%PDF")


def test_invoice_pdf_handles_many_lines(container, tmp_path: Path):
    for i in range(60):
        container.products.add_product(f"BULK-{i}")
    for p in container.products.list_products():
        container.inventory.set_initial_stock(p.id, 1)
    items = [{"product_id": p.id, "quantity": 1, "unit_price": 1} for p in container.products.list_products()]
    inv = container.invoices.create_invoice(5, items)

    out = container.invoice_pdf.render_invoice(inv, tmp_path / "long.pdf")
    assert out.stat().st_size > 0
