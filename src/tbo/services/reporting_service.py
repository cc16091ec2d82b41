from __future__ import annotations

from datetime import date

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from tbo.domain.models import CURRENCIES
from tbo.repositories.memory_store import MemoryStore
from tbo.services.balance_service import BalanceService


class ReportingService:
    def __init__(self, store: MemoryStore, balances: BalanceService):
        self.store = store
        self.balances = balances

    def export_ledger_report(self, path: str) -> None:
        wb = Workbook()

        def money(cell):
            cell.number_format = "#,##0.00"

        def bold_row(ws, r):
            for c in ws[r]:
                c.font = Font(bold=True)

        def set_widths(ws, widths: dict[str, int]):
            for col, w in widths.items():
                ws.column_dimensions[col].width = w

        def add_table(ws, name: str, start_row: int, start_col: int, end_row: int, end_col: int):
            ref = f"{get_column_letter(start_col)}{start_row}:{get_column_letter(end_col)}{end_row}"
            tab = Table(displayName=name, ref=ref)
            tab.tableStyleInfo = TableStyleInfo(
                name="TableStyleMedium9",
                showRowStripes=True,
                showColumnStripes=False,
            )
            ws.add_table(tab)

        persons = {p.id: p.name for p in self.store.get_persons()}
        transactions = sorted(self.store.get_transactions(), key=lambda t: t.date, reverse=True)

        # -------- 1) Summary --------
        ws = wb.active
        ws.title = "Summary"
        ws["A1"] = "Ledger summary"
        ws["A1"].font = Font(bold=True, size=14)
        ws["A3"] = "Generated"
        ws["B3"] = date.today().isoformat()
        ws["A4"] = "Transactions"
        ws["B4"] = len(transactions)

        ws["A6"] = "Currency"
        ws["B6"] = "Net (In - Out)"
        bold_row(ws, 6)
        totals = self.balances.currency_totals()
        for i, code in enumerate(CURRENCIES, start=7):
            ws[f"A{i}"] = code
            ws[f"B{i}"] = float(totals[code])
            money(ws[f"B{i}"])
        set_widths(ws, {"A": 20, "B": 22})

        # -------- 2) Balances --------
        ws2 = wb.create_sheet("Balances")
        ws2.append(["Person ID", "Name", *CURRENCIES])
        bold_row(ws2, 1)
        for row in self.balances.balance_rows():
            ws2.append([row.person_id, row.person_name, *(float(row.balances[c]) for c in CURRENCIES)])
            for col in ("C", "D", "E"):
                money(ws2[f"{col}{ws2.max_row}"])
        ws2.freeze_panes = "A2"
        set_widths(ws2, {"A": 16, "B": 28, "C": 16, "D": 16, "E": 18})
        if ws2.max_row >= 2:
            add_table(ws2, "BalanceTable", 1, 1, ws2.max_row, 5)

        # -------- 3) Transactions --------
        ws3 = wb.create_sheet("Transactions")
        ws3.append([
            "ID", "Date", "Type", "Amount", "Currency",
            "Person", "From", "To", "Rate", "To Currency", "Description",
        ])
        bold_row(ws3, 1)

        def name_of(pid):
            if pid is None:
                return ""
            return persons.get(pid, "N/A")

        for tx in transactions:
            ws3.append([
                tx.id, tx.date, tx.type, float(tx.amount), tx.currency,
                name_of(tx.entity_id), name_of(tx.from_entity_id), name_of(tx.to_entity_id),
                tx.rate if tx.rate is not None else "", tx.to_currency or "", tx.description,
            ])
            money(ws3[f"D{ws3.max_row}"])

        ws3.freeze_panes = "A2"
        set_widths(ws3, {
            "A": 18, "B": 12, "C": 16, "D": 14, "E": 10,
            "F": 20, "G": 20, "H": 20, "I": 10, "J": 12, "K": 36,
        })
        if ws3.max_row >= 2:
            add_table(ws3, "TransactionTable", 1, 1, ws3.max_row, 11)

        wb.save(path)
