from __future__ import annotations

import tkinter as tk
from tkinter import ttk, filedialog
from datetime import date
from pathlib import Path

from tbo.domain.models import CURRENCIES
from tbo.ui.views.common import clear_tree, fmt_money, make_tree


class DashboardView:
    def __init__(self, notebook: ttk.Notebook, app):
        self.app = app
        self.frame = ttk.Frame(notebook)
        notebook.add(self.frame, text="Dashboard")

        self.show_all = tk.BooleanVar(value=False)
        self.total_vars = {code: tk.StringVar(value="0.00") for code in CURRENCIES}
        self._build()

    def _build(self):
        tab = self.frame

        cards = ttk.LabelFrame(tab, text="Account balances summary")
        cards.pack(fill="x", padx=10, pady=10)
        for i, code in enumerate(CURRENCIES):
            ttk.Label(cards, text=f"Total {code}", style="KPI.TLabel").grid(row=0, column=i, padx=18, pady=(8, 2), sticky="w")
            ttk.Label(cards, textvariable=self.total_vars[code], style="KPIValue.TLabel")\
                .grid(row=1, column=i, padx=18, pady=(0, 8), sticky="w")

        box = ttk.LabelFrame(tab, text="Person balances")
        box.pack(fill="both", expand=True, padx=10, pady=(0, 10))

        bar = ttk.Frame(box)
        bar.pack(fill="x", padx=6, pady=(6, 0))
        ttk.Checkbutton(bar, text="Show all", variable=self.show_all, command=self.refresh).pack(side="left")
        ttk.Button(bar, text="Export ledger report", command=self.export_report).pack(side="right")

        self.tree = make_tree(box, {
            "name": ("Person", 260),
            "USD": ("USD", 140),
            "CNY": ("CNY", 140),
            "IRT": ("IRT", 160),
        }, height=16)
        self.tree.tag_configure("neg", foreground="#b91c1c")
        self.tree.tag_configure("zero", foreground="#94a3b8")

    def refresh(self):
        totals = self.app.balances.currency_totals()
        for code in CURRENCIES:
            self.total_vars[code].set(fmt_money(totals[code]))

        limit = None if self.show_all.get() else self.app.c.settings.balance_preview_limit
        clear_tree(self.tree)
        for row in self.app.balances.balance_rows(limit=limit):
            if row.is_zero:
                tags = ("zero",)
            elif any(v < 0 for v in row.balances.values()):
                tags = ("neg",)
            else:
                tags = ()
            self.tree.insert("", "end", values=(
                row.person_name, *(fmt_money(row.balances[c]) for c in CURRENCIES)
            ), tags=tags)

    def export_report(self):
        path = filedialog.asksaveasfilename(
            title="Save ledger report as",
            defaultextension=".xlsx",
            filetypes=[("Excel files", "*.xlsx")],
            initialdir=self.app.exports_dir,
            initialfile=f"ledger_{date.today().isoformat()}.xlsx",
        )
        if not path:
            return
        try:
            self.app.reporting.export_ledger_report(path)
            self.app.toast(f"Ledger report exported: {Path(path).name}", kind="success")
        except Exception as e:
            self.app.handle_error("Export error", e, "Excel export failed.")
