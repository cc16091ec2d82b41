from __future__ import annotations

import tkinter as tk
from tkinter import ttk, messagebox, simpledialog
from datetime import date

from tbo.domain.errors import NotFoundError
from tbo.ui.views.common import clear_tree, entry, fmt_money, make_tree, set_entry


class ExpensesView:
    """Per-category CNY payments made from the expense holder's account."""

    def __init__(self, notebook: ttk.Notebook, app):
        self.app = app
        self.frame = ttk.Frame(notebook)
        notebook.add(self.frame, text="Expenses")

        self.balance_var = tk.StringVar(value="")
        self.category_ids: dict[str, str] = {}
        self._build()

    def _build(self):
        tab = self.frame

        top = ttk.Frame(tab)
        top.pack(fill="x", padx=10, pady=10)
        ttk.Label(top, textvariable=self.balance_var, style="KPIValue.TLabel").pack(side="left")

        left = ttk.LabelFrame(tab, text="Add payment", width=300)
        left.pack(side="left", fill="y", padx=(10, 6), pady=(0, 10))
        left.pack_propagate(False)

        ttk.Label(left, text="Category").grid(row=0, column=0, sticky="w", padx=8, pady=4)
        self.category_c = ttk.Combobox(left, state="readonly", width=18)
        self.category_c.grid(row=0, column=1, sticky="ew", padx=8, pady=4)
        self.date_e = entry(left, "Date", 1)
        set_entry(self.date_e, date.today().isoformat())
        self.amount_e = entry(left, "Amount (CNY)", 2)
        self.desc_e = entry(left, "Description", 3)
        ttk.Button(left, text="Add payment", style="Big.TButton", command=self.on_add_expense)\
            .grid(row=4, column=0, columnspan=2, sticky="ew", padx=8, pady=(10, 4))

        cats = ttk.LabelFrame(left, text="Categories")
        cats.grid(row=5, column=0, columnspan=2, sticky="ew", padx=8, pady=(12, 4))
        for i in range(3):
            cats.columnconfigure(i, weight=1)
        ttk.Button(cats, text="New", command=self.on_add_category).grid(row=0, column=0, sticky="ew", padx=2, pady=4)
        ttk.Button(cats, text="Rename", command=self.on_rename_category).grid(row=0, column=1, sticky="ew", padx=2, pady=4)
        ttk.Button(cats, text="Delete", command=self.on_delete_category).grid(row=0, column=2, sticky="ew", padx=2, pady=4)

        right = ttk.LabelFrame(tab, text="Payments by category")
        right.pack(side="right", fill="both", expand=True, padx=(0, 10), pady=(0, 10))
        self.tree = make_tree(right, {
            "date": ("Date", 110),
            "desc": ("Description", 360),
            "amount": ("Amount CNY", 130),
        }, height=20)
        self.tree.configure(show="tree headings")
        self.tree.column("#0", width=200)
        ttk.Button(right, text="Delete selected payment", command=self.on_delete_expense).pack(anchor="w", padx=6, pady=(0, 6))

    def _selected_category_id(self) -> str:
        cid = self.category_ids.get(self.category_c.get())
        if not cid:
            raise ValueError("Select a category.")
        return cid

    def on_add_category(self):
        name = simpledialog.askstring("New category", "Category name:", parent=self.frame)
        if name is None:
            return
        try:
            self.app.expenses.add_category(name)
            self.refresh()
        except Exception as e:
            self.app.handle_error("Category", e, "Failed to add category.")

    def on_rename_category(self):
        try:
            cid = self._selected_category_id()
            name = simpledialog.askstring("Rename category", "New name:", parent=self.frame)
            if name is None:
                return
            self.app.expenses.rename_category(cid, name)
            self.refresh()
        except Exception as e:
            self.app.handle_error("Category", e, "Failed to rename category.")

    def on_delete_category(self):
        try:
            cid = self._selected_category_id()
            if not messagebox.askyesno(
                "Confirm delete",
                "Delete this category and all of its payments?",
                parent=self.frame,
            ):
                return
            removed = self.app.expenses.delete_category(cid)
            self.app.toast(f"Category deleted ({removed} payments removed).", kind="success")
            self.app.refresh_all(show_toast=False)
        except Exception as e:
            self.app.handle_error("Category", e, "Failed to delete category.")

    def on_add_expense(self):
        try:
            self.app.expenses.add_expense(
                self._selected_category_id(),
                self.amount_e.get().strip() or 0,
                description=self.desc_e.get(),
                date=self.date_e.get().strip(),
            )
        except Exception as e:
            self.app.handle_error("Add payment", e, "Failed to add payment.")
            return
        set_entry(self.amount_e, "")
        set_entry(self.desc_e, "")
        self.app.toast("Payment added.", kind="success")
        self.app.refresh_all(show_toast=False)

    def on_delete_expense(self):
        sel = self.tree.selection()
        if not sel or self.tree.parent(sel[0]) == "":
            messagebox.showwarning("Validation", "Select a payment.", parent=self.frame)
            return
        try:
            self.app.expenses.delete_expense(sel[0])
        except Exception as e:
            self.app.handle_error("Delete payment", e, "Failed to delete payment.")
            return
        self.app.refresh_all(show_toast=False)

    def refresh(self):
        categories = self.app.expenses.list_categories()
        self.category_ids = {c.name: c.id for c in categories}
        self.category_c["values"] = sorted(self.category_ids, key=str.lower)

        clear_tree(self.tree)
        try:
            balance = self.app.expenses.holder_cny_balance()
            summaries = self.app.expenses.categories_with_expenses()
        except NotFoundError as e:
            self.balance_var.set(str(e))
            return
        self.balance_var.set(f"{self.app.expenses.holder_name} CNY balance: {fmt_money(balance)}")
        for s in summaries:
            parent = self.tree.insert("", "end", iid=f"cat:{s.id}", text=s.name, open=True,
                                      values=("", f"{len(s.expenses)} payments", fmt_money(s.total_spent)))
            for exp in s.expenses:
                self.tree.insert(parent, "end", iid=exp.id, values=(exp.date, exp.description, fmt_money(exp.amount)))
