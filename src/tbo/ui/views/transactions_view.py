from __future__ import annotations

import tkinter as tk
from tkinter import ttk, messagebox
from datetime import date
from typing import Optional

from tbo.domain.models import CONVERSION, CURRENCIES, INTERNAL_TRANSFER, TRANSACTION_TYPES
from tbo.ui.views.common import clear_tree, combo, entry, fmt_money, make_tree, selected_iid, set_entry


class TransactionsView:
    def __init__(self, notebook: ttk.Notebook, app):
        self.app = app
        self.frame = ttk.Frame(notebook)
        notebook.add(self.frame, text="Transactions")

        self.page = 1
        self.page_var = tk.StringVar(value="Page 1 / 1")
        self.person_labels: dict[str, int] = {}
        self._build()

    def _build(self):
        tab = self.frame

        form = ttk.LabelFrame(tab, text="New transaction", width=300)
        form.pack(side="left", fill="y", padx=(0, 6), pady=8)
        form.pack_propagate(False)

        self.type_c = combo(form, "Type", 0, TRANSACTION_TYPES)
        self.type_c.set(TRANSACTION_TYPES[0])
        self.type_c.bind("<<ComboboxSelected>>", lambda _e: self._sync_form())
        self.date_e = entry(form, "Date", 1)
        set_entry(self.date_e, date.today().isoformat())
        self.amount_e = entry(form, "Amount", 2)
        self.currency_c = combo(form, "Currency", 3, CURRENCIES)
        self.currency_c.set("USD")
        self.person_c = combo(form, "Person", 4)
        self.from_c = combo(form, "From", 5)
        self.to_c = combo(form, "To", 6)
        self.to_currency_c = combo(form, "To currency", 7, CURRENCIES)
        self.rate_e = entry(form, "Rate", 8)
        self.desc_e = entry(form, "Description", 9)

        ttk.Button(form, text="Add transaction", style="Big.TButton", command=self.on_add)\
            .grid(row=10, column=0, columnspan=2, sticky="ew", padx=8, pady=(10, 4))
        ttk.Button(form, text="Delete selected", command=self.on_delete)\
            .grid(row=11, column=0, columnspan=2, sticky="ew", padx=8, pady=4)

        right = ttk.Frame(tab)
        right.pack(side="right", fill="both", expand=True, pady=8)

        filters = ttk.LabelFrame(right, text="Filters")
        filters.pack(fill="x")
        self.f_type = ttk.Combobox(filters, values=["", *TRANSACTION_TYPES], width=16, state="readonly")
        self.f_currency = ttk.Combobox(filters, values=["", *CURRENCIES], width=6, state="readonly")
        self.f_person = ttk.Combobox(filters, width=20, state="readonly")
        self.f_from = ttk.Entry(filters, width=12)
        self.f_to = ttk.Entry(filters, width=12)
        for i, (label, w) in enumerate([
            ("Type", self.f_type), ("Currency", self.f_currency), ("Person", self.f_person),
            ("From date", self.f_from), ("To date", self.f_to),
        ]):
            ttk.Label(filters, text=label).grid(row=0, column=i * 2, padx=(8, 2), pady=8)
            w.grid(row=0, column=i * 2 + 1, padx=(0, 6), pady=8)
        ttk.Button(filters, text="Apply", command=self.apply_filters).grid(row=0, column=10, padx=4)
        ttk.Button(filters, text="Reset", command=self.reset_filters).grid(row=0, column=11, padx=4)

        box = ttk.LabelFrame(right, text="Transactions")
        box.pack(fill="both", expand=True, pady=(8, 0))
        self.tree = make_tree(box, {
            "date": ("Date", 96),
            "type": ("Type", 120),
            "amount": ("Amount", 110),
            "currency": ("Cur", 50),
            "parties": ("Parties", 260),
            "conv": ("Conversion", 140),
            "desc": ("Description", 260),
        }, height=16)

        pager = ttk.Frame(box)
        pager.pack(fill="x", padx=6, pady=(0, 6))
        ttk.Button(pager, text="< Prev", command=lambda: self._go(-1)).pack(side="left")
        ttk.Label(pager, textvariable=self.page_var).pack(side="left", padx=10)
        ttk.Button(pager, text="Next >", command=lambda: self._go(1)).pack(side="left")

        self._sync_form()

    def _sync_form(self):
        kind = self.type_c.get()
        transfer = kind == INTERNAL_TRANSFER
        self.person_c.configure(state="disabled" if transfer else "readonly")
        self.from_c.configure(state="readonly" if transfer else "disabled")
        self.to_c.configure(state="readonly" if transfer else "disabled")
        self.to_currency_c.configure(state="readonly" if kind == CONVERSION else "disabled")
        self.rate_e.configure(state="normal" if kind == CONVERSION else "disabled")

    def _person_id(self, label: str) -> Optional[int]:
        return self.person_labels.get(label)

    def _name(self, person_id: Optional[int]) -> str:
        if person_id is None:
            return ""
        person = self.app.persons.find_person(person_id)
        return person.name if person else "N/A"

    def _filters(self) -> dict:
        return {
            "type": self.f_type.get() or None,
            "currency": self.f_currency.get() or None,
            "person_id": self._person_id(self.f_person.get()),
            "date_from": self.f_from.get().strip() or None,
            "date_to": self.f_to.get().strip() or None,
        }

    def on_add(self):
        kind = self.type_c.get()
        rate = self.rate_e.get().strip() if kind == CONVERSION else ""
        try:
            self.app.transactions.add_transaction(
                kind,
                self.amount_e.get().strip() or 0,
                self.currency_c.get(),
                date=self.date_e.get().strip(),
                description=self.desc_e.get(),
                entity_id=None if kind == INTERNAL_TRANSFER else self._person_id(self.person_c.get()),
                from_entity_id=self._person_id(self.from_c.get()) if kind == INTERNAL_TRANSFER else None,
                to_entity_id=self._person_id(self.to_c.get()) if kind == INTERNAL_TRANSFER else None,
                rate=rate or None,
                to_currency=self.to_currency_c.get() if kind == CONVERSION else None,
            )
        except Exception as e:
            self.app.handle_error("Add transaction", e, "Failed to add transaction.")
            return
        for e in (self.amount_e, self.desc_e, self.rate_e):
            set_entry(e, "")
        self.app.toast("Transaction added.", kind="success")
        self.app.refresh_all(show_toast=False)

    def on_delete(self):
        iid = selected_iid(self.tree)
        if iid is None:
            messagebox.showwarning("Validation", "Select a transaction.", parent=self.frame)
            return
        if not messagebox.askyesno("Confirm delete", "Delete the selected transaction?", parent=self.frame):
            return
        try:
            self.app.transactions.delete_transaction(iid)
        except Exception as e:
            self.app.handle_error("Delete transaction", e, "Failed to delete transaction.")
            return
        self.app.toast("Transaction deleted.", kind="success")
        self.app.refresh_all(show_toast=False)

    def apply_filters(self):
        self.page = 1
        self.refresh()

    def reset_filters(self):
        for c in (self.f_type, self.f_currency, self.f_person):
            c.set("")
        for e in (self.f_from, self.f_to):
            set_entry(e, "")
        self.apply_filters()

    def _go(self, delta: int):
        self.page += delta
        self.refresh()

    def refresh_person_choices(self):
        self.person_labels = {f"{p.name} (#{p.id})": p.id for p in self.app.persons.list_persons()}
        labels = list(self.person_labels)
        for c in (self.person_c, self.from_c, self.to_c):
            c["values"] = labels
        self.f_person["values"] = ["", *labels]

    def refresh(self):
        self.refresh_person_choices()
        page = self.app.transactions.list_page(self.page, **self._filters())
        self.page = page.page
        self.page_var.set(f"Page {page.page} / {max(page.total_pages, 1)}  ({page.total_items} rows)")

        clear_tree(self.tree)
        for tx in page.items:
            if tx.type == INTERNAL_TRANSFER:
                parties = f"{self._name(tx.from_entity_id)} -> {self._name(tx.to_entity_id)}"
            else:
                parties = self._name(tx.entity_id)
            conv = ""
            if tx.type == CONVERSION:
                conv = f"-> {tx.to_currency or '?'} @ {tx.rate if tx.rate is not None else 1}"
            self.tree.insert("", "end", iid=tx.id, values=(
                tx.date, tx.type, fmt_money(tx.amount), tx.currency, parties, conv, tx.description,
            ))
