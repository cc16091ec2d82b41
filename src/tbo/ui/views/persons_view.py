from __future__ import annotations

from tkinter import ttk, messagebox

from tbo.domain.models import CURRENCIES
from tbo.ui.views.common import clear_tree, entry, fmt_money, make_tree, selected_iid, set_entry


class PersonsView:
    def __init__(self, notebook: ttk.Notebook, app):
        self.app = app
        self.frame = ttk.Frame(notebook)
        notebook.add(self.frame, text="Persons")

        left = ttk.LabelFrame(self.frame, text="Person", width=260)
        left.pack(side="left", fill="y", padx=(0, 6), pady=8)
        left.pack_propagate(False)

        self.name_e = entry(left, "Name", 0)
        self.name_e.bind("<Return>", lambda _e: self.on_add())

        btns = ttk.Frame(left)
        btns.grid(row=1, column=0, columnspan=2, sticky="ew", padx=8, pady=(6, 8))
        for i in range(3):
            btns.columnconfigure(i, weight=1)
        ttk.Button(btns, text="Add", command=self.on_add).grid(row=0, column=0, sticky="ew", padx=(0, 4))
        ttk.Button(btns, text="Rename", command=self.on_rename).grid(row=0, column=1, sticky="ew", padx=4)
        ttk.Button(btns, text="Delete", command=self.on_delete).grid(row=0, column=2, sticky="ew", padx=(4, 0))

        right = ttk.LabelFrame(self.frame, text="Persons list")
        right.pack(side="right", fill="both", expand=True, pady=8)
        self.tree = make_tree(right, {
            "id": ("ID", 130),
            "name": ("Name", 240),
            "USD": ("USD", 120),
            "CNY": ("CNY", 120),
            "IRT": ("IRT", 140),
        }, height=20)
        self.tree.bind("<<TreeviewSelect>>", self._on_select)

    def _selected_person_id(self) -> int:
        iid = selected_iid(self.tree)
        if iid is None:
            raise ValueError("Select a person.")
        return int(iid)

    def _on_select(self, _evt=None):
        iid = selected_iid(self.tree)
        if iid is not None:
            set_entry(self.name_e, self.tree.item(iid, "values")[1])

    def on_add(self):
        try:
            person = self.app.persons.add_person(self.name_e.get())
            set_entry(self.name_e, "")
            self.app.toast(f"Person added: {person.name}", kind="success")
            self.app.refresh_all(show_toast=False)
        except Exception as e:
            self.app.handle_error("Add person", e, "Failed to add person.")

    def on_rename(self):
        try:
            self.app.persons.rename_person(self._selected_person_id(), self.name_e.get())
            self.app.toast("Person renamed.", kind="success")
            self.app.refresh_all(show_toast=False)
        except Exception as e:
            self.app.handle_error("Rename person", e, "Failed to rename person.")

    def on_delete(self):
        try:
            person = self.app.persons.get_person(self._selected_person_id())
            if not messagebox.askyesno(
                "Confirm delete",
                f"Delete '{person.name}'?\n\nExisting transactions and invoices are kept.",
                parent=self.frame,
            ):
                return
            self.app.persons.delete_person(person.id)
            self.app.toast("Person deleted.", kind="success")
            self.app.refresh_all(show_toast=False)
        except Exception as e:
            self.app.handle_error("Delete person", e, "Failed to delete person.")

    def refresh(self):
        clear_tree(self.tree)
        balances = self.app.balances.balances()
        for p in self.app.persons.list_persons():
            b = balances[p.id]
            self.tree.insert("", "end", iid=str(p.id), values=(p.id, p.name, *(fmt_money(b[c]) for c in CURRENCIES)))
