from __future__ import annotations

import tkinter as tk
from tkinter import ttk, filedialog, messagebox, simpledialog
from datetime import date

from tbo.domain.models import DELIVERY_TYPES, DESTINATIONS
from tbo.ui.views.common import clear_tree, combo, entry, make_tree, selected_iid, set_entry


class DeliveriesView:
    def __init__(self, notebook: ttk.Notebook, app):
        self.app = app
        self.frame = ttk.Frame(notebook)
        notebook.add(self.frame, text="Deliveries")

        self.page = 1
        self.page_var = tk.StringVar(value="Page 1 / 1")
        self.arrived_var = tk.BooleanVar(value=False)
        self.receipt_photo = ""
        self.cargo_photo = ""
        self.category_ids: dict[str, str] = {}
        self._build()

    def _build(self):
        tab = self.frame

        form = ttk.LabelFrame(tab, text="New delivery", width=300)
        form.pack(side="left", fill="y", padx=(0, 6), pady=8)
        form.pack_propagate(False)

        self.category_c = combo(form, "Order number", 0)
        self.date_e = entry(form, "Date", 1)
        set_entry(self.date_e, date.today().isoformat())
        self.cartons_e = entry(form, "Cartons", 2)
        self.weight_e = entry(form, "Weight (kg)", 3)
        self.receipt_e = entry(form, "Receipt number", 4)
        self.type_c = combo(form, "Type", 5, DELIVERY_TYPES)
        self.type_c.set(DELIVERY_TYPES[0])
        self.dest_c = combo(form, "Destination", 6, DESTINATIONS)
        self.dest_c.set(DESTINATIONS[0])
        self.desc_e = entry(form, "Description", 7)
        ttk.Checkbutton(form, text="Arrived", variable=self.arrived_var).grid(row=8, column=1, sticky="w", padx=8)

        photos = ttk.Frame(form)
        photos.grid(row=9, column=0, columnspan=2, sticky="ew", padx=8, pady=4)
        ttk.Button(photos, text="Receipt photo...", command=lambda: self._pick_photo("receipt")).pack(side="left")
        ttk.Button(photos, text="Cargo photo...", command=lambda: self._pick_photo("cargo")).pack(side="left", padx=6)

        ttk.Button(form, text="Add delivery", style="Big.TButton", command=self.on_add)\
            .grid(row=10, column=0, columnspan=2, sticky="ew", padx=8, pady=(10, 4))

        cats = ttk.LabelFrame(form, text="Order numbers")
        cats.grid(row=11, column=0, columnspan=2, sticky="ew", padx=8, pady=(12, 4))
        for i in range(3):
            cats.columnconfigure(i, weight=1)
        ttk.Button(cats, text="New", command=self.on_add_category).grid(row=0, column=0, sticky="ew", padx=2, pady=4)
        ttk.Button(cats, text="Rename", command=self.on_rename_category).grid(row=0, column=1, sticky="ew", padx=2, pady=4)
        ttk.Button(cats, text="Delete", command=self.on_delete_category).grid(row=0, column=2, sticky="ew", padx=2, pady=4)

        right = ttk.Frame(tab)
        right.pack(side="right", fill="both", expand=True, pady=8)

        filters = ttk.LabelFrame(right, text="Filters")
        filters.pack(fill="x")
        self.f_category = ttk.Combobox(filters, width=18, state="readonly")
        self.f_type = ttk.Combobox(filters, values=["", *DELIVERY_TYPES], width=6, state="readonly")
        self.f_dest = ttk.Combobox(filters, values=["", *DESTINATIONS], width=8, state="readonly")
        self.f_from = ttk.Entry(filters, width=12)
        self.f_to = ttk.Entry(filters, width=12)
        for i, (label, w) in enumerate([
            ("Order number", self.f_category), ("Type", self.f_type), ("Destination", self.f_dest),
            ("From", self.f_from), ("To", self.f_to),
        ]):
            ttk.Label(filters, text=label).grid(row=0, column=i * 2, padx=(8, 2), pady=8)
            w.grid(row=0, column=i * 2 + 1, padx=(0, 6), pady=8)
        ttk.Button(filters, text="Apply", command=self.apply_filters).grid(row=0, column=10, padx=4)

        box = ttk.LabelFrame(right, text="Deliveries")
        box.pack(fill="both", expand=True, pady=(8, 0))
        self.tree = make_tree(box, {
            "date": ("Date", 96),
            "order": ("Order number", 140),
            "receipt": ("Receipt", 110),
            "cartons": ("Cartons", 70),
            "weight": ("Weight", 70),
            "type": ("Type", 50),
            "dest": ("Destination", 80),
            "arrived": ("Arrived", 70),
            "desc": ("Description", 200),
        }, height=16)
        self.tree.tag_configure("arrived", foreground="#15803d")

        bar = ttk.Frame(box)
        bar.pack(fill="x", padx=6, pady=(0, 6))
        ttk.Button(bar, text="< Prev", command=lambda: self._go(-1)).pack(side="left")
        ttk.Label(bar, textvariable=self.page_var).pack(side="left", padx=10)
        ttk.Button(bar, text="Next >", command=lambda: self._go(1)).pack(side="left")
        ttk.Button(bar, text="Delete", command=self.on_delete).pack(side="right")
        ttk.Button(bar, text="Toggle arrived", command=self.on_toggle_arrived).pack(side="right", padx=6)

    def _pick_photo(self, which: str):
        path = filedialog.askopenfilename(
            title="Select photo",
            filetypes=[("Images", "*.png *.jpg *.jpeg"), ("All files", "*.*")],
        )
        if not path:
            return
        if which == "receipt":
            self.receipt_photo = path
        else:
            self.cargo_photo = path
        self.app.toast(f"{which.title()} photo attached.", kind="info", ms=1500)

    def _category_id(self, label: str) -> str:
        cid = self.category_ids.get(label)
        if not cid:
            raise ValueError("Select an order number.")
        return cid

    def on_add(self):
        try:
            self.app.deliveries.add_delivery(
                self._category_id(self.category_c.get()),
                self.date_e.get().strip(),
                self.cartons_e.get().strip() or 0,
                self.weight_e.get().strip() or 0,
                self.receipt_e.get(),
                delivery_type=self.type_c.get(),
                destination=self.dest_c.get(),
                receipt_photo=self.receipt_photo or None,
                cargo_photo=self.cargo_photo or None,
                description=self.desc_e.get(),
                is_arrived=self.arrived_var.get(),
            )
        except Exception as e:
            self.app.handle_error("Add delivery", e, "Failed to add delivery.")
            return
        for e in (self.cartons_e, self.weight_e, self.receipt_e, self.desc_e):
            set_entry(e, "")
        self.receipt_photo = self.cargo_photo = ""
        self.arrived_var.set(False)
        self.app.toast("Delivery added.", kind="success")
        self.refresh()

    def on_delete(self):
        iid = selected_iid(self.tree)
        if iid is None:
            return
        if not messagebox.askyesno("Confirm delete", "Delete the selected delivery?", parent=self.frame):
            return
        try:
            self.app.deliveries.delete_delivery(iid)
        except Exception as e:
            self.app.handle_error("Delete delivery", e, "Failed to delete delivery.")
            return
        self.refresh()

    def on_toggle_arrived(self):
        iid = selected_iid(self.tree)
        if iid is None:
            return
        try:
            current = self.app.deliveries.get_delivery(iid)
            self.app.deliveries.set_arrived(iid, not current.is_arrived)
        except Exception as e:
            self.app.handle_error("Delivery", e, "Failed to update delivery.")
            return
        self.refresh()

    def on_add_category(self):
        name = simpledialog.askstring("New order number", "Name:", parent=self.frame)
        if name is None:
            return
        try:
            self.app.deliveries.add_category(name)
            self.refresh()
        except Exception as e:
            self.app.handle_error("Order number", e, "Failed to add order number.")

    def on_rename_category(self):
        try:
            cid = self._category_id(self.category_c.get())
            name = simpledialog.askstring("Rename order number", "New name:", parent=self.frame)
            if name is None:
                return
            self.app.deliveries.rename_category(cid, name)
            self.refresh()
        except Exception as e:
            self.app.handle_error("Order number", e, "Failed to rename order number.")

    def on_delete_category(self):
        try:
            cid = self._category_id(self.category_c.get())
            if not messagebox.askyesno("Confirm delete", "Delete this order number?", parent=self.frame):
                return
            self.app.deliveries.delete_category(cid)
            self.category_c.set("")
            self.refresh()
        except Exception as e:
            self.app.handle_error("Order number", e, "Failed to delete order number.")

    def apply_filters(self):
        self.page = 1
        self.refresh()

    def _go(self, delta: int):
        self.page += delta
        self.refresh()

    def refresh(self):
        self.category_ids = {c.name: c.id for c in self.app.deliveries.list_categories()}
        self.category_c["values"] = list(self.category_ids)
        self.f_category["values"] = ["", *self.category_ids]

        page = self.app.deliveries.list_page(
            self.page,
            order_number_category_id=self.category_ids.get(self.f_category.get()),
            delivery_type=self.f_type.get() or None,
            destination=self.f_dest.get() or None,
            date_from=self.f_from.get().strip() or None,
            date_to=self.f_to.get().strip() or None,
        )
        self.page = page.page
        self.page_var.set(f"Page {page.page} / {max(page.total_pages, 1)}")

        clear_tree(self.tree)
        for d in page.items:
            self.tree.insert("", "end", iid=d.id, values=(
                d.delivery_date, self.app.deliveries.category_name(d.order_number_category_id),
                d.receipt_number, d.carton_count, f"{d.weight:.1f}", d.delivery_type.upper(),
                d.destination.title(), "Yes" if d.is_arrived else "No", d.description,
            ), tags=("arrived",) if d.is_arrived else ())
