from __future__ import annotations

from tkinter import ttk, messagebox
import logging
from typing import Optional

from tbo.services.product_service import ProductFilter
from tbo.ui.views.common import clear_tree, entry, fmt_money, make_tree, selected_iid, set_entry

log = logging.getLogger(__name__)

FORM_FIELDS = [
    ("item_code", "Item code"),
    ("brand_named", "Brand"),
    ("specifications", "Specifications"),
    ("category_name", "Category"),
    ("source", "Source"),
    ("order_number", "Order number"),
    ("quantity", "Quantity"),
    ("cny_purchase_price", "CNY purchase price"),
    ("usd_selling_price", "USD selling price"),
    ("description", "Description"),
    ("warehouse_name", "Warehouse"),
]


def _opt_float(raw: str, field: str) -> Optional[float]:
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{field} must be a number.")


class ProductsView:
    def __init__(self, notebook: ttk.Notebook, app):
        self.app = app
        self.frame = ttk.Frame(notebook)
        notebook.add(self.frame, text="Products")

        left = ttk.LabelFrame(self.frame, text="Product", width=300)
        left.pack(side="left", fill="y", padx=(0, 6), pady=8)
        left.pack_propagate(False)

        self.inputs = {key: entry(left, label, i) for i, (key, label) in enumerate(FORM_FIELDS)}

        btns = ttk.Frame(left)
        btns.grid(row=len(FORM_FIELDS), column=0, columnspan=2, sticky="ew", padx=8, pady=(6, 8))
        for i in range(4):
            btns.columnconfigure(i, weight=1)
        ttk.Button(btns, text="Add", command=self.on_add).grid(row=0, column=0, sticky="ew", padx=(0, 3))
        ttk.Button(btns, text="Update", command=self.on_update).grid(row=0, column=1, sticky="ew", padx=3)
        ttk.Button(btns, text="Delete", command=self.on_delete).grid(row=0, column=2, sticky="ew", padx=3)
        ttk.Button(btns, text="Clear", command=self.clear_form).grid(row=0, column=3, sticky="ew", padx=(3, 0))

        right = ttk.Frame(self.frame)
        right.pack(side="right", fill="both", expand=True, pady=8)

        filters = ttk.LabelFrame(right, text="Filters")
        filters.pack(fill="x")
        self.f_text = {}
        for i, (key, label) in enumerate([
            ("item_code", "Item code"), ("brand_named", "Brand"),
            ("specifications", "Specs"), ("category_name", "Category"),
        ]):
            ttk.Label(filters, text=label).grid(row=0, column=i * 2, padx=(8, 2), pady=4)
            e = ttk.Entry(filters, width=12)
            e.grid(row=0, column=i * 2 + 1, padx=(0, 6), pady=4)
            self.f_text[key] = e
        self.f_range = {}
        for i, (key, label) in enumerate([
            ("stock", "Stock"), ("usd_price", "USD"), ("cny_price", "CNY"), ("quantity", "Qty"),
        ]):
            ttk.Label(filters, text=f"{label} min/max").grid(row=1, column=i * 2, padx=(8, 2), pady=4)
            pair = ttk.Frame(filters)
            pair.grid(row=1, column=i * 2 + 1, padx=(0, 6), pady=4)
            lo, hi = ttk.Entry(pair, width=5), ttk.Entry(pair, width=5)
            lo.pack(side="left")
            hi.pack(side="left", padx=(2, 0))
            self.f_range[key] = (lo, hi)
        ttk.Button(filters, text="Apply", command=self.refresh).grid(row=0, column=8, padx=4)
        ttk.Button(filters, text="Reset", command=self.reset_filters).grid(row=1, column=8, padx=4)

        box = ttk.LabelFrame(right, text="Products list")
        box.pack(fill="both", expand=True, pady=(8, 0))
        self.tree = make_tree(box, {
            "item_code": ("Item code", 100),
            "brand": ("Brand", 100),
            "specs": ("Specifications", 200),
            "category": ("Category", 100),
            "qty": ("Qty", 60),
            "cny": ("CNY price", 90),
            "usd": ("USD price", 90),
            "stock": ("Stock", 70),
            "warehouse": ("Warehouse", 100),
        }, height=18)
        self.tree.tag_configure("empty", background="#ffdddd")
        self.tree.bind("<<TreeviewSelect>>", self._on_select)

    def _values(self) -> dict:
        return {key: e.get() for key, e in self.inputs.items()}

    def _filter(self) -> ProductFilter:
        ranges = {}
        for key, (lo, hi) in self.f_range.items():
            ranges[f"min_{key}"] = _opt_float(lo.get(), f"Min {key}")
            ranges[f"max_{key}"] = _opt_float(hi.get(), f"Max {key}")
        return ProductFilter(**{k: e.get() for k, e in self.f_text.items()}, **ranges)

    def _on_select(self, _evt=None):
        iid = selected_iid(self.tree)
        if iid is None:
            return
        p = self.app.products.get_product(iid)
        for key, e in self.inputs.items():
            set_entry(e, getattr(p, key))

    def on_add(self):
        try:
            values = self._values()
            product = self.app.products.add_product(values.pop("item_code"), **values)
            self.app.toast(f"Product added: {product.item_code}", kind="success")
            self.clear_form()
            self.app.refresh_all(show_toast=False)
        except Exception as e:
            self.app.handle_error("Add product", e, "Failed to add product.")

    def on_update(self):
        try:
            iid = selected_iid(self.tree)
            if iid is None:
                raise ValueError("Select a product.")
            self.app.products.update_product(iid, **self._values())
            self.app.toast("Product updated.", kind="success")
            self.app.refresh_all(show_toast=False)
        except Exception as e:
            self.app.handle_error("Update product", e, "Failed to update product.")

    def on_delete(self):
        try:
            iid = selected_iid(self.tree)
            if iid is None:
                raise ValueError("Select a product.")
            product = self.app.products.get_product(iid)
            if not messagebox.askyesno(
                "Confirm delete", f"Delete product '{product.display_name}'?", parent=self.frame
            ):
                return
            self.app.products.delete_product(iid)
            self.app.toast("Product deleted.", kind="success")
            self.app.refresh_all(show_toast=False)
        except Exception as e:
            self.app.handle_error("Delete product", e, "Failed to delete product.")

    def clear_form(self):
        for e in self.inputs.values():
            set_entry(e, "")
        self.inputs["item_code"].focus_set()

    def reset_filters(self):
        for e in self.f_text.values():
            set_entry(e, "")
        for lo, hi in self.f_range.values():
            set_entry(lo, "")
            set_entry(hi, "")
        self.refresh()

    def refresh(self):
        try:
            flt = self._filter()
        except ValueError as e:
            self.app.toast(str(e), kind="warn")
            return
        stock = self.app.inventory.current_stock()

        clear_tree(self.tree)
        for p in self.app.products.filter_products(flt, stock):
            current = stock.get(p.id, 0)
            self.tree.insert("", "end", iid=p.id, values=(
                p.item_code, p.brand_named, p.specifications, p.category_name, p.quantity,
                fmt_money(p.cny_purchase_price), fmt_money(p.usd_selling_price), current, p.warehouse_name,
            ), tags=("empty",) if current == 0 else ())
