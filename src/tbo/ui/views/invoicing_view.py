from __future__ import annotations

import tkinter as tk
from tkinter import ttk, filedialog, messagebox
from datetime import date
from pathlib import Path

from tbo.domain.models import INVOICE_CURRENCIES
from tbo.services.invoice_service import default_unit_price
from tbo.ui.views.common import clear_tree, fmt_money, make_tree, selected_iid, set_entry


class InvoicingView:
    def __init__(self, notebook: ttk.Notebook, app):
        self.app = app
        self.frame = ttk.Frame(notebook)
        notebook.add(self.frame, text="Invoices")

        self.cart: list[dict] = []
        self.person_labels: dict[str, int] = {}
        self.product_labels: dict[str, str] = {}
        self.total_var = tk.StringVar(value="Subtotal: 0.00 | Total: 0.00")
        self.number_var = tk.StringVar(value="")
        self._build()

    def _build(self):
        tab = self.frame

        head = ttk.LabelFrame(tab, text="New invoice")
        head.pack(fill="x", padx=10, pady=10)

        ttk.Label(head, textvariable=self.number_var, style="Title.TLabel").grid(row=0, column=0, padx=10, pady=6, sticky="w")
        ttk.Label(head, text="Customer").grid(row=0, column=1, padx=(10, 4))
        self.person_c = ttk.Combobox(head, width=26, state="readonly")
        self.person_c.grid(row=0, column=2)
        ttk.Label(head, text="Date").grid(row=0, column=3, padx=(10, 4))
        self.date_e = ttk.Entry(head, width=12)
        self.date_e.grid(row=0, column=4)
        set_entry(self.date_e, date.today().isoformat())
        ttk.Label(head, text="Currency").grid(row=0, column=5, padx=(10, 4))
        self.currency_c = ttk.Combobox(head, values=list(INVOICE_CURRENCIES), width=6, state="readonly")
        self.currency_c.set("USD")
        self.currency_c.grid(row=0, column=6)
        self.currency_c.bind("<<ComboboxSelected>>", lambda _e: self._reprice())

        ttk.Label(head, text="Product").grid(row=1, column=1, padx=(10, 4), pady=6)
        self.product_c = ttk.Combobox(head, width=40, state="readonly")
        self.product_c.grid(row=1, column=2, columnspan=2, sticky="w")
        ttk.Label(head, text="Qty").grid(row=1, column=4, padx=(10, 4))
        self.qty_e = ttk.Entry(head, width=8)
        self.qty_e.grid(row=1, column=5)
        self.qty_e.bind("<Return>", lambda _e: self.add_to_cart())
        ttk.Button(head, text="Add item", command=self.add_to_cart).grid(row=1, column=6, padx=10)

        mid = ttk.Frame(tab)
        mid.pack(fill="both", expand=True, padx=10)

        cart_box = ttk.LabelFrame(mid, text="Items")
        cart_box.pack(side="left", fill="both", expand=True, padx=(0, 10))
        self.cart_tree = make_tree(cart_box, {
            "name": ("Product", 320),
            "qty": ("Qty", 70),
            "unit": ("Unit price", 110),
            "line": ("Line total", 110),
        }, height=8)
        ttk.Button(cart_box, text="Remove selected", command=self.remove_selected).pack(anchor="w", padx=6, pady=(0, 6))

        right = ttk.LabelFrame(mid, text="Save")
        right.pack(side="right", fill="y")
        ttk.Label(right, text="Discount").pack(anchor="w", padx=10, pady=(10, 2))
        self.discount_e = ttk.Entry(right, width=14)
        self.discount_e.pack(anchor="w", padx=10)
        self.discount_e.bind("<KeyRelease>", lambda _e: self.refresh_cart_view())
        ttk.Label(right, textvariable=self.total_var).pack(anchor="w", padx=10, pady=10)
        ttk.Button(right, text="Save invoice", style="Big.TButton", command=self.save_invoice)\
            .pack(fill="x", padx=10, pady=(0, 10))

        hist = ttk.LabelFrame(tab, text="Invoice history")
        hist.pack(fill="both", expand=True, padx=10, pady=10)
        self.hist_tree = make_tree(hist, {
            "number": ("Number", 100),
            "date": ("Date", 100),
            "customer": ("Customer", 220),
            "items": ("Items", 70),
            "total": ("Total", 130),
            "currency": ("Cur", 60),
        }, height=8)
        row = ttk.Frame(hist)
        row.pack(fill="x", padx=6, pady=(0, 6))
        ttk.Button(row, text="Export PDF", command=self.export_pdf).pack(side="left")
        ttk.Button(row, text="Delete", command=self.delete_invoice).pack(side="left", padx=10)

    def _reprice(self):
        currency = self.currency_c.get()
        for it in self.cart:
            it["unit_price"] = default_unit_price(self.app.products.get_product(it["product_id"]), currency)
        self.refresh_cart_view()

    def _discount(self) -> float:
        raw = self.discount_e.get().strip()
        if not raw:
            return 0.0
        try:
            return float(raw)
        except ValueError:
            raise ValueError("Discount must be a number.")

    def add_to_cart(self):
        product_id = self.product_labels.get(self.product_c.get())
        if not product_id:
            messagebox.showwarning("Validation", "Select a product.", parent=self.frame)
            return
        try:
            qty = int(self.qty_e.get().strip())
        except ValueError:
            messagebox.showwarning("Validation", "Qty must be an integer.", parent=self.frame)
            return
        if qty < 1:
            messagebox.showwarning("Validation", "Qty must be >= 1.", parent=self.frame)
            return

        available = self.app.inventory.available(product_id)
        in_cart = sum(it["qty"] for it in self.cart if it["product_id"] == product_id)
        if in_cart + qty > available:
            messagebox.showwarning("Stock", f"Not enough stock. Available: {available - in_cart}", parent=self.frame)
            return

        for it in self.cart:
            if it["product_id"] == product_id:
                it["qty"] += qty
                break
        else:
            prod = self.app.products.get_product(product_id)
            self.cart.append({
                "product_id": product_id,
                "name": prod.display_name,
                "qty": qty,
                "unit_price": default_unit_price(prod, self.currency_c.get()),
            })
        set_entry(self.qty_e, "")
        self.refresh_cart_view()

    def remove_selected(self):
        iid = selected_iid(self.cart_tree)
        if iid is None:
            return
        self.cart = [it for it in self.cart if it["product_id"] != iid]
        self.refresh_cart_view()

    def refresh_cart_view(self):
        clear_tree(self.cart_tree)
        subtotal = 0.0
        for it in self.cart:
            line = it["qty"] * it["unit_price"]
            subtotal += line
            self.cart_tree.insert("", "end", iid=it["product_id"], values=(
                it["name"], it["qty"], fmt_money(it["unit_price"]), fmt_money(line),
            ))
        try:
            discount = self._discount()
        except ValueError:
            discount = 0.0
        cur = self.currency_c.get()
        self.total_var.set(f"Subtotal: {fmt_money(subtotal)} {cur} | Total: {fmt_money(subtotal - discount)} {cur}")

    def save_invoice(self):
        try:
            invoice = self.app.invoices.create_invoice(
                self.person_labels.get(self.person_c.get()),
                [{"product_id": it["product_id"], "quantity": it["qty"], "unit_price": it["unit_price"]} for it in self.cart],
                currency=self.currency_c.get(),
                date=self.date_e.get().strip(),
                discount=self._discount(),
            )
        except Exception as e:
            self.app.handle_error("Invoice", e, "Failed to save invoice.")
            return
        self.cart = []
        set_entry(self.discount_e, "")
        self.app.toast(f"Invoice {invoice.invoice_number} saved.", kind="success")
        self.app.refresh_all(show_toast=False)

    def export_pdf(self):
        iid = selected_iid(self.hist_tree)
        if iid is None:
            messagebox.showwarning("Validation", "Select an invoice.", parent=self.frame)
            return
        invoice = self.app.invoices.get_invoice(iid)
        path = filedialog.asksaveasfilename(
            title="Save invoice as",
            defaultextension=".pdf",
            filetypes=[("PDF files", "*.pdf")],
            initialdir=self.app.exports_dir,
            initialfile=f"{invoice.invoice_number}.pdf",
        )
        if not path:
            return
        try:
            self.app.invoice_pdf.render_invoice(invoice, path)
            self.app.toast(f"PDF saved: {Path(path).name}", kind="success")
        except Exception as e:
            self.app.handle_error("PDF export", e, "PDF export failed.")

    def delete_invoice(self):
        iid = selected_iid(self.hist_tree)
        if iid is None:
            return
        if not messagebox.askyesno(
            "Confirm delete",
            "Delete the selected invoice?\n\nIts ledger payment stays in Transactions.",
            parent=self.frame,
        ):
            return
        try:
            self.app.invoices.delete_invoice(iid)
        except Exception as e:
            self.app.handle_error("Delete invoice", e, "Failed to delete invoice.")
            return
        self.app.toast("Invoice deleted.", kind="success")
        self.app.refresh_all(show_toast=False)

    def refresh(self):
        self.number_var.set(self.app.invoices.next_invoice_number())
        self.person_labels = {f"{p.name} (#{p.id})": p.id for p in self.app.persons.list_persons()}
        self.person_c["values"] = list(self.person_labels)

        stock = self.app.inventory.current_stock()
        self.product_labels = {
            f"{p.item_code} | {p.display_name} (stock: {stock.get(p.id, 0)})": p.id
            for p in self.app.products.list_products()
        }
        self.product_c["values"] = list(self.product_labels)
        self.product_c.set("")

        self.refresh_cart_view()

        clear_tree(self.hist_tree)
        for inv in self.app.invoices.list_invoices():
            self.hist_tree.insert("", "end", iid=inv.id, values=(
                inv.invoice_number, inv.date, inv.person_name, inv.total_quantity,
                fmt_money(inv.total_amount), inv.currency,
            ))
