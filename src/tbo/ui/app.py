from __future__ import annotations

import tkinter as tk
from tkinter import ttk, messagebox
import logging
from typing import Optional

from tbo.domain.errors import AppError
from tbo.domain.models import User
from tbo.ui.views.dashboard_view import DashboardView
from tbo.ui.views.persons_view import PersonsView
from tbo.ui.views.transactions_view import TransactionsView
from tbo.ui.views.products_view import ProductsView
from tbo.ui.views.inventory_view import InventoryView
from tbo.ui.views.invoicing_view import InvoicingView
from tbo.ui.views.expenses_view import ExpensesView
from tbo.ui.views.deliveries_view import DeliveriesView

log = logging.getLogger(__name__)


class LoginDialog(tk.Toplevel):
    def __init__(self, master: tk.Tk, auth):
        super().__init__(master)
        self.auth = auth
        self.user: Optional[User] = None
        self.title("Login")
        self.resizable(False, False)
        self.protocol("WM_DELETE_WINDOW", self.destroy)

        box = ttk.Frame(self, padding=16)
        box.pack(fill="both", expand=True)

        ttk.Label(box, text="Username").grid(row=0, column=0, sticky="w", pady=4)
        self.username = ttk.Combobox(box, values=[u.username for u in auth.list_users()], width=22)
        self.username.grid(row=0, column=1, sticky="ew", pady=4)

        ttk.Label(box, text="Password").grid(row=1, column=0, sticky="w", pady=4)
        self.password = ttk.Entry(box, show="*", width=24)
        self.password.grid(row=1, column=1, sticky="ew", pady=4)

        self.error_var = tk.StringVar(value="")
        ttk.Label(box, textvariable=self.error_var, foreground="#b91c1c").grid(row=2, column=0, columnspan=2, sticky="w")

        ttk.Button(box, text="Sign in", command=self.on_login).grid(row=3, column=0, columnspan=2, sticky="ew", pady=(8, 0))
        self.password.bind("<Return>", lambda _e: self.on_login())
        self.username.focus_set()

        self.transient(master)
        self.grab_set()

    def on_login(self):
        try:
            self.user = self.auth.login(self.username.get(), self.password.get())
        except AppError as e:
            self.error_var.set(str(e))
            self.password.delete(0, tk.END)
            return
        self.destroy()


class App(tk.Tk):
    def __init__(self, container, exports_dir: str, logs_dir: str):
        super().__init__()
        self.title("Trading Back Office")
        self.geometry("1320x760")
        self.minsize(1120, 640)

        self.c = container
        self.persons = container.persons
        self.transactions = container.transactions
        self.balances = container.balances
        self.products = container.products
        self.inventory = container.inventory
        self.invoices = container.invoices
        self.expenses = container.expenses
        self.deliveries = container.deliveries
        self.excel = container.excel
        self.invoice_pdf = container.invoice_pdf
        self.reporting = container.reporting

        self.exports_dir = exports_dir
        self.logs_dir = logs_dir
        self.current_user: Optional[User] = None

        self.status_var = tk.StringVar(value="")
        self.user_var = tk.StringVar(value="")
        self._toast_after_id = None

        self.withdraw()
        if not self._login(container.auth):
            self.destroy()
            return
        self.deiconify()

        self._build_styles()
        self._build_topbar()

        main = ttk.Frame(self)
        main.pack(fill="both", expand=True, padx=12, pady=(0, 8))

        self.sidebar = ttk.Frame(main)
        self.sidebar.pack(side="left", fill="y", padx=(0, 10))

        self.content = ttk.Frame(main)
        self.content.pack(side="right", fill="both", expand=True)

        self.nb = ttk.Notebook(self.content, style="Side.TNotebook")
        self.nb.pack(fill="both", expand=True)

        self.dashboard_view = DashboardView(self.nb, self)
        self.persons_view = PersonsView(self.nb, self)
        self.transactions_view = TransactionsView(self.nb, self)
        self.products_view = ProductsView(self.nb, self)
        self.inventory_view = InventoryView(self.nb, self)
        self.invoicing_view = InvoicingView(self.nb, self)
        self.expenses_view = ExpensesView(self.nb, self)
        self.deliveries_view = DeliveriesView(self.nb, self)

        self._build_sidebar()
        self._build_status_bar()

        self.refresh_all(show_toast=False)
        self.toast("Ready.", kind="info", ms=1200)

    def _login(self, auth) -> bool:
        dlg = LoginDialog(self, auth)
        self.wait_window(dlg)
        if dlg.user is None:
            return False
        self.current_user = dlg.user
        self.user_var.set(f"Signed in as {dlg.user.username}")
        return True

    def _build_styles(self):
        style = ttk.Style(self)
        style.layout("Side.TNotebook.Tab", [])
        style.configure("Side.TNotebook", tabmargins=0)
        style.configure("Big.TButton", padding=(14, 10))
        style.configure("Title.TLabel", font=("Segoe UI", 12, "bold"))
        style.configure("KPI.TLabel", font=("Segoe UI", 10))
        style.configure("KPIValue.TLabel", font=("Segoe UI", 11, "bold"))

    def _build_topbar(self):
        top = ttk.Frame(self)
        top.pack(fill="x", padx=12, pady=10)
        ttk.Label(top, text="Trading Back Office", style="Title.TLabel").pack(side="left")
        ttk.Button(top, text="Logout", command=self.logout).pack(side="right")
        ttk.Label(top, textvariable=self.user_var).pack(side="right", padx=10)

    def _build_sidebar(self):
        box = ttk.LabelFrame(self.sidebar, text="Navigation")
        box.pack(fill="x", pady=(0, 10))

        pages = [
            ("Dashboard", self.dashboard_view),
            ("Persons", self.persons_view),
            ("Transactions", self.transactions_view),
            ("Products", self.products_view),
            ("Inventory", self.inventory_view),
            ("Invoices", self.invoicing_view),
            ("Jack's Payments", self.expenses_view),
            ("Deliveries", self.deliveries_view),
        ]
        for i, (label, view) in enumerate(pages):
            ttk.Button(
                box, text=label, style="Big.TButton",
                command=lambda v=view: self.nb.select(v.frame),
            ).pack(fill="x", padx=10, pady=(10 if i == 0 else 4, 4))

        ttk.Button(box, text="Refresh", style="Big.TButton",
                   command=self.refresh_all).pack(fill="x", padx=10, pady=(6, 10))

    def _build_status_bar(self):
        bar = ttk.Frame(self)
        bar.pack(fill="x", padx=12, pady=(0, 10))
        ttk.Label(bar, textvariable=self.status_var).pack(side="left")
        ttk.Label(bar, text=f"Logs: {self.logs_dir}").pack(side="right")

    def toast(self, msg: str, kind: str = "info", ms: int = 2500):
        prefix = {"info": "ℹ ", "success": "✅ ", "warn": "⚠ ", "error": "❌ "}.get(kind, "")
        self.status_var.set(prefix + msg)
        if self._toast_after_id is not None:
            self.after_cancel(self._toast_after_id)
        self._toast_after_id = self.after(ms, lambda: self.status_var.set(""))

    def handle_error(self, title: str, exc: Exception, fallback: str):
        if isinstance(exc, (AppError, ValueError)):
            messagebox.showwarning(title, str(exc), parent=self)
            self.toast(str(exc), kind="warn")
            return
        log.exception("%s: %s", fallback, exc)
        messagebox.showerror(title, fallback, parent=self)
        self.toast(fallback, kind="error")

    def logout(self):
        self.current_user = None
        self.withdraw()
        if not self._login(self.c.auth):
            self.destroy()
            return
        self.deiconify()

    def refresh_all(self, show_toast: bool = True):
        self.dashboard_view.refresh()
        self.persons_view.refresh()
        self.transactions_view.refresh()
        self.products_view.refresh()
        self.inventory_view.refresh()
        self.invoicing_view.refresh()
        self.expenses_view.refresh()
        self.deliveries_view.refresh()

        if show_toast:
            self.toast("Refreshed.", kind="info", ms=1200)
