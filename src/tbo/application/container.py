from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from tbo.config import Settings, load_settings
from tbo.repositories.memory_store import MemoryStore, seed_demo_data
from tbo.services.auth_service import AuthService
from tbo.services.balance_service import BalanceService
from tbo.services.delivery_service import DeliveryService
from tbo.services.excel_service import ExcelService
from tbo.services.expense_service import ExpenseService
from tbo.services.inventory_service import InventoryService
from tbo.services.invoice_pdf_service import InvoicePdfService
from tbo.services.invoice_service import InvoiceService
from tbo.services.person_service import PersonService
from tbo.services.product_service import ProductService
from tbo.services.reporting_service import ReportingService
from tbo.services.transaction_service import TransactionService


@dataclass(frozen=True)
class AppContainer:
    settings: Settings
    store: MemoryStore
    persons: PersonService
    transactions: TransactionService
    balances: BalanceService
    products: ProductService
    inventory: InventoryService
    invoices: InvoiceService
    expenses: ExpenseService
    deliveries: DeliveryService
    excel: ExcelService
    invoice_pdf: InvoicePdfService
    reporting: ReportingService
    auth: AuthService


def build_container(settings: Optional[Settings] = None, store: Optional[MemoryStore] = None) -> AppContainer:
    settings = settings or load_settings()
    if store is None:
        store = MemoryStore()
        if settings.seed_demo:
            seed_demo_data(store)

    persons = PersonService(store)
    transactions = TransactionService(store, page_size=settings.page_size)
    balances = BalanceService(store)
    products = ProductService(store)
    inventory = InventoryService(store)
    invoices = InvoiceService(store, transactions)
    expenses = ExpenseService(store, transactions, holder_name=settings.expense_holder)
    deliveries = DeliveryService(store, page_size=settings.page_size)
    excel = ExcelService(store, products, inventory)
    reporting = ReportingService(store, balances)
    auth = AuthService(settings.users)

    return AppContainer(
        settings=settings,
        store=store,
        persons=persons,
        transactions=transactions,
        balances=balances,
        products=products,
        inventory=inventory,
        invoices=invoices,
        expenses=expenses,
        deliveries=deliveries,
        excel=excel,
        invoice_pdf=InvoicePdfService(),
        reporting=reporting,
        auth=auth,
    )
