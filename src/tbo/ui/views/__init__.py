from .dashboard_view import DashboardView
from .persons_view import PersonsView
from .transactions_view import TransactionsView
from .products_view import ProductsView
from .inventory_view import InventoryView
from .invoicing_view import InvoicingView
from .expenses_view import ExpensesView
from .deliveries_view import DeliveriesView

__all__ = [
    "DashboardView",
    "PersonsView",
    "TransactionsView",
    "ProductsView",
    "InventoryView",
    "InvoicingView",
    "ExpensesView",
    "DeliveriesView",
]
