from .models import (
    CURRENCIES,
    TRANSACTION_TYPES,
    Person,
    Transaction,
    Product,
    Invoice,
    InvoiceItem,
    Delivery,
)
from .errors import AppError, ValidationError, NotFoundError, InsufficientStockError, AuthorizationError
from .balances import compute_balances
from .stock import compute_current_stock

__all__ = [
    "CURRENCIES",
    "TRANSACTION_TYPES",
    "Person",
    "Transaction",
    "Product",
    "Invoice",
    "InvoiceItem",
    "Delivery",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "InsufficientStockError",
    "AuthorizationError",
    "compute_balances",
    "compute_current_stock",
]
