from .person_service import PersonService
from .transaction_service import TransactionService
from .balance_service import BalanceService
from .product_service import ProductService, ProductFilter
from .inventory_service import InventoryService
from .invoice_service import InvoiceService
from .expense_service import ExpenseService
from .delivery_service import DeliveryService
from .excel_service import ExcelService, UploadAnalysis
from .invoice_pdf_service import InvoicePdfService
from .reporting_service import ReportingService
from .auth_service import AuthService, LoginPolicy

__all__ = [
    "PersonService",
    "TransactionService",
    "BalanceService",
    "ProductService",
    "ProductFilter",
    "InventoryService",
    "InvoiceService",
    "ExpenseService",
    "DeliveryService",
    "ExcelService",
    "UploadAnalysis",
    "InvoicePdfService",
    "ReportingService",
    "AuthService",
    "LoginPolicy",
]
