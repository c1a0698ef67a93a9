from .customer_repository import CustomerRepository
from .invoice_repository import ITEMS_PER_PAGE, InvoiceRepository
from .revenue_repository import RevenueRepository
from .user_repository import UserRepository

__all__ = [
    "ITEMS_PER_PAGE",
    "CustomerRepository",
    "InvoiceRepository",
    "RevenueRepository",
    "UserRepository",
]
