"""
Модели данных дашборда счетов.
"""

from .user import User
from .customer import Customer
from .invoice import Invoice
from .revenue import Revenue

__all__ = [
    "User",
    "Customer",
    "Invoice",
    "Revenue",
]
