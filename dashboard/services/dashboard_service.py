import asyncio
import functools
import logging
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from dashboard.core.config import ITEMS_PER_PAGE
from dashboard.core.exceptions import NotFoundError, StoreError
from dashboard.repositories.customer_repository import CustomerRepository
from dashboard.repositories.invoice_repository import InvoiceRepository
from dashboard.repositories.revenue_repository import RevenueRepository
from dashboard.repositories.user_repository import UserRepository
from dashboard.utils.currency import format_currency
from dashboard.utils.pagination import page_offset, total_pages

logger = logging.getLogger(__name__)

LATEST_INVOICES_LIMIT = 5


def store_operation(message: str):
    """
    Оборачивает ошибки хранилища в StoreError с фиксированным сообщением.

    Исходная ошибка пишется в лог и не попадает в цепочку исключений.
    NotFoundError и ошибки валидации пробрасываются как есть.
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except (SQLAlchemyError, OSError) as e:
                logger.error(f"Database Error: {e}", exc_info=True)
                raise StoreError(message) from None

        return wrapper

    return decorator


class DashboardService:
    """
    Операции чтения для дашборда: выручка, счета, клиенты, пользователи.

    Каждая операция открывает собственную сессию из переданной фабрики,
    поэтому независимые запросы можно выполнять параллельно.
    """

    def __init__(
        self, session_factory: async_sessionmaker, per_page: int = ITEMS_PER_PAGE
    ):
        self.session_factory = session_factory
        self.per_page = per_page

    @store_operation("Failed to fetch revenue data.")
    async def fetch_revenue(self) -> List[Dict[str, Any]]:
        async with self.session_factory() as session:
            rows = await RevenueRepository(session).get_all()
        return [{"month": row.month, "revenue": row.revenue} for row in rows]

    @store_operation("Failed to fetch the latest invoices.")
    async def fetch_latest_invoices(self) -> List[Dict[str, Any]]:
        async with self.session_factory() as session:
            invoices = await InvoiceRepository(session).get_latest(
                LATEST_INVOICES_LIMIT
            )
        for invoice in invoices:
            invoice["amount"] = format_currency(invoice["amount"])
        return invoices

    async def _count_invoices(self) -> int:
        async with self.session_factory() as session:
            return await InvoiceRepository(session).count()

    async def _count_customers(self) -> int:
        async with self.session_factory() as session:
            return await CustomerRepository(session).count()

    async def _invoice_status_totals(self) -> Dict[str, int]:
        async with self.session_factory() as session:
            return await InvoiceRepository(session).get_status_totals()

    @store_operation("Failed to fetch card data.")
    async def fetch_card_data(self) -> Dict[str, Any]:
        """
        Данные для карточек дашборда.

        Три агрегата считаются параллельно; ошибка любого из них
        прерывает весь вызов.

        Returns:
            Dict[str, Any]: number_of_customers, number_of_invoices,
            total_paid_invoices, total_pending_invoices
        """
        results = await asyncio.gather(
            self._count_invoices(),
            self._count_customers(),
            self._invoice_status_totals(),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        invoice_count, customer_count, totals = results
        return {
            "number_of_customers": customer_count,
            "number_of_invoices": invoice_count,
            "total_paid_invoices": format_currency(totals["paid"]),
            "total_pending_invoices": format_currency(totals["pending"]),
        }

    @store_operation("Failed to fetch invoices.")
    async def fetch_filtered_invoices(
        self, query: str, current_page: int
    ) -> List[Dict[str, Any]]:
        """
        Страница счетов, подходящих под строку поиска, от новых к старым.

        Args:
            query: подстрока для поиска по клиенту, сумме, дате и статусу
            current_page: номер страницы, начиная с 1

        Returns:
            List[Dict[str, Any]]: не больше per_page счетов с отформатированной суммой

        Raises:
            ValueError: если номер страницы меньше 1
        """
        offset = page_offset(current_page, self.per_page)
        async with self.session_factory() as session:
            invoices = await InvoiceRepository(session).get_filtered(
                query, limit=self.per_page, offset=offset
            )
        for invoice in invoices:
            invoice["amount"] = format_currency(invoice["amount"])
        return invoices

    @store_operation("Failed to fetch total number of invoices.")
    async def fetch_invoices_pages(self, query: str) -> int:
        async with self.session_factory() as session:
            count = await InvoiceRepository(session).count_filtered(query)
        return total_pages(count, self.per_page)

    @store_operation("Failed to fetch invoice.")
    async def fetch_invoice_by_id(self, invoice_id: str) -> Dict[str, Any]:
        async with self.session_factory() as session:
            invoice = await InvoiceRepository(session).get_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice not found.")
        return {
            "id": invoice.id,
            "customer_id": invoice.customer_id,
            "amount": format_currency(invoice.amount),
            "status": invoice.status,
        }

    @store_operation("Failed to fetch all customers.")
    async def fetch_customers(self) -> List[Dict[str, Any]]:
        async with self.session_factory() as session:
            return await CustomerRepository(session).get_all()

    @store_operation("Failed to fetch customer table.")
    async def fetch_filtered_customers(self, query: str) -> List[Dict[str, Any]]:
        async with self.session_factory() as session:
            customers = await CustomerRepository(session).get_filtered_with_totals(
                query
            )
        for customer in customers:
            customer["total_pending"] = format_currency(customer["total_pending"])
            customer["total_paid"] = format_currency(customer["total_paid"])
        return customers

    @store_operation("Failed to fetch user.")
    async def get_user(self, email: str) -> Dict[str, Any]:
        """Пользователь по почте вместе с хешем пароля (хеш не логируется)"""
        async with self.session_factory() as session:
            user = await UserRepository(session).get_by_email(email)
        if user is None:
            raise NotFoundError("User not found.")
        return {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "password": user.password,
        }
