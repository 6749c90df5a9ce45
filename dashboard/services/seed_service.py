import asyncio
import datetime
import hashlib
import logging
import uuid
from typing import Any, Dict, List, Optional

import bcrypt
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from dashboard import placeholder_data
from dashboard.core.config import BCRYPT_ROUNDS
from dashboard.repositories.customer_repository import CustomerRepository
from dashboard.repositories.invoice_repository import InvoiceRepository
from dashboard.repositories.revenue_repository import RevenueRepository
from dashboard.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


def invoice_seed_id(invoice: Dict[str, Any]) -> str:
    """Детерминированный id счета из его содержимого, чтобы повторный сид давал конфликт"""
    parts = (
        invoice["customer_id"],
        str(invoice["amount"]),
        invoice["status"],
        str(invoice["date"]),
    )
    h = hashlib.sha256("||".join(parts).encode("utf-8")).hexdigest()
    return str(uuid.UUID(h[:32]))


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode(
        "utf-8"
    )


class SeedService:
    """
    Заполняет базу фиксированным набором данных.

    Каждая строка вставляется в своей сессии, строки одной партии
    отправляются параллельно. Повторный запуск ничего не дублирует:
    клиенты, счета и выручка пропускаются при конфликте, пользователи
    обновляются по почте.
    """

    def __init__(
        self, session_factory: async_sessionmaker, bcrypt_rounds: int = BCRYPT_ROUNDS
    ):
        self.session_factory = session_factory
        self.bcrypt_rounds = bcrypt_rounds

    async def _insert_or_none(
        self, repo_class, values: Dict[str, Any], label: str
    ) -> Optional[Dict[str, Any]]:
        try:
            async with self.session_factory() as session:
                inserted = await repo_class(session).insert_or_skip(values)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error inserting {label}: {e}")
            return None
        if not inserted:
            logger.debug(f"{label} уже есть в базе, пропускаем")
        return values

    async def _upsert_user(self, user: Dict[str, Any]) -> Dict[str, Any]:
        hashed = await asyncio.to_thread(
            hash_password, user["password"], self.bcrypt_rounds
        )
        values = {
            "id": user["id"],
            "name": user["name"],
            "email": user["email"],
            "password": hashed,
        }
        async with self.session_factory() as session:
            await UserRepository(session).upsert(values)
        return values

    async def seed_users(
        self, users: Optional[List[Dict[str, Any]]] = None
    ) -> List[Dict[str, Any]]:
        """
        Добавляет пользователей с захешированными паролями.

        Ошибка любой строки прерывает весь сид.

        Returns:
            List[Dict[str, Any]]: сохраненные записи (пароль уже в виде хеша)
        """
        users = placeholder_data.users if users is None else users
        inserted = await asyncio.gather(
            *(self._upsert_user(u) for u in users), return_exceptions=True
        )
        for result in inserted:
            if isinstance(result, BaseException):
                logger.error(f"Error seeding users: {result}")
                raise result
        logger.info(f"Seeded {len(inserted)} users")
        return list(inserted)

    async def seed_customers(
        self, customers: Optional[List[Dict[str, Any]]] = None
    ) -> List[Optional[Dict[str, Any]]]:
        customers = placeholder_data.customers if customers is None else customers
        inserted = await asyncio.gather(
            *(
                self._insert_or_none(CustomerRepository, dict(c), "customer")
                for c in customers
            )
        )
        logger.info(
            f"Seeded {sum(1 for c in inserted if c is not None)} of {len(inserted)} customers"
        )
        return list(inserted)

    async def seed_invoices(
        self, invoices: Optional[List[Dict[str, Any]]] = None
    ) -> List[Optional[Dict[str, Any]]]:
        """
        Добавляет счета. Строка с ошибкой превращается в None, остальные
        продолжают вставляться.
        """
        invoices = placeholder_data.invoices if invoices is None else invoices
        rows = []
        for invoice in invoices:
            values = dict(invoice)
            values.setdefault("id", invoice_seed_id(invoice))
            if isinstance(values["date"], str):
                values["date"] = datetime.date.fromisoformat(values["date"])
            rows.append(values)

        inserted = await asyncio.gather(
            *(self._insert_or_none(InvoiceRepository, v, "invoice") for v in rows)
        )
        logger.info(
            f"Seeded {sum(1 for i in inserted if i is not None)} of {len(inserted)} invoices"
        )
        return list(inserted)

    async def seed_revenue(
        self, revenue: Optional[List[Dict[str, Any]]] = None
    ) -> List[Optional[Dict[str, Any]]]:
        revenue = placeholder_data.revenue if revenue is None else revenue
        inserted = await asyncio.gather(
            *(
                self._insert_or_none(RevenueRepository, dict(r), "revenue")
                for r in revenue
            )
        )
        logger.info(
            f"Seeded {sum(1 for r in inserted if r is not None)} of {len(inserted)} revenue"
        )
        return list(inserted)

    async def seed_all(self) -> Dict[str, int]:
        """Сид всех таблиц; клиенты идут раньше счетов из-за внешнего ключа"""
        users = await self.seed_users()
        customers = await self.seed_customers()
        invoices = await self.seed_invoices()
        revenue = await self.seed_revenue()
        return {
            "users": len(users),
            "customers": sum(1 for c in customers if c is not None),
            "invoices": sum(1 for i in invoices if i is not None),
            "revenue": sum(1 for r in revenue if r is not None),
        }
