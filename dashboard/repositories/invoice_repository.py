from typing import Any, Dict, List, Optional
from sqlalchemy import String, case, cast, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from dashboard.core.database import dialect_insert
from dashboard.models.customer import Customer
from dashboard.models.invoice import (
    Invoice,
    INVOICE_STATUSES,
    STATUS_PAID,
    STATUS_PENDING,
)


def search_filter(query: str):
    """Условие поиска счета: подстрока в имени/почте клиента, сумме, дате или статусе"""
    return or_(
        Customer.name.icontains(query, autoescape=True),
        Customer.email.icontains(query, autoescape=True),
        cast(Invoice.amount, String).icontains(query, autoescape=True),
        cast(Invoice.date, String).icontains(query, autoescape=True),
        Invoice.status.icontains(query, autoescape=True),
    )


class InvoiceRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_latest(self, limit: int = 5) -> List[Dict[str, Any]]:
        result = await self.session.execute(
            select(
                Invoice.id,
                Invoice.amount,
                Invoice.date,
                Customer.name,
                Customer.image_url,
                Customer.email,
            )
            .join(Invoice.customer)
            .order_by(Invoice.date.desc())
            .limit(limit)
        )
        return [dict(row) for row in result.mappings().all()]

    async def get_filtered(
        self, query: str, limit: int, offset: int
    ) -> List[Dict[str, Any]]:
        result = await self.session.execute(
            select(
                Invoice.id,
                Invoice.customer_id,
                Invoice.amount,
                Invoice.date,
                Invoice.status,
                Customer.name,
                Customer.email,
                Customer.image_url,
            )
            .join(Invoice.customer)
            .where(search_filter(query))
            .order_by(Invoice.date.desc(), Invoice.id)
            .limit(limit)
            .offset(offset)
        )
        return [dict(row) for row in result.mappings().all()]

    async def count_filtered(self, query: str) -> int:
        result = await self.session.execute(
            select(func.count(Invoice.id))
            .select_from(Invoice)
            .join(Invoice.customer)
            .where(search_filter(query))
        )
        return result.scalar_one()

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(Invoice.id)))
        return result.scalar_one()

    async def get_status_totals(self) -> Dict[str, int]:
        """Суммы счетов в центах отдельно по статусам paid и pending"""
        result = await self.session.execute(
            select(
                func.sum(
                    case((Invoice.status == STATUS_PAID, Invoice.amount), else_=0)
                ).label("paid"),
                func.sum(
                    case((Invoice.status == STATUS_PENDING, Invoice.amount), else_=0)
                ).label("pending"),
            ).where(Invoice.status.in_(INVOICE_STATUSES))
        )
        row = result.mappings().one()
        return {"paid": row["paid"] or 0, "pending": row["pending"] or 0}

    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        result = await self.session.execute(select(Invoice).filter_by(id=invoice_id))
        return result.scalar_one_or_none()

    async def insert_or_skip(self, values: Dict[str, Any]) -> bool:
        """Вставляет счет; при конфликте по id ничего не делает. True, если вставлен"""
        stmt = (
            dialect_insert(self.session, Invoice)
            .values(**values)
            .on_conflict_do_nothing(index_elements=["id"])
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount == 1
