from typing import Any, Dict, List
from sqlalchemy import case, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from dashboard.core.database import dialect_insert
from dashboard.models.customer import Customer
from dashboard.models.invoice import Invoice, STATUS_PAID, STATUS_PENDING


class CustomerRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_all(self) -> List[Dict[str, Any]]:
        result = await self.session.execute(
            select(Customer.id, Customer.name).order_by(Customer.name.asc())
        )
        return [dict(row) for row in result.mappings().all()]

    async def get_filtered_with_totals(self, query: str) -> List[Dict[str, Any]]:
        """
        Ищет клиентов по подстроке в имени или почте и считает итоги по их счетам.

        Args:
            query: строка поиска (без учета регистра)

        Returns:
            List[Dict[str, Any]]: клиенты с total_invoices, total_pending и
            total_paid (суммы в центах)
        """
        result = await self.session.execute(
            select(
                Customer.id,
                Customer.name,
                Customer.email,
                Customer.image_url,
                func.count(Invoice.id).label("total_invoices"),
                func.sum(
                    case((Invoice.status == STATUS_PENDING, Invoice.amount), else_=0)
                ).label("total_pending"),
                func.sum(
                    case((Invoice.status == STATUS_PAID, Invoice.amount), else_=0)
                ).label("total_paid"),
            )
            .outerjoin(Invoice, Invoice.customer_id == Customer.id)
            .where(
                or_(
                    Customer.name.icontains(query, autoescape=True),
                    Customer.email.icontains(query, autoescape=True),
                )
            )
            .group_by(Customer.id, Customer.name, Customer.email, Customer.image_url)
            .order_by(Customer.name.asc())
        )
        return [dict(row) for row in result.mappings().all()]

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(Customer.id)))
        return result.scalar_one()

    async def insert_or_skip(self, values: Dict[str, Any]) -> bool:
        stmt = (
            dialect_insert(self.session, Customer)
            .values(**values)
            .on_conflict_do_nothing(index_elements=["id"])
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount == 1
