from typing import Any, Dict, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from dashboard.core.database import dialect_insert
from dashboard.models.revenue import Revenue


class RevenueRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_all(self) -> List[Revenue]:
        result = await self.session.execute(select(Revenue))
        return result.scalars().all()

    async def insert_or_skip(self, values: Dict[str, Any]) -> bool:
        """Снимок за месяц только добавляется: существующий месяц не перезаписывается"""
        stmt = (
            dialect_insert(self.session, Revenue)
            .values(**values)
            .on_conflict_do_nothing(index_elements=["month"])
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount == 1
