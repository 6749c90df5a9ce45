from typing import Any, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from dashboard.core.database import dialect_insert
from dashboard.models.user import User
import logging

logger = logging.getLogger(__name__)


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).filter_by(email=email))
        return result.scalar_one_or_none()

    async def upsert(self, values: Dict[str, Any]) -> None:
        """
        Добавляет пользователя или обновляет имя и пароль, если почта уже занята.

        Args:
            values: id, name, email и уже захешированный password
        """
        stmt = dialect_insert(self.session, User).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["email"],
            set_={"name": stmt.excluded.name, "password": stmt.excluded.password},
        )
        await self.session.execute(stmt)
        await self.session.commit()
        logger.info(f"Пользователь {values['email']} сохранен")
