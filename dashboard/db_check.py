import asyncio
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from dashboard.core.config import DATABASE_URL, LOG_LEVEL
from dashboard.core.database import open_store
from dashboard.repositories.invoice_repository import InvoiceRepository

logger = logging.getLogger(__name__)


async def check_connection(session_factory: async_sessionmaker) -> bool:
    """
    Проверяет подключение к базе запросом последних счетов.

    Returns:
        bool: True, если запрос выполнился
    """
    try:
        async with session_factory() as session:
            latest = await InvoiceRepository(session).get_latest()
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database connection error: {e}")
        return False
    logger.info("Database connection successful!")
    logger.info("Fetched invoices: %s", latest)
    return True


async def main(url: str = DATABASE_URL) -> int:
    async with open_store(url) as session_factory:
        ok = await check_connection(session_factory)
    return 0 if ok else 1


if __name__ == "__main__":
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    sys.exit(asyncio.run(main()))
