import asyncio
import logging

from dashboard.core.config import DATABASE_URL, LOG_LEVEL
from dashboard.core.database import create_engine, create_session_factory, create_tables
from dashboard.services.seed_service import SeedService

logger = logging.getLogger(__name__)


async def main(url: str = DATABASE_URL) -> None:
    engine = create_engine(url)
    try:
        # Таблицы создаются только если их еще нет; схему ведет alembic
        await create_tables(engine)
        counts = await SeedService(create_session_factory(engine)).seed_all()
        logger.info("Seed finished: %s", counts)
    except Exception as e:
        logger.error(f"An error occurred while attempting to seed the database: {e}")
        raise
    finally:
        await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    asyncio.run(main())
