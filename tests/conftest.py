import pytest_asyncio
import datetime
from sqlalchemy.ext.asyncio import create_async_engine
import sys
from pathlib import Path


sys.path.append(str(Path(__file__).resolve().parent.parent))

from dashboard.core.database import Base, create_session_factory
from dashboard.models import Customer, Invoice

ANNA_ID = "00000000-0000-4000-8000-000000000001"
BOB_ID = "00000000-0000-4000-8000-000000000002"
CLARA_ID = "00000000-0000-4000-8000-000000000003"

BOB_AMOUNTS = [1200, 2400, 3600, 4800, 6000, 7200, 8400, 9600]


@pytest_asyncio.fixture
async def engine(tmp_path):
    # файл, а не :memory:, чтобы параллельные сессии видели одну базу
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'dashboard.db'}", echo=False, future=True
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def dashboard_data(session):
    """
    Anna: два счета (500 paid, 300 pending)
    Bob Stone: восемь счетов с марта по октябрь 2023, paid/pending по очереди
    Clara Oswald: без счетов
    """
    session.add_all(
        [
            Customer(
                id=ANNA_ID,
                name="Anna",
                email="anna@example.com",
                image_url="/customers/anna.png",
            ),
            Customer(
                id=BOB_ID,
                name="Bob Stone",
                email="bob@stone.io",
                image_url="/customers/bob.png",
            ),
            Customer(
                id=CLARA_ID,
                name="Clara Oswald",
                email="clara@tardis.org",
                image_url="/customers/clara.png",
            ),
        ]
    )
    session.add_all(
        [
            Invoice(
                id="anna-paid",
                customer_id=ANNA_ID,
                amount=500,
                status="paid",
                date=datetime.date(2023, 1, 10),
            ),
            Invoice(
                id="anna-pending",
                customer_id=ANNA_ID,
                amount=300,
                status="pending",
                date=datetime.date(2023, 2, 11),
            ),
        ]
    )
    for k, amount in enumerate(BOB_AMOUNTS):
        session.add(
            Invoice(
                id=f"bob-{k}",
                customer_id=BOB_ID,
                amount=amount,
                status="paid" if k % 2 == 0 else "pending",
                date=datetime.date(2023, 3 + k, 1),
            )
        )
    await session.commit()
