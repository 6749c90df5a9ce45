import importlib.util
from pathlib import Path

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from unittest.mock import patch

from dashboard import db_check, placeholder_data, seed
from dashboard.core.database import create_engine, open_store
from dashboard.repositories.invoice_repository import InvoiceRepository
from dashboard.services.dashboard_service import DashboardService

MIGRATIONS = Path(__file__).resolve().parent.parent / "alembic" / "versions"


@pytest.mark.asyncio
async def test_check_connection(session_factory, dashboard_data):
    assert await db_check.check_connection(session_factory) is True


@pytest.mark.asyncio
async def test_check_connection_failure(session_factory):
    with patch.object(InvoiceRepository, "get_latest", side_effect=SQLAlchemyError("down")):
        assert await db_check.check_connection(session_factory) is False


@pytest.mark.asyncio
async def test_db_check_main_without_tables(tmp_path):
    assert await db_check.main(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}") == 1


@pytest.mark.asyncio
async def test_seed_main(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'seeded.db'}"

    await seed.main(url)

    async with open_store(url) as session_factory:
        svc = DashboardService(session_factory)
        card = await svc.fetch_card_data()
        user = await svc.get_user("user@nextmail.com")

    assert card["number_of_invoices"] == len(placeholder_data.invoices)
    assert card["number_of_customers"] == len(placeholder_data.customers)
    assert user["name"] == "User"


def _load_migration():
    path = next(MIGRATIONS.glob("*_create_dashboard_tables.py"))
    spec = importlib.util.spec_from_file_location("create_dashboard_tables", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.mark.asyncio
async def test_migration_creates_tables(tmp_path):
    migration = _load_migration()
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'migrated.db'}")

    def upgrade(sync_conn):
        with Operations.context(MigrationContext.configure(sync_conn)):
            migration.upgrade()
        return set(inspect(sync_conn).get_table_names())

    try:
        async with engine.begin() as conn:
            tables = await conn.run_sync(upgrade)
    finally:
        await engine.dispose()

    assert tables == {"users", "customers", "invoices", "revenue"}
