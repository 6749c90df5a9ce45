import pytest
from dashboard.repositories.revenue_repository import RevenueRepository


@pytest.mark.asyncio
async def test_revenue_month_is_not_overwritten(session):
    """Повторная запись за тот же месяц пропускается, остается первая"""
    repo = RevenueRepository(session)

    assert await repo.insert_or_skip({"month": "Jan", "revenue": 2000}) is True
    assert await repo.insert_or_skip({"month": "Jan", "revenue": 3000}) is False

    rows = await repo.get_all()
    assert len(rows) == 1
    assert rows[0].revenue == 2000
