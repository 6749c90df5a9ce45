import pytest
from dashboard.repositories.customer_repository import CustomerRepository


@pytest.mark.asyncio
async def test_get_all_ordered_by_name(session, dashboard_data):
    customers = await CustomerRepository(session).get_all()
    assert [c["name"] for c in customers] == ["Anna", "Bob Stone", "Clara Oswald"]
    assert set(customers[0]) == {"id", "name"}


@pytest.mark.asyncio
async def test_filtered_with_totals(session, dashboard_data):
    repo = CustomerRepository(session)

    rows = await repo.get_filtered_with_totals("")
    by_name = {r["name"]: r for r in rows}

    assert by_name["Anna"]["total_invoices"] == 2
    assert by_name["Anna"]["total_paid"] == 500
    assert by_name["Anna"]["total_pending"] == 300
    assert by_name["Bob Stone"]["total_invoices"] == 8
    assert by_name["Clara Oswald"]["total_invoices"] == 0
    assert (by_name["Clara Oswald"]["total_paid"] or 0) == 0


@pytest.mark.asyncio
async def test_filtered_by_email(session, dashboard_data):
    rows = await CustomerRepository(session).get_filtered_with_totals("TARDIS")
    assert [r["name"] for r in rows] == ["Clara Oswald"]
