from datetime import date, timedelta
from types import SimpleNamespace

from app.services.contract_service import ContractStatus, add_one_month, classify, classify_all

TODAY = date(2026, 3, 10)


def ending(days):
    return SimpleNamespace(end_date=TODAY + timedelta(days=days))


def test_ending_today_is_expiring_soon_with_zero_days_remaining():
    result = classify(ending(0), TODAY)
    assert result.status == ContractStatus.EXPIRING_SOON
    assert result.days_remaining == 0


def test_ended_yesterday_is_expired():
    result = classify(ending(-1), TODAY)
    assert result.status == ContractStatus.EXPIRED
    assert result.days_remaining == -1


def test_one_month_boundary():
    assert classify(ending(1), TODAY).status == ContractStatus.EXPIRING_SOON
    assert classify(ending(29), TODAY).status == ContractStatus.EXPIRING_SOON
    assert classify(ending(31), TODAY).status == ContractStatus.ACTIVE


def test_february_window_is_shorter():
    # Feb 1 + 1 month = Mar 1, so the window holds 28 days
    today = date(2026, 2, 1)
    assert classify(SimpleNamespace(end_date=date(2026, 2, 28)), today).status == ContractStatus.EXPIRING_SOON
    assert classify(SimpleNamespace(end_date=date(2026, 3, 1)), today).status == ContractStatus.ACTIVE

    plus_29 = classify(SimpleNamespace(end_date=today + timedelta(days=29)), today)
    assert plus_29.status == ContractStatus.ACTIVE
    assert plus_29.days_remaining == 29


def test_add_one_month_clamps_to_month_end():
    assert add_one_month(date(2026, 1, 31)) == date(2026, 2, 28)
    assert add_one_month(date(2024, 1, 31)) == date(2024, 2, 29)
    assert add_one_month(date(2026, 12, 15)) == date(2027, 1, 15)


def test_classify_all_filters_and_sorts_soonest_first():
    rents = [ending(90), ending(-5), ending(10), ending(3)]

    expiring = classify_all(rents, TODAY, ContractStatus.EXPIRING_SOON)
    assert [c.days_remaining for _, c in expiring] == [3, 10]

    everything = classify_all(rents, TODAY)
    assert [c.days_remaining for _, c in everything] == [-5, 3, 10, 90]


def test_contracts_endpoint(client, make_rent, make_tenant):
    tenant = make_tenant("Contract Tenant")
    make_rent(tenant=tenant, start=date(2025, 4, 1), end=date(2026, 3, 20))
    make_rent(tenant=tenant, start=date(2025, 1, 1), end=date(2026, 1, 31))
    make_rent(tenant=tenant, start=date(2026, 3, 1), end=date(2027, 2, 28))

    response = client.get("/api/contracts/", params={"as_of": TODAY.isoformat()})
    assert response.status_code == 200
    data = response.json()
    assert data["expired_count"] == 1
    assert data["expiring_soon_count"] == 1
    assert data["active_count"] == 1
    assert data["contracts"][0]["tenant_name"] == "Contract Tenant"

    response = client.get("/api/contracts/", params={"as_of": TODAY.isoformat(), "status": "expiring_soon"})
    contracts = response.json()["contracts"]
    assert len(contracts) == 1
    assert contracts[0]["days_remaining"] == 10
    assert contracts[0]["balance"] == 1200.0
