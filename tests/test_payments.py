"""
Payment recording through the API: idempotency, validation, corrections
"""
import uuid
from datetime import date

import pytest


@pytest.fixture
def rent(make_rent, make_tenant):
    return make_rent(tenant=make_tenant(), start=date(2026, 1, 1), end=date(2026, 12, 31))


def pay(client, rent, amount, key, **extra):
    payload = {
        "tenant_id": str(rent.tenant_id),
        "obligation_kind": "rent",
        "paid_amount": amount,
        "payment_date": "2026-03-05",
        "idempotency_key": key,
    }
    payload.update(extra)
    return client.post("/api/payments/", json=payload)


def test_rent_payment_resolves_active_rent(client, rent):
    response = pay(client, rent, 500.0, "pay-1")

    assert response.status_code == 201
    data = response.json()
    assert data["rent_id"] == str(rent.id)
    assert data["entry_type"] == "payment"
    assert data["balance"] == 700.0
    assert data["status"] == "Partial"
    assert data["monthly_rent"] == 100.0


def test_replayed_idempotency_key_returns_original(client, rent):
    first = pay(client, rent, 500.0, "pay-dup")
    second = pay(client, rent, 500.0, "pay-dup")

    assert first.status_code == 201
    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]

    listed = client.get("/api/payments/", params={"tenant_id": str(rent.tenant_id)}).json()
    assert len(listed) == 1


def test_overpayment_is_rejected(client, rent):
    pay(client, rent, 500.0, "pay-a")
    response = pay(client, rent, 700.02, "pay-b")

    assert response.status_code == 400
    assert response.json() == {"success": False, "field": "paidAmount", "reason": "exceeds remaining balance"}

    # One cent of slack
    assert pay(client, rent, 700.005, "pay-c").status_code == 201


def test_settled_obligation_rejects_further_payments(client, rent):
    assert pay(client, rent, 1200.0, "pay-full").json()["status"] == "Paid"

    response = pay(client, rent, 10.0, "pay-extra")
    assert response.status_code == 400
    assert response.json()["reason"] == "balance already zero"


def test_zero_amount_is_rejected(client, rent):
    response = pay(client, rent, 0, "pay-zero")
    assert response.status_code == 400
    assert response.json()["reason"] == "must be greater than zero"


def test_submitted_balance_must_match(client, rent):
    response = pay(client, rent, 200.0, "pay-bal", balance=900.0)
    assert response.status_code == 400
    assert response.json()["field"] == "balance"

    assert pay(client, rent, 200.0, "pay-bal-ok", balance=1000.0).status_code == 201


def test_rent_of_another_tenant_is_rejected(client, rent, make_tenant):
    stranger = make_tenant("Stranger")
    response = pay(client, rent, 100.0, "pay-x", tenant_id=str(stranger.id), rent_id=str(rent.id))

    assert response.status_code == 400
    assert response.json()["field"] == "tenantId"


def test_tenant_without_rent_gets_404(client, make_tenant):
    tenant = make_tenant("No Lease")
    response = client.post("/api/payments/", json={
        "tenant_id": str(tenant.id),
        "obligation_kind": "rent",
        "paid_amount": 100.0,
        "idempotency_key": "pay-none",
    })
    assert response.status_code == 404
    assert response.json()["reason"] == "no rent found for this tenant"


def test_reference_must_match_kind(client, rent):
    response = client.post("/api/payments/", json={
        "tenant_id": str(rent.tenant_id),
        "obligation_kind": "service",
        "paid_amount": 10.0,
        "idempotency_key": "pay-bad-ref",
    })
    assert response.status_code == 422
    assert response.json()["success"] is False


def test_payment_for_one_rent_does_not_settle_another(client, db, make_rent, make_tenant):
    tenant = make_tenant()
    first = make_rent(tenant=tenant, start=date(2025, 1, 1), end=date(2025, 12, 31))
    second = make_rent(tenant=tenant, start=date(2026, 1, 1), end=date(2026, 12, 31))

    response = pay(client, first, 1200.0, "pay-first", rent_id=str(first.id), payment_date="2025-06-01")
    assert response.status_code == 201

    first_balance = client.get(f"/api/balances/rent/{first.id}").json()["summary"]
    second_balance = client.get(f"/api/balances/rent/{second.id}").json()["summary"]
    assert first_balance["status"] == "Paid"
    assert second_balance["total_paid"] == 0.0
    assert second_balance["balance"] == 1200.0


def test_correction_appends_adjustment(client, rent):
    original = pay(client, rent, 500.0, "pay-orig").json()

    response = client.post(f"/api/payments/{original['id']}/corrections", json={
        "corrected_amount": 400.0,
        "payment_date": "2026-03-06",
        "idempotency_key": "fix-1",
    })
    assert response.status_code == 201
    adjustment = response.json()
    assert adjustment["entry_type"] == "adjustment"
    assert adjustment["adjusts_payment_id"] == original["id"]
    assert adjustment["paid_amount"] == -100.0
    assert adjustment["balance"] == 800.0

    # Original row untouched
    assert client.get(f"/api/payments/{original['id']}").json()["paid_amount"] == 500.0

    view = client.get(f"/api/balances/rent/{rent.id}", params={"as_of": "2026-03-10"}).json()
    assert view["summary"]["total_paid"] == 400.0
    assert [e["type"] for e in view["ledger"]] == ["charge", "payment", "adjustment"]
    assert view["ledger"][-1]["balance_after"] == 800.0


def test_correction_uses_balance_without_original(client, rent):
    original = pay(client, rent, 1200.0, "pay-all").json()

    # Obligation is settled, but correcting the payment itself is allowed
    ok = client.post(f"/api/payments/{original['id']}/corrections", json={
        "corrected_amount": 1000.0, "idempotency_key": "fix-down",
    })
    assert ok.status_code == 201

    too_much = client.post(f"/api/payments/{original['id']}/corrections", json={
        "corrected_amount": 1300.0, "idempotency_key": "fix-up",
    })
    assert too_much.status_code == 400
    assert too_much.json()["reason"] == "exceeds remaining balance"


def test_correction_of_unknown_payment(client):
    response = client.post(f"/api/payments/{uuid.uuid4()}/corrections", json={
        "corrected_amount": 10.0, "idempotency_key": "fix-missing",
    })
    assert response.status_code == 404


def test_payments_cannot_be_edited_or_deleted(client, rent):
    payment = pay(client, rent, 100.0, "pay-ro").json()
    assert client.put(f"/api/payments/{payment['id']}", json={"paid_amount": 1}).status_code == 405
    assert client.delete(f"/api/payments/{payment['id']}").status_code == 405


def test_list_filters_by_kind(client, rent, make_service, db):
    pay(client, rent, 100.0, "pay-rent")
    service = make_service(room=rent.room, month="2026-03")
    response = client.post("/api/payments/", json={
        "tenant_id": str(rent.tenant_id),
        "obligation_kind": "service",
        "monthly_service_id": str(service.id),
        "paid_amount": 40.0,
        "payment_date": "2026-03-20",
        "idempotency_key": "pay-service",
    })
    assert response.status_code == 201
    assert response.json()["status"] == "Paid"

    services = client.get("/api/payments/", params={"obligation_kind": "service"}).json()
    assert [p["idempotency_key"] for p in services] == ["pay-service"]
    everything = client.get("/api/payments/", params={"tenant_id": str(rent.tenant_id)}).json()
    assert len(everything) == 2


def test_unknown_obligation_balance_is_404(client):
    assert client.get(f"/api/balances/maintenance/{uuid.uuid4()}").status_code == 404
