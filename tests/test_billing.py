"""
Monthly service bills and maintenance requests
"""
import uuid

import pytest


@pytest.fixture
def room(make_room):
    return make_room("Room 7")


def service_payload(room, **fields):
    payload = {
        "room_id": str(room.id),
        "month": "2026-03",
        "water_total": 20.0,
        "electricity_total": 15.0,
        "trash_fee": 5.0,
        "maintenance_fee": 0.0,
    }
    payload.update(fields)
    return payload


# ==================== MONTHLY SERVICES ====================

def test_total_amount_is_computed_from_components(client, room):
    response = client.post("/api/monthly-services/", json=service_payload(room))
    assert response.status_code == 201
    assert response.json()["total_amount"] == 40.0


def test_inconsistent_total_amount_is_rejected(client, room):
    response = client.post("/api/monthly-services/", json=service_payload(room, total_amount=45.0))
    assert response.status_code == 400
    assert response.json()["field"] == "totalAmount"

    assert client.post("/api/monthly-services/", json=service_payload(room, total_amount=40.0)).status_code == 201


def test_utility_totals_from_meter_readings(client, room):
    response = client.post("/api/monthly-services/", json={
        "room_id": str(room.id),
        "month": "2026-04",
        "water_previous": 100.0,
        "water_current": 110.0,
        "water_price_per_unit": 2.0,
        "electricity_previous": 50.0,
        "electricity_current": 80.0,
        "electricity_price_per_unit": 0.5,
        "trash_fee": 5.0,
    })
    assert response.status_code == 201
    data = response.json()
    assert data["water_total"] == 20.0
    assert data["electricity_total"] == 15.0
    assert data["total_amount"] == 40.0


def test_meter_running_backwards_is_rejected(client, room):
    response = client.post("/api/monthly-services/", json={
        "room_id": str(room.id),
        "month": "2026-04",
        "water_previous": 110.0,
        "water_current": 100.0,
        "water_price_per_unit": 2.0,
    })
    assert response.status_code == 400
    assert response.json()["field"] == "waterCurrent"


def test_one_bill_per_room_and_month(client, room):
    assert client.post("/api/monthly-services/", json=service_payload(room)).status_code == 201
    duplicate = client.post("/api/monthly-services/", json=service_payload(room))
    assert duplicate.status_code == 409
    assert duplicate.json()["field"] == "month"


def test_month_format(client, room):
    response = client.post("/api/monthly-services/", json=service_payload(room, month="2026-13"))
    assert response.status_code == 422


def test_update_recomputes_total(client, room):
    service = client.post("/api/monthly-services/", json=service_payload(room)).json()

    response = client.put(f"/api/monthly-services/{service['id']}", json={"trash_fee": 10.0})
    assert response.status_code == 200
    assert response.json()["total_amount"] == 45.0

    bad = client.put(f"/api/monthly-services/{service['id']}", json={"total_amount": 99.0})
    assert bad.status_code == 400


def test_unknown_room_is_404(client):
    response = client.post("/api/monthly-services/", json={"room_id": str(uuid.uuid4()), "month": "2026-03"})
    assert response.status_code == 404


def test_paid_bill_cannot_drop_below_payments(client, room, make_tenant):
    tenant = make_tenant()
    service = client.post("/api/monthly-services/", json=service_payload(room)).json()
    paid = client.post("/api/payments/", json={
        "tenant_id": str(tenant.id),
        "obligation_kind": "service",
        "monthly_service_id": service["id"],
        "paid_amount": 40.0,
        "payment_date": "2026-03-20",
        "idempotency_key": "svc-paid-40",
    })
    assert paid.status_code == 201

    lowered = client.put(f"/api/monthly-services/{service['id']}", json={"water_total": 0.0, "electricity_total": 0.0})
    assert lowered.status_code == 400
    assert lowered.json()["field"] == "totalAmount"
    assert "already paid" in lowered.json()["reason"]

    moved = client.put(f"/api/monthly-services/{service['id']}", json={"month": "2026-04"})
    assert moved.status_code == 409
    assert moved.json()["field"] == "month"

    raised = client.put(f"/api/monthly-services/{service['id']}", json={"trash_fee": 10.0})
    assert raised.status_code == 200
    assert raised.json()["total_amount"] == 45.0

    summary = client.get(f"/api/balances/service/{service['id']}").json()["summary"]
    assert summary["total_paid"] == 40.0
    assert summary["balance"] == 5.0


# ==================== MAINTENANCE ====================

def test_request_snapshots_issue_prices(client, make_issue, make_tenant):
    tap = make_issue("Leaking tap", 30.0)
    lock = make_issue("Broken lock", 20.0)
    tenant = make_tenant()

    response = client.post("/api/maintenance-requests/", json={
        "tenant_id": str(tenant.id),
        "issue_ids": [str(tap.id), str(lock.id)],
    })
    assert response.status_code == 201
    request = response.json()
    assert request["total_price"] == 50.0
    assert request["status"] == "Pending"

    client.put(f"/api/maintenance-issues/{tap.id}", json={"price": 99.0})

    refreshed = client.get(f"/api/maintenance-requests/{request['id']}").json()
    assert refreshed["total_price"] == 50.0
    assert sorted(item["price_at_request"] for item in refreshed["items"]) == [20.0, 30.0]


def test_unknown_issue_is_404(client, make_issue):
    tap = make_issue()
    response = client.post("/api/maintenance-requests/", json={"issue_ids": [str(tap.id), str(uuid.uuid4())]})
    assert response.status_code == 404
    assert response.json()["field"] == "issueIds"


def test_request_status_update(client, make_issue):
    request = client.post("/api/maintenance-requests/", json={"issue_ids": [str(make_issue().id)]}).json()

    response = client.put(f"/api/maintenance-requests/{request['id']}", json={"status": "In Progress"})
    assert response.status_code == 200
    assert response.json()["status"] == "In Progress"
    assert response.json()["total_price"] == 30.0


def test_maintenance_payment_settles_request(client, make_issue, make_tenant):
    tenant = make_tenant()
    request = client.post("/api/maintenance-requests/", json={
        "tenant_id": str(tenant.id),
        "issue_ids": [str(make_issue().id)],
    }).json()

    response = client.post("/api/payments/", json={
        "tenant_id": str(tenant.id),
        "obligation_kind": "maintenance",
        "maintenance_request_id": request["id"],
        "paid_amount": 30.0,
        "idempotency_key": "maint-1",
    })
    assert response.status_code == 201
    assert response.json()["status"] == "Paid"

    # Paid requests keep their ledger
    assert client.delete(f"/api/maintenance-requests/{request['id']}").status_code == 409


def test_issue_in_use_cannot_be_deleted(client, make_issue):
    issue = make_issue()
    client.post("/api/maintenance-requests/", json={"issue_ids": [str(issue.id)]})
    assert client.delete(f"/api/maintenance-issues/{issue.id}").status_code == 409
