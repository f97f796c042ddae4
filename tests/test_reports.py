"""
Tenant CRUD, tenant statements and the dashboard summary
"""
from datetime import date


def test_tenant_crud(client):
    created = client.post("/api/tenants/", json={"name": "Ann", "phone": "0733333333", "address": "Block C"})
    assert created.status_code == 201
    tenant_id = created.json()["id"]

    updated = client.put(f"/api/tenants/{tenant_id}", json={"phone": "0744444444"})
    assert updated.json()["phone"] == "0744444444"

    assert [t["name"] for t in client.get("/api/tenants/", params={"search": "an"}).json()] == ["Ann"]
    assert client.delete(f"/api/tenants/{tenant_id}").status_code == 204
    assert client.get(f"/api/tenants/{tenant_id}").status_code == 404


def test_tenant_with_rent_cannot_be_deleted(client, make_rent, make_tenant):
    tenant = make_tenant()
    make_rent(tenant=tenant)

    response = client.delete(f"/api/tenants/{tenant.id}")
    assert response.status_code == 409


def test_tenant_balances(client, make_rent, make_tenant, make_room, make_service):
    tenant = make_tenant()
    room = make_room()
    rent = make_rent(tenant=tenant, room=room, start=date(2026, 1, 1), end=date(2026, 12, 31))
    make_service(room=room, month="2026-02")

    client.post("/api/payments/", json={
        "tenant_id": str(tenant.id),
        "obligation_kind": "rent",
        "rent_id": str(rent.id),
        "paid_amount": 300.0,
        "payment_date": "2026-02-01",
        "idempotency_key": "stmt-1",
    })

    response = client.get(f"/api/tenants/{tenant.id}/balances", params={"as_of": "2026-03-10"})
    assert response.status_code == 200
    data = response.json()
    assert data["total_due"] == 1240.0
    assert data["total_paid"] == 300.0
    assert data["total_outstanding"] == 940.0

    by_kind = {o["kind"]: o for o in data["obligations"]}
    assert by_kind["rent"]["summary"]["status"] == "Partial"
    # February bill unpaid after its month ended
    assert by_kind["service"]["summary"]["status"] == "Overdue"
    assert by_kind["service"]["due_date"] == "2026-02-28"


def test_changeover_month_bill_goes_to_incoming_tenant(client, make_rent, make_tenant, make_room, make_service):
    room = make_room()
    outgoing = make_tenant("Outgoing")
    incoming = make_tenant("Incoming")
    make_rent(tenant=outgoing, room=room, start=date(2026, 1, 1), end=date(2026, 3, 15), months=3)
    make_rent(tenant=incoming, room=room, start=date(2026, 3, 16), end=date(2026, 9, 15), months=6)
    service = make_service(room=room, month="2026-03")

    params = {"as_of": "2026-03-20"}
    outgoing_view = client.get(f"/api/tenants/{outgoing.id}/balances", params=params).json()
    assert [o["kind"] for o in outgoing_view["obligations"]] == ["rent"]
    assert outgoing_view["total_outstanding"] == 300.0

    incoming_view = client.get(f"/api/tenants/{incoming.id}/balances", params=params).json()
    assert sorted(o["kind"] for o in incoming_view["obligations"]) == ["rent", "service"]
    assert incoming_view["total_outstanding"] == 640.0

    def pay_bill(tenant, key):
        return client.post("/api/payments/", json={
            "tenant_id": str(tenant.id),
            "obligation_kind": "service",
            "monthly_service_id": str(service.id),
            "paid_amount": 40.0,
            "payment_date": "2026-03-20",
            "idempotency_key": key,
        })

    refused = pay_bill(outgoing, "changeover-out")
    assert refused.status_code == 400
    assert refused.json()["field"] == "tenantId"
    assert pay_bill(incoming, "changeover-in").status_code == 201


def test_summary(client, make_rent, make_tenant, make_room, make_service):
    tenant = make_tenant()
    room = make_room()
    rent = make_rent(tenant=tenant, room=room, start=date(2026, 1, 1), end=date(2026, 3, 20))
    make_service(room=room, month="2026-03")
    client.post("/api/payments/", json={
        "tenant_id": str(tenant.id),
        "obligation_kind": "rent",
        "rent_id": str(rent.id),
        "paid_amount": 500.0,
        "payment_date": "2026-02-15",
        "idempotency_key": "sum-1",
    })

    response = client.get("/api/reports/summary", params={
        "as_of": "2026-03-10",
        "start_date": "2026-02-01",
        "end_date": "2026-02-28",
    })
    assert response.status_code == 200
    data = response.json()

    assert data["by_kind"]["rent"] == {"obligations": 1, "total_due": 1200.0, "total_paid": 500.0, "outstanding": 700.0}
    assert data["by_kind"]["service"]["outstanding"] == 40.0
    assert data["by_kind"]["maintenance"]["obligations"] == 0
    assert data["status_counts"]["Partial"] == 1
    assert data["status_counts"]["Pending"] == 1
    assert data["contract_counts"]["expiring_soon"] == 1
    assert data["collected_in_period"] == 500.0
    assert data["occupancy"]["tenants"] == 1


def test_health_and_root(client):
    assert client.get("/health").json()["status"] == "healthy"
    assert client.get("/").json()["success"] is True
