"""
Obligation resolution: which rent is in force for a tenant on a given day
"""
import uuid
from datetime import date
from types import SimpleNamespace

from app.models.payment import ObligationKind
from app.services.obligation_resolver import (
    ObligationResolver,
    is_active_on,
    resolve_active_rent,
    resolve_room_rent,
    resolve_service_rent,
)

TENANT = uuid.uuid4()
ROOM = uuid.uuid4()


def rent(start, end, tenant_id=TENANT, room_id=ROOM):
    return SimpleNamespace(id=uuid.uuid4(), tenant_id=tenant_id, room_id=room_id, start_date=start, end_date=end)


def test_window_is_inclusive_on_both_ends():
    r = rent(date(2026, 1, 1), date(2026, 6, 30))
    assert is_active_on(r, date(2026, 1, 1))
    assert is_active_on(r, date(2026, 6, 30))
    assert not is_active_on(r, date(2026, 7, 1))


def test_picks_the_rent_whose_window_contains_as_of():
    old = rent(date(2025, 1, 1), date(2025, 12, 31))
    current = rent(date(2026, 1, 1), date(2026, 12, 31))

    assert resolve_active_rent([old, current], TENANT, date(2026, 3, 1)) is current
    assert resolve_active_rent([old, current], TENANT, date(2025, 3, 1)) is old


def test_overlapping_windows_resolve_to_latest_start():
    first = rent(date(2026, 1, 1), date(2026, 12, 31))
    second = rent(date(2026, 3, 1), date(2026, 8, 31))

    assert resolve_active_rent([first, second], TENANT, date(2026, 4, 1)) is second


def test_falls_back_to_most_recent_rent_when_none_is_active():
    # Billing just after a lease lapsed still finds the tenant's last rent
    old = rent(date(2024, 1, 1), date(2024, 12, 31))
    latest = rent(date(2025, 1, 1), date(2025, 12, 31))

    assert resolve_active_rent([old, latest], TENANT, date(2026, 3, 1)) is latest


def test_no_rents_resolves_to_none():
    other_tenant = rent(date(2026, 1, 1), date(2026, 12, 31), tenant_id=uuid.uuid4())
    assert resolve_active_rent([], TENANT, date(2026, 3, 1)) is None
    assert resolve_active_rent([other_tenant], TENANT, date(2026, 3, 1)) is None


def test_room_lookup_has_no_fallback():
    past = rent(date(2025, 1, 1), date(2025, 12, 31))
    assert resolve_room_rent([past], ROOM, date(2026, 3, 1)) is None
    assert resolve_room_rent([past], ROOM, date(2025, 3, 1)) is past


def test_service_month_is_charged_to_one_rent():
    outgoing = rent(date(2026, 1, 1), date(2026, 3, 15), tenant_id=uuid.uuid4())
    incoming = rent(date(2026, 3, 16), date(2026, 9, 15), tenant_id=uuid.uuid4())
    short_stay = rent(date(2026, 10, 5), date(2026, 10, 20))
    rents = [outgoing, incoming, short_stay]

    assert resolve_service_rent(rents, ROOM, "2026-03") is incoming
    assert resolve_service_rent(rents, ROOM, "2026-02") is outgoing
    assert resolve_service_rent(rents, ROOM, "2026-10") is short_stay
    assert resolve_service_rent(rents, ROOM, "2026-12") is None


def test_room_rent_lookup(db, make_rent, make_room):
    room = make_room()
    r = make_rent(room=room, start=date(2026, 1, 1), end=date(2026, 6, 30), months=6)
    resolver = ObligationResolver(db)

    assert resolver.active_rent_for_room(room.id, date(2026, 6, 30)).id == r.id
    assert resolver.active_rent_for_room(room.id, date(2026, 7, 1)) is None


def test_resolver_missing_obligation_is_none(db):
    resolver = ObligationResolver(db)
    for kind in ObligationKind:
        assert resolver.get_obligation(kind, uuid.uuid4()) is None
    assert resolver.active_rent(uuid.uuid4(), date(2026, 3, 1)) is None


def test_obligations_for_tenant_collects_rent_services_and_requests(db, make_rent, make_tenant, make_room, make_service):
    tenant = make_tenant()
    room = make_room()
    make_rent(tenant=tenant, room=room, start=date(2026, 1, 1), end=date(2026, 6, 30), months=6)
    in_lease = make_service(room=room, month="2026-03")
    make_service(room=room, month="2026-09")

    obligations = ObligationResolver(db).obligations_for_tenant(tenant.id)

    kinds = [o.kind for o in obligations]
    assert kinds == [ObligationKind.RENT, ObligationKind.SERVICE]
    assert obligations[1].id == in_lease.id
    assert obligations[1].tenant_id == tenant.id


def test_service_tenant_comes_from_the_room_rent(db, make_rent, make_room, make_service):
    room = make_room()
    r = make_rent(room=room, start=date(2026, 1, 1), end=date(2026, 6, 30), months=6)
    service = make_service(room=room, month="2026-06")

    obligation = ObligationResolver(db).get_obligation(ObligationKind.SERVICE, service.id)
    assert obligation.tenant_id == r.tenant_id
    assert obligation.total_amount == 40.0
