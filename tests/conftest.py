import os

# Settings are read on import; configure before the app is loaded
os.environ["TESTING"] = "True"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"

import uuid
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core.deps import get_current_user
from app.core.security import get_password_hash
from app.database import get_db
from app.db.base import Base
from app.main import app
from app.models.maintenance import MaintenanceIssue
from app.models.monthly_service import MonthlyService
from app.models.property import House, Room, RoomStatus
from app.models.rent import Rent
from app.models.tenant import Tenant
from app.models.user import User, UserRole

TEST_DATABASE_URL = "sqlite://"


@pytest.fixture
def db():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def admin_user(db):
    user = User(
        id=uuid.uuid4(),
        full_name="Test Admin",
        username="admin",
        hashed_password=get_password_hash("AdminPass123"),
        role=UserRole.ADMIN,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def anon_client(db):
    """Real authentication; only the database is swapped."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def client(db, admin_user):
    """Signed in as admin_user."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: admin_user
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ==================== FACTORIES ====================

@pytest.fixture
def make_room(db):
    def _make_room(name="Room 1", monthly_rent=100.0):
        house = House(id=uuid.uuid4(), name=f"House for {name}", address="1 Main Street")
        room = Room(id=uuid.uuid4(), house=house, name=name, monthly_rent=monthly_rent, status=RoomStatus.AVAILABLE)
        db.add_all([house, room])
        db.commit()
        return room
    return _make_room


@pytest.fixture
def make_tenant(db):
    def _make_tenant(name="Jane Tenant"):
        tenant = Tenant(id=uuid.uuid4(), name=name, phone="0700000000", address="2 Side Road")
        db.add(tenant)
        db.commit()
        return tenant
    return _make_tenant


@pytest.fixture
def make_rent(db, make_room, make_tenant):
    def _make_rent(tenant=None, room=None, start=date(2026, 1, 1), end=date(2026, 12, 31),
                   monthly_rent=100.0, months=12):
        rent = Rent(
            id=uuid.uuid4(),
            tenant_id=(tenant or make_tenant()).id,
            room_id=(room or make_room()).id,
            guarantor_name="Guarantor",
            guarantor_phone="0711111111",
            monthly_rent=monthly_rent,
            months=months,
            total_rent=round(monthly_rent * months, 2),
            start_date=start,
            end_date=end,
        )
        db.add(rent)
        db.commit()
        return rent
    return _make_rent


@pytest.fixture
def make_service(db, make_room):
    def _make_service(room=None, month="2026-03", total_amount=40.0):
        service = MonthlyService(
            id=uuid.uuid4(),
            room_id=(room or make_room()).id,
            month=month,
            water_total=20.0,
            electricity_total=15.0,
            trash_fee=5.0,
            maintenance_fee=0.0,
            total_amount=total_amount,
        )
        db.add(service)
        db.commit()
        return service
    return _make_service


@pytest.fixture
def make_issue(db):
    def _make_issue(name="Leaking tap", price=30.0):
        issue = MaintenanceIssue(id=uuid.uuid4(), name=name, price=price)
        db.add(issue)
        db.commit()
        return issue
    return _make_issue
