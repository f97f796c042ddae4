import uuid

from app.core.config import settings
from app.core.security import get_password_hash
from app.models.user import User, UserRole, UserStatus


def login(client, username="admin", password="AdminPass123"):
    return client.post("/api/auth/login", json={"username": username, "password": password})


def test_login_returns_token_and_sets_cookie(anon_client, admin_user):
    response = login(anon_client)

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["username"] == "admin"
    assert settings.SESSION_COOKIE_NAME in response.cookies


def test_login_invalid(anon_client, admin_user):
    assert login(anon_client, password="wrong-password").status_code == 401
    assert login(anon_client, username="nobody").status_code == 401


def test_bearer_token_authenticates(anon_client, admin_user):
    token = login(anon_client).json()["access_token"]
    anon_client.cookies.clear()

    response = anon_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["role"] == "admin"


def test_cookie_session_and_logout(anon_client, admin_user):
    login(anon_client)
    assert anon_client.get("/api/auth/me").status_code == 200

    anon_client.post("/api/auth/logout")
    assert anon_client.get("/api/auth/me").status_code == 401


def test_protected_routes_require_login(anon_client):
    assert anon_client.get("/api/tenants/").status_code == 401
    assert anon_client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401


def test_inactive_user_cannot_login(anon_client, db):
    db.add(User(
        id=uuid.uuid4(),
        full_name="Former Staff",
        username="former",
        hashed_password=get_password_hash("StaffPass123"),
        role=UserRole.STAFF,
        status=UserStatus.INACTIVE,
    ))
    db.commit()
    assert login(anon_client, "former", "StaffPass123").status_code == 401


def test_admin_creates_users(client):
    created = client.post("/api/users/", json={
        "full_name": "Desk Staff",
        "username": "desk",
        "password": "StaffPass123",
        "role": "staff",
    })
    assert created.status_code == 201
    assert "hashed_password" not in created.json()

    duplicate = client.post("/api/users/", json={
        "full_name": "Desk Staff",
        "username": "desk",
        "password": "StaffPass123",
    })
    assert duplicate.status_code == 409
    assert duplicate.json()["field"] == "username"


def test_user_management_is_admin_only(anon_client, db):
    db.add(User(
        id=uuid.uuid4(),
        full_name="Desk Staff",
        username="desk",
        hashed_password=get_password_hash("StaffPass123"),
        role=UserRole.STAFF,
    ))
    db.commit()

    token = login(anon_client, "desk", "StaffPass123").json()["access_token"]
    response = anon_client.get("/api/users/", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403
    assert anon_client.get("/api/tenants/", headers={"Authorization": f"Bearer {token}"}).status_code == 200
