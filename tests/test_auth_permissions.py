import bcrypt
import pytest
from fastapi.testclient import TestClient

from src.auth.context import AuthContext
from src.auth.dependencies import get_current_auth
from src.auth.jwt import create_access_token, decode_access_token
from src.auth.permissions import normalize_role
from src.main import app
from src.routers import auth_routes


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, rows):
        self.rows = rows
        self.filters = []

    def select(self, _fields: str):
        return self

    def eq(self, key: str, value):
        self.filters.append((key, value))
        return self

    def is_(self, key: str, value):
        self.filters.append((key, None))
        return self

    def execute(self):
        return FakeResponse([
            dict(row) for row in self.rows
            if all(row.get(key) == value for key, value in self.filters)
        ])


class FakeSupabase:
    def __init__(self, users):
        self.users = users

    def table(self, _table_name: str):
        return FakeQuery(self.users)


def _clear() -> None:
    app.dependency_overrides.clear()


def test_auth_context_normalizes_legacy_roles() -> None:
    admin = AuthContext(user_id="u-1", role="superuser")
    customer = AuthContext(user_id="u-2", role="Customer")

    assert admin.role == "admin"
    assert "companies.manage" in admin.permissions
    assert customer.role == "user"
    assert "companies.read" not in customer.permissions


def test_tam_can_read_companies_but_not_manage_them() -> None:
    auth = AuthContext(user_id="u-1", role="tam")

    assert "companies.read" in auth.permissions
    assert "companies.manage" not in auth.permissions


def test_unknown_role_is_rejected() -> None:
    with pytest.raises(ValueError):
        normalize_role("owner")


def test_session_token_round_trip() -> None:
    token = create_access_token(user_id="u-1", role="admin")

    payload = decode_access_token(token)

    assert payload["sub"] == "u-1"
    assert payload["type"] == "session"
    assert decode_access_token(token + "x") is None


def test_login_issues_session_token(monkeypatch) -> None:
    password_hash = bcrypt.hashpw(b"hunter2", bcrypt.gensalt()).decode()
    users = [{"id": "u-1", "email": "admin@example.com", "type": "admin", "password_hash": password_hash, "deleted_at": None}]
    monkeypatch.setattr(auth_routes, "supabase", FakeSupabase(users))

    client = TestClient(app)
    ok = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "hunter2"})
    wrong = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "nope"})

    assert ok.status_code == 200
    assert decode_access_token(ok.json()["access_token"])["sub"] == "u-1"
    assert wrong.status_code == 401


def test_missing_authorization_header_is_rejected() -> None:
    client = TestClient(app)
    response = client.get("/api/auth/me")

    assert response.status_code == 401


def test_auth_me_returns_permissions() -> None:
    auth = AuthContext(user_id="u-admin", role="admin", email="admin@example.com")

    async def _override():
        return auth

    app.dependency_overrides[get_current_auth] = _override
    client = TestClient(app)
    response = client.get("/api/auth/me")
    _clear()

    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "admin"
    assert "support_levels.manage" in body["permissions"]
