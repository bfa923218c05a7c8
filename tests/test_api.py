"""End-to-end HTTP scenarios against the FastAPI app."""

import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from gadget_api import create_app
from gadget_api.core.codenames import CODENAME_NOUNS, CODENAME_RE, format_codename
from gadget_api.core.security import issue_token
from gadget_api.crud import gadgets as repo
from gadget_api.db.session import Base, get_db

from gadget_api.models import gadget as gadget_model  # noqa: F401
from gadget_api.models import user as user_model  # noqa: F401


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app = create_app(create_tables=False)
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def auth_headers(client):
    client.post("/auth/register", json={"username": "agent007", "password": "secret"})
    response = client.post("/auth/login", json={"username": "agent007", "password": "secret"})
    return {"Authorization": f"Bearer {response.json()['token']}"}


def test_register_and_login_flow(client):
    created = client.post("/auth/register", json={"username": "agent007", "password": "secret"})
    assert created.status_code == 201
    assert created.json() == {"message": "User created"}

    duplicate = client.post("/auth/register", json={"username": "agent007", "password": "secret"})
    assert duplicate.status_code == 400
    assert "error" in duplicate.json()

    login = client.post("/auth/login", json={"username": "agent007", "password": "secret"})
    assert login.status_code == 200
    assert login.json()["token"]

    wrong = client.post("/auth/login", json={"username": "agent007", "password": "nope"})
    assert wrong.status_code == 401
    assert wrong.json() == {"error": "Invalid credentials"}


def test_register_with_missing_fields_is_bad_request(client):
    response = client.post("/auth/register", json={"username": "agent007"})

    assert response.status_code == 400
    assert "error" in response.json()


def test_gadgets_require_a_valid_token(client):
    missing = client.get("/gadgets")
    assert missing.status_code == 401
    assert missing.json() == {"error": "No token provided"}
    assert missing.headers["WWW-Authenticate"] == "Bearer"

    bogus = client.get("/gadgets", headers={"Authorization": "Bearer not-a-token"})
    assert bogus.status_code == 401
    assert bogus.json() == {"error": "Invalid token"}


def test_bare_token_is_accepted(client):
    token = issue_token(1)

    response = client.get("/gadgets", headers={"Authorization": token})
    assert response.status_code == 200
    assert response.json() == []


def test_create_update_and_list_gadgets(client, auth_headers):
    created = client.post("/gadgets", headers=auth_headers)
    assert created.status_code == 201
    gadget = created.json()
    assert CODENAME_RE.match(gadget["name"])
    assert gadget["status"] == "Available"
    assert gadget["decommissionedAt"] is None

    patched = client.patch(f"/gadgets/{gadget['id']}", json={"status": "Decommissioned"}, headers=auth_headers)
    assert patched.status_code == 200
    assert patched.json()["decommissionedAt"]

    listing = client.get("/gadgets", params={"status": "Decommissioned"}, headers=auth_headers)
    assert listing.status_code == 200
    rows = listing.json()
    assert [row["id"] for row in rows] == [gadget["id"]]
    assert rows[0]["successProbability"].endswith("%")
    assert rows[0]["display"].startswith(f"{gadget['name']} - ")

    assert client.get("/gadgets", params={"status": "Available"}, headers=auth_headers).json() == []


def test_patch_validation_and_not_found(client, auth_headers):
    gadget = client.post("/gadgets", headers=auth_headers).json()

    bad_status = client.patch(f"/gadgets/{gadget['id']}", json={"status": "Lost"}, headers=auth_headers)
    assert bad_status.status_code == 400

    unknown_field = client.patch(f"/gadgets/{gadget['id']}", json={"id": "x"}, headers=auth_headers)
    assert unknown_field.status_code == 400

    missing = client.patch("/gadgets/does-not-exist", json={"status": "Deployed"}, headers=auth_headers)
    assert missing.status_code == 404
    assert missing.json() == {"error": "Gadget not found"}


def test_decommission_endpoint(client, auth_headers):
    gadget = client.post("/gadgets", headers=auth_headers).json()

    response = client.delete(f"/gadgets/{gadget['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Gadget decommissioned"}

    rows = client.get("/gadgets", params={"status": "Decommissioned"}, headers=auth_headers).json()
    assert rows[0]["decommissionedAt"]

    missing = client.delete("/gadgets/does-not-exist", headers=auth_headers)
    assert missing.status_code == 404


def test_self_destruct_handshake(client, auth_headers):
    gadget = client.post("/gadgets", headers=auth_headers).json()
    url = f"/gadgets/{gadget['id']}/self-destruct"

    early = client.post(url, json={"confirmationCode": "12345"}, headers=auth_headers)
    assert early.status_code == 400

    generated = client.post(f"{url}/generate-code", headers=auth_headers)
    assert generated.status_code == 200
    body = generated.json()
    code = body["confirmationCode"]
    assert len(code) == 5 and code.isdigit()
    assert body["message"]

    wrong = "10000" if code != "10000" else "10001"
    rejected = client.post(url, json={"confirmationCode": wrong}, headers=auth_headers)
    assert rejected.status_code == 403
    assert rejected.json() == {"error": "Invalid confirmation code"}

    confirmed = client.post(url, json={"confirmationCode": code}, headers=auth_headers)
    assert confirmed.status_code == 200
    assert confirmed.json() == {"message": "Gadget self-destructed"}

    reused = client.post(url, json={"confirmationCode": code}, headers=auth_headers)
    assert reused.status_code == 400

    rows = client.get("/gadgets", params={"status": "Destroyed"}, headers=auth_headers).json()
    assert [row["id"] for row in rows] == [gadget["id"]]


def test_generate_code_for_unknown_gadget(client, auth_headers):
    response = client.post("/gadgets/does-not-exist/self-destruct/generate-code", headers=auth_headers)

    assert response.status_code == 404


def test_responses_carry_request_id(client):
    response = client.post(
        "/auth/login",
        json={"username": "ghost", "password": "x"},
        headers={"X-Request-ID": "req-123"},
    )

    assert response.status_code == 401
    assert response.headers["X-Request-ID"] == "req-123"


def test_register_with_overlong_password_is_bad_request(client):
    response = client.post("/auth/register", json={"username": "agent007", "password": "x" * 80})

    assert response.status_code == 400
    assert "72 bytes" in response.json()["error"]

    # Login with the same input is just a failed login.
    login = client.post("/auth/login", json={"username": "agent007", "password": "x" * 80})
    assert login.status_code == 401


def test_unexpected_errors_use_the_error_envelope():
    app = create_app(create_tables=False)

    @app.get("/boom")
    def boom():
        raise RuntimeError("kaboom")

    with TestClient(app, raise_server_exceptions=False) as test_client:
        response = test_client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


def test_create_when_codenames_run_out_is_bad_request(client, session_factory, auth_headers):
    db = session_factory()
    try:
        for noun in CODENAME_NOUNS:
            repo.create_gadget(db, format_codename(noun), "Available")
    finally:
        db.close()

    response = client.post("/gadgets", headers=auth_headers)

    assert response.status_code == 400
    assert "codename" in response.json()["error"]


def test_numeric_confirmation_code_is_forbidden(client, auth_headers):
    gadget = client.post("/gadgets", headers=auth_headers).json()
    url = f"/gadgets/{gadget['id']}/self-destruct"
    code = client.post(f"{url}/generate-code", headers=auth_headers).json()["confirmationCode"]

    numeric = client.post(url, json={"confirmationCode": int(code)}, headers=auth_headers)
    assert numeric.status_code == 403
    assert numeric.json() == {"error": "Invalid confirmation code"}

    # The pending code is untouched.
    confirmed = client.post(url, json={"confirmationCode": code}, headers=auth_headers)
    assert confirmed.status_code == 200
