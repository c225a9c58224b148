from __future__ import annotations

from datetime import timedelta

from flask.testing import FlaskClient
from sqlalchemy import select

from authgate.container import Container
from authgate.infrastructure.db.models import User
from authgate.tests.fakes import FakeClock

ALICE = {"username": "alice", "email": "alice@example.com", "password": "Secur3Pass!"}


def _register(client: FlaskClient, payload: dict | None = None):
    return client.post("/auth/register", json=payload or ALICE)


def test_register_me_logout_flow(client: FlaskClient) -> None:
    registered = _register(client)
    assert registered.status_code == 201
    cookie = registered.headers["Set-Cookie"]
    assert "HttpOnly" in cookie
    assert "SameSite=Strict" in cookie
    user = registered.get_json()["data"]["user"]
    assert set(user) == {"id", "username", "email", "isActive", "createdAt", "updatedAt"}

    me = client.get("/auth/me")
    assert me.status_code == 200
    assert me.get_json()["data"]["user"]["id"] == user["id"]

    logout = client.post("/auth/logout")
    assert logout.status_code == 200
    assert logout.get_json() == {"status": "success", "message": "Logged out successfully"}
    assert logout.headers["Set-Cookie"].startswith("jwt=loggedout;")

    after = client.get("/auth/me")
    assert after.status_code == 401
    assert after.get_json()["error"] == "no_credentials"


def test_logged_out_token_still_authenticates(client: FlaskClient) -> None:
    token = _register(client).get_json()["token"]
    client.post("/auth/logout")

    via_header = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert via_header.status_code == 200

    client.set_cookie("jwt", token)
    via_cookie = client.get("/auth/me")
    assert via_cookie.status_code == 200


def test_duplicate_email_conflict_keeps_first_account(
    client: FlaskClient, container: Container
) -> None:
    first = _register(client).get_json()["data"]["user"]

    duplicate = _register(client, {**ALICE, "username": "alice2", "password": "Other1Pass"})

    assert duplicate.status_code == 409
    assert duplicate.get_json()["error"] == "email_taken"
    stored = container.user_repository.find_by_email("alice@example.com", include_password=True)
    assert stored is not None
    assert stored.id == first["id"]
    assert stored.username == "alice"
    assert container.password_hasher.verify("Secur3Pass!", stored.password_hash)


def test_duplicate_username_conflict(client: FlaskClient) -> None:
    _register(client)

    duplicate = _register(client, {**ALICE, "email": "other@example.com"})

    assert duplicate.status_code == 409
    assert duplicate.get_json()["error"] == "username_taken"


def test_password_is_stored_hashed(client: FlaskClient, container: Container) -> None:
    _register(client)

    with container.database.session_scope() as session:
        row = session.scalars(select(User).where(User.email == "alice@example.com")).one()
        stored_hash = row.password_hash

    assert stored_hash != ALICE["password"]
    assert stored_hash.startswith("$2")


def test_login_does_not_reveal_which_part_was_wrong(client: FlaskClient) -> None:
    _register(client)

    wrong_password = client.post(
        "/auth/login", json={"email": "alice@example.com", "password": "Wrong1Pass"}
    )
    unknown_email = client.post(
        "/auth/login", json={"email": "nobody@example.com", "password": "Secur3Pass!"}
    )

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.get_json() == unknown_email.get_json()


def test_login_email_is_case_insensitive(client: FlaskClient) -> None:
    _register(client)

    response = client.post(
        "/auth/login", json={"email": "Alice@Example.COM", "password": "Secur3Pass!"}
    )

    assert response.status_code == 200


def test_deactivated_account_is_refused(client: FlaskClient, container: Container) -> None:
    user_id = _register(client).get_json()["data"]["user"]["id"]

    container.user_repository.set_active(user_id, False)

    me = client.get("/auth/me")
    assert me.status_code == 403
    assert me.get_json()["error"] == "account_deactivated"

    login = client.post("/auth/login", json={"email": ALICE["email"], "password": ALICE["password"]})
    assert login.status_code == 403


def test_tampered_token_rejected(client: FlaskClient) -> None:
    token = _register(client).get_json()["token"]
    client.delete_cookie("jwt")
    header, payload, _signature = token.split(".")

    response = client.get(
        "/auth/me", headers={"Authorization": f"Bearer {header}.{payload}.AAAAAAAAAAAAAAAAAAAA"}
    )

    assert response.status_code == 401
    assert response.get_json()["error"] == "token_invalid"


def test_token_expires_after_ttl(client: FlaskClient, clock: FakeClock) -> None:
    _register(client)

    clock.advance(timedelta(days=6))
    assert client.get("/auth/me").status_code == 200

    clock.advance(timedelta(days=2))
    response = client.get("/auth/me")
    assert response.status_code == 401
    assert response.get_json()["error"] == "token_expired"


def test_user_removed_after_issue(client: FlaskClient, container: Container) -> None:
    _register(client)

    with container.database.session_scope() as session:
        session.query(User).delete()

    response = client.get("/auth/me")
    assert response.status_code == 401
    assert response.get_json()["error"] == "user_no_longer_exists"


def test_health_reports_database(client: FlaskClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "success"
    assert body["database"] == "ok"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Request-ID"]


def test_unknown_route_returns_json_404(client: FlaskClient) -> None:
    response = client.get("/nope")

    assert response.status_code == 404
    assert response.get_json()["status"] == "fail"
    assert response.get_json()["error"] == "not_found"


def test_wrong_method_returns_json_405(client: FlaskClient) -> None:
    response = client.get("/auth/login")

    assert response.status_code == 405
    assert response.get_json()["error"] == "method_not_allowed"
