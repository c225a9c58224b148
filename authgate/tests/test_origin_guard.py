from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from flask.testing import FlaskClient

from authgate.app import create_app
from authgate.container import Container
from authgate.shared.middleware.origin_guard import is_allowed_origin
from authgate.tests.fakes import CLIENT_URL, FakeClock, make_config

LOGIN = {"email": "alice@example.com", "password": "Secur3Pass!"}


@pytest.fixture()
def production_client(tmp_path: Path) -> Iterator[FlaskClient]:
    config = make_config(tmp_path / "prod.db", app_env="production", client_url=CLIENT_URL)
    container = Container(config, clock=FakeClock())
    app = create_app(container=container, configure_logging=False)
    yield app.test_client()
    container.database.dispose()


def test_post_without_origin_is_rejected(production_client: FlaskClient) -> None:
    response = production_client.post("/auth/login", json=LOGIN)

    assert response.status_code == 403
    assert response.get_json() == {
        "status": "fail",
        "error": "origin_validation_failed",
        "message": "Origin validation failed",
    }


def test_post_from_foreign_origin_is_rejected(production_client: FlaskClient) -> None:
    response = production_client.post(
        "/auth/login", json=LOGIN, headers={"Origin": "https://evil.example.net"}
    )

    assert response.status_code == 403


def test_post_from_client_origin_reaches_the_view(production_client: FlaskClient) -> None:
    response = production_client.post("/auth/login", json=LOGIN, headers={"Origin": CLIENT_URL})

    assert response.status_code == 401
    assert response.get_json()["error"] == "invalid_credentials"


def test_referer_is_used_when_origin_missing(production_client: FlaskClient) -> None:
    response = production_client.post(
        "/auth/login", json=LOGIN, headers={"Referer": f"{CLIENT_URL}/login?next=/"}
    )

    assert response.status_code == 401


def test_safe_methods_skip_origin_check(production_client: FlaskClient) -> None:
    assert production_client.get("/health").status_code == 200


def test_production_cookie_is_secure_and_cross_site(production_client: FlaskClient) -> None:
    response = production_client.post(
        "/auth/register",
        json={"username": "alice", **LOGIN},
        headers={"Origin": CLIENT_URL},
    )

    assert response.status_code == 201
    cookie = response.headers["Set-Cookie"]
    assert "Secure" in cookie
    assert "SameSite=None" in cookie


def test_development_does_not_check_origin(client: FlaskClient) -> None:
    response = client.post("/auth/login", json=LOGIN)

    assert response.status_code == 401


@pytest.mark.parametrize(
    ("origin", "referer", "allowed"),
    [
        (CLIENT_URL, None, True),
        (f"{CLIENT_URL}/", None, True),
        ("HTTPS://APP.EXAMPLE.COM", None, True),
        ("https://evil.example.net", f"{CLIENT_URL}/page", False),
        (None, f"{CLIENT_URL}/page", True),
        (None, "https://app.example.com.evil.net/page", False),
        (None, "not a url", False),
        (None, None, False),
    ],
)
def test_is_allowed_origin(origin: str | None, referer: str | None, allowed: bool) -> None:
    assert is_allowed_origin(origin, referer, CLIENT_URL) is allowed
