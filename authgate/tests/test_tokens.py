from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from authgate.application.services.tokens import JwtTokenService
from authgate.domain.users.exceptions import TokenExpiredError, TokenInvalidError
from authgate.shared.config import parse_duration
from authgate.tests.fakes import TEST_SECRET, FakeClock

ISSUED_AT = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture()
def fixed_clock() -> FakeClock:
    return FakeClock(ISSUED_AT)


@pytest.fixture()
def service(fixed_clock: FakeClock) -> JwtTokenService:
    return JwtTokenService(secret=TEST_SECRET, ttl=timedelta(days=7), clock=fixed_clock)


def _flip_signature_char(token: str) -> str:
    head, payload, signature = token.split(".")
    # Change a character in the middle so base64 padding bits are unaffected.
    index = len(signature) // 2
    replacement = "A" if signature[index] != "A" else "B"
    return ".".join([head, payload, signature[:index] + replacement + signature[index + 1 :]])


def test_issue_embeds_subject_and_lifetime(service: JwtTokenService) -> None:
    issued = service.issue(42)

    claims = jwt.decode(
        issued.token, TEST_SECRET, algorithms=["HS256"], options={"verify_exp": False}
    )
    assert claims["sub"] == "42"
    assert claims["iat"] == int(ISSUED_AT.timestamp())
    assert claims["exp"] - claims["iat"] == 7 * 24 * 3600
    assert issued.expires_at == ISSUED_AT + timedelta(days=7)
    assert issued.user_id == 42


def test_issue_is_deterministic_for_same_clock(service: JwtTokenService) -> None:
    assert service.issue(7).token == service.issue(7).token


def test_token_accepted_at_six_days(service: JwtTokenService, fixed_clock: FakeClock) -> None:
    issued = service.issue(1)

    fixed_clock.advance(timedelta(days=6))
    claims = service.verify(issued.token)

    assert claims.subject == "1"
    assert claims.expires_at == issued.expires_at


def test_token_rejected_at_eight_days(service: JwtTokenService, fixed_clock: FakeClock) -> None:
    issued = service.issue(1)

    fixed_clock.advance(timedelta(days=8))
    with pytest.raises(TokenExpiredError) as exc_info:
        service.verify(issued.token)

    assert exc_info.value.code == "token_expired"
    assert exc_info.value.status == 401


def test_token_rejected_exactly_at_expiry(service: JwtTokenService, fixed_clock: FakeClock) -> None:
    issued = service.issue(1)

    fixed_clock.advance(timedelta(days=7))
    with pytest.raises(TokenExpiredError):
        service.verify(issued.token)


def test_tampered_signature_is_invalid(service: JwtTokenService) -> None:
    issued = service.issue(1)

    with pytest.raises(TokenInvalidError) as exc_info:
        service.verify(_flip_signature_char(issued.token))

    assert exc_info.value.code == "token_invalid"


def test_token_signed_with_other_secret_is_invalid(fixed_clock: FakeClock) -> None:
    other = JwtTokenService(
        secret="another-secret-0123456789abcdefghijklmnopqr",
        ttl=timedelta(days=7),
        clock=fixed_clock,
    )
    service = JwtTokenService(secret=TEST_SECRET, ttl=timedelta(days=7), clock=fixed_clock)

    with pytest.raises(TokenInvalidError):
        service.verify(other.issue(1).token)


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "loggedout"])
def test_malformed_tokens_are_invalid(service: JwtTokenService, token: str) -> None:
    with pytest.raises(TokenInvalidError):
        service.verify(token)


def test_token_missing_subject_is_invalid(service: JwtTokenService) -> None:
    now = int(ISSUED_AT.timestamp())
    token = jwt.encode({"iat": now, "exp": now + 60}, TEST_SECRET, algorithm="HS256")

    with pytest.raises(TokenInvalidError):
        service.verify(token)


def test_service_rejects_empty_secret() -> None:
    with pytest.raises(ValueError):
        JwtTokenService(secret="", ttl=timedelta(days=1))


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("7d", timedelta(days=7)),
        ("12h", timedelta(hours=12)),
        ("30m", timedelta(minutes=30)),
        ("45s", timedelta(seconds=45)),
        ("2w", timedelta(weeks=2)),
        ("3600", timedelta(hours=1)),
        (90, timedelta(seconds=90)),
    ],
)
def test_parse_duration(value: str | int, expected: timedelta) -> None:
    assert parse_duration(value) == expected


@pytest.mark.parametrize("value", ["", "7x", "d7", "-1d", "0d"])
def test_parse_duration_rejects_bad_values(value: str) -> None:
    with pytest.raises(ValueError):
        parse_duration(value)
