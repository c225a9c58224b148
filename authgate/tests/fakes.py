from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta
from pathlib import Path

from authgate.domain.users.entities import NewUser, User
from authgate.domain.users.repositories import PasswordHasher, UserRepository
from authgate.shared.config import AppConfig, DatabaseConfig, SecurityConfig

TEST_SECRET = "test-signing-secret-0123456789abcdefghijklmnop"
CLIENT_URL = "https://app.example.com"


class FakeClock:
    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime.now(UTC).replace(microsecond=0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._seq = 1
        self.lookups: list[int] = []

    def find_by_id(self, user_id: int) -> User | None:
        self.lookups.append(user_id)
        user = self._users.get(user_id)
        return user.without_password() if user else None

    def find_by_email(self, email: str, *, include_password: bool = False) -> User | None:
        for user in self._users.values():
            if user.email == email:
                return user if include_password else user.without_password()
        return None

    def find_by_username(self, username: str) -> User | None:
        for user in self._users.values():
            if user.username == username:
                return user.without_password()
        return None

    def add(self, user: NewUser) -> User:
        now = datetime.now(UTC)
        stored = User(
            id=self._seq,
            username=user.username,
            email=user.email,
            is_active=True,
            created_at=now,
            updated_at=now,
            password_hash=user.password_hash,
        )
        self._seq += 1
        self._users[stored.id] = stored
        return stored.without_password()

    def set_active(self, user_id: int, active: bool) -> User:
        self._users[user_id] = replace(self._users[user_id], is_active=active)
        return self._users[user_id].without_password()

    def set_password(self, user_id: int, password: str) -> bool:
        raise NotImplementedError


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


def make_config(
    db_path: Path | None = None,
    *,
    app_env: str = "development",
    client_url: str | None = None,
) -> AppConfig:
    url = f"sqlite:///{db_path}" if db_path else "sqlite://"
    return AppConfig(
        APP_ENV=app_env,
        database=DatabaseConfig(DATABASE_URL=url),
        security=SecurityConfig(
            JWT_SECRET=TEST_SECRET,
            JWT_EXPIRES_IN="7d",
            JWT_COOKIE_EXPIRES_IN=7,
            BCRYPT_ROUNDS=4,
            CLIENT_URL=client_url,
        ),
    )

