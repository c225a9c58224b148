from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

from authgate.app import create_app
from authgate.container import Container
from authgate.shared.config import AppConfig
from authgate.tests.fakes import FakeClock, make_config


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def config(tmp_path: Path) -> AppConfig:
    return make_config(tmp_path / "authgate-test.db")


@pytest.fixture()
def container(config: AppConfig, clock: FakeClock) -> Iterator[Container]:
    built = Container(config, clock=clock)
    yield built
    built.database.dispose()


@pytest.fixture()
def app(container: Container) -> Flask:
    return create_app(container=container, configure_logging=False)


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()
