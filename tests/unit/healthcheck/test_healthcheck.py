from pathlib import Path
from typing import Generator
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pytest_mock import MockerFixture
from redis.exceptions import ConnectionError
from unittest.mock import AsyncMock

from actioncues.common.redis import get_redis_client
from actioncues.config import Settings, get_settings
from actioncues.main import app as main_app


@pytest.fixture
def mock_redis_client(mocker: MockerFixture) -> AsyncMock:
    return mocker.AsyncMock()


@pytest.fixture
def app(mock_redis_client: AsyncMock) -> Generator[FastAPI, None, None]:
    main_app.dependency_overrides[get_redis_client] = lambda: mock_redis_client
    yield main_app
    main_app.dependency_overrides.clear()


def use_settings(app: FastAPI, settings: Settings) -> None:
    app.dependency_overrides[get_settings] = lambda: settings


def test_healthcheck_postgres_ok(app: FastAPI, tmp_path: Path) -> None:
    use_settings(
        app,
        Settings(
            ACTIONCUES_API_KEY=None,
            TASK_STORE_BACKEND="postgres",
            POSTGRES_URL=f"sqlite:///{tmp_path / 'health.db'}",
        ),
    )

    response = TestClient(app).get("/healthcheck")

    assert response.status_code == 200
    assert response.json() == {"api": {"status": "ok"}, "postgres": {"status": "ok"}}


def test_healthcheck_postgres_unreachable(app: FastAPI, tmp_path: Path) -> None:
    use_settings(
        app,
        Settings(
            ACTIONCUES_API_KEY=None,
            TASK_STORE_BACKEND="postgres",
            POSTGRES_URL=f"sqlite:///{tmp_path / 'missing' / 'health.db'}",
        ),
    )

    response = TestClient(app).get("/healthcheck")

    assert response.status_code == 503
    assert response.json()["postgres"]["status"] == "error"


def test_healthcheck_redis_ok(app: FastAPI, mock_redis_client: AsyncMock) -> None:
    use_settings(app, Settings(ACTIONCUES_API_KEY=None, TASK_STORE_BACKEND="redis"))

    response = TestClient(app).get("/healthcheck")

    assert response.status_code == 200
    assert response.json() == {"api": {"status": "ok"}, "redis": {"status": "ok"}}
    mock_redis_client.ping.assert_awaited_once()


def test_healthcheck_redis_down(app: FastAPI, mock_redis_client: AsyncMock) -> None:
    use_settings(app, Settings(ACTIONCUES_API_KEY=None, TASK_STORE_BACKEND="redis"))
    mock_redis_client.ping.side_effect = ConnectionError("Connection refused")

    response = TestClient(app).get("/healthcheck")

    assert response.status_code == 503
    assert response.json()["redis"] == {
        "status": "error",
        "message": "Connection refused",
    }
