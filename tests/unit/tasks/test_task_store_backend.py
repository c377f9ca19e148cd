from pathlib import Path
import pytest
from pytest_mock import MockerFixture

from actioncues.config import Settings
from actioncues.tasks.store.backend import get_task_store_backend
from actioncues.tasks.store.postgres.store import PostgresTaskStore
from actioncues.tasks.store.redis.store import RedisTaskStore


def test_redis_backend(mocker: MockerFixture) -> None:
    redis_client = mocker.AsyncMock()
    settings = Settings(TASK_STORE_BACKEND="redis", TASK_COLLECTION="todo")

    store = get_task_store_backend(redis_client, settings)

    assert isinstance(store, RedisTaskStore)
    assert store.client is redis_client
    assert store.collection == "todo"


def test_postgres_backend(mocker: MockerFixture, tmp_path: Path) -> None:
    settings = Settings(
        TASK_STORE_BACKEND="postgres",
        POSTGRES_URL=f"sqlite:///{tmp_path / 'tasks.db'}",
    )

    store = get_task_store_backend(mocker.AsyncMock(), settings)

    assert isinstance(store, PostgresTaskStore)


def test_unsupported_backend(mocker: MockerFixture) -> None:
    settings = Settings.model_construct(TASK_STORE_BACKEND="mongo")

    with pytest.raises(ValueError, match="Unsupported task store backend: mongo"):
        get_task_store_backend(mocker.AsyncMock(), settings)
