from pathlib import Path
from typing import Any
import pytest

from actioncues.common.exceptions import ResourceNotFoundException, ResourceType
from actioncues.tasks.store.postgres.store import PostgresTaskStore


@pytest.fixture
def test_database_url(tmp_path: Path) -> str:
    db_path: Path = tmp_path / "test_postgres_tasks.db"
    return f"sqlite:///{db_path}"


@pytest.fixture
def task_store(test_database_url: str) -> PostgresTaskStore:
    return PostgresTaskStore(database_url=test_database_url)


@pytest.fixture
def sample_fields() -> dict[str, Any]:
    return {
        "title": "Buy milk",
        "due_date": "2024-05-01",
        "is_checked": False,
        "created_at": "2024-05-01T09:30:00Z",
    }


async def test_fetch_all_empty(task_store: PostgresTaskStore) -> None:
    assert await task_store.fetch_all() == []


async def test_insert_and_fetch_all(
    task_store: PostgresTaskStore, sample_fields: dict[str, Any]
) -> None:
    first_id = await task_store.insert(sample_fields)
    second_id = await task_store.insert({**sample_fields, "title": "Pay rent"})

    documents = await task_store.fetch_all()

    assert first_id != second_id
    assert [document.id for document in documents] == [first_id, second_id]
    assert documents[0].fields == sample_fields
    assert documents[1].fields["title"] == "Pay rent"


async def test_update_fields_leaves_other_fields(
    task_store: PostgresTaskStore, sample_fields: dict[str, Any]
) -> None:
    document_id = await task_store.insert(sample_fields)

    await task_store.update_fields(document_id, {"is_checked": True})

    (document,) = await task_store.fetch_all()
    assert document.fields == {**sample_fields, "is_checked": True}


async def test_update_fields_missing_document(task_store: PostgresTaskStore) -> None:
    with pytest.raises(ResourceNotFoundException) as exc_info:
        await task_store.update_fields("nonexistent", {"title": "Buy bread"})

    assert exc_info.value.resource_type == ResourceType.TASK
    assert exc_info.value.identifier == "nonexistent"


async def test_delete(
    task_store: PostgresTaskStore, sample_fields: dict[str, Any]
) -> None:
    document_id = await task_store.insert(sample_fields)

    await task_store.delete(document_id)

    assert await task_store.fetch_all() == []


async def test_delete_missing_document_is_noop(
    task_store: PostgresTaskStore, sample_fields: dict[str, Any]
) -> None:
    await task_store.insert(sample_fields)

    await task_store.delete("nonexistent")

    assert len(await task_store.fetch_all()) == 1


async def test_data_persists_across_store_instances(
    test_database_url: str, sample_fields: dict[str, Any]
) -> None:
    document_id = await PostgresTaskStore(database_url=test_database_url).insert(
        sample_fields
    )

    documents = await PostgresTaskStore(database_url=test_database_url).fetch_all()

    assert [document.id for document in documents] == [document_id]
