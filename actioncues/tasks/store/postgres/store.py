import asyncio
import logging
from typing import Any
from uuid import uuid4
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from actioncues.common.current_datetime import get_current_datetime
from actioncues.common.exceptions import ResourceNotFoundException, ResourceType
from actioncues.tasks.store.base import TaskDocumentStore
from actioncues.tasks.store.postgres.model import Base, TaskDocumentModel
from actioncues.tasks.store.schemas import StoredDocument

logger = logging.getLogger(__name__)


class PostgresTaskStore(TaskDocumentStore):
    """SQLAlchemy-backed task collection.

    The ORM session API is blocking, so each operation runs in a worker thread
    to keep the event loop free.
    """

    def __init__(self, database_url: str):
        self.engine = create_engine(database_url)
        self.Session = sessionmaker(bind=self.engine)
        Base.metadata.create_all(self.engine)

    def _insert(self, fields: dict[str, Any]) -> str:
        document_id = uuid4().hex
        with self.Session() as session:
            session.add(
                TaskDocumentModel(
                    id=document_id,
                    fields=dict(fields),
                    inserted_at=get_current_datetime(),
                )
            )
            session.commit()
        logger.debug(f"Inserted document {document_id}")
        return document_id

    def _fetch_all(self) -> list[StoredDocument]:
        with self.Session() as session:
            documents = (
                session.query(TaskDocumentModel)
                .order_by(TaskDocumentModel.inserted_at)
                .all()
            )
            return [
                StoredDocument(id=document.id, fields=dict(document.fields))
                for document in documents
            ]

    def _update_fields(self, document_id: str, fields: dict[str, Any]) -> None:
        with self.Session() as session:
            document = session.get(TaskDocumentModel, document_id)

            if not document:
                raise ResourceNotFoundException(ResourceType.TASK, document_id)

            # JSON columns only track reassignment, not in-place mutation
            document.fields = {**document.fields, **fields}
            session.commit()

    def _delete(self, document_id: str) -> None:
        with self.Session() as session:
            session.query(TaskDocumentModel).filter_by(id=document_id).delete()
            session.commit()

    async def insert(self, fields: dict[str, Any]) -> str:
        return await asyncio.to_thread(self._insert, fields)

    async def fetch_all(self) -> list[StoredDocument]:
        return await asyncio.to_thread(self._fetch_all)

    async def update_fields(self, document_id: str, fields: dict[str, Any]) -> None:
        await asyncio.to_thread(self._update_fields, document_id, fields)

    async def delete(self, document_id: str) -> None:
        await asyncio.to_thread(self._delete, document_id)

    async def close(self) -> None:
        self.engine.dispose()
