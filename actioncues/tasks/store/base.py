from abc import ABC, abstractmethod
from typing import Any

from actioncues.tasks.store.schemas import StoredDocument


class TaskDocumentStore(ABC):
    """A schemaless document collection holding task documents.

    Implementations are bound to a single collection. Ids are assigned by the
    store on insert and never reused. No guarantees hold across calls.
    """

    @abstractmethod
    async def insert(self, fields: dict[str, Any]) -> str:
        pass

    @abstractmethod
    async def fetch_all(self) -> list[StoredDocument]:
        pass

    @abstractmethod
    async def update_fields(self, document_id: str, fields: dict[str, Any]) -> None:
        """Merge `fields` into an existing document, leaving other fields as they are."""
        pass

    @abstractmethod
    async def delete(self, document_id: str) -> None:
        """Remove a document. Deleting an absent document is a no-op."""
        pass

    async def close(self) -> None:
        return
