import json
import logging
import time
from typing import Any
from uuid import uuid4

from actioncues.common.redis import RedisClient
from actioncues.common.exceptions import ResourceNotFoundException, ResourceType
from actioncues.tasks.store.base import TaskDocumentStore
from actioncues.tasks.store.schemas import StoredDocument

logger = logging.getLogger(__name__)


class RedisTaskStore(TaskDocumentStore):
    def __init__(self, *, redis_client: RedisClient, collection: str):
        self.client = redis_client
        self.collection = collection
        self.index_key = f"{self.collection}:ids"

    def _get_document_key(self, document_id: str) -> str:
        return f"{self.collection}:doc:{document_id}"

    @staticmethod
    def _encode_fields(fields: dict[str, Any]) -> dict[str, str]:
        return {name: json.dumps(value) for name, value in fields.items()}

    @staticmethod
    def _decode_fields(raw: dict[str, str]) -> dict[str, Any]:
        return {name: json.loads(value) for name, value in raw.items()}

    async def insert(self, fields: dict[str, Any]) -> str:
        document_id = uuid4().hex

        await self.client.hset(
            self._get_document_key(document_id),
            mapping=self._encode_fields(fields),  # type: ignore
        )
        await self.client.zadd(self.index_key, {document_id: time.time()})

        logger.debug(f"Inserted document {document_id} into {self.collection}")
        return document_id

    async def fetch_all(self) -> list[StoredDocument]:
        document_ids: list[str] = await self.client.zrange(self.index_key, 0, -1)
        documents: list[StoredDocument] = []
        for document_id in document_ids:
            raw = await self.client.hgetall(self._get_document_key(document_id))
            # deleted between the index read and the hash read
            if not raw:
                continue
            documents.append(
                StoredDocument(id=document_id, fields=self._decode_fields(raw))
            )
        return documents

    async def update_fields(self, document_id: str, fields: dict[str, Any]) -> None:
        document_key = self._get_document_key(document_id)

        # A delete landing after the existence check aborts the write with
        # WatchError instead of recreating the hash outside the index.
        async with self.client.pipeline(transaction=True) as pipeline:
            await pipeline.watch(document_key)

            if not await pipeline.exists(document_key):
                raise ResourceNotFoundException(ResourceType.TASK, document_id)

            if not fields:
                return

            pipeline.multi()
            pipeline.hset(
                document_key,
                mapping=self._encode_fields(fields),  # type: ignore
            )
            await pipeline.execute()

    async def delete(self, document_id: str) -> None:
        await self.client.delete(self._get_document_key(document_id))
        await self.client.zrem(self.index_key, document_id)
