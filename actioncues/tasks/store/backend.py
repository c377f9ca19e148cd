from actioncues.config import Settings
from actioncues.common.redis import RedisClient
from actioncues.tasks.store.base import TaskDocumentStore
from actioncues.tasks.store.postgres.store import PostgresTaskStore
from actioncues.tasks.store.redis.store import RedisTaskStore


def get_task_store_backend(
    redis_client: RedisClient,
    settings: Settings,
) -> TaskDocumentStore:
    if settings.TASK_STORE_BACKEND == "postgres":
        return PostgresTaskStore(
            database_url=settings.POSTGRES_URL,
        )
    elif settings.TASK_STORE_BACKEND == "redis":
        return RedisTaskStore(
            redis_client=redis_client,
            collection=settings.TASK_COLLECTION,
        )
    else:
        raise ValueError(
            f"Unsupported task store backend: {settings.TASK_STORE_BACKEND}"
        )
