import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from actioncues.common.api_key import get_api_key
from actioncues.common.exceptions import (
    RemoteStoreException,
    ResourceNotFoundException,
    TaskValidationException,
    remote_store_handler,
    resource_not_found_handler,
    task_validation_handler,
    unexpected_exception_handler,
    validation_exception_handler,
    service_unavailable_response,
    internal_error_response,
    validation_error_response,
)
from actioncues.common.opentelemetry import setup_opentelemetry
from actioncues.common.redis import create_redis_client
from actioncues.config import get_settings
from actioncues.sessions.registry import SessionRegistry
from actioncues.tasks.router import router as tasks_router
from actioncues.tasks.store.backend import get_task_store_backend
from actioncues.healthcheck.router import router as health_router

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.redis_client = create_redis_client(settings.REDIS_URL)
    task_store = get_task_store_backend(app.state.redis_client, settings)
    app.state.session_registry = SessionRegistry(
        task_store=task_store,
        max_sessions=settings.MAX_SESSIONS,
        idle_timeout=settings.SESSION_IDLE_TIMEOUT,
    )
    logger.info(f"Using {settings.TASK_STORE_BACKEND} task store")
    yield
    await task_store.close()
    await app.state.redis_client.aclose()


app = FastAPI(
    title=settings.API_NAME,
    summary=settings.API_SUMMARY,
    dependencies=[Depends(get_api_key)],
    lifespan=lifespan,
    responses={
        **service_unavailable_response,
        **internal_error_response,
        **validation_error_response,
    },
    version=settings.ACTIONCUES_VERSION,
)

if settings.OTEL_ENABLED:
    setup_opentelemetry(settings.OTEL_SERVICE_NAME, app, settings.TASK_STORE_BACKEND)

if settings.CORS_ENABLED:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.exception_handler(RequestValidationError)(validation_exception_handler)
app.exception_handler(ResourceNotFoundException)(resource_not_found_handler)
app.exception_handler(TaskValidationException)(task_validation_handler)
app.exception_handler(RemoteStoreException)(remote_store_handler)
app.exception_handler(Exception)(unexpected_exception_handler)


app.include_router(health_router)
app.include_router(tasks_router)
