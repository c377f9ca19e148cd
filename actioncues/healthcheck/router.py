import asyncio
from typing import Any
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import create_engine, text

from actioncues.config import Settings, get_settings
from actioncues.common.redis import RedisClient, get_redis_client

router = APIRouter()


def check_postgres(postgres_url: str) -> None:
    engine = create_engine(postgres_url)
    try:
        with engine.connect() as connection:
            result = connection.execute(text("SELECT 1")).scalar()
            if result != 1:
                raise Exception("Postgres health check failed")
    finally:
        engine.dispose()


@router.get(
    "/healthcheck",
    tags=["Healthcheck"],
    status_code=status.HTTP_200_OK,
    responses={
        200: {
            "description": "Healthcheck status",
            "content": {
                "application/json": {
                    "example": {
                        "api": {"status": "ok"},
                        "redis": {"status": "ok"},
                    }
                }
            },
        },
        503: {
            "description": "Service unavailable",
            "content": {
                "application/json": {
                    "example": {
                        "api": {"status": "ok"},
                        "postgres": {
                            "status": "error",
                            "message": "Connection error or unexpected result",
                        },
                    }
                }
            },
        },
    },
)
async def healthcheck(
    settings: Settings = Depends(get_settings),
    redis_client: RedisClient = Depends(get_redis_client),
) -> JSONResponse:
    health_status: dict[str, Any] = {"api": {"status": "ok"}}
    has_error = False

    # Check the configured task store backend
    if settings.TASK_STORE_BACKEND == "redis":
        health_status["redis"] = {"status": "ok"}
        try:
            await redis_client.ping()
        except Exception as e:
            health_status["redis"].update({"status": "error", "message": str(e)})
            has_error = True
    else:
        health_status["postgres"] = {"status": "ok"}
        try:
            await asyncio.to_thread(check_postgres, settings.POSTGRES_URL)
        except Exception as e:
            health_status["postgres"].update({"status": "error", "message": str(e)})
            has_error = True

    if has_error:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=health_status
        )

    return JSONResponse(status_code=status.HTTP_200_OK, content=health_status)
