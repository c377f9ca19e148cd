from fastapi import Depends, Header, Request

from actioncues.sessions.registry import SessionRegistry
from actioncues.tasks.controller import TaskSyncController


DEFAULT_SESSION_ID = "default"


def get_session_registry(request: Request) -> SessionRegistry:
    return request.app.state.session_registry


def get_session_id(
    session_id: str = Header(default=DEFAULT_SESSION_ID, alias="x-session-id"),
) -> str:
    return session_id


async def get_task_controller(
    session_id: str = Depends(get_session_id),
    session_registry: SessionRegistry = Depends(get_session_registry),
) -> TaskSyncController:
    return await session_registry.get_controller(session_id)
