from fastapi import APIRouter, Depends, status

from actioncues.common.exceptions import (
    RemoteStoreException,
    ResourceNotFoundException,
    ResourceType,
    TaskValidationException,
    remote_store_response,
    resource_not_found_response,
    task_validation_response,
)
from actioncues.sessions.registry import SessionRegistry
from actioncues.tasks.controller import TaskSyncController
from actioncues.tasks.dependencies import (
    get_session_id,
    get_session_registry,
    get_task_controller,
)
from actioncues.tasks.schemas import (
    BulkDeleteResponse,
    ControllerSnapshot,
    CreateTaskRequest,
    FormInput,
    SyncResult,
    SyncStatus,
    ToggleTaskRequest,
    UpdateTaskRequest,
)


router = APIRouter(
    prefix="/tasks",
    tags=["Tasks"],
)


def raise_for_result(result: SyncResult) -> None:
    if result.status == SyncStatus.VALIDATION_FAILED:
        raise TaskValidationException(result.message or "Invalid task")
    if result.status == SyncStatus.REMOTE_FAILURE:
        raise RemoteStoreException(result.message or "Task store unavailable")


@router.get("")
async def get_tasks(
    controller: TaskSyncController = Depends(get_task_controller),
) -> ControllerSnapshot:
    return controller.snapshot()


@router.post("/refresh", responses={**remote_store_response})
async def refresh_tasks(
    controller: TaskSyncController = Depends(get_task_controller),
) -> ControllerSnapshot:
    raise_for_result(await controller.refresh_tasks())
    return controller.snapshot()


@router.put("/form")
async def update_form(
    form_input: FormInput,
    controller: TaskSyncController = Depends(get_task_controller),
) -> ControllerSnapshot:
    controller.set_form(title=form_input.title, due_date=form_input.due_date)
    return controller.snapshot()


@router.post(
    "/submit", responses={**task_validation_response, **remote_store_response}
)
async def submit_form(
    controller: TaskSyncController = Depends(get_task_controller),
) -> ControllerSnapshot:
    raise_for_result(await controller.submit())
    return controller.snapshot()


@router.post("/edit/cancel")
async def cancel_edit(
    controller: TaskSyncController = Depends(get_task_controller),
) -> ControllerSnapshot:
    controller.cancel_edit()
    return controller.snapshot()


@router.delete("/session", status_code=status.HTTP_204_NO_CONTENT)
async def end_session(
    session_id: str = Depends(get_session_id),
    session_registry: SessionRegistry = Depends(get_session_registry),
):
    session_registry.end_session(session_id)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={**task_validation_response, **remote_store_response},
)
async def create_task(
    task_input: CreateTaskRequest,
    controller: TaskSyncController = Depends(get_task_controller),
) -> ControllerSnapshot:
    raise_for_result(
        await controller.create_task(
            title=task_input.title, due_date=task_input.due_date
        )
    )
    return controller.snapshot()


@router.delete("", responses={**remote_store_response})
async def delete_all_tasks(
    controller: TaskSyncController = Depends(get_task_controller),
) -> BulkDeleteResponse:
    # A partial failure still returns the per-task outcomes.
    result = await controller.delete_all_tasks()
    if result.status == SyncStatus.REMOTE_FAILURE and not result.failed:
        raise RemoteStoreException(result.message or "Task store unavailable")
    return BulkDeleteResponse(result=result, snapshot=controller.snapshot())


@router.put(
    "/{task_id}", responses={**task_validation_response, **remote_store_response}
)
async def edit_task(
    task_id: str,
    task_input: UpdateTaskRequest,
    controller: TaskSyncController = Depends(get_task_controller),
) -> ControllerSnapshot:
    raise_for_result(
        await controller.edit_task(
            task_id=task_id,
            new_title=task_input.title,
            new_due_date=task_input.due_date,
        )
    )
    return controller.snapshot()


@router.post("/{task_id}/toggle", responses={**remote_store_response})
async def toggle_task(
    task_id: str,
    toggle_input: ToggleTaskRequest,
    controller: TaskSyncController = Depends(get_task_controller),
) -> ControllerSnapshot:
    raise_for_result(
        await controller.toggle_check(task_id, toggle_input.current_status)
    )
    return controller.snapshot()


@router.post(
    "/{task_id}/edit", responses={**resource_not_found_response(ResourceType.TASK)}
)
async def begin_edit(
    task_id: str,
    controller: TaskSyncController = Depends(get_task_controller),
) -> ControllerSnapshot:
    task = controller.get_task(task_id)
    if task is None:
        raise ResourceNotFoundException(ResourceType.TASK, task_id)
    controller.begin_edit(task)
    return controller.snapshot()


@router.delete("/{task_id}", responses={**remote_store_response})
async def delete_task(
    task_id: str,
    controller: TaskSyncController = Depends(get_task_controller),
) -> ControllerSnapshot:
    raise_for_result(await controller.delete_task(task_id))
    return controller.snapshot()
