from datetime import datetime
from enum import Enum
from pydantic import BaseModel

from actioncues.tasks.store.schemas import StoredDocument


class Task(BaseModel):
    id: str
    title: str
    due_date: str
    is_checked: bool = False
    created_at: datetime | None = None

    @classmethod
    def from_document(cls, document: StoredDocument) -> "Task":
        return cls.model_validate({**document.fields, "id": document.id})


class NewTaskDocument(BaseModel):
    title: str
    due_date: str
    is_checked: bool = False
    created_at: datetime


class FormState(str, Enum):
    IDLE = "idle"
    CREATING = "creating"
    EDITING = "editing"


class TaskForm(BaseModel):
    title: str = ""
    due_date: str = ""

    def is_blank(self) -> bool:
        return not self.title and not self.due_date


class SyncStatus(str, Enum):
    OK = "ok"
    VALIDATION_FAILED = "validation_failed"
    REMOTE_FAILURE = "remote_failure"


class SyncResult(BaseModel):
    status: SyncStatus
    message: str | None = None
    task_id: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == SyncStatus.OK


class FailedDelete(BaseModel):
    task_id: str
    error: str


class BulkDeleteResult(BaseModel):
    status: SyncStatus
    deleted_ids: list[str] = []
    failed: list[FailedDelete] = []
    message: str | None = None

    @property
    def failed_ids(self) -> list[str]:
        return [failure.task_id for failure in self.failed]


class ControllerSnapshot(BaseModel):
    tasks: list[Task]
    is_loading: bool
    form: TaskForm
    form_state: FormState
    is_editing: bool
    editing_task_id: str | None


# Request bodies
class CreateTaskRequest(BaseModel):
    title: str
    due_date: str


class UpdateTaskRequest(BaseModel):
    title: str
    due_date: str


class ToggleTaskRequest(BaseModel):
    current_status: bool


class FormInput(BaseModel):
    title: str | None = None
    due_date: str | None = None


class BulkDeleteResponse(BaseModel):
    result: BulkDeleteResult
    snapshot: ControllerSnapshot
