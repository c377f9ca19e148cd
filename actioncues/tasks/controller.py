import asyncio
import logging
from pydantic import ValidationError

from actioncues.common.current_datetime import get_current_datetime
from actioncues.tasks.schemas import (
    BulkDeleteResult,
    ControllerSnapshot,
    FailedDelete,
    FormState,
    NewTaskDocument,
    SyncResult,
    SyncStatus,
    Task,
    TaskForm,
)
from actioncues.tasks.store.base import TaskDocumentStore
from actioncues.tasks.store.schemas import StoredDocument

logger = logging.getLogger(__name__)

TITLE_REQUIRED_MESSAGE = "Please enter a valid task title."
DUE_DATE_REQUIRED_MESSAGE = "Please set a due date for the task."
NOT_EDITING_MESSAGE = "There is no task being edited."

SAVE_FAILED_MESSAGE = "Could not save the task. Please try again."
UPDATE_FAILED_MESSAGE = "Could not update the task. Please try again."
DELETE_FAILED_MESSAGE = "Could not delete the task. Please try again."
FETCH_FAILED_MESSAGE = "Could not load tasks. Please try again."
DELETE_ALL_FAILED_MESSAGE = "Could not delete tasks. Please try again."


class TaskSyncController:
    """Keeps one session's task list in step with the remote collection.

    Every write is followed by a full fetch of the collection and the fetched
    snapshot replaces the local list wholesale. Fetches are numbered when they
    are issued, and a fetch that completes after a newer one has already been
    applied is dropped.

    Remote failures never escape: each operation logs them and reports them in
    its result.
    """

    def __init__(self, *, task_store: TaskDocumentStore, session_id: str = "default"):
        self.task_store = task_store
        self.session_id = session_id

        self.tasks: list[Task] = []
        self.form = TaskForm()
        self.form_state = FormState.IDLE
        self.editing_task_id: str | None = None

        self._fetches_in_flight = 0
        self._issued_version = 0
        self._applied_version = 0

    @property
    def is_loading(self) -> bool:
        return self._fetches_in_flight > 0

    @property
    def is_editing(self) -> bool:
        return self.form_state == FormState.EDITING

    def snapshot(self) -> ControllerSnapshot:
        return ControllerSnapshot(
            tasks=list(self.tasks),
            is_loading=self.is_loading,
            form=self.form.model_copy(),
            form_state=self.form_state,
            is_editing=self.is_editing,
            editing_task_id=self.editing_task_id,
        )

    def get_task(self, task_id: str) -> Task | None:
        return next((task for task in self.tasks if task.id == task_id), None)

    # ---- form ----

    def set_form(self, title: str | None = None, due_date: str | None = None) -> None:
        if title is not None:
            self.form.title = title
        if due_date is not None:
            self.form.due_date = due_date

        if self.is_editing:
            return

        self.form_state = FormState.IDLE if self.form.is_blank() else FormState.CREATING

    def begin_edit(self, task: Task) -> None:
        self.form_state = FormState.EDITING
        self.editing_task_id = task.id
        self.form = TaskForm(title=task.title, due_date=task.due_date)
        logger.debug(f"Session {self.session_id} editing task {task.id}")

    def cancel_edit(self) -> None:
        if not self.is_editing:
            return
        logger.debug(
            f"Session {self.session_id} cancelled edit of task {self.editing_task_id}"
        )
        self._reset_form()

    def _reset_form(self) -> None:
        self.form = TaskForm()
        self.form_state = FormState.IDLE
        self.editing_task_id = None

    async def submit(self) -> SyncResult:
        if self.is_editing:
            return await self.edit_task()
        return await self.create_task()

    # ---- snapshots ----

    def _next_version(self) -> int:
        self._issued_version += 1
        return self._issued_version

    def _apply_snapshot(self, version: int, tasks: list[Task]) -> bool:
        if version <= self._applied_version:
            logger.debug(
                f"Discarding stale snapshot {version} "
                f"(already applied {self._applied_version})"
            )
            return False

        self._applied_version = version
        self.tasks = tasks
        return True

    async def _fetch_tasks(self) -> list[Task]:
        return self._map_documents(await self.task_store.fetch_all())

    def _map_documents(self, documents: list[StoredDocument]) -> list[Task]:
        tasks: list[Task] = []
        for document in documents:
            try:
                tasks.append(Task.from_document(document))
            except ValidationError:
                logger.warning(f"Skipping malformed task document {document.id}")
        return tasks

    async def refresh_tasks(self) -> SyncResult:
        version = self._next_version()
        self._fetches_in_flight += 1
        try:
            tasks = await self._fetch_tasks()
        except Exception:
            logger.exception("Error fetching tasks")
            return SyncResult(
                status=SyncStatus.REMOTE_FAILURE, message=FETCH_FAILED_MESSAGE
            )
        finally:
            self._fetches_in_flight -= 1

        self._apply_snapshot(version, tasks)
        return SyncResult(status=SyncStatus.OK)

    # ---- mutations ----

    async def create_task(
        self, title: str | None = None, due_date: str | None = None
    ) -> SyncResult:
        title = self.form.title if title is None else title
        due_date = self.form.due_date if due_date is None else due_date

        if not title.strip():
            logger.info("Task title is empty. Cannot add task.")
            return SyncResult(
                status=SyncStatus.VALIDATION_FAILED, message=TITLE_REQUIRED_MESSAGE
            )

        if not due_date.strip():
            logger.info("Task due date is empty. Cannot add task.")
            return SyncResult(
                status=SyncStatus.VALIDATION_FAILED, message=DUE_DATE_REQUIRED_MESSAGE
            )

        document = NewTaskDocument(
            title=title,
            due_date=due_date,
            is_checked=False,
            created_at=get_current_datetime(),
        )

        try:
            task_id = await self.task_store.insert(document.model_dump(mode="json"))
        except Exception:
            logger.exception(f"Error adding task {title!r}")
            return SyncResult(
                status=SyncStatus.REMOTE_FAILURE, message=SAVE_FAILED_MESSAGE
            )

        logger.info(f"Task written with ID: {task_id}")

        if not self.is_editing:
            self._reset_form()

        await self.refresh_tasks()
        return SyncResult(status=SyncStatus.OK, task_id=task_id)

    async def edit_task(
        self,
        task_id: str | None = None,
        new_title: str | None = None,
        new_due_date: str | None = None,
    ) -> SyncResult:
        task_id = self.editing_task_id if task_id is None else task_id
        new_title = self.form.title if new_title is None else new_title
        new_due_date = self.form.due_date if new_due_date is None else new_due_date

        if task_id is None:
            return SyncResult(
                status=SyncStatus.VALIDATION_FAILED, message=NOT_EDITING_MESSAGE
            )

        # Only the title is checked here; the due date is taken as given.
        if not new_title.strip():
            return SyncResult(
                status=SyncStatus.VALIDATION_FAILED,
                message=TITLE_REQUIRED_MESSAGE,
                task_id=task_id,
            )

        try:
            await self.task_store.update_fields(
                task_id, {"title": new_title, "due_date": new_due_date}
            )
        except Exception:
            logger.exception(f"Error editing task {task_id}")
            return SyncResult(
                status=SyncStatus.REMOTE_FAILURE,
                message=UPDATE_FAILED_MESSAGE,
                task_id=task_id,
            )

        await self.refresh_tasks()
        self._reset_form()
        return SyncResult(status=SyncStatus.OK, task_id=task_id)

    async def toggle_check(self, task_id: str, current_status: bool) -> SyncResult:
        try:
            await self.task_store.update_fields(
                task_id, {"is_checked": not current_status}
            )
        except Exception:
            logger.exception(f"Error toggling check status of task {task_id}")
            return SyncResult(
                status=SyncStatus.REMOTE_FAILURE,
                message=UPDATE_FAILED_MESSAGE,
                task_id=task_id,
            )

        await self.refresh_tasks()
        return SyncResult(status=SyncStatus.OK, task_id=task_id)

    async def delete_task(self, task_id: str) -> SyncResult:
        try:
            await self.task_store.delete(task_id)
        except Exception:
            logger.exception(f"Error deleting task {task_id}")
            return SyncResult(
                status=SyncStatus.REMOTE_FAILURE,
                message=DELETE_FAILED_MESSAGE,
                task_id=task_id,
            )

        await self.refresh_tasks()
        return SyncResult(status=SyncStatus.OK, task_id=task_id)

    async def delete_all_tasks(self) -> BulkDeleteResult:
        """Delete every document in the collection, one concurrent delete each.

        The fan-out covers every stored document, including ones that do not
        map to a task. The local list is not re-fetched afterwards. It is set to
        the tasks whose delete failed, which is empty when every delete
        succeeds. Deletes that went through are not rolled back when others
        fail.
        """
        self._fetches_in_flight += 1
        try:
            documents = await self.task_store.fetch_all()
            outcomes = await asyncio.gather(
                *[self.task_store.delete(document.id) for document in documents],
                return_exceptions=True,
            )
        except Exception:
            logger.exception("Error deleting all tasks")
            return BulkDeleteResult(
                status=SyncStatus.REMOTE_FAILURE, message=DELETE_ALL_FAILED_MESSAGE
            )
        finally:
            self._fetches_in_flight -= 1

        deleted_ids: list[str] = []
        failed: list[FailedDelete] = []
        remaining: list[StoredDocument] = []
        for document, outcome in zip(documents, outcomes):
            if isinstance(outcome, BaseException):
                failed.append(
                    FailedDelete(
                        task_id=document.id,
                        error=str(outcome) or type(outcome).__name__,
                    )
                )
                remaining.append(document)
            else:
                deleted_ids.append(document.id)

        self._apply_snapshot(self._next_version(), self._map_documents(remaining))

        if failed:
            logger.error(
                f"Failed to delete {len(failed)} of {len(documents)} tasks: "
                f"{', '.join(sorted(failure.task_id for failure in failed))}"
            )
            return BulkDeleteResult(
                status=SyncStatus.REMOTE_FAILURE,
                deleted_ids=deleted_ids,
                failed=failed,
                message=f"Could not delete {len(failed)} task(s). Please try again.",
            )

        logger.info("All tasks deleted successfully!")
        return BulkDeleteResult(status=SyncStatus.OK, deleted_ids=deleted_ids)
