import logging
import time
from collections import OrderedDict

from actioncues.tasks.controller import TaskSyncController
from actioncues.tasks.store.base import TaskDocumentStore

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Holds one task controller per client session.

    Controllers share the store but never their in-memory state. Sessions are
    kept in least-recently-used order: ones idle for longer than
    ``idle_timeout`` seconds are dropped, and starting a session beyond
    ``max_sessions`` evicts the least recently used one.
    """

    def __init__(
        self,
        *,
        task_store: TaskDocumentStore,
        max_sessions: int = 1000,
        idle_timeout: float = 3600.0,
    ) -> None:
        self.task_store = task_store
        self.max_sessions = max_sessions
        self.idle_timeout = idle_timeout
        self._controllers: OrderedDict[str, TaskSyncController] = OrderedDict()
        self._last_used: dict[str, float] = {}

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._controllers

    def __len__(self) -> int:
        return len(self._controllers)

    def _expire_idle_sessions(self, now: float) -> None:
        while self._controllers:
            session_id = next(iter(self._controllers))
            if now - self._last_used[session_id] < self.idle_timeout:
                break
            self._drop(session_id)
            logger.info(f"Expired idle session {session_id}")

    def _drop(self, session_id: str) -> None:
        del self._controllers[session_id]
        del self._last_used[session_id]

    async def get_controller(self, session_id: str) -> TaskSyncController:
        now = time.monotonic()
        self._expire_idle_sessions(now)

        controller = self._controllers.get(session_id)
        if controller is not None:
            self._controllers.move_to_end(session_id)
            self._last_used[session_id] = now
            return controller

        while len(self._controllers) >= self.max_sessions:
            evicted_id = next(iter(self._controllers))
            self._drop(evicted_id)
            logger.info(f"Evicted session {evicted_id} (limit {self.max_sessions})")

        controller = TaskSyncController(
            task_store=self.task_store, session_id=session_id
        )
        self._controllers[session_id] = controller
        self._last_used[session_id] = now
        logger.info(f"Started session {session_id}")

        await controller.refresh_tasks()
        return controller

    def end_session(self, session_id: str) -> bool:
        if session_id not in self._controllers:
            return False
        self._drop(session_id)
        logger.info(f"Ended session {session_id}")
        return True
