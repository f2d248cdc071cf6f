"""Task store: owns the ordered task collection and keeps it persisted.

Every mutation writes the full collection through Storage before
returning. Unknown ids are ignored (None/False), never raised.
"""
import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple

from models import Task, generate_id, validate_fields
from storage import Storage

logger = logging.getLogger(__name__)


class TaskStore:
    def __init__(self, storage: Storage, tasks: Optional[Iterable[Task]] = None,
                 clock: Callable[[], datetime] = datetime.now,
                 id_factory: Callable[[], str] = generate_id):
        self.storage = storage
        self._tasks: List[Task] = list(tasks or [])
        self._clock = clock
        self._id_factory = id_factory

    @classmethod
    def load(cls, storage: Storage, **kwargs) -> 'TaskStore':
        store = cls(storage, storage.load_tasks(), **kwargs)
        logger.info("Task store ready: %s", store)
        return store

    # -------------------- queries --------------------
    def all_tasks(self) -> List[Task]:
        return list(self._tasks)

    def get(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def list(self) -> Tuple[List[Task], List[Task]]:
        """Split into (pending, completed), keeping insertion order in each."""
        pending = [t for t in self._tasks if not t.is_completed]
        completed = [t for t in self._tasks if t.is_completed]
        return pending, completed

    # -------------------- task operations --------------------
    def add(self, title: str, description: str) -> Task:
        """Append a new pending task. Raises TaskValidationError on empty input."""
        title, description = validate_fields(title, description)
        task = Task(id=self._id_factory(), title=title, description=description,
                    created_at=self._clock())
        self._tasks.append(task)
        logger.debug("Added task %s", task.id)
        self._persist()
        return task

    def toggle_completion(self, task_id: str) -> Optional[Task]:
        task = self.get(task_id)
        if task is None:
            return None
        task.is_completed = not task.is_completed
        task.completed_at = self._clock() if task.is_completed else None
        logger.debug("Task %s completed=%s", task_id, task.is_completed)
        self._persist()
        return task

    def edit(self, task_id: str, title: str, description: str) -> Optional[Task]:
        """Replace title/description in place.

        Unknown id is a no-op (None) even for empty values; otherwise empty
        values raise TaskValidationError and leave the task untouched.
        """
        task = self.get(task_id)
        if task is None:
            return None
        task.title, task.description = validate_fields(title, description)
        logger.debug("Edited task %s", task_id)
        self._persist()
        return task

    def delete(self, task_id: str) -> bool:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        removed = len(self._tasks) != before
        if removed:
            logger.debug("Deleted task %s", task_id)
        self._persist()
        return removed

    def _persist(self) -> None:
        self.storage.save_tasks(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __str__(self) -> str:
        pending, completed = self.list()
        return f'Pending: {len(pending)} tasks, Completed: {len(completed)} tasks'
