"""Persistence helpers: storage media and the task (de)serialiser.

The whole collection lives in one string slot (key "todoAppTasks") of a
string-keyed medium. FileStorage keeps those slots in a JSON object file;
MemoryStorage keeps them in a dict. Storage turns tasks into the slot's
JSON array and back, never raising past load_tasks/save_tasks.
"""
import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

from models import Task

logger = logging.getLogger(__name__)

STORAGE_KEY = 'todoAppTasks'
DEFAULT_DATA_FILE = Path(__file__).parent.parent / 'data' / 'storage.json'

TaskRecord = Dict[str, Any]


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Dict-backed medium (tests, throwaway sessions)."""

    def __init__(self, items: Optional[Mapping[str, str]] = None):
        self.items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class FileStorage:
    """JSON object file mapping slot keys to strings."""

    def __init__(self, path: Path = DEFAULT_DATA_FILE):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f'{self.path} does not hold a JSON object')
        return data

    def get_item(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        if value is not None and not isinstance(value, str):
            raise ValueError(f'slot {key!r} in {self.path} is not a string')
        return value

    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._read()
        except (ValueError, RecursionError):
            logger.warning("Replacing unreadable storage file %s", self.path)
            data = {}
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + '.tmp')
        with open(tmp, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=4)
        os.replace(tmp, self.path)


class Storage:
    """Reads and writes the task collection in a single storage slot."""

    def __init__(self, backend: KeyValueStorage, key: str = STORAGE_KEY):
        self.backend = backend
        self.key = key

    def load_tasks(self) -> List[Task]:
        """Load the stored collection.

        Absent slot -> empty list. Anything unreadable or wrongly shaped
        (including a single bad record) -> empty list and a warning.
        """
        try:
            raw = self.backend.get_item(self.key)
        except (OSError, ValueError, RecursionError) as exc:
            logger.warning("Failed to read saved tasks data: %s", exc)
            return []
        if raw is None:
            return []
        try:
            records = json.loads(raw)
            if not isinstance(records, list):
                raise ValueError(f'expected a JSON array, got {type(records).__name__}')
            tasks = [_task_from_record(r) for r in records]
            _check_unique_ids(tasks)
        except (ValueError, TypeError, KeyError, RecursionError) as exc:
            logger.warning("Failed to parse saved tasks data: %s", exc)
            return []
        logger.debug("Loaded %d tasks from slot %s", len(tasks), self.key)
        return tasks

    def save_tasks(self, tasks: Iterable[Task]) -> bool:
        """Overwrite the slot with the full ordered collection.

        Returns False (after logging) when the medium refuses the write.
        """
        payload = json.dumps([_task_to_record(t) for t in tasks])
        try:
            self.backend.set_item(self.key, payload)
        except OSError as exc:
            logger.error("Failed to save tasks to slot %s: %s", self.key, exc)
            return False
        return True


# -------------------- record conversion --------------------
def _task_to_record(task: Task) -> TaskRecord:
    return {
        'id': task.id,
        'title': task.title,
        'description': task.description,
        'isCompleted': task.is_completed,
        'createdAt': task.created_at.isoformat(),
        'completedAt': task.completed_at.isoformat() if task.completed_at else None,
    }


def _task_from_record(raw: Any) -> Task:
    if not isinstance(raw, dict):
        raise ValueError(f'task record must be an object, got {type(raw).__name__}')
    for key in ('id', 'title', 'description'):
        value = raw.get(key)
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f'task record has invalid {key!r}: {value!r}')
    is_completed = raw.get('isCompleted')
    if not isinstance(is_completed, bool):
        raise ValueError(f'task {raw["id"]} has invalid isCompleted: {is_completed!r}')
    created_at = _parse_timestamp(raw.get('createdAt'))
    if created_at is None:
        raise ValueError(f'task {raw["id"]} has no createdAt')
    completed_at = _parse_timestamp(raw.get('completedAt'))
    if is_completed and completed_at is None:
        raise ValueError(f'task {raw["id"]} is completed but has no completedAt')
    return Task(
        id=raw['id'],
        title=raw['title'],
        description=raw['description'],
        is_completed=is_completed,
        created_at=created_at,
        completed_at=completed_at if is_completed else None,
    )


def _parse_timestamp(value: Any) -> Optional[datetime]:
    """ISO-8601 string or epoch milliseconds -> naive local datetime."""
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        raise ValueError(f'invalid timestamp: {value!r}')
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000)
        except (OverflowError, OSError) as exc:
            raise ValueError(f'timestamp out of range: {value!r}') from exc
    if not isinstance(value, str):
        raise ValueError(f'invalid timestamp: {value!r}')
    text = value.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is not None:
        try:
            dt = dt.astimezone().replace(tzinfo=None)
        except (OverflowError, OSError) as exc:
            raise ValueError(f'timestamp out of range: {value!r}') from exc
    return dt


def _check_unique_ids(tasks: List[Task]) -> None:
    seen = set()
    for task in tasks:
        if task.id in seen:
            raise ValueError(f'duplicate task id {task.id}')
        seen.add(task.id)
