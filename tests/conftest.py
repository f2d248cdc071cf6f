# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from storage import FileStorage, MemoryStorage, Storage
from task_store import TaskStore

from .fakes import StepClock, counting_ids


@pytest.fixture()
def backend() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def storage(backend: MemoryStorage) -> Storage:
    return Storage(backend)


@pytest.fixture()
def clock() -> StepClock:
    return StepClock()


@pytest.fixture()
def store(storage: Storage, clock: StepClock) -> TaskStore:
    """
    Empty store wired to an in-memory slot.

    The clock steps one minute per call and ids count up, so assertions
    on timestamps and ids stay deterministic.
    """
    return TaskStore(storage, clock=clock, id_factory=counting_ids())


@pytest.fixture()
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "storage.json"


@pytest.fixture()
def file_storage(data_file: Path) -> Storage:
    return Storage(FileStorage(data_file))
