# tests/fakes.py

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Iterator, Optional

from storage import MemoryStorage


class StepClock:
    """Deterministic clock: each call advances by one minute."""

    def __init__(self, start: datetime = datetime(2024, 5, 1, 9, 30)) -> None:
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(minutes=1)
        return now


def counting_ids() -> Callable[[], str]:
    counter: Iterator[int] = iter(range(1, 10_000))
    return lambda: f"_task{next(counter):05d}"


class FailingStorage(MemoryStorage):
    """Medium whose writes fail, e.g. a full disk."""

    def __init__(self, error: Optional[OSError] = None) -> None:
        super().__init__()
        self.error = error or OSError(28, "No space left on device")
        self.attempts = 0

    def set_item(self, key: str, value: str) -> None:
        self.attempts += 1
        raise self.error


class BrokenReadStorage(MemoryStorage):
    """Medium that cannot be read at all."""

    def get_item(self, key: str) -> Optional[str]:
        raise OSError(13, "Permission denied")
