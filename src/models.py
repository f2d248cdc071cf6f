"""Data models for the terminal todo application.

Exposes the Task dataclass plus the helpers that keep its invariants:
id generation and title/description validation. Timestamps are naive
local datetimes; completed_at is set exactly when is_completed is True.
"""
from __future__ import annotations
import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

ID_PREFIX = "_"
ID_LENGTH = 9
ID_ALPHABET = string.digits + string.ascii_lowercase


class TaskValidationError(ValueError):
    """Raised when a title or description is empty after trimming."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"{field_name.capitalize()} cannot be empty.")


def generate_id() -> str:
    """Return an opaque id: '_' followed by 9 random base-36 characters."""
    return ID_PREFIX + ''.join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))


def validate_fields(title: str, description: str) -> Tuple[str, str]:
    """Trim both values; raise TaskValidationError naming the first empty one."""
    title = (title or '').strip()
    description = (description or '').strip()
    if not title:
        raise TaskValidationError('title')
    if not description:
        raise TaskValidationError('description')
    return title, description


@dataclass
class Task:
    """A single todo item.

    Fields:
        id: Opaque unique string, never reused.
        title: Short single-line title (trimmed, non-empty).
        description: Free text (trimmed, non-empty).
        is_completed: Completion flag.
        created_at: When the task was added.
        completed_at: When it was last completed (None while pending).
    """
    id: str
    title: str
    description: str
    is_completed: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id}, title={self.title}, completed={self.is_completed})"
