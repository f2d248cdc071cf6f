"""Presenter: renders the store's two partitions side by side.

Columns are "pending" and "completed". Each task is shown as a unit of
lines (number + title, description, added/completed timestamps). Numbers
run through pending first, then completed, and are what commands accept.
"""
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence, Tuple
import re, shutil

from models import Task
from task_store import TaskStore
from theme import color, HEADER_COLOR, STATUS_COLOR, ID_COLOR, EMPTY_COLOR, META_COLOR, BOLD

COLUMNS: Tuple[str, ...] = ("pending", "completed")
HEADER_TITLES: Dict[str, str] = {"pending": "PENDING", "completed": "COMPLETED"}
PLACEHOLDERS: Dict[str, str] = {"pending": "No pending tasks", "completed": "No completed tasks"}
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"
MIN_COL_WIDTH = 24
SEP = " | "
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

NumberedTask = Tuple[int, Task]


def format_timestamp(value: Optional[datetime]) -> str:
    """YYYY-MM-DD HH:MM (24h); empty string when there is no timestamp."""
    if not isinstance(value, datetime):
        return ''
    return value.strftime(TIMESTAMP_FORMAT)


def wrap_words(text: str, limit: int) -> List[str]:
    """Greedy word wrap; words longer than the limit get their own line."""
    limit = max(1, limit)
    lines: List[str] = []
    current = ''
    for w in text.split():
        candidate = w if not current else current + ' ' + w
        if len(candidate) <= limit:
            current = candidate
        else:
            if current:
                lines.append(current)
            current = w
    if current:
        lines.append(current)
    return lines


class Presenter:
    def __init__(self, store: TaskStore):
        self.store = store

    # -------------------- numbering --------------------
    def numbered(self) -> Dict[str, List[NumberedTask]]:
        pending, completed = self.store.list()
        return {
            'pending': list(enumerate(pending, start=1)),
            'completed': list(enumerate(completed, start=len(pending) + 1)),
        }

    def task_for_number(self, number: int) -> Optional[Task]:
        for entries in self.numbered().values():
            for n, task in entries:
                if n == number:
                    return task
        return None

    # -------------------- display --------------------
    def display(self, term_width: Optional[int] = None) -> None:
        for line in self.render(term_width):
            print(line)

    def render(self, term_width: Optional[int] = None) -> List[str]:
        if term_width is None:
            term_width = shutil.get_terminal_size((100, 30)).columns
        partitions = self.numbered()
        widths = self._compute_column_widths(partitions, term_width)
        wrapped = self._wrap_all_columns(partitions, widths)
        return self._render(widths, wrapped)

    # ---- width calculation ----
    def _compute_column_widths(self, partitions: Mapping[str, Sequence[NumberedTask]],
                               term_width: int) -> Dict[str, int]:
        sep_total = len(SEP) * (len(COLUMNS) - 1)
        desired: Dict[str, int] = {}
        for col in COLUMNS:
            longest = max(len(HEADER_TITLES[col]), len(PLACEHOLDERS[col]))
            for n, task in partitions[col]:
                for raw in self._unit_plain(n, task):
                    longest = max(longest, len(raw))
            desired[col] = max(MIN_COL_WIDTH, longest)
        widths = dict(desired)
        total = sum(widths.values()) + sep_total
        if total > term_width:
            target_space = max(term_width - sep_total, len(COLUMNS) * MIN_COL_WIDTH)
            while sum(widths.values()) > target_space:
                widest = max(COLUMNS, key=lambda c: widths[c])
                if widths[widest] <= MIN_COL_WIDTH:
                    break
                widths[widest] -= 1
        else:
            extra = term_width - total
            i = 0
            while extra > 0:
                widths[COLUMNS[i % len(COLUMNS)]] += 1
                extra -= 1
                i += 1
        return widths

    @staticmethod
    def _unit_plain(number: int, task: Task) -> List[str]:
        indent = ' ' * (len(str(number)) + 2)
        lines = [f"{number}. {task.title}", indent + task.description,
                 indent + f"Added: {format_timestamp(task.created_at)}"]
        if task.is_completed and task.completed_at:
            lines.append(indent + f"Completed: {format_timestamp(task.completed_at)}")
        return lines

    # ---- wrapping ----
    def _wrap_all_columns(self, partitions: Mapping[str, Sequence[NumberedTask]],
                          widths: Mapping[str, int]) -> Dict[str, List[str]]:
        wrapped: Dict[str, List[str]] = {}
        for col in COLUMNS:
            if not partitions[col]:
                wrapped[col] = [color(PLACEHOLDERS[col], EMPTY_COLOR)]
                continue
            acc: List[str] = []
            for n, task in partitions[col]:
                if acc:
                    acc.append('')
                acc.extend(self._wrap_task(n, task, widths[col]))
            wrapped[col] = acc
        return wrapped

    def _wrap_task(self, number: int, task: Task, col_width: int) -> List[str]:
        prefix = f"{number}. "
        indent = ' ' * len(prefix)
        limit = col_width - len(prefix)
        status_col = STATUS_COLOR['completed' if task.is_completed else 'pending']
        lines: List[str] = []
        for idx, part in enumerate(wrap_words(task.title, limit)):
            lead = color(f"{number}.", ID_COLOR, BOLD) + ' ' if idx == 0 else indent
            lines.append(lead + color(part, status_col, BOLD))
        for part in wrap_words(task.description, limit):
            lines.append(indent + part)
        lines.append(indent + color(f"Added: {format_timestamp(task.created_at)}", META_COLOR))
        if task.is_completed and task.completed_at:
            lines.append(indent + color(f"Completed: {format_timestamp(task.completed_at)}",
                                        STATUS_COLOR['completed']))
        return lines

    # ---- rendering ----
    def _render(self, widths: Mapping[str, int], wrapped_lines: Mapping[str, List[str]]) -> List[str]:
        rows = max(len(wrapped_lines[c]) for c in COLUMNS)
        header_cells: List[str] = []
        for c in COLUMNS:
            header_cells.append(self._pad(color(HEADER_TITLES[c], HEADER_COLOR, BOLD), widths[c]))
        out = [SEP.join(header_cells),
               SEP.join(color('-' * widths[c], HEADER_COLOR) for c in COLUMNS)]
        for r in range(rows):
            row_cells: List[str] = []
            for c in COLUMNS:
                col_lines = wrapped_lines[c]
                line = col_lines[r] if r < len(col_lines) else ''
                row_cells.append(self._pad(line, widths[c]))
            out.append(SEP.join(row_cells))
        return out

    @classmethod
    def _pad(cls, s: str, width: int) -> str:
        pad = width - cls._visible_len(s)
        return s + ' ' * pad if pad > 0 else s

    @staticmethod
    def _visible_len(s: str) -> int:
        return len(ANSI_RE.sub('', s))
