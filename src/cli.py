"""Command-line interface loop for the todo list.

Each command maps to one TaskStore operation; the store persists on its
own, so the loop only dispatches and redraws. Tasks are addressed by the
number shown in the current render, or by their raw id.
"""
import logging
import os
from typing import Callable, Dict, List, Optional

import click

from models import Task, TaskValidationError, validate_fields
from presenter import Presenter
from task_store import TaskStore

logger = logging.getLogger(__name__)


# --- terminal control helpers ---
# ESC[3J (scrollback), ESC[H (home), ESC[2J (screen), ESC[H (home); 3J first.
def _clear_screen() -> None:
    print("\033[3J\033[H\033[2J\033[H", end="", flush=True)


def _truthy_env(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


def _enter_alt_screen() -> None:
    print("\033[?1049h", end="", flush=True)


def _leave_alt_screen() -> None:
    print("\033[?1049l", end="", flush=True)


def _ask(label: str, default: str = "") -> str:
    return click.prompt(label, default=default, show_default=bool(default))


class CLI:
    def __init__(self, store: TaskStore, presenter: Optional[Presenter] = None,
                 alt_screen: Optional[bool] = None):
        self.store = store
        self.presenter = presenter or Presenter(store)
        # Alt screen default ON; disable with TODO_ALT_SCREEN=0 (or false/no/off)
        if alt_screen is None:
            alt_screen = _truthy_env(os.getenv("TODO_ALT_SCREEN"), True)
        self.alt_screen: bool = alt_screen
        # shown under the list on the next redraw
        self.notice: Optional[str] = None
        self.commands: Dict[str, Callable[[List[str]], None]] = {
            'add': self._cmd_add, 'a': self._cmd_add,
            'done': self._cmd_toggle, 'toggle': self._cmd_toggle, 't': self._cmd_toggle,
            'edit': self._cmd_edit, 'e': self._cmd_edit,
            'rm': self._cmd_rm, 'delete': self._cmd_rm, 'del': self._cmd_rm,
        }

    def run(self) -> None:
        """Main REPL loop; the list is cleared and redrawn each cycle."""
        exit_message: Optional[str] = None
        if self.alt_screen:
            _enter_alt_screen()
        try:
            while True:
                self._redraw()
                line = click.prompt("\n", prompt_suffix=": ", default="", show_default=False).strip()
                if not line:
                    continue
                lower = line.lower()
                if lower == 'help':
                    _clear_screen()
                    self._help()
                    click.prompt("\nPress Enter to return to the list", default="", show_default=False)
                    continue
                if lower in ('exit', 'quit', 'q'):
                    exit_message = "Goodbye."
                    break
                self.handle_command(line)
        except click.Abort:
            exit_message = "Interrupted. Goodbye."
        finally:
            if self.alt_screen:
                _leave_alt_screen()
            logger.info("Session closed: %s", self.store)
            if exit_message:
                print(exit_message)

    def _redraw(self) -> None:
        _clear_screen()
        print("Tasks:")
        self.presenter.display()
        if self.notice:
            print(f"\n{self.notice}")
            self.notice = None

    # -------------------- command dispatch --------------------
    def handle_command(self, line: str) -> None:
        tokens = line.split()
        if not tokens:
            return
        handler = self.commands.get(tokens[0].lower())
        if handler is None:
            self.notice = "Unknown command. Type 'help' for instructions."
            return
        handler(tokens)

    def _resolve(self, ref: str) -> Optional[Task]:
        """Map a displayed number or a raw id to a task."""
        raw = ref.rstrip('.')
        if raw.isdigit():
            task = self.presenter.task_for_number(int(raw))
        else:
            task = self.store.get(raw)
        if task is None:
            self.notice = f"No task #{raw}."
        return task

    def _single_ref(self, tokens: List[str], usage: str) -> Optional[Task]:
        if len(tokens) != 2:
            self.notice = f"Usage: {usage}"
            return None
        return self._resolve(tokens[1])

    # ---- individual command helpers ----
    def _cmd_add(self, tokens: List[str]) -> None:
        if len(tokens) > 1:  # inline shorthand: add <title> | <description>
            title, _, description = ' '.join(tokens[1:]).partition('|')
            if not description.strip():
                description = _ask("Description")
        else:
            title = _ask("Title")
            if not title:
                self.notice = "Add cancelled."
                return
            description = _ask("Description")
        self._add(title, description)

    def _add(self, title: str, description: str) -> None:
        """Re-prompt for the rejected field; an empty answer cancels the add."""
        while True:
            try:
                task = self.store.add(title, description)
            except TaskValidationError as exc:
                print(exc)
                answer = _ask(exc.field_name.capitalize())
                if not answer:
                    self.notice = "Add cancelled."
                    return
                if exc.field_name == 'title':
                    title = answer
                else:
                    description = answer
                continue
            self.notice = f'Added "{task.title}".'
            return

    def _cmd_toggle(self, tokens: List[str]) -> None:
        task = self._single_ref(tokens, "done <number>")
        if task is not None:
            self.store.toggle_completion(task.id)

    def _cmd_rm(self, tokens: List[str]) -> None:
        task = self._single_ref(tokens, "rm <number>")
        if task is None:
            return
        if click.confirm(f'Are you sure you want to delete task:\n"{task.title}"?', default=False):
            self.store.delete(task.id)

    def _cmd_edit(self, tokens: List[str]) -> None:
        task = self._single_ref(tokens, "edit <number>")
        if task is not None:
            self._edit(task)

    def _edit(self, task: Task) -> None:
        """Edit mode: prompts prefilled with current values until saved or cancelled."""
        title, description = task.title, task.description
        while True:
            title = _ask("Title", title)
            description = _ask("Description", description)
            if not click.confirm("Save changes?", default=True):
                self.notice = "Edit cancelled."
                return
            try:
                title, description = validate_fields(title, description)
            except TaskValidationError as exc:
                print(exc)
                if exc.field_name == 'title':
                    title = task.title
                else:
                    description = task.description
                continue
            self.store.edit(task.id, title, description)
            return

    # -------------------- help --------------------
    def _help(self) -> None:
        print("Commands:")
        print("  add                        Add a new task (prompts; an empty answer cancels)")
        print("  add <title> | <desc>       Shorthand add (e.g., add Buy milk | 2% milk, 1 gallon)")
        print("  done <n>                   Toggle completion of task n (aliases: t, toggle)")
        print("  edit <n>                   Edit title and description of task n (alias: e)")
        print("  rm <n>                     Delete task n after confirmation (aliases: delete, del)")
        print("  help                       Show this help (press Enter to return)")
        print("  exit                       Leave (tasks are saved after every change)")
