# tests/test_cli.py

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner, Result

from main import main
from storage import FileStorage, Storage
from task_store import TaskStore

from .fakes import StepClock


def _run(data_file: Path, keys: str) -> Result:
    runner = CliRunner()
    return runner.invoke(main, ["--data-file", str(data_file), "--no-alt-screen"], input=keys)


def _saved(data_file: Path):
    return Storage(FileStorage(data_file)).load_tasks()


@pytest.fixture()
def seeded(data_file: Path) -> Path:
    store = TaskStore(Storage(FileStorage(data_file)), clock=StepClock())
    store.add("Buy milk", "2% milk, 1 gallon")
    store.add("Call mom", "Sunday")
    return data_file


def test_add_prompts_and_persists(data_file: Path) -> None:
    result = _run(data_file, "add\nBuy milk\n2% milk, 1 gallon\nexit\n")

    assert result.exit_code == 0, result.output
    (task,) = _saved(data_file)
    assert (task.title, task.description, task.is_completed) == ("Buy milk", "2% milk, 1 gallon", False)
    assert "1. Buy milk" in result.output
    assert "Goodbye." in result.output


def test_inline_add(data_file: Path) -> None:
    result = _run(data_file, "add Buy milk | 2% milk, 1 gallon\nexit\n")

    assert result.exit_code == 0, result.output
    assert [(t.title, t.description) for t in _saved(data_file)] == [("Buy milk", "2% milk, 1 gallon")]


def test_inline_add_without_description_prompts(data_file: Path) -> None:
    _run(data_file, "add Buy milk\n2% milk\nexit\n")
    assert [(t.title, t.description) for t in _saved(data_file)] == [("Buy milk", "2% milk")]


def test_add_reprompts_on_blank_title(data_file: Path) -> None:
    result = _run(data_file, "add\n   \n2% milk\nBuy milk\nexit\n")

    assert "Title cannot be empty." in result.output
    assert [t.title for t in _saved(data_file)] == ["Buy milk"]


def test_toggle_moves_task_to_completed(seeded: Path) -> None:
    result = _run(seeded, "done 1\nexit\n")

    assert result.exit_code == 0, result.output
    milk, call = _saved(seeded)
    assert milk.is_completed is True
    assert milk.completed_at is not None
    assert call.is_completed is False
    assert "Completed: " in result.output


def test_toggle_by_raw_id(seeded: Path) -> None:
    task_id = _saved(seeded)[1].id
    _run(seeded, f"t {task_id}\nexit\n")
    assert _saved(seeded)[1].is_completed is True


def test_delete_asks_for_confirmation(seeded: Path) -> None:
    result = _run(seeded, "rm 1\nn\nexit\n")

    assert 'Are you sure you want to delete task:\n"Buy milk"?' in result.output
    assert len(_saved(seeded)) == 2

    _run(seeded, "rm 1\ny\nexit\n")
    assert [t.title for t in _saved(seeded)] == ["Call mom"]


def test_edit_stays_open_until_valid(seeded: Path) -> None:
    result = _run(seeded, "e 2\n   \n\ny\nCall dad\n\n\nexit\n")

    assert result.exit_code == 0, result.output
    assert "Title cannot be empty." in result.output
    assert [(t.title, t.description) for t in _saved(seeded)][1] == ("Call dad", "Sunday")


def test_edit_cancel_discards_changes(seeded: Path) -> None:
    result = _run(seeded, "edit 1\nBuy bread\nwholegrain\nn\nexit\n")

    assert "Edit cancelled." in result.output
    assert _saved(seeded)[0].title == "Buy milk"


def test_unknown_task_number_is_reported(seeded: Path) -> None:
    result = _run(seeded, "done 9\nexit\n")

    assert "No task #9." in result.output
    assert all(not t.is_completed for t in _saved(seeded))


def test_usage_and_unknown_command(seeded: Path) -> None:
    result = _run(seeded, "rm\nfrobnicate\nexit\n")

    assert "Usage: rm <number>" in result.output
    assert "Unknown command. Type 'help' for instructions." in result.output


def test_help_screen(data_file: Path) -> None:
    result = _run(data_file, "help\n\nexit\n")
    assert "Commands:" in result.output
    assert "done <n>" in result.output


def test_end_of_input_exits_cleanly(seeded: Path) -> None:
    result = _run(seeded, "")

    assert result.exit_code == 0, result.output
    assert "Interrupted. Goodbye." in result.output
    assert len(_saved(seeded)) == 2


def test_corrupt_data_file_starts_empty(data_file: Path) -> None:
    data_file.write_text("{oops", encoding="utf-8")

    result = _run(data_file, "add Fresh | start\nexit\n")

    assert result.exit_code == 0, result.output
    assert "No completed tasks" in result.output
    assert [t.title for t in _saved(data_file)] == ["Fresh"]


def test_log_file_written_next_to_data(data_file: Path) -> None:
    _run(data_file, "add Buy milk | 2% milk\nexit\n")

    log_text = (data_file.parent / "todo.log").read_text(encoding="utf-8")
    assert "Task store ready" in log_text
    assert "Added task" in log_text


def test_empty_title_cancels_add(data_file: Path) -> None:
    result = _run(data_file, "add\n\n\nexit\n")

    assert result.exit_code == 0, result.output
    assert "Add cancelled." in result.output
    assert "Goodbye." in result.output
    assert _saved(data_file) == []


def test_empty_answer_at_reprompt_cancels_add(data_file: Path) -> None:
    result = _run(data_file, "add\nBuy milk\n   \n\nexit\n")

    assert "Description cannot be empty." in result.output
    assert "Add cancelled." in result.output
    assert "Goodbye." in result.output
    assert _saved(data_file) == []


def test_edit_retry_keeps_valid_input(seeded: Path) -> None:
    result = _run(seeded, "e 2\n   \nCalled on Sunday\ny\n\n\n\nexit\n")

    assert "Title cannot be empty." in result.output
    assert [(t.title, t.description) for t in _saved(seeded)][1] == ("Call mom", "Called on Sunday")
