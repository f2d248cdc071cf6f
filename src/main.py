"""Main entry point for the terminal todo list.

Builds the single TaskStore for the session and hands it to the
presenter and the command loop.
"""
import logging
from pathlib import Path
from typing import Optional

import click

from cli import CLI
from logging_setup import setup_logging, teardown_logging
from presenter import Presenter
from storage import DEFAULT_DATA_FILE, FileStorage, Storage
from task_store import TaskStore

VERBOSITY_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


@click.command()
@click.option('--data-file', type=click.Path(dir_okay=False, path_type=Path),
              envvar='TODO_DATA_FILE', default=DEFAULT_DATA_FILE, show_default=True,
              help='JSON file holding the task storage slot.')
@click.option('--log-file', type=click.Path(dir_okay=False, path_type=Path),
              help='Log file (default: todo.log next to the data file).')
@click.option('--alt-screen/--no-alt-screen', default=None,
              help='Use the terminal alternate screen (default from TODO_ALT_SCREEN, on).')
@click.option('-v', '--verbose', count=True, help='More console logging (-v info, -vv debug).')
def main(data_file: Path, log_file: Optional[Path], alt_screen: Optional[bool], verbose: int) -> None:
    setup_logging(
        log_file=log_file or data_file.parent / 'todo.log',
        console_level=VERBOSITY_LEVELS[min(verbose, len(VERBOSITY_LEVELS) - 1)],
    )
    store = TaskStore.load(Storage(FileStorage(data_file)))
    cli = CLI(store, Presenter(store), alt_screen=alt_screen)
    try:
        cli.run()
    finally:
        teardown_logging()

if __name__ == "__main__":
    main()
