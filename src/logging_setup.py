"""Logging configuration: quiet console, full log file."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

APP_LOGGERS = ("cli", "main", "presenter", "storage", "task_store", "theme")

_installed: List[logging.Handler] = []


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the redrawn terminal readable:
    - application modules pass at the handler's level
    - Python warnings (captured as 'py.warnings') and any third party only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        root_name = record.name.split(".", 1)[0]
        if root_name in APP_LOGGERS:
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_file: Optional[str | Path] = None,
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure logging with:
    - Console handler on stderr, filtered for interactive use
    - File handler (when log_file is given) with everything at file_level

    Call this once, before the first log call. Calling it again replaces
    the handlers installed by the previous call.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    teardown_logging()

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)
    _installed.append(ch)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(fmt)
        root.addHandler(fh)
        _installed.append(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)


def teardown_logging() -> None:
    """Detach and close the handlers installed by setup_logging."""
    root = logging.getLogger()
    for h in _installed:
        root.removeHandler(h)
        h.close()
    _installed.clear()
