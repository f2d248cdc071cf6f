"""Color & style helpers for the two-column list.

Colour is on for a TTY (or FORCE_COLOR=1) unless NO_COLOR is set. Hex
palette entries become truecolor escapes when COLORTERM advertises it,
otherwise the nearest xterm 256-colour cube index. Palette entries
TODO_PRIMARY / TODO_PENDING / TODO_COMPLETED come from the environment,
then from the project .env file, then from the defaults below.
"""
from __future__ import annotations
import logging
import os, sys
from pathlib import Path

logger = logging.getLogger(__name__)

PALETTE_DEFAULTS = {
    'TODO_PRIMARY': '#476EAE',
    'TODO_PENDING': '#48B3AF',
    'TODO_COMPLETED': '#A7E399',
}
ENV_FILE = Path(__file__).resolve().parent.parent / '.env'


def _flag(name: str) -> bool:
    return os.environ.get(name, '').lower() in {'1', 'true', 'yes', 'on'}

_ENABLE = (_flag('FORCE_COLOR') or sys.stdout.isatty()) and 'NO_COLOR' not in os.environ
_TRUECOLOR = any(tok in os.environ.get('COLORTERM', '').lower() for tok in ('truecolor', '24bit'))


def _normalize_hex(value: str) -> str | None:
    digits = value.strip().strip('"\'').lstrip('#')
    if len(digits) != 6:
        return None
    try:
        int(digits, 16)
    except ValueError:
        return None
    return '#' + digits


def _foreground(hex_code: str, truecolor: bool) -> str:
    """Escape sequence for a hex colour, truecolor or 256-colour cube."""
    r, g, b = (int(hex_code[i:i + 2], 16) for i in (1, 3, 5))
    if truecolor:
        return f"\033[38;2;{r};{g};{b}m"
    r6, g6, b6 = (round(c / 255 * 5) for c in (r, g, b))
    return f"\033[38;5;{16 + 36 * r6 + 6 * g6 + b6}m"


def load_env_overrides(env_path: Path) -> dict[str, str]:
    """Palette entries found in a .env file; unknown keys and bad values are skipped."""
    if not env_path.exists():
        return {}
    try:
        text = env_path.read_text()
    except OSError as exc:
        logger.warning("Could not read %s: %s", env_path, exc)
        return {}
    overrides: dict[str, str] = {}
    for line in text.splitlines():
        key, sep, value = line.strip().partition('=')
        key = key.strip()
        if not sep or key.startswith('#') or key not in PALETTE_DEFAULTS:
            continue
        hex_code = _normalize_hex(value)
        if hex_code:
            overrides[key] = hex_code
    return overrides


def resolve_palette(file_overrides: dict[str, str]) -> dict[str, str]:
    """Environment beats the .env file, which beats the defaults."""
    palette = dict(PALETTE_DEFAULTS)
    palette.update(file_overrides)
    for key in PALETTE_DEFAULTS:
        from_env = _normalize_hex(os.environ.get(key, ''))
        if from_env:
            palette[key] = from_env
    return palette


def _style(code: str) -> str:
    return f"\033[{code}m" if _ENABLE else ''


def _hex_style(hex_code: str) -> str:
    return _foreground(hex_code, _TRUECOLOR) if _ENABLE else ''


RESET = _style('0')
BOLD = _style('1')
DIM = _style('2')

PALETTE = resolve_palette(load_env_overrides(ENV_FILE))
PRIMARY = _hex_style(PALETTE['TODO_PRIMARY'])

STATUS_COLOR = {
    'pending': _hex_style(PALETTE['TODO_PENDING']),
    'completed': _hex_style(PALETTE['TODO_COMPLETED']),
}

HEADER_COLOR = PRIMARY
ID_COLOR = PRIMARY + BOLD
EMPTY_COLOR = DIM + PRIMARY
META_COLOR = DIM


def color(text: str, *styles: str) -> str:
    """Wrap text in the given styles (no-op when colour is off)."""
    if not _ENABLE:
        return text
    return ''.join(styles) + text + RESET


__all__ = [
    'color', 'BOLD', 'STATUS_COLOR', 'HEADER_COLOR', 'ID_COLOR', 'EMPTY_COLOR', 'META_COLOR',
    'load_env_overrides', 'resolve_palette',
]
