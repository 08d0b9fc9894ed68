"""Package-wide defaults and debug diagnostics.

Defaults can be overridden per process through environment variables:

- ``TABLEKIT_DEBOUNCE_MS``: debounce window for filter/search changes
- ``TABLEKIT_PAGE_SIZE``: initial page size for new engines
- ``TABLEKIT_DEBUG``: set to ``"true"`` to print engine diagnostics to stderr
"""

import os
import sys
from typing import Tuple

DEFAULT_DEBOUNCE_MS = 300
DEFAULT_PAGE_SIZE = 10
DEFAULT_PAGE_SIZE_OPTIONS: Tuple[int, ...] = (10, 20, 30, 50, 100)


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def get_debounce_ms() -> int:
    """Debounce window in milliseconds (env ``TABLEKIT_DEBOUNCE_MS``)."""
    return _int_from_env("TABLEKIT_DEBOUNCE_MS", DEFAULT_DEBOUNCE_MS)


def get_default_page_size() -> int:
    """Initial page size (env ``TABLEKIT_PAGE_SIZE``)."""
    return _int_from_env("TABLEKIT_PAGE_SIZE", DEFAULT_PAGE_SIZE)


def is_debug() -> bool:
    return os.environ.get("TABLEKIT_DEBUG", "false").lower() == "true"


def debug_log(tag: str, message: str) -> None:
    """Print a tagged diagnostic line to stderr when debug mode is on."""
    if is_debug():
        print(f"[{tag}] {message}", file=sys.stderr)
