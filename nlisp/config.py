from __future__ import annotations
import os


# Defaults
_DEFAULT_MAX_DEPTH = 1000
_DEFAULT_MAX_NESTING = 256
_DEFAULT_LOG_LEVEL = 'WARNING'


def int_from_env(var: str, default: int) -> int:
    raw = os.environ.get(var)
    if not raw or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _positive_from_env(var: str, default: int) -> int:
    value = int_from_env(var, default)
    return value if value > 0 else default


def get_max_depth() -> int:
    """Maximum nesting of evaluate calls before the VM gives up.

    Every call counts, native ones included: a user-level recursive call
    usually costs three to five levels.
    """
    return _positive_from_env('NLISP_MAX_DEPTH', _DEFAULT_MAX_DEPTH)


def get_max_nesting() -> int:
    """Deepest list nesting the reader accepts."""
    return _positive_from_env('NLISP_MAX_NESTING', _DEFAULT_MAX_NESTING)


def get_log_level() -> str:
    raw = os.environ.get('NLISP_LOG_LEVEL')
    return raw.strip().upper() if raw and raw.strip() else _DEFAULT_LOG_LEVEL
