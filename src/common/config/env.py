"""Typed readers for process environment settings.

Every reader returns ``default`` when the variable is unset, raises
``KeyError`` for an unset ``required`` variable and ``ValueError`` when the
value cannot be converted.
"""

import os
from typing import Callable, List, Optional, TypeVar

T = TypeVar("T")

_BOOL_LITERALS = {
    "true": True,
    "1": True,
    "yes": True,
    "on": True,
    "false": False,
    "0": False,
    "no": False,
    "off": False,
    "": False,
}


def _lookup(
    name: str,
    default: Optional[T],
    required: bool,
    convert: Callable[[str], T],
    expected: str,
) -> Optional[T]:
    raw = os.environ.get(name)
    if raw is None:
        if required:
            raise KeyError(f"Environment variable '{name}' is required but not set.")
        return default
    try:
        return convert(raw)
    except (KeyError, ValueError):
        raise ValueError(f"Environment variable '{name}' must be {expected}, got '{raw}'.") from None


def get_env_str(name: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    return _lookup(name, default, required, str, "a string")


def get_env_int(name: str, default: Optional[int] = None, required: bool = False) -> Optional[int]:
    return _lookup(name, default, required, int, "an integer")


def get_env_bool(
    name: str, default: Optional[bool] = None, required: bool = False
) -> Optional[bool]:
    """Read a boolean flag; accepts true/false, 1/0, yes/no, on/off (empty is false)."""
    return _lookup(
        name, default, required, lambda raw: _BOOL_LITERALS[raw.strip().lower()], "a boolean"
    )


def get_env_list(
    name: str, default: Optional[List[str]] = None, required: bool = False, separator: str = ","
) -> Optional[List[str]]:
    """Read a delimited list, dropping blank items."""
    return _lookup(
        name,
        default,
        required,
        lambda raw: [item.strip() for item in raw.split(separator) if item.strip()],
        "a list",
    )
