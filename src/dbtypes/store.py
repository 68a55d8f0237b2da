"""Descriptor lookup and ``.properties`` parsing.

A database type is looked up, in order, as:

1. a file whose path is exactly the type name,
2. a file named ``<type>.properties``,
3. a bundled resource ``<type>.properties`` at the root of this package,
4. a bundled resource ``dbTypes/<type>.properties``.

The first match wins. Relative paths are resolved against ``search_dir``
(default: the current working directory).
"""

import logging
import re
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from dbtypes.errors import DescriptorNotFound

logger = logging.getLogger(__name__)

PACKAGE = "dbtypes"
BUNDLED_DIR = "dbTypes"
PROPERTIES_SUFFIX = ".properties"

_WHITESPACE = " \t\f"
_SEPARATORS = "=:" + _WHITESPACE
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_ESCAPE_RE = re.compile(r"\\(u[0-9a-fA-F]{4}|.)", re.DOTALL)
_LINE_END_RE = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class LoadedProperties:
    """Raw, unresolved key/value pairs plus where they came from."""

    props: Dict[str, str]
    loaded_from: str


def load_properties(
    type_name: str, search_dir: Optional[Union[str, Path]] = None
) -> LoadedProperties:
    """Load the raw descriptor for ``type_name`` from the first matching location."""
    base = Path(search_dir) if search_dir is not None else Path.cwd()
    tried: List[str] = []

    for path in (base / type_name, base / f"{type_name}{PROPERTIES_SUFFIX}"):
        tried.append(str(path))
        if path.is_file():
            logger.debug("Loading database type '%s' from %s", type_name, path)
            return LoadedProperties(
                props=parse_properties(path.read_text(encoding="utf-8")),
                loaded_from=str(path.resolve()),
            )

    package_root = resources.files(PACKAGE)
    bundled = (
        (package_root.joinpath(f"{type_name}{PROPERTIES_SUFFIX}"), f"{type_name}{PROPERTIES_SUFFIX}"),
        (
            package_root.joinpath(BUNDLED_DIR).joinpath(f"{type_name}{PROPERTIES_SUFFIX}"),
            f"{BUNDLED_DIR}/{type_name}{PROPERTIES_SUFFIX}",
        ),
    )
    for resource, relative in bundled:
        tried.append(f"[{PACKAGE}]/{relative}")
        if resource.is_file():
            logger.debug("Loading database type '%s' from bundled %s", type_name, relative)
            return LoadedProperties(
                props=parse_properties(resource.read_text(encoding="utf-8")),
                loaded_from=f"[{PACKAGE}]/{relative}",
            )

    logger.error(
        "Failed to find properties for db type '%s'; tried: %s", type_name, ", ".join(tried)
    )
    raise DescriptorNotFound(type_name)


def parse_properties(text: str) -> Dict[str, str]:
    """Parse Java ``.properties`` text into a dict. Later duplicate keys win."""
    props: Dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_entry(line)
        props[key] = value
    return props


def _logical_lines(text: str) -> Iterator[str]:
    pending: Optional[str] = None
    for raw in _LINE_END_RE.split(text):
        line = raw.lstrip(_WHITESPACE)
        if pending is None and (not line or line[0] in "#!"):
            continue
        if _continues(line):
            pending = (pending or "") + line[:-1]
            continue
        yield (pending or "") + line
        pending = None
    if pending is not None:
        yield pending


def _continues(line: str) -> bool:
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _split_entry(line: str) -> "tuple[str, str]":
    index = 0
    while index < len(line):
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in _SEPARATORS:
            break
        index += 1

    key = line[:index]
    rest = line[index:].lstrip(_WHITESPACE)
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(_WHITESPACE)
    return _unescape(key), _unescape(rest)


def _unescape(value: str) -> str:
    def _replace(match: "re.Match[str]") -> str:
        token = match.group(1)
        if len(token) == 5 and token[0] == "u":
            return chr(int(token[1:], 16))
        return _ESCAPES.get(token, token)

    return _ESCAPE_RE.sub(_replace, value)
