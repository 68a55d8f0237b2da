"""Resolution of ``include.N`` and ``extends`` directives in database-type descriptors.

Example descriptor::

    extends = pgsql
    include.1 = mysql::selectRowCountSql
    connectionSpec = postgresql+psycopg2://<user>:<password>@<host>:<port>/<database>

Includes are processed first: each ``include.N`` pulls one key from another
(fully resolved) type. ``extends`` is processed second and merges the whole
parent underneath the child, child keys winning.
"""

import logging
import re
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from dbtypes.descriptor import EXTENDS_KEY, INCLUDE_KEY_PREFIX, DbType
from dbtypes.errors import CyclicDescriptor, MalformedDirective
from dbtypes.options import extract_options
from dbtypes.store import load_properties

logger = logging.getLogger(__name__)

INCLUDE_SEPARATOR = "::"
_INCLUDE_KEY_RE = re.compile(re.escape(INCLUDE_KEY_PREFIX) + r"\d+")


class DescriptorResolver:
    """Resolve database types into flat, directive-free descriptors.

    With ``cache=True`` every resolved type is kept and returned as-is on the
    next request. Resolved descriptors are immutable, so sharing them is safe.
    """

    def __init__(
        self, search_dir: Optional[Union[str, Path]] = None, cache: bool = False
    ) -> None:
        self._search_dir = search_dir
        self._cache: Optional[Dict[str, DbType]] = {} if cache else None

    def resolve(self, type_name: str) -> DbType:
        """Load ``type_name`` and resolve all of its directives."""
        return self._resolve(type_name, ())

    def _resolve(self, type_name: str, chain: Tuple[str, ...]) -> DbType:
        if type_name in chain:
            raise CyclicDescriptor(chain + (type_name,))
        if self._cache is not None and type_name in self._cache:
            return self._cache[type_name]

        chain = chain + (type_name,)
        loaded = load_properties(type_name, self._search_dir)
        props = dict(loaded.props)

        self._process_includes(props, loaded.loaded_from, chain)
        props = self._process_extends(props, chain)

        db_type = DbType(
            name=type_name,
            props=props,
            loaded_from=loaded.loaded_from,
            options=tuple(extract_options(props)),
        )
        if self._cache is not None:
            self._cache[type_name] = db_type
        return db_type

    def _process_includes(
        self, props: Dict[str, str], loaded_from: str, chain: Tuple[str, ...]
    ) -> None:
        index = 1
        while True:
            directive = f"{INCLUDE_KEY_PREFIX}{index}"
            include = props.pop(directive, None)
            if include is None:
                break

            if INCLUDE_SEPARATOR not in include:
                raise MalformedDirective(directive, include, loaded_from)
            ref_type, _, ref_key = include.partition(INCLUDE_SEPARATOR)
            ref_type = ref_type.strip()
            ref_key = ref_key.strip()

            referenced = self._resolve(ref_type, chain)
            value = referenced.get(ref_key)
            if value is None:
                logger.warning(
                    "%s in %s refers to '%s' which is not defined by type '%s'",
                    directive,
                    loaded_from,
                    ref_key,
                    ref_type,
                )
            else:
                props[ref_key] = value
            index += 1

        # Numbering stops at the first gap; anything after it is never applied.
        for orphan in [key for key in props if _INCLUDE_KEY_RE.fullmatch(key)]:
            logger.warning(
                "Ignoring %s in %s: include directives must be numbered without gaps",
                orphan,
                loaded_from,
            )
            del props[orphan]

    def _process_extends(self, props: Dict[str, str], chain: Tuple[str, ...]) -> Dict[str, str]:
        base_type = props.pop(EXTENDS_KEY, None)
        if base_type is None:
            return props

        merged = dict(self._resolve(base_type.strip(), chain).props)
        merged.update(props)
        return merged


def resolve(type_name: str, search_dir: Optional[Union[str, Path]] = None) -> DbType:
    """Resolve ``type_name`` with a throwaway, uncached resolver."""
    return DescriptorResolver(search_dir=search_dir).resolve(type_name)
