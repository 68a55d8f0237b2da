"""Run configuration for a documentation pass.

Values come from the process environment; a ``.env`` file in the working
directory is loaded first when present.

Environment Variables:
    DB_TYPE: Database type name or path to a descriptor file.
    DB_HOST / DB_PORT / DB_NAME / DB_INSTANCE: Fixed connection parameters.
    DB_CONNECTION_OPTIONS: Extra template parameters, "key=value;key=value".
    DB_SCHEMA: Home schema being documented.
    DB_SCHEMAS: Comma separated list of schemas for a multi-schema run.
    DB_MULTI_SCHEMA: Force multi-schema mode (remote FK failures become fatal).
    DB_EXCLUDE_COLUMNS: Comma separated regexes of columns to leave out of relationships.
"""

import re
from typing import Dict, List, Optional, Pattern

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from common.config.env import get_env_bool, get_env_int, get_env_list, get_env_str

_OPTION_SEPARATOR_RE = re.compile(r"(?<!\\);")


def parse_connection_options(value: Optional[str]) -> Dict[str, str]:
    """Parse "key=value;key=value" into a dict.

    A literal semicolon inside a value is written as ``\\;``.

    Raises:
        ValueError: If a non-empty segment has no "=".
    """
    options: Dict[str, str] = {}
    if not value:
        return options

    for segment in _OPTION_SEPARATOR_RE.split(value):
        segment = segment.replace("\\;", ";").strip()
        if not segment:
            continue
        if "=" not in segment:
            raise ValueError(f"Connection option '{segment}' must be of the form key=value")
        key, _, option_value = segment.partition("=")
        options[key.strip()] = option_value.strip()
    return options


def _port_from_env() -> Optional[str]:
    port = get_env_int("DB_PORT")
    return str(port) if port is not None else None


class RunConfig(BaseModel):
    """Settings that drive connection building and remote-table linking."""

    db_type: Optional[str] = None
    host: Optional[str] = None
    port: Optional[str] = None
    database: Optional[str] = None
    instance: Optional[str] = None
    connection_options: Dict[str, str] = Field(default_factory=dict)
    schema_name: Optional[str] = None
    schemas: List[str] = Field(default_factory=list)
    one_of_multiple_schemas: bool = False
    exclude_columns: List[str] = Field(default_factory=list)

    @property
    def multi_schema_mode(self) -> bool:
        """True when the run was explicitly asked to cover several schemas."""
        return self.one_of_multiple_schemas or len(self.schemas) > 1

    def exclude_patterns(self) -> List[Pattern[str]]:
        """Compile ``exclude_columns`` into regular expressions."""
        patterns: List[Pattern[str]] = []
        for expression in self.exclude_columns:
            try:
                patterns.append(re.compile(expression))
            except re.error as exc:
                raise ValueError(
                    f"Invalid column exclusion pattern '{expression}': {exc}"
                ) from exc
        return patterns

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "RunConfig":
        """Build a config from environment variables (and ``.env`` when asked)."""
        if load_env_file:
            load_dotenv(find_dotenv(usecwd=True))

        return cls(
            db_type=get_env_str("DB_TYPE"),
            host=get_env_str("DB_HOST"),
            port=_port_from_env(),
            database=get_env_str("DB_NAME"),
            instance=get_env_str("DB_INSTANCE"),
            connection_options=parse_connection_options(get_env_str("DB_CONNECTION_OPTIONS")),
            schema_name=get_env_str("DB_SCHEMA"),
            schemas=get_env_list("DB_SCHEMAS", default=[]),
            one_of_multiple_schemas=get_env_bool("DB_MULTI_SCHEMA", default=False),
            exclude_columns=get_env_list("DB_EXCLUDE_COLUMNS", default=[]),
        )
