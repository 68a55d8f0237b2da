"""Build driver connection URLs from a database type's ``connectionSpec``.

Each ``<name>`` placeholder in the template is an option. Values are taken,
first match wins, from:

1. the fixed parameters ``host``, ``port``, ``database`` and ``instance``
   (option names matched ignoring case; ``port`` falls back to the type's
   ``default-port``),
2. the free-form ``extra_options`` mapping (exact option name),

and a missing value fails the whole build with ``MissingRequiredOption``.
"""

import logging
import re
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, Field

from common.config.run_config import RunConfig
from dbtypes.descriptor import DbSpecificOption, DbType
from dbtypes.errors import DbTypeConfigurationError, MissingRequiredOption

logger = logging.getLogger(__name__)

SECRET_KEYWORDS = ("password", "secret", "token", "credentials")
_MASK = "****"
_PLACEHOLDER_RE = re.compile(r"<([^<>]+)>")


class ConnectionParams(BaseModel):
    """Caller supplied values for connection template options."""

    host: Optional[str] = None
    port: Optional[str] = None
    database: Optional[str] = None
    instance: Optional[str] = None
    extra_options: Dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @classmethod
    def from_run_config(cls, config: RunConfig) -> "ConnectionParams":
        return cls(
            host=config.host,
            port=config.port,
            database=config.database,
            instance=config.instance,
            extra_options=dict(config.connection_options),
        )


def _fixed_value(
    option: DbSpecificOption, db_type: DbType, params: ConnectionParams
) -> Optional[str]:
    if option.matches("host"):
        return params.host
    if option.matches("port"):
        return params.port if params.port is not None else db_type.default_port
    if option.matches("database"):
        return params.database
    if option.matches("instance"):
        return params.instance
    return None


def resolve_option_values(db_type: DbType, params: ConnectionParams) -> Dict[str, str]:
    """Return a fresh ``{option name: value}`` map for every option of ``db_type``.

    Raises:
        MissingRequiredOption: For the first option, in template order, that
            has no value from any source.
    """
    values: Dict[str, str] = {}
    for option in db_type.options:
        value = _fixed_value(option, db_type, params)
        if value is None:
            value = params.extra_options.get(option.name)
        if value is None:
            raise MissingRequiredOption(option.name)
        values[option.name] = value
    return values


def _render(template: str, values: Mapping[str, str]) -> str:
    # Single pass, so a value containing "<x>" is never substituted again.
    return _PLACEHOLDER_RE.sub(lambda match: values.get(match.group(1), match.group(0)), template)


def _is_secret(name: str) -> bool:
    lowered = name.lower()
    return any(keyword in lowered for keyword in SECRET_KEYWORDS)


def build_connection_url(db_type: DbType, params: ConnectionParams) -> str:
    """Substitute every option placeholder in ``db_type``'s connection template."""
    template = db_type.connection_spec
    if template is None:
        raise DbTypeConfigurationError(
            f"Database type '{db_type.name}' ({db_type.loaded_from}) defines no connectionSpec"
        )

    values = resolve_option_values(db_type, params)
    url = _render(template, values)

    if logger.isEnabledFor(logging.DEBUG):
        masked = {name: _MASK if _is_secret(name) else value for name, value in values.items()}
        logger.debug("connectionURL: %s", _render(template, masked))
    return url
