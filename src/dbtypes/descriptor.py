from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

CONNECTION_SPEC_KEY = "connectionSpec"
DEFAULT_PORT_KEY = "default-port"
SUPPORTS_ALTER_PROC_KEY = "supportsAlterProc"
EXTENDS_KEY = "extends"
INCLUDE_KEY_PREFIX = "include."


@dataclass(frozen=True)
class DbSpecificOption:
    """A named parameter referenced by a connection template."""

    name: str
    description: Optional[str] = None

    def matches(self, name: str) -> bool:
        """Return True when ``name`` refers to this option, ignoring case."""
        return self.name.lower() == name.lower()


@dataclass(frozen=True)
class DbType:
    """Fully resolved database-type descriptor.

    ``props`` is a read-only view over the flattened key/value pairs; it never
    contains ``extends`` or ``include.N`` directives.
    """

    name: str
    props: Mapping[str, str]
    loaded_from: str
    options: Tuple[DbSpecificOption, ...] = field(default=())

    def __post_init__(self) -> None:
        if not isinstance(self.props, MappingProxyType):
            object.__setattr__(self, "props", MappingProxyType(dict(self.props)))

    @property
    def alter_supported(self) -> bool:
        """Whether the vendor supports ALTER PROCEDURE."""
        return parse_bool(self.props.get(SUPPORTS_ALTER_PROC_KEY))

    @property
    def connection_spec(self) -> Optional[str]:
        return self.props.get(CONNECTION_SPEC_KEY)

    @property
    def default_port(self) -> Optional[str]:
        return self.props.get(DEFAULT_PORT_KEY)

    @property
    def description(self) -> Optional[str]:
        return self.props.get("description")

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.props.get(key, default)

    def __str__(self) -> str:
        return self.description or self.name


def parse_bool(value: Optional[str]) -> bool:
    """Parse a descriptor flag: only "true", in any case and without padding, is true."""
    return value is not None and value.lower() == "true"
