"""Errors raised while loading and resolving database-type descriptors."""

from typing import Sequence


class DbTypeConfigurationError(ValueError):
    """Base class for invalid or unresolvable database-type configuration."""


class DescriptorNotFound(DbTypeConfigurationError):
    """Raised when no file or bundled resource provides the requested type."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"Unable to find database properties for specified type '{type_name}'")


class MalformedDirective(DbTypeConfigurationError):
    """Raised when an include.N directive is not of the form type::key."""

    def __init__(self, directive: str, value: str, loaded_from: str) -> None:
        self.directive = directive
        self.value = value
        self.loaded_from = loaded_from
        super().__init__(
            f"{directive} directive in {loaded_from} must have '::' between dbType and key "
            f"(got '{value}')"
        )


class CyclicDescriptor(DbTypeConfigurationError):
    """Raised when extends/include directives loop back to a type being resolved."""

    def __init__(self, chain: Sequence[str]) -> None:
        self.chain = tuple(chain)
        super().__init__("Cyclic database type reference: " + " -> ".join(self.chain))


class MissingRequiredOption(ValueError):
    """Raised when a connection template parameter has no supplied value."""

    def __init__(self, option_name: str) -> None:
        self.option_name = option_name
        super().__init__(
            f"The specified database driver requires option '{option_name}' which has not "
            "been supplied. You can supply extra options with --connection-options "
            "(see --help for more information)"
        )
