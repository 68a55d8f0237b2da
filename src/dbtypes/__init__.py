"""Database-type descriptors.

A database type is a ``.properties`` file describing how to connect to one
vendor (``connectionSpec``) and which catalog queries it supports. Types can
inherit from one another with ``extends`` and borrow single keys with
``include.N``.
"""

from dbtypes.descriptor import DbSpecificOption, DbType
from dbtypes.errors import (
    CyclicDescriptor,
    DbTypeConfigurationError,
    DescriptorNotFound,
    MalformedDirective,
    MissingRequiredOption,
)
from dbtypes.finder import list_bundled_types
from dbtypes.options import extract_options, format_usage
from dbtypes.resolver import DescriptorResolver, resolve

__all__ = [
    "CyclicDescriptor",
    "DbSpecificOption",
    "DbType",
    "DbTypeConfigurationError",
    "DescriptorNotFound",
    "DescriptorResolver",
    "MalformedDirective",
    "MissingRequiredOption",
    "extract_options",
    "format_usage",
    "list_bundled_types",
    "resolve",
]
