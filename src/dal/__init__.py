"""Data access for catalog metadata.

Connection URL building from database types, remote-table foreign key
linking and the SQLAlchemy-backed metadata source live here.
"""

from dal.connection_url import ConnectionParams, build_connection_url, resolve_option_values
from dal.errors import MetadataAccessError
from dal.remote_table_reader import connect_foreign_keys, connect_remote_tables

__all__ = [
    "ConnectionParams",
    "MetadataAccessError",
    "build_connection_url",
    "connect_foreign_keys",
    "connect_remote_tables",
    "resolve_option_values",
]
