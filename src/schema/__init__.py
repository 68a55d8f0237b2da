"""Canonical schema model shared by readers and renderers."""

from .column_def import ColumnDef
from .foreign_key_def import ForeignKeyDef, ForeignKeyRule
from .procedure import Procedure
from .table_def import TableDef, qualify

__all__ = [
    "ColumnDef",
    "ForeignKeyDef",
    "ForeignKeyRule",
    "Procedure",
    "TableDef",
    "qualify",
]
