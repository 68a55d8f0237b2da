from dataclasses import dataclass
from typing import List, Optional, Protocol, runtime_checkable

from schema import ForeignKeyRule, Procedure


@dataclass(frozen=True)
class ImportedKeyRow:
    """One row of "imported keys": a referencing column and the column it points at."""

    fk_name: Optional[str]
    fk_column_name: str
    pk_table_schema: Optional[str]
    pk_table_name: str
    pk_column_name: str
    update_rule: ForeignKeyRule = ForeignKeyRule.NO_ACTION
    delete_rule: ForeignKeyRule = ForeignKeyRule.NO_ACTION


@runtime_checkable
class MetadataSource(Protocol):
    """Protocol for reading catalog metadata over a single database connection.

    Implementations raise ``dal.errors.MetadataAccessError`` when the
    underlying driver fails.
    """

    def get_imported_keys(self, schema: Optional[str], table: str) -> List[ImportedKeyRow]:
        """List the foreign keys where ``schema.table`` is the referencing side.

        Referenced tables may live in any schema the connection can see.
        """
        ...

    def list_procedures(self, schema: str) -> List[Procedure]:
        """List the stored procedures defined in ``schema``."""
        ...
