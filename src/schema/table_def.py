from typing import List, Optional

from pydantic import BaseModel, Field

from .column_def import ColumnDef
from .foreign_key_def import ForeignKeyDef


def qualify(table_schema: Optional[str], table_name: str) -> str:
    """Return ``schema.table``, or just the table name when there is no schema."""
    if table_schema:
        return f"{table_schema}.{table_name}"
    return table_name


class TableDef(BaseModel):
    """Canonical representation of a database table definition.

    ``foreign_keys`` holds the edges this table owns (it is the referencing
    side); ``referenced_by`` holds edges owned by other tables that point at it.
    Remote tables live outside the schema being documented and are only
    present because something in that schema refers to them.
    """

    name: str
    table_schema: Optional[str] = None
    columns: List[ColumnDef] = Field(default_factory=list)
    foreign_keys: List[ForeignKeyDef] = Field(default_factory=list)
    referenced_by: List[ForeignKeyDef] = Field(default_factory=list)
    description: Optional[str] = None
    is_remote: bool = False

    model_config = {"frozen": False}

    @property
    def qualified_name(self) -> str:
        return qualify(self.table_schema, self.name)
