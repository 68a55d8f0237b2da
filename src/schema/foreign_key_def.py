from enum import IntEnum
from typing import Optional

from pydantic import BaseModel


class ForeignKeyRule(IntEnum):
    """Referential action codes, numbered as in JDBC's ``DatabaseMetaData.importedKey*``."""

    CASCADE = 0
    RESTRICT = 1
    SET_NULL = 2
    NO_ACTION = 3
    SET_DEFAULT = 4

    @classmethod
    def from_action(cls, action: Optional[str]) -> "ForeignKeyRule":
        """Map an SQL referential action ("ON DELETE SET NULL" style) to its code."""
        if not action:
            return cls.NO_ACTION
        normalized = "_".join(action.strip().upper().split())
        try:
            return cls[normalized]
        except KeyError:
            raise ValueError(f"Unknown referential action: '{action}'") from None


class ForeignKeyDef(BaseModel):
    """One column of a foreign key constraint, from the referencing side.

    Composite constraints produce one edge per column pair sharing the same
    ``constraint_name``.
    """

    table_schema: Optional[str] = None
    table_name: str
    constraint_name: Optional[str] = None
    column_name: str
    foreign_table_schema: Optional[str] = None
    foreign_table_name: str
    foreign_column_name: str
    update_rule: ForeignKeyRule = ForeignKeyRule.NO_ACTION
    delete_rule: ForeignKeyRule = ForeignKeyRule.NO_ACTION

    model_config = {"frozen": True}
