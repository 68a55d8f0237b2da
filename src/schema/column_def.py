from typing import Optional

from pydantic import BaseModel


class ColumnDef(BaseModel):
    """Canonical representation of a table column."""

    name: str
    data_type: str
    is_nullable: bool = True
    is_primary_key: bool = False
    description: Optional[str] = None

    model_config = {"frozen": False}
