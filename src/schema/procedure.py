from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True, order=True)
class Procedure:
    """A stored procedure captured from the catalog.

    Procedures compare and sort by name, then by definition text; the schema
    takes no part in comparison. The definition is stored without leading or
    trailing whitespace so that captures differing only in surrounding
    whitespace are equal.
    """

    schema: Optional[str] = field(compare=False)
    name: str
    definition: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "definition", (self.definition or "").strip())
