"""Link remote tables back into the schema being documented.

A remote table lives outside the home schema but is referenced from it. Its
own foreign keys are read from the catalog and only those pointing back into
the home schema are recorded; relationships between remote schemas are not
this pass's concern.
"""

import logging
import threading
from typing import Iterable, List, Mapping, Optional, Pattern, Sequence

from common.interfaces.metadata_source import ImportedKeyRow, MetadataSource
from dal.errors import MetadataAccessError
from dal.tracing import trace_metadata_operation
from schema import ForeignKeyDef, TableDef, qualify

logger = logging.getLogger(__name__)


def is_excluded_column(
    table_name: str, column_name: str, exclude_columns: Sequence[Pattern[str]]
) -> bool:
    """Return True when ``column_name`` (bare or as ``table.column``) matches an exclusion."""
    qualified = f"{table_name}.{column_name}"
    return any(
        pattern.fullmatch(column_name) or pattern.fullmatch(qualified)
        for pattern in exclude_columns
    )


def _to_edge(table: TableDef, row: ImportedKeyRow) -> ForeignKeyDef:
    return ForeignKeyDef(
        table_schema=table.table_schema,
        table_name=table.name,
        constraint_name=row.fk_name,
        column_name=row.fk_column_name,
        foreign_table_schema=row.pk_table_schema,
        foreign_table_name=row.pk_table_name,
        foreign_column_name=row.pk_column_name,
        update_rule=row.update_rule,
        delete_rule=row.delete_rule,
    )


def connect_foreign_keys(
    table: TableDef,
    home_schema: str,
    metadata_source: MetadataSource,
    tables: Mapping[str, TableDef],
    exclude_columns: Sequence[Pattern[str]] = (),
    *,
    multi_schema_mode: bool,
) -> List[ForeignKeyDef]:
    """Record the foreign keys of remote ``table`` that reference ``home_schema``.

    Edges are appended to ``table.foreign_keys`` and, when the referenced
    table is in ``tables`` (keyed by qualified name), to its
    ``referenced_by``. Nothing is appended until every row has been read.

    Args:
        table: The remote (referencing) table.
        home_schema: Schema being documented; other referenced schemas are ignored.
        metadata_source: Catalog access over a single connection.
        tables: Registry of known tables keyed by ``TableDef.qualified_name``.
        exclude_columns: Columns that must not take part in relationships.
        multi_schema_mode: When True a catalog failure is re-raised; otherwise
            it is logged as a warning and the table gets no edges.

    Returns:
        The edges that were added.

    Raises:
        MetadataAccessError: If the catalog read fails in multi-schema mode.
    """
    try:
        with trace_metadata_operation(
            "dal.metadata.imported_keys",
            provider=type(metadata_source).__name__,
            schema=table.table_schema,
            table=table.name,
        ):
            rows = list(metadata_source.get_imported_keys(table.table_schema, table.name))
    except MetadataAccessError as exc:
        if multi_schema_mode:
            raise
        logger.warning(
            "Couldn't resolve foreign keys for remote table %s: %s", table.qualified_name, exc
        )
        return []

    edges: List[ForeignKeyDef] = []
    for row in rows:
        if row.pk_table_schema is None or row.pk_table_schema != home_schema:
            continue
        if is_excluded_column(table.name, row.fk_column_name, exclude_columns):
            logger.debug(
                "Skipping excluded column %s.%s", table.qualified_name, row.fk_column_name
            )
            continue
        edges.append(_to_edge(table, row))

    for edge in edges:
        table.foreign_keys.append(edge)
        parent = tables.get(qualify(edge.foreign_table_schema, edge.foreign_table_name))
        if parent is not None:
            parent.referenced_by.append(edge)
        else:
            logger.debug(
                "Referenced table %s.%s is not registered",
                edge.foreign_table_schema,
                edge.foreign_table_name,
            )
    return edges


def connect_remote_tables(
    remote_tables: Iterable[TableDef],
    home_schema: str,
    metadata_source: MetadataSource,
    tables: Mapping[str, TableDef],
    exclude_columns: Sequence[Pattern[str]] = (),
    *,
    multi_schema_mode: bool,
    cancel_event: Optional[threading.Event] = None,
) -> int:
    """Link each remote table in turn over the same metadata source.

    Tables are processed one at a time since a connection serves a single
    catalog query at once. Setting ``cancel_event`` stops the run before the
    next table; tables already linked keep their edges.

    Returns:
        Total number of edges added.
    """
    added = 0
    for table in remote_tables:
        if cancel_event is not None and cancel_event.is_set():
            logger.info("Remote table linking cancelled before %s", table.qualified_name)
            break
        added += len(
            connect_foreign_keys(
                table,
                home_schema,
                metadata_source,
                tables,
                exclude_columns,
                multi_schema_mode=multi_schema_mode,
            )
        )
    return added
