import logging
from typing import List, Optional

import sqlalchemy
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from common.interfaces.metadata_source import ImportedKeyRow
from dal.errors import MetadataAccessError
from dbtypes.descriptor import DbType
from schema import ForeignKeyRule, Procedure, qualify

logger = logging.getLogger(__name__)

PROCEDURES_SQL_KEY = "selectProceduresSql"


def _rule(action: Optional[str]) -> ForeignKeyRule:
    try:
        return ForeignKeyRule.from_action(action)
    except ValueError:
        logger.warning("Unrecognized referential action '%s'; treating as NO ACTION", action)
        return ForeignKeyRule.NO_ACTION


class SqlAlchemyMetadataSource:
    """MetadataSource backed by SQLAlchemy runtime inspection.

    Foreign keys come from ``Inspector.get_foreign_keys``; stored procedures
    come from the database type's ``selectProceduresSql`` query, which takes a
    ``:schema`` bind parameter and returns ``name`` and ``definition`` columns.
    """

    def __init__(self, engine: Engine, procedures_sql: Optional[str] = None) -> None:
        self._engine = engine
        self._procedures_sql = procedures_sql

    @classmethod
    def for_db_type(cls, engine: Engine, db_type: DbType) -> "SqlAlchemyMetadataSource":
        """Create a source using the catalog queries declared by ``db_type``."""
        return cls(engine, procedures_sql=db_type.get(PROCEDURES_SQL_KEY))

    def list_table_names(self, schema: Optional[str]) -> List[str]:
        """List the tables of ``schema`` (default schema when None)."""
        try:
            return sorted(sqlalchemy.inspect(self._engine).get_table_names(schema=schema))
        except SQLAlchemyError as exc:
            raise MetadataAccessError(f"Unable to list tables of schema {schema}: {exc}") from exc

    def get_imported_keys(self, schema: Optional[str], table: str) -> List[ImportedKeyRow]:
        """List foreign keys of ``schema.table``, one row per column pair."""
        try:
            inspector = sqlalchemy.inspect(self._engine)
            foreign_keys = inspector.get_foreign_keys(table, schema=schema)
            default_schema = inspector.default_schema_name
        except SQLAlchemyError as exc:
            raise MetadataAccessError(
                f"Unable to read foreign keys of {qualify(schema, table)}: {exc}"
            ) from exc

        rows: List[ImportedKeyRow] = []
        for foreign_key in foreign_keys:
            options = foreign_key.get("options") or {}
            update_rule = _rule(options.get("onupdate"))
            delete_rule = _rule(options.get("ondelete"))
            # Reflection leaves referred_schema empty for the connection's default schema.
            referred_schema = foreign_key.get("referred_schema") or default_schema
            for local, remote in zip(
                foreign_key["constrained_columns"], foreign_key["referred_columns"]
            ):
                rows.append(
                    ImportedKeyRow(
                        fk_name=foreign_key.get("name"),
                        fk_column_name=local,
                        pk_table_schema=referred_schema,
                        pk_table_name=foreign_key["referred_table"],
                        pk_column_name=remote,
                        update_rule=update_rule,
                        delete_rule=delete_rule,
                    )
                )
        return rows

    def list_procedures(self, schema: str) -> List[Procedure]:
        """List stored procedures of ``schema`` using the configured catalog query."""
        if not self._procedures_sql:
            raise MetadataAccessError(
                f"No {PROCEDURES_SQL_KEY} configured; cannot list procedures of {schema}"
            )

        try:
            with self._engine.connect() as conn:
                result = conn.execute(text(self._procedures_sql), {"schema": schema})
                return [
                    Procedure(schema=schema, name=row["name"], definition=row["definition"] or "")
                    for row in result.mappings()
                ]
        except SQLAlchemyError as exc:
            raise MetadataAccessError(
                f"Unable to read procedures of schema {schema}: {exc}"
            ) from exc
