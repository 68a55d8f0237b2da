"""Tests for the SQLAlchemy-backed metadata source against in-memory SQLite."""

import pytest
from sqlalchemy import create_engine, text

from common.interfaces.metadata_source import ImportedKeyRow, MetadataSource
from dal.errors import MetadataAccessError
from dal.sqlalchemy import SqlAlchemyMetadataSource
from dbtypes import resolve
from schema import ForeignKeyRule, Procedure

PROCEDURES_SQL = (
    "select name, sql as definition from sqlite_master "
    "where type = 'table' and :schema = 'main' order by name"
)


@pytest.fixture
def engine():
    engine = create_engine("sqlite://")
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE users (id INTEGER PRIMARY KEY)"))
        conn.execute(
            text(
                "CREATE TABLE orders ("
                "id INTEGER PRIMARY KEY, "
                "user_id INTEGER, "
                "CONSTRAINT fk_orders_user FOREIGN KEY (user_id) REFERENCES users (id) "
                "ON DELETE CASCADE)"
            )
        )
    yield engine
    engine.dispose()


def test_is_a_metadata_source(engine):
    assert isinstance(SqlAlchemyMetadataSource(engine), MetadataSource)


def test_imported_keys_map_reflection(engine):
    source = SqlAlchemyMetadataSource(engine)

    rows = source.get_imported_keys(None, "orders")

    assert rows == [
        ImportedKeyRow(
            fk_name="fk_orders_user",
            fk_column_name="user_id",
            pk_table_schema="main",
            pk_table_name="users",
            pk_column_name="id",
            update_rule=ForeignKeyRule.NO_ACTION,
            delete_rule=ForeignKeyRule.CASCADE,
        )
    ]


def test_table_without_foreign_keys(engine):
    assert SqlAlchemyMetadataSource(engine).get_imported_keys(None, "users") == []


def test_list_table_names(engine):
    assert SqlAlchemyMetadataSource(engine).list_table_names(None) == ["orders", "users"]


def test_driver_errors_are_wrapped(engine):
    source = SqlAlchemyMetadataSource(engine)

    with pytest.raises(MetadataAccessError) as exc_info:
        source.get_imported_keys("no_such_schema", "orders")

    assert exc_info.value.__cause__ is not None


def test_procedures_need_a_catalog_query(engine):
    with pytest.raises(MetadataAccessError):
        SqlAlchemyMetadataSource(engine).list_procedures("main")


def test_procedures_from_catalog_query(engine):
    source = SqlAlchemyMetadataSource(engine, procedures_sql=PROCEDURES_SQL)

    procedures = source.list_procedures("main")

    assert [p.name for p in procedures] == ["orders", "users"]
    assert procedures[1] == Procedure(
        schema="main", name="users", definition="CREATE TABLE users (id INTEGER PRIMARY KEY)"
    )
    assert all(p.schema == "main" for p in procedures)


def test_bad_catalog_query_is_wrapped(engine):
    source = SqlAlchemyMetadataSource(engine, procedures_sql="select nope from nowhere")

    with pytest.raises(MetadataAccessError):
        source.list_procedures("main")


def test_for_db_type_uses_declared_query(engine):
    source = SqlAlchemyMetadataSource.for_db_type(engine, resolve("sqlite"))

    with pytest.raises(MetadataAccessError):
        source.list_procedures("main")
