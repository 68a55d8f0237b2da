import argparse
import logging
import sys
from typing import Dict, List, Optional

from common.config.run_config import RunConfig, parse_connection_options
from dal.connection_url import ConnectionParams, build_connection_url
from dal.errors import MetadataAccessError
from dal.remote_table_reader import connect_remote_tables
from dbtypes import (
    DbTypeConfigurationError,
    DescriptorResolver,
    MissingRequiredOption,
    format_usage,
    list_bundled_types,
)
from schema import TableDef

logger = logging.getLogger(__name__)


def _add_connection_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-t", "--db-type", help="Database type name or descriptor file (DB_TYPE)")
    parser.add_argument("--host", help="Database host (DB_HOST)")
    parser.add_argument("--port", type=int, help="Database port (DB_PORT)")
    parser.add_argument("-d", "--database", help="Database name (DB_NAME)")
    parser.add_argument("--instance", help="Database instance (DB_INSTANCE)")
    parser.add_argument(
        "--connection-options",
        help='Extra connection template values, "key=value;key=value" (DB_CONNECTION_OPTIONS)',
    )


def _merge_config(args: argparse.Namespace) -> RunConfig:
    """Overlay command line arguments on the environment configuration."""
    config = RunConfig.from_env()
    updates: Dict[str, object] = {}
    for field_name, value in (
        ("db_type", args.db_type),
        ("host", args.host),
        ("port", str(args.port) if args.port is not None else None),
        ("database", args.database),
        ("instance", args.instance),
    ):
        if value is not None:
            updates[field_name] = value
    if args.connection_options is not None:
        options = dict(config.connection_options)
        options.update(parse_connection_options(args.connection_options))
        updates["connection_options"] = options

    if getattr(args, "schema", None) is not None:
        updates["schema_name"] = args.schema
    if getattr(args, "multi_schema", False):
        updates["one_of_multiple_schemas"] = True
    if getattr(args, "exclude_columns", None):
        updates["exclude_columns"] = list(config.exclude_columns) + args.exclude_columns
    return config.model_copy(update=updates)


def _require_db_type(config: RunConfig) -> str:
    if not config.db_type:
        raise DbTypeConfigurationError("No database type given; use --db-type or set DB_TYPE")
    return config.db_type


def _split_table(name: str) -> TableDef:
    schema, dot, table = name.rpartition(".")
    if not dot:
        raise ValueError(f"Remote table '{name}' must be given as schema.table")
    return TableDef(name=table, table_schema=schema, is_remote=True)


def run_link(config: RunConfig, remote_table_names: List[str]) -> List[TableDef]:
    """Connect the given remote tables to the tables of the home schema."""
    from sqlalchemy import create_engine

    from dal.sqlalchemy import SqlAlchemyMetadataSource

    if not config.schema_name:
        raise DbTypeConfigurationError("No home schema given; use --schema or set DB_SCHEMA")

    db_type = DescriptorResolver(cache=True).resolve(_require_db_type(config))
    url = build_connection_url(db_type, ConnectionParams.from_run_config(config))
    engine = create_engine(url)
    try:
        source = SqlAlchemyMetadataSource.for_db_type(engine, db_type)
        tables: Dict[str, TableDef] = {}
        for name in source.list_table_names(config.schema_name):
            table = TableDef(name=name, table_schema=config.schema_name)
            tables[table.qualified_name] = table

        remote_tables = [_split_table(name) for name in remote_table_names]
        for table in remote_tables:
            tables.setdefault(table.qualified_name, table)

        added = connect_remote_tables(
            remote_tables,
            config.schema_name,
            source,
            tables,
            config.exclude_patterns(),
            multi_schema_mode=config.multi_schema_mode,
        )
        logger.info(f"Linked {len(remote_tables)} remote tables with {added} foreign keys")
        return remote_tables
    finally:
        engine.dispose()


def main(argv: Optional[List[str]] = None) -> None:
    """Run the schemadoc CLI."""
    parser = argparse.ArgumentParser(description="Database type and schema linking CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("types", help="List bundled database types")

    describe_parser = subparsers.add_parser("describe", help="Show the options a type needs")
    describe_parser.add_argument("type_name", help="Database type name or descriptor file")

    url_parser = subparsers.add_parser("url", help="Print the connection URL for a type")
    _add_connection_arguments(url_parser)

    link_parser = subparsers.add_parser(
        "link", help="Connect remote tables' foreign keys back to the home schema"
    )
    _add_connection_arguments(link_parser)
    link_parser.add_argument("-s", "--schema", help="Home schema (DB_SCHEMA)")
    link_parser.add_argument(
        "--remote-table",
        action="append",
        default=[],
        dest="remote_tables",
        help="Remote table as schema.table (repeatable)",
    )
    link_parser.add_argument(
        "--multi-schema",
        action="store_true",
        help="Treat failures reading remote tables as fatal (DB_MULTI_SCHEMA)",
    )
    link_parser.add_argument(
        "--exclude-columns",
        action="append",
        default=[],
        help="Regex of columns to leave out of relationships (repeatable)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        if args.command == "types":
            for name in list_bundled_types():
                print(name)
        elif args.command == "describe":
            print(format_usage(DescriptorResolver().resolve(args.type_name)), end="")
        elif args.command == "url":
            config = _merge_config(args)
            db_type = DescriptorResolver().resolve(_require_db_type(config))
            print(build_connection_url(db_type, ConnectionParams.from_run_config(config)))
        elif args.command == "link":
            config = _merge_config(args)
            for table in run_link(config, args.remote_tables):
                for edge in table.foreign_keys:
                    print(
                        f"{table.qualified_name}.{edge.column_name} -> "
                        f"{edge.foreign_table_schema}.{edge.foreign_table_name}."
                        f"{edge.foreign_column_name}"
                    )
        else:
            parser.print_help()
    except (DbTypeConfigurationError, MissingRequiredOption, ValueError) as e:
        logger.error(str(e))
        sys.exit(1)
    except MetadataAccessError as e:
        logger.error(f"Reading catalog metadata failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
