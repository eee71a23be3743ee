"""SQL text for chunked table scans, row counts and discovery on PostgreSQL and MySQL."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


class StreamLike(Protocol):
    """What the query builders need from a stream: its schema, table and cursor field."""

    @property
    def namespace(self) -> str: ...

    @property
    def name(self) -> str: ...

    @property
    def cursor(self) -> str: ...


@dataclass(frozen=True)
class Chunk:
    """A range of values of the filter column; either bound may be open (None)."""

    min: Any = None
    max: Any = None


def _sql_value(value: Any) -> str:
    """Render a value the way it is spliced into query text."""
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


def min_max_query(stream: StreamLike, column: str) -> str:
    """The query for the MIN and MAX values of a column."""
    return (
        f"SELECT MIN({column}) AS min_value, MAX({column}) AS max_value "
        f"FROM {stream.namespace}.{stream.name}"
    )


def next_chunk_end_query(stream: StreamLike, column: str, chunk_size: int) -> str:
    """The query for the end of the next chunk after a bound given as a parameter."""
    return (
        f"SELECT MAX({column}) FROM (SELECT {column} FROM {stream.namespace}.{stream.name} "
        f"WHERE {column} > ? ORDER BY {column} LIMIT {chunk_size}) AS subquery"
    )


def build_chunk_condition(filter_column: str, chunk: Chunk) -> str:
    """The WHERE condition selecting the rows of one chunk."""
    if chunk.min is not None and chunk.max is not None:
        return (
            f"{filter_column} >= {_sql_value(chunk.min)} AND "
            f"{filter_column} <= {_sql_value(chunk.max)}"
        )
    if chunk.min is not None:
        return f"{filter_column} >= {_sql_value(chunk.min)}"
    return f"{filter_column} <= {_sql_value(chunk.max)}"


def postgres_without_state(stream: StreamLike) -> str:
    """A full scan ordered by the stream's cursor field."""
    return f'SELECT * FROM "{stream.namespace}"."{stream.name}" ORDER BY {stream.cursor}'


def postgres_with_state(stream: StreamLike) -> str:
    """A scan of rows past the saved cursor value, given as parameter $1."""
    return (
        f'SELECT * FROM "{stream.namespace}"."{stream.name}" where "{stream.cursor}">$1 '
        f'ORDER BY "{stream.cursor}" ASC NULLS FIRST'
    )


def postgres_row_count_query(stream: StreamLike) -> str:
    """The planner's estimated row count for the table."""
    return (
        "SELECT reltuples::bigint AS approx_row_count FROM pg_class c "
        "JOIN pg_namespace n ON n.oid = c.relnamespace "
        f"WHERE c.relname = '{stream.name}' AND n.nspname = '{stream.namespace}';"
    )


def postgres_rel_page_count(stream: StreamLike) -> str:
    """The number of pages the table occupies."""
    return (
        f"SELECT relpages FROM pg_class WHERE relname = '{stream.name}' AND relnamespace = "
        f"(SELECT oid FROM pg_namespace WHERE nspname = '{stream.namespace}')"
    )


def postgres_wal_lsn_query() -> str:
    """The current write-ahead log position."""
    return "SELECT pg_current_wal_lsn()::text::pg_lsn"


def postgres_next_chunk_end_query(
    stream: StreamLike, filter_column: str, filter_value: Any, batch_size: int
) -> str:
    """The largest filter value among the next ``batch_size`` rows after ``filter_value``."""
    return (
        f"SELECT MAX({filter_column}) FROM (SELECT {filter_column} FROM "
        f'"{stream.namespace}"."{stream.name}" WHERE {filter_column} > {_sql_value(filter_value)} '
        f"ORDER BY {filter_column} ASC LIMIT {batch_size}) AS T"
    )


def postgres_min_query(stream: StreamLike, filter_column: str, filter_value: Any) -> str:
    """The smallest filter value greater than ``filter_value``."""
    return (
        f'SELECT MIN({filter_column}) FROM "{stream.namespace}"."{stream.name}" '
        f"WHERE {filter_column} > {_sql_value(filter_value)}"
    )


def postgres_chunk_scan_query(stream: StreamLike, filter_column: str, chunk: Chunk) -> str:
    """A scan of one chunk of a PostgreSQL table."""
    condition = build_chunk_condition(filter_column, chunk)
    return f'SELECT * FROM "{stream.namespace}"."{stream.name}" WHERE {condition}'


def mysql_chunk_scan_query(stream: StreamLike, filter_column: str, chunk: Chunk) -> str:
    """A scan of one chunk of a MySQL table."""
    condition = build_chunk_condition(filter_column, chunk)
    return f"SELECT * FROM `{stream.namespace}`.`{stream.name}` WHERE {condition}"


def mysql_discover_tables_query() -> str:
    """The base tables of the schema given as a parameter."""
    return (
        "\n\t\tSELECT \n"
        "\t\t\tTABLE_NAME, \n"
        "\t\t\tTABLE_SCHEMA \n"
        "\t\tFROM \n"
        "\t\t\tINFORMATION_SCHEMA.TABLES \n"
        "\t\tWHERE \n"
        "\t\t\tTABLE_SCHEMA = ? \n"
        "\t\t\tAND TABLE_TYPE = 'BASE TABLE'\n"
        "\t"
    )


def mysql_table_schema_query() -> str:
    """The columns of a table, with types, nullability and keys, in ordinal order."""
    return (
        "\n\t\tSELECT \n"
        "\t\t\tCOLUMN_NAME, \n"
        "\t\t\tCOLUMN_TYPE,\n"
        "\t\t\tDATA_TYPE, \n"
        "\t\t\tIS_NULLABLE,\n"
        "\t\t\tCOLUMN_KEY\n"
        "\t\tFROM \n"
        "\t\t\tINFORMATION_SCHEMA.COLUMNS \n"
        "\t\tWHERE \n"
        "\t\t\tTABLE_SCHEMA = ? AND TABLE_NAME = ?\n"
        "\t\tORDER BY \n"
        "\t\t\tORDINAL_POSITION\n"
        "\t"
    )


def mysql_primary_key_query() -> str:
    """The first primary-key column of a table in the current database."""
    return (
        "\n        SELECT COLUMN_NAME \n"
        "        FROM INFORMATION_SCHEMA.KEY_COLUMN_USAGE \n"
        "        WHERE TABLE_SCHEMA = DATABASE() \n"
        "        AND TABLE_NAME = ? \n"
        "        AND CONSTRAINT_NAME = 'PRIMARY' \n"
        "        LIMIT 1\n"
        "\t"
    )


def mysql_table_rows_query() -> str:
    """The estimated row count of a table in the current database."""
    return (
        "\n\t\tSELECT TABLE_ROWS\n"
        "\t\tFROM INFORMATION_SCHEMA.TABLES\n"
        "\t\tWHERE TABLE_SCHEMA = DATABASE()\n"
        "\t\tAND TABLE_NAME = ?\n"
        "\t"
    )


def mysql_master_status_query() -> str:
    """The current binlog file and position."""
    return "SHOW MASTER STATUS"


def mysql_table_columns_query() -> str:
    """The column names of a table in ordinal order."""
    return (
        "\n\t\tSELECT COLUMN_NAME \n"
        "\t\tFROM INFORMATION_SCHEMA.COLUMNS \n"
        "\t\tWHERE TABLE_SCHEMA = ? AND TABLE_NAME = ? \n"
        "\t\tORDER BY ORDINAL_POSITION\n"
        "\t"
    )