from dataclasses import dataclass

import pytest

from syncschema.queries import (
    Chunk,
    build_chunk_condition,
    min_max_query,
    mysql_chunk_scan_query,
    mysql_discover_tables_query,
    mysql_master_status_query,
    mysql_primary_key_query,
    mysql_table_columns_query,
    mysql_table_rows_query,
    mysql_table_schema_query,
    next_chunk_end_query,
    postgres_chunk_scan_query,
    postgres_min_query,
    postgres_next_chunk_end_query,
    postgres_rel_page_count,
    postgres_row_count_query,
    postgres_wal_lsn_query,
    postgres_with_state,
    postgres_without_state,
)


@dataclass
class _Stream:
    namespace: str = "shop"
    name: str = "orders"
    cursor: str = "updated_at"


STREAM = _Stream()


def test_min_max_query_exact():
    assert min_max_query(STREAM, "id") == (
        "SELECT MIN(id) AS min_value, MAX(id) AS max_value FROM shop.orders"
    )


def test_next_chunk_end_query_has_parameter_and_limit():
    query = next_chunk_end_query(STREAM, "id", 500)
    assert query.count("?") == 1
    assert "LIMIT 500" in query
    assert "shop.orders" in query
    assert query.endswith("AS subquery")


def test_chunk_condition_both_bounds():
    assert build_chunk_condition("id", Chunk(min=1, max=10)) == "id >= 1 AND id <= 10"


def test_chunk_condition_open_bounds():
    lower = build_chunk_condition("id", Chunk(min=5))
    upper = build_chunk_condition("id", Chunk(max=7))
    assert " >= " in lower and "<=" not in lower
    assert " <= " in upper and ">=" not in upper
    assert lower.endswith("5")
    assert upper.endswith("7")


def test_chunk_condition_renders_bool_lowercase():
    assert build_chunk_condition("flag", Chunk(min=True)).endswith("true")


def test_postgres_without_state_orders_by_cursor():
    query = postgres_without_state(STREAM)
    assert query.startswith("SELECT * FROM")
    assert query.endswith("ORDER BY updated_at")
    assert '"shop"."orders"' in query


def test_postgres_with_state_uses_placeholder():
    query = postgres_with_state(STREAM)
    assert "$1" in query
    assert query.endswith("ASC NULLS FIRST")
    assert query.count('"updated_at"') == 2


def test_postgres_counts_mention_table_and_schema():
    for query in (postgres_row_count_query(STREAM), postgres_rel_page_count(STREAM)):
        assert "'orders'" in query
        assert "'shop'" in query
    assert postgres_row_count_query(STREAM).endswith(";")


def test_postgres_wal_lsn_query():
    assert postgres_wal_lsn_query() == "SELECT pg_current_wal_lsn()::text::pg_lsn"


def test_postgres_next_chunk_end_and_min():
    end = postgres_next_chunk_end_query(STREAM, "id", 42, 100)
    assert "> 42" in end
    assert "LIMIT 100" in end
    assert end.endswith("AS T")
    low = postgres_min_query(STREAM, "id", 42)
    assert low.startswith("SELECT MIN(id)")
    assert low.endswith("> 42")


@pytest.mark.parametrize("chunk", [Chunk(1, 9), Chunk(min=3), Chunk(max=4)])
def test_chunk_scans_embed_condition(chunk):
    condition = build_chunk_condition("id", chunk)
    pg = postgres_chunk_scan_query(STREAM, "id", chunk)
    my = mysql_chunk_scan_query(STREAM, "id", chunk)
    assert pg.endswith("WHERE " + condition)
    assert my.endswith("WHERE " + condition)
    assert '"shop"."orders"' in pg
    assert "`shop`.`orders`" in my


def test_mysql_master_status():
    assert mysql_master_status_query() == "SHOW MASTER STATUS"


def test_mysql_static_queries_placeholders():
    assert mysql_discover_tables_query().count("?") == 1
    assert mysql_table_schema_query().count("?") == 2
    assert mysql_primary_key_query().count("?") == 1
    assert mysql_table_rows_query().count("?") == 1
    assert mysql_table_columns_query().count("?") == 2
    assert "'PRIMARY'" in mysql_primary_key_query()
    assert "'BASE TABLE'" in mysql_discover_tables_query()
    assert "ORDINAL_POSITION" in mysql_table_schema_query()