import sqlite3

import pytest

from syncschema.reader import NullValueError, Reader, map_scan


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    connection.execute("CREATE TABLE items (id INTEGER, label TEXT)")
    connection.executemany(
        "INSERT INTO items VALUES (?, ?)", [(1, "a"), (2, "b"), (3, None)]
    )
    yield connection
    connection.close()


def _execute(conn):
    return lambda query, *args: conn.execute(query, args)


def test_capture_visits_every_row(conn):
    seen = []
    reader = Reader("SELECT id, label FROM items ORDER BY id", 10, _execute(conn))
    reader.capture(seen.append)
    assert [row[0] for row in seen] == [1, 2, 3]


def test_capture_passes_arguments(conn):
    seen = []
    reader = Reader("SELECT id FROM items WHERE id > ?", 10, _execute(conn), 1)
    reader.capture(seen.append)
    assert sorted(row[0] for row in seen) == [2, 3]


def test_capture_rejects_trailing_semicolon(conn):
    calls = []
    reader = Reader("SELECT id FROM items;", 10, lambda *a: calls.append(a) or [])
    with pytest.raises(ValueError, match="ends with ';'"):
        reader.capture(lambda row: None)
    assert calls == []


def test_capture_stops_on_callback_error(conn):
    seen = []

    def on_row(row):
        seen.append(row)
        raise RuntimeError("stop")

    reader = Reader("SELECT id FROM items ORDER BY id", 10, _execute(conn))
    with pytest.raises(RuntimeError, match="stop"):
        reader.capture(on_row)
    assert len(seen) == 1


def test_map_scan_without_converter(conn):
    cursor = conn.execute("SELECT id, label FROM items ORDER BY id")
    row = cursor.fetchone()
    assert map_scan(cursor, row) == {"id": 1, "label": "a"}


class _Cursor:
    description = (("id", "INT"), ("label", "VARCHAR"))


def test_map_scan_converter_receives_type_names():
    calls = []

    def convert(value, type_name):
        calls.append(type_name)
        return (type_name, value)

    result = map_scan(_Cursor(), (7, "x"), convert)
    assert calls == ["INT", "VARCHAR"]
    assert result == {"id": ("INT", 7), "label": ("VARCHAR", "x")}


def test_map_scan_null_value_becomes_none():
    def convert(value, type_name):
        if value is None:
            raise NullValueError()
        return value

    assert map_scan(_Cursor(), (5, None), convert) == {"id": 5, "label": None}


def test_map_scan_other_converter_errors_propagate():
    def convert(value, type_name):
        raise TypeError("bad value")

    with pytest.raises(TypeError, match="bad value"):
        map_scan(_Cursor(), (1, "a"), convert)


def test_map_scan_length_mismatch():
    with pytest.raises(ValueError, match="column count mismatch"):
        map_scan(_Cursor(), (1,))