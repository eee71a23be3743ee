"""Filtering of MySQL binlog row events into change records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Callable, Sequence

from syncschema.queries import StreamLike


class EventType(IntEnum):
    """Binlog event type codes used by the filter."""

    ROTATE_EVENT = 4
    WRITE_ROWS_EVENTv1 = 23
    UPDATE_ROWS_EVENTv1 = 24
    DELETE_ROWS_EVENTv1 = 25
    WRITE_ROWS_EVENTv2 = 30
    UPDATE_ROWS_EVENTv2 = 31
    DELETE_ROWS_EVENTv2 = 32


_OPERATIONS = {
    EventType.WRITE_ROWS_EVENTv1: "insert",
    EventType.WRITE_ROWS_EVENTv2: "insert",
    EventType.UPDATE_ROWS_EVENTv1: "update",
    EventType.UPDATE_ROWS_EVENTv2: "update",
    EventType.DELETE_ROWS_EVENTv1: "delete",
    EventType.DELETE_ROWS_EVENTv2: "delete",
}


@dataclass
class Position:
    """A binlog file name and offset."""

    name: str = ""
    pos: int = 0


@dataclass
class RowsEvent:
    """A rows event with the header fields the filter needs."""

    event_type: int
    schema: str
    table: str
    column_names: list[str]
    rows: list[list[Any]]
    timestamp: int = 0


@dataclass
class CDCChange:
    """One row change captured from the binlog."""

    stream: StreamLike
    timestamp: datetime
    position: Position
    kind: str
    schema: str
    table: str
    data: dict[str, Any] = field(default_factory=dict)


OnChange = Callable[[CDCChange], None]


def convert_row_to_map(row: Sequence[Any], columns: Sequence[str]) -> dict[str, Any]:
    """Pair each column name with the row's value."""
    if len(columns) != len(row):
        raise ValueError(f"column count mismatch: expected {len(columns)}, got {len(row)}")
    return dict(zip(columns, row))


class ChangeFilter:
    """Keeps only the row events of the configured streams."""

    def __init__(self, *streams: StreamLike) -> None:
        self.streams: dict[str, StreamLike] = {
            f"{stream.namespace}.{stream.name}": stream for stream in streams
        }

    def filter_rows_event(self, event: RowsEvent, callback: OnChange) -> None:
        """Call ``callback`` once per changed row; updates yield only after-images."""
        stream = self.streams.get(f"{event.schema}.{event.table}")
        if stream is None:
            return
        try:
            operation = _OPERATIONS[EventType(event.event_type)]
        except (ValueError, KeyError):
            return

        rows = event.rows[1::2] if operation == "update" else event.rows
        timestamp = datetime.fromtimestamp(event.timestamp, tz=timezone.utc)

        for row in rows:
            record = convert_row_to_map(row, event.column_names)
            record["cdc_type"] = operation
            callback(
                CDCChange(
                    stream=stream,
                    timestamp=timestamp,
                    position=Position(),
                    kind=operation,
                    schema=event.schema,
                    table=event.table,
                    data=record,
                )
            )