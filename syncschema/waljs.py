"""Filtering of wal2json logical-replication messages into change records."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from syncschema.queries import StreamLike
from syncschema.reader import Converter, NullValueError

REPLICATION_SLOT_TEMPLATE = (
    "SELECT plugin, slot_type, confirmed_flush_lsn FROM pg_replication_slots "
    "WHERE slot_name = '%s'"
)

PLUGIN_ARGUMENTS = (
    "\"include-lsn\" 'on'",
    "\"pretty-print\" 'off'",
    "\"include-timestamp\" 'on'",
)


@dataclass
class WALState:
    """The saved replication position of a PostgreSQL stream."""

    lsn: str = ""

    def is_empty(self) -> bool:
        """True when no position has been recorded."""
        return not self.lsn


@dataclass
class CDCChange:
    """One row change read from the write-ahead log."""

    stream: StreamLike
    timestamp: Any
    lsn: int
    kind: str
    schema: str
    table: str
    data: dict[str, Any] = field(default_factory=dict)


OnMessage = Callable[[CDCChange], None]


def _stream_key(namespace: str, name: str) -> tuple[str, str]:
    return namespace, name


class ChangeFilter:
    """Keeps only the changes of the configured streams and converts their values."""

    def __init__(self, converter: Converter, *streams: StreamLike) -> None:
        self.converter = converter
        self.tables: dict[tuple[str, str], StreamLike] = {
            _stream_key(stream.namespace, stream.name): stream for stream in streams
        }

    def _build_data(
        self, values: Sequence[Any], types: Sequence[str], names: Sequence[str]
    ) -> dict[str, Any]:
        if len(types) < len(values) or len(names) < len(values):
            raise ValueError(
                f"column metadata mismatch: {len(values)} values, "
                f"{len(types)} types, {len(names)} names"
            )
        data: dict[str, Any] = {}
        for value, column_type, name in zip(values, types, names):
            try:
                data[name] = self.converter(value, column_type)
            except NullValueError:
                data[name] = None
        return data

    def filter_change(
        self, lsn: int, change: str | bytes, on_filtered: OnMessage
    ) -> None:
        """Decode one wal2json message and pass each matching change to ``on_filtered``."""
        try:
            message = json.loads(change)
            if not isinstance(message, dict):
                raise ValueError("message is not a JSON object")
        except ValueError as exc:
            raise ValueError(f"failed to parse change received from wal logs: {exc}") from exc

        entries = message.get("change") or []
        timestamp = message.get("timestamp")

        for entry in entries:
            schema = entry.get("schema", "")
            table = entry.get("table", "")
            stream = self.tables.get(_stream_key(schema, table))
            if stream is None:
                continue

            kind = entry.get("kind", "")
            try:
                if kind == "delete":
                    old_keys = entry.get("oldkeys") or {}
                    data = self._build_data(
                        old_keys.get("keyvalues") or [],
                        old_keys.get("keytypes") or [],
                        old_keys.get("keynames") or [],
                    )
                else:
                    data = self._build_data(
                        entry.get("columnvalues") or [],
                        entry.get("columntypes") or [],
                        entry.get("columnnames") or [],
                    )
            except Exception as exc:
                raise ValueError(f"failed to convert change data: {exc}") from exc

            record = CDCChange(
                stream=stream,
                timestamp=timestamp,
                lsn=lsn,
                kind=kind,
                schema=schema,
                table=table,
                data=data,
            )
            try:
                on_filtered(record)
            except Exception as exc:
                raise RuntimeError(f"failed to write filtered change: {exc}") from exc