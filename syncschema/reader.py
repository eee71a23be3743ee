"""Running a query and handing its rows, one by one, to a callback."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Sequence


class NullValueError(Exception):
    """Raised by a value converter when the database value is NULL."""


Converter = Callable[[Any, str], Any]


class Reader:
    """Runs one query through ``execute`` and passes each row to a callback."""

    def __init__(
        self,
        query: str,
        batch_size: int,
        execute: Callable[..., Iterable[Any]],
        *args: Any,
    ) -> None:
        self.query = query
        self.batch_size = batch_size
        self.offset = 0
        self.args = args
        self._execute = execute

    def capture(self, on_capture: Callable[[Any], None]) -> None:
        """Execute the query and call ``on_capture`` for every row.

        The query must not end with ';'. Errors from the callback propagate.
        """
        if self.query.endswith(";"):
            raise ValueError(f"base query ends with ';': {self.query}")
        for row in self._execute(self.query, *self.args):
            on_capture(row)


def _type_name(type_code: Any) -> str:
    if type_code is None:
        return ""
    if isinstance(type_code, str):
        return type_code
    return getattr(type_code, "__name__", None) or str(type_code)


def map_scan(
    cursor: Any, row: Sequence[Any], converter: Converter | None = None
) -> dict[str, Any]:
    """Map a row to its column names using the cursor's description.

    With a converter, each value is passed through it along with the column's
    type name; a NullValueError from the converter gives None.
    """
    description = cursor.description or ()
    if len(description) != len(row):
        raise ValueError(
            f"column count mismatch: expected {len(description)}, got {len(row)}"
        )
    result: dict[str, Any] = {}
    for column, value in zip(description, row):
        name = column[0]
        if converter is None:
            result[name] = value
            continue
        try:
            result[name] = converter(value, _type_name(column[1]))
        except NullValueError:
            result[name] = None
    return result