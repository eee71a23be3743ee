"""Concrete schema node types: simple, numeric, array, object and map schemas."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

from syncschema.schema_base import (
    SCHEMA_TYPE_ARRAY,
    SCHEMA_TYPE_BOOLEAN,
    SCHEMA_TYPE_INTEGER,
    SCHEMA_TYPE_NUMBER,
    SCHEMA_TYPE_OBJECT,
    BasicSchema,
    _as_dict,
    _as_list,
    _as_str,
    _decode_schema,
)

_INT_PATTERN = re.compile(r"[+-]?\d+")


def _parse_int(text: str) -> int:
    """Parse a plain decimal integer, rejecting whitespace and underscores."""
    if not _INT_PATTERN.fullmatch(text):
        raise ValueError(f"invalid syntax: {text!r}")
    return int(text)


def _as_number(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"schema attribute '{key}' must be a number, got {type(value).__name__}")
    return float(value)


def _as_bool(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"schema attribute '{key}' must be a boolean, got {type(value).__name__}")
    return value


def _json_number(value: float) -> int | float:
    """Integral floats are written without a fractional part."""
    return int(value) if float(value).is_integer() else value


class SimpleSchema(BasicSchema, json_types=(SCHEMA_TYPE_BOOLEAN, "*")):
    """Schema for simple JSON values such as strings or booleans, with an optional format."""

    def __init__(self, json_type: str = "") -> None:
        super().__init__(json_type)
        self.format = ""

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        if self.format:
            out["format"] = self.format
        return out

    def _load(self, data: dict[str, Any]) -> None:
        super()._load(data)
        self.format = ""
        if "format" in data:
            self.format = _as_str("format", data["format"])


class NumericSchema(SimpleSchema, json_types=(SCHEMA_TYPE_INTEGER, SCHEMA_TYPE_NUMBER)):
    """Schema for JSON numbers and integers."""

    def __init__(self, json_type: str = SCHEMA_TYPE_NUMBER) -> None:
        super().__init__(json_type)
        self.maximum = 0.0
        self.minimum = 0.0
        self.enums: list[int] = []
        self.multiple_of = 0.0
        self.exclusive_maximum = False
        self.exclusive_minimum = False

    def set_int_enum(self, items: list[str]) -> None:
        """Append each item, parsed as an integer, to the enum values."""
        for item in items:
            try:
                value = _parse_int(item)
            except ValueError as exc:
                raise ValueError(f"failed to parse enum[{item}] in integer: {exc}") from exc
            self.enums.append(value)

    def set_default(self, value: str) -> None:
        """Set the default from its decimal text form."""
        try:
            self.default = _parse_int(value)
        except ValueError as exc:
            raise ValueError(f"failed to convert default to int: {exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        if self.maximum:
            out["maximum"] = _json_number(self.maximum)
        if self.minimum:
            out["minimum"] = _json_number(self.minimum)
        if self.enums:
            out["enum"] = list(self.enums)
        if self.multiple_of:
            out["multipleOf"] = _json_number(self.multiple_of)
        if self.exclusive_maximum:
            out["exclusiveMaximum"] = True
        if self.exclusive_minimum:
            out["exclusiveMinimum"] = True
        return out

    def _load(self, data: dict[str, Any]) -> None:
        super()._load(data)
        self.maximum = 0.0
        self.minimum = 0.0
        self.enums = []
        self.multiple_of = 0.0
        self.exclusive_maximum = False
        self.exclusive_minimum = False
        for key, value in data.items():
            if key == "maximum":
                self.maximum = _as_number(key, value)
            elif key == "minimum":
                self.minimum = _as_number(key, value)
            elif key == "multipleOf":
                self.multiple_of = _as_number(key, value)
            elif key == "exclusiveMaximum":
                self.exclusive_maximum = _as_bool(key, value)
            elif key == "exclusiveMinimum":
                self.exclusive_minimum = _as_bool(key, value)


class ArraySchema(BasicSchema, json_types=(SCHEMA_TYPE_ARRAY,)):
    """Schema for JSON arrays."""

    def __init__(self, json_type: str = SCHEMA_TYPE_ARRAY) -> None:
        super().__init__(json_type)
        self.items: BasicSchema | None = None
        self.max_items = 0
        self.min_items = 0
        self.additional_items = False
        self.unique_items = False

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        if self.items is not None:
            out["items"] = self.items.to_dict()
        if self.max_items:
            out["maxItems"] = self.max_items
        if self.min_items:
            out["minItems"] = self.min_items
        if self.additional_items:
            out["additionalItems"] = True
        if self.unique_items:
            out["uniqueItems"] = True
        return out

    def _load(self, data: dict[str, Any]) -> None:
        super()._load(data)
        self.items = None
        self.max_items = 0
        self.min_items = 0
        self.additional_items = False
        self.unique_items = False
        for key, value in data.items():
            if key == "items":
                self.items = _decode_schema(value)
            elif key == "maxItems":
                self.max_items = int(_as_number(key, value))
            elif key == "minItems":
                self.min_items = int(_as_number(key, value))
            elif key == "additionalItems":
                self.additional_items = _as_bool(key, value)
            elif key == "uniqueItems":
                self.unique_items = _as_bool(key, value)


@dataclass
class BoolOrSchema:
    """A value that is either a boolean or a schema, such as ``additionalProperties``."""

    boolean: bool = False
    schema: BasicSchema | None = None

    @classmethod
    def from_value(cls, value: Any) -> BoolOrSchema:
        """Build from a schema, a schema's JSON object or a bool; anything else is empty."""
        if isinstance(value, BasicSchema):
            return cls(schema=value)
        if isinstance(value, bool):
            return cls(boolean=value)
        if isinstance(value, dict):
            return cls(boolean=True, schema=_decode_schema(value))
        return cls()

    def to_json_value(self) -> Any:
        """The JSON form: the schema's object when set, otherwise the boolean."""
        if self.schema is not None:
            return self.schema.to_dict()
        return bool(self.boolean)


class ObjectSchema(BasicSchema, json_types=(SCHEMA_TYPE_OBJECT,)):
    """Schema for JSON objects."""

    def __init__(self, suppress_x_attrs: bool = False) -> None:
        super().__init__(SCHEMA_TYPE_OBJECT)
        self.properties: dict[str, BasicSchema | None] = {}
        self.required: list[str] = []
        self.max_properties = 0
        self.min_properties = 0
        self.additional_properties: BoolOrSchema | None = None
        self.go_path = ""
        self.suppress_x_attrs = suppress_x_attrs

    def add_required_field(self, field_name: str) -> None:
        self.required.append(field_name)

    def set_go_path(self, path: str) -> None:
        """Record the source type path, unless non-standard attributes are suppressed."""
        self.go_path = "" if self.suppress_x_attrs else path

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        if self.properties:
            out["properties"] = {
                key: (None if self.properties[key] is None else self.properties[key].to_dict())
                for key in sorted(self.properties)
            }
        if self.required:
            out["required"] = list(self.required)
        if self.max_properties:
            out["maxProperties"] = self.max_properties
        if self.min_properties:
            out["minProperties"] = self.min_properties
        if self.additional_properties is not None:
            out["additionalProperties"] = self.additional_properties.to_json_value()
        if self.go_path:
            out["x-go-path"] = self.go_path
        return out

    def _load(self, data: dict[str, Any]) -> None:
        super()._load(data)
        self.properties = {}
        self.required = []
        for key, value in data.items():
            if key == "maxProperties":
                self.max_properties = int(_as_number(key, value))
            elif key == "minProperties":
                self.min_properties = int(_as_number(key, value))
            elif key == "additionalProperties":
                self.additional_properties = BoolOrSchema.from_value(value)
            elif key == "properties":
                self.properties = {
                    name: _decode_schema(item) for name, item in _as_dict(key, value).items()
                }
            elif key == "required":
                self.required = [_as_str(key, item) for item in _as_list(key, value)]


def new_map_schema(suppress_x_attrs: bool = False) -> ObjectSchema:
    """An object schema that allows any additional properties."""
    schema = ObjectSchema(suppress_x_attrs)
    schema.additional_properties = BoolOrSchema(boolean=True)
    return schema


def from_dict(data: Any) -> BasicSchema | None:
    """Decode a schema from its JSON object, choosing the class from ``type``.

    Returns None when the object has neither a type nor a reference.
    """
    return _decode_schema(data)


def from_json(text: str | bytes) -> BasicSchema | None:
    """Decode a schema from JSON text."""
    return from_dict(json.loads(text))