"""Core JSON-schema node types: spec versions, type lists and the basic schema."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

DEFINITION_ROOT = "#/definitions/"

SCHEMA_TYPE_OBJECT = "object"
SCHEMA_TYPE_INTEGER = "integer"
SCHEMA_TYPE_NUMBER = "number"
SCHEMA_TYPE_BOOLEAN = "boolean"
SCHEMA_TYPE_STRING = "string"
SCHEMA_TYPE_ARRAY = "array"

_FALLBACK_KEY = "*"


class SpecVersion(str, Enum):
    """URIs of the JSON-schema specification versions."""

    CURRENT = "http://json-schema.org/schema#"
    CURRENT_HYPER = "http://json-schema.org/hyper-schema#"
    DRAFT_V4 = "http://json-schema.org/draft-04/schema#"
    V2020_12 = "https://json-schema.org/draft/2020-12/schema"
    DRAFT_V4_HYPER = "http://json-schema.org/draft-04/hyper-schema#"


@dataclass
class StringOrArray:
    """A value that is either a single string or a list of strings, such as ``type``."""

    string: str = ""
    array: list[str] = field(default_factory=list)

    @classmethod
    def from_value(cls, value: Any) -> StringOrArray:
        """Build from a string or a list of strings; anything else gives an empty value."""
        if isinstance(value, str):
            return cls(string=value)
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return cls(array=list(value))
        return cls()

    def to_json_value(self) -> str | list[str]:
        """The JSON form: the list when it is non-empty, otherwise the string."""
        if self.array:
            return list(self.array)
        return self.string


def _as_str(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"schema attribute '{key}' must be a string, got {type(value).__name__}")
    return value


def _as_list(key: str, value: Any) -> list:
    if not isinstance(value, list):
        raise ValueError(f"schema attribute '{key}' must be an array, got {type(value).__name__}")
    return value


def _as_dict(key: str, value: Any) -> dict:
    if not isinstance(value, dict):
        raise ValueError(f"schema attribute '{key}' must be an object, got {type(value).__name__}")
    return value


def _schema_to_json_value(schema: BasicSchema | None) -> Any:
    return None if schema is None else schema.to_dict()


class BasicSchema:
    """The attributes shared by every JSON schema."""

    _registry: ClassVar[dict[str, type[BasicSchema]]] = {}

    def __init_subclass__(cls, json_types: tuple[str, ...] = (), **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for json_type in json_types:
            BasicSchema._registry[json_type] = cls

    def __init__(self, json_type: str = "") -> None:
        self.schema_uri = ""
        self.id = ""
        self.ref = ""
        self.type: StringOrArray | None = None
        self.title = ""
        self.description = ""
        self.all_of: list[BasicSchema | None] = []
        self.any_of: list[BasicSchema | None] = []
        self.one_of: list[BasicSchema | None] = []
        self.not_: BasicSchema | None = None
        self.definitions: dict[str, BasicSchema | None] = {}
        self.default: Any = None
        self.const: Any = None
        self.set_type(json_type)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BasicSchema):
            return NotImplemented
        return type(self) is type(other) and self.to_dict() == other.to_dict()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_dict()!r})"

    def clone(self) -> BasicSchema:
        """A shallow copy: scalar attributes are independent, nested containers shared."""
        return copy.copy(self)

    def add_definition(self, key: str, definition: BasicSchema | None) -> None:
        self.definitions[key] = definition

    def set_type(self, type_list: str) -> None:
        """Set the type from a comma separated list; a blank list leaves it unchanged."""
        if not type_list.strip():
            return
        parts = type_list.split(",")
        if len(parts) > 1:
            self.type = StringOrArray(array=parts)
        else:
            self.type = StringOrArray(string=parts[0])

    def set_enum(self, items: list[str]) -> None:
        """String enums are not supported on a basic schema; this does nothing."""

    def set_int_enum(self, items: list[str]) -> None:
        """Integer enums are not supported on a basic schema; this does nothing."""

    def set_default(self, value: str) -> None:
        self.default = value

    def to_dict(self) -> dict[str, Any]:
        """The JSON object for this schema, leaving out empty attributes."""
        out: dict[str, Any] = {}
        if self.schema_uri:
            out["$schema"] = self.schema_uri
        if self.id:
            out["id"] = self.id
        if self.ref:
            out["$ref"] = self.ref
        if self.type is not None:
            out["type"] = self.type.to_json_value()
        if self.title:
            out["title"] = self.title
        if self.description:
            out["description"] = self.description
        for key, items in (("allOf", self.all_of), ("anyOf", self.any_of), ("oneOf", self.one_of)):
            if items:
                out[key] = [_schema_to_json_value(item) for item in items]
        if self.not_ is not None:
            out["not"] = self.not_.to_dict()
        if self.definitions:
            out["definitions"] = {
                key: _schema_to_json_value(self.definitions[key]) for key in sorted(self.definitions)
            }
        if self.default is not None:
            out["default"] = self.default
        if self.const is not None:
            out["const"] = self.const
        return out

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BasicSchema:
        """Build a schema of this class from its JSON object."""
        schema = cls()
        schema._load(_as_dict("schema", data))
        return schema

    def _load(self, data: dict[str, Any]) -> None:
        self.schema_uri = ""
        self.id = ""
        self.ref = ""
        self.type = None
        self.title = ""
        self.description = ""
        self.all_of = []
        self.any_of = []
        self.one_of = []
        self.not_ = None
        self.definitions = {}

        for key, value in data.items():
            if key == "$schema":
                self.schema_uri = _as_str(key, value)
            elif key == "id":
                self.id = _as_str(key, value)
            elif key == "$ref":
                self.ref = _as_str(key, value)
            elif key == "type":
                self.type = StringOrArray.from_value(value)
            elif key == "title":
                self.title = _as_str(key, value)
            elif key == "description":
                self.description = _as_str(key, value)
            elif key == "allOf":
                self.all_of = [_decode_schema(item) for item in _as_list(key, value)]
            elif key == "anyOf":
                self.any_of = [_decode_schema(item) for item in _as_list(key, value)]
            elif key == "oneOf":
                self.one_of = [_decode_schema(item) for item in _as_list(key, value)]
            elif key == "not":
                self.not_ = _decode_schema(value)
            elif key == "definitions":
                self.definitions = {
                    name: _decode_schema(item) for name, item in _as_dict(key, value).items()
                }


def _decode_schema(data: Any) -> BasicSchema | None:
    """Decode a schema object, choosing its class from ``type``; a ``$ref`` wins.

    Returns None when the object has neither a type nor a reference.
    """
    data = _as_dict("schema", data)
    result: BasicSchema | None = None
    if "type" in data:
        json_type = data["type"]
        target = BasicSchema._registry.get(json_type) if isinstance(json_type, str) else None
        if target is None:
            target = BasicSchema._registry.get(_FALLBACK_KEY, BasicSchema)
        result = target.from_dict(data)
    if "$ref" in data:
        result = BasicSchema()
        result.ref = _as_str("$ref", data["$ref"])
    return result