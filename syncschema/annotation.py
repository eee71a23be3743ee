"""Parsing of ``@jsonSchema(...)`` annotations and helpers for type names."""

from __future__ import annotations

import json
import re
import unicodedata
from dataclasses import dataclass, field
from typing import Callable

ANNOTATION_NAME = "jsonSchema"

BUILTIN_TYPES: dict[str, str] = {
    "string": "string",
    "bool": "boolean",
    "float32": "number",
    "float64": "number",
    "int": "integer",
    "int8": "integer",
    "int16": "integer",
    "int32": "integer",
    "int64": "integer",
    "uint": "integer",
    "uint8": "integer",
    "uint16": "integer",
    "uint32": "integer",
    "uint64": "integer",
    "time.Time": "string",
    "net.IP": "string",
    "url.URL": "string",
    "[]byte": "string",
}

JSON_TYPES: dict[str, tuple[str, ...]] = {
    "string": ("string", "time.Time", "net.IP", "url.URL", "[]byte"),
    "boolean": ("bool",),
    "number": ("float32", "float64"),
    "integer": (
        "int", "int8", "int16", "int32", "int64",
        "uint", "uint8", "uint16", "uint32", "uint64",
    ),
    "array": (),
}

_TRUE_WORDS = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_WORDS = {"0", "f", "F", "FALSE", "false", "False"}
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_.]*")
_KEY_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class AnnotationError(ValueError):
    """Raised when an annotation cannot be parsed or holds an invalid attribute."""


@dataclass
class BoolOrPath:
    """A boolean, or a JSON type or package type path."""

    is_bool: bool
    boolean: bool = False
    path: str = ""


def _parse_bool(text: str) -> bool:
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise ValueError(f"parsing {text!r}: invalid syntax")


def _parse_float(text: str) -> float:
    if not text or any(ch.isspace() or ch == "_" for ch in text):
        raise ValueError(f"parsing {text!r}: invalid syntax")
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"parsing {text!r}: invalid syntax") from None


def _parse_int(text: str) -> int:
    if not _INT_PATTERN.fullmatch(text):
        raise ValueError(f"parsing {text!r}: invalid syntax")
    return int(text)


def _convert(kind: str, label: str, text: str, parse: Callable[[str], object]) -> object:
    try:
        return parse(text)
    except ValueError as exc:
        raise AnnotationError(f"error setting @jsonSchema '{label}': {exc}") from exc


@dataclass
class SchemaAnnotation:
    """The validated attributes of one ``@jsonSchema`` annotation."""

    attrs: dict[str, list[str]] = field(default_factory=dict)
    required: bool = False
    id: str = ""
    description: str = ""
    definition: str = ""
    format: str = ""
    title: str = ""
    default_value: str = ""
    const_value: str = ""
    maximum: float = 0.0
    exclusive_maximum: bool = False
    minimum: float = 0.0
    exclusive_minimum: bool = False
    max_length: int = 0
    min_length: int = 0
    pattern: str = ""
    max_items: int = 0
    min_items: int = 0
    unique_items: bool = False
    multiple_of: float = 0.0
    max_properties: int = 0
    min_properties: int = 0
    enum: list[str] = field(default_factory=list)
    all_of: list[str] = field(default_factory=list)
    one_of: list[str] = field(default_factory=list)
    any_of: list[str] = field(default_factory=list)
    schema_type: list[str] = field(default_factory=list)
    not_: str = ""
    additional_properties: BoolOrPath | None = None
    additional_items: bool = False

    annotation_name = ANNOTATION_NAME

    @property
    def attributes(self) -> dict[str, list[str]]:
        return self.attrs

    @classmethod
    def from_attributes(cls, attrs: dict[str, list[str]]) -> SchemaAnnotation:
        """Validate raw attribute values and build the annotation."""
        anno = cls(attrs=attrs)
        text_fields = {
            "id": "id",
            "description": "description",
            "definition": "definition",
            "title": "title",
            "format": "format",
            "default": "default_value",
            "const": "const_value",
            "pattern": "pattern",
        }
        bool_fields = {
            "required": ("required", "required"),
            "exclusivemaximum": ("exclusive_maximum", "exclusiveMaximum"),
            "exclusiveminimum": ("exclusive_minimum", "exclusiveMinimum"),
            "uniqueitems": ("unique_items", "uniqueItems"),
            "additionalitems": ("additional_items", "additionalItems"),
        }
        float_fields = {
            "maximum": ("maximum", "maximum"),
            "minimum": ("minimum", "minimum"),
            "multipleof": ("multiple_of", "multipleOf"),
        }
        int_fields = {
            "maxlength": ("max_length", "maxLength"),
            "minlength": ("min_length", "minLength"),
            "maxitems": ("max_items", "maxItems"),
            "minitems": ("min_items", "minItems"),
            "maxproperties": ("max_properties", "maxProperties"),
            "minproperties": ("min_properties", "minProperties"),
        }
        xof_fields = {
            "allof": ("all_of", "allOf"),
            "anyof": ("any_of", "anyOf"),
            "oneof": ("one_of", "oneOf"),
        }

        for raw_key, values in attrs.items():
            key = raw_key.lower()
            first = values[0] if values else ""
            if key in text_fields:
                if first:
                    setattr(anno, text_fields[key], first)
            elif key in bool_fields:
                attr, label = bool_fields[key]
                setattr(anno, attr, _convert(key, label, first, _parse_bool))
            elif key in float_fields:
                attr, label = float_fields[key]
                setattr(anno, attr, _convert(key, label, first, _parse_float))
            elif key in int_fields:
                attr, label = int_fields[key]
                setattr(anno, attr, _convert(key, label, first, _parse_int))
            elif key == "enum":
                for item in values:
                    if is_self_ref(item) or is_package_type(item):
                        raise AnnotationError(
                            f"error setting '{item}' @jsonSchema 'enum': "
                            "enum can not be a type selector"
                        )
                    anno.enum.append(item)
            elif key in xof_fields:
                attr, label = xof_fields[key]
                target = getattr(anno, attr)
                for item in values:
                    if is_self_ref(item) or is_ident(item) or is_package_type(item):
                        target.append(item)
                    else:
                        raise AnnotationError(
                            f"error setting @jsonSchema '{label}': '{item}' is not a "
                            "valid ident or type selector"
                        )
            elif key == "type":
                for item in values:
                    if not is_json_type(item):
                        raise AnnotationError(
                            f"error setting @jsonSchema 'type': '{item}' is not a valid JSON type"
                        )
                    anno.schema_type.append(item)
            elif key == "not":
                if is_ident(first) or is_package_type(first):
                    anno.not_ = first
                else:
                    raise AnnotationError(
                        f"error setting @jsonSchema 'not': '{first}' is not a valid "
                        "ident or type selector"
                    )
            elif key == "additionalproperties":
                try:
                    anno.additional_properties = BoolOrPath(is_bool=True, boolean=_parse_bool(first))
                except ValueError:
                    if is_package_type(first) or is_json_type(first):
                        anno.additional_properties = BoolOrPath(is_bool=False, path=first)
                    else:
                        raise AnnotationError(
                            "error setting @jsonSchema 'additionalProperties': "
                            "must be a bool, jsonType, or typePath"
                        ) from None
            else:
                raise AnnotationError(f"unknown @jsonSchema attribute '{raw_key}'")
        return anno


def _skip_space(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def _read_quoted(text: str, pos: int) -> tuple[str, int]:
    quote = text[pos]
    pos += 1
    chars: list[str] = []
    while pos < len(text):
        ch = text[pos]
        if ch == "\\" and pos + 1 < len(text):
            chars.append(text[pos + 1])
            pos += 2
            continue
        if ch == quote:
            return "".join(chars), pos + 1
        chars.append(ch)
        pos += 1
    raise AnnotationError("unterminated quoted value in annotation")


def _read_bare(text: str, pos: int, stops: str) -> tuple[str, int]:
    start = pos
    while pos < len(text) and text[pos] not in stops and not text[pos].isspace():
        pos += 1
    if pos == start:
        raise AnnotationError(f"missing value at position {start} in annotation")
    return text[start:pos], pos


def _read_value(text: str, pos: int, stops: str) -> tuple[str, int]:
    if pos >= len(text):
        raise AnnotationError("unexpected end of annotation")
    if text[pos] in "\"'":
        return _read_quoted(text, pos)
    return _read_bare(text, pos, stops)


def _read_list(text: str, pos: int) -> tuple[list[str], int]:
    items: list[str] = []
    pos = _skip_space(text, pos + 1)
    if pos < len(text) and text[pos] == "]":
        return items, pos + 1
    while True:
        pos = _skip_space(text, pos)
        value, pos = _read_value(text, pos, ",]")
        items.append(value)
        pos = _skip_space(text, pos)
        if pos >= len(text):
            raise AnnotationError("unterminated list in annotation")
        if text[pos] == "]":
            return items, pos + 1
        if text[pos] != ",":
            raise AnnotationError(f"unexpected '{text[pos]}' in annotation list")
        pos += 1


def _read_attributes(text: str, pos: int, name: str) -> tuple[dict[str, list[str]], int]:
    attrs: dict[str, list[str]] = {}
    while True:
        pos = _skip_space(text, pos)
        if pos >= len(text):
            raise AnnotationError(f"unterminated annotation @{name}")
        if text[pos] == ")":
            return attrs, pos + 1
        match = _KEY_PATTERN.match(text, pos)
        if not match:
            raise AnnotationError(f"expected attribute name in @{name}, got '{text[pos]}'")
        key = match.group().lower()
        pos = _skip_space(text, match.end())
        if pos >= len(text) or text[pos] != "=":
            raise AnnotationError(f"expected '=' after attribute '{match.group()}' in @{name}")
        pos = _skip_space(text, pos + 1)
        if pos < len(text) and text[pos] == "[":
            values, pos = _read_list(text, pos)
        else:
            value, pos = _read_value(text, pos, ",)")
            values = [value]
        attrs[key] = values
        pos = _skip_space(text, pos)
        if pos >= len(text):
            raise AnnotationError(f"unterminated annotation @{name}")
        if text[pos] == ",":
            pos += 1
        elif text[pos] != ")":
            raise AnnotationError(f"unexpected '{text[pos]}' in @{name}")


def parse_annotations(text: str) -> list[tuple[str, dict[str, list[str]]]]:
    """Find every ``@name(key=value, ...)`` annotation in the text.

    Attribute names are lower-cased; each value is a list of strings.
    """
    found: list[tuple[str, dict[str, list[str]]]] = []
    pos = 0
    while True:
        at = text.find("@", pos)
        if at < 0:
            return found
        previous = text[at - 1] if at > 0 else ""
        if previous and (previous.isalnum() or previous == "_"):
            pos = at + 1
            continue
        match = _NAME_PATTERN.match(text, at + 1)
        if not match or match.end() >= len(text) or text[match.end()] != "(":
            pos = at + 1
            continue
        name = match.group()
        attrs, pos = _read_attributes(text, match.end() + 1, name)
        found.append((name, attrs))


def find_schema_annotation(text: str) -> SchemaAnnotation | None:
    """The first ``@jsonSchema`` annotation in the text, validated, or None."""
    annos = [
        SchemaAnnotation.from_attributes(attrs)
        for name, attrs in parse_annotations(text)
        if name == ANNOTATION_NAME
    ]
    return annos[0] if annos else None


def is_json_type(name: str) -> bool:
    return name in JSON_TYPES


def is_self_ref(name: str) -> bool:
    return name == "#"


def _is_letter(ch: str) -> bool:
    return unicodedata.category(ch).startswith("L")


def _is_digit(ch: str) -> bool:
    return unicodedata.category(ch) == "Nd"


def is_ident(name: str) -> bool:
    """True when every character is a letter, a digit or an underscore."""
    return all(_is_letter(ch) or _is_digit(ch) or ch == "_" for ch in name)


def is_package_type(name: str) -> bool:
    """True for ``some/package/TypeName`` paths whose type name is exported."""
    if name.startswith("/") or "/" not in name:
        return False
    type_name = name.rsplit("/", 1)[1]
    return is_ident(type_name) and type_name[:1].isupper()


def split_package_type_path(path: str) -> tuple[str, str]:
    """Split a package type path into package and type; ("", "") when it is not one."""
    if not is_package_type(path):
        return "", ""
    package, type_name = path.rsplit("/", 1)
    return package, type_name


def _struct_tag_lookup(tag: str, key: str) -> str:
    """The value of ``key`` in a conventional ``key:"value"`` struct tag."""
    pos = 0
    while pos < len(tag):
        while pos < len(tag) and tag[pos] == " ":
            pos += 1
        if pos >= len(tag):
            break
        start = pos
        while pos < len(tag) and tag[pos] > " " and tag[pos] not in ':"\x7f':
            pos += 1
        if pos == start or pos + 1 >= len(tag) or tag[pos] != ":" or tag[pos + 1] != '"':
            break
        name = tag[start:pos]
        pos += 1
        value_start = pos
        pos += 1
        while pos < len(tag) and tag[pos] != '"':
            if tag[pos] == "\\":
                pos += 1
            pos += 1
        if pos >= len(tag):
            break
        quoted = tag[value_start:pos + 1]
        pos += 1
        if name == key:
            try:
                value = json.loads(quoted)
            except ValueError:
                return ""
            return value if isinstance(value, str) else ""
    return ""


def json_tag_info(name: str, tag: str | None) -> tuple[str, bool]:
    """The JSON property name for a field and whether the field is ignored.

    ``tag`` is the field's struct tag text, such as ``json:"name,omitempty"``.
    """
    if tag is None or not tag.strip():
        return name, False
    json_tag = _struct_tag_lookup(tag, "json")
    if json_tag == "-":
        return "", True
    json_name = json_tag.split(",", 1)[0]
    return (json_name or name), False