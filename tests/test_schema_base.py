import json

import pytest

from syncschema.schema_base import (
    DEFINITION_ROOT,
    BasicSchema,
    SpecVersion,
    StringOrArray,
)


def test_spec_version_2020_12_uri():
    schema = BasicSchema("object")
    schema.schema_uri = SpecVersion.V2020_12.value
    assert schema.to_dict()["$schema"] == "https://json-schema.org/draft/2020-12/schema"
    assert SpecVersion("http://json-schema.org/draft-04/schema#") is SpecVersion.DRAFT_V4


def test_definition_root_prefix():
    schema = BasicSchema()
    schema.ref = DEFINITION_ROOT + "pkg-Thing"
    assert schema.to_dict() == {"$ref": "#/definitions/pkg-Thing"}


def test_string_or_array_from_string():
    value = StringOrArray.from_value("string")
    assert value.string == "string"
    assert value.array == []
    assert value.to_json_value() == "string"


def test_string_or_array_from_list():
    value = StringOrArray.from_value(["string", "integer"])
    assert value.array == ["string", "integer"]
    assert value.to_json_value() == ["string", "integer"]


def test_string_or_array_from_other_is_empty():
    assert StringOrArray.from_value(42) == StringOrArray()
    assert StringOrArray.from_value(42).to_json_value() == ""


def test_set_type_single():
    schema = BasicSchema("object")
    assert schema.type == StringOrArray(string="object")


def test_set_type_multiple_splits_on_comma():
    schema = BasicSchema()
    schema.set_type("string,number,integer")
    assert ",".join(schema.type.array) == "string,number,integer"


def test_set_type_blank_leaves_type_unchanged():
    schema = BasicSchema("boolean")
    schema.set_type("   ")
    assert schema.type.string == "boolean"
    assert BasicSchema("").type is None


def test_to_dict_omits_empty_attributes():
    schema = BasicSchema()
    assert schema.to_dict() == {}


def test_to_dict_includes_set_attributes():
    schema = BasicSchema("object")
    schema.schema_uri = SpecVersion.V2020_12.value
    schema.title = "An Album."
    schema.set_default("abc")
    result = schema.to_dict()
    assert result["$schema"] == SpecVersion.V2020_12.value
    assert result["type"] == "object"
    assert result["title"] == "An Album."
    assert result["default"] == "abc"
    assert "description" not in result


def test_set_enum_and_int_enum_do_nothing():
    schema = BasicSchema("string")
    before = schema.to_dict()
    schema.set_enum(["a", "b"])
    schema.set_int_enum(["1", "2"])
    assert schema.to_dict() == before


def test_add_definition_and_serialise():
    root = BasicSchema("object")
    ref = BasicSchema()
    ref.ref = DEFINITION_ROOT + "pkg-Thing"
    root.add_definition("pkg-Thing", BasicSchema("string"))
    root.all_of = [ref]
    result = root.to_dict()
    assert result["definitions"] == {"pkg-Thing": {"type": "string"}}
    assert result["allOf"] == [{"$ref": DEFINITION_ROOT + "pkg-Thing"}]


def test_clone_is_independent_for_scalars():
    original = BasicSchema("string")
    original.title = "first"
    copied = original.clone()
    copied.title = "second"
    assert original.title == "first"
    assert copied.title == "second"
    assert type(copied) is BasicSchema


def test_round_trip_through_dict():
    schema = BasicSchema("object")
    schema.id = "me"
    schema.description = "desc"
    schema.schema_uri = SpecVersion.DRAFT_V4.value
    inner = BasicSchema()
    inner.ref = "#"
    schema.not_ = inner
    schema.one_of = [inner]
    restored = BasicSchema.from_dict(schema.to_dict())
    assert restored.to_dict() == schema.to_dict()
    assert restored == schema


def test_from_dict_nested_ref_decodes_to_basic_schema():
    data = {"type": "object", "definitions": {"x": {"$ref": "#/definitions/y", "type": "string"}}}
    schema = BasicSchema.from_dict(data)
    nested = schema.definitions["x"]
    assert nested.ref == "#/definitions/y"
    assert nested.type is None


def test_from_dict_nested_without_type_or_ref_is_none():
    schema = BasicSchema.from_dict({"anyOf": [{"title": "lonely"}]})
    assert schema.any_of == [None]


def test_to_json_parses_back():
    schema = BasicSchema("string,number")
    schema.title = "t"
    text = schema.to_json(indent=2)
    assert json.loads(text) == schema.to_dict()
    assert "\n" in text


def test_from_dict_rejects_non_string_title():
    with pytest.raises(ValueError):
        BasicSchema.from_dict({"title": 5})


def test_from_dict_rejects_non_list_all_of():
    with pytest.raises(ValueError):
        BasicSchema.from_dict({"allOf": {"type": "string"}})


def test_from_dict_rejects_non_object():
    with pytest.raises(ValueError):
        BasicSchema.from_dict(["not", "an", "object"])