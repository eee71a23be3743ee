# syncschema

Building blocks for moving data out of relational databases. The package has
no third-party dependencies.

- `syncschema.schema_base` – the core JSON-schema node: `BasicSchema`,
  `StringOrArray` (for `type`) and the `SpecVersion` enum of specification URIs.
- `syncschema.schema_types` – `SimpleSchema`, `NumericSchema`, `ArraySchema`,
  `ObjectSchema` and `BoolOrSchema`, plus `new_map_schema()`, `from_dict()` and
  `from_json()`, which pick the schema class from the `type` attribute
  (a `$ref` gives a plain `BasicSchema`).
- `syncschema.annotation` – parsing of `@jsonSchema(key=value, ...)`
  annotations in doc-comment text (`parse_annotations`,
  `find_schema_annotation`, `SchemaAnnotation.from_attributes`), raising
  `AnnotationError` for bad values or unknown attributes; helpers
  `is_ident`, `is_package_type`, `is_json_type`, `is_self_ref`,
  `split_package_type_path` and `json_tag_info`.
- `syncschema.naming` – conversions between definition references, package
  paths, JSON file names and camel-cased variable names.
- `syncschema.queries` – SQL text for chunked PostgreSQL and MySQL scans,
  MIN/MAX and next-chunk-end queries, row-count estimates and MySQL discovery
  queries, with a `Chunk` range type.
- `syncschema.reader` – `Reader`, which runs one query through a callable you
  supply and hands each row to a callback, and `map_scan()`, which maps a
  DB-API row to its column names, optionally through a converter.
- `syncschema.waljs` – `ChangeFilter` for PostgreSQL wal2json messages,
  producing `CDCChange` records, and `WALState`.
- `syncschema.binlog` – `ChangeFilter` for MySQL binlog `RowsEvent`s
  (inserts, updates as after-images only, deletes), producing `CDCChange`
  records; `Position`, `EventType` and `convert_row_to_map()`.

## Installation

```
pip install .
```

## Examples

A stream is any object with `namespace`, `name` and `cursor` attributes:

```python
from dataclasses import dataclass

@dataclass
class Stream:
    namespace: str
    name: str
    cursor: str = "id"

stream = Stream("public", "users")
```

Build a schema and print it:

```python
from syncschema.schema_types import ObjectSchema, NumericSchema, from_json

obj = ObjectSchema()
obj.properties["age"] = NumericSchema("integer")
obj.add_required_field("age")
text = obj.to_json(indent=2)
print(text)
assert from_json(text) == obj
```

Parse an annotation:

```python
from syncschema.annotation import find_schema_annotation

anno = find_schema_annotation("@jsonSchema(required=true, maxLength=20)")
print(anno.required, anno.max_length)   # True 20
```

Generate a chunk scan query:

```python
from syncschema.queries import Chunk, postgres_chunk_scan_query

print(postgres_chunk_scan_query(stream, "id", Chunk(min=1, max=100)))
# SELECT * FROM "public"."users" WHERE id >= 1 AND id <= 100
```

Filter wal2json changes:

```python
from syncschema.waljs import ChangeFilter

flt = ChangeFilter(lambda value, column_type: value, stream)
message = (
    b'{"timestamp": "2024-01-01 00:00:00+00", "change": [{"kind": "insert",'
    b' "schema": "public", "table": "users", "columnnames": ["id"],'
    b' "columntypes": ["integer"], "columnvalues": [1]}]}'
)
flt.filter_change(1000, message, print)
```

Filter binlog row events:

```python
from syncschema.binlog import ChangeFilter, EventType, RowsEvent

flt = ChangeFilter(stream)
event = RowsEvent(EventType.WRITE_ROWS_EVENTv2, "public", "users", ["id"], [[1]])
flt.filter_rows_event(event, print)
```

## What this package does not do

- It does not connect to databases or replication streams: the reader takes an
  `execute` callable you provide, and the change filters take messages and
  events you have already read.
- It does not generate JSON schemas from source-code type declarations; it
  provides the schema model and annotation parsing only.
- It has no command-line program and no log or stats reporting.

## Running the tests

```
pip install .[test]
pytest
```