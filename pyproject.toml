[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "syncschema"
version = "0.1.0"
description = "JSON-schema object model, @jsonSchema annotation parsing, SQL query builders and change-data-capture filters for database sync pipelines"
requires-python = ">=3.10"
dependencies = []
keywords = ["json-schema", "cdc", "binlog", "wal2json", "postgres", "mysql", "etl"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["syncschema"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
