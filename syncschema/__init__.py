"""JSON-schema model and annotation parsing, SQL query builders, a row reader and change-data-capture filters."""

__version__ = "0.1.0"