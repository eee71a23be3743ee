"""Conversions between definition references, file names and variable names."""

from __future__ import annotations

DEFINITION_ROOT = "#/definitions/"


def is_package_string(name: str) -> bool:
    """A package specifier must not start or end with a slash."""
    return not name.startswith("/") and not name.endswith("/")


def ref_to_package_and_type(ref: str) -> tuple[str, str]:
    """Turn a definition key back into its package path and type name."""
    path = ref.replace("_", ".").replace("-", "/")
    if "/" not in path:
        raise ValueError(f"definition key {ref!r} has no package part")
    package, type_name = path.rsplit("/", 1)
    return package, type_name


def ref_to_filename(ref: str) -> str:
    """The JSON file name for a definition reference or a package type path."""
    name = ref.replace(DEFINITION_ROOT, "").replace(".", "_").replace("/", "-")
    return name + ".json"


def _is_separator(ch: str) -> bool:
    if ch.isascii():
        return not (ch.isalnum() or ch == "_")
    if ch.isalpha() or ch.isdigit():
        return False
    return ch.isspace()


def _title(text: str) -> str:
    out: list[str] = []
    previous = " "
    for ch in text:
        out.append(ch.upper() if _is_separator(previous) else ch)
        previous = ch
    return "".join(out)


def ref_to_var_name(ref: str) -> str:
    """A camel-cased identifier for a definition reference."""
    words = ref.replace(DEFINITION_ROOT, "")
    for sep in "_-./":
        words = words.replace(sep, " ")
    return "".join(ch for ch in _title(words) if not ch.isspace())


def package_from_output_dir(directory: str) -> str:
    """The last path element of a directory, ignoring one trailing slash."""
    path = directory[:-1] if directory.endswith("/") else directory
    return path.rsplit("/", 1)[-1]