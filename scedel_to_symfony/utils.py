"""
Utility functions for the Scedel to Symfony generator.
"""

import math
import re
from typing import Any

_INVALID_NAME_CHARS = re.compile(r"[^A-Za-z0-9_]")
_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _strip_invalid_chars(value: str) -> str:
    """Trim and drop every character that cannot appear in a PHP identifier."""
    return _INVALID_NAME_CHARS.sub("", value.strip())


def _upper_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def _lower_first(text: str) -> str:
    return text[:1].lower() + text[1:]


def normalize_class_name(value: str) -> str:
    """Convert an arbitrary name to a PHP class name.

    Examples:
        "post" -> "Post"
        "blog-post" -> "Blogpost"
        "2fa" -> "Type2fa"
        "--" -> ""

    Args:
        value: Raw type name or ``php.codegen.class`` override

    Returns:
        A valid class name, or an empty string if nothing usable remains
    """
    normalized = _strip_invalid_chars(value)
    if not normalized:
        return ""

    if not _IDENTIFIER_PATTERN.match(normalized):
        normalized = "Type" + normalized

    return _upper_first(normalized)


def normalize_property_name(value: str) -> str:
    """Convert an arbitrary name to a PHP property name.

    Examples:
        "authorEmail" -> "authorEmail"
        "Title" -> "title"
        "2nd" -> "field2nd"

    Args:
        value: Raw field name or ``php.codegen.property`` override

    Returns:
        A valid property name, or an empty string if nothing usable remains
    """
    normalized = _strip_invalid_chars(value)
    if not normalized:
        return ""

    if not _IDENTIFIER_PATTERN.match(normalized):
        normalized = "field" + _upper_first(normalized)

    return _lower_first(normalized)


def normalize_dir(directory: str) -> str:
    """Trim an output directory and drop trailing slashes."""
    directory = directory.strip()
    if not directory:
        return ""
    return directory.rstrip("/")


def build_file_path(directory: str, file_name: str) -> str:
    if not directory:
        return file_name
    return f"{directory}/{file_name.lstrip('/')}"


def build_type_hint(base_type_hint: str, nullable: bool) -> str:
    """Make a PHP type hint nullable (``?T``); ``mixed`` and ``?T`` are left as is."""
    base_type_hint = base_type_hint.strip() or "mixed"
    if not nullable or base_type_hint == "mixed" or base_type_hint.startswith("?"):
        return base_type_hint
    return "?" + base_type_hint


def doc_type_from_type_hint(type_hint: str) -> str:
    """``?string`` -> ``string|null``"""
    if type_hint.startswith("?"):
        return type_hint[1:] + "|null"
    return type_hint


def class_type_hint(namespace: str, class_name: str, current_namespace: str) -> str:
    """Reference a generated class, fully qualified when it lives in another namespace."""
    if namespace == current_namespace:
        return class_name
    return f"\\{namespace}\\{class_name}"


def export_php(value: Any) -> str:
    """Render a Python value as a PHP literal.

    Strings are single-quoted, lists use the short array syntax and
    dictionaries render as associative arrays.
    """
    if value is None:
        return "null"
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _export_float(value)
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace("'", "\\'")
        return f"'{escaped}'"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(export_php(item) for item in value) + "]"
    if isinstance(value, dict):
        entries = (f"{export_php(k)} => {export_php(v)}" for k, v in value.items())
        return "[" + ", ".join(entries) + "]"

    raise TypeError(f"Cannot export {type(value).__name__} as a PHP literal")


def _export_float(value: float) -> str:
    if math.isnan(value):
        return "NAN"
    if math.isinf(value):
        return "INF" if value > 0 else "-INF"
    # repr is the shortest round-trip form and keeps ".0" on integral values
    return repr(value)


def parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse an annotation flag such as ``yes`` or ``off``.

    Unrecognized or empty values fall back to the default.
    """
    if value is None:
        return default

    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return default


def parse_csv(value: str | None) -> list[str] | None:
    """Split a comma-separated annotation value; returns None when nothing is left."""
    if value is None:
        return None

    parts = [part.strip() for part in value.split(",")]
    parts = [part for part in parts if part]
    return parts or None


def deduplicate_constraints(constraints: list[str]) -> list[str]:
    """Trim constraints and drop empty entries and exact repeats, keeping first occurrence."""
    result = []
    seen = set()
    for constraint in constraints:
        key = constraint.strip()
        if not key or key in seen:
            continue
        seen.add(key)
        result.append(key)
    return result
