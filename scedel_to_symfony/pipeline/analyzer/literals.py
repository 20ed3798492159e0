"""
Conversion of schema literal nodes to Python values and PHP type names.
"""

from __future__ import annotations

from typing import Any

from ..schema_ast.nodes import (
    BoolLiteralNode,
    DurationLiteralNode,
    LiteralNode,
    NullLiteralNode,
    NumberLiteralNode,
    StringLiteralNode,
)


def literal_value(literal: LiteralNode | None) -> Any:
    """Python value of a literal; durations become integer milliseconds."""
    if isinstance(literal, StringLiteralNode):
        return literal.value
    if isinstance(literal, NumberLiteralNode):
        return literal.numeric_value
    if isinstance(literal, BoolLiteralNode):
        return literal.value
    if isinstance(literal, NullLiteralNode):
        return None
    if isinstance(literal, DurationLiteralNode):
        return literal.milliseconds
    return None


def php_type_of(value: Any) -> str:
    """PHP scalar type name of a literal value, ``mixed`` for null."""
    if isinstance(value, str):
        return "string"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    return "mixed"


def literal_type_and_value(literal: LiteralNode | None) -> tuple[str, Any]:
    value = literal_value(literal)
    return php_type_of(value), value


def is_int_value(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
