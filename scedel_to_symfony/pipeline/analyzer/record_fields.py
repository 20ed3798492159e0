"""
Record field collection.

Decides whether a type expression denotes a record (a fixed set of named
fields) and collects those fields through aliases, nullable wrappers and
intersections.
"""

from __future__ import annotations

from ..schema_ast.nodes import (
    IntersectionTypeNode,
    NamedTypeNode,
    NullableNamedTypeNode,
    NullableTypeNode,
    RecordTypeNode,
    TypeDefinition,
    TypeExprNode,
)
from .ir_nodes import RecordField


def collect_record_fields(
    type_expr: TypeExprNode | None,
    types_by_name: dict[str, TypeDefinition],
    visited: frozenset[str] = frozenset(),
    origin_type: str = "",
) -> list[RecordField] | None:
    """
    Collect the fields of a record-like type.

    Intersection members are merged by field name: a later member replaces
    the value of an earlier field but the field keeps its first position.

    Args:
        type_expr: Type expression to inspect
        types_by_name: Custom types indexed by name
        visited: Named types already followed on this path (cycle guard)
        origin_type: Name of the type whose body is being walked

    Returns:
        Fields in declaration order, or None if the type is not record-like
    """
    if isinstance(type_expr, RecordTypeNode):
        return [RecordField(field=f, origin_type=origin_type) for f in type_expr.fields]

    if isinstance(type_expr, IntersectionTypeNode):
        by_name: dict[str, RecordField] = {}
        for item in type_expr.items:
            item_fields = collect_record_fields(item, types_by_name, visited, origin_type)
            if item_fields is None:
                return None
            for entry in item_fields:
                # Reassigning an existing key keeps its insertion position
                by_name[entry.field.name] = entry
        return list(by_name.values())

    if isinstance(type_expr, (NamedTypeNode, NullableNamedTypeNode)):
        name = type_expr.name
        if name in visited:
            return None

        definition = types_by_name.get(name)
        if definition is None:
            return None

        return collect_record_fields(definition.expr, types_by_name, visited | {name}, name)

    if isinstance(type_expr, NullableTypeNode):
        return collect_record_fields(type_expr.inner_type, types_by_name, visited, origin_type)

    return None
