"""
Schema AST (Abstract Syntax Tree) module.

Contains the AST node definitions and the loader for schema documents.
"""

from __future__ import annotations

from .loader import SchemaLoader, SchemaLoadError
from .nodes import (
    AbsentTypeNode,
    AnnotationTree,
    ArrayTypeNode,
    ConditionalTypeNode,
    ConstraintNode,
    DictTypeNode,
    FieldNode,
    IntersectionTypeNode,
    LiteralTypeNode,
    NamedTypeNode,
    NullableNamedTypeNode,
    NullableTypeNode,
    RecordTypeNode,
    SchemaRepository,
    TypeDefinition,
    TypeExprNode,
    UnionTypeNode,
)

__all__ = [
    "TypeExprNode",
    "NamedTypeNode",
    "NullableNamedTypeNode",
    "NullableTypeNode",
    "ArrayTypeNode",
    "DictTypeNode",
    "RecordTypeNode",
    "LiteralTypeNode",
    "UnionTypeNode",
    "IntersectionTypeNode",
    "ConditionalTypeNode",
    "AbsentTypeNode",
    "FieldNode",
    "ConstraintNode",
    "AnnotationTree",
    "TypeDefinition",
    "SchemaRepository",
    "SchemaLoader",
    "SchemaLoadError",
]
