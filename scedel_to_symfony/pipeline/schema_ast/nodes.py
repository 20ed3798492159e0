"""
AST node definitions for Scedel schemas.

These nodes represent an already parsed and validated schema repository.
The generator only reads them; nothing in the pipeline mutates a node.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# ---------------------------------------------------------------------------
# Expressions (constraint arguments, default values, conditions)
# ---------------------------------------------------------------------------


@dataclass
class ExpressionNode:
    """Base class for all expression nodes."""


@dataclass
class LiteralNode(ExpressionNode):
    """Base class for literal values."""


@dataclass
class StringLiteralNode(LiteralNode):
    value: str = ""


@dataclass
class NumberLiteralNode(LiteralNode):
    """A numeric literal, keeping the source text next to the parsed value."""

    raw: str = ""
    numeric_value: int | float = 0


@dataclass
class BoolLiteralNode(LiteralNode):
    value: bool = False


@dataclass
class NullLiteralNode(LiteralNode):
    pass


@dataclass
class DurationLiteralNode(LiteralNode):
    """A duration literal such as ``1h30m``, normalized to milliseconds."""

    raw: str = ""
    milliseconds: int = 0


@dataclass
class EmptyArrayExprNode(ExpressionNode):
    pass


class PathRootKind(Enum):
    """Root of a property path."""

    THIS = "this"  # implicit current record: `this.createdAt` or `createdAt`
    IDENTIFIER = "identifier"  # explicit named root: `other.createdAt`


@dataclass
class PathNode(ExpressionNode):
    """A dotted reference to another value, e.g. ``this.activeTo``."""

    root_kind: PathRootKind = PathRootKind.THIS
    root_name: str | None = None
    segments: list[str] = field(default_factory=list)


@dataclass
class FunctionCallExprNode(ExpressionNode):
    name: str = ""
    args: list[ExpressionNode] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Constraints
# ---------------------------------------------------------------------------


@dataclass
class ArgValueNode:
    """Base class for the single positional argument form ``min:5``."""


@dataclass
class ExprArgNode(ArgValueNode):
    value: ExpressionNode | None = None


@dataclass
class ListArgNode(ArgValueNode):
    items: list[ExpressionNode] = field(default_factory=list)


@dataclass
class ConstraintCallArgNode:
    """One argument of the call form ``min(5)``; ``name`` is set for ``min(value: 5)``."""

    value: ExpressionNode | None = None
    name: str | None = None


@dataclass
class ConstraintNode:
    """A constraint declared on a type occurrence, e.g. ``String(min:5)``."""

    name: str = ""
    negated: bool = False

    # Call syntax uses call_args, positional syntax uses arg
    uses_call_syntax: bool = False
    call_args: list[ConstraintCallArgNode] = field(default_factory=list)
    arg: ArgValueNode | None = None


# ---------------------------------------------------------------------------
# Field defaults
# ---------------------------------------------------------------------------


@dataclass
class DefaultExprNode:
    """Base class for field default values."""


@dataclass
class NullDefaultExprNode(DefaultExprNode):
    pass


@dataclass
class EmptyArrayDefaultExprNode(DefaultExprNode):
    pass


@dataclass
class LiteralDefaultExprNode(DefaultExprNode):
    literal: LiteralNode | None = None


@dataclass
class ExpressionDefaultExprNode(DefaultExprNode):
    expression: ExpressionNode | None = None


# ---------------------------------------------------------------------------
# Type expressions
# ---------------------------------------------------------------------------


@dataclass
class TypeExprNode:
    """Base class for all type expressions."""


@dataclass
class FieldNode:
    """A field of a record type."""

    name: str = ""
    type: TypeExprNode | None = None
    optional: bool = False
    default: DefaultExprNode | None = None


@dataclass
class NamedTypeNode(TypeExprNode):
    """Reference to a builtin or custom type, with constraints declared at this occurrence."""

    name: str = ""
    constraints: list[ConstraintNode] = field(default_factory=list)


@dataclass
class NullableNamedTypeNode(TypeExprNode):
    """``Name?``"""

    name: str = ""


@dataclass
class NullableTypeNode(TypeExprNode):
    """Any type expression marked nullable, e.g. ``(A | B)?``."""

    inner_type: TypeExprNode | None = None


@dataclass
class ArrayTypeNode(TypeExprNode):
    item_type: TypeExprNode | None = None
    constraints: list[ConstraintNode] = field(default_factory=list)


@dataclass
class DictTypeNode(TypeExprNode):
    value_type: TypeExprNode | None = None


@dataclass
class RecordTypeNode(TypeExprNode):
    fields: list[FieldNode] = field(default_factory=list)


@dataclass
class LiteralTypeNode(TypeExprNode):
    literal: LiteralNode | None = None


@dataclass
class UnionTypeNode(TypeExprNode):
    items: list[TypeExprNode] = field(default_factory=list)


@dataclass
class IntersectionTypeNode(TypeExprNode):
    items: list[TypeExprNode] = field(default_factory=list)


@dataclass
class ConditionalTypeNode(TypeExprNode):
    """``when <condition> then <then_type> else <else_type>``"""

    condition: ExpressionNode | None = None
    then_type: TypeExprNode | None = None
    else_type: TypeExprNode | None = None


@dataclass
class AbsentTypeNode(TypeExprNode):
    """Marks a value that may be missing entirely."""


# ---------------------------------------------------------------------------
# Annotations and repository
# ---------------------------------------------------------------------------


@dataclass
class AnnotationValue:
    value: str = ""


@dataclass
class AnnotationTree:
    """Hierarchical annotation store keyed by dotted path segments.

    Each node keeps every value declared at its path in declaration order.
    """

    values: list[AnnotationValue] = field(default_factory=list)
    children: dict[str, AnnotationTree] = field(default_factory=dict)

    def add(self, path: list[str], value: str) -> None:
        """Record a value at the given path, creating intermediate nodes."""
        node = self
        for segment in path:
            node = node.children.setdefault(segment, AnnotationTree())
        node.values.append(AnnotationValue(value))

    def at(self, path: list[str]) -> AnnotationTree:
        """Return the subtree at path, or an empty tree if nothing is declared there."""
        node = self
        for segment in path:
            child = node.children.get(segment)
            if child is None:
                return AnnotationTree()
            node = child
        return node


@dataclass
class TypeDefinition:
    """A named custom type."""

    name: str = ""
    expr: TypeExprNode | None = None
    annotations: AnnotationTree = field(default_factory=AnnotationTree)

    # Field annotations are rooted at the field path: ``title`` or ``address.street``
    field_annotations: AnnotationTree = field(default_factory=AnnotationTree)

    def field_annotations_at(self, path: list[str]) -> AnnotationTree:
        return self.field_annotations.at(path)


@dataclass
class SchemaRepository:
    """All custom types of a loaded schema, in declaration order."""

    types: list[TypeDefinition] = field(default_factory=list)
    source_name: str = ""

    def custom_types(self) -> list[TypeDefinition]:
        return list(self.types)
