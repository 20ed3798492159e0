"""
Type expression analysis.

Walks a field's type expression and resolves it to a TypeAnalysis: the
PHP type hint, an optional ``@var`` doc type, nullability, the Symfony
constraints to attach, and the warnings raised on the way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any

from ...utils import (
    class_type_hint,
    deduplicate_constraints,
    doc_type_from_type_hint,
    export_php,
)
from ..model import GenerationWarning, WarningCode
from ..schema_ast.nodes import (
    AbsentTypeNode,
    ArrayTypeNode,
    ConditionalTypeNode,
    ConstraintNode,
    DictTypeNode,
    IntersectionTypeNode,
    LiteralTypeNode,
    NamedTypeNode,
    NullableNamedTypeNode,
    NullableTypeNode,
    RecordTypeNode,
    TypeDefinition,
    TypeExprNode,
    UnionTypeNode,
)
from .builtins import ARRAY_TARGET, builtin_type
from .constraints import ConstraintMapper
from .ir_nodes import Descriptor
from .literals import literal_type_and_value

logger = logging.getLogger(__name__)

MIXED = "mixed"


@dataclass
class TypeAnalysis:
    """Resolved PHP representation of a type expression."""

    type_hint: str = MIXED
    doc_type: str | None = None
    nullable: bool = False

    # The value may be missing entirely (distinct from holding null)
    optional: bool = False

    constraints: list[str] = field(default_factory=list)

    # Nested object that must be validated recursively (Assert\Valid)
    requires_valid: bool = False

    # Builtin kind used to map constraints declared on an alias of this type
    builtin_target: str | None = None

    # The value can only ever be null, so Assert\NotNull would be wrong
    known_null_only: bool = False

    warnings: list[GenerationWarning] = field(default_factory=list)


@dataclass(frozen=True)
class AnalysisContext:
    """Where an analysis happens, plus the cycle guard of the current resolution path."""

    types_by_name: dict[str, TypeDefinition]
    descriptors: dict[str, Descriptor]
    current_type_name: str
    current_namespace: str
    field_name: str
    stack: frozenset[str] = frozenset()

    def entering(self, name: str) -> AnalysisContext:
        """Context for resolving the body of the named alias ``name``."""
        return replace(self, stack=self.stack | {name})

    def warning(self, code: WarningCode, message: str) -> GenerationWarning:
        return GenerationWarning.create(code, message, self.current_type_name, self.field_name)


def _common(values: list[Any], fallback: Any) -> Any:
    """The shared value if every entry agrees, else the fallback."""
    if values and all(value == values[0] for value in values):
        return values[0]
    return fallback


def _unique_literals(values: list[Any]) -> list[Any]:
    # Key on type too so that 1 and 1.0 stay distinct choices
    seen = set()
    result = []
    for value in values:
        key = (type(value), value)
        if key not in seen:
            seen.add(key)
            result.append(value)
    return result


def _choice_constraint(choices: list[Any]) -> str:
    return f"Assert\\Choice(choices: {export_php(_unique_literals(choices))})"


class TypeAnalyzer:
    """Resolves type expressions to their PHP representation."""

    def __init__(self, mapper: ConstraintMapper | None = None):
        self.mapper = mapper or ConstraintMapper()

    def analyze(self, type_expr: TypeExprNode | None, context: AnalysisContext) -> TypeAnalysis:
        """
        Analyze a type expression.

        Args:
            type_expr: Type expression of a field (or of a nested member)
            context: Enclosing type, field and resolution stack

        Returns:
            TypeAnalysis with its warnings attached
        """
        if isinstance(type_expr, NullableTypeNode):
            return replace(self.analyze(type_expr.inner_type, context), nullable=True)

        if isinstance(type_expr, NullableNamedTypeNode):
            return replace(self._analyze_named(type_expr.name, [], context), nullable=True)

        if isinstance(type_expr, NamedTypeNode):
            return self._analyze_named(type_expr.name, type_expr.constraints, context)

        if isinstance(type_expr, ArrayTypeNode):
            return self._analyze_array(type_expr, context)

        if isinstance(type_expr, DictTypeNode):
            return self._analyze_dict(type_expr, context)

        if isinstance(type_expr, RecordTypeNode):
            return TypeAnalysis(
                type_hint="array",
                doc_type="array<string, mixed>",
                constraints=['Assert\\Type(type: "array")'],
                warnings=[
                    context.warning(
                        WarningCode.INLINE_RECORD_AS_ARRAY,
                        f'Field "{context.field_name}" in type "{context.current_type_name}" is an inline record; generated as array.',
                    )
                ],
            )

        if isinstance(type_expr, LiteralTypeNode):
            literal_type, value = literal_type_and_value(type_expr.literal)
            return TypeAnalysis(
                type_hint=literal_type,
                nullable=value is None,
                constraints=[f"Assert\\EqualTo(value: {export_php(value)})"],
                known_null_only=value is None,
            )

        if isinstance(type_expr, UnionTypeNode):
            return self._analyze_union(type_expr, context)

        if isinstance(type_expr, IntersectionTypeNode):
            return self._analyze_intersection(type_expr, context)

        if isinstance(type_expr, ConditionalTypeNode):
            return self._analyze_conditional(type_expr, context)

        if isinstance(type_expr, AbsentTypeNode):
            return TypeAnalysis(nullable=True, optional=True)

        node_name = type(type_expr).__name__
        return TypeAnalysis(
            nullable=True,
            warnings=[
                context.warning(
                    WarningCode.UNSUPPORTED_TYPE_NODE,
                    f'Field "{context.field_name}" in type "{context.current_type_name}" has unsupported type node "{node_name}"; generated as mixed.',
                )
            ],
        )

    # -----------------------------------------------------------------------
    # Named types
    # -----------------------------------------------------------------------

    def _analyze_named(self, name: str, constraints: list[ConstraintNode], context: AnalysisContext) -> TypeAnalysis:
        """
        Resolve a named type: builtin, generated class, or alias.

        Resolution order is builtin, then a record type with its own class,
        then the cycle guard, then unknown names, then alias bodies.
        """
        builtin = builtin_type(name)
        if builtin is not None:
            mapped, warnings = self.mapper.map_constraints(constraints, name, None, context.current_type_name, context.field_name)
            return TypeAnalysis(
                type_hint=builtin.type_hint,
                doc_type=builtin.doc_type,
                nullable=builtin.nullable,
                constraints=[*builtin.constraints, *mapped],
                builtin_target=name,
                known_null_only=name == "Null",
                warnings=warnings,
            )

        descriptor = context.descriptors.get(name)
        if descriptor is not None:
            # Mapped against the type name itself, which is never a builtin
            mapped, warnings = self.mapper.map_constraints(constraints, name, None, context.current_type_name, context.field_name)
            return TypeAnalysis(
                type_hint=class_type_hint(descriptor.namespace, descriptor.class_name, context.current_namespace),
                constraints=mapped,
                requires_valid=True,
                warnings=warnings,
            )

        if name in context.stack:
            logger.debug("Recursive alias %s reached from %s.%s", name, context.current_type_name, context.field_name)
            return TypeAnalysis(
                nullable=True,
                warnings=[
                    context.warning(
                        WarningCode.RECURSIVE_TYPE_ALIAS,
                        f'Field "{context.field_name}" in type "{context.current_type_name}" references recursive alias "{name}"; generated as mixed.',
                    )
                ],
            )

        definition = context.types_by_name.get(name)
        if definition is None:
            return TypeAnalysis(
                nullable=True,
                warnings=[
                    context.warning(
                        WarningCode.UNKNOWN_NAMED_TYPE,
                        f'Field "{context.field_name}" in type "{context.current_type_name}" references unknown type "{name}"; generated as mixed.',
                    )
                ],
            )

        resolved = self.analyze(definition.expr, context.entering(name))
        extra, extra_warnings = self.mapper.map_constraints(
            constraints,
            name,
            resolved.builtin_target,
            context.current_type_name,
            context.field_name,
        )
        return replace(
            resolved,
            constraints=[*resolved.constraints, *extra],
            warnings=[*resolved.warnings, *extra_warnings],
        )

    # -----------------------------------------------------------------------
    # Collections
    # -----------------------------------------------------------------------

    def _element_constraints(self, element: TypeAnalysis) -> list[str]:
        """Wrap per-element constraints in a single Assert\\All, or nothing."""
        expressions = []
        if element.requires_valid:
            expressions.append("new Assert\\Valid")
        expressions.extend(f"new {constraint}" for constraint in element.constraints)

        if not expressions:
            return []
        return [f"Assert\\All(constraints: [{', '.join(expressions)}])"]

    def _analyze_array(self, type_expr: ArrayTypeNode, context: AnalysisContext) -> TypeAnalysis:
        item = self.analyze(type_expr.item_type, context)
        mapped, warnings = self.mapper.map_constraints(
            type_expr.constraints,
            ARRAY_TARGET,
            None,
            context.current_type_name,
            context.field_name,
        )

        item_doc_type = item.doc_type or doc_type_from_type_hint(item.type_hint)
        return TypeAnalysis(
            type_hint="array",
            doc_type=f"list<{item_doc_type}>",
            constraints=['Assert\\Type(type: "array")', *mapped, *self._element_constraints(item)],
            builtin_target=ARRAY_TARGET,
            warnings=[*item.warnings, *warnings],
        )

    def _analyze_dict(self, type_expr: DictTypeNode, context: AnalysisContext) -> TypeAnalysis:
        # Dictionaries never take the Array target, so min/max on them is not mapped
        value = self.analyze(type_expr.value_type, context)

        value_doc_type = value.doc_type or doc_type_from_type_hint(value.type_hint)
        return TypeAnalysis(
            type_hint="array",
            doc_type=f"array<string, {value_doc_type}>",
            constraints=['Assert\\Type(type: "array")', *self._element_constraints(value)],
            warnings=list(value.warnings),
        )

    # -----------------------------------------------------------------------
    # Composite types
    # -----------------------------------------------------------------------

    def _analyze_union(self, type_expr: UnionTypeNode, context: AnalysisContext) -> TypeAnalysis:
        """
        Analyze a union.

        Absent members make the result optional, null literals make it
        nullable, and literals of one PHP type collapse into an
        Assert\\Choice. Literals of another type are treated like any
        other member.
        """
        nullable = False
        optional = False
        choices: list[Any] = []
        choice_type: str | None = None
        members: list[TypeExprNode] = []

        for item in type_expr.items:
            if isinstance(item, AbsentTypeNode):
                optional = True
                nullable = True
                continue

            if isinstance(item, LiteralTypeNode):
                literal_type, value = literal_type_and_value(item.literal)
                if value is None:
                    nullable = True
                    continue

                if choice_type is None:
                    choice_type = literal_type
                if literal_type == choice_type:
                    choices.append(value)
                    continue

            members.append(item)

        if not members and choices:
            return TypeAnalysis(
                type_hint=choice_type or MIXED,
                nullable=nullable,
                optional=optional,
                constraints=[_choice_constraint(choices)],
            )

        if len(members) == 1 and not choices:
            analysis = self.analyze(members[0], context)
            return replace(
                analysis,
                nullable=analysis.nullable or nullable,
                optional=analysis.optional or optional,
            )

        analyses = [self.analyze(member, context) for member in members]

        type_hint = _common([a.type_hint for a in analyses], MIXED)
        constraints = [c for a in analyses for c in a.constraints]
        if choices:
            constraints.append(_choice_constraint(choices))
            if type_hint == MIXED and choice_type is not None:
                type_hint = choice_type

        warnings = [w for a in analyses for w in a.warnings]
        if len(members) > 1 and type_hint == MIXED:
            warnings.append(
                context.warning(
                    WarningCode.UNION_MIXED_TYPE,
                    f'Field "{context.field_name}" in type "{context.current_type_name}" has heterogeneous union; generated as mixed.',
                )
            )

        return TypeAnalysis(
            type_hint=type_hint,
            doc_type=_common([a.doc_type for a in analyses], None),
            nullable=nullable or any(a.nullable for a in analyses),
            optional=optional or any(a.optional for a in analyses),
            constraints=deduplicate_constraints(constraints),
            requires_valid=any(a.requires_valid for a in analyses),
            warnings=warnings,
        )

    def _analyze_intersection(self, type_expr: IntersectionTypeNode, context: AnalysisContext) -> TypeAnalysis:
        analyses = [self.analyze(item, context) for item in type_expr.items]

        return TypeAnalysis(
            type_hint=_common([a.type_hint for a in analyses], MIXED),
            doc_type=_common([a.doc_type for a in analyses], None),
            nullable=any(a.nullable for a in analyses),
            optional=any(a.optional for a in analyses),
            constraints=deduplicate_constraints([c for a in analyses for c in a.constraints]),
            requires_valid=any(a.requires_valid for a in analyses),
            builtin_target=_common([a.builtin_target for a in analyses], None),
            known_null_only=any(a.known_null_only for a in analyses),
            warnings=[w for a in analyses for w in a.warnings],
        )

    def _analyze_conditional(self, type_expr: ConditionalTypeNode, context: AnalysisContext) -> TypeAnalysis:
        if isinstance(type_expr.else_type, AbsentTypeNode):
            then_analysis = self.analyze(type_expr.then_type, context)
            return replace(
                then_analysis,
                optional=True,
                nullable=True,
                warnings=[
                    *then_analysis.warnings,
                    context.warning(
                        WarningCode.CONDITIONAL_ABSENT_SIMPLIFIED,
                        f'Field "{context.field_name}" in type "{context.current_type_name}" has conditional/absent type; generated as nullable optional field.',
                    ),
                ],
            )

        then_analysis = self.analyze(type_expr.then_type, context)
        else_analysis = self.analyze(type_expr.else_type, context)
        branches = [then_analysis, else_analysis]

        return TypeAnalysis(
            type_hint=_common([b.type_hint for b in branches], MIXED),
            doc_type=_common([b.doc_type for b in branches], None),
            nullable=then_analysis.nullable or else_analysis.nullable,
            optional=then_analysis.optional or else_analysis.optional,
            constraints=deduplicate_constraints([*then_analysis.constraints, *else_analysis.constraints]),
            requires_valid=then_analysis.requires_valid or else_analysis.requires_valid,
            known_null_only=then_analysis.known_null_only and else_analysis.known_null_only,
            warnings=[
                *then_analysis.warnings,
                *else_analysis.warnings,
                context.warning(
                    WarningCode.CONDITIONAL_TYPE_SIMPLIFIED,
                    f'Field "{context.field_name}" in type "{context.current_type_name}" has conditional type; generated as broad PHP type.',
                ),
            ],
        )
