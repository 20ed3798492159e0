"""
Mapping of schema constraints onto Symfony validator constraints.

Each schema constraint (``min``, ``max``, ``regex``, ``format`` ...) is
resolved against a target kind (a builtin type name or the ``Array``
pseudo kind) and turned into zero or more ``Assert\\...`` expressions.
Anything that cannot be mapped produces a warning instead.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ...utils import export_php
from ..model import GenerationWarning, WarningCode
from ..schema_ast.nodes import (
    ArgValueNode,
    ConstraintCallArgNode,
    ConstraintNode,
    EmptyArrayExprNode,
    ExprArgNode,
    ExpressionNode,
    ListArgNode,
    LiteralNode,
    PathNode,
    PathRootKind,
)
from .builtins import (
    ARRAY_TARGET,
    IP_TYPES,
    NUMERIC_TYPES,
    STRING_LENGTH_TYPES,
    TEMPORAL_TYPES,
    is_builtin,
)
from .literals import is_int_value, literal_value

logger = logging.getLogger(__name__)

_DELIMITED_PATTERN = re.compile(r"^([/~#]).+\1[imsxuADSUXJ]*$")

# Scedel date format tokens to PHP date() characters
_DATE_FORMAT_TOKENS = {
    "YYYY": "Y",
    "MM": "m",
    "DD": "d",
    "HH": "H",
    "ii": "i",
    "SS": "s",
}
_DATE_FORMAT_PATTERN = re.compile("|".join(_DATE_FORMAT_TOKENS))

_COMPARISON_CONSTRAINTS = {
    "min": r"Assert\GreaterThanOrEqual",
    "max": r"Assert\LessThanOrEqual",
    "less": r"Assert\LessThan",
    "greater": r"Assert\GreaterThan",
}

_TEMPORAL_CONSTRAINTS = {
    "Date": r"Assert\Date",
    "DateTime": r"Assert\DateTime",
    "Time": r"Assert\Time",
}


class ArgumentKind(Enum):
    """Shape of a constraint argument after normalization."""

    LITERAL = "literal"
    LIST = "list"
    PROPERTY_PATH = "property_path"
    NONE = "none"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class ConstraintArgument:
    kind: ArgumentKind
    value: Any = None

    def is_literal(self) -> bool:
        return self.kind is ArgumentKind.LITERAL

    def is_int_literal(self) -> bool:
        return self.is_literal() and is_int_value(self.value)

    def is_string_literal(self) -> bool:
        return self.is_literal() and isinstance(self.value, str)


_NO_ARGUMENT = ConstraintArgument(ArgumentKind.NONE)
_UNSUPPORTED_ARGUMENT = ConstraintArgument(ArgumentKind.UNSUPPORTED)


# ---------------------------------------------------------------------------
# Argument normalization
# ---------------------------------------------------------------------------


def read_constraint_argument(constraint: ConstraintNode) -> ConstraintArgument:
    """
    Normalize the argument of a constraint.

    ``min(5)`` and ``min:5`` both read as a literal 5. Call syntax with more
    than one argument or with a named argument is unsupported.
    """
    if constraint.uses_call_syntax:
        if not constraint.call_args:
            return _NO_ARGUMENT
        if len(constraint.call_args) > 1:
            return _UNSUPPORTED_ARGUMENT
        return _read_call_arg(constraint.call_args[0])

    if constraint.arg is None:
        return _NO_ARGUMENT

    return _read_arg_value(constraint.arg)


def _read_call_arg(arg: ConstraintCallArgNode) -> ConstraintArgument:
    if arg.name is not None:
        return _UNSUPPORTED_ARGUMENT
    return read_expression_argument(arg.value)


def _read_arg_value(arg: ArgValueNode) -> ConstraintArgument:
    if isinstance(arg, ListArgNode):
        items = []
        for item in arg.items:
            parsed = read_expression_argument(item)
            if not parsed.is_literal():
                return _UNSUPPORTED_ARGUMENT
            items.append(parsed.value)
        return ConstraintArgument(ArgumentKind.LIST, items)

    if isinstance(arg, ExprArgNode):
        return read_expression_argument(arg.value)

    return _UNSUPPORTED_ARGUMENT


def read_expression_argument(expression: ExpressionNode | None) -> ConstraintArgument:
    if expression is None:
        return _NO_ARGUMENT

    if isinstance(expression, LiteralNode):
        return ConstraintArgument(ArgumentKind.LITERAL, literal_value(expression))

    if isinstance(expression, EmptyArrayExprNode):
        return ConstraintArgument(ArgumentKind.LIST, [])

    if isinstance(expression, PathNode):
        path = property_path(expression)
        if path is None:
            return _UNSUPPORTED_ARGUMENT
        return ConstraintArgument(ArgumentKind.PROPERTY_PATH, path)

    # Function calls and computed expressions are never evaluated
    return _UNSUPPORTED_ARGUMENT


def property_path(path: PathNode) -> str | None:
    """Format a path as a Symfony property path; None if the path is empty."""
    if path.root_kind is PathRootKind.THIS:
        if not path.segments:
            return None
        return ".".join(path.segments)

    if path.root_kind is PathRootKind.IDENTIFIER:
        if not path.root_name:
            return None
        return ".".join([path.root_name, *path.segments])

    return None


# ---------------------------------------------------------------------------
# Pattern and format helpers
# ---------------------------------------------------------------------------


def normalize_regex_pattern(raw: str) -> str:
    """
    Turn a schema regex into a PCRE pattern with delimiters.

    A pattern already wrapped in ``/``, ``~`` or ``#`` (with optional
    modifiers) passes through; anything else is wrapped in ``/.../u``.
    """
    raw = raw.strip()
    if not raw:
        return "/^$/"

    if _DELIMITED_PATTERN.match(raw):
        return raw

    return "/" + raw.replace("/", "\\/") + "/u"


def to_php_date_format(scedel_format: str) -> str:
    """Translate ``YYYY-MM-DD`` style tokens to PHP ``Y-m-d``."""
    return _DATE_FORMAT_PATTERN.sub(lambda m: _DATE_FORMAT_TOKENS[m.group(0)], scedel_format)


def resolve_constraint_target(target_type: str, fallback_target: str | None) -> str | None:
    """
    Pick the kind a constraint is mapped against.

    Args:
        target_type: Name of the type the constraint was declared on
        fallback_target: Builtin an alias resolves to, if any

    Returns:
        The builtin name or ``Array``, or None if the target is unknown
    """
    if is_builtin(target_type) or target_type == ARRAY_TARGET:
        return target_type
    return fallback_target


# ---------------------------------------------------------------------------
# Mapper
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _MappingRequest:
    constraint: ConstraintNode
    argument: ConstraintArgument
    target: str
    type_name: str | None
    field_name: str | None

    @property
    def name(self) -> str:
        return self.constraint.name


_Mapped = tuple[list[str], list[GenerationWarning]]


@dataclass(frozen=True)
class _MappingRule:
    targets: tuple[str, ...]
    names: tuple[str, ...]
    handler: Callable[[ConstraintMapper, _MappingRequest], _Mapped]

    def applies_to(self, target: str, name: str) -> bool:
        return target in self.targets and name in self.names


class ConstraintMapper:
    """Maps schema constraints to Symfony constraint expressions."""

    def map_constraints(
        self,
        constraints: list[ConstraintNode],
        target_type: str,
        fallback_target: str | None = None,
        type_name: str | None = None,
        field_name: str | None = None,
    ) -> _Mapped:
        """
        Map every constraint declared at one type occurrence.

        Args:
            constraints: Constraints in declaration order
            target_type: Builtin name, ``Array``, or the custom type name they were declared on
            fallback_target: Builtin to use when ``target_type`` is not a builtin
            type_name: Enclosing type (for warnings)
            field_name: Enclosing field (for warnings)

        Returns:
            Tuple of (constraint expressions, warnings)
        """
        mapped: list[str] = []
        warnings: list[GenerationWarning] = []

        for constraint in constraints:
            if constraint.negated:
                warnings.append(
                    GenerationWarning.create(
                        WarningCode.UNSUPPORTED_NEGATED_CONSTRAINT,
                        f'Constraint "{constraint.name}" on field "{field_name}" is negated and cannot be mapped directly to Symfony.',
                        type_name,
                        field_name,
                    )
                )
                continue

            expressions, constraint_warnings = self.map_constraint(constraint, target_type, fallback_target, type_name, field_name)
            mapped.extend(expressions)
            warnings.extend(constraint_warnings)

        return mapped, warnings

    def map_constraint(
        self,
        constraint: ConstraintNode,
        target_type: str,
        fallback_target: str | None = None,
        type_name: str | None = None,
        field_name: str | None = None,
    ) -> _Mapped:
        """Map a single non-negated constraint."""
        target = resolve_constraint_target(target_type, fallback_target)
        if target is None:
            return [], [
                GenerationWarning.create(
                    WarningCode.UNKNOWN_CONSTRAINT_TARGET,
                    f'Constraint "{constraint.name}" on field "{field_name}" has unsupported target type "{target_type}".',
                    type_name,
                    field_name,
                )
            ]

        request = _MappingRequest(
            constraint=constraint,
            argument=read_constraint_argument(constraint),
            target=target,
            type_name=type_name,
            field_name=field_name,
        )

        for rule in _RULES:
            if rule.applies_to(target, constraint.name):
                return rule.handler(self, request)

        logger.debug("No mapping rule for constraint %r on target %s", constraint.name, target)
        return [], [
            GenerationWarning.create(
                WarningCode.UNSUPPORTED_CONSTRAINT,
                f'Constraint "{constraint.name}" on field "{field_name}" (target "{target_type}") is not supported by the generator.',
                type_name,
                field_name,
            )
        ]

    # -----------------------------------------------------------------------
    # Rule handlers
    # -----------------------------------------------------------------------

    def _map_length(self, request: _MappingRequest) -> _Mapped:
        if not request.argument.is_int_literal():
            return self._unsupported_argument(request)
        return [f"Assert\\Length({request.name}: {request.argument.value})"], []

    def _map_count(self, request: _MappingRequest) -> _Mapped:
        if not request.argument.is_int_literal():
            return self._unsupported_argument(request)
        return [f"Assert\\Count({request.name}: {request.argument.value})"], []

    def _map_comparison(self, request: _MappingRequest) -> _Mapped:
        constraint_name = _COMPARISON_CONSTRAINTS[request.name]
        argument = request.argument

        if argument.kind is ArgumentKind.PROPERTY_PATH:
            return [f"{constraint_name}(propertyPath: {export_php(argument.value)})"], []
        if argument.kind is ArgumentKind.LITERAL:
            return [f"{constraint_name}(value: {export_php(argument.value)})"], []

        return self._unsupported_argument(request)

    def _map_temporal_format(self, request: _MappingRequest) -> _Mapped:
        if not request.argument.is_string_literal():
            return self._unsupported_argument(request)

        constraint_name = _TEMPORAL_CONSTRAINTS.get(request.target, r"Assert\DateTime")
        php_format = to_php_date_format(request.argument.value)
        return [f"{constraint_name}(format: {export_php(php_format)})"], []

    def _map_pattern(self, request: _MappingRequest) -> _Mapped:
        if not request.argument.is_string_literal():
            return self._unsupported_argument(request)

        pattern = normalize_regex_pattern(request.argument.value)
        return [f"Assert\\Regex(pattern: {export_php(pattern)})"], []

    def _map_precision(self, request: _MappingRequest) -> _Mapped:
        if not request.argument.is_int_literal() or request.argument.value < 0:
            return self._unsupported_argument(request)

        pattern = "/^[+-]?\\d+(?:\\.\\d{1,%d})?$/" % request.argument.value
        return [f"Assert\\Regex(pattern: {export_php(pattern)})"], []

    def _map_url_scheme(self, request: _MappingRequest) -> _Mapped:
        argument = request.argument
        if argument.is_string_literal():
            protocols = [argument.value]
        elif argument.kind is ArgumentKind.LIST and all(isinstance(item, str) for item in argument.value):
            protocols = list(argument.value)
        else:
            protocols = []

        if not protocols:
            return self._unsupported_argument(request)
        return [f"Assert\\Url(protocols: {export_php(protocols)})"], []

    def _reject_url_domain(self, request: _MappingRequest) -> _Mapped:
        return [], [
            GenerationWarning.create(
                WarningCode.UNSUPPORTED_URL_DOMAIN_CONSTRAINT,
                f'Constraint "domain" on field "{request.field_name}" for Url is not mapped automatically.',
                request.type_name,
                request.field_name,
            )
        ]

    def _reject_email_domain(self, request: _MappingRequest) -> _Mapped:
        return [], [
            GenerationWarning.create(
                WarningCode.UNSUPPORTED_EMAIL_DOMAIN_CONSTRAINT,
                f'Constraint "domain" on field "{request.field_name}" for Email is not mapped automatically.',
                request.type_name,
                request.field_name,
            )
        ]

    def _reject_ip(self, request: _MappingRequest) -> _Mapped:
        return [], [
            GenerationWarning.create(
                WarningCode.UNSUPPORTED_IP_CONSTRAINT,
                f'Constraint "{request.name}" on field "{request.field_name}" is not mapped automatically for IP values.',
                request.type_name,
                request.field_name,
            )
        ]

    def _unsupported_argument(self, request: _MappingRequest) -> _Mapped:
        return [], [
            GenerationWarning.create(
                WarningCode.UNSUPPORTED_CONSTRAINT_ARGUMENT,
                f'Constraint "{request.name}" on field "{request.field_name}" has unsupported argument for Symfony mapping.',
                request.type_name,
                request.field_name,
            )
        ]


# First matching (target, name) rule wins
_RULES: tuple[_MappingRule, ...] = (
    _MappingRule(STRING_LENGTH_TYPES, ("min", "max"), ConstraintMapper._map_length),
    _MappingRule((ARRAY_TARGET,), ("min", "max"), ConstraintMapper._map_count),
    _MappingRule(NUMERIC_TYPES, ("min", "max", "less", "greater"), ConstraintMapper._map_comparison),
    _MappingRule(TEMPORAL_TYPES, ("min", "max"), ConstraintMapper._map_comparison),
    _MappingRule(TEMPORAL_TYPES, ("format",), ConstraintMapper._map_temporal_format),
    _MappingRule(("Duration",), ("min", "max"), ConstraintMapper._map_comparison),
    _MappingRule(STRING_LENGTH_TYPES, ("regex", "format"), ConstraintMapper._map_pattern),
    _MappingRule(("Decimal",), ("precision",), ConstraintMapper._map_precision),
    _MappingRule(("Url",), ("scheme",), ConstraintMapper._map_url_scheme),
    _MappingRule(("Url",), ("domain",), ConstraintMapper._reject_url_domain),
    _MappingRule(("Email",), ("domain",), ConstraintMapper._reject_email_domain),
    _MappingRule(IP_TYPES, ("subnet", "mask"), ConstraintMapper._reject_ip),
)
