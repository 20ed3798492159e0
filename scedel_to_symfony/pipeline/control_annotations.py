"""
``php.*`` control annotations.

Annotations under the ``php.`` prefix steer code generation: class
placement, property renames, ignored types and fields, validation groups
and hand-written constraints. Keys outside the recognized sets are
reported as warnings.
"""

from __future__ import annotations

from ..utils import deduplicate_constraints, export_php
from .model import GenerationWarning, WarningCode

PHP_PREFIX = "php."

NAMESPACE = "php.codegen.namespace"
DIR = "php.codegen.dir"
CLASS = "php.codegen.class"
FILE = "php.codegen.file"
PROPERTY = "php.codegen.property"
IGNORE = "php.symfony.ignore"
TYPE = "php.symfony.type"
NOT_BLANK = "php.symfony.not_blank"
VALIDATION_GROUPS = "php.symfony.validation.groups"
CONSTRAINT = "php.symfony.constraint"
CONSTRAINT_PREFIX = CONSTRAINT + "."

TYPE_ANNOTATIONS = frozenset({NAMESPACE, DIR, CLASS, FILE, IGNORE, VALIDATION_GROUPS, CONSTRAINT})
FIELD_ANNOTATIONS = frozenset({PROPERTY, IGNORE, TYPE, NOT_BLANK, VALIDATION_GROUPS, CONSTRAINT})


def _is_constraint_key(key: str) -> bool:
    return key == CONSTRAINT or key.startswith(CONSTRAINT_PREFIX)


def is_allowed_type_annotation(key: str) -> bool:
    return key in TYPE_ANNOTATIONS or key.startswith(CONSTRAINT_PREFIX)


def is_allowed_field_annotation(key: str) -> bool:
    return key in FIELD_ANNOTATIONS or key.startswith(CONSTRAINT_PREFIX)


def unknown_type_annotations(type_name: str, annotations: dict[str, str]) -> list[GenerationWarning]:
    """Warn about ``php.*`` type annotations that nothing consumes."""
    return [
        GenerationWarning.create(
            WarningCode.UNKNOWN_PHP_ANNOTATION,
            f'Type "{type_name}" has unrecognized PHP annotation "{key}".',
            type_name,
        )
        for key in annotations
        if key.startswith(PHP_PREFIX) and not is_allowed_type_annotation(key)
    ]


def unknown_field_annotations(type_name: str, field_name: str, annotations: dict[str, str]) -> list[GenerationWarning]:
    """Warn about ``php.*`` field annotations that nothing consumes."""
    return [
        GenerationWarning.create(
            WarningCode.UNKNOWN_PHP_ANNOTATION,
            f'Type "{type_name}" field "{field_name}" has unrecognized PHP annotation "{key}".',
            type_name,
            field_name,
        )
        for key in annotations
        if key.startswith(PHP_PREFIX) and not is_allowed_field_annotation(key)
    ]


def collect_custom_constraints(annotations: dict[str, str]) -> list[str]:
    """
    Collect hand-written constraints from ``php.symfony.constraint[.*]`` annotations.

    ``#[Length(min: 3)]``, ``Length(min: 3)`` and ``Assert\\Length(min: 3)``
    all yield ``Assert\\Length(min: 3)``. A leading ``\\`` marks a fully
    qualified constraint class that is kept as written.

    Args:
        annotations: Flat annotation mapping of a type or field

    Returns:
        Deduplicated constraint expressions in annotation order
    """
    result = []
    for key, value in annotations.items():
        if not _is_constraint_key(key):
            continue

        constraint = value.strip()
        # A bare `@php.symfony.constraint` flag carries no constraint
        if not constraint or constraint.lower() == "true":
            continue

        if constraint.startswith("#[") and constraint.endswith("]"):
            constraint = constraint[2:-1]

        if not constraint.startswith("Assert\\") and not constraint.startswith("\\"):
            constraint = "Assert\\" + constraint

        result.append(constraint)

    return deduplicate_constraints(result)


def with_groups(constraint: str, groups: list[str] | None) -> str:
    """
    Attach validation groups to a constraint expression.

    Examples:
        ("Assert\\NotNull", ["create"]) -> "Assert\\NotNull(groups: ['create'])"
        ("Assert\\Length(min: 5)", ["create"]) -> "Assert\\Length(min: 5, groups: ['create'])"
    """
    if not groups or "groups:" in constraint:
        return constraint

    groups_code = export_php(list(groups))
    if "(" not in constraint:
        return f"{constraint}(groups: {groups_code})"

    if not constraint.endswith(")"):
        return constraint

    return f"{constraint[:-1]}, groups: {groups_code})"
