"""
Result types returned by the generator.

These are plain value objects: a generated file, a non-fatal warning,
and the combined result of one generation run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class WarningCode(str, Enum):
    """Stable machine-readable warning codes."""

    SKIPPED_NON_RECORD_TYPE = "skipped_non_record_type"
    INVALID_CLASS_NAME = "invalid_class_name"
    INVALID_PROPERTY_NAME = "invalid_property_name"
    UNKNOWN_PHP_ANNOTATION = "unknown_php_annotation"
    INLINE_RECORD_AS_ARRAY = "inline_record_as_array"
    UNSUPPORTED_TYPE_NODE = "unsupported_type_node"
    RECURSIVE_TYPE_ALIAS = "recursive_type_alias"
    UNKNOWN_NAMED_TYPE = "unknown_named_type"
    UNION_MIXED_TYPE = "union_mixed_type"
    CONDITIONAL_ABSENT_SIMPLIFIED = "conditional_absent_simplified"
    CONDITIONAL_TYPE_SIMPLIFIED = "conditional_type_simplified"
    UNSUPPORTED_NEGATED_CONSTRAINT = "unsupported_negated_constraint"
    UNKNOWN_CONSTRAINT_TARGET = "unknown_constraint_target"
    UNSUPPORTED_CONSTRAINT_ARGUMENT = "unsupported_constraint_argument"
    UNSUPPORTED_CONSTRAINT = "unsupported_constraint"
    UNSUPPORTED_URL_DOMAIN_CONSTRAINT = "unsupported_url_domain_constraint"
    UNSUPPORTED_EMAIL_DOMAIN_CONSTRAINT = "unsupported_email_domain_constraint"
    UNSUPPORTED_IP_CONSTRAINT = "unsupported_ip_constraint"
    UNSUPPORTED_DEFAULT_EXPRESSION = "unsupported_default_expression"
    UNSUPPORTED_DEFAULT_NODE = "unsupported_default_node"


@dataclass(frozen=True)
class GenerationWarning:
    """A construct the generator could not map faithfully."""

    code: str
    message: str
    type_name: str | None = None
    field_name: str | None = None

    @staticmethod
    def create(
        code: WarningCode,
        message: str,
        type_name: str | None = None,
        field_name: str | None = None,
    ) -> GenerationWarning:
        return GenerationWarning(code.value, message, type_name, field_name)

    @property
    def location(self) -> str:
        """``Type.field``, ``Type`` or ``schema`` when no type is known."""
        if self.type_name is None:
            return "schema"
        if self.field_name is None:
            return self.type_name
        return f"{self.type_name}.{self.field_name}"


@dataclass(frozen=True)
class GeneratedFile:
    type_name: str
    path: str
    contents: str


@dataclass(frozen=True)
class GenerationResult:
    files: list[GeneratedFile] = field(default_factory=list)
    warnings: list[GenerationWarning] = field(default_factory=list)

    def warnings_with_code(self, code: WarningCode | str) -> list[GenerationWarning]:
        """Filter warnings by code, e.g. to gate a CI run on one class of diagnostic."""
        value = code.value if isinstance(code, WarningCode) else code
        return [w for w in self.warnings if w.code == value]

    def file_for(self, type_name: str) -> GeneratedFile | None:
        for generated in self.files:
            if generated.type_name == type_name:
                return generated
        return None
