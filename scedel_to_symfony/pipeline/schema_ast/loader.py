"""
Schema document loader that builds the AST.

Phase 1 of the pipeline: read a JSON schema document (the serialized
form of a parsed Scedel repository) into AST nodes. No type resolution
happens here; the loader only checks that the document is well formed.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .nodes import (
    AbsentTypeNode,
    AnnotationTree,
    ArgValueNode,
    ArrayTypeNode,
    BoolLiteralNode,
    ConditionalTypeNode,
    ConstraintCallArgNode,
    ConstraintNode,
    DefaultExprNode,
    DictTypeNode,
    DurationLiteralNode,
    EmptyArrayDefaultExprNode,
    EmptyArrayExprNode,
    ExprArgNode,
    ExpressionDefaultExprNode,
    ExpressionNode,
    FieldNode,
    FunctionCallExprNode,
    IntersectionTypeNode,
    ListArgNode,
    LiteralDefaultExprNode,
    LiteralNode,
    LiteralTypeNode,
    NamedTypeNode,
    NullableNamedTypeNode,
    NullableTypeNode,
    NullDefaultExprNode,
    NullLiteralNode,
    NumberLiteralNode,
    PathNode,
    PathRootKind,
    RecordTypeNode,
    SchemaRepository,
    StringLiteralNode,
    TypeDefinition,
    TypeExprNode,
    UnionTypeNode,
)

logger = logging.getLogger(__name__)


class SchemaLoadError(Exception):
    """Raised when a schema document cannot be loaded.

    Carries the source name and, for syntax errors, the line and column
    of the failure. The underlying error is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        line: int | None = None,
        column: int | None = None,
    ):
        super().__init__(message)
        self.source = source
        self.line = line
        self.column = column


class SchemaLoader:
    """Loads JSON schema documents into a SchemaRepository."""

    def load_file(self, path: str | Path) -> SchemaRepository:
        """
        Load a schema document from disk.

        Args:
            path: Path to the JSON schema document

        Returns:
            SchemaRepository with every declared type

        Raises:
            SchemaLoadError: If the file cannot be read or is malformed
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise SchemaLoadError(f"Cannot read schema file: {path}", source=str(path)) from e

        return self.load_string(text, str(path))

    def load_string(self, text: str, source_name: str = "<string>") -> SchemaRepository:
        """Load a schema document from JSON text."""
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise SchemaLoadError(
                f"Invalid JSON: {e.msg}",
                source=source_name,
                line=e.lineno,
                column=e.colno,
            ) from e

        return self.load_dict(document, source_name)

    def load_dict(self, document: Any, source_name: str = "<dict>") -> SchemaRepository:
        """
        Build a repository from an already decoded document.

        Args:
            document: Decoded JSON document with a top-level "types" object
            source_name: Name used in error messages

        Returns:
            SchemaRepository with types in declaration order
        """
        logger.debug("Loading schema document from %s", source_name)

        if not isinstance(document, dict):
            raise SchemaLoadError("Schema document must be a JSON object", source=source_name)

        types = document.get("types", {})
        if not isinstance(types, dict):
            raise SchemaLoadError('"types" must be an object mapping type names to definitions', source=source_name)

        repository = SchemaRepository(source_name=source_name)
        for name, definition in types.items():
            repository.types.append(self._parse_definition(name, definition, source_name))

        logger.debug("Loaded %d type(s) from %s", len(repository.types), source_name)
        return repository

    def _parse_definition(self, name: str, definition: Any, source_name: str) -> TypeDefinition:
        path = f"types.{name}"
        if not isinstance(definition, dict) or "type" not in definition:
            raise SchemaLoadError(f'{path}: definition must be an object with a "type" entry', source=source_name)

        try:
            type_def = TypeDefinition(
                name=name,
                expr=self._parse_type(definition["type"], f"{path}.type"),
                annotations=self._parse_annotations(definition.get("annotations", {}), f"{path}.annotations"),
            )

            field_annotations = definition.get("fieldAnnotations", {})
            if not isinstance(field_annotations, dict):
                raise ValueError(f"{path}.fieldAnnotations: must be an object")
            for field_path, annotations in field_annotations.items():
                self._parse_annotations(
                    annotations,
                    f"{path}.fieldAnnotations.{field_path}",
                    tree=type_def.field_annotations,
                    prefix=field_path.split("."),
                )
        except ValueError as e:
            raise SchemaLoadError(str(e), source=source_name) from e

        return type_def

    # -----------------------------------------------------------------------
    # Type expressions
    # -----------------------------------------------------------------------

    def _parse_type(self, data: Any, path: str) -> TypeExprNode:
        """
        Parse a type expression recursively.

        Args:
            data: Either a type name string or an object with a "kind" entry
            path: Current location in the document (for error messages)

        Returns:
            Appropriate TypeExprNode subclass
        """
        # Shorthand: "Uint" or "Comment?"
        if isinstance(data, str):
            if data.endswith("?"):
                return NullableNamedTypeNode(name=self._require_name(data[:-1], path))
            return NamedTypeNode(name=self._require_name(data, path))

        if not isinstance(data, dict):
            raise ValueError(f"{path}: type expression must be a string or an object")

        kind = data.get("kind")

        if kind == "named":
            return NamedTypeNode(
                name=self._require_name(data.get("name"), path),
                constraints=self._parse_constraints(data.get("constraints", []), path),
            )

        if kind == "nullable_named":
            return NullableNamedTypeNode(name=self._require_name(data.get("name"), path))

        if kind == "nullable":
            return NullableTypeNode(inner_type=self._parse_type(self._require(data, "type", path), f"{path}.type"))

        if kind == "array":
            return ArrayTypeNode(
                item_type=self._parse_type(self._require(data, "items", path), f"{path}.items"),
                constraints=self._parse_constraints(data.get("constraints", []), path),
            )

        if kind == "dict":
            return DictTypeNode(value_type=self._parse_type(self._require(data, "values", path), f"{path}.values"))

        if kind == "record":
            return RecordTypeNode(fields=self._parse_fields(data.get("fields", []), path))

        if kind == "literal":
            return LiteralTypeNode(literal=self._parse_literal(data.get("value"), f"{path}.value"))

        if kind in ("union", "intersection"):
            items = self._require(data, "items", path)
            if not isinstance(items, list) or not items:
                raise ValueError(f"{path}.items: must be a non-empty list")
            parsed = [self._parse_type(item, f"{path}.items[{i}]") for i, item in enumerate(items)]
            if kind == "union":
                return UnionTypeNode(items=parsed)
            return IntersectionTypeNode(items=parsed)

        if kind == "conditional":
            condition = data.get("when")
            return ConditionalTypeNode(
                condition=self._parse_expression(condition, f"{path}.when") if condition is not None else None,
                then_type=self._parse_type(self._require(data, "then", path), f"{path}.then"),
                else_type=self._parse_type(self._require(data, "else", path), f"{path}.else"),
            )

        if kind == "absent":
            return AbsentTypeNode()

        raise ValueError(f"{path}: unknown type kind {kind!r}")

    def _parse_fields(self, fields: Any, path: str) -> list[FieldNode]:
        if not isinstance(fields, list):
            raise ValueError(f"{path}.fields: must be a list")

        result = []
        for i, data in enumerate(fields):
            field_path = f"{path}.fields[{i}]"
            if not isinstance(data, dict):
                raise ValueError(f"{field_path}: field must be an object")

            default = data.get("default")
            result.append(
                FieldNode(
                    name=self._require_name(data.get("name"), field_path),
                    type=self._parse_type(self._require(data, "type", field_path), f"{field_path}.type"),
                    optional=bool(data.get("optional", False)),
                    default=self._parse_default(default, f"{field_path}.default") if default is not None else None,
                )
            )
        return result

    def _parse_default(self, data: Any, path: str) -> DefaultExprNode:
        if not isinstance(data, dict):
            raise ValueError(f"{path}: default must be an object with a 'kind' entry")

        kind = data.get("kind")
        if kind == "null":
            return NullDefaultExprNode()
        if kind == "empty_array":
            return EmptyArrayDefaultExprNode()
        if kind == "literal":
            return LiteralDefaultExprNode(literal=self._parse_literal(data.get("value"), f"{path}.value"))
        if kind == "expression":
            return ExpressionDefaultExprNode(expression=self._parse_expression(self._require(data, "expression", path), f"{path}.expression"))

        raise ValueError(f"{path}: unknown default kind {kind!r}")

    # -----------------------------------------------------------------------
    # Constraints and expressions
    # -----------------------------------------------------------------------

    def _parse_constraints(self, constraints: Any, path: str) -> list[ConstraintNode]:
        if not isinstance(constraints, list):
            raise ValueError(f"{path}.constraints: must be a list")

        result = []
        for i, data in enumerate(constraints):
            constraint_path = f"{path}.constraints[{i}]"
            if not isinstance(data, dict):
                raise ValueError(f"{constraint_path}: constraint must be an object")

            constraint = ConstraintNode(
                name=self._require_name(data.get("name"), constraint_path),
                negated=bool(data.get("negated", False)),
            )

            if "args" in data:
                args = data["args"]
                if not isinstance(args, list):
                    raise ValueError(f"{constraint_path}.args: must be a list")
                constraint.uses_call_syntax = True
                constraint.call_args = [self._parse_call_arg(arg, f"{constraint_path}.args[{j}]") for j, arg in enumerate(args)]
            elif "arg" in data:
                constraint.arg = self._parse_arg_value(data["arg"], f"{constraint_path}.arg")

            result.append(constraint)
        return result

    def _parse_call_arg(self, data: Any, path: str) -> ConstraintCallArgNode:
        # Named call argument: {"name": "value", "value": 5}
        if isinstance(data, dict) and "value" in data:
            return ConstraintCallArgNode(
                value=self._parse_expression(data["value"], f"{path}.value"),
                name=data.get("name"),
            )
        return ConstraintCallArgNode(value=self._parse_expression(data, path))

    def _parse_arg_value(self, data: Any, path: str) -> ArgValueNode:
        if isinstance(data, list):
            return ListArgNode(items=[self._parse_expression(item, f"{path}[{i}]") for i, item in enumerate(data)])
        return ExprArgNode(value=self._parse_expression(data, path))

    def _parse_expression(self, data: Any, path: str) -> ExpressionNode:
        if isinstance(data, list):
            if data:
                raise ValueError(f"{path}: only the empty array is allowed as an expression")
            return EmptyArrayExprNode()

        if not isinstance(data, dict):
            return self._parse_literal(data, path)

        if "path" in data:
            segments = data["path"]
            if not isinstance(segments, list) or not all(isinstance(s, str) for s in segments):
                raise ValueError(f"{path}.path: must be a list of strings")
            root = data.get("root")
            if root is None:
                return PathNode(root_kind=PathRootKind.THIS, segments=list(segments))
            return PathNode(root_kind=PathRootKind.IDENTIFIER, root_name=str(root), segments=list(segments))

        if "duration_ms" in data:
            return self._parse_literal(data, path)

        if "call" in data:
            args = data.get("args", [])
            if not isinstance(args, list):
                raise ValueError(f"{path}.args: must be a list")
            return FunctionCallExprNode(
                name=str(data["call"]),
                args=[self._parse_expression(arg, f"{path}.args[{i}]") for i, arg in enumerate(args)],
            )

        raise ValueError(f"{path}: unrecognized expression {data!r}")

    def _parse_literal(self, value: Any, path: str) -> LiteralNode:
        # bool before int: bool is an int subclass
        if isinstance(value, bool):
            return BoolLiteralNode(value=value)
        if value is None:
            return NullLiteralNode()
        if isinstance(value, str):
            return StringLiteralNode(value=value)
        if isinstance(value, (int, float)):
            return NumberLiteralNode(raw=json.dumps(value), numeric_value=value)
        if isinstance(value, dict) and "duration_ms" in value:
            milliseconds = value["duration_ms"]
            if isinstance(milliseconds, bool) or not isinstance(milliseconds, int):
                raise ValueError(f"{path}.duration_ms: must be an integer")
            return DurationLiteralNode(raw=str(value.get("raw", f"{milliseconds}ms")), milliseconds=milliseconds)

        raise ValueError(f"{path}: unsupported literal {value!r}")

    # -----------------------------------------------------------------------
    # Annotations
    # -----------------------------------------------------------------------

    def _parse_annotations(
        self,
        data: Any,
        path: str,
        tree: AnnotationTree | None = None,
        prefix: list[str] | None = None,
    ) -> AnnotationTree:
        """
        Parse a flat ``{"dotted.key": value}`` mapping into an annotation tree.

        A list value is the declaration history of that key, oldest first.
        """
        if tree is None:
            tree = AnnotationTree()
        if not isinstance(data, dict):
            raise ValueError(f"{path}: annotations must be an object")

        for key, raw in data.items():
            values = raw if isinstance(raw, list) else [raw]
            for value in values:
                tree.add([*(prefix or []), *key.split(".")], self._annotation_text(value, f"{path}.{key}"))
        return tree

    def _annotation_text(self, value: Any, path: str) -> str:
        # A bare flag annotation (`@php.symfony.ignore`) carries no value
        if value is None or value is True:
            return "true"
        if value is False:
            return "false"
        if isinstance(value, (str, int, float)):
            return str(value)
        raise ValueError(f"{path}: annotation value must be a scalar")

    def _require(self, data: dict[str, Any], key: str, path: str) -> Any:
        if key not in data:
            raise ValueError(f"{path}: missing {key!r}")
        return data[key]

    def _require_name(self, value: Any, path: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{path}: expected a non-empty name")
        return value
