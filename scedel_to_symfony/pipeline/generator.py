"""
Symfony class generator.

Orchestrates the pipeline for every custom type of a schema repository:

1. Flatten type annotations and collect record fields
2. Build a descriptor per record type (namespace, class name, file path)
3. Analyze each field and assemble its property and constraints
4. Render the class through the PHP backend
"""

from __future__ import annotations

import logging

from ..utils import (
    build_file_path,
    build_type_hint,
    deduplicate_constraints,
    export_php,
    normalize_class_name,
    normalize_dir,
    normalize_property_name,
    parse_bool,
    parse_csv,
)
from . import control_annotations as ctl
from .analyzer import (
    AnalysisContext,
    ClassDef,
    Descriptor,
    PropertyDef,
    RecordField,
    TypeAnalyzer,
    collect_record_fields,
    flatten_annotation_tree,
    merge_field_annotations,
)
from .analyzer.literals import literal_value
from .backends import PhpBackend
from .config import CodegenOptions
from .model import GeneratedFile, GenerationResult, GenerationWarning, WarningCode
from .schema_ast.nodes import (
    DefaultExprNode,
    EmptyArrayDefaultExprNode,
    EmptyArrayExprNode,
    ExpressionDefaultExprNode,
    LiteralDefaultExprNode,
    LiteralNode,
    NullDefaultExprNode,
    SchemaRepository,
    TypeDefinition,
)

logger = logging.getLogger(__name__)


class SymfonyCodeGenerator:
    """
    Generates PHP classes with Symfony validation attributes from a schema repository.

    Usage:
        generator = SymfonyCodeGenerator()
        result = generator.generate(repository, CodegenOptions(default_namespace="App\\Dto"))
        for generated in result.files:
            print(generated.path)
    """

    def __init__(self, analyzer: TypeAnalyzer | None = None):
        self.analyzer = analyzer or TypeAnalyzer()

    def generate(self, repository: SchemaRepository, options: CodegenOptions | None = None) -> GenerationResult:
        """
        Generate one PHP class per record-like custom type.

        Types are processed in name order, so the same repository always
        yields the same files and warnings.

        Args:
            repository: Loaded schema repository
            options: Generation options (defaults when omitted)

        Returns:
            GenerationResult with generated files and warnings
        """
        options = options or CodegenOptions()
        backend = PhpBackend(options)

        types_by_name: dict[str, TypeDefinition] = {}
        for type_def in repository.custom_types():
            types_by_name[type_def.name] = type_def

        warnings: list[GenerationWarning] = []
        descriptors: dict[str, Descriptor] = {}

        for type_name in sorted(types_by_name):
            descriptor, descriptor_warnings = self._build_descriptor(types_by_name[type_name], types_by_name, options)
            warnings.extend(descriptor_warnings)
            if descriptor is not None:
                descriptors[type_name] = descriptor

        files = []
        for type_name, descriptor in descriptors.items():
            logger.debug("Generating class %s for type %s", descriptor.class_name, type_name)

            class_def, class_warnings = self._build_class(descriptor, types_by_name, descriptors)
            warnings.extend(class_warnings)

            path = build_file_path(descriptor.dir, descriptor.file_name)
            files.append(GeneratedFile(type_name, path, backend.generate(class_def)))

        logger.debug("Generated %d file(s) with %d warning(s)", len(files), len(warnings))
        return GenerationResult(files, warnings)

    # -----------------------------------------------------------------------
    # Descriptors
    # -----------------------------------------------------------------------

    def _build_descriptor(
        self,
        type_def: TypeDefinition,
        types_by_name: dict[str, TypeDefinition],
        options: CodegenOptions,
    ) -> tuple[Descriptor | None, list[GenerationWarning]]:
        type_name = type_def.name
        type_annotations = flatten_annotation_tree(type_def.annotations)

        if parse_bool(type_annotations.get(ctl.IGNORE), False):
            logger.debug("Skipping ignored type %s", type_name)
            return None, []

        fields = collect_record_fields(type_def.expr, types_by_name, frozenset(), type_name)
        if fields is None:
            logger.debug("Skipping non-record type %s", type_name)
            return None, [
                GenerationWarning.create(
                    WarningCode.SKIPPED_NON_RECORD_TYPE,
                    f'Type "{type_name}" is not record-like and was skipped.',
                    type_name,
                )
            ]

        warnings = []

        namespace = type_annotations.get(ctl.NAMESPACE, "").strip() or options.default_namespace

        class_name = normalize_class_name(type_annotations.get(ctl.CLASS, type_name))
        if not class_name:
            warnings.append(
                GenerationWarning.create(
                    WarningCode.INVALID_CLASS_NAME,
                    f'Type "{type_name}" produced empty class name. Fallback to type name.',
                    type_name,
                )
            )
            class_name = type_name

        file_name = type_annotations.get(ctl.FILE, "").strip() or f"{class_name}.php"

        descriptor = Descriptor(
            type=type_def,
            namespace=namespace,
            class_name=class_name,
            dir=normalize_dir(type_annotations.get(ctl.DIR, options.output_dir)),
            file_name=file_name,
            fields=fields,
            type_annotations=type_annotations,
        )
        return descriptor, warnings

    # -----------------------------------------------------------------------
    # Classes and properties
    # -----------------------------------------------------------------------

    def _build_class(
        self,
        descriptor: Descriptor,
        types_by_name: dict[str, TypeDefinition],
        descriptors: dict[str, Descriptor],
    ) -> tuple[ClassDef, list[GenerationWarning]]:
        type_name = descriptor.type.name
        type_annotations = descriptor.type_annotations

        warnings = ctl.unknown_type_annotations(type_name, type_annotations)
        default_groups = parse_csv(type_annotations.get(ctl.VALIDATION_GROUPS))

        properties = []
        for entry in descriptor.fields:
            prop, field_warnings = self._build_property(entry, descriptor, types_by_name, descriptors, default_groups)
            warnings.extend(field_warnings)
            if prop is not None:
                properties.append(prop)

        class_def = ClassDef(
            namespace=descriptor.namespace,
            class_name=descriptor.class_name,
            class_constraints=[ctl.with_groups(c, default_groups) for c in ctl.collect_custom_constraints(type_annotations)],
            properties=properties,
        )
        return class_def, warnings

    def _build_property(
        self,
        entry: RecordField,
        descriptor: Descriptor,
        types_by_name: dict[str, TypeDefinition],
        descriptors: dict[str, Descriptor],
        default_groups: list[str] | None,
    ) -> tuple[PropertyDef | None, list[GenerationWarning]]:
        """
        Assemble one property: annotations, analysis, constraints, default and type hint.

        Returns:
            Tuple of (property or None when the field is skipped, warnings)
        """
        type_def = descriptor.type
        type_name = type_def.name
        field = entry.field

        origin = types_by_name.get(entry.origin_type)
        field_annotations = merge_field_annotations(
            origin.field_annotations_at([field.name]) if origin is not None else None,
            type_def.field_annotations_at([field.name]),
        )

        if parse_bool(field_annotations.get(ctl.IGNORE), False):
            return None, []

        warnings = ctl.unknown_field_annotations(type_name, field.name, field_annotations)

        property_name = normalize_property_name(field_annotations.get(ctl.PROPERTY, field.name))
        if not property_name and ctl.PROPERTY in field_annotations:
            property_name = normalize_property_name(field.name)
        if not property_name:
            warnings.append(
                GenerationWarning.create(
                    WarningCode.INVALID_PROPERTY_NAME,
                    f'Type "{type_name}" field "{field.name}" produced empty property name and was skipped.',
                    type_name,
                    field.name,
                )
            )
            return None, warnings

        context = AnalysisContext(
            types_by_name=types_by_name,
            descriptors=descriptors,
            current_type_name=type_name,
            current_namespace=descriptor.namespace,
            field_name=field.name,
        )
        analysis = self.analyzer.analyze(field.type, context)
        warnings.extend(analysis.warnings)

        nullable = analysis.nullable or field.optional
        optional = analysis.optional or field.optional

        constraints = list(analysis.constraints)
        if analysis.requires_valid:
            constraints.append("Assert\\Valid")
        if parse_bool(field_annotations.get(ctl.NOT_BLANK), False):
            constraints.append("Assert\\NotBlank")
        constraints.extend(ctl.collect_custom_constraints(field_annotations))

        if not nullable and not analysis.known_null_only:
            constraints.insert(0, "Assert\\NotNull")

        field_groups = parse_csv(field_annotations.get(ctl.VALIDATION_GROUPS)) or default_groups
        constraints = deduplicate_constraints([ctl.with_groups(c, field_groups) for c in constraints])

        default_code, default_warnings = self._compile_default(field.default, type_name, field.name)
        warnings.extend(default_warnings)
        if default_code == "null":
            nullable = True
        if optional and default_code is None:
            default_code = "null"
            nullable = True

        type_override = field_annotations.get(ctl.TYPE, "").strip()
        type_hint = type_override or build_type_hint(analysis.type_hint, nullable)

        prop = PropertyDef(
            source_field=field.name,
            name=property_name,
            type_hint=type_hint,
            doc_type=analysis.doc_type,
            constraints=constraints,
            default_code=default_code,
        )
        return prop, warnings

    def _compile_default(
        self,
        default: DefaultExprNode | None,
        type_name: str,
        field_name: str,
    ) -> tuple[str | None, list[GenerationWarning]]:
        """PHP code for a field default, or None when there is none or it cannot be expressed."""
        if default is None:
            return None, []

        if isinstance(default, NullDefaultExprNode):
            return "null", []

        if isinstance(default, EmptyArrayDefaultExprNode):
            return "[]", []

        if isinstance(default, LiteralDefaultExprNode):
            return export_php(literal_value(default.literal)), []

        if isinstance(default, ExpressionDefaultExprNode):
            if isinstance(default.expression, LiteralNode):
                return export_php(literal_value(default.expression)), []
            if isinstance(default.expression, EmptyArrayExprNode):
                return "[]", []

            return None, [
                GenerationWarning.create(
                    WarningCode.UNSUPPORTED_DEFAULT_EXPRESSION,
                    f'Field "{field_name}" in type "{type_name}" has non-literal default expression; default was skipped.',
                    type_name,
                    field_name,
                )
            ]

        return None, [
            GenerationWarning.create(
                WarningCode.UNSUPPORTED_DEFAULT_NODE,
                f'Field "{field_name}" in type "{type_name}" has unsupported default node "{type(default).__name__}"; default was skipped.',
                type_name,
                field_name,
            )
        ]
