"""
IR (Intermediate Representation) node definitions.

These nodes describe one generated PHP class: where it goes, which
fields it has and which constraints each property carries.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..schema_ast.nodes import FieldNode, TypeDefinition


@dataclass
class RecordField:
    """A field collected from a record-like type."""

    field: FieldNode
    origin_type: str  # Type that literally declared the field


@dataclass
class Descriptor:
    """Placement and field list of one generated class."""

    type: TypeDefinition
    namespace: str = ""
    class_name: str = ""
    dir: str = ""
    file_name: str = ""
    fields: list[RecordField] = field(default_factory=list)
    type_annotations: dict[str, str] = field(default_factory=dict)


@dataclass
class PropertyDef:
    """A rendered class property."""

    source_field: str = ""
    name: str = ""
    type_hint: str = "mixed"
    doc_type: str | None = None
    constraints: list[str] = field(default_factory=list)

    # PHP code of the constructor default, e.g. "null" or "'draft'"
    default_code: str | None = None


@dataclass
class ClassDef:
    """Everything the backend needs to render one class."""

    namespace: str = ""
    class_name: str = ""
    class_constraints: list[str] = field(default_factory=list)
    properties: list[PropertyDef] = field(default_factory=list)
