"""
Analyzer module.

Contains annotation flattening, record field collection, type analysis
and constraint mapping.
"""

from __future__ import annotations

from .annotations import flatten_annotation_tree, merge_field_annotations
from .constraints import ArgumentKind, ConstraintArgument, ConstraintMapper
from .ir_nodes import ClassDef, Descriptor, PropertyDef, RecordField
from .record_fields import collect_record_fields
from .type_analyzer import AnalysisContext, TypeAnalysis, TypeAnalyzer

__all__ = [
    "flatten_annotation_tree",
    "merge_field_annotations",
    "collect_record_fields",
    "ConstraintMapper",
    "ConstraintArgument",
    "ArgumentKind",
    "TypeAnalyzer",
    "TypeAnalysis",
    "AnalysisContext",
    "Descriptor",
    "RecordField",
    "PropertyDef",
    "ClassDef",
]
