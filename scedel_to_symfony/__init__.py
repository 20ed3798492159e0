"""Scedel to Symfony Generator

A Python package for generating PHP classes with Symfony validator
attributes from Scedel schema definitions. Supports type aliases,
intersections, unions and conditional types, control annotations for
class placement, and atomic output writing.
"""

__version__ = "0.1.0"

from .pipeline import (
    AtomicWriter,
    CodegenOptions,
    CodeWriteError,
    GeneratedFile,
    GenerationResult,
    GenerationWarning,
    SchemaLoader,
    SchemaLoadError,
    SymfonyCodeGenerator,
    WarningCode,
)

__all__ = [
    "SymfonyCodeGenerator",
    "CodegenOptions",
    "GeneratedFile",
    "GenerationResult",
    "GenerationWarning",
    "WarningCode",
    "SchemaLoader",
    "SchemaLoadError",
    "AtomicWriter",
    "CodeWriteError",
]
