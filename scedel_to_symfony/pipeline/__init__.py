"""
Pipeline - Scedel schema to Symfony validation class generator.

This module provides a multi-phase architecture for generating PHP
classes from a Scedel schema repository:

1. Phase 1 (Loader): Load the schema document into the Schema AST
2. Phase 2 (Analyzer): Collect record fields, resolve types and map constraints
3. Phase 3 (Backend): Render each class through Jinja2 templates
4. Phase 4 (Writer): Atomically write the generated files
"""

from __future__ import annotations

from .config import CodegenOptions
from .generator import SymfonyCodeGenerator
from .model import GeneratedFile, GenerationResult, GenerationWarning, WarningCode
from .schema_ast import SchemaLoader, SchemaLoadError, SchemaRepository
from .writer import AtomicWriter, CodeWriteError

__all__ = [
    "SymfonyCodeGenerator",
    "CodegenOptions",
    "GeneratedFile",
    "GenerationResult",
    "GenerationWarning",
    "WarningCode",
    "SchemaLoader",
    "SchemaLoadError",
    "SchemaRepository",
    "AtomicWriter",
    "CodeWriteError",
]
