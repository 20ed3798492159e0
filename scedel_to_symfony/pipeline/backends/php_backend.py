"""
PHP backend.

Renders a ClassDef as a PHP 8 class with Symfony validator attributes
using the Jinja2 templates in ``templates/php``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jinja2

from ..analyzer.ir_nodes import ClassDef
from ..config import CodegenOptions


class PhpBackend:
    """Generates PHP source for one class at a time."""

    # Template directory name
    TEMPLATE_LANG: str = "php"

    # File extension
    FILE_EXTENSION: str = "php"

    def __init__(self, options: CodegenOptions):
        """
        Initialize the backend.

        Args:
            options: Code generation options
        """
        self.options = options
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )
        self.class_template = self.jinja_env.get_template(f"class.{self.FILE_EXTENSION}.jinja2")

    def generate(self, class_def: ClassDef) -> str:
        """
        Generate PHP code for a class.

        Args:
            class_def: The class to render

        Returns:
            PHP source ending with a single newline
        """
        return self.class_template.render(self._prepare_class_context(class_def))

    def _prepare_class_context(self, class_def: ClassDef) -> dict[str, Any]:
        return {
            "NAMESPACE": class_def.namespace,
            "CLASS_NAME": class_def.class_name,
            "CLASS_CONSTRAINTS": class_def.class_constraints,
            "properties": class_def.properties,
            "GENERATE_CONSTRUCTOR": self.options.generate_constructors,
        }
