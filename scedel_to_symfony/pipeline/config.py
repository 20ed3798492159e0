"""
Configuration for the Symfony code generator.
"""

from __future__ import annotations

from dataclasses import dataclass

# camelCase spellings accepted in configuration files
_KEY_ALIASES = {
    "outputDir": "output_dir",
    "defaultNamespace": "default_namespace",
    "generateConstructors": "generate_constructors",
}


@dataclass
class CodegenOptions:
    """Configuration options for code generation."""

    # Directory for classes without a php.codegen.dir annotation
    output_dir: str = "src/Generated/Scedel"

    # Namespace for classes without a php.codegen.namespace annotation
    default_namespace: str = "App\\Generated\\Scedel"

    # Emit a constructor taking every property
    generate_constructors: bool = True

    @staticmethod
    def from_dict(d: dict) -> CodegenOptions:
        """Create options from a dictionary, ignoring unknown keys."""
        options = CodegenOptions()
        for k, v in d.items():
            k = _KEY_ALIASES.get(k, k)
            if hasattr(options, k):
                setattr(options, k, v)
        return options

    def to_dict(self) -> dict:
        """Convert options to a dictionary."""
        return {
            "output_dir": self.output_dir,
            "default_namespace": self.default_namespace,
            "generate_constructors": self.generate_constructors,
        }
