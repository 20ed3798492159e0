"""
Atomic file writer for generated PHP classes.

Ensures that file writes are atomic so an interrupted run never leaves a
half-written class behind.
"""

from __future__ import annotations

import logging
import re
import tempfile
from collections.abc import Callable
from pathlib import Path

logger = logging.getLogger(__name__)

_CLASS_DECLARATION = re.compile(r"^\s*(?:final\s+|abstract\s+)?class\s+\w+", re.MULTILINE)

# Single- and double-quoted literals with backslash escapes
_STRING_LITERAL = re.compile(r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\"", re.DOTALL)


class CodeWriteError(Exception):
    """Raised when generated code fails validation before being written."""


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file
    """

    def __init__(self, validate_php: Callable[[str], None] | None = None, base_dir: Path | None = None):
        """Initialize the atomic writer.

        Args:
            validate_php: Optional validation function for PHP code
            base_dir: Directory that relative paths resolve against (defaults to the working directory)
        """
        self._validate_php = validate_php or self._default_validate_php
        self._base_dir = base_dir

    def resolve(self, path: str | Path) -> Path:
        """Absolute target path for a generated file path."""
        path = Path(path)
        if path.is_absolute():
            return path
        return (self._base_dir or Path.cwd()) / path

    def write(self, path: str | Path, content: str, validate: bool = True) -> Path:
        """Write content to file atomically.

        Args:
            path: Target file path (relative paths resolve against the base directory)
            content: Content to write
            validate: Whether to validate before finalizing

        Returns:
            The absolute path written

        Raises:
            CodeWriteError: If validation fails
            OSError: If file operations fail
        """
        target = self.resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)

            if validate:
                self._validate_php(content)

            temp_path.replace(target)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

        logger.debug("Wrote %s", target)
        return target

    def _default_validate_php(self, content: str) -> None:
        """Default PHP validation.

        Args:
            content: PHP code to validate

        Raises:
            CodeWriteError: If validation fails
        """
        # Basic structural checks, no PHP parser available
        if not content.lstrip().startswith("<?php"):
            raise CodeWriteError("Generated PHP code is missing the <?php opening tag")

        if not _CLASS_DECLARATION.search(content):
            raise CodeWriteError("Generated PHP code has no class declaration")

        # Braces inside regex patterns, defaults or custom constraints are data
        code = _STRING_LITERAL.sub("''", content)
        open_braces = code.count("{")
        close_braces = code.count("}")
        if open_braces != close_braces:
            raise CodeWriteError(f"Generated PHP code has unbalanced braces: {open_braces} open, {close_braces} close")
