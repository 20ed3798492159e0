"""
Code generation backends.

Contains the PHP class renderer.
"""

from __future__ import annotations

from .php_backend import PhpBackend

__all__ = [
    "PhpBackend",
]
