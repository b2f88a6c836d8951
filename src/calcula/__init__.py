"""
calcula - arithmetic expression evaluator with a runtime function registry.

    >>> from calcula import evaluate
    >>> evaluate("2 + 2 * 3")
    8.0
"""

from __future__ import annotations

import re
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

from .core.errors import (
    CalculaError,
    ConfigError,
    DomainError,
    ErrorKind,
    EvalError,
    InvalidNumberFormatError,
    MismatchedParenthesesError,
    NestingTooDeepError,
    RegistryError,
    TrailingInputError,
    UnexpectedCharacterError,
    UnexpectedEndError,
    UnknownFunctionError,
    UnknownIdentifierError,
)
from .core.expression_lang import Evaluator, evaluate
from .core.registry import Registry


def _get_version() -> str:
    """Get version from pyproject.toml (editable) or importlib.metadata (installed)."""
    pyproject = _Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        content = pyproject.read_text()
        if match := re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE):
            return match.group(1)

    try:
        return _metadata_version("calcula")
    except Exception:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "evaluate",
    "Evaluator",
    "Registry",
    "CalculaError",
    "ConfigError",
    "RegistryError",
    "EvalError",
    "ErrorKind",
    "UnexpectedEndError",
    "UnexpectedCharacterError",
    "UnknownFunctionError",
    "UnknownIdentifierError",
    "MismatchedParenthesesError",
    "InvalidNumberFormatError",
    "DomainError",
    "TrailingInputError",
    "NestingTooDeepError",
]
