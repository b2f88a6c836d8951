"""
Function and constant registry for the expression evaluator.

Maps identifier names to unary numeric functions and to fixed constants.
Function and constant names live in separate namespaces: the evaluator
consults functions for ``name(...)`` and constants for a bare ``name``.

Usage:
    registry = Registry.with_defaults()
    registry.register_function("double", lambda x: 2 * x)
    registry.register_constant("tau", 2 * math.pi)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator, Mapping
from types import MappingProxyType

from calcula.core import mathlib
from calcula.core.errors import RegistryError

logger = logging.getLogger(__name__)

UnaryFunction = Callable[[float], float]

# Same shape the evaluator scans: a letter, then letters, digits, underscores
IDENTIFIER_RE = re.compile(r"[A-Za-z][A-Za-z0-9_]*")

DEFAULT_FUNCTIONS: dict[str, UnaryFunction] = {
    "sin": mathlib.sin,
    "cos": mathlib.cos,
    "tan": mathlib.tan,
    "asin": mathlib.asin,
    "acos": mathlib.acos,
    "atan": mathlib.atan,
    "sinh": mathlib.sinh,
    "cosh": mathlib.cosh,
    "tanh": mathlib.tanh,
    "sqrt": mathlib.sqrt,
    "cbrt": mathlib.cbrt,
    "abs": mathlib.fabs,
    "exp": mathlib.exp,
    # ln is the natural log, log is base 10
    "ln": mathlib.ln,
    "log": mathlib.log10,
    "log2": mathlib.log2,
    "floor": mathlib.floor,
    "ceil": mathlib.ceil,
    "round": mathlib.round_half_away,
}

EXTENDED_FUNCTIONS: dict[str, UnaryFunction] = {
    "asinh": mathlib.asinh,
    "acosh": mathlib.acosh,
    "atanh": mathlib.atanh,
    "exp2": mathlib.exp2,
    "fact": mathlib.factorial,
}

DEFAULT_CONSTANTS: dict[str, float] = {
    "pi": mathlib.PI,
    "e": mathlib.E,
    "phi": mathlib.GOLDEN_RATIO,
}


def is_identifier(name: str) -> bool:
    """Check whether ``name`` can be referenced from an expression."""
    return isinstance(name, str) and IDENTIFIER_RE.fullmatch(name) is not None


class Registry:
    """
    Mutable mapping of names to unary functions and constants.

    Re-registering a name overwrites the previous entry (last write wins).
    There is no internal locking; callers sharing one registry between
    threads must synchronize writes themselves.
    """

    def __init__(
        self,
        functions: Mapping[str, UnaryFunction] | None = None,
        constants: Mapping[str, float] | None = None,
    ) -> None:
        self._functions: dict[str, UnaryFunction] = {}
        self._constants: dict[str, float] = {}
        for name, fn in (functions or {}).items():
            self.register_function(name, fn)
        for name, value in (constants or {}).items():
            self.register_constant(name, value)

    @classmethod
    def with_defaults(cls, extended: bool = False) -> Registry:
        """Build a registry seeded with the standard functions and constants.

        Args:
            extended: Also install asinh, acosh, atanh, exp2 and fact.
        """
        functions = dict(DEFAULT_FUNCTIONS)
        if extended:
            functions.update(EXTENDED_FUNCTIONS)
        return cls(functions=functions, constants=DEFAULT_CONSTANTS)

    # -- Registration --

    def register_function(self, name: str, fn: UnaryFunction) -> None:
        if not is_identifier(name):
            raise RegistryError(f"Invalid function name: {name!r}")
        if not callable(fn):
            raise RegistryError(f"Function {name!r} is not callable: {fn!r}")
        if name in self._functions:
            logger.debug("Overriding function %s", name)
        self._functions[name] = fn

    def register_constant(self, name: str, value: float) -> None:
        if not is_identifier(name):
            raise RegistryError(f"Invalid constant name: {name!r}")
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise RegistryError(f"Constant {name!r} is not a number: {value!r}") from e
        if name in self._constants:
            logger.debug("Overriding constant %s", name)
        self._constants[name] = number

    # -- Lookup --

    def lookup_function(self, name: str) -> UnaryFunction | None:
        return self._functions.get(name)

    def lookup_constant(self, name: str) -> float | None:
        return self._constants.get(name)

    @property
    def functions(self) -> Mapping[str, UnaryFunction]:
        """Read-only view of the registered functions."""
        return MappingProxyType(self._functions)

    @property
    def constants(self) -> Mapping[str, float]:
        """Read-only view of the registered constants."""
        return MappingProxyType(self._constants)

    def names(self) -> Iterator[tuple[str, str]]:
        """Yield ("function" | "constant", name) pairs in sorted order."""
        for name in sorted(self._functions):
            yield "function", name
        for name in sorted(self._constants):
            yield "constant", name

    def copy(self) -> Registry:
        """Independent registry with the same entries."""
        clone = Registry()
        clone._functions = dict(self._functions)
        clone._constants = dict(self._constants)
        return clone

    def __repr__(self) -> str:
        return (
            f"Registry(functions={len(self._functions)}, constants={len(self._constants)})"
        )
