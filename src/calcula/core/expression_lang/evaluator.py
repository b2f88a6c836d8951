"""
Recursive descent evaluator for calcula expressions.

Grammar (precedence low to high):
    expression → term (("+" | "-") term)*
    term       → factor (("*" | "/" | "%") factor)*
    factor     → ("-" | "+") factor
               | "(" expression ")" power?
               | IDENT ("(" expression ")")? power?
               | NUMBER power?
    power      → "^" factor

Values are computed while descending; no syntax tree is built. Because the
exponent is itself a factor, "^" is right-associative, and because a sign
recurses into factor before any "^" is seen, "-2^2" is -(2^2).
"""

from __future__ import annotations

import logging

from calcula.core.errors import (
    DomainError,
    EvalError,
    MismatchedParenthesesError,
    NestingTooDeepError,
    TrailingInputError,
    UnexpectedCharacterError,
    UnexpectedEndError,
    UnknownFunctionError,
    UnknownIdentifierError,
)
from calcula.core.expression_lang.scanner import Cursor
from calcula.core.mathlib import BINARY_OPERATORS
from calcula.core.registry import Registry, UnaryFunction

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100


class _Parser:
    """Evaluates a single expression string; one instance per call."""

    def __init__(self, source: str, registry: Registry, max_depth: int) -> None:
        self.cursor = Cursor(source)
        self.registry = registry
        self.max_depth = max_depth
        self.depth = 0

    def _locate(self, error: EvalError, pos: int | None = None) -> EvalError:
        if pos is None:
            pos = self.cursor.pos
        return error.with_context(self.cursor.source, pos)

    # -- Grammar rules --

    def parse(self) -> float:
        """Top level: expression, then nothing but whitespace."""
        value = self.parse_expression()
        self.cursor.skip_whitespace()
        if not self.cursor.at_end():
            if self.cursor.peek() == ")":
                raise self._locate(MismatchedParenthesesError("Unmatched closing parenthesis"))
            raise self._locate(TrailingInputError(self.cursor.remainder()))
        return value

    def parse_expression(self) -> float:
        """term (('+' | '-') term)*"""
        result = self.parse_term()
        while True:
            self.cursor.skip_whitespace()
            op = self.cursor.peek()
            if op not in ("+", "-"):
                return result
            op_pos = self.cursor.pos
            self.cursor.advance()
            right = self.parse_term()
            result = self._apply(op, result, right, op_pos)

    def parse_term(self) -> float:
        """factor (('*' | '/' | '%') factor)*"""
        result = self.parse_factor()
        while True:
            self.cursor.skip_whitespace()
            op = self.cursor.peek()
            if op not in ("*", "/", "%"):
                return result
            op_pos = self.cursor.pos
            self.cursor.advance()
            right = self.parse_factor()
            result = self._apply(op, result, right, op_pos)

    def parse_factor(self) -> float:
        """Sign, group, call, constant, or number; each level counts toward max_depth."""
        self.depth += 1
        try:
            if self.depth > self.max_depth:
                raise self._locate(NestingTooDeepError(self.max_depth))

            cursor = self.cursor
            cursor.skip_whitespace()
            if cursor.at_end():
                raise self._locate(UnexpectedEndError())

            char = cursor.peek()

            # Unary sign
            if char in ("-", "+"):
                cursor.advance()
                value = self.parse_factor()
                return -value if char == "-" else value

            # Parenthesized expression
            if char == "(":
                cursor.advance()
                value = self.parse_expression()
                cursor.skip_whitespace()
                if not cursor.match(")"):
                    raise self._locate(MismatchedParenthesesError())
                return self._parse_power(value)

            # Function call or constant
            if cursor.starts_identifier():
                name_pos = cursor.pos
                name = cursor.scan_identifier()
                cursor.skip_whitespace()
                if cursor.match("("):
                    arg = self.parse_expression()
                    cursor.skip_whitespace()
                    if not cursor.match(")"):
                        raise self._locate(
                            MismatchedParenthesesError("Mismatched parentheses in function call")
                        )
                    value = self._call(name, arg, name_pos)
                else:
                    constant = self.registry.lookup_constant(name)
                    if constant is None:
                        raise self._locate(UnknownIdentifierError(name), name_pos)
                    value = constant
                return self._parse_power(value)

            if not cursor.starts_number():
                raise self._locate(UnexpectedCharacterError(char))

            value = cursor.scan_number()
            return self._parse_power(value)
        finally:
            self.depth -= 1

    def _parse_power(self, base: float) -> float:
        """Optional '^' factor after a group, name, or number."""
        self.cursor.skip_whitespace()
        if self.cursor.peek() != "^":
            return base
        op_pos = self.cursor.pos
        self.cursor.advance()
        exponent = self.parse_factor()
        return self._apply("^", base, exponent, op_pos)

    # -- Operations --

    def _apply(self, op: str, left: float, right: float, op_pos: int) -> float:
        try:
            return BINARY_OPERATORS[op](left, right)
        except EvalError as e:
            e.with_context(self.cursor.source, op_pos)
            raise

    def _call(self, name: str, arg: float, name_pos: int) -> float:
        fn: UnaryFunction | None = self.registry.lookup_function(name)
        if fn is None:
            raise self._locate(UnknownFunctionError(name), name_pos)
        try:
            return float(fn(arg))
        except EvalError as e:
            e.with_context(self.cursor.source, name_pos)
            raise
        except (ArithmeticError, ValueError) as e:
            raise self._locate(DomainError(f"{name}: {e}", name, (arg,)), name_pos) from e


class Evaluator:
    """
    Evaluates arithmetic expressions against a function/constant registry.

    Each call to ``evaluate`` scans from the start of the new string, so no
    parse state carries over between calls. The registry is shared and
    mutable: functions registered later affect later calls only.

    Usage:
        evaluator = Evaluator()
        evaluator.evaluate("2 + 2 * 3")   # 8.0
        evaluator.register_function("double", lambda x: 2 * x)
        evaluator.evaluate("double(21)")  # 42.0
    """

    def __init__(
        self,
        registry: Registry | None = None,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        self.registry = registry if registry is not None else Registry.with_defaults()
        self.max_depth = max_depth

    def evaluate(self, expression: str) -> float:
        """Evaluate an expression string.

        Args:
            expression: Expression text (e.g., "sin(pi/2) + 12/3")

        Returns:
            The result as a float; may be inf or nan.

        Raises:
            EvalError: On the first syntax, lookup, or domain error.
        """
        if not isinstance(expression, str):
            raise TypeError(f"expression must be str, not {type(expression).__name__}")
        value = _Parser(expression, self.registry, self.max_depth).parse()
        logger.debug("Evaluated %r -> %r", expression, value)
        return value

    def register_function(self, name: str, fn: UnaryFunction) -> None:
        self.registry.register_function(name, fn)

    def register_constant(self, name: str, value: float) -> None:
        self.registry.register_constant(name, value)


def evaluate(expression: str, registry: Registry | None = None) -> float:
    """Evaluate ``expression`` once, with the default registry unless one is given."""
    return Evaluator(registry).evaluate(expression)
