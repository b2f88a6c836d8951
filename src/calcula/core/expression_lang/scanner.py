"""
Character cursor for the calcula expression language.

The evaluator reads the source directly through a cursor instead of a token
list: each grammar rule scans what it needs at the current position.
"""

from __future__ import annotations

import re

from calcula.core.errors import ErrorContext, InvalidNumberFormatError

WHITESPACE = " \t\n\r\f\v"

# Digits and decimal points; more than one point is reported, not split
_MANTISSA_RE = re.compile(r"[0-9.]+")
# Exponent only counts when at least one digit follows the marker
_EXPONENT_RE = re.compile(r"[eE][+-]?[0-9]+")
# Identifier: letter followed by letters, digits, underscores
_IDENT_RE = re.compile(r"[A-Za-z][A-Za-z0-9_]*")


class Cursor:
    """Scan position into one expression string."""

    __slots__ = ("source", "pos")

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0

    def __repr__(self) -> str:
        return f"Cursor(pos={self.pos}, next={self.peek()!r})"

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self) -> str:
        """Current character, or "" at end of input."""
        return self.source[self.pos : self.pos + 1]

    def advance(self) -> str:
        char = self.peek()
        if char:
            self.pos += 1
        return char

    def match(self, char: str) -> bool:
        """Consume ``char`` if it is next."""
        if self.peek() == char:
            self.pos += 1
            return True
        return False

    def skip_whitespace(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos] in WHITESPACE:
            self.pos += 1

    def remainder(self) -> str:
        return self.source[self.pos :]

    def starts_identifier(self) -> bool:
        char = self.peek()
        return char.isascii() and char.isalpha()

    def starts_number(self) -> bool:
        char = self.peek()
        return char != "" and char in "0123456789."

    def scan_identifier(self) -> str:
        m = _IDENT_RE.match(self.source, self.pos)
        assert m is not None
        self.pos = m.end()
        return m.group(0)

    def scan_number(self) -> float:
        """Read a decimal literal with optional exponent.

        Raises:
            InvalidNumberFormatError: On a second decimal point, or if the
                scanned text is not a valid float (e.g. a lone ".").
        """
        start = self.pos
        m = _MANTISSA_RE.match(self.source, start)
        assert m is not None
        mantissa = m.group(0)

        first_dot = mantissa.find(".")
        if first_dot != -1:
            second_dot = mantissa.find(".", first_dot + 1)
            if second_dot != -1:
                self.pos = start + second_dot
                raise InvalidNumberFormatError(
                    "Invalid number format",
                    ErrorContext(expression=self.source, position=self.pos),
                )
        self.pos = m.end()

        exp_m = _EXPONENT_RE.match(self.source, self.pos)
        if exp_m:
            self.pos = exp_m.end()

        text = self.source[start : self.pos]
        try:
            return float(text)
        except ValueError as e:
            raise InvalidNumberFormatError(
                f"Invalid number: {text}",
                ErrorContext(expression=self.source, position=start),
            ) from e
