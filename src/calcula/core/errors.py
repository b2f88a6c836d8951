"""
Error types for calcula configuration, registration, and evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class CalculaError(Exception):
    """Base exception for all calcula errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.message}\n{self.context.format()}"
        return self.message


class ConfigError(CalculaError):
    """
    Raised when settings cannot be loaded.

    Examples:
    - Malformed calcula.toml
    - Unknown keys in the [calculator] table
    - Out-of-range values in the file or environment
    """

    pass


class RegistryError(CalculaError):
    """
    Raised when a function or constant cannot be registered.

    Examples:
    - Name that is not a valid identifier
    - Function that is not callable
    - Constant that is not a number
    """

    pass


class ErrorKind(StrEnum):
    """Kinds of evaluation failure."""

    UNEXPECTED_END = "unexpected_end"
    UNEXPECTED_CHARACTER = "unexpected_character"
    UNKNOWN_FUNCTION = "unknown_function"
    UNKNOWN_IDENTIFIER = "unknown_identifier"
    MISMATCHED_PARENTHESES = "mismatched_parentheses"
    INVALID_NUMBER_FORMAT = "invalid_number_format"
    DOMAIN_ERROR = "domain_error"
    TRAILING_INPUT = "trailing_input"
    NESTING_TOO_DEEP = "nesting_too_deep"


@dataclass
class ErrorContext:
    """
    Location of an evaluation error inside the expression text.

    Attributes:
        expression: The full expression being evaluated
        position: Zero-based offset where the error was detected
    """

    expression: str
    position: int

    @property
    def column(self) -> int:
        """1-indexed column of the error."""
        return self.position + 1

    def format(self) -> str:
        """
        Format the expression with a marker under the error column.

        Returns:
            Two lines like "  1 + * 3" and "      ^"
        """
        prefix = "  "
        line = self.expression.replace("\t", " ").splitlines()[0] if self.expression else ""
        marker_pos = len(prefix) + min(self.position, len(line))
        return f"{prefix}{line}\n{' ' * marker_pos}^"


class EvalError(CalculaError):
    """Raised when an expression cannot be evaluated."""

    kind: ErrorKind

    @property
    def position(self) -> int | None:
        return self.context.position if self.context else None

    def with_context(self, expression: str, position: int) -> EvalError:
        """Attach a location if none is set yet and return self."""
        if self.context is None:
            self.context = ErrorContext(expression=expression, position=position)
            self.args = (self._format_message(),)
        return self


class UnexpectedEndError(EvalError):
    """Input ended where a number, name, or group was required."""

    kind = ErrorKind.UNEXPECTED_END

    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Unexpected end of expression", context)


class UnexpectedCharacterError(EvalError):
    """A character that cannot start a factor, e.g. the '*' in '2 + * 3'."""

    kind = ErrorKind.UNEXPECTED_CHARACTER

    def __init__(self, char: str, context: ErrorContext | None = None):
        self.char = char
        super().__init__(f"Expected number but found {char!r}", context)


class UnknownFunctionError(EvalError):
    kind = ErrorKind.UNKNOWN_FUNCTION

    def __init__(self, name: str, context: ErrorContext | None = None):
        self.name = name
        super().__init__(f"Unknown function: {name}", context)


class UnknownIdentifierError(EvalError):
    kind = ErrorKind.UNKNOWN_IDENTIFIER

    def __init__(self, name: str, context: ErrorContext | None = None):
        self.name = name
        super().__init__(f"Unknown identifier: {name}", context)


class MismatchedParenthesesError(EvalError):
    """
    Raised for unbalanced grouping.

    The same kind covers grouping, function-call arguments, and a stray
    closing parenthesis; only the message differs.
    """

    kind = ErrorKind.MISMATCHED_PARENTHESES

    def __init__(
        self,
        message: str = "Mismatched parentheses",
        context: ErrorContext | None = None,
    ):
        super().__init__(message, context)


class InvalidNumberFormatError(EvalError):
    kind = ErrorKind.INVALID_NUMBER_FORMAT

    def __init__(
        self,
        message: str = "Invalid number format",
        context: ErrorContext | None = None,
    ):
        super().__init__(message, context)


class DomainError(EvalError):
    """
    Raised when an operand lies outside the valid range of an operation.

    Attributes:
        op: Operation name, e.g. "divide" or "sqrt"
        operands: The operand values passed to the operation
    """

    kind = ErrorKind.DOMAIN_ERROR

    def __init__(
        self,
        message: str,
        op: str,
        operands: tuple[float, ...] = (),
        context: ErrorContext | None = None,
    ):
        self.op = op
        self.operands = operands
        super().__init__(message, context)


class TrailingInputError(EvalError):
    kind = ErrorKind.TRAILING_INPUT

    def __init__(self, remainder: str, context: ErrorContext | None = None):
        self.remainder = remainder
        super().__init__(f"Unexpected trailing input: {remainder!r}", context)


class NestingTooDeepError(EvalError):
    kind = ErrorKind.NESTING_TOO_DEEP

    def __init__(self, max_depth: int, context: ErrorContext | None = None):
        self.max_depth = max_depth
        super().__init__(f"Expression nesting exceeds {max_depth} levels", context)
