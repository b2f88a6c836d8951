"""
Numeric primitives used by the evaluator.

Thin layer over the standard ``math`` module. Adds the domain checks the
evaluator reports as ``DomainError`` and returns IEEE-754 results (``inf``,
``nan``) in the places where ``math`` would raise instead.
"""

from __future__ import annotations

import math
from collections.abc import Callable

from calcula.core.errors import DomainError

PI = math.pi
E = math.e
GOLDEN_RATIO = (1.0 + math.sqrt(5.0)) / 2.0

# Largest n with a finite n! in double precision
MAX_FACTORIAL = 170


# ---------------------------------------------------------------------------
# Binary operators
# ---------------------------------------------------------------------------


def add(a: float, b: float) -> float:
    return a + b


def subtract(a: float, b: float) -> float:
    return a - b


def multiply(a: float, b: float) -> float:
    return a * b


def divide(a: float, b: float) -> float:
    if b == 0.0:
        raise DomainError("Division by zero", "divide", (a, b))
    return a / b


def modulo(a: float, b: float) -> float:
    """Remainder with the sign of the dividend (C ``fmod``)."""
    if b == 0.0:
        raise DomainError("Modulo by zero", "modulo", (a, b))
    try:
        return math.fmod(a, b)
    except ValueError:
        # fmod(inf, b)
        return math.nan


def power(base: float, exponent: float) -> float:
    """C ``pow`` semantics: never raises, overflows to inf, bad domain gives nan."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0.0:
            # 0 ** negative
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x == math.floor(x) and math.fmod(x, 2.0) != 0.0


BINARY_OPERATORS: dict[str, Callable[[float, float], float]] = {
    "+": add,
    "-": subtract,
    "*": multiply,
    "/": divide,
    "%": modulo,
    "^": power,
}


# ---------------------------------------------------------------------------
# Roots, exponentials, logarithms
# ---------------------------------------------------------------------------


def sqrt(x: float) -> float:
    if x < 0.0:
        raise DomainError("Square root of negative number", "sqrt", (x,))
    return math.sqrt(x)


def cbrt(x: float) -> float:
    return math.cbrt(x)


def exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def exp2(x: float) -> float:
    try:
        return math.exp2(x)
    except OverflowError:
        return math.inf


def _check_log_domain(op: str, x: float) -> None:
    if x <= 0.0:
        raise DomainError("Logarithm of non-positive number", op, (x,))


def ln(x: float) -> float:
    _check_log_domain("ln", x)
    return math.log(x)


def log10(x: float) -> float:
    _check_log_domain("log", x)
    return math.log10(x)


def log2(x: float) -> float:
    _check_log_domain("log2", x)
    return math.log2(x)


# ---------------------------------------------------------------------------
# Trigonometric (radians) and hyperbolic
# ---------------------------------------------------------------------------


def _nan_outside_domain(fn: Callable[[float], float]) -> Callable[[float], float]:
    """Wrap a math function so that inputs like inf give nan instead of raising."""

    def wrapper(x: float) -> float:
        try:
            return fn(x)
        except ValueError:
            return math.nan

    wrapper.__name__ = fn.__name__
    wrapper.__doc__ = fn.__doc__
    return wrapper


sin = _nan_outside_domain(math.sin)
cos = _nan_outside_domain(math.cos)
tan = _nan_outside_domain(math.tan)
atan = math.atan


def asin(x: float) -> float:
    if x < -1.0 or x > 1.0:
        raise DomainError("asin domain error: x must be in [-1, 1]", "asin", (x,))
    return math.asin(x)


def acos(x: float) -> float:
    if x < -1.0 or x > 1.0:
        raise DomainError("acos domain error: x must be in [-1, 1]", "acos", (x,))
    return math.acos(x)


def sinh(x: float) -> float:
    try:
        return math.sinh(x)
    except OverflowError:
        return math.copysign(math.inf, x)


def cosh(x: float) -> float:
    try:
        return math.cosh(x)
    except OverflowError:
        return math.inf


tanh = math.tanh
asinh = math.asinh


def acosh(x: float) -> float:
    if x < 1.0:
        raise DomainError("acosh domain error: x must be >= 1", "acosh", (x,))
    return math.acosh(x)


def atanh(x: float) -> float:
    if x <= -1.0 or x >= 1.0:
        raise DomainError("atanh domain error: x must be in (-1, 1)", "atanh", (x,))
    return math.atanh(x)


# ---------------------------------------------------------------------------
# Rounding and special functions
# ---------------------------------------------------------------------------


def fabs(x: float) -> float:
    return math.fabs(x)


def floor(x: float) -> float:
    if not math.isfinite(x):
        return x
    return float(math.floor(x))


def ceil(x: float) -> float:
    if not math.isfinite(x):
        return x
    return float(math.ceil(x))


def round_half_away(x: float) -> float:
    """Round to nearest, ties away from zero (C ``round``, not banker's rounding)."""
    if not math.isfinite(x):
        return x
    magnitude = math.fabs(x)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return math.copysign(float(whole), x)


def factorial(x: float) -> float:
    """n! for the integer part of x, computed through the gamma function."""
    if math.isnan(x):
        raise DomainError("Factorial of NaN", "fact", (x,))
    if x < 0:
        raise DomainError("Factorial of negative number", "fact", (x,))
    if x > MAX_FACTORIAL:
        raise DomainError("Factorial overflow", "fact", (x,))
    return math.gamma(int(x) + 1.0)
