"""Tests for the calcula expression evaluator.

Covers:
- Arithmetic: precedence, associativity, unary signs, power
- Literals: decimals, exponents, malformed numbers
- Names: constants, function calls, registry changes
- Errors: kinds, messages, positions
- Nesting ceiling
"""

from __future__ import annotations

import math

import pytest

from calcula.core.errors import (
    DomainError,
    ErrorKind,
    EvalError,
    InvalidNumberFormatError,
    MismatchedParenthesesError,
    NestingTooDeepError,
    TrailingInputError,
    UnexpectedCharacterError,
    UnexpectedEndError,
    UnknownFunctionError,
    UnknownIdentifierError,
)
from calcula.core.expression_lang import Evaluator, evaluate
from calcula.core.registry import Registry

# ============================================================================
# Arithmetic
# ============================================================================


class TestArithmetic:
    """Operators follow the usual precedence and associativity."""

    def test_mul_before_add(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("2 + 2 * 3") == 8.0

    def test_parentheses_override_precedence(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("(2 + 3) * 4") == 20.0

    def test_subtraction_is_left_associative(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("10 - 4 - 3") == 3.0

    def test_division_is_left_associative(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("100 / 10 / 5") == 2.0

    def test_modulo_same_tier_as_multiply(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("2 * 3 % 4") == 2.0
        assert evaluator.evaluate("1 + 7 % 4") == 4.0

    def test_modulo_keeps_sign_of_dividend(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("-7 % 3") == -1.0
        assert evaluator.evaluate("7 % -3") == 1.0

    def test_fractional_modulo(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("5.5 % 2") == 1.5

    def test_result_is_float(self, evaluator: Evaluator) -> None:
        result = evaluator.evaluate("1 + 1")
        assert isinstance(result, float)

    def test_whitespace_is_ignored(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate(" \t2\t+   3 ") == 5.0
        assert evaluator.evaluate("2+3") == 5.0


class TestPower:
    """'^' is right-associative and applies before an outer sign."""

    def test_right_associative(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("2^3^2") == 512.0

    def test_power_after_group(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("(1 + 1)^3") == 8.0

    def test_power_binds_tighter_than_multiply(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("3 * 2^2") == 12.0

    def test_sign_applies_after_power(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("-2^2") == -4.0

    def test_grouped_negative_base(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("(-2)^2") == 4.0

    def test_negative_exponent(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("2^-1") == 0.5

    def test_power_after_constant(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("pi^2") == pytest.approx(math.pi**2)

    def test_power_after_call(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("sqrt(16)^2") == 16.0

    def test_overflow_gives_infinity(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("10^400") == math.inf

    def test_fractional_power_of_negative_is_nan(self, evaluator: Evaluator) -> None:
        assert math.isnan(evaluator.evaluate("(-8)^(1/3)"))


class TestUnary:
    def test_unary_minus(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("-(2 + 3)") == -5.0

    def test_unary_plus(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("+3") == 3.0

    def test_double_negation(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("--3") == 3.0

    def test_sign_after_operator(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("2 * -3") == -6.0
        assert evaluator.evaluate("2 - -3") == 5.0


# ============================================================================
# Literals
# ============================================================================


class TestNumbers:
    def test_integer(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("42") == 42.0

    def test_decimal(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("3.25") == 3.25

    def test_leading_point(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate(".5 + .5") == 1.0

    def test_trailing_point(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("2. * 2") == 4.0

    def test_exponent(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("1e3") == 1000.0
        assert evaluator.evaluate("2.5E-1") == 0.25
        assert evaluator.evaluate("1e+2") == 100.0

    def test_two_decimal_points(self, evaluator: Evaluator) -> None:
        with pytest.raises(InvalidNumberFormatError, match="Invalid number format") as exc_info:
            evaluator.evaluate("1.2.3")
        assert exc_info.value.kind == ErrorKind.INVALID_NUMBER_FORMAT
        assert exc_info.value.position == 3

    def test_lone_point(self, evaluator: Evaluator) -> None:
        with pytest.raises(InvalidNumberFormatError, match="Invalid number: ."):
            evaluator.evaluate(".")

    def test_exponent_marker_without_digits(self, evaluator: Evaluator) -> None:
        with pytest.raises(TrailingInputError) as exc_info:
            evaluator.evaluate("1e")
        assert exc_info.value.remainder == "e"


# ============================================================================
# Names
# ============================================================================


class TestConstants:
    def test_defaults(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("pi") == math.pi
        assert evaluator.evaluate("e") == math.e
        assert evaluator.evaluate("phi") == pytest.approx(1.618033988749895)

    def test_constant_in_expression(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("2 * pi") == pytest.approx(2 * math.pi)

    def test_unknown_identifier(self, evaluator: Evaluator) -> None:
        with pytest.raises(UnknownIdentifierError, match="Unknown identifier: bar") as exc_info:
            evaluator.evaluate("bar")
        assert exc_info.value.name == "bar"
        assert exc_info.value.kind == ErrorKind.UNKNOWN_IDENTIFIER

    def test_function_name_without_call(self, evaluator: Evaluator) -> None:
        with pytest.raises(UnknownIdentifierError):
            evaluator.evaluate("sin")

    def test_names_are_case_sensitive(self, evaluator: Evaluator) -> None:
        with pytest.raises(UnknownIdentifierError):
            evaluator.evaluate("PI")


class TestFunctions:
    def test_sqrt(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("sqrt(144)") == 12.0

    def test_sin_of_half_pi(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("sin(pi/2)") == pytest.approx(1.0)

    def test_ln_is_natural_log(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("ln(e^2)") == pytest.approx(2.0)

    def test_log_is_base_ten(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("log(1000)") == pytest.approx(3.0)

    def test_log2(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("log2(8)") == 3.0

    def test_rounding(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("round(2.5)") == 3.0
        assert evaluator.evaluate("round(-2.5)") == -3.0
        assert evaluator.evaluate("floor(-1.5)") == -2.0
        assert evaluator.evaluate("ceil(1.2)") == 2.0

    def test_abs_and_cbrt(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("abs(-3)") == 3.0
        assert evaluator.evaluate("cbrt(27)") == pytest.approx(3.0)

    def test_nested_calls(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("sqrt(abs(-16)) + floor(2.7)") == 6.0

    def test_whitespace_before_argument(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("sqrt (9)") == 3.0

    def test_argument_is_full_expression(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("sqrt(3 * 3 + 16)") == 5.0

    def test_unknown_function(self, evaluator: Evaluator) -> None:
        with pytest.raises(UnknownFunctionError, match="Unknown function: foo") as exc_info:
            evaluator.evaluate("foo(1)")
        assert exc_info.value.name == "foo"
        assert exc_info.value.position == 0

    def test_constant_name_called_as_function(self, evaluator: Evaluator) -> None:
        with pytest.raises(UnknownFunctionError, match="pi"):
            evaluator.evaluate("pi(2)")

    def test_argument_evaluated_before_lookup(self, evaluator: Evaluator) -> None:
        with pytest.raises(DomainError):
            evaluator.evaluate("foo(1 / 0)")


class TestRegistryInteraction:
    """Registered names are visible to later evaluations only."""

    def test_register_function(self, evaluator: Evaluator) -> None:
        evaluator.register_function("double", lambda x: 2 * x)
        assert evaluator.evaluate("double(21)") == 42.0

    def test_register_constant(self, evaluator: Evaluator) -> None:
        evaluator.register_constant("tau", 2 * math.pi)
        assert evaluator.evaluate("tau / 2") == pytest.approx(math.pi)

    def test_shadowing_builtin_affects_later_calls_only(self, evaluator: Evaluator) -> None:
        before = evaluator.evaluate("sin(0)")
        evaluator.register_function("sin", lambda x: 42.0)
        after = evaluator.evaluate("sin(0)")
        assert before == 0.0
        assert after == 42.0

    def test_same_name_in_both_namespaces(self, evaluator: Evaluator) -> None:
        evaluator.register_constant("sin", 5.0)
        assert evaluator.evaluate("sin") == 5.0
        assert evaluator.evaluate("sin(0)") == 0.0

    def test_empty_registry(self) -> None:
        evaluator = Evaluator(Registry())
        assert evaluator.evaluate("1 + 1") == 2.0
        with pytest.raises(UnknownIdentifierError):
            evaluator.evaluate("pi")

    def test_registry_shared_between_evaluators(self, registry: Registry) -> None:
        first = Evaluator(registry)
        second = Evaluator(registry)
        first.register_constant("k", 3.0)
        assert second.evaluate("k * 2") == 6.0

    def test_function_value_error_becomes_domain_error(self, evaluator: Evaluator) -> None:
        evaluator.register_function("msqrt", math.sqrt)
        with pytest.raises(DomainError) as exc_info:
            evaluator.evaluate("msqrt(-1)")
        assert exc_info.value.op == "msqrt"
        assert exc_info.value.operands == (-1.0,)
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_function_eval_error_propagates_unchanged(self, evaluator: Evaluator) -> None:
        def checked(x: float) -> float:
            raise DomainError("nope", "checked", (x,))

        evaluator.register_function("checked", checked)
        with pytest.raises(DomainError, match="nope") as exc_info:
            evaluator.evaluate("1 + checked(2)")
        assert exc_info.value.op == "checked"
        assert exc_info.value.position == 4

    def test_other_exceptions_are_not_translated(self, evaluator: Evaluator) -> None:
        def broken(x: float) -> float:
            raise KeyError("boom")

        evaluator.register_function("broken", broken)
        with pytest.raises(KeyError):
            evaluator.evaluate("broken(1)")


# ============================================================================
# Errors
# ============================================================================


class TestDomainErrors:
    def test_division_by_zero(self, evaluator: Evaluator) -> None:
        with pytest.raises(DomainError, match="Division by zero") as exc_info:
            evaluator.evaluate("10 / 0")
        assert exc_info.value.op == "divide"
        assert exc_info.value.operands == (10.0, 0.0)
        assert exc_info.value.kind == ErrorKind.DOMAIN_ERROR
        assert exc_info.value.position == 3

    def test_division_by_computed_zero(self, evaluator: Evaluator) -> None:
        with pytest.raises(DomainError):
            evaluator.evaluate("1 / (2 - 2)")

    def test_modulo_by_zero(self, evaluator: Evaluator) -> None:
        with pytest.raises(DomainError, match="Modulo by zero"):
            evaluator.evaluate("5 % 0")

    def test_sqrt_of_negative(self, evaluator: Evaluator) -> None:
        with pytest.raises(DomainError, match="Square root") as exc_info:
            evaluator.evaluate("sqrt(-1)")
        assert exc_info.value.op == "sqrt"

    def test_log_of_zero(self, evaluator: Evaluator) -> None:
        with pytest.raises(DomainError, match="non-positive"):
            evaluator.evaluate("ln(0)")

    def test_asin_out_of_range(self, evaluator: Evaluator) -> None:
        with pytest.raises(DomainError, match="asin"):
            evaluator.evaluate("asin(2)")

    def test_exp_overflow_is_not_an_error(self, evaluator: Evaluator) -> None:
        assert evaluator.evaluate("exp(1000)") == math.inf


class TestSyntaxErrors:
    def test_empty_input(self, evaluator: Evaluator) -> None:
        with pytest.raises(UnexpectedEndError, match="Unexpected end"):
            evaluator.evaluate("")

    def test_blank_input(self, evaluator: Evaluator) -> None:
        with pytest.raises(UnexpectedEndError):
            evaluator.evaluate("   ")

    def test_dangling_operator(self, evaluator: Evaluator) -> None:
        with pytest.raises(UnexpectedEndError) as exc_info:
            evaluator.evaluate("2 +")
        assert exc_info.value.kind == ErrorKind.UNEXPECTED_END
        assert exc_info.value.position == 3

    def test_unexpected_character(self, evaluator: Evaluator) -> None:
        with pytest.raises(UnexpectedCharacterError) as exc_info:
            evaluator.evaluate("2 + * 3")
        assert exc_info.value.char == "*"
        assert exc_info.value.position == 4

    def test_missing_close_paren(self, evaluator: Evaluator) -> None:
        with pytest.raises(MismatchedParenthesesError, match="Mismatched parentheses") as exc_info:
            evaluator.evaluate("(2 + 3")
        assert exc_info.value.kind == ErrorKind.MISMATCHED_PARENTHESES

    def test_missing_close_paren_in_call(self, evaluator: Evaluator) -> None:
        with pytest.raises(MismatchedParenthesesError, match="in function call"):
            evaluator.evaluate("sqrt(4")

    def test_extra_close_paren(self, evaluator: Evaluator) -> None:
        with pytest.raises(MismatchedParenthesesError, match="Unmatched closing") as exc_info:
            evaluator.evaluate("2 + 2)")
        assert exc_info.value.position == 5

    def test_trailing_input(self, evaluator: Evaluator) -> None:
        with pytest.raises(TrailingInputError) as exc_info:
            evaluator.evaluate("2 2")
        assert exc_info.value.remainder == "2"
        assert exc_info.value.kind == ErrorKind.TRAILING_INPUT

    def test_underscore_cannot_start_name(self, evaluator: Evaluator) -> None:
        with pytest.raises(UnexpectedCharacterError):
            evaluator.evaluate("_x")

    def test_error_message_points_at_column(self, evaluator: Evaluator) -> None:
        with pytest.raises(EvalError) as exc_info:
            evaluator.evaluate("1 + foo")
        lines = str(exc_info.value).splitlines()
        assert lines[0] == "Unknown identifier: foo"
        assert lines[1] == "  1 + foo"
        assert lines[2].index("^") == 2 + 4

    def test_all_errors_share_base_class(self, evaluator: Evaluator) -> None:
        for source in ("", "foo(1)", "bar", "(1", "1.2.3", "1/0", "1 1"):
            with pytest.raises(EvalError):
                evaluator.evaluate(source)


class TestNesting:
    def test_deep_but_allowed(self) -> None:
        evaluator = Evaluator(max_depth=200)
        source = "(" * 150 + "1" + ")" * 150
        assert evaluator.evaluate(source) == 1.0

    def test_too_deep_parentheses(self, evaluator: Evaluator) -> None:
        source = "(" * 150 + "1" + ")" * 150
        with pytest.raises(NestingTooDeepError) as exc_info:
            evaluator.evaluate(source)
        assert exc_info.value.max_depth == evaluator.max_depth

    def test_too_many_signs(self, evaluator: Evaluator) -> None:
        with pytest.raises(NestingTooDeepError):
            evaluator.evaluate("-" * 5000 + "1")

    def test_long_power_chain(self) -> None:
        evaluator = Evaluator(max_depth=5)
        with pytest.raises(NestingTooDeepError):
            evaluator.evaluate("^".join(["1"] * 10))

    def test_flat_expressions_do_not_nest(self) -> None:
        evaluator = Evaluator(max_depth=2)
        assert evaluator.evaluate(" + ".join(["1"] * 500)) == 500.0

    def test_max_depth_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            Evaluator(max_depth=0)


class TestEvaluatorState:
    def test_repeated_evaluation_is_identical(self, evaluator: Evaluator) -> None:
        source = "sin(pi/3) * 2 + sqrt(2)^3"
        assert evaluator.evaluate(source) == evaluator.evaluate(source)

    def test_error_does_not_affect_next_call(self, evaluator: Evaluator) -> None:
        with pytest.raises(MismatchedParenthesesError):
            evaluator.evaluate("(1 + 2")
        assert evaluator.evaluate("1 + 2") == 3.0

    def test_module_level_evaluate(self) -> None:
        assert evaluate("2 + 2") == 4.0

    def test_module_level_evaluate_with_registry(self) -> None:
        registry = Registry(constants={"answer": 42})
        assert evaluate("answer", registry) == 42.0

    def test_default_registry_is_created(self) -> None:
        assert Evaluator().registry.lookup_function("sqrt") is not None

    def test_non_string_rejected(self, evaluator: Evaluator) -> None:
        with pytest.raises(TypeError):
            evaluator.evaluate(42)  # type: ignore[arg-type]
