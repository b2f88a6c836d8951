"""
calcula expression language.

Single-pass recursive descent evaluator over a function/constant registry.

Usage:
    from calcula.core.expression_lang import Evaluator, evaluate

    evaluate("2 + 2 * 3")
    # 8.0

    evaluator = Evaluator()
    evaluator.register_constant("tau", 6.283185307179586)
    evaluator.evaluate("tau / 2")
"""

from calcula.core.expression_lang.evaluator import DEFAULT_MAX_DEPTH, Evaluator, evaluate

__all__ = ["DEFAULT_MAX_DEPTH", "Evaluator", "evaluate"]
