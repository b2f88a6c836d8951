"""
calcula core: errors, math primitives, registry, evaluator, and settings.
"""

from calcula.core.errors import CalculaError, EvalError
from calcula.core.expression_lang import Evaluator, evaluate
from calcula.core.registry import Registry

__all__ = ["CalculaError", "EvalError", "Evaluator", "Registry", "evaluate"]
