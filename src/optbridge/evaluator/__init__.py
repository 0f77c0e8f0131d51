"""Evaluators passed to solvers.

Models with nonlinear parts provide an
[`NLPEvaluator`][optbridge.evaluator.NLPEvaluator] in their
[`NLPBlock`][optbridge.model.NLPBlock]. The
[`UnifiedEvaluator`][optbridge.evaluator.UnifiedEvaluator] combines it with the
expressions built from the algebraic constraints and objective, presenting a
single evaluator to the solver.
"""

from ._unified import (
    InnerEvaluator,
    InnerEvaluatorState,
    NoInnerEvaluator,
    UnifiedEvaluator,
)
from .base import (
    FEATURE_EXPRESSION_GRAPH,
    FEATURE_GRADIENT,
    FEATURE_HESSIAN,
    FEATURE_JACOBIAN,
    NLPEvaluator,
)

__all__ = [
    "FEATURE_EXPRESSION_GRAPH",
    "FEATURE_GRADIENT",
    "FEATURE_HESSIAN",
    "FEATURE_JACOBIAN",
    "InnerEvaluator",
    "InnerEvaluatorState",
    "NLPEvaluator",
    "NoInnerEvaluator",
    "UnifiedEvaluator",
]
