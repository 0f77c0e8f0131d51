"""Interface of nonlinear evaluators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Sequence

    from optbridge.expressions import ExpressionNode

FEATURE_GRADIENT: Final = "Grad"
"""Evaluation of the gradient of the objective."""

FEATURE_JACOBIAN: Final = "Jac"
"""Evaluation of the Jacobian of the constraints."""

FEATURE_HESSIAN: Final = "Hess"
"""Evaluation of the Hessian of the Lagrangian."""

FEATURE_EXPRESSION_GRAPH: Final = "ExprGraph"
"""Access to the objective and constraints as expression graphs."""


class NLPEvaluator(ABC):
    """Abstract base class of nonlinear evaluators.

    A nonlinear evaluator provides the nonlinear part of a model: optionally an
    objective, and a number of constraints whose bounds are stored in the
    [`NLPBlock`][optbridge.model.NLPBlock] that holds the evaluator.

    Expressions returned by an evaluator reference variables by their model
    identifier, using [`ModelVariable`][optbridge.expressions.ModelVariable]
    leaves. They are rewritten into solver positions by the
    [`UnifiedEvaluator`][optbridge.evaluator.UnifiedEvaluator].

    Subclasses must implement:
    - `features_available`: The features the evaluator supports.
    - `objective_expression` and `constraint_expression`.

    Subclasses can optionally override:
    - `initialize`: To prepare for the requested features.
    """

    def initialize(self, requested_features: Sequence[str]) -> None:  # noqa: B027
        """Prepare the evaluator for the requested features.

        Must be called by a solver before any other query. The default
        implementation does nothing.

        Args:
            requested_features: The features that will be used.
        """

    @abstractmethod
    def features_available(self) -> list[str]:
        """Return the features supported by this evaluator.

        Returns:
            A list of feature names, such as `"ExprGraph"`.
        """

    @abstractmethod
    def objective_expression(self) -> ExpressionNode:
        """Return the expression graph of the nonlinear objective.

        Only called if the block declares that it has an objective.

        Returns:
            The objective expression.
        """

    @abstractmethod
    def constraint_expression(self, index: int) -> ExpressionNode:
        """Return the expression graph of a nonlinear constraint.

        The bounds of the constraint are taken from the
        [`NLPBlock`][optbridge.model.NLPBlock], not from the comparison. A
        comparison with a constant right-hand side constrains its left-hand
        side. Any other comparison `lhs <op> rhs` constrains `lhs - rhs`, so
        `x >= y` with bounds `(0, inf)` requires `x - y >= 0`.

        Args:
            index: The 1-based index of the constraint.

        Returns:
            The comparison expression of the constraint.
        """
