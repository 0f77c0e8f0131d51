"""The evaluator presented to solvers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from optbridge.exceptions import IndexingError
from optbridge.expressions import Constant, ExpressionNode, remap_variables

from .base import FEATURE_EXPRESSION_GRAPH

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from optbridge.model import NLPBlock, VariableIndex

    from .base import NLPEvaluator


@dataclass(frozen=True, slots=True)
class NoInnerEvaluator:
    """The model has no nonlinear block."""


@dataclass(frozen=True, slots=True)
class InnerEvaluator:
    """The nonlinear evaluator of a model.

    Attributes:
        evaluator:        The nonlinear evaluator.
        constraint_count: The number of nonlinear constraints.
        has_objective:    Whether the evaluator provides the objective.
    """

    evaluator: NLPEvaluator
    constraint_count: int
    has_objective: bool = False

    @classmethod
    def from_block(cls, block: NLPBlock | None) -> InnerEvaluator | NoInnerEvaluator:
        """Create the inner evaluator state of an optional nonlinear block.

        Args:
            block: The nonlinear block, or `None`.

        Returns:
            The inner evaluator, or `NoInnerEvaluator` if there is no block.
        """
        if block is None:
            return NoInnerEvaluator()
        return cls(
            evaluator=block.evaluator,
            constraint_count=len(block.constraint_bounds),
            has_objective=block.has_objective,
        )


InnerEvaluatorState: TypeAlias = NoInnerEvaluator | InnerEvaluator


class UnifiedEvaluator:
    """Evaluator combining a nonlinear block with the algebraic part of a model.

    Solvers see a single evaluator, whatever the composition of the model.
    Constraint indices are 1-based: the first `inner.constraint_count`
    constraints are delegated to the nonlinear evaluator, the remaining
    constraints are the locally built algebraic constraint expressions.

    Expressions obtained from the nonlinear evaluator reference model
    variables; they are remapped into positions the first time they are
    requested, and the remapped expression is cached.
    """

    def __init__(
        self,
        inner: InnerEvaluatorState,
        position_map: Mapping[VariableIndex, int],
        objective_expression: ExpressionNode | None,
        constraint_expressions: Sequence[ExpressionNode],
    ) -> None:
        """Initialize the evaluator.

        Args:
            inner:                  The optional nonlinear evaluator.
            position_map:           Maps model variables to 1-based positions.
            objective_expression:   The algebraic objective, `None` if absent.
            constraint_expressions: The algebraic constraint expressions.
        """
        self._inner = inner
        self._position_map = position_map
        self._objective_expression = objective_expression
        self._constraint_expressions = tuple(constraint_expressions)
        self._inner_expressions: dict[int, ExpressionNode] = {}

    @property
    def inner(self) -> InnerEvaluatorState:
        """The optional nonlinear evaluator."""
        return self._inner

    @property
    def inner_constraint_count(self) -> int:
        """The number of nonlinear constraints."""
        match self._inner:
            case InnerEvaluator(constraint_count=count):
                return count
        return 0

    @property
    def constraint_count(self) -> int:
        """The total number of constraints."""
        return self.inner_constraint_count + len(self._constraint_expressions)

    def initialize(self, requested_features: Sequence[str]) -> None:
        """Prepare for the requested features.

        Args:
            requested_features: The features that will be used.
        """
        match self._inner:
            case InnerEvaluator(evaluator=evaluator):
                evaluator.initialize(requested_features)

    def features_available(self) -> list[str]:
        """Return the supported features.

        Returns:
            The features of the nonlinear evaluator if there is one, otherwise
            only the expression graph feature.
        """
        match self._inner:
            case InnerEvaluator(evaluator=evaluator):
                return evaluator.features_available()
        return [FEATURE_EXPRESSION_GRAPH]

    def objective_expression(self) -> ExpressionNode:
        """Return the expression graph of the objective.

        Returns:
            The algebraic objective if there is one, else the nonlinear
            objective if the nonlinear block provides it, else zero.
        """
        if self._objective_expression is not None:
            return self._objective_expression
        match self._inner:
            case InnerEvaluator(evaluator=evaluator, has_objective=True):
                if 0 not in self._inner_expressions:
                    self._inner_expressions[0] = remap_variables(
                        evaluator.objective_expression(), self._remap
                    )
                return self._inner_expressions[0]
        return Constant(0.0)

    def constraint_expression(self, index: int) -> ExpressionNode:
        """Return the comparison expression of a constraint.

        Args:
            index: The 1-based constraint index.

        Returns:
            The comparison expression.

        Raises:
            IndexingError: If the index is out of range.
        """
        if not 1 <= index <= self.constraint_count:
            raise IndexingError(index)
        match self._inner:
            case InnerEvaluator(evaluator=evaluator, constraint_count=count) if (
                index <= count
            ):
                if index not in self._inner_expressions:
                    self._inner_expressions[index] = remap_variables(
                        evaluator.constraint_expression(index), self._remap
                    )
                return self._inner_expressions[index]
        return self._constraint_expressions[index - self.inner_constraint_count - 1]

    def _remap(self, variable: VariableIndex) -> int:
        return self._position_map[variable]
