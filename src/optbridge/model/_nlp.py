"""The nonlinear block of a model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from optbridge.evaluator import NLPEvaluator


@dataclass(frozen=True, slots=True)
class NLPBoundsPair:
    """The lower and upper bound of a nonlinear constraint.

    Attributes:
        lower: The lower bound, may be $-\\infty$.
        upper: The upper bound, may be $+\\infty$.
    """

    lower: float
    upper: float


@dataclass(frozen=True, slots=True)
class NLPBlock:
    """The nonlinear part of a model.

    The block holds an evaluator providing the nonlinear constraints and,
    if `has_objective` is set, the objective. The number of nonlinear
    constraints is the length of `constraint_bounds`. These constraints occupy
    the first positions in the constraint arrays passed to the solver.

    Attributes:
        evaluator:         The nonlinear evaluator.
        constraint_bounds: The bounds of the nonlinear constraints.
        has_objective:     Whether the evaluator provides the objective.
    """

    evaluator: NLPEvaluator
    constraint_bounds: tuple[NLPBoundsPair, ...] = field(default=())
    has_objective: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "constraint_bounds", tuple(self.constraint_bounds))
