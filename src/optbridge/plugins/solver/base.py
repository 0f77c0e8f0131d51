"""This module defines base classes for solver plugins."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

import numpy as np
from pydantic import BaseModel, ConfigDict, NonNegativeInt, model_validator

from optbridge.config.utils import check_array_size, check_enum_values
from optbridge.config.validated_types import Array1D, ArrayEnum  # noqa: TC001
from optbridge.enums import VariableCategory
from optbridge.evaluator import UnifiedEvaluator  # noqa: TC001
from optbridge.plugins.base import Plugin

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from optbridge.config import SolverConfig
    from optbridge.enums import SolverStatus


class SolverProblem(BaseModel):
    """The problem handed to a solver.

    All arrays are indexed by position: entry `i - 1` refers to the variable
    or constraint at 1-based position `i`. The constraint arrays cover the
    constraints of the nonlinear block first, followed by the algebraic
    constraints. The expressions of the objective and the constraints are
    obtained from the `evaluator`.

    Attributes:
        variable_count:          The number of variables.
        constraint_count:        The number of constraints.
        variable_lower_bounds:   The lower bounds of the variables.
        variable_upper_bounds:   The upper bounds of the variables.
        constraint_lower_bounds: The lower bounds of the constraints.
        constraint_upper_bounds: The upper bounds of the constraints.
        sense:                   The optimization sense.
        categories:              The category of each variable.
        warm_start:              The initial variable values.
        evaluator:               The evaluator of objective and constraints.
    """

    variable_count: NonNegativeInt
    constraint_count: NonNegativeInt
    variable_lower_bounds: Array1D
    variable_upper_bounds: Array1D
    constraint_lower_bounds: Array1D
    constraint_upper_bounds: Array1D
    sense: Literal["Min", "Max"] = "Min"
    categories: ArrayEnum
    warm_start: Array1D
    evaluator: UnifiedEvaluator

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        arbitrary_types_allowed=True,
    )

    @model_validator(mode="after")
    def _check_sizes(self) -> SolverProblem:
        for name in (
            "variable_lower_bounds",
            "variable_upper_bounds",
            "categories",
            "warm_start",
        ):
            check_array_size(getattr(self, name), name, self.variable_count)
        for name in ("constraint_lower_bounds", "constraint_upper_bounds"):
            check_array_size(getattr(self, name), name, self.constraint_count)
        check_enum_values(self.categories, VariableCategory)
        if self.evaluator.constraint_count != self.constraint_count:
            msg = (
                f"The evaluator provides {self.evaluator.constraint_count} "
                f"constraints, expected {self.constraint_count}"
            )
            raise ValueError(msg)
        return self

    @property
    def has_discrete_variables(self) -> bool:
        """Whether any variable is binary or integer."""
        return bool(np.any(self.categories != VariableCategory.CONTINUOUS))


@dataclass(slots=True)
class SolverResult:
    """The outcome of a single solver invocation.

    Attributes:
        status:          The status symbol reported by the solver.
        objective_value: The objective value at the returned point.
        primal:          The variable values, ordered by position.
    """

    status: SolverStatus
    objective_value: float
    primal: NDArray[np.float64]


class Solver(ABC):
    """Abstract base class for solver implementations.

    Solver plugins provide classes derived from `Solver` that wrap a specific
    algorithm. Instances are created by the corresponding
    [`SolverPlugin`][optbridge.plugins.solver.base.SolverPlugin] factories and
    are initialized with the [`SolverConfig`][optbridge.config.SolverConfig]
    of the optimizer.

    The `solve` method performs one blocking invocation. Outcomes such as
    infeasibility or reaching an iteration limit are reported through the
    status of the result. If the solver cannot run, or produces a malformed
    result, implementations raise a
    [`SolverError`][optbridge.exceptions.SolverError].
    """

    def __init__(self, config: SolverConfig) -> None:  # noqa: B027
        """Initialize a solver object.

        Args:
            config: The solver configuration.
        """

    @abstractmethod
    def solve(self, problem: SolverProblem) -> SolverResult:
        """Solve a problem.

        Args:
            problem: The problem to solve.

        Returns:
            The status, objective value and variable values found.
        """


class SolverPlugin(Plugin):
    """Abstract base class for solver plugins.

    Solver plugins are factories for [`Solver`][optbridge.plugins.solver.base.Solver]
    objects. The [`PluginManager`][optbridge.plugins.PluginManager] finds the
    plugin supporting the configured method, and the optimizer uses its
    `create` method to obtain the solver.
    """

    @classmethod
    @abstractmethod
    def create(cls, config: SolverConfig) -> Solver:
        """Create a solver.

        Args:
            config: The solver configuration.

        Returns:
            A solver instance.
        """

    @classmethod
    def validate_options(
        cls,
        method: str,
        options: dict[str, Any] | None,
    ) -> None:
        """Validate the solver-specific options of a method.

        Called when an optimizer is created, so that configuration errors
        surface before a solve is attempted. The default implementation
        accepts any options.

        Args:
            method:  The method name.
            options: The options, or `None`.

        Raises:
            Exception: If the options are not valid.
        """
