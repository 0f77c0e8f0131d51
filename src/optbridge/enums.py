"""Enumerations used within the `optbridge` library."""

from enum import IntEnum, StrEnum


class VariableCategory(IntEnum):
    """Enumerates the categories of optimization variables.

    Categories are derived from the `ZeroOne` and `Integer` constraints on
    single variables, and passed to the solver as a per-variable array.
    """

    CONTINUOUS = 1
    "Continuous variables represented by real values (the default)."

    BINARY = 2
    "Variables restricted to the values 0 and 1."

    INTEGER = 3
    "Discrete variables represented by integer values."


class ObjectiveSense(StrEnum):
    """Enumerates the optimization senses of a model."""

    MINIMIZE = "min"
    """Minimize the objective function."""

    MAXIMIZE = "max"
    """Maximize the objective function."""

    FEASIBILITY = "feasibility"
    """No objective; the solver minimizes the zero objective."""


class SolverStatus(StrEnum):
    """Enumerates the status symbols returned by a solver.

    These are the raw outcomes reported by solver plugins, they are translated
    into a [`TerminationStatus`][optbridge.enums.TerminationStatus] and a
    [`ResultStatus`][optbridge.enums.ResultStatus] by the solution mapper.
    """

    OPTIMAL = "Optimal"
    """The solver converged to an optimal point."""

    INFEASIBLE = "Infeasible"
    """The solver determined that the problem is infeasible."""

    UNBOUNDED = "Unbounded"
    """The solver determined that the problem is unbounded."""

    USER_LIMIT = "UserLimit"
    """The solver stopped on an iteration, time, or other user limit."""

    ERROR = "Error"
    """The solver failed."""


class TerminationStatus(StrEnum):
    """Enumerates the standardized reasons why a solve terminated."""

    OPTIMIZE_NOT_CALLED = "optimize_not_called"
    """No solution is available: no solve was performed, or it failed."""

    LOCALLY_SOLVED = "locally_solved"
    """The solver found a locally optimal solution."""

    INFEASIBLE = "infeasible"
    """The problem was found to be infeasible."""

    DUAL_INFEASIBLE = "dual_infeasible"
    """The dual problem is infeasible, typically the primal is unbounded."""

    OTHER_LIMIT = "other_limit"
    """The solver stopped on a limit."""

    OTHER_ERROR = "other_error"
    """The solver stopped because of an error."""


class ResultStatus(StrEnum):
    """Enumerates the standardized status of a primal or dual result."""

    NO_SOLUTION = "no_solution"
    """No result is available."""

    FEASIBLE_POINT = "feasible_point"
    """The result is a feasible point."""
