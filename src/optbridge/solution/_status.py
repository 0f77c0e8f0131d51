"""Translation of solver status symbols into standardized statuses."""

from __future__ import annotations

from typing import Final

from optbridge.enums import ResultStatus, SolverStatus, TerminationStatus

_TERMINATION_STATUS: Final = {
    SolverStatus.OPTIMAL: TerminationStatus.LOCALLY_SOLVED,
    SolverStatus.INFEASIBLE: TerminationStatus.INFEASIBLE,
    SolverStatus.UNBOUNDED: TerminationStatus.DUAL_INFEASIBLE,
    SolverStatus.USER_LIMIT: TerminationStatus.OTHER_LIMIT,
    SolverStatus.ERROR: TerminationStatus.OTHER_ERROR,
}


def termination_status(status: str | None) -> TerminationStatus:
    """Return the termination status of a solver status symbol.

    An `Optimal` status maps to a locally solved problem, since the solver
    does not distinguish local from global optima. Unrecognized symbols map
    to an error.

    Args:
        status: The solver status, or `None` if no solve completed.

    Returns:
        The termination status.
    """
    if status is None:
        return TerminationStatus.OPTIMIZE_NOT_CALLED
    try:
        return _TERMINATION_STATUS[SolverStatus(status)]
    except ValueError:
        return TerminationStatus.OTHER_ERROR


def primal_status(status: str | None) -> ResultStatus:
    """Return the primal status of a solver status symbol.

    Args:
        status: The solver status, or `None` if no solve completed.

    Returns:
        A feasible point for `Optimal`, otherwise no solution.
    """
    if status == SolverStatus.OPTIMAL:
        return ResultStatus.FEASIBLE_POINT
    return ResultStatus.NO_SOLUTION


def dual_status(status: str | None) -> ResultStatus:  # noqa: ARG001
    """Return the dual status of a solver status symbol.

    Dual information is never reported.

    Returns:
        Always no solution.
    """
    return ResultStatus.NO_SOLUTION


def result_count(status: str | None) -> int:
    """Return the number of available results.

    Args:
        status: The solver status, or `None` if no solve completed.

    Returns:
        One if a feasible point is available, zero otherwise.
    """
    return 1 if primal_status(status) == ResultStatus.FEASIBLE_POINT else 0
