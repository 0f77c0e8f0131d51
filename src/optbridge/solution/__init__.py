"""Solutions and their status.

A [`SolutionSnapshot`][optbridge.solution.SolutionSnapshot] records the outcome
of one solve, keyed by the variables of the model. The status functions
translate the solver status symbol into the standardized termination, primal
and dual statuses.
"""

from ._snapshot import SolutionSnapshot
from ._status import dual_status, primal_status, result_count, termination_status

__all__ = [
    "SolutionSnapshot",
    "dual_status",
    "primal_status",
    "result_count",
    "termination_status",
]
