"""The snapshot of a completed solve."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from optbridge.enums import ResultStatus

from ._status import primal_status

if TYPE_CHECKING:
    from collections.abc import Mapping

    from optbridge.enums import SolverStatus
    from optbridge.model import VariableIndex
    from optbridge.plugins.solver import SolverResult
    from optbridge.translation import VariableIndexer


@dataclass(frozen=True, slots=True)
class SolutionSnapshot:
    """The result of one solve, keyed by the variables of the model.

    A snapshot is created once per completed solve and never updated. If the
    solver did not run to completion, `primal` is empty.

    Attributes:
        status:          The status symbol reported by the solver.
        objective_value: The objective value reported by the solver.
        primal:          The value of each variable.
    """

    status: SolverStatus
    objective_value: float = float("nan")
    primal: Mapping[VariableIndex, float] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_result(
        cls, result: SolverResult, indexer: VariableIndexer
    ) -> SolutionSnapshot:
        """Map a positional solver result onto the variables of the model.

        Args:
            result:  The result of the solver.
            indexer: The positions of the variables used for the solve.

        Returns:
            The snapshot.
        """
        primal = {
            variable: float(result.primal[position - 1])
            for variable, position in indexer.items()
        }
        return cls(
            status=result.status,
            objective_value=float(result.objective_value),
            primal=MappingProxyType(primal),
        )

    @property
    def has_primal(self) -> bool:
        """Whether the snapshot holds a feasible point."""
        return primal_status(self.status) == ResultStatus.FEASIBLE_POINT
