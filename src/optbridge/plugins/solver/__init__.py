"""Solver plugins.

A solver plugin wraps an external solver. It receives a
[`SolverProblem`][optbridge.plugins.solver.base.SolverProblem], performs one
blocking solve, and returns a
[`SolverResult`][optbridge.plugins.solver.base.SolverResult].
"""

from .base import Solver, SolverPlugin, SolverProblem, SolverResult

__all__ = [
    "Solver",
    "SolverPlugin",
    "SolverProblem",
    "SolverResult",
]
