"""Configuration classes.

The [`SolverConfig`][optbridge.config.SolverConfig] class selects and
configures the solver used by an [`Optimizer`][optbridge.Optimizer]. It is a
Pydantic model: invalid input raises a `pydantic.ValidationError`.
"""

from ._solver_config import SolverConfig

__all__ = ["SolverConfig"]
