"""Configuration class for the solver."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, NonNegativeInt, PositiveFloat


class SolverConfig(BaseModel):
    """Configuration class for the solver.

    The `method` field selects the solver, either as `plugin-name/method-name`
    or as a bare method name, in which case the
    [`PluginManager`][optbridge.plugins.PluginManager] searches all solver
    plugins for one that supports it. `plugin-name/default` selects the
    default method of a plugin.

    The `tolerance` and `max_iterations` fields are generic settings that each
    plugin maps onto the corresponding options of the underlying solver. Any
    other solver-specific option is passed via `options`, which is validated
    against the schema of the selected plugin when an
    [`Optimizer`][optbridge.Optimizer] is created. Timeouts, if supported, are
    solver options as well.

    Attributes:
        method:         Name of the solver method.
        tolerance:      Optional convergence tolerance.
        max_iterations: Optional maximum number of iterations.
        options:        Solver-specific options.
    """

    method: str = "scipy/default"
    tolerance: PositiveFloat | None = None
    max_iterations: NonNegativeInt | None = None
    options: dict[str, Any] | None = None

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        str_min_length=1,
        str_strip_whitespace=True,
        validate_default=True,
    )
