"""The optimizer: a model that can be solved."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import numpy as np

from optbridge.config import SolverConfig
from optbridge.enums import ObjectiveSense, SolverStatus
from optbridge.evaluator import InnerEvaluator, UnifiedEvaluator
from optbridge.exceptions import (
    IndexingError,
    OptimizeInProgressError,
    SolverError,
)
from optbridge.expressions import evaluate, function_to_expression, is_trivial
from optbridge.model import Model
from optbridge.plugins import PluginManager
from optbridge.plugins.solver import SolverProblem
from optbridge.solution import (
    SolutionSnapshot,
    dual_status,
    primal_status,
    result_count,
    termination_status,
)
from optbridge.translation import (
    VariableIndexer,
    collect_scalar_constraints,
    extract_variable_bounds,
    extract_variable_categories,
)

if TYPE_CHECKING:
    from optbridge.enums import ResultStatus, TerminationStatus
    from optbridge.expressions import ExpressionNode
    from optbridge.model import ConstraintIndex, VariableIndex
    from optbridge.plugins.solver import SolverPlugin

_LOGGER = logging.getLogger(__name__)


class Optimizer(Model):
    """A structured optimization model bound to a solver.

    The optimizer translates the model into the positional form expected by
    a solver plugin, invokes the solver once per call to `optimize`, and maps
    the result back onto the variables of the model.

    The result of the last solve is kept as a
    [`SolutionSnapshot`][optbridge.solution.SolutionSnapshot]. It is discarded
    when `optimize` is called again, and whenever the model is edited. Without
    a snapshot, the termination status is `OPTIMIZE_NOT_CALLED` and the
    solution queries return `None`.

    Example:
        ```python
        optimizer = Optimizer({"method": "scipy/slsqp"})
        x = optimizer.add_variable()
        optimizer.add_constraint(SingleVariable(x), GreaterThan(1.0))
        optimizer.set_objective(
            ScalarAffineFunction((ScalarAffineTerm(1.0, x),)),
            ObjectiveSense.MINIMIZE,
        )
        optimizer.optimize()
        optimizer.variable_primal(x)  # 1.0
        ```
    """

    def __init__(
        self,
        config: SolverConfig | dict[str, Any] | None = None,
        *,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        """Initialize an optimizer.

        The solver plugin is looked up, and the solver options are validated,
        when the optimizer is created.

        Args:
            config:         The solver configuration.
            plugin_manager: The plugin manager used to find the solver.
        """
        super().__init__()
        if config is None:
            config = SolverConfig()
        self._config = (
            config
            if isinstance(config, SolverConfig)
            else SolverConfig.model_validate(config)
        )
        self._plugin_manager = (
            PluginManager() if plugin_manager is None else plugin_manager
        )
        self._plugin: type[SolverPlugin] = self._plugin_manager.get_plugin(
            "solver", self._config.method
        )
        self._plugin.validate_options(self._config.method, self._config.options)
        self._snapshot: SolutionSnapshot | None = None
        self._in_progress = False

    def __repr__(self) -> str:
        """Return a short description of the optimizer."""
        return f"{super().__repr__()[:-1]}, solver={self.solver_name!r})"

    def _modified(self) -> None:
        self._snapshot = None

    @property
    def config(self) -> SolverConfig:
        """The solver configuration."""
        return self._config

    @property
    def solver_name(self) -> str:
        """The name of the solver, including the configured method."""
        return f"optbridge ({self._config.method})"

    @property
    def snapshot(self) -> SolutionSnapshot | None:
        """The result of the last solve, `None` if not available."""
        return self._snapshot

    def optimize(self) -> None:
        """Solve the model.

        Any previous result is discarded first. The problem is assembled from
        the current state of the model, and the solver is invoked once,
        blocking until it returns.

        A [`SolverError`][optbridge.exceptions.SolverError] raised by the
        solver is recorded as a result with the `Error` status. Any other
        exception leaves the optimizer without a result, and propagates.

        Raises:
            OptimizeInProgressError: If called while a solve is in progress.
        """
        if self._in_progress:
            msg = "optimize() was called while a solve is in progress"
            raise OptimizeInProgressError(msg)
        self._in_progress = True
        self._snapshot = None
        try:
            indexer, problem = self._build_problem()
            solver = self._plugin.create(self._config)
            _LOGGER.debug("Invoking solver %s", self._config.method)
            try:
                result = solver.solve(problem)
                if result.primal.shape != (len(indexer),):
                    msg = (
                        f"The solver returned {result.primal.size} variable "
                        f"values, expected {len(indexer)}"
                    )
                    raise SolverError(msg)
            except SolverError as exc:
                _LOGGER.debug("Solver error, reporting an Error status: %s", exc)
                self._snapshot = SolutionSnapshot(status=SolverStatus.ERROR)
                return
            _LOGGER.debug("Solver returned status %s", result.status)
            self._snapshot = SolutionSnapshot.from_result(result, indexer)
        finally:
            self._in_progress = False

    def _build_problem(self) -> tuple[VariableIndexer, SolverProblem]:
        indexer = VariableIndexer(self.list_of_variable_indices())
        lower_bounds, upper_bounds = extract_variable_bounds(self, indexer)
        categories = extract_variable_categories(self, indexer)
        constraints = collect_scalar_constraints(self, indexer)

        block = self.nlp_block
        nlp_bounds = () if block is None else block.constraint_bounds
        evaluator = UnifiedEvaluator(
            inner=InnerEvaluator.from_block(block),
            position_map=indexer,
            objective_expression=self._objective_expression(indexer),
            constraint_expressions=constraints.expressions,
        )
        warm_start = [self._primal_start.get(variable, 0.0) for variable in indexer]

        _LOGGER.debug(
            "Assembled problem with %d variables, %d nonlinear and %d algebraic "
            "constraints",
            len(indexer),
            len(nlp_bounds),
            len(constraints),
        )
        problem = SolverProblem(
            variable_count=len(indexer),
            constraint_count=len(nlp_bounds) + len(constraints),
            variable_lower_bounds=lower_bounds,
            variable_upper_bounds=upper_bounds,
            constraint_lower_bounds=np.concatenate(
                (
                    np.array([pair.lower for pair in nlp_bounds], dtype=np.float64),
                    constraints.lower_bounds,
                )
            ),
            constraint_upper_bounds=np.concatenate(
                (
                    np.array([pair.upper for pair in nlp_bounds], dtype=np.float64),
                    constraints.upper_bounds,
                )
            ),
            sense="Max" if self.objective_sense == ObjectiveSense.MAXIMIZE else "Min",
            categories=categories,
            warm_start=warm_start,
            evaluator=evaluator,
        )
        return indexer, problem

    def _objective_expression(self, indexer: VariableIndexer) -> ExpressionNode | None:
        if self.objective_sense == ObjectiveSense.FEASIBILITY:
            return None
        expression = function_to_expression(self.objective_function, indexer)
        return None if is_trivial(expression) else expression

    # Solution queries:

    @property
    def raw_status(self) -> str | None:
        """The status symbol reported by the solver, `None` without a result."""
        return None if self._snapshot is None else str(self._snapshot.status)

    @property
    def termination_status(self) -> TerminationStatus:
        """The reason the solver stopped."""
        return termination_status(self.raw_status)

    @property
    def primal_status(self) -> ResultStatus:
        """The status of the primal solution."""
        return primal_status(self.raw_status)

    @property
    def dual_status(self) -> ResultStatus:
        """The status of the dual solution, which is never available."""
        return dual_status(self.raw_status)

    @property
    def result_count(self) -> int:
        """The number of available results, zero or one."""
        return result_count(self.raw_status)

    @property
    def objective_value(self) -> float | None:
        """The objective value of the solution, `None` if not available."""
        if self._snapshot is None or not self._snapshot.has_primal:
            return None
        return self._snapshot.objective_value

    def variable_primal(self, variable: VariableIndex) -> float | None:
        """Return the value of a variable in the solution.

        Args:
            variable: The variable.

        Returns:
            The value, or `None` if no solution is available.

        Raises:
            IndexingError: If the variable is not in the model.
        """
        self._check_variable(variable)
        if self._snapshot is None or not self._snapshot.has_primal:
            return None
        return self._snapshot.primal[variable]

    def constraint_primal(self, index: ConstraintIndex) -> float | None:
        """Return the value of a constraint function in the solution.

        The value is computed by evaluating the constraint function at the
        variable values of the solution.

        Args:
            index: The constraint.

        Returns:
            The value, or `None` if no solution is available.

        Raises:
            IndexingError: If the constraint is not in the model.
        """
        if not self.is_valid(index):
            raise IndexingError(index)
        if self._snapshot is None or not self._snapshot.has_primal:
            return None
        indexer = VariableIndexer(self._snapshot.primal)
        values = np.fromiter(
            self._snapshot.primal.values(), dtype=np.float64, count=len(indexer)
        )
        expression = function_to_expression(self.constraint_function(index), indexer)
        return evaluate(expression, values)
