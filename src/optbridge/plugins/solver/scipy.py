"""This module implements the SciPy solver plugin."""

from __future__ import annotations

import copy
import logging
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Final, Literal

import numpy as np
from scipy.optimize import (
    Bounds,
    NonlinearConstraint,
    OptimizeResult,
    differential_evolution,
    minimize,
)

from optbridge.config.options import OptionsSchemaModel
from optbridge.enums import SolverStatus, VariableCategory
from optbridge.evaluator import FEATURE_EXPRESSION_GRAPH
from optbridge.exceptions import SolverError
from optbridge.expressions import compile_expression

from .base import Solver, SolverPlugin, SolverProblem, SolverResult
from .utils import (
    NormalizedConstraints,
    constraint_violation,
    validate_supported_features,
)

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from optbridge.config import SolverConfig
    from optbridge.expressions import CompiledExpression

_LOGGER = logging.getLogger(__name__)

_SUPPORTED_METHODS: Final[set[str]] = {
    "slsqp",
    "trust-constr",
    "cobyla",
    "differential_evolution",
}

# Categorize the methods by the problem features they support or require.

_SUPPORT_BOUNDS: Final = {"slsqp", "trust-constr", "cobyla", "differential_evolution"}
_SUPPORT_EQ: Final = {"slsqp", "trust-constr", "differential_evolution"}
_SUPPORT_INEQ: Final = {"slsqp", "trust-constr", "cobyla", "differential_evolution"}
_SUPPORT_DISCRETE: Final = {"differential_evolution"}
_REQUIRES_BOUNDS: Final = {"differential_evolution"}

# These methods accept constraints as dictionaries of normalized functions:
_CONSTRAINT_DICT: Final = {"slsqp", "cobyla"}

FEASIBILITY_TOLERANCE: Final = 1e-6
"""Largest bound violation of a point that is still considered feasible."""

UNBOUNDED_THRESHOLD: Final = 1e20
"""Objective improvement beyond which a problem is considered unbounded."""

_LIMIT_MESSAGES: Final = ("iteration limit", "maximum number of", "exceeded")

_ConstraintType = str | Callable[..., float]


class SciPySolver(Solver):
    """SciPy solver backend for optbridge.

    This class provides an interface to algorithms from SciPy's
    [`scipy.optimize`](https://docs.scipy.org/doc/scipy/reference/optimize.html)
    module. The objective and the constraints are obtained from the evaluator
    of the problem as expression graphs, which are compiled into numerical
    functions. Gradients are approximated by finite differences.

    The following methods are supported:

    - `slsqp` (the default method): bounds, equality and inequality constraints.
    - `trust-constr`: bounds, equality and inequality constraints.
    - `cobyla`: bounds and inequality constraints.
    - `differential_evolution`: bounds, constraints, and integer or binary
      variables. All variables require finite bounds.

    The generic `tolerance` and `max_iterations` settings of the
    [`SolverConfig`][optbridge.config.SolverConfig] are passed as the `tol`
    and `maxiter` arguments. Method-specific options are passed via its
    `options` field:

    --8<-- "scipy.md"
    """

    _supported_features: ClassVar[dict[str, set[str]]] = {
        "bounds": _SUPPORT_BOUNDS,
        "eq": _SUPPORT_EQ,
        "ineq": _SUPPORT_INEQ,
        "discrete": _SUPPORT_DISCRETE,
    }
    _required_features: ClassVar[dict[str, set[str]]] = {
        "bounds": _REQUIRES_BOUNDS,
    }

    def __init__(self, config: SolverConfig) -> None:
        """Initialize the solver implemented by the SciPy plugin.

        See the [optbridge.plugins.solver.base.Solver][] abstract base class.

        # noqa
        """
        self._config = config
        _, _, self._method = self._config.method.lower().rpartition("/")
        if self._method == "default":
            self._method = "slsqp"
        if self._method not in _SUPPORTED_METHODS:
            msg = f"SciPy solver algorithm {self._method} is not supported"
            raise NotImplementedError(msg)

        self._objective: CompiledExpression | None = None
        self._constraints: list[CompiledExpression] = []
        self._cached_variables: NDArray[np.float64] | None = None
        self._cached_constraints: NDArray[np.float64] | None = None

    @property
    def method(self) -> str:
        """The name of the method in use."""
        return self._method

    def solve(self, problem: SolverProblem) -> SolverResult:
        """Solve a problem.

        See the [optbridge.plugins.solver.base.Solver][] abstract base class.

        # noqa
        """
        validate_supported_features(
            problem,
            self._method,
            self._supported_features,
            self._required_features,
        )
        lower_bounds, upper_bounds = _variable_bounds(problem)
        if self._method == "differential_evolution" and not (
            np.all(np.isfinite(lower_bounds)) and np.all(np.isfinite(upper_bounds))
        ):
            msg = f"solver {self._method} requires finite bounds on all variables"
            raise NotImplementedError(msg)

        self._compile(problem)
        sign = -1.0 if problem.sense == "Max" else 1.0

        if problem.variable_count == 0:
            primal = np.zeros(0, dtype=np.float64)
            result = OptimizeResult(x=primal, success=True, message="")
        else:
            result = self._run(problem, lower_bounds, upper_bounds, sign)
            primal = np.asarray(result.x, dtype=np.float64)
            if primal.shape != (problem.variable_count,):
                msg = (
                    f"SciPy returned {primal.size} variable values, "
                    f"expected {problem.variable_count}"
                )
                raise SolverError(msg)

        objective_value = self._objective_value(primal)
        violation = max(
            constraint_violation(primal, lower_bounds, upper_bounds),
            constraint_violation(
                self._constraint_values(primal),
                problem.constraint_lower_bounds,
                problem.constraint_upper_bounds,
            ),
        )
        status = map_scipy_status(
            result, sign * objective_value, violation=violation
        )
        _LOGGER.debug(
            "SciPy %s finished: %s (%s)", self._method, status, result.message
        )
        return SolverResult(
            status=status, objective_value=objective_value, primal=primal
        )

    def _compile(self, problem: SolverProblem) -> None:
        evaluator = problem.evaluator
        evaluator.initialize([FEATURE_EXPRESSION_GRAPH])
        if FEATURE_EXPRESSION_GRAPH not in evaluator.features_available():
            msg = "The evaluator does not provide expression graphs"
            raise SolverError(msg)
        self._objective = compile_expression(evaluator.objective_expression())
        self._constraints = [
            compile_expression(evaluator.constraint_expression(idx))
            for idx in range(1, problem.constraint_count + 1)
        ]
        self._cached_variables = None
        self._cached_constraints = None

    def _run(
        self,
        problem: SolverProblem,
        lower_bounds: NDArray[np.float64],
        upper_bounds: NDArray[np.float64],
        sign: float,
    ) -> OptimizeResult:
        options = self._parse_options()
        bounds = (
            Bounds(lower_bounds, upper_bounds)
            if np.isfinite(lower_bounds).any() or np.isfinite(upper_bounds).any()
            else None
        )
        initial_values = np.clip(problem.warm_start, lower_bounds, upper_bounds)

        def _function(variables: NDArray[np.float64]) -> float:
            return sign * self._objective_value(variables)

        try:
            if self._method == "differential_evolution":
                if self._config.tolerance is not None:
                    options.setdefault("tol", self._config.tolerance)
                options.setdefault("polish", False)
                return differential_evolution(
                    func=_function,
                    x0=initial_values,
                    bounds=bounds,
                    constraints=self._constraint_objects(problem),
                    integrality=problem.categories != VariableCategory.CONTINUOUS,
                    **options,
                )
            return minimize(
                fun=_function,
                x0=initial_values,
                tol=self._config.tolerance,
                method=self._method,
                bounds=bounds,
                constraints=(
                    self._constraint_dicts(problem)
                    if self._method in _CONSTRAINT_DICT
                    else self._constraint_objects(problem)
                ),
                options=options if options else None,
            )
        except (ValueError, ArithmeticError, np.linalg.LinAlgError) as exc:
            msg = f"SciPy {self._method} failed: {exc}"
            raise SolverError(msg) from exc

    def _objective_value(self, variables: NDArray[np.float64]) -> float:
        assert self._objective is not None
        return float(self._objective(variables))

    def _constraint_values(
        self, variables: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        if (
            self._cached_variables is None
            or variables.shape != self._cached_variables.shape
            or not np.array_equal(variables, self._cached_variables)
        ):
            self._cached_variables = variables.copy()
            self._cached_constraints = np.fromiter(
                (constraint(variables) for constraint in self._constraints),
                dtype=np.float64,
                count=len(self._constraints),
            )
        assert self._cached_constraints is not None
        return self._cached_constraints

    def _normalized_value(
        self,
        variables: NDArray[np.float64],
        index: int,
        normalized: NormalizedConstraints,
    ) -> float:
        return float(normalized.normalize(self._constraint_values(variables))[index])

    def _constraint_dicts(
        self, problem: SolverProblem
    ) -> list[dict[str, _ConstraintType]]:
        normalized = NormalizedConstraints(
            problem.constraint_lower_bounds, problem.constraint_upper_bounds
        )
        return [
            {
                "type": "eq" if is_eq else "ineq",
                "fun": partial(self._normalized_value, index=idx, normalized=normalized),
            }
            for idx, is_eq in enumerate(normalized.is_eq)
        ]

    def _constraint_objects(self, problem: SolverProblem) -> list[NonlinearConstraint]:
        if problem.constraint_count == 0:
            return []
        return [
            NonlinearConstraint(
                fun=self._constraint_values,
                lb=problem.constraint_lower_bounds,
                ub=problem.constraint_upper_bounds,
            )
        ]

    def _parse_options(self) -> dict[str, Any]:
        options = (
            copy.deepcopy(self._config.options)
            if isinstance(self._config.options, dict)
            else {}
        )
        # The maximum number of iterations overrides a maxiter option.
        if self._config.max_iterations is not None:
            options["maxiter"] = self._config.max_iterations
        return options


def _variable_bounds(
    problem: SolverProblem,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    lower_bounds = problem.variable_lower_bounds.copy()
    upper_bounds = problem.variable_upper_bounds.copy()
    binary = problem.categories == VariableCategory.BINARY
    lower_bounds[binary] = np.maximum(lower_bounds[binary], 0.0)
    upper_bounds[binary] = np.minimum(upper_bounds[binary], 1.0)
    return lower_bounds, upper_bounds


def map_scipy_status(
    result: OptimizeResult, objective_value: float, *, violation: float
) -> SolverStatus:
    """Map the outcome of a SciPy run to a solver status.

    The objective value is given in minimization form, i.e. negated for
    maximization problems.

    Args:
        result:          The result returned by SciPy.
        objective_value: The objective value at the returned point.
        violation:       The largest bound violation at the returned point.

    Returns:
        The solver status.
    """
    message = str(result.get("message", "")).lower()
    at_limit = any(text in message for text in _LIMIT_MESSAGES)
    if np.isnan(objective_value):
        return SolverStatus.ERROR
    if objective_value <= -UNBOUNDED_THRESHOLD:
        return SolverStatus.UNBOUNDED
    if at_limit:
        return SolverStatus.USER_LIMIT
    if violation > FEASIBILITY_TOLERANCE:
        return SolverStatus.INFEASIBLE
    if result.get("success", False):
        return SolverStatus.OPTIMAL
    return SolverStatus.ERROR


class SciPySolverPlugin(SolverPlugin):
    """The SciPy solver plugin class."""

    @classmethod
    def create(cls, config: SolverConfig) -> SciPySolver:
        """Initialize the solver plugin.

        See the [optbridge.plugins.solver.base.SolverPlugin][] abstract base class.

        # noqa
        """
        return SciPySolver(config)

    @classmethod
    def is_supported(cls, method: str) -> bool:
        """Check if a method is supported.

        See the [optbridge.plugins.solver.base.SolverPlugin][] abstract base class.

        # noqa
        """
        return method.lower() in (_SUPPORTED_METHODS | {"default"})

    @classmethod
    def validate_options(cls, method: str, options: dict[str, Any] | None) -> None:
        """Validate the options of a given method.

        See the [optbridge.plugins.solver.base.SolverPlugin][] abstract base class.

        # noqa
        """
        if options is not None:
            _, _, method = method.lower().rpartition("/")
            if method == "default":
                method = "slsqp"
            OptionsSchemaModel.model_validate(_OPTIONS_SCHEMA).get_options_model(
                method
            ).model_validate(options)


_OPTIONS_SCHEMA: dict[str, Any] = {
    "methods": {
        "SLSQP": {
            "options": {
                "disp": bool,
                "maxiter": int,
                "ftol": float,
                "eps": float,
                "finite_diff_rel_step": float,
            },
            "url": "https://docs.scipy.org/doc/scipy/reference/optimize.minimize-slsqp.html",
        },
        "trust-constr": {
            "options": {
                "disp": bool,
                "maxiter": int,
                "verbose": int,
                "gtol": float,
                "xtol": float,
                "barrier_tol": float,
                "initial_tr_radius": float,
                "initial_constr_penalty": float,
                "initial_barrier_parameter": float,
                "initial_barrier_tolerance": float,
                "factorization_method": Literal[
                    "NormalEquation", "AugmentedSystem", "QRFactorization", "SVDFactorization"
                ],
                "finite_diff_rel_step": float,
            },
            "url": "https://docs.scipy.org/doc/scipy/reference/optimize.minimize-trustconstr.html",
        },
        "COBYLA": {
            "options": {
                "disp": bool,
                "maxiter": int,
                "rhobeg": float,
                "tol": float,
                "catol": float,
            },
            "url": "https://docs.scipy.org/doc/scipy/reference/optimize.minimize-cobyla.html",
        },
        "differential_evolution": {
            "options": {
                "disp": bool,
                "maxiter": int,
                "strategy": Literal[
                    "best1bin",
                    "best1exp",
                    "rand1bin",
                    "rand1exp",
                    "rand2bin",
                    "rand2exp",
                    "randtobest1bin",
                    "randtobest1exp",
                    "currenttobest1bin",
                    "currenttobest1exp",
                    "best2exp",
                    "best2bin",
                ],
                "popsize": int,
                "tol": float,
                "mutation": float | tuple[float, float],
                "recombination": float,
                "seed": int,
                "polish": bool,
                "init": Literal["latinhypercube", "sobol", "halton", "random"],
                "atol": float,
                "updating": Literal["immediate", "deferred"],
            },
            "url": "https://docs.scipy.org/doc/scipy/reference/generated/scipy.optimize.differential_evolution.html",
        },
    },
}


if __name__ == "__main__":
    from optbridge.config.options import gen_options_table

    with Path("scipy.md").open("w", encoding="utf-8") as fp:
        fp.write(gen_options_table(_OPTIONS_SCHEMA))
