from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

import numpy as np
import pytest

from optbridge import Optimizer
from optbridge.enums import SolverStatus
from optbridge.evaluator import FEATURE_EXPRESSION_GRAPH, NLPEvaluator
from optbridge.expressions import ExpressionNode
from optbridge.plugins import PluginManager
from optbridge.plugins.solver import (
    Solver,
    SolverPlugin,
    SolverProblem,
    SolverResult,
)

_Response = SolverResult | Exception | Callable[[SolverProblem], SolverResult]


@dataclass(slots=True)
class FakeSolverState:
    """Records the problems passed to the fake solver, and scripts its answers.

    Without a scripted response the solver returns an optimal result at the
    warm start point, with a zero objective.
    """

    problems: list[SolverProblem] = field(default_factory=list)
    responses: list[_Response] = field(default_factory=list)

    @property
    def problem(self) -> SolverProblem:
        return self.problems[-1]

    def respond(self, problem: SolverProblem) -> SolverResult:
        self.problems.append(problem)
        if not self.responses:
            return SolverResult(
                status=SolverStatus.OPTIMAL,
                objective_value=0.0,
                primal=np.array(problem.warm_start, dtype=np.float64),
            )
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(problem)
        return response


@pytest.fixture(name="fake_solver")
def fake_solver_fixture() -> FakeSolverState:
    return FakeSolverState()


@pytest.fixture(name="plugin_manager")
def plugin_manager_fixture(fake_solver: FakeSolverState) -> PluginManager:
    class _FakeSolver(Solver):
        def solve(self, problem: SolverProblem) -> SolverResult:
            return fake_solver.respond(problem)

    class _FakeSolverPlugin(SolverPlugin):
        @classmethod
        def create(cls, config: Any) -> Solver:
            return _FakeSolver(config)

        @classmethod
        def is_supported(cls, method: str) -> bool:
            return method.lower() in {"default", "fake"}

    plugin_manager = PluginManager()
    plugin_manager.add_plugin("solver", "fake", _FakeSolverPlugin)
    return plugin_manager


@pytest.fixture(name="optimizer")
def optimizer_fixture(plugin_manager: PluginManager) -> Optimizer:
    return Optimizer({"method": "fake/default"}, plugin_manager=plugin_manager)


class ExpressionEvaluator(NLPEvaluator):
    """A nonlinear evaluator serving fixed expression graphs."""

    def __init__(
        self,
        objective: ExpressionNode | None = None,
        constraints: Sequence[ExpressionNode] = (),
        features: Sequence[str] = (FEATURE_EXPRESSION_GRAPH,),
    ) -> None:
        self.objective = objective
        self.constraints = list(constraints)
        self.features = list(features)
        self.requested_features: list[str] | None = None
        self.calls: Counter[int] = Counter()

    def initialize(self, requested_features: Sequence[str]) -> None:
        self.requested_features = list(requested_features)

    def features_available(self) -> list[str]:
        return self.features

    def objective_expression(self) -> ExpressionNode:
        assert self.objective is not None
        self.calls[0] += 1
        return self.objective

    def constraint_expression(self, index: int) -> ExpressionNode:
        self.calls[index] += 1
        return self.constraints[index - 1]


@pytest.fixture(name="expression_evaluator")
def expression_evaluator_fixture() -> type[ExpressionEvaluator]:
    return ExpressionEvaluator
