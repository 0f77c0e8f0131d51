import math
from typing import Any

import pytest
from pydantic import ValidationError

from optbridge.enums import ObjectiveSense
from optbridge.exceptions import IndexingError, UnsupportedConstraintError
from optbridge.model import (
    EqualTo,
    GreaterThan,
    Integer,
    Interval,
    LessThan,
    Model,
    ScalarAffineFunction,
    ScalarAffineTerm,
    ScalarQuadraticFunction,
    ScalarQuadraticTerm,
    SingleVariable,
    VariableIndex,
    ZeroOne,
)


def test_add_variables() -> None:
    model = Model()
    assert model.is_empty()
    x = model.add_variable()
    y, z = model.add_variables(2)
    assert model.number_of_variables == 3
    assert model.list_of_variable_indices() == [x, y, z]
    assert len({x, y, z}) == 3
    assert all(model.is_valid(variable) for variable in (x, y, z))
    assert not model.is_valid(VariableIndex(42))
    assert not model.is_empty()


def test_variable_indices_are_not_reused() -> None:
    model = Model()
    x = model.add_variable()
    model.delete_variable(x)
    y = model.add_variable()
    assert x != y
    assert not model.is_valid(x)


@pytest.mark.parametrize(
    ("function_type", "set_type", "supported"),
    [
        (SingleVariable, LessThan, True),
        (SingleVariable, ZeroOne, True),
        (SingleVariable, Integer, True),
        (ScalarAffineFunction, Interval, True),
        (ScalarQuadraticFunction, EqualTo, True),
        (ScalarAffineFunction, ZeroOne, False),
        (ScalarQuadraticFunction, Integer, False),
    ],
)
def test_supports_constraint(
    function_type: type, set_type: type, *, supported: bool
) -> None:
    assert Model.supports_constraint(function_type, set_type) is supported


def test_add_unsupported_constraint() -> None:
    model = Model()
    x = model.add_variable()
    function = ScalarAffineFunction((ScalarAffineTerm(1.0, x),))
    with pytest.raises(
        UnsupportedConstraintError,
        match="Unsupported constraint: ScalarAffineFunction-in-ZeroOne",
    ):
        model.add_constraint(function, ZeroOne())


def test_add_constraint_unknown_variable() -> None:
    model = Model()
    model.add_variable()
    with pytest.raises(IndexingError, match="Invalid index"):
        model.add_constraint(SingleVariable(VariableIndex(99)), LessThan(1.0))


def test_constraints() -> None:
    model = Model()
    x, y = model.add_variables(2)
    function = ScalarAffineFunction(
        (ScalarAffineTerm(1.0, x), ScalarAffineTerm(2.0, y)), 1.0
    )
    c1 = model.add_constraint(function, LessThan(3.0))
    c2 = model.add_constraint(SingleVariable(x), GreaterThan(0.0))
    c3 = model.add_constraint(function, LessThan(5.0))

    assert model.constraint_function(c1) == function
    assert model.constraint_set(c1) == LessThan(3.0)
    assert model.list_of_constraint_indices(ScalarAffineFunction, LessThan) == [c1, c3]
    assert model.number_of_constraints(ScalarAffineFunction, LessThan) == 2
    assert model.number_of_constraints(ScalarAffineFunction, ZeroOne) == 0
    assert set(model.list_of_constraint_types()) == {
        (ScalarAffineFunction, LessThan),
        (SingleVariable, GreaterThan),
    }

    model.delete_constraint(c1)
    assert not model.is_valid(c1)
    assert model.is_valid(c2)
    assert model.list_of_constraint_indices(ScalarAffineFunction, LessThan) == [c3]
    with pytest.raises(IndexingError):
        model.constraint_function(c1)
    with pytest.raises(IndexingError):
        model.delete_constraint(c1)


def test_set_constraint_set() -> None:
    model = Model()
    x = model.add_variable()
    index = model.add_constraint(SingleVariable(x), Interval(0.0, 1.0))
    model.set_constraint_set(index, Interval(-1.0, 2.0))
    assert model.constraint_set(index) == Interval(-1.0, 2.0)
    with pytest.raises(TypeError, match="from Interval to LessThan"):
        model.set_constraint_set(index, LessThan(1.0))


def test_sets() -> None:
    assert Interval(1.0, 1.0).lower == 1.0
    assert LessThan(math.inf).upper == math.inf
    with pytest.raises(ValidationError, match="lower bound is larger"):
        Interval(2.0, 1.0)
    with pytest.raises(ValidationError, match="must be finite"):
        EqualTo(math.inf)
    with pytest.raises(ValidationError):
        LessThan(1.0).upper = 2.0  # type: ignore[misc]


@pytest.mark.parametrize(
    ("set_", "field"),
    [
        (lambda: LessThan(math.nan), "upper"),
        (lambda: GreaterThan(math.nan), "lower"),
        (lambda: Interval(math.nan, 1.0), "lower"),
        (lambda: Interval(0.0, math.nan), "upper"),
    ],
)
def test_sets_reject_nan(set_: Any, field: str) -> None:
    with pytest.raises(ValidationError, match=f"The {field} of a .* set is NaN"):
        set_()
    with pytest.raises(ValidationError):
        EqualTo(math.nan)


def test_delete_variable() -> None:
    model = Model()
    x, y = model.add_variables(2)
    bound = model.add_constraint(SingleVariable(x), LessThan(1.0))
    other = model.add_constraint(SingleVariable(y), LessThan(1.0))
    affine = model.add_constraint(
        ScalarAffineFunction((ScalarAffineTerm(1.0, x), ScalarAffineTerm(2.0, y))),
        EqualTo(1.0),
    )
    quadratic = model.add_constraint(
        ScalarQuadraticFunction(
            (ScalarAffineTerm(1.0, y),),
            (ScalarQuadraticTerm(1.0, x, y), ScalarQuadraticTerm(1.0, y, y)),
        ),
        GreaterThan(0.0),
    )
    model.set_objective(SingleVariable(x), ObjectiveSense.MINIMIZE)
    model.set_variable_primal_start(x, 1.0)

    model.delete_variable(x)

    assert not model.is_valid(x)
    assert not model.is_valid(bound)
    assert model.is_valid(other)
    assert model.is_valid(affine)
    assert model.is_valid(quadratic)
    assert model.constraint_function(affine) == ScalarAffineFunction(
        (ScalarAffineTerm(2.0, y),)
    )
    assert model.constraint_function(quadratic) == ScalarQuadraticFunction(
        (ScalarAffineTerm(1.0, y),), (ScalarQuadraticTerm(1.0, y, y),)
    )
    assert model.objective_function == ScalarAffineFunction()
    with pytest.raises(IndexingError):
        model.delete_variable(x)


def test_objective() -> None:
    model = Model()
    assert model.objective_sense == ObjectiveSense.FEASIBILITY
    assert model.objective_function == ScalarAffineFunction()
    x = model.add_variable()
    function = ScalarAffineFunction((ScalarAffineTerm(2.0, x),), 1.0)
    model.set_objective(function, ObjectiveSense.MAXIMIZE)
    assert model.objective_function == function
    assert model.objective_sense == ObjectiveSense.MAXIMIZE
    with pytest.raises(IndexingError):
        model.set_objective(SingleVariable(VariableIndex(7)), ObjectiveSense.MINIMIZE)


def test_variable_primal_start() -> None:
    model = Model()
    x = model.add_variable()
    assert model.variable_primal_start(x) is None
    model.set_variable_primal_start(x, 2)
    assert model.variable_primal_start(x) == 2.0
    model.set_variable_primal_start(x, None)
    assert model.variable_primal_start(x) is None
    with pytest.raises(IndexingError):
        model.variable_primal_start(VariableIndex(5))


def test_empty() -> None:
    model = Model()
    x = model.add_variable()
    model.add_constraint(SingleVariable(x), ZeroOne())
    model.set_objective(SingleVariable(x), ObjectiveSense.MINIMIZE)
    assert repr(model) == "Model(variables=1, constraints=1)"

    model.empty()

    assert model.is_empty()
    assert model.number_of_variables == 0
    assert model.list_of_constraint_types() == []
    assert model.objective_sense == ObjectiveSense.FEASIBILITY
    assert model.add_variable() == VariableIndex(1)
