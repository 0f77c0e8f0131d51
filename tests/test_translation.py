import logging

import numpy as np
import pytest

from optbridge.enums import VariableCategory
from optbridge.exceptions import IndexingError
from optbridge.expressions import Comparison, IntervalComparison
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
from optbridge.translation import (
    VariableIndexer,
    collect_scalar_constraints,
    extract_variable_bounds,
    extract_variable_categories,
    set_to_bounds,
)


@pytest.fixture(name="model")
def model_fixture() -> Model:
    model = Model()
    model.add_variables(3)
    return model


def test_indexer_is_a_bijection(model: Model) -> None:
    model.delete_variable(model.list_of_variable_indices()[1])
    model.add_variable()
    variables = model.list_of_variable_indices()
    indexer = VariableIndexer(variables)
    assert len(indexer) == len(variables)
    assert sorted(indexer.values()) == list(range(1, len(variables) + 1))
    assert list(indexer) == variables
    for position, variable in enumerate(variables, start=1):
        assert indexer[variable] == position
        assert indexer.position(variable) == position
        assert indexer.variable(position) == variable


def test_indexer_errors() -> None:
    indexer = VariableIndexer([VariableIndex(3), VariableIndex(1)])
    assert indexer.variables == (VariableIndex(3), VariableIndex(1))
    assert VariableIndex(2) not in indexer
    with pytest.raises(IndexingError, match="Invalid index"):
        _ = indexer[VariableIndex(2)]
    with pytest.raises(IndexingError):
        indexer.variable(3)
    with pytest.raises(ValueError, match="Duplicate"):
        VariableIndexer([VariableIndex(1), VariableIndex(1)])


@pytest.mark.parametrize(
    ("set_", "expected"),
    [
        (LessThan(1.0), (-np.inf, 1.0)),
        (GreaterThan(2.0), (2.0, np.inf)),
        (EqualTo(3.0), (3.0, 3.0)),
        (Interval(-1.0, 4.0), (-1.0, 4.0)),
    ],
)
def test_set_to_bounds(set_: LessThan, expected: tuple[float, float]) -> None:
    assert set_to_bounds(set_) == expected


def test_default_bounds(model: Model) -> None:
    indexer = VariableIndexer(model.list_of_variable_indices())
    lower, upper = extract_variable_bounds(model, indexer)
    assert np.all(lower == -np.inf)
    assert np.all(upper == np.inf)


def test_bounds_combine(model: Model) -> None:
    x, y, z = model.list_of_variable_indices()
    model.add_constraint(SingleVariable(x), LessThan(5.0))
    model.add_constraint(SingleVariable(x), GreaterThan(2.0))
    model.add_constraint(SingleVariable(y), EqualTo(1.5))
    model.add_constraint(SingleVariable(z), Interval(-1.0, 1.0))
    indexer = VariableIndexer(model.list_of_variable_indices())
    lower, upper = extract_variable_bounds(model, indexer)
    assert np.array_equal(lower, [2.0, 1.5, -1.0])
    assert np.array_equal(upper, [5.0, 1.5, 1.0])


def test_bounds_are_never_loosened(model: Model) -> None:
    x, y, _ = model.list_of_variable_indices()
    model.add_constraint(SingleVariable(x), LessThan(5.0))
    model.add_constraint(SingleVariable(x), LessThan(7.0))
    model.add_constraint(SingleVariable(x), Interval(-3.0, 6.0))
    model.add_constraint(SingleVariable(y), GreaterThan(1.0))
    model.add_constraint(SingleVariable(y), Interval(0.0, 2.0))
    indexer = VariableIndexer(model.list_of_variable_indices())
    lower, upper = extract_variable_bounds(model, indexer)
    assert np.array_equal(lower, [-3.0, 1.0, -np.inf])
    assert np.array_equal(upper, [5.0, 2.0, np.inf])


def test_categories(model: Model) -> None:
    x, _, z = model.list_of_variable_indices()
    model.add_constraint(SingleVariable(z), Integer())
    model.add_constraint(SingleVariable(x), ZeroOne())
    indexer = VariableIndexer(model.list_of_variable_indices())
    categories = extract_variable_categories(model, indexer)
    assert categories.dtype == np.ubyte
    assert list(categories) == [
        VariableCategory.BINARY,
        VariableCategory.CONTINUOUS,
        VariableCategory.INTEGER,
    ]


def test_conflicting_categories(
    model: Model, caplog: pytest.LogCaptureFixture
) -> None:
    x, _, _ = model.list_of_variable_indices()
    model.add_constraint(SingleVariable(x), Integer())
    model.add_constraint(SingleVariable(x), ZeroOne())
    indexer = VariableIndexer(model.list_of_variable_indices())
    with caplog.at_level(logging.DEBUG, logger="optbridge"):
        categories = extract_variable_categories(model, indexer)
    # Integer constraints are applied after the binary ones:
    assert categories[0] == VariableCategory.INTEGER
    assert "multiple categories" in caplog.text


def test_constraint_enumeration_order(model: Model) -> None:
    x, y, _ = model.list_of_variable_indices()
    affine = ScalarAffineFunction((ScalarAffineTerm(1.0, x),))
    quadratic = ScalarQuadraticFunction(
        quadratic_terms=(ScalarQuadraticTerm(2.0, y, y),)
    )
    created = [
        model.add_constraint(quadratic, LessThan(1.0)),
        model.add_constraint(affine, Interval(0.0, 1.0)),
        model.add_constraint(affine, GreaterThan(-1.0)),
        model.add_constraint(quadratic, EqualTo(0.5)),
        model.add_constraint(affine, LessThan(2.0)),
        model.add_constraint(affine, EqualTo(0.0)),
        model.add_constraint(affine, LessThan(3.0)),
        model.add_constraint(SingleVariable(x), LessThan(3.0)),
    ]
    indexer = VariableIndexer(model.list_of_variable_indices())
    constraints = collect_scalar_constraints(model, indexer)

    assert len(constraints) == 7
    assert constraints.indices == (
        created[4],
        created[6],
        created[2],
        created[5],
        created[1],
        created[0],
        created[3],
    )
    assert np.array_equal(
        constraints.lower_bounds, [-np.inf, -np.inf, -1.0, 0.0, 0.0, -np.inf, 0.5]
    )
    assert np.array_equal(
        constraints.upper_bounds, [2.0, 3.0, np.inf, 0.0, 1.0, 1.0, 0.5]
    )
    assert isinstance(constraints.expressions[0], Comparison)
    assert constraints.expressions[0].operator == "<="
    assert isinstance(constraints.expressions[4], IntervalComparison)
    assert not constraints.lower_bounds.flags.writeable


def test_no_constraints(model: Model) -> None:
    indexer = VariableIndexer(model.list_of_variable_indices())
    constraints = collect_scalar_constraints(model, indexer)
    assert len(constraints) == 0
    assert constraints.lower_bounds.shape == (0,)
