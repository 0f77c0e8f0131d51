"""Extraction of variable bounds and categories from a model."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

import numpy as np

from optbridge.enums import VariableCategory
from optbridge.model import (
    CATEGORY_SETS,
    SCALAR_SETS,
    EqualTo,
    GreaterThan,
    Integer,
    Interval,
    LessThan,
    SingleVariable,
    ZeroOne,
)

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from optbridge.model import CategorySet, Model, ScalarSet

    from ._indexer import VariableIndexer

_LOGGER = logging.getLogger(__name__)

DEFAULT_LOWER_BOUND: Final = -np.inf
"""Lower bound of a variable without a lower bound constraint."""

DEFAULT_UPPER_BOUND: Final = np.inf
"""Upper bound of a variable without an upper bound constraint."""

DEFAULT_CATEGORY: Final = VariableCategory.CONTINUOUS
"""Category of a variable without a category constraint."""


def set_to_bounds(set_: ScalarSet) -> tuple[float, float]:
    """Return the lower and upper bound described by a set.

    Args:
        set_: The set.

    Returns:
        The `(lower, upper)` pair, unbounded sides are infinite.
    """
    match set_:
        case LessThan(upper=upper):
            return DEFAULT_LOWER_BOUND, upper
        case GreaterThan(lower=lower):
            return lower, DEFAULT_UPPER_BOUND
        case EqualTo(value=value):
            return value, value
        case Interval(lower=lower, upper=upper):
            return lower, upper
    msg = f"Unsupported set type: {type(set_).__name__}"
    raise TypeError(msg)


def set_to_category(set_: CategorySet) -> VariableCategory:
    """Return the variable category described by a category set.

    Args:
        set_: The set.

    Returns:
        The variable category.
    """
    match set_:
        case ZeroOne():
            return VariableCategory.BINARY
        case Integer():
            return VariableCategory.INTEGER
    msg = f"Unsupported set type: {type(set_).__name__}"
    raise TypeError(msg)


def extract_variable_bounds(
    model: Model, indexer: VariableIndexer
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Extract the variable bound arrays from the single-variable constraints.

    Bounds default to $-\\infty$ and $+\\infty$. Each constraint only
    updates the sides it bounds, and never loosens a bound set by another
    constraint. A `GreaterThan` and a `LessThan` constraint on the same
    variable therefore combine into both bounds.

    Args:
        model:   The model.
        indexer: The positions of the variables.

    Returns:
        The lower and upper bound arrays, ordered by position.
    """
    lower_bounds = np.full(len(indexer), DEFAULT_LOWER_BOUND, dtype=np.float64)
    upper_bounds = np.full(len(indexer), DEFAULT_UPPER_BOUND, dtype=np.float64)
    for set_type in SCALAR_SETS:
        for index in model.list_of_constraint_indices(SingleVariable, set_type):
            function = model.constraint_function(index)
            assert isinstance(function, SingleVariable)
            inx = indexer[function.variable] - 1
            lower, upper = set_to_bounds(model.constraint_set(index))  # type: ignore[arg-type]
            if lower > DEFAULT_LOWER_BOUND:
                lower_bounds[inx] = max(lower_bounds[inx], lower)
            if upper < DEFAULT_UPPER_BOUND:
                upper_bounds[inx] = min(upper_bounds[inx], upper)
    return lower_bounds, upper_bounds


def extract_variable_categories(
    model: Model, indexer: VariableIndexer
) -> NDArray[np.ubyte]:
    """Extract the variable category array from the category constraints.

    Variables default to the continuous category. `ZeroOne` constraints are
    applied before `Integer` constraints, each in creation order. A variable
    with more than one category constraint receives the last one applied.

    Args:
        model:   The model.
        indexer: The positions of the variables.

    Returns:
        The category array, ordered by position.
    """
    categories = np.full(len(indexer), DEFAULT_CATEGORY, dtype=np.ubyte)
    assigned = np.zeros(len(indexer), dtype=np.bool_)
    for set_type in CATEGORY_SETS:
        for index in model.list_of_constraint_indices(SingleVariable, set_type):
            function = model.constraint_function(index)
            assert isinstance(function, SingleVariable)
            inx = indexer[function.variable] - 1
            category = set_to_category(model.constraint_set(index))  # type: ignore[arg-type]
            if assigned[inx] and categories[inx] != category:
                _LOGGER.debug(
                    "Variable %r has multiple categories, using %s",
                    function.variable,
                    category.name,
                )
            categories[inx] = category
            assigned[inx] = True
    return categories
