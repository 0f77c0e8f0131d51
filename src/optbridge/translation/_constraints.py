"""Collection of the algebraic constraints of a model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from optbridge.config.utils import immutable_array
from optbridge.expressions import build_comparison
from optbridge.model import SCALAR_FUNCTIONS, SCALAR_SETS

from ._bounds import set_to_bounds

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from optbridge.expressions import ExpressionNode
    from optbridge.model import ConstraintIndex, Model

    from ._indexer import VariableIndexer


@dataclass(frozen=True, slots=True)
class ScalarConstraints:
    """The algebraic constraints of a model, in enumeration order.

    Constraints are enumerated by function type (affine before quadratic),
    then by set type (`LessThan`, `GreaterThan`, `EqualTo`, `Interval`), then
    in creation order.

    Attributes:
        indices:      The constraint identifiers.
        expressions:  The comparison expression of each constraint.
        lower_bounds: The lower bound of each constraint.
        upper_bounds: The upper bound of each constraint.
    """

    indices: tuple[ConstraintIndex, ...]
    expressions: tuple[ExpressionNode, ...]
    lower_bounds: NDArray[np.float64]
    upper_bounds: NDArray[np.float64]

    def __len__(self) -> int:
        """Return the number of constraints."""
        return len(self.indices)


def collect_scalar_constraints(
    model: Model, indexer: VariableIndexer
) -> ScalarConstraints:
    """Build the expressions and bounds of the algebraic constraints.

    Args:
        model:   The model.
        indexer: The positions of the variables.

    Returns:
        The collected constraints.
    """
    indices = []
    expressions = []
    lower_bounds = []
    upper_bounds = []
    for function_type in SCALAR_FUNCTIONS:
        for set_type in SCALAR_SETS:
            for index in model.list_of_constraint_indices(function_type, set_type):
                function = model.constraint_function(index)
                set_ = model.constraint_set(index)
                indices.append(index)
                expressions.append(build_comparison(function, set_, indexer))  # type: ignore[arg-type]
                lower, upper = set_to_bounds(set_)  # type: ignore[arg-type]
                lower_bounds.append(lower)
                upper_bounds.append(upper)
    return ScalarConstraints(
        indices=tuple(indices),
        expressions=tuple(expressions),
        lower_bounds=immutable_array(lower_bounds, dtype=np.float64),
        upper_bounds=immutable_array(upper_bounds, dtype=np.float64),
    )
