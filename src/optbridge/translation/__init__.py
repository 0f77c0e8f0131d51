"""Translation of a structured model into positional solver input.

- [`VariableIndexer`][optbridge.translation.VariableIndexer] assigns dense
  1-based positions to the variables of a model.
- [`extract_variable_bounds`][optbridge.translation.extract_variable_bounds] and
  [`extract_variable_categories`][optbridge.translation.extract_variable_categories]
  scan the single-variable constraints.
- [`collect_scalar_constraints`][optbridge.translation.collect_scalar_constraints]
  builds the expressions and bounds of the affine and quadratic constraints.
"""

from ._bounds import (
    DEFAULT_CATEGORY,
    DEFAULT_LOWER_BOUND,
    DEFAULT_UPPER_BOUND,
    extract_variable_bounds,
    extract_variable_categories,
    set_to_bounds,
    set_to_category,
)
from ._constraints import ScalarConstraints, collect_scalar_constraints
from ._indexer import VariableIndexer

__all__ = [
    "DEFAULT_CATEGORY",
    "DEFAULT_LOWER_BOUND",
    "DEFAULT_UPPER_BOUND",
    "ScalarConstraints",
    "VariableIndexer",
    "collect_scalar_constraints",
    "extract_variable_bounds",
    "extract_variable_categories",
    "set_to_bounds",
    "set_to_category",
]
