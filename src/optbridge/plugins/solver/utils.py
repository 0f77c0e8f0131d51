"""Utility functions for use by solver plugins.

This module provides a check of the problem features against those supported
by a method, the normalization of two-sided constraint bounds, and a
feasibility measure for returned points.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from .base import SolverProblem

_MESSAGES = {
    "bounds": "bound constraints",
    "eq": "equality constraints",
    "ineq": "inequality constraints",
    "discrete": "integer or binary variables",
}

_EQ_TOLERANCE = 1e-15


def validate_supported_features(
    problem: SolverProblem,
    method: str,
    supported_features: dict[str, set[str]],
    required_features: dict[str, set[str]],
) -> None:
    """Validate if the features of a problem are supported by a method.

    Features are identified by the keys `"bounds"`, `"eq"`, `"ineq"` and
    `"discrete"`. The dictionaries map each feature to the set of methods
    that support, or require, it:

    ```python
    {
        "bounds": {"slsqp", "trust-constr"},
        "eq": {"slsqp", "trust-constr"},
        "ineq": {"slsqp", "trust-constr", "cobyla"},
    }
    ```

    Args:
        problem:            The problem to check.
        method:             The name of the method.
        supported_features: Maps features to the methods that support them.
        required_features:  Maps features to the methods that require them.

    Raises:
        NotImplementedError: If a feature of the problem is not supported by
                             the method, or if a required feature is missing.
    """
    is_eq = np.abs(
        problem.constraint_upper_bounds - problem.constraint_lower_bounds
    ) < _EQ_TOLERANCE
    have = {
        "bounds": bool(
            np.isfinite(problem.variable_lower_bounds).any()
            or np.isfinite(problem.variable_upper_bounds).any()
        ),
        "eq": bool(is_eq.any()),
        "ineq": bool((~is_eq).any()),
        "discrete": problem.has_discrete_variables,
    }
    for feature, have_feature in have.items():
        _check_feature(
            feature,
            method,
            supported_features,
            required_features,
            have_feature=have_feature,
        )


def _check_feature(
    feature: str,
    method: str,
    supported_features: dict[str, set[str]],
    required_features: dict[str, set[str]],
    *,
    have_feature: bool,
) -> None:
    supported = {algo.lower() for algo in supported_features.get(feature, set())}
    required = {algo.lower() for algo in required_features.get(feature, set())}
    msg = _MESSAGES[feature]
    if have_feature and method.lower() not in supported:
        msg = f"solver {method} does not support {msg}"
        raise NotImplementedError(msg)
    if not have_feature and method.lower() in required:
        msg = f"solver {method} requires {msg}"
        raise NotImplementedError(msg)


class NormalizedConstraints:
    """Class for handling normalized constraints.

    Constraints with lower and upper bounds are normalized into the form
    `C(x) = 0` or `C(x) >= 0`. If the lower and upper bound of a constraint
    are equal, within a 1e-15 tolerance, it is an equality constraint, and the
    bound is subtracted. Otherwise each finite bound yields an inequality
    constraint: `c(x) - lower >= 0` for the lower bound, and `upper - c(x) >= 0`
    for the upper bound. A two-sided constraint is thereby split into two
    normalized constraints, and a constraint without finite bounds is dropped.

    **Usage:**

    1. Initialize with the lower and upper bounds.
    2. Call `normalize` with the raw constraint values at a point, to obtain
       the normalized values.
    3. Use the `is_eq` property to find which normalized constraints are
       equality constraints, and `indices` to find the raw constraint each
       one derives from.
    """

    def __init__(
        self,
        lower_bounds: NDArray[np.float64],
        upper_bounds: NDArray[np.float64],
    ) -> None:
        """Initialize the normalization class.

        Args:
            lower_bounds: The lower bounds on the right hand sides.
            upper_bounds: The upper bounds on the right hand sides.
        """
        self._is_eq: list[bool] = []
        self._indices: list[int] = []
        self._rhs: list[float] = []
        self._flip: list[bool] = []

        for idx, (lower_bound, upper_bound) in enumerate(
            zip(lower_bounds, upper_bounds, strict=True)
        ):
            if abs(upper_bound - lower_bound) < _EQ_TOLERANCE:
                self._add(idx, float(lower_bound), is_eq=True, flip=False)
            else:
                if np.isfinite(lower_bound):
                    self._add(idx, float(lower_bound), is_eq=False, flip=False)
                if np.isfinite(upper_bound):
                    self._add(idx, float(upper_bound), is_eq=False, flip=True)

    def _add(self, idx: int, rhs: float, *, is_eq: bool, flip: bool) -> None:
        self._is_eq.append(is_eq)
        self._indices.append(idx)
        self._rhs.append(rhs)
        self._flip.append(flip)

    def __len__(self) -> int:
        """Return the number of normalized constraints."""
        return len(self._is_eq)

    @property
    def is_eq(self) -> list[bool]:
        """Return flags indicating which constraints are equality constraints.

        Returns:
            A list of booleans, `True` for equality constraints.
        """
        return self._is_eq

    @property
    def indices(self) -> list[int]:
        """Return the index of the raw constraint of each normalized constraint.

        Returns:
            A list of 0-based indices into the raw constraints.
        """
        return self._indices

    def normalize(self, values: NDArray[np.float64]) -> NDArray[np.float64]:
        """Calculate normalized constraint values.

        Args:
            values: The raw constraint values.

        Returns:
            The normalized constraint values.
        """
        normalized = values[self._indices] - np.asarray(self._rhs, dtype=np.float64)
        return np.where(self._flip, -normalized, normalized)


def constraint_violation(
    values: NDArray[np.float64],
    lower_bounds: NDArray[np.float64],
    upper_bounds: NDArray[np.float64],
) -> float:
    """Return the largest violation of a set of bounds.

    Args:
        values:       The values to check.
        lower_bounds: The lower bounds.
        upper_bounds: The upper bounds.

    Returns:
        The largest distance of a value outside its bounds, zero if all
        values are within bounds.
    """
    if values.size == 0:
        return 0.0
    below = np.where(np.isfinite(lower_bounds), lower_bounds - values, 0.0)
    above = np.where(np.isfinite(upper_bounds), values - upper_bounds, 0.0)
    return float(max(np.max(below), np.max(above), 0.0))
