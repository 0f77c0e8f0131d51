"""Sets used to constrain scalar functions."""

from __future__ import annotations

import math
from typing import Self, TypeAlias

from pydantic import BaseModel, ConfigDict, model_validator


class _Set(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def _check_not_nan(self) -> Self:
        for name, value in self:
            if math.isnan(value):
                msg = f"The {name} of a {type(self).__name__} set is NaN."
                raise ValueError(msg)
        return self


class LessThan(_Set):
    """The set $(-\\infty, upper]$.

    Attributes:
        upper: The upper bound.
    """

    upper: float

    def __init__(self, upper: float) -> None:
        """Initialize the set."""
        super().__init__(upper=upper)


class GreaterThan(_Set):
    """The set $[lower, \\infty)$.

    Attributes:
        lower: The lower bound.
    """

    lower: float

    def __init__(self, lower: float) -> None:
        """Initialize the set."""
        super().__init__(lower=lower)


class EqualTo(_Set):
    """The set $\\{value\\}$.

    Attributes:
        value: The value.
    """

    value: float

    def __init__(self, value: float) -> None:
        """Initialize the set."""
        super().__init__(value=value)

    @model_validator(mode="after")
    def _check_finite(self) -> Self:
        if not math.isfinite(self.value):
            msg = "The value of an EqualTo set must be finite."
            raise ValueError(msg)
        return self


class Interval(_Set):
    """The set $[lower, upper]$.

    Attributes:
        lower: The lower bound.
        upper: The upper bound.
    """

    lower: float
    upper: float

    def __init__(self, lower: float, upper: float) -> None:
        """Initialize the set."""
        super().__init__(lower=lower, upper=upper)

    @model_validator(mode="after")
    def _check_bounds(self) -> Self:
        if self.lower > self.upper:
            msg = "The lower bound is larger than the upper bound."
            raise ValueError(msg)
        return self


class ZeroOne(_Set):
    """The set $\\{0, 1\\}$, marking a variable as binary."""


class Integer(_Set):
    """The set of integers, marking a variable as integer."""


ScalarSet: TypeAlias = LessThan | GreaterThan | EqualTo | Interval
"""The sets that can be used to constrain any supported scalar function."""

CategorySet: TypeAlias = ZeroOne | Integer
"""The sets that can only be used to constrain single variables."""

SCALAR_SETS: tuple[type[ScalarSet], ...] = (LessThan, GreaterThan, EqualTo, Interval)
"""The scalar sets, in the order used to enumerate constraints."""

CATEGORY_SETS: tuple[type[CategorySet], ...] = (ZeroOne, Integer)
"""The category sets, in the order in which they are applied."""
