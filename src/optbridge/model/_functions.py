"""Variable identifiers and scalar functions of the structured model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias


@dataclass(frozen=True, slots=True, order=True)
class VariableIndex:
    """Opaque, stable identifier of a variable in a model.

    Identifiers are issued by [`Model.add_variable`][optbridge.model.Model.add_variable]
    and are never reused by the same model, unless it is emptied.

    Attributes:
        value: The integer identifier.
    """

    value: int


@dataclass(frozen=True, slots=True)
class SingleVariable:
    """A function consisting of a single variable.

    Attributes:
        variable: The variable.
    """

    variable: VariableIndex

    def variables(self) -> tuple[VariableIndex, ...]:
        """Return the variables referenced by the function."""
        return (self.variable,)


@dataclass(frozen=True, slots=True)
class ScalarAffineTerm:
    """The term `coefficient * variable` of an affine function.

    Attributes:
        coefficient: The coefficient.
        variable:    The variable.
    """

    coefficient: float
    variable: VariableIndex


@dataclass(frozen=True, slots=True)
class ScalarAffineFunction:
    """The function `constant + sum(term.coefficient * term.variable)`.

    Attributes:
        terms:    The affine terms, in order.
        constant: The constant term.
    """

    terms: tuple[ScalarAffineTerm, ...] = ()
    constant: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "terms", tuple(self.terms))

    def variables(self) -> tuple[VariableIndex, ...]:
        """Return the variables referenced by the function."""
        return tuple(term.variable for term in self.terms)


@dataclass(frozen=True, slots=True)
class ScalarQuadraticTerm:
    """A quadratic term of a quadratic function.

    The quadratic part of a function is interpreted as $\\frac{1}{2} x^T Q x$:
    a term on the diagonal (`variable_1 == variable_2`) with coefficient $c$
    contributes $\\frac{1}{2} c x_i^2$, an off-diagonal term contributes $c x_i
    x_j$.

    Attributes:
        coefficient: The coefficient.
        variable_1:  The first variable.
        variable_2:  The second variable.
    """

    coefficient: float
    variable_1: VariableIndex
    variable_2: VariableIndex


@dataclass(frozen=True, slots=True)
class ScalarQuadraticFunction:
    """An affine function plus a sum of quadratic terms.

    Attributes:
        affine_terms:    The affine terms.
        quadratic_terms: The quadratic terms.
        constant:        The constant term.
    """

    affine_terms: tuple[ScalarAffineTerm, ...] = ()
    quadratic_terms: tuple[ScalarQuadraticTerm, ...] = field(default=())
    constant: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "affine_terms", tuple(self.affine_terms))
        object.__setattr__(self, "quadratic_terms", tuple(self.quadratic_terms))

    def variables(self) -> tuple[VariableIndex, ...]:
        """Return the variables referenced by the function."""
        return tuple(term.variable for term in self.affine_terms) + tuple(
            variable
            for term in self.quadratic_terms
            for variable in (term.variable_1, term.variable_2)
        )


ScalarFunction: TypeAlias = (
    SingleVariable | ScalarAffineFunction | ScalarQuadraticFunction
)
"""The scalar function types supported by the model."""
