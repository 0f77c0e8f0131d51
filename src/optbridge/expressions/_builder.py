"""Conversion of model functions and sets into expression graphs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from optbridge.model import (
    EqualTo,
    GreaterThan,
    Interval,
    LessThan,
    ScalarAffineFunction,
    ScalarQuadraticFunction,
    SingleVariable,
)

from ._nodes import (
    Comparison,
    Constant,
    ExpressionNode,
    IntervalComparison,
    Product,
    Sum,
    Variable,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from optbridge.model import ScalarAffineTerm, ScalarFunction, ScalarSet, VariableIndex


def function_to_expression(
    function: ScalarFunction, position_map: Mapping[VariableIndex, int]
) -> ExpressionNode:
    """Convert a scalar function into an expression graph.

    A single variable becomes a bare variable reference. Affine functions
    become a sum of the constant and a product per term. Quadratic functions
    add a product per quadratic term, where the coefficient of a diagonal term
    is halved, since quadratic functions are defined as $\\frac{1}{2} x^T Q
    x$.

    Terms are emitted in the order in which they are stored in the function,
    so equal inputs always produce equal graphs.

    Args:
        function:     The function to convert.
        position_map: Maps model variables to their 1-based positions.

    Returns:
        The expression graph of the function.
    """
    match function:
        case SingleVariable(variable=variable):
            return Variable(position_map[variable])
        case ScalarAffineFunction(terms=terms, constant=constant):
            return Sum(
                (Constant(constant), *_affine_products(terms, position_map))
            )
        case ScalarQuadraticFunction(
            affine_terms=affine_terms,
            quadratic_terms=quadratic_terms,
            constant=constant,
        ):
            quadratic_products = []
            for term in quadratic_terms:
                position_1 = position_map[term.variable_1]
                position_2 = position_map[term.variable_2]
                coefficient = term.coefficient
                if position_1 == position_2:
                    coefficient *= 0.5
                quadratic_products.append(
                    Product(
                        (
                            Constant(coefficient),
                            Variable(position_1),
                            Variable(position_2),
                        )
                    )
                )
            return Sum(
                (
                    Constant(constant),
                    *_affine_products(affine_terms, position_map),
                    *quadratic_products,
                )
            )
    msg = f"Unsupported function type: {type(function).__name__}"
    raise TypeError(msg)


def _affine_products(
    terms: tuple[ScalarAffineTerm, ...], position_map: Mapping[VariableIndex, int]
) -> list[Product]:
    return [
        Product((Constant(term.coefficient), Variable(position_map[term.variable])))
        for term in terms
    ]


def set_to_comparison(expression: ExpressionNode, set_: ScalarSet) -> ExpressionNode:
    """Combine an expression with a set into a comparison.

    Interval sets produce a single chained comparison, not two separate ones.

    Args:
        expression: The expression graph of the function.
        set_:       The set.

    Returns:
        The comparison expression.
    """
    match set_:
        case LessThan(upper=upper):
            return Comparison("<=", expression, Constant(upper))
        case GreaterThan(lower=lower):
            return Comparison(">=", expression, Constant(lower))
        case EqualTo(value=value):
            return Comparison("==", expression, Constant(value))
        case Interval(lower=lower, upper=upper):
            return IntervalComparison(lower, expression, upper)
    msg = f"Unsupported set type: {type(set_).__name__}"
    raise TypeError(msg)


def build_comparison(
    function: ScalarFunction,
    set_: ScalarSet,
    position_map: Mapping[VariableIndex, int],
) -> ExpressionNode:
    """Convert a function-in-set constraint into a comparison expression.

    Args:
        function:     The constraint function.
        set_:         The constraint set.
        position_map: Maps model variables to their 1-based positions.

    Returns:
        The comparison expression.
    """
    return set_to_comparison(function_to_expression(function, position_map), set_)


def is_trivial(expression: ExpressionNode) -> bool:
    """Check if an expression is the empty sum with a zero constant.

    This is the expression built from an affine or quadratic function without
    terms and a zero constant, used to detect an absent objective.

    Args:
        expression: The expression to check.

    Returns:
        `True` if the expression is trivial.
    """
    match expression:
        case Sum(children=(Constant(value=value),)):
            return value == 0.0
    return False
