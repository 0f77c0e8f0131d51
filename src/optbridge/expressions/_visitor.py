"""Traversal of expression graphs."""

from __future__ import annotations

import math
import operator
from functools import reduce
from typing import TYPE_CHECKING, Callable, Final

import numpy as np

from ._nodes import (
    Call,
    Comparison,
    Constant,
    ExpressionNode,
    IntervalComparison,
    ModelVariable,
    Product,
    Sum,
    Variable,
)

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from optbridge.model import VariableIndex

CompiledExpression = Callable[["NDArray[np.float64]"], float]

_CALLS: Final[dict[str, Callable[..., float]]] = {
    "exp": np.exp,
    "log": np.log,
    "sin": np.sin,
    "cos": np.cos,
    "tan": np.tan,
    "sqrt": np.sqrt,
    "abs": np.abs,
    "neg": operator.neg,
    "pow": np.power,
    "div": np.divide,
}


def transform_leaves(
    node: ExpressionNode, leaf: Callable[[ExpressionNode], ExpressionNode]
) -> ExpressionNode:
    """Rebuild an expression graph, replacing its leaves.

    The `leaf` callable is applied to every constant and variable node, the
    interior nodes are rebuilt around the results. The input graph is not
    modified.

    Args:
        node: The root of the graph.
        leaf: Called on each leaf, returns the replacement leaf.

    Returns:
        The root of the new graph.
    """
    match node:
        case Sum(children=children):
            return Sum(tuple(transform_leaves(child, leaf) for child in children))
        case Product(children=children):
            return Product(tuple(transform_leaves(child, leaf) for child in children))
        case Call(name=name, args=args):
            return Call(name, tuple(transform_leaves(arg, leaf) for arg in args))
        case Comparison(operator=op, lhs=lhs, rhs=rhs):
            return Comparison(
                op, transform_leaves(lhs, leaf), transform_leaves(rhs, leaf)
            )
        case IntervalComparison(lower=lower, expression=expression, upper=upper):
            return IntervalComparison(
                lower, transform_leaves(expression, leaf), upper
            )
    return leaf(node)


def remap_variables(
    node: ExpressionNode, position_map: Callable[[VariableIndex], int]
) -> ExpressionNode:
    """Replace model variable references by position references.

    Every [`ModelVariable`][optbridge.expressions.ModelVariable] leaf in the
    graph is replaced by a [`Variable`][optbridge.expressions.Variable] at the
    position given by `position_map`.

    Args:
        node:         The root of the graph.
        position_map: Returns the 1-based position of a model variable.

    Returns:
        The root of the remapped graph.
    """

    def _leaf(leaf: ExpressionNode) -> ExpressionNode:
        if isinstance(leaf, ModelVariable):
            return Variable(position_map(leaf.index))
        return leaf

    return transform_leaves(node, _leaf)


def comparison_body(node: ExpressionNode) -> ExpressionNode:
    """Return the constrained expression of a comparison.

    For `lhs <op> rhs` comparisons with a constant `rhs` this is `lhs`, the
    constant being the bound. A non-constant `rhs` is moved to the left,
    giving `lhs - rhs`. For chained comparisons this is the middle
    expression. Other expressions are returned unchanged.

    Args:
        node: The comparison.

    Returns:
        The constrained expression.
    """
    match node:
        case Comparison(lhs=lhs, rhs=Constant()):
            return lhs
        case Comparison(lhs=lhs, rhs=rhs):
            return Sum((lhs, Product((Constant(-1.0), rhs))))
        case IntervalComparison(expression=expression):
            return expression
    return node


def compile_expression(node: ExpressionNode) -> CompiledExpression:
    """Compile an expression graph into a function of the variable vector.

    The graph is traversed once, the returned callable evaluates it without
    further traversal. Positions are 1-based, so `Variable(i)` reads `x[i-1]`.
    A comparison compiles into its constrained expression.

    Args:
        node: The root of the graph.

    Returns:
        A callable mapping a 1D variable vector to the value of the expression.

    Raises:
        TypeError: If the graph still contains model variable references.
    """
    match node:
        case Constant(value=value):
            return lambda _: value
        case Variable(position=position):
            inx = position - 1
            return lambda x: x[inx]
        case ModelVariable():
            msg = "Cannot compile an expression with model variable references"
            raise TypeError(msg)
        case Sum(children=children):
            terms = [compile_expression(child) for child in children]
            return lambda x: math.fsum(term(x) for term in terms)
        case Product(children=children):
            factors = [compile_expression(child) for child in children]
            return lambda x: reduce(operator.mul, (factor(x) for factor in factors), 1.0)
        case Call(name=name, args=args):
            function = _CALLS[name]
            arguments = [compile_expression(arg) for arg in args]
            return lambda x: function(*(argument(x) for argument in arguments))
        case Comparison() | IntervalComparison():
            return compile_expression(comparison_body(node))
    msg = f"Unsupported expression node: {type(node).__name__}"
    raise TypeError(msg)


def evaluate(node: ExpressionNode, variables: NDArray[np.float64]) -> float:
    """Evaluate an expression graph at a variable vector.

    Args:
        node:      The root of the graph.
        variables: The variable values, ordered by position.

    Returns:
        The value of the expression.
    """
    return float(compile_expression(node)(variables))
