"""Expression graphs over indexed variables.

This module defines the immutable node types of expression graphs, the
conversion of model functions and sets into comparison expressions, and the
traversals used to remap, inspect and evaluate graphs.
"""

from ._builder import (
    build_comparison,
    function_to_expression,
    is_trivial,
    set_to_comparison,
)
from ._nodes import (
    CALL_ARITY,
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
from ._visitor import (
    CompiledExpression,
    comparison_body,
    compile_expression,
    evaluate,
    remap_variables,
    transform_leaves,
)

__all__ = [
    "CALL_ARITY",
    "Call",
    "Comparison",
    "CompiledExpression",
    "Constant",
    "ExpressionNode",
    "IntervalComparison",
    "ModelVariable",
    "Product",
    "Sum",
    "Variable",
    "build_comparison",
    "comparison_body",
    "compile_expression",
    "evaluate",
    "function_to_expression",
    "is_trivial",
    "remap_variables",
    "set_to_comparison",
]
