"""The structured optimization model.

The model is the inbound side of `optbridge`: variables identified by
[`VariableIndex`][optbridge.model.VariableIndex] values, constraints of the form
function-in-set, an objective, and an optional nonlinear block.
"""

from ._functions import (
    ScalarAffineFunction,
    ScalarAffineTerm,
    ScalarFunction,
    ScalarQuadraticFunction,
    ScalarQuadraticTerm,
    SingleVariable,
    VariableIndex,
)
from ._model import SCALAR_FUNCTIONS, ConstraintIndex, Model
from ._nlp import NLPBlock, NLPBoundsPair
from ._sets import (
    CATEGORY_SETS,
    SCALAR_SETS,
    CategorySet,
    EqualTo,
    GreaterThan,
    Integer,
    Interval,
    LessThan,
    ScalarSet,
    ZeroOne,
)

__all__ = [
    "CATEGORY_SETS",
    "SCALAR_FUNCTIONS",
    "SCALAR_SETS",
    "CategorySet",
    "ConstraintIndex",
    "EqualTo",
    "GreaterThan",
    "Integer",
    "Interval",
    "LessThan",
    "Model",
    "NLPBlock",
    "NLPBoundsPair",
    "ScalarAffineFunction",
    "ScalarAffineTerm",
    "ScalarFunction",
    "ScalarQuadraticFunction",
    "ScalarQuadraticTerm",
    "ScalarSet",
    "SingleVariable",
    "VariableIndex",
    "ZeroOne",
]
