"""Nodes of the expression graphs passed to solvers.

An expression graph is an immutable tree of the node types defined here.
Variables are referenced either by their dense 1-based position in the solver
problem ([`Variable`][optbridge.expressions.Variable]) or, in expressions
produced by a nonlinear evaluator, by their model identifier
([`ModelVariable`][optbridge.expressions.ModelVariable]). The latter are
rewritten into positions before a graph is handed to a solver.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, Literal, TypeAlias

if TYPE_CHECKING:
    from optbridge.model import VariableIndex

ComparisonOperator: TypeAlias = Literal["<=", ">=", "=="]

CALL_ARITY: Final[dict[str, int]] = {
    "exp": 1,
    "log": 1,
    "sin": 1,
    "cos": 1,
    "tan": 1,
    "sqrt": 1,
    "abs": 1,
    "neg": 1,
    "pow": 2,
    "div": 2,
}
"""The elementary functions supported by `Call` nodes, with their arities."""


@dataclass(frozen=True, slots=True)
class Constant:
    """A numerical constant."""

    value: float

    def __str__(self) -> str:
        return repr(float(self.value))


@dataclass(frozen=True, slots=True)
class Variable:
    """A reference to the variable at a 1-based position."""

    position: int

    def __str__(self) -> str:
        return f"x[{self.position}]"


@dataclass(frozen=True, slots=True)
class ModelVariable:
    """A reference to a variable by its model identifier."""

    index: VariableIndex

    def __str__(self) -> str:
        return f"x[{self.index!r}]"


@dataclass(frozen=True, slots=True)
class Sum:
    """The sum of the child expressions."""

    children: tuple[ExpressionNode, ...]

    def __str__(self) -> str:
        return "(" + " + ".join(str(child) for child in self.children) + ")"


@dataclass(frozen=True, slots=True)
class Product:
    """The product of the child expressions."""

    children: tuple[ExpressionNode, ...]

    def __str__(self) -> str:
        return " * ".join(str(child) for child in self.children)


@dataclass(frozen=True, slots=True)
class Call:
    """An elementary function applied to its arguments.

    Only the functions listed in `CALL_ARITY` are allowed.
    """

    name: str
    args: tuple[ExpressionNode, ...]

    def __post_init__(self) -> None:
        arity = CALL_ARITY.get(self.name)
        if arity is None:
            msg = f"Unsupported function: {self.name}"
            raise ValueError(msg)
        if len(self.args) != arity:
            msg = f"Function {self.name} expects {arity} argument(s), got {len(self.args)}"
            raise ValueError(msg)

    def __str__(self) -> str:
        return f"{self.name}(" + ", ".join(str(arg) for arg in self.args) + ")"


@dataclass(frozen=True, slots=True)
class Comparison:
    """The comparison `lhs <operator> rhs`."""

    operator: ComparisonOperator
    lhs: ExpressionNode
    rhs: ExpressionNode

    def __str__(self) -> str:
        return f"{self.lhs} {self.operator} {self.rhs}"


@dataclass(frozen=True, slots=True)
class IntervalComparison:
    """The chained comparison `lower <= expression <= upper`."""

    lower: float
    expression: ExpressionNode
    upper: float

    def __str__(self) -> str:
        return f"{float(self.lower)!r} <= {self.expression} <= {float(self.upper)!r}"


ExpressionNode: TypeAlias = (
    Constant
    | Variable
    | ModelVariable
    | Sum
    | Product
    | Call
    | Comparison
    | IntervalComparison
)
"""Any node of an expression graph."""
