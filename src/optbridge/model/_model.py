"""Storage of the structured optimization model."""

from __future__ import annotations

from dataclasses import dataclass, replace
from itertools import chain
from typing import TYPE_CHECKING, Final

from optbridge.enums import ObjectiveSense
from optbridge.exceptions import IndexingError, UnsupportedConstraintError

from ._functions import (
    ScalarAffineFunction,
    ScalarQuadraticFunction,
    SingleVariable,
    VariableIndex,
)
from ._sets import CATEGORY_SETS, SCALAR_SETS

if TYPE_CHECKING:
    from ._functions import ScalarFunction
    from ._nlp import NLPBlock
    from ._sets import CategorySet, ScalarSet

SCALAR_FUNCTIONS: Final[tuple[type, ...]] = (
    ScalarAffineFunction,
    ScalarQuadraticFunction,
)
"""The function types of algebraic constraints, in enumeration order."""

_SUPPORTED_CONSTRAINTS: Final[tuple[tuple[type, type], ...]] = tuple(
    chain(
        ((SingleVariable, set_type) for set_type in SCALAR_SETS + CATEGORY_SETS),
        (
            (function_type, set_type)
            for function_type in SCALAR_FUNCTIONS
            for set_type in SCALAR_SETS
        ),
    )
)


@dataclass(frozen=True, slots=True)
class ConstraintIndex:
    """Opaque, stable identifier of a constraint in a model.

    Attributes:
        value:         The integer identifier.
        function_type: The type of the constraint function.
        set_type:      The type of the constraint set.
    """

    value: int
    function_type: type
    set_type: type


class Model:
    """A structured optimization model.

    The model stores variables, constraints of the form function-in-set, an
    objective function and sense, the start values of the variables, and an
    optional nonlinear block.

    Variables and constraints are identified by opaque indices, which are
    issued in creation order and never reused, until the model is emptied.
    Constraints are grouped by the type of their function and set, and within
    a group they are enumerated in creation order.

    Every operation that edits the model calls the `_modified` method, which
    subclasses override to invalidate derived state.
    """

    def __init__(self) -> None:
        """Initialize an empty model."""
        self._variables: dict[VariableIndex, None] = {}
        self._constraints: dict[
            tuple[type, type],
            dict[ConstraintIndex, tuple[ScalarFunction, ScalarSet | CategorySet]],
        ] = {key: {} for key in _SUPPORTED_CONSTRAINTS}
        self._next_variable = 0
        self._next_constraint = 0
        self._objective_function: ScalarFunction = ScalarAffineFunction()
        self._objective_sense = ObjectiveSense.FEASIBILITY
        self._primal_start: dict[VariableIndex, float] = {}
        self._nlp_block: NLPBlock | None = None

    def __repr__(self) -> str:
        """Return a short description of the model."""
        return (
            f"{self.__class__.__name__}("
            f"variables={self.number_of_variables}, "
            f"constraints={sum(len(group) for group in self._constraints.values())})"
        )

    def _modified(self) -> None:
        """Called after every edit of the model."""

    def empty(self) -> None:
        """Remove all variables, constraints, the objective, and the NLP block."""
        for group in self._constraints.values():
            group.clear()
        self._variables.clear()
        self._next_variable = 0
        self._next_constraint = 0
        self._objective_function = ScalarAffineFunction()
        self._objective_sense = ObjectiveSense.FEASIBILITY
        self._primal_start.clear()
        self._nlp_block = None
        self._modified()

    def is_empty(self) -> bool:
        """Check if the model has no variables, constraints, or objective."""
        return (
            not self._variables
            and not any(self._constraints.values())
            and self._objective_sense == ObjectiveSense.FEASIBILITY
            and self._nlp_block is None
        )

    # Variables:

    def add_variable(self) -> VariableIndex:
        """Add a variable to the model.

        Returns:
            The identifier of the new variable.
        """
        self._next_variable += 1
        variable = VariableIndex(self._next_variable)
        self._variables[variable] = None
        self._modified()
        return variable

    def add_variables(self, count: int) -> list[VariableIndex]:
        """Add several variables to the model.

        Args:
            count: The number of variables to add.

        Returns:
            The identifiers of the new variables.
        """
        return [self.add_variable() for _ in range(count)]

    def delete_variable(self, variable: VariableIndex) -> None:
        """Delete a variable from the model.

        Single-variable constraints on the variable are deleted, and terms
        referencing the variable are removed from the other constraint
        functions and from the objective.

        Args:
            variable: The variable to delete.
        """
        self._check_variable(variable)
        for (function_type, _), group in self._constraints.items():
            for index, (function, set_) in list(group.items()):
                if function_type is SingleVariable:
                    assert isinstance(function, SingleVariable)
                    if function.variable == variable:
                        del group[index]
                else:
                    group[index] = (_remove_variable(function, variable), set_)
        if (
            isinstance(self._objective_function, SingleVariable)
            and self._objective_function.variable == variable
        ):
            self._objective_function = ScalarAffineFunction()
        else:
            self._objective_function = _remove_variable(
                self._objective_function, variable
            )
        del self._variables[variable]
        self._primal_start.pop(variable, None)
        self._modified()

    def is_valid(self, index: VariableIndex | ConstraintIndex) -> bool:
        """Check if a variable or constraint identifier is valid in this model.

        Args:
            index: The identifier to check.

        Returns:
            `True` if the identifier refers to an existing entity.
        """
        if isinstance(index, VariableIndex):
            return index in self._variables
        group = self._constraints.get((index.function_type, index.set_type))
        return group is not None and index in group

    @property
    def number_of_variables(self) -> int:
        """The number of variables in the model."""
        return len(self._variables)

    def list_of_variable_indices(self) -> list[VariableIndex]:
        """Return the variables in creation order."""
        return list(self._variables)

    def _check_variable(self, variable: VariableIndex) -> None:
        if variable not in self._variables:
            raise IndexingError(variable)

    # Constraints:

    @staticmethod
    def supports_constraint(function_type: type, set_type: type) -> bool:
        """Check if a function-in-set constraint type is supported.

        Args:
            function_type: The type of the function.
            set_type:      The type of the set.

        Returns:
            `True` if constraints of this type can be added.
        """
        return (function_type, set_type) in _SUPPORTED_CONSTRAINTS

    def add_constraint(
        self, function: ScalarFunction, set_: ScalarSet | CategorySet
    ) -> ConstraintIndex:
        """Add a function-in-set constraint.

        Args:
            function: The constraint function.
            set_:     The constraint set.

        Returns:
            The identifier of the new constraint.

        Raises:
            UnsupportedConstraintError: If the constraint type is not supported.
            IndexingError: If the function references an unknown variable.
        """
        key = (type(function), type(set_))
        if key not in self._constraints:
            msg = (
                f"Unsupported constraint: {key[0].__name__}-in-{key[1].__name__}"
            )
            raise UnsupportedConstraintError(msg)
        for variable in function.variables():
            self._check_variable(variable)
        self._next_constraint += 1
        index = ConstraintIndex(self._next_constraint, *key)
        self._constraints[key][index] = (function, set_)
        self._modified()
        return index

    def delete_constraint(self, index: ConstraintIndex) -> None:
        """Delete a constraint.

        Args:
            index: The constraint to delete.
        """
        del self._constraint_group(index)[index]
        self._modified()

    def constraint_function(self, index: ConstraintIndex) -> ScalarFunction:
        """Return the function of a constraint."""
        return self._constraint_group(index)[index][0]

    def constraint_set(self, index: ConstraintIndex) -> ScalarSet | CategorySet:
        """Return the set of a constraint."""
        return self._constraint_group(index)[index][1]

    def set_constraint_set(
        self, index: ConstraintIndex, set_: ScalarSet | CategorySet
    ) -> None:
        """Replace the set of a constraint by a set of the same type.

        Args:
            index: The constraint to modify.
            set_:  The new set.

        Raises:
            TypeError: If the type of the new set differs.
        """
        group = self._constraint_group(index)
        if type(set_) is not index.set_type:
            msg = (
                f"Cannot change the set type of a constraint from "
                f"{index.set_type.__name__} to {type(set_).__name__}"
            )
            raise TypeError(msg)
        group[index] = (group[index][0], set_)
        self._modified()

    def list_of_constraint_indices(
        self, function_type: type, set_type: type
    ) -> list[ConstraintIndex]:
        """Return the constraints of a given type in creation order.

        Args:
            function_type: The type of the function.
            set_type:      The type of the set.

        Returns:
            The constraint identifiers, an empty list for unsupported types.
        """
        return list(self._constraints.get((function_type, set_type), ()))

    def list_of_constraint_types(self) -> list[tuple[type, type]]:
        """Return the function-in-set types that have at least one constraint."""
        return [key for key, group in self._constraints.items() if group]

    def number_of_constraints(self, function_type: type, set_type: type) -> int:
        """Return the number of constraints of a given type."""
        return len(self._constraints.get((function_type, set_type), ()))

    def _constraint_group(
        self, index: ConstraintIndex
    ) -> dict[ConstraintIndex, tuple[ScalarFunction, ScalarSet | CategorySet]]:
        group = self._constraints.get((index.function_type, index.set_type))
        if group is None or index not in group:
            raise IndexingError(index)
        return group

    # Objective:

    def set_objective(self, function: ScalarFunction, sense: ObjectiveSense) -> None:
        """Set the objective function and sense.

        Args:
            function: The objective function.
            sense:    The optimization sense.
        """
        for variable in function.variables():
            self._check_variable(variable)
        self._objective_function = function
        self._objective_sense = ObjectiveSense(sense)
        self._modified()

    @property
    def objective_function(self) -> ScalarFunction:
        """The objective function, the zero function if not set."""
        return self._objective_function

    @property
    def objective_sense(self) -> ObjectiveSense:
        """The objective sense."""
        return self._objective_sense

    # Primal start values and the nonlinear block:

    def set_variable_primal_start(
        self, variable: VariableIndex, value: float | None
    ) -> None:
        """Set or clear the start value of a variable.

        Start values are passed to the solver as a warm start. Variables
        without a start value start at zero.

        Args:
            variable: The variable.
            value:    The start value, or `None` to clear it.
        """
        self._check_variable(variable)
        if value is None:
            self._primal_start.pop(variable, None)
        else:
            self._primal_start[variable] = float(value)

    def variable_primal_start(self, variable: VariableIndex) -> float | None:
        """Return the start value of a variable, or `None` if not set."""
        self._check_variable(variable)
        return self._primal_start.get(variable)

    @property
    def nlp_block(self) -> NLPBlock | None:
        """The nonlinear block, or `None`."""
        return self._nlp_block

    def set_nlp_block(self, block: NLPBlock | None) -> None:
        """Set or remove the nonlinear block.

        Args:
            block: The nonlinear block, or `None` to remove it.
        """
        self._nlp_block = block
        self._modified()


def _remove_variable(
    function: ScalarFunction, variable: VariableIndex
) -> ScalarFunction:
    match function:
        case ScalarAffineFunction(terms=terms):
            return replace(
                function,
                terms=tuple(term for term in terms if term.variable != variable),
            )
        case ScalarQuadraticFunction(
            affine_terms=affine_terms, quadratic_terms=quadratic_terms
        ):
            return replace(
                function,
                affine_terms=tuple(
                    term for term in affine_terms if term.variable != variable
                ),
                quadratic_terms=tuple(
                    term
                    for term in quadratic_terms
                    if variable not in (term.variable_1, term.variable_2)
                ),
            )
    return function
