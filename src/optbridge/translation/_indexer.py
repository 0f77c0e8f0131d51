"""Dense positional indexing of model variables."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from optbridge.exceptions import IndexingError
from optbridge.model import VariableIndex


class VariableIndexer(Mapping[VariableIndex, int]):
    """Map model variables to dense 1-based positions.

    The mapping is a bijection from the given variables onto `1..n`,
    preserving their order. It is built fresh for every solve and is used to
    translate all references to variables consistently within that solve.

    Looking up an unknown variable raises an
    [`IndexingError`][optbridge.exceptions.IndexingError].
    """

    def __init__(self, variables: Iterable[VariableIndex]) -> None:
        """Build the mapping.

        Args:
            variables: The variables, in model enumeration order.

        Raises:
            ValueError: If a variable occurs more than once.
        """
        self._variables = tuple(variables)
        self._positions = {
            variable: position
            for position, variable in enumerate(self._variables, start=1)
        }
        if len(self._positions) != len(self._variables):
            msg = "Duplicate variable indices"
            raise ValueError(msg)

    def __getitem__(self, variable: VariableIndex) -> int:
        """Return the 1-based position of a variable."""
        try:
            return self._positions[variable]
        except KeyError:
            raise IndexingError(variable) from None

    def __iter__(self) -> Iterator[VariableIndex]:
        """Iterate over the variables in position order."""
        return iter(self._variables)

    def __len__(self) -> int:
        """Return the number of variables."""
        return len(self._variables)

    def position(self, variable: VariableIndex) -> int:
        """Return the 1-based position of a variable."""
        return self[variable]

    def variable(self, position: int) -> VariableIndex:
        """Return the variable at a 1-based position.

        Raises:
            IndexingError: If the position is out of range.
        """
        if not 1 <= position <= len(self._variables):
            raise IndexingError(position)
        return self._variables[position - 1]

    @property
    def variables(self) -> tuple[VariableIndex, ...]:
        """The variables in position order."""
        return self._variables
