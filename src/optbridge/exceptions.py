"""Exceptions raised within the `optbridge` library."""


class OptBridgeError(Exception):
    """Base class of all exceptions raised by `optbridge`."""


class IndexingError(OptBridgeError, KeyError):
    """Raised when a variable or constraint identifier is not known.

    This signals an inconsistency between the caller and the model, for
    instance a reference to a variable that was deleted, or that belongs to
    another model. It is not recoverable.
    """

    def __init__(self, index: object) -> None:
        """Initialize the exception.

        Args:
            index: The offending identifier.
        """
        self.index = index
        super().__init__(f"Invalid index: {index!r}")

    def __str__(self) -> str:
        """Return the message, without the quoting applied by `KeyError`."""
        return str(self.args[0])


class UnsupportedConstraintError(OptBridgeError, TypeError):  # noqa: N818
    """Raised when a function-in-set combination is not supported."""


class SolverError(OptBridgeError):
    """Raised by solver plugins when the solver fails to run.

    The solve orchestrator catches this exception and reports the failure via
    the [`SolverStatus.ERROR`][optbridge.enums.SolverStatus.ERROR] status,
    instead of propagating it.
    """


class OptimizeInProgressError(OptBridgeError, RuntimeError):
    """Raised when `optimize` is called while a solve is already running."""
