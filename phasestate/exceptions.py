# phasestate/exceptions.py
"""Exception types raised by the phase state core."""


class PhaseStateError(Exception):
    """Base class for all phasestate errors."""


class SizeMismatchError(PhaseStateError, ValueError):
    """Raised when a caller-supplied buffer is shorter than required.

    Args:
        provided: Length of the buffer that was passed in
        required: Minimum length the operation needs
        where: Name of the operation that rejected the buffer
    """

    def __init__(self, provided, required, where=""):
        self.provided = provided
        self.required = required
        self.where = where
        prefix = f"{where}: " if where else ""
        super().__init__(f"{prefix}array size {provided} is too small, {required} entries required")


class SpeciesNotFoundError(PhaseStateError, KeyError):
    """Raised when a species name is not known to the species directory."""

    def __init__(self, name):
        self.name = name
        super().__init__(name)

    def __str__(self):
        return f"Unknown species '{self.name}'"


class CompositionParseError(PhaseStateError, ValueError):
    """Raised when a composition string cannot be parsed."""
