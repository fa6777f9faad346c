"""
Error types for the nudge mutation engine.

Public errors derive from `MutationError`. `Exhausted` is expected and
routinely ignored by callers, `InvalidRange` signals a caller bug, and
`MutatorError` is the escape hatch for mutator-defined failures.

`EarlyExit` is internal: the candidate registry raises it right after the
chosen mutation runs so that the rest of the enumeration is skipped. It must
reach the engine untouched. `MutatorContractError` reports a mutator that
broke the registration contract and is never caught by the library.
"""

from __future__ import annotations

from contextlib import AbstractContextManager, suppress


class MutationError(Exception):
    """Base class for every error a mutation can report."""

    kind = "mutation_error"


class Exhausted(MutationError):
    """The mutator had no candidate mutation for the given value."""

    kind = "exhausted"

    def __init__(self) -> None:
        super().__init__("the mutator is exhausted")


class InvalidRange(MutationError):
    """A ranged mutation was given a range whose start is after its end."""

    kind = "invalid_range"

    def __init__(self, start: object = None, end: object = None) -> None:
        if start is None and end is None:
            message = "the mutator was given an invalid range"
        else:
            message = f"the mutator was given an invalid range: {start!r} > {end!r}"
        super().__init__(message)
        self.start = start
        self.end = end


class MutatorError(MutationError):
    """A mutator-defined failure carrying a free-form message."""

    kind = "other"

    def __init__(self, message: str) -> None:
        super().__init__(f"an unknown error occurred: {message}")
        self.message = message


class MutatorContractError(AssertionError):
    """A mutator implementation violated the two-pass registration contract."""


class EarlyExit(Exception):
    """Raised by the registry once the selected mutation has been applied."""


def ignore_exhausted() -> AbstractContextManager:
    """Return a context manager that silences `Exhausted` and nothing else."""
    return suppress(Exhausted)
