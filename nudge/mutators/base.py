"""
The capabilities every mutator builds on.

A `Mutator` enumerates candidate edits to the value held by a place by
registering closures with a `Candidates` registry. Implementations must
follow two rules:

* Determinism: for the same mutator state, value, and shrink flag, the same
  registrations happen in the same order every time `mutate` runs.
* Exclusivity: the value and the mutator's own attributes are changed only
  from inside a registered closure, never while enumerating.

Every call into a nested mutator must let its exceptions propagate. The
engine detects a swallowed early exit and raises `MutatorContractError`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from nudge.candidates import Candidates, Context
    from nudge.mutators.combinators import Filter, Map, OneOf, Proj, Repeat
    from nudge.places import Place


class Mutator(ABC):
    """Base class for all mutators."""

    @abstractmethod
    def mutate(self, c: Candidates, place: Place) -> None:
        """Register every candidate mutation of `place.value` with `c`."""

    def map(self, f: Callable[[Context, Any], Any]) -> Map:
        """Post-process whichever mutation this mutator applies.

        `f(context, new_value)` returns the value to store. It is not a
        candidate of its own: it rides along with the inner mutation.
        """
        from nudge.mutators.combinators import Map

        return Map(self, f)

    def proj(
        self,
        getter: Callable[[Any], Any],
        setter: Callable[[Any, Any], Any],
    ) -> Proj:
        """Turn this mutator of an inner value into one of an outer value.

        `getter(outer)` reads the inner value and `setter(outer, inner)`
        returns the updated outer value.
        """
        from nudge.mutators.combinators import Proj

        return Proj(self, getter, setter)

    def filter(self, pred: Callable[[Context, Any], bool]) -> Filter:
        """Keep mutating until `pred(context, new_value)` holds.

        The candidates are this mutator's own. Once one is applied, further
        mutations are applied to the same value until the predicate accepts
        it. If this mutator is exhausted first, `Exhausted` propagates and the
        value is left wherever the last mutation put it.
        """
        from nudge.mutators.combinators import Filter

        return Filter(self, pred)

    def repeat(self, n: int) -> Repeat:
        """Apply `n` consecutive mutations for each one requested.

        Stops early, without error, if this mutator is exhausted after at
        least one mutation has been applied.
        """
        from nudge.mutators.combinators import Repeat

        return Repeat(self, n)

    def __or__(self, other: Mutator) -> OneOf:
        from nudge.mutators.combinators import OneOf

        return OneOf(self, other)


class Generate(ABC):
    """A mutator that can also build a brand new value from the context alone."""

    @abstractmethod
    def generate(self, context: Context) -> Any:
        """Return a fresh value, drawing randomness from `context.rng`."""


class MutateInRange(ABC):
    """A mutator that can keep its results inside an inclusive range."""

    @abstractmethod
    def mutate_in_range(self, c: Candidates, place: Place, start: Any, end: Any) -> None:
        """Register candidates whose results lie within `[start, end]`.

        Raises `InvalidRange` before registering anything if `start > end`.
        """


def require_generate(mutator: Mutator, role: str) -> None:
    if not isinstance(mutator, Generate):
        raise TypeError(
            f"{role} must be able to generate values, got {type(mutator).__name__}"
        )
