"""
The user-facing mutation engine.

A `Session` owns a `Context` (random number generator plus shrink flag) and
runs the counting and applying passes once per requested mutation. Values go
in and come back out, since immutable values are replaced rather than edited:

    session = Session(seed=0x12345678)
    value = session.mutate_with(m.u32(), 1234)

The shrink flag is fixed for the lifetime of a session; create a new session
to change it.
"""

from __future__ import annotations

import logging
from typing import Any

from nudge.candidates import Context, count_candidates, mutate_once
from nudge.mutators.base import Generate, MutateInRange, Mutator
from nudge.mutators.defaults import default_for
from nudge.places import Box
from nudge.rng import Rng

logger = logging.getLogger(__name__)


class Session:
    """A mutation session: configuration plus the two-pass driver."""

    def __init__(self, seed: int | None = None, shrink: bool = False) -> None:
        self.context = Context(Rng(seed), shrink)
        logger.debug(f"[*] New session: seed={self.seed}, shrink={self.shrink}")

    def __repr__(self) -> str:
        return f"Session(seed={self.seed!r}, shrink={self.shrink})"

    @property
    def seed(self) -> int:
        return self.context.rng.seed

    @property
    def shrink(self) -> bool:
        return self.context.shrink

    def mutate(self, value: Any) -> Any:
        """Mutate `value` with the canonical mutator for its type."""
        return self.mutate_with(default_for(type(value)), value)

    def mutate_with(self, mutator: Mutator, value: Any) -> Any:
        """Apply one randomly chosen candidate mutation and return the result.

        Raises `Exhausted` (leaving `value` untouched) when the mutator has no
        candidates for it.
        """
        box = Box(value)
        mutate_once(self.context, lambda c: mutator.mutate(c, box))
        return box.value

    def mutate_in_range_with(
        self, mutator: MutateInRange, value: Any, start: Any, end: Any
    ) -> Any:
        """Like `mutate_with`, but keep the result within `[start, end]`."""
        box = Box(value)
        mutate_once(self.context, lambda c: mutator.mutate_in_range(c, box, start, end))
        return box.value

    def generate_with(self, mutator: Generate) -> Any:
        """Build a fresh value using the session's context."""
        return mutator.generate(self.context)

    def count_candidates(self, mutator: Mutator, value: Any) -> int:
        """Return how many candidate mutations `mutator` offers for `value`.

        Only the counting pass runs, so `value` and the mutator are unchanged
        and the random number generator is not advanced.
        """
        box = Box(value)
        return count_candidates(self.context, lambda c: mutator.mutate(c, box))
