"""
The candidate registry and the two-pass selection protocol.

A mutator describes every edit it could make to a value by calling
`Candidates.mutation(f)` once per edit. The engine runs the mutator twice:

1. A counting pass, where each registration only bumps a counter.
2. An applying pass against the same value and mutator state, where the
   registration whose position matches a uniformly drawn target is invoked
   and `EarlyExit` is raised to unwind straight back to the engine.

No list of pending edits is ever built, and only the chosen edit runs. The
price is that enumeration must be deterministic and must not touch the value
outside a registered closure; both are checked after the applying pass.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable

from nudge.errors import EarlyExit, Exhausted, MutatorContractError
from nudge.rng import Rng

logger = logging.getLogger(__name__)


class Context:
    """Per-session state: a random number generator and the shrink flag."""

    def __init__(self, rng: Rng | None = None, shrink: bool = False) -> None:
        self._rng = rng if rng is not None else Rng()
        self._shrink = bool(shrink)

    def __repr__(self) -> str:
        return f"Context(rng={self._rng!r}, shrink={self._shrink})"

    @property
    def rng(self) -> Rng:
        return self._rng

    @property
    def shrink(self) -> bool:
        """Whether only mutations that simplify the value may be registered."""
        return self._shrink


class Phase(Enum):
    COUNTING = auto()
    APPLYING = auto()


class Candidates:
    """Registry passed into every `Mutator.mutate` call.

    Created fresh for each top-level mutation and discarded right after.
    """

    def __init__(self, context: Context) -> None:
        self.context = context
        self.phase = Phase.COUNTING
        self.count = 0
        self.current = 0
        self.target = 0
        self.applied = False

    def __repr__(self) -> str:
        if self.phase is Phase.COUNTING:
            return f"Candidates(counting, count={self.count})"
        return f"Candidates(applying, current={self.current}, target={self.target})"

    @property
    def shrink(self) -> bool:
        return self.context.shrink

    def begin_applying(self, target: int) -> None:
        self.phase = Phase.APPLYING
        self.current = 0
        self.target = target
        self.applied = False

    def mutation(self, f: Callable[[Context], None]) -> None:
        """Register one candidate mutation.

        `f` receives the session context and performs the edit. It runs only
        if this registration is the one selected, in which case `EarlyExit` is
        raised afterwards and must be allowed to propagate.
        """
        if self.phase is Phase.COUNTING:
            self.count += 1
            return

        if self.current == self.target:
            self.applied = True
            f(self.context)
            raise EarlyExit()

        self.current += 1


def count_candidates(context: Context, mutate: Callable[[Candidates], None]) -> int:
    """Run only the counting pass of `mutate` and return the candidate count."""
    candidates = Candidates(context)
    mutate(candidates)
    return candidates.count


def mutate_once(context: Context, mutate: Callable[[Candidates], None]) -> None:
    """Apply exactly one uniformly chosen candidate mutation.

    `mutate` is invoked with a fresh registry, once to count and once to
    apply. Raises `Exhausted` when nothing was registered. Any error raised
    by `mutate` itself (other than the internal early exit) propagates.
    """
    candidates = Candidates(context)
    mutate(candidates)
    count = candidates.count
    if count == 0:
        raise Exhausted()

    target = context.rng.index(count)
    logger.debug(f"[*] Applying candidate {target} of {count}.")
    candidates.begin_applying(target)

    try:
        mutate(candidates)
    except EarlyExit:
        return

    if candidates.applied:
        raise MutatorContractError(
            "a mutation was applied but its early-exit signal never reached the "
            "engine; some mutator caught it instead of letting it propagate"
        )
    raise MutatorContractError(
        f"the counting pass registered {count} candidate mutations but the "
        f"applying pass registered {candidates.current}; mutator enumeration "
        "must be deterministic for the same value, state, and shrink flag"
    )
