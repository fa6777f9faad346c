"""
A small property-based testing harness built on `Session`.

`Check` is meant for quick smoke tests inside unit test suites: it checks a
property on a hand-picked corpus, then on values mutated from that corpus,
and shrinks the first failing value it finds. It is not a replacement for a
long-running coverage-guided fuzzer; use the same property as that fuzzer's
oracle instead.

Example:
    from nudge import mutators as m
    from nudge.check import Check

    def fits_in_a_byte(x):
        if x > 0xFF:
            return f"{x} does not fit in a byte"

    result = Check().with_iters(500).run(m.u16(), [0, 1, 0xFF], fits_in_a_byte)
    failure = result.unwrap_failed()   # failure.value == 256 after shrinking

A property passes by returning None or True. Returning a string fails with
that message, returning False fails with a generic message, and raising an
exception fails with the fixed message `PROPERTY_RAISED_MESSAGE`.
"""

from __future__ import annotations

import copy
import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from nudge.corpus import Corpus
from nudge.errors import Exhausted, MutationError
from nudge.mutators.base import Mutator
from nudge.mutators.defaults import default_for
from nudge.session import Session
from nudge.telemetry import CheckStats

logger = logging.getLogger(__name__)

DEFAULT_ITERS = 1000
DEFAULT_SHRINK_ITERS = 1000

PROPERTY_RAISED_MESSAGE = "<raised>"
PROPERTY_FALSE_MESSAGE = "property returned False"

ENV_ITERS = "NUDGE_ITERS"
ENV_SHRINK_ITERS = "NUDGE_SHRINK_ITERS"
ENV_SEED = "NUDGE_SEED"

Property = Callable[[Any], Any]


# ---------------------------------------------------------------------------
# CheckResult hierarchy, returned by Check.run()
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CheckResult:
    """Base class for all check outcomes; dispatch with isinstance()."""

    status: str

    @property
    def ok(self) -> bool:
        return isinstance(self, CheckPassed)

    def unwrap_failed(self) -> CheckFailed:
        """Return this result as a `CheckFailed`, raising if it is not one."""
        if not isinstance(self, CheckFailed):
            raise ValueError(f"expected a failed check, got {self.status}")
        return self

    def unwrap_mutator_error(self) -> MutationError:
        """Return the underlying mutator error, raising if there is none."""
        if not isinstance(self, CheckMutatorError):
            raise ValueError(f"expected a mutator error, got {self.status}")
        return self.error


@dataclass(frozen=True)
class CheckPassed(CheckResult):
    """The property held for every checked value."""

    status: str = "PASSED"


@dataclass(frozen=True)
class CheckFailed(CheckResult):
    """The property failed; `value` is the smallest failing input found."""

    value: Any = None
    message: str = ""
    status: str = "FAILED"

    def __str__(self) -> str:
        return f"failed on input {self.value!r}: {self.message}"


@dataclass(frozen=True)
class CheckEmptyCorpus(CheckResult):
    """The check was given no initial values."""

    status: str = "EMPTY_CORPUS"

    def __str__(self) -> str:
        return "cannot check an empty corpus"


@dataclass(frozen=True)
class CheckMutatorError(CheckResult):
    """The mutator reported an error other than exhaustion."""

    error: MutationError | None = None
    status: str = "MUTATOR_ERROR"

    def __str__(self) -> str:
        return f"mutator error: {self.error}"


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw, 0)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


class Check:
    """A configurable property check."""

    def __init__(
        self,
        iters: int = DEFAULT_ITERS,
        shrink_iters: int = DEFAULT_SHRINK_ITERS,
        seed: int | None = None,
    ) -> None:
        self.iters = iters
        self.shrink_iters = shrink_iters
        self.seed = seed
        self.last_stats: CheckStats | None = None

    def __repr__(self) -> str:
        return f"Check(iters={self.iters}, shrink_iters={self.shrink_iters}, seed={self.seed})"

    @classmethod
    def from_env(cls) -> Check:
        """Build a check configured by `NUDGE_ITERS`, `NUDGE_SHRINK_ITERS` and `NUDGE_SEED`."""
        return cls(
            iters=_env_int(ENV_ITERS, DEFAULT_ITERS),
            shrink_iters=_env_int(ENV_SHRINK_ITERS, DEFAULT_SHRINK_ITERS),
            seed=_env_int(ENV_SEED, None),
        )

    def with_iters(self, iters: int) -> Check:
        self.iters = iters
        return self

    def with_shrink_iters(self, shrink_iters: int) -> Check:
        self.shrink_iters = shrink_iters
        return self

    def with_seed(self, seed: int | None) -> Check:
        self.seed = seed
        return self

    def run_with_defaults(self, tp: type, prop: Property) -> CheckResult:
        """Run with `tp`'s canonical mutator and `tp()` as the only corpus value."""
        return self.run(default_for(tp), [tp()], prop)

    def run(self, mutator: Mutator, initial_corpus: Iterable[Any], prop: Property) -> CheckResult:
        """Check `prop` on the corpus and on values mutated from it.

        Every initial value is checked first. Then, for `iters` iterations, a
        random corpus member is mutated and rechecked. Members whose mutator
        is exhausted are dropped; an emptied corpus counts as a pass. The
        first failure is shrunk for up to `shrink_iters` attempts.
        """
        stats = CheckStats()
        self.last_stats = stats
        result = self._run(mutator, initial_corpus, prop, stats)
        stats.finish(result.status)
        logger.debug(f"[*] Check finished: {stats.to_dict()}")
        return result

    def _run(
        self,
        mutator: Mutator,
        initial_corpus: Iterable[Any],
        prop: Property,
        stats: CheckStats,
    ) -> CheckResult:
        corpus = Corpus(initial_corpus)
        stats.corpus_size = len(corpus)
        if not corpus:
            return CheckEmptyCorpus()

        for value in corpus:
            message = self._check_one(prop, value)
            if message is not None:
                return self._shrink(mutator, value, prop, message, stats)

        session = Session(seed=self.seed)
        for _ in range(self.iters):
            stats.iterations += 1
            index = corpus.choose_index(session.context.rng)
            try:
                corpus[index] = session.mutate_with(mutator, corpus[index])
            except Exhausted:
                corpus.remove(index)
                stats.exhausted_removed += 1
                if not corpus:
                    return CheckPassed()
                continue
            except MutationError as e:
                return CheckMutatorError(error=e)
            stats.mutations += 1

            message = self._check_one(prop, corpus[index])
            if message is not None:
                return self._shrink(mutator, corpus[index], prop, message, stats)

        return CheckPassed()

    @staticmethod
    def _check_one(prop: Property, value: Any) -> str | None:
        """Run the property once, returning a failure message or None."""
        try:
            outcome = prop(value)
        except Exception:
            logger.debug("[!] Property raised an exception.", exc_info=True)
            return PROPERTY_RAISED_MESSAGE

        if outcome is None or outcome is True:
            return None
        if outcome is False:
            return PROPERTY_FALSE_MESSAGE
        return str(outcome)

    def _shrink(
        self,
        mutator: Mutator,
        value: Any,
        prop: Property,
        message: str,
        stats: CheckStats,
    ) -> CheckFailed:
        logger.warning(f"[!] Failed on input {value!r}: {message}")
        if self.shrink_iters == 0:
            return CheckFailed(value=value, message=message)

        logger.debug(f"[*] Shrinking for {self.shrink_iters} iterations...")
        session = Session(seed=self.seed, shrink=True)

        for _ in range(self.shrink_iters):
            stats.shrink_attempts += 1
            try:
                candidate = session.mutate_with(mutator, copy.deepcopy(value))
            except Exhausted:
                break
            except MutationError as e:
                stats.shrink_errors += 1
                logger.info(f"[-] Ignoring mutator error during shrinking: {e}")
                continue

            candidate_message = self._check_one(prop, candidate)
            if candidate_message is not None:
                value, message = candidate, candidate_message
                stats.shrink_accepted += 1
                logger.debug(f"[+] Still failing on shrunk input {value!r}: {message}")

        logger.info(f"[*] Shrunk failing input down to {value!r}")
        return CheckFailed(value=value, message=message)
