"""
Mutator combinators.

These wrap other mutators without disturbing the registry's phases: they
forward the same `Candidates` object into nested mutators, so registrations
from every branch land in one stream and the engine's uniform choice spans
all of them.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Callable

from nudge.candidates import mutate_once
from nudge.errors import EarlyExit, Exhausted, MutatorError
from nudge.mutators.base import Generate, Mutator
from nudge.places import LensPlace

if TYPE_CHECKING:
    from nudge.candidates import Candidates, Context
    from nudge.places import Place


class OneOf(Mutator, Generate):
    """Offer the union of the candidates of several mutators."""

    def __init__(self, *mutators: Mutator) -> None:
        self.mutators = list(mutators)

    def __repr__(self) -> str:
        return f"OneOf({', '.join(repr(m) for m in self.mutators)})"

    def __or__(self, other: Mutator) -> OneOf:
        return OneOf(*self.mutators, other)

    def mutate(self, c: Candidates, place: Place) -> None:
        for mutator in self.mutators:
            mutator.mutate(c, place)

    def generate(self, context: Context) -> Any:
        generators = [m for m in self.mutators if isinstance(m, Generate)]
        if len(generators) != len(self.mutators) or not generators:
            raise MutatorError("every branch of one_of must be able to generate")
        return context.rng.choose(generators).generate(context)


def one_of(*mutators: Mutator) -> OneOf:
    """Create a mutator that picks uniformly among all branches' candidates.

    The choice is over the concatenated registrations, so a branch that
    registers more candidates is proportionally more likely to be picked.
    """
    return OneOf(*mutators)


class Map(Mutator):
    """Apply `f` to the value right after the inner mutator's edit."""

    def __init__(self, mutator: Mutator, f: Callable[[Context, Any], Any]) -> None:
        self.mutator = mutator
        self.f = f

    def mutate(self, c: Candidates, place: Place) -> None:
        try:
            self.mutator.mutate(c, place)
        except EarlyExit:
            place.set(self.f(c.context, place.value))
            raise


class Filter(Mutator):
    """Re-mutate the value until a predicate accepts it."""

    def __init__(self, mutator: Mutator, pred: Callable[[Context, Any], bool]) -> None:
        self.mutator = mutator
        self.pred = pred

    def mutate(self, c: Candidates, place: Place) -> None:
        try:
            self.mutator.mutate(c, place)
        except EarlyExit:
            context = c.context
            while not self.pred(context, place.value):
                mutate_once(context, lambda inner: self.mutator.mutate(inner, place))
            raise


class Repeat(Mutator):
    """Apply `n` mutations of the inner mutator as one."""

    def __init__(self, mutator: Mutator, n: int) -> None:
        if n < 1:
            raise ValueError(f"repeat count must be at least 1, got {n}")
        self.mutator = mutator
        self.n = n

    def mutate(self, c: Candidates, place: Place) -> None:
        try:
            self.mutator.mutate(c, place)
        except EarlyExit:
            for _ in range(self.n - 1):
                try:
                    mutate_once(c.context, lambda inner: self.mutator.mutate(inner, place))
                except Exhausted:
                    break
            raise


class Proj(Mutator):
    """Mutate a component of the value through a getter/setter pair."""

    def __init__(
        self,
        mutator: Mutator,
        getter: Callable[[Any], Any],
        setter: Callable[[Any, Any], Any],
    ) -> None:
        self.mutator = mutator
        self.getter = getter
        self.setter = setter

    def mutate(self, c: Candidates, place: Place) -> None:
        self.mutator.mutate(c, LensPlace(place, self.getter, self.setter))


class FromFn(Mutator):
    """A mutator backed by a plain `f(candidates, place)` function."""

    def __init__(self, f: Callable[[Candidates, Place], None]) -> None:
        self.f = f

    def mutate(self, c: Candidates, place: Place) -> None:
        self.f(c, place)


def from_fn(f: Callable[[Candidates, Place], None]) -> FromFn:
    """Wrap a function that registers candidates into a mutator.

    Example:
        def negate(c, place):
            if place.value != 0:
                c.mutation(lambda ctx: place.set(-place.value))

        mutator = from_fn(negate)
    """
    return FromFn(f)


class Just(Mutator, Generate):
    """Overwrite the value with a fixed constant.

    A fused constant offers its single candidate only until it has fired
    once; afterwards it registers nothing and the engine reports exhaustion.
    """

    def __init__(self, value: Any, fused: bool = False) -> None:
        self.value = value
        self.fused = fused
        self.fired = False

    def __repr__(self) -> str:
        return f"Just({self.value!r}, fused={self.fused})"

    def mutate(self, c: Candidates, place: Place) -> None:
        if self.fused and self.fired:
            return

        def apply(_ctx: Context) -> None:
            self.fired = True
            place.set(copy.deepcopy(self.value))

        c.mutation(apply)

    def generate(self, context: Context) -> Any:
        return copy.deepcopy(self.value)


def just(value: Any, fused: bool = False) -> Just:
    """Create a mutator with exactly one candidate: replace with `value`."""
    return Just(value, fused=fused)
