"""
Mutators for composite values.

Each element, field, or case forwards the same registry into its own
mutator, so the engine's single uniform choice can land on an edit to any
one component. Optional and two-case containers add registrations for
switching between cases, restricted in shrink mode to transitions that do
not make the value more complex.
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any

from nudge.candidates import mutate_once
from nudge.errors import Exhausted, MutatorError
from nudge.mutators.base import Generate, MutateInRange, Mutator, require_generate
from nudge.places import AttrPlace, Box, ItemPlace
from nudge.types import Err, Ok

if TYPE_CHECKING:
    from nudge.candidates import Candidates, Context
    from nudge.places import Place


class Range(Mutator, Generate):
    """Keep every mutated value within the inclusive range `[start, end]`."""

    def __init__(self, start: Any, end: Any, mutator: MutateInRange) -> None:
        if not isinstance(mutator, MutateInRange):
            raise TypeError(
                f"range mutation needs a MutateInRange mutator, got {type(mutator).__name__}"
            )
        self.start = start
        self.end = end
        self.mutator = mutator

    def __repr__(self) -> str:
        return f"Range({self.start!r}, {self.end!r}, {self.mutator!r})"

    def mutate(self, c: Candidates, place: Place) -> None:
        self.mutator.mutate_in_range(c, place, self.start, self.end)

    def generate(self, context: Context) -> Any:
        require_generate(self.mutator, "the inner mutator of a range")
        box = Box(self.mutator.generate(context))
        try:
            mutate_once(
                context,
                lambda c: self.mutator.mutate_in_range(c, box, self.start, self.end),
            )
        except Exhausted:
            # Only possible while shrinking with the value already at `start`.
            pass
        return box.value


def range_(start: Any, end: Any, mutator: MutateInRange | None = None) -> Range:
    """Create a mutator that keeps values in `[start, end]`.

    Without an explicit `mutator`, the canonical mutator for `type(start)` is
    used. An inverted range raises `InvalidRange` when mutating, not here.
    """
    if mutator is None:
        from nudge.mutators.defaults import default_for

        mutator = default_for(type(start))
    return Range(start, end, mutator)


class Array(Mutator, Generate):
    """Mutate each element of a list or tuple with one mutator.

    Without a fixed `size`, `generate` returns an empty container of type
    `kind`.
    """

    def __init__(self, mutator: Mutator, size: int | None = None, kind: type = list) -> None:
        self.mutator = mutator
        self.size = size
        self.kind = kind

    def __repr__(self) -> str:
        return f"Array({self.mutator!r}, size={self.size!r}, kind={self.kind.__name__})"

    def mutate(self, c: Candidates, place: Place) -> None:
        for i in range(len(place.value)):
            self.mutator.mutate(c, ItemPlace(place, i))

    def generate(self, context: Context) -> Any:
        if self.size is None:
            return self.kind()
        require_generate(self.mutator, "the element mutator of an array")
        return self.kind(self.mutator.generate(context) for _ in range(self.size))


def array(mutator: Mutator, size: int | None = None, kind: type = list) -> Array:
    return Array(mutator, size=size, kind=kind)


class Tuple(Mutator, Generate):
    """Mutate a fixed-arity tuple with one mutator per position."""

    def __init__(self, *mutators: Mutator) -> None:
        self.mutators = list(mutators)

    def __repr__(self) -> str:
        return f"Tuple({', '.join(repr(m) for m in self.mutators)})"

    def mutate(self, c: Candidates, place: Place) -> None:
        arity = len(place.value)
        if arity != len(self.mutators):
            raise MutatorError(
                f"tuple mutator has {len(self.mutators)} elements but the value has {arity}"
            )
        for i, mutator in enumerate(self.mutators):
            mutator.mutate(c, ItemPlace(place, i))

    def generate(self, context: Context) -> tuple:
        for mutator in self.mutators:
            require_generate(mutator, "every element mutator of a tuple")
        return tuple(m.generate(context) for m in self.mutators)


def tuple_(*mutators: Mutator) -> Tuple:
    return Tuple(*mutators)


class Option(Mutator, Generate):
    """Mutate a value that may be `None`."""

    def __init__(self, mutator: Mutator) -> None:
        require_generate(mutator, "the inner mutator of an option")
        self.mutator = mutator

    def __repr__(self) -> str:
        return f"Option({self.mutator!r})"

    def mutate(self, c: Candidates, place: Place) -> None:
        if place.value is None:
            if not c.shrink:
                c.mutation(lambda ctx: place.set(self.mutator.generate(ctx)))
            return

        self.mutator.mutate(c, place)
        c.mutation(lambda _ctx: place.set(None))

    def generate(self, context: Context) -> Any:
        if context.rng.boolean():
            return None
        return self.mutator.generate(context)


def option(mutator: Mutator) -> Option:
    return Option(mutator)


class Result(Mutator, Generate):
    """Mutate an `Ok`/`Err` value, including switching between the two."""

    def __init__(self, ok_mutator: Mutator, err_mutator: Mutator) -> None:
        require_generate(ok_mutator, "the Ok mutator of a result")
        require_generate(err_mutator, "the Err mutator of a result")
        self.ok_mutator = ok_mutator
        self.err_mutator = err_mutator

    def __repr__(self) -> str:
        return f"Result({self.ok_mutator!r}, {self.err_mutator!r})"

    def mutate(self, c: Candidates, place: Place) -> None:
        value = place.value
        if isinstance(value, Ok):
            self.ok_mutator.mutate(c, AttrPlace(place, "value"))
            if not c.shrink:
                c.mutation(lambda ctx: place.set(Err(self.err_mutator.generate(ctx))))
        elif isinstance(value, Err):
            self.err_mutator.mutate(c, AttrPlace(place, "value"))
            c.mutation(lambda ctx: place.set(Ok(self.ok_mutator.generate(ctx))))
        else:
            raise MutatorError(f"expected Ok or Err, got {type(value).__name__}")

    def generate(self, context: Context) -> Ok | Err:
        if context.rng.boolean():
            return Err(self.err_mutator.generate(context))
        return Ok(self.ok_mutator.generate(context))


def result(ok_mutator: Mutator, err_mutator: Mutator) -> Result:
    return Result(ok_mutator, err_mutator)


class Fields(Mutator, Generate):
    """Mutate named attributes of an object, one sub-mutator per attribute.

    Attributes without a mutator are left untouched. Frozen dataclasses and
    namedtuples are rebuilt rather than modified in place.
    """

    def __init__(self, cls: type | None = None, **mutators: Mutator) -> None:
        self.cls = cls
        self.mutators = mutators

    def __repr__(self) -> str:
        name = self.cls.__name__ if self.cls is not None else None
        inner = ", ".join(f"{k}={v!r}" for k, v in self.mutators.items())
        return f"Fields({name}, {inner})"

    def mutate(self, c: Candidates, place: Place) -> None:
        for name, mutator in self.mutators.items():
            mutator.mutate(c, AttrPlace(place, name))

    def generate(self, context: Context) -> Any:
        if self.cls is None:
            raise MutatorError("cannot generate a value without knowing its type")
        if dataclasses.is_dataclass(self.cls):
            for f in dataclasses.fields(self.cls):
                if (
                    f.init
                    and f.name not in self.mutators
                    and f.default is dataclasses.MISSING
                    and f.default_factory is dataclasses.MISSING
                ):
                    raise MutatorError(
                        f"cannot generate {self.cls.__name__}: field {f.name!r} "
                        "has no mutator and no default"
                    )
        kwargs = {}
        for name, mutator in self.mutators.items():
            if not isinstance(mutator, Generate):
                raise MutatorError(f"the mutator for field {name!r} cannot generate values")
            kwargs[name] = mutator.generate(context)
        # Fields without a mutator fall back to their declared defaults.
        return self.cls(**kwargs)


def fields(cls: type | None = None, **mutators: Mutator) -> Fields:
    return Fields(cls, **mutators)


class Cases(Mutator, Generate):
    """Mutate a value of one of several classes with that class's mutator.

    The active case is the first whose class the value is an instance of.
    Only its fields are mutated; the value never switches to another case.
    """

    def __init__(self, *cases: Fields) -> None:
        for case in cases:
            if not isinstance(case, Fields) or case.cls is None:
                raise TypeError("every case must be a fields() mutator with a class")
        self.cases = list(cases)

    def __repr__(self) -> str:
        return f"Cases({', '.join(repr(case) for case in self.cases)})"

    def _case_for(self, value: Any) -> Fields:
        for case in self.cases:
            if isinstance(value, case.cls):
                return case
        names = ", ".join(case.cls.__name__ for case in self.cases)
        raise MutatorError(f"expected one of {names}, got {type(value).__name__}")

    def mutate(self, c: Candidates, place: Place) -> None:
        self._case_for(place.value).mutate(c, place)

    def generate(self, context: Context) -> Any:
        if not self.cases:
            raise MutatorError("cannot generate a value with no cases")
        return context.rng.choose(self.cases).generate(context)


def cases(*mutators: Fields) -> Cases:
    return Cases(*mutators)
