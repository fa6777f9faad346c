"""
Canonical mutators for Python types.

`default_for(tp)` maps a type, or a parameterized generic like
`tuple[int, bool]` or `Optional[float]`, to a fresh mutator. Dataclasses are
handled by `derive`, which builds a `Fields` mutator from the class's type
hints. Per-field metadata controls derivation:

    @dataclass
    class Packet:
        length: int
        checksum: int = field(default=0, metadata={"nudge": "ignore"})
        flags: tuple[bool, bool] = field(
            default=(False, False), metadata={"nudge": "default"}
        )

`"ignore"` excludes the field from mutation; `"default"` forces the
canonical mutator even when `derive` is given an override for it.

A union of dataclasses is a sum type. `derive(Move | Jump)` (and
`default_for` on such a union) returns a `Cases` mutator that mutates the
fields of whichever member the value is an instance of.
"""

from __future__ import annotations

import dataclasses
import types
import typing
from typing import Any, Callable

from nudge.mutators.base import Mutator
from nudge.mutators.containers import Cases, Fields, array, cases, option, tuple_
from nudge.mutators.scalars import bool_, f64, i64, unit

METADATA_KEY = "nudge"
IGNORE = "ignore"
DEFAULT = "default"

_DEFAULTS: dict[type, Callable[[], Mutator]] = {
    bool: bool_,
    int: i64,
    float: f64,
    type(None): lambda: unit(None),
}


def register_default(tp: type, factory: Callable[[], Mutator]) -> None:
    """Associate `tp` with a factory producing its canonical mutator."""
    _DEFAULTS[tp] = factory


def _is_union(origin: Any) -> bool:
    return origin is typing.Union or origin is types.UnionType


def _is_dataclass_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def default_for(tp: Any) -> Mutator:
    """Return a new canonical mutator for `tp`.

    Raises TypeError if no canonical mutator is known.
    """
    factory = _DEFAULTS.get(tp)
    if factory is not None:
        return factory()

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return array(default_for(args[0]), kind=tuple)
        if not args or args == ((),):
            return unit()
        return tuple_(*(default_for(arg) for arg in args))

    if origin is list and len(args) == 1:
        return array(default_for(args[0]))

    if _is_union(origin):
        present = [arg for arg in args if arg is not type(None)]
        if len(present) != len(args):
            inner = present[0] if len(present) == 1 else typing.Union[tuple(present)]
            return option(default_for(inner))
        if all(_is_dataclass_type(arg) for arg in present):
            return derive(tp)

    if _is_dataclass_type(tp):
        return derive(tp)

    raise TypeError(f"no default mutator for {tp!r}")


def derive(cls: Any, **overrides: Mutator) -> Fields | Cases:
    """Build a `Fields` mutator for a dataclass.

    Every field takes its mutator from `overrides` when present, otherwise
    from `default_for` on its annotated type, subject to the field's
    `"nudge"` metadata directive.

    Given a union of dataclasses, such as `Move | Jump`, returns a `Cases`
    mutator with one derived `Fields` per member. Overrides are not accepted
    for unions; derive each member and combine them with `cases()` instead.
    """
    if _is_union(typing.get_origin(cls)):
        if overrides:
            raise TypeError("derive() takes no overrides for a union; use cases() instead")
        return cases(*(derive(member) for member in typing.get_args(cls)))

    if not _is_dataclass_type(cls):
        raise TypeError(f"derive() needs a dataclass, got {cls!r}")

    unknown = set(overrides) - {f.name for f in dataclasses.fields(cls)}
    if unknown:
        raise TypeError(f"{cls.__name__} has no fields named {sorted(unknown)}")

    try:
        hints = typing.get_type_hints(cls)
    except NameError:
        hints = {}

    mutators: dict[str, Mutator] = {}
    for f in dataclasses.fields(cls):
        directive = f.metadata.get(METADATA_KEY)
        if directive == IGNORE:
            continue
        if directive not in (None, DEFAULT):
            raise TypeError(f"unknown {METADATA_KEY!r} directive {directive!r} on {f.name}")
        if directive is None and f.name in overrides:
            mutators[f.name] = overrides[f.name]
        else:
            mutators[f.name] = default_for(hints.get(f.name, f.type))
    return Fields(cls, **mutators)
