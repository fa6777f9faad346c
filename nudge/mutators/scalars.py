"""
Leaf mutators for scalar values.

Outside shrink mode each leaf offers a redraw across its whole domain (plus
special values for floats, and one redraw per partition for characters).
In shrink mode it offers a single redraw strictly toward the domain's zero,
or nothing at all once the value is already there, so repeated shrinking
either makes progress or ends in exhaustion.
"""

from __future__ import annotations

import math
import sys
from typing import TYPE_CHECKING, Any

from nudge.errors import InvalidRange
from nudge.mutators.base import Generate, MutateInRange, Mutator
from nudge.rng import MAX_UNICODE, to_f32

if TYPE_CHECKING:
    from nudge.candidates import Candidates, Context
    from nudge.places import Place


class Bool(Mutator, Generate):
    """Flip a boolean. When shrinking, only `True` becomes `False`."""

    def __repr__(self) -> str:
        return "Bool()"

    def mutate(self, c: Candidates, place: Place) -> None:
        if not c.shrink or place.value:
            c.mutation(lambda _ctx: place.set(not place.value))

    def generate(self, context: Context) -> bool:
        return context.rng.boolean()


def bool_() -> Bool:
    return Bool()


class Integer(Mutator, Generate, MutateInRange):
    """A mutator for fixed-width two's complement (or unsigned) integers."""

    def __init__(self, bits: int, signed: bool) -> None:
        self.bits = bits
        self.signed = signed
        if signed:
            self.min = -(1 << (bits - 1))
            self.max = (1 << (bits - 1)) - 1
        else:
            self.min = 0
            self.max = (1 << bits) - 1

    def __repr__(self) -> str:
        return f"Integer({'i' if self.signed else 'u'}{self.bits})"

    def _draw(self, context: Context) -> int:
        if self.signed:
            return context.rng.signed(self.bits)
        return context.rng.unsigned(self.bits)

    def mutate(self, c: Candidates, place: Place) -> None:
        if not c.shrink:
            c.mutation(lambda ctx: place.set(self._draw(ctx)))
            return

        value = place.value
        if value == 0:
            return

        def shrink_toward_zero(ctx: Context) -> None:
            if value > 0:
                place.set(ctx.rng.int_in_range(0, value - 1))
            else:
                place.set(ctx.rng.int_in_range(value + 1, 0))

        c.mutation(shrink_toward_zero)

    def generate(self, context: Context) -> int:
        return self._draw(context)

    def mutate_in_range(self, c: Candidates, place: Place, start: int, end: int) -> None:
        if start > end:
            raise InvalidRange(start, end)

        value = place.value
        if c.shrink and value == start:
            return

        def redraw(ctx: Context) -> None:
            hi = max(start, min(value, end)) if ctx.shrink else end
            place.set(ctx.rng.int_in_range(start, hi))

        c.mutation(redraw)


def u8() -> Integer:
    return Integer(8, signed=False)


def u16() -> Integer:
    return Integer(16, signed=False)


def u32() -> Integer:
    return Integer(32, signed=False)


def u64() -> Integer:
    return Integer(64, signed=False)


def u128() -> Integer:
    return Integer(128, signed=False)


def i8() -> Integer:
    return Integer(8, signed=True)


def i16() -> Integer:
    return Integer(16, signed=True)


def i32() -> Integer:
    return Integer(32, signed=True)


def i64() -> Integer:
    return Integer(64, signed=True)


def i128() -> Integer:
    return Integer(128, signed=True)


# Partitions of the scalar-value domain used to bias character mutation
# toward interesting regions. See the Unicode plane and block overviews.
CHAR_PARTITIONS: tuple[tuple[int, int], ...] = (
    # Non-control ASCII.
    (0x20, 0x7E),
    # Plane 0.
    *((lo, lo + 0xFFF) for lo in range(0x0000, 0xD000, 0x1000)),
    (0xD000, 0xD7FF),
    (0xE000, 0xEFFF),
    (0xF000, 0xFFFF),
    # Plane 1.
    *((lo, lo + 0xFFF) for lo in range(0x10000, 0x15000, 0x1000)),
    *((lo, lo + 0xFFF) for lo in range(0x16000, 0x19000, 0x1000)),
    *((lo, lo + 0xFFF) for lo in range(0x1A000, 0x20000, 0x1000)),
    # Plane 2.
    *((lo, lo + 0xFFF) for lo in range(0x20000, 0x30000, 0x1000)),
    # Plane 3.
    *((lo, lo + 0xFFF) for lo in range(0x30000, 0x33000, 0x1000)),
)


class Char(Mutator, Generate, MutateInRange):
    """A mutator for single-character strings."""

    def __repr__(self) -> str:
        return "Char()"

    def mutate(self, c: Candidates, place: Place) -> None:
        if c.shrink:
            value = place.value
            if value != "\0":
                c.mutation(
                    lambda ctx: place.set(ctx.rng.char_in_range("\0", chr(ord(value) - 1)))
                )
            return

        for lo, hi in CHAR_PARTITIONS:
            self.mutate_in_range(c, place, chr(lo), chr(hi))

        # Catch-all: any scalar value, assigned or not.
        c.mutation(lambda ctx: place.set(ctx.rng.char()))

    def generate(self, context: Context) -> str:
        return context.rng.char()

    def mutate_in_range(self, c: Candidates, place: Place, start: str, end: str) -> None:
        if start > end:
            raise InvalidRange(start, end)

        value = place.value
        if c.shrink and value == start:
            return

        def redraw(ctx: Context) -> None:
            hi = max(start, min(value, end)) if ctx.shrink else end
            place.set(ctx.rng.char_in_range(start, hi))

        c.mutation(redraw)


def char() -> Char:
    return Char()


class Float(Mutator, Generate):
    """A mutator for IEEE 754 floats of single or double precision."""

    def __init__(self, single: bool) -> None:
        self.single = single
        if single:
            self.epsilon = 2.0**-23
            self.min_positive = 2.0**-126
            self.max = to_f32(3.4028234663852886e38)
        else:
            self.epsilon = sys.float_info.epsilon
            self.min_positive = sys.float_info.min
            self.max = sys.float_info.max

    def __repr__(self) -> str:
        return "Float(f32)" if self.single else "Float(f64)"

    def _round(self, x: float) -> float:
        return to_f32(x) if self.single else x

    def _unit(self, context: Context) -> float:
        if self.single:
            return context.rng.f32_unit()
        return context.rng.unit_float()

    def _finite(self, c: Candidates, place: Place) -> None:
        for special in (0.0, 1.0, -1.0, self.epsilon, self.min_positive, self.max, -self.max):
            c.mutation(lambda _ctx, special=special: place.set(special))
        c.mutation(lambda ctx: place.set(self._round(self._unit(ctx) * self.max)))
        c.mutation(lambda ctx: place.set(self._round(self._unit(ctx) * -self.max)))

    def mutate(self, c: Candidates, place: Place) -> None:
        value = place.value
        if c.shrink:
            if value == 0.0:
                return
            if math.isnan(value) or math.isinf(value):
                self._finite(c, place)
                return
            c.mutation(lambda ctx: place.set(self._round(value * self._unit(ctx))))
            return

        self._finite(c, place)
        c.mutation(lambda _ctx: place.set(math.inf))
        c.mutation(lambda _ctx: place.set(-math.inf))
        c.mutation(lambda _ctx: place.set(math.nan))

    def generate(self, context: Context) -> float:
        magnitude = self._round(self._unit(context) * self.max)
        return -magnitude if context.rng.boolean() else magnitude


def f32() -> Float:
    return Float(single=True)


def f64() -> Float:
    return Float(single=False)


class Unit(Mutator, Generate):
    """A mutator for a type with a single inhabitant; it is always exhausted."""

    def __init__(self, inhabitant: Any = ()) -> None:
        self.inhabitant = inhabitant

    def __repr__(self) -> str:
        return f"Unit({self.inhabitant!r})"

    def mutate(self, c: Candidates, place: Place) -> None:
        return None

    def generate(self, context: Context) -> Any:
        return self.inhabitant


def unit(inhabitant: Any = ()) -> Unit:
    return Unit(inhabitant)
