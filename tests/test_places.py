#!/usr/bin/env python3
"""
Unit tests for nudge/places.py
"""

import unittest
from collections import namedtuple
from dataclasses import dataclass

from nudge.places import AttrPlace, Box, ItemPlace, LensPlace, Place

Pair = namedtuple("Pair", ["left", "right"])


@dataclass
class Mutable:
    x: int


@dataclass(frozen=True)
class Frozen:
    x: int
    y: int = 0


class TestItemPlace(unittest.TestCase):
    def test_list_is_written_in_place(self):
        """Lists are updated without replacing the container."""
        data = [1, 2, 3]
        box = Box(data)
        ItemPlace(box, 1).set(20)
        self.assertIs(box.value, data)
        self.assertEqual(data, [1, 20, 3])

    def test_tuple_is_rebuilt(self):
        """Tuples are rebuilt and written back to the parent."""
        box = Box((1, 2, 3))
        place = ItemPlace(box, 2)
        self.assertEqual(place.value, 3)
        place.set(30)
        self.assertEqual(box.value, (1, 2, 30))

    def test_namedtuple_keeps_its_type(self):
        """Namedtuples are rebuilt with _replace."""
        box = Box(Pair(1, 2))
        ItemPlace(box, 0).set(10)
        self.assertEqual(box.value, Pair(10, 2))
        self.assertIsInstance(box.value, Pair)

    def test_nested_tuple_propagates_upwards(self):
        """Rebuilding an inner tuple rebuilds every enclosing tuple."""
        box = Box(((1, 2), 3))
        ItemPlace(ItemPlace(box, 0), 1).set(99)
        self.assertEqual(box.value, ((1, 99), 3))


class TestAttrPlace(unittest.TestCase):
    def test_plain_object_uses_setattr(self):
        obj = Mutable(1)
        box = Box(obj)
        AttrPlace(box, "x").set(5)
        self.assertIs(box.value, obj)
        self.assertEqual(obj.x, 5)

    def test_frozen_dataclass_is_replaced(self):
        """Frozen dataclasses are rebuilt with dataclasses.replace."""
        box = Box(Frozen(1, 2))
        AttrPlace(box, "y").set(7)
        self.assertEqual(box.value, Frozen(1, 7))

    def test_namedtuple_attribute(self):
        box = Box(Pair(1, 2))
        AttrPlace(box, "right").set(3)
        self.assertEqual(box.value, Pair(1, 3))


class TestLensPlace(unittest.TestCase):
    def test_getter_and_functional_setter(self):
        """The setter's return value becomes the parent's new value."""
        box = Box({"n": 1, "m": 2})
        place = LensPlace(box, lambda d: d["n"], lambda d, v: {**d, "n": v})
        self.assertEqual(place.value, 1)
        place.set(9)
        self.assertEqual(box.value, {"n": 9, "m": 2})


class TestPlaceInterface(unittest.TestCase):
    def test_place_is_abstract(self):
        with self.assertRaises(TypeError):
            Place()

    def test_subclass_must_implement_set(self):
        class ReadOnly(Place):
            @property
            def value(self):
                return 1

        with self.assertRaises(TypeError):
            ReadOnly()


if __name__ == "__main__":
    unittest.main()
