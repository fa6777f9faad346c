"""
Mutable locations that mutators read from and write through.

Python scalars are immutable, so a mutator never receives a bare value.
It receives a place: something with a readable `value` and a `set()` that
stores a replacement. Composite mutators hand their children derived places
that write back into the parent, rebuilding immutable containers (tuples,
namedtuples, frozen dataclasses) on the way.
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from typing import Any, Callable


class Place(ABC):
    """Abstract location holding one value."""

    @property
    @abstractmethod
    def value(self) -> Any:
        """The value currently stored at this location."""

    @abstractmethod
    def set(self, new_value: Any) -> None:
        """Store `new_value` at this location."""


class Box(Place):
    """A standalone place owning its value; the engine's root place."""

    def __init__(self, value: Any) -> None:
        self._value = value

    def __repr__(self) -> str:
        return f"Box({self._value!r})"

    @property
    def value(self) -> Any:
        return self._value

    def set(self, new_value: Any) -> None:
        self._value = new_value


class ItemPlace(Place):
    """The element at `index` of the sequence held by `parent`."""

    def __init__(self, parent: Place, index: int) -> None:
        self.parent = parent
        self.index = index

    @property
    def value(self) -> Any:
        return self.parent.value[self.index]

    def set(self, new_value: Any) -> None:
        container = self.parent.value
        if hasattr(container, "_replace") and hasattr(container, "_fields"):
            field_name = container._fields[self.index]
            self.parent.set(container._replace(**{field_name: new_value}))
        elif isinstance(container, tuple):
            items = list(container)
            items[self.index] = new_value
            self.parent.set(tuple(items))
        else:
            container[self.index] = new_value


class AttrPlace(Place):
    """The attribute `name` of the object held by `parent`."""

    def __init__(self, parent: Place, name: str) -> None:
        self.parent = parent
        self.name = name

    @property
    def value(self) -> Any:
        return getattr(self.parent.value, self.name)

    def set(self, new_value: Any) -> None:
        obj = self.parent.value
        if dataclasses.is_dataclass(obj) and obj.__dataclass_params__.frozen:
            self.parent.set(dataclasses.replace(obj, **{self.name: new_value}))
        elif hasattr(obj, "_replace") and hasattr(obj, "_fields"):
            self.parent.set(obj._replace(**{self.name: new_value}))
        else:
            setattr(obj, self.name, new_value)


class LensPlace(Place):
    """A place focused through a getter and a functional setter.

    `setter(outer, inner)` must return the updated outer value; it may also
    modify `outer` in place and return it.
    """

    def __init__(
        self,
        parent: Place,
        getter: Callable[[Any], Any],
        setter: Callable[[Any, Any], Any],
    ) -> None:
        self.parent = parent
        self.getter = getter
        self.setter = setter

    @property
    def value(self) -> Any:
        return self.getter(self.parent.value)

    def set(self, new_value: Any) -> None:
        self.parent.set(self.setter(self.parent.value, new_value))
