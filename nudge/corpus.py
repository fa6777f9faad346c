"""
The working set of values a property check starts from and mutates.

Members are deep-copied on the way in so that mutating them in place never
touches the caller's objects. A member whose mutator is exhausted is removed
for good.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Iterable, Iterator

from nudge.rng import Rng

logger = logging.getLogger(__name__)


class Corpus:
    """An ordered, shrink-only collection of test values."""

    def __init__(self, values: Iterable[Any]) -> None:
        self._values = [copy.deepcopy(v) for v in values]
        self.removed = 0

    def __len__(self) -> int:
        return len(self._values)

    def __bool__(self) -> bool:
        return bool(self._values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._values)

    def __getitem__(self, index: int) -> Any:
        return self._values[index]

    def __setitem__(self, index: int, value: Any) -> None:
        self._values[index] = value

    def choose_index(self, rng: Rng) -> int:
        """Pick a member uniformly at random."""
        index = rng.index(len(self._values))
        if index is None:
            raise IndexError("cannot choose from an empty corpus")
        return index

    def remove(self, index: int) -> Any:
        value = self._values.pop(index)
        self.removed += 1
        logger.info(
            f"[-] Mutator exhausted on corpus member {index}; {len(self._values)} remaining."
        )
        return value
