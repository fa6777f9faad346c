"""Value types shared across nudge modules.

`Ok` and `Err` form the two-case success/failure container mutated by
`nudge.mutators.result`. They are frozen so that mutators always replace
them through their enclosing place instead of editing them in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Ok:
    """The success case of a two-case container."""

    value: Any


@dataclass(frozen=True)
class Err:
    """The failure case of a two-case container."""

    value: Any


Outcome = Union[Ok, Err]
