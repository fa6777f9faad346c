"""
nudge: structure-aware mutation of existing values for property-based
testing and fuzzing.

Instead of generating values from nothing, nudge takes a value and moves it
somewhere nearby, optionally only toward simpler values ("shrinking").
Mutators declare their candidate edits to a registry, and the `Session`
engine picks exactly one uniformly at random without materializing them.

    from nudge import Session, mutators as m

    session = Session(seed=7)
    value = session.mutate_with(m.tuple_(m.u8(), m.bool_()), (42, True))
"""

from nudge.candidates import Candidates, Context
from nudge.check import Check, CheckEmptyCorpus, CheckFailed, CheckMutatorError, CheckPassed, CheckResult
from nudge.errors import (
    Exhausted,
    InvalidRange,
    MutationError,
    MutatorContractError,
    MutatorError,
    ignore_exhausted,
)
from nudge.places import AttrPlace, Box, ItemPlace, LensPlace, Place
from nudge.rng import Rng
from nudge.session import Session
from nudge.types import Err, Ok

__all__ = [
    "Candidates",
    "Context",
    "Check",
    "CheckEmptyCorpus",
    "CheckFailed",
    "CheckMutatorError",
    "CheckPassed",
    "CheckResult",
    "Exhausted",
    "InvalidRange",
    "MutationError",
    "MutatorContractError",
    "MutatorError",
    "ignore_exhausted",
    "AttrPlace",
    "Box",
    "ItemPlace",
    "LensPlace",
    "Place",
    "Rng",
    "Session",
    "Err",
    "Ok",
]
