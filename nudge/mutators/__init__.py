"""
The `nudge.mutators` package contains the mutator capabilities, the leaf
mutators for scalars, the container mutators, and the combinators that glue
them together.

It is idiomatic to import it with a short alias:

    from nudge import mutators as m

    mutator = m.tuple_(m.u8(), m.option(m.char()))
"""

from nudge.mutators.base import Generate, MutateInRange, Mutator
from nudge.mutators.combinators import (
    Filter,
    FromFn,
    Just,
    Map,
    OneOf,
    Proj,
    Repeat,
    from_fn,
    just,
    one_of,
)
from nudge.mutators.containers import (
    Array,
    Cases,
    Fields,
    Option,
    Range,
    Result,
    Tuple,
    array,
    cases,
    fields,
    option,
    range_,
    result,
    tuple_,
)
from nudge.mutators.defaults import default_for, derive, register_default
from nudge.mutators.scalars import (
    CHAR_PARTITIONS,
    Bool,
    Char,
    Float,
    Integer,
    Unit,
    bool_,
    char,
    f32,
    f64,
    i8,
    i16,
    i32,
    i64,
    i128,
    u8,
    u16,
    u32,
    u64,
    u128,
    unit,
)

__all__ = [
    "Generate",
    "MutateInRange",
    "Mutator",
    "Filter",
    "FromFn",
    "Just",
    "Map",
    "OneOf",
    "Proj",
    "Repeat",
    "from_fn",
    "just",
    "one_of",
    "Array",
    "Cases",
    "Fields",
    "Option",
    "Range",
    "Result",
    "Tuple",
    "array",
    "cases",
    "fields",
    "option",
    "range_",
    "result",
    "tuple_",
    "default_for",
    "derive",
    "register_default",
    "CHAR_PARTITIONS",
    "Bool",
    "Char",
    "Float",
    "Integer",
    "Unit",
    "bool_",
    "char",
    "f32",
    "f64",
    "i8",
    "i16",
    "i32",
    "i64",
    "i128",
    "u8",
    "u16",
    "u32",
    "u64",
    "u128",
    "unit",
]
