"""pmapper public API."""

import logging

from .api import (
    is_table,
    parallel_map,
    parallel_map2,
    parallel_map2_chr,
    parallel_map2_dbl,
    parallel_map2_int,
    parallel_map2_lgl,
    parallel_map2_raw,
    parallel_map_chr,
    parallel_map_dbl,
    parallel_map_int,
    parallel_map_lgl,
    parallel_map_raw,
    parallel_walk,
    parallel_walk2,
    split_sequences,
    table_to_sequences,
)
from .collect import Binding, BindingStrategy, choose_binding, run
from .errors import (
    ArgumentMismatchError,
    CallError,
    InvalidCallableError,
    InvalidModeError,
    LengthMismatchError,
    LengthOneViolation,
    PMapError,
    ResultError,
    TypeCoercionError,
    UserCallableError,
)
from .mapper import FieldExtractor, Invocable, InvocableKind, adapt, extract
from .recycle import ArgumentTuple, common_length, recycle, transpose
from .values import AtomicVector, InputSequence, NamedList, OutputMode, as_sequence, coerce_scalar

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "parallel_map",
    "parallel_map2",
    "parallel_walk",
    "parallel_walk2",
    "parallel_map_lgl",
    "parallel_map_int",
    "parallel_map_dbl",
    "parallel_map_chr",
    "parallel_map_raw",
    "parallel_map2_lgl",
    "parallel_map2_int",
    "parallel_map2_dbl",
    "parallel_map2_chr",
    "parallel_map2_raw",
    "is_table",
    "split_sequences",
    "table_to_sequences",
    "adapt",
    "extract",
    "Invocable",
    "InvocableKind",
    "FieldExtractor",
    "recycle",
    "transpose",
    "common_length",
    "ArgumentTuple",
    "run",
    "Binding",
    "BindingStrategy",
    "choose_binding",
    "as_sequence",
    "coerce_scalar",
    "InputSequence",
    "NamedList",
    "AtomicVector",
    "OutputMode",
    "PMapError",
    "InvalidCallableError",
    "InvalidModeError",
    "LengthMismatchError",
    "CallError",
    "ArgumentMismatchError",
    "ResultError",
    "TypeCoercionError",
    "LengthOneViolation",
    "UserCallableError",
]
