"""Entry points: map a function over several sequences in parallel."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .collect import run
from .mapper import adapt
from .recycle import recycle, transpose
from .values import AtomicVector, NamedList, OutputMode


def is_table(value: object) -> bool:
    return not isinstance(value, Mapping) and hasattr(value, "columns") and hasattr(value, "__getitem__")


def _column_values(column: object) -> list:
    if hasattr(column, "to_list"):
        return list(column.to_list())
    if hasattr(column, "tolist"):
        return list(column.tolist())
    return list(column)


def table_to_sequences(table: object) -> dict[str, list]:
    """Columns of a table-like object (pandas, polars, ...) as a name-keyed mapping."""
    return {str(column): _column_values(table[column]) for column in table.columns}


def split_sequences(sequences: object) -> tuple[list[object], tuple[str | None, ...] | None]:
    """Split a collection of sequences into the sequences and their field names."""
    if sequences is None:
        return [], None
    if is_table(sequences):
        sequences = table_to_sequences(sequences)
    if isinstance(sequences, Mapping):
        return list(sequences.values()), tuple(str(key) for key in sequences.keys())
    if isinstance(sequences, (NamedList, AtomicVector)):
        return list(sequences), sequences.names
    if isinstance(sequences, (str, bytes, bytearray)) or not isinstance(sequences, Iterable):
        raise TypeError(f"Expected a collection of sequences, not {type(sequences).__name__}")
    return list(sequences), None


def parallel_map(sequences: object, func: object, *args, mode: OutputMode | str = OutputMode.LIST, **kwargs):
    """Call ``func`` on aligned elements of ``sequences``.

    ``sequences`` is a list of sequences, a mapping of name to sequence (names
    are matched against ``func``'s parameters) or a table, whose columns are
    used. Length-1 sequences are recycled. ``args`` and ``kwargs`` are passed
    to every call after the per-element arguments. Returns a ``NamedList`` in
    ``"list"`` mode and an ``AtomicVector`` in the scalar modes.
    """
    mode = OutputMode.parse(mode)
    invocable = adapt(func, *args, **kwargs)
    seqs, fields = split_sequences(sequences)
    tuples = transpose(recycle(seqs, fields), fields)
    return run(tuples, invocable, mode)


def parallel_map2(x: object, y: object, func: object, *args, mode: OutputMode | str = OutputMode.LIST, **kwargs):
    """Two-sequence form of ``parallel_map``."""
    return parallel_map([x, y], func, *args, mode=mode, **kwargs)


def parallel_walk(sequences: object, func: object, *args, **kwargs):
    """Call ``func`` for its side effects and return ``sequences`` unchanged."""
    parallel_map(sequences, func, *args, **kwargs)
    return sequences


def parallel_walk2(x: object, y: object, func: object, *args, **kwargs):
    """Two-sequence form of ``parallel_walk``; returns ``x`` unchanged."""
    parallel_map([x, y], func, *args, **kwargs)
    return x


def parallel_map_lgl(sequences: object, func: object, *args, **kwargs) -> AtomicVector:
    return parallel_map(sequences, func, *args, mode=OutputMode.LOGICAL, **kwargs)


def parallel_map_int(sequences: object, func: object, *args, **kwargs) -> AtomicVector:
    return parallel_map(sequences, func, *args, mode=OutputMode.INTEGER, **kwargs)


def parallel_map_dbl(sequences: object, func: object, *args, **kwargs) -> AtomicVector:
    return parallel_map(sequences, func, *args, mode=OutputMode.DOUBLE, **kwargs)


def parallel_map_chr(sequences: object, func: object, *args, **kwargs) -> AtomicVector:
    return parallel_map(sequences, func, *args, mode=OutputMode.CHARACTER, **kwargs)


def parallel_map_raw(sequences: object, func: object, *args, **kwargs) -> AtomicVector:
    return parallel_map(sequences, func, *args, mode=OutputMode.RAW, **kwargs)


def parallel_map2_lgl(x: object, y: object, func: object, *args, **kwargs) -> AtomicVector:
    return parallel_map([x, y], func, *args, mode=OutputMode.LOGICAL, **kwargs)


def parallel_map2_int(x: object, y: object, func: object, *args, **kwargs) -> AtomicVector:
    return parallel_map([x, y], func, *args, mode=OutputMode.INTEGER, **kwargs)


def parallel_map2_dbl(x: object, y: object, func: object, *args, **kwargs) -> AtomicVector:
    return parallel_map([x, y], func, *args, mode=OutputMode.DOUBLE, **kwargs)


def parallel_map2_chr(x: object, y: object, func: object, *args, **kwargs) -> AtomicVector:
    return parallel_map([x, y], func, *args, mode=OutputMode.CHARACTER, **kwargs)


def parallel_map2_raw(x: object, y: object, func: object, *args, **kwargs) -> AtomicVector:
    return parallel_map([x, y], func, *args, mode=OutputMode.RAW, **kwargs)
