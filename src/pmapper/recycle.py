"""Length recycling and transposition of input sequences into argument tuples."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .errors import LengthMismatchError
from .values import InputSequence, as_sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArgumentTuple:
    """One aligned set of elements, one per input sequence.

    ``fields`` holds the field names shared by every tuple of a run (``None``
    entries for unnamed fields); ``name`` is the tuple's own name, used to name
    the output element.
    """

    values: tuple
    fields: tuple[str | None, ...] | None = None
    name: str | None = None

    def __len__(self) -> int:
        return len(self.values)


def normalize_fields(fields: Iterable[str | None] | None) -> tuple[str | None, ...] | None:
    if fields is None:
        return None
    normalized = tuple(field if field else None for field in fields)
    if all(field is None for field in normalized):
        return None
    return normalized


def common_length(lengths: Sequence[int]) -> int:
    """Target length: 0 if any input is empty, else the longest input."""
    if not lengths or any(length == 0 for length in lengths):
        return 0
    return max(lengths)


def recycle(sequences: Iterable[object], fields: Sequence[str | None] | None = None) -> list[InputSequence]:
    """Bring every input to the common length.

    Length-1 inputs are replicated (their names are not); inputs of length
    other than 1 must all agree, otherwise ``LengthMismatchError`` names the
    first input that disagrees with the longest one.
    """
    seqs = [as_sequence(seq) for seq in sequences]
    lengths = [len(seq) for seq in seqs]
    longest = max((length for length in lengths if length > 1), default=None)
    if longest is not None:
        for position, length in enumerate(lengths):
            if length > 1 and length != longest:
                name = fields[position] if fields is not None and position < len(fields) else None
                raise LengthMismatchError(position=position, length=length, expected=longest, name=name)

    target = common_length(lengths)
    logger.debug("recycling %d inputs with lengths %s to length %d", len(seqs), lengths, target)

    recycled: list[InputSequence] = []
    for seq, length in zip(seqs, lengths):
        if length == target:
            recycled.append(seq)
        elif target == 0:
            recycled.append(InputSequence(()))
        else:
            recycled.append(InputSequence(seq.values * target))
    return recycled


def transpose(sequences: Sequence[object], fields: Sequence[str | None] | None = None) -> list[ArgumentTuple]:
    """Turn equal-length sequences into one ``ArgumentTuple`` per position.

    Tuple names come from the first sequence that carries names.
    """
    sequences = [as_sequence(seq) for seq in sequences]
    lengths = {len(seq) for seq in sequences}
    if len(lengths) > 1:
        raise ValueError(f"transpose requires sequences of equal length, got lengths {sorted(lengths)}")
    fields = normalize_fields(fields)
    if fields is not None and len(fields) != len(sequences):
        raise ValueError(f"got {len(fields)} field names for {len(sequences)} sequences")

    count = lengths.pop() if lengths else 0
    names = next((seq.names for seq in sequences if seq.names is not None), None)
    return [
        ArgumentTuple(
            values=tuple(seq.values[i] for seq in sequences),
            fields=fields,
            name=names[i] if names is not None else None,
        )
        for i in range(count)
    ]
