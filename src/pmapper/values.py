"""Input sequences, output containers and scalar coercion."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

import jax
import jax.numpy as jnp
import numpy as np

from .errors import InvalidModeError, LengthOneViolation, TypeCoercionError

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class OutputMode(str, Enum):
    LIST = "list"
    LOGICAL = "logical"
    INTEGER = "integer"
    DOUBLE = "double"
    CHARACTER = "character"
    RAW = "raw"

    @classmethod
    def parse(cls, mode: "OutputMode | str") -> "OutputMode":
        if isinstance(mode, cls):
            return mode
        try:
            return cls(mode)
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise InvalidModeError(f"Unknown output mode {mode!r}; expected one of {choices}") from None

    @property
    def is_scalar(self) -> bool:
        return self is not OutputMode.LIST


_MODE_DTYPES = {
    OutputMode.LOGICAL: np.bool_,
    OutputMode.INTEGER: np.int64,
    OutputMode.DOUBLE: np.float64,
    # numpy's fixed-width str_ drops trailing NULs.
    OutputMode.CHARACTER: np.object_,
    OutputMode.RAW: np.uint8,
}


def _character_array(data) -> np.ndarray:
    items = data.tolist() if isinstance(data, np.ndarray) else list(data)
    out = np.empty(len(items), dtype=np.object_)
    for i, item in enumerate(items):
        out[i] = str(item)
    return out


@dataclass(frozen=True)
class InputSequence:
    """Normalised input: element values plus optional per-position names."""

    values: tuple
    names: tuple[str, ...] | None = None

    def __len__(self) -> int:
        return len(self.values)


class NamedList(list):
    """List-mode result; ``names`` is ``None`` or one name per element."""

    def __init__(self, items: Iterable = (), names: Iterable[str] | None = None) -> None:
        super().__init__(items)
        if names is not None:
            names = tuple(names)
            if len(names) != len(self):
                raise ValueError(f"NamedList got {len(names)} names for {len(self)} elements")
        self.names = names

    def get_named(self, name: str):
        if self.names is None or name not in self.names:
            raise KeyError(name)
        return self[self.names.index(name)]

    def to_dict(self) -> dict:
        if self.names is None:
            raise ValueError("NamedList has no names")
        return dict(zip(self.names, self))

    def __repr__(self) -> str:
        if self.names is None:
            return f"NamedList({list.__repr__(self)})"
        return f"NamedList({list.__repr__(self)}, names={self.names!r})"


class AtomicVector:
    """Homogeneous scalar-mode result backed by a 1-d numpy array."""

    __hash__ = None

    def __init__(self, mode: OutputMode | str, data, names: Iterable[str] | None = None) -> None:
        self.mode = OutputMode.parse(mode)
        if not self.mode.is_scalar:
            raise InvalidModeError("AtomicVector requires a scalar output mode")
        if self.mode is OutputMode.CHARACTER:
            self.data = _character_array(data)
        else:
            self.data = np.asarray(data, dtype=_MODE_DTYPES[self.mode]).reshape(-1)
        if names is not None:
            names = tuple(names)
            if len(names) != len(self.data):
                raise ValueError(f"AtomicVector got {len(names)} names for {len(self.data)} elements")
        self.names = names

    def __len__(self) -> int:
        return int(self.data.shape[0])

    def __iter__(self):
        return iter(self.data.tolist())

    def __getitem__(self, key):
        if isinstance(key, str):
            if self.names is None or key not in self.names:
                raise KeyError(key)
            key = self.names.index(key)
        item = self.data[key]
        return item.item() if isinstance(item, np.generic) else item

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AtomicVector):
            return (
                self.mode is other.mode
                and self.names == other.names
                and bool(np.array_equal(self.data, other.data))
            )
        if isinstance(other, (list, tuple)):
            return self.tolist() == list(other)
        return NotImplemented

    def tolist(self) -> list:
        return self.data.tolist()

    def to_dict(self) -> dict:
        if self.names is None:
            raise ValueError("AtomicVector has no names")
        return dict(zip(self.names, self.tolist()))

    def to_jax(self):
        if self.mode is OutputMode.CHARACTER:
            raise TypeError("character vectors have no jax representation")
        return jnp.asarray(self.data)

    def __repr__(self) -> str:
        names = "" if self.names is None else f", names={self.names!r}"
        return f"AtomicVector({self.mode.value!r}, {self.tolist()!r}{names})"


def is_array(value: object) -> bool:
    return isinstance(value, (np.ndarray, jax.Array))


def as_sequence(value: object) -> InputSequence:
    """Normalise one input into an ``InputSequence``.

    ``None`` is empty; strings, bytes and non-iterables are single elements;
    mappings contribute their keys as names; arrays iterate their first axis.
    """
    if isinstance(value, InputSequence):
        return value
    if value is None:
        return InputSequence(())
    if isinstance(value, (NamedList, AtomicVector)):
        return InputSequence(tuple(value), value.names)
    if isinstance(value, Mapping):
        return InputSequence(tuple(value.values()), tuple(str(key) for key in value.keys()))
    if is_array(value):
        if value.ndim == 0:
            return InputSequence((value,))
        return InputSequence(tuple(value[i] for i in range(value.shape[0])))
    if isinstance(value, (str, bytes, bytearray)):
        return InputSequence((value,))
    if isinstance(value, Iterable):
        return InputSequence(tuple(value))
    return InputSequence((value,))


def _describe(value: object) -> str:
    if value is None:
        return "None"
    if is_array(value):
        return f"an array of shape {tuple(int(d) for d in value.shape)}"
    if isinstance(value, (list, tuple, NamedList, AtomicVector, Mapping)):
        return f"a {type(value).__name__} of length {len(value)}"
    return f"a {type(value).__name__}"


def _unwrap(value: object, mode: OutputMode, *, index: int, name: str | None):
    def too_long() -> LengthOneViolation:
        return LengthOneViolation(
            f"Result must be a single {mode.value}, not {_describe(value)}",
            index=index,
            mode=mode.value,
            found=_describe(value),
            name=name,
        )

    if value is None:
        raise too_long()
    if is_array(value):
        if int(value.size) != 1:
            raise too_long()
        return value.item()
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, AtomicVector):
        if len(value) != 1:
            raise too_long()
        return value.tolist()[0]
    if isinstance(value, (list, tuple, NamedList, Mapping, set, frozenset)):
        if len(value) != 1:
            raise too_long()
        raise TypeCoercionError(
            f"Result must be a single {mode.value}, not {_describe(value)}",
            index=index,
            mode=mode.value,
            found=_describe(value),
            name=name,
        )
    if isinstance(value, (bytes, bytearray)) and mode is OutputMode.RAW and len(value) != 1:
        raise too_long()
    return value


def _coerce(value: object, mode: OutputMode):
    if mode is OutputMode.LOGICAL:
        if isinstance(value, bool):
            return value
    elif mode is OutputMode.INTEGER:
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, int) and _INT64_MIN <= value <= _INT64_MAX:
            return value
        if isinstance(value, float) and math.isfinite(value) and value.is_integer():
            if _INT64_MIN <= value <= _INT64_MAX:
                return int(value)
    elif mode is OutputMode.DOUBLE:
        if isinstance(value, (bool, int, float)):
            try:
                return float(value)
            except OverflowError:
                return None
    elif mode is OutputMode.CHARACTER:
        if isinstance(value, str):
            return value
        if isinstance(value, (bool, int, float, complex)):
            # Huge ints exceed the interpreter's str() digit limit.
            try:
                return str(value)
            except ValueError:
                return None
    elif mode is OutputMode.RAW:
        if isinstance(value, (bytes, bytearray)):
            return value[0]
        if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 255:
            return value
    return None


def coerce_scalar(value: object, mode: OutputMode, *, index: int, name: str | None = None):
    """Check one call result against a scalar mode and return the coerced value."""
    scalar = _unwrap(value, mode, index=index, name=name)
    coerced = _coerce(scalar, mode)
    if coerced is None:
        raise TypeCoercionError(
            f"Can't coerce {_describe(scalar)} ({scalar!r}) to {mode.value}",
            index=index,
            mode=mode.value,
            found=_describe(scalar),
            name=name,
        )
    return coerced
