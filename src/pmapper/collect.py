"""Invoke an ``Invocable`` over argument tuples and collect typed results."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from .errors import ArgumentMismatchError, UserCallableError
from .mapper import Invocable
from .recycle import ArgumentTuple
from .values import AtomicVector, NamedList, OutputMode, coerce_scalar

logger = logging.getLogger(__name__)


class BindingStrategy(str, Enum):
    POSITIONAL = "positional"
    KEYWORD = "keyword"


@dataclass(frozen=True)
class Binding:
    """How tuple elements map onto call arguments, fixed for a whole run."""

    strategy: BindingStrategy
    fields: tuple[str | None, ...] | None = None

    def split(self, values: tuple) -> tuple[tuple, dict[str, object]]:
        if self.strategy is BindingStrategy.POSITIONAL or self.fields is None:
            return values, {}
        args: list[object] = []
        kwargs: dict[str, object] = {}
        for field, value in zip(self.fields, values):
            if field is None:
                args.append(value)
            else:
                kwargs[field] = value
        return tuple(args), kwargs


def choose_binding(invocable: Invocable, fields: tuple[str | None, ...] | None) -> Binding:
    """Named fields bind by keyword when the target's parameters are known."""
    if fields is None or invocable.signature is None:
        return Binding(BindingStrategy.POSITIONAL)
    return Binding(BindingStrategy.KEYWORD, fields)


class ListBuilder:
    def __init__(self) -> None:
        self.items: list[object] = []

    def add(self, value: object, *, index: int, name: str | None = None) -> None:
        self.items.append(value)

    def build(self, names: tuple[str, ...] | None) -> NamedList:
        return NamedList(self.items, names)


class ScalarBuilder:
    def __init__(self, mode: OutputMode) -> None:
        self.mode = mode
        self.items: list[object] = []

    def add(self, value: object, *, index: int, name: str | None = None) -> None:
        self.items.append(coerce_scalar(value, self.mode, index=index, name=name))

    def build(self, names: tuple[str, ...] | None) -> AtomicVector:
        return AtomicVector(self.mode, self.items, names)


def make_builder(mode: OutputMode | str) -> ListBuilder | ScalarBuilder:
    mode = OutputMode.parse(mode)
    if mode is OutputMode.LIST:
        return ListBuilder()
    return ScalarBuilder(mode)


def run(
    tuples: Iterable[ArgumentTuple],
    invocable: Invocable,
    mode: OutputMode | str = OutputMode.LIST,
) -> NamedList | AtomicVector:
    """Call ``invocable`` once per tuple, in order, and collect the results.

    The first failure aborts the run: binding problems raise
    ``ArgumentMismatchError``, scalar-mode violations raise
    ``TypeCoercionError``/``LengthOneViolation`` and exceptions from the
    function itself are wrapped in ``UserCallableError``. Every one carries
    the 0-based ``index`` of the failing tuple.
    """
    mode = OutputMode.parse(mode)
    tuples = list(tuples)
    builder = make_builder(mode)
    binding = choose_binding(invocable, tuples[0].fields if tuples else None)
    logger.debug(
        "calling %s over %d tuples (mode=%s, binding=%s)",
        invocable.describe(),
        len(tuples),
        mode.value,
        binding.strategy.value,
    )

    for index, tup in enumerate(tuples):
        args, kwargs = binding.split(tup.values)
        if index == 0:
            # Every tuple shares one field layout, so the first bind decides.
            try:
                invocable.check_binding(args, kwargs)
            except TypeError as err:
                raise ArgumentMismatchError(
                    f"can't call {invocable.describe()}: {err}", index=index, name=tup.name
                ) from err
        try:
            result = invocable(*args, **kwargs)
        except Exception as err:
            logger.debug("call at index %d failed with %s", index, type(err).__name__)
            raise UserCallableError(err, index=index, name=tup.name) from err
        builder.add(result, index=index, name=tup.name)

    names = None
    if tuples and tuples[0].name is not None:
        names = tuple(tup.name for tup in tuples)
    logger.debug("finished %d calls", len(tuples))
    return builder.build(names)
