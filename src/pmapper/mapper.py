"""Normalise user functions and shorthands into a single ``Invocable`` type."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum

from .errors import InvalidCallableError
from .formula import compile_formula
from .parser import ParseError
from .values import AtomicVector, NamedList

_ABSORB_ALL = inspect.Signature(
    [
        inspect.Parameter("args", inspect.Parameter.VAR_POSITIONAL),
        inspect.Parameter("kwargs", inspect.Parameter.VAR_KEYWORD),
    ]
)
_MISSING = object()


class InvocableKind(str, Enum):
    FUNCTION_VALUE = "function_value"
    POSITIONAL_FORMULA = "positional_formula"
    FIELD_EXTRACTOR = "field_extractor"


@dataclass(frozen=True, eq=False)
class Invocable:
    """Uniform callable with fixed extra arguments appended to every call.

    ``signature`` is ``None`` when the target cannot be introspected (many
    builtins); ``min_args`` is the number of arguments the target needs
    beyond what its signature reports.
    """

    kind: InvocableKind
    target: Callable
    signature: inspect.Signature | None
    args: tuple = ()
    kwargs: Mapping[str, object] = field(default_factory=dict)
    min_args: int = 0

    def call_arguments(self, args: tuple, kwargs: Mapping[str, object]) -> tuple[tuple, dict]:
        clash = set(kwargs) & set(self.kwargs)
        if clash:
            raise TypeError(f"argument {sorted(clash)[0]!r} is given both per element and as a fixed argument")
        positional = args + self.args
        keywords = {**kwargs, **self.kwargs}
        if self.signature is None or not positional or not keywords:
            return positional, keywords
        return _fill_unbound(self.signature, positional, keywords)

    def check_binding(self, args: tuple, kwargs: Mapping[str, object]) -> None:
        """Raise ``TypeError`` when the target cannot accept these arguments."""
        all_args, all_kwargs = self.call_arguments(args, kwargs)
        if len(all_args) + len(all_kwargs) < self.min_args:
            raise TypeError(f"{self.describe()} needs at least {self.min_args} arguments, got {len(all_args) + len(all_kwargs)}")
        if self.signature is not None:
            self.signature.bind(*all_args, **all_kwargs)

    def __call__(self, *args, **kwargs):
        all_args, all_kwargs = self.call_arguments(args, kwargs)
        return self.target(*all_args, **all_kwargs)

    def describe(self) -> str:
        if self.kind is InvocableKind.POSITIONAL_FORMULA:
            return f"formula {self.target.source!r}"
        if self.kind is InvocableKind.FIELD_EXTRACTOR:
            return f"extractor {list(self.target.path)!r}"
        return f"function {getattr(self.target, '__name__', type(self.target).__name__)!r}"


def _fill_unbound(signature: inspect.Signature, positional: tuple, keywords: dict) -> tuple[tuple, dict]:
    """Let keywords claim their parameters first and positionals fill the rest in order.

    Parameters named by a keyword are moved into the positional list while
    unnamed values remain, so overflow still reaches ``*args``.
    """
    queue = list(positional)
    keywords = dict(keywords)
    ordered: list[object] = []
    for param in signature.parameters.values():
        if not queue:
            break
        if param.kind not in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            break
        if param.name in keywords and param.kind is inspect.Parameter.POSITIONAL_OR_KEYWORD:
            ordered.append(keywords.pop(param.name))
        else:
            ordered.append(queue.pop(0))
    return tuple(ordered + queue), keywords


class FieldExtractor:
    """Pluck a field (or a path of fields) out of the first argument."""

    def __init__(self, path: tuple[str | int, ...], default: object = None) -> None:
        self.path = path
        self.default = default
        self.__name__ = "extractor"

    def __call__(self, *args, **kwargs):
        value = (args + tuple(kwargs.values()))[0]
        for step in self.path:
            value = _pluck(value, step)
            if value is _MISSING:
                return self.default
        return value

    def __repr__(self) -> str:
        return f"FieldExtractor({self.path!r}, default={self.default!r})"


def _pluck(value: object, key: str | int):
    if value is None:
        return _MISSING
    if isinstance(value, Mapping):
        return value.get(key, _MISSING)
    if isinstance(value, (NamedList, AtomicVector)) and isinstance(key, str):
        if value.names is None or key not in value.names:
            return _MISSING
        return value[value.names.index(key)]
    if isinstance(key, str):
        return getattr(value, key, _MISSING)
    try:
        size = len(value)
    except TypeError:
        return _MISSING
    # Bounds are checked up front: jax clamps out-of-range indices.
    if not -size <= key < size:
        return _MISSING
    return value[key]


def _is_path_step(step: object) -> bool:
    return isinstance(step, (str, int)) and not isinstance(step, bool)


def _function_signature(func: Callable) -> inspect.Signature | None:
    try:
        return inspect.signature(func)
    except (TypeError, ValueError):
        return None


def extract(*path: str | int, default: object = None) -> Invocable:
    """Build a ``FieldExtractor`` invocable with an explicit default."""
    if not path or not all(_is_path_step(step) for step in path):
        raise InvalidCallableError(f"Extractor path must be a non-empty sequence of names or indices, not {list(path)!r}")
    return Invocable(
        kind=InvocableKind.FIELD_EXTRACTOR,
        target=FieldExtractor(tuple(path), default=default),
        signature=_ABSORB_ALL,
        min_args=1,
    )


def adapt(spec: object, *args, **kwargs) -> Invocable:
    """Turn ``spec`` into an ``Invocable`` that appends ``args``/``kwargs`` to every call.

    ``spec`` may be a callable, a formula string starting with ``~``, a field
    name or index, or a tuple/list path of names and indices. An existing
    ``Invocable`` is returned as is, with any new extras appended.
    """
    if isinstance(spec, Invocable):
        if not args and not kwargs:
            return spec
        return replace(spec, args=spec.args + args, kwargs={**spec.kwargs, **kwargs})

    if isinstance(spec, str) and spec.lstrip().startswith("~"):
        try:
            formula = compile_formula(spec.strip())
        except ParseError as err:
            raise InvalidCallableError.from_parse_error(spec, err) from err
        except SyntaxError as err:
            raise InvalidCallableError(f"Invalid formula {spec!r}: {err}") from err
        return Invocable(
            kind=InvocableKind.POSITIONAL_FORMULA,
            target=formula,
            signature=_ABSORB_ALL,
            args=args,
            kwargs=kwargs,
            min_args=formula.arity,
        )

    if _is_path_step(spec):
        return replace(extract(spec), args=args, kwargs=kwargs)
    if isinstance(spec, (tuple, list)):
        return replace(extract(*spec), args=args, kwargs=kwargs)

    if callable(spec):
        return Invocable(
            kind=InvocableKind.FUNCTION_VALUE,
            target=spec,
            signature=_function_signature(spec),
            args=args,
            kwargs=kwargs,
        )

    raise InvalidCallableError(f"Can't convert {type(spec).__name__} {spec!r} to a function")
