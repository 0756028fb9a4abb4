"""Structured error types for adaptation, recycling and per-call failures."""

from __future__ import annotations

from dataclasses import dataclass

from .parser import ParseError


class PMapError(Exception):
    """Base class for structured pmapper errors."""


class InvalidCallableError(PMapError, TypeError):
    """The given function or shorthand cannot be turned into an invocable."""

    def __init__(self, message: str, *, span: tuple[int, int] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.span = span

    @classmethod
    def from_parse_error(cls, source: str, err: ParseError) -> "InvalidCallableError":
        return cls(f"Invalid formula {source!r}: {err}", span=(err.start, err.end))

    def __str__(self) -> str:
        return self.message


class InvalidModeError(PMapError, ValueError):
    """Unknown output mode."""


@dataclass(frozen=True)
class LengthMismatchError(PMapError, ValueError):
    """An input cannot be recycled to the common length."""

    position: int
    length: int
    expected: int
    name: str | None = None

    def __str__(self) -> str:
        label = f"`{self.name}`" if self.name else f"at position {self.position}"
        return f"Input {label} must have length 1 or {self.expected}, not {self.length}"


class CallError(PMapError):
    """Failure tied to one argument tuple.

    ``index`` is the 0-based position of the tuple; ``name`` is its name when
    the output is named.
    """

    def __init__(self, message: str, *, index: int, name: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.index = index
        self.name = name

    def __str__(self) -> str:
        where = f"index {self.index}"
        if self.name is not None:
            where += f" ({self.name!r})"
        return f"At {where}: {self.message}"


class ArgumentMismatchError(CallError, TypeError):
    """Tuple elements cannot be bound to the invocable's parameters."""


class ResultError(CallError):
    """A scalar-mode result broke the one-value-of-the-target-type contract."""

    def __init__(self, message: str, *, index: int, mode: str, found: str, name: str | None = None) -> None:
        super().__init__(message, index=index, name=name)
        self.mode = mode
        self.found = found


class TypeCoercionError(ResultError, TypeError):
    """Result cannot be coerced to the target scalar type."""


class LengthOneViolation(ResultError, ValueError):
    """Result does not have exactly one element."""


class UserCallableError(CallError):
    """The user function raised; the original exception is kept as ``original``."""

    def __init__(self, original: BaseException, *, index: int, name: str | None = None) -> None:
        message = f"{type(original).__name__}: {original}"
        super().__init__(message, index=index, name=name)
        self.original = original
