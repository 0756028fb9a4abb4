"""AST nodes for the formula shorthand."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Number:
    value: int | float


@dataclass(frozen=True)
class String:
    value: str


@dataclass(frozen=True)
class Constant:
    """``True``, ``False``, ``None``, ``pi``, ``inf`` or ``nan``."""

    name: str


@dataclass(frozen=True)
class Placeholder:
    """Positional argument reference; ``position`` is 1-based."""

    position: int


@dataclass(frozen=True)
class Name:
    value: str


@dataclass(frozen=True)
class Unary:
    op: str
    operand: "Expr"


@dataclass(frozen=True)
class Binary:
    op: str
    left: "Expr"
    right: "Expr"


@dataclass(frozen=True)
class Call:
    func: "Expr"
    args: tuple["Expr", ...]


@dataclass(frozen=True)
class Subscript:
    value: "Expr"
    index: "Expr"


Expr = Union[Number, String, Constant, Placeholder, Name, Unary, Binary, Call, Subscript]


def max_placeholder(expr: Expr) -> int:
    """Highest placeholder position referenced by ``expr`` (0 if none)."""
    if isinstance(expr, Placeholder):
        return expr.position
    if isinstance(expr, Unary):
        return max_placeholder(expr.operand)
    if isinstance(expr, Binary):
        return max(max_placeholder(expr.left), max_placeholder(expr.right))
    if isinstance(expr, Call):
        return max([max_placeholder(expr.func), *(max_placeholder(arg) for arg in expr.args)])
    if isinstance(expr, Subscript):
        return max(max_placeholder(expr.value), max_placeholder(expr.index))
    return 0
