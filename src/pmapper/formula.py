"""Compile formula shorthand into plain Python functions."""

from __future__ import annotations

import math
import operator
import os
from functools import lru_cache
from typing import Final

from .ast import Binary, Call, Constant, Expr, Name, Number, Placeholder, String, Subscript, Unary, max_placeholder
from .parser import parse_formula
from .values import NamedList

_FORMULA_CACHE_MAX: Final[int] = max(1, int(os.environ.get("PMAPPER_FORMULA_CACHE_MAX", "256")))

_FUNCTIONS: Final[dict[str, object]] = {
    "abs": abs,
    "min": min,
    "max": max,
    "round": round,
    "len": len,
    "sum": sum,
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "sqrt": math.sqrt,
    "exp": math.exp,
    "log": math.log,
    "floor": math.floor,
    "ceil": math.ceil,
}

_CONSTANT_VALUES: Final[dict[str, object]] = {
    "True": True,
    "False": False,
    "None": None,
    "pi": math.pi,
    "inf": math.inf,
    "nan": math.nan,
}

_BINARY_OPS = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
    "//": operator.floordiv,
    "%": operator.mod,
    "**": operator.pow,
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

_UNARY_OPS = {
    "-": operator.neg,
    "+": operator.pos,
    "not": operator.not_,
}


class FormulaNameError(SyntaxError):
    """Formula refers to a name outside the function whitelist."""


@lru_cache(maxsize=_FORMULA_CACHE_MAX)
def _parse_formula_cached(source: str) -> Expr:
    expr = parse_formula(source)
    _check_names(expr)
    return expr


def _check_names(expr: Expr) -> None:
    if isinstance(expr, Name):
        if expr.value not in _FUNCTIONS:
            raise FormulaNameError(f"Unknown name {expr.value!r}; available functions: {', '.join(sorted(_FUNCTIONS))}")
    elif isinstance(expr, Unary):
        _check_names(expr.operand)
    elif isinstance(expr, Binary):
        _check_names(expr.left)
        _check_names(expr.right)
    elif isinstance(expr, Call):
        if not isinstance(expr.func, Name):
            raise FormulaNameError("Only named functions can be called in a formula")
        _check_names(expr.func)
        for arg in expr.args:
            _check_names(arg)
    elif isinstance(expr, Subscript):
        _check_names(expr.value)
        _check_names(expr.index)


def _subscript(value, key):
    if isinstance(key, str) and isinstance(value, NamedList):
        return value.get_named(key)
    return value[key]


def _eval(expr: Expr, args: tuple):
    if isinstance(expr, Placeholder):
        return args[expr.position - 1]
    if isinstance(expr, Number):
        return expr.value
    if isinstance(expr, String):
        return expr.value
    if isinstance(expr, Constant):
        return _CONSTANT_VALUES[expr.name]
    if isinstance(expr, Name):
        return _FUNCTIONS[expr.value]
    if isinstance(expr, Unary):
        return _UNARY_OPS[expr.op](_eval(expr.operand, args))
    if isinstance(expr, Binary):
        if expr.op == "and":
            left = _eval(expr.left, args)
            return _eval(expr.right, args) if left else left
        if expr.op == "or":
            left = _eval(expr.left, args)
            return left if left else _eval(expr.right, args)
        return _BINARY_OPS[expr.op](_eval(expr.left, args), _eval(expr.right, args))
    if isinstance(expr, Call):
        func = _eval(expr.func, args)
        return func(*(_eval(arg, args) for arg in expr.args))
    if isinstance(expr, Subscript):
        return _subscript(_eval(expr.value, args), _eval(expr.index, args))
    raise TypeError(f"Unsupported formula node {type(expr).__name__}")


class FormulaFunction:
    """Callable form of a formula.

    Positional arguments come first, then keyword values in call order;
    ``.x``/``.``, ``.y`` and ``..n`` index into that combined tuple. Extra
    arguments are ignored.
    """

    def __init__(self, source: str, expr: Expr) -> None:
        self.source = source
        self.expr = expr
        self.arity = max_placeholder(expr)
        self.__name__ = "formula"

    def __call__(self, *args, **kwargs):
        values = args + tuple(kwargs.values())
        if len(values) < self.arity:
            raise TypeError(f"formula {self.source!r} needs {self.arity} arguments, got {len(values)}")
        return _eval(self.expr, values)

    def __repr__(self) -> str:
        return f"FormulaFunction({self.source!r})"


def compile_formula(source: str) -> FormulaFunction:
    """Parse ``source`` (which must start with ``~``) into a ``FormulaFunction``.

    Raises ``SyntaxError`` (``ParseError`` for grammar problems,
    ``FormulaNameError`` for unknown names).
    """
    return FormulaFunction(source, _parse_formula_cached(source))
