"""Parser for the formula shorthand."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NoReturn

from .ast import Binary, Call, Constant, Expr, Name, Number, Placeholder, String, Subscript, Unary
from .lexer import Token, tokenize

_CONSTANTS = {"True", "False", "None", "pi", "inf", "nan"}
_COMPARISONS = {"==", "!=", "<", "<=", ">", ">="}

# (left, right) binding powers; right > left means left-associative.
_BINARY_BP = {
    "or": (1, 2),
    "and": (3, 4),
    "==": (7, 8),
    "!=": (7, 8),
    "<": (7, 8),
    "<=": (7, 8),
    ">": (7, 8),
    ">=": (7, 8),
    "+": (9, 10),
    "-": (9, 10),
    "*": (11, 12),
    "/": (11, 12),
    "//": (11, 12),
    "%": (11, 12),
    "**": (15, 15),
}
_NOT_BP = 5
_UNARY_BP = 13


class ParseError(SyntaxError):
    def __init__(
        self,
        message: str,
        start: int,
        end: int,
        expected: tuple[str, ...] = (),
        found: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.start = start
        self.end = end
        self.expected = expected
        self.found = found

    def __str__(self) -> str:
        parts = [f"{self.message} at column {self.start}"]
        if self.found is not None:
            parts.append(f"got {self.found}")
        if self.expected:
            parts.append(f"wanted {' or '.join(self.expected)}")
        return ", ".join(parts)


@dataclass
class _Parser:
    tokens: list[Token]
    index: int = 0

    def parse_formula(self) -> Expr:
        self._expect("TILDE")
        expr = self._parse_expression(0)
        self._expect("EOF")
        return expr

    def _peek(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        self.index += 1
        return self.tokens[self.index - 1]

    def _expect(self, kind: str) -> Token:
        if self._peek().kind == kind:
            return self._advance()
        self._error(expected=(kind,))

    def _error(self, tok: Token | None = None, *, message: str = "Unexpected token", expected: tuple[str, ...] = ()) -> NoReturn:
        tok = tok or self._peek()
        if tok.kind == "EOF":
            found = "end of formula"
        else:
            found = repr(tok.text) if tok.text else tok.kind
        raise ParseError(message, tok.pos, tok.end, expected=tuple(dict.fromkeys(expected)), found=found)

    def _parse_expression(self, min_bp: int) -> Expr:
        left = self._parse_prefix()

        while True:
            tok = self._peek()
            if tok.kind != "OP" or tok.text not in _BINARY_BP:
                break
            lbp, rbp = _BINARY_BP[tok.text]
            if lbp < min_bp:
                break
            if tok.text in _COMPARISONS and isinstance(left, Binary) and left.op in _COMPARISONS:
                self._error(tok, message="Chained comparisons are not supported")
            self._advance()
            right = self._parse_expression(rbp)
            left = Binary(op=tok.text, left=left, right=right)

        return left

    def _parse_prefix(self) -> Expr:
        tok = self._peek()
        if tok.kind == "OP" and tok.text == "not":
            self._advance()
            return Unary(op="not", operand=self._parse_expression(_NOT_BP))
        if tok.kind == "OP" and tok.text in {"-", "+"}:
            self._advance()
            return Unary(op=tok.text, operand=self._parse_expression(_UNARY_BP))
        return self._parse_postfix(self._parse_atom())

    def _parse_atom(self) -> Expr:
        tok = self._peek()
        if tok.kind == "NUMBER":
            self._advance()
            if any(ch in tok.text for ch in ".eE"):
                return Number(value=float(tok.text))
            return Number(value=int(tok.text))
        if tok.kind == "STRING":
            self._advance()
            return String(value=tok.text)
        if tok.kind == "PLACEHOLDER":
            self._advance()
            return Placeholder(position=_placeholder_position(tok.text))
        if tok.kind == "NAME":
            self._advance()
            if tok.text in _CONSTANTS:
                return Constant(name=tok.text)
            return Name(value=tok.text)
        if tok.kind == "LPAREN":
            self._advance()
            expr = self._parse_expression(0)
            self._expect("RPAREN")
            return expr
        self._error(tok, expected=("NUMBER", "STRING", "PLACEHOLDER", "NAME", "LPAREN"))
        raise AssertionError("unreachable")

    def _parse_postfix(self, expr: Expr) -> Expr:
        while True:
            tok = self._peek()
            if tok.kind == "LPAREN":
                self._advance()
                args: list[Expr] = []
                if self._peek().kind != "RPAREN":
                    args.append(self._parse_expression(0))
                    while self._peek().kind == "COMMA":
                        self._advance()
                        args.append(self._parse_expression(0))
                self._expect("RPAREN")
                expr = Call(func=expr, args=tuple(args))
                continue
            if tok.kind == "LBRACK":
                self._advance()
                index = self._parse_expression(0)
                self._expect("RBRACK")
                expr = Subscript(value=expr, index=index)
                continue
            return expr


def _placeholder_position(text: str) -> int:
    if text in {".", ".x"}:
        return 1
    if text == ".y":
        return 2
    return int(text[2:])


def parse_formula(source: str) -> Expr:
    tokens = tokenize(source)
    parser = _Parser(tokens=tokens)
    return parser.parse_formula()
