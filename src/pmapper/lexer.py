"""Tokenization for the formula shorthand (``"~ .x + .y"``)."""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int
    end: int


_SINGLE_TOKENS = {
    "(": "LPAREN",
    ")": "RPAREN",
    "[": "LBRACK",
    "]": "RBRACK",
    ",": "COMMA",
    "~": "TILDE",
}

# Longest operators first so "**" wins over "*".
_OPERATORS = ("**", "//", "==", "!=", "<=", ">=", "+", "-", "*", "/", "%", "<", ">")
_WORD_OPERATORS = {"and", "or", "not"}

_NUMBER_RE = re.compile(
    r"""
    (?:[0-9][0-9_]*(?:\.[0-9_]*)?|\.[0-9][0-9_]*)   # mantissa
    (?:[eE][+\-]?[0-9]+)?                           # exponent
    """,
    re.VERBOSE,
)
_PLACEHOLDER_RE = re.compile(r"\.\.[1-9][0-9]*|\.[xy](?![A-Za-z0-9_])|\.(?![A-Za-z0-9_.])")

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", "'": "'", '"': '"', "0": "\0"}


def _is_ident_start(ch: str) -> bool:
    return ch == "_" or ch.isalpha()


def _is_ident_continue(ch: str) -> bool:
    return ch == "_" or ch.isalnum()


def _scan_string(source: str, start: int) -> tuple[str, int]:
    quote = source[start]
    i = start + 1
    out: list[str] = []
    while i < len(source):
        ch = source[i]
        if ch == quote:
            return "".join(out), i + 1
        if ch == "\\":
            if i + 1 >= len(source):
                break
            esc = source[i + 1]
            if esc not in _ESCAPES:
                raise SyntaxError(f"Unknown escape sequence \\{esc} at index {i}")
            out.append(_ESCAPES[esc])
            i += 2
            continue
        out.append(ch)
        i += 1
    raise SyntaxError(f"Unterminated string literal at index {start}")


def tokenize(source: str) -> list[Token]:
    tokens: list[Token] = []
    i = 0
    while i < len(source):
        ch = source[i]

        if ch.isspace():
            i += 1
            continue

        if ch == ".":
            m = _PLACEHOLDER_RE.match(source, i)
            if m is not None:
                text = m.group(0)
                tokens.append(Token("PLACEHOLDER", text, i, m.end()))
                i = m.end()
                continue

        if ch.isdigit() or (ch == "." and i + 1 < len(source) and source[i + 1].isdigit()):
            m = _NUMBER_RE.match(source, i)
            assert m is not None
            tokens.append(Token("NUMBER", m.group(0).replace("_", ""), i, m.end()))
            i = m.end()
            continue

        if ch in {"'", '"'}:
            value, end = _scan_string(source, i)
            tokens.append(Token("STRING", value, i, end))
            i = end
            continue

        if ch in _SINGLE_TOKENS:
            tokens.append(Token(_SINGLE_TOKENS[ch], ch, i, i + 1))
            i += 1
            continue

        op = next((op for op in _OPERATORS if source.startswith(op, i)), None)
        if op is not None:
            tokens.append(Token("OP", op, i, i + len(op)))
            i += len(op)
            continue

        if _is_ident_start(ch):
            start = i
            i += 1
            while i < len(source) and _is_ident_continue(source[i]):
                i += 1
            ident = source[start:i]
            kind = "OP" if ident in _WORD_OPERATORS else "NAME"
            tokens.append(Token(kind, ident, start, i))
            continue

        raise SyntaxError(f"Unexpected character {ch!r} at index {i}")

    tokens.append(Token("EOF", "", len(source), len(source)))
    return tokens
