"""Lexer: formula text -> typed tokens."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from gridcalc.calc._errors import LexError, LexErrorKind
from gridcalc.calc._functions import FUNCTION_KEYWORDS


class TokenKind(Enum):
    NUMBER = "number"
    CELL_REF = "cell"
    OPERATOR = "op"
    FUNCTION = "func"
    LPAREN = "("
    RPAREN = ")"
    RANGE_SEP = ":"
    EOF = "eof"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    start: int


# ---------------------------------------------------------------------------
# Token patterns
# ---------------------------------------------------------------------------

# Decimal separator may be '.' or ','
NUMBER_RE = re.compile(r"^[0-9]+(?:[.,][0-9]+)?$")
CELL_REF_RE = re.compile(r"^[A-Za-z][0-9]{1,2}$")
_WORD_CHAR_RE = re.compile(r"[A-Za-z0-9.,]")

_SINGLE_CHAR_TOKENS: dict[str, TokenKind] = {
    "+": TokenKind.OPERATOR,
    "-": TokenKind.OPERATOR,
    "*": TokenKind.OPERATOR,
    "/": TokenKind.OPERATOR,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ":": TokenKind.RANGE_SEP,
}


def is_number(text: str) -> bool:
    return NUMBER_RE.match(text) is not None


def to_number(text: str) -> float:
    """Numeric value of a NUMBER token, accepting ``,`` as decimal point."""
    return float(text.replace(",", "."))


def _classify_word(word: str, start: int, keywords: frozenset[str]) -> Token | LexError:
    """Decide what a run of letters, digits and separators is."""
    if NUMBER_RE.match(word):
        return Token(TokenKind.NUMBER, word, start)
    if CELL_REF_RE.match(word):
        return Token(TokenKind.CELL_REF, word, start)
    if word.isalpha() and word.upper() in keywords:
        return Token(TokenKind.FUNCTION, word, start)

    if word[0].isdigit() or word[0] in ".,":
        kind = LexErrorKind.INVALID_NUMBER
    elif len(word) == 1 or not word[1].isalpha():
        # One letter, then anything but 1-2 digits: B, B001, A1.5
        kind = LexErrorKind.INVALID_CELL
    else:
        kind = LexErrorKind.UNKNOWN_FUNCTION
    return LexError(kind, word[0], start, word)


def tokenize(
    text: str,
    keywords: Iterable[str] | None = None,
    max_length: int | None = None,
) -> list[Token] | LexError:
    """Split *text* into tokens, ending with an EOF token.

    Fails fast: the first bad character or ill-formed run is returned as a
    :class:`LexError` and nothing else is scanned.
    """
    if max_length is not None and len(text) > max_length:
        return LexError(LexErrorKind.FORMULA_TOO_LONG, text[max_length], max_length)

    known = (
        FUNCTION_KEYWORDS
        if keywords is None
        else frozenset(k.upper() for k in keywords)
    )
    tokens: list[Token] = []
    pos = 0
    length = len(text)

    while pos < length:
        ch = text[pos]

        if ch.isspace():
            pos += 1
            continue

        kind = _SINGLE_CHAR_TOKENS.get(ch)
        if kind is not None:
            tokens.append(Token(kind, ch, pos))
            pos += 1
            continue

        if _WORD_CHAR_RE.match(ch):
            end = pos
            while end < length and _WORD_CHAR_RE.match(text[end]):
                end += 1
            result = _classify_word(text[pos:end], pos, known)
            if isinstance(result, LexError):
                return result
            tokens.append(result)
            pos = end
            continue

        return LexError(LexErrorKind.INVALID_CHAR, ch, pos, ch)

    tokens.append(Token(TokenKind.EOF, "", length))
    return tokens
