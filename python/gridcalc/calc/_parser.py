"""Recursive descent parser: tokens -> expression tree.

Grammar, lowest to highest precedence::

    expr   := term (('+'|'-') term)*
    term   := factor (('*'|'/') factor)*
    factor := NUMBER | CELLREF | FUNC '(' CELLREF ':' CELLREF ')' | '(' expr ')'

All binary operators are left-associative. The first token that does not fit
ends parsing with a :class:`ParseError`; no partial trees are returned.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from gridcalc.calc._ast import BinaryOp, CellRef, FuncRange, Node, NumberLit
from gridcalc.calc._errors import LexError, ParseError
from gridcalc.calc._lexer import Token, TokenKind, to_number, tokenize

_FACTOR_HEADS = (TokenKind.NUMBER, TokenKind.CELL_REF, TokenKind.FUNCTION, TokenKind.LPAREN)

# Function form after the keyword: ( CELL : CELL )
_FUNCTION_PATTERN = (
    TokenKind.LPAREN,
    TokenKind.CELL_REF,
    TokenKind.RANGE_SEP,
    TokenKind.CELL_REF,
    TokenKind.RPAREN,
)


class FormulaParser:
    """Parses one token sequence. Create a new instance per formula."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self._tokens = tokens
        self._pos = 0
        end = tokens[-1].start + len(tokens[-1].text) if tokens else 0
        # Stands in for anything read past the end of the sequence
        self._eof = Token(TokenKind.EOF, "", end)

    def parse(self) -> Node | ParseError:
        """Parse a complete formula; trailing tokens are an error."""
        tree = self._expression()
        if isinstance(tree, ParseError):
            return tree
        if self._peek().kind is not TokenKind.EOF:
            return self._error(TokenKind.EOF)
        return tree

    # ------------------------------------------------------------------
    # Token stream
    # ------------------------------------------------------------------

    def _peek(self) -> Token:
        if self._pos >= len(self._tokens):
            return self._eof
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        token = self._peek()
        if self._pos < len(self._tokens):
            self._pos += 1
        return token

    def _error(self, *expected: TokenKind) -> ParseError:
        return ParseError(expected=expected, received=self._peek(), index=self._pos)

    def _at_operator(self, ops: str) -> bool:
        token = self._peek()
        return token.kind is TokenKind.OPERATOR and token.text in ops

    # ------------------------------------------------------------------
    # Grammar rules
    # ------------------------------------------------------------------

    def _expression(self) -> Node | ParseError:
        left = self._term()
        if isinstance(left, ParseError):
            return left
        while self._at_operator("+-"):
            op = self._advance()
            right = self._term()
            if isinstance(right, ParseError):
                return right
            left = BinaryOp(op.text, left, right, left.start)
        return left

    def _term(self) -> Node | ParseError:
        left = self._factor()
        if isinstance(left, ParseError):
            return left
        while self._at_operator("*/"):
            op = self._advance()
            right = self._factor()
            if isinstance(right, ParseError):
                return right
            left = BinaryOp(op.text, left, right, left.start)
        return left

    def _factor(self) -> Node | ParseError:
        token = self._peek()

        if token.kind is TokenKind.NUMBER:
            self._advance()
            return NumberLit(to_number(token.text), token.text, token.start)

        if token.kind is TokenKind.CELL_REF:
            self._advance()
            return CellRef(token.text, token.start)

        if token.kind is TokenKind.FUNCTION:
            return self._function()

        if token.kind is TokenKind.LPAREN:
            self._advance()
            inner = self._expression()
            if isinstance(inner, ParseError):
                return inner
            if self._peek().kind is not TokenKind.RPAREN:
                return self._error(TokenKind.RPAREN)
            self._advance()
            return inner

        return self._error(*_FACTOR_HEADS)

    def _function(self) -> FuncRange | ParseError:
        keyword = self._advance()
        refs: list[CellRef] = []
        for expected in _FUNCTION_PATTERN:
            token = self._peek()
            if token.kind is not expected:
                return self._error(expected)
            if token.kind is TokenKind.CELL_REF:
                refs.append(CellRef(token.text, token.start))
            self._advance()
        return FuncRange(keyword.text.upper(), refs[0], refs[1], keyword.start)


def parse(tokens: Sequence[Token]) -> Node | ParseError:
    """Parse a token sequence (normally ending in EOF) into a tree."""
    return FormulaParser(tokens).parse()


def parse_formula(
    text: str,
    keywords: Iterable[str] | None = None,
    max_length: int | None = None,
) -> Node | LexError | ParseError:
    """Tokenize and parse formula text (without the leading marker)."""
    tokens = tokenize(text, keywords=keywords, max_length=max_length)
    if isinstance(tokens, LexError):
        return tokens
    return parse(tokens)
