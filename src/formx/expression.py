"""Declarative expression parser.

Turns text such as

    validator(
        [pattern(regex.email, element("#email")), not(changed(element("#email")))],
        enable("#submit")
    )

into a small expression tree. Nothing is evaluated here; the registry module
maps the tree onto constructors.

Grammar:
    expr     = call | name | literal | list
    call     = name '(' [expr (',' expr)*] ')'
    name     = IDENT ('.' IDENT)*
    list     = '[' [expr (',' expr)*] ']'
    literal  = NUMBER | STRING | 'true' | 'false' | 'null'

Strings take single or double quotes with backslash escapes. '#' starts a
comment when it appears outside a string. A trailing comma is allowed inside
argument lists and list literals.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from formx.errors import ParseError


@dataclass(frozen=True)
class Literal:
    value: Any


@dataclass(frozen=True)
class Name:
    path: tuple[str, ...]

    @property
    def dotted(self) -> str:
        return ".".join(self.path)


@dataclass(frozen=True)
class Call:
    name: Name
    args: tuple[Node, ...]


@dataclass(frozen=True)
class ListExpr:
    items: tuple[Node, ...]


Node = Union[Literal, Name, Call, ListExpr]


class ExpressionParser:
    """Recursive-descent parser over a pre-built token list."""

    # Token types
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    LBRACKET = "LBRACKET"
    RBRACKET = "RBRACKET"
    COMMA = "COMMA"
    DOT = "DOT"
    IDENT = "IDENT"
    NUMBER = "NUMBER"
    STRING = "STRING"
    KEYWORD = "KEYWORD"
    EOF = "EOF"

    PUNCTUATION = {
        "(": LPAREN,
        ")": RPAREN,
        "[": LBRACKET,
        "]": RBRACKET,
        ",": COMMA,
        ".": DOT,
    }
    KEYWORDS = {"true": True, "false": False, "null": None}
    ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\"}

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        # (type, value, position)
        self.tokens: list[tuple[str, Any, int]] = []
        self.token_pos = 0
        self._tokenize()

    def _tokenize(self) -> None:
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]

            if ch.isspace():
                self.pos += 1
            elif ch == "#":
                while self.pos < len(text) and text[self.pos] != "\n":
                    self.pos += 1
            elif ch in "\"'":
                start = self.pos
                self.tokens.append((self.STRING, self._read_string(ch), start))
            elif ch.isdigit() or (
                ch in "-+" and self.pos + 1 < len(text) and text[self.pos + 1].isdigit()
            ):
                start = self.pos
                self.tokens.append((self.NUMBER, self._read_number(), start))
            elif ch.isalpha() or ch == "_":
                start = self.pos
                ident = self._read_ident()
                if ident in self.KEYWORDS:
                    self.tokens.append((self.KEYWORD, self.KEYWORDS[ident], start))
                else:
                    self.tokens.append((self.IDENT, ident, start))
            elif ch in self.PUNCTUATION:
                self.tokens.append((self.PUNCTUATION[ch], ch, self.pos))
                self.pos += 1
            else:
                raise ParseError(f"Unexpected character {ch!r}", self.pos)

        self.tokens.append((self.EOF, None, self.pos))

    def _read_string(self, quote: str) -> str:
        start = self.pos
        self.pos += 1  # opening quote
        result = []
        while self.pos < len(self.text) and self.text[self.pos] != quote:
            ch = self.text[self.pos]
            if ch == "\\" and self.pos + 1 < len(self.text):
                escaped = self.text[self.pos + 1]
                result.append(self.ESCAPES.get(escaped, escaped))
                self.pos += 2
            else:
                result.append(ch)
                self.pos += 1
        if self.pos >= len(self.text):
            raise ParseError("Unterminated string literal", start)
        self.pos += 1  # closing quote
        return "".join(result)

    def _read_number(self) -> int | float:
        start = self.pos
        if self.text[self.pos] in "-+":
            self.pos += 1
        while self.pos < len(self.text) and (
            self.text[self.pos].isdigit() or self.text[self.pos] == "."
        ):
            self.pos += 1
        literal = self.text[start : self.pos]
        try:
            return float(literal) if "." in literal else int(literal)
        except ValueError:
            raise ParseError(f"Invalid number {literal!r}", start) from None

    def _read_ident(self) -> str:
        start = self.pos
        while self.pos < len(self.text) and (
            self.text[self.pos].isalnum() or self.text[self.pos] == "_"
        ):
            self.pos += 1
        return self.text[start : self.pos]

    def _peek(self) -> tuple[str, Any, int]:
        return self.tokens[self.token_pos]

    def _consume(self) -> tuple[str, Any, int]:
        token = self.tokens[self.token_pos]
        if token[0] != self.EOF:
            self.token_pos += 1
        return token

    def _expect(self, token_type: str) -> tuple[str, Any, int]:
        token = self._consume()
        if token[0] != token_type:
            raise ParseError(f"Expected {token_type}, got {self._describe(token)}", token[2])
        return token

    @staticmethod
    def _describe(token: tuple[str, Any, int]) -> str:
        if token[0] == ExpressionParser.EOF:
            return "end of input"
        return f"{token[0]} {token[1]!r}"

    def parse(self) -> Node:
        """Parse the whole text as a single expression."""
        node = self._parse_expr()
        token = self._peek()
        if token[0] != self.EOF:
            raise ParseError(f"Unexpected {self._describe(token)}", token[2])
        return node

    def _parse_expr(self) -> Node:
        token = self._peek()
        kind = token[0]

        if kind in (self.NUMBER, self.STRING, self.KEYWORD):
            self._consume()
            return Literal(token[1])
        if kind == self.LBRACKET:
            self._consume()
            return ListExpr(self._parse_sequence(self.RBRACKET))
        if kind == self.IDENT:
            name = self._parse_name()
            if self._peek()[0] == self.LPAREN:
                self._consume()
                return Call(name, self._parse_sequence(self.RPAREN))
            return name

        raise ParseError(f"Unexpected {self._describe(token)}", token[2])

    def _parse_name(self) -> Name:
        parts = [self._expect(self.IDENT)[1]]
        while self._peek()[0] == self.DOT:
            self._consume()
            parts.append(self._expect(self.IDENT)[1])
        return Name(tuple(parts))

    def _parse_sequence(self, closing: str) -> tuple[Node, ...]:
        """Parse comma-separated expressions up to and including `closing`."""
        items: list[Node] = []
        while self._peek()[0] != closing:
            items.append(self._parse_expr())
            if self._peek()[0] == self.COMMA:
                self._consume()
            elif self._peek()[0] != closing:
                token = self._peek()
                raise ParseError(
                    f"Expected ',' or {closing}, got {self._describe(token)}", token[2]
                )
        self._expect(closing)
        return tuple(items)


def parse(text: str) -> Node:
    """Parse an expression into a tree.

    Example:
        parse("range(1, 10, constant(5))")
        # Call(Name(("range",)), (Literal(1), Literal(10), Call(Name(("constant",)), (Literal(5),))))
    """
    return ExpressionParser(text).parse()
