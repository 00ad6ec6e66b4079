import logging
import string
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Union

from tinybasic.errors import LexicalError, NumberTooLarge, UnexpectedCharacter, UnterminatedStringLiteral
from tinybasic.uneditable import uneditable

logger = logging.getLogger(__name__)

DIGITS = frozenset(string.digits)
LETTERS = frozenset(string.ascii_uppercase)
BLANKS = frozenset(" \t\r")


class TokenKind(Enum):
    # Literals
    STRING = "STRING"
    NUMBER = "NUMBER"
    IDENTIFIER = "IDENTIFIER"

    # Punctuation
    LPAREN = "("
    RPAREN = ")"
    COMMA = ","

    # Arithmetic operators
    PLUS = "+"
    MINUS = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    # Relational operators
    EQUALS = "="
    NOT_EQUAL = "<>"
    LESS = "<"
    LESS_EQUAL = "<="
    GREATER = ">"
    GREATER_EQUAL = ">="

    # Special
    NEWLINE = "NEWLINE"
    EOF = "EOF"


SINGLE_CHAR_TOKENS = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.MULTIPLY,
    "/": TokenKind.DIVIDE,
    "=": TokenKind.EQUALS,
}


@uneditable
@dataclass
class Span:
    """Half-open ``[start, end)`` range of source offsets."""

    start: int
    end: int


@uneditable
@dataclass
class Token:
    kind: TokenKind
    span: Span
    value: Union[None, int, str]

    def __str__(self):
        return f"{self.kind.name}({self.value!r}) at {self.span.start}"


class Lexer:
    """Pull-based scanner with one token of lookahead.

    The next token is scanned ahead of time. When scanning it fails, the
    fault is kept in place of the token and raised by the following
    ``peek()`` or ``next()``; the lexer then carries on after the offending
    character.
    """

    def __init__(self, source: str):
        self.source = source
        self.start = 0
        self.current = 0
        self._lookahead: Union[Token, LexicalError, None] = None
        self._fill()

    def peek(self) -> Token:
        if isinstance(self._lookahead, LexicalError):
            error = self._lookahead
            self._fill()
            raise error
        return self._lookahead

    def next(self) -> Token:
        token = self.peek()
        if token.kind is not TokenKind.EOF:
            self._fill()
        return token

    def offset(self) -> int:
        """Source offset of the next unconsumed token."""
        if isinstance(self._lookahead, LexicalError):
            return self._lookahead.offset
        return self._lookahead.span.start

    def skip_line(self) -> str:
        """Discard the raw text up to the next newline and return it.

        Nothing in the skipped text is scanned, so it cannot fault.
        """
        start = self.offset()
        end = self.source.find("\n", start)
        if end == -1:
            end = len(self.source)
        self.current = end
        self._fill()
        return self.source[start:end]

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next()
            yield token
            if token.kind is TokenKind.EOF:
                return

    def _fill(self):
        try:
            self._lookahead = self.scan_token()
        except LexicalError as e:
            logger.debug("Lexical fault held for next pull: %s", e.message)
            self._lookahead = e

    def scan_token(self) -> Token:
        while not self.is_at_end():
            self.start = self.current
            char = self.advance()

            if char in BLANKS:
                continue
            if char == "\n":
                return self.make_token(TokenKind.NEWLINE)
            if char == '"':
                return self.string()
            if char in DIGITS:
                return self.number()
            if char in LETTERS:
                return self.identifier()
            if char in SINGLE_CHAR_TOKENS:
                return self.make_token(SINGLE_CHAR_TOKENS[char], char)
            if char == "<":
                if self.match("="):
                    return self.make_token(TokenKind.LESS_EQUAL, "<=")
                if self.match(">"):
                    return self.make_token(TokenKind.NOT_EQUAL, "<>")
                return self.make_token(TokenKind.LESS, char)
            if char == ">":
                if self.match("="):
                    return self.make_token(TokenKind.GREATER_EQUAL, ">=")
                return self.make_token(TokenKind.GREATER, char)

            raise UnexpectedCharacter(char, self.start)

        self.start = self.current
        return self.make_token(TokenKind.EOF)

    def number(self) -> Token:
        while self.peek_char() in DIGITS:
            self.advance()

        text = self.source[self.start:self.current]
        value = int(text)
        try:
            float(value)
        except OverflowError:
            raise NumberTooLarge(text, self.start) from None
        return self.make_token(TokenKind.NUMBER, value)

    def string(self) -> Token:
        while self.peek_char() != '"':
            if self.is_at_end():
                raise UnterminatedStringLiteral(self.start)
            self.advance()

        # Closing quote
        self.advance()
        return self.make_token(TokenKind.STRING, self.source[self.start + 1:self.current - 1])

    def identifier(self) -> Token:
        while self.peek_char() in LETTERS:
            self.advance()
        return self.make_token(TokenKind.IDENTIFIER, self.source[self.start:self.current])

    def advance(self) -> str:
        char = self.source[self.current]
        self.current += 1
        return char

    def match(self, expected: str) -> bool:
        if self.peek_char() != expected:
            return False
        self.current += 1
        return True

    def peek_char(self) -> Optional[str]:
        if self.is_at_end():
            return None
        return self.source[self.current]

    def is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def make_token(self, kind: TokenKind, value: Union[None, int, str] = None) -> Token:
        return Token(kind, Span(self.start, self.current), value)
