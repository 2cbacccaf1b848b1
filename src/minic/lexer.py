"""Lexical analysis for the minic language."""
from __future__ import annotations

import logging
import string
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List

from .errors import LexError, SourceLocation
from .token import PUNCTUATION, Token, TokenType

logger = logging.getLogger(__name__)

HEX_DIGITS = frozenset(string.hexdigits)
DIGITS = frozenset(string.digits)

#identifiers are ASCII only; any other character is an error token
IDENTIFIER_START = frozenset(string.ascii_letters + "_")
IDENTIFIER_CHARS = IDENTIFIER_START | DIGITS

#two-character operators: first char -> (second char, paired type, lone type)
_PAIRED_OPERATORS = {
    "<": ("=", TokenType.LT_EQUAL, TokenType.LT),
    ">": ("=", TokenType.GT_EQUAL, TokenType.GT),
    "=": ("=", TokenType.BOOLEAN_EQUAL, TokenType.ASSIGNMENT_OPERATOR),
    "!": ("=", TokenType.BOOLEAN_NOT_EQUAL, TokenType.BOOLEAN_NOT),
    "&": ("&", TokenType.BOOLEAN_AND, TokenType.ERROR),
    "|": ("|", TokenType.BOOLEAN_OR, TokenType.ERROR),
}


#sub-states used while scanning the body of a quoted literal
class _QuoteState(Enum):
    BODY = auto()
    ESCAPE = auto()
    HEX_ESCAPE = auto()


#transforms comment-free characters into a stream of tokens consumed by the parser
@dataclass(slots=True)
class Lexer:
    source: str
    _length: int = field(init=False)
    _index: int = field(init=False, default=0)
    _line: int = field(init=False, default=1)
    _column: int = field(init=False, default=1)

    def __post_init__(self) -> None:
        self._length = len(self.source)
        self._index = 0
        self._line = 1
        self._column = 1

    def lex(self) -> List[Token]:
        tokens: List[Token] = []
        while not self._is_at_end():
            start = self._current_location()
            char = self._advance()

            if char == " " or char == "\t":
                tokens.append(self._make(TokenType.WHITESPACE, char, start))
            elif char == "\n":
                tokens.append(self._make(TokenType.NEWLINE, char, start))
            elif char in PUNCTUATION:
                tokens.append(self._make(PUNCTUATION[char], char, start))
            elif char == "-":
                if self._peek() in DIGITS:
                    tokens.append(self._number(start, char))
                else:
                    tokens.append(self._make(TokenType.MINUS, char, start))
            elif char in _PAIRED_OPERATORS:
                tokens.append(self._operator(start, char))
            elif char == '"':
                tokens.append(self._quoted(start, char, TokenType.DOUBLE_QUOTED_STRING))
            elif char == "'":
                tokens.append(self._quoted(start, char, TokenType.SINGLE_QUOTED_STRING))
            elif char in DIGITS:
                tokens.append(self._number(start, char))
            elif char in IDENTIFIER_START:
                tokens.append(self._identifier(start, char))
            else:
                tokens.append(self._make(TokenType.ERROR, char, start))

        tokens.append(self._make(TokenType.END_OF_FILE, "", self._current_location()))
        logger.debug("lexed %d tokens over %d lines", len(tokens), self._line)
        return tokens

    # Internal helpers -------------------------------------------------

    def _is_at_end(self) -> bool:
        return self._index >= self._length

    def _current_location(self) -> SourceLocation:
        return SourceLocation(line=self._line, column=self._column)

    def _advance(self) -> str:
        char = self.source[self._index]
        self._index += 1
        if char == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return char

    def _peek(self) -> str:
        if self._is_at_end():
            return "\0"
        return self.source[self._index]

    def _make(self, token_type: TokenType, value: str, start: SourceLocation) -> Token:
        return Token(token_type, value, start.line, start.column)

    #one character of lookahead decides between the lone and paired operator
    def _operator(self, start: SourceLocation, first_char: str) -> Token:
        second, paired_type, lone_type = _PAIRED_OPERATORS[first_char]
        if self._peek() == second:
            self._advance()
            return self._make(paired_type, first_char + second, start)
        return self._make(lone_type, first_char, start)

    def _identifier(self, start: SourceLocation, first_char: str) -> Token:
        start_index = self._index - 1
        while True:
            char = self._peek()
            if char in IDENTIFIER_CHARS:
                self._advance()
            else:
                break
        lexeme = self.source[start_index:self._index]
        return self._make(TokenType.IDENTIFIER, lexeme, start)

    #a leading '-' is already consumed when the literal is signed
    def _number(self, start: SourceLocation, first_char: str) -> Token:
        start_index = self._index - 1
        while self._peek() in DIGITS:
            self._advance()
        lexeme = self.source[start_index:self._index]
        return self._make(TokenType.INTEGER, lexeme, start)

    #keeps delimiters and raw escape text; decoding happens at run time
    def _quoted(self, start: SourceLocation, quote: str, token_type: TokenType) -> Token:
        start_index = self._index - 1
        state = _QuoteState.BODY
        hex_digits = 0
        while True:
            char = self._peek()
            if self._is_at_end() or char == "\n":
                raise LexError("unterminated string quote.", self._line)

            if state is _QuoteState.HEX_ESCAPE:
                if char in HEX_DIGITS:
                    self._advance()
                    hex_digits += 1
                    if hex_digits == 2:
                        state = _QuoteState.BODY
                else:
                    # fewer than two hex digits: rescan this character as body text
                    state = _QuoteState.BODY
                continue

            self._advance()
            if state is _QuoteState.ESCAPE:
                if char == "x":
                    state = _QuoteState.HEX_ESCAPE
                    hex_digits = 0
                else:
                    state = _QuoteState.BODY
            elif char == "\\":
                state = _QuoteState.ESCAPE
            elif char == quote:
                break

        lexeme = self.source[start_index:self._index]
        return self._make(token_type, lexeme, start)


#convenience entry point mirroring the other pipeline stages
def tokenize(source: str) -> List[Token]:
    return Lexer(source).lex()
