"""Token definitions for the minic language."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Final

from .errors import SourceLocation


#enumerates every lexical category produced by the lexer
class TokenType(Enum):
    # Punctuation
    L_PAREN = auto()
    R_PAREN = auto()
    L_BRACKET = auto()
    R_BRACKET = auto()
    L_BRACE = auto()
    R_BRACE = auto()
    SEMICOLON = auto()
    COMMA = auto()
    ASSIGNMENT_OPERATOR = auto()

    # Arithmetic
    PLUS = auto()
    MINUS = auto()
    ASTERISK = auto()
    DIVIDE = auto()
    MODULO = auto()
    CARET = auto()

    # Relational and logical
    LT = auto()
    GT = auto()
    LT_EQUAL = auto()
    GT_EQUAL = auto()
    BOOLEAN_AND = auto()
    BOOLEAN_OR = auto()
    BOOLEAN_NOT = auto()
    BOOLEAN_EQUAL = auto()
    BOOLEAN_NOT_EQUAL = auto()

    # Literals and identifiers
    DOUBLE_QUOTED_STRING = auto()
    SINGLE_QUOTED_STRING = auto()
    INTEGER = auto()
    IDENTIFIER = auto()

    # Layout
    WHITESPACE = auto()
    NEWLINE = auto()

    ERROR = auto()
    END_OF_FILE = auto()


#words that may never name a routine, parameter or variable
RESERVED_WORDS: Final[frozenset[str]] = frozenset(
    {
        "int",
        "char",
        "void",
        "bool",
        "function",
        "procedure",
        "if",
        "else",
        "while",
        "for",
        "return",
        "printf",
        "TRUE",
        "FALSE",
    }
)

#type names accepted in declarations and parameter lists
DATA_TYPES: Final[tuple[str, ...]] = ("int", "char", "bool", "void")

#single characters that map straight onto a token type
PUNCTUATION: Final[dict[str, TokenType]] = {
    "(": TokenType.L_PAREN,
    ")": TokenType.R_PAREN,
    "[": TokenType.L_BRACKET,
    "]": TokenType.R_BRACKET,
    "{": TokenType.L_BRACE,
    "}": TokenType.R_BRACE,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    "+": TokenType.PLUS,
    "*": TokenType.ASTERISK,
    "/": TokenType.DIVIDE,
    "%": TokenType.MODULO,
    "^": TokenType.CARET,
}


#encapsulates the token kind, its source text and where it started
@dataclass(frozen=True, slots=True)
class Token:
    type: TokenType
    value: str
    line: int
    column: int

    @property
    def location(self) -> SourceLocation:
        return SourceLocation(line=self.line, column=self.column)

    @property
    def is_layout(self) -> bool:
        return self.type is TokenType.WHITESPACE or self.type is TokenType.NEWLINE

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
