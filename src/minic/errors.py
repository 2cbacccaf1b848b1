"""Common error and source location utilities."""
from __future__ import annotations

from dataclasses import dataclass


#describes an exact line/column position captured during lexing
@dataclass(frozen=True, slots=True)
class SourceLocation:
    """A 1-based line/column location inside a source file."""

    line: int
    column: int

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.line}:{self.column}"


#normalizes the base exception for every pipeline stage
class MinicError(Exception):
    """Base class for minic-related errors."""


#front-end errors all carry the offending source line
class FrontEndError(MinicError):
    """A fatal error raised before execution starts."""

    prefix = "Syntax error"

    def __init__(self, message: str, line: int) -> None:
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        return f"{self.prefix} on line {self.line}: {self.message}"


#comment stripping reports unterminated block comments
class PreprocessError(FrontEndError):
    """Raised when a comment is not terminated."""

    prefix = "ERROR"

    def __str__(self) -> str:
        return f"{self.prefix}: Program contains C-style, {self.message} on line {self.line}"


#lexer raises this for unterminated quoted literals
class LexError(FrontEndError):
    """Raised when the lexer encounters an invalid character sequence."""


#parser uses this to surface syntax errors with lines
class ParseError(FrontEndError):
    """Raised when the parser encounters an invalid construct."""


#symbol resolution funnels redeclarations through this
class SemanticError(FrontEndError):
    """Raised for symbol table failures."""

    prefix = "Error"


#the interpreter only raises when it cannot start at all
class InterpreterError(MinicError):
    """Raised when a program cannot be executed."""
