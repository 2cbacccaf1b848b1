"""Abstract syntax tree definitions for minic."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


#every AST node remembers the source line it was built from
@dataclass(slots=True)
class Node:
    line: int


# Declarations -----------------------------------------------------------------


#represents the root of the program: routines and global declarations in order
@dataclass(slots=True)
class Program(Node):
    declarations: List["Decl | Routine"] = field(default_factory=list)


#common base for all statements allowing polymorphic handling
@dataclass(slots=True)
class Stmt(Node):
    pass


#a single declared name; type and size live in the symbol table
@dataclass(slots=True)
class Var(Node):
    name: str


#one declaration statement may introduce several names
@dataclass(slots=True)
class Decl(Stmt):
    variables: List[Var] = field(default_factory=list)


#container for declarations followed by statements
@dataclass(slots=True)
class Block(Stmt):
    statements: List[Node] = field(default_factory=list)


#function or procedure definition; the name is kept for call dispatch
@dataclass(slots=True)
class Routine(Node):
    name: str
    kind: str
    body: Block


# Statements -------------------------------------------------------------------


#assignment to a scalar name or to an array element
@dataclass(slots=True)
class Assign(Stmt):
    target: "Identifier | ArrayAccess"
    value: "Expr"


#marks where the else branch of an if statement starts
@dataclass(slots=True)
class Else(Node):
    body: Node


#classic `if` syntax with optional `else` branch
@dataclass(slots=True)
class If(Stmt):
    condition: "Expr"
    then_branch: Node
    else_branch: Optional[Else] = None


#`while` loops hold the condition and body statement
@dataclass(slots=True)
class While(Stmt):
    condition: "Expr"
    body: Node


#`for (init; condition; update) body`
@dataclass(slots=True)
class For(Stmt):
    init: Assign
    condition: "Expr"
    update: Assign
    body: Node


#`return` always carries a value
@dataclass(slots=True)
class Return(Stmt):
    value: "Expr"


# Expressions ------------------------------------------------------------------


#expressions share the base `Node` to carry lines
@dataclass(slots=True)
class Expr(Node):
    pass


#routine calls may appear as statements or inside expressions
@dataclass(slots=True)
class Call(Expr):
    name: str
    arguments: List[Expr] = field(default_factory=list)


#builtin formatted output; the first argument is the format string
@dataclass(slots=True)
class Printf(Expr):
    format: Optional[Expr]
    arguments: List[Expr] = field(default_factory=list)


@dataclass(slots=True)
class BinaryExpr(Expr):
    operator: str
    left: Expr
    right: Expr


@dataclass(slots=True)
class UnaryExpr(Expr):
    operator: str
    operand: Expr


@dataclass(slots=True)
class Identifier(Expr):
    name: str


#numeric text is parsed by the interpreter, so signed literals survive untouched
@dataclass(slots=True)
class IntLiteral(Expr):
    text: str


#string and char literals keep their raw escape sequences
@dataclass(slots=True)
class StringLiteral(Expr):
    text: str


@dataclass(slots=True)
class CharLiteral(Expr):
    text: str


@dataclass(slots=True)
class BoolLiteral(Expr):
    text: str

    @property
    def value(self) -> bool:
        return self.text == "TRUE"


@dataclass(slots=True)
class ArrayAccess(Expr):
    name: str
    index: Expr
