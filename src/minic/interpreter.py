"""Tree-walking interpreter for the minic AST."""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional, TextIO

from . import ast
from .errors import InterpreterError
from .semantic import GLOBAL_SCOPE, ResolvedProgram, SymbolEntry
from .values import Value, ValueType, char_literal, divide, modulo, string_literal

logger = logging.getLogger(__name__)

ENTRY_POINT = "main"


#captures the variables of a single routine invocation
@dataclass(slots=True)
class Frame:
    routine: str
    scope: int
    variables: Dict[str, Value] = field(default_factory=dict)


#call-frame stack over a global frame that is always present beneath it
class Environment:
    def __init__(self) -> None:
        self.globals = Frame(routine="<global>", scope=GLOBAL_SCOPE)
        self.frames: List[Frame] = []

    @property
    def current(self) -> Frame:
        return self.frames[-1] if self.frames else self.globals

    def push(self, frame: Frame) -> None:
        self.frames.append(frame)

    def pop(self) -> Frame:
        return self.frames.pop()

    def declare(self, name: str, value: Value) -> None:
        self.current.variables[name] = value

    #current frame first, then globals
    def lookup(self, name: str) -> Optional[Value]:
        value = self.current.variables.get(name)
        if value is None:
            value = self.globals.variables.get(name)
        return value

    #unknown names are created in the current frame
    def assign(self, name: str, value: Value) -> None:
        if name in self.current.variables:
            self.current.variables[name] = value
        elif name in self.globals.variables:
            self.globals.variables[name] = value
        else:
            self.current.variables[name] = value


# Control flow -------------------------------------------------------------------


#statements either let execution continue or carry a routine's return value upward
class Proceed:
    __slots__ = ()

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return "PROCEED"


@dataclass(frozen=True, slots=True)
class Returned:
    value: Value


PROCEED = Proceed()

Outcome = Proceed | Returned


#evaluates programs directly from the AST using resolved symbol metadata
class Interpreter:
    def __init__(
        self,
        program: ast.Program,
        resolved: ResolvedProgram,
        out: Optional[TextIO] = None,
        trace: bool = False,
    ) -> None:
        self.program = program
        self.table = resolved.table
        self.parameter_lists = resolved.parameter_lists
        self.out = out if out is not None else sys.stdout
        self.trace = trace
        self.env = Environment()
        self.routines: Dict[str, ast.Routine] = {
            decl.name: decl for decl in program.declarations if isinstance(decl, ast.Routine)
        }

    #declares globals, then runs the entry point; returns its value, if any
    def run(self) -> Optional[Value]:
        for decl in self.program.declarations:
            if isinstance(decl, ast.Decl):
                self._declare(decl)
        entry = self.routines.get(ENTRY_POINT)
        if entry is None:
            raise InterpreterError(f"{ENTRY_POINT} procedure not found")
        return self._invoke(entry, [])

    # Calls ------------------------------------------------------------------

    def _call(self, name: str, arguments: List[ast.Expr]) -> Value:
        values = [self._evaluate(argument) for argument in arguments]
        routine = self.routines.get(name)
        if routine is None:
            self._log(f"call to undefined routine '{name}' ignored")
            return Value.of_int(0)
        result = self._invoke(routine, values)
        return result if result is not None else Value.of_int(0)

    #binds parameters positionally in a fresh frame and runs the body
    def _invoke(self, routine: ast.Routine, arguments: List[Value]) -> Optional[Value]:
        entry = self.table.routine(routine.name)
        scope = entry.scope if entry is not None else GLOBAL_SCOPE
        frame = Frame(routine=routine.name, scope=scope)
        parameter_list = self.parameter_lists.get(routine.name)
        if parameter_list is not None:
            for position, parameter in enumerate(parameter_list):
                if position < len(arguments):
                    value = arguments[position].copy()
                elif parameter.is_array:
                    value = Value.zeroed_array(parameter.data_type, parameter.array_size)
                else:
                    value = Value.zero(parameter.data_type)
                frame.variables[parameter.name] = value

        self._log(f"enter {routine.name}({', '.join(v.as_text() for v in arguments)})")
        self.env.push(frame)
        try:
            outcome = self._execute_block(routine.body)
        finally:
            self.env.pop()
        if isinstance(outcome, Returned):
            self._log(f"leave {routine.name} -> {outcome.value.as_text()}")
            return outcome.value
        self._log(f"leave {routine.name}")
        return None

    # Statements ---------------------------------------------------------------

    #a Returned outcome stops the block and is handed to the caller unchanged
    def _execute_block(self, block: ast.Block) -> Outcome:
        for statement in block.statements:
            outcome = self._execute(statement)
            if isinstance(outcome, Returned):
                return outcome
        return PROCEED

    def _execute(self, node: ast.Node) -> Outcome:
        if self.trace:
            self._log(f"line {node.line}: {type(node).__name__}")
        if isinstance(node, ast.Decl):
            self._declare(node)
            return PROCEED
        if isinstance(node, ast.Block):
            return self._execute_block(node)
        if isinstance(node, ast.Assign):
            self._assign(node)
            return PROCEED
        if isinstance(node, ast.If):
            return self._execute_if(node)
        if isinstance(node, ast.While):
            return self._execute_while(node)
        if isinstance(node, ast.For):
            return self._execute_for(node)
        if isinstance(node, ast.Return):
            return Returned(self._evaluate(node.value))
        if isinstance(node, ast.Expr):
            self._evaluate(node)
            return PROCEED
        raise AssertionError(f"unexpected statement {node!r}")

    #looks up type and size in the current routine's scope, falling back to globals
    def _declare(self, decl: ast.Decl) -> None:
        scope = self.env.current.scope
        for var in decl.variables:
            entry = self.table.find_storage(var.name, scope)
            if entry is None:
                entry = self.table.find_storage(var.name, GLOBAL_SCOPE)
            self.env.declare(var.name, self._initial_value(entry))

    def _initial_value(self, entry: Optional[SymbolEntry]) -> Value:
        if entry is None:
            return Value.of_int(0)
        if entry.is_array:
            return Value.zeroed_array(entry.data_type, entry.array_size)
        return Value.zero(entry.data_type)

    def _execute_if(self, node: ast.If) -> Outcome:
        if self._evaluate(node.condition).as_bool():
            return self._execute(node.then_branch)
        if node.else_branch is not None:
            return self._execute(node.else_branch.body)
        return PROCEED

    def _execute_while(self, node: ast.While) -> Outcome:
        while self._evaluate(node.condition).as_bool():
            outcome = self._execute(node.body)
            if isinstance(outcome, Returned):
                return outcome
        return PROCEED

    def _execute_for(self, node: ast.For) -> Outcome:
        self._assign(node.init)
        while self._evaluate(node.condition).as_bool():
            outcome = self._execute(node.body)
            if isinstance(outcome, Returned):
                return outcome
            self._assign(node.update)
        return PROCEED

    #the right-hand side is evaluated before the element index
    def _assign(self, node: ast.Assign) -> None:
        value = self._evaluate(node.value)
        target = node.target
        if isinstance(target, ast.ArrayAccess):
            index = self._evaluate(target.index).as_int()
            array = self.env.lookup(target.name)
            if array is not None and array.is_array and 0 <= index < len(array.elements):
                array.elements[index] = value
            return

        current = self.env.lookup(target.name)
        if value.type is ValueType.STRING and current is not None and current.is_array:
            elements = current.elements
            for position, char in enumerate(value.as_text()[: len(elements)]):
                elements[position] = Value.of_char(char)
            return
        self.env.assign(target.name, value.copy())

    # Expressions ----------------------------------------------------------------

    def _evaluate(self, node: ast.Expr) -> Value:
        if isinstance(node, ast.IntLiteral):
            return Value.of_int(int(node.text))
        if isinstance(node, ast.CharLiteral):
            return char_literal(node.text)
        if isinstance(node, ast.StringLiteral):
            return string_literal(node.text)
        if isinstance(node, ast.BoolLiteral):
            return Value.of_bool(node.value)
        if isinstance(node, ast.Identifier):
            value = self.env.lookup(node.name)
            return value if value is not None else Value.of_int(0)
        if isinstance(node, ast.ArrayAccess):
            return self._element(node)
        if isinstance(node, ast.BinaryExpr):
            return self._binary(node)
        if isinstance(node, ast.UnaryExpr):
            return self._unary(node)
        if isinstance(node, ast.Call):
            return self._call(node.name, node.arguments)
        if isinstance(node, ast.Printf):
            self._printf(node)
            return Value.of_int(0)
        raise AssertionError(f"unexpected expression {node!r}")

    #out-of-range reads yield zero
    def _element(self, node: ast.ArrayAccess) -> Value:
        index = self._evaluate(node.index).as_int()
        array = self.env.lookup(node.name)
        if array is not None and array.is_array and 0 <= index < len(array.elements):
            return array.elements[index]
        return Value.of_int(0)

    #both operands are always evaluated; logical operators coerce to bool
    def _binary(self, node: ast.BinaryExpr) -> Value:
        left_value = self._evaluate(node.left)
        right_value = self._evaluate(node.right)
        operator = node.operator
        if operator == "&&":
            return Value.of_bool(left_value.as_bool() and right_value.as_bool())
        if operator == "||":
            return Value.of_bool(left_value.as_bool() or right_value.as_bool())

        left = left_value.as_int()
        right = right_value.as_int()
        if operator == "+":
            return Value.of_int(left + right)
        if operator == "-":
            return Value.of_int(left - right)
        if operator == "*":
            return Value.of_int(left * right)
        if operator == "/":
            return Value.of_int(divide(left, right))
        if operator == "%":
            return Value.of_int(modulo(left, right))
        if operator == "==":
            return Value.of_bool(left == right)
        if operator == "!=":
            return Value.of_bool(left != right)
        if operator == "<":
            return Value.of_bool(left < right)
        if operator == ">":
            return Value.of_bool(left > right)
        if operator == "<=":
            return Value.of_bool(left <= right)
        if operator == ">=":
            return Value.of_bool(left >= right)
        return Value.of_int(0)

    def _unary(self, node: ast.UnaryExpr) -> Value:
        operand = self._evaluate(node.operand)
        if node.operator == "!":
            return Value.of_bool(not operand.as_bool())
        if node.operator == "-":
            return Value.of_int(-operand.as_int())
        return Value.of_int(0)

    # printf -----------------------------------------------------------------

    #arguments are evaluated up front, then the raw format is scanned once
    def _printf(self, node: ast.Printf) -> None:
        if not isinstance(node.format, ast.StringLiteral):
            return
        arguments = [self._evaluate(argument) for argument in node.arguments]
        self.out.write(format_printf(node.format.text, arguments))

    def _log(self, message: str) -> None:
        if self.trace:
            logger.debug("[trace] %s", message)


def format_printf(fmt: str, arguments: List[Value]) -> str:
    """Render a printf format string with already evaluated arguments."""

    pieces: List[str] = []
    pending = iter(arguments)
    index = 0
    length = len(fmt)
    while index < length:
        char = fmt[index]
        if char == "\\" and index + 1 < length:
            escaped = fmt[index + 1]
            index += 2
            if escaped == "n":
                pieces.append("\n")
            elif escaped == "t":
                pieces.append("\t")
            elif escaped == "x":
                skipped = 0
                while skipped < 2 and index < length and fmt[index] in "0123456789abcdefABCDEF":
                    index += 1
                    skipped += 1
            else:
                pieces.append(escaped)
            continue
        if char == "%" and index + 1 < length:
            conversion = fmt[index + 1]
            index += 2
            if conversion == "%":
                pieces.append("%")
                continue
            argument = next(pending, None) if conversion in "dcs" else None
            if argument is None:
                continue
            if conversion == "d":
                pieces.append(str(argument.as_int()))
            elif conversion == "c":
                pieces.append(argument.as_char())
            else:
                pieces.append(argument.as_text())
            continue
        pieces.append(char)
        index += 1
    return "".join(pieces)


def run_program(
    program: ast.Program,
    resolved: ResolvedProgram,
    out: Optional[TextIO] = None,
    trace: bool = False,
) -> Optional[Value]:
    return Interpreter(program, resolved, out=out, trace=trace).run()


__all__ = ["Interpreter", "InterpreterError", "format_printf", "run_program", "ENTRY_POINT"]
