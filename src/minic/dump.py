"""Human-readable dumps of each pipeline stage, used by the CLI and golden tests."""
from __future__ import annotations

from typing import Dict, List

from . import ast
from .semantic import ParameterList, SymbolKind, SymbolTable
from .token import Token, TokenType

SEP = "   "


# Tokens -------------------------------------------------------------------------


#reconstructs the source one line per input line, tokens separated by three spaces
def dump_tokens(tokens: List[Token]) -> str:
    lines: List[List[str]] = []
    current_line = None
    for token in tokens:
        if token.is_layout or token.type is TokenType.END_OF_FILE:
            continue
        if token.line != current_line:
            lines.append([])
            current_line = token.line
        lines[-1].append(_render_token(token))
    return "\n".join(SEP.join(parts) for parts in lines) + "\n"


def _render_token(token: Token) -> str:
    if token.type is TokenType.DOUBLE_QUOTED_STRING:
        return f'"{SEP}{token.value[1:-1]}{SEP}"'
    if token.type is TokenType.SINGLE_QUOTED_STRING:
        return f"'{SEP}{token.value[1:-1]}{SEP}'"
    return token.value


# Symbols ------------------------------------------------------------------------


#parameters are listed separately, per routine
def dump_symbol_table(table: SymbolTable) -> str:
    lines: List[str] = []
    for entry in table:
        if entry.kind is SymbolKind.PARAMETER:
            continue
        kind = "datatype" if entry.kind is SymbolKind.VARIABLE else entry.kind.value
        data_type = "NOT APPLICABLE" if entry.kind is SymbolKind.PROCEDURE else entry.data_type.value
        lines.append(f"      IDENTIFIER_NAME: {entry.name}")
        lines.append(f"      IDENTIFIER_TYPE: {kind}")
        lines.append(f"             DATATYPE: {data_type}")
        lines.extend(_array_and_scope(entry.is_array, entry.array_size, entry.scope))
    return "".join(line + "\n" for line in lines)


#procedures without parameters are left out of the listing
def dump_parameter_lists(table: SymbolTable, parameter_lists: Dict[str, ParameterList]) -> str:
    lines: List[str] = []
    for entry in table.routines():
        parameter_list = parameter_lists.get(entry.name)
        if parameter_list is None:
            continue
        if entry.kind is SymbolKind.PROCEDURE and not parameter_list.parameters:
            continue
        lines.append("")
        lines.append(f"   PARAMETER LIST FOR: {parameter_list.routine}")
        for parameter in parameter_list:
            lines.append(f"      IDENTIFIER_NAME: {parameter.name}")
            lines.append(f"             DATATYPE: {parameter.data_type.value}")
            lines.extend(_array_and_scope(parameter.is_array, parameter.array_size, parameter.scope))
    return "".join(line + "\n" for line in lines)


def _array_and_scope(is_array: bool, array_size: int, scope: int) -> List[str]:
    return [
        f"    DATATYPE_IS_ARRAY: {'yes' if is_array else 'no'}",
        f"  DATATYPE_ARRAY_SIZE: {array_size}",
        f"                SCOPE: {scope}",
        "",
    ]


# AST ----------------------------------------------------------------------------


def dump_ast(program: ast.Program) -> str:
    """Serialize the AST as one reverse-Polish line per statement."""

    lines: List[str] = []
    for node in program.declarations:
        if isinstance(node, ast.Routine):
            lines.append("DECLARATION")
            _block(node.body, lines)
        else:
            _statement(node, lines)
    return "".join(line + "\n" for line in lines) + "\n"


def _block(block: ast.Block, lines: List[str]) -> None:
    lines.append("BEGIN BLOCK")
    for statement in block.statements:
        _statement(statement, lines)
    lines.append("END BLOCK")


def _statement(node: ast.Node, lines: List[str]) -> None:
    if isinstance(node, ast.Decl):
        lines.extend(["DECLARATION"] * max(len(node.variables), 1))
    elif isinstance(node, ast.Block):
        _block(node, lines)
    elif isinstance(node, ast.Assign):
        lines.append(f"ASSIGNMENT{SEP}{_assignment(node)}")
    elif isinstance(node, ast.If):
        lines.append(f"IF{SEP}{rpn(node.condition)}")
        _statement(node.then_branch, lines)
        if node.else_branch is not None:
            lines.append("ELSE")
            _statement(node.else_branch.body, lines)
    elif isinstance(node, ast.While):
        lines.append(f"WHILE{SEP}{rpn(node.condition)}")
        _statement(node.body, lines)
    elif isinstance(node, ast.For):
        lines.append(f"FOR EXPRESSION 1{SEP}{_assignment(node.init)}")
        lines.append(f"FOR EXPRESSION 2{SEP}{rpn(node.condition)}")
        lines.append(f"FOR EXPRESSION 3{SEP}{_assignment(node.update)}")
        _statement(node.body, lines)
    elif isinstance(node, ast.Return):
        lines.append(f"RETURN{SEP}{rpn(node.value)}")
    elif isinstance(node, ast.Call):
        lines.append(f"CALL{SEP}{rpn(node)}")
    elif isinstance(node, ast.Printf):
        lines.append(f"PRINTF{SEP}{_printf(node)}")


#target, value, then the operator last
def _assignment(node: ast.Assign) -> str:
    target = node.target
    if isinstance(target, ast.ArrayAccess):
        lhs = f"{target.name}{SEP}[{SEP}{rpn(target.index)}{SEP}]{SEP}"
    else:
        lhs = f"{target.name}{SEP}"
    return f"{lhs}{rpn(node.value)}{SEP}="


#the format string is written bare, without quotes or trailing spaces
def _printf(node: ast.Printf) -> str:
    if node.format is None:
        return ""
    if isinstance(node.format, ast.StringLiteral):
        parts = [node.format.text.rstrip(" ")]
    else:
        parts = [rpn(node.format)]
    parts.extend(rpn(argument) for argument in node.arguments)
    return SEP.join(parts)


def rpn(node: ast.Expr) -> str:
    """Render one expression in postfix order."""

    if isinstance(node, ast.BinaryExpr):
        return f"{rpn(node.left)}{SEP}{rpn(node.right)}{SEP}{node.operator}"
    if isinstance(node, ast.UnaryExpr):
        return f"{rpn(node.operand)}{SEP}{node.operator}"
    if isinstance(node, ast.Identifier):
        return node.name
    if isinstance(node, (ast.IntLiteral, ast.BoolLiteral)):
        return node.text
    if isinstance(node, ast.ArrayAccess):
        return f"{node.name}{SEP}[{SEP}{rpn(node.index)}{SEP}]"
    if isinstance(node, ast.StringLiteral):
        return f'"{SEP}{node.text}{SEP}"'
    if isinstance(node, ast.CharLiteral):
        return f"'{SEP}{node.text}{SEP}'"
    if isinstance(node, ast.Call):
        arguments = f"{SEP},{SEP}".join(rpn(argument) for argument in node.arguments)
        return f"{node.name}{SEP}({SEP}{arguments}{SEP})"
    if isinstance(node, ast.Printf):
        return "printf"
    raise AssertionError(f"unexpected expression {node!r}")


__all__ = ["dump_ast", "dump_parameter_lists", "dump_symbol_table", "dump_tokens", "rpn"]
