"""Canonicalizes the concrete syntax tree into the minic AST."""
from __future__ import annotations

import logging
import re
from typing import List, Optional

from . import ast
from .cst import CSTNode

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r"[-+]?\d+")


#pattern-matches the fixed child layout of each concrete node; performs no validation
class ASTBuilder:
    def __init__(self, root: CSTNode) -> None:
        self._root = root

    def build(self) -> ast.Program:
        program = ast.Program(line=self._root.line)
        for node in self._root.children:
            if node.label in ("function", "procedure"):
                program.declarations.append(self._routine(node))
            elif node.label == "GlobalDecl":
                program.declarations.append(self._declaration(node))
        logger.debug("built AST with %d top-level nodes", len(program.declarations))
        return program

    # Declarations ---------------------------------------------------------------

    #function: keyword, type, name, ...; procedure: keyword, name, ...
    def _routine(self, node: CSTNode) -> ast.Routine:
        name = node.children[2] if node.label == "function" else node.children[1]
        block = node.child("Block")
        assert block is not None
        return ast.Routine(line=name.line, name=name.label, kind=node.label, body=self._block(block))

    def _declaration(self, node: CSTNode) -> ast.Decl:
        decl = ast.Decl(line=node.line)
        for child in node.children:
            if child.label == "VarDecl" and not child.is_leaf:
                name = child.children[0]
                decl.variables.append(ast.Var(line=name.line, name=name.label))
        return decl

    # Statements ----------------------------------------------------------------

    def _block(self, node: CSTNode) -> ast.Block:
        block = ast.Block(line=node.line)
        for child in node.children:
            statement = self._statement(child)
            if statement is not None:
                block.statements.append(statement)
        return block

    #punctuation and keyword leaves map to nothing
    def _statement(self, node: CSTNode) -> Optional[ast.Node]:
        if node.is_leaf:
            return None
        label = node.label
        if label == "Declaration":
            return self._declaration(node)
        if label == "Block":
            return self._block(node)
        if label == "IfStmt":
            return self._if(node)
        if label == "WhileStmt":
            return ast.While(
                line=node.line,
                condition=self._expr(node.children[2]),
                body=self._required_statement(node.children[4]),
            )
        if label == "ForStmt":
            return self._for(node)
        if label == "ReturnStmt":
            return ast.Return(line=node.line, value=self._expr(node.children[1]))
        if label == "Assignment":
            return self._assignment(node)
        if label == "ExprStmt":
            return self._call(node.children[0])
        if label == "FunctionCall":
            return self._call(node)
        return None

    def _required_statement(self, node: CSTNode) -> ast.Node:
        statement = self._statement(node)
        assert statement is not None, f"unexpected statement node {node.label!r}"
        return statement

    #if ( cond ) stmt [else stmt]
    def _if(self, node: CSTNode) -> ast.If:
        children = node.children
        statement = ast.If(
            line=node.line,
            condition=self._expr(children[2]),
            then_branch=self._required_statement(children[4]),
        )
        if len(children) > 6:
            else_keyword = children[5]
            statement.else_branch = ast.Else(
                line=else_keyword.line,
                body=self._required_statement(children[6]),
            )
        return statement

    #for ( init ; cond ; update ) stmt
    def _for(self, node: CSTNode) -> ast.For:
        children = node.children
        return ast.For(
            line=node.line,
            init=self._assignment(children[2]),
            condition=self._expr(children[4]),
            update=self._assignment(children[6]),
            body=self._required_statement(children[8]),
        )

    #name [ '[' index ']' ] '=' value [ ';' ]
    def _assignment(self, node: CSTNode) -> ast.Assign:
        children = node.children
        name = children[0]
        target: ast.Identifier | ast.ArrayAccess
        if children[1].label == "[":
            target = ast.ArrayAccess(line=name.line, name=name.label, index=self._expr(children[2]))
            value = children[5]
        else:
            target = ast.Identifier(line=name.line, name=name.label)
            value = children[2]
        return ast.Assign(line=node.line, target=target, value=self._expr(value))

    #printf is an ordinary call syntactically but its own node kind here
    def _call(self, node: CSTNode) -> ast.Expr:
        name = node.children[0]
        arguments = self._arguments(node.children[2:-1])
        if name.label == "printf":
            format_expr = arguments[0] if arguments else None
            return ast.Printf(line=name.line, format=format_expr, arguments=arguments[1:])
        return ast.Call(line=name.line, name=name.label, arguments=arguments)

    def _arguments(self, nodes: List[CSTNode]) -> List[ast.Expr]:
        return [self._expr(node) for node in nodes if not (node.is_leaf and node.label == ",")]

    # Expressions ---------------------------------------------------------------

    def _expr(self, node: CSTNode) -> ast.Expr:
        if node.is_leaf:
            return self._primary(node)
        label = node.label
        children = node.children
        if label == "BinaryOp":
            return ast.BinaryExpr(
                line=node.line,
                operator=children[1].label,
                left=self._expr(children[0]),
                right=self._expr(children[2]),
            )
        if label == "UnaryOp":
            return ast.UnaryExpr(line=node.line, operator=children[0].label, operand=self._expr(children[1]))
        if label == "ParenExpr":
            return self._expr(children[1])
        if label == "FunctionCall":
            return self._call(node)
        if label == "ArrayAccess":
            return ast.ArrayAccess(line=node.line, name=children[0].label, index=self._expr(children[2]))
        if label == "StringLiteral":
            return ast.StringLiteral(line=node.line, text=children[1].label)
        if label == "CharLiteral":
            return ast.CharLiteral(line=node.line, text=children[1].label)
        raise AssertionError(f"unexpected expression node {label!r}")

    def _primary(self, node: CSTNode) -> ast.Expr:
        text = node.label
        if _NUMBER.fullmatch(text):
            return ast.IntLiteral(line=node.line, text=text)
        if text in ("TRUE", "FALSE"):
            return ast.BoolLiteral(line=node.line, text=text)
        return ast.Identifier(line=node.line, name=text)


def build_ast(root: CSTNode) -> ast.Program:
    return ASTBuilder(root).build()
