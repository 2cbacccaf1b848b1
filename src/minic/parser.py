"""Parser that turns minic tokens into a concrete syntax tree."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List

from .cst import CSTNode
from .errors import ParseError
from .token import DATA_TYPES, RESERVED_WORDS, Token, TokenType

logger = logging.getLogger(__name__)

#types allowed to open a declaration inside a block
LOCAL_TYPES = ("int", "char", "bool")

_EQUALITY = (TokenType.BOOLEAN_EQUAL, TokenType.BOOLEAN_NOT_EQUAL)
_RELATIONAL = (TokenType.LT, TokenType.GT, TokenType.LT_EQUAL, TokenType.GT_EQUAL)
_ADDITIVE = (TokenType.PLUS, TokenType.MINUS)
_MULTIPLICATIVE = (TokenType.ASTERISK, TokenType.DIVIDE, TokenType.MODULO)


#navigates the token stream via recursive descent, skipping layout tokens
@dataclass(slots=True)
class Parser:
    tokens: List[Token]
    _current: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self._current = 0

    def parse(self) -> CSTNode:
        root = CSTNode("Program")
        while not self._check(TokenType.END_OF_FILE):
            token = self._peek()
            if token.value in ("function", "procedure"):
                root.add(self._routine())
            elif token.value in DATA_TYPES:
                root.add(self._global_declaration())
            else:
                raise ParseError(f"unexpected token '{token.value}'", token.line)
        logger.debug("parsed %d top-level constructs", len(root.children))
        return root

    # Declarations ---------------------------------------------------------------

    def _global_declaration(self) -> CSTNode:
        node = CSTNode("GlobalDecl", self._peek().line)
        self._declarator_list(node)
        return node

    def _declaration(self) -> CSTNode:
        node = CSTNode("Declaration", self._peek().line)
        self._declarator_list(node)
        return node

    #shared by global and block-level declarations: type, declarators, ';'
    def _declarator_list(self, node: CSTNode) -> None:
        self._leaf(node, self._advance())
        while True:
            node.add(self._variable_declarator())
            if not self._check(TokenType.COMMA):
                break
            self._leaf(node, self._advance())
        self._leaf(node, self._consume(TokenType.SEMICOLON, "expected ';'"))

    def _variable_declarator(self) -> CSTNode:
        name = self._consume(TokenType.IDENTIFIER, "expected identifier")
        self._reject_reserved(name, "variable")
        node = CSTNode("VarDecl", name.line)
        self._leaf(node, name)
        if self._check(TokenType.L_BRACKET):
            self._leaf(node, self._advance())
            size = self._advance()
            if size.type is not TokenType.INTEGER or int(size.value) <= 0:
                raise ParseError("array declaration size must be a positive integer.", size.line)
            self._leaf(node, size)
            self._leaf(node, self._consume(TokenType.R_BRACKET, "expected ']'"))
        return node

    #functions carry a return type between the keyword and the name; procedures do not
    def _routine(self) -> CSTNode:
        keyword = self._advance()
        node = CSTNode(keyword.value, keyword.line)
        self._leaf(node, keyword)
        if keyword.value == "function":
            self._leaf(node, self._consume_type("expected return type"))

        name = self._consume(TokenType.IDENTIFIER, "expected identifier")
        self._reject_reserved(name, "function")
        self._leaf(node, name)
        self._leaf(node, self._consume(TokenType.L_PAREN, "expected '('"))
        node.add(self._parameters())
        self._leaf(node, self._consume(TokenType.R_PAREN, "expected ')'"))
        node.add(self._block())
        return node

    def _parameters(self) -> CSTNode:
        node = CSTNode("Parameters", self._peek().line)
        if self._peek().value == "void":
            self._leaf(node, self._advance())
            return node
        while True:
            node.add(self._parameter())
            if not self._check(TokenType.COMMA):
                break
            self._leaf(node, self._advance())
        return node

    #array parameters may leave the size out
    def _parameter(self) -> CSTNode:
        node = CSTNode("Parameter", self._peek().line)
        self._leaf(node, self._consume_type("expected parameter type"))
        name = self._consume(TokenType.IDENTIFIER, "expected parameter name")
        self._reject_reserved(name, "variable")
        self._leaf(node, name)
        if self._check(TokenType.L_BRACKET):
            self._leaf(node, self._advance())
            if not self._check(TokenType.R_BRACKET):
                self._leaf(node, self._consume(TokenType.INTEGER, "expected array size"))
            self._leaf(node, self._consume(TokenType.R_BRACKET, "expected ']'"))
        return node

    # Statements ----------------------------------------------------------------

    #all local declarations precede the first statement
    def _block(self) -> CSTNode:
        opening = self._consume(TokenType.L_BRACE, "expected '{'")
        node = CSTNode("Block", opening.line)
        self._leaf(node, opening)
        while self._peek().value in LOCAL_TYPES:
            node.add(self._declaration())
        while not self._check(TokenType.R_BRACE) and not self._check(TokenType.END_OF_FILE):
            node.add(self._statement())
        self._leaf(node, self._consume(TokenType.R_BRACE, "expected '}'"))
        return node

    #directs statements based on the leading token
    def _statement(self) -> CSTNode:
        token = self._peek()
        if token.value == "if":
            return self._if_statement()
        if token.value == "while":
            return self._while_statement()
        if token.value == "for":
            return self._for_statement()
        if token.value == "return":
            return self._return_statement()
        if token.type is TokenType.L_BRACE:
            return self._block()
        if token.type is TokenType.IDENTIFIER:
            return self._expression_statement()
        raise ParseError(f"unexpected token '{token.value}'", token.line)

    def _if_statement(self) -> CSTNode:
        keyword = self._advance()
        node = CSTNode("IfStmt", keyword.line)
        self._leaf(node, keyword)
        self._parenthesized_condition(node)
        node.add(self._statement())
        if self._peek().value == "else":
            self._leaf(node, self._advance())
            node.add(self._statement())
        return node

    def _while_statement(self) -> CSTNode:
        keyword = self._advance()
        node = CSTNode("WhileStmt", keyword.line)
        self._leaf(node, keyword)
        self._parenthesized_condition(node)
        node.add(self._statement())
        return node

    def _parenthesized_condition(self, node: CSTNode) -> None:
        self._leaf(node, self._consume(TokenType.L_PAREN, "expected '('"))
        node.add(self._expression())
        self._leaf(node, self._consume(TokenType.R_PAREN, "expected ')'"))

    #init and update clauses are bare assignments without their own ';'
    def _for_statement(self) -> CSTNode:
        keyword = self._advance()
        node = CSTNode("ForStmt", keyword.line)
        self._leaf(node, keyword)
        self._leaf(node, self._consume(TokenType.L_PAREN, "expected '('"))
        node.add(self._assignment())
        self._leaf(node, self._consume(TokenType.SEMICOLON, "expected ';'"))
        node.add(self._expression())
        self._leaf(node, self._consume(TokenType.SEMICOLON, "expected ';'"))
        node.add(self._assignment())
        self._leaf(node, self._consume(TokenType.R_PAREN, "expected ')'"))
        node.add(self._statement())
        return node

    def _return_statement(self) -> CSTNode:
        keyword = self._advance()
        node = CSTNode("ReturnStmt", keyword.line)
        self._leaf(node, keyword)
        node.add(self._expression())
        self._leaf(node, self._consume(TokenType.SEMICOLON, "expected ';'"))
        return node

    #peeks past the identifier to tell an assignment from a bare call
    def _expression_statement(self) -> CSTNode:
        name = self._peek()
        lookahead = self._peek_next()
        if lookahead.type in (TokenType.ASSIGNMENT_OPERATOR, TokenType.L_BRACKET):
            node = self._assignment()
            self._leaf(node, self._consume(TokenType.SEMICOLON, "expected ';'"))
            return node
        if lookahead.type is TokenType.L_PAREN:
            wrapper = CSTNode("ExprStmt", name.line)
            wrapper.add(self._function_call())
            self._leaf(wrapper, self._consume(TokenType.SEMICOLON, "expected ';'"))
            return wrapper
        raise ParseError("unexpected token", name.line)

    def _assignment(self) -> CSTNode:
        name = self._consume(TokenType.IDENTIFIER, "expected identifier")
        node = CSTNode("Assignment", name.line)
        self._leaf(node, name)
        if self._check(TokenType.L_BRACKET):
            self._leaf(node, self._advance())
            node.add(self._expression())
            self._leaf(node, self._consume(TokenType.R_BRACKET, "expected ']'"))
        self._leaf(node, self._consume(TokenType.ASSIGNMENT_OPERATOR, "expected '='"))
        node.add(self._expression())
        return node

    # Expressions ---------------------------------------------------------------

    #lowest precedence first: or, and, equality, relational, additive, multiplicative
    def _expression(self) -> CSTNode:
        return self._logical_or()

    def _logical_or(self) -> CSTNode:
        return self._left_fold(self._logical_and, (TokenType.BOOLEAN_OR,))

    def _logical_and(self) -> CSTNode:
        return self._left_fold(self._equality, (TokenType.BOOLEAN_AND,))

    def _equality(self) -> CSTNode:
        return self._left_fold(self._relational, _EQUALITY)

    def _relational(self) -> CSTNode:
        return self._left_fold(self._additive, _RELATIONAL)

    def _additive(self) -> CSTNode:
        return self._left_fold(self._multiplicative, _ADDITIVE)

    def _multiplicative(self) -> CSTNode:
        return self._left_fold(self._unary, _MULTIPLICATIVE)

    #builds left-associative BinaryOp nodes iteratively
    def _left_fold(self, operand: Callable[[], CSTNode], operators: tuple[TokenType, ...]) -> CSTNode:
        left = operand()
        while self._peek().type in operators:
            operator = self._advance()
            node = CSTNode("BinaryOp", left.line)
            node.add(left)
            self._leaf(node, operator)
            node.add(operand())
            left = node
        return left

    #prefix operators nest to the right
    def _unary(self) -> CSTNode:
        if self._check(TokenType.BOOLEAN_NOT) or self._check(TokenType.MINUS):
            operator = self._advance()
            node = CSTNode("UnaryOp", operator.line)
            self._leaf(node, operator)
            node.add(self._unary())
            return node
        return self._primary()

    def _primary(self) -> CSTNode:
        token = self._peek()
        if token.type is TokenType.INTEGER:
            self._advance()
            return CSTNode(token.value, token.line)
        if token.type is TokenType.IDENTIFIER:
            lookahead = self._peek_next()
            if lookahead.type is TokenType.L_PAREN:
                return self._function_call()
            self._advance()
            if lookahead.type is TokenType.L_BRACKET:
                node = CSTNode("ArrayAccess", token.line)
                self._leaf(node, token)
                self._leaf(node, self._advance())
                node.add(self._expression())
                self._leaf(node, self._consume(TokenType.R_BRACKET, "expected ']'"))
                return node
            return CSTNode(token.value, token.line)
        if token.type is TokenType.SINGLE_QUOTED_STRING:
            return self._quoted_literal("CharLiteral", "'")
        if token.type is TokenType.DOUBLE_QUOTED_STRING:
            return self._quoted_literal("StringLiteral", '"')
        if token.type is TokenType.L_PAREN:
            opening = self._advance()
            node = CSTNode("ParenExpr", opening.line)
            self._leaf(node, opening)
            node.add(self._expression())
            self._leaf(node, self._consume(TokenType.R_PAREN, "expected ')'"))
            return node
        raise ParseError(f"unexpected token '{token.value}'", token.line)

    #splits a quoted token into delimiter, content and delimiter leaves
    def _quoted_literal(self, label: str, quote: str) -> CSTNode:
        token = self._advance()
        node = CSTNode(label, token.line)
        node.add(CSTNode(quote, token.line))
        node.add(CSTNode(token.value[1:-1], token.line))
        node.add(CSTNode(quote, token.line))
        return node

    def _function_call(self) -> CSTNode:
        name = self._consume(TokenType.IDENTIFIER, "expected function name")
        node = CSTNode("FunctionCall", name.line)
        self._leaf(node, name)
        self._leaf(node, self._consume(TokenType.L_PAREN, "expected '('"))
        if not self._check(TokenType.R_PAREN):
            while True:
                node.add(self._expression())
                if not self._check(TokenType.COMMA):
                    break
                self._leaf(node, self._advance())
        self._leaf(node, self._consume(TokenType.R_PAREN, "expected ')'"))
        return node

    # Utilities ----------------------------------------------------------------

    def _leaf(self, parent: CSTNode, token: Token) -> None:
        parent.add(CSTNode(token.value, token.line))

    def _reject_reserved(self, name: Token, role: str) -> None:
        if name.value in RESERVED_WORDS:
            raise ParseError(
                f'reserved word "{name.value}" cannot be used for the name of a {role}.',
                name.line,
            )

    def _consume_type(self, message: str) -> Token:
        token = self._peek()
        if token.type is TokenType.IDENTIFIER and token.value in DATA_TYPES:
            return self._advance()
        raise ParseError(message, token.line)

    #convenience to assert the upcoming token type
    def _consume(self, token_type: TokenType, message: str) -> Token:
        if self._check(token_type):
            return self._advance()
        raise ParseError(message, self._peek().line)

    def _check(self, token_type: TokenType) -> bool:
        return self._peek().type is token_type

    #moves past the current significant token and returns it
    def _advance(self) -> Token:
        token = self._peek()
        if token.type is not TokenType.END_OF_FILE:
            self._current += 1
        return token

    #skips layout tokens so callers only ever see significant ones
    def _peek(self) -> Token:
        while self._current < len(self.tokens) - 1 and self.tokens[self._current].is_layout:
            self._current += 1
        return self.tokens[self._current]

    #bounded lookahead one significant token past the current one
    def _peek_next(self) -> Token:
        self._peek()
        index = self._current + 1
        while index < len(self.tokens) - 1 and self.tokens[index].is_layout:
            index += 1
        return self.tokens[min(index, len(self.tokens) - 1)]


#runs the parser over an already lexed token list
def parse(tokens: List[Token]) -> CSTNode:
    return Parser(tokens).parse()
