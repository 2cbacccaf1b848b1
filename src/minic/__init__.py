"""minic: a small C-like language, from source text to tree-walking execution."""

#makes package exports explicit for downstream imports
from . import ast, ast_builder, cst, dump, interpreter, lexer, parser, preprocess, semantic, token, values

__all__ = [
    "ast",
    "ast_builder",
    "cst",
    "dump",
    "interpreter",
    "lexer",
    "parser",
    "preprocess",
    "semantic",
    "token",
    "values",
]
