"""Command-line entry point for minic."""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from . import ast
from .ast_builder import ASTBuilder
from .cst import CSTNode
from .dump import dump_ast, dump_parameter_lists, dump_symbol_table, dump_tokens
from .errors import MinicError
from .interpreter import Interpreter
from .lexer import Lexer
from .parser import Parser
from .preprocess import strip_comments
from .semantic import ResolvedProgram, SymbolResolver
from .token import Token

logger = logging.getLogger("minic")

DEFAULT_SOURCE = "file1.txt"


#every artifact the front end produces, in pipeline order
@dataclass(slots=True)
class Analysis:
    tokens: List[Token]
    cst: CSTNode
    resolved: ResolvedProgram
    program: ast.Program


#pipelines preprocessing->lexing->parsing->symbols->AST for tooling
def analyze(source: str) -> Analysis:
    tokens = Lexer(strip_comments(source)).lex()
    cst = Parser(tokens).parse()
    resolved = SymbolResolver(cst).resolve()
    program = ASTBuilder(cst).build()
    return Analysis(tokens=tokens, cst=cst, resolved=resolved, program=program)


def read_source(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


#handles the `minic run` subcommand
def cmd_run(args: argparse.Namespace) -> int:
    analysis = analyze(read_source(args.source))
    interpreter = Interpreter(analysis.program, analysis.resolved, out=sys.stdout, trace=args.trace)
    interpreter.run()
    sys.stdout.flush()
    return 0


#prints the reverse-Polish AST dump
def cmd_ast(args: argparse.Namespace) -> int:
    analysis = analyze(read_source(args.source))
    sys.stdout.write(dump_ast(analysis.program))
    return 0


#prints the symbol table followed by the parameter lists
def cmd_symbols(args: argparse.Namespace) -> int:
    analysis = analyze(read_source(args.source))
    table = analysis.resolved.table
    sys.stdout.write(dump_symbol_table(table))
    sys.stdout.write(dump_parameter_lists(table, analysis.resolved.parameter_lists))
    return 0


#prints the source reconstructed from its tokens
def cmd_tokens(args: argparse.Namespace) -> int:
    tokens = Lexer(strip_comments(read_source(args.source))).lex()
    sys.stdout.write(dump_tokens(tokens))
    return 0


#configures the CLI surface across run/ast/symbols/tokens
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="minic", description="minic language tools")
    parser.add_argument("-v", "--verbose", action="store_true", help="log pipeline progress to stderr")
    #with no subcommand the default source file is run
    parser.set_defaults(func=cmd_run, source=DEFAULT_SOURCE, trace=False)
    subparsers = parser.add_subparsers(dest="command")

    p_run = subparsers.add_parser("run", help="interpret a source file")
    p_run.add_argument("source", nargs="?", default=DEFAULT_SOURCE, help="path to source file")
    p_run.add_argument("--trace", action="store_true", help="log routine calls while executing")
    p_run.set_defaults(func=cmd_run)

    p_ast = subparsers.add_parser("ast", help="print the reverse-Polish AST dump")
    p_ast.add_argument("source", nargs="?", default=DEFAULT_SOURCE, help="path to source file")
    p_ast.set_defaults(func=cmd_ast)

    p_sym = subparsers.add_parser("symbols", help="print the symbol table and parameter lists")
    p_sym.add_argument("source", nargs="?", default=DEFAULT_SOURCE, help="path to source file")
    p_sym.set_defaults(func=cmd_symbols)

    p_tok = subparsers.add_parser("tokens", help="print the token listing")
    p_tok.add_argument("source", nargs="?", default=DEFAULT_SOURCE, help="path to source file")
    p_tok.set_defaults(func=cmd_tokens)

    return parser


def configure_logging(verbose: bool, trace: bool = False) -> None:
    level = logging.DEBUG if verbose or trace else logging.WARNING
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")


#entry point used by both console script and module execution
def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, getattr(args, "trace", False))
    try:
        return args.func(args)
    except OSError as exc:
        print(f"can't open file '{exc.filename}'", file=sys.stderr)
        return 1
    except UnicodeDecodeError:
        print(f"can't decode file '{args.source}' as UTF-8", file=sys.stderr)
        return 1
    except MinicError as exc:
        print(exc, file=sys.stderr)
        return 1
    except RecursionError:
        logger.error("recursion too deep")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
