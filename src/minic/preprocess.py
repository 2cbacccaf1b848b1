"""Comment stripping applied to raw source before lexing."""
from __future__ import annotations

import logging
from enum import Enum, auto
from typing import List

from .errors import PreprocessError

logger = logging.getLogger(__name__)


class _State(Enum):
    CODE = auto()
    ONE_SLASH = auto()
    LINE_COMMENT = auto()
    BLOCK_COMMENT = auto()
    BLOCK_COMMENT_END = auto()
    IN_STRING = auto()


def strip_comments(source: str) -> str:
    """Replace ``//`` and ``/* */`` comments with spaces, keeping every newline.

    Double-quoted strings are copied untouched so comment markers inside them
    survive. A stray ``*/`` or a block comment still open at end of input
    raises :class:`PreprocessError`.
    """

    out: List[str] = []
    state = _State.CODE
    line = 1
    block_start_line = 0
    index = 0
    length = len(source)
    while index < length:
        char = source[index]
        if state is _State.CODE:
            if char == "*" and index + 1 < length and source[index + 1] == "/":
                raise PreprocessError("unterminated comment", line)
            if char == "/":
                state = _State.ONE_SLASH
            elif char == '"':
                state = _State.IN_STRING
                out.append(char)
            else:
                out.append(char)
        elif state is _State.ONE_SLASH:
            if char == "/":
                out.append("  ")
                state = _State.LINE_COMMENT
            elif char == "*":
                out.append("  ")
                state = _State.BLOCK_COMMENT
                block_start_line = line
            else:
                # not a comment after all: emit the held slash and rescan
                out.append("/")
                state = _State.CODE
                continue
        elif state is _State.LINE_COMMENT:
            if char == "\n":
                out.append(char)
                state = _State.CODE
            else:
                out.append(" ")
        elif state is _State.BLOCK_COMMENT:
            out.append("\n" if char == "\n" else " ")
            if char == "*":
                state = _State.BLOCK_COMMENT_END
        elif state is _State.BLOCK_COMMENT_END:
            out.append("\n" if char == "\n" else " ")
            if char == "/":
                state = _State.CODE
            elif char != "*":
                state = _State.BLOCK_COMMENT
        else:
            out.append(char)
            if char == '"':
                state = _State.CODE
            elif char == "\\" and index + 1 < length:
                out.append(source[index + 1])
                if source[index + 1] == "\n":
                    line += 1
                index += 1

        if char == "\n":
            line += 1
        index += 1

    if state is _State.ONE_SLASH:
        out.append("/")
    if state in (_State.BLOCK_COMMENT, _State.BLOCK_COMMENT_END):
        raise PreprocessError("unterminated comment", block_start_line)
    logger.debug("stripped comments from %d lines", line)
    return "".join(out)
