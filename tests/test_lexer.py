import pytest

from minic.errors import LexError
from minic.lexer import Lexer
from minic.token import TokenType


#drops whitespace/newline tokens so assertions stay readable
def significant(source: str):
    return [(token.type, token.value) for token in Lexer(source).lex() if not token.is_layout]


#two-character operators are resolved with one character of lookahead
def test_paired_operators() -> None:
    assert significant("a<=b != c == d && e || !f > g") == [
        (TokenType.IDENTIFIER, "a"),
        (TokenType.LT_EQUAL, "<="),
        (TokenType.IDENTIFIER, "b"),
        (TokenType.BOOLEAN_NOT_EQUAL, "!="),
        (TokenType.IDENTIFIER, "c"),
        (TokenType.BOOLEAN_EQUAL, "=="),
        (TokenType.IDENTIFIER, "d"),
        (TokenType.BOOLEAN_AND, "&&"),
        (TokenType.IDENTIFIER, "e"),
        (TokenType.BOOLEAN_OR, "||"),
        (TokenType.BOOLEAN_NOT, "!"),
        (TokenType.IDENTIFIER, "f"),
        (TokenType.GT, ">"),
        (TokenType.IDENTIFIER, "g"),
        (TokenType.END_OF_FILE, ""),
    ]


#a minus directly followed by a digit becomes part of the integer
def test_minus_before_digit_is_fused() -> None:
    assert significant("x = -5;")[2] == (TokenType.INTEGER, "-5")
    assert significant("a-1") == [
        (TokenType.IDENTIFIER, "a"),
        (TokenType.INTEGER, "-1"),
        (TokenType.END_OF_FILE, ""),
    ]
    assert significant("a - 1")[1] == (TokenType.MINUS, "-")


#lone '&' and '|' are reported as error tokens without stopping the scan
def test_lone_ampersand_and_pipe_are_error_tokens() -> None:
    assert significant("a & b | c") == [
        (TokenType.IDENTIFIER, "a"),
        (TokenType.ERROR, "&"),
        (TokenType.IDENTIFIER, "b"),
        (TokenType.ERROR, "|"),
        (TokenType.IDENTIFIER, "c"),
        (TokenType.END_OF_FILE, ""),
    ]


#quoted literals keep their delimiters and raw escapes
def test_quoted_literals_keep_escapes() -> None:
    tokens = significant(r'"a\"b\x41B" ' + r"'\n'")
    assert tokens[0] == (TokenType.DOUBLE_QUOTED_STRING, r'"a\"b\x41B"')
    assert tokens[1] == (TokenType.SINGLE_QUOTED_STRING, r"'\n'")


#a hex escape with a single digit ends early and the quote still closes
def test_short_hex_escape_resumes_scanning() -> None:
    tokens = significant(r"'\x4' x")
    assert tokens[0] == (TokenType.SINGLE_QUOTED_STRING, r"'\x4'")
    assert tokens[1] == (TokenType.IDENTIFIER, "x")


#unterminated literals are fatal and report their line
def test_unterminated_string_is_error() -> None:
    with pytest.raises(LexError) as excinfo:
        Lexer('x;\n"abc\ny;').lex()
    assert excinfo.value.line == 2
    assert str(excinfo.value) == "Syntax error on line 2: unterminated string quote."


#line and column are tracked per token, column resets after newline
def test_positions_are_tracked() -> None:
    tokens = [token for token in Lexer("int x;\n  y").lex() if not token.is_layout]
    y = tokens[3]
    assert (y.value, y.line, y.column) == ("y", 2, 3)
    assert tokens[-1].type is TokenType.END_OF_FILE


#whitespace and newlines are emitted so the parser can skip them itself
def test_layout_tokens_are_emitted() -> None:
    types = [token.type for token in Lexer("a \n").lex()]
    assert types == [TokenType.IDENTIFIER, TokenType.WHITESPACE, TokenType.NEWLINE, TokenType.END_OF_FILE]


#identifiers and integers are ASCII only, other letters and digits are error tokens
def test_non_ascii_characters_are_error_tokens() -> None:
    assert significant("é") == [(TokenType.ERROR, "é"), (TokenType.END_OF_FILE, "")]
    assert significant("a²") == [
        (TokenType.IDENTIFIER, "a"),
        (TokenType.ERROR, "²"),
        (TokenType.END_OF_FILE, ""),
    ]
    assert significant("-٣")[:2] == [(TokenType.MINUS, "-"), (TokenType.ERROR, "٣")]
