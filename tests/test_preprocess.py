import pytest

from minic.errors import PreprocessError
from minic.preprocess import strip_comments


#line comments are blanked up to, but not including, the newline
def test_line_comment() -> None:
    source = "int x; // note\nint y;"
    stripped = strip_comments(source)
    assert stripped == "int x;        \nint y;"
    assert len(stripped) == len(source)


#block comments keep their newlines so line numbers stay stable
def test_block_comment_keeps_newlines() -> None:
    source = "a /* b\n c */ d"
    stripped = strip_comments(source)
    assert stripped.split() == ["a", "d"]
    assert stripped.count("\n") == 1
    assert len(stripped) == len(source)


#comment markers inside string literals are left alone
def test_strings_are_untouched() -> None:
    source = 'printf("// not /* a */ comment \\" still");'
    assert strip_comments(source) == source


#a slash that does not start a comment is division
def test_division_survives() -> None:
    assert strip_comments("a / b/c") == "a / b/c"
    assert strip_comments("a/") == "a/"


#a star before the closing slash ends the comment
def test_starred_block_comment() -> None:
    assert strip_comments("x/**/y/***/z") == "x    y     z"


#an unclosed block comment reports the line it started on
def test_unterminated_block_comment() -> None:
    with pytest.raises(PreprocessError) as excinfo:
        strip_comments("x;\n/* open\nstill open\n")
    assert excinfo.value.line == 2
    assert str(excinfo.value) == "ERROR: Program contains C-style, unterminated comment on line 2"


#a closing marker with no opening one is an error
def test_stray_comment_end() -> None:
    with pytest.raises(PreprocessError) as excinfo:
        strip_comments("x;\ny; */\n")
    assert excinfo.value.line == 2
