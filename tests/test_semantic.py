import pytest

from minic.errors import SemanticError
from minic.lexer import Lexer
from minic.parser import Parser
from minic.semantic import GLOBAL_SCOPE, DataType, ResolvedProgram, SymbolKind, SymbolResolver


#runs the front end through symbol resolution
def resolve(source: str) -> ResolvedProgram:
    tokens = Lexer(source).lex()
    cst = Parser(tokens).parse()
    return SymbolResolver(cst).resolve()


#globals live in scope 0, each routine and its locals share a fresh scope
def test_global_and_local_scopes() -> None:
    table = resolve(
        """
        int x;
        function int main(void)
        {
          int y;
          x = 1;
          y = 2;
          return x + y;
        }
        """
    ).table
    rows = [(entry.name, entry.kind, entry.data_type, entry.scope) for entry in table]
    assert rows == [
        ("x", SymbolKind.VARIABLE, DataType.INT, GLOBAL_SCOPE),
        ("main", SymbolKind.FUNCTION, DataType.INT, 1),
        ("y", SymbolKind.VARIABLE, DataType.INT, 1),
    ]


#scope ids increase by one per routine in source order
def test_scope_ids_increase() -> None:
    table = resolve(
        """
        procedure a(void) { }
        int g;
        function bool b(void) { return TRUE; }
        procedure main(void) { }
        """
    ).table
    assert [(entry.name, entry.scope) for entry in table.routines()] == [("a", 1), ("b", 2), ("main", 3)]
    assert table.routine("a").data_type is DataType.VOID
    assert table.routine("b").data_type is DataType.BOOL
    assert table.in_scope(GLOBAL_SCOPE)[0].name == "g"


#parameters are recorded before locals, arrays with their sizes
def test_parameters_precede_locals() -> None:
    resolved = resolve(
        """
        function int f(int a, char b[], char c[8])
        {
          int d[3];
          return a;
        }
        """
    )
    rows = [(entry.name, entry.kind, entry.is_array, entry.array_size) for entry in resolved.table]
    assert rows == [
        ("f", SymbolKind.FUNCTION, False, 0),
        ("a", SymbolKind.PARAMETER, False, 0),
        ("b", SymbolKind.PARAMETER, True, 0),
        ("c", SymbolKind.PARAMETER, True, 8),
        ("d", SymbolKind.VARIABLE, True, 3),
    ]
    parameters = resolved.parameter_lists["f"]
    assert len(parameters) == 3
    assert [(p.name, p.data_type, p.scope) for p in parameters] == [
        ("a", DataType.INT, 1),
        ("b", DataType.CHAR, 1),
        ("c", DataType.CHAR, 1),
    ]


#a void parameter list yields an empty list
def test_void_parameter_list() -> None:
    resolved = resolve("procedure main(void) { }")
    assert len(resolved.parameter_lists["main"]) == 0


#declarations inside nested blocks belong to the enclosing routine
def test_nested_block_declarations() -> None:
    table = resolve(
        """
        procedure main(void)
        {
          if (TRUE) {
            int inner;
            inner = 1;
          }
        }
        """
    ).table
    inner = table.find_storage("inner", 1)
    assert inner is not None
    assert inner.kind is SymbolKind.VARIABLE


#the same local name may be reused across routines
def test_same_local_in_two_routines() -> None:
    table = resolve(
        """
        procedure a(void) { int n; n = 1; }
        procedure b(int n) { n = 2; }
        """
    ).table
    assert table.find_storage("n", 1) is not None
    assert table.find_storage("n", 2).kind is SymbolKind.PARAMETER


#duplicate locals are rejected with the line of the second declaration
def test_duplicate_local() -> None:
    with pytest.raises(SemanticError) as excinfo:
        resolve("procedure main(void)\n{\n  int a;\n  char a;\n}\n")
    assert excinfo.value.line == 4
    assert str(excinfo.value) == 'Error on line 4: variable "a" is already defined locally'


#a local may not reuse a global name
def test_local_shadowing_global() -> None:
    with pytest.raises(SemanticError) as excinfo:
        resolve("int a;\nprocedure main(void) { int a; }")
    assert 'variable "a" is already defined globally' in str(excinfo.value)


#duplicate globals are reported as global redeclarations
def test_duplicate_global() -> None:
    with pytest.raises(SemanticError) as excinfo:
        resolve("int a;\nbool b, a;")
    assert excinfo.value.line == 2
    assert "already defined globally" in str(excinfo.value)


#parameters obey the same rules as locals
def test_parameter_redeclaration() -> None:
    with pytest.raises(SemanticError):
        resolve("procedure p(int a, int a) { }")
    with pytest.raises(SemanticError):
        resolve("procedure p(int a) { int a; }")
    with pytest.raises(SemanticError):
        resolve("int a;\nprocedure p(char a) { }")
