from minic import ast
from minic.ast_builder import ASTBuilder
from minic.dump import dump_ast, rpn
from minic.lexer import Lexer
from minic.parser import Parser


#runs the front end through AST construction
def build(source: str) -> ast.Program:
    tokens = Lexer(source).lex()
    return ASTBuilder(Parser(tokens).parse()).build()


def body(source: str) -> list:
    routine = build(source).declarations[0]
    assert isinstance(routine, ast.Routine)
    return routine.body.statements


SAMPLE = """
int x;
function int add(int a, int b)
{
  return a + b;
}
procedure main(void)
{
  int i;
  char s[4];
  x = add(1, 2);
  s[0] = 'h';
  if (x > 2) {
    printf("x is %d\\n", x);
  } else {
    x = 0;
  }
  for (i = 0; i < 3; i = i + 1) {
    x = x * (i + 1);
  }
  while (!(x == 0)) {
    x = x - 1;
  }
  display(x);
}
"""

EXPECTED_DUMP = """\
DECLARATION
DECLARATION
BEGIN BLOCK
RETURN   a   b   +
END BLOCK
DECLARATION
BEGIN BLOCK
DECLARATION
DECLARATION
ASSIGNMENT   x   add   (   1   ,   2   )   =
ASSIGNMENT   s   [   0   ]   '   h   '   =
IF   x   2   >
BEGIN BLOCK
PRINTF   x is %d\\n   x
END BLOCK
ELSE
BEGIN BLOCK
ASSIGNMENT   x   0   =
END BLOCK
FOR EXPRESSION 1   i   0   =
FOR EXPRESSION 2   i   3   <
FOR EXPRESSION 3   i   i   1   +   =
BEGIN BLOCK
ASSIGNMENT   x   x   i   1   +   *   =
END BLOCK
WHILE   x   0   ==   !
BEGIN BLOCK
ASSIGNMENT   x   x   1   -   =
END BLOCK
CALL   display   (   x   )
END BLOCK

"""


#routines keep their name and kind alongside globals in source order
def test_program_shape() -> None:
    program = build(SAMPLE)
    kinds = [type(node).__name__ for node in program.declarations]
    assert kinds == ["Decl", "Routine", "Routine"]
    add, main = program.declarations[1], program.declarations[2]
    assert (add.name, add.kind) == ("add", "function")
    assert (main.name, main.kind) == ("main", "procedure")
    assert [var.name for var in program.declarations[0].variables] == ["x"]


#the reverse-Polish dump covers every statement kind
def test_dump_matches_golden() -> None:
    assert dump_ast(build(SAMPLE)) == EXPECTED_DUMP


#parentheses disappear, precedence survives in the tree shape
def test_parentheses_are_dropped() -> None:
    (statement,) = body("procedure main(void) { x = (1 + 2) * 3; }")
    assert isinstance(statement, ast.Assign)
    value = statement.value
    assert isinstance(value, ast.BinaryExpr)
    assert value.operator == "*"
    assert isinstance(value.left, ast.BinaryExpr)
    assert rpn(value) == "1   2   +   3   *"


#literals are classified by their spelling
def test_literal_kinds() -> None:
    (statement,) = body("procedure main(void) { f(-4, TRUE, FALSE, 'c', \"s\", name); }")
    assert isinstance(statement, ast.Call)
    kinds = [type(argument).__name__ for argument in statement.arguments]
    assert kinds == ["IntLiteral", "BoolLiteral", "BoolLiteral", "CharLiteral", "StringLiteral", "Identifier"]
    assert statement.arguments[0].text == "-4"
    assert statement.arguments[1].value is True
    assert statement.arguments[2].value is False
    assert statement.arguments[3].text == "c"
    assert statement.arguments[4].text == "s"


#printf becomes its own node with the format split from the arguments
def test_printf_node() -> None:
    (statement,) = body('procedure main(void) { printf("%d %d", a, b[2]); }')
    assert isinstance(statement, ast.Printf)
    assert isinstance(statement.format, ast.StringLiteral)
    assert statement.format.text == "%d %d"
    assert [type(argument).__name__ for argument in statement.arguments] == ["Identifier", "ArrayAccess"]


#else is a distinct node wrapping the alternative statement
def test_if_else_and_loops() -> None:
    statements = body(
        """
        procedure main(void)
        {
          if (a) x = 1; else x = 2;
          while (a) { a = a - 1; }
          for (i = 0; i < 2; i = i + 1) x = i;
          return 0;
        }
        """
    )
    branch, loop, counted, ret = statements
    assert isinstance(branch, ast.If)
    assert isinstance(branch.then_branch, ast.Assign)
    assert isinstance(branch.else_branch, ast.Else)
    assert isinstance(branch.else_branch.body, ast.Assign)
    assert isinstance(loop, ast.While)
    assert isinstance(loop.body, ast.Block)
    assert isinstance(counted, ast.For)
    assert counted.init.target.name == "i"
    assert rpn(counted.condition) == "i   2   <"
    assert isinstance(ret, ast.Return)


#array element targets carry their index expression
def test_array_assignment_target() -> None:
    (decl, statement) = body("procedure main(void) { int a[4]; a[1 + 1] = 5; }")
    assert isinstance(decl, ast.Decl)
    assert isinstance(statement.target, ast.ArrayAccess)
    assert rpn(statement.target.index) == "1   1   +"
    assert rpn(statement.value) == "5"


#routines without statements still produce a block in the dump
def test_empty_routine_dump() -> None:
    assert dump_ast(build("procedure main(void) { }")) == "DECLARATION\nBEGIN BLOCK\nEND BLOCK\n\n"
