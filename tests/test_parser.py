import pytest
from tests.utils import parse_text
from ast_nodes import *


def _decls(program):
    return program.decls.decls


def test_parser_parses_global_declarations():
    src = "int x; bool flag; struct P { int a; }; void f() { }"
    ast = parse_text(src)
    assert ast.type == NodeType.PROGRAM
    decls = _decls(ast)
    assert [d.type for d in decls] == [
        NodeType.VAR_DECL,
        NodeType.VAR_DECL,
        NodeType.STRUCT_DECL,
        NodeType.FUNC_DECL,
    ]
    assert isinstance(decls[0].var_type, IntTypeNode)
    assert isinstance(decls[1].var_type, BoolTypeNode)
    assert decls[2].name.name == "P"
    assert len(decls[2].fields.decls) == 1


def test_parser_function_formals_and_body():
    src = "int add(int a, struct P p) { int t; t = a; return t; }"
    fn = _decls(parse_text(src))[0]
    assert isinstance(fn, FunctionDeclarationNode)
    assert isinstance(fn.return_type, IntTypeNode)
    assert [f.name.name for f in fn.formals.formals] == ["a", "p"]
    assert isinstance(fn.formals.formals[1].var_type, StructTypeNode)
    assert fn.formals.formals[1].var_type.name.name == "P"
    assert [d.name.name for d in fn.body.decls.decls] == ["t"]
    stmts = fn.body.stmts.statements
    assert isinstance(stmts[0], AssignStatementNode)
    assert isinstance(stmts[1], ReturnStatementNode)


def test_parser_struct_semicolon_is_optional():
    with_semi = parse_text("struct P { int a; }; int x;")
    without = parse_text("struct P { int a; } int x;")
    assert len(_decls(with_semi)) == len(_decls(without)) == 2


def test_parser_statement_kinds():
    src = """
    void main() {
        x = 1;
        x++;
        x--;
        input >> x;
        disp << "hi";
        f(x, 2);
        return;
    }
    """
    stmts = _decls(parse_text(src))[0].body.stmts.statements
    assert [type(s) for s in stmts] == [
        AssignStatementNode,
        PostIncStatementNode,
        PostDecStatementNode,
        ReadStatementNode,
        WriteStatementNode,
        CallStatementNode,
        ReturnStatementNode,
    ]
    call = stmts[5].call
    assert call.function.name == "f"
    assert len(call.arguments.expressions) == 2


def test_parser_if_else_and_while_blocks_have_own_decls():
    src = """
    void main() {
        if (true) { int a; a = 1; } else { bool b; }
        while (false) { int c; }
        if (x) { }
    }
    """
    stmts = _decls(parse_text(src))[0].body.stmts.statements
    if_else, loop, plain_if = stmts
    assert isinstance(if_else, IfElseStatementNode)
    assert [d.name.name for d in if_else.then_decls.decls] == ["a"]
    assert [d.name.name for d in if_else.else_decls.decls] == ["b"]
    assert len(if_else.then_stmts.statements) == 1
    assert isinstance(loop, WhileStatementNode)
    assert [d.name.name for d in loop.decls.decls] == ["c"]
    assert isinstance(plain_if, IfStatementNode)


def test_parser_operator_precedence():
    src = "void main() { x = 1 + 2 * 3 == 7 || !b && c; }"
    assign = _decls(parse_text(src))[0].body.stmts.statements[0].assignment
    rhs = assign.right
    assert isinstance(rhs, BinaryOpNode) and rhs.operator == "||"
    assert rhs.left.operator == "=="
    assert rhs.left.left.operator == "+"
    assert rhs.left.left.right.operator == "*"
    assert rhs.right.operator == "&&"
    assert isinstance(rhs.right.left, UnaryOpNode)
    assert rhs.right.left.operator == "!"


def test_parser_assignment_is_right_associative():
    src = "void main() { a = b = 3; }"
    assign = _decls(parse_text(src))[0].body.stmts.statements[0].assignment
    assert isinstance(assign.right, AssignmentNode)
    assert assign.left.name == "a"
    assert assign.right.left.name == "b"


def test_parser_dot_access_chain_is_left_nested():
    src = "void main() { a.b.c = 1; }"
    assign = _decls(parse_text(src))[0].body.stmts.statements[0].assignment
    outer = assign.left
    assert isinstance(outer, DotAccessNode)
    assert outer.field_id.name == "c"
    assert isinstance(outer.loc, DotAccessNode)
    assert outer.loc.loc.name == "a"
    assert outer.loc.field_id.name == "b"


def test_parser_unary_minus_applies_to_call():
    src = "void main() { x = -f(1) + 2; }"
    rhs = _decls(parse_text(src))[0].body.stmts.statements[0].assignment.right
    assert rhs.operator == "+"
    assert isinstance(rhs.left, UnaryOpNode)
    assert isinstance(rhs.left.operand, FunctionCallNode)


def test_parser_identifier_positions():
    src = "int x;\nvoid main() {\n    x = y;\n}"
    fn = _decls(parse_text(src))[1]
    assign = fn.body.stmts.statements[0].assignment
    assert (assign.left.line, assign.left.column) == (3, 5)
    assert (assign.right.line, assign.right.column) == (3, 9)
    assert (fn.name.line, fn.name.column) == (2, 6)


@pytest.mark.parametrize(
    "src",
    [
        "int x",
        "x = 1;",
        "void main() { x + 1 = 2; }",
        "void main() { x; }",
        "void main() { x = 1; int y; }",
        "void main() { input >> 3; }",
        "void main() { (a + b).c = 1; }",
        "struct P { int a; void f() { } };",
        "void main() { 1(2); }",
    ],
)
def test_parser_rejects_malformed_programs(src):
    with pytest.raises(SyntaxError):
        parse_text(src)
