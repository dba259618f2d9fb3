import pytest
from tests.utils import parse_text, analyze_text, kinds
from ast_nodes import *
from diagnostics import ErrorKind
from name_resolver import NameResolver, resolve_names
from symbols import *

UNDECLARED = ErrorKind.UNDECLARED_IDENTIFIER
DUPLICATE = ErrorKind.DUPLICATE_NAME
VOID = ErrorKind.VOID_VARIABLE
BAD_STRUCT = ErrorKind.INVALID_STRUCT_TYPE
NON_STRUCT = ErrorKind.DOT_ACCESS_NON_STRUCT
BAD_FIELD = ErrorKind.INVALID_FIELD_NAME


def _positions(resolution):
    return [(d.line, d.column) for d in resolution.diagnostics]


def _function(resolution, name):
    return next(
        d
        for d in resolution.program.decls.decls
        if isinstance(d, FunctionDeclarationNode) and d.name.name == name
    )


def _statements(resolution, name):
    return _function(resolution, name).body.stmts.statements


def test_struct_program_resolves_cleanly(point_program):
    resolution = analyze_text(point_program)
    assert resolution.ok
    assert len(resolution.diagnostics) == 0

    point = resolution.table.lookup_global("Point")
    assert isinstance(point, StructDefSymbol)

    first = _statements(resolution, "main")[0].assignment.left
    assert isinstance(first, DotAccessNode)
    assert resolution.symbol_of(first.field_id) is point.fields.lookup_local("x")
    instance = resolution.symbol_of(first.loc)
    assert isinstance(instance, StructInstanceSymbol)
    assert instance.struct_name == "Point"


def test_every_use_in_clean_program_is_annotated(point_program):
    resolution = analyze_text(point_program)
    fn = _function(resolution, "main")
    for ident in iter_identifiers(fn.body.stmts):
        assert ident.symbol is not None, ident.name


def test_undeclared_identifier_reported_at_use():
    resolution = analyze_text("void f() { x = 1; }")
    assert kinds(resolution) == [UNDECLARED]
    assert _positions(resolution) == [(1, 12)]
    assert _statements(resolution, "f")[0].assignment.left.symbol is None


def test_use_before_global_declaration_is_undeclared():
    resolution = analyze_text("void f() { g = 1; }\nint g;")
    assert kinds(resolution) == [UNDECLARED]


def test_dot_access_on_undeclared_name_is_one_error():
    resolution = analyze_text("void f() { undeclaredVar.field = 1; }")
    assert kinds(resolution) == [NON_STRUCT]
    assert _positions(resolution) == [(1, 12)]


def test_dot_access_on_int_variable():
    resolution = analyze_text("void f() { int n; n.x = 1; }")
    assert kinds(resolution) == [NON_STRUCT]


def test_duplicate_formals_collide():
    resolution = analyze_text("void f(int a, bool a) { }")
    assert kinds(resolution) == [DUPLICATE]
    assert _positions(resolution) == [(1, 20)]


def test_formal_and_local_with_same_name_collide():
    resolution = analyze_text("void f(int a) { int a; }")
    assert kinds(resolution) == [DUPLICATE]
    assert _positions(resolution) == [(1, 21)]


def test_shadowing_global_in_function_is_allowed():
    resolution = analyze_text("int x; void f() { bool x; x = true; }")
    assert resolution.ok
    use = _statements(resolution, "f")[0].assignment.left
    assert resolution.symbol_of(use).type == SymbolType.BOOL


def test_formal_may_share_function_name():
    assert analyze_text("void f(int f) { f = 1; }").ok


def test_outer_struct_instance_cannot_be_dot_accessed_from_nested_block():
    src = """struct P { int x; };
void f() {
    struct P p;
    if (true) {
        p.x = 1;
    }
}"""
    resolution = analyze_text(src)
    assert kinds(resolution) == [NON_STRUCT]
    assert _positions(resolution) == [(5, 9)]


def test_global_struct_instance_cannot_be_dot_accessed_from_function():
    resolution = analyze_text("struct P { int x; }; struct P g; void f() { g.x = 1; }")
    assert kinds(resolution) == [NON_STRUCT]


def test_chained_access_resolves_last_field_as_plain_identifier():
    src = """struct Inner { int c; };
struct Outer { struct Inner b; };
void f() {
    struct Outer a;
    a.b.c = 1;
}"""
    resolution = analyze_text(src)
    assert kinds(resolution) == [UNDECLARED]
    assert _positions(resolution) == [(5, 9)]

    access = _statements(resolution, "f")[0].assignment.left
    outer = resolution.table.lookup_global("Outer")
    assert resolution.symbol_of(access.loc.field_id) is outer.fields.lookup_local("b")


def test_chained_access_picks_up_global_of_same_name():
    src = """int c;
struct Inner { int c; };
struct Outer { struct Inner b; };
void f() {
    struct Outer a;
    a.b.c = 1;
}"""
    resolution = analyze_text(src)
    assert resolution.ok
    access = _statements(resolution, "f")[0].assignment.left
    assert resolution.symbol_of(access.field_id) is resolution.table.lookup_global("c")


def test_void_variable_is_reported_and_not_declared():
    resolution = analyze_text("void v;\nint f() { return v; }")
    assert kinds(resolution) == [VOID, UNDECLARED]
    assert _positions(resolution) == [(1, 6), (2, 18)]


def test_void_formal_is_reported():
    resolution = analyze_text("void f(void a) { }")
    assert kinds(resolution) == [VOID]
    assert _positions(resolution) == [(1, 13)]


def test_void_function_is_fine():
    assert analyze_text("void f() { return; }").ok


def test_invalid_struct_type_still_declares_instance():
    resolution = analyze_text("void f() { struct Missing m; m.x = 1; }")
    assert kinds(resolution) == [BAD_STRUCT]
    assert _positions(resolution) == [(1, 27)]
    assert _statements(resolution, "f")[0].assignment.left.loc.symbol is not None


def test_struct_type_naming_a_variable_is_not_reported():
    resolution = analyze_text("int a; void f() { struct a x; }")
    assert kinds(resolution) == []
    decl = _function(resolution, "f").body.decls.decls[0]
    assert decl.var_type.name.symbol is None
    assert resolution.arena[len(resolution.arena) - 1].name == "x"


def test_dot_access_through_non_struct_type_name_stops_silently():
    resolution = analyze_text("void g() { } void f() { struct g x; x.y = 1; }")
    assert kinds(resolution) == []
    access = _statements(resolution, "f")[0].assignment.left
    assert access.loc.symbol is not None
    assert access.field_id.symbol is None


def test_struct_type_name_is_annotated():
    resolution = analyze_text("struct P { int x; }; struct P p;")
    assert resolution.ok
    var_decl = resolution.program.decls.decls[1]
    struct_name = var_decl.var_type.name
    assert resolution.symbol_of(struct_name) is resolution.table.lookup_global("P")
    # Declaration names are not annotated.
    assert var_decl.name.symbol is None


def test_duplicate_struct_skips_its_fields():
    resolution = analyze_text("struct P { int a; };\nstruct P { void b; };")
    assert kinds(resolution) == [DUPLICATE]
    assert _positions(resolution) == [(2, 8)]
    assert resolution.table.lookup_global("P").fields.lookup_local("a") is not None


def test_duplicate_field_in_struct():
    resolution = analyze_text("struct P { int x; bool x; };")
    assert kinds(resolution) == [DUPLICATE]


def test_field_names_do_not_clash_with_globals():
    assert analyze_text("int x; struct P { int x; };").ok


def test_invalid_field_name():
    resolution = analyze_text("struct P { int x; };\nvoid f() { struct P p; p.y = 1; }")
    assert kinds(resolution) == [BAD_FIELD]
    assert _positions(resolution) == [(2, 26)]


def test_call_requires_declared_callee():
    resolution = analyze_text("void f() { g(1); }")
    assert kinds(resolution) == [UNDECLARED]
    assert _positions(resolution) == [(1, 12)]


def test_call_resolves_to_function_symbol():
    resolution = analyze_text("int g(int a, bool b) { return a; } void f() { g(1, true); }")
    assert resolution.ok
    call = _statements(resolution, "f")[0].call
    callee = resolution.symbol_of(call.function)
    assert isinstance(callee, FunctionSymbol)
    assert callee.param_types == [SymbolType.INT, SymbolType.BOOL]
    assert callee.return_type == SymbolType.INT


def test_recursive_call_sees_own_function():
    assert analyze_text("void f() { f(); }").ok


def test_call_arguments_are_resolved():
    resolution = analyze_text("void g(int a) { } void f() { g(y); }")
    assert kinds(resolution) == [UNDECLARED]


def test_duplicate_function_body_is_still_analyzed():
    resolution = analyze_text("void f() { } int f() { x = 1; }")
    assert kinds(resolution) == [DUPLICATE, UNDECLARED]
    assert _positions(resolution)[0] == (1, 18)
    assert str(resolution.table.lookup_global("f")) == "->void"


def test_struct_and_function_names_share_a_namespace():
    resolution = analyze_text("struct S { int a; }; void S() { }")
    assert kinds(resolution) == [DUPLICATE]


def test_if_else_branches_have_separate_scopes():
    resolution = analyze_text("void f() { if (true) { int a; } else { a = 1; } }")
    assert kinds(resolution) == [UNDECLARED]
    assert analyze_text("void f() { if (true) { int a; } else { int a; } }").ok


def test_while_body_scope_is_closed_after_loop():
    resolution = analyze_text("void f() { int t; while (true) { bool t; } t = 1; }")
    assert resolution.ok
    use = _statements(resolution, "f")[1].assignment.left
    assert resolution.symbol_of(use).type == SymbolType.INT

    resolution = analyze_text("void f() { while (true) { int t; } t = 1; }")
    assert kinds(resolution) == [UNDECLARED]


def test_conditions_and_statement_operands_are_resolved():
    src = "void f() { if (a) { } while (b) { } input >> c; disp << d; e++; g--; return h; }"
    resolution = analyze_text(src)
    assert kinds(resolution) == [UNDECLARED] * 7
    names = [ident.name for ident in iter_identifiers(_function(resolution, "f").body)]
    assert names == ["a", "b", "c", "d", "e", "g", "h"]


def test_independent_errors_are_all_reported_in_order():
    src = """int a;
bool a;
void f(void p) {
    struct Q q;
    y = 1;
}"""
    resolution = analyze_text(src)
    assert kinds(resolution) == [DUPLICATE, VOID, BAD_STRUCT, UNDECLARED]
    assert _positions(resolution) == [(2, 6), (3, 13), (4, 14), (5, 5)]
    assert not resolution.ok


def test_scope_depth_is_restored():
    src = "void f() { if (true) { while (false) { int z; } } else { } }"
    resolution = analyze_text(src)
    assert resolution.table.depth == 1
    assert resolution.table.lookup_local("f") is not None


def test_only_declared_symbols_enter_the_arena():
    resolution = analyze_text("int a; bool a; void v; void f(int p) { }")
    assert [sym.name for sym in resolution.arena] == ["a", "f", "p"]
    assert [sym.index for sym in resolution.arena] == [0, 1, 2]


def test_each_run_starts_fresh():
    first = analyze_text("int a; int b;")
    second = analyze_text("int b;")
    assert len(first.arena) == 2
    assert len(second.arena) == 1
    assert second.table.lookup_global("b").index == 0
    assert first.table.lookup_global("a") is not None
    assert second.table.lookup_global("a") is None


def test_resolver_accepts_preseeded_table():
    table = SymbolTable()
    arena = SymbolArena()
    builtin = FunctionSymbol("print", SymbolType.VOID, [SymbolType.INT])
    arena.add(builtin)
    table.declare("print", builtin)

    program = parse_text("void main() { print(1); }")
    resolution = NameResolver(table=table, arena=arena).resolve_program(program)
    assert resolution.ok
    call = _statements(resolution, "main")[0].call
    assert resolution.symbol_of(call.function) is builtin


def test_resolve_names_matches_fresh_resolver(point_program):
    a = resolve_names(parse_text(point_program))
    b = NameResolver().resolve_program(parse_text(point_program))
    assert [str(s) for s in a.arena] == [str(s) for s in b.arena]


@pytest.mark.parametrize(
    "src",
    [
        "int x; void f() { x = x + 1; }",
        "bool b; int f(int a) { if (b) { return a; } else { return -a; } }",
        "struct P { int x; }; void f(struct P q) { struct P p; p.x = 2; }",
        "void f() { int i; i = 0; while (i < 10) { i++; } disp << \"done\"; }",
    ],
)
def test_valid_programs_have_no_diagnostics(src):
    assert kinds(analyze_text(src)) == []
