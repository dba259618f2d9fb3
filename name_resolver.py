"""Name analysis for minim programs.

`NameResolver` walks a parsed program once, depth-first and left to right,
threading a single `SymbolTable` that the resolver instance owns. Along the
way it:

- builds a symbol for every declaration and declares it in the right table
  (the current scope, or a struct's own field table),
- opens and closes scopes for function bodies, if/else branches and while
  bodies,
- resolves every identifier use with a full scope-chain lookup and records
  the arena index of the symbol on the `IdentifierNode`,
- resolves `loc.field` accesses against the struct's field table,
- reports every rule violation to `Diagnostics` and keeps going.

Two behaviours are deliberately narrow and tested as such:

- The left-hand side of a single dot access is looked up in the innermost
  scope only, so a struct instance declared in an enclosing scope cannot be
  dot-accessed from a nested block.
- For a chained access `a.b.c`, `a.b` is resolved first and `c` is then
  resolved as an ordinary identifier; the type of `a.b` is not consulted.

Usage:
    resolution = resolve_names(program)
    if resolution.ok:
        ...  # hand resolution.program / resolution.arena to the type checker
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, assert_never
from ast_nodes import *
from diagnostics import Diagnostics, ErrorKind
from symbols import (
    DataType,
    DuplicateNameError,
    FunctionSymbol,
    StructDefSymbol,
    StructInstanceSymbol,
    StructType,
    Symbol,
    SymbolArena,
    SymbolTable,
    SymbolType,
    VariableSymbol,
)


def data_type_of(type_node: TypeNode) -> DataType:
    """Map a type node to the type recorded in symbols."""
    match type_node:
        case IntTypeNode():
            return SymbolType.INT
        case BoolTypeNode():
            return SymbolType.BOOL
        case VoidTypeNode():
            return SymbolType.VOID
        case StructTypeNode(name=name):
            return StructType(name.name)
        case _:
            assert_never(type_node)


@dataclass
class NameResolution:
    program: ProgramNode
    table: SymbolTable
    arena: SymbolArena
    diagnostics: Diagnostics

    @property
    def ok(self) -> bool:
        """True when type checking may proceed."""
        return not self.diagnostics.has_errors()

    def symbol_of(self, ident: IdentifierNode) -> Optional[Symbol]:
        if ident.symbol is None:
            return None
        return self.arena[ident.symbol]


class NameResolver:
    def __init__(
        self,
        table: Optional[SymbolTable] = None,
        diagnostics: Optional[Diagnostics] = None,
        arena: Optional[SymbolArena] = None,
    ):
        self.table = table if table is not None else SymbolTable()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.arena = arena if arena is not None else SymbolArena()

    def error(self, ident: IdentifierNode, kind: ErrorKind) -> None:
        self.diagnostics.report(ident.line, ident.column, kind)

    def attach(self, ident: IdentifierNode, symbol: Symbol) -> None:
        """Record `symbol` as the resolution of `ident`."""
        ident.symbol = symbol.index

    def declare(self, table: SymbolTable, ident: IdentifierNode, symbol: Symbol) -> bool:
        """Declare `symbol` under `ident`'s name, reporting a duplicate instead of raising."""
        try:
            table.declare(ident.name, symbol)
        except DuplicateNameError:
            self.error(ident, ErrorKind.DUPLICATE_NAME)
            return False
        self.arena.add(symbol)
        return True

    # Declarations

    def resolve_program(self, program: ProgramNode) -> NameResolution:
        """Analyze a whole program against the already-open root scope."""
        self.resolve_decl_list(program.decls)
        return NameResolution(program, self.table, self.arena, self.diagnostics)

    def resolve_decl_list(self, decl_list: DeclListNode) -> None:
        for decl in decl_list.decls:
            self.resolve_declaration(decl)

    def resolve_declaration(self, decl: Declaration) -> None:
        match decl:
            case VariableDeclarationNode(var_type=var_type, name=name):
                self.declare_variable(var_type, name, self.table)
            case FunctionDeclarationNode():
                self.resolve_function(decl)
            case StructDeclarationNode():
                self.resolve_struct(decl)
            case _:
                assert_never(decl)

    def declare_variable(
        self, var_type: TypeNode, name: IdentifierNode, target: SymbolTable
    ) -> None:
        """Build and declare a variable, formal or field symbol in `target`.

        Struct type names are always looked up through `self.table`, even when
        `target` is a struct's field table.
        """
        match var_type:
            case VoidTypeNode():
                self.error(name, ErrorKind.VOID_VARIABLE)
            case IntTypeNode() | BoolTypeNode():
                self.declare(target, name, VariableSymbol(name.name, data_type_of(var_type)))
            case StructTypeNode(name=struct_name):
                struct_def = self.table.lookup_global(struct_name.name)
                if struct_def is None:
                    self.error(name, ErrorKind.INVALID_STRUCT_TYPE)
                elif isinstance(struct_def, StructDefSymbol):
                    self.attach(struct_name, struct_def)
                # Declared even when the struct type is invalid so later uses
                # of the variable do not report it as undeclared.
                self.declare(target, name, StructInstanceSymbol(name.name, struct_name.name))
            case _:
                assert_never(var_type)

    def resolve_function(self, decl: FunctionDeclarationNode) -> None:
        param_types = [data_type_of(f.var_type) for f in decl.formals.formals]
        symbol = FunctionSymbol(decl.name.name, data_type_of(decl.return_type), param_types)
        self.declare(self.table, decl.name, symbol)

        self.table.push_scope()
        for formal in decl.formals.formals:
            self.declare_variable(formal.var_type, formal.name, self.table)
        self.resolve_decl_list(decl.body.decls)
        self.resolve_stmt_list(decl.body.stmts)
        self.table.pop_scope()

    def resolve_struct(self, decl: StructDeclarationNode) -> None:
        symbol = StructDefSymbol(decl.name.name, SymbolTable())
        if not self.declare(self.table, decl.name, symbol):
            # Fields of a struct that cannot be named are never checked.
            return

        for field_decl in decl.fields.decls:
            match field_decl:
                case VariableDeclarationNode(var_type=var_type, name=name):
                    self.declare_variable(var_type, name, symbol.fields)
                case FunctionDeclarationNode() | StructDeclarationNode():
                    raise TypeError(
                        f"struct '{decl.name.name}' contains a {field_decl.type} node"
                    )
                case _:
                    assert_never(field_decl)

    # Statements

    def resolve_block(self, decls: DeclListNode, stmts: StmtListNode) -> None:
        self.table.push_scope()
        self.resolve_decl_list(decls)
        self.resolve_stmt_list(stmts)
        self.table.pop_scope()

    def resolve_stmt_list(self, stmt_list: StmtListNode) -> None:
        for stmt in stmt_list.statements:
            self.resolve_statement(stmt)

    def resolve_statement(self, stmt: Statement) -> None:
        match stmt:
            case AssignStatementNode(assignment=assignment):
                self.resolve_expression(assignment)
            case (
                PostIncStatementNode(expression=expr)
                | PostDecStatementNode(expression=expr)
                | ReadStatementNode(expression=expr)
                | WriteStatementNode(expression=expr)
            ):
                self.resolve_expression(expr)
            case IfStatementNode(condition=cond, decls=decls, stmts=stmts):
                self.resolve_expression(cond)
                self.resolve_block(decls, stmts)
            case IfElseStatementNode():
                self.resolve_expression(stmt.condition)
                self.resolve_block(stmt.then_decls, stmt.then_stmts)
                self.resolve_block(stmt.else_decls, stmt.else_stmts)
            case WhileStatementNode(condition=cond, decls=decls, stmts=stmts):
                self.resolve_expression(cond)
                self.resolve_block(decls, stmts)
            case CallStatementNode(call=call):
                self.resolve_expression(call)
            case ReturnStatementNode(expression=expr):
                if expr is not None:
                    self.resolve_expression(expr)
            case _:
                assert_never(stmt)

    # Expressions

    def resolve_expression(self, expr: Expression) -> None:
        match expr:
            case IntLiteralNode() | StringLiteralNode() | BoolLiteralNode():
                pass
            case IdentifierNode():
                self.resolve_identifier(expr)
            case DotAccessNode():
                self.resolve_dot_access(expr)
            case AssignmentNode(left=left, right=right):
                self.resolve_expression(left)
                self.resolve_expression(right)
            case FunctionCallNode(function=function, arguments=arguments):
                self.resolve_identifier(function)
                for arg in arguments.expressions:
                    self.resolve_expression(arg)
            case UnaryOpNode(operand=operand):
                self.resolve_expression(operand)
            case BinaryOpNode(left=left, right=right):
                self.resolve_expression(left)
                self.resolve_expression(right)
            case _:
                assert_never(expr)

    def resolve_identifier(self, ident: IdentifierNode) -> None:
        symbol = self.table.lookup_global(ident.name)
        if symbol is None:
            self.error(ident, ErrorKind.UNDECLARED_IDENTIFIER)
            return
        self.attach(ident, symbol)

    def resolve_dot_access(self, node: DotAccessNode) -> None:
        match node.loc:
            case DotAccessNode():
                # The type of the inner access is not checked; the outer
                # field name is resolved like any other identifier.
                self.resolve_dot_access(node.loc)
                self.resolve_identifier(node.field_id)
                return
            case IdentifierNode():
                lhs = node.loc
            case _:
                raise TypeError(f"Dot access on a {node.loc.type} node")

        instance = self.table.lookup_local(lhs.name)
        if not isinstance(instance, StructInstanceSymbol):
            self.error(lhs, ErrorKind.DOT_ACCESS_NON_STRUCT)
            return
        self.attach(lhs, instance)

        struct_def = self.table.lookup_global(instance.struct_name)
        if not isinstance(struct_def, StructDefSymbol):
            # The struct name is undeclared or names a non-struct symbol.
            return

        field_symbol = struct_def.fields.lookup_local(node.field_id.name)
        if field_symbol is None:
            self.error(node.field_id, ErrorKind.INVALID_FIELD_NAME)
            return
        self.attach(node.field_id, field_symbol)


def resolve_names(program: ProgramNode) -> NameResolution:
    """Run name analysis on `program` with a fresh root symbol table."""
    return NameResolver().resolve_program(program)
