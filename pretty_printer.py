"""Pretty-printers for the AST.

Two renderings are provided:

- `PrettyPrinter.print_ast(node, indent, prefix, arena)` renders an AST into
    a readable multi-line tree dump, intended for debugging and tests.
- `PrettyPrinter.unparse(node, arena)` renders the AST back to minim source.
    Every unary/binary operation and every nested assignment is fully
    parenthesized, so re-parsing the output reproduces the same tree. When a
    `SymbolArena` is passed, each resolved identifier is followed by its
    symbol in parentheses, e.g. `x(int)` or `f(int,bool->void)`.

Examples:
    PrettyPrinter.print_ast(program_node)
    PrettyPrinter.unparse(program_node, resolution.arena)
"""

from __future__ import annotations
from typing import List, Optional, assert_never
from ast_nodes import *
from symbols import SymbolArena

INDENT = 4


class PrettyPrinter:
    @staticmethod
    def _symbol_info(node: IdentifierNode, arena: Optional[SymbolArena]) -> str:
        if arena is None or node.symbol is None:
            return ""
        return f", symbol=#{node.symbol} {arena[node.symbol]}"

    @staticmethod
    def print_ast(
        node: ASTNode,
        indent: int = 0,
        prefix: str = "",
        arena: Optional[SymbolArena] = None,
    ) -> str:
        """Pretty print AST and return as string."""
        lines = []
        indent_str = " " * indent

        def child(n: ASTNode, extra: int, label: str = "") -> None:
            lines.append(PrettyPrinter.print_ast(n, indent + extra, label, arena))

        if not isinstance(node, ASTNode):
            lines.append(f"{indent_str}{prefix}{node}")
            return "\n".join(lines)

        match node:
            case IntLiteralNode(value=v):
                lines.append(f"{indent_str}{prefix}IntLiteral({v})")

            case StringLiteralNode(value=v):
                lines.append(f"{indent_str}{prefix}StringLiteral({v})")

            case BoolLiteralNode(value=v):
                lines.append(f"{indent_str}{prefix}BoolLiteral({v})")

            case IdentifierNode(name=n):
                info = PrettyPrinter._symbol_info(node, arena)
                lines.append(f"{indent_str}{prefix}Identifier({n}{info})")

            case DotAccessNode(loc=loc, field_id=field_id):
                lines.append(f"{indent_str}{prefix}DotAccess")
                child(loc, 2, "loc: ")
                child(field_id, 2, "field: ")

            case AssignmentNode(left=left, right=right):
                lines.append(f"{indent_str}{prefix}Assignment")
                child(left, 2, "left: ")
                child(right, 2, "right: ")

            case FunctionCallNode(function=func, arguments=args):
                lines.append(f"{indent_str}{prefix}FunctionCall")
                child(func, 2, "function: ")
                for i, arg in enumerate(args.expressions):
                    child(arg, 4, f"arg[{i}]: ")

            case ExpListNode(expressions=exprs):
                lines.append(f"{indent_str}{prefix}ExpList")
                for i, expr in enumerate(exprs):
                    child(expr, 4, f"exp[{i}]: ")

            case UnaryOpNode(operator=op, operand=operand):
                lines.append(f"{indent_str}{prefix}UnaryOp({op})")
                child(operand, 2)

            case BinaryOpNode(left=left, operator=op, right=right):
                lines.append(f"{indent_str}{prefix}BinaryOp({op})")
                child(left, 2, "left: ")
                child(right, 2, "right: ")

            case IntTypeNode() | BoolTypeNode() | VoidTypeNode() | StructTypeNode():
                lines.append(f"{indent_str}{prefix}Type({PrettyPrinter.unparse(node)})")

            case AssignStatementNode(assignment=assignment):
                lines.append(f"{indent_str}{prefix}AssignStatement")
                child(assignment, 2)

            case PostIncStatementNode(expression=expr):
                lines.append(f"{indent_str}{prefix}PostIncrement")
                child(expr, 2)

            case PostDecStatementNode(expression=expr):
                lines.append(f"{indent_str}{prefix}PostDecrement")
                child(expr, 2)

            case ReadStatementNode(expression=expr):
                lines.append(f"{indent_str}{prefix}Read")
                child(expr, 2)

            case WriteStatementNode(expression=expr):
                lines.append(f"{indent_str}{prefix}Write")
                child(expr, 2)

            case IfStatementNode(condition=cond, decls=decls, stmts=stmts):
                lines.append(f"{indent_str}{prefix}IfStatement")
                child(cond, 4, "condition: ")
                child(decls, 4, "decls: ")
                child(stmts, 4, "then: ")

            case IfElseStatementNode():
                lines.append(f"{indent_str}{prefix}IfElseStatement")
                child(node.condition, 4, "condition: ")
                child(node.then_decls, 4, "then decls: ")
                child(node.then_stmts, 4, "then: ")
                child(node.else_decls, 4, "else decls: ")
                child(node.else_stmts, 4, "else: ")

            case WhileStatementNode(condition=cond, decls=decls, stmts=stmts):
                lines.append(f"{indent_str}{prefix}WhileStatement")
                child(cond, 4, "condition: ")
                child(decls, 4, "decls: ")
                child(stmts, 4, "body: ")

            case CallStatementNode(call=call):
                lines.append(f"{indent_str}{prefix}CallStatement")
                child(call, 2)

            case ReturnStatementNode(expression=expr):
                lines.append(f"{indent_str}{prefix}Return")
                if expr is not None:
                    child(expr, 2, "expr: ")

            case StmtListNode(statements=stmts):
                lines.append(f"{indent_str}{prefix}StmtList")
                for i, stmt in enumerate(stmts):
                    child(stmt, 4, f"stmt[{i}]: ")

            case VariableDeclarationNode(var_type=vtype, name=name):
                lines.append(f"{indent_str}{prefix}VarDecl({name.name}: {PrettyPrinter.unparse(vtype)})")

            case FormalDeclarationNode(var_type=vtype, name=name):
                lines.append(f"{indent_str}{prefix}FormalDecl({name.name}: {PrettyPrinter.unparse(vtype)})")

            case FormalsListNode(formals=formals):
                lines.append(f"{indent_str}{prefix}Formals")
                for i, formal in enumerate(formals):
                    child(formal, 4, f"formal[{i}]: ")

            case FunctionBodyNode(decls=decls, stmts=stmts):
                lines.append(f"{indent_str}{prefix}FunctionBody")
                child(decls, 4, "decls: ")
                child(stmts, 4, "stmts: ")

            case FunctionDeclarationNode(return_type=rtype, name=name, formals=formals, body=body):
                params = ", ".join(
                    f"{f.name.name}: {PrettyPrinter.unparse(f.var_type)}" for f in formals.formals
                )
                lines.append(
                    f"{indent_str}{prefix}FunctionDecl({name.name} -> {PrettyPrinter.unparse(rtype)}, params=[{params}])"
                )
                child(body, 4, "body: ")

            case StructDeclarationNode(name=name, fields=fields):
                lines.append(f"{indent_str}{prefix}StructDecl({name.name})")
                child(fields, 4, "fields: ")

            case DeclListNode(decls=decls):
                lines.append(f"{indent_str}{prefix}DeclList")
                for i, decl in enumerate(decls):
                    child(decl, 4, f"decl[{i}]: ")

            case ProgramNode(decls=decls):
                lines.append(f"{indent_str}{prefix}Program")
                for i, decl in enumerate(decls.decls):
                    child(decl, 4, f"decl[{i}]: ")

            case _:
                lines.append(f"{indent_str}{prefix}Unknown node type: {type(node)}")

        return "\n".join(line for line in lines if line)

    @staticmethod
    def unparse(node: Node, arena: Optional[SymbolArena] = None) -> str:
        """Render `node` as minim source text."""
        out: List[str] = []
        _Unparser(out, arena).node(node, 0)
        return "".join(out)


class _Unparser:
    def __init__(self, out: List[str], arena: Optional[SymbolArena]):
        self.out = out
        self.arena = arena

    def write(self, text: str) -> None:
        self.out.append(text)

    def line(self, indent: int, text: str) -> None:
        self.out.append(" " * indent + text + "\n")

    def node(self, node: Node, indent: int) -> None:
        match node:
            case ProgramNode(decls=decls):
                self.node(decls, indent)
            case DeclListNode(decls=decls):
                for decl in decls:
                    self.node(decl, indent)
            case StmtListNode(statements=stmts):
                for stmt in stmts:
                    self.node(stmt, indent)
            case FormalsListNode(formals=formals):
                for i, formal in enumerate(formals):
                    if i:
                        self.write(", ")
                    self.node(formal, indent)
            case ExpListNode(expressions=exprs):
                for i, expr in enumerate(exprs):
                    if i:
                        self.write(", ")
                    self.expr(expr, nested=True)
            case FunctionBodyNode(decls=decls, stmts=stmts):
                self.node(decls, indent)
                self.node(stmts, indent)
            case VariableDeclarationNode(var_type=vtype, name=name):
                self.write(" " * indent)
                self.node(vtype, 0)
                self.write(" ")
                self.expr(name)
                self.write(";\n")
            case FormalDeclarationNode(var_type=vtype, name=name):
                self.node(vtype, 0)
                self.write(" ")
                self.expr(name)
            case FunctionDeclarationNode(return_type=rtype, name=name, formals=formals, body=body):
                self.write(" " * indent)
                self.node(rtype, 0)
                self.write(" ")
                self.expr(name)
                self.write("(")
                self.node(formals, 0)
                self.write(") {\n")
                self.node(body, indent + INDENT)
                self.line(indent, "}")
                self.write("\n")
            case StructDeclarationNode(name=name, fields=fields):
                self.write(" " * indent + "struct ")
                self.expr(name)
                self.write(" {\n")
                self.node(fields, indent + INDENT)
                self.line(indent, "};")
                self.write("\n")
            case IntTypeNode():
                self.write("int")
            case BoolTypeNode():
                self.write("bool")
            case VoidTypeNode():
                self.write("void")
            case StructTypeNode(name=name):
                self.write("struct ")
                self.expr(name)
            case AssignStatementNode(assignment=assignment):
                self.write(" " * indent)
                self.expr(assignment)
                self.write(";\n")
            case PostIncStatementNode(expression=expr):
                self.write(" " * indent)
                self.expr(expr)
                self.write("++;\n")
            case PostDecStatementNode(expression=expr):
                self.write(" " * indent)
                self.expr(expr)
                self.write("--;\n")
            case ReadStatementNode(expression=expr):
                self.write(" " * indent + "input >> ")
                self.expr(expr)
                self.write(";\n")
            case WriteStatementNode(expression=expr):
                self.write(" " * indent + "disp << ")
                self.expr(expr)
                self.write(";\n")
            case IfStatementNode(condition=cond, decls=decls, stmts=stmts):
                self.block_header(indent, "if", cond)
                self.node(decls, indent + INDENT)
                self.node(stmts, indent + INDENT)
                self.line(indent, "}")
            case IfElseStatementNode():
                self.block_header(indent, "if", node.condition)
                self.node(node.then_decls, indent + INDENT)
                self.node(node.then_stmts, indent + INDENT)
                self.line(indent, "}")
                self.line(indent, "else {")
                self.node(node.else_decls, indent + INDENT)
                self.node(node.else_stmts, indent + INDENT)
                self.line(indent, "}")
            case WhileStatementNode(condition=cond, decls=decls, stmts=stmts):
                self.block_header(indent, "while", cond)
                self.node(decls, indent + INDENT)
                self.node(stmts, indent + INDENT)
                self.line(indent, "}")
            case CallStatementNode(call=call):
                self.write(" " * indent)
                self.expr(call)
                self.write(";\n")
            case ReturnStatementNode(expression=expr):
                self.write(" " * indent + "return")
                if expr is not None:
                    self.write(" ")
                    self.expr(expr)
                self.write(";\n")
            case (
                IntLiteralNode()
                | StringLiteralNode()
                | BoolLiteralNode()
                | IdentifierNode()
                | DotAccessNode()
                | AssignmentNode()
                | FunctionCallNode()
                | UnaryOpNode()
                | BinaryOpNode()
            ):
                self.expr(node)
            case _:
                assert_never(node)

    def block_header(self, indent: int, keyword: str, cond: Expression) -> None:
        self.write(" " * indent + f"{keyword} (")
        self.expr(cond)
        self.write(") {\n")

    def expr(self, node: Expression, nested: bool = False) -> None:
        """Write an expression; `nested` parenthesizes an assignment."""
        match node:
            case IntLiteralNode(value=v):
                self.write(str(v))
            case StringLiteralNode(value=v):
                self.write(v)
            case BoolLiteralNode(value=v):
                self.write("true" if v else "false")
            case IdentifierNode(name=name, symbol=symbol):
                self.write(name)
                if self.arena is not None and symbol is not None:
                    self.write(f"({self.arena[symbol]})")
            case DotAccessNode(loc=loc, field_id=field_id):
                self.expr(loc)
                self.write(".")
                self.expr(field_id)
            case AssignmentNode(left=left, right=right):
                if nested:
                    self.write("(")
                self.expr(left)
                self.write(" = ")
                self.expr(right, nested=True)
                if nested:
                    self.write(")")
            case FunctionCallNode(function=function, arguments=args):
                self.expr(function)
                self.write("(")
                self.node(args, 0)
                self.write(")")
            case UnaryOpNode(operator=op, operand=operand):
                self.write(f"({op}")
                self.expr(operand, nested=True)
                self.write(")")
            case BinaryOpNode(left=left, operator=op, right=right):
                self.write("(")
                self.expr(left, nested=True)
                self.write(f" {op} ")
                self.expr(right, nested=True)
                self.write(")")
            case _:
                assert_never(node)
