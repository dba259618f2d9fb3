"""Convert AST nodes and analysis results into JSON-serializable structures.

This module provides:

- `ast_to_json(node, include_positions=True)`: a nested structure of
  dicts/lists/primitives describing the AST. Identifier nodes carry the arena
  index of their resolved symbol (`null` when unresolved). With
  `include_positions=False` the output only reflects tree structure and
  names, which makes it suitable for comparing two parses of the same text.
- `symbol_to_json` / `symbols_to_json(arena)`: the symbol store, one entry per
  arena slot, struct field tables included.
- `diagnostics_to_json(diagnostics)`: the ordered diagnostic list.
"""

from typing import Any, Dict, List, Optional, assert_never
from ast_nodes import *
from diagnostics import Diagnostics
from symbols import (
    FunctionSymbol,
    StructDefSymbol,
    StructInstanceSymbol,
    Symbol,
    SymbolArena,
    SymbolTable,
    VariableSymbol,
)


def _children(node: ASTNode, include_positions: bool) -> Dict[str, Any]:
    match node:
        case IntLiteralNode(value=v) | BoolLiteralNode(value=v) | StringLiteralNode(value=v):
            return {"value": v}
        case IdentifierNode(name=name, symbol=symbol):
            return {"name": name, "symbol": symbol}
        case DotAccessNode(loc=loc, field_id=field_id):
            return {
                "loc": ast_to_json(loc, include_positions),
                "field": ast_to_json(field_id, include_positions),
            }
        case AssignmentNode(left=left, right=right):
            return {
                "left": ast_to_json(left, include_positions),
                "right": ast_to_json(right, include_positions),
            }
        case FunctionCallNode(function=function, arguments=args):
            return {
                "function": ast_to_json(function, include_positions),
                "arguments": ast_to_json(args, include_positions),
            }
        case ExpListNode(expressions=exprs):
            return {"expressions": [ast_to_json(e, include_positions) for e in exprs]}
        case UnaryOpNode(operator=op, operand=operand):
            return {"operator": op, "operand": ast_to_json(operand, include_positions)}
        case BinaryOpNode(left=left, operator=op, right=right):
            return {
                "operator": op,
                "left": ast_to_json(left, include_positions),
                "right": ast_to_json(right, include_positions),
            }
        case IntTypeNode() | BoolTypeNode() | VoidTypeNode():
            return {}
        case StructTypeNode(name=name):
            return {"name": ast_to_json(name, include_positions)}
        case AssignStatementNode(assignment=assignment):
            return {"assignment": ast_to_json(assignment, include_positions)}
        case (
            PostIncStatementNode(expression=expr)
            | PostDecStatementNode(expression=expr)
            | ReadStatementNode(expression=expr)
            | WriteStatementNode(expression=expr)
            | ReturnStatementNode(expression=expr)
        ):
            return {"expression": ast_to_json(expr, include_positions)}
        case IfStatementNode(condition=cond, decls=decls, stmts=stmts) | WhileStatementNode(
            condition=cond, decls=decls, stmts=stmts
        ):
            return {
                "condition": ast_to_json(cond, include_positions),
                "decls": ast_to_json(decls, include_positions),
                "stmts": ast_to_json(stmts, include_positions),
            }
        case IfElseStatementNode():
            return {
                "condition": ast_to_json(node.condition, include_positions),
                "then_decls": ast_to_json(node.then_decls, include_positions),
                "then_stmts": ast_to_json(node.then_stmts, include_positions),
                "else_decls": ast_to_json(node.else_decls, include_positions),
                "else_stmts": ast_to_json(node.else_stmts, include_positions),
            }
        case CallStatementNode(call=call):
            return {"call": ast_to_json(call, include_positions)}
        case StmtListNode(statements=stmts):
            return {"statements": [ast_to_json(s, include_positions) for s in stmts]}
        case VariableDeclarationNode(var_type=vtype, name=name) | FormalDeclarationNode(
            var_type=vtype, name=name
        ):
            return {
                "var_type": ast_to_json(vtype, include_positions),
                "name": ast_to_json(name, include_positions),
            }
        case FormalsListNode(formals=formals):
            return {"formals": [ast_to_json(f, include_positions) for f in formals]}
        case DeclListNode(decls=decls):
            return {"decls": [ast_to_json(d, include_positions) for d in decls]}
        case FunctionBodyNode(decls=decls, stmts=stmts):
            return {
                "decls": ast_to_json(decls, include_positions),
                "stmts": ast_to_json(stmts, include_positions),
            }
        case FunctionDeclarationNode(return_type=rtype, name=name, formals=formals, body=body):
            return {
                "return_type": ast_to_json(rtype, include_positions),
                "name": ast_to_json(name, include_positions),
                "formals": ast_to_json(formals, include_positions),
                "body": ast_to_json(body, include_positions),
            }
        case StructDeclarationNode(name=name, fields=fields):
            return {
                "name": ast_to_json(name, include_positions),
                "fields": ast_to_json(fields, include_positions),
            }
        case ProgramNode(decls=decls):
            return {"decls": ast_to_json(decls, include_positions)}
        case _:
            assert_never(node)


def ast_to_json(node: Optional[ASTNode], include_positions: bool = True) -> Any:
    if node is None:
        return None

    data: Dict[str, Any] = {"node_type": node.type.name}
    if include_positions:
        data["line"] = node.line
        data["column"] = node.column
    data.update(_children(node, include_positions))
    if not include_positions and isinstance(node, IdentifierNode):
        # Structural form: annotations are dropped along with positions.
        data.pop("symbol")
    return data


def _table_to_json(table: SymbolTable) -> List[Dict[str, Optional[int]]]:
    return [{name: sym.index for name, sym in scope.items()} for scope in table.scopes]


def symbol_to_json(symbol: Symbol) -> Dict[str, Any]:
    match symbol:
        case VariableSymbol(name=name, type=t):
            return {"kind": "variable", "name": name, "type": str(t)}
        case FunctionSymbol(name=name, return_type=rt, param_types=params):
            return {
                "kind": "function",
                "name": name,
                "return_type": str(rt),
                "param_types": [str(p) for p in params],
            }
        case StructDefSymbol(name=name, fields=fields):
            return {"kind": "struct", "name": name, "fields": _table_to_json(fields)}
        case StructInstanceSymbol(name=name, struct_name=struct_name):
            return {"kind": "struct_instance", "name": name, "struct": struct_name}
        case _:
            assert_never(symbol)


def symbols_to_json(arena: SymbolArena) -> List[Dict[str, Any]]:
    return [dict(symbol_to_json(sym), index=sym.index) for sym in arena]


def diagnostics_to_json(diagnostics: Diagnostics) -> List[Dict[str, Any]]:
    return [
        {
            "line": d.line,
            "column": d.column,
            "kind": d.kind.label,
            "message": d.message,
        }
        for d in diagnostics
    ]
