"""AST node definitions for the minim language.

This module defines the concrete AST node dataclasses produced by the parser
and consumed by the name resolver, the unparser and the serializers. Each
node is represented by a dataclass that carries the relevant information
(an operator, child nodes, a name, a type node). The `NodeType` enum
identifies node kinds.

Conventions:
- All AST node dataclasses inherit from `ASTNode` which records the node
    kind (`NodeType`) and the 1-based source `line`/`column` where the
    construct starts.
- The node set is closed. The `Expression`, `Statement`, `Declaration`,
    `TypeNode` and `Node` unions list every member, and the tree walkers
    `match` over them with an `assert_never` fallback so that adding a node
    kind is flagged at every dispatch site by a type checker.
- The tree owns its children: no node is shared between two parents.
- `IdentifierNode.symbol` is the only field written after parsing. It holds
    an index into the `SymbolArena` of the analysis that resolved it and is
    excluded from equality.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Union, List


class NodeType(Enum):
    PROGRAM = auto()
    DECL_LIST = auto()
    VAR_DECL = auto()
    FUNC_DECL = auto()
    FORMAL_DECL = auto()
    STRUCT_DECL = auto()
    FORMALS_LIST = auto()
    FUNC_BODY = auto()
    STMT_LIST = auto()
    EXP_LIST = auto()

    INT_TYPE = auto()
    BOOL_TYPE = auto()
    VOID_TYPE = auto()
    STRUCT_TYPE = auto()

    ASSIGN_STMT = auto()
    POST_INC_STMT = auto()
    POST_DEC_STMT = auto()
    READ_STMT = auto()
    WRITE_STMT = auto()
    IF_STMT = auto()
    IF_ELSE_STMT = auto()
    WHILE_STMT = auto()
    CALL_STMT = auto()
    RETURN_STMT = auto()

    INT_LITERAL = auto()
    STRING_LITERAL = auto()
    BOOL_LITERAL = auto()
    IDENTIFIER = auto()
    DOT_ACCESS = auto()
    ASSIGNMENT = auto()
    FUNC_CALL = auto()
    UNARY_OP = auto()
    BINARY_OP = auto()

    def __str__(self) -> str:
        return self.name


# Base AST Node
@dataclass
class ASTNode:
    type: NodeType
    line: int = 0
    column: int = 0


# Expression Nodes
@dataclass
class IntLiteralNode(ASTNode):
    type: NodeType = NodeType.INT_LITERAL
    value: int = 0


@dataclass
class StringLiteralNode(ASTNode):
    type: NodeType = NodeType.STRING_LITERAL
    # Literal text as written, quotes and escapes included.
    value: str = '""'


@dataclass
class BoolLiteralNode(ASTNode):
    type: NodeType = NodeType.BOOL_LITERAL
    value: bool = False


@dataclass
class IdentifierNode(ASTNode):
    type: NodeType = NodeType.IDENTIFIER
    name: str = ""
    # Arena index of the resolved symbol, set by the name resolver.
    symbol: Optional[int] = field(default=None, compare=False)


@dataclass
class DotAccessNode(ASTNode):
    type: NodeType = NodeType.DOT_ACCESS
    # Either an IdentifierNode or another DotAccessNode.
    loc: Expression = field(default_factory=lambda: IdentifierNode())
    field_id: IdentifierNode = field(default_factory=lambda: IdentifierNode())


@dataclass
class AssignmentNode(ASTNode):
    type: NodeType = NodeType.ASSIGNMENT
    left: Expression = field(default_factory=lambda: IdentifierNode())
    right: Expression = field(default_factory=lambda: IntLiteralNode())


@dataclass
class ExpListNode(ASTNode):
    type: NodeType = NodeType.EXP_LIST
    expressions: List[Expression] = field(default_factory=list)


@dataclass
class FunctionCallNode(ASTNode):
    type: NodeType = NodeType.FUNC_CALL
    function: IdentifierNode = field(default_factory=lambda: IdentifierNode())
    arguments: ExpListNode = field(default_factory=lambda: ExpListNode())


@dataclass
class UnaryOpNode(ASTNode):
    type: NodeType = NodeType.UNARY_OP
    operator: str = ""
    operand: Expression = field(default_factory=lambda: IntLiteralNode())


@dataclass
class BinaryOpNode(ASTNode):
    type: NodeType = NodeType.BINARY_OP
    left: Expression = field(default_factory=lambda: IntLiteralNode())
    operator: str = ""
    right: Expression = field(default_factory=lambda: IntLiteralNode())


# Type Nodes
@dataclass
class IntTypeNode(ASTNode):
    type: NodeType = NodeType.INT_TYPE


@dataclass
class BoolTypeNode(ASTNode):
    type: NodeType = NodeType.BOOL_TYPE


@dataclass
class VoidTypeNode(ASTNode):
    type: NodeType = NodeType.VOID_TYPE


@dataclass
class StructTypeNode(ASTNode):
    type: NodeType = NodeType.STRUCT_TYPE
    name: IdentifierNode = field(default_factory=lambda: IdentifierNode())


# Statement Nodes
@dataclass
class AssignStatementNode(ASTNode):
    type: NodeType = NodeType.ASSIGN_STMT
    assignment: AssignmentNode = field(default_factory=lambda: AssignmentNode())


@dataclass
class PostIncStatementNode(ASTNode):
    type: NodeType = NodeType.POST_INC_STMT
    expression: Expression = field(default_factory=lambda: IdentifierNode())


@dataclass
class PostDecStatementNode(ASTNode):
    type: NodeType = NodeType.POST_DEC_STMT
    expression: Expression = field(default_factory=lambda: IdentifierNode())


@dataclass
class ReadStatementNode(ASTNode):
    type: NodeType = NodeType.READ_STMT
    expression: Expression = field(default_factory=lambda: IdentifierNode())


@dataclass
class WriteStatementNode(ASTNode):
    type: NodeType = NodeType.WRITE_STMT
    expression: Expression = field(default_factory=lambda: IntLiteralNode())


@dataclass
class StmtListNode(ASTNode):
    type: NodeType = NodeType.STMT_LIST
    statements: List[Statement] = field(default_factory=list)


@dataclass
class IfStatementNode(ASTNode):
    type: NodeType = NodeType.IF_STMT
    condition: Expression = field(default_factory=lambda: BoolLiteralNode())
    decls: DeclListNode = field(default_factory=lambda: DeclListNode())
    stmts: StmtListNode = field(default_factory=lambda: StmtListNode())


@dataclass
class IfElseStatementNode(ASTNode):
    type: NodeType = NodeType.IF_ELSE_STMT
    condition: Expression = field(default_factory=lambda: BoolLiteralNode())
    then_decls: DeclListNode = field(default_factory=lambda: DeclListNode())
    then_stmts: StmtListNode = field(default_factory=lambda: StmtListNode())
    else_decls: DeclListNode = field(default_factory=lambda: DeclListNode())
    else_stmts: StmtListNode = field(default_factory=lambda: StmtListNode())


@dataclass
class WhileStatementNode(ASTNode):
    type: NodeType = NodeType.WHILE_STMT
    condition: Expression = field(default_factory=lambda: BoolLiteralNode())
    decls: DeclListNode = field(default_factory=lambda: DeclListNode())
    stmts: StmtListNode = field(default_factory=lambda: StmtListNode())


@dataclass
class CallStatementNode(ASTNode):
    type: NodeType = NodeType.CALL_STMT
    call: FunctionCallNode = field(default_factory=lambda: FunctionCallNode())


@dataclass
class ReturnStatementNode(ASTNode):
    type: NodeType = NodeType.RETURN_STMT
    expression: Optional[Expression] = None


# Declaration Nodes
@dataclass
class VariableDeclarationNode(ASTNode):
    type: NodeType = NodeType.VAR_DECL
    var_type: TypeNode = field(default_factory=lambda: IntTypeNode())
    name: IdentifierNode = field(default_factory=lambda: IdentifierNode())


@dataclass
class FormalDeclarationNode(ASTNode):
    type: NodeType = NodeType.FORMAL_DECL
    var_type: TypeNode = field(default_factory=lambda: IntTypeNode())
    name: IdentifierNode = field(default_factory=lambda: IdentifierNode())


@dataclass
class FormalsListNode(ASTNode):
    type: NodeType = NodeType.FORMALS_LIST
    formals: List[FormalDeclarationNode] = field(default_factory=list)


@dataclass
class DeclListNode(ASTNode):
    type: NodeType = NodeType.DECL_LIST
    decls: List[Declaration] = field(default_factory=list)


@dataclass
class FunctionBodyNode(ASTNode):
    type: NodeType = NodeType.FUNC_BODY
    decls: DeclListNode = field(default_factory=lambda: DeclListNode())
    stmts: StmtListNode = field(default_factory=lambda: StmtListNode())


@dataclass
class FunctionDeclarationNode(ASTNode):
    type: NodeType = NodeType.FUNC_DECL
    return_type: TypeNode = field(default_factory=lambda: VoidTypeNode())
    name: IdentifierNode = field(default_factory=lambda: IdentifierNode())
    formals: FormalsListNode = field(default_factory=lambda: FormalsListNode())
    body: FunctionBodyNode = field(default_factory=lambda: FunctionBodyNode())


@dataclass
class StructDeclarationNode(ASTNode):
    type: NodeType = NodeType.STRUCT_DECL
    name: IdentifierNode = field(default_factory=lambda: IdentifierNode())
    fields: DeclListNode = field(default_factory=lambda: DeclListNode())


# Program Node
@dataclass
class ProgramNode(ASTNode):
    type: NodeType = NodeType.PROGRAM
    decls: DeclListNode = field(default_factory=lambda: DeclListNode())


Expression = Union[
    IntLiteralNode,
    StringLiteralNode,
    BoolLiteralNode,
    IdentifierNode,
    DotAccessNode,
    AssignmentNode,
    FunctionCallNode,
    UnaryOpNode,
    BinaryOpNode,
]

Statement = Union[
    AssignStatementNode,
    PostIncStatementNode,
    PostDecStatementNode,
    ReadStatementNode,
    WriteStatementNode,
    IfStatementNode,
    IfElseStatementNode,
    WhileStatementNode,
    CallStatementNode,
    ReturnStatementNode,
]

Declaration = Union[
    VariableDeclarationNode,
    FunctionDeclarationNode,
    StructDeclarationNode,
]

TypeNode = Union[IntTypeNode, BoolTypeNode, VoidTypeNode, StructTypeNode]

Node = Union[
    ProgramNode,
    DeclListNode,
    FormalDeclarationNode,
    FormalsListNode,
    FunctionBodyNode,
    StmtListNode,
    ExpListNode,
    Declaration,
    Statement,
    Expression,
    TypeNode,
]


def is_location(node: ASTNode) -> bool:
    """True for the expressions that may appear on the left of `=`, `++`, `>>`."""
    return isinstance(node, (IdentifierNode, DotAccessNode))


def iter_identifiers(node: ASTNode):
    """Yield every IdentifierNode in the subtree rooted at `node`, in source order."""
    if isinstance(node, IdentifierNode):
        yield node
        return
    for value in vars(node).values():
        if isinstance(value, ASTNode):
            yield from iter_identifiers(value)
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, ASTNode):
                    yield from iter_identifiers(item)
