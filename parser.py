"""
Parser for the minim language.

Overview and approach:
- This parser implements a small, hand-written recursive-descent parser for
    declarations and statements, and a Pratt-style parser for expressions.
    Expression precedence lives in `self.precedence`, which keeps expression
    parsing concise while handling precedence and associativity correctly.
- The parser only builds the tree. It does not consult or fill a symbol
    table; every name is resolved afterwards by `name_resolver.NameResolver`.
- Every node is stamped with the line/column of the token that starts it.
    Identifier nodes carry the position of the identifier itself, which is
    where name analysis reports its diagnostics.

Grammar (informal):
    program     := decl*
    decl        := var_decl | fn_decl | struct_decl
    var_decl    := type ID ';'
    type        := 'int' | 'bool' | 'void' | 'struct' ID
    struct_decl := 'struct' ID '{' var_decl* '}' ';'?
    fn_decl     := type ID '(' [formal (',' formal)*] ')' '{' var_decl* stmt* '}'
    stmt        := loc '=' exp ';' | loc '++' ';' | loc '--' ';'
                 | 'input' '>>' loc ';' | 'disp' '<<' exp ';'
                 | 'if' '(' exp ')' block ['else' block]
                 | 'while' '(' exp ')' block
                 | 'return' [exp] ';' | call ';'
    block       := '{' var_decl* stmt* '}'
    loc         := ID | loc '.' ID

Key points:
- Expression parsing:
    - `parse_primary()` recognizes literals, identifiers, parenthesized
        expressions and the prefix operators `-` and `!`.
    - `parse_postfix()` handles field access (`loc.id`) and calls (`id(...)`).
    - `parse_binary_expression()` implements the Pratt loop. Assignment is
        treated specially as right-associative and requires a location on its
        left.
- Declarations inside a block always come before its statements, so a block
    is parsed as a declaration list followed by a statement list.

Any syntax error raises `SyntaxError` immediately; there is no recovery.
"""

from __future__ import annotations
from typing import List, Optional, Dict
from tokens import Token, TokenType
from ast_nodes import *


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0
        self.current = tokens[0] if tokens else Token(TokenType.EOF, None)

        # Operator precedence table (higher = tighter binding)
        self.precedence: Dict[TokenType, int] = {
            TokenType.ASSIGN: 0,
            TokenType.OR: 1,
            TokenType.AND: 2,
            TokenType.EQ: 3,
            TokenType.NEQ: 3,
            TokenType.LT: 4,
            TokenType.GT: 4,
            TokenType.LTE: 4,
            TokenType.GTE: 4,
            TokenType.PLUS: 5,
            TokenType.MINUS: 5,
            TokenType.STAR: 6,
            TokenType.SLASH: 6,
        }

    def error(self, message: str, token: Optional[Token] = None) -> SyntaxError:
        token = token or self.current
        return SyntaxError(
            f"Syntax error at line {token.line}, column {token.column}: {message}"
        )

    def peek(self, offset: int = 1) -> Token:
        """Return the token `offset` positions ahead without consuming anything."""
        index = self.pos + offset
        if index < len(self.tokens):
            return self.tokens[index]
        return Token(TokenType.EOF, None)

    def advance(self) -> Token:
        """Move to next token."""
        self.pos += 1
        if self.pos < len(self.tokens):
            self.current = self.tokens[self.pos]
        else:
            self.current = Token(TokenType.EOF, None)
        return self.current

    def expect(self, expected_type: TokenType, message: Optional[str] = None) -> Token:
        """Expect and consume token of given type."""
        if self.current.type == expected_type:
            token = self.current
            self.advance()
            return token

        msg = message or f"Expected {expected_type}, got {self.current.type}"
        raise self.error(msg)

    def match(self, token_type: TokenType) -> bool:
        """Check if current token matches type, consume if true."""
        if self.current.type == token_type:
            self.advance()
            return True
        return False

    def get_precedence(self, token_type: TokenType) -> int:
        """Get precedence for operator token type, -1 for non-operators."""
        return self.precedence.get(token_type, -1)

    def parse_identifier(self, message: str = "Expected identifier") -> IdentifierNode:
        token = self.expect(TokenType.IDENTIFIER, message)
        return IdentifierNode(line=token.line, column=token.column, name=token.value)

    def parse_type(self) -> TypeNode:
        """Parse a type: int, bool, void, struct ID."""
        token = self.current
        match token.type:
            case TokenType.INT_TYPE:
                self.advance()
                return IntTypeNode(line=token.line, column=token.column)
            case TokenType.BOOL_TYPE:
                self.advance()
                return BoolTypeNode(line=token.line, column=token.column)
            case TokenType.VOID_TYPE:
                self.advance()
                return VoidTypeNode(line=token.line, column=token.column)
            case TokenType.STRUCT:
                self.advance()
                name = self.parse_identifier("Expected struct type name")
                return StructTypeNode(line=token.line, column=token.column, name=name)
            case _:
                raise self.error(f"Expected type, got {token.type}")

    # Expressions

    def parse_primary(self) -> ASTNode:
        """Parse primary expressions (literals, identifiers, parenthesized, prefix)."""
        token = self.current

        match token.type:
            case TokenType.INTEGER:
                self.advance()
                return IntLiteralNode(line=token.line, column=token.column, value=token.value)

            case TokenType.STRING:
                self.advance()
                return StringLiteralNode(line=token.line, column=token.column, value=token.value)

            case TokenType.TRUE:
                self.advance()
                return BoolLiteralNode(line=token.line, column=token.column, value=True)

            case TokenType.FALSE:
                self.advance()
                return BoolLiteralNode(line=token.line, column=token.column, value=False)

            case TokenType.IDENTIFIER:
                return self.parse_identifier()

            case TokenType.LPAREN:
                self.advance()
                expr = self.parse_expression()
                self.expect(TokenType.RPAREN)
                return expr

            case TokenType.MINUS | TokenType.NOT:
                self.advance()
                operand = self.parse_postfix(self.parse_primary())
                return UnaryOpNode(
                    line=token.line, column=token.column, operator=token.value, operand=operand
                )

            case _:
                raise self.error(f"Unexpected token: {token}")

    def parse_postfix(self, left: ASTNode) -> ASTNode:
        """Parse postfix expressions (field access, function calls)."""
        while True:
            match self.current.type:
                case TokenType.DOT:
                    if not is_location(left):
                        raise self.error("Field access requires a variable or field on the left")
                    self.advance()
                    field_id = self.parse_identifier("Expected field name after '.'")
                    left = DotAccessNode(
                        line=left.line, column=left.column, loc=left, field_id=field_id
                    )

                case TokenType.LPAREN:
                    if not isinstance(left, IdentifierNode):
                        raise self.error("Only a named function can be called")
                    self.advance()
                    args: List[ASTNode] = []

                    if self.current.type != TokenType.RPAREN:
                        args.append(self.parse_expression())
                        while self.match(TokenType.COMMA):
                            args.append(self.parse_expression())

                    self.expect(TokenType.RPAREN)
                    left = FunctionCallNode(
                        line=left.line,
                        column=left.column,
                        function=left,
                        arguments=ExpListNode(line=left.line, column=left.column, expressions=args),
                    )

                case _:
                    break

        return left

    def parse_unary(self) -> ASTNode:
        return self.parse_postfix(self.parse_primary())

    def parse_binary_expression(
        self, left: ASTNode, min_precedence: int = 0
    ) -> ASTNode:
        """Parse binary expressions using Pratt parsing."""
        while True:
            token = self.current
            precedence = self.get_precedence(token.type)
            if precedence < 0 or precedence < min_precedence:
                break

            # Handle assignment (right-associative)
            if token.type == TokenType.ASSIGN:
                if not is_location(left):
                    raise self.error("Can only assign to a variable or field", token)

                self.advance()
                right = self.parse_binary_expression(self.parse_unary(), precedence)
                left = AssignmentNode(line=left.line, column=left.column, left=left, right=right)
                continue

            self.advance()
            right = self.parse_binary_expression(self.parse_unary(), precedence + 1)
            left = BinaryOpNode(
                line=left.line, column=left.column, left=left, operator=token.value, right=right
            )

        return left

    def parse_expression(self) -> ASTNode:
        """Parse an expression."""
        return self.parse_binary_expression(self.parse_unary())

    def parse_location(self) -> ASTNode:
        """Parse an assignable location: ID or loc.ID."""
        loc = self.parse_unary()
        if not is_location(loc):
            raise self.error("Expected a variable or field")
        return loc

    # Declarations

    def at_struct_declaration(self) -> bool:
        return (
            self.current.type == TokenType.STRUCT
            and self.peek(1).type == TokenType.IDENTIFIER
            and self.peek(2).type == TokenType.LBRACE
        )

    def at_variable_declaration(self) -> bool:
        match self.current.type:
            case TokenType.INT_TYPE | TokenType.BOOL_TYPE | TokenType.VOID_TYPE:
                return True
            case TokenType.STRUCT:
                return not self.at_struct_declaration()
            case _:
                return False

    def parse_variable_declaration(self) -> VariableDeclarationNode:
        """Parse variable declaration: type ID ;"""
        var_type = self.parse_type()
        name = self.parse_identifier("Expected variable name")
        self.expect(TokenType.SEMICOLON, "Expected ';' after variable declaration")
        return VariableDeclarationNode(
            line=var_type.line, column=var_type.column, var_type=var_type, name=name
        )

    def parse_var_decl_list(self) -> DeclListNode:
        """Parse a run of variable declarations (the head of a block or struct body)."""
        start = self.current
        decls: List[Declaration] = []
        while self.at_variable_declaration():
            decls.append(self.parse_variable_declaration())
        return DeclListNode(line=start.line, column=start.column, decls=decls)

    def parse_struct_declaration(self) -> StructDeclarationNode:
        """Parse struct declaration: struct ID { var_decl* } ;?"""
        start = self.expect(TokenType.STRUCT)
        name = self.parse_identifier("Expected struct name")
        self.expect(TokenType.LBRACE)
        fields = self.parse_var_decl_list()
        self.expect(TokenType.RBRACE, "Expected '}' after struct fields")
        self.match(TokenType.SEMICOLON)
        return StructDeclarationNode(line=start.line, column=start.column, name=name, fields=fields)

    def parse_formals(self) -> FormalsListNode:
        start = self.expect(TokenType.LPAREN)
        formals: List[FormalDeclarationNode] = []

        if self.current.type != TokenType.RPAREN:
            while True:
                var_type = self.parse_type()
                name = self.parse_identifier("Expected parameter name")
                formals.append(
                    FormalDeclarationNode(
                        line=var_type.line, column=var_type.column, var_type=var_type, name=name
                    )
                )
                if not self.match(TokenType.COMMA):
                    break

        self.expect(TokenType.RPAREN)
        return FormalsListNode(line=start.line, column=start.column, formals=formals)

    def parse_block_contents(self) -> tuple[DeclListNode, StmtListNode]:
        """Parse '{' var_decl* stmt* '}'."""
        self.expect(TokenType.LBRACE)
        decls = self.parse_var_decl_list()
        start = self.current
        statements: List[Statement] = []
        while self.current.type not in (TokenType.RBRACE, TokenType.EOF):
            statements.append(self.parse_statement())
        self.expect(TokenType.RBRACE)
        return decls, StmtListNode(line=start.line, column=start.column, statements=statements)

    def parse_function_declaration(self, return_type: TypeNode, name: IdentifierNode) -> FunctionDeclarationNode:
        """Parse the rest of a function definition after `type ID`."""
        formals = self.parse_formals()
        body_start = self.current
        decls, stmts = self.parse_block_contents()
        body = FunctionBodyNode(
            line=body_start.line, column=body_start.column, decls=decls, stmts=stmts
        )
        return FunctionDeclarationNode(
            line=return_type.line,
            column=return_type.column,
            return_type=return_type,
            name=name,
            formals=formals,
            body=body,
        )

    def parse_declaration(self) -> Declaration:
        """Parse a top-level declaration."""
        if self.at_struct_declaration():
            return self.parse_struct_declaration()

        var_type = self.parse_type()
        name = self.parse_identifier("Expected declaration name")

        if self.current.type == TokenType.LPAREN:
            return self.parse_function_declaration(var_type, name)

        self.expect(TokenType.SEMICOLON, "Expected ';' or '(' after declaration name")
        return VariableDeclarationNode(
            line=var_type.line, column=var_type.column, var_type=var_type, name=name
        )

    # Statements

    def parse_if_statement(self) -> ASTNode:
        """Parse if statement: if (exp) { ... } [else { ... }]"""
        start = self.expect(TokenType.IF)
        self.expect(TokenType.LPAREN)
        condition = self.parse_expression()
        self.expect(TokenType.RPAREN)

        then_decls, then_stmts = self.parse_block_contents()

        if self.match(TokenType.ELSE):
            else_decls, else_stmts = self.parse_block_contents()
            return IfElseStatementNode(
                line=start.line,
                column=start.column,
                condition=condition,
                then_decls=then_decls,
                then_stmts=then_stmts,
                else_decls=else_decls,
                else_stmts=else_stmts,
            )

        return IfStatementNode(
            line=start.line, column=start.column, condition=condition, decls=then_decls, stmts=then_stmts
        )

    def parse_while_statement(self) -> WhileStatementNode:
        """Parse while statement: while (exp) { ... }"""
        start = self.expect(TokenType.WHILE)
        self.expect(TokenType.LPAREN)
        condition = self.parse_expression()
        self.expect(TokenType.RPAREN)

        decls, stmts = self.parse_block_contents()
        return WhileStatementNode(
            line=start.line, column=start.column, condition=condition, decls=decls, stmts=stmts
        )

    def parse_return_statement(self) -> ReturnStatementNode:
        """Parse return statement: return exp? ;"""
        start = self.expect(TokenType.RETURN)
        expr = None
        if self.current.type != TokenType.SEMICOLON:
            expr = self.parse_expression()
        self.expect(TokenType.SEMICOLON, "Expected ';' after return")
        return ReturnStatementNode(line=start.line, column=start.column, expression=expr)

    def parse_statement(self) -> Statement:
        """Parse a statement."""
        start = self.current

        match start.type:
            case TokenType.IF:
                return self.parse_if_statement()

            case TokenType.WHILE:
                return self.parse_while_statement()

            case TokenType.RETURN:
                return self.parse_return_statement()

            case TokenType.INPUT:
                self.advance()
                self.expect(TokenType.READ_OP, "Expected '>>' after 'input'")
                loc = self.parse_location()
                self.expect(TokenType.SEMICOLON, "Expected ';' after input statement")
                return ReadStatementNode(line=start.line, column=start.column, expression=loc)

            case TokenType.DISP:
                self.advance()
                self.expect(TokenType.WRITE_OP, "Expected '<<' after 'disp'")
                expr = self.parse_expression()
                self.expect(TokenType.SEMICOLON, "Expected ';' after disp statement")
                return WriteStatementNode(line=start.line, column=start.column, expression=expr)

            case (
                TokenType.INT_TYPE
                | TokenType.BOOL_TYPE
                | TokenType.VOID_TYPE
                | TokenType.STRUCT
            ):
                raise self.error("Declarations must precede statements in a block")

        expr = self.parse_expression()

        if isinstance(expr, AssignmentNode):
            self.expect(TokenType.SEMICOLON, "Expected ';' after assignment")
            return AssignStatementNode(line=start.line, column=start.column, assignment=expr)

        if isinstance(expr, FunctionCallNode):
            self.expect(TokenType.SEMICOLON, "Expected ';' after call")
            return CallStatementNode(line=start.line, column=start.column, call=expr)

        if is_location(expr) and self.current.type in (TokenType.INCREMENT, TokenType.DECREMENT):
            node_class = (
                PostIncStatementNode
                if self.current.type == TokenType.INCREMENT
                else PostDecStatementNode
            )
            self.advance()
            self.expect(TokenType.SEMICOLON)
            return node_class(line=start.line, column=start.column, expression=expr)

        raise self.error("Expected a statement", start)

    def parse_program(self) -> ProgramNode:
        """Parse a complete program (sequence of declarations)."""
        start = self.current
        decls: List[Declaration] = []

        while self.current.type != TokenType.EOF:
            decls.append(self.parse_declaration())

        return ProgramNode(
            line=start.line,
            column=start.column,
            decls=DeclListNode(line=start.line, column=start.column, decls=decls),
        )

    def parse(self) -> ProgramNode:
        """Parse a complete program."""
        return self.parse_program()
