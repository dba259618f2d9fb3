"""
Lexer for the minim language.

Overview:
- This module implements a small hand-written lexical analyzer (scanner) that
    transforms an input source string into a stream of `Token` objects defined
    in `tokens.py`.
- It recognizes keywords (e.g. `int`, `bool`, `void`, `struct`, `input`,
    `disp`, `if`, `while`), identifiers, integer and string literals, single-
    and two-character operators (e.g. `==`, `<<`, `>>`, `++`, `&&`),
    punctuation (commas, semicolons, dots, parentheses/braces) and skips
    whitespace and single-line comments starting with `//`.
- Every token records the 1-based line and column of its first character so
    that later phases can attach positions to AST nodes and diagnostics.

Examples:
    Input:  "struct Point p; disp << p.x;"
    Tokens: [STRUCT, IDENTIFIER('Point'), IDENTIFIER('p'), SEMICOLON, DISP, ...]

Implementation notes:
- The lexer is a simple stateful scanner using `self.pos` and `self.current_char`.
- Two-character operators are checked first so `<<` is not lexed as `<` `<`.
- Identifiers are scanned and then mapped to keywords using `self.keywords`.
- String literals keep their surrounding quotes and escape sequences exactly
    as written; only the legality of each escape is checked here.
"""

from __future__ import annotations
from typing import Optional, List
from tokens import Token, TokenType


class Lexer:
    TWO_CHAR_OPERATORS = {
        "==": TokenType.EQ,
        "!=": TokenType.NEQ,
        "<=": TokenType.LTE,
        ">=": TokenType.GTE,
        "<<": TokenType.WRITE_OP,
        ">>": TokenType.READ_OP,
        "&&": TokenType.AND,
        "||": TokenType.OR,
        "++": TokenType.INCREMENT,
        "--": TokenType.DECREMENT,
    }

    STRING_ESCAPES = {"n", "t", '"', "\\", "'"}

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1
        self.current_char = self.text[self.pos] if self.text else None

        self.keywords = {
            "while": TokenType.WHILE,
            "if": TokenType.IF,
            "else": TokenType.ELSE,
            "return": TokenType.RETURN,
            "input": TokenType.INPUT,
            "disp": TokenType.DISP,
            "struct": TokenType.STRUCT,
            "void": TokenType.VOID_TYPE,
            "int": TokenType.INT_TYPE,
            "bool": TokenType.BOOL_TYPE,
            "true": TokenType.TRUE,
            "false": TokenType.FALSE,
        }

    def error(self, message: str = "", line: Optional[int] = None, column: Optional[int] = None) -> SyntaxError:
        line = self.line if line is None else line
        column = self.column if column is None else column
        msg = f"Lexical error at line {line}, column {column}: {message}"
        return SyntaxError(msg)

    def advance(self) -> None:
        """Advance to next character."""
        # Newlines reset the column and increment the line number.
        if self.current_char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        self.pos += 1
        if self.pos < len(self.text):
            self.current_char = self.text[self.pos]
        else:
            self.current_char = None

    def peek_char(self) -> Optional[str]:
        """Look at next character without consuming it."""
        next_pos = self.pos + 1
        if next_pos < len(self.text):
            return self.text[next_pos]
        return None

    def skip_whitespace(self) -> None:
        """Skip whitespace characters."""
        while self.current_char is not None and self.current_char.isspace():
            self.advance()

    def skip_comment(self) -> None:
        """Skip single-line comments (// ...)."""
        while self.current_char is not None and self.current_char != "\n":
            self.advance()

        if self.current_char == "\n":
            self.advance()

    def integer(self) -> int:
        """Parse a multi-digit integer."""
        result = []

        while self.current_char is not None and self.current_char.isdigit():
            result.append(self.current_char)
            self.advance()

        if not result:
            raise self.error("Expected integer")

        return int("".join(result))

    def string(self) -> str:
        """Parse a double-quoted string literal, returned with its quotes."""
        start_line, start_col = self.line, self.column
        result = [self.current_char]
        self.advance()

        while True:
            if self.current_char is None or self.current_char == "\n":
                raise self.error("Unterminated string literal", start_line, start_col)

            if self.current_char == "\\":
                escape = self.peek_char()
                if escape not in self.STRING_ESCAPES:
                    raise self.error(
                        "Illegal escape sequence in string literal", start_line, start_col
                    )
                result.append(self.current_char)
                self.advance()
                result.append(self.current_char)
                self.advance()
                continue

            result.append(self.current_char)
            if self.current_char == '"':
                self.advance()
                break
            self.advance()

        return "".join(result)

    def identifier(self) -> str:
        """Parse an identifier or keyword."""
        result = []

        # First character must be a letter or underscore (C-like rule)
        if self.current_char is not None and (
            self.current_char.isalpha() or self.current_char == "_"
        ):
            result.append(self.current_char)
            self.advance()
        else:
            raise self.error("Expected identifier")

        while self.current_char is not None and (
            self.current_char.isalnum() or self.current_char == "_"
        ):
            result.append(self.current_char)
            self.advance()

        return "".join(result)

    def get_next_token(self) -> Token:
        """Lexical analyzer that returns tokens one at a time."""
        while self.current_char is not None:
            if self.current_char.isspace():
                self.skip_whitespace()
                continue

            if self.current_char == "/" and self.peek_char() == "/":
                self.skip_comment()
                continue

            line, column = self.line, self.column

            # Two-character operators first so `<<` is not lexed as `<` `<`.
            pair = self.current_char + (self.peek_char() or "")
            if pair in self.TWO_CHAR_OPERATORS:
                self.advance()
                self.advance()
                return Token(self.TWO_CHAR_OPERATORS[pair], pair, line, column)

            match self.current_char:
                case "+":
                    self.advance()
                    return Token(TokenType.PLUS, "+", line, column)
                case "-":
                    self.advance()
                    return Token(TokenType.MINUS, "-", line, column)
                case "*":
                    self.advance()
                    return Token(TokenType.STAR, "*", line, column)
                case "/":
                    self.advance()
                    return Token(TokenType.SLASH, "/", line, column)
                case "(":
                    self.advance()
                    return Token(TokenType.LPAREN, "(", line, column)
                case ")":
                    self.advance()
                    return Token(TokenType.RPAREN, ")", line, column)
                case "{":
                    self.advance()
                    return Token(TokenType.LBRACE, "{", line, column)
                case "}":
                    self.advance()
                    return Token(TokenType.RBRACE, "}", line, column)
                case ",":
                    self.advance()
                    return Token(TokenType.COMMA, ",", line, column)
                case ".":
                    self.advance()
                    return Token(TokenType.DOT, ".", line, column)
                case ";":
                    self.advance()
                    return Token(TokenType.SEMICOLON, ";", line, column)
                case "=":
                    self.advance()
                    return Token(TokenType.ASSIGN, "=", line, column)
                case "<":
                    self.advance()
                    return Token(TokenType.LT, "<", line, column)
                case ">":
                    self.advance()
                    return Token(TokenType.GT, ">", line, column)
                case "!":
                    self.advance()
                    return Token(TokenType.NOT, "!", line, column)
                case '"':
                    return Token(TokenType.STRING, self.string(), line, column)

            if self.current_char.isdigit():
                value = self.integer()
                return Token(TokenType.INTEGER, value, line, column)

            # Identifiers and keywords: scan an identifier and map to a
            # keyword token if present in `self.keywords`.
            if self.current_char.isalpha() or self.current_char == "_":
                ident = self.identifier()
                token_type = self.keywords.get(ident, TokenType.IDENTIFIER)
                return Token(token_type, ident, line, column)

            raise self.error(f"Unexpected character '{self.current_char}'")

        return Token(TokenType.EOF, None, self.line, self.column)

    def tokenize(self) -> List[Token]:
        """Return all tokens from the input string."""
        tokens = []
        while True:
            token = self.get_next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                break
        return tokens
