"""Token definitions for the lexer.

This module defines the `TokenType` enum for all token kinds recognized by
the minim lexer and a small `Token` dataclass that holds a token type, an
optional lexeme/value and the 1-based source position where the token
starts. Tokens are the atomic units produced by the lexer and consumed by
the parser.
"""

from __future__ import annotations
from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional


class TokenType(Enum):
    # Literals
    INTEGER = auto()
    STRING = auto()
    IDENTIFIER = auto()

    # Arithmetic operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    INCREMENT = auto()
    DECREMENT = auto()

    # Parentheses and braces
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()

    # Punctuation
    COMMA = auto()
    DOT = auto()
    ASSIGN = auto()
    SEMICOLON = auto()

    # Stream operators (input >> x; disp << x;)
    READ_OP = auto()
    WRITE_OP = auto()

    # Comparison operators
    EQ = auto()
    NEQ = auto()
    LT = auto()
    GT = auto()
    LTE = auto()
    GTE = auto()

    # Logical operators
    AND = auto()
    OR = auto()
    NOT = auto()

    # Keywords
    WHILE = auto()
    IF = auto()
    ELSE = auto()
    RETURN = auto()
    INPUT = auto()
    DISP = auto()
    STRUCT = auto()
    INT_TYPE = auto()
    BOOL_TYPE = auto()
    VOID_TYPE = auto()
    TRUE = auto()
    FALSE = auto()

    # Special
    EOF = auto()

    def __str__(self) -> str:
        return self.name


@dataclass
class Token:
    type: TokenType
    value: Optional[str | int] = None
    line: int = 0
    column: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type}, {repr(self.value)}, {self.line}:{self.column})"

    @property
    def lexeme(self) -> str:
        if self.value is None:
            return str(self.type)
        return str(self.value)
