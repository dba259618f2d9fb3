"""Symbol table and symbol representations.

This module defines the `SymbolType` enum and `StructType` used to describe
declared types, the four symbol variants produced by name analysis
(`VariableSymbol`, `FunctionSymbol`, `StructDefSymbol`,
`StructInstanceSymbol`), the `SymbolArena` that owns every declared symbol,
and `SymbolTable`, a stack of scopes.

The `SymbolTable` API provides `push_scope`/`pop_scope`, `declare`, and two
lookups: `lookup_local` (innermost scope only) and `lookup_global`
(innermost to outermost). Shadowing a name from an outer scope is legal;
redeclaring it in the same scope raises `DuplicateNameError`.
"""

from __future__ import annotations
from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Optional, Dict, List, Union, Iterator


class SymbolType(Enum):
    INT = auto()
    BOOL = auto()
    VOID = auto()

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class StructType:
    """A declared type of the form `struct <name>`."""

    name: str

    def __str__(self) -> str:
        return self.name


DataType = Union[SymbolType, StructType]


class EmptyTableError(RuntimeError):
    """Raised when popping a scope from a table with no open scopes."""


class DuplicateNameError(Exception):
    """Raised by `SymbolTable.declare` when the innermost scope already binds a name."""

    def __init__(self, name: str):
        super().__init__(f"'{name}' already declared in this scope")
        self.name = name


@dataclass(eq=False)
class VariableSymbol:
    name: str
    type: SymbolType
    index: Optional[int] = None

    def __post_init__(self) -> None:
        if self.type == SymbolType.VOID:
            raise ValueError(f"Variable '{self.name}' cannot have type void")

    def __str__(self) -> str:
        return str(self.type)


@dataclass(eq=False)
class FunctionSymbol:
    name: str
    return_type: DataType
    param_types: List[DataType] = field(default_factory=list)
    index: Optional[int] = None

    def __str__(self) -> str:
        params = ",".join(str(t) for t in self.param_types)
        return f"{params}->{self.return_type}"


@dataclass(eq=False)
class StructDefSymbol:
    name: str
    fields: SymbolTable = field(default_factory=lambda: SymbolTable())
    index: Optional[int] = None

    def __str__(self) -> str:
        return "struct"


@dataclass(eq=False)
class StructInstanceSymbol:
    name: str
    struct_name: str
    index: Optional[int] = None

    @property
    def type(self) -> StructType:
        return StructType(self.struct_name)

    def __str__(self) -> str:
        return self.struct_name


Symbol = Union[VariableSymbol, FunctionSymbol, StructDefSymbol, StructInstanceSymbol]


class SymbolArena:
    """Append-only store of symbols; identifier nodes refer to entries by index."""

    def __init__(self):
        self.symbols: List[Symbol] = []

    def add(self, symbol: Symbol) -> int:
        if symbol.index is not None:
            raise ValueError(f"Symbol '{symbol.name}' is already stored at {symbol.index}")
        symbol.index = len(self.symbols)
        self.symbols.append(symbol)
        return symbol.index

    def __getitem__(self, index: int) -> Symbol:
        return self.symbols[index]

    def __len__(self) -> int:
        return len(self.symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self.symbols)


class SymbolTable:
    def __init__(self):
        # The root scope is open from construction on.
        self.scopes: List[Dict[str, Symbol]] = [{}]

    @property
    def depth(self) -> int:
        """Number of currently open scopes."""
        return len(self.scopes)

    def push_scope(self) -> None:
        """Open a new, empty innermost scope."""
        self.scopes.append({})

    def pop_scope(self) -> None:
        """Close the innermost scope."""
        if not self.scopes:
            raise EmptyTableError("Cannot pop scope: symbol table has no scopes")
        self.scopes.pop()

    def declare(self, name: str, symbol: Symbol) -> None:
        """Declare `name` in the innermost scope."""
        if not self.scopes:
            raise EmptyTableError(f"Cannot declare '{name}': symbol table has no scopes")
        if name in self.scopes[-1]:
            raise DuplicateNameError(name)
        self.scopes[-1][name] = symbol

    def lookup_local(self, name: str) -> Optional[Symbol]:
        """Look up a name in the innermost scope only."""
        if not self.scopes:
            raise EmptyTableError(f"Cannot look up '{name}': symbol table has no scopes")
        return self.scopes[-1].get(name)

    def lookup_global(self, name: str) -> Optional[Symbol]:
        """Look up a name in the current and enclosing scopes."""
        if not self.scopes:
            raise EmptyTableError(f"Cannot look up '{name}': symbol table has no scopes")
        for scope in reversed(self.scopes):
            if name in scope:
                return scope[name]
        return None

    def dump(self) -> str:
        """Render the scope stack, innermost scope first."""
        lines = []
        for level, scope in reversed(list(enumerate(self.scopes))):
            entries = ", ".join(f"{name}: {sym}" for name, sym in scope.items())
            lines.append(f"scope {level}: {{{entries}}}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.dump()
