"""Semantic diagnostics collected during name analysis.

A `Diagnostics` log records every non-fatal semantic error in the order it
was found. Analysis never stops at the first problem, so one run reports
every independently discoverable error. Each `Diagnostic` carries an
`ErrorKind`, a 1-based source position and a message.

Rendered form (one per line):

    3:9 ***ERROR*** Identifier undeclared
"""

from __future__ import annotations
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, TextIO


class ErrorKind(Enum):
    VOID_VARIABLE = "Non-function declared void"
    DUPLICATE_NAME = "Identifier multiply-declared"
    INVALID_STRUCT_TYPE = "Name of struct type invalid"
    UNDECLARED_IDENTIFIER = "Identifier undeclared"
    DOT_ACCESS_NON_STRUCT = "Dot-access of non-struct type"
    INVALID_FIELD_NAME = "Struct field name invalid"

    @property
    def label(self) -> str:
        """CamelCase error name, e.g. `DuplicateNameError`."""
        return {
            ErrorKind.VOID_VARIABLE: "VoidVariableError",
            ErrorKind.DUPLICATE_NAME: "DuplicateNameError",
            ErrorKind.INVALID_STRUCT_TYPE: "InvalidStructTypeError",
            ErrorKind.UNDECLARED_IDENTIFIER: "UndeclaredIdentifierError",
            ErrorKind.DOT_ACCESS_NON_STRUCT: "DotAccessOnNonStructError",
            ErrorKind.INVALID_FIELD_NAME: "InvalidFieldNameError",
        }[self]


@dataclass(frozen=True)
class Diagnostic:
    line: int
    column: int
    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.line}:{self.column} ***ERROR*** {self.message}"


class Diagnostics:
    def __init__(self):
        self.entries: List[Diagnostic] = []

    def report(
        self, line: int, column: int, kind: ErrorKind, message: Optional[str] = None
    ) -> Diagnostic:
        """Append a diagnostic; the message defaults to the kind's standard text."""
        diag = Diagnostic(line, column, kind, message or kind.value)
        self.entries.append(diag)
        return diag

    def has_errors(self) -> bool:
        return bool(self.entries)

    def of_kind(self, kind: ErrorKind) -> List[Diagnostic]:
        return [d for d in self.entries if d.kind == kind]

    def write(self, stream: Optional[TextIO] = None) -> None:
        """Write every diagnostic, one per line, to `stream` (stderr by default)."""
        stream = stream if stream is not None else sys.stderr
        for diag in self.entries:
            print(diag, file=stream)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> Diagnostic:
        return self.entries[index]

    def __str__(self) -> str:
        return "\n".join(str(d) for d in self.entries)
