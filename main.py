from __future__ import annotations
import json
import sys
from typing import List, Optional
from lexer import Lexer
from tokens import Token
from ast_nodes import ProgramNode
from parser import Parser
from name_resolver import NameResolution, resolve_names
from pretty_printer import PrettyPrinter
from ast_json import ast_to_json, diagnostics_to_json, symbols_to_json
from ast_viz import write_and_render

EXIT_OK = 0
EXIT_SYNTAX_ERROR = 1
EXIT_SEMANTIC_ERRORS = 2


def lex(text: str) -> List[Token]:
    """Tokenize input string."""
    lexer = Lexer(text)
    return lexer.tokenize()


def parse_tokens(tokens: List[Token]) -> ProgramNode:
    """Parse tokens into AST."""
    parser = Parser(tokens)
    return parser.parse()


def parse_text(text: str) -> ProgramNode:
    """Lex and parse a source text into an AST."""
    return parse_tokens(lex(text))


def analyze(text: str) -> NameResolution:
    """Lex, parse and name-analyze a source text.

    Raises `SyntaxError` for lexical or syntax errors; semantic problems are
    returned in `NameResolution.diagnostics`.
    """
    return resolve_names(parse_text(text))


def process_program(
    text: str,
    *,
    print_tokens: bool = False,
    print_ast: bool = True,
    print_unparse: bool = False,
    print_symbols: bool = False,
    dump_json_path: Optional[str] = None,
    viz_path: Optional[str] = None,
    viz_format: str = "svg",
) -> int:
    """Process a single program: lex, parse, run name analysis and optionally print stages.

    Flags control which parts are printed. Returns a process exit status.
    """
    try:
        tokens = lex(text)
        if print_tokens:
            print(f"Tokens ({len(tokens)}):")
            for i, token in enumerate(tokens[:50]):
                print(f"  {i:3}: {token}")
            if len(tokens) > 50:
                print(f"  ... and {len(tokens) - 50} more")

        ast = parse_tokens(tokens)
    except SyntaxError as e:
        print(f"Syntax Error: {e}")
        return EXIT_SYNTAX_ERROR

    resolution = resolve_names(ast)

    if print_ast:
        print("\nAST:")
        print(PrettyPrinter.print_ast(ast, arena=resolution.arena))

    if print_unparse:
        print("\nAnnotated source:")
        print(PrettyPrinter.unparse(ast, resolution.arena), end="")

    if print_symbols:
        print("\nGlobal scope:")
        print(resolution.table.dump())

    if dump_json_path:
        export = {
            "ast": ast_to_json(ast),
            "symbols": symbols_to_json(resolution.arena),
            "diagnostics": diagnostics_to_json(resolution.diagnostics),
        }
        try:
            with open(dump_json_path, "w", encoding="utf-8") as fh:
                json.dump(export, fh, indent=2)
            print(f"Wrote AST+symbols JSON to {dump_json_path}")
        except OSError as e:
            print(f"Failed to write JSON to {dump_json_path}: {e}")

    if viz_path:
        try:
            write_and_render(ast, viz_path, arena=resolution.arena, fmt=viz_format)
            print(f"Wrote AST visualization to {viz_path}.{viz_format}")
        except Exception as e:
            print(f"Failed to render AST visualization to {viz_path}: {e}")

    if resolution.ok:
        print("\n✓ Name analysis passed")
        return EXIT_OK

    print(f"\n✗ Name analysis found {len(resolution.diagnostics)} error(s):")
    resolution.diagnostics.write()
    return EXIT_SEMANTIC_ERRORS


def interactive_mode(print_tokens: bool = False, print_ast: bool = True) -> None:
    """Run interactive REPL reading programs from stdin."""
    print("\nInteractive Name Analysis Mode (type 'quit' to exit)")
    print("=" * 80)

    while True:
        try:
            text = input("\nEnter program: ").strip()
            if text.lower() in ("quit", "exit", "q"):
                print("Goodbye!")
                break

            if not text:
                continue

            process_program(
                text,
                print_tokens=print_tokens,
                print_ast=print_ast,
                print_unparse=True,
            )

        except (KeyboardInterrupt, EOFError):
            print("\n\nExiting...")
            break


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(
        description="Run name analysis on a minim file or interactively from stdin"
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--file", "-f", dest="file", help="Path to source file to process"
    )
    group.add_argument(
        "--interactive",
        "-i",
        dest="interactive",
        action="store_true",
        help="Start interactive REPL mode",
    )
    # printing/verbosity options
    parser.add_argument(
        "--print-tokens", dest="print_tokens", action="store_true", help="Print tokens"
    )
    parser.add_argument(
        "--no-ast", dest="print_ast", action="store_false", help="Do not print AST"
    )
    parser.add_argument(
        "--unparse",
        dest="print_unparse",
        action="store_true",
        help="Print the source back with resolved symbols after each identifier",
    )
    parser.add_argument(
        "--symbols",
        dest="print_symbols",
        action="store_true",
        help="Print the global scope after analysis",
    )

    parser.set_defaults(
        print_tokens=False,
        print_ast=True,
        print_unparse=False,
        print_symbols=False,
    )
    parser.add_argument(
        "--dump-json", dest="dump_json", help="Path to write AST+symbols+diagnostics JSON"
    )
    parser.add_argument(
        "--viz-ast",
        dest="viz_ast",
        help="Path (without extension) to write Graphviz visualization of the annotated AST",
    )
    parser.add_argument(
        "--viz-format",
        dest="viz_format",
        default="svg",
        help="Format for Graphviz output (svg, png, pdf, etc)",
    )

    args = parser.parse_args()

    if args.interactive:
        interactive_mode(print_tokens=args.print_tokens, print_ast=args.print_ast)
    elif args.file:
        try:
            with open(args.file, "r", encoding="utf-8") as fh:
                text = fh.read()
        except OSError as e:
            print(f"Failed to read file {args.file}: {e}")
            sys.exit(EXIT_SYNTAX_ERROR)

        sys.exit(
            process_program(
                text,
                print_tokens=args.print_tokens,
                print_ast=args.print_ast,
                print_unparse=args.print_unparse,
                print_symbols=args.print_symbols,
                dump_json_path=args.dump_json,
                viz_path=args.viz_ast,
                viz_format=args.viz_format,
            )
        )
    else:
        parser.print_help()
