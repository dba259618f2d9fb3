from lexer import Lexer
from parser import Parser
from name_resolver import resolve_names


def parse_text(text: str):
    """Convenience: lex+parse a source text into an AST."""
    return Parser(Lexer(text).tokenize()).parse()


def analyze_text(text: str):
    """Convenience: lex+parse+name-analyze a source text."""
    return resolve_names(parse_text(text))


def kinds(resolution):
    """The diagnostic kinds of a resolution, in report order."""
    return [d.kind for d in resolution.diagnostics]
