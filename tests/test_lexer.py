import pytest
from main import lex
from tokens import TokenType


def test_lexer_recognizes_keywords_and_punctuation():
    src = "int x; void foo() { return; } struct P p; bool b;"
    tokens = lex(src)
    types = [t.type for t in tokens]

    assert TokenType.INT_TYPE in types
    assert TokenType.VOID_TYPE in types
    assert TokenType.BOOL_TYPE in types
    assert TokenType.STRUCT in types
    assert TokenType.IDENTIFIER in types
    assert TokenType.SEMICOLON in types
    assert TokenType.RETURN in types
    assert types[-1] == TokenType.EOF


def test_lexer_two_character_operators():
    tokens = lex("<< >> ++ -- == != <= >= && || < > = !")
    types = [t.type for t in tokens[:-1]]
    assert types == [
        TokenType.WRITE_OP,
        TokenType.READ_OP,
        TokenType.INCREMENT,
        TokenType.DECREMENT,
        TokenType.EQ,
        TokenType.NEQ,
        TokenType.LTE,
        TokenType.GTE,
        TokenType.AND,
        TokenType.OR,
        TokenType.LT,
        TokenType.GT,
        TokenType.ASSIGN,
        TokenType.NOT,
    ]


def test_lexer_tracks_line_and_column():
    src = "int x;\n  disp << x;"
    tokens = lex(src)
    positions = [(t.type, t.line, t.column) for t in tokens]
    assert positions[0] == (TokenType.INT_TYPE, 1, 1)
    assert positions[1] == (TokenType.IDENTIFIER, 1, 5)
    assert positions[3] == (TokenType.DISP, 2, 3)
    assert positions[4] == (TokenType.WRITE_OP, 2, 8)
    assert positions[5] == (TokenType.IDENTIFIER, 2, 11)


def test_lexer_skips_comments():
    tokens = lex("// a comment\nint x; // trailing\n")
    assert [t.type for t in tokens] == [
        TokenType.INT_TYPE,
        TokenType.IDENTIFIER,
        TokenType.SEMICOLON,
        TokenType.EOF,
    ]
    assert tokens[0].line == 2


def test_lexer_string_literal_keeps_quotes_and_escapes():
    tokens = lex('disp << "a\\tb\\"c";')
    string_tok = tokens[2]
    assert string_tok.type == TokenType.STRING
    assert string_tok.value == '"a\\tb\\"c"'


def test_lexer_dot_and_integer():
    tokens = lex("p.x = 42;")
    assert [t.type for t in tokens[:5]] == [
        TokenType.IDENTIFIER,
        TokenType.DOT,
        TokenType.IDENTIFIER,
        TokenType.ASSIGN,
        TokenType.INTEGER,
    ]
    assert tokens[4].value == 42


@pytest.mark.parametrize(
    "src",
    ['disp << "unterminated;', 'disp << "bad \\q escape";', "int x @ y;"],
)
def test_lexer_rejects_bad_input(src):
    with pytest.raises(SyntaxError):
        lex(src)
