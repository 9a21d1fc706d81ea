import pytest

from brno.errors import LexerError
from brno.lexer import tokenize
from brno.tokens import TokenType


def types(source):
    return [t.type for t in tokenize(source)]


def test_keywords_and_terminator():
    assert types('nech x = 1 piča') == [
        TokenType.LET, TokenType.IDENTIFIER, TokenType.EQUAL,
        TokenType.NUMBER, TokenType.TERMINATOR, TokenType.EOF,
    ]


def test_unicode_identifiers():
    tokens = tokenize('šalát.hoď žluťoučký_kůň2')
    assert [t.lexeme for t in tokens[:-1]] == ['šalát', '.', 'hoď', 'žluťoučký_kůň2']
    assert tokens[3].type == TokenType.IDENTIFIER


def test_keywords_are_case_sensitive():
    assert tokenize('Nech')[0].type == TokenType.IDENTIFIER


def test_longest_operator_wins():
    assert types('++ += + ** *= ?? && || == != <= >=')[:-1] == [
        TokenType.PLUS_PLUS, TokenType.PLUS_EQUAL, TokenType.PLUS,
        TokenType.STAR_STAR, TokenType.STAR_EQUAL, TokenType.QUESTION_QUESTION,
        TokenType.AND_AND, TokenType.OR_OR, TokenType.EQUAL_EQUAL,
        TokenType.BANG_EQUAL, TokenType.LESS_EQUAL, TokenType.GREATER_EQUAL,
    ]


@pytest.mark.parametrize('source', ['a & b', 'a | b', 'a ? b'])
def test_lone_double_operator_char_is_an_error(source):
    with pytest.raises(LexerError) as exc:
        tokenize(source)
    assert exc.value.line == 1
    assert exc.value.column == 3


def test_numbers_are_floats():
    tokens = tokenize('42 3.25')
    assert tokens[0].literal == 42.0
    assert isinstance(tokens[0].literal, float)
    assert tokens[1].literal == 3.25


def test_trailing_dot_is_member_access():
    assert types('3.x')[:-1] == [TokenType.NUMBER, TokenType.DOT, TokenType.IDENTIFIER]


def test_strings_have_no_escapes():
    token = tokenize(r'"a\nb"')[0]
    assert token.type == TokenType.STRING
    assert token.literal == 'a\\nb'


def test_unterminated_string_reports_start():
    with pytest.raises(LexerError) as exc:
        tokenize('nech s =\n  "abc')
    assert str(exc.value) == '[LEX] unterminated string literal at 2:3'


def test_unknown_character():
    with pytest.raises(LexerError) as exc:
        tokenize('nech x = 1 piča\nx = #')
    assert (exc.value.line, exc.value.column) == (2, 5)


def test_comments_are_skipped():
    source = '// line\n1 /* block\n still */ 2'
    tokens = tokenize(source)
    assert [t.literal for t in tokens[:-1]] == [1.0, 2.0]
    assert tokens[1].line == 3


def test_unterminated_block_comment_runs_to_end():
    assert types('1 /* never closed 2 3') == [TokenType.NUMBER, TokenType.EOF]


def test_positions_are_stable():
    source = 'rob f(a) {\n  vrat a piča\n}'
    first = tokenize(source)
    assert first == tokenize(source)
    ret = first[6]
    assert ret.type == TokenType.RETURN
    assert (ret.line, ret.column) == (2, 3)
