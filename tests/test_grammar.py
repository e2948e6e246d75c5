import pytest

from treelox.errors import LexError, ParseError
from treelox.grammar import parse_with_lark
from treelox.parser import parse_expression
from treelox.printer import to_sexpr

VALID_EXPRESSIONS = [
    '1',
    '123.456',
    '"hello"',
    'true',
    'false',
    'nil',
    '1 + 2 * 3',
    '(1 + 2) * 3',
    '1 - 2 - 3',
    '8 / 4 / 2',
    '!!!true',
    '---1',
    '-(1 + 2)',
    '1 < 2 == 3 >= 4',
    '1 == 2 != 3 == 4',
    '"a" + "b" + "c"',
    '!(1 <= 2) != (3 > 4)',
    '1 +\n 2 // trailing comment\n * 3',
]


@pytest.mark.parametrize('source', VALID_EXPRESSIONS)
def test_both_front_ends_build_the_same_ast(source):
    assert parse_with_lark(source) == parse_expression(source)


def test_lark_tree_shape():
    assert to_sexpr(parse_with_lark('1 + 2 * 3')) == '(+ 1 (* 2 3))'


def test_operator_tokens_keep_their_line():
    expr = parse_with_lark('1\n+\n2')
    assert expr.operator.line == 2


@pytest.mark.parametrize('source, message', [
    ('(1 + 2', "Expected ')' after expression."),
    ('(1 2', "Expected ')' after expression."),
    ('1 + )', 'Expected expression.'),
    ('1 +', 'Expected expression.'),
    ('1 2', 'Expected end of expression.'),
    ('1)', 'Expected end of expression.'),
    ('(1 + 2))', 'Expected end of expression.'),
    ('whilex', 'Expected expression.'),
    ('123.', 'Expected end of expression.'),
    ('', 'Expected expression.'),
])
def test_parse_errors_match_descent_parser(source, message):
    with pytest.raises(ParseError) as lark_exc:
        parse_with_lark(source)
    with pytest.raises(ParseError) as descent_exc:
        parse_expression(source)
    assert lark_exc.value.message == message
    assert descent_exc.value.message == message


def test_lexical_errors():
    with pytest.raises(LexError) as exc:
        parse_with_lark('1 + @')
    assert exc.value.message == 'Unexpected character.'
    with pytest.raises(LexError) as exc:
        parse_with_lark('"abc\ndef')
    assert exc.value.message == 'Unterminated string.'
    assert exc.value.line == 2


def test_syntax_error_carries_the_scanned_token():
    with pytest.raises(ParseError) as exc:
        parse_with_lark('1 +\n.')
    assert exc.value.token.lexeme == '.'
    assert exc.value.line == 2
    assert str(exc.value) == "[line 2] ParseError at '.': Expected expression."


def test_error_at_end_of_input():
    with pytest.raises(ParseError) as exc:
        parse_with_lark('(1 +\n2')
    assert str(exc.value) == "[line 2] ParseError at end: Expected ')' after expression."


def test_deep_unary_nesting_is_a_parse_error():
    with pytest.raises(ParseError) as exc:
        parse_with_lark('-' * 2000 + '1')
    assert exc.value.message == 'Expression nested too deeply.'


def test_deep_grouping_is_a_parse_error():
    with pytest.raises(ParseError) as exc:
        parse_with_lark('(' * 100 + '1' + ')' * 100)
    assert exc.value.message == 'Expression nested too deeply.'


def test_nesting_limit_matches_descent_parser():
    source = '-(' * 5 + '1' + ')' * 5
    assert parse_with_lark(source, max_depth=10) == parse_expression(source, max_depth=10)
    with pytest.raises(ParseError):
        parse_with_lark(source, max_depth=9)
    with pytest.raises(ParseError):
        parse_expression(source, max_depth=9)


def test_long_binary_chain():
    source = ' + '.join(['1'] * 2000)
    assert to_sexpr(parse_with_lark(source)) == to_sexpr(parse_expression(source))
