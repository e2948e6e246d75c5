import math

import pytest

from treelox.ast import Binary, Literal, Unary
from treelox.errors import LoxRuntimeError
from treelox.interpreter import Interpreter, run_source
from treelox.parser import parse_expression
from treelox.tokens import Token, TokenType
from treelox.values import NIL


def test_grouping_changes_precedence():
    assert run_source('(1 + 2) * 3') == 9.0
    assert run_source('1 + 2 * 3') == 7.0


def test_string_concatenation():
    assert run_source('"a" + "b"') == 'ab'


def test_apply_binary_op_concatenates_strings():
    plus = Token(TokenType.PLUS, '+', None, 3)
    assert Interpreter().apply_binary_op(plus, 'tree', 'lox') == 'treelox'
    assert Interpreter().apply_binary_op(plus, '', '') == ''


def test_plus_type_mismatch():
    with pytest.raises(LoxRuntimeError) as exc:
        run_source('1 + "a"')
    assert exc.value.message == 'Invalid operation'
    assert exc.value.line == 1


def test_plus_rejects_booleans_and_nil():
    for source in ('true + true', 'nil + 1', '"a" + nil'):
        with pytest.raises(LoxRuntimeError):
            run_source(source)


def test_equality():
    assert run_source('1 == 1') is True
    assert run_source('1 != 1') is False
    assert run_source('1 == "1"') is False
    assert run_source('nil == nil') is True
    assert run_source('"a" == "a"') is True
    assert run_source('true != false') is True


def test_equality_does_not_coerce_booleans():
    assert run_source('1 == true') is False
    assert run_source('0 == false') is False


def test_comparison():
    assert run_source('1 < 2') is True
    assert run_source('2 <= 2') is True
    assert run_source('1 > 2') is False
    assert run_source('3 >= 4') is False


def test_comparison_requires_numbers():
    with pytest.raises(LoxRuntimeError) as exc:
        run_source('"a" < "b"')
    assert exc.value.message == 'Not a number'


def test_arithmetic():
    assert run_source('10 - 4 - 3') == 3.0
    assert run_source('2 * 3.5') == 7.0
    assert run_source('7 / 2') == 3.5


def test_arithmetic_requires_numbers():
    for source in ('"a" - 1', '1 * nil', 'true / 2'):
        with pytest.raises(LoxRuntimeError):
            run_source(source)


def test_division_by_zero_follows_float_semantics():
    assert run_source('1 / 0') == math.inf
    assert run_source('-1 / 0') == -math.inf
    assert run_source('1 / -0') == -math.inf
    assert math.isnan(run_source('0 / 0'))


def test_nan_is_not_equal_to_itself():
    assert run_source('0 / 0 == 0 / 0') is False
    assert run_source('0 / 0 != 0 / 0') is True


def test_unary():
    assert run_source('-3') == -3.0
    assert run_source('--3') == 3.0
    assert run_source('!true') is False
    assert run_source('!!nil') is False


def test_negating_a_non_number():
    with pytest.raises(LoxRuntimeError) as exc:
        run_source('\n-"a"')
    assert exc.value.message == 'Not a number'
    assert exc.value.line == 2
    assert str(exc.value) == '[line 2] RuntimeError: Not a number'


def test_truthiness_only_nil_and_false_are_falsy():
    assert run_source('!nil') is True
    assert run_source('!false') is True
    assert run_source('!true') is False
    assert run_source('!0') is False
    assert run_source('!1') is False
    assert run_source('!""') is False
    assert run_source('!"a"') is False


def test_left_operand_fails_first():
    with pytest.raises(LoxRuntimeError) as exc:
        run_source('(-"a") + (1 + nil)')
    assert exc.value.message == 'Not a number'


def test_invalid_unary_operator():
    expr = Unary(Token(TokenType.PLUS, '+', None, 7), Literal(1.0))
    with pytest.raises(LoxRuntimeError) as exc:
        Interpreter().interpret(expr)
    assert exc.value.message == 'Invalid token?'
    assert exc.value.line == 7


def test_invalid_binary_operator():
    expr = Binary(Literal(1.0), Token(TokenType.COMMA, ',', None, 1), Literal(2.0))
    with pytest.raises(LoxRuntimeError) as exc:
        Interpreter().interpret(expr)
    assert exc.value.message == 'Invalid operation'


def test_literal_is_returned_unchanged():
    assert Interpreter().interpret(Literal(NIL)) is NIL


def test_evaluation_depth_limit():
    expr = parse_expression(' + '.join(['1'] * 50))
    assert Interpreter(max_depth=100).interpret(expr) == 50.0
    with pytest.raises(LoxRuntimeError) as exc:
        Interpreter(max_depth=20).interpret(expr)
    assert exc.value.message == 'Expression nested too deeply.'


def test_interpreter_is_reusable_after_error():
    interpreter = Interpreter()
    with pytest.raises(LoxRuntimeError):
        interpreter.interpret(parse_expression('1 + nil'))
    assert interpreter.interpret(parse_expression('1 + 1')) == 2.0


def test_debug_trace(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    interpreter = Interpreter(debug_level=2, debug_file=str(debug_file))
    interpreter.interpret(parse_expression('1 + 2'))
    interpreter.close()
    lines = debug_file.read_text(encoding='utf-8').splitlines()
    assert lines == ['eval Binary', 'eval Literal', 'eval Literal', 'result: 3']


def test_no_debug_file_at_level_zero(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    run_source('1')
    assert not (tmp_path / 'debug.txt').exists()
