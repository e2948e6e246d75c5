"""Tree-walking interpreter for treelox expressions.

Evaluation is eager and depth-first: both operands of a binary node are
evaluated, left before right, before the operator is applied, and the
first LoxRuntimeError aborts the whole evaluation. Runtime errors carry
the line of the operator token that triggered them.
"""

from __future__ import annotations

import math
from typing import IO, Optional

from .ast import Binary, Expr, Grouping, Literal, Unary
from .errors import LoxRuntimeError
from .parser import parse_expression
from .tokens import Token, TokenType
from .values import Value, as_bool, as_number, as_string, to_string, values_equal

MAX_DEPTH = 500


class Interpreter:
    """Evaluates expression ASTs to values."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt', max_depth: int = MAX_DEPTH):
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp: Optional[IO[str]] = None
        self.max_depth = max_depth
        self.depth = 0

    def debug(self, msg: str, level: int = 1):
        if self.debug_level < level:
            return
        if self.debug_fp is None:
            self.debug_fp = open(self.debug_file, 'w', encoding='utf-8')
        self.debug_fp.write(msg + '\n')
        self.debug_fp.flush()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def interpret(self, expr: Expr) -> Value:
        self.depth = 0
        value = self.evaluate(expr)
        self.debug(f"result: {to_string(value)}")
        return value

    def evaluate(self, expr: Expr) -> Value:
        self.depth += 1
        try:
            if self.depth > self.max_depth:
                raise LoxRuntimeError('Expression nested too deeply.')
            self.debug(f"eval {type(expr).__name__}", level=2)
            if isinstance(expr, Literal):
                return expr.value
            if isinstance(expr, Grouping):
                return self.evaluate(expr.expression)
            if isinstance(expr, Unary):
                operand = self.evaluate(expr.right)
                return self.apply_unary_op(expr.operator, operand)
            if isinstance(expr, Binary):
                left = self.evaluate(expr.left)
                right = self.evaluate(expr.right)
                return self.apply_binary_op(expr.operator, left, right)
            raise NotImplementedError(f"evaluate: unexpected node type {type(expr)}")
        finally:
            self.depth -= 1

    def apply_unary_op(self, operator: Token, operand: Value) -> Value:
        if operator.type == TokenType.BANG:
            return not as_bool(operand)
        if operator.type == TokenType.MINUS:
            return -as_number(operand, operator.line)
        raise LoxRuntimeError('Invalid token?', operator.line)

    def apply_binary_op(self, operator: Token, a: Value, b: Value) -> Value:
        op = operator.type
        line = operator.line
        if op == TokenType.GREATER:
            return as_number(a, line) > as_number(b, line)
        if op == TokenType.GREATER_EQUAL:
            return as_number(a, line) >= as_number(b, line)
        if op == TokenType.LESS:
            return as_number(a, line) < as_number(b, line)
        if op == TokenType.LESS_EQUAL:
            return as_number(a, line) <= as_number(b, line)
        if op == TokenType.EQUAL_EQUAL:
            return values_equal(a, b)
        if op == TokenType.BANG_EQUAL:
            return not values_equal(a, b)
        if op == TokenType.MINUS:
            return as_number(a, line) - as_number(b, line)
        if op == TokenType.STAR:
            return as_number(a, line) * as_number(b, line)
        if op == TokenType.SLASH:
            return divide(as_number(a, line), as_number(b, line))
        if op == TokenType.PLUS:
            if isinstance(a, str) and isinstance(b, str):
                return as_string(a, line) + as_string(b, line)
            if is_number(a) and is_number(b):
                return a + b
            raise LoxRuntimeError('Invalid operation', line)
        raise LoxRuntimeError('Invalid operation', line)


def is_number(value: Value) -> bool:
    return isinstance(value, float)


def divide(a: float, b: float) -> float:
    """IEEE-754 division: a zero divisor yields an infinity or NaN."""
    if b == 0.0:
        if a == 0.0 or a != a:
            return float('nan')
        # the sign of a zero divisor matters: 1 / -0 is -inf
        return math.copysign(math.inf, math.copysign(1.0, a) * math.copysign(1.0, b))
    return a / b


def run_source(source: str, debug_level: int = 0) -> Value:
    """Convenience function to scan, parse and evaluate one expression."""
    expr = parse_expression(source)
    interpreter = Interpreter(debug_level=debug_level)
    try:
        return interpreter.interpret(expr)
    finally:
        interpreter.close()
