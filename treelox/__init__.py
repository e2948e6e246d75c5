# treelox language package
# This package provides a scanner, parser and tree-walking interpreter for
# treelox expressions.
from .errors import Diagnostic, LoxError, LexError, ParseError, LoxRuntimeError
from .scanner import Scanner, tokenize
from .parser import Parser, parse_expression
from .interpreter import Interpreter, run_source
from .values import NIL, to_string

__all__ = [
    'Diagnostic',
    'LoxError',
    'LexError',
    'ParseError',
    'LoxRuntimeError',
    'Scanner',
    'tokenize',
    'Parser',
    'parse_expression',
    'Interpreter',
    'run_source',
    'NIL',
    'to_string',
]
