"""CLI entry point for the treelox interpreter.

Usage:
    python -m treelox [-v|-vv] [--parser {descent,lark}] [script]
    python -m treelox --check <script>
    python -m treelox --print-ast <script>

Options:
  -v            Increase debug verbosity (can be repeated)
  --parser      Front end to use: the hand-written scanner and
                recursive-descent parser (default) or the Lark grammar
  --check       Parse with error recovery and report every diagnostic
                instead of evaluating
  --print-ast   Print the parenthesized AST instead of evaluating

With a script path the file is evaluated as a single expression and its
value printed. Without one, an interactive prompt evaluates one line at a
time until end of input. Debug information is written to `debug.txt` in
the current directory when verbosity is greater than zero.
"""

import argparse
import sys
from pathlib import Path

from .errors import LoxError
from .grammar import parse_with_lark
from .interpreter import Interpreter
from .parser import Parser
from .printer import to_sexpr
from .scanner import tokenize
from .values import to_string


def parse_source(source: str, front_end: str, interpreter: Interpreter):
    if front_end == 'lark':
        expr = parse_with_lark(source)
    else:
        tokens = tokenize(source)
        if interpreter.debug_level >= 2:
            interpreter.debug('tokens: ' + ' '.join(str(t) for t in tokens), level=2)
        expr = Parser(tokens).parse()
    if interpreter.debug_level >= 2:
        interpreter.debug(f"ast: {to_sexpr(expr)}", level=2)
    return expr


def check(source: str) -> bool:
    """Report every parse diagnostic in `source`; True when there are none."""
    _, errors = Parser(tokenize(source)).parse_all()
    for error in errors:
        print(error, file=sys.stderr)
    return not errors


def run(source: str, args: argparse.Namespace, interpreter: Interpreter) -> bool:
    try:
        if args.check:
            return check(source)
        expr = parse_source(source, args.parser, interpreter)
        if args.print_ast:
            print(to_sexpr(expr))
            return True
        value = interpreter.interpret(expr)
    except LoxError as e:
        print(e, file=sys.stderr)
        return False
    print(to_string(value))
    return True


def run_file(program_file: Path, args: argparse.Namespace, interpreter: Interpreter) -> None:
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        source = f.read()
    if not run(source, args, interpreter):
        sys.exit(1)


def run_prompt(args: argparse.Namespace, interpreter: Interpreter) -> None:
    while True:
        try:
            line = input('> ')
        except EOFError:
            print()
            return
        if not line.strip():
            continue
        # errors are reported and the prompt carries on
        run(line, args, interpreter)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog='treelox', description="treelox expression interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--parser', choices=('descent', 'lark'), default='descent', help='front end used to parse the source')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--check', action='store_true', help='report every parse diagnostic instead of evaluating')
    group.add_argument('--print-ast', action='store_true', help='print the parenthesized AST instead of evaluating')
    parser.add_argument('script', nargs='?', help='treelox source file (.lox) to evaluate')
    args = parser.parse_args(argv)

    interpreter = Interpreter(debug_level=args.v)
    try:
        if args.script:
            run_file(Path(args.script), args, interpreter)
        else:
            run_prompt(args, interpreter)
    finally:
        interpreter.close()


if __name__ == '__main__':
    main()
