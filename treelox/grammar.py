"""Lark front end for treelox expressions.

The grammar below is the same precedence cascade the hand-written
`Parser` implements, expressed declaratively and handed to a Lark LALR
parser. The parse tree is transformed into the very same AST classes, so
the two front ends can be swapped (see `--parser` on the command line)
and cross-checked against each other.

Lark does not lex on its own here: `ScannerLexer` feeds it the tokens of
the treelox `Scanner`, so both front ends share one vocabulary and every
LexError comes from the scanner. Terminal names are `TokenType` names.
Lark syntax errors are mapped onto ParseError with the messages the
descent parser uses.
"""

from __future__ import annotations

from typing import Iterator, List, Sequence, Union

from lark import Lark, Transformer_NonRecursive
from lark import Token as LarkToken
from lark.exceptions import UnexpectedToken
from lark.lexer import Lexer

from .ast import Binary, Expr, Grouping, Literal, Unary
from .errors import ParseError
from .parser import MAX_DEPTH
from .scanner import tokenize
from .tokens import Token, TokenType
from .values import NIL


LOX_GRAMMAR = r"""
    ?start: expression
    ?expression: equality

    ?equality: comparison ((BANG_EQUAL | EQUAL_EQUAL) comparison)*
    ?comparison: term ((GREATER | GREATER_EQUAL | LESS | LESS_EQUAL) term)*
    ?term: factor ((MINUS | PLUS) factor)*
    ?factor: unary ((SLASH | STAR) unary)*
    ?unary: (BANG | MINUS) unary
          | primary

    ?primary: NUMBER          -> number
            | STRING          -> string
            | TRUE            -> true
            | FALSE           -> false
            | NIL             -> nil
            | LEFT_PAREN expression RIGHT_PAREN -> grouping

    %declare NUMBER STRING TRUE FALSE NIL LEFT_PAREN RIGHT_PAREN
    %declare BANG BANG_EQUAL EQUAL_EQUAL GREATER GREATER_EQUAL LESS LESS_EQUAL
    %declare MINUS PLUS SLASH STAR
"""


class ScannerLexer(Lexer):
    """Adapts treelox tokens to Lark.

    Each Lark token keeps the index of its treelox token in `start_pos`,
    which is how the transformer and the error mapping get back to the
    scanned token.
    """

    def __init__(self, lexer_conf):
        pass

    def lex(self, data: Union[str, Sequence[Token]]) -> Iterator[LarkToken]:
        tokens = tokenize(data) if isinstance(data, str) else data
        for index, token in enumerate(tokens):
            yield LarkToken(token.type.name, token.lexeme, start_pos=index, line=token.line)


LOX_PARSER = Lark(
    LOX_GRAMMAR,
    parser='lalr',
    lexer=ScannerLexer,
    maybe_placeholders=False,
)


class ASTTransformer(Transformer_NonRecursive):
    """Transforms the Lark parse tree into a treelox AST.

    Non-recursive, so deeply nested input reaches the depth check instead
    of Python's recursion limit.
    """

    def __init__(self, tokens: Sequence[Token]):
        super().__init__()
        self.tokens = tokens

    def scanned(self, token: LarkToken) -> Token:
        return self.tokens[token.start_pos]

    def fold_binary(self, items) -> Expr:
        # items pattern: expr ( op expr )*
        left = items[0]
        i = 1
        while i < len(items):
            operator = self.scanned(items[i])
            right = items[i + 1]
            left = Binary(left, operator, right)
            i += 2
        return left

    def equality(self, items):
        return self.fold_binary(items)

    def comparison(self, items):
        return self.fold_binary(items)

    def term(self, items):
        return self.fold_binary(items)

    def factor(self, items):
        return self.fold_binary(items)

    def unary(self, items):
        return Unary(self.scanned(items[0]), items[1])

    def number(self, items):
        return Literal(self.scanned(items[0]).literal)

    def string(self, items):
        return Literal(self.scanned(items[0]).literal)

    def true(self, items):
        return Literal(True)

    def false(self, items):
        return Literal(False)

    def nil(self, items):
        return Literal(NIL)

    def grouping(self, items):
        # LEFT_PAREN expression RIGHT_PAREN
        return Grouping(items[1])


def parse_with_lark(source: str, max_depth: int = MAX_DEPTH) -> Expr:
    """Parse `source` into an expression AST using the Lark grammar."""
    tokens = tokenize(source)
    try:
        tree = LOX_PARSER.parse(tokens)
    except UnexpectedToken as e:
        raise syntax_error(e, tokens) from None
    expr = ASTTransformer(tokens).transform(tree)
    check_nesting(expr, max_depth)
    return expr


def syntax_error(e: UnexpectedToken, tokens: List[Token]) -> ParseError:
    """Pick the descent parser's message for a Lark syntax error.

    LALR states merge their lookaheads, so `e.expected` can list both ')'
    and the end of input; the parentheses still open in front of the
    offending token decide which one was meant.
    """
    at_end = e.token.type == '$END'
    index = len(tokens) if at_end else e.token.start_pos
    open_parens = 0
    for token in tokens[:index]:
        if token.type == TokenType.LEFT_PAREN:
            open_parens += 1
        elif token.type == TokenType.RIGHT_PAREN:
            open_parens -= 1
    if open_parens > 0 and 'RIGHT_PAREN' in e.expected:
        message = "Expected ')' after expression."
    elif open_parens == 0 and '$END' in e.expected:
        message = 'Expected end of expression.'
    else:
        message = 'Expected expression.'
    if at_end:
        return ParseError(message, tokens[-1].line if tokens else 1)
    token = tokens[index]
    return ParseError(message, token.line, token)


def check_nesting(expr: Expr, max_depth: int) -> None:
    """Reject unary and grouping nesting deeper than `max_depth`.

    Same limit the descent parser enforces while it recurses.
    """
    stack = [(expr, 0, None)]
    while stack:
        node, depth, token = stack.pop()
        if isinstance(node, Binary):
            stack.append((node.left, depth, node.operator))
            stack.append((node.right, depth, node.operator))
        elif isinstance(node, (Unary, Grouping)):
            if isinstance(node, Unary):
                token = node.operator
            if depth + 1 > max_depth:
                if token is None:
                    raise ParseError('Expression nested too deeply.', 1)
                raise ParseError('Expression nested too deeply.', token.line, token)
            child = node.right if isinstance(node, Unary) else node.expression
            stack.append((child, depth + 1, token))
