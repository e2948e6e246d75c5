"""Recursive-descent parser for treelox expressions.

Each grammar rule is one method, lowest precedence first:

    expression := equality
    equality   := comparison (("!=" | "==") comparison)*
    comparison := term ((">" | ">=" | "<" | "<=") term)*
    term       := factor (("-" | "+") factor)*
    factor     := unary (("/" | "*") unary)*
    unary      := ("!" | "-") unary | primary
    primary    := NUMBER | STRING | "true" | "false" | "nil"
                | "(" expression ")"

Binary levels fold left iteratively; unary recurses to the right. Every
grammar violation raises ParseError. `parse_all` additionally recovers
from errors so that one pass can report more than one diagnostic.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .ast import Binary, Expr, Grouping, Literal, Unary
from .errors import ParseError
from .scanner import tokenize
from .tokens import Token, TokenType
from .values import NIL

MAX_DEPTH = 64

EQUALITY_OPS = (TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)
COMPARISON_OPS = (TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL)
TERM_OPS = (TokenType.MINUS, TokenType.PLUS)
FACTOR_OPS = (TokenType.SLASH, TokenType.STAR)
UNARY_OPS = (TokenType.BANG, TokenType.MINUS)

# Tokens that start a new top-level construct; recovery stops in front of them.
BOUNDARY_TYPES = (
    TokenType.CLASS, TokenType.FUN, TokenType.VAR, TokenType.FOR,
    TokenType.IF, TokenType.WHILE, TokenType.PRINT, TokenType.RETURN,
)


class Parser:
    def __init__(self, tokens: Sequence[Token], max_depth: int = MAX_DEPTH):
        self.tokens = list(tokens)
        self.pos = 0
        self.depth = 0
        self.max_depth = max_depth

    # Public API
    def parse(self) -> Expr:
        """Parse exactly one expression covering every token."""
        expr = self.expression()
        if not self.is_at_end():
            raise self.error(self.peek(), 'Expected end of expression.')
        return expr

    def parse_all(self) -> Tuple[List[Expr], List[ParseError]]:
        """Parse a ';'-separated run of expressions, recovering after errors.

        Returns every expression that parsed cleanly together with every
        ParseError met along the way.
        """
        expressions: List[Expr] = []
        errors: List[ParseError] = []
        while not self.is_at_end():
            if self.match(TokenType.SEMICOLON):
                continue
            try:
                expressions.append(self.expression())
                if not self.is_at_end():
                    self.consume(TokenType.SEMICOLON, "Expected ';' after expression.")
            except ParseError as e:
                errors.append(e)
                self.depth = 0
                self.synchronize()
        return expressions, errors

    def synchronize(self) -> None:
        """Skip the offending token, then everything up to the next boundary."""
        self.advance()
        while not self.is_at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return
            if self.peek().type in BOUNDARY_TYPES:
                return
            self.advance()

    # Grammar rules
    def expression(self) -> Expr:
        return self.equality()

    def equality(self) -> Expr:
        expr = self.comparison()
        while self.match(*EQUALITY_OPS):
            operator = self.previous()
            right = self.comparison()
            expr = Binary(expr, operator, right)
        return expr

    def comparison(self) -> Expr:
        expr = self.term()
        while self.match(*COMPARISON_OPS):
            operator = self.previous()
            right = self.term()
            expr = Binary(expr, operator, right)
        return expr

    def term(self) -> Expr:
        expr = self.factor()
        while self.match(*TERM_OPS):
            operator = self.previous()
            right = self.factor()
            expr = Binary(expr, operator, right)
        return expr

    def factor(self) -> Expr:
        expr = self.unary()
        while self.match(*FACTOR_OPS):
            operator = self.previous()
            right = self.unary()
            expr = Binary(expr, operator, right)
        return expr

    def unary(self) -> Expr:
        if self.match(*UNARY_OPS):
            operator = self.previous()
            self.enter()
            try:
                right = self.unary()
            finally:
                self.depth -= 1
            return Unary(operator, right)
        return self.primary()

    def primary(self) -> Expr:
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(NIL)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)
        if self.match(TokenType.LEFT_PAREN):
            self.enter()
            try:
                expr = self.expression()
            finally:
                self.depth -= 1
            self.consume(TokenType.RIGHT_PAREN, "Expected ')' after expression.")
            return Grouping(expr)
        raise self.error(self.peek(), 'Expected expression.')

    # Token helpers
    def enter(self) -> None:
        self.depth += 1
        if self.depth > self.max_depth:
            raise self.error(self.peek(), 'Expression nested too deeply.')

    def is_at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def peek(self) -> Optional[Token]:
        if self.is_at_end():
            return None
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def advance(self) -> Optional[Token]:
        if self.is_at_end():
            return None
        self.pos += 1
        return self.previous()

    def check(self, token_type: TokenType) -> bool:
        token = self.peek()
        return token is not None and token.type == token_type

    def match(self, *token_types: TokenType) -> bool:
        for token_type in token_types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def consume(self, token_type: TokenType, message: str) -> Token:
        if self.check(token_type):
            return self.advance()
        raise self.error(self.peek(), message)

    def error(self, token: Optional[Token], message: str) -> ParseError:
        if token is not None:
            return ParseError(message, token.line, token)
        line = self.tokens[-1].line if self.tokens else 1
        return ParseError(message, line)


def parse_expression(source: str, max_depth: int = MAX_DEPTH) -> Expr:
    """Scan and parse `source` into a single expression AST."""
    return Parser(tokenize(source), max_depth=max_depth).parse()
