"""Lexical scanner for treelox.

The scanner makes a single left-to-right pass over the source with one
character of lookahead (two when deciding whether a '.' belongs to a
number). It stops at the first lexical error; there is no attempt to
collect more than one LexError per pass. No end-of-input token is
emitted: consumers detect the end by running past the last token.
"""

from __future__ import annotations

from typing import Any, List, Mapping

from .errors import LexError
from .tokens import KEYWORDS, Token, TokenType

SINGLE_CHAR_TOKENS = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    ';': TokenType.SEMICOLON,
    '*': TokenType.STAR,
}

# bare form, form followed by '='
EQUAL_SUFFIX_TOKENS = {
    '!': (TokenType.BANG, TokenType.BANG_EQUAL),
    '=': (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    '<': (TokenType.LESS, TokenType.LESS_EQUAL),
    '>': (TokenType.GREATER, TokenType.GREATER_EQUAL),
}


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


class Scanner:
    def __init__(self, source: str, keywords: Mapping[str, TokenType] = KEYWORDS):
        self.source = source
        self.keywords = keywords
        self.tokens: List[Token] = []
        self.start = 0
        self.current = 0
        self.line = 1

    def scan_tokens(self) -> List[Token]:
        """Scan the whole source, raising LexError at the first bad construct."""
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()
        return self.tokens

    def is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def advance(self) -> str:
        c = self.source[self.current]
        self.current += 1
        return c

    def peek(self, lookahead: int = 0) -> str:
        index = self.current + lookahead
        if index >= len(self.source):
            return '\0'
        return self.source[index]

    def match(self, expected: str) -> bool:
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def scan_token(self) -> None:
        c = self.advance()
        if c in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[c])
        elif c in EQUAL_SUFFIX_TOKENS:
            bare, with_equal = EQUAL_SUFFIX_TOKENS[c]
            self.add_token(with_equal if self.match('=') else bare)
        elif c == '/':
            if self.match('/'):
                # comment runs to end of line; the newline itself is scanned next
                while self.peek() != '\n' and not self.is_at_end():
                    self.advance()
            else:
                self.add_token(TokenType.SLASH)
        elif c in ' \r\t':
            pass
        elif c == '\n':
            self.line += 1
        elif c == '"':
            self.scan_string()
        elif is_digit(c):
            self.scan_number()
        elif c.isalnum():
            self.scan_identifier()
        else:
            raise LexError('Unexpected character.', self.line)

    def scan_string(self) -> None:
        while self.peek() != '"' and not self.is_at_end():
            if self.peek() == '\n':
                self.line += 1
            self.advance()
        if self.is_at_end():
            raise LexError('Unterminated string.', self.line)
        self.advance()  # closing quote
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def scan_number(self) -> None:
        while is_digit(self.peek()):
            self.advance()
        # a trailing '.' is only part of the number when a digit follows it
        if self.peek() == '.' and is_digit(self.peek(1)):
            self.advance()
            while is_digit(self.peek()):
                self.advance()
        text = self.source[self.start:self.current]
        try:
            value = float(text)
        except ValueError:
            raise LexError('Invalid number.', self.line)
        self.add_token(TokenType.NUMBER, value)

    def scan_identifier(self) -> None:
        while self.peek().isalnum():
            self.advance()
        text = self.source[self.start:self.current]
        self.add_token(self.keywords.get(text, TokenType.IDENTIFIER))

    def add_token(self, token_type: TokenType, literal: Any = None) -> None:
        lexeme = self.source[self.start:self.current]
        self.tokens.append(Token(token_type, lexeme, literal, self.line))


def tokenize(source: str, keywords: Mapping[str, TokenType] = KEYWORDS) -> List[Token]:
    """Convert source code into a list of tokens."""
    return Scanner(source, keywords).scan_tokens()
