from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Diagnostic:
    """A single pipeline failure.

    `kind` names the stage that detected it ('LexError', 'ParseError' or
    'RuntimeError'), `where` optionally locates it inside the line (for
    example " at ')'" or " at end").
    """
    kind: str
    message: str
    line: Optional[int] = None
    where: str = ''

    def __str__(self) -> str:
        prefix = f"[line {self.line}] " if self.line is not None else ''
        return f"{prefix}{self.kind}{self.where}: {self.message}"


class LoxError(Exception):
    """Base exception carrying a Diagnostic for every stage of the pipeline."""
    def __init__(self, diagnostic: Diagnostic):
        super().__init__(str(diagnostic))
        self.diagnostic = diagnostic

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def line(self) -> Optional[int]:
        return self.diagnostic.line


class LexError(LoxError):
    def __init__(self, message: str, line: int):
        super().__init__(Diagnostic('LexError', message, line))


class ParseError(LoxError):
    """Raised by the parser; `token` is the offending token or None at end of input."""
    def __init__(self, message: str, line: int, token=None):
        where = f" at '{token.lexeme}'" if token is not None else ' at end'
        super().__init__(Diagnostic('ParseError', message, line, where))
        self.token = token


class LoxRuntimeError(LoxError):
    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(Diagnostic('RuntimeError', message, line))
