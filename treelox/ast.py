"""Abstract Syntax Tree (AST) definitions for treelox expressions.

The tree is a closed sum type over four node shapes. Nodes are frozen
dataclasses that own their children, so a parsed tree is immutable and
cannot contain cycles. Grammatical validity is guaranteed by the parser
that builds the tree; there is no separate validation pass.
"""

from __future__ import annotations

from dataclasses import dataclass

from .tokens import Token
from .values import Value


@dataclass(frozen=True)
class Expr:
    """Base class for all expression nodes."""
    pass


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True)
class Literal(Expr):
    value: Value
