"""Parenthesized rendering of treelox ASTs.

`1 + 2 * 3` prints as `(+ 1 (* 2 3))`: every operator node becomes a
prefix form, groupings are spelled `(group ...)`, and literals use the
same text the shell prints for values (strings are quoted so that
`"1"` and `1` stay distinguishable).
"""

from __future__ import annotations

from typing import Any, List, Union

from .ast import Binary, Expr, Grouping, Literal, Unary
from .values import to_string


def to_sexpr(node: Expr) -> str:
    # explicit work stack: long left-folded chains are deeper than the
    # recursion limit
    parts: List[str] = []
    stack: List[Union[Expr, str]] = [node]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, Binary):
            stack.extend([')', item.right, ' ', item.left, f'({item.operator.lexeme} '])
        elif isinstance(item, Unary):
            stack.extend([')', item.right, f'({item.operator.lexeme} '])
        elif isinstance(item, Grouping):
            stack.extend([')', item.expression, '(group '])
        elif isinstance(item, Literal):
            parts.append(literal_text(item.value))
        else:
            raise NotImplementedError(f"to_sexpr: unexpected node type {type(item)}")
    return ''.join(parts)


def literal_text(value: Any) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    return to_string(value)
