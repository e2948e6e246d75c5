"""Runtime values for treelox.

A value is one of:

* ``str`` for strings,
* ``float`` for numbers (always double precision, never ``int``),
* ``True`` / ``False`` for booleans,
* the ``NIL`` singleton for nil.

The same representation is carried by ``Literal`` nodes in the AST, so
there is no separate compile-time literal type. Conversions out of the
value domain are explicit and fallible: callers go through ``as_bool``,
``as_number`` or ``as_string`` and receive a LoxRuntimeError when the
value has the wrong shape.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from .errors import LoxRuntimeError


class NilVal:
    """Marker type for the treelox `nil` value."""
    _instance: Optional['NilVal'] = None

    def __new__(cls) -> 'NilVal':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'nil'


NIL = NilVal()

Value = Union[str, float, bool, NilVal]


def type_name(value: Any) -> str:
    """Return the treelox type name of a runtime value."""
    # bool first: it is a subclass of int in Python
    if isinstance(value, bool):
        return 'Boolean'
    if isinstance(value, float):
        return 'Number'
    if isinstance(value, str):
        return 'String'
    if isinstance(value, NilVal):
        return 'Nil'
    return type(value).__name__


def as_bool(value: Value) -> bool:
    """Truthiness: nil and false are falsy, every other value is truthy.

    In particular 0 and the empty string are truthy.
    """
    if isinstance(value, NilVal):
        return False
    if isinstance(value, bool):
        return value
    return True


def as_number(value: Value, line: Optional[int] = None) -> float:
    if isinstance(value, float):
        return value
    raise LoxRuntimeError('Not a number', line)


def as_string(value: Value, line: Optional[int] = None) -> str:
    if isinstance(value, str):
        return value
    raise LoxRuntimeError('Not a string', line)


def values_equal(a: Value, b: Value) -> bool:
    """Structural equality; values of different types are never equal."""
    if type_name(a) != type_name(b):
        return False
    return a == b


def to_string(value: Value) -> str:
    """Render a value the way the shell prints it."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        text = repr(value)
        if text.endswith('.0'):
            text = text[:-2]
        return text
    if isinstance(value, NilVal):
        return 'nil'
    return value
