"""Runtime values for Ketch.

Ketch is dynamically typed. Runtime values map directly onto Python
objects: Integer is `int`, Float is `float`, Boolean is `bool`, String is
`str` and Null is the `NullVal` marker. User-defined functions are
`FunctionValue` instances. Because `bool` is a subclass of `int` in
Python, every dispatch site in this package checks for `bool` before
`int`.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Tuple

if TYPE_CHECKING:
    from .ast import Block
    from .environment import Environment


class NullVal:
    """Marker object for the Ketch `null` value."""
    def __eq__(self, other: object) -> bool:
        return isinstance(other, NullVal)

    def __hash__(self) -> int:
        return hash(NullVal)

    def __repr__(self) -> str:
        return 'null'


class FunctionValue:
    """A user-defined function paired with the scope it was defined in."""
    def __init__(self, name: str, params: Tuple[str, ...], body: 'Block', closure: 'Environment'):
        self.name = name
        self.params = params
        self.body = body
        self.closure = closure

    @property
    def arity(self) -> int:
        return len(self.params)

    def __repr__(self) -> str:
        return f"<function {self.name}>"


def is_number(value: Any) -> bool:
    """True for Integer and Float values. Booleans are not numbers."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def type_name(value: Any) -> str:
    """Return the Ketch type name of a runtime value."""
    if isinstance(value, bool):
        return 'Boolean'
    if isinstance(value, int):
        return 'Integer'
    if isinstance(value, float):
        return 'Float'
    if isinstance(value, str):
        return 'String'
    if isinstance(value, NullVal):
        return 'Null'
    if isinstance(value, FunctionValue):
        return 'Function'
    return type(value).__name__


def to_string(value: Any) -> str:
    """Convert a Ketch value to the text `print` writes for it."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return 'NaN'
        if math.isinf(value):
            return 'Infinity' if value > 0 else '-Infinity'
        return repr(value)
    if isinstance(value, str):
        return value
    if isinstance(value, NullVal):
        return 'null'
    return str(value)
