from dataclasses import dataclass
from typing import Any


@dataclass
class ErrorVal:
    """A labeled Ketch error: the error kind plus a human readable message."""
    name: str
    message: str

    def __repr__(self) -> str:
        return f"Error(name={self.name!r}, message={self.message!r})"


class KetchError(Exception):
    """Base exception used to propagate Ketch lex, parse and runtime errors."""
    kind = 'KetchError'

    def __init__(self, message: str):
        self.err = ErrorVal(self.kind, message)
        super().__init__(f"{self.err.name}: {self.err.message}")


class LexError(KetchError):
    kind = 'LexError'


class ParseError(KetchError):
    kind = 'ParseError'


class UnboundVariableError(KetchError):
    kind = 'UnboundVariableError'


class UndefinedFunctionError(KetchError):
    kind = 'UndefinedFunctionError'


class ArityError(KetchError):
    kind = 'ArityError'


class KetchTypeError(KetchError):
    kind = 'TypeError'


class ReturnSignal:
    """Result object produced by `return`; carried up through blocks and loops
    until the enclosing call unwraps it."""
    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f"ReturnSignal({self.value!r})"
