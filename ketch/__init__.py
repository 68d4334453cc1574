# Ketch language package
# This package provides the lexer, parser and tree-walking interpreter for Ketch.
from .errors import (
    KetchError, LexError, ParseError, UnboundVariableError,
    UndefinedFunctionError, ArityError, KetchTypeError,
)
from .lexer import tokenize
from .parser import Parser, parse_program
from .interpreter import Interpreter, run_program, run_file
from .ast_json import ast_to_obj, ast_from_obj

__all__ = [
    'tokenize',
    'Parser',
    'parse_program',
    'Interpreter',
    'run_program',
    'run_file',
    'ast_to_obj',
    'ast_from_obj',
    'KetchError',
    'LexError',
    'ParseError',
    'UnboundVariableError',
    'UndefinedFunctionError',
    'ArityError',
    'KetchTypeError',
]
