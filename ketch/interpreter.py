"""Tree-walking interpreter for the Ketch language.

`Interpreter.execute` runs statement nodes and `Interpreter.evaluate`
computes expression values; both take the current `Environment`
explicitly. A `return` statement does not raise: it produces a
`ReturnSignal` result, which blocks and loops hand back unchanged until
the enclosing function call unwraps it.

Evaluation rules worth knowing before changing anything here:

* `+ - * /` always compute in floating point, even for two Integers.
* `==` and `!=` never coerce; `1 == 1.0` is false.
* `&&` and `||` evaluate both operands before combining them.
* `if` and `while` bodies share the enclosing scope; only `for` loops and
  function calls open a new one.
"""

from __future__ import annotations

import math
import sys
from typing import Any, Optional, TextIO

from .ast import (
    Node, Block, Let, Print, If, While, For, FunctionDef, Return,
    Assign, Variable, NumberLiteral, StringLiteral, BinaryOp, UnaryOp, Call,
)
from .environment import Environment
from .errors import (
    ReturnSignal, KetchTypeError, UndefinedFunctionError, ArityError,
)
from .parser import parse_program
from .types import FunctionValue, NullVal, is_number, to_string, type_name


ARITHMETIC_OPS = ('+', '-', '*', '/')
RELATIONAL_OPS = ('<', '<=', '>', '>=')

# every Ketch call nests several Python frames
RECURSION_LIMIT = 8000


class Interpreter:
    """Core interpreter that executes a Ketch AST."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt', out: Optional[TextIO] = None):
        self.global_env = Environment()
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None
        self.out = out

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp is None:
                # a later run appends to the trace of the earlier ones
                self.debug_fp = open(self.debug_file, 'a', encoding='utf-8')
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def write(self, text: str):
        # resolve stdout lazily so redirected streams are honoured
        print(text, file=self.out if self.out is not None else sys.stdout)

    # Public API
    def run(self, program: Block, env: Optional[Environment] = None) -> Any:
        """Execute `program` and return its final value.

        A top-level `return` stops the program early; its value becomes
        the result.
        """
        if env is None:
            env = self.global_env
        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)
        try:
            self.debug(f"run: {len(program.statements)} top-level statements")
            result = self.execute_block(program, env)
            if isinstance(result, ReturnSignal):
                self.debug("run: stopped by top-level return")
                result = result.value
            self.debug(f"run: finished with {type_name(result)} {to_string(result)}")
            return result
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    def execute_block(self, block: Block, env: Environment) -> Any:
        result: Any = NullVal()
        for stmt in block.statements:
            result = self.execute(stmt, env)
            # propagate return signals
            if isinstance(result, ReturnSignal):
                return result
        return result

    def execute(self, node: Node, env: Environment) -> Any:
        if isinstance(node, Let):
            value = self.evaluate(node.expr, env)
            env.define(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"let {node.name}: {type_name(value)} = {to_string(value)}")
            return value
        if isinstance(node, Print):
            value = self.evaluate(node.expr, env)
            self.write(to_string(value))
            return value
        if isinstance(node, FunctionDef):
            func_value = FunctionValue(node.name, node.params, node.body, env)
            env.define_function(node.name, func_value)
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}({', '.join(node.params)})")
            return NullVal()
        if isinstance(node, Block):
            # bare blocks share the enclosing scope
            return self.execute_block(node, env)
        if isinstance(node, If):
            cond = self.evaluate(node.condition, env)
            truthy = self.is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {to_string(cond)} -> {truthy}")
            if truthy:
                return self.execute_block(node.then_block, env)
            if node.else_block is not None:
                return self.execute_block(node.else_block, env)
            return NullVal()
        if isinstance(node, While):
            result: Any = NullVal()
            while True:
                cond = self.evaluate(node.condition, env)
                truthy = self.is_truthy(cond)
                if self.debug_level >= 3:
                    self.debug(f"while condition {to_string(cond)} -> {truthy}")
                if not truthy:
                    break
                result = self.execute_block(node.body, env)
                if isinstance(result, ReturnSignal):
                    return result
            return result
        if isinstance(node, For):
            # new scope holding the loop's init binding
            for_env = Environment(parent=env)
            if node.init is not None:
                self.execute(node.init, for_env)
            result = NullVal()
            while True:
                if node.condition is not None:
                    cond = self.evaluate(node.condition, for_env)
                    truthy = self.is_truthy(cond)
                    if self.debug_level >= 3:
                        self.debug(f"for condition {to_string(cond)} -> {truthy}")
                    if not truthy:
                        break
                result = self.execute_block(node.body, for_env)
                if isinstance(result, ReturnSignal):
                    return result
                if node.update is not None:
                    self.evaluate(node.update, for_env)
            return result
        if isinstance(node, Return):
            value = self.evaluate(node.value, env) if node.value is not None else NullVal()
            return ReturnSignal(value)
        return self.evaluate(node, env)

    def evaluate(self, node: Node, env: Environment) -> Any:
        if isinstance(node, (NumberLiteral, StringLiteral)):
            return node.value
        if isinstance(node, Variable):
            if not env.is_defined(node.name):
                # a bare function name evaluates to the function itself
                func = env.lookup_function(node.name)
                if func is not None:
                    return func
            return env.lookup(node.name)
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            env.assign(node.name, value)
            return value
        if isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand, env)
            if node.op == '!':
                return not self.is_truthy(operand)
            if node.op == '-':
                return -self.to_number(operand, node.op)
            raise KetchTypeError(f'unsupported unary operator {node.op}')
        if isinstance(node, BinaryOp):
            # && and || are not short-circuiting: both sides always run
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_binary_op(node.op, left, right)
        if isinstance(node, Call):
            return self.call_function(node, env)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    def resolve_callee(self, name: str, env: Environment) -> FunctionValue:
        """Find what `name(...)` calls.

        The nearest scope with a function or a function-valued variable of
        that name wins, so a parameter holding a closure shadows an outer
        function. Variables holding anything else are skipped here. Plain
        name evaluation differs: it prefers variables over functions.
        """
        func = env.lookup_callable(name)
        if func is not None:
            return func
        if env.is_defined(name):
            value = env.lookup(name)
            raise KetchTypeError(f'{name} is not a function, it holds {type_name(value)}')
        raise UndefinedFunctionError(f'undefined function {name}')

    def call_function(self, node: Call, env: Environment) -> Any:
        func = self.resolve_callee(node.name, env)
        if len(node.args) != func.arity:
            raise ArityError(f"{node.name} expected {func.arity}, got {len(node.args)}")
        # arguments are evaluated in the caller's scope, left to right
        args = [self.evaluate(arg, env) for arg in node.args]
        call_env = Environment(parent=func.closure)
        for param, arg in zip(func.params, args):
            call_env.define(param, arg)
        if self.debug_level >= 1:
            shown = ', '.join(to_string(a) for a in args)
            self.debug(f"call {func.name}({shown}) at depth {call_env.depth()}")
        result = self.execute_block(func.body, call_env)
        if isinstance(result, ReturnSignal):
            return result.value
        return result

    def is_truthy(self, value: Any) -> bool:
        if isinstance(value, NullVal):
            return False
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return value != 0
        return True

    def to_number(self, value: Any, op: str) -> float:
        if not is_number(value):
            raise KetchTypeError(
                f"operator {op} expects numeric operands, got {type_name(value)} {to_string(value)!r}"
            )
        try:
            return float(value)
        except OverflowError:
            # integers past the float range saturate, as division overflow does
            return math.inf if value > 0 else -math.inf

    def apply_binary_op(self, op: str, a: Any, b: Any) -> Any:
        if op in ARITHMETIC_OPS:
            x = self.to_number(a, op)
            y = self.to_number(b, op)
            if op == '+':
                return x + y
            if op == '-':
                return x - y
            if op == '*':
                return x * y
            return self.divide(x, y)
        if op == '==':
            return self.equal_values(a, b)
        if op == '!=':
            return not self.equal_values(a, b)
        if op in RELATIONAL_OPS:
            x = self.to_number(a, op)
            y = self.to_number(b, op)
            if op == '<':
                return x < y
            if op == '<=':
                return x <= y
            if op == '>':
                return x > y
            return x >= y
        if op == '&&':
            return self.is_truthy(a) and self.is_truthy(b)
        if op == '||':
            return self.is_truthy(a) or self.is_truthy(b)
        raise KetchTypeError(f'unknown operator {op}')

    def divide(self, x: float, y: float) -> float:
        if y != 0.0:
            return x / y
        # IEEE-754 division by zero
        if x == 0.0 or math.isnan(x):
            return math.nan
        return math.copysign(math.inf, x) * math.copysign(1.0, y)

    def equal_values(self, a: Any, b: Any) -> bool:
        # no coercion: values of different kinds are never equal
        if type_name(a) != type_name(b):
            return False
        if isinstance(a, FunctionValue):
            return a is b
        return a == b


def run_program(source: str, debug_level: int = 0) -> Any:
    """Convenience function to parse and run a Ketch program from a source string."""
    program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    return interpreter.run(program)


def run_file(file_path: str, debug_level: int = 0) -> Interpreter:
    """Parse and execute a Ketch file, returning the interpreter instance."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    interpreter.run(program)
    return interpreter
