from typing import Any, Dict, Optional
from ketch.errors import UnboundVariableError
from ketch.types import FunctionValue


class Environment:
    """A scope mapping names to variables and, in a separate table, functions.

    Scopes form a chain through `parent`. Lookups and assignments walk the
    chain outward; definitions always land in the current scope.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.variables: Dict[str, Any] = {}
        self.functions: Dict[str, FunctionValue] = {}

    def define(self, name: str, value: Any):
        self.variables[name] = value

    def assign(self, name: str, value: Any):
        env = self.resolve(name)
        if env is None:
            raise UnboundVariableError(f'cannot assign to undeclared variable {name}')
        env.variables[name] = value

    def lookup(self, name: str) -> Any:
        env = self.resolve(name)
        if env is None:
            raise UnboundVariableError(f'undefined variable {name}')
        return env.variables[name]

    def is_defined(self, name: str) -> bool:
        return self.resolve(name) is not None

    def resolve(self, name: str) -> Optional['Environment']:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.variables:
                return env
            env = env.parent
        return None

    def define_function(self, name: str, func: FunctionValue):
        self.functions[name] = func

    def lookup_function(self, name: str) -> Optional[FunctionValue]:
        """Return the nearest function called `name`, or None when there is none."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.functions:
                return env.functions[name]
            env = env.parent
        return None

    def lookup_callable(self, name: str) -> Optional[FunctionValue]:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.functions:
                return env.functions[name]
            value = env.variables.get(name)
            if isinstance(value, FunctionValue):
                return value
            env = env.parent
        return None

    def depth(self) -> int:
        count = 0
        env = self.parent
        while env is not None:
            count += 1
            env = env.parent
        return count
