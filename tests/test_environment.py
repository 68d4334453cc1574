import pytest

from ketch.ast import Block
from ketch.environment import Environment
from ketch.errors import UnboundVariableError
from ketch.types import FunctionValue


def test_define_and_lookup():
    env = Environment()
    env.define('x', 1)
    assert env.lookup('x') == 1
    env.define('x', 2)
    assert env.lookup('x') == 2


def test_lookup_walks_outward():
    root = Environment()
    root.define('x', 'outer')
    child = Environment(parent=Environment(parent=root))
    assert child.lookup('x') == 'outer'
    assert child.depth() == 2


def test_define_shadows_in_current_scope_only():
    root = Environment()
    root.define('x', 1)
    child = Environment(parent=root)
    child.define('x', 2)
    assert child.lookup('x') == 2
    assert root.lookup('x') == 1


def test_assign_updates_nearest_binding():
    root = Environment()
    root.define('x', 1)
    child = Environment(parent=root)
    child.assign('x', 5)
    assert root.lookup('x') == 5
    assert 'x' not in child.variables


def test_assign_never_creates_a_binding():
    env = Environment(parent=Environment())
    with pytest.raises(UnboundVariableError, match='undeclared variable y'):
        env.assign('y', 1)
    assert not env.is_defined('y')


def test_lookup_of_unknown_name():
    with pytest.raises(UnboundVariableError, match='undefined variable nope'):
        Environment().lookup('nope')


def test_function_table_is_separate_and_chained():
    root = Environment()
    func = FunctionValue('f', ('a',), Block(()), root)
    root.define_function('f', func)
    child = Environment(parent=root)
    assert child.lookup_function('f') is func
    assert not child.is_defined('f')


def test_function_lookup_miss_returns_none():
    assert Environment(parent=Environment()).lookup_function('missing') is None


def test_callable_lookup_takes_the_nearest_function_value():
    root = Environment()
    outer = FunctionValue('f', (), Block(()), root)
    inner = FunctionValue('g', (), Block(()), root)
    root.define_function('f', outer)
    child = Environment(parent=root)
    child.define('f', inner)
    assert child.lookup_callable('f') is inner
    child.define('f', 3)
    assert child.lookup_callable('f') is outer
    assert child.lookup_callable('missing') is None
