import json

import pytest

from ketch.ast import Block, NumberLiteral
from ketch.ast_json import ast_from_obj, ast_to_obj
from ketch.parser import parse_program


SOURCE = """\
let total = 0
for (let i = 1; i <= 3; i = i + 1):
    total = total + i
function describe(n):
    if (n > 5 && !(n == 7)):
        return 'big'
    else:
        return
while (total < 10): total = total * 2
print(describe(total))
"""


def test_program_survives_json():
    program = parse_program(SOURCE)
    text = json.dumps(ast_to_obj(program))
    assert ast_from_obj(json.loads(text)) == program


def test_float_literals_keep_their_kind():
    obj = json.loads(json.dumps(ast_to_obj(NumberLiteral(2.0))))
    node = ast_from_obj(obj)
    assert type(node.value) is float
    assert type(ast_from_obj(ast_to_obj(NumberLiteral(2))).value) is int


def test_empty_block():
    assert ast_to_obj(Block(())) == {"type": "Block", "statements": []}


def test_unknown_node_type():
    with pytest.raises(ValueError, match='Unknown AST node type: Loop'):
        ast_from_obj({"type": "Loop"})


def test_unsupported_python_object():
    with pytest.raises(TypeError):
        ast_to_obj(object())
