from pathlib import Path

from ketch.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_5_if_while_scope_leak(capsys):
    with open(EXAMPLES / 'program_5.ketch', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    # names declared inside if/while bodies stay visible afterwards
    assert out_lines == ['from if', '2.0', '3.0', 'reassigned']
