from pathlib import Path

from ketch.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_3_recursive_factorial(capsys):
    with open(EXAMPLES / 'program_3.ketch', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    # fact(1) returns the literal 1; every multiplication after that is a float
    assert out_lines == ['120.0', '1']
