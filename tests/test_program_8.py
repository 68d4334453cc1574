from pathlib import Path

from ketch.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_8_strict_equality(capsys):
    with open(EXAMPLES / 'program_8.ketch', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == [
        'false', 'true', 'true', 'true', 'true',
        'false', 'false', 'true', 'true', 'true',
    ]
