import json

import pytest

from ketch.__main__ import main


def write_program(tmp_path, source, name='prog.ketch'):
    path = tmp_path / name
    path.write_text(source, encoding='utf-8')
    return path


def test_runs_program_file(tmp_path, capsys):
    path = write_program(tmp_path, "let x = 20\nprint(x / 8)\n")
    main([str(path)])
    assert capsys.readouterr().out == '2.5\n'


def test_runs_literal_source(capsys):
    main(['-c', 'print(1 + 1)'])
    assert capsys.readouterr().out == '2.0\n'


def test_runtime_error_is_reported(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(['-c', "print('partial')\nprint(nope)"])
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == 'partial\n'
    assert captured.err.strip() == 'UnboundVariableError: undefined variable nope'


@pytest.mark.parametrize('source, kind', [
    ('let s = "oops', 'LexError'),
    ('let = 1', 'ParseError'),
    ('f(1)', 'UndefinedFunctionError'),
    ("'a' * 2", 'TypeError'),
])
def test_each_error_kind_is_labeled(source, kind, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(['-c', source])
    assert excinfo.value.code == 1
    assert capsys.readouterr().err.startswith(kind + ': ')


def test_runaway_recursion_is_reported(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(['-c', 'function down(n): return down(n + 1)\ndown(0)'])
    assert excinfo.value.code == 1
    assert capsys.readouterr().err.startswith('RecursionError')


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / 'absent.ketch')])
    assert excinfo.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_emit_ast_then_run_it(tmp_path, capsys):
    path = write_program(tmp_path, "function half(v): v / 2\nprint(half(5))\nprint(1 == 1.0)\n")
    main(['--emit-ast', str(path)])
    ast_path = tmp_path / 'prog.ketch.ast.json'
    assert capsys.readouterr().out.strip() == str(ast_path)
    assert json.loads(ast_path.read_text(encoding='utf-8'))['type'] == 'Block'

    main(['--ast', str(ast_path)])
    assert capsys.readouterr().out == '2.5\nfalse\n'


def test_invalid_ast_file(tmp_path, capsys):
    path = tmp_path / 'bad.json'
    path.write_text('{"type": "Nope"}', encoding='utf-8')
    with pytest.raises(SystemExit) as excinfo:
        main(['--ast', str(path)])
    assert excinfo.value.code == 1
    assert 'invalid AST file' in capsys.readouterr().err


def test_token_dump(tmp_path, capsys):
    path = write_program(tmp_path, "let x = 1\n")
    main(['--tokens', str(path)])
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "LET('let') at 1:1"
    assert lines[-1].startswith('EOF')


def test_verbose_writes_debug_file(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    main(['-v', '-c', 'let x = 1'])
    assert 'run:' in (tmp_path / 'debug.txt').read_text(encoding='utf-8')


def test_no_program_is_a_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2


def test_huge_integer_prints_without_traceback(capsys):
    main(['-c', 'print(1' + '0' * 400 + ' + 1)'])
    assert capsys.readouterr().out == 'Infinity\n'


def test_overlong_integer_literal_is_a_parse_error(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(['-c', 'print(' + '9' * 5000 + ')'])
    assert excinfo.value.code == 1
    assert capsys.readouterr().err.startswith('ParseError: integer literal too long')
