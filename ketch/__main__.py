"""CLI entry point for the Ketch interpreter.

Usage:
    python -m ketch [-v|-vv|-vvv] <program_file>
    python -m ketch [-v...] -c <source>
    python -m ketch [-v...] --emit-ast <program_file>
    python -m ketch [-v...] --ast <ast_json_file>
    python -m ketch --tokens <program_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  -c            Run the given source text instead of a file
  --emit-ast    Parse the given .ketch file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file
  --tokens      Print the token stream of the given .ketch file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Lex, parse and runtime errors are reported
on stderr as `Kind: message` and the process exits with status 1.
"""

import argparse
import json
import sys
from pathlib import Path
from .ast import Block
from .ast_json import ast_to_obj, ast_from_obj
from .errors import KetchError
from .interpreter import Interpreter
from .lexer import tokenize
from .parser import parse_program


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def execute(program: Block, debug_level: int) -> None:
    interpreter = Interpreter(debug_level=debug_level)
    interpreter.run(program)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog='ketch', description="Ketch language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('-c', metavar='SOURCE', dest='source', help='run SOURCE as a Ketch program')
    group.add_argument('--emit-ast', metavar='KETCH_FILE', help='emit AST JSON for the given .ketch file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    group.add_argument('--tokens', metavar='KETCH_FILE', help='print the tokens of the given .ketch file')
    parser.add_argument('program', nargs='?', help='Ketch program file (.ketch) to execute')
    args = parser.parse_args(argv)

    try:
        # Token dump mode
        if args.tokens:
            for token in tokenize(read_source(Path(args.tokens))):
                print(token)
            return

        # Emit AST mode
        if args.emit_ast:
            program_file = Path(args.emit_ast)
            program = parse_program(read_source(program_file))
            obj = ast_to_obj(program)
            out_path = program_file.with_name(program_file.name + '.ast.json')
            with open(out_path, 'w', encoding='utf-8') as out:
                json.dump(obj, out, ensure_ascii=False, indent=2)
            print(str(out_path))
            return

        # Execute from AST JSON
        if args.ast:
            source = read_source(Path(args.ast))
            try:
                program = ast_from_obj(json.loads(source))
            except (KeyError, TypeError, ValueError) as e:
                print(f"Error: invalid AST file {args.ast}: {e}", file=sys.stderr)
                sys.exit(1)
            execute(program, args.v)
            return

        # Default: execute source text or file
        if args.source is not None:
            source = args.source
        elif args.program:
            source = read_source(Path(args.program))
        else:
            parser.error('missing program file; or use -c/--emit-ast/--ast/--tokens')
        execute(parse_program(source), args.v)
    except KetchError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)
    except RecursionError:
        print("RecursionError: maximum recursion depth exceeded", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
