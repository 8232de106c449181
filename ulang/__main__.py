"""CLI entry point for the ulang interpreter.

Usage:
    python -m ulang [-v|-vv|-vvv] [--parser descent|lark] <program_file>
    python -m ulang [-v...] -c "<source>"
    python -m ulang [--parser ...] --emit-ast <program_file>
    python -m ulang [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  -c SOURCE     Run the program passed as a string
  --parser      Parser backend: the hand-written one (default) or Lark
  --emit-ast    Parse the given .ul file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from .ast import Program
from .ast_json import ast_to_obj, ast_from_obj
from .errors import UlangError
from .interpreter import Interpreter
from .parser import parse_program


def read_source(path: Path) -> Optional[str]:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        return None
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def execute(program: Program, debug_level: int) -> int:
    interpreter = Interpreter(debug_level=debug_level)
    try:
        interpreter.run(program)
    except UlangError as e:
        print(str(e), file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(prog='ulang', description="ulang language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--parser', dest='backend', choices=['descent', 'lark'], default='descent',
                        help='parser backend to use')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('-c', dest='command', metavar='SOURCE', help='program passed in as a string')
    group.add_argument('--emit-ast', metavar='UL_FILE', help='emit AST JSON for the given .ul file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='ulang program file (.ul) to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_source(program_file)
        if source is None:
            return 1
        try:
            ast_program = parse_program(source, args.backend)
        except UlangError as e:
            print(str(e), file=sys.stderr)
            return 1
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(ast_program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return 0

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            return 1
        with open(ast_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return execute(ast_from_obj(data), args.v)

    if args.command is not None:
        source = args.command
    else:
        if not args.program:
            parser.error('missing program file; or use -c/--emit-ast/--ast')
        source = read_source(Path(args.program))
        if source is None:
            return 1
    try:
        ast_program = parse_program(source, args.backend)
    except UlangError as e:
        print(str(e), file=sys.stderr)
        return 1
    return execute(ast_program, args.v)


if __name__ == '__main__':
    sys.exit(main())
