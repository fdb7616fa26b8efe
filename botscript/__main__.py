"""CLI entry point for the BotScript interpreter.

Usage:
    python -m botscript [-v|-vv] [--config FILE] <script_file>
    python -m botscript [-v...] --emit-ast <script_file>
    python -m botscript [-v...] --ast <ast_json_file>
    python -m botscript --tokens <script_file>

Options:
  -v            Increase log verbosity (-v info, -vv debug)
  --config      YAML file with interpreter settings
  --emit-ast    Parse the given script and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file
  --tokens      Print the token stream of the given script

Scripts run against an in-memory bot: chat lines and world effects are
printed to stdout instead of reaching a game server.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from .ast import Program
from .ast_json import ast_to_obj, ast_from_obj
from .config import InterpreterConfig, load_config
from .errors import ParseError
from .interpreter import Interpreter
from .lexer import tokenize
from .logging_config import configure_logging
from .parser import parse_program
from .testing.fakes import FakeBot


def _read_source(path_str: str) -> str:
    program_file = Path(path_str)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        return f.read()


def _parse_or_exit(source: str) -> Program:
    try:
        return parse_program(source)
    except ParseError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)


def _run(program: Program, config: InterpreterConfig) -> None:
    bot = FakeBot(echo=True)
    interpreter = Interpreter(bot, config=config)
    result = asyncio.run(interpreter.execute(program))
    if not result.success:
        print(result.message, file=sys.stderr)
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="BotScript interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase log verbosity (can be repeated)')
    parser.add_argument('--config', metavar='YAML_FILE', help='interpreter settings file')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='SCRIPT_FILE', help='emit AST JSON for the given script')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    group.add_argument('--tokens', metavar='SCRIPT_FILE', help='print the token stream of the given script')
    parser.add_argument('program', nargs='?', help='BotScript file to execute')
    args = parser.parse_args(argv)

    configure_logging(args.v)

    config = InterpreterConfig()
    if args.config:
        try:
            config = load_config(args.config)
        except (OSError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

    # Token dump mode
    if args.tokens:
        for token in tokenize(_read_source(args.tokens)):
            print(token)
        return

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        ast_program = _parse_or_exit(_read_source(args.emit_ast))
        obj = ast_to_obj(ast_program)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        try:
            with open(ast_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            ast_program = ast_from_obj(data)
            if not isinstance(ast_program, Program):
                raise ValueError("top-level node must be a Program")
        except (json.JSONDecodeError, ValueError, TypeError, KeyError) as e:
            print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
            sys.exit(1)
        _run(ast_program, config)
        return

    # Default: execute source file
    if not args.program:
        parser.error('missing script file; or use --emit-ast/--ast/--tokens')
    _run(_parse_or_exit(_read_source(args.program)), config)


if __name__ == '__main__':
    main()
