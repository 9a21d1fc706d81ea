"""CLI entry point for the BrnoScript interpreter.

Usage:
    python -m brno [-v|-vv|-vvv|-vvvv] [--unsafe-fs] [program_file]
    python -m brno [-v...] --emit-ast <program_file>
    python -m brno [-v...] [--unsafe-fs] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --unsafe-fs   Allow scripts to use the `šufle` filesystem builtins
  --emit-ast    Parse the given .brno file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a program file an interactive prompt starts. Input is collected
until a line ends with `piča` or `}` and then run in one global scope, so
definitions persist between entries.

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. `vokno` imports are resolved relative to
the program's directory (the current directory at the prompt); http(s)
paths are fetched over the network.
"""

import argparse
import asyncio
import json
import re
import sys
from pathlib import Path
from typing import List, Optional

from .ast_json import program_from_obj, program_to_obj
from .capabilities import Capabilities
from .errors import BrnoError, LexerError, ParseError
from .interpreter import Interpreter
from .loaders import default_loader
from .parser import parse_program

PROMPT = 'brn> '
_ENTRY_END = re.compile(r'(\bpiča|\})\s*$')


async def ainput(prompt: str) -> str:
    loop = asyncio.get_running_loop()
    sys.stdout.write(prompt)
    sys.stdout.flush()
    return await loop.run_in_executor(None, sys.stdin.readline)


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


async def execute(interpreter: Interpreter, statements) -> bool:
    try:
        await interpreter.run(statements)
    except BrnoError as e:
        print(f"Runtime error: {e.format()}", file=sys.stderr)
        return False
    return True


async def repl(interpreter: Interpreter) -> None:
    buffer = ''
    while True:
        line = await ainput(PROMPT)
        if line == '':
            print()
            break
        buffer += line if line.endswith('\n') else line + '\n'
        if not _ENTRY_END.search(line):
            continue
        try:
            statements = parse_program(buffer)
        except ParseError as e:
            if e.lexeme == '':
                # ran out of input inside a block: keep reading
                continue
            print(str(e), file=sys.stderr)
            buffer = ''
            continue
        except LexerError as e:
            print(str(e), file=sys.stderr)
            buffer = ''
            continue
        buffer = ''
        await execute(interpreter, statements)


async def run_file(program_file: Path, args: argparse.Namespace) -> int:
    source = read_source(program_file)
    try:
        statements = parse_program(source)
    except (LexerError, ParseError) as e:
        print(str(e), file=sys.stderr)
        return 1
    interpreter = make_interpreter(args, str(program_file.resolve().parent))
    try:
        return 0 if await execute(interpreter, statements) else 1
    finally:
        interpreter.close()


async def run_ast(ast_path: Path, args: argparse.Namespace) -> int:
    statements = program_from_obj(json.loads(read_source(ast_path)))
    interpreter = make_interpreter(args, str(ast_path.resolve().parent))
    try:
        return 0 if await execute(interpreter, statements) else 1
    finally:
        interpreter.close()


async def run_repl(args: argparse.Namespace) -> int:
    interpreter = make_interpreter(args, None)
    try:
        await repl(interpreter)
    finally:
        interpreter.close()
    return 0


def make_interpreter(args: argparse.Namespace, base_dir: Optional[str]) -> Interpreter:
    return Interpreter(
        loader=default_loader(base_dir),
        capabilities=Capabilities(fs_enabled=args.unsafe_fs),
        compile=parse_program,
        debug_level=args.v,
        argv=args.script_args,
    )


def emit_ast(program_file: Path) -> int:
    source = read_source(program_file)
    try:
        statements = parse_program(source)
    except (LexerError, ParseError) as e:
        print(str(e), file=sys.stderr)
        return 1
    out_path = program_file.with_name(program_file.name + '.ast.json')
    with open(out_path, 'w', encoding='utf-8') as out:
        json.dump(program_to_obj(statements), out, ensure_ascii=False, indent=2)
    print(str(out_path))
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog='brno', description="BrnoScript interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--unsafe-fs', action='store_true', help='enable the šufle filesystem builtins')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='BRNO_FILE', help='emit AST JSON for the given .brno file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='BrnoScript program file (.brno) to execute')
    parser.add_argument('script_args', nargs='*', help='arguments visible to the script as šichta.argv()')
    args = parser.parse_args(argv)

    if args.emit_ast:
        status = emit_ast(Path(args.emit_ast))
    elif args.ast:
        status = asyncio.run(run_ast(Path(args.ast), args))
    elif args.program:
        status = asyncio.run(run_file(Path(args.program), args))
    else:
        status = asyncio.run(run_repl(args))
    if status:
        sys.exit(status)


if __name__ == '__main__':
    try:
        main()
    except KeyboardInterrupt:
        print()
