import sys
import traceback

import colorama
from colorama import Fore, Style

from ast_printer import print_ast
from errors import LoxError
from ast_nodes import Expression, Statement
from lexer import tokenize, split_results, significant
from parser import parse
from session import Session
from values import stringify

USAGE = """Usage:
  lox tokens <file.lox>
  lox parse <file.lox>
  lox run <file.lox>
  lox repl
  (optional) --debug to show Python traceback
  (optional) --no-color to disable colored errors"""


class Console:
    def __init__(self, color: bool = True):
        self.color = color
        if color:
            colorama.just_fix_windows_console()

    def out(self, text: str):
        print(text)

    def error(self, err):
        text = str(err)
        if self.color:
            text = f"{Fore.RED}{text}{Style.RESET_ALL}"
        print(text, file=sys.stderr)


def read_source(path):
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def cmd_tokens(path, console):
    status = 0
    for item in tokenize(read_source(path)):
        if isinstance(item, LoxError):
            console.error(item)
            status = 1
        else:
            console.out(repr(item))
    return status


def cmd_parse(path, console):
    code = read_source(path)
    tokens, errors = split_results(tokenize(code))
    for err in errors:
        console.error(err)
    if errors:
        return 1

    status = 0
    for item in parse(significant(tokens)):
        if isinstance(item, LoxError):
            console.error(item)
            status = 1
        else:
            console.out(print_ast(item))
    return status


def cmd_run(path, console):
    code = read_source(path)
    session = Session(out=console.out, on_error=console.error)
    result = session.run(code)
    return 0 if result.ok else 1


def _count_braces_delta(line: str) -> int:
    # Minimal brace balancer for REPL multiline input.
    # Ignores braces inside "..." strings and after // comments.
    delta = 0
    in_string = False
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "/" and not in_string and line[i + 1 : i + 2] == "/":
            break
        if ch == '"':
            in_string = not in_string
        elif not in_string:
            if ch == "{":
                delta += 1
            elif ch == "}":
                delta -= 1
        i += 1
    return delta


def cmd_repl(console, debug: bool = False):
    session = Session(out=console.out, on_error=console.error)
    console.out("Lox REPL. Type :q to quit, :reset to clear variables.")

    buffer_lines = []
    brace_depth = 0
    while True:
        prompt = "lox> " if not buffer_lines else "...> "
        try:
            line = input(prompt)
        except (EOFError, KeyboardInterrupt):
            print()
            break

        stripped = line.strip()
        if not buffer_lines and stripped in (":q", ":quit", "quit", "exit"):
            break
        if not buffer_lines and stripped == ":reset":
            session.reset()
            continue

        # Allow blank lines to submit when not inside a block.
        if not stripped and brace_depth == 0 and not buffer_lines:
            continue

        buffer_lines.append(line)
        brace_depth += _count_braces_delta(line)

        # Wait for block completion if braces aren't balanced yet.
        if brace_depth > 0:
            continue

        source = "\n".join(buffer_lines) + "\n"
        buffer_lines = []
        brace_depth = 0

        try:
            result = session.run(source)
        except Exception as e:
            if debug:
                traceback.print_exc()
            else:
                console.error(f"Internal error: {e}")
            continue

        # echo the value of bare expressions, like "1 + 2" or "x = 5"
        for decl, value in result.values:
            if isinstance(decl, Statement) and isinstance(decl.statement, Expression):
                console.out(stringify(value))
    return 0


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)

    debug = False
    if "--debug" in args:
        debug = True
        args.remove("--debug")
    color = True
    if "--no-color" in args:
        color = False
        args.remove("--no-color")

    if not args:
        print(USAGE)
        return 1

    console = Console(color=color)
    cmd = args[0]

    if cmd == "repl":
        if len(args) != 1:
            print(USAGE)
            return 1
        return cmd_repl(console, debug=debug)

    commands = {"tokens": cmd_tokens, "parse": cmd_parse, "run": cmd_run}
    if cmd not in commands:
        print(f"Unknown command: {cmd}")
        return 1
    if len(args) != 2:
        print(USAGE)
        return 1

    try:
        return commands[cmd](args[1], console)
    except OSError as e:
        console.error(f"Cannot read {args[1]}: {e.strerror}")
        return 1
    except Exception as e:
        if debug:
            traceback.print_exc()
        else:
            console.error(f"Internal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
