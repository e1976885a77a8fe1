import os
import subprocess
import sys

import pytest

from cli import main, _count_braces_delta

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def run_cli(args, inp=""):
    cli = os.path.join(ROOT, "cli.py")
    return subprocess.run(
        [sys.executable, cli, "--no-color", *args],
        input=inp,
        text=True,
        capture_output=True,
        cwd=ROOT,
        timeout=10,
    )


def run_repl_with_input(inp: str) -> str:
    proc = run_cli(["repl"], inp)

    # REPL should exit cleanly after :q
    if proc.returncode != 0:
        raise AssertionError(f"REPL exited with code {proc.returncode}\nSTDOUT:\n{proc.stdout}\nSTDERR:\n{proc.stderr}")

    return proc.stdout


def test_auto_print_expression():
    out = run_repl_with_input("1 + 2\n:q\n")
    if "3" not in out:
        raise AssertionError(f"Expected 3 in output.\nOUT:\n{out}")


def test_persistent_state_expression():
    out = run_repl_with_input("var x = 2;\nx + 5\n:q\n")
    if "7" not in out:
        raise AssertionError(f"Expected 7 in output.\nOUT:\n{out}")


def test_multiline_block_waits_for_closing_brace():
    out = run_repl_with_input("{\nvar y = 40;\nprint y + 2;\n}\n:q\n")
    assert "42" in out
    assert "...> " in out


def test_reset_clears_variables():
    proc = run_cli(["repl"], "var z = 1;\n:reset\nprint z;\n:q\n")
    assert proc.returncode == 0
    assert "Undefined variable 'z'" in proc.stderr


def test_repl_keeps_going_after_errors():
    out = run_repl_with_input("print 1 / 0;\nprint 9;\n:q\n")
    assert "9" in out


def test_run_file(tmp_path):
    script = tmp_path / "hello.lox"
    script.write_text('var who = "world";\nprint "hello " + who;\n', encoding="utf-8")
    proc = run_cli(["run", str(script)])
    assert proc.returncode == 0
    assert proc.stdout.strip() == "hello world"


def test_run_reports_errors_with_lines(tmp_path, capsys):
    script = tmp_path / "bad.lox"
    script.write_text("print 1;\nprint nope;\n", encoding="utf-8")
    assert main(["--no-color", "run", str(script)]) == 1
    captured = capsys.readouterr()
    assert captured.out == "1\n"
    assert "[line 2] Runtime error: Undefined variable 'nope'." in captured.err


def test_parse_prints_canonical_source(tmp_path, capsys):
    script = tmp_path / "p.lox"
    script.write_text("var a=1 print(a+2)*3", encoding="utf-8")
    assert main(["--no-color", "parse", str(script)]) == 0
    assert capsys.readouterr().out == "var a = 1;\nprint (a + 2) * 3;\n"


def test_tokens_lists_every_token(tmp_path, capsys):
    script = tmp_path / "t.lox"
    script.write_text("x", encoding="utf-8")
    assert main(["--no-color", "tokens", str(script)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    assert "IDENTIFIER" in lines[0]
    assert "EOF" in lines[1]


def test_missing_file_is_reported(tmp_path, capsys):
    assert main(["--no-color", "run", str(tmp_path / "absent.lox")]) == 1
    assert "Cannot read" in capsys.readouterr().err


@pytest.mark.parametrize(
    "args",
    [[], ["bogus", "f.lox"], ["run"], ["repl", "extra"]],
)
def test_bad_invocations_exit_nonzero(args, capsys):
    assert main(args) == 1


@pytest.mark.parametrize(
    "line, delta",
    [
        ("{", 1),
        ("{ { }", 1),
        ("}", -1),
        ('print "{";', 0),
        ("var a = 1; // {", 0),
        ("print 1 / 2; {", 1),
    ],
)
def test_brace_counting(line, delta):
    assert _count_braces_delta(line) == delta
