"""Pipeline glue: source text -> tokens -> declarations -> values.

A Session owns one Environment, so variables survive between calls to
`run` (the REPL keeps one session alive; a file run uses a fresh one).
"""

from dataclasses import dataclass, field

from environment import Environment
from evaluator import Evaluator, LoxRuntimeError
from errors import LoxError
from lexer import tokenize, split_results, significant
from parser import parse


@dataclass
class RunResult:
    values: list = field(default_factory=list)  # (decl, value) per evaluated declaration
    errors: list = field(default_factory=list)  # LoxErrors in the order they were reported

    @property
    def ok(self) -> bool:
        return not self.errors


class Session:
    def __init__(self, out=print, on_error=None):
        self.out = out
        self.on_error = on_error  # called with each LoxError as it is reported
        self.env = Environment()
        self.evaluator = Evaluator(self.env, out=out)

    def reset(self):
        self.env = Environment()
        self.evaluator = Evaluator(self.env, out=self.out)

    def report(self, result, error: LoxError):
        result.errors.append(error)
        if self.on_error is not None:
            self.on_error(error)

    def run(self, source: str) -> RunResult:
        result = RunResult()

        tokens, lex_errors = split_results(tokenize(source))
        if lex_errors:
            # nothing is parsed from a source that does not scan cleanly
            for error in lex_errors:
                self.report(result, error)
            return result

        for item in parse(significant(tokens)):
            if isinstance(item, LoxError):
                self.report(result, item)
                continue
            try:
                value = self.evaluator.evaluate(item)
            except LoxRuntimeError as e:
                self.report(result, e)
                continue
            result.values.append((item, value))

        return result
