from ast_nodes import (
    Literal, Identifier, Grouping, Unary, Binary, Logical, Assign,
    Expression, Print, If, Block,
    Declaration, Statement,
    node_line,
)
from ast_printer import print_ast
from errors import LoxError
from lexer import TokenKind
from values import NUMBER, STRING, BOOL, type_name, from_literal, values_equal, stringify


class LoxRuntimeError(LoxError):
    category = "Runtime error"


class WrongType(LoxRuntimeError):
    def __init__(self, line: int, expression: str, expected: str, actual: str):
        super().__init__(line, f"Expected {expected} in '{expression}', found {actual}.")
        self.expression = expression
        self.expected = expected
        self.actual = actual


class IncompatibleTypes(LoxRuntimeError):
    def __init__(self, line: int, expression: str, left: str, right: str):
        super().__init__(line, f"Incompatible types {left} and {right} in '{expression}'.")
        self.expression = expression
        self.left = left
        self.right = right


class InoperableTypes(LoxRuntimeError):
    def __init__(self, line: int, operator: str, expression: str, supported, left: str, right: str):
        allowed = " or ".join(supported)
        super().__init__(
            line,
            f"Operator '{operator}' expects {allowed} operands, found {left} and {right} in '{expression}'.",
        )
        self.operator = operator
        self.expression = expression
        self.supported = tuple(supported)
        self.left = left
        self.right = right


class UndefinedVariable(LoxRuntimeError):
    def __init__(self, line: int, name: str):
        super().__init__(line, f"Undefined variable '{name}'.")
        self.name = name


class DivisionByZero(LoxRuntimeError):
    def __init__(self, line: int, expression: str):
        super().__init__(line, f"Division by zero in '{expression}'.")
        self.expression = expression


class NestingTooDeep(LoxRuntimeError):
    def __init__(self, line: int, limit: int):
        super().__init__(line, f"Evaluation nested deeper than {limit} levels.")
        self.limit = limit


EQUALITY = (TokenKind.EQUAL_EQUAL, TokenKind.BANG_EQUAL)
ORDERING = (TokenKind.GREATER, TokenKind.GREATER_EQUAL, TokenKind.LESS, TokenKind.LESS_EQUAL)


class Evaluator:
    MAX_DEPTH = 200

    def __init__(self, env, out=print):
        self.env = env
        self.out = out  # output sink for print statements
        self.depth = 0

    def evaluate(self, decl):
        """Run one top-level declaration and return its value.

        Raises a LoxRuntimeError on failure. Bindings made before the failure
        stay in the environment; any block scopes opened are closed again.
        """
        self.depth = 0
        return self.exec_decl(decl)

    def enter(self, node):
        self.depth += 1
        if self.depth > self.MAX_DEPTH:
            raise NestingTooDeep(node_line(node) or 0, self.MAX_DEPTH)

    # -------- declarations --------
    def exec_decl(self, node):
        if isinstance(node, Declaration):
            value = None
            if node.initializer is not None:
                value = self.eval_expr(node.initializer)
            # always a fresh binding in the innermost scope
            self.env.define(node.name.lexeme, value)
            return value

        if isinstance(node, Statement):
            return self.exec_stmt(node.statement)

        raise Exception(f"Unknown declaration node: {node.__class__.__name__}")

    # -------- statements --------
    def exec_stmt(self, node):
        self.enter(node)
        try:
            if isinstance(node, Expression):
                return self.eval_expr(node.expression)

            if isinstance(node, Print):
                value = self.eval_expr(node.expression)
                self.out(stringify(value))
                return None

            if isinstance(node, If):
                return self.exec_if(node)

            if isinstance(node, Block):
                return self.exec_block(node)

            raise Exception(f"Unknown statement node: {node.__class__.__name__}")
        finally:
            self.depth -= 1

    def exec_if(self, node):
        condition = self.eval_expr(node.condition)
        if not isinstance(condition, bool):
            raise WrongType(node_line(node.condition), print_ast(node.condition), BOOL, type_name(condition))
        if condition:
            return self.exec_stmt(node.then_branch)
        if node.else_branch is not None:
            return self.exec_stmt(node.else_branch)
        return None

    def exec_block(self, node):
        self.env.push_scope()
        try:
            for decl in node.declarations:
                self.exec_decl(decl)
        finally:
            self.env.pop_scope()
        return None

    # -------- expressions --------
    def eval_expr(self, node):
        self.enter(node)
        try:
            if isinstance(node, Literal):
                return from_literal(node.token.literal)

            if isinstance(node, Identifier):
                try:
                    return self.env.get(node.name.lexeme)
                except KeyError:
                    raise UndefinedVariable(node.name.line, node.name.lexeme) from None

            if isinstance(node, Assign):
                value = self.eval_expr(node.value)
                if not self.env.assign(node.target.lexeme, value):
                    raise UndefinedVariable(node.target.line, node.target.lexeme)
                return value

            if isinstance(node, Grouping):
                return self.eval_expr(node.expression)

            if isinstance(node, Unary):
                return self.eval_unary(node)

            if isinstance(node, Binary):
                return self.eval_binary(node)

            if isinstance(node, Logical):
                return self.eval_logical(node)

            raise Exception(f"Unknown expression node: {node.__class__.__name__}")
        finally:
            self.depth -= 1

    def eval_unary(self, node):
        operand = self.eval_expr(node.operand)
        op = node.op

        if op.kind == TokenKind.MINUS:
            if not isinstance(operand, float):
                raise WrongType(op.line, print_ast(node), NUMBER, type_name(operand))
            return -operand

        if op.kind == TokenKind.BANG:
            if not isinstance(operand, bool):
                raise WrongType(op.line, print_ast(node), BOOL, type_name(operand))
            return not operand

        raise Exception(f"Unknown unary operator: {op.lexeme}")

    def eval_logical(self, node):
        op = node.op
        left = self.eval_expr(node.left)
        if not isinstance(left, bool):
            raise WrongType(op.line, print_ast(node), BOOL, type_name(left))

        if op.kind == TokenKind.AND and not left:
            return False
        if op.kind == TokenKind.OR and left:
            return True

        right = self.eval_expr(node.right)
        if not isinstance(right, bool):
            raise WrongType(op.line, print_ast(node), BOOL, type_name(right))
        return right

    def eval_binary(self, node):
        # left operand first, whatever the operator
        left = self.eval_expr(node.left)
        right = self.eval_expr(node.right)
        op = node.op
        lt = type_name(left)
        rt = type_name(right)

        if op.kind in EQUALITY:
            if left is not None and right is not None and lt != rt:
                raise IncompatibleTypes(op.line, print_ast(node), lt, rt)
            equal = values_equal(left, right)
            return equal if op.kind == TokenKind.EQUAL_EQUAL else not equal

        if op.kind in ORDERING:
            if left is None or right is None or lt != rt:
                raise IncompatibleTypes(op.line, print_ast(node), lt, rt)
            if lt not in (NUMBER, STRING):
                raise InoperableTypes(op.line, op.lexeme, print_ast(node), (NUMBER, STRING), lt, rt)
            if op.kind == TokenKind.GREATER:
                return left > right
            if op.kind == TokenKind.GREATER_EQUAL:
                return left >= right
            if op.kind == TokenKind.LESS:
                return left < right
            return left <= right

        if op.kind == TokenKind.PLUS:
            if lt == rt and lt in (NUMBER, STRING):
                return left + right
            self.check_operands(node, (NUMBER, STRING), lt, rt)

        if op.kind in (TokenKind.MINUS, TokenKind.STAR, TokenKind.SLASH):
            if lt != NUMBER or rt != NUMBER:
                self.check_operands(node, (NUMBER,), lt, rt)
            if op.kind == TokenKind.MINUS:
                return left - right
            if op.kind == TokenKind.STAR:
                return left * right
            if right == 0:
                raise DivisionByZero(op.line, print_ast(node))
            return left / right

        raise Exception(f"Unknown binary operator: {op.lexeme}")

    def check_operands(self, node, supported, lt, rt):
        # one side of an accepted type means the other side is the odd one out
        if lt in supported or rt in supported:
            if lt in supported:
                raise IncompatibleTypes(node.op.line, print_ast(node), lt, rt)
            raise IncompatibleTypes(node.op.line, print_ast(node), rt, lt)
        raise InoperableTypes(node.op.line, node.op.lexeme, print_ast(node), supported, lt, rt)


def evaluate(decl, env, out=print):
    return Evaluator(env, out).evaluate(decl)
