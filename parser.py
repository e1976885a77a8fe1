from ast_nodes import (
    Literal, Identifier, Grouping, Unary, Binary, Logical, Assign,
    Expression, Print, If, Block,
    Declaration, Statement,
)
from ast_printer import print_ast
from errors import LoxError
from lexer import Token, TokenKind


class ParseError(LoxError):
    category = "Parse error"


class UnexpectedToken(ParseError):
    def __init__(self, line: int, found: str, expected: str):
        super().__init__(line, f"Unexpected token {found!r}, expected {expected}.")
        self.found = found
        self.expected = expected


class WrongTokenType(ParseError):
    def __init__(self, line: int, found: str, expected: str):
        super().__init__(line, f"Expected {expected!r} but found {found!r}.")
        self.found = found
        self.expected = expected


class UnexpectedEof(ParseError):
    def __init__(self, line: int):
        super().__init__(line, "Unexpected end of input.")


class InvalidAssignmentTarget(ParseError):
    def __init__(self, line: int, target: str):
        super().__init__(line, f"Invalid assignment target '{target}'.")
        self.target = target


class NestingTooDeep(ParseError):
    def __init__(self, line: int, limit: int):
        super().__init__(line, f"Nesting deeper than {limit} levels.")
        self.limit = limit


# tokens that start a statement; error recovery resumes at them
STATEMENT_STARTS = (
    TokenKind.CLASS,
    TokenKind.FUN,
    TokenKind.VAR,
    TokenKind.FOR,
    TokenKind.IF,
    TokenKind.WHILE,
    TokenKind.PRINT,
    TokenKind.RETURN,
)

LITERALS = (TokenKind.NUMBER, TokenKind.STRING, TokenKind.TRUE, TokenKind.FALSE, TokenKind.NIL)


def describe(tok):
    if tok.kind == TokenKind.EOF:
        return "end of input"
    return tok.lexeme


class Parser:
    # tree levels; kept below Evaluator.MAX_DEPTH so parsed trees always evaluate
    MAX_DEPTH = 128
    # nested parentheses, each of which costs a full descent of the grammar
    MAX_GROUPS = 32

    def __init__(self, tokens):
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].kind != TokenKind.EOF:
            line = self.tokens[-1].line if self.tokens else 1
            self.tokens.append(Token(TokenKind.EOF, "", None, line))
        self.pos = 0
        self.current_token = self.tokens[0]
        self.block_depth = 0
        self.depth = 0
        self.groups = 0

    # ---------- TOKEN CURSOR ----------
    def advance(self):
        tok = self.current_token
        if tok.kind != TokenKind.EOF:
            self.pos += 1
            self.current_token = self.tokens[self.pos]
        return tok

    def check(self, *kinds):
        return self.current_token.kind in kinds

    def match(self, *kinds):
        if self.check(*kinds):
            return self.advance()
        return None

    def at_end(self):
        return self.current_token.kind == TokenKind.EOF

    # move to next token, but only if it matches what we expect
    def eat(self, kind, expected):
        if self.current_token.kind == kind:
            return self.advance()
        tok = self.current_token
        if tok.kind == TokenKind.EOF:
            raise UnexpectedEof(tok.line)
        raise WrongTokenType(tok.line, tok.lexeme, expected)

    def eat_semicolon(self):
        # statement terminators are optional; one is swallowed when present
        self.match(TokenKind.SEMICOLON)

    def enter(self):
        self.depth += 1
        if self.depth > self.MAX_DEPTH:
            raise NestingTooDeep(self.current_token.line, self.MAX_DEPTH)

    # ---------- TOP LEVEL ----------
    def parse(self):
        """Parse every top-level declaration.

        Returns a list with one entry per declaration attempt: the Decl node,
        or the ParseError that stopped it. After an error the parser skips to
        the next statement boundary and keeps going.
        """
        results = []
        while not self.at_end():
            start = self.pos
            try:
                results.append(self.declaration())
            except ParseError as e:
                results.append(e)
                self.synchronize(start)
        return results

    def synchronize(self, start):
        # besides EOF, ";" and statement keywords, a brace opened before the error
        # must be closed before a boundary counts, so one broken block is one error
        depth = self.block_depth
        self.block_depth = 0
        self.depth = 0
        self.groups = 0

        # a declaration that failed on its first token must still move past it
        must_skip = self.pos == start
        while not self.at_end():
            if not must_skip and depth == 0 and self.check(*STATEMENT_STARTS):
                return
            tok = self.advance()
            must_skip = False
            if tok.kind == TokenKind.LEFT_BRACE:
                depth += 1
            elif tok.kind == TokenKind.RIGHT_BRACE and depth > 0:
                depth -= 1
                if depth == 0:
                    return
            elif tok.kind == TokenKind.SEMICOLON and depth == 0:
                return

    # ---------- DECLARATIONS ----------
    def declaration(self):
        if self.check(TokenKind.VAR):
            return self.var_declaration()
        return Statement(self.statement())

    def var_declaration(self):
        self.advance()  # var
        name = self.current_token
        if name.kind != TokenKind.IDENTIFIER:
            if name.kind == TokenKind.EOF:
                raise UnexpectedEof(name.line)
            raise UnexpectedToken(name.line, name.lexeme, "a variable name")
        self.advance()

        initializer = None
        if self.match(TokenKind.EQUAL):
            initializer = self.expression()
        self.eat_semicolon()
        return Declaration(name, initializer)

    # ---------- STATEMENTS ----------
    def statement(self):
        self.enter()
        try:
            if self.check(TokenKind.PRINT):
                return self.print_statement()
            if self.check(TokenKind.LEFT_BRACE):
                return self.block()
            if self.check(TokenKind.IF):
                return self.if_statement()

            expr = self.expression()
            self.eat_semicolon()
            return Expression(expr)
        finally:
            self.depth -= 1

    def print_statement(self):
        self.advance()  # print
        expr = self.expression()
        self.eat_semicolon()
        return Print(expr)

    def block(self):
        self.advance()  # {
        self.block_depth += 1

        declarations = []
        while not self.check(TokenKind.RIGHT_BRACE):
            if self.at_end():
                raise UnexpectedEof(self.current_token.line)
            declarations.append(self.declaration())

        self.advance()  # }
        self.block_depth -= 1
        self.eat_semicolon()
        return Block(tuple(declarations))

    def if_statement(self):
        # else attaches to the innermost open if through the recursion below
        self.advance()  # if
        self.eat(TokenKind.LEFT_PAREN, "(")
        condition = self.expression()
        self.eat(TokenKind.RIGHT_PAREN, ")")
        then_branch = self.statement()

        else_branch = None
        if self.match(TokenKind.ELSE):
            else_branch = self.statement()
        return If(condition, then_branch, else_branch)

    # ---------- EXPRESSIONS ----------
    # expression -> assignment
    def expression(self):
        self.enter()
        try:
            return self.assignment()
        finally:
            self.depth -= 1

    # assignment -> IDENTIFIER "=" assignment | or_expr
    def assignment(self):
        expr = self.or_expr()

        equals = self.match(TokenKind.EQUAL)
        if equals is None:
            return expr

        self.enter()
        try:
            value = self.assignment()
        finally:
            self.depth -= 1
        if isinstance(expr, Identifier):
            return Assign(expr.name, value)
        raise InvalidAssignmentTarget(equals.line, print_ast(expr))

    def chain(self, node_type, operand, *kinds):
        # left-deep: every operator adds a level to the tree, so each one is counted
        node = operand()
        levels = 0
        try:
            while self.check(*kinds):
                op = self.advance()
                self.enter()
                levels += 1
                node = node_type(node, op, operand())
        finally:
            self.depth -= levels
        return node

    # or_expr -> and_expr (OR and_expr)*
    def or_expr(self):
        return self.chain(Logical, self.and_expr, TokenKind.OR)

    # and_expr -> equality (AND equality)*
    def and_expr(self):
        return self.chain(Logical, self.equality, TokenKind.AND)

    # equality -> comparison ((==|!=) comparison)*
    def equality(self):
        return self.chain(Binary, self.comparison, TokenKind.EQUAL_EQUAL, TokenKind.BANG_EQUAL)

    # comparison -> term ((>|>=|<|<=) term)*
    def comparison(self):
        return self.chain(
            Binary, self.term,
            TokenKind.GREATER, TokenKind.GREATER_EQUAL, TokenKind.LESS, TokenKind.LESS_EQUAL,
        )

    # term -> factor ((+|-) factor)*
    def term(self):
        return self.chain(Binary, self.factor, TokenKind.PLUS, TokenKind.MINUS)

    # factor -> unary ((*|/) unary)*
    def factor(self):
        return self.chain(Binary, self.unary, TokenKind.STAR, TokenKind.SLASH)

    # unary -> (!|-) unary | primary
    def unary(self):
        if self.check(TokenKind.BANG, TokenKind.MINUS):
            op = self.advance()
            self.enter()
            try:
                return Unary(op, self.unary())
            finally:
                self.depth -= 1
        return self.primary()

    # primary -> literal | IDENTIFIER | "(" expression ")"
    def primary(self):
        tok = self.current_token

        if tok.kind == TokenKind.EOF:
            raise UnexpectedEof(tok.line)

        if tok.kind in LITERALS:
            self.advance()
            return Literal(tok)

        if tok.kind == TokenKind.IDENTIFIER:
            self.advance()
            return Identifier(tok)

        if tok.kind == TokenKind.LEFT_PAREN:
            self.advance()
            # each group re-enters the whole precedence ladder
            self.groups += 1
            if self.groups > self.MAX_GROUPS:
                raise NestingTooDeep(tok.line, self.MAX_GROUPS)
            try:
                node = self.expression()
            finally:
                self.groups -= 1
            self.eat(TokenKind.RIGHT_PAREN, ")")
            return Grouping(node)

        raise UnexpectedToken(tok.line, describe(tok), "an expression")


def parse(tokens):
    return Parser(tokens).parse()
