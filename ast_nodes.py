from dataclasses import dataclass

from lexer import Token


class ASTNode:
    pass


# ---------- expressions ----------
class Expr(ASTNode):
    pass


@dataclass(frozen=True)
class Literal(Expr):
    token: Token


@dataclass(frozen=True)
class Identifier(Expr):
    name: Token


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True)
class Unary(Expr):
    op: Token
    operand: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    op: Token
    right: Expr


@dataclass(frozen=True)
class Logical(Expr):
    # short-circuit "and" / "or"
    left: Expr
    op: Token
    right: Expr


@dataclass(frozen=True)
class Assign(Expr):
    target: Token
    value: Expr


# ---------- statements ----------
class Stmt(ASTNode):
    pass


@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Stmt | None = None


@dataclass(frozen=True)
class Block(Stmt):
    declarations: tuple  # tuple[Decl, ...]


# ---------- declarations ----------
class Decl(ASTNode):
    pass


@dataclass(frozen=True)
class Declaration(Decl):
    name: Token
    initializer: Expr | None = None


@dataclass(frozen=True)
class Statement(Decl):
    statement: Stmt


def node_line(node):
    """Line a node starts on, for nodes that carry no token of their own."""
    if isinstance(node, Literal):
        return node.token.line
    if isinstance(node, Identifier):
        return node.name.line
    if isinstance(node, Unary):
        return node.op.line
    if isinstance(node, (Binary, Logical)):
        return node_line(node.left)
    if isinstance(node, Assign):
        return node.target.line
    if isinstance(node, (Grouping, Expression, Print)):
        return node_line(node.expression)
    if isinstance(node, If):
        return node_line(node.condition)
    if isinstance(node, Block):
        if node.declarations:
            return node_line(node.declarations[0])
        return None
    if isinstance(node, Declaration):
        return node.name.line
    if isinstance(node, Statement):
        return node_line(node.statement)
    raise Exception(f"Unknown node: {node.__class__.__name__}")
