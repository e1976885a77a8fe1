from ast_nodes import (
    Literal, Identifier, Grouping, Unary, Binary, Logical, Assign,
    Expression, Print, If, Block,
    Declaration, Statement,
)

INDENT = "  "


class AstPrinter:
    """Render AST nodes back to canonical source text.

    The output parses back to the same tree, so it doubles as a structural
    fingerprint in tests and as the expression text in error messages.
    """

    def print(self, node):
        if isinstance(node, (list, tuple)):
            return "\n".join(self.print(decl) for decl in node)

        # declarations
        if isinstance(node, Declaration):
            if node.initializer is None:
                return f"var {node.name.lexeme};"
            return f"var {node.name.lexeme} = {self.print(node.initializer)};"
        if isinstance(node, Statement):
            return self.print(node.statement)

        # statements
        if isinstance(node, Expression):
            return f"{self.print(node.expression)};"
        if isinstance(node, Print):
            return f"print {self.print(node.expression)};"
        if isinstance(node, If):
            text = f"if ({self.print(node.condition)}) {self.print(node.then_branch)}"
            if node.else_branch is not None:
                text += f"\nelse {self.print(node.else_branch)}"
            return text
        if isinstance(node, Block):
            return self.print_block(node)

        # expressions
        if isinstance(node, Literal):
            return node.token.lexeme
        if isinstance(node, Identifier):
            return node.name.lexeme
        if isinstance(node, Grouping):
            return f"({self.print(node.expression)})"
        if isinstance(node, Unary):
            return f"{node.op.lexeme}{self.print(node.operand)}"
        if isinstance(node, (Binary, Logical)):
            return f"{self.print(node.left)} {node.op.lexeme} {self.print(node.right)}"
        if isinstance(node, Assign):
            return f"{node.target.lexeme} = {self.print(node.value)}"

        raise Exception(f"Unknown AST node: {node.__class__.__name__}")

    def print_block(self, node):
        if not node.declarations:
            return "{}"
        lines = ["{"]
        for decl in node.declarations:
            for line in self.print(decl).split("\n"):
                lines.append(INDENT + line)
        lines.append("}")
        return "\n".join(lines)


def print_ast(node):
    return AstPrinter().print(node)
