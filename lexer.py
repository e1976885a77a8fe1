import math
from dataclasses import dataclass
from enum import Enum

from errors import LoxError


class TokenKind(Enum):
    # single-character tokens
    LEFT_PAREN = "LEFT_PAREN"
    RIGHT_PAREN = "RIGHT_PAREN"
    LEFT_BRACE = "LEFT_BRACE"
    RIGHT_BRACE = "RIGHT_BRACE"
    COMMA = "COMMA"
    DOT = "DOT"
    MINUS = "MINUS"
    PLUS = "PLUS"
    SEMICOLON = "SEMICOLON"
    SLASH = "SLASH"
    STAR = "STAR"

    # one or two character tokens
    BANG = "BANG"
    BANG_EQUAL = "BANG_EQUAL"
    EQUAL = "EQUAL"
    EQUAL_EQUAL = "EQUAL_EQUAL"
    GREATER = "GREATER"
    GREATER_EQUAL = "GREATER_EQUAL"
    LESS = "LESS"
    LESS_EQUAL = "LESS_EQUAL"

    # literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"

    # keywords
    AND = "AND"
    CLASS = "CLASS"
    ELSE = "ELSE"
    FALSE = "FALSE"
    FUN = "FUN"
    FOR = "FOR"
    IF = "IF"
    NIL = "NIL"
    OR = "OR"
    PRINT = "PRINT"
    RETURN = "RETURN"
    SUPER = "SUPER"
    THIS = "THIS"
    TRUE = "TRUE"
    VAR = "VAR"
    WHILE = "WHILE"

    COMMENT = "COMMENT"
    WHITESPACE = "WHITESPACE"
    EOF = "EOF"


KEYWORDS = {
    "and": TokenKind.AND,
    "class": TokenKind.CLASS,
    "else": TokenKind.ELSE,
    "false": TokenKind.FALSE,
    "for": TokenKind.FOR,
    "fun": TokenKind.FUN,
    "if": TokenKind.IF,
    "nil": TokenKind.NIL,
    "or": TokenKind.OR,
    "print": TokenKind.PRINT,
    "return": TokenKind.RETURN,
    "super": TokenKind.SUPER,
    "this": TokenKind.THIS,
    "true": TokenKind.TRUE,
    "var": TokenKind.VAR,
    "while": TokenKind.WHILE,
}

SINGLE_CHAR = {
    "(": TokenKind.LEFT_PAREN,
    ")": TokenKind.RIGHT_PAREN,
    "{": TokenKind.LEFT_BRACE,
    "}": TokenKind.RIGHT_BRACE,
    ",": TokenKind.COMMA,
    ".": TokenKind.DOT,
    "-": TokenKind.MINUS,
    "+": TokenKind.PLUS,
    ";": TokenKind.SEMICOLON,
    "*": TokenKind.STAR,
}

# first char -> (kind alone, kind when followed by "=")
WITH_EQUAL = {
    "!": (TokenKind.BANG, TokenKind.BANG_EQUAL),
    "=": (TokenKind.EQUAL, TokenKind.EQUAL_EQUAL),
    "<": (TokenKind.LESS, TokenKind.LESS_EQUAL),
    ">": (TokenKind.GREATER, TokenKind.GREATER_EQUAL),
}

TRIVIA = (TokenKind.WHITESPACE, TokenKind.COMMENT)


def is_digit(ch):
    return "0" <= ch <= "9"


def is_alpha(ch):
    return "a" <= ch <= "z" or "A" <= ch <= "Z" or ch == "_"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    lexeme: str
    literal: object = None
    line: int = 1

    def __repr__(self):
        if self.literal is not None:
            return f"{self.kind.name}({self.literal!r})@{self.line}"
        return f"{self.kind.name}({self.lexeme!r})@{self.line}"


class LexError(LoxError):
    category = "Lex error"


class UnexpectedToken(LexError):
    def __init__(self, line: int, char: str):
        super().__init__(line, f"Unexpected character {char!r}.")
        self.char = char


class UnterminatedString(LexError):
    def __init__(self, line: int):
        super().__init__(line, "Unterminated string literal.")


class UnparsableNumber(LexError):
    def __init__(self, line: int, lexeme: str):
        super().__init__(line, f"Invalid number literal {lexeme!r}.")
        self.lexeme = lexeme


class Lexer:
    def __init__(self, text, line=1):
        self.text = text
        self.pos = 0
        self.current_char = text[0] if text else None
        self.line = line

    def advance(self):
        # the line counter moves past a newline once it is consumed
        if self.current_char == "\n":
            self.line += 1
        self.pos += 1
        if self.pos >= len(self.text):
            self.current_char = None
        else:
            self.current_char = self.text[self.pos]

    def peek(self):
        nxt = self.pos + 1
        if nxt >= len(self.text):
            return None
        return self.text[nxt]

    def scan_tokens(self):
        """Scan the whole text.

        Returns a list holding a Token or a LexError for every lexeme, in
        source order, always ending with a single EOF token. A bad lexeme is
        recorded and scanning carries on after it.
        """
        results = []
        while self.current_char is not None:
            try:
                results.append(self.next_token())
            except LexError as e:
                results.append(e)
        results.append(Token(TokenKind.EOF, "", None, self.line))
        return results

    def next_token(self):
        ch = self.current_char
        line = self.line

        if ch in " \t\r\n":
            self.advance()
            return Token(TokenKind.WHITESPACE, ch, None, line)

        if ch == "/":
            if self.peek() == "/":
                return self.read_comment()
            self.advance()
            return Token(TokenKind.SLASH, ch, None, line)

        if ch in SINGLE_CHAR:
            self.advance()
            return Token(SINGLE_CHAR[ch], ch, None, line)

        if ch in WITH_EQUAL:
            alone, paired = WITH_EQUAL[ch]
            if self.peek() == "=":
                self.advance()
                self.advance()
                return Token(paired, ch + "=", None, line)
            self.advance()
            return Token(alone, ch, None, line)

        if ch == '"':
            return self.read_string()

        if is_digit(ch):
            return self.read_number()

        if is_alpha(ch):
            return self.read_identifier()

        self.advance()
        raise UnexpectedToken(line, ch)

    def read_comment(self):
        line = self.line
        result = ""
        while self.current_char is not None and self.current_char != "\n":
            result += self.current_char
            self.advance()
        return Token(TokenKind.COMMENT, result, None, line)

    def read_string(self):
        start_line = self.line
        self.advance()  # opening quote
        result = ""

        while self.current_char is not None and self.current_char != '"':
            result += self.current_char
            self.advance()

        if self.current_char is None:
            raise UnterminatedString(start_line)

        self.advance()  # closing quote
        return Token(TokenKind.STRING, f'"{result}"', result, start_line)

    def read_number(self):
        line = self.line
        result = ""
        dots = 0

        # the whole run is consumed even when malformed, so "1.2.3" is one error
        while self.current_char is not None and (is_digit(self.current_char) or self.current_char == "."):
            if self.current_char == ".":
                dots += 1
            result += self.current_char
            self.advance()

        if dots > 1:
            raise UnparsableNumber(line, result)

        # numbers are floats at runtime, so the literal has to fit one
        try:
            literal = float(result) if dots == 1 else int(result)
            width = float(literal)
        except (ValueError, OverflowError):
            raise UnparsableNumber(line, result) from None
        if math.isinf(width):
            raise UnparsableNumber(line, result)
        return Token(TokenKind.NUMBER, result, literal, line)

    def read_identifier(self):
        line = self.line
        result = ""
        while self.current_char is not None and (is_alpha(self.current_char) or is_digit(self.current_char)):
            result += self.current_char
            self.advance()

        kind = KEYWORDS.get(result, TokenKind.IDENTIFIER)
        if kind is TokenKind.TRUE:
            return Token(kind, result, True, line)
        if kind is TokenKind.FALSE:
            return Token(kind, result, False, line)
        return Token(kind, result, None, line)


def tokenize(source):
    return Lexer(source).scan_tokens()


def split_results(results):
    """Separate a scan result into (tokens, errors)."""
    tokens = []
    errors = []
    for item in results:
        if isinstance(item, LoxError):
            errors.append(item)
        else:
            tokens.append(item)
    return tokens, errors


def significant(tokens):
    # whitespace and comments are kept by the lexer for line tracking only
    return [tok for tok in tokens if tok.kind not in TRIVIA]
