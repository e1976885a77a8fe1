from lexer import (
    Lexer, Token, TokenKind, tokenize, significant, split_results,
    UnexpectedToken, UnterminatedString, UnparsableNumber,
)


def kinds(source):
    tokens, errors = split_results(tokenize(source))
    assert errors == []
    return [tok.kind for tok in significant(tokens)]


def test_single_and_double_character_operators():
    assert kinds("( ) { } , . - + ; * / ! != = == < <= > >=") == [
        TokenKind.LEFT_PAREN, TokenKind.RIGHT_PAREN,
        TokenKind.LEFT_BRACE, TokenKind.RIGHT_BRACE,
        TokenKind.COMMA, TokenKind.DOT, TokenKind.MINUS, TokenKind.PLUS,
        TokenKind.SEMICOLON, TokenKind.STAR, TokenKind.SLASH,
        TokenKind.BANG, TokenKind.BANG_EQUAL,
        TokenKind.EQUAL, TokenKind.EQUAL_EQUAL,
        TokenKind.LESS, TokenKind.LESS_EQUAL,
        TokenKind.GREATER, TokenKind.GREATER_EQUAL,
        TokenKind.EOF,
    ]


def test_two_character_operator_without_spaces():
    assert kinds("a>=b!=c") == [
        TokenKind.IDENTIFIER, TokenKind.GREATER_EQUAL, TokenKind.IDENTIFIER,
        TokenKind.BANG_EQUAL, TokenKind.IDENTIFIER, TokenKind.EOF,
    ]


def test_exactly_one_eof_at_end():
    results = tokenize("var x = 1;")
    eofs = [tok for tok in results if tok.kind == TokenKind.EOF]
    assert len(eofs) == 1
    assert results[-1].kind == TokenKind.EOF


def test_empty_source_is_just_eof():
    assert tokenize("") == [Token(TokenKind.EOF, "", None, 1)]


def test_keywords_and_identifiers():
    source = "and class else false for fun if nil or print return super this true var while"
    expected = [
        TokenKind.AND, TokenKind.CLASS, TokenKind.ELSE, TokenKind.FALSE,
        TokenKind.FOR, TokenKind.FUN, TokenKind.IF, TokenKind.NIL, TokenKind.OR,
        TokenKind.PRINT, TokenKind.RETURN, TokenKind.SUPER, TokenKind.THIS,
        TokenKind.TRUE, TokenKind.VAR, TokenKind.WHILE, TokenKind.EOF,
    ]
    assert kinds(source) == expected
    assert kinds("classy _under var2") == [TokenKind.IDENTIFIER] * 3 + [TokenKind.EOF]


def test_boolean_literals_are_typed():
    tokens = significant(tokenize("true false"))
    assert tokens[0].literal is True
    assert tokens[1].literal is False


def test_integer_and_float_literals():
    tokens = significant(tokenize("12 3.5 7."))
    assert tokens[0].literal == 12 and isinstance(tokens[0].literal, int)
    assert tokens[1].literal == 3.5 and isinstance(tokens[1].literal, float)
    assert tokens[2].literal == 7.0 and isinstance(tokens[2].literal, float)
    assert tokens[1].lexeme == "3.5"


def test_second_decimal_point_is_an_error_and_scanning_continues():
    results = tokenize("1.2.3 + 4")
    tokens, errors = split_results(results)
    assert errors == [UnparsableNumber(1, "1.2.3")]
    assert [tok.kind for tok in significant(tokens)] == [TokenKind.PLUS, TokenKind.NUMBER, TokenKind.EOF]


def test_string_literal_keeps_quotes_in_lexeme_only():
    tok = significant(tokenize('"hello world"'))[0]
    assert tok.kind == TokenKind.STRING
    assert tok.lexeme == '"hello world"'
    assert tok.literal == "hello world"


def test_multiline_string_counts_lines():
    results = tokenize('"a\nb" x')
    tokens = significant(results)
    assert tokens[0].literal == "a\nb"
    assert tokens[0].line == 1
    assert tokens[1].lexeme == "x"
    assert tokens[1].line == 2


def test_unterminated_string():
    results = tokenize('print "oops\n')
    _, errors = split_results(results)
    assert errors == [UnterminatedString(1)]
    assert str(errors[0]) == "[line 1] Lex error: Unterminated string literal."
    assert results[-1].kind == TokenKind.EOF


def test_unexpected_characters_are_all_reported():
    _, errors = split_results(tokenize("1 @ 2\n# 3"))
    assert errors == [UnexpectedToken(1, "@"), UnexpectedToken(2, "#")]
    assert str(errors[0]) == "[line 1] Lex error: Unexpected character '@'."


def test_whitespace_and_comments_are_tokens():
    results = tokenize("x // note\ny")
    assert [tok.kind for tok in results] == [
        TokenKind.IDENTIFIER, TokenKind.WHITESPACE, TokenKind.COMMENT,
        TokenKind.WHITESPACE, TokenKind.IDENTIFIER, TokenKind.EOF,
    ]
    comment = results[2]
    assert comment.lexeme == "// note"
    assert comment.line == 1
    assert results[4].line == 2


def test_line_numbers_follow_newlines():
    tokens = significant(tokenize("a\n\nb\r\n  c"))
    assert [(tok.lexeme, tok.line) for tok in tokens[:3]] == [("a", 1), ("b", 3), ("c", 4)]
    assert tokens[-1].line == 4


def test_slash_alone_is_division():
    assert kinds("6 / 2") == [TokenKind.NUMBER, TokenKind.SLASH, TokenKind.NUMBER, TokenKind.EOF]


def test_lexer_can_start_on_another_line():
    tokens = Lexer("x", line=10).scan_tokens()
    assert tokens[0].line == 10


def test_number_too_large_for_a_float_is_unparsable():
    huge = "9" * 400
    tokens, errors = split_results(tokenize(f"{huge} + 1"))
    assert errors == [UnparsableNumber(1, huge)]
    assert [tok.kind for tok in significant(tokens)] == [TokenKind.PLUS, TokenKind.NUMBER, TokenKind.EOF]


def test_decimal_overflowing_to_infinity_is_unparsable():
    huge = "9" * 400 + ".5"
    _, errors = split_results(tokenize(huge))
    assert errors == [UnparsableNumber(1, huge)]


def test_number_past_the_digit_limit_is_unparsable():
    long_literal = "1" * 5000
    results = tokenize(long_literal)
    _, errors = split_results(results)
    assert errors == [UnparsableNumber(1, long_literal)]
    assert results[-1].kind == TokenKind.EOF


def test_large_number_that_fits_a_float_is_kept():
    tok = significant(tokenize("1" + "0" * 300))[0]
    assert tok.kind == TokenKind.NUMBER
    assert tok.literal == 10 ** 300


def test_identifiers_are_ascii_only():
    results = tokenize("café x_1")
    tokens, errors = split_results(results)
    assert errors == [UnexpectedToken(1, "é")]
    assert [tok.lexeme for tok in significant(tokens)] == ["caf", "x_1", ""]
