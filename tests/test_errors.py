from tinybasic.errors import (
    BasicRuntimeError,
    BasicSyntaxError,
    DivisionByZero,
    IllegalLineNumber,
    InputSyntaxError,
    InvalidOperation,
    LexicalError,
    UnexpectedCharacter,
    UnexpectedToken,
    UnterminatedStringLiteral,
)
from tinybasic.lexer import Lexer


def test_layers():
    assert issubclass(UnexpectedCharacter, LexicalError)
    assert issubclass(UnterminatedStringLiteral, LexicalError)
    assert issubclass(UnexpectedToken, BasicSyntaxError)
    assert issubclass(DivisionByZero, InvalidOperation)
    assert issubclass(InputSyntaxError, BasicRuntimeError)


def test_messages():
    assert str(UnexpectedCharacter("?", 3)) == "Unexpected character '?' at position 3"
    assert str(UnterminatedStringLiteral(6)) == "Unterminated string literal at position 6"
    assert str(InvalidOperation(20)) == "Invalid operation at line 20"
    assert str(InvalidOperation()) == "Invalid operation"
    assert str(DivisionByZero(30)) == "Invalid operation (division by zero) at line 30"
    assert str(IllegalLineNumber("A")) == "Illegal line number A"


def test_pointer_marks_the_token_on_its_own_line():
    source = '10 PRINT 1\n20 PRINT "AB" "CD"'
    lexer = Lexer(source)
    token = [t for t in lexer if t.value == "CD"][0]

    error = UnexpectedToken(token).with_source(source)

    assert str(error).splitlines() == [
        "Unexpected token STRING at position 25",
        '20 PRINT "AB" "CD"',
        "              ^^^^",
    ]


def test_input_syntax_error_keeps_its_cause():
    cause = UnexpectedCharacter("?", 0)
    error = InputSyntaxError(cause)

    assert error.cause is cause
    assert str(error) == "Syntax error in input: Unexpected character '?' at position 0"
