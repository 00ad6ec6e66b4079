"""Fault taxonomy shared by the lexer, the parser and the interpreter.

Every fault is a :class:`BasicError`. The three layers below it tell the
caller which stage gave up:

* :class:`LexicalError` - the scanner met a character it cannot classify.
* :class:`BasicSyntaxError` - the parser met a token it did not expect.
* :class:`BasicRuntimeError` - evaluation of a statement or expression failed.
"""

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from tinybasic.lexer import Token


class BasicError(Exception):
    def __init__(self, message: str, token: "Token" = None, offset: Optional[int] = None):
        self.message = message
        self.token = token
        if offset is None and token is not None:
            offset = token.span.start
        self.offset = offset
        self.source: Optional[str] = None
        super().__init__(message)

    def with_source(self, source: str) -> "BasicError":
        """Attach the submitted text so ``str()`` can point at the fault."""
        self.source = source
        return self

    def __str__(self):
        if self.source is None or self.offset is None:
            return self.message
        start = self.source.rfind("\n", 0, self.offset) + 1
        end = self.source.find("\n", self.offset)
        if end == -1:
            end = len(self.source)
        line = self.source[start:end]
        width = 1
        if self.token is not None:
            width = max(self.token.span.end - self.token.span.start, 1)
        pointer = " " * (self.offset - start) + "^" * width
        return f"{self.message}\n{line}\n{pointer}"


# Lexical faults


class LexicalError(BasicError):
    pass


class UnexpectedCharacter(LexicalError):
    def __init__(self, char: str, offset: int):
        self.char = char
        super().__init__(f"Unexpected character {char!r} at position {offset}", offset=offset)


class UnterminatedStringLiteral(LexicalError):
    def __init__(self, offset: int):
        super().__init__(f"Unterminated string literal at position {offset}", offset=offset)


class NumberTooLarge(LexicalError):
    def __init__(self, text: str, offset: int):
        self.text = text
        super().__init__(f"Number too large at position {offset}", offset=offset)


# Syntax faults


class BasicSyntaxError(BasicError):
    pass


class UnexpectedToken(BasicSyntaxError):
    def __init__(self, token: "Token"):
        super().__init__(
            f"Unexpected token {token.kind.name} at position {token.span.start}", token
        )


class UnexpectedIdentifier(BasicSyntaxError):
    def __init__(self, name: str, token: "Token"):
        self.name = name
        super().__init__(f"Unexpected identifier {name} at position {token.span.start}", token)


class InvalidVariableName(BasicSyntaxError):
    def __init__(self, name: str, token: "Token"):
        self.name = name
        super().__init__(f"Invalid variable name {name} at position {token.span.start}", token)


class LineNumberOutOfRange(BasicSyntaxError):
    def __init__(self, token: "Token"):
        self.number = token.value
        super().__init__(f"Illegal line number {token.value} at position {token.span.start}", token)


# Runtime faults


class BasicRuntimeError(BasicError):
    pass


class UndefinedVariable(BasicRuntimeError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Undefined variable '{name}'")


class InvalidOperation(BasicRuntimeError):
    def __init__(self, line: Optional[int] = None, detail: str = ""):
        self.line = line
        message = "Invalid operation"
        if detail:
            message += f" ({detail})"
        if line is not None:
            message += f" at line {line}"
        super().__init__(message)


class DivisionByZero(InvalidOperation):
    def __init__(self, line: Optional[int] = None):
        super().__init__(line, "division by zero")


class IllegalLineNumber(BasicRuntimeError):
    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Illegal line number {value}")


class InvalidState(BasicRuntimeError):
    pass


class InputSyntaxError(BasicRuntimeError):
    """A value typed at an INPUT prompt did not parse as an expression."""

    def __init__(self, cause: BasicError):
        self.cause = cause
        super().__init__(f"Syntax error in input: {cause.message}")


class NotImplementedStatement(BasicRuntimeError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} is not implemented")
