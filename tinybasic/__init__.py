"""A tiny line-numbered BASIC: lexer, parser and tree-walking interpreter."""

from tinybasic.errors import BasicError, BasicRuntimeError, BasicSyntaxError, LexicalError
from tinybasic.interpreter import Interpreter, InterpreterState
from tinybasic.lexer import Lexer, Token, TokenKind
from tinybasic.parser import Parser, parse, parse_expression
from tinybasic.program import MAX_LINES, Program
from tinybasic.terminal import ConsoleIO, HostIO, TerminalIO

__version__ = "0.1.0"

__all__ = [
    "BasicError",
    "BasicRuntimeError",
    "BasicSyntaxError",
    "ConsoleIO",
    "HostIO",
    "Interpreter",
    "InterpreterState",
    "LexicalError",
    "Lexer",
    "MAX_LINES",
    "Parser",
    "Program",
    "TerminalIO",
    "Token",
    "TokenKind",
    "parse",
    "parse_expression",
]
