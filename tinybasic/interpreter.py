import logging
from enum import Enum
from operator import add, eq, ge, gt, le, lt, mul, ne, sub, truediv
from typing import Optional

from tinybasic.ast import (
    ArithmeticOperator,
    BinaryExpression,
    ClsStatement,
    EmptyStatement,
    EndStatement,
    Expression,
    GosubStatement,
    GotoStatement,
    HelpStatement,
    Identifier,
    IfStatement,
    InputStatement,
    LetStatement,
    Line,
    ListStatement,
    LoadStatement,
    NewStatement,
    NumberLiteral,
    PrintStatement,
    RelationOperator,
    RemStatement,
    ReturnStatement,
    RunStatement,
    SaveStatement,
    Statement,
    StringLiteral,
    UnaryExpression,
    UnaryOperator,
)
from tinybasic.context import RuntimeContext, Value
from tinybasic.errors import (
    BasicError,
    BasicSyntaxError,
    DivisionByZero,
    IllegalLineNumber,
    InputSyntaxError,
    InvalidOperation,
    InvalidState,
    LexicalError,
    UndefinedVariable,
)
from tinybasic.parser import Parser
from tinybasic.program import Program
from tinybasic.terminal import TerminalIO

logger = logging.getLogger(__name__)

PROMPT = "> "

HELP_TEXT = [
    "PRINT <expression>[, <expression>...]",
    "INPUT <variable>[, <variable>...]",
    "IF <condition> THEN <statement>",
    "LET <variable> = <expression>",
    "GOTO <line>",
    "GOSUB <line>",
    "REM <comment>",
    "RETURN",
    "END",
    "CLS",
    "LIST",
    "RUN",
    "NEW",
    "LOAD",
    "SAVE",
]

ARITHMETIC = {
    ArithmeticOperator.ADD: add,
    ArithmeticOperator.SUBTRACT: sub,
    ArithmeticOperator.MULTIPLY: mul,
    ArithmeticOperator.DIVIDE: truediv,
}

RELATIONS = {
    RelationOperator.EQUAL: eq,
    RelationOperator.NOT_EQUAL: ne,
    RelationOperator.LESS_THAN: lt,
    RelationOperator.LESS_THAN_OR_EQUAL: le,
    RelationOperator.GREATER_THAN: gt,
    RelationOperator.GREATER_THAN_OR_EQUAL: ge,
}


class InterpreterState(Enum):
    STOPPED = "STOPPED"
    RUNNING = "RUNNING"


def format_value(value: Value) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return str(value)
    return value


def kind_of(value: Value) -> str:
    return "number" if isinstance(value, float) else "text"


class Interpreter:
    def __init__(self, io: TerminalIO, context: Optional[RuntimeContext] = None):
        self.io = io
        self.context = context if context is not None else RuntimeContext()
        self.state = InterpreterState.STOPPED
        # Number of the stored line being executed; None outside RUN.
        self.line_number: Optional[int] = None

    @property
    def program(self) -> Program:
        return self.context.program

    # Session surface

    async def execute(self):
        """Interactive loop: read, parse and evaluate until input runs out."""
        self.io.display_line("Ready!")

        while True:
            self.io.prompt(PROMPT)
            try:
                source = await self.io.read_line()
            except EOFError:
                logger.info("Input closed, leaving session")
                break

            if self.io.echo:
                self.io.display_line(f":{source}")

            try:
                await self.submit(source)
            except BasicError as e:
                self.report(e)

    def report(self, error: BasicError):
        logger.info("Fault reported to session: %s", error.message)
        self.io.display_line(str(error))

    async def submit(self, source: str):
        """Parse ``source`` in full, then evaluate each line in order.

        A lexical or syntax fault anywhere in ``source`` aborts the submission
        before any line is stored or executed. A runtime fault is reported
        and evaluation goes on with the next line.
        """
        try:
            lines = Parser(source, self.program.max_lines).parse()
        except (LexicalError, BasicSyntaxError) as e:
            raise e.with_source(source)

        for line in lines:
            try:
                await self.eval(line)
            except BasicError as e:
                self.report(e)

    async def eval(self, line: Line):
        if self.state is InterpreterState.RUNNING:
            raise InvalidState("Interpreter is already running")

        if line.number is not None:
            self.program.set(line)
            logger.debug("Stored line %d", line.number)
        else:
            await self.visit_statement(line.statement)

    async def run(self):
        await self.visit_run_statement()

    def load_program(self, source: str):
        """Replace the stored program with the lines parsed from ``source``."""
        lines = Parser(source, self.program.max_lines).parse()

        program = Program(self.program.max_lines)
        for line in lines:
            if line.number is None:
                logger.warning("Skipping line without line number: %s", line.source)
                continue
            program.set(line)

        self.context.program = program
        self.context.reset()
        logger.info("Loaded %d line(s)", program.count())
        self.io.display_line("program loaded")

    # Statements

    async def visit_statement(self, statement: Statement):
        if isinstance(statement, PrintStatement):
            return self.visit_print_statement(statement)
        elif isinstance(statement, LetStatement):
            return self.visit_let_statement(statement)
        elif isinstance(statement, InputStatement):
            return await self.visit_input_statement(statement)
        elif isinstance(statement, IfStatement):
            return await self.visit_if_statement(statement)
        elif isinstance(statement, GotoStatement):
            return self.visit_goto_statement(statement.location)
        elif isinstance(statement, GosubStatement):
            return self.visit_gosub_statement(statement.location)
        elif isinstance(statement, ReturnStatement):
            return self.visit_return_statement()
        elif isinstance(statement, EndStatement):
            return self.visit_end_statement()
        elif isinstance(statement, RunStatement):
            return await self.visit_run_statement()
        elif isinstance(statement, ListStatement):
            return self.visit_list_statement()
        elif isinstance(statement, NewStatement):
            return self.visit_new_statement()
        elif isinstance(statement, HelpStatement):
            return self.visit_help_statement()
        elif isinstance(statement, ClsStatement):
            return await self.io.clear_screen()
        elif isinstance(statement, LoadStatement):
            return await self.visit_load_statement()
        elif isinstance(statement, SaveStatement):
            return await self.visit_save_statement()
        elif isinstance(statement, (RemStatement, EmptyStatement)):
            return None
        raise InvalidOperation(self.line_number, f"unknown statement {type(statement).__name__}")

    async def visit_run_statement(self):
        if self.state is InterpreterState.RUNNING:
            # RUN from inside a program restarts it in place.
            logger.debug("RUN while running: restarting program")
            self.context.reset()
            return

        self.context.reset()
        self.state = InterpreterState.RUNNING
        logger.info("RUN: %d stored line(s)", self.program.count())

        try:
            while self.context.current_line < len(self.program):
                line = self.program.get(self.context.current_line)
                self.context.current_line += 1
                if line is None:
                    continue
                self.line_number = line.number
                await self.visit_statement(line.statement)
        finally:
            self.state = InterpreterState.STOPPED
            self.line_number = None
            logger.info("Program stopped")

    def visit_print_statement(self, statement: PrintStatement):
        values = [format_value(self.visit_expression(e)) for e in statement.expressions]
        self.io.display_line(" ".join(values))

    def visit_let_statement(self, statement: LetStatement):
        value = self.visit_expression(statement.value)
        self.context.variables[statement.name] = value
        logger.debug("LET %s = %r", statement.name, value)

    async def visit_input_statement(self, statement: InputStatement):
        for variable in statement.variables:
            self.io.prompt(f"{variable.name}? ")
            text = await self.io.read_line()
            if self.io.echo:
                self.io.display_line(f"{variable.name}? {text}")

            try:
                expression = Parser(text).parse_expression()
            except (LexicalError, BasicSyntaxError) as e:
                raise InputSyntaxError(e) from e

            value = self.visit_expression(expression)
            self.context.variables[variable.name] = value
            logger.debug("INPUT %s = %r", variable.name, value)

    async def visit_if_statement(self, statement: IfStatement):
        condition = statement.condition
        left = self.visit_expression(condition.left)
        right = self.visit_expression(condition.right)

        if not (isinstance(left, float) and isinstance(right, float)):
            raise InvalidOperation(
                self.line_number, f"{kind_of(left)} {condition.operator.value} {kind_of(right)}"
            )

        if RELATIONS[condition.operator](left, right):
            await self.visit_statement(statement.then)

    def visit_goto_statement(self, location: Expression):
        target = self.visit_expression(location)
        if not isinstance(target, float) or not target.is_integer() or not 0 <= target < len(self.program):
            raise IllegalLineNumber(format_value(target))

        self.context.current_line = int(target)
        logger.debug("GOTO line %d", self.context.current_line)

    def visit_gosub_statement(self, location: Expression):
        self.context.stack.append(self.context.current_line)
        self.visit_goto_statement(location)

    def visit_return_statement(self):
        if not self.context.stack:
            raise InvalidOperation(self.line_number, "RETURN without GOSUB")

        self.context.current_line = self.context.stack.pop()
        logger.debug("RETURN to address %d", self.context.current_line)

    def visit_end_statement(self):
        self.context.current_line = len(self.program)

    def visit_list_statement(self):
        for line in self.program:
            self.io.display_line(line.source.strip())

    def visit_new_statement(self):
        self.context.new_program()
        logger.debug("NEW: program and variables cleared")

    def visit_help_statement(self):
        for entry in HELP_TEXT:
            self.io.display_line(entry)

    async def visit_load_statement(self):
        source = await self.io.load_program()
        if source is None:
            logger.info("LOAD: nothing to load")
            return
        self.load_program(source)

    async def visit_save_statement(self):
        await self.io.save_program(self.program.print())
        logger.info("SAVE: %d line(s)", self.program.count())

    # Expressions

    def visit_expression(self, expression: Expression) -> Value:
        if isinstance(expression, NumberLiteral):
            return float(expression.value)
        elif isinstance(expression, StringLiteral):
            return expression.value
        elif isinstance(expression, Identifier):
            try:
                return self.context.variables[expression.name]
            except KeyError:
                raise UndefinedVariable(expression.name) from None
        elif isinstance(expression, UnaryExpression):
            return self.visit_unary_expression(expression)
        elif isinstance(expression, BinaryExpression):
            return self.visit_binary_expression(expression)
        raise InvalidOperation(self.line_number, f"unknown expression {type(expression).__name__}")

    def visit_unary_expression(self, unary: UnaryExpression) -> Value:
        value = self.visit_expression(unary.argument)
        if unary.operator is None:
            return value
        if not isinstance(value, float):
            raise InvalidOperation(self.line_number, f"{unary.operator.value}{kind_of(value)}")
        if unary.operator is UnaryOperator.MINUS:
            return -value
        return value

    def visit_binary_expression(self, binary: BinaryExpression) -> Value:
        left = self.visit_expression(binary.left)
        right = self.visit_expression(binary.right)
        operator = binary.operator

        if isinstance(left, float) and isinstance(right, float):
            if operator is ArithmeticOperator.DIVIDE and right == 0:
                raise DivisionByZero(self.line_number)
            return ARITHMETIC[operator](left, right)

        if isinstance(left, str) and isinstance(right, str) and operator is ArithmeticOperator.ADD:
            return left + right

        raise InvalidOperation(self.line_number, f"{kind_of(left)} {operator.value} {kind_of(right)}")


__all__ = ["Interpreter", "InterpreterState", "HELP_TEXT", "PROMPT", "format_value"]
