import logging
from typing import Callable, Dict, List, Optional

from tinybasic.ast import (
    ArithmeticOperator,
    BinaryExpression,
    ClsStatement,
    Condition,
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
from tinybasic.errors import InvalidVariableName, LineNumberOutOfRange, UnexpectedIdentifier, UnexpectedToken
from tinybasic.lexer import Lexer, Token, TokenKind
from tinybasic.program import MAX_LINES

logger = logging.getLogger(__name__)

ARITHMETIC_OPERATORS = {
    TokenKind.PLUS: ArithmeticOperator.ADD,
    TokenKind.MINUS: ArithmeticOperator.SUBTRACT,
    TokenKind.MULTIPLY: ArithmeticOperator.MULTIPLY,
    TokenKind.DIVIDE: ArithmeticOperator.DIVIDE,
}

UNARY_OPERATORS = {
    TokenKind.PLUS: UnaryOperator.PLUS,
    TokenKind.MINUS: UnaryOperator.MINUS,
}

RELATION_OPERATORS = {
    TokenKind.EQUALS: RelationOperator.EQUAL,
    TokenKind.NOT_EQUAL: RelationOperator.NOT_EQUAL,
    TokenKind.LESS: RelationOperator.LESS_THAN,
    TokenKind.LESS_EQUAL: RelationOperator.LESS_THAN_OR_EQUAL,
    TokenKind.GREATER: RelationOperator.GREATER_THAN,
    TokenKind.GREATER_EQUAL: RelationOperator.GREATER_THAN_OR_EQUAL,
}

LINE_END = (TokenKind.NEWLINE, TokenKind.EOF)


class Parser:
    """Recursive-descent parser producing :class:`~tinybasic.ast.Line` nodes.

    Faults are never recovered here: the first lexical or syntax error aborts
    the parse and propagates to the caller.
    """

    def __init__(self, source: str, max_lines: int = MAX_LINES):
        self.source = source
        self.max_lines = max_lines
        self.lexer = Lexer(source)
        self.keywords: Dict[str, Callable[[Token], Statement]] = {
            "PRINT": self.parse_print_statement,
            "INPUT": self.parse_input_statement,
            "IF": self.parse_if_statement,
            "LET": self.parse_let_statement,
            "GOTO": self.parse_goto_statement,
            "GOSUB": self.parse_gosub_statement,
            "REM": self.parse_rem_statement,
            "RETURN": lambda token: ReturnStatement(),
            "END": lambda token: EndStatement(),
            "RUN": lambda token: RunStatement(),
            "LIST": lambda token: ListStatement(),
            "NEW": lambda token: NewStatement(),
            "HELP": lambda token: HelpStatement(),
            "CLS": lambda token: ClsStatement(),
            "LOAD": lambda token: LoadStatement(),
            "SAVE": lambda token: SaveStatement(),
        }

    # Entry points

    def parse(self) -> List[Line]:
        lines = []
        while not self.check(TokenKind.EOF):
            if self.match(TokenKind.NEWLINE):
                continue
            lines.append(self.parse_line())
        logger.debug("Parsed %d line(s)", len(lines))
        return lines

    def parse_expression(self) -> Expression:
        """Parse the whole input as one expression, as typed at an INPUT prompt."""
        while self.match(TokenKind.NEWLINE):
            pass
        expression = self.expression()
        while self.match(TokenKind.NEWLINE):
            pass
        self.expect(TokenKind.EOF)
        return expression

    # Lines

    def parse_line(self) -> Line:
        start = self.lexer.offset()
        number = None
        if self.check(TokenKind.NUMBER):
            token = self.lexer.next()
            if not 0 <= token.value < self.max_lines:
                raise LineNumberOutOfRange(token)
            number = token.value

        if self.check(*LINE_END):
            statement = EmptyStatement()
        else:
            statement = self.parse_statement()

        end = self.lexer.offset()
        self.expect(*LINE_END)
        return Line(number, statement, self.source[start:end].strip())

    # Statements

    def parse_statement(self) -> Statement:
        token = self.expect(TokenKind.IDENTIFIER)
        handler = self.keywords.get(token.value)
        if handler is not None:
            return handler(token)
        if self.check(TokenKind.EQUALS):
            return self.parse_assignment(token)
        raise UnexpectedIdentifier(token.value, token)

    def parse_print_statement(self, keyword: Token) -> PrintStatement:
        expressions = [self.expression()]
        while self.match(TokenKind.COMMA):
            expressions.append(self.expression())
        return PrintStatement(expressions)

    def parse_input_statement(self, keyword: Token) -> InputStatement:
        variables = [Identifier(self.variable_name())]
        while self.match(TokenKind.COMMA):
            variables.append(Identifier(self.variable_name()))
        return InputStatement(variables)

    def parse_if_statement(self, keyword: Token) -> IfStatement:
        left = self.expression()
        operator = RELATION_OPERATORS[self.expect(*RELATION_OPERATORS).kind]
        right = self.expression()

        then = self.expect(TokenKind.IDENTIFIER)
        if then.value != "THEN":
            raise UnexpectedIdentifier(then.value, then)

        return IfStatement(Condition(operator, left, right), self.parse_statement())

    def parse_let_statement(self, keyword: Token) -> LetStatement:
        return self.parse_assignment(self.expect(TokenKind.IDENTIFIER))

    def parse_assignment(self, target: Token) -> LetStatement:
        name = self.check_variable_name(target)
        self.expect(TokenKind.EQUALS)
        return LetStatement(name, self.expression())

    def parse_goto_statement(self, keyword: Token) -> GotoStatement:
        return GotoStatement(self.expression())

    def parse_gosub_statement(self, keyword: Token) -> GosubStatement:
        return GosubStatement(self.expression())

    def parse_rem_statement(self, keyword: Token) -> RemStatement:
        self.lexer.skip_line()
        return RemStatement()

    # Expressions

    def expression(self) -> Expression:
        left = self.unary()

        token = self.lexer.peek()
        operator = ARITHMETIC_OPERATORS.get(token.kind)
        if operator is None:
            return left

        self.lexer.next()
        return self.combine(operator, left, self.expression())

    def combine(self, operator: ArithmeticOperator, left: Expression, right: Expression) -> BinaryExpression:
        # The right operand was parsed first and leans right; pull our operator
        # down its left spine until it meets something binding tighter.
        if isinstance(right, BinaryExpression) and operator.precedence >= right.operator.precedence:
            return BinaryExpression(
                right.operator,
                self.combine(operator, left, right.left),
                right.right,
            )
        return BinaryExpression(operator, left, right)

    def unary(self) -> Expression:
        operator = None
        if self.check(*UNARY_OPERATORS):
            operator = UNARY_OPERATORS[self.lexer.next().kind]

        token = self.expect(
            TokenKind.STRING,
            TokenKind.NUMBER,
            TokenKind.IDENTIFIER,
            TokenKind.LPAREN,
        )

        if token.kind is TokenKind.LPAREN:
            argument = self.expression()
            self.expect(TokenKind.RPAREN)
            return UnaryExpression(operator, argument)

        if token.kind is TokenKind.NUMBER:
            argument = NumberLiteral(token.value)
        elif token.kind is TokenKind.STRING:
            argument = StringLiteral(token.value)
        else:
            argument = Identifier(self.check_variable_name(token))

        if operator is None:
            return argument
        return UnaryExpression(operator, argument)

    # Helpers

    def variable_name(self) -> str:
        return self.check_variable_name(self.expect(TokenKind.IDENTIFIER))

    def check_variable_name(self, token: Token) -> str:
        if len(token.value) != 1:
            raise InvalidVariableName(token.value, token)
        return token.value

    def match(self, *kinds: TokenKind) -> bool:
        if self.check(*kinds):
            self.lexer.next()
            return True
        return False

    def check(self, *kinds: TokenKind) -> bool:
        return self.lexer.peek().kind in kinds

    def expect(self, *kinds: TokenKind) -> Token:
        token = self.lexer.peek()
        if token.kind not in kinds:
            raise UnexpectedToken(token)
        return self.lexer.next()


def parse(source: str) -> List[Line]:
    return Parser(source).parse()


def parse_expression(source: str) -> Expression:
    return Parser(source).parse_expression()


__all__ = ["Parser", "parse", "parse_expression"]
