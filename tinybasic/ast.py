"""Syntax tree for tinybasic programs.

Nodes are plain dataclasses; they compare structurally and carry no
behaviour. Every node owns its children outright: nothing in a tree is
shared and nothing points back up.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


class UnaryOperator(Enum):
    PLUS = "+"
    MINUS = "-"


class ArithmeticOperator(Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    @property
    def precedence(self) -> int:
        if self in (ArithmeticOperator.MULTIPLY, ArithmeticOperator.DIVIDE):
            return 2
        return 1


class RelationOperator(Enum):
    EQUAL = "="
    NOT_EQUAL = "<>"
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="


# Expressions


@dataclass
class NumberLiteral:
    value: int


@dataclass
class StringLiteral:
    value: str


@dataclass
class Identifier:
    name: str


@dataclass
class UnaryExpression:
    """Signed operand. With no operator it marks a parenthesised group."""

    operator: Optional[UnaryOperator]
    argument: Expression


@dataclass
class BinaryExpression:
    operator: ArithmeticOperator
    left: Expression
    right: Expression


Expression = Union[NumberLiteral, StringLiteral, Identifier, UnaryExpression, BinaryExpression]


@dataclass
class Condition:
    operator: RelationOperator
    left: Expression
    right: Expression


# Statements


@dataclass
class IfStatement:
    condition: Condition
    then: Statement


@dataclass
class PrintStatement:
    expressions: List[Expression] = field(default_factory=list)


@dataclass
class InputStatement:
    variables: List[Identifier] = field(default_factory=list)


@dataclass
class LetStatement:
    name: str
    value: Expression


@dataclass
class GotoStatement:
    location: Expression


@dataclass
class GosubStatement:
    location: Expression


@dataclass
class ReturnStatement:
    pass


@dataclass
class EndStatement:
    pass


@dataclass
class NewStatement:
    pass


@dataclass
class RunStatement:
    pass


@dataclass
class ListStatement:
    pass


@dataclass
class HelpStatement:
    pass


@dataclass
class ClsStatement:
    pass


@dataclass
class RemStatement:
    pass


@dataclass
class LoadStatement:
    pass


@dataclass
class SaveStatement:
    pass


@dataclass
class EmptyStatement:
    pass


Statement = Union[
    IfStatement,
    PrintStatement,
    InputStatement,
    LetStatement,
    GotoStatement,
    GosubStatement,
    ReturnStatement,
    EndStatement,
    NewStatement,
    RunStatement,
    ListStatement,
    HelpStatement,
    ClsStatement,
    RemStatement,
    LoadStatement,
    SaveStatement,
    EmptyStatement,
]


@dataclass
class Line:
    """A parsed source line. ``number`` is ``None`` for a direct command."""

    number: Optional[int]
    statement: Statement
    source: str = ""

    @property
    def is_stored(self) -> bool:
        return self.number is not None
