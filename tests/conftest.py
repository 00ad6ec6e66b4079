import asyncio
from typing import List, Optional

import pytest

from tinybasic.interpreter import Interpreter
from tinybasic.parser import parse
from tinybasic.terminal import TerminalIO


class ScriptedIO(TerminalIO):
    """In-memory terminal fed from a list of input lines."""

    def __init__(self, inputs: Optional[List[str]] = None):
        self.inputs = list(inputs or [])
        self.buffer = ""
        self.prompts: List[str] = []
        self.cleared = 0
        self.saved: Optional[str] = None
        self.stored_program: Optional[str] = None

    @property
    def lines(self) -> List[str]:
        return self.buffer.splitlines()

    def display(self, text: str):
        self.buffer += text

    def prompt(self, text: str):
        self.prompts.append(text)

    async def read_line(self) -> str:
        if not self.inputs:
            raise EOFError
        return self.inputs.pop(0)

    async def clear_screen(self):
        self.cleared += 1

    async def load_program(self) -> Optional[str]:
        return self.stored_program

    async def save_program(self, text: str):
        self.saved = text


def run(coroutine):
    return asyncio.run(coroutine)


def evaluate(interpreter, *sources):
    """Evaluate each source line by line, letting the first fault propagate."""
    for source in sources:
        for line in parse(source):
            run(interpreter.eval(line))


@pytest.fixture
def io():
    return ScriptedIO()


@pytest.fixture
def interpreter(io):
    return Interpreter(io)
