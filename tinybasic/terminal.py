"""Host I/O seen by the interpreter.

The interpreter only ever talks to a :class:`TerminalIO`. Two implementations
ship with the package: :class:`ConsoleIO` drives a local terminal through
rich and keeps programs in a file, :class:`HostIO` forwards every call to
callbacks supplied by an embedding application.
"""

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Optional, Union

from rich.console import Console

from tinybasic.errors import NotImplementedStatement

logger = logging.getLogger(__name__)


class TerminalIO(ABC):
    # Whether the session loop should write back each line it reads.
    echo = False

    @abstractmethod
    def display(self, text: str):
        """Write ``text`` with no line break."""

    def display_line(self, text: str):
        self.display(text)
        self.display("\n")

    @abstractmethod
    def prompt(self, text: str):
        """Show ``text`` as the prompt for the next :meth:`read_line`."""

    @abstractmethod
    async def read_line(self) -> str:
        """Return one line of input. Raises ``EOFError`` once input is closed."""

    @abstractmethod
    async def clear_screen(self):
        ...

    @abstractmethod
    async def load_program(self) -> Optional[str]:
        """Return previously saved program text, or ``None`` if there is none."""

    @abstractmethod
    async def save_program(self, text: str):
        ...


class ConsoleIO(TerminalIO):
    def __init__(self, console: Optional[Console] = None, path: Union[str, Path] = "program.bas", upper: bool = True):
        self.console = console if console is not None else Console()
        self.path = Path(path)
        self.upper = upper
        self._prompt = ""

    def display(self, text: str):
        self.console.print(text, end="", markup=False, highlight=False)

    def display_line(self, text: str):
        self.console.print(text, markup=False, highlight=False)

    def prompt(self, text: str):
        self._prompt = text

    async def read_line(self) -> str:
        line = await asyncio.to_thread(self.console.input, self._prompt, markup=False)
        return line.upper() if self.upper else line

    async def clear_screen(self):
        self.console.clear()

    async def load_program(self) -> Optional[str]:
        if not self.path.exists():
            logger.warning("No saved program at %s", self.path)
            return None
        return await asyncio.to_thread(self.path.read_text)

    async def save_program(self, text: str):
        await asyncio.to_thread(self.path.write_text, text + "\n")
        logger.info("Saved program to %s", self.path)


Callback = Callable[..., Any]


async def _call(callback: Callback, *args):
    result = callback(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class HostIO(TerminalIO):
    """Delegates to an embedding host. Callbacks may be plain or async."""

    echo = True

    def __init__(
        self,
        write: Callable[[str], Any],
        read_line: Callback,
        clear: Optional[Callback] = None,
        set_prompt: Optional[Callable[[str], Any]] = None,
        load: Optional[Callback] = None,
        save: Optional[Callback] = None,
    ):
        self.write = write
        self.read = read_line
        self.clear = clear
        self.set_prompt = set_prompt
        self.load = load
        self.save = save

    def display(self, text: str):
        self.write(text)

    def prompt(self, text: str):
        if self.set_prompt is not None:
            self.set_prompt(text)

    async def read_line(self) -> str:
        line = await _call(self.read)
        if line is None:
            raise EOFError
        return line.rstrip("\n")

    async def clear_screen(self):
        if self.clear is None:
            raise NotImplementedStatement("CLS")
        await _call(self.clear)

    async def load_program(self) -> Optional[str]:
        if self.load is None:
            raise NotImplementedStatement("LOAD")
        return await _call(self.load)

    async def save_program(self, text: str):
        if self.save is None:
            raise NotImplementedStatement("SAVE")
        await _call(self.save, text)
