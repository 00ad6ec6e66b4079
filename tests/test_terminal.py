import asyncio
import io as stdio

import pytest
from rich.console import Console

from tests.conftest import evaluate, run
from tinybasic.errors import NotImplementedStatement
from tinybasic.interpreter import Interpreter
from tinybasic.terminal import ConsoleIO, HostIO


def make_console():
    return Console(file=stdio.StringIO(), width=200)


def test_console_display_is_plain_text():
    console = make_console()
    terminal = ConsoleIO(console)

    terminal.display("A [b]")
    terminal.display_line(" B")

    assert console.file.getvalue() == "A [b] B\n"


def test_console_read_line_uses_prompt_and_upper_cases(monkeypatch):
    console = make_console()
    seen = []

    def fake_input(prompt, markup=True):
        seen.append(prompt)
        return 'print "hi"'

    monkeypatch.setattr(console, "input", fake_input)
    terminal = ConsoleIO(console)
    terminal.prompt("> ")

    assert run(terminal.read_line()) == 'PRINT "HI"'
    assert seen == ["> "]


def test_console_save_and_load(tmp_path):
    path = tmp_path / "program.bas"
    terminal = ConsoleIO(make_console(), path=path)

    assert run(terminal.load_program()) is None

    run(terminal.save_program('10 PRINT "X"'))
    assert path.read_text() == '10 PRINT "X"\n'
    assert run(terminal.load_program()) == '10 PRINT "X"\n'


def test_host_io_forwards_to_callbacks():
    written = []
    inputs = ["RUN\n"]
    prompts = []
    terminal = HostIO(write=written.append, read_line=lambda: inputs.pop(0), set_prompt=prompts.append)

    terminal.prompt("> ")
    terminal.display_line("READY")

    assert run(terminal.read_line()) == "RUN"
    assert written == ["READY", "\n"]
    assert prompts == ["> "]


def test_host_io_awaits_async_callbacks():
    saved = []

    async def read():
        await asyncio.sleep(0)
        return "10 END"

    async def save(text):
        saved.append(text)

    terminal = HostIO(write=print, read_line=read, save=save)

    assert run(terminal.read_line()) == "10 END"
    run(terminal.save_program("10 END"))
    assert saved == ["10 END"]


def test_host_io_none_means_end_of_input():
    terminal = HostIO(write=print, read_line=lambda: None)

    with pytest.raises(EOFError):
        run(terminal.read_line())


def test_host_io_without_persistence_rejects_load_and_save():
    written = []
    interpreter = Interpreter(HostIO(write=written.append, read_line=lambda: None))

    with pytest.raises(NotImplementedStatement) as excinfo:
        evaluate(interpreter, "LOAD")
    assert excinfo.value.name == "LOAD"

    with pytest.raises(NotImplementedStatement):
        evaluate(interpreter, "SAVE")

    with pytest.raises(NotImplementedStatement):
        evaluate(interpreter, "CLS")


def test_host_session_echoes_input():
    written = []
    inputs = ['10 PRINT "HI"', "RUN"]
    terminal = HostIO(write=written.append, read_line=lambda: inputs.pop(0) if inputs else None)

    run(Interpreter(terminal).execute())

    assert "".join(written).splitlines() == ["Ready!", ':10 PRINT "HI"', ":RUN", "HI"]
