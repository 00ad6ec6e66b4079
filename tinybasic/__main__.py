import asyncio
import logging
import sys
from argparse import ArgumentParser
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.traceback import install

from tinybasic.errors import BasicError
from tinybasic.interpreter import Interpreter
from tinybasic.logging import Logger
from tinybasic.terminal import ConsoleIO

logger = logging.getLogger("tinybasic")


def options(argv):
    cmd = ArgumentParser(prog="tinybasic", description="Tiny line-numbered BASIC interpreter")
    cmd.add_argument("file", nargs="?", help="Program to load and RUN instead of starting a session")
    cmd.add_argument("--program", default="program.bas", help="File used by LOAD and SAVE (default: %(default)s)")
    cmd.add_argument("--log-file", default=None, help="Also write debug logging to this file")
    cmd.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console log level (default: %(default)s)",
    )
    return cmd.parse_args(argv)


async def run_file(interpreter: Interpreter, path: Path):
    interpreter.load_program(path.read_text())
    await interpreter.run()


def main(argv=None) -> int:
    args = options(sys.argv[1:] if argv is None else argv)

    install()
    console = Console()
    Logger("tinybasic", filename=args.log_file, level=args.log_level)

    interpreter = Interpreter(ConsoleIO(console, path=args.program))

    try:
        if args.file:
            asyncio.run(run_file(interpreter, Path(args.file)))
        else:
            console.print(Panel.fit("tinybasic", style="bold blue"))
            console.print("Type HELP for the list of statements, Ctrl-D to leave.")
            asyncio.run(interpreter.execute())
    except BasicError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1
    except KeyboardInterrupt:
        console.print("\nGoodbye!")
    except Exception:
        logger.exception("Fatal error")
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
