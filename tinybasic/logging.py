import logging
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler


class Logger:
    """Configures the ``tinybasic`` logger tree.

    Records go to a rich console handler and, when ``filename`` is given, to
    a plain-text log file as well.
    """

    def __init__(
        self,
        name: str = "tinybasic",
        filename: Optional[str] = None,
        level: Union[int, str] = logging.WARNING,
        console: Optional[Console] = None,
    ):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)

        # Remove old handlers to avoid duplicates
        if self.logger.hasHandlers():
            self.logger.handlers.clear()

        console_handler = RichHandler(
            console=console if console is not None else Console(stderr=True),
            rich_tracebacks=True,
            show_time=True,
            show_level=True,
            show_path=False,
        )
        console_handler.setLevel(level)
        self.logger.addHandler(console_handler)

        if filename is not None:
            file_handler = logging.FileHandler(filename, mode="w")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            )
            self.logger.addHandler(file_handler)
            # Keep debug records flowing to the file even when the console is quieter.
            self.logger.setLevel(logging.DEBUG)

    def get_logger(self):
        return self.logger


__all__ = ["Logger"]
