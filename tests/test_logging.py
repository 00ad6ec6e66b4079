import logging

from rich.logging import RichHandler

from tinybasic.logging import Logger


def close(logger):
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


def test_console_only_by_default():
    logger = Logger("tinybasic-test-console").get_logger()
    try:
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.level == logging.WARNING
    finally:
        close(logger)


def test_file_handler_receives_debug_records(tmp_path):
    path = tmp_path / "tinybasic.log"
    logger = Logger("tinybasic-test-file", filename=str(path), level="INFO").get_logger()
    try:
        logger.debug("GOTO line %d", 40)
        for handler in logger.handlers:
            handler.flush()
        assert "GOTO line 40" in path.read_text()
    finally:
        close(logger)


def test_reconfiguring_does_not_duplicate_handlers():
    Logger("tinybasic-test-twice")
    logger = Logger("tinybasic-test-twice").get_logger()
    try:
        assert len(logger.handlers) == 1
    finally:
        close(logger)
