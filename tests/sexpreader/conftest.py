import logging
from pathlib import Path

import pytest


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    return tmp_path / "source_test.lisp"


@pytest.fixture
def source_file_path(source_file: Path) -> str:
    return str(source_file)


@pytest.fixture
def sexpreader_logger():
    """Yield the package root logger, restoring its handlers and level after the
    test."""
    logger = logging.getLogger("sexpreader")
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)
