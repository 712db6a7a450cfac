"""Tests for httpet.log — root logger setup."""

import logging
from collections.abc import Iterator

import pytest

from httpet.log import setup_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    quiet = {name: logging.getLogger(name).level for name in ("pounce", "asyncio")}
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, saved in quiet.items():
        logging.getLogger(name).setLevel(saved)


class TestSetupLogging:
    def test_info_by_default(self) -> None:
        setup_logging()
        assert logging.getLogger().level == logging.INFO
        assert logging.getLogger("pounce").level == logging.WARNING

    def test_debug(self) -> None:
        logging.getLogger("pounce").setLevel(logging.NOTSET)
        setup_logging(debug=True)
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("pounce").level == logging.NOTSET
