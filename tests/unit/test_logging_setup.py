import logging

import pytest
from rich.logging import RichHandler

from postcorpus.logging_setup import configure_logging, resolve_level


@pytest.fixture
def package_logger():
    logger = logging.getLogger("postcorpus")
    saved_handlers, saved_level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = saved_handlers
    logger.setLevel(saved_level)


def _rich_handlers(logger):
    return [handler for handler in logger.handlers if isinstance(handler, RichHandler)]


def test_configure_logging_is_idempotent(package_logger, monkeypatch):
    monkeypatch.delenv("POSTCORPUS_LOG_LEVEL", raising=False)

    configure_logging()
    configure_logging()

    assert len(_rich_handlers(package_logger)) == 1
    assert package_logger.level == logging.INFO


def test_root_logger_is_left_alone(package_logger):
    root_handlers = list(logging.getLogger().handlers)

    configure_logging()

    assert logging.getLogger().handlers == root_handlers


def test_level_comes_from_environment(package_logger, monkeypatch):
    monkeypatch.setenv("POSTCORPUS_LOG_LEVEL", "debug")

    configure_logging()

    assert package_logger.level == logging.DEBUG


def test_explicit_level_wins_over_environment(package_logger, monkeypatch):
    monkeypatch.setenv("POSTCORPUS_LOG_LEVEL", "debug")

    configure_logging("warning")

    assert package_logger.level == logging.WARNING


@pytest.mark.parametrize("name", ["chatty", "", "  "])
def test_unknown_level_falls_back_to_info(name):
    assert resolve_level(name) == logging.INFO
