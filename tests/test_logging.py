import io
import logging
from unittest.mock import MagicMock, patch

import pytest
from emitkit import EventEmitter
from emitkit.core.logging import DEFAULT_LOG_LEVEL, LOG_FORMAT, PACKAGE_LOGGER, EmitkitHandler, setup_logging


# Restore the package and root loggers between tests
@pytest.fixture(autouse=True)
def reset_logging():
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    root = logging.getLogger()
    original = (package_logger.handlers[:], package_logger.level, package_logger.propagate)
    original_root_handlers = root.handlers[:]

    yield

    for handler in package_logger.handlers:
        if isinstance(handler, EmitkitHandler):
            handler.close()
    package_logger.handlers[:] = original[0]
    package_logger.setLevel(original[1])
    package_logger.propagate = original[2]
    root.handlers[:] = original_root_handlers


@patch("emitkit.core.logging.Settings")
def test_level_from_settings(MockSettings):
    """The package logger level follows LOG_LEVEL from Settings."""
    MockSettings.return_value.get_log_level.return_value = "DEBUG"

    package_logger = setup_logging(stream=io.StringIO())

    assert package_logger is logging.getLogger(PACKAGE_LOGGER)
    assert package_logger.level == logging.DEBUG
    MockSettings.return_value.get_log_level.assert_called_once_with(default=DEFAULT_LOG_LEVEL)


@patch("emitkit.core.logging.Settings")
def test_explicit_level_wins(MockSettings):
    MockSettings.return_value.get_log_level.return_value = "DEBUG"

    package_logger = setup_logging(level="warning", stream=io.StringIO())

    assert package_logger.level == logging.WARNING
    MockSettings.assert_not_called()


def test_invalid_level_falls_back_to_info(capsys):
    package_logger = setup_logging(level="chatty", stream=io.StringIO())

    assert "WARNING: Invalid LOG_LEVEL 'CHATTY'" in capsys.readouterr().err
    assert package_logger.level == logging.INFO


def test_root_logger_untouched():
    root = logging.getLogger()
    sentinel_handler = logging.NullHandler()
    root.addHandler(sentinel_handler)
    root_level = root.level

    setup_logging(level="DEBUG", stream=io.StringIO())

    assert sentinel_handler in root.handlers
    assert root.level == root_level
    assert not [h for h in root.handlers if isinstance(h, EmitkitHandler)]


def test_repeated_calls_replace_own_handler_only():
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    foreign_handler = logging.NullHandler()
    package_logger.addHandler(foreign_handler)

    setup_logging(level="INFO", stream=io.StringIO())
    setup_logging(level="INFO", stream=io.StringIO())

    own = [h for h in package_logger.handlers if isinstance(h, EmitkitHandler)]
    assert len(own) == 1
    assert own[0].formatter._fmt == LOG_FORMAT
    assert foreign_handler in package_logger.handlers


def test_propagate_is_only_changed_when_requested():
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.propagate = True

    setup_logging(level="INFO", stream=io.StringIO())
    assert package_logger.propagate is True

    setup_logging(level="INFO", stream=io.StringIO(), propagate=False)
    assert package_logger.propagate is False


def test_emitter_records_reach_the_stream():
    stream = io.StringIO()
    setup_logging(level="DEBUG", stream=stream, propagate=False)

    EventEmitter().on("ready", MagicMock(name="on_ready"))

    output = stream.getvalue()
    assert "emitkit.core.emitter - DEBUG - Added listener" in output
    assert "'ready'" in output


def test_level_filters_emitter_debug_records():
    stream = io.StringIO()
    setup_logging(level="INFO", stream=stream, propagate=False)

    EventEmitter().on("ready", MagicMock())

    assert "Added listener" not in stream.getvalue()
