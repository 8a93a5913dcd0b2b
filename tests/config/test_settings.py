import math

import pytest
from emitkit.settings import Settings


# Fixture to provide a Settings instance for each test
@pytest.fixture
def settings():
    return Settings()


@pytest.mark.parametrize(
    "test_value, expected_value",
    [
        ("25", 25),
        (" 3 ", 3),
        ("inf", math.inf),
        ("Infinity", math.inf),
        ("UNLIMITED", math.inf),
    ],
)
def test_get_max_listeners_set(settings, monkeypatch, test_value, expected_value):
    """Test the max listeners getter when EMITKIT_MAX_LISTENERS is set."""
    monkeypatch.setenv("EMITKIT_MAX_LISTENERS", test_value)
    assert settings.get_max_listeners() == expected_value


@pytest.mark.parametrize("test_value", [None, "", "   "])
def test_get_max_listeners_default(settings, monkeypatch, test_value):
    """Test the max listeners getter falls back to the default when unset or blank."""
    if test_value is not None:
        monkeypatch.setenv("EMITKIT_MAX_LISTENERS", test_value)
    assert settings.get_max_listeners() == 10
    assert settings.get_max_listeners(default=4) == 4


def test_get_max_listeners_invalid(settings, monkeypatch):
    monkeypatch.setenv("EMITKIT_MAX_LISTENERS", "lots")
    with pytest.raises(ValueError, match="EMITKIT_MAX_LISTENERS environment variable must be an integer"):
        settings.get_max_listeners()


def test_get_log_level(settings, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert settings.get_log_level() == "DEBUG"


def test_get_log_level_default(settings):
    assert settings.get_log_level() == "INFO"
    assert settings.get_log_level(default="error") == "ERROR"


@pytest.mark.parametrize("test_value", ["0", "-2"])
def test_get_max_listeners_below_one(settings, monkeypatch, test_value):
    monkeypatch.setenv("EMITKIT_MAX_LISTENERS", test_value)
    with pytest.raises(ValueError, match="EMITKIT_MAX_LISTENERS environment variable must be at least 1"):
        settings.get_max_listeners()


def test_emitter_reports_bad_environment_value(monkeypatch):
    from emitkit import EventEmitter

    monkeypatch.setenv("EMITKIT_MAX_LISTENERS", "0")
    with pytest.raises(ValueError, match="EMITKIT_MAX_LISTENERS"):
        EventEmitter()
