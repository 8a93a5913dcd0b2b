import pytest
from emitkit import EventEmitter


@pytest.fixture(autouse=True)
def clean_emitter_environment(monkeypatch):
    """AUTOUSE: Removes emitter settings from the environment so defaults apply
    unless a test sets them explicitly.
    """
    monkeypatch.delenv("EMITKIT_MAX_LISTENERS", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    yield


@pytest.fixture
def emitter() -> EventEmitter:
    """An emitter without an allow-list and with the default listener limit."""
    return EventEmitter()
