"""Shared test fixtures for chanlog test suite."""

import json

import pytest

from chanlog import dispatcher as _dispatcher_mod
from chanlog import output as _output_mod
from chanlog.channels import Channel
from chanlog.config import default_settings
from chanlog.dispatcher import LogDispatcher
from chanlog.registry import ChannelRegistry
from chanlog.sinks import Sinks


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: multi-threaded or subprocess tests")


# ---------------------------------------------------------------------------
# Recording sinks
# ---------------------------------------------------------------------------
class RecordingSinks(Sinks):
    """Sinks that remember every (sink_name, text) they receive."""

    def __init__(self):
        self.records = []
        super().__init__(
            info=lambda text: self.records.append(("info", text)),
            warning=lambda text: self.records.append(("warning", text)),
            error=lambda text: self.records.append(("error", text)),
        )

    def texts(self, sink=None):
        return [t for s, t in self.records if sink is None or s == sink]


@pytest.fixture
def sinks():
    return RecordingSinks()


@pytest.fixture
def registry():
    """A registry over the built-in channel set, all enabled."""
    return ChannelRegistry(Channel)


@pytest.fixture
def dispatcher(registry, sinks):
    """A dispatcher writing to recording sinks."""
    return LogDispatcher(registry, sinks=sinks)


# ---------------------------------------------------------------------------
# Module state
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _reset_module_state():
    """Reset the module-level dispatcher and CLI verbosity between tests."""
    old_dispatcher = _dispatcher_mod._dispatcher
    old_verbosity = _output_mod._verbosity
    yield
    _dispatcher_mod._dispatcher = old_dispatcher
    _output_mod._verbosity = old_verbosity


# ---------------------------------------------------------------------------
# Settings fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def settings_file(tmp_path):
    """Write a default .chanlog.json into tmp_path and return its path."""
    path = tmp_path / ".chanlog.json"
    path.write_text(json.dumps(default_settings(), indent=2), encoding="utf-8")
    return path


@pytest.fixture
def custom_settings_file(tmp_path):
    """A small project-specific channel table with one channel disabled."""
    settings = {
        "version": 1,
        "theme": "light",
        "channels": [
            {"id": 0, "name": "Net", "color": "#3366ff", "enabled": True},
            {"id": 1, "name": "Save", "color": "#00AA00", "enabled": False},
            {"id": 5, "name": "Assert", "color": "#FF0000", "enabled": True},
        ],
    }
    path = tmp_path / "custom.json"
    path.write_text(json.dumps(settings, indent=2), encoding="utf-8")
    return path
