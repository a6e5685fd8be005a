"""Shared test fixtures for nsdebug test suite."""

import io
from datetime import datetime

import pytest

from nsdebug.lib.filter_lib import RuleStore, StreamSink
from nsdebug.lib.filter_lib import store as _store_mod


FIXED_NOW = datetime(2026, 10, 18, 12, 34, 56, 789000)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "slow: concurrency stress tests (run with --all)")


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Run every test without DEBUG / NSDEBUG_ENV_VAR from the real shell."""
    monkeypatch.delenv("DEBUG", raising=False)
    monkeypatch.delenv("NSDEBUG_ENV_VAR", raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def _restore_default_store():
    """Tests may install their own default store; put the old one back."""
    old = _store_mod._store
    yield
    _store_mod._store = old


# ---------------------------------------------------------------------------
# Stores and sinks
# ---------------------------------------------------------------------------
@pytest.fixture
def make_store():
    """Factory for a RuleStore reading from a private environ dict."""
    def _make(spec=None, env=None, env_var="DEBUG"):
        return RuleStore(spec, env_var=env_var, environ=dict(env or {}))
    return _make


class RecordingSink:
    """Sink that keeps (channel, message) pairs instead of writing them."""

    def __init__(self):
        self.records = []

    def __call__(self, channel, message):
        self.records.append((channel, message))

    @property
    def messages(self):
        return [m for _, m in self.records]


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def buf():
    """A StringIO buffer for capturing output."""
    return io.StringIO()


@pytest.fixture
def stream_sink(buf):
    """A StreamSink writing to buf with a frozen clock."""
    return StreamSink(stream=buf, clock=lambda: FIXED_NOW)
