"""
RuleStore -- the holder of the current RuleSet.

Readers call get() (or is_enabled()) from any number of threads; reload()
parses a new spec and swaps the snapshot reference. RuleSets are immutable
and the swap is a single attribute assignment, so a reader sees either the
old snapshot or the new one in full, never a mix. Readers take no lock.
Writers serialize on one lock so the generation counter and the debug
report stay consistent; the last writer wins.

Usage::

    store = RuleStore("app:*,!app:db")
    store.is_enabled("app:server")      # True
    store.reload("app:db")
    store.is_enabled("app:server")      # False

    # Or read the spec from the environment (DEBUG by default)
    store = RuleStore()
    os.environ["DEBUG"] = "*"
    store.reload()
"""

import os
import threading
from typing import Callable, List, Mapping, Optional

from .matcher import Decision, explain, is_enabled
from .rules import RuleSet, parse_spec


DEFAULT_ENV_VAR = 'DEBUG'

# Channel the store reports its own reloads on
STORE_CHANNEL = 'nsdebug:store'


class RuleStore:
    """Concurrency-safe holder of the current RuleSet.

    Args:
        spec: Initial spec. None reads it from the configuration source.
        env_var: Environment variable the spec is read from
        environ: Mapping to read env_var from (default: os.environ)
    """

    def __init__(
        self,
        spec: Optional[str] = None,
        *,
        env_var: str = DEFAULT_ENV_VAR,
        environ: Mapping[str, str] = None,
    ):
        self.env_var = env_var
        self.environ = environ if environ is not None else os.environ
        self._write_lock = threading.Lock()
        self._listeners: List[Callable[[RuleSet], None]] = []
        self._generation = 0
        if spec is None:
            spec = self.read_source()
        self._rules: RuleSet = parse_spec(spec)

    def read_source(self) -> str:
        """Read the raw spec from the configuration source."""
        return self.environ.get(self.env_var, '')

    def get(self) -> RuleSet:
        """Return the current snapshot."""
        return self._rules

    def reload(self, spec: Optional[str] = None) -> RuleSet:
        """Replace the current snapshot.

        Args:
            spec: New spec. None re-reads the configuration source.

        Returns:
            The RuleSet now in effect
        """
        with self._write_lock:
            if spec is None:
                spec = self.read_source()
            rules = parse_spec(spec)
            self._rules = rules
            self._generation += 1
            listeners = list(self._listeners)
        # Called outside the lock; listeners may read the store
        for listener in listeners:
            listener(rules)
        return rules

    def subscribe(self, listener: Callable[[RuleSet], None]) -> None:
        """Call listener(rules) after every reload."""
        with self._write_lock:
            self._listeners.append(listener)

    def is_enabled(self, channel: str) -> bool:
        """Match a channel against the current snapshot."""
        return is_enabled(channel, self._rules)

    def explain(self, channel: str) -> Decision:
        """Explain the decision for a channel against the current snapshot."""
        return explain(channel, self._rules)

    @property
    def generation(self) -> int:
        """Number of reloads performed so far."""
        return self._generation

    @property
    def source(self) -> str:
        """Spec string of the current snapshot."""
        return self._rules.source

    def __repr__(self):
        return (f"RuleStore(source={self.source!r}, env_var={self.env_var!r}, "
                f"generation={self._generation})")


# =============================================================================
# Module-level default store
# =============================================================================

_store: Optional[RuleStore] = None


def init_store(spec: Optional[str] = None, env_var: str = DEFAULT_ENV_VAR,
               environ: Mapping[str, str] = None) -> RuleStore:
    """Build and install the module-level default RuleStore.

    The package calls this once at import (process start). Call it again
    to switch the default store to another spec or env var; debuggers bound
    without an explicit store pick it up on their next call.

    Returns:
        The installed RuleStore
    """
    # Lazy import to avoid circular dependency
    from .gate import report_reloads

    global _store
    _store = RuleStore(spec, env_var=env_var, environ=environ)
    report_reloads(_store)
    return _store


def install_store(store: RuleStore) -> RuleStore:
    """Install an existing RuleStore as the module-level default."""
    global _store
    _store = store
    return store


def get_store() -> RuleStore:
    """Get the module-level default RuleStore."""
    if _store is None:
        raise RuntimeError("no default RuleStore installed; call init_store()")
    return _store


def reload_settings(spec: Optional[str] = None) -> RuleSet:
    """Reload the default store (re-reading its env var when spec is None)."""
    return get_store().reload(spec)
