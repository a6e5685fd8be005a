"""
Tests for filter_lib.store -- RuleStore snapshots, reload and the default store.

The stress tests at the bottom are marked slow: they hammer a store from
many reader threads while writers reload it, and check every read saw a
whole snapshot.
"""

import threading

import pytest

from nsdebug.lib.filter_lib import store as _store_mod
from nsdebug.lib.filter_lib.matcher import is_enabled
from nsdebug.lib.filter_lib.rules import RuleSet
from nsdebug.lib.filter_lib.store import (
    STORE_CHANNEL, RuleStore, get_store, init_store, install_store,
    reload_settings,
)


# =============================================================================
# Construction and get()
# =============================================================================

class TestConstruction:
    """Test building a RuleStore."""

    def test_explicit_spec(self, make_store):
        store = make_store("app:*")
        assert store.is_enabled("app:server") is True
        assert store.source == "app:*"

    def test_reads_env_when_spec_is_none(self, make_store):
        store = make_store(env={"DEBUG": "db"})
        assert store.is_enabled("db") is True

    def test_custom_env_var(self, make_store):
        store = make_store(env={"DEBUG": "db", "APP_DEBUG": "api"},
                           env_var="APP_DEBUG")
        assert store.is_enabled("api") is True
        assert store.is_enabled("db") is False

    def test_missing_env_disables_everything(self, make_store):
        store = make_store(env={})
        assert store.get().is_empty
        assert store.is_enabled("x") is False

    def test_defaults_to_os_environ(self, clean_env):
        clean_env.setenv("DEBUG", "from:env")
        assert RuleStore().is_enabled("from:env") is True

    def test_get_returns_same_snapshot_until_reload(self, make_store):
        store = make_store("app")
        assert store.get() is store.get()
        assert isinstance(store.get(), RuleSet)

    def test_repr(self, make_store):
        assert "app" in repr(make_store("app"))


# =============================================================================
# reload()
# =============================================================================

class TestReload:
    """Test reload() semantics."""

    def test_reload_swaps_snapshot(self, make_store):
        store = make_store("module1")
        assert store.is_enabled("module1") is True
        assert store.is_enabled("module2") is False

        store.reload("module2")
        assert store.is_enabled("module1") is False
        assert store.is_enabled("module2") is True

    def test_old_snapshot_untouched(self, make_store):
        """A reload builds a new RuleSet; held snapshots don't change."""
        store = make_store("module1")
        before = store.get()
        after = store.reload("module2")
        assert before is not after
        assert before.include_keys == {"module1"}
        assert store.get() is after

    def test_reload_rereads_source(self):
        env = {"DEBUG": "first"}
        store = RuleStore(environ=env)
        env["DEBUG"] = "second"
        assert store.is_enabled("second") is False
        store.reload()
        assert store.is_enabled("second") is True
        assert store.is_enabled("first") is False

    def test_reload_with_env_unset(self):
        env = {"DEBUG": "*"}
        store = RuleStore(environ=env)
        del env["DEBUG"]
        store.reload()
        assert store.is_enabled("anything") is False

    def test_reload_idempotent(self, make_store):
        """Reloading twice with the same spec matches like reloading once."""
        once = make_store("")
        once.reload("app:*,!app:db,cache")
        twice = make_store("")
        twice.reload("app:*,!app:db,cache")
        twice.reload("app:*,!app:db,cache")
        for channel in ("app", "app:x", "app:db", "cache", "cache:x", "zzz"):
            assert once.is_enabled(channel) == twice.is_enabled(channel)
        assert once.get() == twice.get()

    def test_generation_counts_reloads(self, make_store):
        store = make_store("a")
        assert store.generation == 0
        store.reload("b")
        store.reload("c")
        assert store.generation == 2

    def test_listeners_called_after_swap(self, make_store):
        store = make_store("a")
        seen = []
        store.subscribe(lambda rules: seen.append((rules.source, store.source)))
        store.reload("b")
        assert seen == [("b", "b")]

    def test_explain_uses_current_snapshot(self, make_store):
        store = make_store("app:*")
        assert store.explain("app:x").enabled is True
        store.reload("!app:*")
        assert store.explain("app:x").reason == "negated"


# =============================================================================
# Module-level default store
# =============================================================================

class TestDefaultStore:
    """Test init_store / get_store / reload_settings."""

    def test_init_store_installs(self):
        store = init_store("app", environ={})
        assert get_store() is store
        assert get_store().is_enabled("app") is True

    def test_init_store_reads_env(self):
        init_store(env_var="MY_DEBUG", environ={"MY_DEBUG": "x:*"})
        assert get_store().is_enabled("x:y") is True

    def test_reload_settings(self, clean_env):
        clean_env.setenv("DEBUG", "module1")
        init_store()
        assert get_store().is_enabled("module1") is True
        clean_env.setenv("DEBUG", "module2")
        reload_settings()
        assert get_store().is_enabled("module1") is False
        assert get_store().is_enabled("module2") is True

    def test_install_store(self, make_store):
        store = make_store("q")
        assert install_store(store) is store
        assert get_store() is store

    def test_get_store_without_install(self):
        _store_mod._store = None
        with pytest.raises(RuntimeError):
            get_store()

    def test_reloads_reported_on_store_channel(self, capsys):
        init_store(STORE_CHANNEL, environ={})
        reload_settings(f"{STORE_CHANNEL},app")
        err = capsys.readouterr().err
        assert STORE_CHANNEL in err
        assert "generation 1" in err

    def test_reloads_silent_when_channel_off(self, capsys):
        init_store("app", environ={})
        reload_settings("app:*")
        assert capsys.readouterr().err == ""


# =============================================================================
# Concurrency
# =============================================================================

# Two specs that disagree on every sample channel. A reader that saw a torn
# snapshot (excludes from one, includes from the other) would get a
# decision matching neither.
SPEC_A = "alpha:*,!beta:*"
SPEC_B = "beta:*,!alpha:*"
SAMPLE_CHANNELS = ("alpha:x", "beta:x")


@pytest.mark.slow
class TestConcurrentReload:
    """Readers never observe a partially-updated rule set."""

    def test_readers_see_whole_snapshots(self, make_store):
        store = make_store(SPEC_A)
        stop = threading.Event()
        errors = []

        def reader():
            while not stop.is_set():
                rules = store.get()
                result = tuple(is_enabled(c, rules) for c in SAMPLE_CHANNELS)
                if result not in ((True, False), (False, True)):
                    errors.append((rules.source, result))

        def writer():
            for i in range(2000):
                store.reload(SPEC_A if i % 2 else SPEC_B)

        readers = [threading.Thread(target=reader) for _ in range(8)]
        writers = [threading.Thread(target=writer) for _ in range(2)]
        for t in readers + writers:
            t.start()
        for t in writers:
            t.join()
        stop.set()
        for t in readers:
            t.join()

        assert errors == []
        assert store.generation == 4000
        assert store.source in (SPEC_A, SPEC_B)

    def test_snapshot_matches_its_own_source(self, make_store):
        """Every snapshot a reader sees decides consistently with its spec."""
        store = make_store(SPEC_A)
        stop = threading.Event()
        mismatches = []

        def reader():
            while not stop.is_set():
                rules = store.get()
                expect_alpha = rules.source == SPEC_A
                if is_enabled("alpha:x", rules) != expect_alpha:
                    mismatches.append(rules.source)

        threads = [threading.Thread(target=reader) for _ in range(4)]
        for t in threads:
            t.start()
        for i in range(2000):
            store.reload(SPEC_B if i % 2 == 0 else SPEC_A)
        stop.set()
        for t in threads:
            t.join()

        assert mismatches == []
