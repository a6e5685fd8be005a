"""
Debugger -- a callable bound to one channel.

Each call asks the store's *current* snapshot whether the channel is
enabled before doing anything else, so a reload takes effect on the very
next call and a disabled channel costs one lookup and a boolean check. No
formatting and no I/O happen for disabled channels.

Usage::

    debug = Debugger("app:server")
    debug("listening on port %d", port)

    if debug.enabled:
        debug("state dump: %r", expensive_dump())
"""

from typing import Any, Callable, Optional

from .rules import SEPARATOR
from .sink import default_sink
from .store import STORE_CHANNEL, RuleStore, get_store


Sink = Callable[[str, str], None]


class Debugger:
    """Emits printf-style debug messages on one channel.

    Args:
        channel: Channel name like "app:server:http"
        store: RuleStore to consult. None uses the module-level default
            store, looked up on every call.
        sink: Callable(channel, message) that writes the line
            (default: timestamped lines on stderr)
    """

    __slots__ = ('channel', 'store', 'sink')

    def __init__(self, channel: str, store: Optional[RuleStore] = None,
                 sink: Optional[Sink] = None):
        if not isinstance(channel, str):
            raise TypeError(
                f"channel must be a str, not {type(channel).__name__}")
        self.channel = channel
        self.store = store
        self.sink = sink

    def _store(self) -> RuleStore:
        return self.store if self.store is not None else get_store()

    @property
    def enabled(self) -> bool:
        """True if the channel is enabled right now."""
        return self._store().is_enabled(self.channel)

    def __call__(self, fmt: Any, *args: Any) -> None:
        if not self._store().is_enabled(self.channel):
            return
        (self.sink or default_sink)(self.channel, format_message(fmt, args))

    def extend(self, name: str) -> 'Debugger':
        """Bind a child channel (``channel:name``) sharing store and sink."""
        return Debugger(self.channel + SEPARATOR + name, self.store, self.sink)

    def __repr__(self):
        return f"Debugger({self.channel!r})"


def format_message(fmt: Any, args: tuple) -> str:
    """Apply %-style substitution, never raising.

    A message without args is used verbatim, so a literal ``%`` is safe.
    A mismatched format string is reported inline instead of crashing the
    caller.
    """
    if not args:
        return str(fmt)
    try:
        return str(fmt) % args
    except (TypeError, ValueError, KeyError) as e:
        return f"{fmt} (format error: {e}) {args!r}"


def debug(channel: str, store: Optional[RuleStore] = None,
          sink: Optional[Sink] = None) -> Debugger:
    """Return a Debugger bound to channel."""
    return Debugger(channel, store=store, sink=sink)


def is_enabled(channel: str, store: Optional[RuleStore] = None) -> bool:
    """Check a channel against the given (or default) store.

    Useful for guarding expensive debug-only work.
    """
    return (store if store is not None else get_store()).is_enabled(channel)


def report_reloads(store: RuleStore, sink: Optional[Sink] = None) -> None:
    """Announce every reload of store on the nsdebug:store channel."""
    announce = Debugger(STORE_CHANNEL, store=store, sink=sink)

    def _on_reload(rules):
        announce("reloaded rules (generation %d): %r",
                 store.generation, rules.source)

    store.subscribe(_on_reload)
