"""nsdebug -- namespaced debug output, switched at runtime.

Bind a debugger to a channel and leave the calls in place; the DEBUG
environment variable decides which channels actually print:

    from nsdebug import debug
    log = debug("app:server")
    log("listening on %d", port)

    $ DEBUG=app:*,!app:db python app.py

The default store is built from the environment when this package is
imported. Call reload_settings() after changing DEBUG, or init_store()
to read a different variable.
"""

from nsdebug._version import __version__, __app_name__
from nsdebug.lib.filter_lib import (
    Debugger, debug, is_enabled, parse_spec,
    RuleSet, RuleStore, init_store, get_store, reload_settings,
    PrefixWriter, trace,
)

init_store()

__all__ = [
    "__version__", "__app_name__",
    "Debugger", "debug", "is_enabled", "parse_spec",
    "RuleSet", "RuleStore", "init_store", "get_store", "reload_settings",
    "PrefixWriter", "trace",
]
