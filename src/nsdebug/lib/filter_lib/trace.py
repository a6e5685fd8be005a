"""
Function tracing decorator.

Routes call/return/raise lines through a Debugger, so tracing for a
function is switched on and off with the same spec as any other channel:

    @trace("app:db")
    def fetch(key): ...

    DEBUG=app:db          # shows >> / << lines for fetch()
"""

import functools
import inspect
from pathlib import Path
from typing import Optional

from .gate import Debugger
from .store import RuleStore


MAX_REPR = 50


def _short_repr(value) -> str:
    if isinstance(value, Path):
        return f"Path('{value}')"
    if isinstance(value, str) and len(value) > MAX_REPR:
        return f"'{value[:MAX_REPR - 3]}...'"
    if isinstance(value, (list, tuple)) and len(value) > 3:
        return f"[...{len(value)} items...]"
    return repr(value)


def format_call(func, args, kwargs) -> str:
    """Format a call as ``name(arg, key=value)`` with abbreviated values."""
    args_repr = []

    # Handle self/cls for methods
    try:
        params = list(inspect.signature(func).parameters)
    except (TypeError, ValueError):
        params = []
    remaining_args = args
    if args and params and params[0] in ('self', 'cls'):
        args_repr.append(params[0])
        remaining_args = args[1:]

    args_repr.extend(_short_repr(arg) for arg in remaining_args)
    args_repr.extend(f"{key}={_short_repr(value)}" for key, value in kwargs.items())
    return f"{func.__qualname__}({', '.join(args_repr)})"


def trace(channel: str, store: Optional[RuleStore] = None, sink=None):
    """Decorator to trace function calls on a debug channel.

    Shows function entry/exit with arguments and return values when
    the channel is enabled. The check happens on every call.
    """
    debug = Debugger(channel, store=store, sink=sink)

    def decorator(func):
        module = inspect.getmodule(func)
        module_name = module.__name__ if module else "unknown"

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not debug.enabled:
                return func(*args, **kwargs)

            debug(">> %s.%s", module_name, format_call(func, args, kwargs))
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                debug("!! %s.%s raised: %s: %s", module_name,
                      func.__qualname__, type(e).__name__, e)
                raise

            debug("<< %s.%s returned: %s", module_name,
                  func.__qualname__, _short_repr(result))
            return result

        wrapper.debug = debug
        return wrapper

    return decorator
