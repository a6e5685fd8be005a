"""
filter_lib -- channel-filtered debug output driven by a runtime spec.

A small, reusable engine:
- Spec parsing into immutable RuleSets (include / exclude / wildcard)
- Channel matching with a fixed precedence (negation always wins)
- A thread-safe RuleStore with atomic hot reload
- Debugger callables bound to a channel
- PrefixWriter for labelling foreign output, and a tracing decorator

Public API:
    parse_spec       -- spec string -> RuleSet
    RuleSet, Pattern -- parsed rules
    is_enabled       -- match a channel (store-level helper)
    explain          -- match a channel and say which rule decided
    RuleStore        -- holder of the current RuleSet
    init_store       -- build and install the default store
    get_store        -- access the default store
    reload_settings  -- reload the default store
    Debugger, debug  -- channel-bound emitters
    StreamSink       -- timestamped line writer
    PrefixWriter     -- prefixing file-like writer
    trace            -- function tracing decorator
"""

from .rules import (
    Pattern, PatternKind, RuleSet, EMPTY_RULES, parse_spec,
)
from .matcher import Decision, explain, is_negated, enabled_by_prefix
from .store import (
    RuleStore, init_store, install_store, get_store, reload_settings,
    DEFAULT_ENV_VAR, STORE_CHANNEL,
)
from .gate import Debugger, debug, is_enabled, format_message
from .sink import StreamSink, default_sink, format_line
from .prefix import PrefixWriter, prefix_lines
from .trace import trace

__all__ = [
    'Pattern', 'PatternKind', 'RuleSet', 'EMPTY_RULES', 'parse_spec',
    'Decision', 'explain', 'is_negated', 'enabled_by_prefix',
    'RuleStore', 'init_store', 'install_store', 'get_store', 'reload_settings',
    'DEFAULT_ENV_VAR', 'STORE_CHANNEL',
    'Debugger', 'debug', 'is_enabled', 'format_message',
    'StreamSink', 'default_sink', 'format_line',
    'PrefixWriter', 'prefix_lines',
    'trace',
]
