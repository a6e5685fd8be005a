"""
Channel matching against a RuleSet.

The decision for a channel is taken in a fixed order, first hit wins:

    1. negated    -- an exclude (exact or wildcard) on the channel
                     or on any of its namespaces              -> off
    2. wildcard   -- bare ``*`` in the spec                    -> on
    3. exact      -- the channel is listed verbatim            -> on
    4. prefix     -- a wildcard include on a *strict* namespace
                     of the channel                            -> on
    5. default                                                 -> off

Step 4 only looks at strict namespaces, so ``app:*`` enables ``app:server``
but not ``app`` itself. Excludes (step 1) cover the whole tree: ``!app`` and
``!app:*`` both silence ``app`` as well as ``app:server``.

Channel names are matched as given; no whitespace is trimmed here.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from .rules import SEPARATOR, WILDCARD, RuleSet


NEGATED = 'negated'
WILDCARD_RULE = 'wildcard'
EXACT = 'exact'
PREFIX = 'prefix'
DEFAULT = 'default'


@dataclass(frozen=True)
class Decision:
    """Outcome of matching one channel, with the rule that decided it.

    Attributes:
        channel: The channel that was matched
        enabled: Final answer
        reason: One of 'negated', 'wildcard', 'exact', 'prefix', 'default'
        pattern: Spec spelling of the deciding rule, if any
    """
    channel: str
    enabled: bool
    reason: str
    pattern: Optional[str] = None

    def __str__(self):
        mark = '+' if self.enabled else '-'
        if self.pattern:
            return f"{mark} {self.channel}  ({self.reason}: {self.pattern})"
        return f"{mark} {self.channel}  ({self.reason})"


def namespaces(channel: str) -> Iterator[str]:
    """Yield the namespaces of a channel, shortest first, ending with itself.

    ``namespaces('a:b:c')`` yields ``'a'``, ``'a:b'``, ``'a:b:c'``.
    """
    start = 0
    while True:
        idx = channel.find(SEPARATOR, start)
        if idx < 0:
            break
        yield channel[:idx]
        start = idx + 1
    yield channel


def _negating_pattern(channel: str, rules: RuleSet) -> Optional[str]:
    if not rules.excludes:
        return None
    for ns in namespaces(channel):
        if ns in rules.exclude_keys:
            return ns
        if ns in rules.exclude_prefixes:
            return ns + SEPARATOR + WILDCARD
    return None


def _enabling_prefix(channel: str, rules: RuleSet) -> Optional[str]:
    if not rules.include_prefixes:
        return None
    for ns in namespaces(channel):
        if len(ns) == len(channel):
            break
        if ns in rules.include_prefixes:
            return ns + SEPARATOR + WILDCARD
    return None


def is_negated(channel: str, rules: RuleSet) -> bool:
    """True if an exclude rule covers the channel."""
    return _negating_pattern(channel, rules) is not None


def enabled_by_prefix(channel: str, rules: RuleSet) -> bool:
    """True if a wildcard include covers a strict namespace of the channel."""
    return _enabling_prefix(channel, rules) is not None


def is_enabled(channel: str, rules: RuleSet) -> bool:
    """Decide whether debug output for a channel should be emitted.

    Pure function of its inputs; see the module docstring for the order.

    Args:
        channel: Channel name like "app:server:http"
        rules: Snapshot to match against

    Returns:
        True if the channel is enabled
    """
    if is_negated(channel, rules):
        return False
    if rules.wildcard:
        return True
    if channel in rules.include_keys:
        return True
    return enabled_by_prefix(channel, rules)


def explain(channel: str, rules: RuleSet) -> Decision:
    """Like is_enabled(), but report which rule decided and why."""
    pattern = _negating_pattern(channel, rules)
    if pattern is not None:
        return Decision(channel, False, NEGATED, _spelling(pattern, rules.excludes))
    if rules.wildcard:
        return Decision(channel, True, WILDCARD_RULE, WILDCARD)
    if channel in rules.include_keys:
        return Decision(channel, True, EXACT, channel)
    pattern = _enabling_prefix(channel, rules)
    if pattern is not None:
        return Decision(channel, True, PREFIX, _spelling(pattern, rules.includes))
    return Decision(channel, False, DEFAULT)


def _spelling(pattern: str, patterns) -> str:
    """Map a canonical ``ns:*`` back to the spelling used in the spec."""
    for p in patterns:
        if p.is_prefix and p.value + SEPARATOR + WILDCARD == pattern:
            return str(p)
    return pattern
