"""
Debug spec parsing and the immutable RuleSet it produces.

A debug spec is a comma-separated list of tokens, normally read from the
DEBUG environment variable:

    *               # every channel
    app:*           # descendants of app (app:server, app:server:http, ...)
    app*            # same as app:*
    app:server      # exactly app:server
    !app:db         # never app:db (negation beats everything)
    !app:db:*       # never app:db, nor anything under it

    Examples:
        DEBUG=*,!verbose
        DEBUG=app:*,!app:db
        DEBUG="worker, queue:*"

Parsing is best-effort: whitespace around tokens is stripped, empty or
malformed tokens are dropped, and nothing here ever raises for string input.
"""

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional


SEPARATOR = ':'
WILDCARD = '*'
NEGATION = '!'
TOKEN_SEPARATOR = ','


class PatternKind(enum.Enum):
    """How a pattern matches channel names."""
    EXACT = 'exact'     # the channel itself
    PREFIX = 'prefix'   # the namespace and its descendants


@dataclass(frozen=True)
class Pattern:
    """A single include or exclude rule.

    Both wildcard spellings (``app:*`` and ``app*``) become
    ``Pattern(PREFIX, 'app')`` and compare equal. ``raw`` keeps the
    spelling from the spec so listings show what the user typed.
    """
    kind: PatternKind
    value: str
    raw: str = field(default='', compare=False)

    @classmethod
    def parse(cls, raw: str) -> 'Pattern':
        """Build a Pattern from one (already stripped) spec token."""
        if raw.endswith(SEPARATOR + WILDCARD):
            return cls(PatternKind.PREFIX, raw[:-2], raw)
        if raw.endswith(WILDCARD) and raw != WILDCARD:
            return cls(PatternKind.PREFIX, raw[:-1], raw)
        return cls(PatternKind.EXACT, raw, raw)

    @property
    def is_prefix(self) -> bool:
        return self.kind is PatternKind.PREFIX

    def __str__(self):
        if self.raw:
            return self.raw
        return self.value + SEPARATOR + WILDCARD if self.is_prefix else self.value


@dataclass(frozen=True)
class RuleSet:
    """Parsed, immutable snapshot of a debug spec.

    Never mutated after construction; a reload builds a new RuleSet and
    swaps it in (see store.RuleStore). Lookup tables used by the matcher
    are derived once here so matching is a handful of set lookups.

    Attributes:
        includes: Patterns that enable channels
        excludes: Patterns that disable channels, regardless of anything else
        wildcard: True when the spec contains a bare ``*`` token
        associations: raw pattern -> True (included) / False (negated),
            as recorded while parsing
        source: The spec string this RuleSet was parsed from
    """
    includes: FrozenSet[Pattern] = frozenset()
    excludes: FrozenSet[Pattern] = frozenset()
    wildcard: bool = False
    associations: Mapping[str, bool] = field(
        default_factory=lambda: MappingProxyType({}), compare=False)
    source: str = ''

    # Derived lookup tables
    include_keys: FrozenSet[str] = field(init=False, compare=False, repr=False)
    exclude_keys: FrozenSet[str] = field(init=False, compare=False, repr=False)
    include_prefixes: FrozenSet[str] = field(init=False, compare=False, repr=False)
    exclude_prefixes: FrozenSet[str] = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        # Exclusion wins over inclusion of the very same pattern
        includes = frozenset(self.includes) - frozenset(self.excludes)
        excludes = frozenset(self.excludes)
        setattr_ = object.__setattr__
        setattr_(self, 'includes', includes)
        setattr_(self, 'excludes', excludes)
        setattr_(self, 'include_keys', frozenset(str(p) for p in includes))
        setattr_(self, 'exclude_keys', frozenset(str(p) for p in excludes))
        setattr_(self, 'include_prefixes',
                 frozenset(p.value for p in includes if p.is_prefix))
        setattr_(self, 'exclude_prefixes',
                 frozenset(p.value for p in excludes if p.is_prefix))
        if not isinstance(self.associations, MappingProxyType):
            setattr_(self, 'associations',
                     MappingProxyType(dict(self.associations)))

    @property
    def is_empty(self) -> bool:
        """True when the spec enables nothing at all."""
        return not (self.wildcard or self.includes)

    def describe(self) -> str:
        """Format the rule set for display.

        Returns:
            Multi-line listing of wildcard, include and exclude rules.
        """
        lines = [f"wildcard: {'yes' if self.wildcard else 'no'}"]
        lines.append("include:")
        for key in sorted(self.include_keys) or ['(none)']:
            lines.append(f"  {key}")
        lines.append("exclude:")
        for key in sorted(self.exclude_keys) or ['(none)']:
            lines.append(f"  {key}")
        return "\n".join(lines)


EMPTY_RULES = RuleSet()


def parse_spec(spec: Optional[str]) -> RuleSet:
    """Parse a debug spec string into a RuleSet.

    Args:
        spec: Spec string like "app:*,!app:db", or None/"" for nothing

    Returns:
        RuleSet built from the spec. Malformed tokens are skipped.
    """
    if not spec:
        return EMPTY_RULES

    includes = set()
    excludes = set()
    associations = {}
    wildcard = False

    for token in spec.split(TOKEN_SEPARATOR):
        token = token.strip()
        if not token:
            continue

        if token == WILDCARD:
            wildcard = True
        elif token.startswith(NEGATION):
            name = token[len(NEGATION):]
            if not name:
                continue
            excludes.add(Pattern.parse(name))
            associations[name] = False
        else:
            includes.add(Pattern.parse(token))
            # Once negated, a pattern stays negated
            associations.setdefault(token, True)

    return RuleSet(
        includes=frozenset(includes),
        excludes=frozenset(excludes),
        wildcard=wildcard,
        associations=associations,
        source=spec,
    )
