"""
Comparison normalization.

Strips what an upstream API adds or drops without changing meaning:
- explicit nulls
- optional default-valued fields named by the policy
- containers left empty by the above (recursively, through arrays too)

The result is a Value tree, or ABSENT when nothing comparable is left.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Tuple, Union

from .rules import DEFAULT_MAX_DEPTH, DEFAULT_OPTIONAL_FIELDS
from .values import JArray, JNull, JObject, Value, children, fold


class _Absent:
    """Marker for a value that carries no comparable information."""

    _instance = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()

Normalized = Union[Value, _Absent]


@dataclass(frozen=True)
class NormalizationPolicy:
    """Field names treated as optional and default-valued during comparison."""

    optional_fields: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.optional_fields, frozenset):
            if isinstance(self.optional_fields, str):
                raise TypeError("optional_fields must be a collection of names, not a string")
            object.__setattr__(self, "optional_fields", frozenset(self.optional_fields))

    @classmethod
    def default(cls) -> "NormalizationPolicy":
        return cls(DEFAULT_OPTIONAL_FIELDS)

    def is_optional(self, key: str) -> bool:
        return key in self.optional_fields


def _leaf(value: Value) -> Normalized:
    # Bool, Number, String pass through unchanged
    return ABSENT if isinstance(value, JNull) else value


def _collapse(node: Value, done: List[Tuple[Optional[str], Normalized]]) -> Normalized:
    kept = [(key, value) for key, value in done if value is not ABSENT]
    if not kept:
        return ABSENT
    if isinstance(node, JObject):
        return JObject(dict(kept))
    return JArray(tuple(value for _, value in kept))


def normalize(
    value: Normalized,
    policy: NormalizationPolicy,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Normalized:
    """
    Normalize a parsed value for comparison.

    normalize(normalize(v)) == normalize(v); ABSENT normalizes to itself.
    """
    if value is ABSENT:
        return ABSENT

    def entries(node):
        if isinstance(node, JObject):
            return ((k, v) for k, v in node.members.items() if not policy.is_optional(k))
        return children(node)

    return fold(value, entries, _leaf, _collapse, max_depth=max_depth)
