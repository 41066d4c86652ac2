"""
Semantic equality of JSON documents.

Two texts are equal when, after parsing and normalization, they differ only
in formatting, object key order, nulls, policy-listed optional fields and
the order of keyed arrays.
"""

from __future__ import annotations

import logging
from typing import Dict, Hashable, List, Optional, Tuple

from .errors import JSONSemanticError
from .keyed import array_signature
from .normalize import ABSENT, Normalized, NormalizationPolicy, normalize
from .rules import DEFAULT_MAX_DEPTH
from .values import JBool, JNull, JNumber, JObject, JString, Value, children, fold, parse

logger = logging.getLogger(__name__)


def _scalar_signature(value: Value) -> Tuple[str, Hashable]:
    if isinstance(value, JNumber):
        # Decimal compares and hashes by value: 42 == 42.0 == 4.2e1
        return "number", value.value
    if isinstance(value, JString):
        return "string", value.value
    if isinstance(value, JBool):
        return "bool", value.value
    if isinstance(value, JNull):
        return ("null",)
    raise TypeError(f"not a JSON value: {type(value).__name__}")


def _structural_id(value: Value, ids: Dict[Hashable, int], max_depth: int) -> int:
    """
    Id shared by every subtree equal to value within one ids table.

    Signatures hold the ids of children rather than the children themselves,
    so they stay flat no matter how deep the tree is.
    """
    def intern(signature: Hashable) -> int:
        return ids.setdefault(signature, len(ids))

    def leaf(node: Value) -> int:
        return intern(_scalar_signature(node))

    def combine(node: Value, done: List[Tuple[Optional[str], int]]) -> int:
        if isinstance(node, JObject):
            return intern(("object", frozenset(done)))
        return intern(array_signature(node.items, [i for _, i in done]))

    return fold(value, children, leaf, combine, max_depth=max_depth)


def equal(a: Normalized, b: Normalized, *, max_depth: int = DEFAULT_MAX_DEPTH) -> bool:
    """
    Structural equality over two already-normalized trees.

    Objects ignore key order, keyed arrays ignore element order, mismatched
    kinds are never equal, and ABSENT only equals ABSENT.
    """
    if a is ABSENT or b is ABSENT:
        return a is b
    ids: Dict[Hashable, int] = {}
    return _structural_id(a, ids, max_depth) == _structural_id(b, ids, max_depth)

def semantic_equal(
    a: str,
    b: str,
    policy: NormalizationPolicy,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> bool:
    """
    Compare two JSON texts semantically.

    Fails closed: if either side cannot be parsed (or nests too deeply) the
    result is False, so a real problem still shows up as a pending change.
    """
    try:
        left = normalize(parse(a, max_depth=max_depth), policy, max_depth=max_depth)
        right = normalize(parse(b, max_depth=max_depth), policy, max_depth=max_depth)
        return equal(left, right, max_depth=max_depth)
    except JSONSemanticError as exc:
        logger.debug("treating values as different: %s", exc)
        return False


def resolve_planned_value(
    state: Optional[str],
    config: Optional[str],
    policy: NormalizationPolicy,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Optional[str]:
    """
    Pick the value to propose in a change plan.

    Returns the stored state text when it is semantically equal to the
    configured text, which suppresses a no-op update; otherwise the config.
    """
    if state is None or config is None:
        return config
    if state == config:
        return config
    if semantic_equal(state, config, policy, max_depth=max_depth):
        return state
    return config
