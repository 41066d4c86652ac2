"""
Array comparison, order-sensitive or not.

An array is keyed when every element is an object carrying a scalar under
KEY_FIELD. Two keyed arrays compare as multisets: order is ignored but
multiplicity is not, and two elements sharing a key value with different
content stay distinct members. Every other pair of arrays compares position
by position.

Elements arrive as structural ids (equal elements share an id), so an array
reduces to a flat, hashable signature: a counted set of ids when keyed, the
id sequence otherwise. Two arrays are equal iff their signatures are.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Hashable, Optional, Sequence, Tuple

from .rules import KEY_FIELD
from .values import SCALAR_TYPES, JObject, Value

logger = logging.getLogger(__name__)


def key_of(element: Value) -> Optional[Tuple[str, Hashable]]:
    """Return a hashable (kind, value) for the element's key field, or None."""
    if not isinstance(element, JObject):
        return None
    key = element.members.get(KEY_FIELD)
    if not isinstance(key, SCALAR_TYPES):
        return None
    return type(key).__name__, key.value


def is_keyed(items: Sequence[Value]) -> bool:
    return bool(items) and all(key_of(item) is not None for item in items)


def array_signature(items: Sequence[Value], element_ids: Sequence[int]) -> Tuple[str, Hashable]:
    """
    Signature of a normalized array given the structural ids of its elements.

    A keyed array never shares a signature with a non-keyed one; positionally
    equal arrays would have to be keyed alike anyway.
    """
    if is_keyed(items):
        logger.debug("comparing keyed array of %d elements as a multiset", len(items))
        return "keyed", frozenset(Counter(element_ids).items())
    return "array", tuple(element_ids)
