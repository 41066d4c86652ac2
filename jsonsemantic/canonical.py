"""
Canonical text form for persisted values.

Pure format transform: keys sorted by UTF-8 bytes, no insignificant
whitespace, arrays in original order, fixed numeric representation.
Nulls and optional fields are kept; that stripping belongs to comparison.
"""

from __future__ import annotations

import hashlib
from typing import Union

from .rules import DEFAULT_MAX_DEPTH
from .values import parse, render


def canonicalize(text: Union[str, bytes], *, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """
    Re-encode JSON text canonically.

    Raises ParseError / DepthExceeded; malformed input must never reach storage.
    canonicalize(canonicalize(x)) == canonicalize(x).
    """
    return render(parse(text, max_depth=max_depth), sort_keys=True)


def sha256_hex(canonical: str) -> str:
    return hashlib.sha256(canonical.encode("utf-8", errors="surrogatepass")).hexdigest()


def canonical_sha256(text: Union[str, bytes], *, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """Fingerprint of the canonical form; equal for any formatting of the same value."""
    return sha256_hex(canonicalize(text, max_depth=max_depth))
