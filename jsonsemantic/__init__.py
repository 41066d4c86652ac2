from .canonical import canonical_sha256, canonicalize, sha256_hex
from .equality import equal, resolve_planned_value, semantic_equal
from .errors import DepthExceeded, JSONSemanticError, ParseError
from .normalize import ABSENT, NormalizationPolicy, normalize
from .values import (
    JArray,
    JBool,
    JNull,
    JNumber,
    JObject,
    JString,
    Value,
    decode_bytes,
    parse,
    render,
)

__all__ = [
    "ABSENT",
    "NormalizationPolicy",
    "Value",
    "JNull",
    "JBool",
    "JNumber",
    "JString",
    "JArray",
    "JObject",
    "JSONSemanticError",
    "ParseError",
    "DepthExceeded",
    "parse",
    "render",
    "decode_bytes",
    "normalize",
    "equal",
    "semantic_equal",
    "resolve_planned_value",
    "canonicalize",
    "canonical_sha256",
    "sha256_hex",
]
