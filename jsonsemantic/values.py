"""
Value model: JSON text <-> tagged value tree.

Responsibilities:
- decoding raw bytes of unknown encoding to text
- parsing text into an explicit tree of JNull/JBool/JNumber/JString/JArray/JObject
- rendering a tree back to compact JSON text

Numbers are kept as Decimal built from the literal, so integers of any size
stay exact and 42 == 42.0.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from charset_normalizer import from_bytes

from .errors import DepthExceeded, ParseError
from .rules import DEFAULT_MAX_DEPTH, PLAIN_EXPONENT_MAX, PLAIN_EXPONENT_MIN

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JNull:
    pass


@dataclass(frozen=True)
class JBool:
    value: bool


@dataclass(frozen=True)
class JNumber:
    value: Decimal


@dataclass(frozen=True)
class JString:
    value: str


@dataclass(frozen=True)
class JArray:
    items: Tuple["Value", ...]


@dataclass(frozen=True)
class JObject:
    members: Dict[str, "Value"]


Value = Union[JNull, JBool, JNumber, JString, JArray, JObject]

SCALAR_TYPES = (JBool, JNumber, JString)

_LONE_SURROGATE = re.compile("[\ud800-\udfff]")


def decode_bytes(raw: bytes) -> Tuple[str, Dict[str, Any]]:
    """
    Decode raw JSON bytes to text.

    Rules:
    - UTF-8 (with or without BOM) is tried first; it is what JSON is supposed to be.
    - Otherwise detect the encoding best-effort via charset-normalizer.
    - If that decode fails too, fall back to UTF-8 with replacement characters and report it.
    """
    detected = None
    decode_used = "utf-8-sig"
    decode_fallback = False

    try:
        text = raw.decode(decode_used)
    except UnicodeDecodeError:
        match = from_bytes(raw).best()
        if match is not None:
            detected = match.encoding
        decode_used = detected or "utf-8"
        try:
            text = raw.decode(decode_used)
        except (UnicodeDecodeError, LookupError):
            # Last resort: decode with replacement so the parser reports something useful
            text = raw.decode("utf-8", errors="replace")
            decode_used = "utf-8"
            decode_fallback = True

    report = {
        "detected": detected,
        "decode_used": decode_used,
        "decode_fallback": decode_fallback,
    }
    return text, report


def _reject_constant(name: str) -> Any:
    raise ParseError(f"{name} is not a valid JSON number")


def fold(
    root: Any,
    entries: Callable[[Any], Optional[Iterator[Tuple[Any, Any]]]],
    leaf: Callable[[Any], Any],
    combine: Callable[[Any, List[Tuple[Any, Any]]], Any],
    *,
    max_depth: int,
) -> Any:
    """
    Post-order walk of a nested tree on an explicit stack.

    entries(node) yields (key, child) pairs for containers and returns None
    for leaves. leaf(node) maps a leaf; combine(node, [(key, result), ...])
    maps a container once all its children are done. Containers nested
    max_depth deep raise DepthExceeded.
    """
    pending = entries(root)
    if pending is None:
        return leaf(root)
    if max_depth <= 0:
        raise DepthExceeded(max_depth)

    # (container, remaining children, finished children, key in parent)
    stack = [(root, pending, [], None)]
    while True:
        node, pending, done, _ = stack[-1]
        for key, child in pending:
            child_entries = entries(child)
            if child_entries is not None:
                if len(stack) >= max_depth:
                    raise DepthExceeded(max_depth)
                stack.append((child, child_entries, [], key))
                break
            done.append((key, leaf(child)))
        else:
            _, _, _, parent_key = stack.pop()
            result = combine(node, done)
            if not stack:
                return result
            stack[-1][2].append((parent_key, result))


def children(value: Value) -> Optional[Iterator[Tuple[Optional[str], Value]]]:
    """(key, child) pairs of a container value; None for scalars."""
    if isinstance(value, JObject):
        return iter(value.members.items())
    if isinstance(value, JArray):
        return ((None, item) for item in value.items)
    return None


def _decoded_entries(obj: Any) -> Optional[Iterator[Tuple[Any, Any]]]:
    if isinstance(obj, dict):
        return iter(obj.items())
    if isinstance(obj, list):
        return ((None, item) for item in obj)
    return None


def _decoded_leaf(obj: Any) -> Value:
    if obj is None:
        return JNull()
    if isinstance(obj, bool):
        return JBool(obj)
    if isinstance(obj, Decimal):
        return JNumber(obj)
    if isinstance(obj, str):
        return JString(obj)
    raise TypeError(f"unsupported decoded type: {type(obj).__name__}")


def _decoded_container(obj: Any, done: List[Tuple[Any, Value]]) -> Value:
    if isinstance(obj, dict):
        return JObject(dict(done))
    return JArray(tuple(value for _, value in done))


def parse(text: Union[str, bytes], *, max_depth: int = DEFAULT_MAX_DEPTH) -> Value:
    """
    Parse JSON text into a Value tree.

    Raises ParseError for malformed input (never returns a partial tree) and
    DepthExceeded when containers nest deeper than max_depth.
    Duplicate object keys keep the last occurrence.
    """
    if isinstance(text, (bytes, bytearray)):
        text, _ = decode_bytes(bytes(text))

    try:
        raw = json.loads(
            text,
            parse_int=Decimal,
            parse_float=Decimal,
            parse_constant=_reject_constant,
        )
    except json.JSONDecodeError as exc:
        raise ParseError(exc.msg, exc.pos, exc.lineno, exc.colno) from None
    except InvalidOperation:
        # Exponent beyond what Decimal can represent
        raise ParseError("number out of range") from None
    except RecursionError:
        logger.debug("decoder hit the interpreter recursion limit")
        raise DepthExceeded(max_depth) from None

    return fold(raw, _decoded_entries, _decoded_leaf, _decoded_container, max_depth=max_depth)


def format_number(number: Decimal) -> str:
    """Fixed, minimal representation that depends only on the numeric value."""
    if number.is_zero():
        return "0"

    sign, digits, exponent = number.as_tuple()
    digits = list(digits)
    while len(digits) > 1 and digits[-1] == 0:
        digits.pop()
        exponent += 1

    leading = exponent + len(digits) - 1
    if PLAIN_EXPONENT_MIN <= leading < PLAIN_EXPONENT_MAX:
        return format(Decimal((sign, tuple(digits), exponent)), "f")

    mantissa = str(digits[0])
    if len(digits) > 1:
        mantissa += "." + "".join(str(d) for d in digits[1:])
    return f"{'-' if sign else ''}{mantissa}e{leading:+d}"


def _key_bytes(key: str) -> bytes:
    return key.encode("utf-8", errors="surrogatepass")


def _quote(text: str) -> str:
    # Paired surrogates are already joined by the decoder; any left are lone
    # and cannot be written as UTF-8, so they stay escaped.
    quoted = json.dumps(text, ensure_ascii=False)
    return _LONE_SURROGATE.sub(lambda m: "\\u%04x" % ord(m.group()), quoted)


def render(value: Value, *, sort_keys: bool = False) -> str:
    """Serialize a Value tree as compact JSON text."""
    out: List[str] = []
    # Plain str entries are literal tokens; everything else is a Value to expand.
    stack: List[Union[str, Value]] = [value]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            out.append(item)
        elif isinstance(item, JNull):
            out.append("null")
        elif isinstance(item, JBool):
            out.append("true" if item.value else "false")
        elif isinstance(item, JNumber):
            out.append(format_number(item.value))
        elif isinstance(item, JString):
            out.append(_quote(item.value))
        elif isinstance(item, JArray):
            out.append("[")
            stack.append("]")
            for i in reversed(range(len(item.items))):
                stack.append(item.items[i])
                if i:
                    stack.append(",")
        elif isinstance(item, JObject):
            keys = list(item.members)
            if sort_keys:
                keys.sort(key=_key_bytes)
            out.append("{")
            stack.append("}")
            for i in reversed(range(len(keys))):
                stack.append(item.members[keys[i]])
                stack.append(_quote(keys[i]) + ":")
                if i:
                    stack.append(",")
        else:
            raise TypeError(f"not a JSON value: {type(item).__name__}")
    return "".join(out)
