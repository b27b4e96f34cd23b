"""
Call trace node shapes

Simulation backends hand back call traces in two incompatible shapes: an
ABI-decoded tree (function names and signatures resolved, children under
`children`) and raw callTracer output (hex `input`, children under `calls`).
Both are parsed into one tagged `CallNode` type so the labelling and tree
building code never has to inspect optional fields ad hoc.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence, Union

from eth_utils import to_hex, to_int

# Synonymous gas-used keys, highest priority first
GAS_KEYS = ("gasUsed", "gas_used", "gas")

# "0x" + 4-byte function selector
SELECTOR_LENGTH = 10

_RADIX_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}


class NodeShape(Enum):
    """Which trace shape a node was parsed from."""
    DECODED = "decoded"
    RAW = "raw"
    OPAQUE = "opaque"  # not a record at all


def first_present(record: Any, keys: Sequence[str]) -> Any:
    """Return the value of the first key in `keys` that is set on `record`."""
    if not isinstance(record, Mapping):
        return None
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _hex_text(value: Any) -> Any:
    """Render bytes (including HexBytes) as a 0x-prefixed hex string."""
    if isinstance(value, (bytes, bytearray)):
        return to_hex(bytes(value))
    return value


def _child_records(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def _parse_numeric_text(text: str) -> Optional[Union[int, float]]:
    text = text.strip()
    if not text:
        return 0
    if "_" in text:
        return None
    radix = _RADIX_PREFIXES.get(text[:2].lower())
    if radix is not None:
        digits = text[2:]
        if not digits.isalnum():
            return None
        try:
            return int(digits, radix)
        except ValueError:
            return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def coerce_gas(value: Any) -> int:
    """
    Coerce a gas field to a non-negative integer.

    Accepts ints, floats, booleans, decimal or 0x-hex strings and big-endian
    bytes. Anything that does not yield a finite number counts as 0, as do
    negative amounts; fractions are truncated.
    """
    if value is None:
        return 0
    if isinstance(value, (bytes, bytearray)):
        amount = to_int(primitive=bytes(value))
    elif isinstance(value, (int, float)):
        amount = value
    elif isinstance(value, str):
        amount = _parse_numeric_text(value)
    else:
        return 0
    if amount is None:
        return 0
    if isinstance(amount, float) and not math.isfinite(amount):
        return 0
    if amount <= 0:
        return 0
    return int(amount)


@dataclass
class CallNode:
    """One frame of a call trace, in decoded shape."""
    shape: NodeShape
    function_name: Optional[Any] = None
    signature: Optional[Any] = None
    function_selector: Optional[Any] = None
    input_raw: Optional[Any] = None  # inputRaw, else input
    gas: Optional[Any] = None  # unparsed; see gas_used_num()
    children: List["CallNode"] = field(default_factory=list)

    @classmethod
    def from_decoded(cls, record: Any) -> "CallNode":
        """Parse a node produced by the ABI-aware trace decoder."""
        if not isinstance(record, Mapping):
            return cls(shape=NodeShape.OPAQUE)

        input_raw = record.get("inputRaw")
        if input_raw is None:
            input_raw = record.get("input")

        child_records = record.get("children")
        if not isinstance(child_records, (list, tuple)):
            child_records = record.get("calls")

        return cls(
            shape=NodeShape.DECODED,
            function_name=record.get("functionName"),
            signature=record.get("signature"),
            function_selector=record.get("functionSelector"),
            input_raw=_hex_text(input_raw),
            gas=first_present(record, GAS_KEYS),
            children=[cls.from_decoded(child) for child in _child_records(child_records)],
        )

    @classmethod
    def from_raw(cls, record: Any) -> "CallNode":
        """
        Normalize a raw callTracer record into the decoded shape.

        The selector is the first 10 characters of a 0x-prefixed `input`;
        nested `calls` are normalized recursively. Records that are not
        mappings come out as empty raw nodes.
        """
        if not isinstance(record, Mapping):
            record = {}

        input_data = _hex_text(record.get("input"))
        selector = None
        if isinstance(input_data, str) and input_data.startswith("0x"):
            selector = input_data[:SELECTOR_LENGTH]

        return cls(
            shape=NodeShape.RAW,
            function_selector=selector,
            input_raw=input_data,
            gas=first_present(record, GAS_KEYS),
            children=[cls.from_raw(call) for call in _child_records(record.get("calls"))],
        )


def as_call_node(node: Any) -> CallNode:
    """Accept either a parsed CallNode or a decoded-shape mapping."""
    if isinstance(node, CallNode):
        return node
    return CallNode.from_decoded(node)


def gas_used_num(node: Any) -> int:
    """Gas used by a node (CallNode or plain record), 0 when unresolvable."""
    if isinstance(node, CallNode):
        return coerce_gas(node.gas)
    return coerce_gas(first_present(node, GAS_KEYS))
