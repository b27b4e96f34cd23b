"""
Display labels for call trace nodes.
"""

from typing import Any

from .call_nodes import SELECTOR_LENGTH, CallNode, NodeShape, as_call_node, gas_used_num

FALLBACK_LABEL = "fallback()"
UNKNOWN_LABEL = "unknown"


def name_before_paren(text: Any) -> str:
    """'transfer(address,uint256)' -> 'transfer'"""
    return str(text).split("(", 1)[0]


def label_base(node: CallNode) -> str:
    """
    Function part of a node label.

    Resolution order: the decoded signature (preferring the function name
    the decoder attached), then the selector, then the leading 4 bytes of
    the calldata, then fallback() for empty calldata.
    """
    if node.shape is NodeShape.OPAQUE:
        return UNKNOWN_LABEL

    if node.signature:
        if node.function_name:
            return name_before_paren(node.function_name)
        from_signature = name_before_paren(node.signature)
        if from_signature:
            return from_signature

    if node.function_selector:
        return str(node.function_selector)

    input_data = node.input_raw
    if input_data and input_data != "0x":
        return str(input_data)[:SELECTOR_LENGTH]
    return FALLBACK_LABEL


def derive_label(node: Any) -> str:
    """Label shown on the icicle cell, e.g. 'transfer - 5000 GAS'."""
    node = as_call_node(node)
    return f"{label_base(node)} - {gas_used_num(node)} GAS"
