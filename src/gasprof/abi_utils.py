"""
ABI signature parsing and calldata encoding for gasprof.
"""
import ast
import re
from typing import Any, List, Tuple

from eth_abi.abi import encode as abi_encode
from eth_hash.auto import keccak
from eth_utils import decode_hex, to_checksum_address

_SIGNATURE_RE = re.compile(r'(\w+)\((.*)\)$')


def split_types(type_list: str) -> List[str]:
    """Split 'uint256,(string,uint256)[]' at top-level commas only."""
    args, depth, current = [], 0, ''
    for c in type_list:
        if c == ',' and depth == 0:
            args.append(current)
            current = ''
        else:
            if c == '(': depth += 1
            elif c == ')': depth -= 1
            current += c
    if current:
        args.append(current)
    return [a.strip() for a in args if a.strip()]


def parse_signature(signature: str) -> Tuple[str, List[str]]:
    """Parse a function signature like 'foo(uint256,(string,uint256))' into name and argument types."""
    match = _SIGNATURE_RE.match(signature.strip())
    if not match:
        return "", []
    return match.group(1), split_types(match.group(2))


def function_selector(signature: str) -> str:
    """Calculate the 4-byte function selector, '0x'-prefixed."""
    name, arg_types = parse_signature(signature)
    if not name:
        raise ValueError(f"Invalid function signature: {signature!r}")
    canonical = f"{name}({','.join(arg_types)})"
    return '0x' + keccak(canonical.encode())[:4].hex()


def _literal(value: Any) -> Any:
    if isinstance(value, str):
        return ast.literal_eval(value)
    return value


def normalize_arg(value: Any, abi_type: str) -> Any:
    """Convert a command-line argument to the Python value eth_abi expects for `abi_type`."""
    if abi_type.endswith(']'):
        base_type = abi_type[:abi_type.rindex('[')]
        return [normalize_arg(item, base_type) for item in _literal(value)]
    if abi_type.startswith('('):
        component_types = split_types(abi_type[1:-1])
        items = _literal(value)
        if len(items) != len(component_types):
            raise ValueError(f"Expected {len(component_types)} tuple components for {abi_type}")
        return tuple(normalize_arg(item, typ) for item, typ in zip(items, component_types))
    if abi_type.startswith(('uint', 'int')):
        return int(value, 0) if isinstance(value, str) else int(value)
    if abi_type == 'address':
        return to_checksum_address(value)
    if abi_type == 'bool':
        if isinstance(value, str):
            return value.strip().lower() in ('true', '1', 'yes')
        return bool(value)
    if abi_type.startswith('bytes'):
        return decode_hex(value) if isinstance(value, str) else bytes(value)
    return value


def encode_function_call(signature: str, args: List[Any]) -> str:
    """Encode calldata for `signature` called with `args`."""
    name, arg_types = parse_signature(signature)
    if not name:
        raise ValueError(f"Invalid function signature: {signature!r}")
    if len(args) != len(arg_types):
        raise ValueError(f"{name} expects {len(arg_types)} arguments, got {len(args)}")
    norm_args = [normalize_arg(val, typ) for val, typ in zip(args, arg_types)]
    encoded_args = abi_encode(arg_types, norm_args).hex()
    return function_selector(signature) + encoded_args
