"""
Gas hierarchy construction

Turns call traces into the value-weighted tree consumed by icicle charts.
Every node is labelled with its function and gas, weighted by the gas it
used, and carries the index path that locates it in the call tree.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .call_nodes import CallNode, gas_used_num
from .labels import derive_label

# Id of the wrapper node that holds several top-level calls
SYNTHETIC_ROOT_ID = ""


class RootSource(Enum):
    """Where the top-level calls of a profile came from."""
    DECODED = "decoded"
    RAW = "raw"
    EMPTY = "empty"


@dataclass
class HierarchyNode:
    """One cell of the icicle chart."""
    id: str
    value: Optional[int] = None  # None only on the synthetic root
    children: Optional[List["HierarchyNode"]] = None  # None on leaves
    path: Tuple[int, ...] = ()

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def is_synthetic(self) -> bool:
        return self.value is None

    @property
    def key(self) -> str:
        """Dotted index path, e.g. '0.2.1'. Unlike `id` it is unique within a tree."""
        return ".".join(str(index) for index in self.path)

    def to_dict(self, include_path: bool = False) -> Dict[str, Any]:
        """Renderer shape: `children` omitted on leaves, `value` on the synthetic root."""
        data: Dict[str, Any] = {"id": self.id}
        if self.value is not None:
            data["value"] = self.value
        if include_path and self.path:
            data["path"] = self.key
        if self.children is not None:
            data["children"] = [child.to_dict(include_path) for child in self.children]
        return data


def decoded_roots(decoded_trace: Any) -> List[CallNode]:
    """Top-level nodes of a decoded trace: a list, a {root: ...} wrapper or a bare node."""
    if isinstance(decoded_trace, (list, tuple)):
        return [CallNode.from_decoded(node) for node in decoded_trace]
    if isinstance(decoded_trace, Mapping):
        root = decoded_trace.get("root")
        if isinstance(root, Mapping):
            return [CallNode.from_decoded(root)]
        return [CallNode.from_decoded(decoded_trace)]
    return []


def raw_call_trace(simulation_response: Any) -> List[Any]:
    """Raw callTracer records carried by a simulation response."""
    if not isinstance(simulation_response, Mapping):
        return []
    transaction = simulation_response.get("transaction")
    if not isinstance(transaction, Mapping):
        return []
    records = transaction.get("callTrace")
    if isinstance(records, (list, tuple)):
        return list(records)
    if records:
        return [records]
    return []


def fallback_roots(simulation_response: Any) -> List[CallNode]:
    """Raw call trace records of a simulation response, normalized."""
    return [CallNode.from_raw(record) for record in raw_call_trace(simulation_response)]


def resolve_roots_with_source(decoded_trace: Any,
                              simulation_response: Any = None) -> Tuple[List[CallNode], RootSource]:
    """Like resolve_roots(), also reporting which input the roots came from."""
    roots = decoded_roots(decoded_trace)
    if roots:
        return roots, RootSource.DECODED
    roots = fallback_roots(simulation_response)
    if roots:
        return roots, RootSource.RAW
    return [], RootSource.EMPTY


def resolve_roots(decoded_trace: Any, simulation_response: Any = None) -> List[CallNode]:
    """
    Top-level call nodes to profile.

    The decoded trace wins whenever it yields at least one node; otherwise
    the raw call trace of the simulation response is normalized and used.
    """
    roots, _ = resolve_roots_with_source(decoded_trace, simulation_response)
    return roots


def build_node(node: CallNode, path: Tuple[int, ...] = ()) -> HierarchyNode:
    """Convert a call node and its subtree into hierarchy nodes."""
    children = [
        build_node(child, path + (index,))
        for index, child in enumerate(node.children)
    ]
    return HierarchyNode(
        id=derive_label(node),
        value=gas_used_num(node),
        children=children or None,
        path=path,
    )


def build_tree(roots: List[CallNode]) -> HierarchyNode:
    """
    Build the chart tree for a forest of top-level calls.

    A single top-level call becomes the root itself. Any other count is
    wrapped in a synthetic root with an empty id and no value, which the
    chart sizes from its descendants.
    """
    converted = [build_node(root, (index,)) for index, root in enumerate(roots)]
    if len(converted) == 1:
        return converted[0]
    return HierarchyNode(id=SYNTHETIC_ROOT_ID, children=converted)


def max_depth(tree: Union[HierarchyNode, Mapping[str, Any]], depth: int = 1) -> int:
    """Number of nodes on the longest root-to-leaf path, counting the root."""
    if isinstance(tree, HierarchyNode):
        children = tree.children
    else:
        children = tree.get("children")
    if not children:
        return depth
    return max(max_depth(child, depth + 1) for child in children)
