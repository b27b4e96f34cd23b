"""
gasprof - gas profiles of EVM call traces for icicle charts.
"""

from .call_nodes import GAS_KEYS, CallNode, NodeShape, coerce_gas, first_present, gas_used_num
from .colors import DEFAULT_BASE_COLOR, depth_color, lighten
from .hierarchy import (
    SYNTHETIC_ROOT_ID,
    HierarchyNode,
    RootSource,
    build_node,
    build_tree,
    max_depth,
    resolve_roots,
)
from .labels import FALLBACK_LABEL, UNKNOWN_LABEL, derive_label
from .profiler import DEFAULT_ROW_HEIGHT, GasProfile, GasProfiler, build_gas_profile, log_tree

__version__ = "0.1.0"
