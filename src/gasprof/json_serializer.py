"""
JSON Serialization for gasprof output

Provides serialization of gas profiles into the JSON document consumed by
the web app's icicle chart.
"""

from typing import Any, Dict, List, Mapping

from eth_utils import to_hex

from .colors import DEFAULT_BASE_COLOR, depth_color
from .profiler import GasProfile


def to_serializable(obj: Any) -> Any:
    """Convert RPC results (AttributeDict, HexBytes, ...) to plain JSON values."""
    if isinstance(obj, (bytes, bytearray)):
        return to_hex(bytes(obj))
    elif isinstance(obj, Mapping):
        return {k: to_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [to_serializable(item) for item in obj]
    elif hasattr(obj, '__dict__'):
        # Handle custom objects by converting to dict
        return to_serializable(vars(obj))
    else:
        return obj


class ProfileSerializer:
    """Serializes gas profiles to JSON format compatible with web app."""

    def __init__(self, base_color: str = DEFAULT_BASE_COLOR, include_paths: bool = False):
        self.base_color = base_color
        self.include_paths = include_paths

    def build_palette(self, depth: int) -> List[str]:
        """Fill color for each chart level, shallowest first."""
        return [depth_color(self.base_color, level) for level in range(depth)]

    def serialize_profile(self, profile: GasProfile) -> Dict[str, Any]:
        """Serialize a gas profile to the web app format."""
        return {
            "tree": profile.tree.to_dict(include_path=self.include_paths),
            "source": profile.source.value,
            "maxDepth": profile.max_depth,
            "rowHeight": profile.row_height,
            "chartHeight": profile.chart_height,
            "totalGas": profile.total_gas,
            "baseColor": self.base_color,
            "palette": self.build_palette(profile.max_depth),
        }


def serialize_profile(profile: GasProfile, base_color: str = DEFAULT_BASE_COLOR,
                      include_paths: bool = False) -> Dict[str, Any]:
    """Shorthand for ProfileSerializer(...).serialize_profile(profile)."""
    return ProfileSerializer(base_color, include_paths).serialize_profile(profile)
