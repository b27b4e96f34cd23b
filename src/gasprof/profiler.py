"""
Gas profiler

Runs the full pipeline (root resolution, tree building, depth analysis) for a
decoded trace and its simulation response, caching the last result.
"""

import json
import sys
from dataclasses import dataclass
from typing import Any, Callable, Optional, TextIO

from .colors import dim, warning
from .hierarchy import (
    HierarchyNode,
    RootSource,
    build_tree,
    max_depth,
    resolve_roots_with_source,
)

# Chart pixels per tree level
DEFAULT_ROW_HEIGHT = 40

TreeHook = Callable[[HierarchyNode], None]


@dataclass(frozen=True)
class GasProfile:
    """A built gas tree and the layout metrics derived from it."""
    tree: HierarchyNode
    max_depth: int
    row_height: int
    source: RootSource

    @property
    def chart_height(self) -> int:
        return self.max_depth * self.row_height

    @property
    def total_gas(self) -> int:
        """Gas of the top-level calls, summed across a synthetic root."""
        if self.tree.is_synthetic:
            return sum(child.value or 0 for child in self.tree.children or [])
        return self.tree.value or 0


def log_tree(tree: HierarchyNode, stream: Optional[TextIO] = None):
    """Dump the chart data as JSON; usable as a GasProfiler on_tree hook."""
    stream = stream or sys.stderr
    print(f"{dim('[gasprof]')} Icicle data: {json.dumps(tree.to_dict(), indent=2)}", file=stream)


class GasProfiler:
    """
    Builds gas profiles for the icicle chart.

    The profiler remembers the last pair of inputs it was given and returns
    the same GasProfile while both inputs are the very same objects, so
    re-rendering a view does not rebuild an unchanged tree.
    """

    def __init__(self, row_height: int = DEFAULT_ROW_HEIGHT,
                 on_tree: Optional[TreeHook] = None, quiet_mode: bool = True):
        self.row_height = row_height
        self.on_tree = on_tree
        self.quiet_mode = quiet_mode
        self._last_inputs: Optional[tuple] = None
        self._last_profile: Optional[GasProfile] = None

    def _log(self, message: str):
        """Log a message to stderr if not in quiet mode."""
        if not self.quiet_mode:
            print(message, file=sys.stderr)

    def _is_cached(self, decoded_trace: Any, simulation_response: Any) -> bool:
        if self._last_inputs is None:
            return False
        last_decoded, last_response = self._last_inputs
        return last_decoded is decoded_trace and last_response is simulation_response

    def profile(self, decoded_trace: Any, simulation_response: Any = None) -> GasProfile:
        """Build (or reuse) the gas profile for a decoded trace and simulation response."""
        if self._is_cached(decoded_trace, simulation_response):
            return self._last_profile

        roots, source = resolve_roots_with_source(decoded_trace, simulation_response)
        if source is RootSource.RAW:
            self._log(warning("No decoded trace, falling back to raw call trace"))
        elif source is RootSource.EMPTY:
            self._log(warning("No call trace available, profile is empty"))

        tree = build_tree(roots)
        if self.on_tree is not None:
            self.on_tree(tree)

        profile = GasProfile(
            tree=tree,
            max_depth=max_depth(tree),
            row_height=self.row_height,
            source=source,
        )
        self._last_inputs = (decoded_trace, simulation_response)
        self._last_profile = profile
        return profile

    def reset(self):
        """Forget the cached profile."""
        self._last_inputs = None
        self._last_profile = None


def build_gas_profile(decoded_trace: Any, simulation_response: Any = None,
                      row_height: int = DEFAULT_ROW_HEIGHT) -> GasProfile:
    """One-shot profile without caching."""
    return GasProfiler(row_height=row_height).profile(decoded_trace, simulation_response)
