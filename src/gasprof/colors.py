"""
Color utilities for gasprof

Provides ANSI color codes for terminal output and the depth-based color
gradient used by icicle charts.
"""

import math
import os
import string
import sys
from typing import Tuple

# Check if colors are supported
SUPPORTS_COLOR = (
    hasattr(sys.stdout, 'isatty') and sys.stdout.isatty() and
    os.environ.get('TERM') != 'dumb' and
    not os.environ.get('NO_COLOR')
)

# Default icicle fill color
DEFAULT_BASE_COLOR = "#17BEBB"

# Gradient blend per depth level, and its ceiling
DEPTH_BLEND_STEP = 0.12
MAX_DEPTH_BLEND = 0.8


class Colors:
    """ANSI color codes for terminal output."""

    # Bright colors
    BRIGHT_RED = '\033[91m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_CYAN = '\033[96m'

    # Styles
    BOLD = '\033[1m'
    DIM = '\033[2m'

    # Reset
    RESET = '\033[0m'

    @classmethod
    def disable(cls):
        """Disable all colors."""
        for attr in dir(cls):
            if not attr.startswith('_') and attr.isupper():
                setattr(cls, attr, '')


# Disable colors if not supported
if not SUPPORTS_COLOR:
    Colors.disable()


# Convenience functions
def bold(text: str) -> str:
    """Return text in bold."""
    return f"{Colors.BOLD}{text}{Colors.RESET}"

def dim(text: str) -> str:
    """Return text dimmed."""
    return f"{Colors.DIM}{text}{Colors.RESET}"


# Semantic color functions
def error(text: str) -> str:
    """Format error text."""
    return f"{Colors.BRIGHT_RED}{text}{Colors.RESET}"

def warning(text: str) -> str:
    """Format warning text."""
    return f"{Colors.BRIGHT_YELLOW}{text}{Colors.RESET}"

def info(text: str) -> str:
    """Format info text."""
    return f"{Colors.BRIGHT_CYAN}{text}{Colors.RESET}"

def number(text: str) -> str:
    """Format numbers."""
    return f"{Colors.BRIGHT_YELLOW}{text}{Colors.RESET}"


# Hex colors
def parse_hex_color(hex_color: str) -> Tuple[int, int, int]:
    """Split a '#rrggbb' (or 'rrggbb') color into its three channels."""
    digits = str(hex_color).strip().lstrip('#')
    if len(digits) != 6 or not all(ch in string.hexdigits for ch in digits):
        raise ValueError(f"Expected a 24-bit hex color, got {hex_color!r}")
    packed = int(digits, 16)
    return (packed >> 16) & 0xff, (packed >> 8) & 0xff, packed & 0xff


def format_hex_color(red: int, green: int, blue: int, uppercase: bool = False) -> str:
    """Join three 8-bit channels into a '#rrggbb' string."""
    formatted = f"#{red:02x}{green:02x}{blue:02x}"
    return formatted.upper() if uppercase else formatted


def lighten(hex_color: str, amount: float) -> str:
    """
    Blend a color towards white.

    Each channel moves `amount` of the way to 255. Halves round up, so the
    result matches browser-side rendering of the same palette. The hex
    digits keep the letter case of `hex_color`.
    """
    channels = parse_hex_color(hex_color)
    lightened = [math.floor(c + (255 - c) * amount + 0.5) for c in channels]
    uppercase = any(ch.isupper() for ch in str(hex_color))
    return format_hex_color(*lightened, uppercase=uppercase)


def depth_blend(depth: int) -> float:
    """Blend factor for a node drawn at the given depth (0 = shallowest)."""
    return min(DEPTH_BLEND_STEP * depth, MAX_DEPTH_BLEND)


def depth_color(base_color: str, depth: int) -> str:
    """Color of an icicle cell at `depth`; lighter the deeper it sits."""
    return lighten(base_color, depth_blend(depth))


def rgb(text: str, hex_color: str) -> str:
    """Return text in a 24-bit terminal color."""
    if not SUPPORTS_COLOR:
        return text
    red, green, blue = parse_hex_color(hex_color)
    return f"\033[38;2;{red};{green};{blue}m{text}{Colors.RESET}"
