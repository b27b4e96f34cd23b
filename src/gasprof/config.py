"""
gasprof configuration management.
Loads and saves display and RPC settings in gasprof.config.yaml.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from .colors import DEFAULT_BASE_COLOR, parse_hex_color
from .profiler import DEFAULT_ROW_HEIGHT

DEFAULT_CONFIG_FILE = "gasprof.config.yaml"
DEFAULT_RPC_URL = "http://localhost:8545"


class ConfigError(ValueError):
    """Invalid configuration value or file."""


@dataclass
class ProfilerConfig:
    """Settings for gas profiling and chart layout."""

    base_color: str = DEFAULT_BASE_COLOR
    row_height: int = DEFAULT_ROW_HEIGHT
    rpc_url: str = DEFAULT_RPC_URL
    log_tree: bool = False

    def __post_init__(self):
        try:
            parse_hex_color(self.base_color)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        if isinstance(self.row_height, bool) or not isinstance(self.row_height, int) or self.row_height <= 0:
            raise ConfigError(f"row_height must be a positive integer, got {self.row_height!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'base_color': self.base_color,
            'row_height': self.row_height,
            'rpc_url': self.rpc_url,
            'log_tree': self.log_tree,
        }

    @classmethod
    def from_config_file(cls, config_file: str = DEFAULT_CONFIG_FILE) -> 'ProfilerConfig':
        """Load configuration from a gasprof config file."""
        if not Path(config_file).exists():
            # Return default config if file doesn't exist
            return cls()

        import yaml
        try:
            with open(config_file, 'r') as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Malformed config file {config_file}: {e}") from e

        if not isinstance(config_data, dict):
            raise ConfigError(f"Malformed config file {config_file}: expected a mapping")
        profile_config = config_data.get('profile') or {}
        if not isinstance(profile_config, dict):
            raise ConfigError(f"Malformed config file {config_file}: 'profile' must be a mapping")

        return cls(
            base_color=profile_config.get('base_color', DEFAULT_BASE_COLOR),
            row_height=profile_config.get('row_height', DEFAULT_ROW_HEIGHT),
            rpc_url=profile_config.get('rpc_url', DEFAULT_RPC_URL),
            log_tree=bool(profile_config.get('log_tree', False)),
        )

    def save_to_config_file(self, config_file: str = DEFAULT_CONFIG_FILE):
        """Save configuration to gasprof config file, keeping unrelated sections."""
        import yaml

        config_data = {}
        if Path(config_file).exists():
            with open(config_file, 'r') as f:
                config_data = yaml.safe_load(f) or {}

        config_data['profile'] = self.to_dict()

        with open(config_file, 'w') as f:
            yaml.safe_dump(config_data, f, default_flow_style=False, sort_keys=False)
