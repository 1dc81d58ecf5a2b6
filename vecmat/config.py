"""
vecmat Configuration Loader
===========================

Load runtime settings from config.yaml.

The packaged default lives next to this module. A different file can be
selected with the VECMAT_CONFIG environment variable or by passing a path.

Usage:
    from vecmat.config import get_config, load_config

    config = get_config()                    # cached, packaged default
    config = load_config('my_config.yaml')   # explicit file, not cached
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / 'config.yaml'
CONFIG_ENV_VAR = 'VECMAT_CONFIG'


@dataclass
class WorkspaceConfig:
    """Workspace pool settings."""
    enabled: bool = True
    max_per_bucket: int = 16

    def __post_init__(self):
        if not isinstance(self.enabled, bool):
            raise ValueError(f"workspace.enabled must be a bool, got {self.enabled!r}")
        if isinstance(self.max_per_bucket, bool) or not isinstance(self.max_per_bucket, int):
            raise ValueError(
                f"workspace.max_per_bucket must be an int, got {self.max_per_bucket!r}"
            )
        if self.max_per_bucket < 0:
            raise ValueError(
                f"workspace.max_per_bucket must be >= 0, got {self.max_per_bucket}"
            )


@dataclass
class VecmatConfig:
    """Full vecmat configuration."""
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'workspace': {
                'enabled': self.workspace.enabled,
                'max_per_bucket': self.workspace.max_per_bucket,
            },
        }


def get_config_path(path: Optional[Union[str, Path]] = None) -> Path:
    """Resolve config file: explicit path, then $VECMAT_CONFIG, then packaged default."""
    if path is not None:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def parse_config(raw: Optional[Dict[str, Any]]) -> VecmatConfig:
    """Build a VecmatConfig from a parsed YAML mapping. Unknown keys are ignored."""
    raw = raw or {}
    if not isinstance(raw, dict):
        raise ValueError(f"config root must be a mapping, got {type(raw).__name__}")

    ws_raw = raw.get('workspace') or {}
    if not isinstance(ws_raw, dict):
        raise ValueError("config 'workspace' section must be a mapping")

    defaults = WorkspaceConfig()
    workspace = WorkspaceConfig(
        enabled=ws_raw.get('enabled', defaults.enabled),
        max_per_bucket=ws_raw.get('max_per_bucket', defaults.max_per_bucket),
    )
    return VecmatConfig(workspace=workspace)


def load_config(path: Optional[Union[str, Path]] = None) -> VecmatConfig:
    """
    Load configuration from YAML.

    Args:
        path: Config file. If None, uses $VECMAT_CONFIG or the packaged default.

    Returns:
        VecmatConfig. A missing file yields the defaults.
    """
    config_file = get_config_path(path)

    if not config_file.exists():
        logger.warning("No config found at %s, using defaults", config_file)
        return VecmatConfig()

    with open(config_file) as f:
        raw = yaml.safe_load(f)

    return parse_config(raw)


_config: Optional[VecmatConfig] = None


def get_config() -> VecmatConfig:
    """Get the process configuration (loaded once)."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def clear_config_cache() -> None:
    """Drop the cached configuration so the next get_config() reloads it."""
    global _config
    _config = None
