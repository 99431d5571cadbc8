"""
WristDo configuration.

Settings come from one YAML file and are read with dotted keys such as
'todo.items_per_page'. Strings containing ~ or $VAR are expanded once at
load time, so storage and log paths can point into the user's home.
"""

import logging
import os
from typing import Any

import yaml


def _expand(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _expand(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand(item) for item in value]
    if isinstance(value, str) and ('$' in value or '~' in value):
        return os.path.expandvars(os.path.expanduser(value))
    return value


class Config:
    """Read-only view of config.yaml"""

    def __init__(self, config_path: str):
        """
        Args:
            config_path: Path to config.yaml

        Raises:
            FileNotFoundError: If config_path does not exist
            ValueError: If the file does not hold a YAML mapping
        """
        self.logger = logging.getLogger(__name__)
        self.config_path = config_path

        with open(config_path, 'r') as f:
            raw = yaml.safe_load(f)

        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ValueError(f"{config_path} must contain a mapping, got {type(raw).__name__}")

        self._settings = _expand(raw)
        self.logger.info(f"Configuration loaded from {config_path}")

    def get(self, path: str, default: Any = None) -> Any:
        """
        Look up a dotted key, e.g. 'display.width'

        Returns default when any part of the path is missing.
        """
        node = self._settings
        for key in path.split('.'):
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return node
