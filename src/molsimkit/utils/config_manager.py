"""
Configuration management module for molsimkit.

This module provides functionality for loading, validating, and managing
configuration settings for trajectory analyses.
"""
import copy
import yaml
from pathlib import Path
import logging
from typing import Dict, Any, Optional, Union
import json

from ..core.trajectory import FrameRange
from .helpers import update_dict_recursively

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    'trajectory': {'topology': None, 'file': None, 'first': 1, 'last': None, 'step': 1},
    'secondary_structure': {'selection': 'protein', 'method': 'dssp', 'show_progress': True},
    'output': {'directory': 'molsimkit_output'},
}


class ConfigManager:
    """Class for managing analysis configuration settings."""

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager with the default settings.

        Args:
            config_file: Path to a YAML file overriding the defaults (optional)
        """
        self.config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        if config_file is not None:
            self.load_config(config_file)

    def load_config(self, config_file: Union[str, Path]) -> None:
        """
        Load configuration from a YAML file, merged over the current settings.

        Args:
            config_file: Path to the configuration file
        """
        config_path = Path(config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")

        logger.info(f"Loading configuration from {config_path}")
        with open(config_path, 'r') as f:
            user_cfg = yaml.safe_load(f)
        if user_cfg:
            if not isinstance(user_cfg, dict):
                raise ValueError(f"Configuration file {config_path.name} must contain a mapping.")
            update_dict_recursively(self.config, user_cfg)

        self._validate_config()

    def _validate_config(self) -> None:
        """Validate the loaded configuration."""
        for key in DEFAULT_CONFIG:
            if not isinstance(self.config.get(key), dict):
                raise ValueError(f"Missing required configuration section: {key}")

        traj = self.config['trajectory']
        for key in ('first', 'step'):
            if not isinstance(traj.get(key), int) or traj[key] < 1:
                raise ValueError(f"Trajectory setting '{key}' must be a positive integer, got {traj.get(key)!r}")
        if traj.get('last') is not None and (not isinstance(traj['last'], int) or traj['last'] < traj['first']):
            raise ValueError(f"Trajectory setting 'last' must be an integer >= first, got {traj['last']!r}")

        if self.config['secondary_structure'].get('method') != 'dssp':
            raise ValueError(f"Unknown secondary structure method: {self.config['secondary_structure'].get('method')}")

        if not self.config['output'].get('directory'):
            raise ValueError("Missing required output setting: directory")

    def get_trajectory_config(self) -> Dict[str, Any]:
        return self.config.get('trajectory', {})

    def get_frame_range(self) -> FrameRange:
        traj = self.get_trajectory_config()
        return FrameRange(first=traj['first'], last=traj['last'], step=traj['step'])

    def get_secondary_structure_config(self) -> Dict[str, Any]:
        return self.config.get('secondary_structure', {})

    def get_output_config(self) -> Dict[str, Any]:
        return self.config.get('output', {})

    def update_config(self, updates: Dict[str, Any]) -> None:
        """
        Update configuration settings.

        Args:
            updates: Dictionary of configuration updates
        """
        update_dict_recursively(self.config, updates)
        self._validate_config()

    def save_config(self, output_file: Union[str, Path]) -> None:
        """
        Save current configuration to a file.

        Args:
            output_file: Path to save the configuration to
        """
        output_path = Path(output_file)
        logger.info(f"Saving configuration to {output_path}")

        with open(output_path, 'w') as f:
            yaml.dump(self.config, f, default_flow_style=False)

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.config)

    def to_json(self) -> str:
        return json.dumps(self.config, indent=4)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'ConfigManager':
        """
        Create a ConfigManager from a dictionary merged over the defaults.

        Args:
            config_dict: Dictionary of configuration settings

        Returns:
            ConfigManager instance
        """
        instance = cls()
        instance.update_config(copy.deepcopy(config_dict))
        return instance
