"""
Utility functions for molsimkit.
"""
import logging
from typing import Union
from pathlib import Path

logger = logging.getLogger(__name__)


def update_dict_recursively(base_dict: dict, update_with: dict) -> dict:
    """
    Recursively update a dictionary with another dictionary.

    Args:
        base_dict: Base dictionary to update
        update_with: Dictionary containing updates

    Returns:
        Updated dictionary
    """
    for k, v_update in update_with.items():
        if isinstance(v_update, dict) and k in base_dict and isinstance(base_dict[k], dict):
            update_dict_recursively(base_dict[k], v_update)
        else:
            base_dict[k] = v_update
    return base_dict


def ensure_directory(path: Union[str, Path]) -> Path:
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path
