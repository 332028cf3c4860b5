"""
Utilities module for molsimkit.
"""

from .helpers import (
    update_dict_recursively,
    ensure_directory,
)

__all__ = [
    'update_dict_recursively',
    'ensure_directory',
]
