"""
Input module for molsimkit.

This module provides the trajectory file backends and topology loading.
"""

from .backends import TrajectoryBackend, NpyBackend, OvitoBackend, open_backend

__all__ = ['TrajectoryBackend', 'NpyBackend', 'OvitoBackend', 'open_backend']
