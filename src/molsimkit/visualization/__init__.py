"""
Visualization module for molsimkit.

This module provides the MolSim plot style and secondary structure heatmaps.
"""

from .styles import apply_style, molsim_style, style_kwargs, reset_style, MOLSIM_STYLE
from .ss_plotter import plot_ss_map

__all__ = [
    'apply_style',
    'molsim_style',
    'style_kwargs',
    'reset_style',
    'MOLSIM_STYLE',
    'plot_ss_map'
]
