"""
Plot styling module for molsimkit.

This module provides the MolSim matplotlib style: thick lines, a boxed frame,
no grid and Computer Modern fonts.
"""
import matplotlib.pyplot as plt
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

# Default style parameters
MOLSIM_STYLE = {
    'lines.linewidth': 2,
    'axes.grid': False,
    'axes.spines.top': True,
    'axes.spines.right': True,
    'xtick.top': True,
    'ytick.right': True,
    'xtick.direction': 'in',
    'ytick.direction': 'in',
    'font.family': 'serif',
    'font.serif': ['CMU Serif', 'Computer Modern Roman', 'DejaVu Serif'],
    'mathtext.fontset': 'cm',
    'axes.unicode_minus': False,
    'legend.frameon': False,
    'figure.figsize': (6, 4.5),
    'savefig.pad_inches': 0.2,
}

# Axis-level defaults, overridden by keyword arguments of the caller
MOLSIM_AXES_DEFAULTS = {
    'xlabel': 'x',
    'ylabel': 'y',
}


def style_kwargs(defaults: Optional[Dict[str, Any]] = None, **kwargs) -> Dict[str, Any]:
    """
    Merge caller keyword arguments over the style defaults.

    Args:
        defaults: Base parameters (default: MOLSIM_AXES_DEFAULTS)
        **kwargs: Parameters to override or add

    Returns:
        New dictionary; the defaults are left untouched
    """
    params = dict(MOLSIM_AXES_DEFAULTS if defaults is None else defaults)
    params.update(kwargs)
    return params


def apply_style(style: Optional[Dict[str, Any]] = None) -> None:
    """Apply the MolSim style, with optional rcParams overrides, globally."""
    params = dict(MOLSIM_STYLE)
    if style:
        params.update(style)
    plt.style.use(params)


@contextmanager
def molsim_style(style: Optional[Dict[str, Any]] = None) -> Iterator[None]:
    """Apply the MolSim style only inside a ``with`` block."""
    params = dict(MOLSIM_STYLE)
    if style:
        params.update(style)
    with plt.style.context(params):
        yield


def get_style_params() -> Dict[str, Any]:
    """Current values of the rcParams the MolSim style sets."""
    return {k: v for k, v in plt.rcParams.items() if k in MOLSIM_STYLE}


def reset_style() -> None:
    """Reset the style to matplotlib defaults."""
    plt.style.use('default')
