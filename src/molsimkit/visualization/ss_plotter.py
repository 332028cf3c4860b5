"""
Heatmaps of secondary structure maps.
"""
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.colors import BoundaryNorm, ListedColormap
from pathlib import Path
import logging
from typing import Optional, Union

from ..analysis.secondary_structure import SS_CLASSES
from .styles import molsim_style, style_kwargs

logger = logging.getLogger(__name__)

# One color per class number 1..10
SS_COLORS = [
    '#d62728',  # alpha helix
    '#ff7f0e',  # 3-10 helix
    '#e377c2',  # pi helix
    '#8c564b',  # kappa helix
    '#17becf',  # turn
    '#1f77b4',  # beta strand
    '#9467bd',  # beta bridge
    '#bcbd22',  # bend
    '#dddddd',  # coil
    '#ffffff',  # loop
]


def plot_ss_map(ssmap: np.ndarray, output_path: Optional[Union[str, Path]] = None,
                ax: Optional[plt.Axes] = None, **kwargs) -> plt.Axes:
    """
    Draw a residue x frame secondary structure map.

    Args:
        ssmap: Integer map from ss_map
        output_path: Save the figure here when given (the figure is then closed)
        ax: Axes to draw on (default: a new figure)
        **kwargs: xlabel, ylabel, title, dpi

    Returns:
        The axes drawn on
    """
    if ssmap.ndim != 2:
        raise ValueError(f"Secondary structure map must be 2D, got shape {ssmap.shape}")
    params = style_kwargs(xlabel='Frame', ylabel='Residue', title=None, dpi=300)
    params.update(kwargs)
    cmap = ListedColormap(SS_COLORS)
    norm = BoundaryNorm(np.arange(0.5, len(SS_COLORS) + 1.5), cmap.N)

    with molsim_style():
        if ax is None:
            fig, ax = plt.subplots()
        else:
            fig = ax.figure
        image = ax.imshow(ssmap, aspect='auto', origin='lower', interpolation='nearest',
                          cmap=cmap, norm=norm)
        ax.set_xlabel(params['xlabel'])
        ax.set_ylabel(params['ylabel'])
        if params['title']:
            ax.set_title(params['title'])
        ticks = np.arange(1, len(SS_COLORS) + 1)
        colorbar = fig.colorbar(image, ax=ax, ticks=ticks)
        names = {number: name for number, name in SS_CLASSES.values()}
        colorbar.ax.set_yticklabels([names[t] for t in ticks])

        if output_path is not None:
            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            fig.savefig(output_path, dpi=params['dpi'], bbox_inches='tight')
            logger.info(f"Plot saved to: {output_path}")
            plt.close(fig)
    return ax
