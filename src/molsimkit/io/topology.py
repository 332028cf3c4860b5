"""
Topology loading through MDAnalysis.
"""
import numpy as np
from pathlib import Path
import logging
from typing import Optional, Union

import MDAnalysis as mda

from ..core.atoms import AtomSelection

logger = logging.getLogger(__name__)


def load_universe(topology_file: Union[str, Path]) -> mda.Universe:
    path = Path(topology_file)
    if not path.exists():
        raise FileNotFoundError(f"Topology file not found: {topology_file}")
    logger.info(f"Loading topology from {path.name}")
    return mda.Universe(str(path))


def atoms_from_universe(universe: mda.Universe, indices: Optional[np.ndarray] = None) -> AtomSelection:
    """Atom records (with the topology's coordinates) for ``indices``, or for every atom."""
    group = universe.atoms if indices is None else universe.atoms[np.asarray(indices, dtype=np.int64)]
    if hasattr(group, 'chainIDs'):
        chains = group.chainIDs
    else:
        chains = group.segids
    return AtomSelection(
        indices=group.indices,
        names=group.names,
        resnames=group.resnames,
        resids=group.resids,
        chains=chains,
        positions=group.positions,
    )


def select_indices(universe: mda.Universe, selection: str) -> np.ndarray:
    """0-based atom indices matching an MDAnalysis selection string."""
    return universe.select_atoms(selection).indices
