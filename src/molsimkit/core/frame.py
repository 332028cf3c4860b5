"""
Single-slot frame buffer for trajectory iteration.

A Trajectory owns exactly one Frame and every read overwrites it in place.
Anyone holding a reference to the current frame sees it change on each
advance; use Frame.copy() to keep data across advances.
"""
from dataclasses import dataclass
import numpy as np
from typing import Optional


@dataclass
class Frame:
    positions: np.ndarray  # (n_atoms, 3)
    unitcell: np.ndarray   # (3, 3), columns are the cell vectors
    step: Optional[int] = None

    def __post_init__(self):
        self.positions = np.array(self.positions, dtype=np.float64)
        self.unitcell = np.array(self.unitcell, dtype=np.float64)
        if self.positions.ndim != 2 or self.positions.shape[1] != 3:
            raise ValueError(f"Positions must be 2D (atoms, xyz), got shape {self.positions.shape}.")
        if self.unitcell.shape != (3, 3):
            raise ValueError(f"Unit cell must be 3x3, got {self.unitcell.shape}")

    @property
    def n_atoms(self) -> int:
        return self.positions.shape[0]

    @property
    def has_unitcell(self) -> bool:
        return bool(np.any(self.unitcell))

    def update(self, positions: np.ndarray, unitcell: np.ndarray, step: Optional[int] = None) -> None:
        """Overwrite the buffer contents in place."""
        positions = np.asarray(positions)
        if positions.shape != self.positions.shape:
            raise ValueError(
                f"Frame has {positions.shape[0]} atoms but the buffer holds {self.n_atoms}."
            )
        self.positions[...] = positions
        self.unitcell[...] = unitcell
        self.step = step

    def copy(self) -> 'Frame':
        return Frame(self.positions.copy(), self.unitcell.copy(), self.step)
