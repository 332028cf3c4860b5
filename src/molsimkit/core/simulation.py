"""
Simulation: a topology paired with a Trajectory.
"""
import numpy as np
from pathlib import Path
import logging
from typing import Callable, Iterator, Optional, Tuple, Type, Union

from .atoms import Atom, AtomSelection
from .frame import Frame
from .trajectory import Trajectory
from ..io.backends import TrajectoryBackend
from ..io.topology import atoms_from_universe, load_universe, select_indices

logger = logging.getLogger(__name__)

Selection = Union[str, Callable[[Atom], bool]]


class Simulation:
    def __init__(self, topology_file: Union[str, Path], trajectory_file: Union[str, Path],
                 first: int = 1, last: Optional[int] = None, step: int = 1,
                 backend: Optional[Type[TrajectoryBackend]] = None):
        """
        Pair a topology with a trajectory.

        Args:
            topology_file: Structure file with atom names and residues (e.g. PDB)
            trajectory_file: Trajectory file with one frame per snapshot
            first, last, step: Frame range of the trajectory (1-based raw indices)
            backend: Trajectory backend class (default: chosen from the suffix)
        """
        self.topology_file = Path(topology_file)
        self._universe = load_universe(topology_file)
        self._atoms = atoms_from_universe(self._universe)
        self.trajectory = Trajectory(trajectory_file, first=first, last=last, step=step, backend=backend)
        n_frame_atoms = self.trajectory.current_frame().n_atoms
        if n_frame_atoms != len(self._atoms):
            self.trajectory.close()
            raise ValueError(
                f"Atom count mismatch: topology has {len(self._atoms)} atoms, trajectory frames have {n_frame_atoms}."
            )

    def __repr__(self) -> str:
        frame_range = self.trajectory.frame_range
        return (
            "Simulation\n"
            f"    Topology file: {self.topology_file}\n"
            f"    Trajectory file: {self.trajectory.path}\n"
            f"    Total number of frames: {self.trajectory.raw_length()}\n"
            f"    Frame range: {frame_range.start}:{frame_range.step}:{frame_range[-1]}\n"
            f"    Number of frames in range: {len(self)}\n"
            f"    Current frame: {self.trajectory.frame_index}"
        )

    @property
    def atoms(self) -> AtomSelection:
        return self._atoms

    def select(self, selection: Selection) -> AtomSelection:
        """Atoms matching an MDAnalysis selection string or a per-atom predicate."""
        if isinstance(selection, str):
            indices = select_indices(self._universe, selection)
            selected = self._atoms.subset(indices)
        else:
            selected = self._atoms.filter(selection)
        if len(selected) == 0:
            logger.warning(f"Selection {selection!r} matched no atoms.")
        return selected

    def __len__(self) -> int:
        return len(self.trajectory)

    def __iter__(self) -> Iterator[Frame]:
        return iter(self.trajectory)

    def items(self) -> Iterator[Tuple[int, Frame]]:
        return self.trajectory.items()

    @property
    def frame_index(self) -> int:
        return self.trajectory.frame_index

    def current_frame(self) -> Frame:
        return self.trajectory.current_frame()

    def set_frame_range(self, first: int = 1, last: Optional[int] = None, step: int = 1) -> 'Simulation':
        self.trajectory.set_frame_range(first=first, last=last, step=step)
        return self

    def restart(self) -> 'Simulation':
        self.trajectory.restart()
        return self

    def close(self) -> None:
        self.trajectory.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def atoms(simulation: Simulation) -> AtomSelection:
    return simulation.atoms


def positions(frame: Frame) -> np.ndarray:
    return frame.positions


def unitcell(frame: Frame) -> np.ndarray:
    return frame.unitcell
