"""
Frame reweighting under a pairwise energy perturbation.

For every frame the perturbation energy is summed over the atom pairs closer
than a cutoff (under the frame's periodic cell), and each frame receives the
Boltzmann factor exp(-E / (k T)).
"""
from dataclasses import dataclass
import numpy as np
from pathlib import Path
import logging
from typing import Callable, Optional, Sequence, Union

from MDAnalysis.lib.distances import capped_distance, self_capped_distance
from MDAnalysis.lib.mdamath import triclinic_box
from tqdm import tqdm

from ..core.frame import Frame
from ..core.simulation import Simulation, positions, unitcell

logger = logging.getLogger(__name__)

# f(i, j, d) -> energy per pair; i, j index the atoms inside the groups, d is the distance
PerturbationFunction = Callable[[np.ndarray, np.ndarray, np.ndarray], np.ndarray]


@dataclass
class ReweightResults:
    """
    Result of a reweighting analysis.

    Attributes:
        probability: Normalized weight of each frame after the perturbation
        relative_probability: Weight of each frame relative to the unperturbed one
        energy: Perturbation energy of each frame
    """
    probability: np.ndarray
    relative_probability: np.ndarray
    energy: np.ndarray

    def __str__(self) -> str:
        def block(title: str, label: str, values: np.ndarray) -> str:
            rule = '-' * len(title)
            return (f"{rule}\n{title}\n{rule}\n\n"
                    f"Average {label} = {np.mean(values)}\n"
                    f"standard deviation = {_sample_std(values)}\n")

        return "\n".join([
            block("FRAME WEIGHTS", "probability", self.probability),
            block("FRAME WEIGHTS RELATIVE TO THE ORIGINAL ONES", "probability", self.relative_probability),
            block("COMPUTED ENERGY AFTER PERTURBATION", "energy", self.energy),
        ])

    def save(self, path: Union[str, Path]) -> Path:
        path = Path(path).with_suffix('.npz')
        path.parent.mkdir(parents=True, exist_ok=True)
        np.savez(path, probability=self.probability,
                 relative_probability=self.relative_probability, energy=self.energy)
        logger.info(f"Reweighting results saved: {path.name}")
        return path

    @staticmethod
    def load(path: Union[str, Path]) -> 'ReweightResults':
        path = Path(path).with_suffix('.npz')
        if not path.exists():
            raise FileNotFoundError(f"Reweighting results not found: {path}")
        with np.load(path) as data:
            return ReweightResults(data['probability'], data['relative_probability'], data['energy'])


def _sample_std(values: np.ndarray) -> float:
    return float(np.std(values, ddof=1)) if len(values) > 1 else float('nan')


def box_dimensions(frame: Frame) -> Optional[np.ndarray]:
    """Unit cell as MDAnalysis box dimensions, or None for a non-periodic frame."""
    if not frame.has_unitcell:
        return None
    cell = unitcell(frame)
    return triclinic_box(cell[:, 0], cell[:, 1], cell[:, 2])


def frame_energy(frame: Frame, f_perturbation: PerturbationFunction,
                 group_1: np.ndarray, group_2: Optional[np.ndarray] = None,
                 cutoff: float = 12.0) -> float:
    """Perturbation energy of a single frame."""
    coordinates = positions(frame)
    box = box_dimensions(frame)
    first_coors = coordinates[group_1]
    if group_2 is None:
        pairs, distances = self_capped_distance(first_coors, max_cutoff=cutoff, box=box)
    else:
        second_coors = coordinates[group_2]
        pairs, distances = capped_distance(first_coors, second_coors, max_cutoff=cutoff,
                                           box=box, return_distances=True)
    if len(pairs) == 0:
        return 0.0
    return float(np.sum(f_perturbation(pairs[:, 0], pairs[:, 1], distances)))


def reweight(simulation: Simulation, f_perturbation: PerturbationFunction,
             group_1: Sequence[int], group_2: Optional[Sequence[int]] = None,
             cutoff: float = 12.0, k: float = 1.0, T: float = 1.0,
             show_progress: bool = False) -> ReweightResults:
    """
    Reweight the frames of a simulation under a pairwise perturbation.

    With a single group every unordered pair of distinct atoms within the
    cutoff contributes once; an atom is never paired with itself. With two
    groups, every (group_1, group_2) pair within the cutoff contributes.

    Args:
        simulation: Simulation to iterate over
        f_perturbation: Vectorized pair energy f(i, j, d). ``i`` and ``j`` are
            positions inside group_1 and group_2 (or both inside group_1), ``d``
            the pair distances
        group_1: 0-based atom indices
        group_2: Optional second group of 0-based atom indices
        cutoff: Pair distance cutoff, in the trajectory's length unit
        k: Boltzmann constant in the energy unit of f_perturbation
        T: Temperature
        show_progress: Show a progress bar

    Returns:
        ReweightResults with per-frame probabilities and energies
    """
    if cutoff <= 0:
        raise ValueError("cutoff must be positive.")
    if k <= 0 or T <= 0:
        raise ValueError("k and T must be positive.")
    group_1 = np.asarray(group_1, dtype=np.int64)
    group_2 = None if group_2 is None else np.asarray(group_2, dtype=np.int64)

    energy = np.zeros(len(simulation))
    frames = tqdm(simulation, total=len(simulation), desc="Reweighting frames", unit="fr",
                  disable=not show_progress)
    for iframe, frame in enumerate(frames):
        energy[iframe] = frame_energy(frame, f_perturbation, group_1, group_2, cutoff=cutoff)
        logger.debug(f"Frame {simulation.frame_index}: perturbation energy {energy[iframe]:.6g}")

    relative_probability = np.exp(-energy / (k * T))
    probability = relative_probability / np.sum(relative_probability)
    return ReweightResults(probability, relative_probability, energy)
