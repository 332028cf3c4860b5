"""
Secondary structure maps of a trajectory.

A map is an integer matrix with one row per residue and one column per frame,
holding the class numbers below:

    ===== ==== ============
    code  num  name
    ===== ==== ============
    H     1    alpha helix
    G     2    3-10 helix
    I     3    pi helix
    P     4    kappa helix
    T     5    turn
    E     6    beta strand
    B     7    beta bridge
    S     8    bend
    C     9    coil
    " "   10   loop
    ===== ==== ============
"""
import numpy as np
from pathlib import Path
import logging
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

from tqdm import tqdm

from ..core.atoms import AtomSelection
from ..core.frame import Frame
from ..core.simulation import Selection, Simulation, positions

logger = logging.getLogger(__name__)

SS_CLASSES = {
    'H': (1, 'alpha helix'),
    'G': (2, '3-10 helix'),
    'I': (3, 'pi helix'),
    'P': (4, 'kappa helix'),
    'T': (5, 'turn'),
    'E': (6, 'beta strand'),
    'B': (7, 'beta bridge'),
    'S': (8, 'bend'),
    'C': (9, 'coil'),
    ' ': (10, 'loop'),
}
SS_NUMBER_TO_CODE = {number: code for code, (number, _) in SS_CLASSES.items()}

SSClass = Union[str, int]
SSMethod = Callable[[AtomSelection], Sequence[str]]


def ss_code_to_number(code: SSClass) -> int:
    if isinstance(code, (int, np.integer)):
        if int(code) not in SS_NUMBER_TO_CODE:
            raise ValueError(f"Unknown secondary structure class number: {code}")
        return int(code)
    if code not in SS_CLASSES:
        raise ValueError(f"Unknown secondary structure code: {code!r}")
    return SS_CLASSES[code][0]


def ss_number_to_code(number: SSClass) -> str:
    return SS_NUMBER_TO_CODE[ss_code_to_number(number)]


def ss_name(ss: SSClass) -> str:
    """Human readable class name of a code or class number."""
    return SS_CLASSES[ss_number_to_code(ss)][1]


_BACKBONE = ('N', 'CA', 'C', 'O')
# Column order of the one-hot array returned by pydssp's assign (loop, helix, strand)
_DSSP_ALPHABET = np.array(['C', 'H', 'E'])


def backbone_segments(selection: AtomSelection) -> List[Tuple[List[int], np.ndarray]]:
    """
    Split the selection into runs of bonded residues with a complete backbone.

    A run ends at a chain change, a gap in residue numbers, or a residue
    missing one of N/CA/C/O.

    Returns:
        List of (residue positions in the selection, (n, 4, 3) N/CA/C/O coordinates)
    """
    segments = []
    residues, backbone, previous = [], [], None
    for ires, residue in enumerate(selection.residue_slices()):
        names = list(selection.names[residue])
        key = (selection.chains[residue.start], int(selection.resids[residue.start]))
        if not all(name in names for name in _BACKBONE):
            previous = None
            continue
        if previous is None or key[0] != previous[0] or key[1] != previous[1] + 1:
            if residues:
                segments.append((residues, np.asarray(backbone, dtype=np.float64)))
            residues, backbone = [], []
        coords = selection.positions[residue]
        residues.append(ires)
        backbone.append([coords[names.index(name)] for name in _BACKBONE])
        previous = key
    if residues:
        segments.append((residues, np.asarray(backbone, dtype=np.float64)))
    return segments


def dssp_run(selection: AtomSelection) -> List[str]:
    """
    Classify each residue of ``selection`` with DSSP.

    Uses the NumPy DSSP implementation bundled with MDAnalysis, which assigns
    helix (H), strand (E) or loop. Each bonded backbone segment is assigned
    separately. Loops, single-residue segments and residues without a complete
    N/CA/C/O backbone are reported as coil (C).
    """
    from MDAnalysis.analysis.dssp.pydssp_numpy import assign

    codes = ['C'] * selection.n_residues
    for residues, backbone in backbone_segments(selection):
        if len(residues) < 2:
            logger.debug(f"Isolated residue at position {residues[0]} left as coil.")
            continue
        onehot = assign(backbone)
        for ires, code in zip(residues, _DSSP_ALPHABET[np.argmax(onehot, axis=-1)]):
            codes[ires] = str(code)
    return codes


def _ss_frame(selection: AtomSelection, frame: Frame, ss_method: SSMethod) -> Sequence[str]:
    selection.update_positions(positions(frame))
    return ss_method(selection)


def ss_map(simulation: Simulation, selection: Selection = 'protein',
           ss_method: SSMethod = dssp_run, show_progress: bool = True) -> np.ndarray:
    """
    Secondary structure map of the trajectory.

    Args:
        simulation: Simulation to iterate over
        selection: MDAnalysis selection string or per-atom predicate
        ss_method: Classifier taking the selected atoms (with the frame's
            coordinates) and returning one code per residue
        show_progress: Show a progress bar

    Returns:
        Integer matrix of shape (n_residues, n_frames)
    """
    sel = simulation.select(selection)
    n_residues = sel.n_residues
    ssmap = np.zeros((n_residues, len(simulation)), dtype=int)
    frames = tqdm(simulation, total=len(simulation), desc="Secondary structure", unit="fr",
                  disable=not show_progress)
    for iframe, frame in enumerate(frames):
        ss = _ss_frame(sel, frame, ss_method)
        if len(ss) != n_residues:
            raise ValueError(
                f"Classifier returned {len(ss)} codes for {n_residues} residues at frame {simulation.frame_index}."
            )
        ssmap[:, iframe] = [ss_code_to_number(code) for code in ss]
    logger.info(f"Secondary structure map computed: {n_residues} residues x {len(simulation)} frames.")
    return ssmap


def ss_mean(ssmap: np.ndarray, ss_class: Union[SSClass, Iterable[SSClass]],
            axis: Optional[int] = None) -> Union[float, np.ndarray]:
    """
    Mean content of one or more secondary structure classes.

    Args:
        ssmap: Map returned by ss_map
        ss_class: Code ("H"), class number (1), or a list of them
        axis: None for the whole map, 0 for the content of each frame,
            1 for the content of each residue

    Examples:
        >>> ss_mean(ssmap, "H")
        >>> ss_mean(ssmap, ["C", "T"], axis=0)
    """
    if isinstance(ss_class, (str, int, np.integer)):
        ss_class = [ss_class]
    numbers = [ss_code_to_number(c) for c in ss_class]
    in_class = np.isin(ssmap, numbers)
    if axis is None:
        return float(np.mean(in_class))
    return np.mean(in_class, axis=axis)


def save_ss_map(ssmap: np.ndarray, path: Union[str, Path]) -> Path:
    path = Path(path).with_suffix('.npy')
    path.parent.mkdir(parents=True, exist_ok=True)
    np.save(path, ssmap)
    logger.info(f"Secondary structure map saved: {path.name}")
    return path


def load_ss_map(path: Union[str, Path]) -> np.ndarray:
    path = Path(path).with_suffix('.npy')
    if not path.exists():
        raise FileNotFoundError(f"Secondary structure map not found: {path}")
    return np.load(path)
