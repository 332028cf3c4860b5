import pytest
import numpy as np
from pathlib import Path

from molsimkit.io.backends import NpyBackend

BOX_LENGTH = 1000.0


def make_positions(n_frames: int, n_atoms: int) -> np.ndarray:
    """Atom ``a`` of raw frame ``r`` sits at (r, a * r, 0): x of atom 0 is the raw frame index."""
    positions = np.zeros((n_frames, n_atoms, 3), dtype=np.float64)
    for r in range(1, n_frames + 1):
        positions[r - 1, :, 0] = r
        positions[r - 1, :, 1] = np.arange(n_atoms) * r
    return positions


def write_npy_trajectory(directory: Path, n_frames: int = 10, n_atoms: int = 4, box: bool = True) -> Path:
    path = directory / "traj.positions.npy"
    np.save(path, make_positions(n_frames, n_atoms))
    if box:
        np.save(directory / "traj.box_matrix.npy", np.eye(3) * BOX_LENGTH)
    return path


class CountingBackend(NpyBackend):
    """NpyBackend that records every frame it decodes and every open."""
    reads = 0
    opens = 0

    def __init__(self, path):
        super().__init__(path)
        CountingBackend.opens += 1

    def _read_next(self):
        CountingBackend.reads += 1
        return super()._read_next()


@pytest.fixture
def npy_trajectory(tmp_path):
    """10-frame, 4-atom trajectory in the .npy cache layout."""
    return write_npy_trajectory(tmp_path)


@pytest.fixture
def counting_backend():
    CountingBackend.reads = 0
    CountingBackend.opens = 0
    return CountingBackend


PDB_LINE = "ATOM  {serial:5d} {name:<4s} {resname:3s} {chain:1s}{resid:4d}    {x:8.3f}{y:8.3f}{z:8.3f}{occ:6.2f}{temp:6.2f}          {elem:>2s}\n"


def write_pdb(path: Path, residues) -> Path:
    """Write ``residues`` = [(resname, resid, [atom names])] as chain A, coordinates zero."""
    serial = 1
    with open(path, 'w') as f:
        for resname, resid, names in residues:
            for name in names:
                f.write(PDB_LINE.format(serial=serial, name=f" {name}" if len(name) < 4 else name,
                                        resname=resname, chain='A', resid=resid,
                                        x=0.0, y=0.0, z=0.0, occ=1.0, temp=0.0, elem=name[0]))
                serial += 1
        f.write("END\n")
    return path


BACKBONE = ['N', 'CA', 'C', 'O']


@pytest.fixture
def peptide_files(tmp_path):
    """Three-residue peptide (12 atoms) with a matching 5-frame trajectory."""
    pdb = write_pdb(tmp_path / "peptide.pdb",
                    [('ALA', 1, BACKBONE), ('GLY', 2, BACKBONE), ('SER', 3, BACKBONE)])
    traj = tmp_path / "peptide.positions.npy"
    np.save(traj, make_positions(5, 12))
    np.save(tmp_path / "peptide.box_matrix.npy", np.eye(3) * BOX_LENGTH)
    return pdb, traj
