"""
Atom records with a persistent coordinate buffer.
"""
from dataclasses import dataclass
import numpy as np
from typing import Callable, Iterator, NamedTuple, Union


class Atom(NamedTuple):
    index: int  # 0-based position in the frame coordinates
    name: str
    resname: str
    resid: int
    chain: str


@dataclass
class AtomSelection:
    indices: np.ndarray
    names: np.ndarray
    resnames: np.ndarray
    resids: np.ndarray
    chains: np.ndarray
    positions: np.ndarray

    def __post_init__(self):
        self.indices = np.asarray(self.indices, dtype=np.int64)
        self.names = np.asarray(self.names, dtype=str)
        self.resnames = np.asarray(self.resnames, dtype=str)
        self.resids = np.asarray(self.resids, dtype=np.int64)
        self.chains = np.asarray(self.chains, dtype=str)
        self.positions = np.array(self.positions, dtype=np.float64).reshape(-1, 3)
        n = len(self.indices)
        for name in ('names', 'resnames', 'resids', 'chains', 'positions'):
            if len(getattr(self, name)) != n:
                raise ValueError(f"Atom count mismatch: {n} indices but {len(getattr(self, name))} {name}.")

    def __len__(self) -> int:
        return len(self.indices)

    def __iter__(self) -> Iterator[Atom]:
        for i in range(len(self)):
            yield Atom(int(self.indices[i]), str(self.names[i]), str(self.resnames[i]),
                       int(self.resids[i]), str(self.chains[i]))

    def subset(self, mask: Union[np.ndarray, list]) -> 'AtomSelection':
        """New selection holding the atoms picked by a boolean mask or positional indices."""
        mask = np.asarray(mask)
        return AtomSelection(self.indices[mask], self.names[mask], self.resnames[mask],
                             self.resids[mask], self.chains[mask], self.positions[mask])

    def filter(self, predicate: Callable[[Atom], bool]) -> 'AtomSelection':
        return self.subset(np.array([bool(predicate(atom)) for atom in self], dtype=bool))

    def residue_starts(self) -> np.ndarray:
        """Offsets where a new residue begins (a change of chain or residue number)."""
        if len(self) == 0:
            return np.zeros(0, dtype=np.int64)
        changed = (self.resids[1:] != self.resids[:-1]) | (self.chains[1:] != self.chains[:-1])
        return np.concatenate(([0], np.nonzero(changed)[0] + 1))

    @property
    def n_residues(self) -> int:
        return len(self.residue_starts())

    def residue_slices(self) -> Iterator[slice]:
        starts = self.residue_starts()
        ends = np.append(starts[1:], len(self))
        for start, end in zip(starts, ends):
            yield slice(int(start), int(end))

    def update_positions(self, coordinates: np.ndarray) -> None:
        """Copy this selection's atoms out of a full-system coordinate array, in place."""
        self.positions[...] = coordinates[self.indices]
