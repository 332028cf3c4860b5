"""
Trajectory file backends.

A backend is a forward-only reader over a trajectory file. Raw frame indices
are 1-based; ``position`` is the raw index of the last frame read (0 before
the first read). Backends that can jump to a frame override ``advance``.
"""
import numpy as np
from abc import ABC, abstractmethod
from pathlib import Path
import logging
from typing import Optional, Tuple, Type, Union

from ..core.exceptions import FileOpenError
from ..core.frame import Frame

logger = logging.getLogger(__name__)

# Try to import OVITO, but don't fail if it's not available
try:
    from ovito.io import import_file
    OVITO_AVAILABLE = True
except ImportError as e:
    logger.debug(f"OVITO import failed: {e}")
    OVITO_AVAILABLE = False

RawFrame = Tuple[np.ndarray, np.ndarray, Optional[int]]


class TrajectoryBackend(ABC):
    """Sequential reader over one trajectory file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.position = 0
        self.closed = False

    @abstractmethod
    def raw_frame_count(self) -> int:
        """Total number of frames in the file."""

    @abstractmethod
    def _read_next(self) -> RawFrame:
        """Decode the frame following ``position`` as (positions, unitcell, step)."""

    def _release(self) -> None:
        pass

    def _check_readable(self) -> None:
        if self.closed:
            raise ValueError(f"I/O operation on closed trajectory: {self.path}")
        if self.position >= self.raw_frame_count():
            raise EOFError(f"End of file reached in {self.path.name} after {self.position} frames.")

    def read(self) -> Frame:
        """Read the next frame into a newly allocated buffer."""
        self._check_readable()
        positions, unitcell, step = self._read_next()
        self.position += 1
        return Frame(positions, unitcell, step)

    def read_into(self, buffer: Frame) -> None:
        """Read the next frame, overwriting ``buffer`` in place."""
        self._check_readable()
        positions, unitcell, step = self._read_next()
        self.position += 1
        buffer.update(positions, unitcell, step)

    def advance(self, buffer: Frame, n: int) -> None:
        """Move ``n`` frames forward, leaving the last one read in ``buffer``.

        Without seek support every intermediate frame is decoded and thrown
        away, so the cost is linear in ``n``.
        """
        for _ in range(n):
            self.read_into(buffer)

    def close(self) -> None:
        if not self.closed:
            self._release()
            self.closed = True
            logger.debug(f"Closed trajectory backend for {self.path.name}")

    def reopen(self) -> 'TrajectoryBackend':
        """Open a fresh backend of the same kind on the same file."""
        return type(self)(self.path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class NpyBackend(TrajectoryBackend):
    """Reads the ``<stem>.positions.npy`` / ``<stem>.box_matrix.npy`` cache layout.

    Positions have shape (n_frames, n_atoms, 3). The box file is optional and
    holds either one (3, 3) matrix or one per frame.
    """

    def __init__(self, path: Union[str, Path]):
        super().__init__(path)
        try:
            self._positions = np.load(self.path, mmap_mode='r')
        except (OSError, ValueError) as e:
            raise FileOpenError(f"Could not read positions from {self.path}: {e}") from e
        if self._positions.ndim != 3 or self._positions.shape[2] != 3:
            raise FileOpenError(
                f"Positions in {self.path.name} must be 3D (frames, atoms, xyz), got {self._positions.shape}."
            )
        if self._positions.shape[0] == 0:
            raise FileOpenError(f"No frames in {self.path.name}.")
        self._box = self._load_box()

    def _box_path(self) -> Path:
        name = self.path.name
        stem = name[:-len('.positions.npy')] if name.endswith('.positions.npy') else self.path.stem
        return self.path.with_name(f"{stem}.box_matrix.npy")

    def _load_box(self) -> np.ndarray:
        box_path = self._box_path()
        if not box_path.exists():
            logger.debug(f"No box file for {self.path.name}; using an empty unit cell.")
            return np.zeros((3, 3))
        try:
            box = np.load(box_path)
        except (OSError, ValueError) as e:
            raise FileOpenError(f"Could not read box matrix from {box_path}: {e}") from e
        if box.shape != (3, 3) and box.shape != (self._positions.shape[0], 3, 3):
            raise FileOpenError(f"Box matrix in {box_path.name} has shape {box.shape}, expected (3,3) or (n_frames,3,3).")
        return box

    def raw_frame_count(self) -> int:
        return int(self._positions.shape[0])

    def _read_next(self) -> RawFrame:
        index = self.position
        box = self._box if self._box.ndim == 2 else self._box[index]
        return np.asarray(self._positions[index]), box, None

    def _release(self) -> None:
        self._positions = None


class OvitoBackend(TrajectoryBackend):
    """Any trajectory format OVITO's ``import_file`` understands."""

    def __init__(self, path: Union[str, Path], input_format: Optional[str] = None):
        super().__init__(path)
        if not OVITO_AVAILABLE:
            raise ImportError("OVITO is not available. Please install OVITO Python to read this trajectory format.")
        self.input_format = input_format
        try:
            self._pipeline = import_file(str(self.path), input_format=input_format, multiple_frames=True)
        except Exception as e:
            logger.error(f"OVITO failed to load file '{self.path.name}': {e}")
            raise FileOpenError(f"OVITO import failed for {self.path}: {e}") from e
        self._n_frames = self._pipeline.source.num_frames
        if self._n_frames == 0:
            raise FileOpenError(f"OVITO: 0 frames in {self.path.name}.")
        logger.debug(f"OVITO format for {self.path.name}: {input_format or 'auto-detected'}")

    def raw_frame_count(self) -> int:
        return int(self._n_frames)

    def _read_next(self) -> RawFrame:
        data = self._pipeline.compute(self.position)
        if not (hasattr(data, 'particles') and data.particles):
            raise ValueError(f"OVITO: Could not read particle data from frame {self.position + 1}.")
        positions = np.array(data.particles.positions, dtype=np.float64)
        if data.cell is not None:
            unitcell = np.array(data.cell.matrix, dtype=np.float64)[:3, :3]
        else:
            unitcell = np.zeros((3, 3))
        step = data.attributes.get('Timestep')
        return positions, unitcell, None if step is None else int(step)

    def advance(self, buffer: Frame, n: int) -> None:
        # OVITO pipelines evaluate any frame directly.
        if n <= 0:
            return
        self.position += n - 1
        self.read_into(buffer)

    def reopen(self) -> 'OvitoBackend':
        return type(self)(self.path, input_format=self.input_format)

    def _release(self) -> None:
        self._pipeline = None


def open_backend(path: Union[str, Path], backend: Optional[Type[TrajectoryBackend]] = None) -> TrajectoryBackend:
    """Open ``path`` with ``backend``, or pick one from the file suffix."""
    filepath = Path(path)
    if not filepath.exists():
        raise FileOpenError(f"Trajectory file not found: {path}")
    if backend is None:
        backend = NpyBackend if filepath.suffix.lower() == '.npy' else OvitoBackend
    logger.info(f"Opening trajectory '{filepath.name}' with {backend.__name__}.")
    return backend(filepath)
