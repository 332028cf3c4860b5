"""
Frame-by-frame iteration over a trajectory file.

Raw frame indices are 1-based positions in the file. A Trajectory visits the
raw indices of its frame range, holding one frame at a time in a buffer that
is overwritten on every advance:

    >>> trajectory = Trajectory("run.positions.npy", first=2, step=2, last=4)
    >>> for frame in trajectory:
    ...     print(trajectory.frame_index, frame.positions[0, 0])
    >>> for i, frame in trajectory.items():     # (raw index, frame)
    ...     ...
    >>> for n, frame in enumerate(trajectory, start=1):  # counter, frame
    ...     ...

Backends only read forward, so reaching a raw index means reading (and
discarding) every frame before it.
"""
from dataclasses import dataclass
from pathlib import Path
import logging
from typing import Iterator, Optional, Tuple, Type, Union

from .exceptions import EndOfSequence, InvalidRangeConfiguration
from .frame import Frame
from ..io.backends import TrajectoryBackend, open_backend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameRange:
    """First/last/step selection of raw frames. ``last=None`` means the end of the file."""
    first: int = 1
    last: Optional[int] = None
    step: int = 1

    def resolve(self, raw_length: int) -> range:
        last = raw_length if self.last is None else self.last
        if self.step < 1:
            raise InvalidRangeConfiguration(f"Frame step must be a positive integer, got {self.step}.")
        if self.first < 1:
            raise InvalidRangeConfiguration(f"First frame must be >= 1, got {self.first}.")
        if self.first > last:
            raise InvalidRangeConfiguration(f"First frame ({self.first}) is past the last frame ({last}).")
        if last > raw_length:
            raise InvalidRangeConfiguration(
                f"Last frame ({last}) exceeds the number of frames in the file ({raw_length})."
            )
        return range(self.first, last + 1, self.step)


class Trajectory:
    """Restartable iterator over the frames of a trajectory file.

    Args:
        path: Trajectory file
        first: First raw frame to visit (1-based)
        last: Last raw frame to visit (default: last frame of the file)
        step: Stride between visited raw frames
        backend: Backend class to open the file with (default: chosen from the suffix)
    """

    def __init__(self, path: Union[str, Path], first: int = 1, last: Optional[int] = None, step: int = 1,
                 backend: Optional[Type[TrajectoryBackend]] = None):
        handle = open_backend(path, backend)
        try:
            frame_range = FrameRange(first, last, step).resolve(handle.raw_frame_count())
            self._attach(handle, frame_range)
        except Exception:
            handle.close()
            raise

    @classmethod
    def from_backend(cls, backend: TrajectoryBackend, frame_range: range) -> 'Trajectory':
        """Wrap an open backend positioned at the start of its file."""
        trajectory = cls.__new__(cls)
        trajectory._attach(backend, frame_range)
        return trajectory

    def _attach(self, backend: TrajectoryBackend, frame_range: range) -> None:
        self._backend = backend
        self._frame_range = frame_range
        self._frame = backend.read()
        backend.advance(self._frame, frame_range[0] - 1)
        self._frame_index = frame_range[0]

    def __repr__(self) -> str:
        return (
            "Trajectory\n"
            f"    Trajectory file: {self.path}\n"
            f"    Total number of frames: {self.raw_length()}\n"
            f"    Frame range: {self._frame_range.start}:{self._frame_range.step}:{self._frame_range[-1]}\n"
            f"    Number of frames in range: {len(self)}\n"
            f"    Current frame: {self._frame_index}"
        )

    @property
    def frame_range(self) -> range:
        return self._frame_range

    @property
    def frame_index(self) -> int:
        return self._frame_index

    @property
    def path(self) -> Path:
        return self._backend.path

    @property
    def first_index(self) -> int:
        return self._frame_range[0]

    @property
    def last_index(self) -> int:
        return self._frame_range[-1]

    def keys(self) -> range:
        return self._frame_range

    def current_frame(self) -> Frame:
        """The live frame buffer. It is overwritten by the next advance."""
        return self._frame

    def copy_frame(self) -> Frame:
        """A copy of the current frame that later advances leave untouched."""
        return self._frame.copy()

    def raw_length(self) -> int:
        """Number of frames in the file, regardless of the frame range."""
        return self._backend.raw_frame_count()

    def __len__(self) -> int:
        return len(self._frame_range)

    def close(self) -> None:
        self._backend.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def restart(self) -> 'Trajectory':
        """Reopen the file and go back to the first frame of the range."""
        self._backend.close()
        self._backend = self._backend.reopen()
        self._backend.read_into(self._frame)
        self._backend.advance(self._frame, self._frame_range[0] - 1)
        self._frame_index = self._frame_range[0]
        logger.debug(f"Restarted {self.path.name} at frame {self._frame_index}")
        return self

    def next_frame(self) -> Frame:
        """Advance to the next frame of the range and return the buffer.

        Raises:
            EndOfSequence: If the current frame is the last one of the range
        """
        frame_range = self._frame_range
        last = frame_range[-1]
        if self._frame_index == last:
            raise EndOfSequence(f"End of trajectory: frame {last} is the last frame of the range.")
        candidate = self._frame_index + 1
        while candidate not in frame_range and candidate < last:
            candidate += 1
        if candidate not in frame_range:
            raise EndOfSequence(f"End of trajectory: no frame of the range follows frame {self._frame_index}.")
        self._backend.advance(self._frame, candidate - self._frame_index)
        self._frame_index = candidate
        return self._frame

    def __iter__(self) -> Iterator[Frame]:
        self.restart()
        yield self._frame
        while self._frame_index < self._frame_range[-1]:
            try:
                self.next_frame()
            except EndOfSequence:
                return
            yield self._frame

    def items(self) -> Iterator[Tuple[int, Frame]]:
        """Iterate over (raw frame index, frame) pairs."""
        for frame in self:
            yield self._frame_index, frame

    def set_frame_range(self, first: int = 1, last: Optional[int] = None, step: int = 1) -> 'Trajectory':
        """Select a new range of frames and restart from its first frame.

        ``last`` defaults to the number of frames in the *current* range, not
        to the length of the file.
        """
        if last is None:
            last = len(self)
        self._frame_range = FrameRange(first, last, step).resolve(self.raw_length())
        self._frame_index = self._frame_range[0]
        logger.info(f"Frame range of {self.path.name} set to {first}:{step}:{self._frame_range[-1]}")
        return self.restart()
