"""
Core module for molsimkit.

This module provides the frame buffer, the Trajectory iterator and the
Simulation wrapper.
"""

from .exceptions import TrajectoryError, FileOpenError, EndOfSequence, InvalidRangeConfiguration
from .frame import Frame
from .trajectory import Trajectory, FrameRange
from .atoms import Atom, AtomSelection
from .simulation import Simulation, atoms, positions, unitcell

__all__ = [
    'TrajectoryError',
    'FileOpenError',
    'EndOfSequence',
    'InvalidRangeConfiguration',
    'Frame',
    'Trajectory',
    'FrameRange',
    'Atom',
    'AtomSelection',
    'Simulation',
    'atoms',
    'positions',
    'unitcell',
]
