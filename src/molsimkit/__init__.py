"""
molsimkit: molecular simulation trajectory analysis.
"""

__version__ = "0.1.0"

# Core components
from .core.exceptions import TrajectoryError, FileOpenError, EndOfSequence, InvalidRangeConfiguration
from .core.frame import Frame
from .core.trajectory import Trajectory, FrameRange
from .core.atoms import Atom, AtomSelection
from .core.simulation import Simulation, atoms, positions, unitcell

# IO components
from .io.backends import TrajectoryBackend, NpyBackend, OvitoBackend, open_backend

# Analysis components
from .analysis.reweight import reweight, ReweightResults
from .analysis.secondary_structure import (
    ss_map,
    ss_mean,
    dssp_run,
    ss_code_to_number,
    ss_number_to_code,
    ss_name,
    save_ss_map,
    load_ss_map,
)

# Utility components
from .utils.config_manager import ConfigManager

__all__ = [
    # Core
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
    # IO
    'TrajectoryBackend',
    'NpyBackend',
    'OvitoBackend',
    'open_backend',
    # Analysis
    'reweight',
    'ReweightResults',
    'ss_map',
    'ss_mean',
    'dssp_run',
    'ss_code_to_number',
    'ss_number_to_code',
    'ss_name',
    'save_ss_map',
    'load_ss_map',
    # Utils
    'ConfigManager',
]
