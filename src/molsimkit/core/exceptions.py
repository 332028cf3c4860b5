"""
Exception types raised by trajectory handling.
"""


class TrajectoryError(Exception):
    """Base class for trajectory errors."""


class FileOpenError(TrajectoryError, OSError):
    """The trajectory file could not be opened or parsed."""


class EndOfSequence(TrajectoryError):
    """No further frame exists inside the configured frame range."""


class InvalidRangeConfiguration(TrajectoryError, ValueError):
    """A first/last/step combination that cannot be iterated."""
