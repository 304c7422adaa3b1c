"""
Error taxonomy shared across ReFormat.

Nothing here is fatal: every failure path returns the session to a
previously valid state.
"""


class ReformatError(Exception):
    """Base class for all ReFormat errors."""
    pass


class InputError(ReformatError):
    """Artifact could not be read or has an unsupported type."""
    pass


class GenerationError(ReformatError):
    """The generation service failed or returned an unusable payload."""
    pass


class PlaybackError(ReformatError):
    """Audio device was denied, busy, or missing."""
    pass


class InvalidTransitionError(ReformatError):
    """A session operation was requested from a state that forbids it."""
    pass
