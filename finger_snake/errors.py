"""
Setup failures. Everything that can go wrong once a game is running is
resolved inside the game loop and never raised.
"""


class SetupError(RuntimeError):
    """A collaborator could not be brought up."""


class TrackerInitError(SetupError):
    """The hand landmark model could not be downloaded or loaded."""


class CameraUnavailableError(SetupError):
    """The camera could not be opened (missing device or permission denied)."""
