"""
Build error types.
"""


class IconpackError(Exception):
    """Base class for build failures."""


class ConfigError(IconpackError):
    """Missing or malformed configuration."""


class EngineError(IconpackError):
    """A conversion engine rejected an input asset."""


class ArchiveError(IconpackError):
    """The archive writer failed."""


class StageError(IconpackError):
    """A pipeline task failed; the original error is chained as __cause__."""

    def __init__(self, task: str, phase: str, error: BaseException):
        super().__init__(f"{task} failed in phase '{phase}': {error}")
        self.task = task
        self.phase = phase
        self.error = error
