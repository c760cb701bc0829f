"""Custom exception classes for vio_stereo."""

from __future__ import annotations

from typing import Any, Optional


class VioStereoError(Exception):
    """Base exception for all vio_stereo errors."""

    pass


class StereoFrameError(VioStereoError):
    """Base exception for stereo frame logic errors.

    These flag a bug upstream (bad bookkeeping, corrupted input), never a
    condition that correct operation is expected to hit.
    """

    pass


class FrameMismatchError(StereoFrameError):
    """Raised when left/right frame id or timestamp disagree with the stereo frame."""

    pass


class InvariantViolationError(StereoFrameError):
    """Raised when a stereo frame fails a structural or geometric check."""

    def __init__(self, message: str, index: Optional[int] = None, value: Any = None):
        self.index = index
        self.value = value
        super().__init__(message)


class NotRectifiedError(StereoFrameError):
    """Raised when a rectified-only operation runs on an unrectified frame."""

    pass


class FrozenFrameError(StereoFrameError):
    """Raised when a published (frozen) stereo frame is mutated."""

    pass


class UnknownKeypointStatusError(StereoFrameError):
    """Raised when a keypoint status is not a KeypointStatus member."""

    pass


class ConfigError(VioStereoError):
    """Base exception for configuration errors."""

    pass


class InvalidConfigError(ConfigError):
    """Raised when configuration file is missing or cannot be parsed."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when configuration fails schema or semantic validation."""

    def __init__(self, message: str, validation_errors: Optional[list] = None):
        self.validation_errors = validation_errors or []
        super().__init__(message)
