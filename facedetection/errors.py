"""
Exceptions raised by FaceDetection components.
"""


class FaceDetectionError(Exception):
    """Base class for all FaceDetection errors."""


class CameraError(FaceDetectionError):
    """Raised when a camera device cannot be addressed."""


class CascadeNotFoundError(FaceDetectionError):
    """Raised when no cascade file exists for a classifier type."""


class CascadeLoadError(FaceDetectionError):
    """Raised when OpenCV cannot load a cascade file, or none is loaded."""
