"""
Application Settings

Detection and capture parameters, persisted with QSettings so that the
values chosen in the settings dialog survive a restart.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from PyQt6.QtCore import QSettings

logger = logging.getLogger(__name__)

ORGANIZATION = "FaceDetection"
APPLICATION = "FaceDetection"


@dataclass
class DetectionSettings:
    """Parameters passed to the cascade classifier."""
    scale_factor: float = 1.1
    min_neighbors: int = 2
    # Minimum face size as a fraction of the frame height
    min_face_ratio: float = 0.2
    box_color: Tuple[int, int, int] = (0, 255, 0)  # BGR
    box_thickness: int = 3

    def validate(self) -> Tuple[bool, str]:
        """
        Validate detection parameters.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if self.scale_factor <= 1.0:
            return False, "Scale factor must be greater than 1.0"
        if self.min_neighbors < 0:
            return False, "Minimum neighbors cannot be negative"
        if not 0.0 <= self.min_face_ratio < 1.0:
            return False, "Minimum face ratio must be between 0 and 1"
        if self.box_thickness < 1:
            return False, "Box thickness must be at least 1"
        if len(self.box_color) != 3 or any(not 0 <= c <= 255 for c in self.box_color):
            return False, "Box color must be three values between 0 and 255"
        return True, ""


@dataclass
class CaptureSettings:
    """Camera and display parameters."""
    camera_index: int = 0
    frame_interval_ms: int = 33  # ~30 frames/sec
    display_width: int = 600
    # Extra directory searched for cascade files, empty for none
    cascade_dir: str = ""

    def validate(self) -> Tuple[bool, str]:
        if self.camera_index < 0:
            return False, "Camera index cannot be negative"
        if self.frame_interval_ms <= 0:
            return False, "Frame interval must be positive"
        if self.display_width <= 0:
            return False, "Display width must be positive"
        return True, ""


@dataclass
class AppSettings:
    """All persisted settings."""
    detection: DetectionSettings = field(default_factory=DetectionSettings)
    capture: CaptureSettings = field(default_factory=CaptureSettings)

    def validate(self) -> Tuple[bool, str]:
        is_valid, error = self.detection.validate()
        if not is_valid:
            return is_valid, error
        return self.capture.validate()


@dataclass
class SessionOverrides:
    """
    Command-line values that apply to the running session only.

    None means the stored value is used.
    """
    camera_index: Optional[int] = None
    cascade_dir: Optional[str] = None

    def apply(self, settings: AppSettings) -> AppSettings:
        """Get a copy of settings with the overrides layered on top."""
        capture = replace(settings.capture)
        if self.camera_index is not None:
            capture = replace(capture, camera_index=self.camera_index)
        if self.cascade_dir is not None:
            capture = replace(capture, cascade_dir=self.cascade_dir)
        return AppSettings(detection=replace(settings.detection), capture=capture)

    def strip(self, edited: AppSettings, stored: AppSettings) -> AppSettings:
        """
        Get the settings to store after the user edited the session values.

        Overridden fields the user left unchanged keep their stored value.
        A field the user changed is stored and its override is dropped.
        """
        capture = edited.capture
        if self.camera_index is not None:
            if capture.camera_index == self.camera_index:
                capture = replace(capture, camera_index=stored.capture.camera_index)
            else:
                self.camera_index = None
        if self.cascade_dir is not None:
            if capture.cascade_dir == self.cascade_dir:
                capture = replace(capture, cascade_dir=stored.capture.cascade_dir)
            else:
                self.cascade_dir = None
        return AppSettings(detection=edited.detection, capture=capture)


def _open(qsettings: Optional[QSettings]) -> QSettings:
    if qsettings is not None:
        return qsettings
    return QSettings(ORGANIZATION, APPLICATION)


def _read(qsettings: QSettings, key: str, default, value_type):
    """Read one value, falling back to the default on missing or bad data."""
    raw = qsettings.value(key)
    if raw is None or raw == "":
        return default
    try:
        return value_type(raw)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring invalid setting {key}={raw!r}")
        return default


def _parse_color(raw) -> Tuple[int, int, int]:
    if isinstance(raw, str):
        raw = raw.split(",")
    color = tuple(int(c) for c in raw)
    if len(color) != 3:
        raise ValueError(f"expected 3 components, got {len(color)}")
    return color


def load_settings(qsettings: Optional[QSettings] = None) -> AppSettings:
    """
    Load settings, using defaults for anything missing or invalid.

    Args:
        qsettings: Settings store to read (defaults to the user store)

    Returns:
        Loaded AppSettings
    """
    store = _open(qsettings)
    defaults = AppSettings()
    d, c = defaults.detection, defaults.capture

    detection = DetectionSettings(
        scale_factor=_read(store, "detection/scale_factor", d.scale_factor, float),
        min_neighbors=_read(store, "detection/min_neighbors", d.min_neighbors, int),
        min_face_ratio=_read(store, "detection/min_face_ratio", d.min_face_ratio, float),
        box_color=_read(store, "detection/box_color", d.box_color, _parse_color),
        box_thickness=_read(store, "detection/box_thickness", d.box_thickness, int),
    )
    capture = CaptureSettings(
        camera_index=_read(store, "capture/camera_index", c.camera_index, int),
        frame_interval_ms=_read(store, "capture/frame_interval_ms", c.frame_interval_ms, int),
        display_width=_read(store, "capture/display_width", c.display_width, int),
        cascade_dir=_read(store, "capture/cascade_dir", c.cascade_dir, str),
    )
    settings = AppSettings(detection=detection, capture=capture)

    is_valid, error = settings.validate()
    if not is_valid:
        logger.warning(f"Stored settings are invalid ({error}), using defaults")
        return AppSettings()
    return settings


def save_settings(settings: AppSettings, qsettings: Optional[QSettings] = None):
    """Write settings to the store."""
    store = _open(qsettings)
    d, c = settings.detection, settings.capture

    store.setValue("detection/scale_factor", d.scale_factor)
    store.setValue("detection/min_neighbors", d.min_neighbors)
    store.setValue("detection/min_face_ratio", d.min_face_ratio)
    store.setValue("detection/box_color", ",".join(str(v) for v in d.box_color))
    store.setValue("detection/box_thickness", d.box_thickness)

    store.setValue("capture/camera_index", c.camera_index)
    store.setValue("capture/frame_interval_ms", c.frame_interval_ms)
    store.setValue("capture/display_width", c.display_width)
    store.setValue("capture/cascade_dir", c.cascade_dir)
    store.sync()
