"""
Camera capture using OpenCV.

Wraps cv2.VideoCapture with the open/read/release lifecycle the
frame grabber needs, and keeps simple frame statistics.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np

from ..errors import CameraError

logger = logging.getLogger(__name__)


@dataclass
class CameraStats:
    """Frame counters for the current capture session."""
    frames_read: int = 0
    frames_dropped: int = 0


class Camera:
    """A single camera device."""

    def __init__(self, index: int = 0):
        self.index = index
        self._capture: Optional[cv2.VideoCapture] = None
        self._lock = threading.Lock()
        self._stats = CameraStats()

    @property
    def is_opened(self) -> bool:
        with self._lock:
            return self._capture is not None and self._capture.isOpened()

    def open(self, index: Optional[int] = None) -> bool:
        """
        Open the camera device.

        Args:
            index: Device index (defaults to the index given at construction)

        Returns:
            True if the device is open and ready to read

        Raises:
            CameraError: If the index is negative
        """
        if index is not None:
            self.index = index
        if self.index < 0:
            raise CameraError(f"Invalid camera index: {self.index}")

        with self._lock:
            if self._capture is not None and self._capture.isOpened():
                return True

            self._capture = cv2.VideoCapture(self.index)
            if not self._capture.isOpened():
                logger.error(f"Failed to open the camera connection (device {self.index})")
                self._capture.release()
                self._capture = None
                return False

        self._stats = CameraStats()
        logger.info(f"Camera {self.index} opened")
        return True

    def read(self) -> Optional[np.ndarray]:
        """
        Read the next frame.

        Returns:
            BGR frame, or None if the camera is closed or no frame was read
        """
        with self._lock:
            if self._capture is None or not self._capture.isOpened():
                return None
            ok, frame = self._capture.read()

        if not ok or frame is None or frame.size == 0:
            self._stats.frames_dropped += 1
            logger.debug(f"Camera {self.index} returned an empty frame")
            return None

        self._stats.frames_read += 1
        return frame

    def release(self):
        """Release the device. Does nothing if it is not open."""
        with self._lock:
            if self._capture is None:
                return
            self._capture.release()
            self._capture = None
        logger.info(
            f"Camera {self.index} released after {self._stats.frames_read} frames "
            f"({self._stats.frames_dropped} dropped)"
        )

    def stats(self) -> CameraStats:
        """Get a copy of the frame counters."""
        return CameraStats(self._stats.frames_read, self._stats.frames_dropped)
