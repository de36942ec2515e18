"""
Frame Grabber

Background thread that reads a frame every tick, runs face detection on
it and hands the annotated image to the UI thread through signals.
"""

import logging
import threading
import time
from typing import List, Optional, Tuple

import numpy as np
from PyQt6.QtCore import QThread, pyqtSignal
from PyQt6.QtGui import QImage

from ..camera import Camera
from ..detection import FaceDetector, FaceRect
from ..image import frame_to_qimage

logger = logging.getLogger(__name__)


class FrameGrabber(QThread):
    """Worker thread grabbing and annotating camera frames at a fixed rate."""

    frame_ready = pyqtSignal(QImage, int)  # Emits annotated image and face count
    frame_failed = pyqtSignal(str)  # Emits error message for a failed tick

    def __init__(self, camera: Camera, detector: FaceDetector,
                 interval_ms: int = 33, parent=None):
        super().__init__(parent)
        self.camera = camera
        self.detector = detector
        self.interval_ms = interval_ms
        self._last_frame: Optional[np.ndarray] = None
        self._frame_lock = threading.Lock()

    def last_frame(self) -> Optional[np.ndarray]:
        """Get a copy of the most recent annotated frame, if any."""
        with self._frame_lock:
            if self._last_frame is None:
                return None
            return self._last_frame.copy()

    def clear_last_frame(self):
        with self._frame_lock:
            self._last_frame = None

    def grab_frame(self) -> Optional[Tuple[QImage, List[FaceRect]]]:
        """
        Run one tick: read, detect, draw and convert.

        Returns:
            (image, faces), or None if no frame was available or the tick failed
        """
        if not self.camera.is_opened:
            return None

        try:
            frame = self.camera.read()
            if frame is None:
                return None

            faces = self.detector.detect_and_draw(frame)
            image = frame_to_qimage(frame)
        except Exception as e:
            logger.error(f"Frame capture error: {e}")
            self.frame_failed.emit(str(e))
            return None

        with self._frame_lock:
            self._last_frame = frame
        return image, faces

    def run(self):
        """Grab frames until interruption is requested."""
        interval = self.interval_ms / 1000.0
        next_tick = time.monotonic()
        logger.debug(f"Frame grabber started ({self.interval_ms} ms interval)")

        while not self.isInterruptionRequested():
            result = self.grab_frame()
            if result is not None:
                image, faces = result
                self.frame_ready.emit(image, len(faces))

            next_tick += interval
            delay = next_tick - time.monotonic()
            if delay > 0:
                self.msleep(max(1, int(delay * 1000)))
            else:
                # Tick overran the interval: start the next one now
                next_tick = time.monotonic()

        logger.debug("Frame grabber stopped")

    def stop(self, timeout_ms: int = 33) -> bool:
        """
        Stop the thread.

        Waits up to timeout_ms for the loop to end, then for the tick in
        progress, so the camera can be released safely afterwards.

        Returns:
            True if the thread ended within timeout_ms
        """
        if not self.isRunning():
            return True

        self.requestInterruption()
        if self.wait(timeout_ms):
            return True

        logger.warning(
            "Frame capture did not stop in time, trying to release the camera now..."
        )
        self.wait()
        return False
