"""
Face Detection

Runs an OpenCV cascade classifier over camera frames and draws the
detected face rectangles back onto them.
"""

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

import cv2
import numpy as np

from ..config import DetectionSettings
from ..errors import CascadeLoadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FaceRect:
    """A detected face, in pixel coordinates of its frame."""
    x: int
    y: int
    width: int
    height: int

    @property
    def top_left(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def bottom_right(self) -> Tuple[int, int]:
        return (self.x + self.width, self.y + self.height)

    @property
    def area(self) -> int:
        return self.width * self.height


class FaceDetector:
    """
    Cascade classifier based face detector.

    The minimum face size is derived from the height of the first frame
    processed after a classifier is loaded, and reused for later frames.
    """

    def __init__(self, settings: Optional[DetectionSettings] = None):
        self.settings = settings or DetectionSettings()
        self._classifier = cv2.CascadeClassifier()
        self._cascade_path: Optional[Path] = None
        self.absolute_face_size = 0

    @property
    def is_loaded(self) -> bool:
        return self._cascade_path is not None and not self._classifier.empty()

    @property
    def cascade_path(self) -> Optional[Path]:
        return self._cascade_path

    def load(self, path: Union[str, Path]):
        """
        Load a trained cascade from disk.

        Args:
            path: Cascade XML file

        Raises:
            CascadeLoadError: If OpenCV cannot load the file
        """
        path = Path(path)
        classifier = cv2.CascadeClassifier()
        try:
            loaded = path.is_file() and classifier.load(str(path))
        except cv2.error as e:
            raise CascadeLoadError(f"Failed to load cascade {path}: {e}") from e
        if not loaded or classifier.empty():
            raise CascadeLoadError(f"Failed to load cascade {path}")

        self._classifier = classifier
        self._cascade_path = path
        self.absolute_face_size = 0
        logger.info(f"Loaded cascade classifier from {path}")

    def update_settings(self, settings: DetectionSettings):
        """Replace detection settings; the minimum face size is recomputed."""
        self.settings = settings
        self.absolute_face_size = 0

    def _min_face_size(self, height: int) -> int:
        if self.absolute_face_size == 0:
            # Round half up
            size = int(math.floor(height * self.settings.min_face_ratio + 0.5))
            if size > 0:
                self.absolute_face_size = size
        return self.absolute_face_size

    def _to_gray(self, frame: np.ndarray) -> np.ndarray:
        if frame.ndim == 2:
            gray = frame.copy()
        elif frame.shape[2] == 4:
            gray = cv2.cvtColor(frame, cv2.COLOR_BGRA2GRAY)
        else:
            gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
        # Equalize the histogram to improve detection
        return cv2.equalizeHist(gray)

    def detect(self, frame: np.ndarray) -> List[FaceRect]:
        """
        Find faces in a frame.

        Args:
            frame: BGR, BGRA or grayscale uint8 image

        Returns:
            Detected faces

        Raises:
            CascadeLoadError: If no classifier is loaded
        """
        if not self.is_loaded:
            raise CascadeLoadError("No cascade classifier loaded")

        gray = self._to_gray(frame)
        size = self._min_face_size(gray.shape[0])

        faces = self._classifier.detectMultiScale(
            gray,
            scaleFactor=self.settings.scale_factor,
            minNeighbors=self.settings.min_neighbors,
            flags=cv2.CASCADE_SCALE_IMAGE,
            minSize=(size, size),
        )
        rects = [FaceRect(int(x), int(y), int(w), int(h)) for (x, y, w, h) in faces]
        logger.debug(f"Detected {len(rects)} face(s)")
        return rects

    def draw(self, frame: np.ndarray, faces: List[FaceRect]):
        """Draw face rectangles onto the frame in place."""
        for face in faces:
            cv2.rectangle(
                frame,
                face.top_left,
                face.bottom_right,
                self.settings.box_color,
                self.settings.box_thickness,
                cv2.LINE_8,
            )

    def detect_and_draw(self, frame: np.ndarray) -> List[FaceRect]:
        """Detect faces and outline them on the frame."""
        faces = self.detect(frame)
        self.draw(frame, faces)
        return faces
