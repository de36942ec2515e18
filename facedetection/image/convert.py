"""
Frame conversion.

OpenCV frames are BGR numpy arrays; Qt displays QImage. Conversions
here always return images that own their pixel data, so the frame
buffer can be reused as soon as they return.
"""

import cv2
import numpy as np
from PyQt6.QtGui import QImage


def frame_to_qimage(frame: np.ndarray) -> QImage:
    """
    Convert an OpenCV frame to a QImage.

    Args:
        frame: BGR, BGRA or grayscale image

    Returns:
        Detached QImage (RGB888 or Grayscale8)
    """
    if frame is None or frame.size == 0:
        raise ValueError("Cannot convert an empty frame")

    # Ensure image is uint8
    if frame.dtype != np.uint8:
        frame = np.clip(frame, 0, 255).astype(np.uint8)

    height, width = frame.shape[:2]

    if frame.ndim == 2:
        gray = np.ascontiguousarray(frame)
        qimage = QImage(gray.data, width, height, gray.strides[0],
                        QImage.Format.Format_Grayscale8)
        return qimage.copy()

    if frame.shape[2] == 4:
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGRA2RGB)
    else:
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
    rgb = np.ascontiguousarray(rgb)
    qimage = QImage(rgb.data, width, height, rgb.strides[0],
                    QImage.Format.Format_RGB888)
    return qimage.copy()


def encode_frame(frame: np.ndarray, ext: str = ".png") -> bytes:
    """
    Encode a frame into an image file format.

    Args:
        frame: OpenCV image
        ext: Target format extension (e.g. '.png', '.jpg')

    Returns:
        Encoded file contents

    Raises:
        ValueError: If the frame is empty or OpenCV cannot encode it
    """
    if frame is None or frame.size == 0:
        raise ValueError("Cannot encode an empty frame")
    if not ext.startswith("."):
        ext = "." + ext

    try:
        ok, buffer = cv2.imencode(ext, frame)
    except cv2.error as e:
        raise ValueError(f"Cannot encode frame as {ext}: {e}") from e
    if not ok:
        raise ValueError(f"Cannot encode frame as {ext}")
    return buffer.tobytes()
