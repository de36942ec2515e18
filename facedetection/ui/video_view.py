"""
Video View

Label widget showing the latest camera frame at a fixed width.
"""

from typing import Optional

from PyQt6.QtWidgets import QLabel, QSizePolicy
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QImage, QPixmap


class VideoView(QLabel):
    """Displays frames scaled to a fixed width, preserving aspect ratio."""

    def __init__(self, display_width: int = 600, parent=None):
        super().__init__(parent)
        self.display_width = display_width
        self._source: Optional[QPixmap] = None  # Unscaled current frame
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setMinimumSize(320, 240)

    def set_display_width(self, width: int):
        """Change the display width, rescaling the frame on screen."""
        self.display_width = width
        if self._source is not None:
            self._show(self._source)

    def has_frame(self) -> bool:
        return self._source is not None

    def set_frame(self, image: Optional[QImage]):
        """Show a frame, or clear the view when image is None."""
        if image is None or image.isNull():
            self._source = None
            self.clear()
            return

        self._source = QPixmap.fromImage(image)
        self._show(self._source)

    def _show(self, pixmap: QPixmap):
        if pixmap.width() != self.display_width:
            pixmap = pixmap.scaledToWidth(
                self.display_width,
                Qt.TransformationMode.SmoothTransformation
            )
        self.setPixmap(pixmap)
