"""
FaceDetection Camera Module

Camera device handling:
- Camera: open/read/release wrapper around OpenCV video capture
"""

from .capture import Camera, CameraStats

__all__ = ['Camera', 'CameraStats']
