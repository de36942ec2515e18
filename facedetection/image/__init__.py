"""
FaceDetection Image Module

Conversions between OpenCV frames and displayable/savable images.
"""

from .convert import frame_to_qimage, encode_frame

__all__ = ['frame_to_qimage', 'encode_frame']
