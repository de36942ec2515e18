"""
FaceDetection Detection Module

Face detection with OpenCV cascade classifiers:
- ClassifierType / find_cascade: locating trained cascade files
- FaceDetector: detection and drawing on frames
"""

from .cascades import ClassifierType, find_cascade, cascade_search_dirs
from .face_detector import FaceDetector, FaceRect

__all__ = [
    'ClassifierType',
    'find_cascade',
    'cascade_search_dirs',
    'FaceDetector',
    'FaceRect',
]
