"""
FaceDetection - live camera face detection with OpenCV cascade classifiers.
"""

__version__ = "0.1.0"
