#!/usr/bin/env python3
"""
FaceDetection Launcher Script

Simple launcher for the FaceDetection application.
"""

import sys
import os

# Add the project root to path if needed
if os.path.dirname(os.path.abspath(__file__)) not in sys.path:
    sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


if __name__ == "__main__":
    try:
        # Test PyQt6 import before proceeding
        from PyQt6 import QtWidgets  # noqa: F401
    except ImportError as qt_error:
        print("PyQt6 Import Error:")
        print("=" * 60)
        print(f"Error: {qt_error}")
        print("\nTry reinstalling PyQt6:")
        print("   pip uninstall PyQt6 PyQt6-Qt6 PyQt6-sip")
        print("   pip install PyQt6")
        print("=" * 60)
        sys.exit(1)

    try:
        import cv2  # noqa: F401
    except ImportError as cv_error:
        print(f"Error: OpenCV is not available: {cv_error}")
        print("\nInstall it with:")
        print("  pip install \"opencv-python>=4.6,<5\"")
        sys.exit(1)

    from facedetection.main import main
    sys.exit(main())
