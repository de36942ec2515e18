#!/usr/bin/env python3
"""
FaceDetection - Main Entry Point

Run with: python -m facedetection.main
"""

import argparse
import logging
import sys
from typing import List, Optional

from PyQt6.QtWidgets import QApplication

from . import __version__

logger = logging.getLogger(__name__)


def parse_args(argv: List[str]):
    """
    Parse command-line options.

    Returns:
        Tuple of (options, remaining arguments passed on to Qt)
    """
    parser = argparse.ArgumentParser(
        prog="facedetection",
        description="Live face detection with OpenCV cascade classifiers"
    )
    parser.add_argument("--camera", type=int, default=None,
                        help="camera device index (overrides saved setting)")
    parser.add_argument("--cascade-dir", default=None,
                        help="extra folder searched for cascade XML files")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="logging level (default: INFO)")
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {__version__}")
    return parser.parse_known_args(argv)


def setup_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for FaceDetection application."""
    if argv is None:
        argv = sys.argv[1:]
    options, qt_args = parse_args(argv)
    setup_logging(options.log_level)

    try:
        # Create application
        app = QApplication([sys.argv[0]] + qt_args)
        app.setApplicationName("FaceDetection")
        app.setApplicationVersion(__version__)
        app.setOrganizationName("FaceDetection")

        # Import here to speed up startup check
        from .config import SessionOverrides, load_settings
        from .ui.mainwindow import MainWindow

        # Command-line values apply to this session only
        settings = load_settings()
        overrides = SessionOverrides(
            camera_index=options.camera,
            cascade_dir=options.cascade_dir,
        )

        is_valid, error = overrides.apply(settings).validate()
        if not is_valid:
            logger.error(f"Invalid option: {error}")
            return 2

        # Create and show main window
        window = MainWindow(settings=settings, overrides=overrides)
        window.show()

        # Run event loop
        return app.exec()
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
