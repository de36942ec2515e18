"""
Cascade file lookup.

Trained cascades are plain XML files owned by OpenCV. They are looked up
in user-supplied directories, the package resources directory and the
data directory that ships with opencv-python.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Union

import cv2

from ..errors import CascadeNotFoundError

logger = logging.getLogger(__name__)

RESOURCES_DIR = Path(__file__).resolve().parent.parent / "resources"


class ClassifierType(Enum):
    """Frontal face classifiers selectable in the UI."""
    HAAR = "haarcascades/haarcascade_frontalface_alt.xml"
    LBP = "lbpcascades/lbpcascade_frontalface.xml"

    @property
    def relative_path(self) -> Path:
        return Path(self.value)

    @property
    def filename(self) -> str:
        return self.relative_path.name

    @property
    def label(self) -> str:
        return "Haar" if self is ClassifierType.HAAR else "LBP"


def _opencv_data_dir() -> Optional[Path]:
    data = getattr(cv2, "data", None)
    haar_dir = getattr(data, "haarcascades", None)
    if not haar_dir:
        return None
    return Path(haar_dir)


def cascade_search_dirs(extra_dirs: Iterable[Union[str, Path]] = ()) -> List[Path]:
    """
    Get the directories searched for cascade files, in order.

    Args:
        extra_dirs: Directories searched before the built-in ones

    Returns:
        List of directories (empty entries skipped)
    """
    dirs = [Path(d) for d in extra_dirs if d]
    dirs.append(RESOURCES_DIR)
    opencv_dir = _opencv_data_dir()
    if opencv_dir is not None:
        dirs.append(opencv_dir)
    return dirs


def find_cascade(classifier_type: ClassifierType,
                 search_dirs: Optional[Iterable[Union[str, Path]]] = None,
                 cascade_dir: str = "") -> Path:
    """
    Locate the cascade file for a classifier.

    Each directory is checked for the file under its category folder
    (e.g. lbpcascades/) and directly by file name.

    Args:
        classifier_type: Which classifier to find
        search_dirs: Directories searched first
        cascade_dir: User-configured cascade directory, searched next

    Returns:
        Path to an existing cascade file

    Raises:
        CascadeNotFoundError: If no directory holds the file
    """
    extra = list(search_dirs or [])
    if cascade_dir:
        extra.append(cascade_dir)

    dirs = cascade_search_dirs(extra)
    for directory in dirs:
        for candidate in (directory / classifier_type.relative_path,
                          directory / classifier_type.filename):
            if candidate.is_file():
                logger.debug(f"Found {classifier_type.label} cascade at {candidate}")
                return candidate

    searched = ", ".join(str(d) for d in dirs)
    raise CascadeNotFoundError(
        f"{classifier_type.filename} not found (searched: {searched})"
    )
