"""
Tests for cascade file lookup.
"""

import shutil
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from facedetection.detection import ClassifierType, find_cascade, cascade_search_dirs
from facedetection.errors import CascadeNotFoundError


class TestClassifierType(unittest.TestCase):
    """Test ClassifierType file names."""

    def test_file_names(self):
        self.assertEqual(ClassifierType.HAAR.filename, "haarcascade_frontalface_alt.xml")
        self.assertEqual(ClassifierType.LBP.filename, "lbpcascade_frontalface.xml")
        self.assertEqual(ClassifierType.LBP.relative_path.parent.name, "lbpcascades")

    def test_labels(self):
        self.assertEqual(ClassifierType.HAAR.label, "Haar")
        self.assertEqual(ClassifierType.LBP.label, "LBP")


class TestFindCascade(unittest.TestCase):
    """Test find_cascade search order."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.resources = self.temp_dir / "resources"
        self.opencv_data = self.temp_dir / "opencv"
        self.resources.mkdir()
        self.opencv_data.mkdir()

        patchers = [
            mock.patch("facedetection.detection.cascades.RESOURCES_DIR", self.resources),
            mock.patch("facedetection.detection.cascades._opencv_data_dir",
                       return_value=self.opencv_data),
        ]
        for patcher in patchers:
            patcher.start()
            self.addCleanup(patcher.stop)

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _touch(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("<opencv_storage/>")
        return path

    def test_search_dir_order(self):
        user_dir = self.temp_dir / "user"
        dirs = cascade_search_dirs([user_dir, ""])
        self.assertEqual(dirs, [user_dir, self.resources, self.opencv_data])

    def test_found_in_opencv_data_by_file_name(self):
        expected = self._touch(self.opencv_data / "haarcascade_frontalface_alt.xml")
        self.assertEqual(find_cascade(ClassifierType.HAAR), expected)

    def test_resources_before_opencv_data(self):
        self._touch(self.opencv_data / "haarcascade_frontalface_alt.xml")
        expected = self._touch(self.resources / "haarcascades" / "haarcascade_frontalface_alt.xml")
        self.assertEqual(find_cascade(ClassifierType.HAAR), expected)

    def test_search_dirs_first(self):
        self._touch(self.resources / "lbpcascades" / "lbpcascade_frontalface.xml")
        user_dir = self.temp_dir / "user"
        expected = self._touch(user_dir / "lbpcascade_frontalface.xml")
        self.assertEqual(find_cascade(ClassifierType.LBP, search_dirs=[user_dir]), expected)

    def test_cascade_dir(self):
        cascade_dir = self.temp_dir / "configured"
        expected = self._touch(cascade_dir / "lbpcascades" / "lbpcascade_frontalface.xml")
        self.assertEqual(
            find_cascade(ClassifierType.LBP, cascade_dir=str(cascade_dir)),
            expected
        )

    def test_not_found(self):
        with self.assertRaises(CascadeNotFoundError) as ctx:
            find_cascade(ClassifierType.LBP)
        self.assertIn("lbpcascade_frontalface.xml", str(ctx.exception))

    def test_opencv_data_missing(self):
        with mock.patch("facedetection.detection.cascades._opencv_data_dir",
                        return_value=None):
            self.assertEqual(cascade_search_dirs(), [self.resources])


if __name__ == '__main__':
    unittest.main()
