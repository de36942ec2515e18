"""
Tests for the camera wrapper.

OpenCV's VideoCapture is replaced with a mock so no device is needed.
"""

import unittest
from unittest import mock

import numpy as np

from facedetection.camera import Camera
from facedetection.errors import CameraError


def _fake_capture(opened=True, frames=()):
    capture = mock.MagicMock()
    capture.isOpened.return_value = opened
    capture.read.side_effect = list(frames)
    return capture


class TestCamera(unittest.TestCase):
    """Test Camera open/read/release."""

    def setUp(self):
        patcher = mock.patch("facedetection.camera.capture.cv2.VideoCapture")
        self.video_capture = patcher.start()
        self.addCleanup(patcher.stop)

    def test_open_success(self):
        self.video_capture.return_value = _fake_capture(opened=True)
        camera = Camera()

        self.assertTrue(camera.open(2))
        self.assertTrue(camera.is_opened)
        self.assertEqual(camera.index, 2)
        self.video_capture.assert_called_once_with(2)

    def test_open_failure(self):
        capture = _fake_capture(opened=False)
        self.video_capture.return_value = capture
        camera = Camera()

        with self.assertLogs("facedetection.camera.capture", level="ERROR") as logs:
            self.assertFalse(camera.open())
        self.assertIn("Failed to open the camera connection", logs.output[0])
        self.assertFalse(camera.is_opened)
        capture.release.assert_called_once()

    def test_open_negative_index(self):
        with self.assertRaises(CameraError):
            Camera(-1).open()
        self.video_capture.assert_not_called()

    def test_open_twice_reuses_device(self):
        self.video_capture.return_value = _fake_capture(opened=True)
        camera = Camera()
        camera.open()
        camera.open()
        self.assertEqual(self.video_capture.call_count, 1)

    def test_read_frames(self):
        frame = np.zeros((4, 6, 3), dtype=np.uint8)
        self.video_capture.return_value = _fake_capture(
            frames=[(True, frame), (False, None), (True, np.empty((0, 0, 3), np.uint8))]
        )
        camera = Camera()
        camera.open()

        self.assertIs(camera.read(), frame)
        self.assertIsNone(camera.read())
        self.assertIsNone(camera.read())

        stats = camera.stats()
        self.assertEqual(stats.frames_read, 1)
        self.assertEqual(stats.frames_dropped, 2)

    def test_read_when_closed(self):
        self.assertIsNone(Camera().read())

    def test_release(self):
        capture = _fake_capture(opened=True)
        self.video_capture.return_value = capture
        camera = Camera()
        camera.open()

        camera.release()
        camera.release()

        capture.release.assert_called_once()
        self.assertFalse(camera.is_opened)
        self.assertIsNone(camera.read())


if __name__ == '__main__':
    unittest.main()
