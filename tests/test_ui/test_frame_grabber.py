"""
Tests for the frame grabber thread.
"""

import time
import unittest
from unittest import mock

import numpy as np
from PyQt6.QtWidgets import QApplication
from PyQt6.QtGui import QImage

from facedetection.camera import Camera
from facedetection.detection import FaceDetector, FaceRect
from facedetection.ui.frame_grabber import FrameGrabber


def _fake_camera(frame=None, opened=True):
    camera = mock.MagicMock(spec=Camera)
    camera.is_opened = opened
    if frame is not None:
        camera.read.side_effect = lambda: frame.copy()
    else:
        camera.read.return_value = None
    return camera


def _fake_detector(faces=()):
    detector = mock.MagicMock(spec=FaceDetector)
    detector.detect_and_draw.return_value = list(faces)
    return detector


class TestGrabFrame(unittest.TestCase):
    """Test a single grabber tick."""

    @classmethod
    def setUpClass(cls):
        cls.app = QApplication.instance() or QApplication([])

    def test_grab_frame(self):
        frame = np.zeros((48, 64, 3), dtype=np.uint8)
        faces = [FaceRect(1, 2, 10, 10)]
        grabber = FrameGrabber(_fake_camera(frame), _fake_detector(faces))

        result = grabber.grab_frame()

        self.assertIsNotNone(result)
        image, found = result
        self.assertIsInstance(image, QImage)
        self.assertEqual((image.width(), image.height()), (64, 48))
        self.assertEqual(found, faces)
        self.assertIsNotNone(grabber.last_frame())

    def test_grab_frame_camera_closed(self):
        camera = _fake_camera(np.zeros((4, 4, 3), dtype=np.uint8), opened=False)
        grabber = FrameGrabber(camera, _fake_detector())
        self.assertIsNone(grabber.grab_frame())
        camera.read.assert_not_called()

    def test_grab_frame_no_frame(self):
        detector = _fake_detector()
        grabber = FrameGrabber(_fake_camera(None), detector)
        self.assertIsNone(grabber.grab_frame())
        detector.detect_and_draw.assert_not_called()
        self.assertIsNone(grabber.last_frame())

    def test_grab_frame_error_is_reported(self):
        detector = _fake_detector()
        detector.detect_and_draw.side_effect = RuntimeError("boom")
        grabber = FrameGrabber(_fake_camera(np.zeros((4, 4, 3), dtype=np.uint8)), detector)
        errors = []
        grabber.frame_failed.connect(errors.append)

        with self.assertLogs("facedetection.ui.frame_grabber", level="ERROR") as logs:
            self.assertIsNone(grabber.grab_frame())

        self.assertIn("Frame capture error", logs.output[0])
        self.assertEqual(errors, ["boom"])

    def test_last_frame_is_a_copy(self):
        frame = np.zeros((4, 4, 3), dtype=np.uint8)
        grabber = FrameGrabber(_fake_camera(frame), _fake_detector())
        grabber.grab_frame()

        copy = grabber.last_frame()
        copy[:] = 255
        self.assertTrue(np.all(grabber.last_frame() == 0))

        grabber.clear_last_frame()
        self.assertIsNone(grabber.last_frame())


class TestGrabberThread(unittest.TestCase):
    """Test the grabbing loop."""

    @classmethod
    def setUpClass(cls):
        cls.app = QApplication.instance() or QApplication([])

    def test_stop_when_not_running(self):
        grabber = FrameGrabber(_fake_camera(), _fake_detector())
        self.assertTrue(grabber.stop())

    def test_runs_until_stopped(self):
        camera = _fake_camera(np.zeros((8, 8, 3), dtype=np.uint8))
        grabber = FrameGrabber(camera, _fake_detector(), interval_ms=10)

        grabber.start()
        time.sleep(0.2)
        grabber.stop(1000)

        self.assertFalse(grabber.isRunning())
        self.assertGreaterEqual(camera.read.call_count, 2)
        self.assertIsNotNone(grabber.last_frame())

        # No more reads after stop
        count = camera.read.call_count
        time.sleep(0.05)
        self.assertEqual(camera.read.call_count, count)

    def test_slow_stop_waits_for_tick(self):
        def slow_read():
            time.sleep(0.1)
            return None

        camera = _fake_camera()
        camera.read.side_effect = slow_read
        grabber = FrameGrabber(camera, _fake_detector(), interval_ms=10)

        grabber.start()
        time.sleep(0.02)
        with self.assertLogs("facedetection.ui.frame_grabber", level="WARNING") as logs:
            stopped_in_time = grabber.stop(1)

        self.assertFalse(stopped_in_time)
        self.assertIn("trying to release the camera now", logs.output[0])
        self.assertFalse(grabber.isRunning())

    def test_overrun_tick_does_not_queue_ticks(self):
        """A slow tick is followed by one immediate tick, then the normal rate."""
        frame = np.zeros((8, 8, 3), dtype=np.uint8)
        reads = []

        def read():
            started = time.monotonic()
            if not reads:
                time.sleep(0.05)
            reads.append((started, time.monotonic()))
            return frame.copy()

        camera = _fake_camera()
        camera.read.side_effect = read
        faces = [FaceRect(0, 0, 2, 2), FaceRect(4, 4, 2, 2)]
        grabber = FrameGrabber(camera, _fake_detector(faces), interval_ms=10)
        received = []
        grabber.frame_ready.connect(lambda image, count: received.append((image, count)))

        started = time.monotonic()
        grabber.start()
        time.sleep(0.15)
        grabber.stop(1000)

        deadline = time.monotonic() + 1.0
        while len(received) < len(reads) and time.monotonic() < deadline:
            QApplication.processEvents()
            time.sleep(0.005)

        self.assertGreaterEqual(len(reads), 4)
        # First tick runs at once
        self.assertLess(reads[0][0] - started, 0.05)
        # The tick after the slow one starts right away
        self.assertLess(reads[1][0] - reads[0][1], 0.03)
        # ...and later ticks keep the interval instead of catching up
        for (previous, _), (current, _) in zip(reads[1:], reads[2:]):
            self.assertGreaterEqual(current - previous, 0.005)

        self.assertEqual(len(received), len(reads))
        image, count = received[0]
        self.assertIsInstance(image, QImage)
        self.assertEqual(count, 2)


if __name__ == '__main__':
    unittest.main()
