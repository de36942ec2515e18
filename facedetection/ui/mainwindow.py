"""
Main Application Window for FaceDetection
"""

import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QCheckBox,
    QPushButton, QStatusBar, QFileDialog, QMessageBox, QDialog
)
from PyQt6.QtCore import QSettings
from PyQt6.QtGui import QAction, QKeySequence, QImage

from ..camera import Camera
from ..config import (
    AppSettings, SessionOverrides, load_settings, save_settings, ORGANIZATION, APPLICATION
)
from ..detection import ClassifierType, FaceDetector, find_cascade
from ..errors import CameraError, CascadeLoadError, CascadeNotFoundError
from ..image import encode_frame
from .dialogs import SettingsDialog
from .frame_grabber import FrameGrabber
from .video_view import VideoView

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Main application window: classifier selection and live video."""

    def __init__(self, settings: Optional[AppSettings] = None,
                 camera: Optional[Camera] = None,
                 qsettings: Optional[QSettings] = None,
                 overrides: Optional[SessionOverrides] = None):
        super().__init__()

        self._qsettings = qsettings or QSettings(ORGANIZATION, APPLICATION)
        # Stored settings never include the session overrides
        self._stored_settings = settings or load_settings(self._qsettings)
        self._overrides = overrides or SessionOverrides()
        self.settings = self._overrides.apply(self._stored_settings)

        self._camera = camera or Camera(self.settings.capture.camera_index)
        self._detector = FaceDetector(self.settings.detection)
        self._grabber: Optional[FrameGrabber] = None
        self._camera_active = False
        self._classifier_type: Optional[ClassifierType] = None

        self.setWindowTitle("Face Detection and Tracking")
        self.resize(800, 600)

        self._create_actions()
        self._create_menus()
        self._create_central_widget()
        self._create_status_bar()

        self._load_window_state()

    @property
    def camera_active(self) -> bool:
        return self._camera_active

    @property
    def detector(self) -> FaceDetector:
        return self._detector

    def _create_actions(self):
        """Create all menu actions."""
        self.action_snapshot = QAction("Save &Snapshot...", self)
        self.action_snapshot.setShortcut(QKeySequence.StandardKey.Save)
        self.action_snapshot.setStatusTip("Save the current frame with detected faces")
        self.action_snapshot.setEnabled(False)
        self.action_snapshot.triggered.connect(self._on_save_snapshot)

        self.action_exit = QAction("E&xit", self)
        self.action_exit.setShortcut(QKeySequence.StandardKey.Quit)
        self.action_exit.triggered.connect(self.close)

        self.action_settings = QAction("&Detection Settings...", self)
        self.action_settings.setStatusTip("Change classifier and camera parameters")
        self.action_settings.triggered.connect(self._on_settings)

    def _create_menus(self):
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")
        file_menu.addAction(self.action_snapshot)
        file_menu.addSeparator()
        file_menu.addAction(self.action_exit)

        settings_menu = menubar.addMenu("&Settings")
        settings_menu.addAction(self.action_settings)

    def _create_central_widget(self):
        central = QWidget()
        central.setObjectName("central")
        central.setStyleSheet("#central { background-color: whitesmoke; }")

        layout = QVBoxLayout(central)
        layout.setContentsMargins(10, 10, 10, 10)

        # Classifier selection
        classifier_layout = QHBoxLayout()
        classifier_layout.addStretch()
        classifier_layout.addWidget(QLabel("Classifier:"))

        self.haar_checkbox = QCheckBox("Haar Classifier")
        self.haar_checkbox.toggled.connect(self._on_haar_toggled)
        classifier_layout.addWidget(self.haar_checkbox)

        self.lbp_checkbox = QCheckBox("LBP Classifier")
        self.lbp_checkbox.toggled.connect(self._on_lbp_toggled)
        classifier_layout.addWidget(self.lbp_checkbox)
        classifier_layout.addStretch()

        layout.addLayout(classifier_layout)

        # Video
        self.video_view = VideoView(self.settings.capture.display_width)
        layout.addWidget(self.video_view, 1)

        # Camera button (enabled once a classifier is loaded)
        button_layout = QHBoxLayout()
        button_layout.addStretch()
        self.camera_button = QPushButton("Start Camera")
        self.camera_button.setEnabled(False)
        self.camera_button.clicked.connect(self.toggle_camera)
        button_layout.addWidget(self.camera_button)
        button_layout.addStretch()
        layout.addLayout(button_layout)

        self.setCentralWidget(central)

    def _create_status_bar(self):
        """Create status bar."""
        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage("Select a classifier to start the camera")

    # Classifier selection
    def _on_haar_toggled(self, checked: bool):
        self._on_classifier_toggled(ClassifierType.HAAR, checked, self.lbp_checkbox)

    def _on_lbp_toggled(self, checked: bool):
        self._on_classifier_toggled(ClassifierType.LBP, checked, self.haar_checkbox)

    def _checkbox_for(self, classifier_type: ClassifierType) -> QCheckBox:
        if classifier_type is ClassifierType.HAAR:
            return self.haar_checkbox
        return self.lbp_checkbox

    def _on_classifier_toggled(self, classifier_type: ClassifierType,
                               checked: bool, other: QCheckBox):
        if not checked:
            if not self.haar_checkbox.isChecked() and not self.lbp_checkbox.isChecked():
                self._classifier_type = None
                self.camera_button.setEnabled(False)
                self.status_bar.showMessage("Select a classifier to start the camera")
            return

        # Only one classifier can be selected
        if other.isChecked():
            other.blockSignals(True)
            other.setChecked(False)
            other.blockSignals(False)

        self.load_classifier(classifier_type)

    def load_classifier(self, classifier_type: ClassifierType) -> bool:
        """
        Load the trained set for a classifier.

        Returns:
            True if loaded; the camera can then be started
        """
        try:
            path = find_cascade(classifier_type,
                                cascade_dir=self.settings.capture.cascade_dir)
            self._detector.load(path)
        except (CascadeNotFoundError, CascadeLoadError) as e:
            logger.error(f"Cannot load {classifier_type.label} classifier: {e}")
            checkbox = self._checkbox_for(classifier_type)
            checkbox.blockSignals(True)
            checkbox.setChecked(False)
            checkbox.blockSignals(False)
            self._classifier_type = None
            self.camera_button.setEnabled(False)
            self.status_bar.showMessage(f"Cannot load {classifier_type.label} classifier: {e}")
            return False

        self._classifier_type = classifier_type
        # Now the video capture can start
        self.camera_button.setEnabled(True)
        self.status_bar.showMessage(f"{classifier_type.label} classifier loaded")
        return True

    def _set_controls_enabled(self, enabled: bool):
        self.haar_checkbox.setEnabled(enabled)
        self.lbp_checkbox.setEnabled(enabled)
        self.action_settings.setEnabled(enabled)

    # Camera control
    def toggle_camera(self):
        """The action triggered by the camera button."""
        if self._camera_active:
            self.stop_camera()
        else:
            self.start_camera()

    def start_camera(self) -> bool:
        """
        Open the camera and start grabbing frames.

        Returns:
            True if the camera started
        """
        if self._camera_active:
            return True

        self._set_controls_enabled(False)

        error = "Failed to open the camera connection"
        try:
            opened = self._camera.open(self.settings.capture.camera_index)
        except CameraError as e:
            opened = False
            error = str(e)

        if not opened:
            logger.error(error)
            self.status_bar.showMessage(error)
            self._set_controls_enabled(True)
            return False

        self._grabber = FrameGrabber(
            self._camera,
            self._detector,
            self.settings.capture.frame_interval_ms,
            self
        )
        self._grabber.frame_ready.connect(self._on_frame_ready)
        self._grabber.frame_failed.connect(self._on_frame_failed)

        self._camera_active = True
        self._grabber.start()

        self.camera_button.setText("Stop Camera")
        self.action_snapshot.setEnabled(True)
        self.status_bar.showMessage("Camera started")
        return True

    def stop_camera(self):
        """Stop grabbing frames and release the camera."""
        if not self._camera_active:
            return

        self._camera_active = False
        self.camera_button.setText("Start Camera")
        self._set_controls_enabled(True)
        self.action_snapshot.setEnabled(False)

        if self._grabber is not None:
            self._grabber.stop(self.settings.capture.frame_interval_ms)
            self._grabber.frame_ready.disconnect(self._on_frame_ready)
            self._grabber.frame_failed.disconnect(self._on_frame_failed)
            self._grabber.deleteLater()
            self._grabber = None

        self._camera.release()
        # Clean the frame
        self.video_view.set_frame(None)
        self.status_bar.showMessage("Camera stopped")

    def _on_frame_ready(self, image: QImage, face_count: int):
        if not self._camera_active:
            return
        self.video_view.set_frame(image)
        label = self._classifier_type.label if self._classifier_type else ""
        self.status_bar.showMessage(f"{label} classifier: {face_count} face(s) detected")

    def _on_frame_failed(self, message: str):
        self.status_bar.showMessage(f"ERROR: {message}")

    # Snapshot
    def save_snapshot(self, filepath: str) -> Path:
        """
        Save the last annotated frame.

        The format is taken from the file extension (PNG if none).

        Raises:
            ValueError: If there is no frame or it cannot be encoded
            OSError: If the file cannot be written
        """
        frame = self._grabber.last_frame() if self._grabber is not None else None
        if frame is None:
            raise ValueError("No frame to save")

        path = Path(filepath)
        if not path.suffix:
            path = path.with_suffix(".png")
        path.write_bytes(encode_frame(frame, path.suffix))
        logger.info(f"Snapshot saved to {path}")
        return path

    def _on_save_snapshot(self):
        filepath, _ = QFileDialog.getSaveFileName(
            self,
            "Save Snapshot",
            "snapshot.png",
            "PNG Images (*.png);;JPEG Images (*.jpg *.jpeg);;All Files (*)"
        )
        if not filepath:
            return

        try:
            path = self.save_snapshot(filepath)
            self.status_bar.showMessage(f"Snapshot saved to {path}")
        except (ValueError, OSError) as e:
            logger.error(f"Failed to save snapshot: {e}")
            QMessageBox.warning(self, "Save Snapshot", f"Failed to save snapshot:\n{e}")

    # Settings
    def _on_settings(self):
        if self._camera_active:
            return

        dialog = SettingsDialog(self.settings, self)
        if dialog.exec() == QDialog.DialogCode.Accepted:
            self.apply_settings(dialog.get_settings())

    @property
    def stored_settings(self) -> AppSettings:
        return self._stored_settings

    def apply_settings(self, settings: AppSettings):
        """
        Use settings edited in the dialog and store them.

        Values that still equal a command-line override are not stored.
        """
        cascade_dir_changed = settings.capture.cascade_dir != self.settings.capture.cascade_dir

        self._stored_settings = self._overrides.strip(settings, self._stored_settings)
        self.settings = settings
        self._detector.update_settings(settings.detection)
        self.video_view.set_display_width(settings.capture.display_width)
        save_settings(self._stored_settings, self._qsettings)

        if cascade_dir_changed and self._classifier_type is not None:
            self.load_classifier(self._classifier_type)

    def _load_window_state(self):
        geometry = self._qsettings.value("window/geometry")
        if geometry:
            self.restoreGeometry(geometry)

    def _save_window_state(self):
        self._qsettings.setValue("window/geometry", self.saveGeometry())
        self._qsettings.sync()

    def closeEvent(self, event):
        """Handle window close."""
        self.stop_camera()
        self._save_window_state()
        event.accept()
