"""
Detection Settings Dialog

Allows user to tune the cascade classifier parameters and the
camera/display settings.
"""

from dataclasses import replace

from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QGroupBox,
    QDoubleSpinBox, QSpinBox, QPushButton, QFormLayout, QFileDialog, QColorDialog
)

from ...config import AppSettings, DetectionSettings, CaptureSettings


class SettingsDialog(QDialog):
    """Dialog for editing detection and capture settings."""

    def __init__(self, settings: AppSettings, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Detection Settings")
        self.setModal(True)
        self.setMinimumWidth(360)

        self._settings = settings

        layout = QVBoxLayout(self)

        # Detection parameters
        detection_group = QGroupBox("Detection")
        detection_form = QFormLayout(detection_group)

        self.scale_factor_spin = QDoubleSpinBox()
        self.scale_factor_spin.setRange(1.01, 3.0)
        self.scale_factor_spin.setSingleStep(0.05)
        self.scale_factor_spin.setDecimals(2)
        self.scale_factor_spin.setValue(settings.detection.scale_factor)
        detection_form.addRow("Scale factor:", self.scale_factor_spin)

        self.min_neighbors_spin = QSpinBox()
        self.min_neighbors_spin.setRange(0, 50)
        self.min_neighbors_spin.setValue(settings.detection.min_neighbors)
        detection_form.addRow("Min neighbors:", self.min_neighbors_spin)

        self.min_face_spin = QSpinBox()
        self.min_face_spin.setRange(0, 90)
        self.min_face_spin.setSuffix(" % of height")
        self.min_face_spin.setValue(round(settings.detection.min_face_ratio * 100))
        detection_form.addRow("Min face size:", self.min_face_spin)

        self.thickness_spin = QSpinBox()
        self.thickness_spin.setRange(1, 20)
        self.thickness_spin.setSuffix(" px")
        self.thickness_spin.setValue(settings.detection.box_thickness)
        detection_form.addRow("Box thickness:", self.thickness_spin)

        self._box_color = settings.detection.box_color
        self.color_button = QPushButton()
        self.color_button.setFixedWidth(60)
        self.color_button.clicked.connect(self._on_choose_color)
        self._update_color_button()
        detection_form.addRow("Box color:", self.color_button)

        layout.addWidget(detection_group)

        # Capture parameters
        capture_group = QGroupBox("Camera")
        capture_form = QFormLayout(capture_group)

        self.camera_spin = QSpinBox()
        self.camera_spin.setRange(0, 16)
        self.camera_spin.setValue(settings.capture.camera_index)
        capture_form.addRow("Camera index:", self.camera_spin)

        self.interval_spin = QSpinBox()
        self.interval_spin.setRange(5, 1000)
        self.interval_spin.setSuffix(" ms")
        self.interval_spin.setValue(settings.capture.frame_interval_ms)
        capture_form.addRow("Frame interval:", self.interval_spin)

        self.width_spin = QSpinBox()
        self.width_spin.setRange(160, 3840)
        self.width_spin.setSuffix(" px")
        self.width_spin.setValue(settings.capture.display_width)
        capture_form.addRow("Display width:", self.width_spin)

        cascade_layout = QHBoxLayout()
        self.cascade_dir_edit = QLineEdit(settings.capture.cascade_dir)
        self.cascade_dir_edit.setPlaceholderText("Built-in locations")
        browse_btn = QPushButton("Browse...")
        browse_btn.clicked.connect(self._on_browse)
        cascade_layout.addWidget(self.cascade_dir_edit, 1)
        cascade_layout.addWidget(browse_btn)
        capture_form.addRow("Cascade folder:", cascade_layout)

        layout.addWidget(capture_group)

        self.error_label = QLabel("")
        self.error_label.setStyleSheet("color: red;")
        self.error_label.setWordWrap(True)
        layout.addWidget(self.error_label)

        # Buttons
        button_layout = QHBoxLayout()
        button_layout.addStretch()

        self.ok_button = QPushButton("OK")
        self.ok_button.setDefault(True)
        self.ok_button.clicked.connect(self.accept)

        self.cancel_button = QPushButton("Cancel")
        self.cancel_button.clicked.connect(self.reject)

        button_layout.addWidget(self.ok_button)
        button_layout.addWidget(self.cancel_button)
        layout.addLayout(button_layout)

    def _on_browse(self):
        directory = QFileDialog.getExistingDirectory(
            self, "Select Cascade Folder", self.cascade_dir_edit.text()
        )
        if directory:
            self.cascade_dir_edit.setText(directory)

    def box_color(self) -> QColor:
        blue, green, red = self._box_color
        return QColor(red, green, blue)

    def set_box_color(self, color: QColor):
        """Set the rectangle color (stored as BGR)."""
        self._box_color = (color.blue(), color.green(), color.red())
        self._update_color_button()

    def _update_color_button(self):
        self.color_button.setStyleSheet(f"background-color: {self.box_color().name()};")

    def _on_choose_color(self):
        color = QColorDialog.getColor(self.box_color(), self, "Select Box Color")
        if color.isValid():
            self.set_box_color(color)

    def get_settings(self) -> AppSettings:
        """Get the settings entered in the dialog."""
        detection: DetectionSettings = replace(
            self._settings.detection,
            scale_factor=self.scale_factor_spin.value(),
            min_neighbors=self.min_neighbors_spin.value(),
            min_face_ratio=self.min_face_spin.value() / 100.0,
            box_color=self._box_color,
            box_thickness=self.thickness_spin.value(),
        )
        capture: CaptureSettings = replace(
            self._settings.capture,
            camera_index=self.camera_spin.value(),
            frame_interval_ms=self.interval_spin.value(),
            display_width=self.width_spin.value(),
            cascade_dir=self.cascade_dir_edit.text().strip(),
        )
        return AppSettings(detection=detection, capture=capture)

    def accept(self):
        """Handle accept button."""
        is_valid, error = self.get_settings().validate()
        if not is_valid:
            self.error_label.setText(error)
            return
        super().accept()
