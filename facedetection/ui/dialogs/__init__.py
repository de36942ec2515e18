"""
FaceDetection UI Dialogs

Dialog windows:
- SettingsDialog: Detection and camera settings
"""

from .settings_dialog import SettingsDialog

__all__ = ['SettingsDialog']
