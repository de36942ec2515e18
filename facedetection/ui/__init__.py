"""
FaceDetection UI Module

User interface components:
- MainWindow: Primary application window and camera controller
- VideoView: Live frame display
- FrameGrabber: Background frame acquisition thread
- Dialogs: Detection settings
"""
