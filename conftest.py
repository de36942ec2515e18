"""
Shared pytest setup.

Widgets are created on Qt's offscreen platform so the tests run
without a display.
"""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
