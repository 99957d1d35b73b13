# Rev 0.2.0

# ui/window_mode.py
from __future__ import annotations

from typing import Any, Dict

from PySide6.QtCore import QRect, Qt
from PySide6.QtGui import QGuiApplication


def _available(win) -> QRect:
    screen = QGuiApplication.screenAt(win.frameGeometry().center()) or QGuiApplication.primaryScreen()
    return screen.availableGeometry()


def apply_window_settings(win, window_cfg: Dict[str, Any]) -> None:
    """Size the dashboard from ui.window in settings.json; maximized wins over width/height."""
    if window_cfg.get("is_maximized"):
        win.showMaximized()
        return
    rect = _available(win)
    w = min(int(window_cfg.get("width", 1200)), rect.width())
    h = min(int(window_cfg.get("height", 760)), rect.height())
    win.resize(w, h)
    win.move(rect.x() + (rect.width() - w) // 2, rect.y() + (rect.height() - h) // 2)
    win.show()


def window_settings(win) -> Dict[str, Any]:
    """Inverse of apply_window_settings, for saving on close."""
    return {
        "width": win.width(),
        "height": win.height(),
        "is_maximized": bool(win.windowState() & Qt.WindowMaximized),
    }


def lock_dialog_fixed(win, *, width_ratio=0.45, height_ratio=0.6):
    """Modal dialogs: non-resizable, sized as a fraction of the current screen."""
    rect = _available(win)
    win.setFixedSize(int(rect.width() * width_ratio), int(rect.height() * height_ratio))
    win.setWindowFlag(Qt.WindowMaximizeButtonHint, False)
