"""Desktop notifications through the system tray."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject
from PyQt6.QtGui import QColor, QIcon, QPainter, QPixmap
from PyQt6.QtWidgets import QSystemTrayIcon

from ..errors import NotificationError

log = logging.getLogger(__name__)

NOTIFICATION_TIMEOUT_MS = 10_000


def _make_tray_icon(color: str) -> QIcon:
    """Plain filled circle in the accent colour."""
    pixmap = QPixmap(64, 64)
    pixmap.fill(QColor(0, 0, 0, 0))
    p = QPainter(pixmap)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    p.setBrush(QColor(color))
    p.setPen(QColor(color).darker(120))
    p.drawEllipse(4, 4, 56, 56)
    p.end()
    return QIcon(pixmap)


class TrayNotifier(QObject):
    """Callable ``notify(summary, body)`` backed by a ``QSystemTrayIcon``."""

    def __init__(self, accent: str, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._tray: QSystemTrayIcon | None = None
        if QSystemTrayIcon.isSystemTrayAvailable():
            self._tray = QSystemTrayIcon(_make_tray_icon(accent), self)
            self._tray.setToolTip("Pomogate")
            self._tray.show()
        else:
            log.info("no system tray available, notifications disabled")

    @property
    def available(self) -> bool:
        return self._tray is not None and QSystemTrayIcon.supportsMessages()

    def __call__(self, summary: str, body: str) -> None:
        if not self.available:
            raise NotificationError("System tray notifications are not supported")
        self._tray.showMessage(
            summary,
            body,
            QSystemTrayIcon.MessageIcon.Information,
            NOTIFICATION_TIMEOUT_MS,
        )
