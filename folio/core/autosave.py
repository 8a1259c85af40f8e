from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QObject, QTimer


class _QtScheduledCall:
    def __init__(self, timer: QTimer) -> None:
        self._timer: QTimer | None = timer

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None

    def _finished(self) -> None:
        if self._timer is not None:
            self._timer.deleteLater()
            self._timer = None


class QtTimerScheduler(QObject):
    """Schedules debounce callbacks as single-shot timers on the Qt event loop."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> _QtScheduledCall:
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.setInterval(max(0, delay_ms))
        call = _QtScheduledCall(timer)

        def on_timeout() -> None:
            call._finished()
            callback()

        timer.timeout.connect(on_timeout)
        timer.start()
        return call
