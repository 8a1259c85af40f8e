import pytest
from PySide6.QtCore import QCoreApplication, QEventLoop, QTimer

from folio.core.autosave import QtTimerScheduler
from folio.core.debounce import DebounceTimer


@pytest.fixture(scope="module")
def app() -> QCoreApplication:
    return QCoreApplication.instance() or QCoreApplication([])


def run_event_loop(duration_ms: int) -> None:
    loop = QEventLoop()
    QTimer.singleShot(duration_ms, loop.quit)
    loop.exec()


def test_rearmed_timer_fires_once_on_event_loop(app: QCoreApplication) -> None:
    timer = DebounceTimer(QtTimerScheduler())
    calls: list[int] = []

    for index in range(3):
        timer.arm(50, lambda index=index: calls.append(index))
    assert timer.pending

    run_event_loop(300)

    assert calls == [2]
    assert not timer.pending


def test_cancelled_timer_never_fires(app: QCoreApplication) -> None:
    timer = DebounceTimer(QtTimerScheduler())
    calls: list[str] = []

    timer.arm(50, lambda: calls.append("fired"))
    timer.cancel()
    run_event_loop(200)

    assert calls == []
    assert not timer.pending


def test_scheduler_handle_cancel_is_idempotent(app: QCoreApplication) -> None:
    scheduler = QtTimerScheduler()
    calls: list[str] = []

    handle = scheduler.call_later(20, lambda: calls.append("a"))
    handle.cancel()
    handle.cancel()
    scheduler.call_later(20, lambda: calls.append("b"))
    run_event_loop(150)

    assert calls == ["b"]
