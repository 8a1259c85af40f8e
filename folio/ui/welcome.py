from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QLabel, QPushButton, QVBoxLayout, QWidget


def folder_for_dropped_path(path: Path) -> Path:
    return path if path.is_dir() else path.parent


class WelcomeScreen(QWidget):
    open_folder_requested = Signal()
    folder_dropped = Signal(str)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setAcceptDrops(True)

        layout = QVBoxLayout(self)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.setSpacing(16)

        title = QLabel("Welcome to Folio")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        title.setStyleSheet("font-size: 28px; font-weight: 600;")
        layout.addWidget(title)

        self.open_button = QPushButton("Open Folder")
        self.open_button.clicked.connect(self.open_folder_requested.emit)
        layout.addWidget(self.open_button, alignment=Qt.AlignmentFlag.AlignCenter)

        separator = QLabel("or")
        separator.setObjectName("muted")
        separator.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(separator)

        self.drop_hint = QLabel("Drag & drop a folder here")
        self.drop_hint.setObjectName("muted")
        self.drop_hint.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.drop_hint)

    def dragEnterEvent(self, event) -> None:  # type: ignore[override]
        if event.mimeData().hasUrls():
            self.drop_hint.setText("Drop folder here!")
            event.acceptProposedAction()
            return
        event.ignore()

    def dragLeaveEvent(self, event) -> None:  # type: ignore[override]
        self.drop_hint.setText("Drag & drop a folder here")
        super().dragLeaveEvent(event)

    def dropEvent(self, event) -> None:  # type: ignore[override]
        self.drop_hint.setText("Drag & drop a folder here")
        urls = [url for url in event.mimeData().urls() if url.isLocalFile()]
        if not urls:
            event.ignore()
            return
        folder = folder_for_dropped_path(Path(urls[0].toLocalFile()))
        event.acceptProposedAction()
        self.folder_dropped.emit(str(folder))
