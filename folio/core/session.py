from __future__ import annotations

from pathlib import Path
from typing import Callable

from loguru import logger

from . import storage
from .debounce import Scheduler
from .documents import DocumentStore, Loader
from .errors import DirectoryReadFailure, ReadFailure
from .models import Document, FileHandle
from .saving import AUTOSAVE_DELAY_MS, SaveCoordinator, Writer

Lister = Callable[[str], list[FileHandle]]


class EditorSession:
    """Editing state for one window: open folder, documents and focus.

    The reader, writer and lister are injected so the session can run
    against the real filesystem or against in-memory fakes.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        auto_save_enabled: bool = True,
        loader: Loader = storage.read_text,
        writer: Writer = storage.write_text,
        lister: Lister = storage.list_directory,
        delay_ms: int = AUTOSAVE_DELAY_MS,
    ) -> None:
        self.store = DocumentStore()
        self.saver = SaveCoordinator(
            self.store,
            writer=writer,
            scheduler=scheduler,
            auto_save_enabled=auto_save_enabled,
            delay_ms=delay_ms,
        )
        self._loader = loader
        self._lister = lister
        self.active_folder: str | None = None
        self.active_file: str | None = None
        self.files: list[FileHandle] = []
        self.sidebar_visible = True

    @property
    def active_document(self) -> Document | None:
        if self.active_file is None:
            return None
        return self.store.get(self.active_file)

    @property
    def active_is_dirty(self) -> bool:
        return self.active_file is not None and self.store.is_dirty(self.active_file)

    def is_dirty(self, path: str) -> bool:
        return self.store.is_dirty(path)

    def open_folder(self, folder: str | Path) -> list[FileHandle]:
        if self.active_folder is not None:
            self.close_folder()
        self.active_folder = str(folder)
        logger.info(f"Opened folder {self.active_folder}")
        return self.refresh()

    def refresh(self) -> list[FileHandle]:
        if self.active_folder is None:
            self.files = []
            return self.files
        try:
            self.files = self._lister(self.active_folder)
        except (DirectoryReadFailure, OSError) as exc:
            logger.error(f"Could not list folder {self.active_folder}: {exc}")
            self.files = []
        return self.files

    def select(self, path: str) -> Document | None:
        if not storage.is_openable(path):
            logger.debug(f"Ignoring unsupported file {path}")
            return None
        try:
            document = self.store.open(path, self._loader)
        except ReadFailure as exc:
            logger.error(f"Could not open {path}: {exc}")
            raise
        self.active_file = path
        return document

    def edit(self, content: str) -> None:
        if self.active_file is None:
            return
        self.store.update(self.active_file, content)
        self.saver.notify_edited(self.active_file)

    def save_active(self) -> bool:
        if self.active_file is None:
            return False
        return self.saver.save_one(self.active_file)

    def save_all(self) -> list[tuple[str, bool]]:
        return self.saver.save_all()

    def close_folder(self) -> None:
        self.saver.cancel_all()
        self.store.close_all()
        if self.active_folder is not None:
            logger.info(f"Closed folder {self.active_folder}")
        self.active_folder = None
        self.active_file = None
        self.files = []
        self.sidebar_visible = True
