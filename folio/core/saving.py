from __future__ import annotations

from typing import Callable

from loguru import logger

from .debounce import DebounceTimer, Scheduler
from .documents import DocumentStore
from .errors import WriteFailure

AUTOSAVE_DELAY_MS = 2000

Writer = Callable[[str, str], None]


class SaveCoordinator:
    """Decides when documents are written and keeps their baselines honest.

    Each dirty path owns its own debounce timer, so edits to one file never
    postpone or redirect the autosave of another. A save always marks the
    document saved with the exact text handed to the writer.
    """

    def __init__(
        self,
        store: DocumentStore,
        writer: Writer,
        scheduler: Scheduler,
        auto_save_enabled: bool = True,
        delay_ms: int = AUTOSAVE_DELAY_MS,
        on_saved: Callable[[str], None] | None = None,
        on_save_failed: Callable[[str, Exception], None] | None = None,
    ) -> None:
        self._store = store
        self._writer = writer
        self._scheduler = scheduler
        self._auto_save_enabled = auto_save_enabled
        self._delay_ms = delay_ms
        self._timers: dict[str, DebounceTimer] = {}
        self.on_saved = on_saved
        self.on_save_failed = on_save_failed

    @property
    def auto_save_enabled(self) -> bool:
        return self._auto_save_enabled

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    def set_auto_save(self, enabled: bool) -> None:
        self._auto_save_enabled = enabled
        if not enabled:
            self.cancel_all()

    def pending_paths(self) -> set[str]:
        return {path for path, timer in self._timers.items() if timer.pending}

    def notify_edited(self, path: str) -> None:
        if not self._auto_save_enabled:
            return
        if not self._store.is_dirty(path):
            self._cancel(path)
            return

        timer = self._timers.get(path)
        if timer is None:
            timer = DebounceTimer(self._scheduler, name=f"autosave:{path}")
            self._timers[path] = timer
        timer.arm(self._delay_ms, lambda: self.autosave_tick(path))
        logger.debug(f"Autosave armed for {path} ({self._delay_ms} ms)")

    def autosave_tick(self, path: str) -> bool:
        if not self._auto_save_enabled:
            return False
        if not self._store.is_dirty(path):
            return False
        logger.debug(f"Autosaving {path}")
        return self.save_one(path)

    def save_one(self, path: str) -> bool:
        document = self._store.get(path)
        if document is None:
            logger.warning(f"Save requested for a document that is not open: {path}")
            return False

        self._cancel(path)
        if not document.is_dirty:
            return True

        snapshot = document.current_content
        try:
            self._writer(path, snapshot)
        except (WriteFailure, OSError) as exc:
            logger.error(f"Failed to save {path}: {exc}")
            if self.on_save_failed is not None:
                self.on_save_failed(path, exc)
            return False

        self._store.mark_saved(path, snapshot)
        if self._store.is_dirty(path):
            logger.info(f"Saved {path}; edited again during the write")
            self.notify_edited(path)
        else:
            logger.info(f"Saved {path}")
        if self.on_saved is not None:
            self.on_saved(path)
        return True

    def save_all(self) -> list[tuple[str, bool]]:
        batch = sorted(self._store.list_dirty())
        if not batch:
            return []
        logger.info(f"Saving {len(batch)} modified document(s)")
        return [(path, self.save_one(path)) for path in batch]

    def cancel_all(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()

    def _cancel(self, path: str) -> None:
        timer = self._timers.pop(path, None)
        if timer is not None:
            timer.cancel()
