from __future__ import annotations

from typing import Callable, Iterator

from loguru import logger

from .errors import ReadFailure
from .models import Document

Loader = Callable[[str], str]


class DocumentStore:
    """Current and on-disk content of every file opened in a folder session.

    Documents live until ``close_all``; there is no per-file close. Dirtiness
    is always recomputed from the two stored contents.
    """

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}

    def __contains__(self, path: object) -> bool:
        return path in self._documents

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(list(self._documents.values()))

    def paths(self) -> list[str]:
        return list(self._documents)

    def get(self, path: str) -> Document | None:
        return self._documents.get(path)

    def open(self, path: str, loader: Loader) -> Document:
        # Presence check precedes the read so in-memory edits are never replaced.
        existing = self._documents.get(path)
        if existing is not None:
            return existing

        try:
            text = loader(path)
        except ReadFailure:
            raise
        except OSError as exc:
            raise ReadFailure(f"Could not read {path}: {exc}", path=path) from exc

        document = Document.loaded(path, text)
        self._documents[path] = document
        logger.info(f"Opened {path} ({len(text)} chars)")
        return document

    def update(self, path: str, new_content: str) -> None:
        document = self._documents.get(path)
        if document is None:
            logger.warning(f"Edit for a document that is not open: {path}")
            return
        document.current_content = new_content

    def is_dirty(self, path: str) -> bool:
        document = self._documents.get(path)
        return document is not None and document.is_dirty

    def list_dirty(self) -> set[str]:
        return {path for path, document in self._documents.items() if document.is_dirty}

    def mark_saved(self, path: str, saved_content: str) -> None:
        document = self._documents.get(path)
        if document is None:
            logger.warning(f"Save confirmation for a document that is not open: {path}")
            return
        document.original_content = saved_content

    def close_all(self) -> None:
        if self._documents:
            logger.info(f"Closing {len(self._documents)} open document(s)")
        self._documents.clear()
