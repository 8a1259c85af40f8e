from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

OPENABLE_EXTENSIONS = (".md", ".txt")


def is_openable_path(path: str | Path) -> bool:
    return Path(path).suffix in OPENABLE_EXTENSIONS


@dataclass(frozen=True, slots=True)
class FileHandle:
    path: str
    is_directory: bool
    display_name: str

    @classmethod
    def from_path(cls, path: Path, is_directory: bool) -> "FileHandle":
        return cls(path=str(path), is_directory=is_directory, display_name=path.name)

    @property
    def is_openable(self) -> bool:
        return not self.is_directory and is_openable_path(self.path)

    @property
    def is_markdown(self) -> bool:
        return not self.is_directory and Path(self.path).suffix == ".md"


@dataclass(slots=True)
class Document:
    """Editable text plus the snapshot last known to be on disk.

    ``is_dirty`` is evaluated on every access; there is no cached flag to
    drift out of sync with the two contents.
    """

    path: str
    current_content: str
    original_content: str

    @classmethod
    def loaded(cls, path: str, text: str) -> "Document":
        return cls(path=path, current_content=text, original_content=text)

    @property
    def is_dirty(self) -> bool:
        return self.current_content != self.original_content
