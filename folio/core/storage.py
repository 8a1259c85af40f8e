from __future__ import annotations

import os
from pathlib import Path
from uuid import uuid4

from loguru import logger

from .errors import DirectoryReadFailure, ReadFailure, WriteFailure
from .models import FileHandle, is_openable_path


def is_openable(path: str | Path) -> bool:
    return is_openable_path(path)


def list_directory(folder: str | Path) -> list[FileHandle]:
    directory = Path(folder)
    if not directory.is_dir():
        raise DirectoryReadFailure(f"Not a directory: {directory}", path=str(directory))

    entries: list[FileHandle] = []
    try:
        for entry in os.scandir(directory):
            try:
                is_dir = entry.is_dir()
            except OSError as exc:
                logger.warning(f"Skipping unreadable entry {entry.path}: {exc}")
                continue
            entries.append(FileHandle.from_path(Path(entry.path), is_directory=is_dir))
    except OSError as exc:
        raise DirectoryReadFailure(f"Could not list {directory}: {exc}", path=str(directory)) from exc

    entries.sort(key=lambda item: (not item.is_directory, item.display_name.casefold()))
    return entries


def read_text(path: str | Path) -> str:
    target = Path(path)
    encodings = ("utf-8", "utf-8-sig", "cp1251")
    try:
        for encoding in encodings:
            try:
                return target.read_text(encoding=encoding)
            except UnicodeDecodeError:
                continue
        return target.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise ReadFailure(f"Could not read {target}: {exc}", path=str(target)) from exc


def atomic_write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_name = f".{path.name}.{os.getpid()}.{uuid4().hex}.tmp"
    temp_path = path.parent / temp_name

    try:
        with temp_path.open("w", encoding="utf-8", newline="") as file:
            file.write(text)
            file.flush()
            os.fsync(file.fileno())
        os.replace(temp_path, path)
    finally:
        if temp_path.exists():
            try:
                temp_path.unlink()
            except OSError as exc:
                logger.warning(f"Could not remove temp file {temp_path}: {exc}")


def write_text(path: str | Path, text: str) -> None:
    target = Path(path)
    try:
        atomic_write_text(target, text)
    except OSError as exc:
        raise WriteFailure(f"Could not write {target}: {exc}", path=str(target)) from exc
    logger.debug(f"Wrote {len(text)} chars to {target}")
