from pathlib import Path

import pytest

from folio.core.errors import DirectoryReadFailure, ReadFailure, WriteFailure
from folio.core.models import FileHandle
from folio.core.storage import is_openable, list_directory, read_text, write_text


def test_list_directory_puts_directories_first(tmp_path: Path) -> None:
    (tmp_path / "b.md").write_text("# B\n", encoding="utf-8")
    (tmp_path / "A.txt").write_text("a", encoding="utf-8")
    (tmp_path / "zeta").mkdir()
    (tmp_path / "image.png").write_bytes(b"\x89PNG")

    entries = list_directory(tmp_path)

    assert [entry.display_name for entry in entries] == ["zeta", "A.txt", "b.md", "image.png"]
    assert entries[0].is_directory is True
    assert [entry.is_openable for entry in entries] == [False, True, True, False]
    assert entries[2].path == str(tmp_path / "b.md")


def test_list_directory_missing_folder_raises(tmp_path: Path) -> None:
    with pytest.raises(DirectoryReadFailure):
        list_directory(tmp_path / "missing")


def test_is_openable_matches_extension_case_sensitively() -> None:
    assert is_openable("/notes/todo.md")
    assert is_openable("/notes/log.txt")
    assert not is_openable("/notes/todo.MD")
    assert not is_openable("/notes/log.TXT")
    assert not is_openable("/notes/photo.jpg")
    assert not is_openable("/notes/README")


def test_file_handle_markdown_flag_ignores_upper_case_suffix() -> None:
    assert FileHandle("/notes/a.md", False, "a.md").is_markdown is True
    assert FileHandle("/notes/A.MD", False, "A.MD").is_markdown is False
    assert FileHandle("/notes/A.MD", False, "A.MD").is_openable is False


def test_write_then_read_preserves_text(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "note.md"
    write_text(target, "line one\r\nline two\n")

    assert target.read_bytes() == b"line one\r\nline two\n"
    assert read_text(target).splitlines() == ["line one", "line two"]
    assert [path.name for path in target.parent.iterdir()] == ["note.md"]


def test_read_missing_file_raises_read_failure(tmp_path: Path) -> None:
    with pytest.raises(ReadFailure) as info:
        read_text(tmp_path / "nope.md")
    assert info.value.path == str(tmp_path / "nope.md")


def test_read_falls_back_to_cp1251(tmp_path: Path) -> None:
    target = tmp_path / "legacy.txt"
    target.write_bytes("Привет".encode("cp1251"))

    assert read_text(target) == "Привет"


def test_write_into_directory_path_raises_write_failure(tmp_path: Path) -> None:
    folder = tmp_path / "folder.md"
    folder.mkdir()

    with pytest.raises(WriteFailure):
        write_text(folder, "text")
