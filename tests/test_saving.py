from folio.core.debounce import VirtualScheduler
from folio.core.documents import DocumentStore
from folio.core.errors import WriteFailure
from folio.core.saving import AUTOSAVE_DELAY_MS, SaveCoordinator


class FakeDisk:
    def __init__(self, files: dict[str, str]) -> None:
        self.files = dict(files)
        self.writes: list[tuple[str, str]] = []
        self.failing: set[str] = set()
        self.during_write = None

    def read(self, path: str) -> str:
        return self.files[path]

    def write(self, path: str, text: str) -> None:
        if self.during_write is not None:
            self.during_write(path)
        if path in self.failing:
            raise WriteFailure(f"disk full: {path}", path=path)
        self.writes.append((path, text))
        self.files[path] = text


def build(files: dict[str, str], auto_save: bool = True):
    disk = FakeDisk(files)
    store = DocumentStore()
    for path in files:
        store.open(path, disk.read)
    scheduler = VirtualScheduler()
    saver = SaveCoordinator(store, writer=disk.write, scheduler=scheduler, auto_save_enabled=auto_save)
    return disk, store, scheduler, saver


def test_save_one_writes_current_content_and_clears_dirty() -> None:
    disk, store, _, saver = build({"/a.md": "hello"})
    store.update("/a.md", "hello world")

    assert saver.save_one("/a.md") is True
    assert disk.writes == [("/a.md", "hello world")]
    assert store.is_dirty("/a.md") is False


def test_save_one_on_clean_document_is_noop() -> None:
    disk, store, _, saver = build({"/a.md": "hello"})
    store.update("/a.md", "changed")
    saver.save_one("/a.md")

    assert saver.save_one("/a.md") is True
    assert disk.writes == [("/a.md", "changed")]


def test_save_one_unknown_path_fails() -> None:
    disk, _, _, saver = build({})
    assert saver.save_one("/ghost.md") is False
    assert disk.writes == []


def test_write_failure_keeps_document_dirty_and_reports() -> None:
    disk, store, _, saver = build({"/a.md": "hello"})
    failures: list[str] = []
    saver.on_save_failed = lambda path, error: failures.append(path)
    disk.failing.add("/a.md")
    store.update("/a.md", "edit")

    assert saver.save_one("/a.md") is False
    assert store.is_dirty("/a.md") is True
    assert store.get("/a.md").original_content == "hello"
    assert failures == ["/a.md"]

    disk.failing.clear()
    assert saver.save_one("/a.md") is True
    assert store.is_dirty("/a.md") is False


def test_os_error_from_writer_is_not_fatal() -> None:
    store = DocumentStore()
    store.open("/a.md", lambda path: "x")
    store.update("/a.md", "y")

    def writer(path: str, text: str) -> None:
        raise PermissionError("read-only")

    saver = SaveCoordinator(store, writer=writer, scheduler=VirtualScheduler())
    assert saver.save_one("/a.md") is False
    assert store.is_dirty("/a.md") is True


def test_edit_during_write_leaves_document_dirty() -> None:
    disk, store, _, saver = build({"/a.md": "v1"})
    store.update("/a.md", "v2")
    disk.during_write = lambda path: store.update(path, "v3")

    assert saver.save_one("/a.md") is True
    assert disk.writes == [("/a.md", "v2")]
    assert store.get("/a.md").original_content == "v2"
    assert store.is_dirty("/a.md") is True


def test_save_all_saves_every_dirty_document() -> None:
    disk, store, _, saver = build({"/a.md": "a", "/b.md": "b", "/c.md": "c"})
    store.update("/a.md", "a2")
    store.update("/b.md", "b2")

    results = saver.save_all()

    assert results == [("/a.md", True), ("/b.md", True)]
    assert store.list_dirty() == set()
    assert sorted(disk.writes) == [("/a.md", "a2"), ("/b.md", "b2")]


def test_save_all_does_not_lose_files_dirtied_during_sweep() -> None:
    disk, store, _, saver = build({"/a.md": "a", "/b.md": "b"})
    store.update("/a.md", "a2")

    def edit_b(path: str) -> None:
        if path == "/a.md":
            store.update("/b.md", "b2")

    disk.during_write = edit_b
    results = saver.save_all()

    assert results == [("/a.md", True)]
    assert store.is_dirty("/b.md") is True


def test_save_all_continues_after_a_failure() -> None:
    disk, store, _, saver = build({"/a.md": "a", "/b.md": "b"})
    store.update("/a.md", "a2")
    store.update("/b.md", "b2")
    disk.failing.add("/a.md")

    results = dict(saver.save_all())

    assert results == {"/a.md": False, "/b.md": True}
    assert store.list_dirty() == {"/a.md"}


def test_save_all_with_nothing_dirty_returns_empty() -> None:
    disk, _, _, saver = build({"/a.md": "a"})
    assert saver.save_all() == []
    assert disk.writes == []


def test_autosave_fires_once_after_quiet_period() -> None:
    disk, store, scheduler, saver = build({"/a.md": "a"})
    for text in ("a1", "a12", "a123"):
        store.update("/a.md", text)
        saver.notify_edited("/a.md")
        scheduler.advance(500)

    scheduler.advance(AUTOSAVE_DELAY_MS - 501)
    assert disk.writes == []

    scheduler.advance(1)
    assert disk.writes == [("/a.md", "a123")]
    assert store.is_dirty("/a.md") is False


def test_autosave_disabled_never_arms_timer() -> None:
    disk, store, scheduler, saver = build({"/a.md": "a"}, auto_save=False)
    store.update("/a.md", "a2")
    saver.notify_edited("/a.md")

    assert saver.pending_paths() == set()
    assert scheduler.pending_count == 0
    scheduler.advance(AUTOSAVE_DELAY_MS * 5)
    assert disk.writes == []

    assert saver.save_one("/a.md") is True
    assert disk.writes == [("/a.md", "a2")]


def test_autosave_saves_each_file_edited_in_same_window() -> None:
    disk, store, scheduler, saver = build({"/a.md": "a", "/b.md": "b"})
    store.update("/a.md", "a2")
    saver.notify_edited("/a.md")
    scheduler.advance(500)
    store.update("/b.md", "b2")
    saver.notify_edited("/b.md")

    scheduler.advance(AUTOSAVE_DELAY_MS)

    assert disk.writes == [("/a.md", "a2"), ("/b.md", "b2")]
    assert store.list_dirty() == set()


def test_manual_save_cancels_pending_autosave() -> None:
    disk, store, scheduler, saver = build({"/a.md": "a"})
    store.update("/a.md", "a2")
    saver.notify_edited("/a.md")

    saver.save_one("/a.md")
    assert saver.pending_paths() == set()

    scheduler.advance(AUTOSAVE_DELAY_MS * 2)
    assert disk.writes == [("/a.md", "a2")]


def test_edit_back_to_original_cancels_pending_autosave() -> None:
    disk, store, scheduler, saver = build({"/a.md": "a"})
    store.update("/a.md", "a2")
    saver.notify_edited("/a.md")
    store.update("/a.md", "a")
    saver.notify_edited("/a.md")

    scheduler.advance(AUTOSAVE_DELAY_MS)
    assert disk.writes == []


def test_disabling_autosave_cancels_pending_timers() -> None:
    disk, store, scheduler, saver = build({"/a.md": "a"})
    store.update("/a.md", "a2")
    saver.notify_edited("/a.md")

    saver.set_auto_save(False)
    scheduler.advance(AUTOSAVE_DELAY_MS)

    assert disk.writes == []
    assert store.is_dirty("/a.md") is True


def test_autosave_tick_skips_clean_or_disabled() -> None:
    disk, store, _, saver = build({"/a.md": "a"})
    assert saver.autosave_tick("/a.md") is False

    store.update("/a.md", "a2")
    saver.set_auto_save(False)
    assert saver.autosave_tick("/a.md") is False
    assert disk.writes == []


def test_failed_autosave_keeps_document_dirty_until_next_edit() -> None:
    disk, store, scheduler, saver = build({"/a.md": "a"})
    disk.failing.add("/a.md")
    store.update("/a.md", "a2")
    saver.notify_edited("/a.md")
    scheduler.advance(AUTOSAVE_DELAY_MS)

    assert store.is_dirty("/a.md") is True
    disk.failing.clear()
    store.update("/a.md", "a3")
    saver.notify_edited("/a.md")
    scheduler.advance(AUTOSAVE_DELAY_MS)

    assert disk.writes == [("/a.md", "a3")]


def test_saved_callback_runs_after_success(mocker) -> None:
    disk, store, _, saver = build({"/a.md": "a"})
    on_saved = mocker.Mock()
    saver.on_saved = on_saved
    store.update("/a.md", "a2")

    saver.save_one("/a.md")

    on_saved.assert_called_once_with("/a.md")
