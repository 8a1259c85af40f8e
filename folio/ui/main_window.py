from __future__ import annotations

from datetime import datetime
from pathlib import Path

from loguru import logger
from PySide6.QtCore import QTimer, Qt
from PySide6.QtGui import QAction, QFont, QKeySequence
from PySide6.QtWidgets import (
    QFileDialog,
    QFrame,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QSplitter,
    QStackedWidget,
    QTextBrowser,
    QToolBar,
    QVBoxLayout,
    QWidget,
)

from ..core.autosave import QtTimerScheduler
from ..core.errors import ReadFailure
from ..core.models import FileHandle
from ..core.rendering import build_preview_html
from ..core.session import EditorSession
from ..settings import AppSettings
from .settings_dialog import SettingsDialog
from .theme import build_app_stylesheet, build_preview_css, get_theme_tokens
from .welcome import WelcomeScreen

VIEW_MODE_TITLES = {"editor": "Editor", "preview": "Preview", "split": "Split View"}
SPLIT_EDITOR_FONT = "'Monaco', monospace"


def css_font_to_qfont(font_family: str, font_size: int) -> QFont:
    families = [part.strip().strip("'\"") for part in font_family.split(",") if part.strip()]
    font = QFont()
    font.setFamilies(families)
    font.setPixelSize(font_size)
    return font


class MainWindow(QMainWindow):
    SIDEBAR_DEFAULT_WIDTH = 300

    def __init__(self, settings: AppSettings | None = None, initial_folder: str | None = None) -> None:
        super().__init__()

        self.settings = settings or AppSettings.load()
        self.scheduler = QtTimerScheduler(self)
        self.session = EditorSession(self.scheduler, auto_save_enabled=self.settings.auto_save)
        self.session.saver.on_saved = self._on_document_saved
        self.session.saver.on_save_failed = self._on_save_failed
        self.settings_dialog: SettingsDialog | None = None
        self._file_items: dict[str, QListWidgetItem] = {}
        self._updating = False

        self.setWindowTitle("Folio[*]")
        self.resize(1200, 800)

        self._create_actions()
        self._build_ui()

        self._preview_timer = QTimer(self)
        self._preview_timer.setSingleShot(True)
        self._preview_timer.setInterval(180)
        self._preview_timer.timeout.connect(self._update_preview)

        self._apply_settings(self.settings, persist=False)

        start_folder = initial_folder or self.settings.last_directory
        if start_folder and Path(start_folder).is_dir():
            self._open_folder(start_folder)
        else:
            self._show_welcome()

    def _create_actions(self) -> None:
        self.open_folder_action = QAction("Open Folder", self)
        self.open_folder_action.setShortcut(QKeySequence("Ctrl+O"))
        self.open_folder_action.triggered.connect(self._choose_directory)

        self.close_folder_action = QAction("Close Folder", self)
        self.close_folder_action.setShortcut(QKeySequence("Ctrl+W"))
        self.close_folder_action.triggered.connect(self._close_folder)

        self.save_action = QAction("Save", self)
        self.save_action.setShortcut(QKeySequence.StandardKey.Save)
        self.save_action.triggered.connect(self._save)

        self.save_all_action = QAction("Save All", self)
        self.save_all_action.setShortcut(QKeySequence("Ctrl+Alt+S"))
        self.save_all_action.triggered.connect(self._save_all)

        self.refresh_action = QAction("Refresh", self)
        self.refresh_action.setShortcut(QKeySequence("F5"))
        self.refresh_action.triggered.connect(self._refresh_file_list)

        self.toggle_sidebar_action = QAction("Files", self)
        self.toggle_sidebar_action.setCheckable(True)
        self.toggle_sidebar_action.setChecked(True)
        self.toggle_sidebar_action.setShortcut(QKeySequence("Ctrl+B"))
        self.toggle_sidebar_action.toggled.connect(self._toggle_sidebar)

        self.settings_action = QAction("Settings", self)
        self.settings_action.setShortcut(QKeySequence("Ctrl+,"))
        self.settings_action.triggered.connect(self._show_settings)

        for action in (
            self.open_folder_action,
            self.close_folder_action,
            self.save_action,
            self.save_all_action,
            self.refresh_action,
            self.toggle_sidebar_action,
            self.settings_action,
        ):
            self.addAction(action)

    def _build_ui(self) -> None:
        self.toolbar = QToolBar("Main")
        self.toolbar.setMovable(False)
        self.toolbar.addAction(self.toggle_sidebar_action)
        self.toolbar.addSeparator()
        self.toolbar.addAction(self.open_folder_action)
        self.toolbar.addAction(self.close_folder_action)
        self.toolbar.addSeparator()
        self.toolbar.addAction(self.save_action)
        self.toolbar.addAction(self.save_all_action)
        self.toolbar.addSeparator()
        self.toolbar.addAction(self.refresh_action)
        self.toolbar.addAction(self.settings_action)
        self.addToolBar(self.toolbar)

        self.pages = QStackedWidget(self)
        self.welcome = WelcomeScreen(self)
        self.welcome.open_folder_requested.connect(self._choose_directory)
        self.welcome.folder_dropped.connect(self._open_folder)
        self.pages.addWidget(self.welcome)

        self.outer_splitter = QSplitter(Qt.Orientation.Horizontal)
        self.outer_splitter.setChildrenCollapsible(False)
        self.sidebar_panel = self._build_sidebar()
        self.outer_splitter.addWidget(self.sidebar_panel)
        self.outer_splitter.addWidget(self._build_document_area())
        self.outer_splitter.setStretchFactor(0, 0)
        self.outer_splitter.setStretchFactor(1, 1)
        self.outer_splitter.setSizes([self.SIDEBAR_DEFAULT_WIDTH, 900])
        self.pages.addWidget(self.outer_splitter)

        self.setCentralWidget(self.pages)
        self._build_status_bar()

    def _build_sidebar(self) -> QWidget:
        sidebar = QFrame(self)
        sidebar.setObjectName("sideBar")
        layout = QVBoxLayout(sidebar)
        layout.setContentsMargins(10, 10, 10, 10)
        layout.setSpacing(8)

        header = QHBoxLayout()
        title = QLabel("Files")
        title.setStyleSheet("font-weight: 600;")
        header.addWidget(title, 1)
        hide_button = QPushButton("←")
        hide_button.setToolTip("Hide sidebar (Ctrl+B)")
        hide_button.setFlat(True)
        hide_button.clicked.connect(lambda: self.toggle_sidebar_action.setChecked(False))
        header.addWidget(hide_button)
        layout.addLayout(header)

        self.folder_label = QLabel()
        self.folder_label.setObjectName("muted")
        self.folder_label.setWordWrap(True)
        layout.addWidget(self.folder_label)

        self.file_list = QListWidget()
        self.file_list.itemClicked.connect(self._open_item)
        self.file_list.itemActivated.connect(self._open_item)
        layout.addWidget(self.file_list, 1)
        return sidebar

    def _build_document_area(self) -> QWidget:
        area = QWidget(self)
        layout = QVBoxLayout(area)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        header = QFrame(area)
        header.setObjectName("headerBar")
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(10, 6, 10, 6)

        self.show_sidebar_button = QPushButton("→")
        self.show_sidebar_button.setFlat(True)
        self.show_sidebar_button.setToolTip("Show sidebar (Ctrl+B)")
        self.show_sidebar_button.clicked.connect(lambda: self.toggle_sidebar_action.setChecked(True))
        self.show_sidebar_button.hide()
        header_layout.addWidget(self.show_sidebar_button)

        self.file_label = QLabel()
        header_layout.addWidget(self.file_label, 1)

        self.view_mode_label = QLabel()
        self.view_mode_label.setObjectName("muted")
        header_layout.addWidget(self.view_mode_label)

        self.save_status_button = QPushButton()
        self.save_status_button.setObjectName("saveStatus")
        self.save_status_button.clicked.connect(self._save)
        header_layout.addWidget(self.save_status_button)

        settings_button = QPushButton("⚙")
        settings_button.setFlat(True)
        settings_button.clicked.connect(self._show_settings)
        header_layout.addWidget(settings_button)
        layout.addWidget(header)

        self.document_pages = QStackedWidget(area)
        self.placeholder = QLabel(
            "Select a file from the sidebar to start editing\n\nSupports .md (Markdown) and .txt files"
        )
        self.placeholder.setObjectName("muted")
        self.placeholder.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.document_pages.addWidget(self.placeholder)

        self.content_splitter = QSplitter(Qt.Orientation.Horizontal)
        self.editor = QPlainTextEdit()
        self.editor.setPlaceholderText("Start typing markdown...")
        self.editor.textChanged.connect(self._on_editor_changed)
        self.preview_browser = QTextBrowser()
        self.preview_browser.setOpenExternalLinks(True)
        self.content_splitter.addWidget(self.editor)
        self.content_splitter.addWidget(self.preview_browser)
        self.document_pages.addWidget(self.content_splitter)

        layout.addWidget(self.document_pages, 1)
        return area

    def _build_status_bar(self) -> None:
        self.autosave_status_label = QLabel()
        self.last_saved_label = QLabel("Last saved: -")
        self.last_saved_label.setObjectName("muted")
        self.statusBar().addWidget(self.autosave_status_label)
        self.statusBar().addPermanentWidget(self.last_saved_label)

    # Settings

    def _apply_settings(self, settings: AppSettings, persist: bool = True) -> None:
        self.settings = settings
        tokens = get_theme_tokens(settings.theme)
        self.setStyleSheet(build_app_stylesheet(tokens))
        self.preview_browser.setFont(css_font_to_qfont(settings.font_family, settings.font_size))
        self._apply_view_mode()
        self.session.saver.set_auto_save(settings.auto_save)
        self._update_autosave_status()
        self._schedule_preview_refresh()
        if persist:
            self.settings.save()

    def _apply_view_mode(self) -> None:
        mode = self.settings.view_mode
        editor_font = SPLIT_EDITOR_FONT if mode == "split" else self.settings.font_family
        self.editor.setFont(css_font_to_qfont(editor_font, self.settings.font_size))
        self.editor.setVisible(mode in ("editor", "split"))
        self.preview_browser.setVisible(mode in ("preview", "split"))
        self._update_header()

    def _show_settings(self) -> None:
        if self.settings_dialog is None:
            self.settings_dialog = SettingsDialog(self.settings, self)
            self.settings_dialog.settings_changed.connect(self._on_settings_changed)
            self.settings_dialog.finished.connect(self._on_settings_closed)
        self.settings_dialog.show()
        self.settings_dialog.raise_()

    def _on_settings_changed(self, settings: AppSettings) -> None:
        self._apply_settings(settings)

    def _on_settings_closed(self, _: int) -> None:
        self.settings_dialog = None

    # Folder and file navigation

    def _show_welcome(self) -> None:
        self.pages.setCurrentWidget(self.welcome)
        self.toolbar.setVisible(False)

    def _show_workspace(self) -> None:
        self.pages.setCurrentWidget(self.outer_splitter)
        self.toolbar.setVisible(True)

    def _choose_directory(self) -> None:
        start_dir = self.session.active_folder or self.settings.last_directory or str(Path.home())
        selected = QFileDialog.getExistingDirectory(self, "Open Folder", start_dir)
        if selected:
            self._open_folder(selected)

    def _open_folder(self, folder: str) -> None:
        if not self._ensure_saved_before_navigation():
            return

        self._updating = True
        self.editor.setPlainText("")
        self._updating = False
        self.session.open_folder(folder)
        self._apply_settings(self.settings.with_changes(last_directory=str(folder)))
        self._sync_sidebar()
        self._render_file_list()
        self._show_workspace()
        self._show_active_document()
        self.statusBar().showMessage(f"Opened folder: {folder}", 3000)

    def _close_folder(self) -> None:
        if self.session.active_folder is None:
            return
        if not self._ensure_saved_before_navigation():
            return

        self.session.close_folder()
        self._preview_timer.stop()
        self._file_items.clear()
        self.file_list.clear()
        self._updating = True
        self.editor.setPlainText("")
        self._updating = False
        self._sync_sidebar()
        self._apply_settings(self.settings.with_changes(last_directory=""))
        self._show_active_document()
        self._show_welcome()

    def _refresh_file_list(self) -> None:
        if self.session.active_folder is None:
            return
        self.session.refresh()
        self._render_file_list()
        self.statusBar().showMessage("File list refreshed", 3000)

    def _render_file_list(self) -> None:
        self.file_list.clear()
        self._file_items.clear()
        self.folder_label.setText(self.session.active_folder or "")

        for handle in self.session.files:
            item = QListWidgetItem()
            item.setData(Qt.ItemDataRole.UserRole, handle.path)
            item.setToolTip(handle.path)
            if not handle.is_directory and not handle.is_openable:
                item.setFlags(item.flags() & ~Qt.ItemFlag.ItemIsSelectable)
            self.file_list.addItem(item)
            self._file_items[handle.path] = item
            self._update_file_item(handle)

        if not self.session.files:
            placeholder = QListWidgetItem("(no files)")
            placeholder.setFlags(Qt.ItemFlag.NoItemFlags)
            self.file_list.addItem(placeholder)

        active = self.session.active_file
        if active in self._file_items:
            self.file_list.setCurrentItem(self._file_items[active])

    def _update_file_item(self, handle: FileHandle) -> None:
        item = self._file_items.get(handle.path)
        if item is None:
            return
        icon = "📁" if handle.is_directory else "📄"
        badge = "  MD" if handle.is_markdown else ""
        marker = "  ●" if self.session.is_dirty(handle.path) else ""
        item.setText(f"{icon} {handle.display_name}{badge}{marker}")

    def _refresh_dirty_marker(self, path: str) -> None:
        for handle in self.session.files:
            if handle.path == path:
                self._update_file_item(handle)
                return

    def _open_item(self, item: QListWidgetItem) -> None:
        path = item.data(Qt.ItemDataRole.UserRole)
        if not path or path == self.session.active_file:
            return
        handle = next((entry for entry in self.session.files if entry.path == path), None)
        if handle is None or not handle.is_openable:
            return
        self._select_file(str(path))

    def _select_file(self, path: str) -> None:
        try:
            document = self.session.select(path)
        except ReadFailure as exc:
            QMessageBox.critical(self, "Could not open file", f"Failed to open:\n{path}\n\n{exc}")
            return
        if document is None:
            return
        self._show_active_document()

    def _show_active_document(self) -> None:
        document = self.session.active_document
        self._updating = True
        if document is None:
            self.editor.setPlainText("")
            self.document_pages.setCurrentWidget(self.placeholder)
        else:
            self.editor.setPlainText(document.current_content)
            self.document_pages.setCurrentWidget(self.content_splitter)
        self._updating = False
        self._update_header()
        self._update_preview()

    def _toggle_sidebar(self, visible: bool) -> None:
        self.session.sidebar_visible = visible
        self.sidebar_panel.setVisible(visible)
        self.show_sidebar_button.setVisible(not visible)

    def _sync_sidebar(self) -> None:
        self.toggle_sidebar_action.blockSignals(True)
        self.toggle_sidebar_action.setChecked(self.session.sidebar_visible)
        self.toggle_sidebar_action.blockSignals(False)
        self._toggle_sidebar(self.session.sidebar_visible)

    # Editing and saving

    def _on_editor_changed(self) -> None:
        if self._updating or self.session.active_file is None:
            return
        self.session.edit(self.editor.toPlainText())
        self._refresh_dirty_marker(self.session.active_file)
        self._update_header()
        self._update_autosave_status()
        self._schedule_preview_refresh()

    def _save(self) -> None:
        path = self.session.active_file
        if path is None:
            return
        was_dirty = self.session.active_is_dirty
        if self.session.save_active() and was_dirty:
            self.statusBar().showMessage(f"Saved: {Path(path).name}", 3000)

    def _save_all(self) -> bool:
        results = self.session.save_all()
        failed = [path for path, ok in results if not ok]
        if failed:
            names = "\n".join(failed)
            QMessageBox.critical(self, "Save failed", f"Could not save:\n{names}")
            return False
        if results:
            self.statusBar().showMessage(f"Saved {len(results)} file(s)", 3000)
        return True

    def _on_document_saved(self, path: str) -> None:
        self.last_saved_label.setText(f"Last saved: {datetime.now().strftime('%H:%M:%S')}")
        self._refresh_dirty_marker(path)
        self._update_header()
        self._update_autosave_status()

    def _on_save_failed(self, path: str, error: Exception) -> None:
        logger.warning(f"Save of {path} failed, document stays modified")
        self.autosave_status_label.setObjectName("error")
        self.autosave_status_label.setText(f"Save failed: {Path(path).name}")
        self.autosave_status_label.style().unpolish(self.autosave_status_label)
        self.autosave_status_label.style().polish(self.autosave_status_label)
        self.statusBar().showMessage(f"Error saving {path}: {error}", 7000)

    def _update_autosave_status(self) -> None:
        self.autosave_status_label.setObjectName("")
        if not self.settings.auto_save:
            text = "Auto-save: off"
        elif self.session.saver.pending_paths():
            text = "Auto-save: waiting..."
        else:
            text = "Auto-save: ✓"
        self.autosave_status_label.setText(text)
        self.autosave_status_label.style().unpolish(self.autosave_status_label)
        self.autosave_status_label.style().polish(self.autosave_status_label)

    def _update_header(self) -> None:
        path = self.session.active_file
        dirty = self.session.active_is_dirty
        self.setWindowModified(bool(self.session.store.list_dirty()))

        if path is None:
            self.file_label.setText("Select a file to start editing")
            self.view_mode_label.setText("")
            self.save_status_button.hide()
            return

        self.file_label.setText(path)
        self.view_mode_label.setText(VIEW_MODE_TITLES[self.settings.view_mode] if path.endswith(".md") else "")
        self.save_status_button.show()
        self.save_status_button.setText("● Unsaved" if dirty else "✓ Saved")
        self.save_status_button.setEnabled(dirty)
        self.save_status_button.setProperty("dirty", "true" if dirty else "false")
        self.save_status_button.style().unpolish(self.save_status_button)
        self.save_status_button.style().polish(self.save_status_button)

    def _ensure_saved_before_navigation(self) -> bool:
        if not self.session.store.list_dirty():
            return True
        if self._save_all():
            return True

        answer = QMessageBox.question(
            self,
            "Unsaved changes",
            "Some files could not be saved. Continue and lose the unsaved changes?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        return answer == QMessageBox.StandardButton.Yes

    # Preview

    def _schedule_preview_refresh(self) -> None:
        self._preview_timer.start()

    def _update_preview(self) -> None:
        if self.settings.view_mode == "editor":
            return
        document = self.session.active_document
        text = document.current_content if document is not None else ""
        tokens = get_theme_tokens(self.settings.theme)
        css = build_preview_css(tokens, self.settings.font_family, self.settings.font_size, self.settings.line_height)
        self.preview_browser.setHtml(build_preview_html(text, css))

    def closeEvent(self, event) -> None:  # type: ignore[override]
        if self._ensure_saved_before_navigation():
            self.session.saver.cancel_all()
            event.accept()
            return
        event.ignore()
