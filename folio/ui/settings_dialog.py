from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from ..settings import FONT_FAMILIES, FONT_SIZE_RANGE, LINE_HEIGHT_RANGE, AppSettings

VIEW_MODE_LABELS = {
    "editor": "Editor Only",
    "preview": "Preview Only",
    "split": "Side-by-Side",
}
FONT_LABELS = {
    "Georgia, serif": "Georgia (Serif)",
    "Times, serif": "Times (Serif)",
    "-apple-system, BlinkMacSystemFont, sans-serif": "System (Sans-serif)",
    "'Courier New', monospace": "Courier (Monospace)",
    "'Monaco', monospace": "Monaco (Monospace)",
}
THEME_LABELS = {"cream": "Cream", "dark": "Dark", "white": "White"}


class SettingsDialog(QDialog):
    """Live settings panel; every change is emitted immediately."""

    settings_changed = Signal(object)

    def __init__(self, settings: AppSettings, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setMinimumWidth(320)
        self._settings = settings
        self._loading = True

        layout = QVBoxLayout(self)
        form = QFormLayout()
        layout.addLayout(form)

        self.view_mode_combo = QComboBox()
        for value, label in VIEW_MODE_LABELS.items():
            self.view_mode_combo.addItem(label, value)
        form.addRow("View Mode", self.view_mode_combo)

        self.font_combo = QComboBox()
        for value in FONT_FAMILIES:
            self.font_combo.addItem(FONT_LABELS.get(value, value), value)
        if settings.font_family not in FONT_FAMILIES:
            self.font_combo.addItem(settings.font_family, settings.font_family)
        form.addRow("Font Family", self.font_combo)

        self.font_size_label = QLabel()
        self.font_size_slider = QSlider(Qt.Orientation.Horizontal)
        self.font_size_slider.setRange(*FONT_SIZE_RANGE)
        form.addRow(self.font_size_label, self.font_size_slider)

        # QSlider is integer-only, so line height is stored in tenths.
        self.line_height_label = QLabel()
        self.line_height_slider = QSlider(Qt.Orientation.Horizontal)
        self.line_height_slider.setRange(round(LINE_HEIGHT_RANGE[0] * 10), round(LINE_HEIGHT_RANGE[1] * 10))
        form.addRow(self.line_height_label, self.line_height_slider)

        self.theme_combo = QComboBox()
        for value, label in THEME_LABELS.items():
            self.theme_combo.addItem(label, value)
        form.addRow("Theme", self.theme_combo)

        self.auto_save_check = QCheckBox("Auto-save")
        form.addRow(self.auto_save_check)

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Close)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

        self._load(settings)
        self._loading = False

        self.view_mode_combo.currentIndexChanged.connect(self._on_changed)
        self.font_combo.currentIndexChanged.connect(self._on_changed)
        self.font_size_slider.valueChanged.connect(self._on_changed)
        self.line_height_slider.valueChanged.connect(self._on_changed)
        self.theme_combo.currentIndexChanged.connect(self._on_changed)
        self.auto_save_check.toggled.connect(self._on_changed)

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def _load(self, settings: AppSettings) -> None:
        self.view_mode_combo.setCurrentIndex(self.view_mode_combo.findData(settings.view_mode))
        self.font_combo.setCurrentIndex(self.font_combo.findData(settings.font_family))
        self.font_size_slider.setValue(settings.font_size)
        self.line_height_slider.setValue(round(settings.line_height * 10))
        self.theme_combo.setCurrentIndex(self.theme_combo.findData(settings.theme))
        self.auto_save_check.setChecked(settings.auto_save)
        self._update_labels(settings)

    def _update_labels(self, settings: AppSettings) -> None:
        self.font_size_label.setText(f"Font Size: {settings.font_size}px")
        self.line_height_label.setText(f"Line Height: {settings.line_height:.1f}")

    def _on_changed(self, *_args) -> None:
        if self._loading:
            return
        self._settings = self._settings.with_changes(
            view_mode=self.view_mode_combo.currentData(),
            font_family=self.font_combo.currentData(),
            font_size=self.font_size_slider.value(),
            line_height=self.line_height_slider.value() / 10,
            theme=self.theme_combo.currentData(),
            auto_save=self.auto_save_check.isChecked(),
        )
        self._update_labels(self._settings)
        self.settings_changed.emit(self._settings)
