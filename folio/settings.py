from __future__ import annotations

from dataclasses import asdict, dataclass, replace
import json
import os
from pathlib import Path
import sys
from typing import Any

from loguru import logger

from .core.errors import SettingsParseFailure

APP_NAME = "Folio"
SETTINGS_FILENAME = "settings.json"
CONFIG_DIR_ENV = "FOLIO_CONFIG_DIR"

THEMES = ("cream", "dark", "white")
VIEW_MODES = ("editor", "preview", "split")
FONT_FAMILIES = (
    "Georgia, serif",
    "Times, serif",
    "-apple-system, BlinkMacSystemFont, sans-serif",
    "'Courier New', monospace",
    "'Monaco', monospace",
)
FONT_SIZE_RANGE = (12, 24)
LINE_HEIGHT_RANGE = (1.2, 2.0)

_JSON_KEYS = {
    "font_family": "fontFamily",
    "font_size": "fontSize",
    "line_height": "lineHeight",
    "theme": "theme",
    "auto_save": "autoSave",
    "view_mode": "viewMode",
    "last_directory": "lastDirectory",
}


def get_config_dir(app_name: str = APP_NAME) -> Path:
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    home = Path.home()
    if os.name == "nt":
        base = Path(os.environ.get("APPDATA", home / "AppData" / "Roaming"))
        return base / app_name
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / app_name
    base = Path(os.environ.get("XDG_CONFIG_HOME", home / ".config"))
    return base / app_name.lower()


def get_settings_path() -> Path:
    return get_config_dir() / SETTINGS_FILENAME


@dataclass(frozen=True, slots=True)
class AppSettings:
    font_family: str = "Georgia, serif"
    font_size: int = 16
    line_height: float = 1.6
    theme: str = "cream"
    auto_save: bool = True
    view_mode: str = "editor"
    last_directory: str = ""

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], base: "AppSettings | None" = None
    ) -> "AppSettings":
        """Build settings from a camelCase JSON record.

        Each recognized key is validated on its own; a missing, mistyped or
        out-of-range value keeps that key's value from ``base`` (the defaults
        when no base is given). Unknown keys are ignored.
        """
        defaults = base if base is not None else cls()
        values: dict[str, Any] = {}

        font_family = data.get("fontFamily")
        if isinstance(font_family, str) and font_family.strip():
            values["font_family"] = font_family

        font_size = data.get("fontSize")
        if isinstance(font_size, int) and not isinstance(font_size, bool):
            if FONT_SIZE_RANGE[0] <= font_size <= FONT_SIZE_RANGE[1]:
                values["font_size"] = font_size

        line_height = data.get("lineHeight")
        if isinstance(line_height, (int, float)) and not isinstance(line_height, bool):
            if LINE_HEIGHT_RANGE[0] <= float(line_height) <= LINE_HEIGHT_RANGE[1]:
                values["line_height"] = round(float(line_height), 2)

        if data.get("theme") in THEMES:
            values["theme"] = str(data["theme"])

        if isinstance(data.get("autoSave"), bool):
            values["auto_save"] = bool(data["autoSave"])

        if data.get("viewMode") in VIEW_MODES:
            values["view_mode"] = str(data["viewMode"])

        if isinstance(data.get("lastDirectory"), str):
            values["last_directory"] = str(data["lastDirectory"])

        return replace(defaults, **values)

    def to_dict(self) -> dict[str, Any]:
        return {_JSON_KEYS[name]: value for name, value in asdict(self).items()}

    def with_changes(self, **changes: Any) -> "AppSettings":
        unknown = set(changes) - set(_JSON_KEYS)
        if unknown:
            raise TypeError(f"Unknown settings: {', '.join(sorted(unknown))}")
        merged = self.to_dict()
        merged.update({_JSON_KEYS[name]: value for name, value in changes.items()})
        return AppSettings.from_dict(merged, base=self)

    @classmethod
    def load(cls, path: Path | None = None) -> "AppSettings":
        path = path or get_settings_path()
        if not path.exists():
            logger.info(f"No settings file at {path}, using defaults")
            return cls()

        try:
            data = _parse_settings(path)
        except SettingsParseFailure as exc:
            logger.error(f"{exc}; using defaults")
            return cls()

        return cls.from_dict(data)

    def save(self, path: Path | None = None) -> bool:
        path = path or get_settings_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(self.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.error(f"Failed to save settings to {path}: {exc}")
            return False
        logger.debug(f"Settings saved to {path}")
        return True


def _parse_settings(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
        raise SettingsParseFailure(f"Could not read settings {path}: {exc}", path=str(path)) from exc
    if not isinstance(data, dict):
        raise SettingsParseFailure(f"Settings {path} is not a JSON object", path=str(path))
    return data
