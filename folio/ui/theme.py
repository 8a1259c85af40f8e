from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ThemeTokens:
    name: str
    background: str
    text: str
    text_muted: str
    sidebar: str
    border: str
    accent: str
    selection: str
    danger: str
    success: str
    code_bg: str


CREAM_TOKENS = ThemeTokens(
    name="cream",
    background="#faf8f5",
    text="#2c2c2c",
    text_muted="#8a8580",
    sidebar="#f5f5f5",
    border="#e0e0e0",
    accent="#007acc",
    selection="#cfe3f5",
    danger="#ff6b6b",
    success="#51cf66",
    code_bg="#f1ede6",
)

DARK_TOKENS = ThemeTokens(
    name="dark",
    background="#1e1e1e",
    text="#d4d4d4",
    text_muted="#8d9094",
    sidebar="#252526",
    border="#3e3e3e",
    accent="#007acc",
    selection="#264f78",
    danger="#ff6b6b",
    success="#51cf66",
    code_bg="#2a2d31",
)

WHITE_TOKENS = ThemeTokens(
    name="white",
    background="#ffffff",
    text="#333333",
    text_muted="#8c8c8c",
    sidebar="#f8f8f8",
    border="#e1e1e1",
    accent="#007acc",
    selection="#add6ff",
    danger="#ff6b6b",
    success="#51cf66",
    code_bg="#f3f4f6",
)

THEMES = {tokens.name: tokens for tokens in (CREAM_TOKENS, DARK_TOKENS, WHITE_TOKENS)}


def get_theme_tokens(theme_name: str) -> ThemeTokens:
    return THEMES.get(theme_name, CREAM_TOKENS)


def build_app_stylesheet(tokens: ThemeTokens) -> str:
    return f"""
    QWidget {{
        color: {tokens.text};
        background: {tokens.background};
        font-size: 14px;
    }}
    QFrame#sideBar {{
        background: {tokens.sidebar};
        border-right: 1px solid {tokens.border};
    }}
    QFrame#headerBar {{
        background: {tokens.sidebar};
        border-bottom: 1px solid {tokens.border};
    }}
    QToolBar {{
        background: {tokens.sidebar};
        border: none;
        border-bottom: 1px solid {tokens.border};
        spacing: 4px;
        padding: 4px;
    }}
    QToolButton {{
        background: transparent;
        border: 1px solid transparent;
        border-radius: 4px;
        padding: 4px 8px;
    }}
    QToolButton:hover {{
        border-color: {tokens.border};
    }}
    QPushButton {{
        border: 1px solid {tokens.border};
        border-radius: 4px;
        padding: 6px 12px;
    }}
    QPushButton#saveStatus[dirty="true"] {{
        background: {tokens.danger};
        color: #ffffff;
        border: none;
    }}
    QPushButton#saveStatus[dirty="false"] {{
        background: {tokens.success};
        color: #ffffff;
        border: none;
    }}
    QPlainTextEdit, QTextBrowser {{
        border: none;
        padding: 24px;
        selection-background-color: {tokens.selection};
    }}
    QListWidget {{
        background: {tokens.sidebar};
        border: none;
        outline: none;
    }}
    QListWidget::item {{
        border-radius: 3px;
        padding: 5px;
        margin: 2px 0;
    }}
    QListWidget::item:selected {{
        background: {tokens.accent};
        color: #ffffff;
    }}
    QSplitter::handle {{
        background: {tokens.border};
    }}
    QStatusBar {{
        background: {tokens.sidebar};
        border-top: 1px solid {tokens.border};
    }}
    QLabel#muted {{
        color: {tokens.text_muted};
    }}
    QLabel#error {{
        color: {tokens.danger};
    }}
    """


def build_preview_css(tokens: ThemeTokens, font_family: str, font_size: int, line_height: float) -> str:
    return f"""
    body {{
      font-family: {font_family};
      font-size: {font_size}px;
      line-height: {line_height};
      color: {tokens.text};
      background: {tokens.background};
      margin: 0;
    }}
    pre {{
      background: {tokens.code_bg};
      border: 1px solid {tokens.border};
      border-radius: 6px;
      padding: 10px;
      white-space: pre-wrap;
    }}
    code {{
      background: {tokens.code_bg};
      padding: 1px 3px;
      border-radius: 3px;
    }}
    blockquote {{
      color: {tokens.text_muted};
      border-left: 3px solid {tokens.border};
      margin-left: 0;
      padding-left: 12px;
    }}
    table, th, td {{
      border: 1px solid {tokens.border};
      border-collapse: collapse;
      padding: 5px 7px;
    }}
    """
