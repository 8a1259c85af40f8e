from __future__ import annotations

import markdown as markdown_renderer
from loguru import logger

from .errors import RenderFailure

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "sane_lists"]
RENDER_ERROR_HTML = "<p>Error rendering markdown</p>"


def render_markdown(text: str) -> str:
    if not text:
        return ""
    try:
        return _convert(text)
    except RenderFailure as exc:
        logger.error(f"Markdown rendering failed: {exc}")
        return RENDER_ERROR_HTML


def _convert(text: str) -> str:
    try:
        return markdown_renderer.markdown(text, extensions=MARKDOWN_EXTENSIONS)
    except Exception as exc:
        raise RenderFailure(str(exc)) from exc


def build_preview_html(text: str, css: str) -> str:
    body = render_markdown(text)
    return f"""
    <html>
      <head>
        <meta charset="utf-8">
        <style>{css}</style>
      </head>
      <body>{body}</body>
    </html>
    """
