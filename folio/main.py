from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger
from PySide6.QtWidgets import QApplication

if __package__ in (None, ""):
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
    from folio.logging_setup import setup_logging
    from folio.settings import AppSettings
    from folio.ui.main_window import MainWindow
else:
    from .logging_setup import setup_logging
    from .settings import AppSettings
    from .ui.main_window import MainWindow


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="folio", description="Markdown notes editor")
    parser.add_argument("folder", nargs="?", help="folder to open on start")
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging(verbose=args.verbose)

    app = QApplication(sys.argv[:1])
    app.setApplicationName("Folio")
    app.setOrganizationName("Folio")
    app.setStyle("Fusion")

    settings = AppSettings.load()
    window = MainWindow(settings=settings, initial_folder=args.folder)
    window.show()
    exit_code = app.exec()
    logger.info(f"Application finished with exit code {exit_code}.")
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
