from __future__ import annotations


class FolioError(Exception):
    """Base class for recoverable editor failures."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class DirectoryReadFailure(FolioError):
    pass


class ReadFailure(FolioError):
    pass


class WriteFailure(FolioError):
    pass


class SettingsParseFailure(FolioError):
    pass


class RenderFailure(FolioError):
    pass
