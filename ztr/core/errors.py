from __future__ import annotations

from pathlib import Path


class ZtrError(Exception):
    """Base class for errors raised by the config and project stores."""


class ParseError(ZtrError, ValueError):
    """Raised when a persisted document exists but is not well-formed JSON."""

    def __init__(self, message: str, *, path: Path, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.path = path
        if cause is not None:
            self.__cause__ = cause


class PersistenceError(ZtrError, OSError):
    """Raised when a document cannot be written back to disk."""

    def __init__(self, message: str, *, path: Path, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.path = path
        if cause is not None:
            self.__cause__ = cause


class ExportError(ZtrError):
    """Raised by exporters; project builds let it through untouched."""
