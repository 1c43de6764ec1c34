from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol


@dataclass(frozen=True)
class SourceDocument:
    """An in-memory stand-in for a file handed to an exporter."""

    path: Path
    name: str
    content: str

    def read(self) -> str:
        return self.content


@dataclass(frozen=True)
class ExportRequest:
    format: str  # html|docx|odt|pdf
    file: SourceDocument
    dest: Path
    strip_ids: bool
    strip_tags: bool
    strip_links: str  # full|unlink|no
    pdf: dict[str, Any] = field(default_factory=dict)
    title: str = ""
    author: str = ""
    keywords: str = ""


class Exporter(Protocol):
    def __call__(self, request: ExportRequest) -> None: ...
