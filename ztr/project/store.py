from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Callable, Iterable

from ..core.document import TemplateStore
from ..core.filenames import sanitize_filename
from ..core.paths import project_file_path
from .export import ExportRequest, Exporter, SourceDocument
from .tree import flatten_directory


def default_project_config(title: str) -> dict[str, Any]:
    return {
        "pdf": {
            "author": "Generated by Zettlr",
            "keywords": "",
            "papertype": "a4paper",
            "pagenumbering": "arabic",
            "tmargin": 3,
            "rmargin": 3,
            "bmargin": 3,
            "lmargin": 3,
            "margin_unit": "cm",
            "lineheight": "1.2",
            "mainfont": "Times New Roman",
            "fontsize": 12,
            "toc": True,
            "tocDepth": 2,
            "titlepage": True,
        },
        "title": title,
    }


class ProjectStore(TemplateStore):
    """Export settings for a directory that has been turned into a project.

    Constructing a store marks the directory as a project: the project file
    is written if it does not exist yet. The directory itself must exist.
    """

    label = "project"

    def __init__(
        self,
        directory: Path,
        *,
        warnings: list[dict[str, Any]] | None = None,
        permissive: bool = False,
    ) -> None:
        self.directory = Path(directory)
        if not self.directory.is_dir():
            raise NotADirectoryError(f"project directory does not exist: {self.directory}")
        super().__init__(project_file_path(self.directory), warnings=warnings, permissive=permissive)
        self.load()

    def template(self) -> dict[str, Any]:
        return default_project_config(self.directory.name)

    def properties(self) -> dict[str, Any]:
        return self._doc

    def build(
        self,
        exporter: Exporter,
        *,
        flatten: Callable[[Path], Iterable[Any]] = flatten_directory,
    ) -> ExportRequest:
        """Concatenate every file of the project and export it as one PDF.

        Whatever the exporter raises reaches the caller unchanged.
        """

        contents = [entry.read() for entry in flatten(self.directory) if entry.type == "file"]

        title = str(self._doc.get("title") or "")
        name = sanitize_filename(title) or sanitize_filename(self.directory.name) or "project"
        pdf = copy.deepcopy(self._doc["pdf"])
        request = ExportRequest(
            format="pdf",
            file=SourceDocument(path=self.directory / name, name=name, content="\n".join(contents)),
            dest=self.directory,
            strip_ids=True,
            strip_tags=True,
            strip_links="full",
            pdf=pdf,
            title=title,
            author=str(pdf.get("author") or ""),
            keywords=str(pdf.get("keywords") or ""),
        )
        exporter(request)
        return request

    def remove(self) -> None:
        """Delete the project file; the directory stops being a project."""

        self.path.unlink(missing_ok=True)

    @staticmethod
    def is_project(directory: Path) -> bool:
        return project_file_path(directory).exists()
