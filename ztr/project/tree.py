from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..core.storage import read_text


NOTE_EXTENSIONS: tuple[str, ...] = (".md", ".markdown", ".txt")


@dataclass(frozen=True)
class TreeEntry:
    type: str  # file|dir
    path: Path
    name: str

    def read(self) -> str:
        if self.type != "file":
            raise IsADirectoryError(str(self.path))
        return read_text(self.path)


def flatten_directory(directory: Path, *, extensions: tuple[str, ...] = NOTE_EXTENSIONS) -> list[TreeEntry]:
    """Flatten a directory tree into a list, depth-first.

    Children are sorted by name and every directory precedes its contents.
    Hidden entries (leading ".") are skipped, which keeps the project file
    itself out of builds.
    """

    out: list[TreeEntry] = []
    root = Path(directory)
    for child in sorted(root.iterdir(), key=lambda p: p.name):
        if child.name.startswith("."):
            continue
        if child.is_dir():
            out.append(TreeEntry(type="dir", path=child, name=child.name))
            out.extend(flatten_directory(child, extensions=extensions))
        elif child.is_file() and child.suffix.lower() in extensions:
            out.append(TreeEntry(type="file", path=child, name=child.name))
    return out
