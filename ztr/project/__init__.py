"""Per-directory project settings and whole-project builds."""

from .export import ExportRequest, Exporter, SourceDocument
from .store import ProjectStore, default_project_config
from .tree import TreeEntry, flatten_directory

__all__ = [
    "ExportRequest",
    "Exporter",
    "ProjectStore",
    "SourceDocument",
    "TreeEntry",
    "default_project_config",
    "flatten_directory",
]
