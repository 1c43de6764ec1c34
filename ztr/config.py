from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

from .core.document import TemplateStore
from .core.merge import clone_document, is_json_value, merge_onto_template, value_shape
from .core.paths import GlobalPaths, default_home_dir
from .core.storage import ensure_dir
from .environment import DEFAULT_LOCALE, SUPPORTED_LANGUAGES


ATTACHMENT_EXTENSIONS = [
    ".pdf",
    ".odt",
    ".odp",
    ".ods",
    ".doc",
    ".docx",
    ".xls",
    ".xlsx",
    ".ppt",
    ".pptx",
    ".do",  # Stata
    ".r",
    ".py",
    ".sav",  # SPSS
    ".zsav",
    ".csv",
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".tiff",
]


def default_config(locale: str = DEFAULT_LOCALE) -> dict[str, Any]:
    return {
        "openPaths": [],
        "attachmentExtensions": list(ATTACHMENT_EXTENSIONS),
        "darkTheme": False,
        "snippets": True,
        # Mute non-active lines in distraction free mode.
        "muteLines": True,
        "combinerState": "collapsed",  # collapsed|expanded
        "pandoc": "pandoc",
        "xelatex": "xelatex",
        "export": {
            "dir": "temp",  # temp|cwd
            "stripIDs": True,
            "stripTags": False,
            "stripLinks": "full",  # full|unlink|no
        },
        # Projects start from a copy of this block.
        "pdf": {
            "author": "Generated by Zettlr",
            "keywords": "",
            "papertype": "a4paper",
            "pagenumbering": "gobble",
            "tmargin": 3,
            "rmargin": 3,
            "bmargin": 3,
            "lmargin": 3,
            "margin_unit": "cm",
            "lineheight": "1.5",
            "mainfont": "Times New Roman",
            "fontsize": 12,  # pt
        },
        "spellcheck": {lang: lang == locale for lang in ("en_US", "en_GB", "de_DE", "fr_FR")},
        "app_lang": locale,
        "debug": False,
    }


class ConfigStore(TemplateStore):
    """The application's config.json in the user data directory.

    Keys are a closed set: anything not in `default_config()` is dropped on
    load and refused by `set()`.
    """

    label = "config"

    def __init__(
        self,
        home_dir: Path | None = None,
        *,
        locale: str = DEFAULT_LOCALE,
        warnings: list[dict[str, Any]] | None = None,
        permissive: bool = False,
    ) -> None:
        self.paths = GlobalPaths(home_dir=Path(home_dir) if home_dir is not None else default_home_dir())
        self.locale = locale
        super().__init__(self.paths.config_path, warnings=warnings, permissive=permissive)
        self.load()
        self.check_paths()

    def template(self) -> dict[str, Any]:
        return default_config(self.locale)

    def load(self) -> str:
        ensure_dir(self.paths.home_dir)
        return super().load()

    def set(self, key: str, value: Any) -> bool:
        """Set a top-level option.

        Returns False, leaving the document untouched, for unknown keys, None,
        values JSON cannot hold and values whose shape (object/array/scalar)
        differs from the default. "openPaths" goes through the same existence
        check, de-duplication and ordering as `add_path`.
        """

        if key not in self._doc or value is None or not is_json_value(value):
            return False
        cur = self._doc[key]
        if isinstance(cur, dict):
            if not isinstance(value, dict):
                return False
            # Merge so every nested default survives; all-or-nothing.
            candidate = clone_document(cur)
            if merge_onto_template(candidate, value, permissive=self.permissive, prefix=key):
                return False
            self._doc[key] = candidate
            return True
        if not self.permissive and value_shape(cur) != value_shape(value):
            return False
        if key == "openPaths" and not isinstance(value, list):
            return False
        self._doc[key] = copy.deepcopy(value)
        if key == "openPaths":
            self.check_paths()
        return True

    @staticmethod
    def supported_languages() -> list[str]:
        return list(SUPPORTED_LANGUAGES)

    def is_attachment(self, path: str | Path) -> bool:
        ext = os.path.splitext(str(path))[1].lower()
        if not ext:
            return False
        exts = self._doc.get("attachmentExtensions") or []
        return ext in {str(e).lower() for e in exts}

    # Startup paths

    def add_path(self, p: str | Path) -> bool:
        """Remember a file or directory to open at startup.

        Returns False for duplicates and for paths that do not exist.
        """

        s = str(p)
        paths = self._open_paths()
        if s in paths or not (os.path.isfile(s) or os.path.isdir(s)):
            return False
        paths.append(s)
        self._sort_paths()
        return True

    def remove_path(self, p: str | Path) -> bool:
        s = str(p)
        paths = self._open_paths()
        if s not in paths:
            return False
        paths.remove(s)
        return True

    def check_paths(self) -> None:
        """Forget startup paths that no longer exist, then de-duplicate and sort."""

        kept: list[str] = []
        for p in self._open_paths():
            s = str(p)
            if os.path.lexists(s) and s not in kept:
                kept.append(s)
        self._doc["openPaths"] = kept
        self._sort_paths()

    def _open_paths(self) -> list[str]:
        # Permissive loads can leave a non-list here.
        paths = self._doc.get("openPaths")
        if not isinstance(paths, list):
            paths = []
            self._doc["openPaths"] = paths
        return paths

    def _sort_paths(self) -> None:
        files: list[str] = []
        dirs: list[str] = []
        for p in self._doc["openPaths"]:
            (dirs if os.path.isdir(p) else files).append(p)
        self._doc["openPaths"] = sorted(files) + sorted(dirs)
