from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


PROJECT_FILE = ".ztr-project"


def default_home_dir() -> Path:
    return Path(os.environ.get("ZTR_HOME") or Path.home() / ".ztr")


def project_file_path(directory: Path) -> Path:
    return Path(directory) / PROJECT_FILE


@dataclass(frozen=True)
class GlobalPaths:
    home_dir: Path

    @property
    def config_path(self) -> Path:
        return self.home_dir / "config.json"
