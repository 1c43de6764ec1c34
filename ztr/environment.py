from __future__ import annotations

import os
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, MutableMapping


SUPPORTED_LANGUAGES: tuple[str, ...] = ("de_DE", "fr_FR", "en_US", "en_GB")
DEFAULT_LOCALE = "en_US"

# Common install locations for pandoc and TeX distributions that GUI launches
# often leave off PATH.
ADDITIONAL_PATHS: dict[str, list[str]] = {
    "win32": [],
    "linux": ["/usr/local/bin", "/usr/bin", "/usr/local/texlive/bin"],
    "darwin": ["/usr/local/bin", "/opt/homebrew/bin", "/Library/TeX/texbin"],
}


@dataclass(frozen=True)
class EnvironmentCapabilities:
    """What the host can do, computed once at startup and read-only afterwards."""

    pandoc_available: bool
    xelatex_available: bool
    template_dir: str
    locale: str = DEFAULT_LOCALE

    def get(self, name: str, default: Any = None) -> Any:
        # Legacy lookup names.
        lookup = {
            "pandoc": self.pandoc_available,
            "xelatex": self.xelatex_available,
            "templateDir": self.template_dir,
            "locale": self.locale,
        }
        return lookup.get(name, default)


def raw_system_locale(environ: MutableMapping[str, str] | None = None) -> str:
    env = os.environ if environ is None else environ
    for name in ("LC_ALL", "LC_MESSAGES", "LANG"):
        v = str(env.get(name) or "").strip()
        if v and v not in ("C", "POSIX"):
            return v
    return ""


def resolve_locale(raw: str | None, supported: tuple[str, ...] = SUPPORTED_LANGUAGES) -> str:
    """Map a raw locale ("de", "de-AT", "en_GB.UTF-8") onto a supported one.

    A bare main language picks the first supported variant of it; a language
    with a region must match exactly. Anything else falls back to en_US.
    """

    s = str(raw or "").strip()
    s = s.split(".", 1)[0].split("@", 1)[0].replace("-", "_")
    if not s:
        return DEFAULT_LOCALE
    main, _, sub = s.partition("_")
    main = main.lower()
    sub = sub.upper()
    for sup in supported:
        sup_main, _, sup_sub = sup.partition("_")
        if sup_main != main:
            continue
        if not sub or sup_sub == sub:
            return sup
    return DEFAULT_LOCALE


def augment_search_path(path_value: str, extra_dirs: list[str], *, sep: str = os.pathsep) -> str:
    """Append directories missing from a PATH-style string.

    A directory counts as present with or without a trailing slash.
    """

    parts = [p for p in str(path_value or "").split(sep) if p]
    for d in extra_dirs:
        d = str(d or "")
        if not d:
            continue
        alt = d[:-1] if d.endswith("/") else d + "/"
        if d not in parts and alt not in parts:
            parts.append(d)
    return sep.join(parts)


def pandoc_template_dir(exe_path: Path, *, platform: str = sys.platform) -> str:
    app_dir = Path(exe_path).parent
    if platform == "darwin":
        # The executable lives in Contents/MacOS; resources sit next to it.
        res = app_dir.parent / "Resources"
    else:
        res = app_dir / "resources"
    return str(res / "pandoc")


def probe_environment(
    config: Any,
    *,
    locale: str = DEFAULT_LOCALE,
    exe_path: Path | None = None,
    platform: str = sys.platform,
    environ: MutableMapping[str, str] | None = None,
    which: Callable[..., str | None] = shutil.which,
) -> EnvironmentCapabilities:
    """Extend PATH and check whether pandoc and xelatex can be run.

    `config` is anything with a `get(key)` method (normally the ConfigStore);
    the directories of its configured "pandoc" and "xelatex" binaries are put
    on PATH before the lookup. `environ` defaults to os.environ and is updated
    in place.
    """

    env = os.environ if environ is None else environ
    sep = ";" if platform == "win32" else ":"

    extra = list(ADDITIONAL_PATHS.get(platform, []))
    for key in ("xelatex", "pandoc"):
        bin_dir = os.path.dirname(str(config.get(key) or ""))
        if bin_dir:
            extra.append(bin_dir)
    env["PATH"] = augment_search_path(env.get("PATH", ""), extra, sep=sep)

    search = env["PATH"]
    exe = Path(exe_path) if exe_path is not None else Path(sys.executable)
    return EnvironmentCapabilities(
        pandoc_available=which("pandoc", path=search) is not None,
        xelatex_available=which("xelatex", path=search) is not None,
        template_dir=pandoc_template_dir(exe, platform=platform),
        locale=locale,
    )
