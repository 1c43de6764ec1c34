from __future__ import annotations

import json
import os
import sys
import time
from pathlib import Path
from typing import Any

from .errors import ParseError, PersistenceError


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_text(path: Path) -> str:
    return Path(path).read_text(encoding="utf-8")


def read_json_document(path: Path) -> Any:
    """Read and parse a JSON file.

    FileNotFoundError and other OSErrors propagate unchanged; malformed content
    (including invalid UTF-8) raises ParseError so callers can tell a corrupt
    file from a missing one.
    """

    try:
        return json.loads(read_text(path))
    except ValueError as e:
        raise ParseError(f"invalid JSON in {path}: {e}", path=Path(path), cause=e) from e


def dump_json(obj: Any) -> str:
    return json.dumps(obj, indent=2, sort_keys=True) + "\n"


def atomic_write_text(path: Path, text: str) -> None:
    """Replace `path` with `text` so readers only ever see the old or the new file."""

    path = Path(path)
    tmp = path.with_name(path.name + f".tmp.{os.getpid()}")
    try:
        ensure_dir(path.parent)
        with tmp.open("w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except OSError as e:
        try:
            tmp.unlink()
        except OSError:
            pass
        raise PersistenceError(f"failed to write {path}: {e}", path=path, cause=e) from e


def write_json_atomic(path: Path, obj: Any) -> None:
    try:
        text = dump_json(obj)
    except (TypeError, ValueError) as e:
        raise PersistenceError(f"cannot serialize {path}: {e}", path=Path(path), cause=e) from e
    atomic_write_text(path, text)


def now_rfc3339() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


def filename_safe_ts(ts: str) -> str:
    """Convert an RFC3339 timestamp into a filename-safe stamp.

    Example: 2026-02-22T12:34:56Z -> 20260222T123456Z
    """

    return str(ts or "").replace("-", "").replace(":", "")


def env_tristate_bool(name: str) -> bool | None:
    """Parse an environment variable into a tri-state boolean.

    - unset/empty -> None
    - truthy -> True
    - falsy -> False
    - unknown non-empty -> True (prefer being loud over silently hiding warnings)
    """

    raw = os.environ.get(name)
    if raw is None:
        return None
    s = str(raw).strip().lower()
    if not s:
        return None
    if s in ("1", "true", "yes", "y", "on"):
        return True
    if s in ("0", "false", "no", "n", "off"):
        return False
    return True


def quarantine_corrupt_file(path: Path) -> tuple[str, str]:
    """Best-effort quarantine: rename `path` to `path.corrupt.<ts>[.<n>]`.

    Returns (quarantined_to, error). If quarantine fails, quarantined_to is "".
    """

    p = Path(path)
    stamp = filename_safe_ts(now_rfc3339())
    base = Path(str(p) + f".corrupt.{stamp}")
    dest = base
    for i in range(1, 100):
        if not dest.exists():
            break
        dest = Path(str(base) + f".{i}")
    try:
        p.rename(dest)
        return str(dest), ""
    except OSError as e:
        return "", f"{type(e).__name__}: {e}"


def emit_warning(item: dict[str, Any], *, warnings: list[dict[str, Any]] | None, message: str) -> None:
    """Record a state warning; print it to stderr when nobody collects warnings.

    ZTR_STATE_WARNINGS_STDERR forces printing on or off.
    """

    if warnings is not None:
        warnings.append(item)
    force = env_tristate_bool("ZTR_STATE_WARNINGS_STDERR")
    should_print = force if force is not None else (warnings is None)
    if should_print:
        print(f"[ztr] {message} label={item.get('label')} path={item.get('path')}", file=sys.stderr)
