from __future__ import annotations

import re


_ILLEGAL = re.compile(r'[/?<>\\:*|"]')
_CONTROL = re.compile(r"[\x00-\x1f\x80-\x9f]")
_RESERVED = re.compile(r"^\.+$")
_WINDOWS_RESERVED = re.compile(r"^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$", re.IGNORECASE)
_WINDOWS_TRAILING = re.compile(r"[. ]+$")

_MAX_BYTES = 255


def _truncate_utf8(s: str, limit: int) -> str:
    raw = s.encode("utf-8")
    if len(raw) <= limit:
        return s
    # Drop a partial trailing code point instead of emitting invalid UTF-8.
    return raw[:limit].decode("utf-8", errors="ignore")


def _sanitize(name: str, replacement: str) -> str:
    s = _ILLEGAL.sub(replacement, name)
    s = _CONTROL.sub(replacement, s)
    s = _RESERVED.sub(replacement, s)
    s = _WINDOWS_RESERVED.sub(replacement, s)
    s = _WINDOWS_TRAILING.sub(replacement, s)
    return _truncate_utf8(s, _MAX_BYTES)


def sanitize_filename(name: str, replacement: str = "") -> str:
    """Make a free-text title usable as a filename on Windows, macOS and Linux.

    Removes path separators, characters Windows rejects, control characters,
    the names "." and "..", Windows device names and trailing dots/spaces, then
    truncates to 255 bytes. The replacement is itself sanitized first.
    """

    out = _sanitize(str(name or ""), replacement)
    if replacement == "":
        return out
    return _sanitize(out, "")
