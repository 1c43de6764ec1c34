from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from .errors import ParseError
from .merge import clone_document, merge_onto_template
from .storage import emit_warning, quarantine_corrupt_file, read_json_document, write_json_atomic


LOAD_LOADED = "loaded"
LOAD_CREATED = "created"
LOAD_RECOVERED = "recovered"


class TemplateStore:
    """A JSON document bound to one file whose shape is fixed by a template.

    Subclasses provide `template()`. The live document always carries every
    template key; anything read from disk is merged onto a fresh copy of the
    template, never used as-is.
    """

    label = "document"

    def __init__(
        self,
        path: Path,
        *,
        warnings: list[dict[str, Any]] | None = None,
        permissive: bool = False,
    ) -> None:
        self.path = Path(path)
        self.warnings = warnings
        self.permissive = permissive
        self._doc: dict[str, Any] = {}

    def template(self) -> dict[str, Any]:
        raise NotImplementedError

    @property
    def document(self) -> dict[str, Any]:
        return self._doc

    def load(self) -> str:
        """(Re-)read the file onto a fresh template.

        Returns "loaded", "created" (file was missing; template written) or
        "recovered" (file was corrupt or unreadable; template written).
        """

        self._doc = clone_document(self.template())
        try:
            raw = read_json_document(self.path)
        except FileNotFoundError:
            write_json_atomic(self.path, self._doc)
            return LOAD_CREATED
        except ParseError as e:
            self._recover(kind="parse_error", error=str(e), quarantine=True)
            return LOAD_RECOVERED
        except OSError as e:
            self._recover(kind="unreadable", error=f"{type(e).__name__}: {e}", quarantine=False)
            return LOAD_RECOVERED

        if not isinstance(raw, dict):
            self._recover(kind="parse_error", error=f"expected a JSON object, got {type(raw).__name__}", quarantine=True)
            return LOAD_RECOVERED

        for key_path in merge_onto_template(self._doc, raw, permissive=self.permissive):
            emit_warning(
                {
                    "path": str(self.path),
                    "label": self.label,
                    "kind": "type_mismatch",
                    "error": f"value at {key_path!r} does not match the default's type; kept the default",
                    "key": key_path,
                    "used_default": True,
                },
                warnings=self.warnings,
                message=f"{self.label} value rejected ({key_path});",
            )
        return LOAD_LOADED

    def _recover(self, *, kind: str, error: str, quarantine: bool) -> None:
        quarantined_to, qerr = quarantine_corrupt_file(self.path) if quarantine else ("", "")
        emit_warning(
            {
                "path": str(self.path),
                "label": self.label,
                "kind": kind,
                "error": error,
                "quarantined_to": quarantined_to,
                "quarantine_error": qerr,
                "used_default": True,
            },
            warnings=self.warnings,
            message=f"{self.label} could not be read ({kind}); using defaults.",
        )
        write_json_atomic(self.path, self._doc)

    def save(self) -> None:
        write_json_atomic(self.path, self._doc)

    def update(self, partial: Mapping[str, Any]) -> list[str]:
        """Merge `partial` into the live document; returns rejected key paths."""

        return merge_onto_template(self._doc, partial, permissive=self.permissive)

    def get(self, key: str | None = None, default: Any = None) -> Any:
        """Look up a plain or dotted key ("export.stripTags").

        Returns the whole document when no key is given and `default` when
        any segment of the path is missing.
        """

        if not key:
            return self._doc
        cur: Any = self._doc
        for part in str(key).split("."):
            if not isinstance(cur, dict) or part not in cur:
                return default
            cur = cur[part]
        return cur
