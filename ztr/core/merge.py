from __future__ import annotations

import copy
from typing import Any, Mapping


def clone_document(doc: Mapping[str, Any]) -> dict[str, Any]:
    return copy.deepcopy(dict(doc))


def value_shape(value: Any) -> str:
    """Coarse shape of a document value: "object", "array" or "scalar"."""

    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return "scalar"


def is_json_value(value: Any) -> bool:
    """True if `value` is made only of types json.dumps writes as-is."""

    if value is None or isinstance(value, (str, int, float, bool)):
        return True
    if isinstance(value, (list, tuple)):
        return all(is_json_value(v) for v in value)
    if isinstance(value, Mapping):
        return all(isinstance(k, str) and is_json_value(v) for k, v in value.items())
    return False


def _join(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


def merge_onto_template(
    old: dict[str, Any],
    new: Any,
    *,
    permissive: bool = False,
    mismatches: list[str] | None = None,
    prefix: str = "",
) -> list[str]:
    """Overlay `new` onto `old` in place, keeping the key set of `old`.

    - Keys only present in `new` are ignored.
    - Missing or None values in `new` leave the existing value alone.
    - Nested objects are merged recursively; arrays and scalars are replaced wholesale.
    - A value whose shape differs from the template's (object/array/scalar) is
      rejected and its dotted key path is reported. With permissive=True a
      non-object arriving at an object key is ignored and everything else
      overwrites.
    - Values JSON cannot represent (paths, sets, objects) are always rejected.

    Returns the list of rejected key paths (the `mismatches` list if given).
    """

    out = mismatches if mismatches is not None else []
    if not isinstance(new, Mapping):
        if new is not None:
            out.append(prefix or "<root>")
        return out

    for key in list(old.keys()):
        if key not in new or new[key] is None:
            continue
        cur = old[key]
        incoming = new[key]
        path = _join(prefix, str(key))
        if isinstance(cur, dict):
            if isinstance(incoming, Mapping):
                merge_onto_template(cur, incoming, permissive=permissive, mismatches=out, prefix=path)
            elif not permissive:
                out.append(path)
            continue
        if not is_json_value(incoming) or (not permissive and value_shape(cur) != value_shape(incoming)):
            out.append(path)
            continue
        old[key] = copy.deepcopy(incoming) if isinstance(incoming, (list, dict)) else incoming
    return out
