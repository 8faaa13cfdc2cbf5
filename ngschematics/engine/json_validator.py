"""Type-narrowing accessors over untyped parsed JSON.

Third-party manifests (``collection.json``, ``schema.json``, lint configs...)
are trusted for nothing: every value read from them goes through one of these
decoders, which return the value when it has the expected JSON type and
``None`` otherwise.  They never raise on a shape mismatch.

``bool`` is a subclass of ``int`` in Python, so numbers explicitly exclude
booleans to keep JSON semantics.
"""

from __future__ import annotations

from typing import Any, Literal


def as_bool(value: object) -> bool | None:
    if isinstance(value, bool):
        return value
    return None


def as_number(value: object) -> int | float | None:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return None


def as_string(value: object) -> str | None:
    if isinstance(value, str):
        return value
    return None


def as_list(value: object, item_type: Literal["string"] | None = None) -> list[Any] | None:
    """Return ``value`` if it is a JSON array.

    With ``item_type="string"``, every item must be a string, otherwise the
    whole array is rejected.
    """
    if not isinstance(value, list):
        return None
    if item_type == "string" and not all(isinstance(item, str) for item in value):
        return None
    return value


def as_string_list(value: object) -> list[str] | None:
    return as_list(value, "string")


def as_object(value: object) -> dict[str, Any] | None:
    if isinstance(value, dict):
        return value
    return None


def as_scalar_strings(value: object) -> list[str] | None:
    """Array of JSON scalars rendered as CLI strings (``true``, ``2``, ``OnPush``).

    Schematic enums are usually strings, but some declare numbers or booleans.
    Non-scalar items are dropped.
    """
    items = as_list(value)
    if items is None:
        return None
    result: list[str] = []
    for item in items:
        if isinstance(item, bool):
            result.append("true" if item else "false")
        elif isinstance(item, (str, int, float)):
            result.append(str(item))
    return result


def get_path(value: object, *keys: str) -> object:
    """Walk nested JSON objects, returning ``None`` as soon as a level is not an object."""
    current = value
    for key in keys:
        obj = as_object(current)
        if obj is None:
            return None
        current = obj.get(key)
    return current
