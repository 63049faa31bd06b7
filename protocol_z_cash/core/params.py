from __future__ import annotations

from typing import Optional


def parse_bool(value: str) -> bool:
    """Strict boolean parsing: only the literals "true" and "false" are accepted."""
    if value == "true":
        return True
    if value == "false":
        return False
    raise ValueError(f"provided string was not `true` or `false`: {value!r}")


def empty_string_as_true(value: Optional[str]) -> bool:
    """
    Decode an optional boolean query parameter where a missing or empty value
    means True, so `?partial` and `?partial=` both switch the flag on.
    """
    if value is None or value == "":
        return True
    return parse_bool(value)
