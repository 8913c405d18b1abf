import math
from typing import Any


def to_int(value: Any) -> int:
    """Coerce a form or JSON value into an integer.

    Accepts ints, floats and numeric strings ("3", " 4 ", "1200.50").
    Floats are truncated. Anything else raises ``ValueError``.
    """
    if isinstance(value, bool):
        raise ValueError(f"Expected a number, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Expected a number, got an empty string")
        try:
            return int(cleaned)
        except ValueError:
            value = float(cleaned)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Expected a finite number, got {value!r}")
        return int(value)
    raise ValueError(f"Expected a number, got {value!r}")


def to_int_or_none(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return to_int(value)
    except ValueError:
        return None


def to_text_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
