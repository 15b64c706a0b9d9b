"""
Scalar conversions shared by plugins, transforms, and processors.

Placeholder arguments arrive as text and resolved values leave as text when
interpolated, so both directions need a single, predictable rule:

- `number_parse` turns text into an int when its value is integral ("42.0"
  included), else a float, and rejects anything non-finite.
- `value_stringify` renders a resolved value the way it reads inside a
  document: integral floats drop their ".0", booleans are lowercase, null is
  "null", and objects/arrays use compact JSON.
"""

import json
import math
from typing import Any


def number_parse(text: str, blank_is_zero: bool = False) -> int | float:
    """Parse numeric text.

    Args:
        text: Text to parse; surrounding whitespace is ignored
        blank_is_zero: Treat empty or whitespace-only text as 0

    Returns:
        int for integral input, float otherwise

    Raises:
        ValueError: If the text is not a finite number
    """
    stripped: str = text.strip()
    if not stripped:
        if blank_is_zero:
            return 0
        raise ValueError(f"'{text}' is not a number")
    if "_" in stripped:
        raise ValueError(f"'{text}' is not a number")
    try:
        return int(stripped)
    except ValueError:
        pass
    try:
        value: float = float(stripped)
    except ValueError:
        raise ValueError(f"'{text}' is not a number") from None
    if not math.isfinite(value):
        raise ValueError(f"'{text}' is not a finite number")
    if value.is_integer():
        return int(value)
    return value


def number_format(value: int | float) -> str:
    """Render a number without a trailing ".0" for integral floats."""
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


def value_stringify(value: Any) -> str:
    """Return the string form of a resolved value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return number_format(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)
