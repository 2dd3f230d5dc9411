"""Human-readable size parsing.

Sizes are written as a number followed by a single lowercase unit letter:
``512k``, ``5m``, ``1.5g``. Units are binary (1k = 1024 bytes).
"""

import re

SIZE_PATTERN = re.compile(r"([0-9]+(?:\.[0-9]+)?)([kmg])")

UNIT_EXPONENTS = {"k": 1, "m": 2, "g": 3}


class InvalidSizeFormat(ValueError):
    """Raised when a size string cannot be parsed."""

    pass


def parse_size(text: str) -> int:
    """Convert a size string into a byte count.

    Args:
        text: Size such as ``"512k"``, ``"5m"`` or ``"1.5g"``.

    Returns:
        The number of bytes, rounded to the nearest integer.

    Raises:
        InvalidSizeFormat: If the suffix is not one of k/m/g or the
            numeric prefix is malformed.
    """
    match = SIZE_PATTERN.fullmatch(text) if isinstance(text, str) else None
    if match is None:
        raise InvalidSizeFormat(f"Invalid size {text!r}")

    number, unit = match.groups()
    return round(float(number) * 1024 ** UNIT_EXPONENTS[unit])
