"""Human-readable byte sizes: parsing user limits and formatting diagnostics."""

from __future__ import annotations

import re

from proompt.exceptions import InvalidSizeFormatError

KIB = 1024
MIB = KIB**2
GIB = KIB**3

# Longest suffix first so "5MB" never falls through to the bare "B" branch.
SIZE_UNITS: tuple[tuple[str, int], ...] = (
    ("GB", GIB),
    ("MB", MIB),
    ("KB", KIB),
    ("B", 1),
)

_DIGITS = re.compile(r"[0-9]+")


def parse_size(text: str) -> int:
    """Parse a size such as ``"512"``, ``"1kb"`` or ``" 2MB "`` into bytes.

    Args:
        text (str): the size string; surrounding whitespace and unit case are ignored

    Raises:
        InvalidSizeFormatError: if the magnitude is not a non-negative integer

    Returns:
        int: the size in bytes, using 1024-based multiples
    """
    value = text.strip().upper()
    number, multiplier = value, 1
    for suffix, factor in SIZE_UNITS:
        if value.endswith(suffix):
            number, multiplier = value[: -len(suffix)], factor
            break
    if not _DIGITS.fullmatch(number):
        raise InvalidSizeFormatError(value=value)
    return int(number) * multiplier


def format_size(size: int) -> str:
    """Render a byte count for diagnostics, e.g. ``2048 -> "2.0KB"``.

    Args:
        size (int): the number of bytes

    Returns:
        str: the size with one decimal in the largest fitting unit, or plain bytes below 1 KiB
    """
    if size >= GIB:
        return f"{size / GIB:.1f}GB"
    if size >= MIB:
        return f"{size / MIB:.1f}MB"
    if size >= KIB:
        return f"{size / KIB:.1f}KB"
    return f"{size}B"
