from __future__ import annotations

"""
Size Formatting Helpers.
"""

from typing import List

_UNITS: List[str] = ["B", "KiB", "MiB", "GiB", "TiB", "PiB"]


def format_bytes(num: int) -> str:
    """
    Render a byte count using binary units.

    Whole bytes are printed without decimals, larger units with one.

    Args:
        num: Size in bytes.

    Returns:
        str: Human readable size, e.g. '512 B' or '1.5 KiB'.
    """
    if num < 0:
        return str(num)
    x = float(num)
    for unit in _UNITS:
        if x < 1024.0 or unit == _UNITS[-1]:
            return f"{int(x)} {unit}" if unit == "B" else f"{x:.1f} {unit}"
        x /= 1024.0
    return f"{x:.1f} {_UNITS[-1]}"
