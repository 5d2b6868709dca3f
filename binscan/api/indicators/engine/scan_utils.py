"""Address helpers shared by the scanners and the report layer.

Addresses are kept as plain unsigned ints inside the engine and rendered as
canonical u64 hex only at the edges (reports, CLI, logs).
"""

from __future__ import annotations

from typing import Optional, Union

MASK64 = (1 << 64) - 1


def parse_address(value: Union[int, str, None]) -> Optional[int]:
    """Parse an int or hex/decimal string into a canonical u64 int."""
    if value is None:
        return None
    if isinstance(value, int):
        val = value
    else:
        text = str(value).strip().lower()
        if not text:
            return None
        if text.startswith("0x-"):
            text = "-0x" + text[3:]
        val = int(text, 0)
    if val < 0:
        val = (1 << 64) + val
    return val & MASK64


def format_address(value: Union[int, str, None]) -> Optional[str]:
    """Format a value as canonical hex address (u64)."""
    val = parse_address(value)
    if val is None:
        return None
    return "0x%x" % val


def is_printable(byte: int) -> bool:
    return 0x20 <= byte <= 0x7E
