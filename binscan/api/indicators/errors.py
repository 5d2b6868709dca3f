"""Error contract for the indicator engine.

The scanners themselves never raise for ordinary misses (short strings,
non-printable bytes, empty sections, capped categories); those are normal
outcomes. Exceptions are reserved for caller mistakes and host failures so the
CLI can report them without a stack trace.
"""

from __future__ import annotations


class IndicatorError(Exception):
    """Base indicator engine error."""


class SourceError(IndicatorError):
    """Raised when a binary image cannot be opened, parsed, or sliced."""


class AddressError(SourceError):
    """Raised when a read falls outside every section the source declares."""

    def __init__(self, address: int, size: int = 1) -> None:
        self.address = address
        self.size = size
        super().__init__("read of %d byte(s) at 0x%x is outside declared sections" % (size, address))


class ConfigError(IndicatorError):
    """Raised when a scan configuration file or override is malformed."""


class UnknownPassError(IndicatorError, KeyError):
    """Raised when a pass or category name is not registered."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep CLI messages readable.
        return str(self.args[0]) if self.args else ""


class LayoutError(IndicatorError):
    """Raised when a record layout declares impossible fields."""
