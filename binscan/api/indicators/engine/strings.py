"""Bounded printable-string extraction over binary sections.

Candidates are read one byte at a time and must stay inside ASCII printable
range; a NUL ends a candidate successfully, anything else non-printable either
rejects it or (with `accept_partial`) ends it early. `max_length` caps every
read so a missing terminator never drags the extractor through adjacent data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from .scan_utils import format_address, is_printable
from .source import ByteSource, Section

log = logging.getLogger(__name__)

# tab, LF, CR
WHITESPACE = frozenset((0x09, 0x0A, 0x0D))
DEFAULT_PROBE_WIDTH = 4


@dataclass(frozen=True)
class ExtractPolicy:
    """Per-caller extraction rules; passes differ only in these knobs."""

    min_length: int = 3
    max_length: int = 256
    tolerate_whitespace: bool = False
    accept_partial: bool = False


DEFAULT_POLICY = ExtractPolicy()


def extract(
    source: ByteSource,
    address: int,
    policy: ExtractPolicy = DEFAULT_POLICY,
    limit: Optional[int] = None,
) -> Optional[str]:
    """Return the printable string starting at `address`, or None.

    `limit` is an exclusive upper address (normally the section end); reaching
    it ends the candidate the same way a NUL does.
    """
    buf = bytearray()
    for i in range(policy.max_length):
        cur = address + i
        if limit is not None and cur >= limit:
            break
        byte = source.read_byte(cur)
        if byte == 0:
            break
        if is_printable(byte) or (policy.tolerate_whitespace and byte in WHITESPACE):
            buf.append(byte)
            continue
        if policy.accept_partial:
            break
        return None
    if len(buf) < max(policy.min_length, 1):
        return None
    return buf.decode("ascii")


def iter_strings(
    source: ByteSource,
    section: Section,
    policy: ExtractPolicy = DEFAULT_POLICY,
    probe_width: int = DEFAULT_PROBE_WIDTH,
) -> Iterator[Tuple[int, str]]:
    """Yield `(address, text)` for each string found walking `section`.

    The cursor skips past a recognized string (`len + 1`) and otherwise moves
    one byte. Walking stops `probe_width` bytes short of the section end.
    """
    addr = section.start
    end = section.end
    log.debug(
        "walk %s,%s [%s, %s)", section.segment, section.name, format_address(addr), format_address(end)
    )
    while addr < end and addr < end - probe_width:
        text = extract(source, addr, policy, limit=end)
        if text is None:
            addr += 1
            continue
        yield addr, text
        addr += len(text) + 1
