"""Heuristic fixed-layout record recovery over raw section bytes.

There is no type information here: each stride-aligned window is decoded as if
it were the declared record and kept only when the decoded field values pass
the layout's plausibility predicate. A window that passes is a *candidate*,
not a proven record. Overlapping candidates are not deduplicated, and without
symbols there is no ground truth, so the false-positive rate is unbounded.

Template (Mach IPC MIG subsystem descriptor, 64-bit):
  0x00 server_routine  u64  (recorded, not validated)
  0x08 start_id        u32  0 < start_id < 1000000
  0x0c end_id          u32  end_id > start_id, end_id - start_id < 1000
  0x10 maxsize         u32  (recorded, not validated)
  0x18 reserved        u64  must be 0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from ..errors import LayoutError
from .scan_utils import format_address
from .source import ByteSource, Section, SectionFilter

log = logging.getLogger(__name__)

Fields = Dict[str, int]

DEFAULT_STRIDE = 8
MIG_MAX_START_ID = 1000000
MIG_MAX_MESSAGES = 1000


@dataclass(frozen=True)
class Field:
    name: str
    offset: int
    width: int
    signed: bool = False

    def decode(self, raw: bytes, byteorder: str) -> int:
        return int.from_bytes(raw, byteorder, signed=self.signed)


@dataclass(frozen=True)
class Layout:
    name: str
    fields: Tuple[Field, ...]
    validate: Callable[[Fields], bool]
    describe: Optional[Callable[[Fields], str]] = None
    derive: Optional[Callable[[Fields], Fields]] = None
    byteorder: str = "little"

    def __post_init__(self) -> None:
        if not self.fields:
            raise LayoutError(f"layout {self.name} declares no fields")
        seen = set()
        for fld in self.fields:
            if fld.width not in (1, 2, 4, 8):
                raise LayoutError(f"{self.name}.{fld.name}: unsupported width {fld.width}")
            if fld.offset < 0:
                raise LayoutError(f"{self.name}.{fld.name}: negative offset")
            if fld.name in seen:
                raise LayoutError(f"{self.name}: duplicate field {fld.name}")
            seen.add(fld.name)
        if self.byteorder not in ("little", "big"):
            raise LayoutError(f"{self.name}: byteorder must be little or big")

    @property
    def size(self) -> int:
        return max(fld.offset + fld.width for fld in self.fields)


@dataclass
class Candidate:
    address: int
    layout: str
    section: str
    fields: Fields = field(default_factory=dict)
    description: str = ""

    def to_json(self) -> Dict[str, object]:
        return {
            "address": format_address(self.address),
            "layout": self.layout,
            "section": self.section,
            "fields": dict(self.fields),
            "description": self.description,
        }


def decode(source: ByteSource, address: int, layout: Layout) -> Fields:
    raw = source.read(address, layout.size)
    values: Fields = {}
    for fld in layout.fields:
        values[fld.name] = fld.decode(raw[fld.offset : fld.offset + fld.width], layout.byteorder)
    return values


def probe(source: ByteSource, address: int, layout: Layout, section: str = "") -> Optional[Candidate]:
    """Decode one window; a Candidate when the plausibility checks pass, else None."""
    values = decode(source, address, layout)
    if not layout.validate(values):
        return None
    if layout.derive is not None:
        values.update(layout.derive(values))
    desc = layout.describe(values) if layout.describe is not None else ""
    return Candidate(address=address, layout=layout.name, section=section, fields=values, description=desc)


class StructureRecoveryScanner:
    def __init__(self, stride: int = DEFAULT_STRIDE) -> None:
        if stride <= 0:
            raise ValueError("stride must be positive")
        self.stride = stride

    def recover(self, source: ByteSource, section: Section, layout: Layout) -> List[Candidate]:
        found: List[Candidate] = []
        label = "%s,%s" % (section.segment, section.name)
        addr = section.start
        probes = 0
        # Fixed stride whether or not a window matched; record boundaries are unknown.
        while addr + layout.size <= section.end:
            probes += 1
            cand = probe(source, addr, layout, section=label)
            if cand is not None:
                found.append(cand)
            addr += self.stride
        log.debug("%s in %s: %d probes, %d candidates", layout.name, label, probes, len(found))
        return found

    def recover_all(self, source: ByteSource, sections: SectionFilter, layout: Layout) -> List[Candidate]:
        found: List[Candidate] = []
        for section in source.iter_sections(sections):
            found.extend(self.recover(source, section, layout))
        return found


def recover(source: ByteSource, section: Section, layout: Layout, stride: int = DEFAULT_STRIDE) -> List[Candidate]:
    return StructureRecoveryScanner(stride=stride).recover(source, section, layout)


def _mig_valid(v: Fields) -> bool:
    if v["reserved"] != 0:
        return False
    start, end = v["start_id"], v["end_id"]
    if not 0 < start < MIG_MAX_START_ID:
        return False
    return end > start and end - start < MIG_MAX_MESSAGES


def _mig_derive(v: Fields) -> Fields:
    return {"msg_count": v["end_id"] - v["start_id"]}


def _mig_describe(v: Fields) -> str:
    return "Subsystem %u: %u messages (IDs %u-%u), maxsize: %u" % (
        v["start_id"],
        v["msg_count"],
        v["start_id"],
        v["end_id"] - 1,
        v["maxsize"],
    )


MIG_SUBSYSTEM = Layout(
    name="mig_subsystem",
    fields=(
        Field("server_routine", 0x00, 8),
        Field("start_id", 0x08, 4),
        Field("end_id", 0x0C, 4),
        Field("maxsize", 0x10, 4),
        Field("reserved", 0x18, 8),
    ),
    validate=_mig_valid,
    describe=_mig_describe,
    derive=_mig_derive,
)

MIG_SECTIONS = SectionFilter(
    pairs=(("__DATA", "__const"), ("__DATA_CONST", "__const"), ("__CONST", "__constdata")),
)
