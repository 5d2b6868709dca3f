"""Byte-source abstraction over a binary image.

Everything the scanners know about a binary goes through `ByteSource`: section
and segment enumeration, byte reads at virtual addresses, and a name lookup for
symbols the host already resolved. Keeping the surface this narrow lets tests
drive the engine from synthetic in-memory images and lets real hosts (Mach-O on
disk today) plug in without touching the scanners.

Section bounds are half-open: `start` is the first mapped address, `end` is one
past the last.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from ..errors import AddressError, SourceError


@dataclass(frozen=True)
class Section:
    segment: str
    name: str
    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start

    def contains(self, address: int, size: int = 1) -> bool:
        return self.start <= address and address + size <= self.end


@dataclass(frozen=True)
class Segment:
    name: str
    sections: Tuple[Section, ...] = ()


@dataclass(frozen=True)
class SectionFilter:
    """Name predicate selecting which sections a scan walks.

    An empty `segments` tuple accepts any segment. A section then passes when
    its name contains one of `contains`, equals one of `names`, or its
    `(segment, name)` pair is listed in `pairs`. A filter with no name rules at
    all accepts every section of an allowed segment.
    """

    segments: Tuple[str, ...] = ()
    contains: Tuple[str, ...] = ()
    names: Tuple[str, ...] = ()
    pairs: Tuple[Tuple[str, str], ...] = ()

    def accepts(self, section: Section) -> bool:
        if self.segments and section.segment not in self.segments:
            return False
        if not (self.contains or self.names or self.pairs):
            return True
        if any(token in section.name for token in self.contains):
            return True
        if section.name in self.names:
            return True
        return (section.segment, section.name) in self.pairs

    def select(self, sections: Iterable[Section]) -> List[Section]:
        return [sec for sec in sections if self.accepts(sec)]


# Presets mirror the section choices the analysis passes make.
STRING_SECTIONS = SectionFilter(segments=("__TEXT", "__DATA"), contains=("string",), names=("__const",))
CSTRING_SECTIONS = SectionFilter(segments=("__TEXT", "__DATA"), contains=("string",))
STRING_AND_DATA_SECTIONS = SectionFilter(
    segments=("__TEXT", "__DATA"), contains=("string",), names=("__const", "__data")
)
ANY_STRING_SECTIONS = SectionFilter(contains=("string",), names=("__const",))
ALL_SECTIONS = SectionFilter()


class ByteSource:
    """Host collaborator interface; subclasses supply segments, reads and symbols."""

    def segments(self) -> List[Segment]:
        raise NotImplementedError

    def read_byte(self, address: int) -> int:
        raise NotImplementedError

    def symbol_name_at(self, address: int) -> Optional[str]:
        return None

    def read(self, address: int, size: int) -> bytes:
        return bytes(self.read_byte(address + i) for i in range(size))

    def sections(self) -> List[Section]:
        out: List[Section] = []
        for seg in self.segments():
            out.extend(seg.sections)
        return out

    def iter_sections(self, section_filter: SectionFilter = ALL_SECTIONS) -> Iterator[Section]:
        for sec in self.sections():
            if section_filter.accepts(sec):
                yield sec


@dataclass
class _Mapped:
    section: Section
    data: Union[bytes, memoryview]


class MemorySource(ByteSource):
    """ByteSource over byte strings held in memory.

    `regions` is a sequence of `(segment, section, start_address, data)`;
    `symbols` maps addresses to names. Reads outside the declared regions raise
    `AddressError` instead of returning filler bytes.
    """

    def __init__(
        self,
        regions: Sequence[Tuple[str, str, int, Union[bytes, memoryview]]],
        symbols: Optional[Mapping[int, str]] = None,
    ) -> None:
        self._mapped: List[_Mapped] = []
        seg_order: List[str] = []
        seg_sections: Dict[str, List[Section]] = {}
        for segment, name, start, data in regions:
            if start < 0:
                raise SourceError(f"negative start address for {segment},{name}")
            sec = Section(segment=segment, name=name, start=start, end=start + len(data))
            # memoryview slices avoid copying large section bodies.
            body = data if isinstance(data, (bytes, memoryview)) else bytes(data)
            self._mapped.append(_Mapped(section=sec, data=body))
            if segment not in seg_sections:
                seg_order.append(segment)
                seg_sections[segment] = []
            seg_sections[segment].append(sec)
        self._segments = [Segment(name=n, sections=tuple(seg_sections[n])) for n in seg_order]
        # Empty sections stay listed in segments but never answer a lookup.
        self._by_start = sorted((m for m in self._mapped if m.section.size), key=lambda m: m.section.start)
        self._starts = [m.section.start for m in self._by_start]
        self._symbols: Dict[int, str] = dict(symbols or {})

    def segments(self) -> List[Segment]:
        return list(self._segments)

    def _locate(self, address: int, size: int) -> _Mapped:
        idx = bisect_right(self._starts, address) - 1
        if idx >= 0:
            mapped = self._by_start[idx]
            if mapped.section.contains(address, size):
                return mapped
        raise AddressError(address, size)

    def read_byte(self, address: int) -> int:
        mapped = self._locate(address, 1)
        return mapped.data[address - mapped.section.start]

    def read(self, address: int, size: int) -> bytes:
        mapped = self._locate(address, size)
        off = address - mapped.section.start
        return bytes(mapped.data[off : off + size])

    def symbol_name_at(self, address: int) -> Optional[str]:
        return self._symbols.get(address)

