"""Mach-O file host for the scanners, built on macholib.

Sections come from LC_SEGMENT/LC_SEGMENT_64 load commands and symbols from the
LC_SYMTAB nlist table. Fat files expose one header per architecture; callers
pick a slice by index. Section bodies are memoryview slices over the file
image, and zero-fill sections read as zeros.
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from macholib.MachO import MachO
from macholib.SymbolTable import SymbolTable
from macholib.mach_o import (
    CPU_TYPE_NAMES,
    LC_SEGMENT,
    LC_SEGMENT_64,
    MH_FILETYPE_SHORTNAMES,
    N_STAB,
    S_GB_ZEROFILL,
    S_THREAD_LOCAL_ZEROFILL,
    S_ZEROFILL,
    SECTION_TYPE,
)

from ..errors import SourceError
from .source import MemorySource

log = logging.getLogger(__name__)

ZEROFILL_TYPES = (S_ZEROFILL, S_GB_ZEROFILL, S_THREAD_LOCAL_ZEROFILL)

Region = Tuple[str, str, int, Union[bytes, memoryview]]


def _name(value) -> str:
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="replace")
    return str(value).rstrip("\x00")


def _load(path: Path) -> MachO:
    try:
        return MachO(str(path))
    except FileNotFoundError as exc:
        raise SourceError(f"binary not found: {path}") from exc
    except (OSError, ValueError, struct.error) as exc:
        raise SourceError(f"unable to parse Mach-O {path}: {exc}") from exc


def _regions(header, image: memoryview) -> List[Region]:
    regions: List[Region] = []
    for load_cmd, cmd, data in header.commands:
        if load_cmd.cmd not in (LC_SEGMENT, LC_SEGMENT_64):
            continue
        seg_name = _name(cmd.segname)
        for sect in data:
            segment = _name(sect.segname) or seg_name
            if (sect.flags & SECTION_TYPE) in ZEROFILL_TYPES:
                body: Union[bytes, memoryview] = bytes(sect.size)
            else:
                start = header.offset + sect.offset
                body = image[start : start + sect.size]
                if len(body) != sect.size:
                    raise SourceError(
                        "section %s,%s runs past end of file" % (segment, _name(sect.sectname))
                    )
            regions.append((segment, _name(sect.sectname), sect.addr, body))
    return regions


def _symbols(macho: MachO, header) -> Dict[int, str]:
    if header.getSymbolTableCommand() is None:
        return {}
    table = SymbolTable(macho, header)
    names: Dict[int, str] = {}
    for nlist, raw in getattr(table, "nlists", []):
        if nlist.n_type & N_STAB or not nlist.n_value:
            continue
        # First name seen for an address wins.
        names.setdefault(nlist.n_value, _name(raw))
    return names


class MachOSource(MemorySource):
    def __init__(self, path: Union[str, Path], slice_index: int = 0) -> None:
        self.path = Path(path)
        self.macho = _load(self.path)
        headers = self.macho.headers
        if not 0 <= slice_index < len(headers):
            raise SourceError(f"slice {slice_index} out of range; {self.path} has {len(headers)} slice(s)")
        self.slice_index = slice_index
        self.header = headers[slice_index]
        try:
            image = memoryview(self.path.read_bytes())
        except OSError as exc:
            raise SourceError(f"unable to read {self.path}: {exc}") from exc
        regions = _regions(self.header, image)
        symbols = _symbols(self.macho, self.header)
        super().__init__(regions, symbols)
        log.info(
            "loaded %s slice %d: %d sections, %d symbols",
            self.path,
            slice_index,
            len(regions),
            len(symbols),
        )

    @property
    def slice_count(self) -> int:
        return len(self.macho.headers)

    def describe(self) -> Dict[str, object]:
        mh = self.header.header
        cputype: Optional[str] = CPU_TYPE_NAMES.get(mh.cputype)
        return {
            "path": str(self.path),
            "slice": self.slice_index,
            "slices": self.slice_count,
            "cputype": cputype or str(mh.cputype),
            "filetype": MH_FILETYPE_SHORTNAMES.get(mh.filetype, str(mh.filetype)),
            "sections": len(self.sections()),
            "symbols": len(self._symbols),
        }
