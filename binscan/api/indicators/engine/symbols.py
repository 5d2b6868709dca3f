"""Symbol-name scanning at a fixed address stride.

Some indicators live in the symbol table rather than in string sections (C
file APIs, Objective-C selectors, Mach port functions). The host has already
resolved those names, so this scanner just asks for the name bound to each
stride-aligned address and classifies it with the same category rules the
string scanner uses. Addresses only increase within a section, so the same
address is never reported twice under one category.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .classify import Category
from .scanner import CapLookup, ResultSet, all_capped, default_cap, record
from .source import ALL_SECTIONS, ByteSource, SectionFilter

log = logging.getLogger(__name__)

DEFAULT_STRIDE = 4


class SymbolScanner:
    def __init__(self, stride: int = DEFAULT_STRIDE, cap_for: CapLookup = default_cap) -> None:
        if stride <= 0:
            raise ValueError("stride must be positive")
        self.stride = stride
        self.cap_for = cap_for

    def scan(
        self,
        source: ByteSource,
        categories: Sequence[Category],
        sections: SectionFilter = ALL_SECTIONS,
    ) -> ResultSet:
        results = ResultSet()
        for cat in categories:
            results.register(cat.name, self.cap_for(cat))
        if not categories or all_capped(results, categories):
            return results
        for section in source.iter_sections(sections):
            log.debug("symbol walk %s,%s stride %d", section.segment, section.name, self.stride)
            addr = section.start
            while addr < section.end:
                name = source.symbol_name_at(addr)
                if name:
                    record(results, addr, name, categories)
                    if all_capped(results, categories):
                        return results
                addr += self.stride
        return results


def scan_symbols(
    source: ByteSource,
    categories: Sequence[Category],
    stride: int = DEFAULT_STRIDE,
    sections: SectionFilter = ALL_SECTIONS,
) -> ResultSet:
    return SymbolScanner(stride=stride).scan(source, categories, sections)
