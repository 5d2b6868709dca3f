"""Pass definitions shared by the registry, runner, report and CLI.

A pass is plain data: ordered phases, each holding string categories, symbol
categories and record layouts, plus the recommendation printed when the phase
finds something. Keeping passes declarative means a new indicator family is a
new table, not a new scan loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..engine.classify import Category, TypeRule
from ..engine.source import ALL_SECTIONS, STRING_SECTIONS, SectionFilter
from ..engine.strings import ExtractPolicy
from ..engine.structs import Layout


@dataclass(frozen=True)
class LayoutScan:
    layout: Layout
    sections: SectionFilter
    label: str = ""


@dataclass(frozen=True)
class Phase:
    title: str
    strings: Tuple[Category, ...] = ()
    symbols: Tuple[Category, ...] = ()
    layouts: Tuple[LayoutScan, ...] = ()
    recommendation: Optional[str] = None

    def categories(self) -> Tuple[Category, ...]:
        return self.strings + self.symbols


@dataclass(frozen=True)
class PassConfig:
    """Definition of an analysis pass: its name, report title and phases."""

    # Pass names are CLI and report keys; keep them stable.
    name: str
    title: str
    description: str
    phases: Tuple[Phase, ...]

    def string_categories(self) -> List[Category]:
        return [cat for phase in self.phases for cat in phase.strings]

    def symbol_categories(self) -> List[Category]:
        return [cat for phase in self.phases for cat in phase.symbols]

    def categories(self) -> List[Category]:
        return [cat for phase in self.phases for cat in phase.categories()]

    def layouts(self) -> List[LayoutScan]:
        return [scan for phase in self.phases for scan in phase.layouts]


def strings(
    name: str,
    label: str,
    patterns: Tuple[str, ...],
    cap: Optional[int] = 100,
    min_length: int = 3,
    max_length: int = 256,
    sections: SectionFilter = STRING_SECTIONS,
    **kwargs,
) -> Category:
    """String-section category with the common extraction profile."""
    policy = kwargs.pop("policy", None) or ExtractPolicy(min_length=min_length, max_length=max_length)
    return Category(
        name=name,
        label=label,
        patterns=tuple(patterns),
        cap=cap,
        policy=policy,
        sections=sections,
        **kwargs,
    )


def symbols(name: str, label: str, patterns: Tuple[str, ...], cap: Optional[int] = None, **kwargs) -> Category:
    """Symbol-name category; symbol walks cover every section."""
    return Category(name=name, label=label, patterns=tuple(patterns), cap=cap, sections=ALL_SECTIONS, **kwargs)


__all__ = [
    "Category",
    "LayoutScan",
    "PassConfig",
    "Phase",
    "TypeRule",
    "strings",
    "symbols",
]
