"""Multi-category string scanning with per-category result caps.

`CategoryScanner` is the shared loop every analysis pass reuses: walk the
qualifying sections, extract strings, test each one against every configured
category, and record a match at most once per category until that category's
cap is reached. Categories that share an extraction profile (policy plus
section filter) share a walk; profiles never influence each other, so the
output is the same as scanning each category on its own.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .classify import Category, match_category
from .scan_utils import format_address
from .source import ByteSource, SectionFilter
from .strings import DEFAULT_PROBE_WIDTH, ExtractPolicy, iter_strings

log = logging.getLogger(__name__)

CapLookup = Callable[[Category], Optional[int]]


@dataclass(frozen=True)
class Match:
    address: int
    text: str
    category: str
    type: Optional[str] = None
    detail: Optional[str] = None

    def to_json(self) -> Dict[str, object]:
        out: Dict[str, object] = {"address": format_address(self.address), "text": self.text}
        if self.type is not None:
            out["type"] = self.type
        if self.detail is not None:
            out["detail"] = self.detail
        return out


class ResultSet:
    """Ordered mapping of category name to its matches, with caps attached.

    Every scanned category is registered up front so "looked and found
    nothing" shows up as an empty list rather than a missing key.
    """

    def __init__(self) -> None:
        self._matches: "OrderedDict[str, List[Match]]" = OrderedDict()
        self._caps: Dict[str, Optional[int]] = {}

    def register(self, name: str, cap: Optional[int]) -> None:
        if name not in self._matches:
            self._matches[name] = []
        self._caps[name] = cap

    def add(self, match: Match) -> bool:
        """Record `match` unless its category is full; returns whether it was kept."""
        if match.category not in self._matches:
            self.register(match.category, None)
        if self.is_capped(match.category):
            return False
        self._matches[match.category].append(match)
        if self.is_capped(match.category):
            log.debug("category %s reached cap %s", match.category, self._caps[match.category])
        return True

    def cap(self, name: str) -> Optional[int]:
        return self._caps.get(name)

    def is_capped(self, name: str) -> bool:
        cap = self._caps.get(name)
        return cap is not None and len(self._matches.get(name, [])) >= cap

    def merge(self, other: "ResultSet") -> None:
        for name in other:
            self.register(name, other.cap(name))
            for match in other[name]:
                self.add(match)

    def counts(self) -> Dict[str, int]:
        return {name: len(items) for name, items in self._matches.items()}

    def total(self) -> int:
        return sum(len(items) for items in self._matches.values())

    def truncated(self) -> List[str]:
        # count == cap means more matches may have been dropped.
        return [name for name in self._matches if self.is_capped(name)]

    def __getitem__(self, name: str) -> List[Match]:
        return self._matches[name]

    def __contains__(self, name: object) -> bool:
        return name in self._matches

    def __iter__(self) -> Iterator[str]:
        return iter(self._matches)

    def __len__(self) -> int:
        return len(self._matches)

    def items(self):
        return self._matches.items()

    def get(self, name: str, default=None):
        return self._matches.get(name, default)


def default_cap(category: Category) -> Optional[int]:
    return category.cap


def group_by_profile(
    categories: Iterable[Category],
) -> "OrderedDict[Tuple[ExtractPolicy, SectionFilter], List[Category]]":
    groups: "OrderedDict[Tuple[ExtractPolicy, SectionFilter], List[Category]]" = OrderedDict()
    for cat in categories:
        groups.setdefault((cat.policy, cat.sections), []).append(cat)
    return groups


def record(
    results: ResultSet,
    address: int,
    text: str,
    categories: Sequence[Category],
) -> None:
    """Classify one string/symbol against `categories` and record the hits.

    Within an exclusive group only the first matching category (declared order)
    may claim the text, whether or not that category still has room.
    """
    claimed = set()
    for cat in categories:
        group = cat.exclusive_group
        if group is not None and group in claimed:
            continue
        hit = match_category(text, cat)
        if hit is None:
            continue
        if group is not None:
            claimed.add(group)
        results.add(Match(address=address, text=text, category=cat.name, type=hit.type, detail=hit.detail))


def all_capped(results: ResultSet, categories: Sequence[Category]) -> bool:
    # Uncapped categories keep the walk alive.
    return all(results.is_capped(cat.name) for cat in categories)


class CategoryScanner:
    """Scan string sections of a ByteSource for many categories at once."""

    def __init__(self, probe_width: int = DEFAULT_PROBE_WIDTH, cap_for: CapLookup = default_cap) -> None:
        self.probe_width = probe_width
        self.cap_for = cap_for

    def scan(self, source: ByteSource, categories: Sequence[Category]) -> ResultSet:
        results = ResultSet()
        for cat in categories:
            results.register(cat.name, self.cap_for(cat))
        for (policy, section_filter), group in group_by_profile(categories).items():
            self._scan_profile(source, policy, section_filter, group, results)
        return results

    def _scan_profile(
        self,
        source: ByteSource,
        policy: ExtractPolicy,
        section_filter: SectionFilter,
        group: Sequence[Category],
        results: ResultSet,
    ) -> None:
        if all_capped(results, group):
            return
        for section in source.iter_sections(section_filter):
            for address, text in iter_strings(source, section, policy, self.probe_width):
                record(results, address, text, group)
                if all_capped(results, group):
                    return


def scan(
    source: ByteSource,
    section_filter: SectionFilter,
    pattern_sets: Dict[str, Sequence[str]],
    max_results_per_category: Optional[int] = 100,
    policy: Optional[ExtractPolicy] = None,
) -> ResultSet:
    """Convenience form: plain `{category: patterns}` tables over one section filter."""
    cats = [
        Category(
            name=name,
            patterns=tuple(patterns),
            cap=max_results_per_category,
            sections=section_filter,
            policy=policy or ExtractPolicy(),
        )
        for name, patterns in pattern_sets.items()
    ]
    return CategoryScanner().scan(source, cats)
