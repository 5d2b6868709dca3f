"""Pattern classification for extracted strings and symbol names.

Membership is a literal test (substring by default, prefix or regex where a
category asks for it); the first pattern that hits short-circuits. There is no
scoring and no normalization beyond an optional lowercase fold.

Type inference walks an ordered rule list and returns the first label whose
needle appears. Order is part of the data: a specific vendor string must be
declared before a generic one or attribution goes to the generic label.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple, Union

from .source import STRING_SECTIONS, SectionFilter
from .strings import DEFAULT_POLICY, ExtractPolicy

MATCH_MODES = ("substring", "prefix", "regex")
TYPE_SOURCES = ("text", "pattern")


@dataclass(frozen=True)
class TypeRule:
    """One secondary check: `label` applies when any needle hits."""

    label: str
    needles: Tuple[str, ...]
    prefix: bool = False

    def applies(self, text: str) -> bool:
        if self.prefix:
            return any(text.startswith(n) for n in self.needles)
        return any(n in text for n in self.needles)


RuleLike = Union[TypeRule, str]


@dataclass(frozen=True)
class Category:
    """A named pattern set plus the rules for when and where it is tested.

    `patterns` keep declaration order. `exclude`/`exclude_prefixes` veto a
    candidate outright; `require`/`require_prefixes` (when given) demand at
    least one hit before membership is even tested.
    """

    name: str
    patterns: Tuple[str, ...]
    label: str = ""
    cap: Optional[int] = 100
    match: str = "substring"
    fold_case: bool = False
    exclude: Tuple[str, ...] = ()
    exclude_prefixes: Tuple[str, ...] = ()
    require: Tuple[str, ...] = ()
    require_prefixes: Tuple[str, ...] = ()
    types: Tuple[TypeRule, ...] = ()
    type_fallback: Optional[str] = None
    type_source: str = "text"
    type_from_match: bool = False
    exclusive_group: Optional[str] = None
    policy: ExtractPolicy = DEFAULT_POLICY
    sections: SectionFilter = STRING_SECTIONS

    def __post_init__(self) -> None:
        if self.match not in MATCH_MODES:
            raise ValueError(f"{self.name}: unknown match mode {self.match!r}")
        if self.type_source not in TYPE_SOURCES:
            raise ValueError(f"{self.name}: unknown type source {self.type_source!r}")

    @property
    def display(self) -> str:
        return self.label or self.name

    @property
    def typed(self) -> bool:
        return bool(self.types) or self.type_fallback is not None or self.type_from_match

    def admits(self, text: str) -> bool:
        subject = _fold(text, self.fold_case)
        if any(_fold(token, self.fold_case) in subject for token in self.exclude):
            return False
        if any(subject.startswith(_fold(p, self.fold_case)) for p in self.exclude_prefixes):
            return False
        if self.require or self.require_prefixes:
            if any(_fold(token, self.fold_case) in subject for token in self.require):
                return True
            return any(subject.startswith(_fold(p, self.fold_case)) for p in self.require_prefixes)
        return True


@dataclass(frozen=True)
class Hit:
    pattern: str
    type: Optional[str] = None
    detail: Optional[str] = None


def _fold(text: str, fold_case: bool) -> str:
    return text.lower() if fold_case else text


def first_match(
    text: str,
    patterns: Iterable[str],
    mode: str = "substring",
    fold_case: bool = False,
) -> Optional[str]:
    """Return the first pattern (in declared order) that matches `text`."""
    subject = _fold(text, fold_case)
    for pattern in patterns:
        if mode == "regex":
            flags = re.IGNORECASE if fold_case else 0
            if re.search(pattern, text, flags):
                return pattern
            continue
        needle = _fold(pattern, fold_case)
        if mode == "prefix":
            if subject.startswith(needle):
                return pattern
        elif needle in subject:
            return pattern
    return None


def classify(text: str, patterns: Iterable[str], fold_case: bool = False) -> bool:
    """Substring membership test against a pattern set."""
    return first_match(text, patterns, fold_case=fold_case) is not None


def infer_type(text: str, rules: Sequence[RuleLike], fallback: Optional[str] = None) -> Optional[str]:
    """Label of the first rule (declared order) that applies to `text`.

    Plain strings act as rules labelled with themselves.
    """
    for rule in rules:
        if isinstance(rule, str):
            if rule in text:
                return rule
        elif rule.applies(text):
            return rule.label
    return fallback


def _regex_detail(pattern: str, text: str, fold_case: bool) -> Optional[str]:
    flags = re.IGNORECASE if fold_case else 0
    fragments = [m.group(0) for m in re.finditer(pattern, text, flags)]
    return ", ".join(fragments) if fragments else None


def match_category(text: str, category: Category) -> Optional[Hit]:
    """Apply every rule of `category` to `text`; None when it does not belong."""
    if not category.admits(text):
        return None
    pattern = first_match(text, category.patterns, category.match, category.fold_case)
    if pattern is None:
        return None
    detail = None
    if category.match == "regex":
        detail = _regex_detail(pattern, text, category.fold_case)
    label: Optional[str] = None
    if category.type_from_match:
        label = pattern
    elif category.types or category.type_fallback is not None:
        subject = pattern if category.type_source == "pattern" else text
        label = infer_type(subject, category.types, category.type_fallback)
    return Hit(pattern=pattern, type=label, detail=detail)
