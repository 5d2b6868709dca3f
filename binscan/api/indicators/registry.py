"""Pass and category registry helpers.

Registry access is lightweight: it provides stable names for CLI enumeration
and report keys, and a single place where unknown names become errors.
"""

from __future__ import annotations

from typing import Dict, List

from .errors import UnknownPassError
from .passes import PASS_GROUPS, categories_by_name
from .passes.base import Category, PassConfig


def list_groups() -> List[str]:
    # Registry order is the run order; keep it rather than sorting.
    return list(PASS_GROUPS.keys())


def list_categories() -> List[str]:
    return sorted(categories_by_name().keys())


def categories_for_group(group: str) -> List[Category]:
    if group not in PASS_GROUPS:
        raise KeyError(f"unknown pass group: {group}")
    # Return a copy so callers cannot mutate the catalog.
    return list(PASS_GROUPS[group].categories())


def all_categories() -> Dict[str, Category]:
    return categories_by_name()


def get_pass(name: str) -> PassConfig:
    if name not in PASS_GROUPS:
        raise UnknownPassError(f"unknown pass: {name}")
    return PASS_GROUPS[name]


def group_of(category_name: str) -> str:
    for name, pass_cfg in PASS_GROUPS.items():
        if any(cat.name == category_name for cat in pass_cfg.categories()):
            return name
    raise UnknownPassError(f"unknown category: {category_name}")
