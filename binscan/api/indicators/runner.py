"""Run analysis passes over a ByteSource.

Passes run one after another in registry order; nothing is shared between
them except the source. Each pass runs its string categories through one
`CategoryScanner`, its symbol categories through one `SymbolScanner`, and each
declared layout through the structure recovery walk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from . import registry
from .config import DEFAULT_CONFIG, ScanConfig
from .engine.scanner import CategoryScanner, ResultSet
from .engine.source import ByteSource
from .engine.structs import Candidate, StructureRecoveryScanner
from .engine.symbols import SymbolScanner
from .passes.base import PassConfig, Phase

log = logging.getLogger(__name__)


@dataclass
class PassResult:
    name: str
    title: str
    results: ResultSet
    structures: Dict[str, List[Candidate]] = field(default_factory=dict)
    phases: Sequence[Phase] = ()
    pass_config: Optional[PassConfig] = None

    def total(self) -> int:
        return self.results.total() + sum(len(items) for items in self.structures.values())

    def phase_total(self, phase: Phase) -> int:
        count = sum(len(self.results.get(cat.name, [])) for cat in phase.categories())
        count += sum(len(self.structures.get(scan.layout.name, [])) for scan in phase.layouts)
        return count


def run_pass(source: ByteSource, pass_config: PassConfig, config: ScanConfig = DEFAULT_CONFIG) -> PassResult:
    log.info("running pass %s", pass_config.name)
    results = ResultSet()

    string_cats = pass_config.string_categories()
    if string_cats:
        scanner = CategoryScanner(probe_width=config.probe_width, cap_for=config.cap_for)
        results.merge(scanner.scan(source, string_cats))

    symbol_cats = pass_config.symbol_categories()
    if symbol_cats:
        sym_scanner = SymbolScanner(stride=config.symbol_stride, cap_for=config.cap_for)
        results.merge(sym_scanner.scan(source, symbol_cats))

    # Report in declared order regardless of which scanner produced the matches.
    ordered = ResultSet()
    for cat in pass_config.categories():
        ordered.register(cat.name, results.cap(cat.name))
        for match in results.get(cat.name, []):
            ordered.add(match)

    structures: Dict[str, List[Candidate]] = {}
    if pass_config.layouts():
        recovery = StructureRecoveryScanner(stride=config.struct_stride)
        for scan in pass_config.layouts():
            found = recovery.recover_all(source, scan.sections, scan.layout)
            structures.setdefault(scan.layout.name, []).extend(found)

    result = PassResult(
        name=pass_config.name,
        title=pass_config.title,
        results=ordered,
        structures=structures,
        phases=pass_config.phases,
        pass_config=pass_config,
    )
    log.info("pass %s: %d findings", pass_config.name, result.total())
    truncated = ordered.truncated()
    if truncated:
        log.debug("pass %s capped categories: %s", pass_config.name, ", ".join(truncated))
    return result


def run_passes(
    source: ByteSource,
    names: Optional[Sequence[str]] = None,
    config: ScanConfig = DEFAULT_CONFIG,
) -> List[PassResult]:
    """Run `names` (default: config.passes, else every pass) in registry order."""
    wanted = list(names) if names else list(config.passes)
    # Resolve every name before scanning so a typo fails fast.
    selected = [registry.get_pass(name) for name in wanted] if wanted else None
    if selected is None:
        selected = [registry.get_pass(name) for name in registry.list_groups()]
    else:
        order = registry.list_groups()
        selected = sorted({p.name: p for p in selected}.values(), key=lambda p: order.index(p.name))
    return [run_pass(source, pass_cfg, config) for pass_cfg in selected]
