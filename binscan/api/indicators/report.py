"""Report rendering for pass results.

Two shapes: a JSON payload for tooling and a plain-text phase report for
people. Both list every scanned category, including those with no findings,
so an empty section reads as "looked and found nothing" rather than "skipped".
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence

from .engine.scanner import Match
from .runner import PassResult

RULE = "=" * 70
PHASE_RULE = "-" * 70


def _pass_payload(result: PassResult) -> Dict[str, object]:
    categories = {name: [m.to_json() for m in matches] for name, matches in result.results.items()}
    structures = {name: [c.to_json() for c in items] for name, items in result.structures.items()}
    return {
        "title": result.title,
        "total": result.total(),
        "counts": result.results.counts(),
        "truncated": result.results.truncated(),
        "categories": categories,
        "structures": structures,
    }


def build_payload(results: Sequence[PassResult], meta: Optional[Mapping[str, object]] = None) -> Dict[str, object]:
    return {
        "meta": dict(meta or {}),
        "passes": {result.name: _pass_payload(result) for result in results},
    }


def _match_line(match: Match) -> str:
    if match.type is not None:
        line = '  [0x%x] [%s] "%s"' % (match.address, match.type, match.text)
    else:
        line = "  [0x%x] %s" % (match.address, match.text)
    if match.detail is not None and match.detail != match.text:
        line += "  (%s)" % match.detail
    return line


def _rows(lines: List[str], rows: Sequence[str], limit: Optional[int]) -> None:
    shown = rows if limit is None else rows[:limit]
    lines.extend(shown)
    if len(rows) > len(shown):
        lines.append("  ... and %d more" % (len(rows) - len(shown)))


def _render_pass(result: PassResult, limit: Optional[int]) -> List[str]:
    lines = [RULE, result.title.upper() + " REPORT", RULE, ""]
    for idx, phase in enumerate(result.phases, start=1):
        lines.append(PHASE_RULE)
        lines.append("[%d] %s" % (idx, phase.title.upper()))
        lines.append(PHASE_RULE)
        lines.append("")
        if result.phase_total(phase) == 0:
            lines.append("No %s indicators found (verified absent)" % phase.title.lower())
            lines.append("")
            continue
        for scan in phase.layouts:
            found = result.structures.get(scan.layout.name, [])
            if not found:
                continue
            lines.append("%s: %d" % (scan.label or scan.layout.name, len(found)))
            lines.append("")
            _rows(lines, ["  [0x%x] %s" % (c.address, c.description) for c in found], limit)
            lines.append("")
        for cat in phase.categories():
            matches = result.results.get(cat.name, [])
            if not matches:
                continue
            suffix = " (capped)" if result.results.is_capped(cat.name) else ""
            lines.append("%s: %d%s" % (cat.display, len(matches), suffix))
            lines.append("")
            _rows(lines, [_match_line(m) for m in matches], limit)
            lines.append("")

    lines.append(RULE)
    lines.append("SUMMARY")
    lines.append(RULE)
    lines.append("")
    for phase in result.phases:
        lines.append("%-40s %d" % (phase.title + ":", result.phase_total(phase)))
    lines.append("%-40s %d" % ("Total:", result.total()))
    recommendations = [
        phase.recommendation for phase in result.phases if phase.recommendation and result.phase_total(phase)
    ]
    if recommendations:
        lines.append("")
        lines.append("Recommendations:")
        # Phases can share a recommendation; print each once.
        for rec in dict.fromkeys(recommendations):
            lines.append("  - %s" % rec)
    lines.append("")
    return lines


def render_text(
    results: Sequence[PassResult],
    meta: Optional[Mapping[str, object]] = None,
    limit: Optional[int] = None,
) -> str:
    lines: List[str] = []
    for key, value in sorted((meta or {}).items()):
        lines.append("%s: %s" % (key, value))
    if lines:
        lines.append("")
    for result in results:
        lines.extend(_render_pass(result, limit))
    return "\n".join(lines) + "\n"
