"""CLI for the indicator passes.

`groups`, `list` and `describe` are read-only views of the registry and need no
binary. `scan` opens a Mach-O, runs the selected passes and prints the report
as text or JSON. Failures print a one-line error (or an `{"ok": false}` JSON
object with `--format json`) and exit 1.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from . import registry
from .config import ScanConfig, config_from_env, load_config, positive_int
from .engine.io_utils import dumps, write_json
from .engine.macho import MachOSource
from .errors import IndicatorError
from .passes.base import Category
from .report import build_payload, render_text
from .runner import run_passes


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")


def _print_groups() -> int:
    for name in registry.list_groups():
        print(name)
    return 0


def _print_categories(group: str | None) -> int:
    if group:
        cats = [(group, cat) for cat in registry.categories_for_group(group)]
    else:
        cats = [(registry.group_of(name), cat) for name, cat in registry.all_categories().items()]
    for pass_name, cat in sorted(cats, key=lambda item: item[1].name):
        # Keep output deterministic to simplify test assertions and shell usage.
        print("%s (%s): %s" % (cat.name, pass_name, cat.display))
    return 0


def _describe_pass(name: str) -> int:
    pass_cfg = registry.get_pass(name)
    print("name: %s" % pass_cfg.name)
    print("title: %s" % pass_cfg.title)
    print("description: %s" % pass_cfg.description)
    for phase in pass_cfg.phases:
        print("phase: %s" % phase.title)
        for cat in phase.strings:
            print("  strings: %s" % cat.name)
        for cat in phase.symbols:
            print("  symbols: %s" % cat.name)
        for scan in phase.layouts:
            print("  layout: %s" % scan.layout.name)
    return 0


def _describe_category(cat: Category) -> int:
    policy = cat.policy
    kind = "symbols" if cat in registry.get_pass(registry.group_of(cat.name)).symbol_categories() else "strings"
    print("name: %s" % cat.name)
    print("group: %s" % registry.group_of(cat.name))
    print("label: %s" % cat.display)
    print("kind: %s" % kind)
    print("match: %s%s" % (cat.match, " (case-folded)" if cat.fold_case else ""))
    print("cap: %s" % ("none" if cat.cap is None else cat.cap))
    if kind == "strings":
        print("length: %d-%d" % (policy.min_length, policy.max_length))
        sections = cat.sections
        print("segments: %s" % (", ".join(sections.segments) or "any"))
        print("sections: %s" % (", ".join(sections.contains + sections.names) or "any"))
    if cat.exclusive_group:
        print("exclusive_group: %s" % cat.exclusive_group)
    print("patterns: %s" % ", ".join(cat.patterns))
    return 0


def _describe(name: str) -> int:
    if name in registry.list_groups():
        return _describe_pass(name)
    cats = registry.all_categories()
    if name in cats:
        return _describe_category(cats[name])
    # Same error type as get_pass so main() reports it uniformly.
    registry.get_pass(name)
    return 1


def _scan_config(args: argparse.Namespace) -> ScanConfig:
    config = load_config(args.config) if args.config else ScanConfig()
    config = config_from_env(config)
    if args.max_results is not None:
        config = replace(config, max_results=positive_int("--max-results", args.max_results, allow_zero=True))
    if args.passes:
        config = replace(config, passes=tuple(args.passes))
    return config


def _scan(args: argparse.Namespace) -> int:
    config = _scan_config(args)
    limit = None if args.limit is None else positive_int("--limit", args.limit, allow_zero=True)
    source = MachOSource(args.binary, slice_index=args.slice)
    results = run_passes(source, config=config)
    meta = source.describe()
    if args.format == "json":
        payload = build_payload(results, meta)
        if args.out:
            out = write_json(args.out, payload)
            print(json.dumps({"ok": True, "out": str(out)}, indent=2, sort_keys=True))
        else:
            print(dumps(payload))
        return 0
    text = render_text(results, meta, limit=limit)
    if args.out:
        out = Path(args.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text)
        print("wrote %s" % out)
    else:
        sys.stdout.write(text)
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="binscan", description="Mach-O indicator scanner")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("groups", help="List analysis passes")

    list_parser = sub.add_parser("list", help="List indicator categories")
    list_parser.add_argument("--group", help="Filter to a specific pass")

    desc_parser = sub.add_parser("describe", help="Describe a pass or category")
    desc_parser.add_argument("name", help="Pass or category name")

    scan_parser = sub.add_parser("scan", help="Scan a Mach-O binary")
    scan_parser.add_argument("binary", help="Path to a Mach-O (thin or fat) file")
    scan_parser.add_argument("--pass", dest="passes", action="append", help="Pass to run (repeatable)")
    scan_parser.add_argument("--slice", type=int, default=0, help="Architecture slice index for fat files")
    scan_parser.add_argument("--max-results", type=int, default=None, help="Override every category cap")
    scan_parser.add_argument("--config", default=None, help="JSON scan config file")
    scan_parser.add_argument("--format", choices=("text", "json"), default="text")
    scan_parser.add_argument("--out", default=None, help="Write the report here instead of stdout")
    scan_parser.add_argument("--limit", type=int, default=None, help="Max rows per category in text output")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    as_json = getattr(args, "format", "text") == "json"
    try:
        if args.command == "groups":
            return _print_groups()
        if args.command == "list":
            return _print_categories(args.group)
        if args.command == "describe":
            return _describe(args.name)
        if args.command == "scan":
            return _scan(args)
    except (IndicatorError, KeyError) as exc:
        message = exc.args[0] if isinstance(exc, KeyError) and exc.args else str(exc)
        if as_json:
            print(json.dumps({"ok": False, "error": message}, indent=2, sort_keys=True))
        else:
            print("error: %s" % message, file=sys.stderr)
        return 1

    # Default to help so shell users see available commands instead of a stack trace.
    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
