"""
Public surface for the binscan indicator engine.

This package re-exports the byte-source hosts, the scanners and the pass
runner so callers can scan a binary without reaching into internal modules.
"""

# Re-export only the stable API so scripts/tests don't depend on internal layout.
from .config import ScanConfig, config_from_env, load_config
from .engine.classify import Category, TypeRule, classify, infer_type
from .engine.macho import MachOSource
from .engine.scanner import CategoryScanner, Match, ResultSet
from .engine.source import ByteSource, MemorySource, Section, SectionFilter
from .engine.strings import ExtractPolicy, extract
from .engine.structs import MIG_SUBSYSTEM, Candidate, Field, Layout, StructureRecoveryScanner
from .engine.symbols import SymbolScanner
from .errors import AddressError, ConfigError, IndicatorError, LayoutError, SourceError, UnknownPassError
from .runner import PassResult, run_pass, run_passes
from . import registry

# Keep __all__ explicit so imports remain stable for external callers.
__all__ = [
    "AddressError",
    "ByteSource",
    "Candidate",
    "Category",
    "CategoryScanner",
    "ConfigError",
    "ExtractPolicy",
    "Field",
    "IndicatorError",
    "Layout",
    "LayoutError",
    "MIG_SUBSYSTEM",
    "MachOSource",
    "Match",
    "MemorySource",
    "PassResult",
    "ResultSet",
    "ScanConfig",
    "Section",
    "SectionFilter",
    "SourceError",
    "StructureRecoveryScanner",
    "SymbolScanner",
    "TypeRule",
    "UnknownPassError",
    "classify",
    "config_from_env",
    "extract",
    "infer_type",
    "load_config",
    "registry",
    "run_pass",
    "run_passes",
]
