import struct

import pytest

from binscan.api.indicators.config import ScanConfig
from binscan.api.indicators.engine.source import MemorySource
from binscan.api.indicators.errors import UnknownPassError
from binscan.api.indicators.passes import antianalysis, machipc
from binscan.api.indicators.runner import run_pass, run_passes

TEXT = 0x100000000
CSTRING = 0x100001000
CONST = 0x100002000


def _source():
    strings = b"ptrace\x00PT_DENY_ATTACH\x00com.example.helper\x00has space com.x\x00" + b"\x00" * 8
    mig = struct.pack("<QIIIIQ", TEXT, 500, 520, 128, 0, 0)
    return MemorySource(
        [
            ("__TEXT", "__text", TEXT, b"\x00" * 0x20),
            ("__TEXT", "__cstring", CSTRING, strings),
            ("__DATA", "__const", CONST, b"\x00" * 8 + mig + b"\x00" * 16),
        ],
        symbols={TEXT: "_mach_msg", TEXT + 8: "_bootstrap_look_up", TEXT + 0x10: "_foo_server"},
    )


def test_antianalysis_pass_reports_every_category():
    result = run_pass(_source(), antianalysis.PASS)
    names = [cat.name for cat in antianalysis.PASS.categories()]
    assert list(result.results) == names
    assert [m.text for m in result.results["antidebug_ptrace"]] == ["ptrace", "PT_DENY_ATTACH"]
    assert result.results["antivm_hardware"] == []
    assert result.phase_total(antianalysis.ANTI_DEBUG) >= 2
    assert result.phase_total(antianalysis.ANTI_VM) == 0


def test_machipc_pass_recovers_structures_and_symbols():
    result = run_pass(_source(), machipc.PASS)
    subsystems = result.structures["mig_subsystem"]
    assert [c.address for c in subsystems] == [CONST + 8]
    assert subsystems[0].fields["msg_count"] == 20
    assert [m.text for m in result.results["ipc_msg_ops"]] == ["_mach_msg"]
    assert [m.text for m in result.results["ipc_bootstrap_ops"]] == ["_bootstrap_look_up"]
    assert [m.text for m in result.results["ipc_dispatchers"]] == ["_foo_server"]
    assert [m.text for m in result.results["ipc_service_names"]] == ["com.example.helper"]
    assert result.phase_total(machipc.SUBSYSTEMS) == 1
    assert result.total() == result.results.total() + 1


def test_config_caps_flow_into_scanners():
    result = run_pass(_source(), antianalysis.PASS, ScanConfig(caps={"antidebug_ptrace": 1}))
    assert len(result.results["antidebug_ptrace"]) == 1
    assert result.results.is_capped("antidebug_ptrace")


def test_symbol_stride_from_config():
    result = run_pass(_source(), machipc.PASS, ScanConfig(symbol_stride=16))
    # Only TEXT and TEXT + 0x10 are visited at a 16-byte stride.
    assert result.results["ipc_bootstrap_ops"] == []
    assert [m.text for m in result.results["ipc_msg_ops"]] == ["_mach_msg"]


def test_run_passes_uses_registry_order_and_dedupes():
    results = run_passes(_source(), ["machipc", "antianalysis", "machipc"])
    assert [r.name for r in results] == ["antianalysis", "machipc"]


def test_run_passes_selection_from_config():
    results = run_passes(_source(), config=ScanConfig(passes=("xpc",)))
    assert [r.name for r in results] == ["xpc"]


def test_run_passes_defaults_to_everything():
    results = run_passes(_source())
    assert len(results) == 12


def test_unknown_pass_fails_before_scanning():
    with pytest.raises(UnknownPassError, match="unknown pass: bogus"):
        run_passes(_source(), ["antianalysis", "bogus"])
