import pytest

from binscan.api.indicators.engine.macho import MachOSource
from binscan.api.indicators.errors import AddressError, SourceError
from binscan.api.indicators.runner import run_passes
from binscan.integration.tests import macho_helpers as helpers


@pytest.fixture
def binary(tmp_path):
    return helpers.build_macho(tmp_path / "sample")


def test_sections_follow_load_commands(binary):
    src = MachOSource(binary)
    assert [(s.segment, s.name) for s in src.sections()] == [
        ("__TEXT", "__text"),
        ("__TEXT", "__cstring"),
        ("__DATA", "__const"),
    ]
    assert [seg.name for seg in src.segments()] == ["__TEXT", "__DATA"]
    cstring = src.sections()[1]
    assert cstring.start == helpers.CSTRING_ADDR


def test_reads_map_vm_addresses_to_file_bytes(binary):
    src = MachOSource(binary)
    addr = helpers.cstring_address(b"PT_DENY_ATTACH")
    assert src.read(addr, 14) == b"PT_DENY_ATTACH"
    assert src.read_byte(helpers.CSTRING_ADDR) == ord("p")
    with pytest.raises(AddressError):
        src.read_byte(helpers.VM_BASE)


def test_symbols_come_from_symtab(binary):
    src = MachOSource(binary)
    assert src.symbol_name_at(helpers.TEXT_ADDR) == "_mach_msg"
    assert src.symbol_name_at(helpers.TEXT_ADDR + 4) == "_open"
    assert src.symbol_name_at(helpers.TEXT_ADDR + 8) is None


def test_describe(binary):
    meta = MachOSource(binary).describe()
    assert meta["path"] == str(binary)
    assert meta["slice"] == 0
    assert meta["slices"] == 1
    assert meta["cputype"] == "x86_64"
    assert meta["sections"] == 3
    assert meta["symbols"] == 2


def test_end_to_end_scan(binary):
    results = {r.name: r for r in run_passes(MachOSource(binary), ["antianalysis", "machipc", "fileops"])}
    ptrace = results["antianalysis"].results["antidebug_ptrace"]
    assert [(m.address, m.text) for m in ptrace] == [
        (helpers.cstring_address(b"ptrace"), "ptrace"),
        (helpers.cstring_address(b"PT_DENY_ATTACH"), "PT_DENY_ATTACH"),
    ]
    mig = results["machipc"].structures["mig_subsystem"]
    assert [c.address for c in mig] == [helpers.MIG_ADDR]
    assert mig[0].description == "Subsystem 500: 20 messages (IDs 500-519), maxsize: 128"
    assert [m.text for m in results["machipc"].results["ipc_msg_ops"]] == ["_mach_msg"]
    assert [m.text for m in results["fileops"].results["file_basic"]] == ["_open"]


def test_reserved_field_rejects_descriptor(tmp_path):
    binary = helpers.build_macho(tmp_path / "sample", mig_reserved=1)
    results = run_passes(MachOSource(binary), ["machipc"])
    assert results[0].structures["mig_subsystem"] == []


def test_missing_file(tmp_path):
    with pytest.raises(SourceError, match="not found"):
        MachOSource(tmp_path / "nope")


def test_not_a_macho(tmp_path):
    junk = tmp_path / "junk"
    junk.write_bytes(b"\x00" * 64)
    with pytest.raises(SourceError):
        MachOSource(junk)


def test_slice_out_of_range(binary):
    with pytest.raises(SourceError, match="out of range"):
        MachOSource(binary, slice_index=1)
