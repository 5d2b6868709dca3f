import struct
import unittest

from binscan.api.indicators.engine.source import MemorySource
from binscan.api.indicators.engine.structs import (
    MIG_SECTIONS,
    MIG_SUBSYSTEM,
    Field,
    Layout,
    StructureRecoveryScanner,
    probe,
    recover,
)
from binscan.api.indicators.errors import LayoutError

CONST = 0x100004000


def _mig(start_id, end_id, maxsize=128, reserved=0, routine=0x100003F00):
    return struct.pack("<QIIIIQ", routine, start_id, end_id, maxsize, 0, reserved)


def _source(record, segment="__DATA", section="__const"):
    data = b"\x00" * 8 + record + b"\x00" * 16
    return MemorySource([(segment, section, CONST, data)])


class MigRecoveryTests(unittest.TestCase):
    def test_valid_descriptor_is_recovered(self):
        src = _source(_mig(500, 520))
        found = recover(src, src.sections()[0], MIG_SUBSYSTEM)
        self.assertEqual(len(found), 1)
        cand = found[0]
        self.assertEqual(cand.address, CONST + 8)
        self.assertEqual(cand.section, "__DATA,__const")
        self.assertEqual(cand.fields["server_routine"], 0x100003F00)
        self.assertEqual(cand.fields["start_id"], 500)
        self.assertEqual(cand.fields["end_id"], 520)
        self.assertEqual(cand.fields["maxsize"], 128)
        self.assertEqual(cand.fields["msg_count"], 20)
        self.assertEqual(cand.description, "Subsystem 500: 20 messages (IDs 500-519), maxsize: 128")

    def test_nonzero_reserved_is_rejected(self):
        src = _source(_mig(500, 520, reserved=1))
        self.assertEqual(recover(src, src.sections()[0], MIG_SUBSYSTEM), [])

    def test_id_range_bounds(self):
        for start, end in ((0, 10), (500, 500), (500, 400), (100, 1100), (1000000, 1000010)):
            src = _source(_mig(start, end))
            self.assertEqual(recover(src, src.sections()[0], MIG_SUBSYSTEM), [], (start, end))

    def test_largest_accepted_range(self):
        src = _source(_mig(100, 1099))
        self.assertEqual(len(recover(src, src.sections()[0], MIG_SUBSYSTEM)), 1)

    def test_probe_direct(self):
        src = _source(_mig(500, 520))
        self.assertIsNone(probe(src, CONST, MIG_SUBSYSTEM))
        self.assertIsNotNone(probe(src, CONST + 8, MIG_SUBSYSTEM))

    def test_candidate_json_formats_address(self):
        src = _source(_mig(500, 520))
        cand = recover(src, src.sections()[0], MIG_SUBSYSTEM)[0]
        out = cand.to_json()
        self.assertEqual(out["address"], "0x%x" % (CONST + 8))
        self.assertEqual(out["layout"], "mig_subsystem")

    def test_section_filter_limits_walk(self):
        src = MemorySource(
            [
                ("__TEXT", "__const", 0x1000, b"\x00" * 8 + _mig(500, 520) + b"\x00" * 16),
                ("__DATA_CONST", "__const", CONST, b"\x00" * 8 + _mig(700, 710) + b"\x00" * 16),
            ]
        )
        found = StructureRecoveryScanner().recover_all(src, MIG_SECTIONS, MIG_SUBSYSTEM)
        self.assertEqual([c.fields["start_id"] for c in found], [700])

    def test_short_section_yields_nothing(self):
        src = MemorySource([("__DATA", "__const", CONST, b"\x00" * 16)])
        self.assertEqual(recover(src, src.sections()[0], MIG_SUBSYSTEM), [])

    def test_stride_must_be_positive(self):
        with self.assertRaises(ValueError):
            StructureRecoveryScanner(stride=0)


class LayoutTests(unittest.TestCase):
    def test_size_is_furthest_field_end(self):
        self.assertEqual(MIG_SUBSYSTEM.size, 0x20)

    def test_bad_width(self):
        with self.assertRaises(LayoutError):
            Layout(name="bad", fields=(Field("x", 0, 3),), validate=lambda v: True)

    def test_duplicate_field(self):
        with self.assertRaises(LayoutError):
            Layout(name="dup", fields=(Field("x", 0, 4), Field("x", 4, 4)), validate=lambda v: True)

    def test_no_fields(self):
        with self.assertRaises(LayoutError):
            Layout(name="empty", fields=(), validate=lambda v: True)

    def test_big_endian_and_signed_decode(self):
        layout = Layout(
            name="pair",
            fields=(Field("a", 0, 2), Field("b", 2, 2, signed=True)),
            validate=lambda v: v["b"] < 0,
            byteorder="big",
        )
        src = MemorySource([("__DATA", "__const", CONST, b"\x01\x02\xff\xfe")])
        cand = probe(src, CONST, layout)
        self.assertEqual(cand.fields, {"a": 0x0102, "b": -2})


if __name__ == "__main__":
    unittest.main()
