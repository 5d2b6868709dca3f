import unittest

from binscan.api.indicators.engine.scanner import scan
from binscan.api.indicators.engine.source import (
    ANY_STRING_SECTIONS,
    CSTRING_SECTIONS,
    STRING_AND_DATA_SECTIONS,
    STRING_SECTIONS,
    MemorySource,
    Section,
)
from binscan.api.indicators.errors import AddressError, SourceError


class MemorySourceTests(unittest.TestCase):
    def setUp(self):
        self.src = MemorySource(
            [
                ("__TEXT", "__text", 0x1000, b"\x90" * 16),
                ("__TEXT", "__cstring", 0x2000, b"abc\x00"),
                ("__DATA", "__data", 0x3000, memoryview(b"xyz")),
            ],
            symbols={0x1000: "_main"},
        )

    def test_segments_keep_declaration_order(self):
        names = [seg.name for seg in self.src.segments()]
        self.assertEqual(names, ["__TEXT", "__DATA"])
        self.assertEqual([s.name for s in self.src.segments()[0].sections], ["__text", "__cstring"])

    def test_reads(self):
        self.assertEqual(self.src.read_byte(0x2000), ord("a"))
        self.assertEqual(self.src.read(0x2000, 3), b"abc")
        self.assertEqual(self.src.read(0x3000, 3), b"xyz")

    def test_out_of_section_read_raises(self):
        with self.assertRaises(AddressError):
            self.src.read_byte(0x1010)
        with self.assertRaises(AddressError):
            self.src.read(0x2002, 4)
        with self.assertRaises(AddressError):
            self.src.read_byte(0x10)

    def test_symbols(self):
        self.assertEqual(self.src.symbol_name_at(0x1000), "_main")
        self.assertIsNone(self.src.symbol_name_at(0x1004))

    def test_empty_section_sharing_start_does_not_shadow_reads(self):
        src = MemorySource(
            [
                ("__TEXT", "__cstring", 0x1000, b"ptrace\x00" + b"\x00" * 8),
                ("__TEXT", "__ustring", 0x1000, b""),
            ]
        )
        self.assertEqual([s.name for s in src.sections()], ["__cstring", "__ustring"])
        self.assertEqual(src.read(0x1000, 6), b"ptrace")
        results = scan(src, CSTRING_SECTIONS, {"antidebug_ptrace": ["ptrace"]})
        self.assertEqual([(m.address, m.text) for m in results["antidebug_ptrace"]], [(0x1000, "ptrace")])

    def test_negative_start_rejected(self):
        with self.assertRaises(SourceError):
            MemorySource([("__TEXT", "__text", -1, b"a")])


class SectionFilterTests(unittest.TestCase):
    def test_string_sections(self):
        self.assertTrue(STRING_SECTIONS.accepts(Section("__TEXT", "__cstring", 0, 1)))
        self.assertTrue(STRING_SECTIONS.accepts(Section("__DATA", "__const", 0, 1)))
        self.assertTrue(STRING_SECTIONS.accepts(Section("__TEXT", "__objc_methname_string", 0, 1)))
        self.assertFalse(STRING_SECTIONS.accepts(Section("__TEXT", "__text", 0, 1)))
        self.assertFalse(STRING_SECTIONS.accepts(Section("__DATA_CONST", "__const", 0, 1)))
        self.assertFalse(STRING_SECTIONS.accepts(Section("__DATA", "__data", 0, 1)))

    def test_data_sections_variant(self):
        self.assertTrue(STRING_AND_DATA_SECTIONS.accepts(Section("__DATA", "__data", 0, 1)))

    def test_any_segment_variant(self):
        self.assertTrue(ANY_STRING_SECTIONS.accepts(Section("__DATA_CONST", "__const", 0, 1)))
        self.assertTrue(ANY_STRING_SECTIONS.accepts(Section("__RODATA", "__cstring", 0, 1)))


if __name__ == "__main__":
    unittest.main()
