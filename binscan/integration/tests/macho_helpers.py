"""Build a minimal thin 64-bit Mach-O for indicator tests.

Layout (file offsets; vm addresses are VM_BASE + offset):
  0x000 mach_header_64
  0x020 LC_SEGMENT_64 __TEXT (__text, __cstring)
        LC_SEGMENT_64 __DATA (__const)
        LC_SYMTAB
  0x200 __TEXT,__text    64 bytes of zeros
  0x240 __TEXT,__cstring CSTRINGS, zero padded to 0xc0
  0x300 __DATA,__const   one MIG subsystem descriptor at +8
  0x340 nlist_64[2]
  0x360 string table
"""

from __future__ import annotations

import struct
from pathlib import Path

MH_MAGIC_64 = 0xFEEDFACF
CPU_TYPE_X86_64 = 0x01000007
MH_EXECUTE = 2
LC_SEGMENT_64 = 0x19
LC_SYMTAB = 0x2

VM_BASE = 0x100000000
TEXT_OFF = 0x200
CSTRING_OFF = 0x240
CONST_OFF = 0x300
SYMOFF = 0x340
STROFF = 0x360

CSTRINGS = (b"ptrace", b"PT_DENY_ATTACH", b"https://evil.example.com/beacon", b"hello")

TEXT_ADDR = VM_BASE + TEXT_OFF
CSTRING_ADDR = VM_BASE + CSTRING_OFF
CONST_ADDR = VM_BASE + CONST_OFF
MIG_ADDR = CONST_ADDR + 8

SYMBOLS = ((b"_mach_msg", TEXT_ADDR), (b"_open", TEXT_ADDR + 4))


def cstring_address(text: bytes) -> int:
    offset = 0
    for item in CSTRINGS:
        if item == text:
            return CSTRING_ADDR + offset
        offset += len(item) + 1
    raise KeyError(text)


def _name16(name: bytes) -> bytes:
    return name.ljust(16, b"\x00")


def _section(sectname: bytes, segname: bytes, offset: int, size: int) -> bytes:
    return struct.pack(
        "<16s16sQQIIIIIIII",
        _name16(sectname),
        _name16(segname),
        VM_BASE + offset,
        size,
        offset,
        0,
        0,
        0,
        0,
        0,
        0,
        0,
    )


def _segment(segname: bytes, fileoff: int, filesize: int, sections) -> bytes:
    cmdsize = 72 + 80 * len(sections)
    head = struct.pack(
        "<II16sQQQQiiII",
        LC_SEGMENT_64,
        cmdsize,
        _name16(segname),
        VM_BASE + fileoff,
        filesize,
        fileoff,
        filesize,
        7,
        5,
        len(sections),
        0,
    )
    return head + b"".join(sections)


def build_macho(path: Path, mig_reserved: int = 0) -> Path:
    cstring = b"".join(s + b"\x00" for s in CSTRINGS).ljust(0xC0, b"\x00")
    mig = struct.pack("<QIIIIQ", 0x100003F00, 500, 520, 128, 0, mig_reserved)
    const = (b"\x00" * 8 + mig).ljust(0x40, b"\x00")

    strtab = b"\x00"
    nlists = b""
    for name, value in SYMBOLS:
        nlists += struct.pack("<IBBHQ", len(strtab), 0x0F, 1, 0, value)
        strtab += name + b"\x00"
    strtab = strtab.ljust(0x20, b"\x00")

    text_seg = _segment(
        b"__TEXT",
        0,
        CONST_OFF,
        [
            _section(b"__text", b"__TEXT", TEXT_OFF, 0x40),
            _section(b"__cstring", b"__TEXT", CSTRING_OFF, len(cstring)),
        ],
    )
    data_seg = _segment(b"__DATA", CONST_OFF, 0x40, [_section(b"__const", b"__DATA", CONST_OFF, len(const))])
    symtab = struct.pack("<6I", LC_SYMTAB, 24, SYMOFF, len(SYMBOLS), STROFF, len(strtab))
    commands = text_seg + data_seg + symtab

    header = struct.pack("<8I", MH_MAGIC_64, CPU_TYPE_X86_64, 3, MH_EXECUTE, 3, len(commands), 0, 0)
    image = (header + commands).ljust(TEXT_OFF, b"\x00")
    image += b"\x00" * 0x40
    image += cstring
    image += const
    image += nlists
    image += strtab
    path.write_bytes(image)
    return path
