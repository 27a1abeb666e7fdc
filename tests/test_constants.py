"""Tests for the constant pool reader."""

import io
import logging
import struct

import pytest

from pyjlines.classfile import ConstantPool
from pyjlines.constants import read_constants
from pyjlines.errors import ClassFormatError, TruncatedStream, UnsupportedConstantTag
from pyjlines.stream import ClassStream


def read_pool(cp: ConstantPool, trailer: bytes = b"\xaa"):
    out = bytearray()
    cp.write(out)
    stream = ClassStream(io.BytesIO(bytes(out) + trailer))
    constants = read_constants(stream)
    return constants, stream


class TestConstants:
    def test_utf8_entries(self):
        cp = ConstantPool()
        code = cp.add_utf8("Code")
        lnt = cp.add_utf8("LineNumberTable")
        constants, stream = read_pool(cp)
        assert constants[code] == "Code"
        assert constants[lnt] == "LineNumberTable"
        assert constants.index_of("Code") == code
        assert "SourceFile" not in constants
        # Positioned right after the pool
        assert stream.read_u1() == 0xAA

    def test_class_resolved_after_pool(self):
        # Class entry referencing a slot that comes later in the pool
        out = bytearray(struct.pack(">H", 3))
        out += b"\x07" + struct.pack(">H", 2)
        out += b"\x01" + struct.pack(">H", 5) + b"Hello"
        constants = read_constants(ClassStream(io.BytesIO(bytes(out))))
        assert constants[1] == "Hello"
        assert constants[2] == "Hello"
        # The UTF-8 entry was registered first
        assert constants.index_of("Hello") == 2

    def test_first_definition_wins(self):
        out = bytearray(struct.pack(">H", 3))
        for _ in range(2):
            out += b"\x01" + struct.pack(">H", 4) + b"Code"
        constants = read_constants(ClassStream(io.BytesIO(bytes(out))))
        assert constants.index_of("Code") == 1
        assert constants[2] == "Code"

    def test_wide_entries_use_two_slots(self):
        cp = ConstantPool()
        cp.add_long(1)
        cp.add_double(2.0)
        after = cp.add_utf8("after")
        assert after == 5
        constants, stream = read_pool(cp)
        assert constants[5] == "after"
        assert stream.read_u1() == 0xAA
        with pytest.raises(ClassFormatError):
            constants[2]

    def test_skipped_entries_are_not_strings(self):
        cp = ConstantPool()
        idx = cp.add_string("literal")
        nat = cp.add_name_and_type("run", "()V")
        constants, _ = read_pool(cp)
        assert constants[idx - 1] == "literal"
        with pytest.raises(ClassFormatError, match="no string constant"):
            constants[idx]
        with pytest.raises(ClassFormatError):
            constants[nat]

    def test_empty_pool(self):
        constants = read_constants(ClassStream(io.BytesIO(b"\x00\x00")))
        assert constants.fwd == {}
        constants = read_constants(ClassStream(io.BytesIO(b"\x00\x01")))
        assert constants.fwd == {}

    def test_unknown_tag(self):
        data = struct.pack(">H", 2) + b"\x13\x00\x00"
        with pytest.raises(UnsupportedConstantTag) as exc_info:
            read_constants(ClassStream(io.BytesIO(data)))
        assert exc_info.value.tag == 0x13

    def test_truncated_pool(self):
        data = struct.pack(">H", 3) + b"\x01\x00\x05Hel"
        with pytest.raises(TruncatedStream):
            read_constants(ClassStream(io.BytesIO(data)))

    def test_unresolvable_class_entries(self):
        # Class 1 names slot 9 (out of range), Class 2 names an Integer
        out = bytearray(struct.pack(">H", 4))
        out += b"\x07" + struct.pack(">H", 9)
        out += b"\x07" + struct.pack(">H", 3)
        out += b"\x03" + struct.pack(">i", 42)
        constants = read_constants(ClassStream(io.BytesIO(bytes(out))))
        assert constants.fwd == {}
        assert constants.rev == {}
        for index in (1, 2):
            with pytest.raises(ClassFormatError):
                constants[index]

    def test_debug_dump_only_when_enabled(self, caplog):
        cp = ConstantPool()
        cp.add_utf8("Code")
        caplog.set_level(logging.WARNING, logger="pyjlines.constants")
        read_pool(cp)
        assert "fwd(" not in caplog.text
        caplog.set_level(logging.DEBUG, logger="pyjlines.constants")
        read_pool(cp)
        assert "fwd(1) rev(1) [1]" in caplog.text
