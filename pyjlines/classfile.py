"""
Java class file constants and a small class file writer.

The writer only knows about the structures that matter for source locations
(Code, LineNumberTable, SourceFile) plus enough of the rest of the format to
produce well-formed files around them.
"""

import struct
from dataclasses import dataclass, field
from typing import Optional
from enum import IntEnum, IntFlag

from .mutf8 import encode_modified_utf8


MAGIC = 0xCAFEBABE


class ClassFileVersion:
    JAVA_8 = (52, 0)


class AccessFlags(IntFlag):
    PUBLIC = 0x0001
    PRIVATE = 0x0002
    PROTECTED = 0x0004
    STATIC = 0x0008
    FINAL = 0x0010
    SUPER = 0x0020  # For classes (invokespecial semantics)
    SYNCHRONIZED = 0x0020  # For methods
    INTERFACE = 0x0200
    ABSTRACT = 0x0400
    SYNTHETIC = 0x1000


class ConstantPoolTag(IntEnum):
    UTF8 = 1
    INTEGER = 3
    FLOAT = 4
    LONG = 5
    DOUBLE = 6
    CLASS = 7
    STRING = 8
    FIELDREF = 9
    METHODREF = 10
    INTERFACE_METHODREF = 11
    NAME_AND_TYPE = 12
    METHOD_HANDLE = 15
    METHOD_TYPE = 16
    INVOKE_DYNAMIC = 18


class ConstantPool:
    """Manages the constant pool for a class file."""

    def __init__(self):
        self._entries: list[tuple] = [None]  # 1-indexed
        self._cache: dict = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _add(self, entry: tuple) -> int:
        key = entry
        if key in self._cache:
            return self._cache[key]
        idx = len(self._entries)
        self._entries.append(entry)
        self._cache[key] = idx
        # Long and Double take two slots
        if entry[0] in (ConstantPoolTag.LONG, ConstantPoolTag.DOUBLE):
            self._entries.append(None)
        return idx

    def add_utf8(self, value: str) -> int:
        return self._add((ConstantPoolTag.UTF8, value))

    def add_integer(self, value: int) -> int:
        return self._add((ConstantPoolTag.INTEGER, value))

    def add_float(self, value: float) -> int:
        return self._add((ConstantPoolTag.FLOAT, value))

    def add_long(self, value: int) -> int:
        return self._add((ConstantPoolTag.LONG, value))

    def add_double(self, value: float) -> int:
        return self._add((ConstantPoolTag.DOUBLE, value))

    def add_class(self, internal_name: str) -> int:
        name_idx = self.add_utf8(internal_name)
        return self._add((ConstantPoolTag.CLASS, name_idx))

    def add_string(self, value: str) -> int:
        utf8_idx = self.add_utf8(value)
        return self._add((ConstantPoolTag.STRING, utf8_idx))

    def add_name_and_type(self, name: str, descriptor: str) -> int:
        name_idx = self.add_utf8(name)
        desc_idx = self.add_utf8(descriptor)
        return self._add((ConstantPoolTag.NAME_AND_TYPE, name_idx, desc_idx))

    def add_fieldref(self, class_name: str, field_name: str, descriptor: str) -> int:
        class_idx = self.add_class(class_name)
        nat_idx = self.add_name_and_type(field_name, descriptor)
        return self._add((ConstantPoolTag.FIELDREF, class_idx, nat_idx))

    def add_methodref(self, class_name: str, method_name: str, descriptor: str) -> int:
        class_idx = self.add_class(class_name)
        nat_idx = self.add_name_and_type(method_name, descriptor)
        return self._add((ConstantPoolTag.METHODREF, class_idx, nat_idx))

    def add_interface_methodref(self, class_name: str, method_name: str, descriptor: str) -> int:
        class_idx = self.add_class(class_name)
        nat_idx = self.add_name_and_type(method_name, descriptor)
        return self._add((ConstantPoolTag.INTERFACE_METHODREF, class_idx, nat_idx))

    def add_method_handle(self, kind: int, class_name: str, method_name: str, descriptor: str) -> int:
        ref_idx = self.add_methodref(class_name, method_name, descriptor)
        return self._add((ConstantPoolTag.METHOD_HANDLE, kind, ref_idx))

    def add_method_type(self, descriptor: str) -> int:
        desc_idx = self.add_utf8(descriptor)
        return self._add((ConstantPoolTag.METHOD_TYPE, desc_idx))

    def add_invoke_dynamic(self, bootstrap_idx: int, name: str, descriptor: str) -> int:
        nat_idx = self.add_name_and_type(name, descriptor)
        return self._add((ConstantPoolTag.INVOKE_DYNAMIC, bootstrap_idx, nat_idx))

    def write(self, out: bytearray):
        out.extend(struct.pack(">H", len(self._entries)))
        for entry in self._entries[1:]:
            if entry is None:
                continue
            tag = entry[0]
            out.append(tag)
            if tag == ConstantPoolTag.UTF8:
                data = encode_modified_utf8(entry[1])
                out.extend(struct.pack(">H", len(data)))
                out.extend(data)
            elif tag == ConstantPoolTag.INTEGER:
                out.extend(struct.pack(">i", entry[1]))
            elif tag == ConstantPoolTag.FLOAT:
                out.extend(struct.pack(">f", entry[1]))
            elif tag == ConstantPoolTag.LONG:
                out.extend(struct.pack(">q", entry[1]))
            elif tag == ConstantPoolTag.DOUBLE:
                out.extend(struct.pack(">d", entry[1]))
            elif tag in (ConstantPoolTag.CLASS, ConstantPoolTag.STRING,
                         ConstantPoolTag.METHOD_TYPE):
                out.extend(struct.pack(">H", entry[1]))
            elif tag == ConstantPoolTag.METHOD_HANDLE:
                out.extend(struct.pack(">BH", entry[1], entry[2]))
            elif tag in (ConstantPoolTag.FIELDREF, ConstantPoolTag.METHODREF,
                         ConstantPoolTag.INTERFACE_METHODREF, ConstantPoolTag.NAME_AND_TYPE,
                         ConstantPoolTag.INVOKE_DYNAMIC):
                out.extend(struct.pack(">HH", entry[1], entry[2]))


def _write_attribute(cp: ConstantPool, out: bytearray, name: str, data: bytes):
    out.extend(struct.pack(">H", cp.add_utf8(name)))
    out.extend(struct.pack(">I", len(data)))
    out.extend(data)


@dataclass
class ExceptionTableEntry:
    """An entry in the exception table."""
    start_pc: int
    end_pc: int
    handler_pc: int
    catch_type: int  # 0 for finally (catches all), otherwise constant pool index of class


@dataclass
class CodeAttribute:
    """Code attribute for a method."""
    max_stack: int = 0
    max_locals: int = 0
    code: bytes = b"\xb1"  # return
    exception_table: list[ExceptionTableEntry] = field(default_factory=list)
    line_numbers: list[tuple[int, int]] = field(default_factory=list)  # (start_pc, line)
    # Extra nested attributes written verbatim before the LineNumberTable
    attributes: list[tuple[str, bytes]] = field(default_factory=list)

    def write(self, cp: ConstantPool, out: bytearray):
        data = bytearray()
        data.extend(struct.pack(">H", self.max_stack))
        data.extend(struct.pack(">H", self.max_locals))
        data.extend(struct.pack(">I", len(self.code)))
        data.extend(self.code)
        data.extend(struct.pack(">H", len(self.exception_table)))
        for entry in self.exception_table:
            data.extend(struct.pack(">HHHH",
                entry.start_pc, entry.end_pc, entry.handler_pc, entry.catch_type))

        data.extend(struct.pack(">H", len(self.attributes) + (1 if self.line_numbers else 0)))
        for name, payload in self.attributes:
            _write_attribute(cp, data, name, payload)
        if self.line_numbers:
            table = bytearray(struct.pack(">H", len(self.line_numbers)))
            for start_pc, line in self.line_numbers:
                table.extend(struct.pack(">HH", start_pc, line))
            _write_attribute(cp, data, "LineNumberTable", table)

        _write_attribute(cp, out, "Code", data)


@dataclass
class MethodInfo:
    """Method in a class file."""
    access_flags: int
    name: str
    descriptor: str
    code: Optional[CodeAttribute] = None
    signature: Optional[str] = None

    def write(self, cp: ConstantPool, out: bytearray):
        name_idx = cp.add_utf8(self.name)
        desc_idx = cp.add_utf8(self.descriptor)
        out.extend(struct.pack(">H", self.access_flags))
        out.extend(struct.pack(">H", name_idx))
        out.extend(struct.pack(">H", desc_idx))

        attr_count = 0
        if self.code:
            attr_count += 1
        if self.signature:
            attr_count += 1

        out.extend(struct.pack(">H", attr_count))
        if self.signature:
            _write_signature_attribute(cp, out, self.signature)
        if self.code:
            self.code.write(cp, out)


@dataclass
class FieldInfo:
    """Field in a class file."""
    access_flags: int
    name: str
    descriptor: str
    signature: Optional[str] = None
    constant_value: Optional[tuple[int, any]] = None  # (tag, value)

    def write(self, cp: ConstantPool, out: bytearray):
        name_idx = cp.add_utf8(self.name)
        desc_idx = cp.add_utf8(self.descriptor)
        out.extend(struct.pack(">H", self.access_flags))
        out.extend(struct.pack(">H", name_idx))
        out.extend(struct.pack(">H", desc_idx))

        attr_count = 0
        if self.signature:
            attr_count += 1
        if self.constant_value is not None:
            attr_count += 1

        out.extend(struct.pack(">H", attr_count))
        if self.signature:
            _write_signature_attribute(cp, out, self.signature)
        if self.constant_value is not None:
            _write_constant_value_attribute(cp, out, self.constant_value)


def _write_signature_attribute(cp: ConstantPool, out: bytearray, signature: str):
    """Write a Signature attribute."""
    sig_idx = cp.add_utf8(signature)
    _write_attribute(cp, out, "Signature", struct.pack(">H", sig_idx))


def _write_constant_value_attribute(cp: ConstantPool, out: bytearray, const: tuple[int, any]):
    """Write a ConstantValue attribute from (tag, value)."""
    tag, value = const
    if tag == ConstantPoolTag.INTEGER:
        idx = cp.add_integer(int(value))
    elif tag == ConstantPoolTag.LONG:
        idx = cp.add_long(int(value))
    elif tag == ConstantPoolTag.FLOAT:
        idx = cp.add_float(float(value))
    elif tag == ConstantPoolTag.DOUBLE:
        idx = cp.add_double(float(value))
    elif tag == ConstantPoolTag.STRING:
        idx = cp.add_string(str(value))
    else:
        raise ValueError(f"Unsupported constant value tag: {tag}")
    _write_attribute(cp, out, "ConstantValue", struct.pack(">H", idx))


class ClassFile:
    """Represents a Java class file."""

    MAGIC = MAGIC

    def __init__(self, name: str, super_class: str = "java/lang/Object",
                 version: tuple[int, int] = ClassFileVersion.JAVA_8,
                 source_file: Optional[str] = None):
        self.version = version
        self.access_flags = AccessFlags.PUBLIC | AccessFlags.SUPER
        self.name = name
        self.super_class = super_class
        self.source_file = source_file
        self.interfaces: list[str] = []
        self.fields: list[FieldInfo] = []
        self.methods: list[MethodInfo] = []
        # Extra class level attributes written verbatim: (name, payload)
        self.attributes: list[tuple[str, bytes]] = []
        self.cp = ConstantPool()

    def add_method(self, method: MethodInfo):
        self.methods.append(method)

    def add_field(self, field_info: FieldInfo):
        self.fields.append(field_info)

    def to_bytes(self) -> bytes:
        # Attribute bodies go to a scratch buffer first so every constant they
        # need is in the pool before the pool is written
        body = bytearray()

        body.extend(struct.pack(">H", self.access_flags))
        body.extend(struct.pack(">H", self.cp.add_class(self.name)))
        super_class_idx = self.cp.add_class(self.super_class) if self.super_class else 0
        body.extend(struct.pack(">H", super_class_idx))

        body.extend(struct.pack(">H", len(self.interfaces)))
        for iface in self.interfaces:
            body.extend(struct.pack(">H", self.cp.add_class(iface)))

        body.extend(struct.pack(">H", len(self.fields)))
        for fld in self.fields:
            fld.write(self.cp, body)

        body.extend(struct.pack(">H", len(self.methods)))
        for method in self.methods:
            method.write(self.cp, body)

        attr_count = len(self.attributes) + (1 if self.source_file else 0)
        body.extend(struct.pack(">H", attr_count))
        for name, payload in self.attributes:
            _write_attribute(self.cp, body, name, payload)
        if self.source_file:
            sf_idx = self.cp.add_utf8(self.source_file)
            _write_attribute(self.cp, body, "SourceFile", struct.pack(">H", sf_idx))

        out = bytearray()
        out.extend(struct.pack(">I", self.MAGIC))
        out.extend(struct.pack(">HH", self.version[1], self.version[0]))
        self.cp.write(out)
        out.extend(body)
        return bytes(out)

    def write(self, path: str):
        with open(path, "wb") as f:
            f.write(self.to_bytes())
