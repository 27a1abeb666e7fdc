"""
Minimal class file reader for source file and line number extraction.

Works for class files up to format 52:0 (Java 8). Only the SourceFile
attribute and the LineNumberTable attributes nested in Code are decoded;
every other structure is skipped by its declared length.
"""

import logging
from typing import Optional

from .classfile import MAGIC
from .constants import Constants, read_constants
from .errors import ClassFormatError, MalformedHeader
from .result import Result, NoSourceInfo, SourceFile, SourceFileLines
from .stream import ClassStream

logger = logging.getLogger(__name__)


class LineNumberReader:
    """Reads one class file from a ``ClassStream``.

    ``method_filter`` restricts line numbers to methods with exactly that name.
    Errors propagate to the caller; see ``linenumbers.get_info``.
    """

    def __init__(self, stream: ClassStream, method_filter: Optional[str] = None):
        self.d = stream
        self.method_filter = method_filter
        self.constants: Optional[Constants] = None

    def _skip_id(self):
        magic = self.d.read_u4()
        logger.debug("magic=0x%08X", magic)
        if magic != MAGIC:
            raise MalformedHeader(magic)

    def _skip_version(self):
        minor = self.d.read_u2()
        major = self.d.read_u2()
        logger.debug("version=%d:%d", major, minor)

    def _skip_class_info(self):
        self.d.skip(2)  # access flags
        name_idx = self.d.read_u2()
        self.d.skip(2)  # superclass
        logger.debug("class name = %s", self.constants.fwd.get(name_idx))

    def _skip_interfaces(self):
        count = self.d.read_u2()
        self.d.skip(2 * count)

    def _skip_fields(self):
        count = self.d.read_u2()
        logger.debug("skipping %d fields", count)
        for _ in range(count):
            self._skip_member()

    def _skip_member(self):
        """Skip one field_info or method_info."""
        self.d.skip(6)  # access flags, name, descriptor
        for _ in range(self.d.read_u2()):
            self._skip_attribute()

    def _skip_attribute(self):
        self.d.skip(2)  # name
        self.d.skip(self.d.read_u4())

    def _read_methods(self) -> Optional[tuple[int, int]]:
        """Return (min, max) line over all matching methods, or None."""
        count = self.d.read_u2()
        logger.debug("reading %d methods", count)
        c = self.constants

        if "Code" not in c or "LineNumberTable" not in c:
            logger.debug("  (no line numbers, skipped)")
            for _ in range(count):
                self._skip_member()
            return None

        code_tag = c.index_of("Code")
        lnt_tag = c.index_of("LineNumberTable")
        lines = None
        for _ in range(count):
            lines = _merge(lines, self._read_method(code_tag, lnt_tag))
        return lines

    def _read_method(self, code_tag: int, lnt_tag: int) -> Optional[tuple[int, int]]:
        self.d.skip(2)  # access flags
        name_idx = self.d.read_u2()
        self.d.skip(2)  # descriptor
        logger.debug("  method %s", self.constants.fwd.get(name_idx))

        lines = None
        for _ in range(self.d.read_u2()):
            tag = self.d.read_u2()
            length = self.d.read_u4()
            if tag != code_tag or not self._matches_filter(name_idx):
                self.d.skip(length)
                continue
            lines = _merge(lines, self._read_code(lnt_tag))
        return lines

    def _matches_filter(self, name_idx: int) -> bool:
        return self.method_filter is None or self.constants[name_idx] == self.method_filter

    def _read_code(self, lnt_tag: int) -> Optional[tuple[int, int]]:
        self.d.skip(4)  # max stack, max locals
        self.d.skip(self.d.read_u4())  # bytecode
        # exception table: start pc, end pc, handler pc, catch type
        self.d.skip(8 * self.d.read_u2())

        lines = None
        for _ in range(self.d.read_u2()):
            tag = self.d.read_u2()
            length = self.d.read_u4()
            if tag != lnt_tag:
                self.d.skip(length)
                continue
            lines = _merge(lines, self._read_line_number_table())
        logger.debug("    nested attributes yielded %s", lines)
        return lines

    def _read_line_number_table(self) -> Optional[tuple[int, int]]:
        numbers = []
        for _ in range(self.d.read_u2()):
            self.d.skip(2)  # start pc
            numbers.append(self.d.read_u2())
        if not numbers:
            return None
        return min(numbers), max(numbers)

    def _read_source_file(self) -> Optional[str]:
        count = self.d.read_u2()
        logger.debug("reading %d class attributes", count)
        c = self.constants

        if "SourceFile" not in c:
            logger.debug("  (no SourceFile, skipped)")
            for _ in range(count):
                self._skip_attribute()
            return None

        source_tag = c.index_of("SourceFile")
        source = None
        for _ in range(count):
            tag = self.d.read_u2()
            length = self.d.read_u4()
            logger.debug("  tag %s (%d bytes)", c.fwd.get(tag), length)
            if tag != source_tag or source is not None:
                self.d.skip(length)
                continue
            if length < 2:
                raise ClassFormatError(f"SourceFile attribute too short: {length} bytes")
            source = c[self.d.read_u2()]
            self.d.skip(length - 2)
        return source

    def read(self) -> Result:
        """Read the class file and compose the result."""
        self._skip_id()
        self._skip_version()
        self.constants = read_constants(self.d)
        self._skip_class_info()
        self._skip_interfaces()
        self._skip_fields()
        lines = self._read_methods()
        source = self._read_source_file()

        if source is None:
            return NoSourceInfo
        if lines is None:
            return SourceFile(source)
        return SourceFileLines(source, lines[0], lines[1])


def _merge(a: Optional[tuple[int, int]], b: Optional[tuple[int, int]]) -> Optional[tuple[int, int]]:
    if a is None:
        return b
    if b is None:
        return a
    return min(a[0], b[0]), max(a[1], b[1])
