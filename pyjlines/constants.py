"""
Constant pool reader.

Only text is kept: CONSTANT_Utf8 entries, and CONSTANT_Class entries once
their name has been resolved. Everything else is skipped by its fixed size.
"""

import logging

from .classfile import ConstantPoolTag
from .errors import ClassFormatError, UnsupportedConstantTag
from .stream import ClassStream

logger = logging.getLogger(__name__)

# Payload size in bytes and number of pool slots for entries that are skipped
_SKIPPED = {
    ConstantPoolTag.INTEGER: (4, 1),
    ConstantPoolTag.FLOAT: (4, 1),
    ConstantPoolTag.LONG: (8, 2),
    ConstantPoolTag.DOUBLE: (8, 2),
    ConstantPoolTag.STRING: (2, 1),
    ConstantPoolTag.FIELDREF: (4, 1),
    ConstantPoolTag.METHODREF: (4, 1),
    ConstantPoolTag.INTERFACE_METHODREF: (4, 1),
    ConstantPoolTag.NAME_AND_TYPE: (4, 1),
    ConstantPoolTag.METHOD_HANDLE: (3, 1),
    ConstantPoolTag.METHOD_TYPE: (2, 1),
    ConstantPoolTag.INVOKE_DYNAMIC: (4, 1),
}


class Constants:
    """Index <-> string view of one class file's constant pool."""

    def __init__(self, count: int):
        self.count = count
        self.fwd: dict[int, str] = {}
        self.rev: dict[str, int] = {}
        self._xref: dict[int, int] = {}
        self._next_idx = 1

    @property
    def is_done(self) -> bool:
        return self._next_idx >= self.count

    def __contains__(self, value: str) -> bool:
        return value in self.rev

    def __getitem__(self, index: int) -> str:
        try:
            return self.fwd[index]
        except KeyError:
            raise ClassFormatError(f"no string constant at index {index}") from None

    def index_of(self, value: str) -> int:
        """Index of the first entry that produced ``value``."""
        return self.rev[value]

    def _put(self, index: int, value: str):
        if value not in self.rev:
            self.rev[value] = index
        self.fwd[index] = value

    def read_one(self, d: ClassStream):
        tag = d.read_u1()
        if tag == ConstantPoolTag.UTF8:
            self._put(self._next_idx, d.read_utf())
            self._next_idx += 1
        elif tag == ConstantPoolTag.CLASS:
            self._xref[self._next_idx] = d.read_u2()
            self._next_idx += 1
        elif tag in _SKIPPED:
            size, slots = _SKIPPED[tag]
            d.skip(size)
            self._next_idx += slots
        else:
            raise UnsupportedConstantTag(tag)

    def resolve(self):
        """Copy each Class entry's name onto the Class entry's own index."""
        for index, name_index in self._xref.items():
            name = self.fwd.get(name_index)
            if name is not None:
                self._put(index, name)
        self._xref.clear()


def read_constants(d: ClassStream) -> Constants:
    """Read the constant pool, starting at its u2 count."""
    count = d.read_u2()
    logger.debug("reading %d constants", count)
    constants = Constants(count)
    while not constants.is_done:
        constants.read_one(d)
    constants.resolve()
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("fwd(%d) rev(%d) %s", len(constants.fwd), len(constants.rev),
                     sorted(constants.fwd))
    return constants
