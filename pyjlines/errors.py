"""
Errors raised while decoding a class file.

All of them are caught in one place (``linenumbers.get_info``) and turned into
an ``UnknownSourceFormat`` result.
"""

from typing import Optional


class ClassFormatError(Exception):
    """The input is not a class file this reader understands."""
    pass


class MalformedHeader(ClassFormatError):
    """The input does not start with the class file magic number."""

    def __init__(self, magic: Optional[int] = None):
        self.magic = magic
        super().__init__("not a Java class file")


class TruncatedStream(ClassFormatError):
    """Fewer bytes were available than a structure declared."""

    def __init__(self, expected: int = 0, available: int = 0):
        self.expected = expected
        self.available = available
        super().__init__("class file ends prematurely")


class UnsupportedConstantTag(ClassFormatError):
    """Constant pool entry with a tag this reader does not know."""

    def __init__(self, tag: int):
        self.tag = tag
        super().__init__(f"unknown constant pool tag: {tag}")
