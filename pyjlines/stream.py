"""
Big-endian primitive reader over a binary stream.
"""

import struct
from typing import BinaryIO

from .errors import TruncatedStream
from .mutf8 import decode_modified_utf8

_SKIP_CHUNK = 64 * 1024


class ClassStream:
    """Reads class file primitives from a file-like object.

    Every read either returns exactly the requested number of bytes or raises
    ``TruncatedStream``.
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.pos = 0

    def _read_exact(self, length: int) -> bytes:
        data = self.stream.read(length) or b""
        # Raw streams may return short reads before EOF
        while len(data) < length:
            more = self.stream.read(length - len(data))
            if not more:
                self.pos += len(data)
                raise TruncatedStream(length, len(data))
            data += more
        self.pos += length
        return data

    def read_u1(self) -> int:
        return self._read_exact(1)[0]

    def read_u2(self) -> int:
        return struct.unpack(">H", self._read_exact(2))[0]

    def read_u4(self) -> int:
        return struct.unpack(">I", self._read_exact(4))[0]

    def read_utf(self) -> str:
        """Read a u2 length followed by that many bytes of modified UTF-8."""
        length = self.read_u2()
        return decode_modified_utf8(self._read_exact(length))

    def skip(self, length: int):
        """Consume and discard exactly ``length`` bytes."""
        remaining = length
        while remaining > 0:
            chunk = self.stream.read(min(remaining, _SKIP_CHUNK))
            if not chunk:
                raise TruncatedStream(length, length - remaining)
            self.pos += len(chunk)
            remaining -= len(chunk)

    def close(self):
        self.stream.close()
