"""
Modified UTF-8, the string encoding used for CONSTANT_Utf8 entries.

Differs from standard UTF-8 in two ways: NUL is written as the two bytes
C0 80, and characters outside the BMP are written as a surrogate pair, each
half encoded as its own three byte sequence.
"""

from .errors import ClassFormatError


def decode_modified_utf8(data: bytes) -> str:
    """Decode a modified UTF-8 byte string."""
    units = []
    i = 0
    n = len(data)
    while i < n:
        b = data[i]
        if b < 0x80:
            units.append(b)
            i += 1
        elif b >> 5 == 0b110:
            if i + 1 >= n or data[i + 1] >> 6 != 0b10:
                raise ClassFormatError(f"malformed modified UTF-8 at byte {i}")
            units.append(((b & 0x1F) << 6) | (data[i + 1] & 0x3F))
            i += 2
        elif b >> 4 == 0b1110:
            if i + 2 >= n or data[i + 1] >> 6 != 0b10 or data[i + 2] >> 6 != 0b10:
                raise ClassFormatError(f"malformed modified UTF-8 at byte {i}")
            units.append(((b & 0x0F) << 12) | ((data[i + 1] & 0x3F) << 6) | (data[i + 2] & 0x3F))
            i += 3
        else:
            raise ClassFormatError(f"malformed modified UTF-8 at byte {i}")

    # Units are UTF-16 code units; let the codec pair up surrogates
    raw = b"".join(u.to_bytes(2, "big") for u in units)
    return raw.decode("utf-16-be", errors="surrogatepass")


def encode_modified_utf8(value: str) -> bytes:
    """Encode a string as modified UTF-8."""
    out = bytearray()
    raw = value.encode("utf-16-be", errors="surrogatepass")
    for i in range(0, len(raw), 2):
        unit = (raw[i] << 8) | raw[i + 1]
        if 0 < unit < 0x80:
            out.append(unit)
        elif unit < 0x800:
            out.append(0xC0 | (unit >> 6))
            out.append(0x80 | (unit & 0x3F))
        else:
            out.append(0xE0 | (unit >> 12))
            out.append(0x80 | ((unit >> 6) & 0x3F))
            out.append(0x80 | (unit & 0x3F))
    return bytes(out)
