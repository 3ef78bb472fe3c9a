"""Big-endian scalar reading helpers for DVI byte streams."""

import struct
from typing import Dict

from .errors import OutOfBounds

# struct has no 3-byte code; width 3 is assembled from a byte and a halfword.
_FORMATS: Dict[int, str] = {1: ">B", 2: ">H", 3: ">BH", 4: ">I"}


def sign_extend(value: int, width: int) -> int:
    """Interpret ``value`` as a two's-complement integer ``width`` bytes wide."""
    bits = 8 * width
    if value & (1 << (bits - 1)):
        return value - (1 << bits)
    return value


class Decoder:
    def __init__(self, buf: bytes) -> None:
        self.buf, self.pos = buf, 0

    def get_pos(self) -> int:
        return self.pos

    def has_more(self) -> bool:
        return self.pos < len(self.buf)

    def remaining(self) -> int:
        return len(self.buf) - self.pos

    def _require(self, count: int) -> None:
        if self.remaining() < count:
            raise OutOfBounds(self.pos, count, self.remaining())

    def _unpack_at(self, width: int) -> int:
        try:
            fmt = _FORMATS[width]
        except KeyError as exc:
            raise ValueError(f"Unsupported scalar width: {width}") from exc
        self._require(width)
        items = struct.unpack_from(fmt, self.buf, self.pos)
        if width == 3:
            hi, lo = items
            return (hi << 16) | lo
        return items[0]

    def peek(self, width: int = 1) -> int:
        return self._unpack_at(width)

    def unsigned(self, width: int) -> int:
        value = self._unpack_at(width)
        self.pos += width
        return value

    def signed(self, width: int) -> int:
        return sign_extend(self.unsigned(width), width)

    def unsigned_byte(self) -> int:
        return self.unsigned(1)

    def unsigned_word_be(self) -> int:
        return self.unsigned(2)

    def unsigned_u24_be(self) -> int:
        return self.unsigned(3)

    def unsigned_dword_be(self) -> int:
        return self.unsigned(4)

    def raw(self, count: int) -> bytes:
        self._require(count)
        chunk = bytes(self.buf[self.pos : self.pos + count])
        self.pos += count
        return chunk


class Encoder:
    def __init__(self) -> None:
        self.buf = bytearray()

    def _pack(self, width: int, item: int) -> None:
        if not 0 <= item < (1 << (8 * width)):
            raise ValueError(f"Value {item:#x} does not fit in {width} bytes")
        self.buf += item.to_bytes(width, "big")

    def unsigned(self, width: int, value: int) -> "Encoder":
        self._pack(width, value)
        return self

    def signed(self, width: int, value: int) -> "Encoder":
        self._pack(width, value & ((1 << (8 * width)) - 1))
        return self

    def unsigned_byte(self, value: int) -> "Encoder":
        return self.unsigned(1, value)

    def unsigned_dword_be(self, value: int) -> "Encoder":
        return self.unsigned(4, value)

    def raw(self, data: bytes) -> "Encoder":
        self.buf += data
        return self
