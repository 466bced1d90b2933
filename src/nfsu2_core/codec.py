"""Checked decode/encode helpers over a save buffer."""
from __future__ import annotations

import struct

from .errors import CorruptDataError


def check_range(buf: bytes | bytearray, offset: int, length: int) -> None:
    """Raise CorruptDataError unless [offset, offset + length) lies inside buf."""
    if offset < 0 or length < 0 or offset + length > len(buf):
        raise CorruptDataError(
            f"Field at 0x{offset:X} (+0x{length:X}) outside buffer of 0x{len(buf):X} bytes"
        )


def read_bytes(buf: bytes | bytearray, offset: int, length: int) -> bytes:
    check_range(buf, offset, length)
    return bytes(buf[offset:offset + length])


def fill_bytes(buf: bytearray, offset: int, length: int, value: int) -> None:
    check_range(buf, offset, length)
    buf[offset:offset + length] = bytes([value]) * length


def unpack_at(fmt: str, buf: bytes | bytearray, offset: int) -> tuple:
    check_range(buf, offset, struct.calcsize(fmt))
    return struct.unpack_from(fmt, buf, offset)


def pack_at(fmt: str, buf: bytearray, offset: int, *values) -> None:
    check_range(buf, offset, struct.calcsize(fmt))
    try:
        struct.pack_into(fmt, buf, offset, *values)
    except struct.error as e:
        raise ValueError(f"Cannot encode {values!r} as {fmt!r}: {e}") from e


def read_cstring(buf: bytes | bytearray, offset: int, encoding: str) -> str:
    """Decode bytes from offset up to the first NUL.

    The terminator must lie inside the buffer.
    """
    check_range(buf, offset, 1)
    end = buf.find(b"\x00", offset)
    if end == -1:
        raise CorruptDataError(f"Unterminated string at 0x{offset:X}")
    return bytes(buf[offset:end]).decode(encoding)
