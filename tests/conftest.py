import struct

import pytest

from nfsu2_core.protocol import (
    MAGIC_SAVE_FILE,
    HEADER_FMT,
    SIZE_FIELD_MASK,
    USERNAME_OFFSET,
    car_slot_offset,
)

SAVE_LEN = 0xE000


def build_save(length: int = SAVE_LEN, username: bytes = b"RACER", slots=(0,)) -> bytearray:
    raw = bytearray(length)
    struct.pack_into(HEADER_FMT, raw, 0, MAGIC_SAVE_FILE, length & SIZE_FIELD_MASK)
    if length > USERNAME_OFFSET + len(username):
        raw[USERNAME_OFFSET:USERNAME_OFFSET + len(username) + 1] = username + b"\x00"
    for i in slots:
        off = car_slot_offset(i)
        if off + 2 <= length:
            raw[off:off + 2] = b"\x01\x00"
    return raw


@pytest.fixture
def save_file(tmp_path):
    def _make(name="SAVE", **kwargs):
        p = tmp_path / name
        p.write_bytes(bytes(build_save(**kwargs)))
        return p
    return _make
