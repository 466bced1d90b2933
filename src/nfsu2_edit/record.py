from __future__ import annotations

import os
import struct
from pathlib import Path
from warnings import warn

from nfsu2_core.codec import fill_bytes, pack_at, read_bytes, read_cstring, unpack_at
from nfsu2_core.errors import FormatError, SaveIOError
from nfsu2_core.protocol import (
    MAGIC_SAVE_FILE,
    HEADER_FMT,
    HEADER_LEN,
    SIZE_FIELD_MASK,
    USERNAME_OFFSET,
    USERNAME_ENCODING,
    MONEY_OFFSET,
    MONEY_FMT,
    MONEY_MIN,
    MONEY_MAX,
    NUM_CAR_SLOTS,
    CAR_SLOT_MARKER_LEN,
    PERFORMANCE_LEN,
    PERFORMANCE_BYTES,
    Performance,
    car_slot_offset,
    performance_offset,
)


def read_save_bytes(path: Path) -> bytes:
    """Read a whole file, failing on a short read."""
    try:
        with open(path, "rb") as f:
            size = os.fstat(f.fileno()).st_size
            raw = f.read(size)
    except OSError as e:
        raise SaveIOError(f'File "{path}" cannot be read') from e

    if len(raw) != size:
        raise SaveIOError(f'File "{path}" short read ({len(raw)} of {size} bytes)')
    return raw


def write_save_bytes(path: Path, raw: bytes | bytearray) -> None:
    """Overwrite path with raw, failing on a short write."""
    try:
        with open(path, "wb") as f:
            written = f.write(raw)
    except OSError as e:
        raise SaveIOError(f'File "{path}" cannot be opened for writing') from e

    if written != len(raw):
        raise SaveIOError(f'File "{path}" short write ({written} of {len(raw)} bytes)')


class SaveRecord:
    """A validated, mutable NFSU2 save buffer.

    - Header (magic and low 16 bits of the size) is checked once, at construction.
    - Every field access goes through checked codecs; out-of-range access
      raises CorruptDataError.
    - The buffer goes back to disk once, on close(). Use as a context manager
      so a session always ends with a flush attempt.
    """

    def __init__(self, raw: bytes | bytearray, path: Path | None = None):
        self.path = Path(path) if path is not None else None
        self.raw = bytearray(raw)
        self.size = len(self.raw)
        self.saved: bool | None = None

        self._validate_header()

    @classmethod
    def load(cls, path: Path) -> SaveRecord:
        path = Path(path)
        return cls(read_save_bytes(path), path)

    @classmethod
    def from_bytes(cls, raw: bytes | bytearray, path: Path | None = None) -> SaveRecord:
        return cls(raw, path)

    def _validate_header(self) -> None:
        where = f'File "{self.path}"' if self.path is not None else "Buffer"
        if self.size < HEADER_LEN:
            raise FormatError(f"{where} not a valid save file")

        magic, size_low = struct.unpack_from(HEADER_FMT, self.raw, 0)
        if magic != MAGIC_SAVE_FILE or size_low != self.size & SIZE_FIELD_MASK:
            raise FormatError(f"{where} not a valid save file")

    # --- lifecycle -------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self.saved is not None

    def _check_live(self) -> None:
        if self.closed:
            raise ValueError("Save record is closed")

    def close(self) -> bool:
        """Write the buffer back to its path. Returns True if it was saved.

        A destination that cannot be written is reported with a warning,
        not raised. Calling close() again returns the first outcome.
        """
        if self.saved is not None:
            return self.saved

        if self.path is None:
            self.saved = False
            return self.saved

        try:
            write_save_bytes(self.path, self.raw)
        except SaveIOError as e:
            warn(f"Changes not saved: {e}")
            self.saved = False
        else:
            self.saved = True
        return self.saved

    def __enter__(self) -> SaveRecord:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __bytes__(self) -> bytes:
        return bytes(self.raw)

    # --- fields ----------------------------------------------------------

    def get_profile_username(self) -> str:
        return read_cstring(self.raw, USERNAME_OFFSET, USERNAME_ENCODING)

    def get_money(self) -> int:
        return unpack_at(MONEY_FMT, self.raw, MONEY_OFFSET)[0]

    def set_money(self, new_money: int) -> None:
        self._check_live()
        if not MONEY_MIN <= new_money <= MONEY_MAX:
            raise ValueError(f"Money {new_money} does not fit in a signed 32-bit field")
        pack_at(MONEY_FMT, self.raw, MONEY_OFFSET, new_money)

    def slot_used(self, index: int) -> bool:
        if not 0 <= index < NUM_CAR_SLOTS:
            raise IndexError(f"Car slot {index} out of range")
        marker = read_bytes(self.raw, car_slot_offset(index), CAR_SLOT_MARKER_LEN)
        return marker != bytes(CAR_SLOT_MARKER_LEN)

    def car_slots_used(self) -> int:
        return sum(1 for i in range(NUM_CAR_SLOTS) if self.slot_used(i))

    def get_car_performance(self, index: int) -> bytes:
        if not 0 <= index < NUM_CAR_SLOTS:
            raise IndexError(f"Car slot {index} out of range")
        return read_bytes(self.raw, performance_offset(index), PERFORMANCE_LEN)

    def change_car_performance(self, index: int, mode: Performance) -> None:
        """Set every part of a car to one tuning state.

        Indexes outside the five slots are ignored.
        """
        self._check_live()
        if index < 0 or index >= NUM_CAR_SLOTS:
            return

        fill_bytes(self.raw, performance_offset(index), PERFORMANCE_LEN, PERFORMANCE_BYTES[mode])

    def summary(self) -> str:
        return (
            f"Profile Name: {self.get_profile_username()}\n"
            f"Money: {self.get_money()}\n"
            f"Car Slots Used: {self.car_slots_used()}"
        )
