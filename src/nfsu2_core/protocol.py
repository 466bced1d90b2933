"""NFSU2 save file layout constants.

Single source of truth for the on-disk magic and field offsets.
Keep this file stable. Editor and verifier must remain synchronized.
"""
import enum

# File magic ("20CM")
MAGIC_SAVE_FILE = b"20CM"

# Header: [Magic(4) | SizeLow16(2)] = 6 bytes
HEADER_FMT = "<4sH"
HEADER_LEN = 6
SIZE_FIELD_MASK = 0xFFFF

# Profile name is a NUL-terminated Latin-1 string
USERNAME_OFFSET = 0xD225
USERNAME_ENCODING = "latin-1"

# Money is a signed int32
MONEY_OFFSET = 0xA16A
MONEY_FMT = "<i"
MONEY_MIN = -(2 ** 31)
MONEY_MAX = 2 ** 31 - 1

# Car slots: five fixed-size records
CAR_SLOTS_OFFSET = 0x5AEC
CAR_SLOT_LEN = 0x7F2
NUM_CAR_SLOTS = 5
CAR_SLOT_MARKER_LEN = 2

# Individual parts, not packages
PERFORMANCE_OFFSET = 0x94
PERFORMANCE_LEN = 0x44


class Performance(enum.Enum):
    NILL = "nill"
    MAX = "max"


PERFORMANCE_BYTES = {
    Performance.NILL: 0x00,
    Performance.MAX: 0x01,
}


def car_slot_offset(index: int) -> int:
    return CAR_SLOTS_OFFSET + index * CAR_SLOT_LEN


def performance_offset(index: int) -> int:
    return car_slot_offset(index) + PERFORMANCE_OFFSET
