"""Generate a synthetic NFSU2 save for demos and end-to-end tests."""
import struct
import sys
from pathlib import Path

from nfsu2_core.protocol import (
    MAGIC_SAVE_FILE,
    HEADER_FMT,
    SIZE_FIELD_MASK,
    USERNAME_OFFSET,
    MONEY_OFFSET,
    MONEY_FMT,
    car_slot_offset,
)

SAVE_LEN = 0xE000


def generate_save(out_path: str, username: str = "RACER", money: int = 0, slots: tuple[int, ...] = (0,)) -> Path:
    raw = bytearray(SAVE_LEN)
    struct.pack_into(HEADER_FMT, raw, 0, MAGIC_SAVE_FILE, SAVE_LEN & SIZE_FIELD_MASK)
    struct.pack_into(MONEY_FMT, raw, MONEY_OFFSET, money)

    name = username.encode("latin-1")
    raw[USERNAME_OFFSET:USERNAME_OFFSET + len(name) + 1] = name + b"\x00"

    for i in slots:
        # Any nonzero marker; the game stores a car id here
        raw[car_slot_offset(i):car_slot_offset(i) + 2] = b"\x01\x00"

    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(bytes(raw))

    print(f"GENERATED: {out}")
    return out


if __name__ == "__main__":
    # Usage:
    #   python tools/make_save.py OUT_FILE [--money N] [--slots 0,1,2] [--name NAME]

    args = [a for a in sys.argv[1:] if a]

    def pop_value(arg_list: list[str], flag: str) -> tuple[str | None, list[str]]:
        """Remove a flag and its value from an argv-style list."""
        if flag not in arg_list:
            return None, arg_list
        i = arg_list.index(flag)
        if i + 1 >= len(arg_list):
            raise SystemExit(f"{flag} requires a value")
        return arg_list[i + 1], arg_list[:i] + arg_list[i + 2:]

    money, args = pop_value(args, "--money")
    slots, args = pop_value(args, "--slots")
    name, args = pop_value(args, "--name")

    out = args[0] if len(args) > 0 else "SAVE.bin"
    generate_save(
        out,
        username=name or "RACER",
        money=int(money or 0),
        slots=tuple(int(s) for s in slots.split(",") if s) if slots is not None else (0,),
    )
