import struct
from types import SimpleNamespace

import pytest

from conftest import SAVE_LEN, build_save
from nfsu2_core.errors import CorruptDataError, FormatError, SaveIOError
from nfsu2_core.protocol import (
    MONEY_OFFSET,
    NUM_CAR_SLOTS,
    PERFORMANCE_LEN,
    Performance,
    car_slot_offset,
    performance_offset,
)
from nfsu2_edit import record as record_mod
from nfsu2_edit.record import SaveRecord


def test_load_reports_fields(save_file):
    save = SaveRecord.load(save_file())
    assert save.size == SAVE_LEN
    assert save.get_profile_username() == "RACER"
    assert save.get_money() == 0
    assert save.car_slots_used() == 1


def test_set_money_bytes():
    save = SaveRecord.from_bytes(build_save())
    save.set_money(5000)
    assert save.raw[MONEY_OFFSET:MONEY_OFFSET + 4] == bytes([0x88, 0x13, 0x00, 0x00])
    assert save.get_money() == 5000


@pytest.mark.parametrize("value", [0, -1, -(2 ** 31), 2 ** 31 - 1, 123456])
def test_money_set_get(value):
    save = SaveRecord.from_bytes(build_save())
    save.set_money(value)
    assert save.get_money() == value


@pytest.mark.parametrize("value", [2 ** 31, -(2 ** 31) - 1])
def test_money_out_of_int32_range(value):
    save = SaveRecord.from_bytes(build_save())
    with pytest.raises(ValueError):
        save.set_money(value)
    assert save.get_money() == 0


def test_bad_magic_rejected():
    raw = build_save()
    raw[0:4] = b"20CN"
    with pytest.raises(FormatError, match="not a valid save file"):
        SaveRecord.from_bytes(raw)


def test_bad_size_field_rejected():
    raw = build_save()
    struct.pack_into("<H", raw, 4, (SAVE_LEN + 1) & 0xFFFF)
    with pytest.raises(FormatError):
        SaveRecord.from_bytes(raw)


def test_size_field_uses_low_16_bits():
    raw = build_save(length=0x1E000)
    assert raw[4:6] == b"\x00\xe0"
    assert SaveRecord.from_bytes(raw).size == 0x1E000


def test_tiny_buffer_rejected():
    with pytest.raises(FormatError):
        SaveRecord.from_bytes(b"20CM")


@pytest.mark.parametrize("slots", [(), (0,), (4,), (1, 3), (0, 2, 4), (0, 1, 2, 3, 4)])
def test_slot_counting(slots):
    save = SaveRecord.from_bytes(build_save(slots=slots))
    assert save.car_slots_used() == len(slots)
    assert [save.slot_used(i) for i in range(NUM_CAR_SLOTS)] == [i in slots for i in range(NUM_CAR_SLOTS)]


def test_slot_count_follows_buffer():
    save = SaveRecord.from_bytes(build_save(slots=(0,)))
    save.raw[car_slot_offset(2) + 1] = 0x07
    assert save.car_slots_used() == 2


@pytest.mark.parametrize("mode,value", [(Performance.MAX, 0x01), (Performance.NILL, 0x00)])
def test_change_car_performance_touches_one_block(mode, value):
    raw = build_save(slots=(0, 1, 2))
    for i in range(NUM_CAR_SLOTS):
        off = performance_offset(i)
        raw[off:off + PERFORMANCE_LEN] = bytes([0x05]) * PERFORMANCE_LEN
    before = bytes(raw)

    save = SaveRecord.from_bytes(raw)
    save.change_car_performance(1, mode)

    start = performance_offset(1)
    end = start + PERFORMANCE_LEN
    assert save.get_car_performance(1) == bytes([value]) * PERFORMANCE_LEN
    assert bytes(save.raw[:start]) == before[:start]
    assert bytes(save.raw[end:]) == before[end:]


@pytest.mark.parametrize("index", [-1, 5, 100])
def test_change_car_performance_out_of_range_is_noop(index):
    raw = build_save()
    save = SaveRecord.from_bytes(raw)
    save.change_car_performance(index, Performance.MAX)
    assert bytes(save) == bytes(raw)


def test_slot_accessors_reject_bad_index():
    save = SaveRecord.from_bytes(build_save())
    with pytest.raises(IndexError):
        save.slot_used(5)
    with pytest.raises(IndexError):
        save.get_car_performance(-1)


def test_truncated_buffer_raises_corrupt():
    save = SaveRecord.from_bytes(build_save(length=0x100))
    with pytest.raises(CorruptDataError):
        save.get_profile_username()
    with pytest.raises(CorruptDataError):
        save.get_money()
    with pytest.raises(CorruptDataError):
        save.car_slots_used()


def test_unterminated_username_raises_corrupt():
    raw = build_save(length=0xD228, username=b"")
    raw[0xD225:] = b"ABC"
    save = SaveRecord.from_bytes(raw)
    with pytest.raises(CorruptDataError, match="Unterminated"):
        save.get_profile_username()


def test_latin1_username():
    save = SaveRecord.from_bytes(build_save(username=b"J\xf6rg"))
    assert save.get_profile_username() == "Jörg"


def test_round_trip_without_changes(save_file):
    p = save_file()
    original = p.read_bytes()
    with SaveRecord.load(p) as save:
        save.get_money()
    assert save.saved is True
    assert p.read_bytes() == original


def test_close_writes_changes_once(save_file):
    p = save_file()
    with SaveRecord.load(p) as save:
        save.set_money(42)
        save.change_car_performance(0, Performance.MAX)

    data = p.read_bytes()
    assert data[MONEY_OFFSET:MONEY_OFFSET + 4] == struct.pack("<i", 42)
    assert data[performance_offset(0):performance_offset(0) + PERFORMANCE_LEN] == b"\x01" * PERFORMANCE_LEN

    assert save.close() is True
    with pytest.raises(ValueError):
        save.set_money(1)
    with pytest.raises(ValueError):
        save.change_car_performance(0, Performance.NILL)


def test_close_flushes_on_exception(save_file):
    p = save_file()
    with pytest.raises(RuntimeError):
        with SaveRecord.load(p) as save:
            save.set_money(7)
            raise RuntimeError("boom")
    assert SaveRecord.load(p).get_money() == 7


def test_unwritable_destination_warns(save_file):
    p = save_file()
    save = SaveRecord.load(p)
    save.set_money(9)
    p.unlink()
    p.mkdir()

    with pytest.warns(UserWarning, match="Changes not saved"):
        assert save.close() is False
    assert save.closed


def test_missing_file_raises_io_error(tmp_path):
    with pytest.raises(SaveIOError, match="cannot be read"):
        SaveRecord.load(tmp_path / "nope")


def test_short_read_raises_io_error(save_file, monkeypatch):
    p = save_file()
    real = p.stat().st_size
    monkeypatch.setattr(record_mod.os, "fstat", lambda fd: SimpleNamespace(st_size=real + 16))
    with pytest.raises(SaveIOError, match="short read"):
        SaveRecord.load(p)


def test_short_write_warns(save_file, monkeypatch):
    p = save_file()
    save = SaveRecord.load(p)

    class ShortFile:
        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def write(self, data):
            return len(data) - 1

    monkeypatch.setattr(record_mod, "open", lambda *a, **kw: ShortFile(), raising=False)
    with pytest.warns(UserWarning, match="short write"):
        assert save.close() is False


def test_in_memory_record_is_not_saved():
    save = SaveRecord.from_bytes(build_save())
    assert save.close() is False
