import hashlib
import struct
from pathlib import Path

from nfsu2_core.errors import CorruptDataError, SaveIOError
from nfsu2_core.protocol import HEADER_FMT, HEADER_LEN, MAGIC_SAVE_FILE, NUM_CAR_SLOTS, SIZE_FIELD_MASK
from nfsu2_edit.record import SaveRecord, read_save_bytes
from .const import ERRORS

def _fail(errors: list, size=None, sha256=None) -> dict:
    return {"status":"FAIL","error_count":len(errors),"errors":errors,"size":size,"sha256":sha256}

def _header_errors(raw: bytes) -> list:
    # Report both header checks separately; SaveRecord folds them into one FormatError.
    if len(raw) < HEADER_LEN:
        return [{"code":"E_MAGIC","message":ERRORS["E_MAGIC"],"found":raw[:4].hex()}]
    errors = []
    magic, size_low = struct.unpack_from(HEADER_FMT, raw, 0)
    if magic != MAGIC_SAVE_FILE:
        errors.append({"code":"E_MAGIC","message":ERRORS["E_MAGIC"],"found":magic.hex()})
    if size_low != len(raw) & SIZE_FIELD_MASK:
        errors.append({"code":"E_SIZE_FIELD","message":ERRORS["E_SIZE_FIELD"],
                       "expected":len(raw) & SIZE_FIELD_MASK,"found":size_low})
    return errors

def verify_save(save_path: Path) -> dict:
    """Check a save file without modifying it."""
    errors = []
    if not save_path.is_file():
        errors.append({"code":"E_LAYOUT_MISSING","message":ERRORS["E_LAYOUT_MISSING"],"path":str(save_path)})
        return _fail(errors)

    try:
        raw = read_save_bytes(save_path)
    except SaveIOError as e:
        errors.append({"code":"E_READ","message":ERRORS["E_READ"],"detail":str(e)})
        return _fail(errors)

    size = len(raw)
    digest = hashlib.sha256(raw).hexdigest()

    errors = _header_errors(raw)
    if errors:
        return _fail(errors, size, digest)

    try:
        record = SaveRecord.from_bytes(raw, save_path)
        record.get_profile_username()
        record.get_money()
        for i in range(NUM_CAR_SLOTS):
            record.get_car_performance(i)
    except CorruptDataError as e:
        errors.append({"code":"E_TRUNCATED","message":ERRORS["E_TRUNCATED"],"detail":str(e)})
        return _fail(errors, size, digest)

    return {"status":"PASS","error_count":0,"errors":[],"size":size,"sha256":digest}
