from __future__ import annotations

from pathlib import Path

from nfsu2_edit.record import read_save_bytes, write_save_bytes

BACKUP_SUFFIX = ".bak"


def backup_path(path: Path) -> Path:
    path = Path(path)
    return path.with_name(path.name + BACKUP_SUFFIX)


def backup(in_path: Path, backup_file: Path) -> int:
    """Copy a save byte for byte. Returns the number of bytes copied."""
    raw = read_save_bytes(Path(in_path))
    write_save_bytes(Path(backup_file), raw)
    return len(raw)
