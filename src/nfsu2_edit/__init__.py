"""NFSU2 Save Editor - record model, backup and interactive CLI."""
from .record import SaveRecord
from .backup import backup, backup_path

__all__ = ["SaveRecord", "backup", "backup_path"]
