"""NFSU2 Core - Save layout, codecs and errors."""
from .errors import SaveError, SaveIOError, FormatError, CorruptDataError
from .protocol import Performance

__all__ = ["SaveError", "SaveIOError", "FormatError", "CorruptDataError", "Performance"]
