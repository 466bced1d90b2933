"""Save file error taxonomy."""


class SaveError(Exception):
    """Base class for every fatal save file error."""


class SaveIOError(SaveError, OSError):
    """Source or destination could not be read or written in full."""


class FormatError(SaveError, ValueError):
    """Magic or embedded size field does not match."""


class CorruptDataError(SaveError, ValueError):
    """A field lies outside the loaded buffer."""
