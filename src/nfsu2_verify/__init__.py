"""NFSU2 Verify - read-only save file checks."""
from .logic import verify_save

__all__ = ["verify_save"]
