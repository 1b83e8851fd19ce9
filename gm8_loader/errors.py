"""
Exception hierarchy for the GameMaker 8 loader.

Every error raised while decoding is terminal for the load: the loader never
retries and never returns a partial game.
"""

from typing import Optional


class LoadError(Exception):
    """Base class for all load failures."""
    pass


class IoError(LoadError):
    """Raised when the game file cannot be read."""
    pass


class FormatError(LoadError, ValueError):
    """Raised when the file is not a GameMaker 8.0 or 8.1 executable."""
    pass


class TruncatedInput(LoadError):
    """Raised when a read would run past the end of the buffer."""

    def __init__(self, position: int, requested: int, length: int):
        self.position = position
        self.requested = requested
        self.length = length
        super().__init__(
            f"Truncated input: need {requested} bytes at 0x{position:x}, "
            f"buffer length is 0x{length:x}"
        )


class CorruptBlock(LoadError):
    """Raised on a decompression failure or an inconsistent field."""
    pass


class CompileError(LoadError):
    """Raised when the code registry rejects a piece of registered code."""

    def __init__(self, message: str, category: Optional[str] = None, index: Optional[int] = None):
        self.category = category
        self.index = index
        if category is not None:
            message = f"{message} ({category} {index})"
        super().__init__(message)
