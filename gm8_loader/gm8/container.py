"""
Container framing: executable check and revision detection.

A GameMaker 8 game is a Windows executable with the game data appended at a
fixed offset. GM8.0 marks the data with a constant word at offset 2,000,000;
GM8.1 hides a two-word marker somewhere in the 4 KiB following offset
3,800,004 and encrypts what follows it.
"""

import struct
from typing import Optional

from ..errors import FormatError
from ..io.cursor import Cursor
from .enums import Revision

MIN_FILE_SIZE = 0x1B
EXECUTABLE_MAGIC = b'MZ'

GM80_MARKER_OFFSET = 2000000
GM80_MARKER = 1234321
# Bytes between the GM8.0 marker and the settings version word
GM80_HEADER_SKIP = 8

GM81_SCAN_OFFSET = 3800004
GM81_SCAN_WORDS = 1024
GM81_MARKER_1 = (0xFF00FF00, 0xF7000000)
GM81_MARKER_2 = (0x00FF00FF, 0x00140067)
# Bytes between the GM8.1 seeds and the settings version word
GM81_HEADER_SKIP = 16


def check_executable(data: bytes) -> None:
    """
    Reject anything that is not a plausible Windows executable.

    Raises:
        FormatError: If the file is too small or lacks the MZ signature
    """
    if len(data) < MIN_FILE_SIZE:
        raise FormatError(f"File too small to be an executable ({len(data)} bytes)")
    if data[:2] != EXECUTABLE_MAGIC:
        raise FormatError("Invalid executable: missing MZ signature")


def _word_at(data: bytes, offset: int) -> Optional[int]:
    if offset < 0 or offset + 4 > len(data):
        return None
    return struct.unpack_from('<I', data, offset)[0]


def find_gm81_marker(data: bytes) -> Optional[int]:
    """
    Scan for the GM8.1 marker pair.

    Returns:
        Offset just past the marker pair, or None if it was not found
    """
    mask1, value1 = GM81_MARKER_1
    mask2, value2 = GM81_MARKER_2
    for i in range(GM81_SCAN_WORDS):
        offset = GM81_SCAN_OFFSET + i * 4
        first = _word_at(data, offset)
        if first is None:
            return None
        if (first & mask1) != value1:
            continue
        second = _word_at(data, offset + 4)
        if second is not None and (second & mask2) == value2:
            return offset + 8
    return None


def detect_revision(cursor: Cursor) -> Revision:
    """
    Detect the container revision and move the cursor past its marker.

    For GM8.0 the cursor ends on the settings version word. For GM8.1 it ends
    on the key seed of the stream cipher, which must be removed before
    anything else is read.

    Raises:
        FormatError: If neither marker is present
    """
    data = cursor.data
    if _word_at(data, GM80_MARKER_OFFSET) == GM80_MARKER:
        cursor.seek(GM80_MARKER_OFFSET + 4 + GM80_HEADER_SKIP)
        return Revision.GM80

    end = find_gm81_marker(data)
    if end is not None:
        cursor.seek(end)
        return Revision.GM81

    raise FormatError("This is not a GameMaker 8 or 8.1 game")
