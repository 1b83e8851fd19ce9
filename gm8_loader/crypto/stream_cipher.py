"""
GameMaker 8.1 stream cipher.

GM8.1 executables XOR everything after a short plain prefix with a keystream
produced by two 16-bit multiply-with-carry generators. One generator is
seeded from the file, the other from the CRC of a key string that embeds a
number read from the file.
"""

import struct

from ..io.cursor import Cursor
from .crc32 import crc32_register

KEY_TEMPLATE = "_MJD{}#RWK"

# Bytes following the seeds that are never encrypted, before the
# (seed2 & 0xFF) adjustment
PLAIN_PREFIX = 10

MULTIPLIER_1 = 0x9069
MULTIPLIER_2 = 0x4650


def make_key(key_seed: int) -> bytes:
    """
    Build the widened key string for a key seed.

    The seed is formatted as a signed decimal and every character becomes a
    little-endian 16-bit code unit with a zero high byte.
    """
    if key_seed & 0x80000000:
        key_seed -= 0x100000000
    return KEY_TEMPLATE.format(key_seed).encode('utf-16-le')


class StreamCipher:
    """
    Keystream generator for the GM8.1 XOR layer.

    Attributes:
        seed1: State of the first generator
        seed2: State of the second generator
    """

    def __init__(self, seed1: int, seed2: int):
        self.seed1 = seed1 & 0xFFFFFFFF
        self.seed2 = seed2 & 0xFFFFFFFF

    @classmethod
    def from_key_seed(cls, key_seed: int, seed1: int) -> 'StreamCipher':
        """Create a cipher whose second seed is derived from the key string."""
        return cls(seed1, crc32_register(make_key(key_seed)))

    def next_mask(self) -> int:
        """Advance both generators and return the next keystream word."""
        self.seed1 = ((self.seed1 & 0xFFFF) * MULTIPLIER_1 + (self.seed1 >> 16)) & 0xFFFFFFFF
        self.seed2 = ((self.seed2 & 0xFFFF) * MULTIPLIER_2 + (self.seed2 >> 16)) & 0xFFFFFFFF
        return ((self.seed1 << 16) + (self.seed2 & 0xFFFF)) & 0xFFFFFFFF

    def apply(self, buffer: bytearray, start: int) -> int:
        """
        XOR every whole 32-bit word from ``start`` to the end of ``buffer``.

        A trailing partial word is left untouched. Applying the same
        keystream twice restores the original bytes.

        Returns:
            Number of words processed
        """
        count = (len(buffer) - start) // 4
        if count <= 0:
            return 0

        words = struct.unpack_from(f'<{count}I', buffer, start)
        seed1 = self.seed1
        seed2 = self.seed2
        out = []
        append = out.append
        for word in words:
            seed1 = ((seed1 & 0xFFFF) * MULTIPLIER_1 + (seed1 >> 16)) & 0xFFFFFFFF
            seed2 = ((seed2 & 0xFFFF) * MULTIPLIER_2 + (seed2 >> 16)) & 0xFFFFFFFF
            append(word ^ (((seed1 << 16) + (seed2 & 0xFFFF)) & 0xFFFFFFFF))
        self.seed1 = seed1
        self.seed2 = seed2

        struct.pack_into(f'<{count}I', buffer, start, *out)
        return count


def decrypt_gm81(cursor: Cursor) -> int:
    """
    Remove the GM8.1 XOR layer in place.

    The cursor must sit on the key seed word, directly after the revision
    marker, and its buffer must be a ``bytearray``. On return the cursor is
    positioned after the two seed words.

    Returns:
        Offset of the first encrypted byte
    """
    key_seed = cursor.read_uint32()
    seed1 = cursor.read_uint32()
    cipher = StreamCipher.from_key_seed(key_seed, seed1)
    start = cursor.position + (cipher.seed2 & 0xFF) + PLAIN_PREFIX
    cipher.apply(cursor.data, start)
    return start
