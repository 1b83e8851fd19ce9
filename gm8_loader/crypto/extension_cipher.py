"""
Per-extension payload scrambling.

Each extension's embedded file data starts with a 32-bit seed from which a
byte substitution table is derived. Everything after the first byte
following the seed is passed through that table.
"""

from typing import Tuple

TABLE_SIZE = 0x200
SWAP_STEPS = 0x2711


def _trunc_divmod(a: int, b: int) -> Tuple[int, int]:
    """Integer division and remainder that truncate toward zero."""
    quotient = abs(a) // b
    if a < 0:
        quotient = -quotient
    return quotient, a - quotient * b


def derive_seeds(seed: int) -> Tuple[int, int]:
    """
    Split a payload seed into the two table seeds.

    Returns:
        Tuple of (seed1, seed2)
    """
    if seed & 0x80000000:
        seed -= 0x100000000
    seed1, remainder = _trunc_divmod(seed, 250)
    seed2 = remainder + 6
    if seed1 < 0:
        seed1 += 100
    if seed2 < 0:
        seed2 += 100
    if seed1 < 0 or seed2 < 0:
        print(f"WARNING: extension seed {seed} needs more than one sign correction")
    return seed1, seed2


class ExtensionFileDescrambler:
    """
    Byte substitution table for one extension payload.

    Attributes:
        seed: The signed payload seed
        table: The 512-entry table; entries 256-511 map scrambled bytes back
    """

    def __init__(self, seed: int):
        self.seed = seed
        self.table = self._build_table(*derive_seeds(seed))

    @staticmethod
    def _build_table(seed1: int, seed2: int) -> bytearray:
        table = bytearray(i & 0xFF for i in range(TABLE_SIZE))

        for i in range(1, SWAP_STEPS):
            ax = (((i * seed2 + seed1) & 0xFFFFFFFF) % 0xFE) + 1
            table[ax], table[ax + 1] = table[ax + 1], table[ax]

        for i in range(0x100):
            table[table[i + 1] + 0x100] = (i + 1) & 0xFF

        return table

    @property
    def decode_map(self) -> bytes:
        """256-byte translation table from scrambled to plain bytes."""
        return bytes(self.table[0x100:])

    @property
    def encode_map(self) -> bytes:
        """256-byte translation table from plain to scrambled bytes."""
        decode = self.decode_map
        encode = bytearray(0x100)
        for plain, scrambled in enumerate(decode):
            encode[scrambled] = plain
        return bytes(encode)

    def descramble(self, payload: bytearray, start: int = 0) -> None:
        """Descramble ``payload`` in place, leaving the byte at ``start`` as is."""
        payload[start + 1:] = bytes(payload[start + 1:]).translate(self.decode_map)

    def scramble(self, payload: bytearray, start: int = 0) -> None:
        """Inverse of ``descramble``."""
        payload[start + 1:] = bytes(payload[start + 1:]).translate(self.encode_map)
