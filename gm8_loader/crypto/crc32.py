"""
Table-driven reflected CRC-32.

GameMaker 8.1 hashes its key string with a hand-built CRC-32 table. The table
is generated the same way here (reflect, shift through polynomial
0x04C11DB7, reflect again) so that the key derivation stays bit-exact.
"""

from typing import List

CRC_POLYNOMIAL = 0x04C11DB7
CRC_INITIAL = 0xFFFFFFFF


def reflect(value: int, bits: int) -> int:
    """Reverse the lowest ``bits`` bits of ``value``."""
    result = 0
    for i in range(1, bits + 1):
        if value & 1:
            result |= 1 << (bits - i)
        value >>= 1
    return result


def _build_table() -> List[int]:
    table = []
    for i in range(256):
        entry = reflect(i, 8) << 24
        for _ in range(8):
            entry = ((entry << 1) ^ (CRC_POLYNOMIAL if entry & 0x80000000 else 0)) & 0xFFFFFFFF
        table.append(reflect(entry, 32))
    return table


CRC_TABLE: List[int] = _build_table()


def crc32_register(data: bytes, crc: int = CRC_INITIAL) -> int:
    """
    Run the CRC register over ``data`` without the final inversion.

    This is the value GameMaker uses as a cipher seed.
    """
    table = CRC_TABLE
    for byte in data:
        crc = (crc >> 8) ^ table[(crc ^ byte) & 0xFF]
    return crc


def crc32(data: bytes) -> int:
    """Standard CRC-32 (the value zlib and PNG produce)."""
    return crc32_register(data) ^ 0xFFFFFFFF
