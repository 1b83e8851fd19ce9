"""
Data block substitution cipher.

Present in both GM8.0 and GM8.1 (underneath the 8.1 XOR layer). A 256-byte
swap table hidden between two garbage regions drives a substitution pass and
a transposition pass over the rest of the data.
"""

from ..io.cursor import Cursor

TABLE_SIZE = 256


def invert_table(swap_table: bytes) -> bytes:
    """Build the reverse lookup of a swap table."""
    reverse = bytearray(TABLE_SIZE)
    for i, value in enumerate(swap_table):
        reverse[value] = i
    return bytes(reverse)


def decrypt_span(buffer: bytearray, start: int, length: int, swap_table: bytes) -> None:
    """
    Decrypt ``length`` bytes at ``start`` in place.

    First pass, back to front, skipping the first byte: each byte becomes
    ``reverse[byte] - (previous + distance)`` modulo 256. Second pass, back to
    front, skipping the first byte: each byte is swapped with the one
    ``swap_table[distance & 0xFF]`` positions before it, clamped to the span
    start.
    """
    reverse = invert_table(swap_table)

    for k in range(length - 1, 0, -1):
        i = start + k
        buffer[i] = (reverse[buffer[i]] - (buffer[i - 1] + k)) & 0xFF

    for k in range(length - 1, 0, -1):
        i = start + k
        b = i - swap_table[k & 0xFF]
        if b < start:
            b = start
        buffer[i], buffer[b] = buffer[b], buffer[i]


def encrypt_span(buffer: bytearray, start: int, length: int, swap_table: bytes) -> None:
    """Inverse of ``decrypt_span``: undo the transposition, then the substitution."""
    for k in range(1, length):
        i = start + k
        b = i - swap_table[k & 0xFF]
        if b < start:
            b = start
        buffer[i], buffer[b] = buffer[b], buffer[i]

    for k in range(1, length):
        i = start + k
        buffer[i] = swap_table[(buffer[i] + buffer[i - 1] + k) & 0xFF]


def decrypt_data_block(cursor: Cursor) -> int:
    """
    Locate the swap table and decrypt the span that follows it, in place.

    Layout at the cursor: garbage length 1 (in words), garbage length 2 (in
    words), garbage 1, swap table, garbage 2, span length, span. On return the
    cursor sits at the first byte of the decrypted span.

    Returns:
        Length of the decrypted span
    """
    garbage1 = cursor.read_uint32() * 4
    garbage2 = cursor.read_uint32() * 4
    cursor.skip(garbage1)
    swap_table = cursor.read_bytes(TABLE_SIZE)
    cursor.skip(garbage2)

    length = cursor.read_uint32()
    cursor.check_count(length, 1)
    decrypt_span(cursor.data, cursor.position, length, swap_table)
    return length
