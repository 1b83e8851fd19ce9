"""
Length-prefixed zlib block inflation.

Every asset in a GameMaker 8 container lives in its own block: a 32-bit
compressed length followed by that many bytes of a zlib stream.
"""

import zlib

from ..errors import CorruptBlock
from .cursor import Cursor

# Initial output chunk size, grown on demand
DEFAULT_CHUNK_SIZE = 65536


class BlockInflator:
    """
    Inflates length-prefixed zlib blocks read from a Cursor.

    Output is produced in bounded chunks and accumulated into one scratch
    ``bytearray``; the chunk size doubles whenever a block needs more than
    one round, so later large blocks finish in fewer rounds.

    Attributes:
        chunk_size: Current output chunk size
        blocks: Number of blocks inflated so far
        bytes_in: Total compressed bytes consumed
        bytes_out: Total decompressed bytes produced
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size
        self.blocks = 0
        self.bytes_in = 0
        self.bytes_out = 0

    def inflate(self, cursor: Cursor) -> bytearray:
        """
        Inflate the block at the cursor position.

        Args:
            cursor: Cursor positioned at the 32-bit compressed length

        Returns:
            The decompressed bytes, as a mutable buffer

        Raises:
            TruncatedInput: If the compressed span runs past the buffer
            CorruptBlock: If zlib rejects the data or the stream never ends
        """
        start = cursor.position
        length = cursor.read_uint32()
        compressed = cursor.read_view(length)

        decompressor = zlib.decompressobj()
        output = bytearray()
        pending = compressed
        rounds = 0
        try:
            while True:
                output += decompressor.decompress(pending, self.chunk_size)
                rounds += 1
                if decompressor.eof:
                    break
                pending = decompressor.unconsumed_tail
                if not pending:
                    # Input exhausted; drain whatever zlib still buffers
                    output += decompressor.flush()
                    break
        except zlib.error as e:
            raise CorruptBlock(f"Error inflating block at 0x{start:x}: {e}") from e
        finally:
            compressed.release()

        if not decompressor.eof:
            raise CorruptBlock(f"Block at 0x{start:x} ends before its zlib stream does")

        if rounds > 1:
            self.chunk_size *= 2

        self.blocks += 1
        self.bytes_in += length
        self.bytes_out += len(output)
        return output

    def inflate_cursor(self, cursor: Cursor) -> Cursor:
        """Inflate the block at the cursor position and return a cursor over it."""
        return Cursor(self.inflate(cursor))
