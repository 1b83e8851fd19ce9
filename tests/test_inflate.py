"""Tests for block inflation."""

import struct
import zlib

import pytest

from gm8_loader.errors import CorruptBlock, TruncatedInput
from gm8_loader.io.cursor import Cursor
from gm8_loader.io.inflate import BlockInflator


def _block(payload: bytes) -> bytes:
    compressed = zlib.compress(payload)
    return struct.pack('<I', len(compressed)) + compressed


def test_inflate_advances_past_block():
    data = _block(b'first') + _block(b'second')
    cursor = Cursor(data)
    inflater = BlockInflator()
    assert inflater.inflate(cursor) == b'first'
    assert inflater.inflate(cursor) == b'second'
    assert cursor.remaining == 0
    assert inflater.blocks == 2
    assert inflater.bytes_out == len(b'firstsecond')


def test_large_block_grows_chunk_size():
    payload = bytes(range(256)) * 1000
    inflater = BlockInflator(chunk_size=1024)
    assert inflater.inflate(Cursor(_block(payload))) == payload
    assert inflater.chunk_size > 1024


def test_inflate_cursor_wraps_output():
    cursor = BlockInflator().inflate_cursor(Cursor(_block(struct.pack('<I', 9))))
    assert cursor.read_uint32() == 9


def test_corrupt_block_raises():
    data = struct.pack('<I', 6) + b'notzlb'
    with pytest.raises(CorruptBlock):
        BlockInflator().inflate(Cursor(data))


def test_unterminated_stream_raises():
    compressed = zlib.compress(b'payload' * 50)[:-6]
    data = struct.pack('<I', len(compressed)) + compressed
    with pytest.raises(CorruptBlock):
        BlockInflator().inflate(Cursor(data))


def test_length_past_buffer_raises():
    data = _block(b'abc')[:-2]
    with pytest.raises(TruncatedInput):
        BlockInflator().inflate(Cursor(data))


def test_invalid_chunk_size():
    with pytest.raises(ValueError):
        BlockInflator(chunk_size=0)
