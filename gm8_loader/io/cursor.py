"""
Bounds-checked positional reader over a byte buffer.

This module provides the Cursor class used by every decoding stage. Unlike a
file-like stream, every read is checked against the buffer length and raises
TruncatedInput instead of returning short data.
"""

import struct
from dataclasses import fields, is_dataclass
from typing import Dict, List, Tuple, Type, TypeVar, Union

from ..errors import TruncatedInput
from .record_fields import KIND_SIZES, get_field_kind, to_reference

T = TypeVar('T')

_U32 = struct.Struct('<I')
_I32 = struct.Struct('<i')
_F64 = struct.Struct('<d')

# Cache for compiled record layouts
# Key: dataclass type -> (struct format, [(field name, kind)])
_LAYOUT_CACHE: Dict[type, Tuple[struct.Struct, List[Tuple[str, str]]]] = {}

_KIND_FORMAT = {
    'u32': 'I',
    'i32': 'i',
    'bool': 'I',
    'ref': 'i',
    'f64': 'd',
}


class Cursor:
    """
    Positional reader over an immutable view of a byte buffer.

    The cursor never mutates the buffer it reads from. Cipher layers that
    rewrite data in place work on the underlying ``bytearray`` directly and
    then continue reading through the cursor.

    Attributes:
        data: The underlying buffer
        position: Current byte offset
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview], position: int = 0):
        self.data = data
        self._length = len(data)
        self.position = position

    # ========== Position and Length ==========

    @property
    def length(self) -> int:
        """Get buffer length."""
        return self._length

    @property
    def remaining(self) -> int:
        """Number of bytes between the position and the end of the buffer."""
        return max(self._length - self.position, 0)

    def _require(self, count: int) -> int:
        """Check that ``count`` bytes can be read and return the start offset."""
        start = self.position
        if count < 0 or start < 0 or start + count > self._length:
            raise TruncatedInput(start, count, self._length)
        return start

    def skip(self, count: int) -> None:
        """Advance the position by ``count`` bytes."""
        self.position = self._require(count) + count

    def seek(self, position: int) -> None:
        """Move to an absolute position inside the buffer."""
        if position < 0 or position > self._length:
            raise TruncatedInput(position, 0, self._length)
        self.position = position

    def check_count(self, count: int, item_size: int = 4) -> int:
        """
        Validate an element count read from the stream.

        A count whose elements could not fit in the remaining buffer even at
        ``item_size`` bytes each is rejected before anything is allocated.
        """
        if count * item_size > self.remaining:
            raise TruncatedInput(self.position, count * item_size, self._length)
        return count

    # ========== Primitive Readers ==========

    def read_bytes(self, count: int) -> bytes:
        """Read raw bytes."""
        start = self._require(count)
        self.position = start + count
        return bytes(self.data[start:start + count])

    def read_view(self, count: int) -> memoryview:
        """Read raw bytes as a zero-copy view into the buffer."""
        start = self._require(count)
        self.position = start + count
        return memoryview(self.data)[start:start + count]

    def read_uint32(self) -> int:
        """Read an unsigned 32-bit integer."""
        start = self._require(4)
        self.position = start + 4
        return _U32.unpack_from(self.data, start)[0]

    def read_int32(self) -> int:
        """Read a signed 32-bit integer."""
        start = self._require(4)
        self.position = start + 4
        return _I32.unpack_from(self.data, start)[0]

    def read_bool(self) -> bool:
        """Read a 32-bit word as a boolean."""
        return self.read_uint32() != 0

    def read_double(self) -> float:
        """Read a 64-bit double."""
        start = self._require(8)
        self.position = start + 8
        return _F64.unpack_from(self.data, start)[0]

    # ========== String Readers ==========

    def read_string(self) -> bytes:
        """
        Read a length-prefixed byte string.

        The stored text is not NUL-terminated and may contain NUL bytes, so
        the result is returned as raw bytes; its length is ``len(result)``.
        """
        length = self.read_uint32()
        return self.read_bytes(length)

    def read_text(self, encoding: str = 'cp1252') -> str:
        """Read a length-prefixed string and decode it for display."""
        return self.read_string().decode(encoding, errors='replace')

    # ========== Array Readers ==========

    def read_uint32_array(self, count: int) -> List[int]:
        """Read an array of uint32 values."""
        if count <= 0:
            return []
        start = self._require(count * 4)
        self.position = start + count * 4
        return list(struct.unpack_from(f'<{count}I', self.data, start))

    # ========== Record Reading ==========

    def _get_layout(self, cls: type) -> Tuple[struct.Struct, List[Tuple[str, str]]]:
        """Get or compute the struct layout of a fixed-layout record."""
        if cls in _LAYOUT_CACHE:
            return _LAYOUT_CACHE[cls]

        format_parts = ['<']
        tagged: List[Tuple[str, str]] = []
        for field_info in fields(cls):
            kind = get_field_kind(field_info)
            if kind is None:
                continue
            format_parts.append(_KIND_FORMAT[kind])
            tagged.append((field_info.name, kind))

        layout = (struct.Struct(''.join(format_parts)), tagged)
        _LAYOUT_CACHE[cls] = layout
        return layout

    def read_class(self, cls: Type[T]) -> T:
        """
        Read a fixed-layout record.

        Every field tagged with a kind (see ``record_fields``) is read in
        declaration order; untagged fields keep their defaults.

        Args:
            cls: The dataclass type to read

        Returns:
            A populated instance of ``cls``
        """
        if not is_dataclass(cls):
            raise TypeError(f"{cls!r} is not a dataclass")

        packer, tagged = self._get_layout(cls)
        start = self._require(packer.size)
        self.position = start + packer.size
        values = packer.unpack_from(self.data, start)

        instance = cls()
        for (name, kind), value in zip(tagged, values):
            if kind == 'bool':
                value = value != 0
            elif kind == 'ref':
                value = to_reference(value)
            setattr(instance, name, value)
        return instance

    def read_class_array(self, cls: Type[T], count: int) -> List[T]:
        """Read ``count`` consecutive fixed-layout records."""
        if count <= 0:
            return []
        self.check_count(count, size_of(cls))
        return [self.read_class(cls) for _ in range(count)]


def size_of(cls: type) -> int:
    """Stored size in bytes of a fixed-layout record."""
    return sum(
        KIND_SIZES[kind]
        for kind in (get_field_kind(f) for f in fields(cls))
        if kind is not None
    )
