"""
Field helpers for fixed-layout records.

Fixed-layout records (room backgrounds, views, instances, tiles, path points,
collision map headers) are plain dataclasses whose fields carry a ``kind``
entry in their metadata. ``Cursor.read_class`` walks the fields in declaration
order and reads one value per tagged field. Fields without a kind are left at
their default and filled in by the caller.
"""

from dataclasses import field
from typing import Dict, Optional


# Stored size of each field kind in bytes
KIND_SIZES: Dict[str, int] = {
    'u32': 4,
    'i32': 4,
    'bool': 4,
    'ref': 4,
    'f64': 8,
}


def u32_field(default: int = 0):
    """Create a field read as an unsigned 32-bit word."""
    return field(default=default, metadata={'kind': 'u32'})


def i32_field(default: int = 0):
    """Create a field read as a signed 32-bit word."""
    return field(default=default, metadata={'kind': 'i32'})


def bool_field(default: bool = False):
    """Create a field read as a 32-bit word where any nonzero value is True."""
    return field(default=default, metadata={'kind': 'bool'})


def ref_field():
    """
    Create an asset reference field.

    The value is stored as a signed 32-bit index where any negative value
    means "no asset"; it is exposed as ``Optional[int]`` with ``None``
    standing for the missing reference.
    """
    return field(default=None, metadata={'kind': 'ref'})


def f64_field(default: float = 0.0):
    """Create a field read as a little-endian IEEE-754 double."""
    return field(default=default, metadata={'kind': 'f64'})


def get_field_kind(field_info) -> Optional[str]:
    """Get the stored kind of a dataclass field, or None if it is not read."""
    if hasattr(field_info, 'metadata') and field_info.metadata:
        return field_info.metadata.get('kind')
    return None


def to_reference(value: int) -> Optional[int]:
    """Convert a stored signed index into an optional reference."""
    return value if value >= 0 else None
