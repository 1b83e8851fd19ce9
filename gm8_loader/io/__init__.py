"""
IO module for bounded buffer reading and block inflation.
"""

from .cursor import Cursor, size_of
from .inflate import BlockInflator
from .record_fields import u32_field, i32_field, bool_field, ref_field, f64_field

__all__ = [
    'Cursor', 'size_of', 'BlockInflator',
    'u32_field', 'i32_field', 'bool_field', 'ref_field', 'f64_field',
]
