"""
Utility functions.
"""

from .string_utils import to_camel_case, to_snake_case, safe_filename

__all__ = ['to_camel_case', 'to_snake_case', 'safe_filename']
