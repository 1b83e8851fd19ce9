"""
Cipher layers used by GameMaker 8 executables.

Supports:
- GM8.1 XOR stream cipher
- Data block substitution / transposition cipher (GM8.0 and GM8.1)
- Per-extension payload scrambling
"""

from .crc32 import crc32, crc32_register
from .stream_cipher import StreamCipher, decrypt_gm81, make_key
from .substitution import decrypt_data_block, decrypt_span, encrypt_span
from .extension_cipher import ExtensionFileDescrambler, derive_seeds

__all__ = [
    'crc32', 'crc32_register',
    'StreamCipher', 'decrypt_gm81', 'make_key',
    'decrypt_data_block', 'decrypt_span', 'encrypt_span',
    'ExtensionFileDescrambler', 'derive_seeds',
]
