"""
Contracts of the runtime collaborators the loader hands data to.
"""

from .code_registry import CodeRegistry, RecordingCodeRegistry, RegisteredCode
from .image_store import ImageStore, MemoryImageStore, StoredImage

__all__ = [
    'CodeRegistry', 'RecordingCodeRegistry', 'RegisteredCode',
    'ImageStore', 'MemoryImageStore', 'StoredImage',
]
