"""
Asset tables.

The AssetManager owns every decoded record. Each category is a fixed-size
list indexed by asset id; reserved-but-empty slots hold ``None``. Tables are
committed one whole category at a time, so a failed load never leaves a
half-filled table behind.
"""

from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Any

from ..errors import CorruptBlock


class AssetCategory(str, Enum):
    """Asset categories, in the order they are stored."""
    EXTENSIONS = 'extensions'
    TRIGGERS = 'triggers'
    CONSTANTS = 'constants'
    SOUNDS = 'sounds'
    SPRITES = 'sprites'
    BACKGROUNDS = 'backgrounds'
    PATHS = 'paths'
    SCRIPTS = 'scripts'
    FONTS = 'fonts'
    TIMELINES = 'timelines'
    OBJECTS = 'objects'
    ROOMS = 'rooms'
    INCLUDE_FILES = 'include_files'


class AssetManager:
    """
    Collection of asset tables indexed by category and id.

    Attributes are exposed per category (``sprites``, ``objects``, ...) for
    convenient access; every one of them is a plain list.
    """

    def __init__(self):
        self._tables: Dict[AssetCategory, List[Optional[Any]]] = {
            category: [] for category in AssetCategory
        }

    def commit(self, category: AssetCategory, records: List[Optional[Any]], reserved: int) -> None:
        """
        Install a fully decoded category.

        Args:
            category: Category being installed
            records: One entry per reserved slot, ``None`` for placeholders
            reserved: Count announced in the stream
        """
        if len(records) != reserved:
            raise CorruptBlock(
                f"{category.value}: decoded {len(records)} records, {reserved} reserved"
            )
        self._tables[category] = records

    def table(self, category: AssetCategory) -> List[Optional[Any]]:
        """Get the table of a category."""
        return self._tables[category]

    def get(self, category: AssetCategory, index: Optional[int]) -> Optional[Any]:
        """
        Look up an asset by index.

        Returns None for a missing reference, an out of range index or a
        placeholder slot.
        """
        if index is None:
            return None
        table = self._tables[category]
        if 0 <= index < len(table):
            return table[index]
        return None

    def exists(self, category: AssetCategory, index: Optional[int]) -> bool:
        """Check whether an index names a populated slot."""
        return self.get(category, index) is not None

    def iter_existing(self, category: AssetCategory) -> Iterator[Tuple[int, Any]]:
        """Iterate over ``(index, record)`` pairs of populated slots."""
        for index, record in enumerate(self._tables[category]):
            if record is not None:
                yield index, record

    def counts(self) -> Dict[str, int]:
        """Reserved slot count of every category."""
        return {category.value: len(table) for category, table in self._tables.items()}

    def __getattr__(self, name: str) -> List[Optional[Any]]:
        try:
            category = AssetCategory(name)
        except ValueError:
            raise AttributeError(name) from None
        return self._tables[category]
