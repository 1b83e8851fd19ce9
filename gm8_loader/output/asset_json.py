"""
JSON summary of a loaded game.

The summary lists the settings, the game information, the name of every
asset slot (``null`` for placeholders) and the room order. Binary payloads
are left out; the exporter writes those separately.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional
import json

from ..gm8.assets import AssetCategory
from ..gm8.loader import Game


def _record_name(record: Any) -> Optional[str]:
    if record is None:
        return None
    name = getattr(record, 'name', None)
    if name is None:
        name = getattr(record, 'file_name', "")
    return name


def _settings_dict(game: Game) -> Dict[str, Any]:
    settings = asdict(game.settings)
    # Image blocks are reported by size only
    for key in ('loading_bar_back', 'loading_bar_front', 'custom_load_image'):
        value = settings[key]
        settings[key] = len(value) if value is not None else None
    return settings


@dataclass
class AssetJson:
    """
    Complete assets.json structure.
    """
    Revision: int = 0
    Settings: Dict[str, Any] = field(default_factory=dict)
    Info: Dict[str, Any] = field(default_factory=dict)
    Assets: Dict[str, List[Optional[str]]] = field(default_factory=dict)
    RoomOrder: List[int] = field(default_factory=list)
    LastInstanceId: int = 0
    LastTileId: int = 0

    @classmethod
    def from_game(cls, game: Game) -> 'AssetJson':
        """Build the summary of a loaded game."""
        assets = {
            category.value: [_record_name(r) for r in game.assets.table(category)]
            for category in AssetCategory
        }
        return cls(
            Revision=int(game.revision),
            Settings=_settings_dict(game),
            Info=asdict(game.info),
            Assets=assets,
            RoomOrder=list(game.room_order),
            LastInstanceId=game.last_instance_id,
            LastTileId=game.last_tile_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Revision": self.Revision,
            "Settings": self.Settings,
            "Info": self.Info,
            "Assets": self.Assets,
            "RoomOrder": self.RoomOrder,
            "LastInstanceId": self.LastInstanceId,
            "LastTileId": self.LastTileId,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: str) -> None:
        """Save to file."""
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())
