"""
GameMaker 8.0 / 8.1 game data decoding.
"""

from .assets import AssetCategory, AssetManager
from .container import check_executable, detect_revision
from .deserializer import AssetDeserializer, GameTail
from .enums import Revision, EventType, ActionKind, ExecutionType, ArgumentType
from .loader import Game, GameLoader, LoadResult, load_game, try_load_game
from .resolver import IdentityResolver
from .settings import GameSettings, read_settings

__all__ = [
    'AssetCategory', 'AssetManager',
    'check_executable', 'detect_revision',
    'AssetDeserializer', 'GameTail',
    'Revision', 'EventType', 'ActionKind', 'ExecutionType', 'ArgumentType',
    'Game', 'GameLoader', 'LoadResult', 'load_game', 'try_load_game',
    'IdentityResolver',
    'GameSettings', 'read_settings',
]
