"""
Top level game loading.

Ties the stages together: executable check, revision detection, the cipher
layers, the settings block, the asset categories and identity resolution.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from ..config import Config
from ..crypto.stream_cipher import decrypt_gm81
from ..crypto.substitution import decrypt_data_block
from ..errors import IoError, LoadError
from ..io.cursor import Cursor
from ..io.inflate import BlockInflator
from ..runtime.code_registry import CodeRegistry, RecordingCodeRegistry
from ..runtime.image_store import ImageStore, MemoryImageStore
from .assets import AssetManager
from .container import GM81_HEADER_SKIP, check_executable, detect_revision
from .deserializer import AssetDeserializer
from .enums import Revision
from .resolver import IdentityResolver
from .settings import GameSettings, read_settings
from .structures import GameInfo

# Fixed words skipped after the counted garbage words
DATA_HEADER_WORDS = 6

GameSource = Union[str, Path, bytes, bytearray]


@dataclass
class Game:
    """A fully loaded game."""
    revision: Revision
    settings: GameSettings
    info: GameInfo
    assets: AssetManager
    room_order: List[int] = field(default_factory=list)
    last_instance_id: int = 0
    last_tile_id: int = 0


@dataclass
class LoadResult:
    """Outcome of try_load_game: either a game or the error that stopped it."""
    game: Optional[Game] = None
    error: Optional[LoadError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class GameLoader:
    """
    Loader for one GameMaker 8.0 / 8.1 executable.

    Attributes:
        registry: Receives and later compiles every piece of code
        images: Receives every decoded image
        config: Loader options
        assets: Asset tables being filled
    """

    def __init__(self,
                 registry: Optional[CodeRegistry] = None,
                 images: Optional[ImageStore] = None,
                 config: Optional[Config] = None,
                 assets: Optional[AssetManager] = None):
        self.registry = registry if registry is not None else RecordingCodeRegistry()
        self.images = images if images is not None else MemoryImageStore()
        self.config = config if config is not None else Config()
        self.assets = assets if assets is not None else AssetManager()
        self.inflater = BlockInflator(self.config.inflate_chunk_size)

    def _log(self, message: str) -> None:
        if self.config.verbose:
            print(message)

    def load(self, data: Union[bytes, bytearray]) -> Game:
        """
        Decode a game from the raw executable bytes.

        Args:
            data: The whole executable; it is copied, never modified

        Returns:
            The loaded game

        Raises:
            LoadError: Any subclass, on the first problem found
        """
        buffer = bytearray(data)
        check_executable(buffer)

        cursor = Cursor(buffer)
        revision = detect_revision(cursor)
        self._log(f"Detected GameMaker {revision.value / 100:.1f} game")

        if revision == Revision.GM81:
            decrypt_gm81(cursor)
            cursor.skip(GM81_HEADER_SKIP)

        cursor.skip(4)  # Settings version
        self._log("Get Settings")
        settings = read_settings(self.inflater.inflate_cursor(cursor), self.inflater, revision)

        # Runtime wrapper DLL, not used
        cursor.skip(cursor.read_uint32())
        cursor.skip(cursor.read_uint32())

        decrypt_data_block(cursor)
        cursor.skip((cursor.read_uint32() + DATA_HEADER_WORDS) * 4)

        deserializer = AssetDeserializer(
            self.assets, self.inflater, self.registry, self.images, revision,
            encoding=self.config.text_encoding,
            verbose=self.config.verbose,
        )
        tail = deserializer.read_all(cursor)

        IdentityResolver(self.assets, self.registry, verbose=self.config.verbose).resolve(tail.room_order)

        self._log(
            f"Inflated {self.inflater.blocks} blocks "
            f"({self.inflater.bytes_in} -> {self.inflater.bytes_out} bytes)"
        )
        return Game(
            revision=revision,
            settings=settings,
            info=tail.info,
            assets=self.assets,
            room_order=tail.room_order,
            last_instance_id=tail.last_instance_id,
            last_tile_id=tail.last_tile_id,
        )


def _read_source(source: GameSource) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return source
    try:
        with open(source, 'rb') as f:
            return f.read()
    except OSError as e:
        raise IoError(f"Cannot read {source}: {e}") from e


def load_game(source: GameSource,
              code_registry: Optional[CodeRegistry] = None,
              image_store: Optional[ImageStore] = None,
              config: Optional[Config] = None,
              assets: Optional[AssetManager] = None) -> Game:
    """
    Load a GameMaker 8.0 or 8.1 game.

    Args:
        source: Path to the executable, or its contents
        code_registry: Code collaborator; defaults to a RecordingCodeRegistry
        image_store: Image collaborator; defaults to a MemoryImageStore
        config: Loader options
        assets: Asset tables to fill; categories decoded before a failure
            stay committed in it

    Returns:
        The loaded game

    Raises:
        LoadError: On any failure
    """
    data = _read_source(source)
    loader = GameLoader(code_registry, image_store, config, assets)
    return loader.load(data)


def try_load_game(source: GameSource, **kwargs) -> LoadResult:
    """Like load_game, but report failure in the result instead of raising."""
    try:
        return LoadResult(game=load_game(source, **kwargs))
    except LoadError as e:
        return LoadResult(error=e)
