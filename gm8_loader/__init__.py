"""
GameMaker 8 Loader
A tool for decoding the game data embedded in GameMaker 8.0 and 8.1 executables.
"""

__version__ = "0.1.0"
__author__ = "gm8-loader contributors"

from .config import Config
from .errors import LoadError, IoError, FormatError, TruncatedInput, CorruptBlock, CompileError
from .gm8.loader import Game, LoadResult, load_game, try_load_game

__all__ = [
    'Config', 'Game', 'LoadResult', 'load_game', 'try_load_game',
    'LoadError', 'IoError', 'FormatError', 'TruncatedInput', 'CorruptBlock', 'CompileError',
    '__version__',
]
