#!/usr/bin/env python3
"""
GameMaker 8 Loader

Command-line interface for decoding GameMaker 8.0 / 8.1 game executables.

Usage:
    gm8-loader <game-executable> [output-directory]
    gm8-loader -h | --help
    gm8-loader --version

Arguments:
    game-executable    Path to the game .exe
    output-directory   Output directory for dump files (default: current directory)

Options:
    -h --help          Show this help message
    --version          Show version
    --config PATH      Path to config.json
"""

import sys
import argparse
from pathlib import Path

from . import __version__
from .config import Config
from .errors import LoadError
from .gm8.assets import AssetCategory
from .gm8.loader import Game, load_game
from .output.exporter import GameExporter
from .runtime.code_registry import RecordingCodeRegistry
from .runtime.image_store import MemoryImageStore

EXIT_USAGE = 1
EXIT_LOAD_FAILED = 2


def print_summary(game: Game, registry: RecordingCodeRegistry, images: MemoryImageStore) -> None:
    """Print revision and per-category counts."""
    print(f"GameMaker Version: {game.revision.value / 100:.1f}")
    print(f"Caption: {game.info.caption}")
    for category in AssetCategory:
        table = game.assets.table(category)
        existing = sum(1 for record in table if record is not None)
        print(f"  {category.value}: {existing}/{len(table)}")
    print(f"Room order: {len(game.room_order)} rooms")
    print(f"Code blocks: {len(registry.entries)}, images: {len(images.images)}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="GameMaker 8 Loader - Decode GameMaker 8.0 / 8.1 games",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('files', nargs='*', help='Game executable and optional output directory')
    parser.add_argument('--version', action='version', version=f'gm8-loader {__version__}')
    parser.add_argument('--config', type=str, help='Path to config.json')

    args = parser.parse_args()

    if not args.files or len(args.files) > 2:
        parser.print_help()
        print("\nERROR: Expected a game executable and an optional output directory")
        sys.exit(EXIT_USAGE)

    # Load config
    config_path = Path(args.config) if args.config else None
    config = Config.load(config_path)

    game_path = Path(args.files[0])
    output_dir = args.files[1] if len(args.files) > 1 else "."

    if not game_path.is_file():
        print(f"ERROR: Game executable not found: {game_path}")
        sys.exit(EXIT_USAGE)

    registry = RecordingCodeRegistry()
    images = MemoryImageStore()

    print(f"Loading {game_path}...")
    try:
        game = load_game(game_path, code_registry=registry, image_store=images, config=config)
    except LoadError as e:
        print(f"ERROR: {type(e).__name__}: {e}")
        sys.exit(EXIT_LOAD_FAILED)

    print_summary(game, registry, images)

    # Ensure output directory exists
    Path(output_dir).mkdir(parents=True, exist_ok=True)

    print("Writing output...")
    written = GameExporter(game, output_dir).export(config)
    for path in written:
        print(f"  {path}")
    print("Done!")


if __name__ == "__main__":
    main()
